import logging
from decimal import Decimal, InvalidOperation

from django.db import transaction

from bakery.exceptions import InvalidConfig
from bakery.models import SystemConfig

logger = logging.getLogger(__name__)

STRING = SystemConfig.DataType.STRING
NUMBER = SystemConfig.DataType.NUMBER
BOOLEAN = SystemConfig.DataType.BOOLEAN

# key: (default, data_type, category, description)
DEFAULTS = {
    "system_name": ("Bakery POS", STRING, "general", "System name"),
    "currency": ("COP", STRING, "financial", "Currency"),
    "tax_rate": (0.0, NUMBER, "financial", "Tax rate"),
    "timezone": ("America/Bogota", STRING, "general", "Time zone"),
    "date_format": ("DD/MM/YYYY", STRING, "general", "Date format"),
    "theme": ("light", STRING, "appearance", "Theme"),
    "logo": ("", STRING, "appearance", "Logo"),
    "primary_color": ("#3B82F6", STRING, "appearance", "Primary color"),
    "language": ("es", STRING, "general", "Language"),
    "enable_notifications": (True, BOOLEAN, "notifications", "Enable notifications"),
    "email_notifications": (True, BOOLEAN, "notifications", "Email notifications"),
    "low_stock_threshold": (10, NUMBER, "inventory", "Low stock threshold"),
    "enable_cake_bar": (True, BOOLEAN, "features", "Enable cake bar"),
    "enable_custom_orders": (True, BOOLEAN, "features", "Enable custom orders"),
    "max_cake_bar_options": (50, NUMBER, "features", "Max cake bar options"),
    "default_payment_method": ("CASH", STRING, "sales", "Default payment method"),
    "allow_partial_payments": (True, BOOLEAN, "sales", "Allow partial payments"),
    "require_employee_clock_in": (True, BOOLEAN, "employees", "Require employee clock-in"),
    "max_work_hours": (8, NUMBER, "employees", "Max work hours per day"),
    "break_duration": (30, NUMBER, "employees", "Break duration (minutes)"),
    "password_min_length": (6, NUMBER, "security", "Minimum password length"),
    "session_timeout": (480, NUMBER, "security", "Session timeout (minutes)"),
    "enable_two_factor": (False, BOOLEAN, "security", "Two-factor authentication"),
    "backup_frequency": ("daily", STRING, "system", "Backup frequency"),
    "maintenance_mode": (False, BOOLEAN, "system", "Maintenance mode"),
}

PUBLIC_KEYS = ("system_name", "logo", "primary_color", "theme", "language")


def _defaults(keys=None) -> dict:
    keys = keys or DEFAULTS.keys()
    return {k: DEFAULTS[k][0] for k in keys}


def get_config() -> dict:
    """Defaults overlaid with every stored row, values typed by data_type."""
    data = _defaults()
    for row in SystemConfig.objects.all():
        data[row.key] = row.typed_value()
    return data


def get_public_config() -> dict:
    data = _defaults(PUBLIC_KEYS)
    for row in SystemConfig.objects.filter(key__in=PUBLIC_KEYS):
        data[row.key] = row.typed_value()
    return data


def public_defaults() -> dict:
    return _defaults(PUBLIC_KEYS)


def _number(value, key):
    try:
        return Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        raise InvalidConfig(f"{key} must be a number")


def validate(data: dict):
    name = data.get("system_name")
    if not isinstance(name, str) or not name.strip():
        raise InvalidConfig("system_name is required")

    if data.get("tax_rate") not in (None, ""):
        rate = _number(data["tax_rate"], "tax_rate")
        if rate < 0 or rate > 1:
            raise InvalidConfig("tax_rate must be between 0 and 1")

    if data.get("low_stock_threshold") not in (None, ""):
        if _number(data["low_stock_threshold"], "low_stock_threshold") < 0:
            raise InvalidConfig("low_stock_threshold must be positive")


def _to_stored(value, data_type) -> str:
    if data_type == BOOLEAN:
        if isinstance(value, str):
            return "true" if value.strip().lower() == "true" else "false"
        return "true" if value else "false"
    if data_type == NUMBER:
        return str(value)
    return "" if value is None else str(value)


@transaction.atomic
def update_config(data: dict, user=None) -> dict:
    """
    Upsert every known key. Keys missing from `data` are written with their
    default; unknown keys are ignored.
    """
    validate(data)

    for key, (default, data_type, category, description) in DEFAULTS.items():
        value = data.get(key)
        if value is None or (value == "" and data_type != STRING):
            value = default
        SystemConfig.objects.update_or_create(
            key=key,
            defaults={
                "value": _to_stored(value, data_type),
                "data_type": data_type,
                "category": category,
                "description": description,
                "updated_by": user,
            },
        )

    logger.info("System configuration updated by %s", getattr(user, "pk", None))
    return get_config()
