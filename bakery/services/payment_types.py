import json
import logging

from bakery.models import PaymentType

logger = logging.getLogger(__name__)

VALID_PAYMENT_TYPES = frozenset(PaymentType.values)
FALLBACK_PAYMENT_TYPE = PaymentType.CASH.value


def _from_mapping(value):
    t = value.get("type")
    if isinstance(t, str) and t.strip().upper() in VALID_PAYMENT_TYPES:
        return t.strip().upper()
    return None


def normalize_payment_type(value) -> str:
    """
    Resolve a stored payment type to CASH / CARD / TRANSFER / MIXED.

    Accepts a plain enum string, a legacy JSON-encoded object such as
    '{"type": "CARD", "amount": 100}', or an already-decoded dict.
    Anything unparseable resolves to CASH; that fallback is logged so totals
    depending on it can be audited.
    """
    if isinstance(value, str):
        s = value.strip()
        if s.upper() in VALID_PAYMENT_TYPES:
            return s.upper()
        try:
            parsed = json.loads(s)
        except (TypeError, ValueError):
            parsed = None
        if isinstance(parsed, dict):
            resolved = _from_mapping(parsed)
            if resolved:
                return resolved
    elif isinstance(value, dict):
        resolved = _from_mapping(value)
        if resolved:
            return resolved

    logger.warning("Unrecognized payment type %r, falling back to %s", value, FALLBACK_PAYMENT_TYPE)
    return FALLBACK_PAYMENT_TYPE
