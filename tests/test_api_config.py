import pytest

from bakery.models import SystemConfig
from bakery.services import config_service


PUBLIC = "/api/public/system-config/"
ADMIN = "/api/admin/system-config/"


@pytest.mark.django_db
def test_public_config_without_login_serves_defaults(api_client):
    resp = api_client.get(PUBLIC)

    assert resp.status_code == 200
    assert resp.json() == config_service.public_defaults()
    assert set(resp.json()) == set(config_service.PUBLIC_KEYS)


@pytest.mark.django_db
@pytest.mark.parametrize("role_client", ["employee_api_client", "manager_api_client"])
def test_only_admins_manage_config(request, role_client):
    client = request.getfixturevalue(role_client)

    assert client.get(ADMIN).status_code == 403
    assert client.put(ADMIN, {"system_name": "X"}, format="json").status_code == 403


@pytest.mark.django_db
def test_admin_reads_full_defaults(admin_api_client):
    resp = admin_api_client.get(ADMIN)

    assert resp.status_code == 200
    assert set(resp.json()) == set(config_service.DEFAULTS)
    assert resp.json()["default_payment_method"] == "CASH"


@pytest.mark.django_db
@pytest.mark.parametrize("payload", [
    {"system_name": "  "},
    {"system_name": "Pan Dulce", "tax_rate": 2},
    {"system_name": "Pan Dulce", "tax_rate": "lots"},
    {"system_name": "Pan Dulce", "low_stock_threshold": -1},
])
def test_invalid_config_is_rejected(admin_api_client, payload):
    resp = admin_api_client.put(ADMIN, payload, format="json")

    assert resp.status_code == 400
    assert resp.json()["code"] == "invalid_config"
    assert SystemConfig.objects.count() == 0


@pytest.mark.django_db
def test_saved_config_is_typed_and_public(admin_api_client, api_client):
    resp = admin_api_client.put(ADMIN, {
        "system_name": "Pan Dulce",
        "primary_color": "#FF0000",
        "tax_rate": 0.19,
        "maintenance_mode": "true",
    }, format="json")

    assert resp.status_code == 200
    config = resp.json()["config"]
    assert config["system_name"] == "Pan Dulce"
    assert config["tax_rate"] == pytest.approx(0.19)
    assert config["maintenance_mode"] is True
    # keys not sent fall back to their defaults
    assert config["currency"] == "COP"
    assert SystemConfig.objects.count() == len(config_service.DEFAULTS)

    public = api_client.get(PUBLIC).json()
    assert public["system_name"] == "Pan Dulce"
    assert public["primary_color"] == "#FF0000"
