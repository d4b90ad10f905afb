from datetime import date, datetime

import pytest
from django.utils import timezone
from rest_framework.test import APIClient

from tests.factories import UserFactory


# Monday; far enough from midnight that no fixture time crosses a day boundary
WORKDAY = date(2024, 3, 4)


@pytest.fixture
def api_client() -> APIClient:
    """Unauthenticated DRF APIClient."""
    return APIClient(enforce_csrf_checks=False)


@pytest.fixture
def employee(db):
    return UserFactory(username="baker", role="EMPLOYEE")


@pytest.fixture
def manager(db):
    return UserFactory(username="manager", role="MANAGER")


@pytest.fixture
def admin(db):
    return UserFactory(username="owner", role="ADMIN")


def _client_for(user) -> APIClient:
    client = APIClient(enforce_csrf_checks=False)
    client.force_authenticate(user=user)
    return client


@pytest.fixture
def employee_api_client(employee):
    return _client_for(employee)


@pytest.fixture
def manager_api_client(manager):
    return _client_for(manager)


@pytest.fixture
def admin_api_client(admin):
    return _client_for(admin)


@pytest.fixture
def at():
    """at(8, 15) -> aware datetime on WORKDAY at 08:15 local time."""
    def _at(hour, minute=0, day=WORKDAY):
        return timezone.make_aware(datetime(day.year, day.month, day.day, hour, minute))
    return _at
