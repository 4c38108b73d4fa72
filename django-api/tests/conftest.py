"""Pytest configuration and shared fixtures."""

import pytest
from rest_framework.test import APIClient

from fakes import InMemoryAccessStore, InMemoryReadLogStore, InMemoryReservationStore


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture
def access_store() -> InMemoryAccessStore:
    return InMemoryAccessStore()


@pytest.fixture
def read_log_store() -> InMemoryReadLogStore:
    return InMemoryReadLogStore()


@pytest.fixture
def reservation_store() -> InMemoryReservationStore:
    return InMemoryReservationStore()
