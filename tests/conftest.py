"""Shared fixtures.

Every module of the app talks to Frappe through its own ``frappe`` reference.
The ``mock_frappe`` fixture swaps those for one MagicMock so the gateway can be
tested without a site or database.
"""

from contextlib import ExitStack
from unittest.mock import MagicMock, patch

import frappe
import pytest

FRAPPE_MODULES = [
    "mollie_erpnext.utils",
    "mollie_erpnext.services.mollie_client",
    "mollie_erpnext.services.action_base",
    "mollie_erpnext.services.link",
    "mollie_erpnext.services.callback",
    "mollie_erpnext.services.refund",
    "mollie_erpnext.api",
    "mollie_erpnext.mollie_erpnext.doctype.mollie_settings.mollie_settings",
]

TRANSLATED_MODULES = [
    "mollie_erpnext.services.link",
    "mollie_erpnext.services.admin_status",
    "mollie_erpnext.api",
    "mollie_erpnext.mollie_erpnext.doctype.mollie_settings.mollie_settings",
]


def translate(msg, *args, **kwargs):
    return msg


def throw(msg, *args, **kwargs):
    raise frappe.ValidationError(msg)


class Settings(frappe._dict):
    """Mollie Settings stand-in, passwords are kept in plain text."""

    def get_password(self, fieldname="password", raise_exception=True):
        return self.get(fieldname)


class Cache:
    """In-memory replacement for the Redis cache."""

    def __init__(self):
        self.store = {}

    def set_value(self, key, value, expires_in_sec=None):
        self.store[key] = value

    def get_value(self, key):
        return self.store.get(key)

    def delete_value(self, key):
        self.store.pop(key, None)


def fake_encrypt(value):
    return f"enc:{value}"


def fake_decrypt(value):
    if not value.startswith("enc:"):
        raise ValueError("Invalid token")

    return value[4:]


@pytest.fixture
def settings():
    return Settings(
        live_api_key="live_key123",
        test_api_key="test_key123",
        sandbox=0,
        mode_of_payment="Mollie",
        develop=0
    )


@pytest.fixture
def sandbox_settings(settings):
    settings.sandbox = 1
    return settings


@pytest.fixture
def cache():
    return Cache()


@pytest.fixture
def mock_frappe(settings, cache):
    mock = MagicMock()
    mock.__version__ = "15.10.0"
    mock.get_all.return_value = []
    mock.db.count.return_value = 0
    mock.db.exists.return_value = True
    mock.db.table_exists.return_value = True
    mock.session.sid = "sid123"
    mock.session.user = "jane@example.com"
    mock.conf.get.side_effect = lambda key, default=None: default
    mock.utils.get_url.side_effect = lambda uri="": f"https://erp.example.com{uri}"
    mock.throw.side_effect = throw
    mock.cache.return_value = cache
    mock.local.response = {}

    with ExitStack() as stack:
        for module in FRAPPE_MODULES:
            stack.enter_context(patch(f"{module}.frappe", mock))

        for module in TRANSLATED_MODULES:
            stack.enter_context(patch(f"{module}._", translate))

        stack.enter_context(patch("mollie_erpnext.utils.get_settings", return_value=settings))
        stack.enter_context(patch("mollie_erpnext.services.action_base.get_settings", return_value=settings))
        stack.enter_context(patch("mollie_erpnext.services.action_base.encrypt", fake_encrypt))
        stack.enter_context(patch("mollie_erpnext.services.action_base.decrypt", fake_decrypt))
        stack.enter_context(patch("mollie_erpnext.services.link.get_csrf_token", return_value="csrf123"))
        stack.enter_context(patch("mollie_erpnext.services.link.get_encryption_key", return_value="secret"))

        yield mock


@pytest.fixture
def invoice():
    return frappe._dict(
        doctype="Sales Invoice",
        name="ACC-SINV-2024-00001",
        customer="CUST-0001",
        customer_name="Jane Doe",
        contact_email="jane@example.com",
        currency="EUR",
        outstanding_amount=121.0,
        status="Unpaid",
        docstatus=1
    )
