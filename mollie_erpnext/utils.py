"""
Mollie Gateway Utilities
========================
Settings accessors and database helpers shared by the gateway actions.
"""

import frappe
from typing import Any, Dict, Optional

SETTINGS_DOCTYPE = "Mollie Settings"
GATEWAY_NAME = "Mollie"
DEFAULT_MODE_OF_PAYMENT = "Mollie"


def get_settings():
    """Get the Mollie Settings single document."""
    return frappe.get_cached_doc(SETTINGS_DOCTYPE)


def is_sandbox(settings) -> bool:
    """Sandbox mode uses the test API key, no real money moves."""
    if not settings:
        return False

    return bool(settings.get("sandbox"))


def get_api_key(settings) -> Optional[str]:
    """Get the API key for the current mode."""
    if not settings:
        return None

    fieldname = "test_api_key" if is_sandbox(settings) else "live_api_key"

    if not settings.get(fieldname):
        return None

    return settings.get_password(fieldname, raise_exception=False)


def get_mode_of_payment(settings) -> str:
    """Mode of Payment used on Payment Entries created by the webhook."""
    return (settings and settings.get("mode_of_payment")) or DEFAULT_MODE_OF_PAYMENT


def get_frappe_major_version() -> int:
    """Major version of the running Frappe framework."""
    try:
        return int(str(frappe.__version__).split(".")[0])
    except (AttributeError, ValueError):
        return 0


def pluck(doctype: str, filters: Dict[str, Any], fieldname: str) -> Any:
    """
    Get a single value from the database.

    Frappe 13 added ``pluck`` to ``get_all`` which skips building a dict per row.
    Older releases only have ``db.get_value``, which returns the same single value.

    Args:
        doctype: DocType to query
        filters: Filters to match
        fieldname: Column to get the value from

    Returns:
        The value of the first matching row or None
    """
    if get_frappe_major_version() < 13:
        return frappe.db.get_value(doctype, filters, fieldname)

    values = frappe.get_all(doctype, filters=filters, pluck=fieldname, limit=1)
    return values[0] if values else None


def is_mollie_payment(payment_entry) -> bool:
    """Submitted Payment Entry recorded for a Mollie payment."""
    return bool(
        payment_entry.docstatus == 1
        and payment_entry.reference_no
        and payment_entry.mode_of_payment == get_mode_of_payment(get_settings())
    )
