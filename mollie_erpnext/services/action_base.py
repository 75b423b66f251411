"""
Mollie Gateway Action Base
==========================
Shared state and helpers for the gateway actions (link, refund, admin status)
and the webhook callback.
"""

import frappe
from typing import Optional
from frappe.utils.password import decrypt, encrypt

from mollie_erpnext.utils import (
    GATEWAY_NAME,
    get_api_key,
    get_mode_of_payment,
    get_settings,
    is_sandbox,
    pluck
)

TRANSACTION_DOCTYPE = "Mollie Transaction"
CUSTOMER_DOCTYPE = "Mollie Customer"

WEBHOOK_PATH = "/api/method/mollie_erpnext.api.webhook"


class ActionBase:
    """Base class for gateway actions."""

    def __init__(self):
        self.settings = get_settings()
        self.sandbox = is_sandbox(self.settings)
        self.gateway_name = GATEWAY_NAME

    @property
    def mode_of_payment(self) -> str:
        return get_mode_of_payment(self.settings)

    def get_api_key(self) -> Optional[str]:
        """Get the Mollie API key for the current mode."""
        return get_api_key(self.settings)

    def is_active(self) -> bool:
        """Gateway is usable once an API key for the current mode is entered."""
        return bool(self.get_api_key())

    # ==================== CUSTOMERS ====================

    def get_customer_id(self, customer: str) -> Optional[str]:
        """
        Get Mollie customer ID for an ERPNext customer.

        Returns:
            Mollie customer ID or None if none is stored or it can't be decrypted
        """
        customer_id = pluck(CUSTOMER_DOCTYPE, {"customer": customer}, "customer_id")

        if not customer_id:
            return None

        try:
            return decrypt(customer_id) or None
        except Exception:
            return None

    def set_customer_id(self, customer: str, customer_id: str):
        """Store the Mollie customer ID of a customer, an empty ID removes it."""
        if not customer_id:
            frappe.db.delete(CUSTOMER_DOCTYPE, {"customer": customer})
            return

        value = encrypt(customer_id)
        name = pluck(CUSTOMER_DOCTYPE, {"customer": customer}, "name")

        if name:
            frappe.db.set_value(CUSTOMER_DOCTYPE, name, "customer_id", value)
            return

        frappe.get_doc({
            "doctype": CUSTOMER_DOCTYPE,
            "customer": customer,
            "customer_id": value
        }).insert(ignore_permissions=True)

    # ==================== TRANSACTIONS ====================

    def has_transaction(self, invoice: str) -> bool:
        return bool(frappe.db.exists(TRANSACTION_DOCTYPE, {"invoice": invoice}))

    def has_pending_transactions(self, invoice: str) -> bool:
        return bool(frappe.db.count(TRANSACTION_DOCTYPE, {"invoice": invoice, "status": "pending"}))

    def has_failed_transactions(self, invoice: str) -> bool:
        return bool(frappe.db.count(TRANSACTION_DOCTYPE, {"invoice": invoice, "status": "failed"}))

    def update_transaction_status(self, invoice: str, status: str, transaction_id: str = None):
        """
        Set transaction status of an invoice.

        Args:
            invoice: Sales Invoice name
            status: Status of transaction, pending or failed
            transaction_id: Mollie payment ID
        """
        name = pluck(TRANSACTION_DOCTYPE, {"invoice": invoice}, "name")

        if name:
            frappe.db.set_value(TRANSACTION_DOCTYPE, name, {
                "transaction_id": transaction_id,
                "status": status
            })
            return

        frappe.get_doc({
            "doctype": TRANSACTION_DOCTYPE,
            "invoice": invoice,
            "transaction_id": transaction_id,
            "status": status
        }).insert(ignore_permissions=True)

    def remove_transaction(self, invoice: str):
        """Remove the pending or failed transaction of an invoice."""
        frappe.db.delete(TRANSACTION_DOCTYPE, {"invoice": invoice})

    # ==================== URLS & LOGGING ====================

    def get_webhook_url(self) -> Optional[str]:
        """Full URL of the webhook, None in development mode as Mollie can't reach it."""
        if self.settings and self.settings.get("develop"):
            return None

        return frappe.utils.get_url(WEBHOOK_PATH)

    def log_transaction(self, description: str, status: str = "Success"):
        """
        Log a transaction in the gateway log.

        Sandbox transactions are prefixed so they are easy to tell apart when debugging.
        """
        if self.sandbox:
            description = f"[SANDBOX] {description}"

        status = status[:1].upper() + status[1:]

        frappe.logger("mollie_erpnext").info(f"{self.gateway_name} [{status}] {description}")

        if status == "Error":
            frappe.log_error(title=f"{self.gateway_name} Gateway", message=description)

    # ==================== INITIALIZATION ====================

    def ensure_tables(self):
        """Create the gateway tables when the app was not migrated yet."""
        for doctype in (TRANSACTION_DOCTYPE, CUSTOMER_DOCTYPE):
            if not frappe.db.table_exists(doctype):
                frappe.reload_doc("mollie_erpnext", "doctype", frappe.scrub(doctype))

    def initialize(self) -> bool:
        """
        Make sure the gateway tables exist and check the API key.

        Returns:
            True if an API key is entered for the current mode
        """
        self.ensure_tables()

        return self.is_active()

    def run(self):
        raise NotImplementedError
