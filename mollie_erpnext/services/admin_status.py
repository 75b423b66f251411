"""
Mollie Admin Status
===================
Payment status message for the Sales Invoice form.
"""

from frappe import _
from typing import Dict, Optional

from .action_base import ActionBase

UNPAID_STATUSES = ("Unpaid", "Overdue", "Partly Paid")


class AdminStatus(ActionBase):
    """Admin status message action."""

    def __init__(self, invoice):
        super().__init__()

        # Sales Invoice document
        self.invoice = invoice

    def status_message(self, status: str, message: str, title: str = None) -> Dict:
        """
        Generate status message.

        Args:
            status: Message type, info or error
            message: Message content
            title: Message title, defaults to the gateway name
        """
        return {
            "type": status,
            "msg": message,
            "title": title or self.gateway_name
        }

    def is_mollie_invoice(self) -> bool:
        """Invoice was paid through Mollie before, or its customer has a Mollie account."""
        self.ensure_tables()

        return self.has_transaction(self.invoice.name) or bool(self.get_customer_id(self.invoice.customer))

    def run(self) -> Optional[Dict]:
        if not self.initialize():
            return self.status_message(
                "error",
                _("Please enter your API key(s) to use this payment gateway.")
            )

        if self.invoice.status not in UNPAID_STATUSES:
            return None

        # Customer never paid through Mollie
        if not self.get_customer_id(self.invoice.customer):
            return None

        if self.has_pending_transactions(self.invoice.name):
            return self.status_message(
                "info",
                _(
                    "There is a payment pending for this invoice. Status will be automatically updated once a "
                    "confirmation is received from Mollie."
                )
            )

        if self.has_failed_transactions(self.invoice.name):
            return self.status_message(
                "error",
                _("Automatic payment for this invoice has failed. Please check the gateway logs for details.")
            )

        return None
