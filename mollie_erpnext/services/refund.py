"""
Mollie Refund
=============
Refunds (part of) a Mollie payment.
"""

import frappe
from typing import Dict

from .action_base import ActionBase
from .mollie_client import MollieClient


class Refund(ActionBase):
    """Refund action."""

    def __init__(self, transaction_id: str, amount: float, currency: str):
        super().__init__()

        self.transaction_id = transaction_id
        self.refund_amount = amount
        self.refund_currency = currency

    def status_message(self, status: str, message: str, data: Dict = None) -> Dict:
        """
        Generate status message.

        Args:
            status: success or error
            message: Status message
            data: Raw data to append to message
        """
        msg = {
            "status": status,
            "rawdata": {
                "message": message
            }
        }

        if data:
            msg["rawdata"].update(data)

        return msg

    def run(self) -> Dict:
        """Create the refund."""
        if not self.initialize():
            return self.status_message(
                "error",
                f"Failed to create refund for transaction {self.transaction_id} - API key is missing!"
            )

        try:
            client = MollieClient(self.get_api_key())

            result = client.create_refund(self.transaction_id, self.refund_amount, self.refund_currency)

            if not result.get("success"):
                raise Exception(result.get("error"))

            return self.status_message(
                "success",
                f"Successfully refunded {self.refund_currency} {self.refund_amount} of {self.transaction_id}",
                {"refund_id": result.get("id")}
            )

        except Exception as e:
            frappe.log_error(title="Mollie Refund", message=f"Refund of {self.transaction_id} failed: {str(e)}")

            return self.status_message(
                "error",
                f"Failed to create refund for transaction {self.transaction_id}.",
                {"exception": str(e)}
            )
