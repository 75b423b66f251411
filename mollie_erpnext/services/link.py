"""
Mollie Pay Now Link
===================
Renders the pay now form for a Sales Invoice and starts a Mollie payment
when the form is submitted.
"""

import frappe
from frappe import _
from typing import Dict
from frappe.sessions import get_csrf_token
from frappe.utils import escape_html, flt
from frappe.utils.password import get_encryption_key

from .action_base import ActionBase
from .mollie_client import MollieClient, get_checkout_url
from .nonce import Nonce

NONCE_LENGTH = 40
NONCE_TIMEOUT = 3600

PAY_NOW_ACTION = "/api/method/mollie_erpnext.api.pay_now"

SANDBOX_BANNER = '<strong style="color: red;">SANDBOX MODE</strong><br />'


class Link(ActionBase):
    """Pay now link action."""

    def __init__(self, invoice):
        super().__init__()

        # Sales Invoice document
        self.invoice = invoice
        self.customer = invoice.customer

        self.nonce = Nonce(get_encryption_key(), NONCE_LENGTH)
        self.nonce_token = f"{self.customer}{frappe.session.sid}"

    @property
    def nonce_cache_key(self) -> str:
        return f"mollie_paynow_nonce:{frappe.session.sid}"

    @property
    def error_cache_key(self) -> str:
        return f"mollie_paynow_error:{frappe.session.sid}"

    def status_message(self, message: str) -> str:
        """HTML formatted message, with the sandbox banner in sandbox mode."""
        return (SANDBOX_BANNER if self.sandbox else "") + f"<p>{message}</p>"

    def error_message(self) -> str:
        return _("Error occurred, please select a different payment method or try again later.")

    def pay_now_form(self) -> str:
        """Pay now button form with a fresh nonce."""
        nonce = self.nonce.create(self.nonce_token, NONCE_TIMEOUT)
        label = _("Pay Now")
        frappe.cache().set_value(self.nonce_cache_key, nonce, expires_in_sec=NONCE_TIMEOUT)

        form = f"""
            <form action="{PAY_NOW_ACTION}" method="POST">
                <input type="hidden" name="invoice" value="{escape_html(self.invoice.name)}" />
                <input type="hidden" name="nonce" value="{nonce}" />
                <input type="hidden" name="csrf_token" value="{get_csrf_token()}" />
                <input type="submit" class="btn btn-primary" value="{label}" />
            </form>
        """

        if self.has_pending_transactions(self.invoice.name):
            form = (
                "<p>"
                + _("Your payment is currently pending and will be processed automatically.")
                + "</p>"
                + form
            )

        if self.sandbox:
            form = SANDBOX_BANNER + form

        return form

    def get_or_create_customer(self, client: MollieClient) -> Dict:
        """
        Get the Mollie customer of the invoice customer, creating it when needed.

        A stored customer that no longer exists in Mollie is forgotten and created again.
        """
        customer_id = self.get_customer_id(self.customer)

        if customer_id:
            result = client.get_customer(customer_id)

            if result.get("success") or result.get("status_code") != 404:
                return result

            self.set_customer_id(self.customer, "")

        email = self.invoice.get("contact_email") or frappe.db.get_value("Customer", self.customer, "email_id")

        result = client.create_customer(
            name=self.invoice.get("customer_name") or self.customer,
            email=email,
            metadata={"erpnext_customer": self.customer}
        )

        if result.get("success"):
            self.set_customer_id(self.customer, result.get("id"))

        return result

    def get_redirect_url(self) -> str:
        """Portal page of the invoice, where the customer returns after checkout."""
        return frappe.utils.get_url(f"/invoices/{self.invoice.name}")

    def pop_nonce(self):
        """Get the stored nonce and remove it, a nonce can only be used once."""
        cache = frappe.cache()
        nonce = cache.get_value(self.nonce_cache_key)
        cache.delete_value(self.nonce_cache_key)

        return nonce

    def set_error(self, message: str):
        """Keep an error for the pay now page the customer is sent back to."""
        frappe.cache().set_value(self.error_cache_key, message, expires_in_sec=300)

    def pop_error(self):
        cache = frappe.cache()
        message = cache.get_value(self.error_cache_key)
        cache.delete_value(self.error_cache_key)

        return message

    def pay(self, nonce: str) -> Dict:
        """
        Handle the pay now form submission.

        Args:
            nonce: Nonce posted with the form

        Returns:
            Dict with the checkout ``redirect_url`` on success
        """
        if not self.initialize():
            return {
                "success": False,
                "error": _("This payment gateway is currently disabled. Please contact the administrator.")
            }

        stored_nonce = self.pop_nonce()

        if not stored_nonce or stored_nonce != nonce or not self.nonce.check(stored_nonce, self.nonce_token):
            return {"success": False, "error": _("Your payment request has expired, please try again.")}

        amount = flt(self.invoice.outstanding_amount)

        if amount <= 0:
            return {"success": False, "error": _("This invoice has already been paid.")}

        try:
            client = MollieClient(self.get_api_key())

            customer = self.get_or_create_customer(client)

            if not customer.get("success"):
                return {"success": False, "error": self.error_message()}

            payment = client.create_customer_payment(
                customer_id=customer.get("id"),
                amount=amount,
                currency=self.invoice.currency,
                description=_("Invoice {0}").format(self.invoice.name),
                redirect_url=self.get_redirect_url(),
                metadata={"erpnext_invoice": self.invoice.name},
                webhook_url=self.get_webhook_url()
            )

            if not payment.get("success"):
                if payment.get("status_code") == 404:
                    self.set_customer_id(self.customer, "")

                return {"success": False, "error": self.error_message()}

            self.update_transaction_status(self.invoice.name, "pending", payment.get("id"))

            self.log_transaction(
                f"Payment attempted for invoice {self.invoice.name}. "
                f"Awaiting payment confirmation from callback for transaction {payment.get('id')}.",
                "Success"
            )

            return {
                "success": True,
                "payment_id": payment.get("id"),
                "redirect_url": get_checkout_url(payment)
            }

        except Exception as e:
            frappe.log_error(title="Mollie Link", message=f"Payment for invoice {self.invoice.name} failed: {str(e)}")
            return {"success": False, "error": self.error_message()}

    def run(self) -> str:
        """Render the pay now form."""
        if not self.initialize():
            return self.status_message(
                _("This payment gateway is currently disabled. Please contact the administrator.")
            )

        try:
            client = MollieClient(self.get_api_key())

            customer = self.get_or_create_customer(client)

            if not customer.get("success"):
                return self.status_message(self.error_message())

            return self.pay_now_form()

        except Exception as e:
            frappe.log_error(title="Mollie Link", message=f"Pay now form for invoice {self.invoice.name} failed: {str(e)}")
            return self.status_message(self.error_message())
