"""
Mollie for ERPNext API Module
=============================
Whitelisted endpoints for the pay now form, the Mollie webhook and refunds.
"""

import frappe
from frappe import _
from frappe.utils import flt
from werkzeug.wrappers import Response

from mollie_erpnext.utils import is_mollie_payment


@frappe.whitelist(allow_guest=True)
def webhook():
    """
    Handle payment status webhooks from Mollie.

    Mollie posts the ID of the payment that changed status. Nothing else in the
    request is trusted, the payment is fetched back from Mollie.
    """
    from mollie_erpnext.services.callback import Callback

    payment_id = frappe.form_dict.get("id")

    if not payment_id:
        return

    callback = Callback()

    if not callback.is_active():
        # Plain text body, outside the JSON envelope
        return Response("Gateway not activated.", status=501, mimetype="text/plain")

    callback.run(payment_id, frappe.request.args.get("status"))


@frappe.whitelist()
def pay_now(invoice, nonce=None):
    """
    Handle the pay now form.

    Redirects to the Mollie checkout, or back to the pay now page on failure.
    """
    from mollie_erpnext.services.link import Link

    if frappe.request and frappe.request.method != "POST":
        frappe.throw(_("Invalid request"), frappe.PermissionError)

    doc = get_invoice_for_payment(invoice)
    link = Link(doc)
    result = link.pay(nonce)

    frappe.local.response["type"] = "redirect"

    if result.get("success") and result.get("redirect_url"):
        frappe.local.response["location"] = result.get("redirect_url")
    else:
        link.set_error(result.get("error"))
        frappe.local.response["location"] = f"/pay/mollie/{invoice}"


@frappe.whitelist()
def refund_payment(payment_entry, amount=None):
    """
    Refund a Mollie payment recorded by a Payment Entry.

    Args:
        payment_entry: Payment Entry name
        amount: Refund amount (full refund if not specified)

    Returns:
        Refund status message
    """
    from mollie_erpnext.services.refund import Refund

    frappe.only_for(("Accounts Manager", "System Manager"))

    pe = frappe.get_doc("Payment Entry", payment_entry)

    if not is_mollie_payment(pe):
        frappe.throw(_("Payment Entry {0} is not a submitted Mollie payment").format(pe.name))

    refund = Refund(
        pe.reference_no,
        flt(amount) or flt(pe.paid_amount),
        pe.paid_from_account_currency
    )
    result = refund.run()
    message = result["rawdata"]["message"]

    refund.log_transaction(message, "Success" if result["status"] == "success" else "Failure")

    if result["status"] == "success":
        pe.add_comment("Comment", f"{message} (refund {result['rawdata'].get('refund_id')})")
        frappe.msgprint(message, indicator="green", title=_("Refund Success"))
    else:
        frappe.msgprint(message, indicator="red", title=_("Refund Failed"))

    return result


def get_invoice_for_payment(invoice):
    """Get a Sales Invoice the current user may pay."""
    if frappe.session.user == "Guest":
        frappe.throw(_("You need to be logged in to pay this invoice"), frappe.PermissionError)

    doc = frappe.get_doc("Sales Invoice", invoice)

    if not (doc.has_permission("read") or frappe.has_website_permission(doc)):
        frappe.throw(_("Not permitted"), frappe.PermissionError)

    return doc
