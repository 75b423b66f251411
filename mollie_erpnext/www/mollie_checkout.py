import frappe
from frappe import _

from mollie_erpnext.api import get_invoice_for_payment
from mollie_erpnext.services.link import Link

no_cache = 1


def get_context(context):
    """Pay now page for a Sales Invoice."""
    invoice = frappe.form_dict.get("invoice")

    if not invoice:
        frappe.throw(_("Invoice is required"), frappe.DoesNotExistError)

    doc = get_invoice_for_payment(invoice)
    link = Link(doc)

    context.no_breadcrumbs = True
    context.title = _("Pay Invoice {0}").format(doc.name)
    context.invoice = doc
    context.error = link.pop_error()
    context.payment_form = link.run()

    return context
