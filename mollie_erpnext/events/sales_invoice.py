"""
Sales Invoice document events.
"""

from mollie_erpnext.services.admin_status import AdminStatus


def onload(doc, method=None):
    """Attach the Mollie payment status to submitted invoices paid through Mollie."""
    if doc.docstatus != 1:
        return

    admin_status = AdminStatus(doc)

    if not admin_status.is_mollie_invoice():
        return

    message = admin_status.run()

    if message:
        doc.set_onload("mollie_status", message)
