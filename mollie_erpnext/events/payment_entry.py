"""
Payment Entry document events.
"""

from mollie_erpnext.utils import is_mollie_payment


def onload(doc, method=None):
    """Flag Payment Entries that can be refunded through Mollie."""
    if is_mollie_payment(doc):
        doc.set_onload("mollie_refundable", 1)
