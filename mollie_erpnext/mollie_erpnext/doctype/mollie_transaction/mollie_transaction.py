"""
Mollie Transaction DocType Controller
=====================================
Pending or failed Mollie payment of a Sales Invoice.
"""

import frappe
from frappe import _
from frappe.model.document import Document

TRANSACTION_STATUSES = ("pending", "failed")


class MollieTransaction(Document):
    def validate(self):
        if self.status not in TRANSACTION_STATUSES:
            frappe.throw(_("Invalid transaction status {0}").format(self.status))
