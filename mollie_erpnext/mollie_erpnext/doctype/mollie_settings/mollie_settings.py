"""
Mollie Settings DocType Controller
==================================
Gateway configuration: live and test API keys and sandbox mode.
"""

import frappe
from frappe import _
from frappe.model.document import Document

API_KEY_PREFIXES = {
    "live_api_key": "live_",
    "test_api_key": "test_"
}


def validate_api_key(api_key, prefix, label):
    """Mollie API keys start with live_ or test_ depending on their mode."""
    if api_key and not api_key.startswith(prefix):
        frappe.throw(_("{0} must start with {1}").format(label, prefix))


class MollieSettings(Document):
    def validate(self):
        self.validate_api_keys()

    def validate_api_keys(self):
        """Check key prefixes, only keys entered in this save are in plain text."""
        for fieldname, prefix in API_KEY_PREFIXES.items():
            value = self.get(fieldname)

            if value and set(value) != {"*"}:
                validate_api_key(value, prefix, _(self.meta.get_label(fieldname)))

        if self.sandbox and not self.test_api_key:
            frappe.msgprint(_("Sandbox mode is enabled but no test API key is entered."), indicator="orange")
