"""
Mollie for ERPNext Installation Script
======================================
Sets up the Mollie gateway after installation.
"""

import frappe
from frappe import _

from mollie_erpnext.utils import DEFAULT_MODE_OF_PAYMENT, SETTINGS_DOCTYPE


def after_install():
    """Run after app installation."""
    print("Setting up Mollie...")

    create_mode_of_payment()
    create_default_settings()

    print("Mollie setup complete!")


def create_mode_of_payment():
    """Create the Mode of Payment used for Mollie Payment Entries."""
    if frappe.db.exists("Mode of Payment", DEFAULT_MODE_OF_PAYMENT):
        return

    doc = frappe.new_doc("Mode of Payment")
    doc.mode_of_payment = DEFAULT_MODE_OF_PAYMENT
    doc.type = "General"
    doc.enabled = 1
    doc.insert(ignore_permissions=True)
    print(f"  Created mode of payment: {DEFAULT_MODE_OF_PAYMENT}")


def create_default_settings():
    """Start in sandbox mode so nothing is charged until live keys are entered."""
    settings = frappe.get_single(SETTINGS_DOCTYPE)

    if not settings.mode_of_payment:
        settings.mode_of_payment = DEFAULT_MODE_OF_PAYMENT

    settings.sandbox = 1
    settings.flags.ignore_permissions = True
    settings.save()


def before_uninstall():
    """Clean up before uninstalling."""
    print("Cleaning up Mollie...")

    pending = frappe.db.count("Mollie Transaction", {"status": "pending"})

    if pending:
        print(_("  Warning: {0} Mollie payments are still pending").format(pending))

    print("Mollie cleanup complete!")
