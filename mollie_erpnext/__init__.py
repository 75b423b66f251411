"""
Mollie for ERPNext
==================
Mollie payment gateway for ERPNext Sales Invoices.

Features:
- Pay now link on the invoice portal with nonce protected form
- Mollie customer per ERPNext Customer
- Webhook reconciliation (paid, charged back, failed)
- Refunds from Payment Entries
- Payment status messages on the Sales Invoice form
"""

__version__ = "1.0.0"
__author__ = "Cloudstek"
__email__ = "info@cloudstek.nl"
