"""
Mollie for ERPNext Hooks
========================
Frappe app hooks for the Mollie payment gateway.
"""

app_name = "mollie_erpnext"
app_title = "Mollie"
app_publisher = "Cloudstek"
app_description = "Mollie Payment Gateway for ERPNext"
app_email = "info@cloudstek.nl"
app_license = "MIT"
app_version = "1.0.0"

# Mollie API version this gateway talks to
mollie_api_version = "v2"

# Required Apps
required_apps = ["frappe", "erpnext"]

# Includes in <head>
# ------------------

# include js in doctype views
doctype_js = {
    "Sales Invoice": "public/js/sales_invoice.js",
    "Payment Entry": "public/js/payment_entry.js"
}

# Installation
# ------------

after_install = "mollie_erpnext.install.after_install"

# Uninstallation
# ------------

before_uninstall = "mollie_erpnext.install.before_uninstall"

# Document Events
# ---------------
# Hook on document methods and events

doc_events = {
    "Sales Invoice": {
        "onload": "mollie_erpnext.events.sales_invoice.onload"
    },
    "Payment Entry": {
        "onload": "mollie_erpnext.events.payment_entry.onload"
    }
}

# Website Route Rules
# -------------------

website_route_rules = [
    # Pay now page
    {"from_route": "/pay/mollie/<invoice>", "to_route": "mollie_checkout"},
]

# Fixtures
# --------

fixtures = [
    {
        "dt": "Mode of Payment",
        "filters": [["name", "=", "Mollie"]]
    }
]
