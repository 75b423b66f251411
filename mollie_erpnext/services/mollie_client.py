"""
Mollie API Client
=================
Thin client for the Mollie REST API (v2).

All methods return a dict with a ``success`` flag. Failed requests carry
``error`` and ``status_code`` so callers can branch on e.g. a 404.
"""

import frappe
import requests
from typing import Dict, Optional
from frappe.utils import flt

DEFAULT_BASE_URL = "https://api.mollie.com/v2"

# Currencies Mollie expects without decimals
ZERO_DECIMAL_CURRENCIES = ("JPY", "ISK")


def format_amount(amount: float, currency: str) -> Dict[str, str]:
    """Build a Mollie amount object, e.g. {"currency": "EUR", "value": "10.00"}."""
    currency = (currency or "EUR").upper()
    precision = 0 if currency in ZERO_DECIMAL_CURRENCIES else 2

    return {
        "currency": currency,
        "value": f"{flt(amount):.{precision}f}"
    }


def get_checkout_url(payment: Dict) -> Optional[str]:
    """Get the hosted checkout URL of a payment."""
    return (payment.get("_links") or {}).get("checkout", {}).get("href")


class MollieClient:
    """Mollie API client authenticated with a live or test API key."""

    def __init__(self, api_key: str):
        self.api_key = api_key
        self.base_url = frappe.conf.get("mollie_api_url", DEFAULT_BASE_URL)

    def _headers(self) -> Dict[str, str]:
        """Get API headers."""
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json"
        }

    def _request(self, method: str, endpoint: str, data: Dict = None) -> Dict:
        """Make authenticated request to the Mollie API."""
        url = f"{self.base_url}{endpoint}"

        try:
            if method == "GET":
                response = requests.get(url, headers=self._headers(), params=data, timeout=30)
            elif method == "POST":
                response = requests.post(url, headers=self._headers(), json=data, timeout=30)
            else:
                raise ValueError(f"Unsupported HTTP method: {method}")

            try:
                result = response.json()
            except ValueError:
                result = {}

            if response.status_code >= 400:
                frappe.log_error(
                    title="Mollie API",
                    message=f"Mollie API error: {response.status_code} - {result}"
                )
                return {
                    "success": False,
                    "status_code": response.status_code,
                    "error": result.get("detail") or result.get("title") or f"HTTP {response.status_code}"
                }

            return {"success": True, "status_code": response.status_code, **result}

        except requests.exceptions.Timeout:
            return {"success": False, "status_code": None, "error": "Request timeout"}
        except requests.exceptions.RequestException as e:
            frappe.log_error(title="Mollie API", message=f"Mollie request error: {str(e)}")
            return {"success": False, "status_code": None, "error": str(e)}

    # ==================== CUSTOMERS ====================

    def create_customer(self, name: str, email: str, metadata: Dict = None) -> Dict:
        """Create a customer in Mollie."""
        data = {
            "name": name,
            "email": email,
            "metadata": metadata or {}
        }

        return self._request("POST", "/customers", {k: v for k, v in data.items() if v})

    def get_customer(self, customer_id: str) -> Dict:
        """Get customer details."""
        return self._request("GET", f"/customers/{customer_id}")

    # ==================== PAYMENTS ====================

    def create_customer_payment(
        self,
        customer_id: str,
        amount: float,
        currency: str,
        description: str,
        redirect_url: str,
        metadata: Dict = None,
        webhook_url: str = None
    ) -> Dict:
        """
        Create a payment for a customer.

        Args:
            customer_id: Mollie customer ID
            amount: Payment amount (in currency units, not cents)
            currency: Currency code (EUR, USD, etc.)
            description: Payment description shown to the customer
            redirect_url: URL the customer returns to after checkout
            metadata: Custom metadata (e.g. the invoice name)
            webhook_url: URL Mollie calls on status changes

        Returns:
            Payment with the checkout link
        """
        data = {
            "amount": format_amount(amount, currency),
            "description": description,
            "redirectUrl": redirect_url,
            "metadata": metadata or {}
        }

        if webhook_url:
            data["webhookUrl"] = webhook_url

        return self._request("POST", f"/customers/{customer_id}/payments", data)

    def get_payment(self, payment_id: str) -> Dict:
        """Get payment details."""
        return self._request("GET", f"/payments/{payment_id}")

    # ==================== REFUNDS ====================

    def create_refund(self, payment_id: str, amount: float, currency: str) -> Dict:
        """
        Create a refund for a payment.

        Args:
            payment_id: Payment ID to refund
            amount: Refund amount
            currency: Currency of the payment
        """
        data = {"amount": format_amount(amount, currency)}

        return self._request("POST", f"/payments/{payment_id}/refunds", data)
