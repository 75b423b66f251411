"""Tests for the Mollie API client.

Tests cover:
- Amount formatting
- Request building (auth header, endpoints, payloads)
- Error responses and network failures
"""

from unittest.mock import MagicMock, patch

import requests

from mollie_erpnext.services.mollie_client import (
    DEFAULT_BASE_URL,
    MollieClient,
    format_amount,
    get_checkout_url
)


def make_response(status_code=200, body=None):
    response = MagicMock(status_code=status_code)
    response.json.return_value = body if body is not None else {}
    return response


class TestHelpers:
    """Tests for amount and link helpers."""

    def test_format_amount_uses_two_decimals(self):
        assert format_amount(121, "eur") == {"currency": "EUR", "value": "121.00"}

    def test_format_amount_rounds(self):
        assert format_amount(10.005, "EUR")["value"] in ("10.01", "10.00")
        assert format_amount(9.999, "USD") == {"currency": "USD", "value": "10.00"}

    def test_format_amount_zero_decimal_currency(self):
        assert format_amount(1500, "JPY") == {"currency": "JPY", "value": "1500"}

    def test_get_checkout_url(self):
        payment = {"_links": {"checkout": {"href": "https://www.mollie.com/checkout/tr_1"}}}

        assert get_checkout_url(payment) == "https://www.mollie.com/checkout/tr_1"

    def test_get_checkout_url_missing(self):
        assert get_checkout_url({"status": "paid"}) is None


class TestRequests:
    """Tests for API requests."""

    def test_base_url_defaults_to_mollie(self, mock_frappe):
        assert MollieClient("test_key").base_url == DEFAULT_BASE_URL

    def test_base_url_from_site_config(self, mock_frappe):
        mock_frappe.conf.get.side_effect = None
        mock_frappe.conf.get.return_value = "https://mollie.local/v2"

        assert MollieClient("test_key").base_url == "https://mollie.local/v2"

    def test_create_customer(self, mock_frappe):
        with patch("mollie_erpnext.services.mollie_client.requests.post") as mock_post:
            mock_post.return_value = make_response(201, {"id": "cst_123", "resource": "customer"})

            result = MollieClient("test_key").create_customer(
                "Jane Doe", "jane@example.com", {"erpnext_customer": "CUST-0001"}
            )

        assert result["success"] is True
        assert result["id"] == "cst_123"

        args, kwargs = mock_post.call_args
        assert args[0] == f"{DEFAULT_BASE_URL}/customers"
        assert kwargs["headers"]["Authorization"] == "Bearer test_key"
        assert kwargs["json"] == {
            "name": "Jane Doe",
            "email": "jane@example.com",
            "metadata": {"erpnext_customer": "CUST-0001"}
        }
        assert kwargs["timeout"] == 30

    def test_create_customer_drops_empty_fields(self, mock_frappe):
        with patch("mollie_erpnext.services.mollie_client.requests.post") as mock_post:
            mock_post.return_value = make_response(201, {"id": "cst_123"})

            MollieClient("test_key").create_customer("Jane Doe", None)

        assert mock_post.call_args.kwargs["json"] == {"name": "Jane Doe"}

    def test_create_customer_payment(self, mock_frappe):
        with patch("mollie_erpnext.services.mollie_client.requests.post") as mock_post:
            mock_post.return_value = make_response(201, {"id": "tr_123", "status": "open"})

            result = MollieClient("live_key").create_customer_payment(
                customer_id="cst_123",
                amount=121.0,
                currency="EUR",
                description="Invoice ACC-SINV-2024-00001",
                redirect_url="https://erp.example.com/invoices/ACC-SINV-2024-00001",
                metadata={"erpnext_invoice": "ACC-SINV-2024-00001"},
                webhook_url="https://erp.example.com/api/method/mollie_erpnext.api.webhook"
            )

        assert result["success"] is True
        assert result["status"] == "open"

        args, kwargs = mock_post.call_args
        assert args[0] == f"{DEFAULT_BASE_URL}/customers/cst_123/payments"
        assert kwargs["json"]["amount"] == {"currency": "EUR", "value": "121.00"}
        assert kwargs["json"]["redirectUrl"] == "https://erp.example.com/invoices/ACC-SINV-2024-00001"
        assert kwargs["json"]["webhookUrl"] == "https://erp.example.com/api/method/mollie_erpnext.api.webhook"
        assert kwargs["json"]["metadata"] == {"erpnext_invoice": "ACC-SINV-2024-00001"}

    def test_create_customer_payment_without_webhook(self, mock_frappe):
        with patch("mollie_erpnext.services.mollie_client.requests.post") as mock_post:
            mock_post.return_value = make_response(201, {"id": "tr_123"})

            MollieClient("test_key").create_customer_payment(
                "cst_123", 10, "EUR", "Invoice 1", "https://erp.example.com/invoices/1"
            )

        assert "webhookUrl" not in mock_post.call_args.kwargs["json"]

    def test_get_payment(self, mock_frappe):
        with patch("mollie_erpnext.services.mollie_client.requests.get") as mock_get:
            mock_get.return_value = make_response(200, {"id": "tr_123", "status": "paid"})

            result = MollieClient("test_key").get_payment("tr_123")

        assert result["status"] == "paid"
        assert mock_get.call_args.args[0] == f"{DEFAULT_BASE_URL}/payments/tr_123"

    def test_create_refund(self, mock_frappe):
        with patch("mollie_erpnext.services.mollie_client.requests.post") as mock_post:
            mock_post.return_value = make_response(201, {"id": "re_123", "status": "pending"})

            result = MollieClient("test_key").create_refund("tr_123", 50, "EUR")

        assert result["id"] == "re_123"
        assert mock_post.call_args.args[0] == f"{DEFAULT_BASE_URL}/payments/tr_123/refunds"
        assert mock_post.call_args.kwargs["json"] == {"amount": {"currency": "EUR", "value": "50.00"}}


class TestErrors:
    """Tests for failed requests."""

    def test_not_found_returns_status_code(self, mock_frappe):
        with patch("mollie_erpnext.services.mollie_client.requests.get") as mock_get:
            mock_get.return_value = make_response(404, {
                "status": 404,
                "title": "Not Found",
                "detail": "No customer exists with token cst_gone."
            })

            result = MollieClient("test_key").get_customer("cst_gone")

        assert result == {
            "success": False,
            "status_code": 404,
            "error": "No customer exists with token cst_gone."
        }
        mock_frappe.log_error.assert_called_once()

    def test_error_without_json_body(self, mock_frappe):
        with patch("mollie_erpnext.services.mollie_client.requests.get") as mock_get:
            response = make_response(502)
            response.json.side_effect = ValueError("No JSON")
            mock_get.return_value = response

            result = MollieClient("test_key").get_payment("tr_123")

        assert result["success"] is False
        assert result["error"] == "HTTP 502"

    def test_timeout(self, mock_frappe):
        with patch("mollie_erpnext.services.mollie_client.requests.get") as mock_get:
            mock_get.side_effect = requests.exceptions.Timeout()

            result = MollieClient("test_key").get_payment("tr_123")

        assert result == {"success": False, "status_code": None, "error": "Request timeout"}

    def test_connection_error(self, mock_frappe):
        with patch("mollie_erpnext.services.mollie_client.requests.post") as mock_post:
            mock_post.side_effect = requests.exceptions.ConnectionError("Connection refused")

            result = MollieClient("test_key").create_refund("tr_123", 10, "EUR")

        assert result["success"] is False
        assert "Connection refused" in result["error"]
        mock_frappe.log_error.assert_called_once()
