import logging

import requests
from dateutil import parser

from utils.billing import calculate_bill

logger = logging.getLogger("voltai")

DEFAULT_BASE_URL = "http://localhost:3001"
DEFAULT_TIMEOUT = 10  # seconds


class VoltAIClient:
    """
    Thin http client for the VoltAI api, doing what the employee dashboard
    and the customer app do over the wire.

    Args:
        base_url: root url of the api
        timeout: per request timeout in seconds
    """

    def __init__(self, base_url: str = DEFAULT_BASE_URL, timeout: float = DEFAULT_TIMEOUT):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers.update({"Content-Type": "application/json"})

    def list_customers(self) -> list[dict]:
        return [parse_customer(c) for c in self._request("GET", "/customers")]

    def add_customer(self, name: str, address: str, initial_usage: float = 0) -> dict:
        data = self._request(
            "POST",
            "/customers",
            {"name": name, "address": address, "initialUsage": initial_usage},
        )
        return parse_customer(data["customer"])

    def update_usage(self, customer_id: int, usage: float) -> dict:
        data = self._request("PUT", f"/customers/{customer_id}/usage", {"usage": usage})
        return parse_customer(data["customer"])

    def delete_customer(self, customer_id: int) -> bool:
        return self._request("DELETE", f"/customers/{customer_id}")["success"]

    def calculate_bill(self, usage: float, offline_fallback: bool = False) -> dict:
        """
        Asks the server for a bill
        Args:
            usage: usage in kWh
            offline_fallback: compute the bill locally when the server can't be reached

        Returns:
            dict with usage, amount, rate and message; offline results carry "offline": True
        """
        try:
            return self._request("POST", "/calculate-bill", {"usage": usage})
        except (requests.ConnectionError, requests.Timeout) as e:
            if not offline_fallback:
                raise
            logger.warning(f"server unreachable, calculating bill offline: {e}")
            result = calculate_bill(usage)
            result["offline"] = True
            return result

    def detect_anomalies(self, usage_history: list[float]) -> dict:
        return self._request("POST", "/detect-anomalies", {"usageHistory": usage_history})

    def health(self) -> dict:
        return self._request("GET", "/health")

    def _request(self, method: str, path: str, payload: dict = None):
        response = self.session.request(
            method, f"{self.base_url}{path}", json=payload, timeout=self.timeout
        )
        logger.info(f"{method} {path} response status code: {response.status_code}")
        response.raise_for_status()
        return response.json()


def parse_customer(customer: dict) -> dict:
    """turns the created_at string of a customer into a datetime"""
    customer = dict(customer)
    if customer.get("created_at"):
        customer["created_at"] = parser.isoparse(customer["created_at"])
    return customer
