# nexo_clinic/services/payments.py
"""
Pasarela mínima con la API REST de Stripe (form-encoded, auth básica).
Sin STRIPE_SECRET_KEY devuelve respuestas simuladas para desarrollo.
"""
from __future__ import annotations

import logging
import uuid
from typing import Any, Dict, Optional

import requests

logger = logging.getLogger(__name__)


class PaymentProviderError(Exception):
    """El proveedor de pagos no respondió correctamente."""


def to_cents(amount: float) -> int:
    return int(round(float(amount) * 100))


class StripeGateway:
    def __init__(self, secret_key: Optional[str], api_base: str = "https://api.stripe.com/v1",
                 timeout: float = 5):
        self.secret_key = secret_key
        self.api_base = api_base.rstrip("/")
        self.timeout = timeout

    @property
    def mocked(self) -> bool:
        return not self.secret_key

    def _post(self, path: str, data: Dict[str, Any]) -> Dict[str, Any]:
        try:
            r = requests.post(
                f"{self.api_base}/{path}",
                data=data,
                auth=(self.secret_key, ""),
                timeout=self.timeout,
            )
            r.raise_for_status()
            return r.json()
        except (requests.RequestException, ValueError) as e:
            logger.warning("[payments] error en %s: %s", path, e)
            raise PaymentProviderError(str(e)) from e

    def create_payment_intent(self, amount: float, currency: str = "eur") -> Dict[str, Any]:
        cents = to_cents(amount)
        if self.mocked:
            pid = f"pi_mock_{uuid.uuid4().hex[:16]}"
            return {"id": pid, "amount": cents, "currency": currency,
                    "client_secret": f"{pid}_secret_mock"}
        return self._post("payment_intents", {"amount": cents, "currency": currency})

    def create_subscription(self, customer_id: str, price_id: str) -> Dict[str, Any]:
        if self.mocked:
            return {"id": f"sub_mock_{uuid.uuid4().hex[:16]}", "status": "incomplete",
                    "customer": customer_id}
        return self._post("subscriptions", {"customer": customer_id, "items[0][price]": price_id})
