"""
Thin async client for the Revolut Merchant API (orders and captures).

One attempt per call, no retries. Transport and HTTP failures are raised
as PaymentProviderError so callers decide how to surface them.
"""

from typing import Any, Optional

import httpx

from adventure_api.core.config import Settings
from adventure_api.core.logging import get_logger
from adventure_api.core.metrics import record_external_call

logger = get_logger(__name__)


class PaymentProviderError(Exception):
    def __init__(self, message: str, status_code: Optional[int] = None, detail: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.detail = detail


class RevolutClient:
    def __init__(
        self,
        api_key: str,
        base_url: str,
        api_version: str,
        redirect_url: str,
        timeout: float = 15.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.redirect_url = redirect_url
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            transport=transport,
            headers={
                "Accept": "application/json",
                "Authorization": f"Bearer {api_key}",
                "Revolut-Api-Version": api_version,
            },
        )

    @classmethod
    def from_settings(cls, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None) -> "RevolutClient":
        return cls(
            api_key=settings.REVOLUT_SECRET_API_KEY,
            base_url=settings.REVOLUT_API_URL,
            api_version=settings.REVOLUT_API_VERSION,
            redirect_url=settings.PAYMENT_REDIRECT_URL,
            timeout=settings.HTTP_TIMEOUT_SECONDS,
            transport=transport,
        )

    async def _request(self, method: str, path: str, **kwargs) -> dict[str, Any]:
        try:
            response = await self._client.request(method, path, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            record_external_call("revolut", "error")
            detail = e.response.text
            logger.error(
                "payment_provider_error",
                method=method,
                path=path,
                status_code=e.response.status_code,
                detail=detail,
            )
            raise PaymentProviderError(
                f"Payment provider returned {e.response.status_code}",
                status_code=e.response.status_code,
                detail=detail,
            ) from e
        except httpx.HTTPError as e:
            record_external_call("revolut", "error")
            logger.error("payment_provider_unreachable", method=method, path=path, error=str(e))
            raise PaymentProviderError("Payment provider unreachable") from e

        record_external_call("revolut", "success")
        if not response.content:
            return {}
        return response.json()

    async def create_order(self, amount: float, currency: str, description: str) -> dict[str, Any]:
        """Create a manually-captured order; `amount` is in major units."""
        payload = {
            "amount": int(round(amount * 100)),
            "currency": currency,
            "description": description,
            "capture_mode": "manual",
            "redirect_url": self.redirect_url,
        }
        order = await self._request("POST", "/api/orders", json=payload)
        logger.info("payment_order_created", order_id=order.get("id"), amount=payload["amount"], currency=currency)
        return order

    async def capture_order(self, order_id: str) -> dict[str, Any]:
        result = await self._request("POST", f"/api/orders/{order_id}/capture")
        logger.info("payment_order_captured", order_id=order_id)
        return result

    async def get_order(self, order_id: str) -> dict[str, Any]:
        return await self._request("GET", f"/api/orders/{order_id}")

    async def aclose(self) -> None:
        await self._client.aclose()
