"""
Order Intake Client

HTTP client for the order-intake API that persists submitted orders.
"""

import json
import logging
from typing import Any, Optional

import httpx

from ..models.checkout import OrderDraft

logger = logging.getLogger(__name__)


class OrderIntakeClient:
    """Client for creating and looking up orders"""

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize order-intake client.

        Args:
            base_url: Base URL of the order-intake API
            timeout: Seconds before a request is abandoned
            transport: Optional transport override, used to route requests in-process
        """
        self.base_url = base_url.rstrip("/")
        self._http_client = httpx.AsyncClient(timeout=timeout, transport=transport)

    async def close(self) -> None:
        """Close HTTP client"""
        await self._http_client.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        body: Optional[dict] = None,
    ) -> dict[str, Any]:
        """
        Make an HTTP request and decode the JSON body.

        Error responses that still carry a JSON body are returned as-is so the
        caller can read ``success`` and ``message``; anything else raises
        ``httpx.HTTPStatusError``.
        """
        url = f"{self.base_url}{path}"
        body_str = json.dumps(body) if body is not None else None

        response = await self._http_client.request(
            method=method,
            url=url,
            headers={
                "Content-Type": "application/json",
                "Accept": "application/json",
            },
            content=body_str,
        )

        if response.status_code >= 400:
            logger.error(f"Request failed: {response.status_code} - {response.text}")
            try:
                data = response.json()
            except ValueError:
                response.raise_for_status()
            if not isinstance(data, dict):
                response.raise_for_status()
            return data

        return response.json()

    async def create_order(self, draft: OrderDraft) -> dict[str, Any]:
        """Submit an order"""
        return await self._request(
            "POST",
            "/api/orders",
            body=draft.model_dump(mode="json", by_alias=True),
        )

    async def get_order(self, order_id: str) -> dict[str, Any]:
        """Get order details"""
        return await self._request("GET", f"/api/orders/{order_id}")
