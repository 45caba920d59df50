"""
Gelato Relay HTTP Client

Thin httpx client over the Gelato Relay and 1Balance REST endpoints. It
maps one method to one endpoint and leaves status interpretation to the
adapter. HTTP errors are raised as ``httpx.HTTPStatusError``.
"""

from typing import Any, Dict, List, Optional

import httpx

from .constants import API_URL


class GelatoRelayClient(httpx.AsyncClient):
    """
    httpx.AsyncClient bound to the Gelato Relay API.

    Safe for concurrent use; one instance is shared by all calls of an adapter.

    Usage:
        ```python
        async with GelatoRelayClient() as client:
            networks = await client.get_supported_networks()
        ```
    """

    def __init__(self, api_url: str = API_URL, timeout: float = 60.0, **kwargs):
        """
        Args:
            api_url: Gelato Relay API base URL.
            timeout: Request timeout in seconds.
            **kwargs: Extra httpx.AsyncClient arguments (headers, transport, ...).
        """
        super().__init__(base_url=api_url, timeout=timeout, **kwargs)

    async def _post_json(self, path: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        response = await self.post(path, json=payload)
        response.raise_for_status()
        return response.json()

    async def sponsored_call(
        self,
        chain_id: int,
        target: str,
        data: str,
        sponsor_api_key: str,
    ) -> Dict[str, Any]:
        """POST ``/relays/v2/sponsored-call``; returns the JSON body (``taskId``)."""
        return await self._post_json(
            "/relays/v2/sponsored-call",
            {
                "chainId": str(chain_id),
                "target": target,
                "data": data,
                "sponsorApiKey": sponsor_api_key,
            },
        )

    async def sponsored_call_erc2771(
        self,
        struct: Dict[str, Any],
        user_signature: str,
        sponsor_api_key: str,
    ) -> Dict[str, Any]:
        """POST ``/relays/v2/sponsored-call-erc2771`` with a signed user struct."""
        payload = dict(struct)
        payload["chainId"] = str(payload["chainId"])
        payload.update({
            "sponsorApiKey": sponsor_api_key,
            "userSignature": user_signature,
        })
        return await self._post_json("/relays/v2/sponsored-call-erc2771", payload)

    async def get_task_status(self, task_id: str) -> Optional[Dict[str, Any]]:
        """GET ``/tasks/status/{task_id}``; returns the ``task`` object or None."""
        response = await self.get(f"/tasks/status/{task_id}")
        response.raise_for_status()
        return response.json().get("task")

    async def get_supported_networks(self) -> List[str]:
        """GET ``/relays/v2``; chain ids are returned as decimal strings."""
        response = await self.get("/relays/v2")
        response.raise_for_status()
        return [str(chain) for chain in response.json().get("relays", [])]

    async def get_sponsor_balance(self, network_group: str, sponsor: str) -> Optional[Dict[str, Any]]:
        """GET the 1Balance sponsor record for ``sponsor`` in ``network_group``."""
        response = await self.get(f"/1balance/networks/{network_group}/sponsors/{sponsor}")
        response.raise_for_status()
        return response.json().get("sponsor")
