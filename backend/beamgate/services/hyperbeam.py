import logging
from typing import Any
from urllib.parse import quote

import httpx

from beamgate.config import HYPERBEAM_API_BASE
from beamgate.errors import HyperbeamAPIError

logger = logging.getLogger(__name__)


def parse_json_or(resp: httpx.Response, default: Any) -> Any:
    """Decode a response body as JSON, returning ``default`` if it isn't JSON."""
    try:
        return resp.json()
    except ValueError:
        return default


class HyperbeamClient:
    """Client for the Hyperbeam VM API.

    Every call opens its own ``httpx.AsyncClient``; nothing is shared between
    requests. Non-success responses raise :class:`HyperbeamAPIError` carrying
    the upstream status code so it can be relayed to the caller.
    """

    def __init__(self, api_key: str, base_url: str = HYPERBEAM_API_BASE):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key

    async def _get_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient()

    def _vm_url(self, session_id: str) -> str:
        return f"{self.base_url}/vm/{quote(session_id, safe='')}"

    def _auth_headers(self) -> dict:
        return {"Authorization": f"Bearer {self.api_key}"}

    async def list_vms(self) -> list[dict]:
        """GET /vm — active VMs for this account."""
        async with await self._get_client() as client:
            resp = await client.get(f"{self.base_url}/vm", headers=self._auth_headers())
        if not resp.is_success:
            logger.warning("Listing VMs failed (%d)", resp.status_code)
            raise HyperbeamAPIError(
                "Failed to list VMs from Hyperbeam.",
                details=parse_json_or(resp, {}),
                status_code=resp.status_code,
            )
        return resp.json()

    async def create_vm(self, params: dict) -> dict:
        """POST /vm — returns at least ``session_id`` and ``embed_url``."""
        logger.info("Creating VM with tag %s", params.get("tag"))
        async with await self._get_client() as client:
            resp = await client.post(
                f"{self.base_url}/vm",
                headers={**self._auth_headers(), "Content-Type": "application/json"},
                json=params,
            )
        data = parse_json_or(resp, {"raw": resp.text})
        if not resp.is_success:
            logger.error("VM creation failed (%d): %s", resp.status_code, resp.text)
            raise HyperbeamAPIError(
                "Failed to create VM with Hyperbeam.",
                details=data,
                status_code=resp.status_code,
            )
        logger.info("Created VM %s", data.get("session_id") if isinstance(data, dict) else None)
        return data

    async def get_vm(self, session_id: str) -> dict:
        """GET /vm/{session_id}"""
        async with await self._get_client() as client:
            resp = await client.get(
                self._vm_url(session_id),
                headers=self._auth_headers(),
            )
        if not resp.is_success:
            logger.warning("Fetching VM %s failed (%d)", session_id, resp.status_code)
            raise HyperbeamAPIError(
                f"Failed to fetch VM {session_id} from Hyperbeam.",
                details=parse_json_or(resp, {}),
                status_code=resp.status_code,
            )
        return resp.json()

    async def delete_vm(self, session_id: str) -> None:
        """DELETE /vm/{session_id} — Hyperbeam answers 200 or 204 on success."""
        async with await self._get_client() as client:
            resp = await client.delete(
                self._vm_url(session_id),
                headers=self._auth_headers(),
            )
        if resp.status_code not in (200, 204):
            logger.warning("Terminating VM %s failed (%d)", session_id, resp.status_code)
            raise HyperbeamAPIError(
                f"Failed to terminate VM {session_id} via Hyperbeam.",
                details=parse_json_or(resp, {}),
                status_code=resp.status_code,
            )
        logger.info("Terminated VM %s", session_id)
