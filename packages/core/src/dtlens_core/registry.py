"""npm registry lookups.

Only the package document's homepage is needed, so this stays a thin wrapper
around one GET per package. Callers own the client lifetime through
``async with RegistryClient(...)``.
"""

from __future__ import annotations

import logging
from urllib.parse import quote

import httpx

logger = logging.getLogger(__name__)

NPM_REGISTRY = "https://registry.npmjs.org"
_DEFAULT_TIMEOUT = 10.0


class RegistryClient:
    def __init__(self, base_url: str = NPM_REGISTRY, timeout: float = _DEFAULT_TIMEOUT):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout),
                headers={"Accept": "application/json"},
            )
        return self._client

    async def close(self) -> None:
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self):
        return self

    async def __aexit__(self, *args):
        await self.close()

    async def info(self, package_name: str) -> dict | None:
        """Return the registry document for ``package_name``, or None if it is not published.

        Raises httpx.HTTPError on transport failures and non-404 error statuses.
        """
        if not package_name:
            return None
        client = await self._get_client()
        resp = await client.get(f"{self.base_url}/{quote(package_name, safe='@')}")
        if resp.status_code == 404:
            logger.debug("Package %s not found in registry", package_name)
            return None
        resp.raise_for_status()
        document = resp.json()
        if not isinstance(document, dict):
            raise ValueError(f"Unexpected registry response for {package_name!r}: {type(document).__name__}")
        return document


def homepage_of(document: dict | None) -> str | None:
    """Pull the homepage out of a registry document.

    Falls back to the ``latest`` version's manifest for packuments that only
    carry the field per version.
    """
    if not isinstance(document, dict):
        return None
    homepage = document.get("homepage")
    if homepage:
        return homepage
    latest = (document.get("dist-tags") or {}).get("latest")
    if latest:
        return ((document.get("versions") or {}).get(latest) or {}).get("homepage")
    return None
