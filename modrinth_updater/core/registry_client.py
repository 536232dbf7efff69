"""Read-only Modrinth registry client.

Two operations: list the releases of a project for a game version and
loader, and download a release file. Neither retries; a failure is
reported to the caller, which decides what it means for the run.
"""

from __future__ import annotations

import json
import logging
from urllib.parse import quote

import httpx
from pydantic import TypeAdapter, ValidationError

from modrinth_updater.config import UpdaterSettings
from modrinth_updater.core.errors import (
    DownloadFailed,
    RegistryBadResponse,
    RegistryUnreachable,
)
from modrinth_updater.models.modlist import LoaderType
from modrinth_updater.models.releases import ReleaseRecord

logger = logging.getLogger(__name__)

_RELEASE_LIST = TypeAdapter(list[ReleaseRecord])


class RegistryClient:
    """Async client for the registry's version and file endpoints.

    Parameters
    ----------
    settings:
        Runtime settings; supplies the API base URL and User-Agent.
    transport:
        Optional httpx transport, used by tests to serve canned responses.
    """

    def __init__(
        self,
        settings: UpdaterSettings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings or UpdaterSettings()
        self._base_url = self._settings.api_base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            headers={"User-Agent": self._settings.user_agent},
            follow_redirects=True,
            transport=transport,
        )

    async def __aenter__(self) -> RegistryClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    def api_url(self, path: str) -> str:
        """Join an endpoint path onto the API base URL."""
        return f"{self._base_url}/{path.lstrip('/')}"

    # ------------------------------------------------------------------
    # Releases
    # ------------------------------------------------------------------

    async def query_releases(
        self,
        identifier: str,
        platform_version: str,
        loader_type: LoaderType | str,
    ) -> list[ReleaseRecord]:
        """Return the project's releases for one game version and loader.

        The list comes back in registry order (newest first) and is not
        re-sorted.

        Raises
        ------
        RegistryUnreachable
            On transport errors and 5xx responses.
        RegistryBadResponse
            On any other non-success status, a non-JSON body, or a payload
            that is not a list of release records.
        """
        url = self.api_url(f"/project/{quote(identifier, safe='')}/version")
        params = {
            "game_versions": json.dumps([platform_version]),
            "loaders": json.dumps([LoaderType(loader_type).value]),
        }
        logger.debug("GET %s %s", url, params)

        try:
            response = await self._client.get(url, params=params)
        except httpx.RequestError as exc:
            raise RegistryUnreachable(
                f"Could not reach the registry: {exc}", artifact=identifier
            ) from exc

        if response.status_code >= 500:
            raise RegistryUnreachable(
                f"Registry unavailable (HTTP {response.status_code})",
                artifact=identifier,
            )
        if not response.is_success:
            raise RegistryBadResponse(
                f"Registry rejected the query (HTTP {response.status_code})",
                artifact=identifier,
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise RegistryBadResponse(
                f"Registry returned invalid JSON: {exc}", artifact=identifier
            ) from exc

        try:
            return _RELEASE_LIST.validate_python(payload)
        except ValidationError as exc:
            raise RegistryBadResponse(
                f"Registry payload does not match the release schema: "
                f"{exc.error_count()} error(s)",
                artifact=identifier,
            ) from exc

    # ------------------------------------------------------------------
    # Files
    # ------------------------------------------------------------------

    async def download(self, identifier: str, url: str) -> bytes:
        """Fetch a release file's bytes.

        Raises ``DownloadFailed`` on transport errors or non-success status.
        """
        logger.debug("Downloading %s from %s", identifier, url)
        try:
            async with self._client.stream("GET", url) as response:
                if not response.is_success:
                    raise DownloadFailed(
                        f"Failed to download file from {url} "
                        f"(HTTP {response.status_code})",
                        artifact=identifier,
                    )
                chunks = [chunk async for chunk in response.aiter_bytes()]
        except httpx.RequestError as exc:
            raise DownloadFailed(
                f"Failed to download file from {url}: {exc}", artifact=identifier
            ) from exc
        return b"".join(chunks)
