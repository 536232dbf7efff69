"""Tests for RegistryClient — query encoding, schema handling, error mapping."""

from __future__ import annotations

import json

import httpx
import pytest

from modrinth_updater.core.errors import (
    DownloadFailed,
    RegistryBadResponse,
    RegistryUnreachable,
)
from modrinth_updater.core.registry_client import RegistryClient
from modrinth_updater.models.modlist import LoaderType


class TestQueryReleases:
    @pytest.mark.asyncio
    async def test_returns_records_in_registry_order(self, registry, fake_modrinth):
        fake_modrinth.add_release("sodium", b"new", release_id="v2")
        fake_modrinth.add_release("sodium", b"old", release_id="v1")

        records = await registry.query_releases("sodium", "1.19.2", LoaderType.FABRIC)

        assert [r.id for r in records] == ["v2", "v1"]
        assert records[0].files[0].is_primary is True

    @pytest.mark.asyncio
    async def test_query_parameters_are_json_arrays(self, registry, fake_modrinth):
        await registry.query_releases("sodium", "1.19.2", LoaderType.QUILT)

        request = fake_modrinth.requests[-1]
        assert request.url.path == "/v2/project/sodium/version"
        assert json.loads(request.url.params["game_versions"]) == ["1.19.2"]
        assert json.loads(request.url.params["loaders"]) == ["quilt"]
        assert request.headers["User-Agent"].startswith("modrinth-updater/")

    @pytest.mark.asyncio
    async def test_empty_list(self, registry):
        assert await registry.query_releases("unknown", "1.19.2", "fabric") == []

    @pytest.mark.asyncio
    async def test_server_error_is_unreachable(self, registry, fake_modrinth):
        fake_modrinth.version_status["sodium"] = 503
        with pytest.raises(RegistryUnreachable) as info:
            await registry.query_releases("sodium", "1.19.2", LoaderType.FABRIC)
        assert info.value.artifact == "sodium"

    @pytest.mark.asyncio
    async def test_client_error_is_bad_response(self, registry, fake_modrinth):
        fake_modrinth.version_status["sodium"] = 404
        with pytest.raises(RegistryBadResponse, match="HTTP 404"):
            await registry.query_releases("sodium", "1.19.2", LoaderType.FABRIC)

    @pytest.mark.asyncio
    async def test_invalid_json(self, registry, fake_modrinth):
        fake_modrinth.raw_version_body["sodium"] = b"<html>oops</html>"
        with pytest.raises(RegistryBadResponse, match="invalid JSON"):
            await registry.query_releases("sodium", "1.19.2", LoaderType.FABRIC)

    @pytest.mark.asyncio
    async def test_wrong_shape(self, registry, fake_modrinth):
        fake_modrinth.raw_version_body["sodium"] = json.dumps({"error": "nope"}).encode()
        with pytest.raises(RegistryBadResponse, match="schema"):
            await registry.query_releases("sodium", "1.19.2", LoaderType.FABRIC)

    @pytest.mark.asyncio
    async def test_record_missing_files_shape(self, registry, fake_modrinth):
        fake_modrinth.raw_version_body["sodium"] = json.dumps(
            [{"id": "v1", "version_type": "release", "files": [{"filename": "no-url.jar"}]}]
        ).encode()
        with pytest.raises(RegistryBadResponse):
            await registry.query_releases("sodium", "1.19.2", LoaderType.FABRIC)

    @pytest.mark.asyncio
    async def test_transport_error_is_unreachable(self, settings):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = RegistryClient(settings, transport=httpx.MockTransport(handler))
        async with client:
            with pytest.raises(RegistryUnreachable, match="connection refused"):
                await client.query_releases("sodium", "1.19.2", LoaderType.FABRIC)


class TestDownload:
    @pytest.mark.asyncio
    async def test_download_bytes(self, registry, fake_modrinth):
        record = fake_modrinth.add_release("sodium", b"jar bytes")
        data = await registry.download("sodium", record["files"][0]["url"])
        assert data == b"jar bytes"

    @pytest.mark.asyncio
    async def test_missing_file(self, registry):
        with pytest.raises(DownloadFailed) as info:
            await registry.download("sodium", "https://cdn.modrinth.com/data/none.jar")
        assert info.value.artifact == "sodium"
        assert "HTTP 404" in str(info.value)

    @pytest.mark.asyncio
    async def test_transport_error(self, settings):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        async with RegistryClient(settings, transport=httpx.MockTransport(handler)) as client:
            with pytest.raises(DownloadFailed, match="timed out"):
                await client.download("sodium", "https://cdn.modrinth.com/data/a.jar")

    def test_api_url(self, settings):
        client = RegistryClient(settings.model_copy(update={"api_base_url": "http://h/v2/"}))
        assert client.api_url("/project/x/version") == "http://h/v2/project/x/version"
