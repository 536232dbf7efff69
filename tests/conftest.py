"""Shared test fixtures for modrinth-updater."""

from __future__ import annotations

import hashlib
import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

import httpx
import pytest

from modrinth_updater.config import UpdaterSettings
from modrinth_updater.core.engine import SyncEngine
from modrinth_updater.core.events import EventBus
from modrinth_updater.core.registry_client import RegistryClient
from modrinth_updater.models.modlist import ModList
from modrinth_updater.models.sync import ConfirmationRequest, ProgressEvent

CDN = "https://cdn.modrinth.com/data"


class FakeModrinth:
    """In-memory stand-in for the Modrinth v2 API and CDN.

    Releases are keyed by (project, game version); the loader filter is
    recorded but not applied.
    """

    def __init__(self) -> None:
        self.versions: dict[tuple[str, str], list[dict[str, Any]]] = {}
        self.files: dict[str, bytes] = {}
        self.requests: list[httpx.Request] = []
        self.version_status: dict[str, int] = {}
        self.raw_version_body: dict[str, bytes] = {}

    # -- setup ---------------------------------------------------------

    def add_release(
        self,
        project: str,
        data: bytes,
        *,
        game_version: str = "1.19.2",
        version_type: str = "release",
        release_id: str | None = None,
        hashes: dict[str, str] | None = None,
        filename: str | None = None,
        primary: bool = True,
        serve: bytes | None = None,
    ) -> dict[str, Any]:
        """Append a release (oldest last) and serve its file on the CDN.

        *serve* overrides the bytes actually served, to simulate corruption.
        """
        key = (project, game_version)
        release_id = release_id or f"{project}-{len(self.versions.get(key, [])) + 1}"
        filename = filename or f"{project}-{release_id}.jar"
        url = f"{CDN}/{project}/{release_id}/{filename}"
        if hashes is None:
            hashes = {
                "sha256": hashlib.sha256(data).hexdigest(),
                "sha1": hashlib.sha1(data).hexdigest(),
                "sha512": hashlib.sha512(data).hexdigest(),
            }
        record = {
            "id": release_id,
            "version_type": version_type,
            "name": f"{project} {release_id}",
            "files": [
                {
                    "url": url,
                    "filename": filename,
                    "primary": primary,
                    "hashes": hashes,
                    "size": len(data),
                }
            ],
        }
        self.versions.setdefault(key, []).append(record)
        self.files[url] = data if serve is None else serve
        return record

    # -- transport -----------------------------------------------------

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if path.startswith("/v2/project/") and path.endswith("/version"):
            project = path.split("/")[3]
            if project in self.version_status:
                return httpx.Response(self.version_status[project])
            if project in self.raw_version_body:
                return httpx.Response(200, content=self.raw_version_body[project])
            game_version = json.loads(request.url.params["game_versions"])[0]
            return httpx.Response(200, json=self.versions.get((project, game_version), []))
        url = str(request.url)
        if url in self.files:
            return httpx.Response(200, content=self.files[url])
        return httpx.Response(404)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    # -- inspection ----------------------------------------------------

    @property
    def downloads(self) -> list[str]:
        return [str(r.url) for r in self.requests if r.url.host == "cdn.modrinth.com"]

    def queried_versions(self, project: str) -> list[str]:
        return [
            json.loads(r.url.params["game_versions"])[0]
            for r in self.requests
            if r.url.path == f"/v2/project/{project}/version"
        ]


class CollectingSink:
    """Event sink that keeps every event it receives."""

    def __init__(self) -> None:
        self.events: list[ProgressEvent] = []

    @property
    def sink_name(self) -> str:
        return "collecting"

    def accept(self, event: ProgressEvent) -> None:
        self.events.append(event)

    def messages(self, artifact: str | None = None) -> list[str]:
        return [e.message for e in self.events if artifact is None or e.artifact == artifact]


class RecordingConfirm:
    """Confirmation callback with scripted answers per kind."""

    def __init__(self, answer: bool = True, **by_kind: bool) -> None:
        self.answer = answer
        self.by_kind = by_kind
        self.requests: list[ConfirmationRequest] = []

    def __call__(self, request: ConfirmationRequest) -> bool:
        self.requests.append(request)
        return self.by_kind.get(request.kind.value, self.answer)


@pytest.fixture
def fake_modrinth() -> FakeModrinth:
    """Provide an empty fake registry."""
    return FakeModrinth()


@pytest.fixture
def settings() -> UpdaterSettings:
    """Provide default settings, isolated from the environment."""
    return UpdaterSettings(_env_file=None)


@pytest.fixture
def registry(fake_modrinth: FakeModrinth, settings: UpdaterSettings) -> RegistryClient:
    """Provide a RegistryClient wired to the fake registry."""
    return RegistryClient(settings, transport=fake_modrinth.transport)


@pytest.fixture
def sink() -> CollectingSink:
    return CollectingSink()


@pytest.fixture
def events(sink: CollectingSink) -> EventBus:
    return EventBus([sink])


@pytest.fixture
def mods_dir(tmp_path: Path) -> Path:
    """Provide an empty mods folder with a modlist file next to the mods."""
    folder = tmp_path / "mods"
    folder.mkdir()
    (folder / ".modlist.json").write_text("{}", encoding="utf-8")
    return folder


@pytest.fixture
def make_modlist() -> Callable[..., ModList]:
    """Factory fixture: build a ModList with sensible defaults."""

    def _factory(
        mods: list[str],
        *,
        version: str = "1.19.2",
        loader: str = "fabric",
        allow_unstable: bool = False,
        allow_fail_hash: bool = False,
    ) -> ModList:
        return ModList.model_validate({
            "minecraftVersion": version,
            "loaderType": loader,
            "unsafe": {
                "allowFailHash": allow_fail_hash,
                "allowUnstable": allow_unstable,
            },
            "mods": mods,
        })

    return _factory


@pytest.fixture
def make_engine(
    registry: RegistryClient,
    events: EventBus,
    settings: UpdaterSettings,
    mods_dir: Path,
) -> Callable[..., SyncEngine]:
    """Factory fixture: build a SyncEngine against the fake registry."""

    def _factory(
        modlist: ModList,
        confirm: Callable[[ConfirmationRequest], bool] | None = None,
        target_dir: Path | None = None,
    ) -> SyncEngine:
        return SyncEngine(
            modlist,
            target_dir or mods_dir,
            confirm=confirm or RecordingConfirm(True),
            registry=registry,
            events=events,
            settings=settings,
        )

    return _factory


@pytest.fixture
def recording_confirm() -> Callable[..., RecordingConfirm]:
    return RecordingConfirm


def snapshot_dir(directory: Path) -> dict[str, bytes]:
    """Map every file directly in *directory* to its bytes."""
    return {p.name: p.read_bytes() for p in sorted(directory.iterdir()) if p.is_file()}


@pytest.fixture
def dir_contents() -> Callable[[Path], dict[str, bytes]]:
    return snapshot_dir
