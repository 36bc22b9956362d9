"""Test configuration and fixtures.

HTTP is faked with MagicMock sessions keyed by URL; DNS is faked by patching
the resolver's host lookup so no test touches the network.
"""

import json
from typing import Callable, Optional
from unittest.mock import MagicMock

import pytest
import requests
from requests.structures import CaseInsensitiveDict

from klippy.modules.registry import Manifest

REGISTRY = "https://registry-1.docker.io"
AUTH_REALM = "https://auth.docker.io/token"
AUTH_SERVICE = "registry.docker.io"
CHALLENGE = f'Bearer realm="{AUTH_REALM}",service="{AUTH_SERVICE}"'


class FakeJSONDecodeError(requests.exceptions.JSONDecodeError):
    def __init__(self):
        super().__init__("Expected error", "", 0)


def make_response(
    status_code: int = 200,
    json_body=None,
    headers: Optional[dict] = None,
    invalid_json: bool = False,
) -> MagicMock:
    """Build a fake requests.Response."""
    resp = MagicMock(spec=requests.Response)
    resp.status_code = status_code
    resp.reason = "OK" if status_code == 200 else "Error"
    resp.headers = CaseInsensitiveDict(headers or {})
    if invalid_json:
        resp.json.side_effect = FakeJSONDecodeError
    else:
        resp.json.return_value = json_body
    return resp


def make_session(routes: dict) -> MagicMock:
    """Build a fake requests.Session whose GETs are answered from routes by URL."""
    session = MagicMock(spec=requests.Session)
    session.__enter__.return_value = session
    session.__exit__.return_value = False

    def get(url, headers=None, **kwargs):
        if url not in routes:
            raise AssertionError(f"Unexpected request to {url}")
        return routes[url]

    session.get.side_effect = get
    return session


def history_entry(cmd, created="2018-01-27T04:14:00.804659581Z", **extra) -> dict:
    """A manifest history record with its v1Compatibility document encoded as a string."""
    layer = {
        "id": extra.pop("id", "f1d2d2f924e986ac86fdf7b36c94bcdf32beec15"),
        "created": created,
        "docker_version": "17.06.2",
        "os": "linux",
        "container_config": {"Cmd": cmd},
    }
    layer.update(extra)
    return {"v1Compatibility": json.dumps(layer)}


@pytest.fixture
def manifest_body() -> dict:
    """A schema 1 manifest for library/busybox:latest, outermost layer first."""
    return {
        "schemaVersion": 1,
        "name": "library/busybox",
        "tag": "latest",
        "architecture": "amd64",
        "fsLayers": [
            {"blobSum": "sha256:a3ed95caeb02ffe68cdd9fd84406680ae93d633cb16422d00e8a7c22955b46d4"},
            {"blobSum": "sha256:57c14dd66db0390dbf0a9d1a9bfc1d3fe0e8a4d1c2a3a0e0e1f6f4fa4b2b1c3d"},
        ],
        "history": [
            history_entry(["/bin/sh", "-c", "#(nop) ", 'CMD ["sh"]'], throwaway=True),
            history_entry(
                ["/bin/sh", "-c", "#(nop) ADD file:6ce6 in / "],
                created="2018-01-26T22:00:00.000000000Z",
                id="a2b2c2d2",
            ),
        ],
    }


@pytest.fixture
def manifest(manifest_body) -> Manifest:
    return Manifest.from_dict(manifest_body)


@pytest.fixture
def resolvable_hosts(mocker) -> set:
    """Hosts the fake DNS knows about; every other lookup fails."""
    hosts = {"myregistry.example.com", "localhost", "registry.example"}
    mocker.patch(
        "klippy.modules.resolver.resolver.host_resolves",
        side_effect=lambda hostname: hostname in hosts,
    )
    return hosts


@pytest.fixture
def session_factory() -> Callable[[dict], MagicMock]:
    return make_session
