"""In-process fake registry for exercising the client over real HTTP."""

import json
import socket
from typing import Any, Optional

from aiohttp import web

MANIFEST_BODY = {
    "schemaVersion": 2,
    "mediaType": "application/vnd.docker.distribution.manifest.v2+json",
    "config": {
        "mediaType": "application/vnd.docker.container.image.v1+json",
        "size": 1469,
        "digest": "sha256:" + "a" * 64,
    },
    "layers": [
        {
            "mediaType": "application/vnd.docker.image.rootfs.diff.tar.gzip",
            "size": 2811969,
            "digest": "sha256:" + "b" * 64,
        },
        {
            "mediaType": "application/vnd.docker.image.rootfs.diff.tar.gzip",
            "size": 1024,
            "digest": "sha256:" + "c" * 64,
        },
    ],
}


def free_port() -> int:
    """Return a local TCP port with nothing listening on it."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


class FakeRegistry:
    """Configurable registry: /v2/ endpoint, /token endpoint, manifests.

    Tests set the ``*_status``/``*_body``/``*_headers`` attributes before
    issuing requests and inspect the recorded requests afterwards.
    """

    def __init__(self) -> None:
        self.host = ""
        self.service = "fake-registry"

        self.v2_status = 200
        self.v2_headers: dict[str, str] = {
            "Docker-Distribution-Api-Version": "registry/2.0"
        }

        self.token_status = 200
        self.token_body: Any = {"access_token": "abc"}

        self.manifest_status = 200
        self.manifest_body: Any = MANIFEST_BODY

        self.v2_requests: list[dict[str, str]] = []
        self.token_requests: list[dict[str, str]] = []
        self.manifest_requests: list[dict[str, str]] = []
        self.manifest_paths: list[str] = []

        self.app = web.Application()
        self.app.router.add_get("/v2/", self.handle_v2)
        self.app.router.add_get("/token", self.handle_token)
        self.app.router.add_get(
            "/v2/{name:.+}/manifests/{reference}", self.handle_manifest
        )

    @property
    def realm(self) -> str:
        return f"http://{self.host}/token"

    def require_bearer(self, realm: Optional[str] = None) -> None:
        """Make /v2/ answer 401 with a Bearer challenge."""
        self.challenge(
            f'Bearer realm="{realm or self.realm}",service="{self.service}"'
        )

    def challenge(self, header: str) -> None:
        """Make /v2/ answer 401 with a raw WWW-Authenticate value."""
        self.v2_status = 401
        self.v2_headers["WWW-Authenticate"] = header

    @staticmethod
    def _body(payload: Any) -> bytes:
        if isinstance(payload, bytes):
            return payload
        if not isinstance(payload, str):
            payload = json.dumps(payload)
        return payload.encode("utf-8")

    async def handle_v2(self, request: web.Request) -> web.Response:
        self.v2_requests.append(
            {key.lower(): value for key, value in request.headers.items()}
        )
        return web.Response(status=self.v2_status, headers=self.v2_headers)

    async def handle_token(self, request: web.Request) -> web.Response:
        self.token_requests.append(dict(request.query))
        return web.Response(
            status=self.token_status,
            body=self._body(self.token_body),
            content_type="application/json",
        )

    async def handle_manifest(self, request: web.Request) -> web.Response:
        self.manifest_requests.append(
            {key.lower(): value for key, value in request.headers.items()}
        )
        self.manifest_paths.append(request.path)
        return web.Response(
            status=self.manifest_status,
            body=self._body(self.manifest_body),
            content_type="application/vnd.docker.distribution.manifest.v2+json",
        )
