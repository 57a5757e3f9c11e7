"""Shared fixtures: an in-process fake control plane served by FastAPI."""

import json
from typing import Dict, List, Optional, Tuple

import pytest
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response
from fastapi.testclient import TestClient

from tailnet_routes.client import Client

BASE_URL = "http://control.test"
API_KEY = "tskey-test"
USER_AGENT = "tailnet-routes-tests"


class FakeControlPlane:
    """Keeps per-device routes in memory and records every request it gets."""

    def __init__(self):
        self.devices: Dict[str, Dict[str, List[str]]] = {}
        self.requests: List[Tuple[str, str, dict, bytes]] = []
        self.forced: Optional[Tuple[int, bytes]] = None
        self.app = self._build_app()

    def add_device(self, device_id: str, advertised=(), enabled=()):
        self.devices[device_id] = {"advertised": list(advertised), "enabled": list(enabled)}

    def respond_with(self, status: int, body: bytes):
        """Answer every following request with a fixed status and raw body."""
        self.forced = (status, body)

    def _routes_body(self, device_id: str) -> dict:
        device = self.devices[device_id]
        return {"advertisedRoutes": device["advertised"], "enabledRoutes": device["enabled"]}

    def _build_app(self) -> FastAPI:
        app = FastAPI(title="Fake control plane")

        @app.get("/api/v2/device/{device_id}/routes")
        async def get_routes(device_id: str, request: Request):
            self.requests.append(("GET", request.url.path, dict(request.headers), b""))
            if self.forced:
                return Response(content=self.forced[1], status_code=self.forced[0])
            if device_id not in self.devices:
                return JSONResponse(status_code=404, content={"message": "device not found"})
            return self._routes_body(device_id)

        @app.post("/api/v2/device/{device_id}/routes")
        async def set_routes(device_id: str, request: Request):
            body = await request.body()
            self.requests.append(("POST", request.url.path, dict(request.headers), body))
            if self.forced:
                return Response(content=self.forced[1], status_code=self.forced[0])
            if device_id not in self.devices:
                return JSONResponse(status_code=404, content={"message": "device not found"})
            payload = json.loads(body)
            self.devices[device_id]["enabled"] = list(payload["routes"])
            return self._routes_body(device_id)

        return app


@pytest.fixture
def control_plane():
    """Fixture to provide an empty fake control plane."""
    return FakeControlPlane()


@pytest.fixture
def client(control_plane):
    """Fixture to provide a routes client wired to the fake control plane."""
    http_client = TestClient(control_plane.app)
    yield Client(API_KEY, base_url=BASE_URL, user_agent=USER_AGENT, http_client=http_client)
    http_client.close()
