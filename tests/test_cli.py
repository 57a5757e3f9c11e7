"""Tests for the command line front end."""

import json

import pytest
from fastapi.testclient import TestClient

from tailnet_routes.__main__ import main
from tailnet_routes.client import Client

from conftest import API_KEY, BASE_URL


@pytest.fixture
def cli_client(control_plane):
    return Client(API_KEY, base_url=BASE_URL, http_client=TestClient(control_plane.app))


def test_get(cli_client, control_plane, capsys):
    control_plane.add_device("dev1", advertised=["10.0.0.0/24"], enabled=["10.0.0.0/24"])

    assert main(["get", "dev1"], client=cli_client) == 0

    out = json.loads(capsys.readouterr().out)
    assert out == {"advertisedRoutes": ["10.0.0.0/24"], "enabledRoutes": ["10.0.0.0/24"]}


def test_set(cli_client, control_plane, capsys):
    control_plane.add_device("dev1")

    assert main(["set", "dev1", "10.0.0.0/24", "2001:db8::/32"], client=cli_client) == 0

    out = json.loads(capsys.readouterr().out)
    assert out["enabledRoutes"] == ["10.0.0.0/24", "2001:db8::/32"]
    assert control_plane.requests[-1][3] == b'{"routes":["10.0.0.0/24","2001:db8::/32"]}'


def test_set_without_prefixes_clears(cli_client, control_plane, capsys):
    control_plane.add_device("dev1", enabled=["10.0.0.0/24"])

    assert main(["set", "dev1"], client=cli_client) == 0
    assert json.loads(capsys.readouterr().out)["enabledRoutes"] == []


def test_api_error_exit_status(cli_client, capsys):
    """Unknown devices fail with exit status 1 and nothing on stdout."""
    assert main(["get", "missing"], client=cli_client) == 1
    assert capsys.readouterr().out == ""


def test_invalid_prefix_is_usage_error(cli_client):
    with pytest.raises(SystemExit) as exc_info:
        main(["set", "dev1", "10.0.0.1/24"], client=cli_client)
    assert exc_info.value.code == 2
