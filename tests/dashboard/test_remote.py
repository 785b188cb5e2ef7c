"""Unit tests for remote-type classification and target parsing."""

from __future__ import annotations

import json

import pytest

from projectdash.dashboard.execution.remote import (
    get_container_hex,
    get_last_part_of_path,
    get_remote_type,
    parse_container_target,
    parse_ssh_target,
    wsl_unc_to_remote_uri,
)
from projectdash.dashboard.models.enums import RemoteType


@pytest.mark.parametrize(
    ("path", "expected"),
    [
        ("vscode-remote://ssh-remote+user@host.example", RemoteType.SSH),
        ("vscode-remote://ssh-remote+host/home/me/project", RemoteType.SSH),
        ("\\\\wsl$\\Ubuntu\\home\\me", RemoteType.WSL),
        ("//wsl$/Ubuntu/home/me", RemoteType.WSL),
        ("vscode-remote://wsl+Ubuntu/home/me", RemoteType.WSL),
        ("vscode-remote://attached-container+web", RemoteType.CONTAINER),
        ("vscode-remote://attached-container+web/app", RemoteType.CONTAINER),
        ("/home/me/project", RemoteType.NONE),
        ("C:\\Users\\me\\project", RemoteType.NONE),
        ("relative/path", RemoteType.NONE),
        ("vscode-remote://dev-container+abc/x", RemoteType.NONE),
        (" vscode-remote://ssh-remote+host", RemoteType.NONE),
        ("", RemoteType.NONE),
        (None, RemoteType.NONE),
    ],
)
def test_get_remote_type(path: str | None, expected: RemoteType) -> None:
    assert get_remote_type(path) is expected


def test_ssh_prefix_wins_over_other_patterns() -> None:
    """SSH is checked first, even if the rest of the path looks like WSL."""
    assert get_remote_type("vscode-remote://ssh-remote+\\\\wsl$\\x") is RemoteType.SSH


# ---------------------------------------------------------------------------
# Target parsing
# ---------------------------------------------------------------------------


def test_parse_ssh_target_with_folder() -> None:
    target = parse_ssh_target("vscode-remote://ssh-remote+alice@build-box/srv/app")
    assert target is not None
    assert target.user == "alice"
    assert target.hostname == "build-box"
    assert target.folder == "/srv/app"


def test_parse_ssh_target_without_folder() -> None:
    target = parse_ssh_target("vscode-remote://ssh-remote+build-box")
    assert target is not None
    assert target.user is None
    assert target.folder is None


def test_parse_ssh_target_empty_host() -> None:
    assert parse_ssh_target("vscode-remote://ssh-remote+") is None


def test_parse_container_target() -> None:
    target = parse_container_target("vscode-remote://attached-container+web/app/src")
    assert target is not None
    assert target.container_name == "web"
    assert target.folder == "/app/src"

    assert parse_container_target("vscode-remote://attached-container+") is None


# ---------------------------------------------------------------------------
# Container descriptor
# ---------------------------------------------------------------------------


def test_container_hex_encodes_compact_descriptor() -> None:
    encoded = get_container_hex("web")
    assert encoded is not None
    assert bytes.fromhex(encoded).decode() == '{"containerName":"/web","settings":{"context":"desktop-linux"}}'


def test_container_hex_custom_context() -> None:
    encoded = get_container_hex("db", "colima")
    assert encoded is not None
    assert json.loads(bytes.fromhex(encoded)) == {"containerName": "/db", "settings": {"context": "colima"}}


def test_container_hex_is_deterministic_and_lowercase() -> None:
    assert get_container_hex("web") == get_container_hex("web")
    assert get_container_hex("web") == get_container_hex("web").lower()


def test_container_hex_none() -> None:
    assert get_container_hex(None) is None


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def test_wsl_unc_to_remote_uri() -> None:
    assert wsl_unc_to_remote_uri("\\\\wsl$\\Ubuntu\\home\\me") == "vscode-remote://wsl+Ubuntu/home/me"


@pytest.mark.parametrize(
    ("path", "expected"),
    [
        ("/home/me/project", "project"),
        ("/home/me/project/", "project"),
        ("C:\\work\\app", "app"),
        ("/home/me/site.code-workspace", "site"),
        ("vscode-remote://ssh-remote+alice@box/srv/api", "api"),
        ("vscode-remote://ssh-remote+alice@box", "box"),
        ("", ""),
        (None, ""),
    ],
)
def test_get_last_part_of_path(path: str | None, expected: str) -> None:
    assert get_last_part_of_path(path) == expected
