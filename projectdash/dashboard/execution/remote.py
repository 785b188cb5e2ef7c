"""Remote-type classification of project paths.

A project path is a free-form string.  Its remote type is decided purely
from the string, in a fixed priority order:

1. ``vscode-remote://ssh-remote+...``                 -> SSH
2. ``\\\\wsl$\\<distro>\\...`` or ``vscode-remote://wsl+...``  -> WSL
3. ``vscode-remote://attached-container+...``         -> CONTAINER
4. anything else, including ``""``                    -> NONE (local)

Everything in this module is pure: no I/O, no failure mode for
classification.
"""

from __future__ import annotations

import json
from dataclasses import dataclass

from projectdash.dashboard.constants import (
    CONTAINER_REGEX,
    DEFAULT_CONTAINER_CONTEXT,
    DEV_CONTAINER_PREFIX,
    REMOTE_REGEX,
    SSH_REGEX,
    SSH_REMOTE_PREFIX,
    WORKSPACE_FILE_SUFFIX,
    WSL_DEFAULT_REGEX,
    WSL_REMOTE_PREFIX,
)
from projectdash.dashboard.models.enums import RemoteType


def get_remote_type(path: str | None) -> RemoteType:
    """Classify a project path.  Total over all strings."""
    if not path:
        return RemoteType.NONE
    if path.startswith(SSH_REMOTE_PREFIX):
        return RemoteType.SSH
    if WSL_DEFAULT_REGEX.match(path) or path.startswith(WSL_REMOTE_PREFIX):
        return RemoteType.WSL
    if path.startswith(DEV_CONTAINER_PREFIX):
        return RemoteType.CONTAINER
    return RemoteType.NONE


# -- Target parsing ------------------------------------------------------------


@dataclass(frozen=True)
class SshTarget:
    user: str | None
    hostname: str
    folder: str | None


@dataclass(frozen=True)
class ContainerTarget:
    container_name: str
    folder: str | None


def parse_ssh_target(path: str) -> SshTarget | None:
    """Split ``vscode-remote://ssh-remote+user@host/folder``.  ``None`` if malformed."""
    match = SSH_REGEX.match(path.removeprefix(SSH_REMOTE_PREFIX))
    if match is None:
        return None
    return SshTarget(user=match["user"], hostname=match["hostname"], folder=match["folder"])


def parse_container_target(path: str) -> ContainerTarget | None:
    """Split ``vscode-remote://attached-container+name/folder``.  ``None`` if malformed."""
    match = CONTAINER_REGEX.match(path.removeprefix(DEV_CONTAINER_PREFIX))
    if match is None:
        return None
    return ContainerTarget(container_name=match["containername"], folder=match["folder"])


def get_container_hex(container_name: str | None, context_name: str = DEFAULT_CONTAINER_CONTEXT) -> str | None:
    """Encode a container name the way the attached-container authority expects.

    The authority carries a hex-encoded compact JSON descriptor instead of the
    bare name::

        {"containerName":"/<name>","settings":{"context":"<context>"}}
    """
    if container_name is None:
        return None
    descriptor = {"containerName": f"/{container_name}", "settings": {"context": context_name}}
    text = json.dumps(descriptor, separators=(",", ":"), ensure_ascii=False)
    return text.encode("utf-8").hex()


def wsl_unc_to_remote_uri(path: str) -> str:
    """``\\\\wsl$\\Ubuntu\\home\\me`` -> ``vscode-remote://wsl+Ubuntu/home/me``."""
    rest = WSL_DEFAULT_REGEX.sub("", path, count=1).replace("\\", "/")
    return f"{WSL_REMOTE_PREFIX}{rest}"


def strip_remote_prefix(path: str) -> str:
    """Remove a leading ``vscode-remote://<type>+``, if any."""
    return REMOTE_REGEX.sub("", path, count=1)


def get_last_part_of_path(path: str | None) -> str:
    """Last folder or file name of a local path or remote target.

    Used to suggest a project name; the remote prefix and a ``user@`` are
    ignored, as is a trailing ``.code-workspace``.
    """
    if not path:
        return ""
    path = strip_remote_prefix(path)
    if "@" in path.split("/", 1)[0]:
        path = path.split("@", 1)[1]
    path = path.strip("\\/")
    last = path.replace("\\", "/").rsplit("/", 1)[-1]
    return last.removesuffix(WORKSPACE_FILE_SUFFIX)
