"""Dashboard configuration loaded from PROJECTDASH_* environment variables."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from platformdirs import user_config_dir, user_data_dir
from pydantic_settings import BaseSettings, SettingsConfigDict

from projectdash.dashboard.constants import DEFAULT_CONTAINER_CONTEXT

APP_NAME = "projectdash"


class DashSettings(BaseSettings):
    """Project dashboard settings.

    All fields are read from environment variables with the ``PROJECTDASH_``
    prefix.  For example, ``PROJECTDASH_LOG_LEVEL=DEBUG`` maps to ``log_level``.
    """

    model_config = SettingsConfigDict(
        env_prefix="PROJECTDASH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # -- Logging ---------------------------------------------------------------
    log_level: str = "WARNING"
    log_file: str | None = None
    """Optional rotating log file that records DEBUG output."""

    # -- Storage ---------------------------------------------------------------
    data_root: str = user_data_dir(APP_NAME)
    """Directory for the global state document and the manual-edit file."""

    settings_file: str = str(Path(user_config_dir(APP_NAME)) / "settings.json")
    """User settings document (JSON).  Projects live here when enabled below."""

    store_projects_in_settings: bool = False
    """Keep the project list in the user settings instead of the global state.

    Flipping this triggers a one-time copy into the newly selected store when
    that store is still empty.
    """

    # -- Opening ---------------------------------------------------------------
    prepend_vscode_url_to_wsl_remotes: bool = True
    """Rewrite ``\\\\wsl$\\distro\\...`` paths to ``vscode-remote://wsl+distro/...``."""

    container_context: str = DEFAULT_CONTAINER_CONTEXT
    """Docker context embedded in attached-container descriptors."""

    # -- Editor ----------------------------------------------------------------
    code_binary: str = "code"
    """VS Code launcher.  Often ``/usr/bin/code``; ``code.cmd`` on Windows."""

    workspace: str | None = None
    """Folder or ``.code-workspace`` file considered currently open.

    Relative project paths resolve against it; without it they cannot be opened.
    """


@lru_cache(maxsize=1)
def get_settings() -> DashSettings:
    """Return a cached settings instance.

    Reads from environment variables and ``.env`` on first call, then returns
    the same object.  Call ``get_settings.cache_clear()`` in tests to force a
    re-read after overriding env vars.
    """
    return DashSettings()
