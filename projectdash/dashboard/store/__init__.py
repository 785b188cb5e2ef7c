"""Storage backends for the project list."""

from projectdash.dashboard.store.base import ProjectStore, StoreReadError
from projectdash.dashboard.store.local import GlobalStateStore, JsonDocumentStore
from projectdash.dashboard.store.user_settings import UserSettingsStore

__all__ = ["GlobalStateStore", "JsonDocumentStore", "ProjectStore", "StoreReadError", "UserSettingsStore"]
