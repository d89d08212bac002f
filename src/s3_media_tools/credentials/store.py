"""Read access to the host's stored settings and per-user metadata."""

from typing import Optional, Protocol


class SettingsStore(Protocol):
    """Protocol for the host's option and user-metadata storage."""

    def get_option(self, name: str, default: str = "") -> str:
        """Return a platform-wide option."""
        ...

    def user_exists(self, user_id: str) -> bool:
        ...

    def get_user_meta(self, user_id: str, name: str) -> str:
        """Return a metadata value stored for one user."""
        ...


class InMemorySettingsStore:
    """Dictionary-backed ``SettingsStore`` for wiring, the CLI and tests."""

    def __init__(
        self,
        options: Optional[dict[str, str]] = None,
        users: Optional[dict[str, dict[str, str]]] = None,
    ):
        self._options: dict[str, str] = dict(options or {})
        self._users: dict[str, dict[str, str]] = {
            user_id: dict(meta) for user_id, meta in (users or {}).items()
        }

    def get_option(self, name: str, default: str = "") -> str:
        return self._options.get(name, default)

    def set_option(self, name: str, value: str) -> None:
        self._options[name] = value

    def add_user(self, user_id: str) -> None:
        self._users.setdefault(user_id, {})

    def user_exists(self, user_id: str) -> bool:
        return user_id in self._users

    def get_user_meta(self, user_id: str, name: str) -> str:
        return self._users.get(user_id, {}).get(name, "")

    def set_user_meta(self, user_id: str, name: str, value: str) -> None:
        self._users.setdefault(user_id, {})[name] = value
