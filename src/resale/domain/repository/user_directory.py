"""Read-only lookup of user display names, used when composing views."""

from __future__ import annotations

from abc import ABC, abstractmethod


class UserDirectory(ABC):

    @abstractmethod
    def get_username(self, user_id: str) -> str | None:
        """Return the user's display name, or None if unknown."""
