"""JSON-file-backed implementation of UserDirectory."""

from __future__ import annotations

import json
from pathlib import Path

from resale.domain.exceptions import StorageError
from resale.domain.repository.user_directory import UserDirectory


class JsonUserDirectory(UserDirectory):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path

    def get_username(self, user_id: str) -> str | None:
        if not self._file_path.exists():
            return None
        try:
            raw = json.loads(self._file_path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise StorageError(f"Cannot read users {self._file_path}: {exc}") from exc
        try:
            for user in raw:
                if str(user["id"]) == str(user_id):
                    return user.get("username")
        except (AttributeError, KeyError, TypeError) as exc:
            raise StorageError(f"Malformed user in {self._file_path}: {exc!r}") from exc
        return None
