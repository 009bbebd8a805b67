"""Remembers which user the CLI is acting for between invocations."""

from __future__ import annotations

import json
from pathlib import Path


class JsonSessionStore:

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path

    def current_user(self) -> str | None:
        if not self._file_path.exists():
            return None
        try:
            data = json.loads(self._file_path.read_text(encoding="utf-8"))
        except json.JSONDecodeError:
            return None
        user = data.get("user") if isinstance(data, dict) else None
        return str(user) if user else None

    def login(self, user: str) -> None:
        self._file_path.parent.mkdir(parents=True, exist_ok=True)
        self._file_path.write_text(
            json.dumps({"user": user}, indent=2) + "\n", encoding="utf-8"
        )

    def logout(self) -> None:
        if self._file_path.exists():
            self._file_path.unlink()
