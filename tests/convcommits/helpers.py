"""Shared helpers for convcommits tests."""

from __future__ import annotations

from convcommits.diagnostics import Diagnostic


class RecordingSink:
    """Diagnostic sink that keeps every event it receives."""

    def __init__(self) -> None:
        self.infos: list[tuple[str, dict[str, object]]] = []
        self.errors: list[Diagnostic] = []

    def info(self, message: str, **fields: object) -> None:
        self.infos.append((message, fields))

    def error(self, diagnostic: Diagnostic) -> None:
        self.errors.append(diagnostic)

    def messages(self) -> list[str]:
        return [message for message, _fields in self.infos]
