"""Structured commit message produced by a successful (or best-effort) parse."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class Message(BaseModel):
    """Public view of a parsed commit message.

    Attributes:
        type: Commit type keyword.
        scope: Scope text; ``None`` when no parentheses were given, ``""`` for ``()``.
        breaking: Whether the ``!`` marker was present.
        description: Single-line description.
        body: Verbatim body after the blank line; ``None`` when absent.

    Example:
        >>> Message(type="feat", scope="api", description="add x").render()
        'feat(api): add x'
    """

    model_config = ConfigDict(frozen=True)

    type: str
    scope: str | None = None
    breaking: bool = False
    description: str
    body: str | None = None

    def is_breaking_change(self) -> bool:
        return self.breaking

    def has_scope(self) -> bool:
        return self.scope is not None

    def has_body(self) -> bool:
        return self.body is not None

    def header(self) -> str:
        scope = f"({self.scope})" if self.scope is not None else ""
        marker = "!" if self.breaking else ""
        return f"{self.type}{scope}{marker}: {self.description}"

    def render(self) -> str:
        """Reassemble the message text; parsing it yields an equal message."""
        if self.body is None:
            return self.header()
        return f"{self.header()}\n\n{self.body}"


class CommitFields:
    """Accumulates matched fields while the automaton scans.

    Each field is written at most once, in grammar order.
    """

    def __init__(self) -> None:
        self.type = ""
        self.scope: str | None = None
        self.breaking = False
        self.description = ""
        self.body: str | None = None

    def set_type(self, value: str) -> None:
        self.type = value

    def set_scope(self, value: str) -> None:
        self.scope = value

    def set_breaking(self) -> None:
        self.breaking = True

    def set_description(self, value: str) -> None:
        self.description = value

    def set_body(self, value: str) -> None:
        self.body = value

    def minimal(self) -> bool:
        """Return whether both a type and a description were captured."""
        return bool(self.type) and bool(self.description)

    def export(self) -> Message:
        return Message(
            type=self.type,
            scope=self.scope,
            breaking=self.breaking,
            description=self.description,
            body=self.body,
        )
