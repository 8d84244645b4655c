"""Commit type keyword profiles and their dispatch tables.

Each profile is compiled once, at import time, into a keyword trie whose
equivalent tails are merged, so keywords such as ``revert`` and ``refactor``
share the nodes for their common ending. The automaton walks one node per
input byte and never backtracks.

Example:
    >>> trie_for(Profile.MINIMAL).root.step(ord("f")) is not None
    True
    >>> keywords_for(Profile.MINIMAL)
    ('feat', 'fix')
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType


class Profile(str, Enum):
    MINIMAL = "minimal"
    CONVENTIONAL = "conventional"
    FALCO = "falco"


PROFILE_VALUES = tuple(profile.value for profile in Profile)

MINIMAL_TYPES: tuple[str, ...] = ("feat", "fix")
CONVENTIONAL_TYPES: tuple[str, ...] = (
    "build",
    "chore",
    "ci",
    "docs",
    "feat",
    "fix",
    "perf",
    "refactor",
    "revert",
    "style",
    "test",
)
FALCO_TYPES: tuple[str, ...] = (
    "build",
    "chore",
    "ci",
    "docs",
    "feat",
    "fix",
    "new",
    "perf",
    "revert",
    "rule",
    "test",
    "update",
)

_KEYWORDS: Mapping[Profile, tuple[str, ...]] = MappingProxyType(
    {
        Profile.MINIMAL: MINIMAL_TYPES,
        Profile.CONVENTIONAL: CONVENTIONAL_TYPES,
        Profile.FALCO: FALCO_TYPES,
    }
)


@dataclass(frozen=True, eq=False)
class KeywordNode:
    """One position inside a keyword.

    Attributes:
        terminal: Whether the bytes consumed so far spell a whole keyword.
        edges: Outgoing transitions keyed by byte value.
    """

    terminal: bool
    edges: Mapping[int, KeywordNode] = field(default_factory=dict)

    def step(self, byte: int) -> KeywordNode | None:
        return self.edges.get(byte)


@dataclass(frozen=True)
class KeywordTrie:
    profile: Profile
    keywords: tuple[str, ...]
    root: KeywordNode
    node_count: int


class _Builder:
    def __init__(self) -> None:
        self.terminal = False
        self.children: dict[int, _Builder] = {}


def _insert(root: _Builder, keyword: str) -> None:
    node = root
    for byte in keyword.encode("ascii"):
        node = node.children.setdefault(byte, _Builder())
    node.terminal = True


def _freeze(node: _Builder, registry: dict[tuple, KeywordNode]) -> KeywordNode:
    edges = {byte: _freeze(child, registry) for byte, child in sorted(node.children.items())}
    signature = (node.terminal, tuple((byte, id(child)) for byte, child in edges.items()))
    shared = registry.get(signature)
    if shared is None:
        shared = KeywordNode(terminal=node.terminal, edges=MappingProxyType(edges))
        registry[signature] = shared
    return shared


def build_trie(profile: Profile, keywords: Iterable[str]) -> KeywordTrie:
    """Compile keywords into a suffix-shared trie.

    Args:
        profile: Profile the table belongs to.
        keywords: Lowercase ASCII keywords; none may be a prefix of another.

    Returns:
        The compiled ``KeywordTrie``.

    Raises:
        ValueError: When a keyword is empty or is a prefix of another keyword.
    """
    ordered = tuple(sorted(set(keywords)))
    root = _Builder()
    for keyword in ordered:
        if not keyword:
            raise ValueError(f"empty keyword in {profile.value} profile")
        _insert(root, keyword)
    for keyword in ordered:
        for other in ordered:
            if other != keyword and other.startswith(keyword):
                raise ValueError(
                    f"keyword {keyword!r} is a prefix of {other!r} in {profile.value} profile"
                )
    registry: dict[tuple, KeywordNode] = {}
    frozen = _freeze(root, registry)
    return KeywordTrie(profile=profile, keywords=ordered, root=frozen, node_count=len(registry))


_TRIES: Mapping[Profile, KeywordTrie] = MappingProxyType(
    {profile: build_trie(profile, keywords) for profile, keywords in _KEYWORDS.items()}
)


def parse_profile(value: str | Profile | None) -> Profile:
    """Normalize a profile name.

    Example:
        >>> parse_profile(" Conventional ")
        <Profile.CONVENTIONAL: 'conventional'>
    """
    if value is None:
        return Profile.MINIMAL
    if isinstance(value, Profile):
        return value
    normalized = value.strip().lower()
    if not normalized:
        return Profile.MINIMAL
    try:
        return Profile(normalized)
    except ValueError:
        allowed = ", ".join(PROFILE_VALUES)
        raise ValueError(f"unsupported profile {value!r} (allowed: {allowed})") from None


def keywords_for(profile: Profile) -> tuple[str, ...]:
    return _KEYWORDS[profile]


def trie_for(profile: Profile) -> KeywordTrie:
    return _TRIES[profile]
