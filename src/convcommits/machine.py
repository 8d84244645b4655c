"""Finite-state scanner for Conventional Commits messages.

The scanner reads the message once, left to right, one byte per step. Each
step looks up an edge for the current state; edges carry the next state and a
tuple of actions (capturing fields or writing a diagnostic). Any error edge
leads to ``State.SINK``, which ignores the remaining input.

Grammar::

    type ["(" scope ")"] ["!"] ":" " "+ description [NL NL body]

Example:
    >>> message, diagnostic = parse(b"feat(api)!: add x")
    >>> (message.type, message.scope, message.breaking, diagnostic)
    ('feat', 'api', True, None)
    >>> message, diagnostic = parse(b"feat!")
    >>> message is None, str(diagnostic)
    (True, "early exit after '!' character: col=04")
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from types import MappingProxyType
from typing import NamedTuple

from .config import ParserOptions
from .diagnostics import Diagnostic, DiagnosticKind, DiagnosticRecorder, DiagnosticSink
from .message import CommitFields, Message
from .profiles import KeywordNode, Profile, trie_for

LF = 0x0A
CR = 0x0D
SPACE = 0x20
BANG = 0x21
LPAREN = 0x28
RPAREN = 0x29
COLON = 0x3A


class State(Enum):
    TYPE_START = "type-start"
    TYPE = "type"
    AFTER_TYPE = "after-type"
    BREAKING = "breaking"
    SCOPE_START = "scope-start"
    SCOPE = "scope"
    AFTER_SCOPE = "after-scope"
    AFTER_COLON = "after-colon"
    SPACES = "spaces"
    DESCRIPTION = "description"
    AFTER_DESCRIPTION = "after-description"
    BLANK_LINE = "blank-line"
    BODY = "body"
    SINK = "sink"


class Action(Enum):
    MARK = "mark"
    SET_TYPE = "set-type"
    SET_BREAKING = "set-breaking"
    SET_SCOPE = "set-scope"
    SET_DESCRIPTION = "set-description"
    SET_BODY = "set-body"
    ILLEGAL_TYPE_CHAR = "illegal-type-char"
    MISSING_COLON = "missing-colon"
    MISSING_DESCRIPTION_INITIAL_SPACE = "missing-description-initial-space"
    EMPTY_DESCRIPTION = "empty-description"
    MALFORMED_SCOPE = "malformed-scope"
    MISSING_BLANK_LINE = "missing-blank-line"


class Transition(NamedTuple):
    state: State
    actions: tuple[Action, ...] = ()
    node: KeywordNode | None = None


class _Edges(NamedTuple):
    on: Mapping[int, Transition]
    default: Transition


ACCEPTING_STATES = frozenset({State.DESCRIPTION, State.BLANK_LINE, State.BODY})

# States that still need at least one more byte; entering one of them on the
# last byte of input records an early-exit advisory.
ADVISORY_STATES = frozenset(
    {State.AFTER_TYPE, State.BREAKING, State.AFTER_COLON, State.AFTER_SCOPE}
)


def _fail(action: Action, *before: Action) -> Transition:
    return Transition(State.SINK, (*before, action))


_EDGES: Mapping[State, _Edges] = MappingProxyType(
    {
        State.AFTER_TYPE: _Edges(
            on={
                BANG: Transition(State.BREAKING, (Action.SET_TYPE, Action.SET_BREAKING)),
                LPAREN: Transition(State.SCOPE_START, (Action.SET_TYPE,)),
                COLON: Transition(State.AFTER_COLON, (Action.SET_TYPE,)),
            },
            default=_fail(Action.MISSING_COLON, Action.SET_TYPE),
        ),
        State.BREAKING: _Edges(
            on={COLON: Transition(State.AFTER_COLON)},
            default=_fail(Action.MISSING_COLON),
        ),
        State.SCOPE_START: _Edges(
            on={
                LPAREN: _fail(Action.MALFORMED_SCOPE),
                RPAREN: Transition(State.AFTER_SCOPE, (Action.MARK, Action.SET_SCOPE)),
            },
            default=Transition(State.SCOPE, (Action.MARK,)),
        ),
        State.SCOPE: _Edges(
            on={
                LPAREN: _fail(Action.MALFORMED_SCOPE),
                RPAREN: Transition(State.AFTER_SCOPE, (Action.SET_SCOPE,)),
            },
            default=Transition(State.SCOPE),
        ),
        State.AFTER_SCOPE: _Edges(
            on={
                BANG: Transition(State.BREAKING, (Action.SET_BREAKING,)),
                COLON: Transition(State.AFTER_COLON),
            },
            default=_fail(Action.MISSING_COLON),
        ),
        State.AFTER_COLON: _Edges(
            on={SPACE: Transition(State.SPACES)},
            default=_fail(Action.MISSING_DESCRIPTION_INITIAL_SPACE),
        ),
        State.SPACES: _Edges(
            on={
                LF: _fail(Action.EMPTY_DESCRIPTION),
                CR: _fail(Action.EMPTY_DESCRIPTION),
                SPACE: Transition(State.SPACES),
            },
            default=Transition(State.DESCRIPTION, (Action.MARK,)),
        ),
        State.DESCRIPTION: _Edges(
            on={
                LF: Transition(State.AFTER_DESCRIPTION, (Action.SET_DESCRIPTION,)),
                CR: Transition(State.AFTER_DESCRIPTION, (Action.SET_DESCRIPTION,)),
            },
            default=Transition(State.DESCRIPTION),
        ),
        State.AFTER_DESCRIPTION: _Edges(
            on={LF: Transition(State.BLANK_LINE), CR: Transition(State.BLANK_LINE)},
            default=_fail(Action.MISSING_BLANK_LINE),
        ),
        State.BLANK_LINE: _Edges(on={}, default=Transition(State.BODY, (Action.MARK,))),
        State.BODY: _Edges(on={}, default=Transition(State.BODY)),
        State.SINK: _Edges(on={}, default=Transition(State.SINK)),
    }
)


def transition(state: State, byte: int, node: KeywordNode | None = None) -> Transition:
    """Return the edge taken from ``state`` on ``byte``.

    Args:
        state: Current state.
        byte: Input byte value.
        node: Current keyword trie node; required in ``TYPE_START``/``TYPE``.

    Returns:
        The ``Transition`` to follow.
    """
    if state is State.TYPE_START or state is State.TYPE:
        if node is None:
            raise ValueError(f"state {state.value} requires a keyword node")
        child = node.step(byte)
        if child is None:
            return _fail(Action.ILLEGAL_TYPE_CHAR)
        target = State.AFTER_TYPE if child.terminal else State.TYPE
        actions = (Action.MARK,) if state is State.TYPE_START else ()
        return Transition(target, actions, child)
    edges = _EDGES[state]
    return edges.on.get(byte, edges.default)


class _Scan:
    """Scratch state of a single parse call."""

    def __init__(self, data: bytes, sink: DiagnosticSink | None) -> None:
        self.data = data
        self.end = len(data)
        self.pos = 0
        self.token_start = 0
        self.sink = sink
        self.fields = CommitFields()
        self.recorder = DiagnosticRecorder(data, sink)

    def text(self) -> str:
        return self.data[self.token_start : self.pos].decode("utf-8", errors="replace")

    def _info(self, message: str, **fields: object) -> None:
        if self.sink is not None:
            self.sink.info(message, **fields)

    def apply(self, action: Action) -> None:
        fields = self.fields
        recorder = self.recorder
        pos = self.pos
        if action is Action.MARK:
            self.token_start = pos
        elif action is Action.SET_TYPE:
            fields.set_type(self.text())
            self._info("valid commit message type", type=fields.type)
        elif action is Action.SET_BREAKING:
            fields.set_breaking()
            self._info("commit message communicates a breaking change")
        elif action is Action.SET_SCOPE:
            fields.set_scope(self.text())
            self._info("valid commit message scope", scope=fields.scope)
        elif action is Action.SET_DESCRIPTION:
            fields.set_description(self.text())
            self._info("valid commit message description", description=fields.description)
        elif action is Action.SET_BODY:
            fields.set_body(self.text())
            self._info("valid commit message body", body=fields.body)
        elif action is Action.ILLEGAL_TYPE_CHAR:
            recorder.write_on_current(DiagnosticKind.ILLEGAL_TYPE_CHAR, pos)
        elif action is Action.MISSING_COLON:
            recorder.write_if_unset_on_current(DiagnosticKind.MISSING_COLON, pos)
        elif action is Action.MISSING_DESCRIPTION_INITIAL_SPACE:
            recorder.write_if_unset_on_current(
                DiagnosticKind.MISSING_DESCRIPTION_INITIAL_SPACE, pos
            )
        elif action is Action.EMPTY_DESCRIPTION:
            if pos < self.end and self.data[pos] == LF:
                recorder.write(DiagnosticKind.ILLEGAL_NEWLINE, pos + 1)
            else:
                recorder.write_on_previous(DiagnosticKind.MISSING_DESCRIPTION, pos)
        elif action is Action.MALFORMED_SCOPE:
            recorder.write_on_current(DiagnosticKind.MALFORMED_SCOPE, pos)
        elif action is Action.MISSING_BLANK_LINE:
            recorder.write(DiagnosticKind.MISSING_BLANK_LINE_AT_BODY_BEGIN, pos)

    def finish(self, state: State) -> None:
        """Settle the state reached when the input runs out."""
        recorder = self.recorder
        pos = self.pos
        if state is State.TYPE_START:
            recorder.write(DiagnosticKind.EMPTY_INPUT, pos)
        elif state is State.TYPE:
            recorder.write_on_previous(DiagnosticKind.INCOMPLETE_TYPE, pos)
        elif state in (State.AFTER_TYPE, State.BREAKING, State.AFTER_SCOPE):
            recorder.write_if_unset_on_current(DiagnosticKind.MISSING_COLON, pos)
        elif state is State.AFTER_COLON:
            recorder.write_if_unset_on_current(
                DiagnosticKind.MISSING_DESCRIPTION_INITIAL_SPACE, pos
            )
        elif state in (State.SCOPE_START, State.SCOPE):
            recorder.advise(pos - 1)
        elif state is State.SPACES:
            self.apply(Action.EMPTY_DESCRIPTION)
        elif state is State.DESCRIPTION:
            self.apply(Action.SET_DESCRIPTION)
        elif state is State.AFTER_DESCRIPTION:
            self.apply(Action.MISSING_BLANK_LINE)
        elif state is State.BLANK_LINE:
            self.apply(Action.MARK)
            self.apply(Action.SET_BODY)
        elif state is State.BODY:
            self.apply(Action.SET_BODY)

    def run(self, root: KeywordNode) -> State:
        state = State.TYPE_START
        node: KeywordNode | None = root
        while self.pos < self.end:
            edge = transition(state, self.data[self.pos], node)
            for action in edge.actions:
                self.apply(action)
            state, node = edge.state, edge.node
            if state is State.SINK:
                return state
            if state in ADVISORY_STATES and self.pos + 1 == self.end:
                self.recorder.advise(self.pos)
            self.pos += 1
        self.finish(state)
        return state


def _as_bytes(data: bytes | bytearray | memoryview | str) -> bytes:
    if isinstance(data, str):
        return data.encode("utf-8")
    if isinstance(data, (bytes, bytearray, memoryview)):
        return bytes(data)
    raise TypeError(f"expected bytes or str, got {type(data).__name__}")


def parse(
    data: bytes | bytearray | memoryview | str,
    *,
    profile: Profile = Profile.MINIMAL,
    best_effort: bool = False,
    sink: DiagnosticSink | None = None,
) -> tuple[Message | None, Diagnostic | None]:
    """Parse a commit message.

    Args:
        data: Whole message; ``str`` input is UTF-8 encoded first.
        profile: Keyword profile recognized as commit types.
        best_effort: Return the partial message alongside the diagnostic when
            it carries at least a type and a description.
        sink: Optional observer receiving capture and diagnostic events.

    Returns:
        ``(message, None)`` on success, ``(message, diagnostic)`` for a
        best-effort partial result, ``(None, diagnostic)`` otherwise.
    """
    scan = _Scan(_as_bytes(data), sink)
    state = scan.run(trie_for(profile).root)
    if state in ACCEPTING_STATES:
        return scan.fields.export(), None
    if best_effort and scan.fields.minimal():
        return scan.fields.export(), scan.recorder.diagnostic
    return None, scan.recorder.diagnostic


class Machine:
    """Parser bound to a set of options.

    Scan state lives in each ``parse`` call, so one instance may be reused
    and shared across threads.

    Example:
        >>> machine = Machine(ParserOptions(profile="conventional"))
        >>> machine.parse("docs: fix typo")[0].type
        'docs'
    """

    def __init__(
        self, options: ParserOptions | None = None, *, sink: DiagnosticSink | None = None
    ) -> None:
        self.options = options or ParserOptions()
        self.sink = sink

    @property
    def profile(self) -> Profile:
        return self.options.profile

    @property
    def best_effort(self) -> bool:
        return self.options.best_effort

    def parse(
        self, data: bytes | bytearray | memoryview | str
    ) -> tuple[Message | None, Diagnostic | None]:
        return parse(
            data,
            profile=self.options.profile,
            best_effort=self.options.best_effort,
            sink=self.sink,
        )
