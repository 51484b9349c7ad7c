"""Lexer contract and the shared regex-driven lexer.

A language is anything that satisfies :class:`Lexer`: it scans text into raw
tokens and declares which of its token kinds are literals, identifiers,
comments and annotations. Normalization and error policy live in
:mod:`cpdscan.tokenizer.pipeline`, not in the languages.
"""

from dataclasses import dataclass
import re
from typing import Callable, Iterable, Iterator, NamedTuple, Protocol

from cpdscan.error.exceptions import LexicalError

DROP = "drop"
REPLACE = "replace"


class RawToken(NamedTuple):
    """Token as produced by a lexer, before normalization."""

    kind: str
    text: str
    line: int
    column: int = 0


class Lexer(Protocol):
    """Per-language scanner.

    ``comment_policy`` and ``annotation_policy`` say whether ignored tokens of
    those classes are dropped from the stream or replaced by a placeholder.
    """

    name: str
    extensions: tuple[str, ...] | None
    literal_kinds: frozenset[str]
    identifier_kinds: frozenset[str]
    comment_kinds: frozenset[str]
    annotation_kinds: frozenset[str]
    comment_policy: str
    annotation_policy: str

    def scan(self, text: str) -> Iterator[RawToken]:
        """Yield raw tokens in source order.

        Raises:
            LexicalError: When the text cannot be scanned any further
        """
        ...


@dataclass(frozen=True)
class Rule:
    """One alternative of a regex lexer; ``kind=None`` discards the match."""

    kind: str | None
    pattern: str


@dataclass(frozen=True)
class ErrorRule:
    """Alternative matching only malformed input, such as an unclosed string.

    Listed right after the rule for the well-formed construct; reaching it
    raises :class:`LexicalError` with ``message``.
    """

    pattern: str
    message: str


@dataclass
class RegexLexer:
    """Lexer driven by an ordered list of regular expressions.

    Rules are tried in order at each position; the first one that matches
    wins, so longer operators must be listed before their prefixes.
    Input no rule matches is reported as an unexpected character.
    Identifier matches whose text is a keyword become ``KEYWORD`` tokens.
    """

    name: str
    rules: list[Rule | ErrorRule]
    extensions: tuple[str, ...] | None = None
    keywords: frozenset[str] = frozenset()
    case_insensitive: bool = False
    fold_case: bool = False
    literal_kinds: frozenset[str] = frozenset()
    identifier_kinds: frozenset[str] = frozenset({"IDENTIFIER"})
    comment_kinds: frozenset[str] = frozenset({"COMMENT"})
    annotation_kinds: frozenset[str] = frozenset()
    comment_policy: str = DROP
    annotation_policy: str = DROP
    postprocess: Callable[[Iterator[RawToken]], Iterator[RawToken]] | None = None

    def __post_init__(self) -> None:
        self._master = re.compile(
            "|".join(f"(?P<r{i}>{rule.pattern})" for i, rule in enumerate(self.rules))
        )
        self._rules = {f"r{i}": rule for i, rule in enumerate(self.rules)}
        if self.case_insensitive:
            self._keywords = frozenset(keyword.upper() for keyword in self.keywords)
        else:
            self._keywords = self.keywords

    def __getstate__(self) -> dict:
        # Compiled patterns are rebuilt on unpickle for worker processes.
        state = self.__dict__.copy()
        for key in ("_master", "_rules", "_keywords"):
            state.pop(key, None)
        return state

    def __setstate__(self, state: dict) -> None:
        self.__dict__.update(state)
        self.__post_init__()

    def scan(self, text: str) -> Iterator[RawToken]:
        tokens = self._scan(text)
        if self.postprocess is not None:
            tokens = self.postprocess(tokens)
        return tokens

    def _scan(self, text: str) -> Iterator[RawToken]:
        pos = 0
        line = 1
        line_start = 0
        length = len(text)

        while pos < length:
            m = self._master.match(text, pos)
            column = pos - line_start + 1
            if m is None or m.end() == pos:
                raise LexicalError(f"unexpected character {text[pos]!r}", line, column)

            rule = self._rules[m.lastgroup]
            if isinstance(rule, ErrorRule):
                raise LexicalError(rule.message, line, column)

            value = m.group()
            if rule.kind is not None:
                yield RawToken(self._classify(rule.kind, value), self._image(rule.kind, value), line, column)

            newlines = value.count("\n")
            if newlines:
                line += newlines
                line_start = pos + value.rfind("\n") + 1
            pos = m.end()

    def _classify(self, kind: str, value: str) -> str:
        if kind == "IDENTIFIER":
            key = value.upper() if self.case_insensitive else value
            if key in self._keywords:
                return "KEYWORD"
        return kind

    def _image(self, kind: str, value: str) -> str:
        if self.fold_case and kind == "IDENTIFIER":
            return value.upper()
        return value


def operator_pattern(operators: Iterable[str]) -> str:
    """Alternation of operators, longest first."""
    return "|".join(re.escape(op) for op in sorted(set(operators), key=len, reverse=True))


def mark_bracketed(
    tokens: Iterator[RawToken], trigger_kind: str, marked_kind: str
) -> Iterator[RawToken]:
    """Re-kind a parenthesized group directly following a ``trigger_kind`` token.

    Used for annotation arguments: in ``@Name(value = 1)`` everything from
    ``(`` to the matching ``)`` becomes ``marked_kind``.
    """
    pending: RawToken | None = None
    depth = 0
    for token in tokens:
        if depth:
            if token.text == "(":
                depth += 1
            elif token.text == ")":
                depth -= 1
            yield token._replace(kind=marked_kind)
            continue

        if pending is not None:
            pending = None
            if token.text == "(":
                depth = 1
                yield token._replace(kind=marked_kind)
                continue

        if token.kind == trigger_kind:
            pending = token
        yield token
