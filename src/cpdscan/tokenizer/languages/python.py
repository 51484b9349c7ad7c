"""Python lexer built on the standard library tokenizer.

Logical line structure (NEWLINE, INDENT, DEDENT) is kept as tokens since
it is part of the syntax. Decorator lines form the annotation class.
"""

import io
import keyword
import tokenize
from typing import Iterator

from cpdscan.error.exceptions import LexicalError
from cpdscan.tokenizer.base import RawToken

STRUCTURE_IMAGES = {
    tokenize.NEWLINE: "<NEWLINE>",
    tokenize.INDENT: "<INDENT>",
    tokenize.DEDENT: "<DEDENT>",
}

SKIPPED = {tokenize.NL, tokenize.ENDMARKER, tokenize.ENCODING}


class PythonLexer:
    """Lexer for Python 3 sources."""

    name = "python"
    extensions = (".py", ".pyi", ".pyw")
    literal_kinds = frozenset({"NUMBER", "STRING", "FSTRING_MIDDLE", "TSTRING_MIDDLE"})
    identifier_kinds = frozenset({"IDENTIFIER"})
    comment_kinds = frozenset({"COMMENT"})
    annotation_kinds = frozenset({"DECORATOR"})
    comment_policy = "drop"
    annotation_policy = "drop"

    def scan(self, text: str) -> Iterator[RawToken]:
        return _mark_decorators(self._scan(text))

    def _scan(self, text: str) -> Iterator[RawToken]:
        readline = io.StringIO(text).readline
        try:
            for tok in tokenize.generate_tokens(readline):
                if tok.type in SKIPPED:
                    continue
                (line, column) = tok.start
                if tok.type == tokenize.ERRORTOKEN:
                    if not tok.string.strip():
                        continue
                    raise LexicalError(_error_message(tok.string), line, column + 1)
                if tok.type in STRUCTURE_IMAGES:
                    yield RawToken(tokenize.tok_name[tok.type], STRUCTURE_IMAGES[tok.type], line, column + 1)
                elif tok.type == tokenize.NAME:
                    kind = "KEYWORD" if keyword.iskeyword(tok.string) else "IDENTIFIER"
                    yield RawToken(kind, tok.string, line, column + 1)
                else:
                    yield RawToken(tokenize.tok_name[tok.type], tok.string, line, column + 1)
        except tokenize.TokenError as e:
            message = e.args[0] if e.args else "tokenizer error"
            line, column = e.args[1] if len(e.args) > 1 else (1, 0)
            raise LexicalError(message, line, column + 1) from e
        except SyntaxError as e:
            raise LexicalError(e.msg, e.lineno or 1, e.offset or 0) from e


def _error_message(text: str) -> str:
    if text[0] in "\"'":
        return "unterminated string literal"
    return f"unexpected character {text!r}"


def _mark_decorators(tokens: Iterator[RawToken]) -> Iterator[RawToken]:
    """Re-kind every token of a decorator line, its NEWLINE included."""
    in_decorator = False
    at_line_start = True
    for token in tokens:
        if in_decorator:
            yield token._replace(kind="DECORATOR")
            if token.kind == "NEWLINE":
                in_decorator = False
                at_line_start = True
            continue

        if at_line_start and token.kind == "OP" and token.text == "@":
            in_decorator = True
            yield token._replace(kind="DECORATOR")
            continue

        at_line_start = token.kind in ("NEWLINE", "INDENT", "DEDENT")
        yield token


PYTHON = PythonLexer()
