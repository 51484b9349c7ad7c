"""Turn one source unit into a normalized token stream."""

import logging

from cpdscan.core.config import CPDConfig
from cpdscan.core.sources import SourceUnit
from cpdscan.core.tokens import Token, TokenStream, eof_token
from cpdscan.error.exceptions import LexicalError
from cpdscan.tokenizer.base import DROP, Lexer, RawToken
from cpdscan.tokenizer.registry import get_lexer

logger = logging.getLogger(__name__)


def placeholder(kind: str) -> str:
    """Image standing in for every token of ``kind`` under normalization.

    The angle brackets keep placeholders from ever equalling a real token.
    """
    return f"<{kind}>"


def elide_skip_blocks(text: str, start_marker: str, end_marker: str) -> str:
    """Blank out every region from a start marker to the next end marker.

    Markers are included in the elided region. Line breaks inside the region
    are kept so that line numbers after it do not shift. A start marker with
    no end marker elides the rest of the text.
    """
    pieces = []
    pos = 0
    while True:
        start = text.find(start_marker, pos)
        if start < 0:
            pieces.append(text[pos:])
            break
        end = text.find(end_marker, start + len(start_marker))
        stop = len(text) if end < 0 else end + len(end_marker)
        pieces.append(text[pos:start])
        pieces.append("".join(ch if ch in "\r\n" else " " for ch in text[start:stop]))
        pos = stop
        if end < 0:
            break
    return "".join(pieces)


def normalize_image(raw: RawToken, lexer: Lexer, config: CPDConfig) -> str | None:
    """Apply the normalization filters to one raw token.

    Returns:
        The image to keep, or None if the token is dropped
    """
    if raw.kind in lexer.comment_kinds:
        if not config.ignore_comments:
            return raw.text
        return None if lexer.comment_policy == DROP else placeholder(raw.kind)

    if raw.kind in lexer.annotation_kinds:
        if not config.ignore_annotations:
            return raw.text
        return None if lexer.annotation_policy == DROP else placeholder(raw.kind)

    if config.ignore_literals and raw.kind in lexer.literal_kinds:
        return placeholder(raw.kind)

    if config.ignore_identifiers and raw.kind in lexer.identifier_kinds:
        return placeholder(raw.kind)

    return raw.text


def tokenize(unit: SourceUnit, config: CPDConfig, lexer: Lexer | None = None) -> TokenStream:
    """Tokenize one source unit.

    Args:
        unit: Source unit to scan
        config: Validated configuration
        lexer: Language to use; defaults to ``config.language``

    Returns:
        TokenStream ending with exactly one EOF sentinel

    Raises:
        LexicalError: If scanning fails and ``skip_lexical_errors`` is off
    """
    lexer = lexer or get_lexer(config.language)
    text = unit.text
    markers = config.skip_block_markers
    if markers is not None:
        text = elide_skip_blocks(text, *markers)

    tokens: list[Token] = []
    partial = False
    error: str | None = None
    encountered = 0

    try:
        for raw in lexer.scan(text):
            encountered += 1
            image = normalize_image(raw, lexer, config)
            if image is None:
                continue
            tokens.append(Token(image=image, source_id=unit.source_id, line=raw.line, kind=raw.kind))
    except LexicalError as e:
        located = e.with_source(unit.source_id)
        if not config.skip_lexical_errors:
            raise located from e
        logger.warning(f"Skipping rest of {unit.source_id} due to {located}")
        partial = True
        error = str(located)

    eof_line = tokens[-1].line if tokens else 1
    if not partial:
        eof_line = max(eof_line, text.count("\n") + 1)
    tokens.append(eof_token(unit.source_id, eof_line))

    logger.debug(f"{unit.source_id}: encountered {encountered} tokens; added {len(tokens) - 1} tokens")

    return TokenStream(
        source_id=unit.source_id,
        name=unit.name,
        content_length=unit.content_length,
        tokens=tuple(tokens),
        partial=partial,
        error=error,
    )
