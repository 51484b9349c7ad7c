"""Per-language tokenization into normalized token streams.

This package provides:
- The Lexer contract and a regex-driven lexer
- The language registry
- The tokenize pipeline (skip blocks, normalization, lexical error policy)
"""

from cpdscan.tokenizer.base import ErrorRule, Lexer, RawToken, RegexLexer, Rule
from cpdscan.tokenizer.pipeline import elide_skip_blocks, normalize_image, placeholder, tokenize
from cpdscan.tokenizer.registry import (
    LexerRegistry,
    available_languages,
    get_lexer,
    language_for_path,
)

__all__ = [
    "ErrorRule",
    "Lexer",
    "RawToken",
    "RegexLexer",
    "Rule",
    "LexerRegistry",
    "available_languages",
    "get_lexer",
    "language_for_path",
    "elide_skip_blocks",
    "normalize_image",
    "placeholder",
    "tokenize",
]
