"""Registry mapping language names to lexers."""

from pathlib import Path

from cpdscan.tokenizer.base import Lexer


class LexerRegistry:
    """Central registry for all available languages."""

    _lexers: dict[str, Lexer] | None = None

    @classmethod
    def _load_lexers(cls) -> dict[str, Lexer]:
        """Lazy load the built-in languages."""
        if cls._lexers is None:
            from cpdscan.tokenizer.languages import BUILTIN_LEXERS

            cls._lexers = {lexer.name: lexer for lexer in BUILTIN_LEXERS}
        return cls._lexers

    @classmethod
    def register(cls, lexer: Lexer) -> None:
        """Add or replace a language."""
        cls._load_lexers()[lexer.name] = lexer

    @classmethod
    def get(cls, name: str) -> Lexer:
        """Get a lexer by language name.

        Raises:
            ValueError: If the language is unknown
        """
        lexers = cls._load_lexers()
        if name not in lexers:
            available = ", ".join(sorted(lexers))
            raise ValueError(f"Unknown language: {name}. Available: {available}")
        return lexers[name]

    @classmethod
    def names(cls) -> list[str]:
        return sorted(cls._load_lexers())


def get_lexer(name: str) -> Lexer:
    return LexerRegistry.get(name)


def available_languages() -> list[str]:
    return LexerRegistry.names()


def language_for_path(path: str | Path) -> str | None:
    """Name of the first language claiming the file's extension."""
    suffix = Path(path).suffix.lower()
    for name in available_languages():
        extensions = LexerRegistry.get(name).extensions
        if extensions and suffix in extensions:
            return name
    return None
