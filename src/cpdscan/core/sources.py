"""Source discovery and loading.

Discovery turns user supplied paths into an ordered list of files; loading
decodes one file into a :class:`SourceUnit`. The tokenizer never reads files
itself.
"""

from dataclasses import dataclass
import logging
import os
from pathlib import Path
from typing import Iterable

from cpdscan.error.exceptions import SourceLoadError

logger = logging.getLogger(__name__)

BOM = "\ufeff"


@dataclass(frozen=True)
class SourceUnit:
    """Decoded text of one source plus its identity.

    Attributes:
        source_id: Stable identity, usually the file path
        name: Base name used for duplicate-file detection
        text: Decoded character content
        encoding: Encoding the text was decoded with
    """

    source_id: str
    name: str
    text: str
    encoding: str = "utf-8"

    @classmethod
    def from_text(cls, source_id: str, text: str, encoding: str = "utf-8") -> "SourceUnit":
        """Create a unit for in-memory text (e.g. tests or stdin)."""
        if text.startswith(BOM):
            text = text[1:]
        return cls(source_id=source_id, name=Path(source_id).name, text=text, encoding=encoding)

    @property
    def content_length(self) -> int:
        return len(self.text)

    @property
    def lines(self) -> list[str]:
        """Text split on ``\\n`` only, the way the lexers number lines."""
        return [line.rstrip("\r") for line in self.text.split("\n")]


def load_source(path: Path, encoding: str = "utf-8") -> SourceUnit:
    """Read and decode one file.

    Args:
        path: File to read
        encoding: Character encoding of the file

    Returns:
        SourceUnit with a leading BOM removed

    Raises:
        SourceLoadError: If the file cannot be read or decoded
    """
    try:
        with open(path, "r", encoding=encoding, newline="") as f:
            text = f.read()
    except (OSError, UnicodeDecodeError, LookupError) as e:
        raise SourceLoadError(str(path), str(e)) from e

    return SourceUnit.from_text(str(path), text, encoding=encoding)


def _is_excluded(path: Path, excluded: set[Path]) -> bool:
    resolved = path.resolve()
    return any(resolved == ex or ex in resolved.parents for ex in excluded)


def discover_sources(
    paths: Iterable[Path],
    extensions: Iterable[str] | None = None,
    excludes: Iterable[Path] | None = None,
    recursive: bool = True,
) -> list[Path]:
    """Collect the files to analyze in a deterministic order.

    Explicit file arguments are always kept (minus exclusions); directories
    are walked and filtered by extension.

    Args:
        paths: Files and directories to process
        extensions: Accepted file suffixes (e.g. [".java"]); None accepts all
        excludes: Files or directories to leave out
        recursive: Descend into subdirectories

    Returns:
        Sorted, de-duplicated list of file paths

    Raises:
        FileNotFoundError: If one of ``paths`` does not exist
    """
    suffixes = {ext.lower() for ext in extensions} if extensions is not None else None
    excluded = {Path(ex).resolve() for ex in excludes or []}
    found: dict[Path, Path] = {}

    for path in paths:
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Path not found: {path}")

        if path.is_file():
            if _is_excluded(path, excluded):
                logger.info(f"Excluding {path}")
                continue
            found.setdefault(path.resolve(), path)
            continue

        if recursive:
            walker = os.walk(path)
        else:
            walker = [(str(path), [], os.listdir(path))]

        for root, dirs, files in walker:
            dirs.sort()
            for file_name in files:
                candidate = Path(root) / file_name
                if not candidate.is_file():
                    continue
                if suffixes is not None and candidate.suffix.lower() not in suffixes:
                    continue
                if _is_excluded(candidate, excluded):
                    logger.info(f"Excluding {candidate}")
                    continue
                found.setdefault(candidate.resolve(), candidate)

    return sorted(found.values(), key=lambda p: str(p))
