"""Token stream model: tokens, per-source streams and the concatenated corpus."""

from bisect import bisect_right
from dataclasses import dataclass, field
from typing import Iterable, Iterator

EOF_KIND = "EOF"


@dataclass(frozen=True)
class Token:
    """An atomic lexical unit after normalization.

    Attributes:
        image: Normalized text, or a ``<KIND>`` placeholder
        source_id: Identity of the source unit the token came from
        line: 1-based line number in the original source
        kind: Lexer token kind
    """

    image: str
    source_id: str
    line: int
    kind: str = ""

    @property
    def is_eof(self) -> bool:
        return self.kind == EOF_KIND


def eof_token(source_id: str, line: int) -> Token:
    """Zero-width sentinel closing one source unit's stream."""
    return Token(image="", source_id=source_id, line=line, kind=EOF_KIND)


@dataclass(frozen=True)
class TokenStream:
    """Token stream of one source unit, terminated by exactly one EOF sentinel.

    Attributes:
        source_id: Identity of the source unit (usually its path)
        name: Base name of the source unit
        content_length: Number of characters in the decoded text
        tokens: Tokens in source order, ending with the sentinel
        partial: True if scanning stopped early on a skipped lexical error
        error: Message of the skipped lexical error, if any
    """

    source_id: str
    name: str
    content_length: int
    tokens: tuple[Token, ...]
    partial: bool = False
    error: str | None = None

    def __post_init__(self) -> None:
        if not self.tokens or not self.tokens[-1].is_eof:
            raise ValueError(f"Token stream for {self.source_id} must end with an EOF sentinel")
        if any(token.is_eof for token in self.tokens[:-1]):
            raise ValueError(f"Token stream for {self.source_id} has more than one EOF sentinel")

    def __len__(self) -> int:
        """Number of real tokens, sentinel excluded."""
        return len(self.tokens) - 1

    @property
    def images(self) -> list[str]:
        return [token.image for token in self.tokens[:-1]]


@dataclass
class TokenCorpus:
    """Ordered concatenation of token streams.

    Each stream keeps its sentinel, so sentinels partition the corpus into
    disjoint per-source regions. Built once and not modified afterwards.
    """

    streams: tuple[TokenStream, ...] = ()
    _offsets: list[int] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.streams = tuple(self.streams)
        seen: set[str] = set()
        for stream in self.streams:
            if stream.source_id in seen:
                raise ValueError(f"Duplicate source in corpus: {stream.source_id}")
            seen.add(stream.source_id)

        offsets = []
        position = 0
        for stream in self.streams:
            offsets.append(position)
            position += len(stream.tokens)
        self._offsets = offsets
        self._size = position

    @classmethod
    def from_streams(cls, streams: Iterable[TokenStream]) -> "TokenCorpus":
        return cls(streams=tuple(streams))

    def __len__(self) -> int:
        """Total number of tokens, sentinels included."""
        return self._size

    def __iter__(self) -> Iterator[Token]:
        for stream in self.streams:
            yield from stream.tokens

    @property
    def token_count(self) -> int:
        """Number of real tokens, sentinels excluded."""
        return self._size - len(self.streams)

    def offset_of(self, stream_index: int) -> int:
        """Global position of the first token of a stream."""
        return self._offsets[stream_index]

    def locate(self, position: int) -> tuple[int, int]:
        """Map a global position to ``(stream_index, local_index)``."""
        if position < 0 or position >= self._size:
            raise IndexError(f"Corpus position out of range: {position}")
        stream_index = bisect_right(self._offsets, position) - 1
        return stream_index, position - self._offsets[stream_index]

    def token_at(self, position: int) -> Token:
        stream_index, local = self.locate(position)
        return self.streams[stream_index].tokens[local]
