"""Result model consumed by the renderers."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Occurrence:
    """One located instance of a duplicated token run.

    Attributes:
        source_id: Source unit the run lives in
        start_index: Offset of the first token in that source's own stream
        token_length: Number of tokens in the run
        start_line: Line of the first token (1-based)
        end_line: Line of the last token (1-based, inclusive)
    """

    source_id: str
    start_index: int
    token_length: int
    start_line: int
    end_line: int

    @property
    def end_index(self) -> int:
        """Exclusive end offset in the source stream."""
        return self.start_index + self.token_length

    @property
    def line_count(self) -> int:
        return self.end_line - self.start_line + 1

    def overlaps(self, other: "Occurrence") -> bool:
        return (
            self.source_id == other.source_id
            and self.start_index < other.end_index
            and other.start_index < self.end_index
        )


@dataclass
class Match:
    """A maximal group of two or more occurrences of the same token run.

    Attributes:
        token_length: Length of the shared run in tokens
        occurrences: Occurrences ordered by corpus position
        images: Token images of the shared run
    """

    token_length: int
    occurrences: list[Occurrence]
    images: tuple[str, ...] = field(default=(), repr=False)

    @property
    def occurrence_count(self) -> int:
        return len(self.occurrences)

    @property
    def line_count(self) -> int:
        """Lines spanned by the first occurrence."""
        return self.occurrences[0].line_count

    @property
    def first(self) -> Occurrence:
        return self.occurrences[0]

    @property
    def sort_key(self) -> tuple[int, str, int, int]:
        """Longest first, then by first occurrence location."""
        first = self.first
        return (-self.token_length, first.source_id, first.start_line, first.start_index)

    def source_ids(self) -> list[str]:
        return [occurrence.source_id for occurrence in self.occurrences]
