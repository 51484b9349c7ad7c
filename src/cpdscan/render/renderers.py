"""Serialize matches into report formats.

Renderers only format; they never change the match set. The code fragment
of a match is taken from the decoded source text when it is available.
"""

from typing import Mapping, Protocol
from xml.dom import minidom
import xml.etree.ElementTree as ET

import pandas as pd

from cpdscan.core.results import Match, Occurrence

SourceLines = Mapping[str, list[str]]


class Renderer(Protocol):
    name: str

    def render(self, matches: list[Match], sources: SourceLines | None = None) -> str: ...


def code_fragment(occurrence: Occurrence, sources: SourceLines | None) -> str | None:
    """Source lines spanned by an occurrence, or None if the text is unknown."""
    if not sources or occurrence.source_id not in sources:
        return None
    lines = sources[occurrence.source_id]
    return "\n".join(lines[occurrence.start_line - 1 : occurrence.end_line])


def matches_to_dataframe(matches: list[Match]) -> pd.DataFrame:
    """One row per occurrence.

    Columns: match_id, tokens, lines, occurrences, source_id, start_line, end_line, line_count
    """
    rows = [
        {
            "match_id": match_id,
            "tokens": match.token_length,
            "lines": match.line_count,
            "occurrences": match.occurrence_count,
            "source_id": occurrence.source_id,
            "start_line": occurrence.start_line,
            "end_line": occurrence.end_line,
            "line_count": occurrence.line_count,
        }
        for match_id, match in enumerate(matches)
        for occurrence in match.occurrences
    ]
    columns = [
        "match_id",
        "tokens",
        "lines",
        "occurrences",
        "source_id",
        "start_line",
        "end_line",
        "line_count",
    ]
    return pd.DataFrame(rows, columns=columns)


class TextRenderer:
    """Plain text report listing every duplication and its code."""

    name = "text"
    separator = "=" * 69

    def render(self, matches: list[Match], sources: SourceLines | None = None) -> str:
        blocks = []
        for match in matches:
            lines = [
                f"Found a {match.line_count} line ({match.token_length} tokens) "
                "duplication in the following files: "
            ]
            for occurrence in match.occurrences:
                lines.append(f"Starting at line {occurrence.start_line} of {occurrence.source_id}")
            fragment = code_fragment(match.first, sources)
            if fragment is not None:
                lines.append("")
                lines.append(fragment)
            blocks.append("\n".join(lines))
        if not blocks:
            return ""
        return ("\n" + self.separator + "\n").join(blocks) + "\n"


class XMLRenderer:
    """``pmd-cpd`` XML document."""

    name = "xml"

    def __init__(self, encoding: str = "utf-8") -> None:
        self.encoding = encoding

    def render(self, matches: list[Match], sources: SourceLines | None = None) -> str:
        root = ET.Element("pmd-cpd")
        for match in matches:
            duplication = ET.SubElement(
                root,
                "duplication",
                lines=str(match.line_count),
                tokens=str(match.token_length),
            )
            for occurrence in match.occurrences:
                ET.SubElement(
                    duplication,
                    "file",
                    line=str(occurrence.start_line),
                    endline=str(occurrence.end_line),
                    path=occurrence.source_id,
                )
            fragment = code_fragment(match.first, sources)
            if fragment is not None:
                ET.SubElement(duplication, "codefragment").text = fragment

        raw = ET.tostring(root, encoding="unicode")
        pretty = minidom.parseString(raw).toprettyxml(indent="   ")
        body = pretty.split("\n", 1)[1] if pretty.startswith("<?xml") else pretty
        return f'<?xml version="1.0" encoding="{self.encoding}"?>\n{body}'


class CSVRenderer:
    """CSV with one row per duplication.

    Columns are ``lines,tokens,occurrences`` followed by ``line<k>,file<k>``
    pairs, or with ``linecount_per_file`` by ``tokens,occurrences`` and
    ``line<k>,linecount<k>,file<k>`` triples.
    """

    def __init__(self, linecount_per_file: bool = False) -> None:
        self.linecount_per_file = linecount_per_file
        self.name = "csv_with_linecount_per_file" if linecount_per_file else "csv"

    def render(self, matches: list[Match], sources: SourceLines | None = None) -> str:
        occurrences = matches_to_dataframe(matches)
        widest = int(occurrences["occurrences"].max()) if not occurrences.empty else 0

        head = ["tokens", "occurrences"] if self.linecount_per_file else ["lines", "tokens", "occurrences"]
        columns = list(head)
        for k in range(1, widest + 1):
            if self.linecount_per_file:
                columns += [f"line{k}", f"linecount{k}", f"file{k}"]
            else:
                columns += [f"line{k}", f"file{k}"]

        rows = []
        for match_id, group in occurrences.groupby("match_id", sort=True):
            first = group.iloc[0]
            row = {"tokens": first["tokens"], "occurrences": first["occurrences"]}
            if not self.linecount_per_file:
                row["lines"] = first["lines"]
            for k, (_, occurrence) in enumerate(group.iterrows(), start=1):
                row[f"line{k}"] = occurrence["start_line"]
                row[f"file{k}"] = occurrence["source_id"]
                if self.linecount_per_file:
                    row[f"linecount{k}"] = occurrence["line_count"]
            rows.append(row)

        frame = pd.DataFrame(rows, columns=columns)
        for column in columns:
            if column.startswith(("line", "tokens", "occurrences", "lines")) and column in frame:
                frame[column] = frame[column].astype("Int64")
        return frame.to_csv(index=False, lineterminator="\n")


class VSRenderer:
    """Visual Studio style ``file(line): message`` lines."""

    name = "vs"

    def render(self, matches: list[Match], sources: SourceLines | None = None) -> str:
        lines = []
        for match in matches:
            for occurrence in match.occurrences:
                lines.append(
                    f"{occurrence.source_id}({occurrence.start_line}): "
                    f"Between lines {occurrence.start_line} and {occurrence.end_line}"
                )
        return "\n".join(lines) + ("\n" if lines else "")
