"""Report renderers."""

from cpdscan.render.renderers import (
    CSVRenderer,
    Renderer,
    TextRenderer,
    VSRenderer,
    XMLRenderer,
    code_fragment,
    matches_to_dataframe,
)

RENDERER_NAMES = ["text", "xml", "csv", "csv_with_linecount_per_file", "vs"]


def available_renderers() -> list[str]:
    return list(RENDERER_NAMES)


def get_renderer(name: str, encoding: str = "utf-8") -> Renderer:
    """Create a renderer by format name.

    Raises:
        ValueError: If the format is unknown
    """
    if name == "text":
        return TextRenderer()
    if name == "xml":
        return XMLRenderer(encoding)
    if name == "csv":
        return CSVRenderer()
    if name == "csv_with_linecount_per_file":
        return CSVRenderer(linecount_per_file=True)
    if name == "vs":
        return VSRenderer()
    raise ValueError(f"Unknown renderer: {name}. Available: {', '.join(RENDERER_NAMES)}")


__all__ = [
    "CSVRenderer",
    "Renderer",
    "TextRenderer",
    "VSRenderer",
    "XMLRenderer",
    "available_renderers",
    "code_fragment",
    "get_renderer",
    "matches_to_dataframe",
]
