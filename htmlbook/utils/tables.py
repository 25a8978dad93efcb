"""
Keyword tables for enumerated option values.

The position of a keyword in its table is the integer stored in preferences and
book files, so the ordering of every table here is fixed.
"""
from typing import NamedTuple

from .config import (
    FirstPage, FontStyle, PageEffect, PageLayout, PageMode, Typeface, ExportFormat,
)


PAGE_MODES = ("document", "outline", "fullscreen")
PAGE_LAYOUTS = ("single", "one", "twoleft", "tworight")
FIRST_PAGES = ("p1", "toc", "c1")
PAGE_EFFECTS = ("none", "bi", "bo", "d", "gd", "gdr", "gr", "hb", "hsi",
                "hso", "vb", "vsi", "vso", "wd", "wl", "wr", "wu")

# keyword table -> enum built from the table index
KEYWORD_ENUMS = {
    PAGE_MODES: PageMode,
    PAGE_LAYOUTS: PageLayout,
    FIRST_PAGES: FirstPage,
    PAGE_EFFECTS: PageEffect,
}


def lookup_keyword(table: tuple[str, ...], value: str) -> int | None:
    """Case-insensitive linear scan; returns the index of the first match."""
    folded = value.lower()
    for index, keyword in enumerate(table):
        if keyword == folded:
            return index
    return None


def lookup_enum(table: tuple[str, ...], value: str):
    """Like lookup_keyword(), but returns the matching enum member or None."""
    index = lookup_keyword(table, value)
    if index is None:
        return None
    return KEYWORD_ENUMS[table](index)


# --bodyfont / --headingfont names
TYPEFACES: dict[str, Typeface] = {
    "courier": Typeface.COURIER,
    "times": Typeface.TIMES,
    "helvetica": Typeface.HELVETICA,
    "arial": Typeface.HELVETICA,
    "monospace": Typeface.MONOSPACE,
    "serif": Typeface.SERIF,
    "sans-serif": Typeface.SANS_SERIF,
    "sans": Typeface.SANS_SERIF,
}


def _styled(family: Typeface, normal: tuple[str, ...], bold: str,
            italic: str, bold_italic: str) -> dict[str, tuple[Typeface, FontStyle]]:
    names = {name: (family, FontStyle.NORMAL) for name in normal}
    names[bold] = (family, FontStyle.BOLD)
    names[italic] = (family, FontStyle.ITALIC)
    names[bold_italic] = (family, FontStyle.BOLD_ITALIC)
    return names


# --headfootfont names: family and style in one keyword
HEAD_FOOT_FONTS: dict[str, tuple[Typeface, FontStyle]] = {
    **_styled(Typeface.COURIER, ("courier",),
              "courier-bold", "courier-oblique", "courier-boldoblique"),
    **_styled(Typeface.TIMES, ("times", "times-roman"),
              "times-bold", "times-italic", "times-bolditalic"),
    **_styled(Typeface.HELVETICA, ("helvetica",),
              "helvetica-bold", "helvetica-oblique", "helvetica-boldoblique"),
    **_styled(Typeface.MONOSPACE, ("monospace",),
              "monospace-bold", "monospace-oblique", "monospace-boldoblique"),
    **_styled(Typeface.SERIF, ("serif", "serif-roman"),
              "serif-bold", "serif-italic", "serif-bolditalic"),
    **_styled(Typeface.SANS_SERIF, ("sans-serif", "sans"),
              "sans-serif-bold", "sans-serif-oblique", "sans-serif-boldoblique"),
    **_styled(Typeface.SANS_SERIF, (),
              "sans-bold", "sans-oblique", "sans-boldoblique"),
}


class ExportChoice(NamedTuple):
    """What one --format keyword selects. None leaves the setting unchanged."""
    export_format: ExportFormat
    ps_level: int | None = None
    pdf_version: int | None = None
    compression: int | None = None


# --format / -t keywords
EXPORT_FORMATS: dict[str, ExportChoice] = {
    "epub": ExportChoice(ExportFormat.EPUB),
    "html": ExportChoice(ExportFormat.HTML),
    "htmlsep": ExportChoice(ExportFormat.HTMLSEP),
    "pdf": ExportChoice(ExportFormat.PSPDF, 0, 14),
    "pdf14": ExportChoice(ExportFormat.PSPDF, 0, 14),
    "pdf13": ExportChoice(ExportFormat.PSPDF, 0, 13),
    "pdf12": ExportChoice(ExportFormat.PSPDF, 0, 12),
    "pdf11": ExportChoice(ExportFormat.PSPDF, 0, 11, 0),
    "ps1": ExportChoice(ExportFormat.PSPDF, 1),
    "ps": ExportChoice(ExportFormat.PSPDF, 2),
    "ps2": ExportChoice(ExportFormat.PSPDF, 2),
    "ps3": ExportChoice(ExportFormat.PSPDF, 3),
}
