"""
Loads and saves the per-user preferences file (~/.htmldocrc).

The file holds one KEY=VALUE line per setting. Keys are matched without
regard to case; unknown keys and '#' lines are skipped.
"""
import logging
import os
import sys
from pathlib import Path
from typing import Any, NamedTuple

from ..utils.config import (
    APP_VERSION, Configuration, FirstPage, FontStyle, LinkStyle, PageEffect,
    PageLayout, PageMode, Typeface,
)
from ..utils.units import parse_float, parse_int
from .format_spec import apply_default_formats, compile_format


log = logging.getLogger("htmlbook")

PREFERENCES_FILENAME = ".htmldocrc"


class PrefKey(NamedTuple):
    key: str
    attribute: str
    kind: Any       # "str", "int", "float", "bool", "format" or an IntEnum class


# Save order; load accepts the same keys in any order.
PREFERENCE_KEYS: tuple[PrefKey, ...] = (
    PrefKey("TEXTCOLOR", "text_color", "str"),
    PrefKey("BODYCOLOR", "body_color", "str"),
    PrefKey("BODYIMAGE", "body_image", "str"),
    PrefKey("LINKCOLOR", "link_color", "str"),
    PrefKey("LINKSTYLE", "link_style", LinkStyle),
    PrefKey("BROWSERWIDTH", "browser_width", "float"),
    PrefKey("PAGEWIDTH", "page_width", "int"),
    PrefKey("PAGELENGTH", "page_length", "int"),
    PrefKey("PAGELEFT", "page_left", "int"),
    PrefKey("PAGERIGHT", "page_right", "int"),
    PrefKey("PAGETOP", "page_top", "int"),
    PrefKey("PAGEBOTTOM", "page_bottom", "int"),
    PrefKey("PAGEDUPLEX", "page_duplex", "bool"),
    PrefKey("LANDSCAPE", "landscape", "bool"),
    PrefKey("COMPRESSION", "compression", "int"),
    PrefKey("OUTPUTCOLOR", "output_color", "bool"),
    PrefKey("TOCNUMBERS", "toc_numbers", "bool"),
    PrefKey("TOCLEVELS", "toc_levels", "int"),
    PrefKey("JPEG", "output_jpeg", "int"),
    PrefKey("PAGEHEADER", "header", "format"),
    PrefKey("PAGEFOOTER", "footer", "format"),
    PrefKey("NUMBERUP", "number_up", "int"),
    PrefKey("TOCHEADER", "toc_header", "format"),
    PrefKey("TOCFOOTER", "toc_footer", "format"),
    PrefKey("TOCTITLE", "toc_title", "str"),
    PrefKey("BODYFONT", "body_font", Typeface),
    PrefKey("HEADINGFONT", "heading_font", Typeface),
    PrefKey("FONTSIZE", "font_size", "float"),
    PrefKey("FONTSPACING", "font_spacing", "float"),
    PrefKey("HEADFOOTTYPE", "head_foot_type", Typeface),
    PrefKey("HEADFOOTSTYLE", "head_foot_style", FontStyle),
    PrefKey("HEADFOOTSIZE", "head_foot_size", "float"),
    PrefKey("PDFVERSION", "pdf_version", "int"),
    PrefKey("PSLEVEL", "ps_level", "int"),
    PrefKey("PSCOMMANDS", "ps_commands", "bool"),
    PrefKey("XRXCOMMENTS", "xrx_comments", "bool"),
    PrefKey("CHARSET", "charset", "str"),
    PrefKey("PAGEMODE", "pdf_page_mode", PageMode),
    PrefKey("PAGELAYOUT", "pdf_page_layout", PageLayout),
    PrefKey("FIRSTPAGE", "pdf_first_page", FirstPage),
    PrefKey("PAGEEFFECT", "pdf_effect", PageEffect),
    PrefKey("PAGEDURATION", "pdf_page_duration", "float"),
    PrefKey("EFFECTDURATION", "pdf_effect_duration", "float"),
    PrefKey("ENCRYPTION", "encryption", "bool"),
    PrefKey("PERMISSIONS", "permissions", "int"),
    PrefKey("OWNERPASSWORD", "owner_password", "str"),
    PrefKey("USERPASSWORD", "user_password", "str"),
    PrefKey("LINKS", "links", "bool"),
    PrefKey("EMBEDFONTS", "embed_fonts", "bool"),
    PrefKey("PATH", "path", "str"),
    PrefKey("PROXY", "proxy", "str"),
    PrefKey("STRICTHTML", "strict_html", "bool"),
)

# Older files wrote EMBEDFONTS as TRUETYPE
_LEGACY_KEYS = {"TRUETYPE": PrefKey("TRUETYPE", "embed_fonts", "bool")}

_KEYS_BY_NAME = {pref.key: pref for pref in PREFERENCE_KEYS} | _LEGACY_KEYS


def resolve_data_dir(environ=None) -> str:
    """Directory holding the installed data files."""
    environ = os.environ if environ is None else environ
    if environ.get("HTMLDOC_DATA"):
        return environ["HTMLDOC_DATA"]
    if environ.get("SNAP"):
        return os.path.join(environ["SNAP"], "share", "htmldoc")
    return os.path.join(sys.prefix, "share", "htmldoc")


def preferences_path(environ=None) -> Path:
    """~/.htmldocrc, or the profile's AppData folder on Windows."""
    environ = os.environ if environ is None else environ
    home = environ.get("APPDATA") if sys.platform == "win32" else environ.get("HOME")
    if not home:
        home = resolve_data_dir(environ)
    return Path(home) / PREFERENCES_FILENAME


def _parse_pdf_version(value: str) -> int:
    """Accepts "1.4" as well as "14"."""
    if "." in value:
        return int(parse_float(value) * 10.0 + 0.5)
    return parse_int(value)


def _parse_value(pref: PrefKey, value: str):
    if pref.key == "PDFVERSION":
        return _parse_pdf_version(value)
    if pref.kind == "str":
        return value
    if pref.kind == "int":
        return parse_int(value)
    if pref.kind == "float":
        return parse_float(value)
    if pref.kind == "bool":
        return parse_int(value) != 0
    if pref.kind == "format":
        return compile_format(value)
    return pref.kind(parse_int(value))


def _format_float(value: float) -> str:
    """Shortest text that reads back as the same float."""
    return str(int(value)) if float(value).is_integer() else repr(float(value))


def _format_value(pref: PrefKey, value) -> str:
    if pref.kind == "str":
        # One setting per line
        return " ".join(value.splitlines())
    if pref.kind == "float":
        return _format_float(value)
    if pref.kind == "bool":
        return "1" if value else "0"
    if pref.kind == "format":
        return str(value)
    return str(int(value))


def apply_preference(config: Configuration, key: str, value: str) -> bool:
    """Applies one KEY=VALUE pair. Returns False if the key is not recognized."""
    pref = _KEYS_BY_NAME.get(key.strip().upper())
    if pref is None:
        return False
    try:
        parsed = _parse_value(pref, value)
    except ValueError:
        log.warning(f"Ignoring bad preference value {pref.key}={value}")
        return True

    if pref.attribute == "output_color":
        config.set_output_color(parsed)
    else:
        setattr(config, pref.attribute, parsed)
    return True


def load_preferences(config: Configuration, path: Path | None = None):
    """
    Overlays the preferences file onto `config`.

    A missing or unreadable file is not an error. Blank headers and footers
    get their default layouts afterwards, whether or not a file was read.
    """
    path = preferences_path() if path is None else Path(path)
    try:
        with open(path, "r", encoding="utf-8", errors="replace") as f:
            for line in f:
                line = line.rstrip("\r\n")
                if not line or line.startswith("#"):
                    continue
                key, sep, value = line.partition("=")
                if not sep:
                    continue
                if not apply_preference(config, key, value):
                    log.debug(f"Ignoring unknown preference {key}")
        log.debug(f"Loaded preferences from {path}")
    except OSError:
        log.debug(f"No preferences loaded from {path}")

    apply_default_formats(config)


def save_preferences(config: Configuration, path: Path | None = None):
    """Writes every persisted setting, replacing the previous file."""
    path = preferences_path() if path is None else Path(path)
    lines = [f"#HTMLDOCRC {APP_VERSION}"]
    for pref in PREFERENCE_KEYS:
        lines.append(f"{pref.key}={_format_value(pref, getattr(config, pref.attribute))}")

    try:
        with open(path, "w", encoding="utf-8") as f:
            f.write("\n".join(lines) + "\n")
    except OSError as e:
        log.debug(f"Unable to save preferences to {path}: {e}")
