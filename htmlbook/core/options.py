"""
The option table shared by the command line and book files.

Command-line options may be abbreviated: the first table entry whose name
starts with the given token wins, as long as the token is at least
`min_length` characters long. Book files only accept complete names.
"""
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..utils.config import (
    APP_VERSION, ExportFormat, FirstPage, LinkStyle, MAX_HF_IMAGES, OutputType, PageMode,
)
from ..utils.errors import UsageError
from ..utils.logger import set_console_level
from ..utils.tables import (
    EXPORT_FORMATS, FIRST_PAGES, HEAD_FOOT_FONTS, PAGE_EFFECTS, PAGE_LAYOUTS,
    PAGE_MODES, TYPEFACES, lookup_enum,
)
from ..utils.units import get_measurement, parse_float, parse_int, set_page_size
from .format_spec import compile_format
from .locator import file_extension
from .permissions import set_permissions

if TYPE_CHECKING:
    from .pipeline import ConversionSession


log = logging.getLogger("htmlbook")

# (session, option token as typed, value or None)
Handler = Callable[["ConversionSession", str, str | None], None]

# Short spellings that book files must not read as "--t", "--f", ...
SHORT_ALIASES = ("-t", "-f", "-d", "-v")

NUMBER_UP_VALUES = (1, 2, 4, 6, 9, 16)
LINK_STYLES = {"plain": LinkStyle.PLAIN, "underline": LinkStyle.UNDERLINE}


@dataclass(frozen=True)
class Option:
    name: str
    min_length: int
    takes_value: bool
    handler: Handler
    aliases: tuple[str, ...] = ()
    exact: bool = False             # no abbreviation
    book: bool = False              # also accepted in book files
    cgi_ignored: bool = False       # book files may not set it in CGI mode
    value_prefix: str | None = None # "--jpeg=90" style
    book_handler: Handler | None = None  # replaces `handler` in book files


# --- Handler factories ---

def store(attribute: str) -> Handler:
    def handler(session, token, value):
        setattr(session.config, attribute, value)
    return handler


def flag(attribute: str, state) -> Handler:
    def handler(session, token, value):
        setattr(session.config, attribute, state)
    return handler


def measurement(attribute: str) -> Handler:
    def handler(session, token, value):
        setattr(session.config, attribute, get_measurement(value))
    return handler


def clamped(attribute: str, min_val: float, max_val: float) -> Handler:
    """Stores a float forced into [min_val, max_val]."""
    def handler(session, token, value):
        setattr(session.config, attribute, min(max(parse_float(value), min_val), max_val))
    return handler


def at_least(attribute: str, min_val: float, what: str) -> Handler:
    """Stores a float, rejecting anything below min_val."""
    def handler(session, token, value):
        number = parse_float(value)
        if number < min_val:
            raise UsageError(f'Bad {what} "{value}"!')
        setattr(session.config, attribute, number)
    return handler


def header_format(attribute: str) -> Handler:
    def handler(session, token, value):
        setattr(session.config, attribute, compile_format(value))
    return handler


def keyword(attribute: str, table: tuple[str, ...]) -> Handler:
    """Unknown keywords leave the setting alone."""
    def handler(session, token, value):
        member = lookup_enum(table, value)
        if member is not None:
            setattr(session.config, attribute, member)
    return handler


def typeface(attribute: str) -> Handler:
    def handler(session, token, value):
        face = TYPEFACES.get(value.lower())
        if face is not None:
            setattr(session.config, attribute, face)
    return handler


def page_flow(output_type: OutputType) -> Handler:
    """--continuous / --webpage: no TOC, no title page, plain PDF opening."""
    def handler(session, token, value):
        config = session.config
        config.toc_levels = 0
        config.title_page = False
        config.output_type = output_type
        config.pdf_page_mode = PageMode.DOCUMENT
        config.pdf_first_page = FirstPage.PAGE_1
    return handler


def superseded(attribute: str, state: bool, replacement: str) -> Handler:
    def handler(session, token, value):
        log.warning(f"{token} option superseded by {replacement}!")
        setattr(session.config, attribute, state)
    return handler


# --- Handlers with their own rules ---

def _batch(session, token, value):
    session.load_book(value)


def _color(state: bool) -> Handler:
    def handler(session, token, value):
        session.config.set_output_color(state)
    return handler


def _compression(session, token, value):
    config = session.config
    if config.pdf_version < 12:
        return
    if token.startswith("--compression=") and len(token) > 14:
        config.compression = parse_int(token[14:])
    else:
        config.compression = 1


def _format(session, token, value):
    choice = EXPORT_FORMATS.get(value.lower())
    if choice is None:
        raise UsageError(token)
    config = session.config
    config.select_export(choice.export_format, ps_level=choice.ps_level, pdf_version=choice.pdf_version)
    if choice.compression is not None:
        config.compression = choice.compression


def _head_foot_font(session, token, value):
    font = HEAD_FOOT_FONTS.get(value.lower())
    if font is not None:
        session.config.head_foot_type, session.config.head_foot_style = font


def _help(session, token, value):
    raise UsageError()


def _hf_image(session, token, value):
    index_text = token[len("--hfimage"):]
    if index_text:
        if not index_text.isdigit() or int(index_text) >= MAX_HF_IMAGES:
            raise UsageError(token)
        index = int(index_text)
    else:
        index = 0
    session.config.hf_images[index] = value


def _jpeg(session, token, value):
    if token.startswith("--jpeg=") and len(token) > 7:
        session.config.output_jpeg = parse_int(token[7:])
    else:
        session.config.output_jpeg = 90


def _link_style(session, token, value):
    style = LINK_STYLES.get(value)
    if style is None:
        raise UsageError(token)
    session.config.link_style = style


def _no_local_files(session, token, value):
    session.disable_local_files()


def _number_up(session, token, value):
    number = parse_int(value)
    if number not in NUMBER_UP_VALUES:
        raise UsageError(token)
    session.config.number_up = number


def _outdir(session, token, value):
    session.config.output_path = value
    session.config.output_files = True


def _outfile(session, token, value):
    """A single output file; its extension picks the export format."""
    config = session.config
    config.output_path = value
    config.output_files = False

    ext = file_extension(value).lower()
    if ext == "epub":
        config.select_export(ExportFormat.EPUB)
    elif ext == "html":
        config.select_export(ExportFormat.HTML)
    elif ext == "pdf":
        config.select_export(ExportFormat.PSPDF, ps_level=0)
    elif ext == "ps":
        config.select_export(ExportFormat.PSPDF, ps_level=config.ps_level or 2)


def _book_outfile(session, token, value):
    """Book files only set the output file, never the export format."""
    session.config.output_path = value
    session.config.output_files = False


def _permissions(session, token, value):
    set_permissions(session.config, value)


def _quiet(session, token, value):
    session.config.verbosity = -1
    set_console_level(session.config.verbosity)


def _title_image(session, token, value):
    session.config.title_image = value
    session.config.title_page = True


def _toc_levels(session, token, value):
    session.config.toc_levels = parse_int(value)


def _verbose(session, token, value):
    session.config.verbosity += 1
    set_console_level(session.config.verbosity)


def _version(session, token, value):
    print(APP_VERSION)
    raise SystemExit(0)


def _size(session, token, value):
    set_page_size(session.config, value)


# Order matters: abbreviations resolve to the first entry they fit.
OPTIONS: tuple[Option, ...] = (
    Option("--batch", 4, True, _batch),
    Option("--bodycolor", 7, True, store("body_color"), book=True),
    Option("--bodyfont", 7, True, typeface("body_font"), aliases=("--textfont",), book=True),
    Option("--bodyimage", 7, True, store("body_image"), book=True),
    Option("--book", 5, False, flag("output_type", OutputType.BOOK), book=True),
    Option("--bottom", 5, True, measurement("page_bottom"), book=True),
    Option("--browserwidth", 4, True, at_least("browser_width", 1.0, "browser width"), book=True),
    Option("--charset", 4, True, store("charset"), book=True),
    Option("--color", 5, False, _color(True), book=True),
    Option("--compression", 5, False, _compression, book=True, value_prefix="--compression="),
    Option("--continuous", 5, False, page_flow(OutputType.CONTINUOUS), book=True),
    Option("--cookies", 5, True, store("cookies"), book=True),
    Option("--datadir", 4, True, store("data_dir")),
    Option("--duplex", 4, False, flag("page_duplex", True), book=True),
    Option("--effectduration", 4, True, at_least("pdf_effect_duration", 0.0, "effect duration"), book=True),
    Option("--embedfonts", 4, False, flag("embed_fonts", True), book=True),
    Option("--encryption", 4, False, flag("encryption", True), book=True),
    Option("--firstpage", 4, True, keyword("pdf_first_page", FIRST_PAGES), book=True),
    Option("--fontsize", 8, True, clamped("font_size", 4.0, 24.0), book=True),
    Option("--fontspacing", 8, True, clamped("font_spacing", 1.0, 3.0), book=True),
    Option("--footer", 5, True, header_format("footer"), book=True),
    Option("--format", 5, True, _format, aliases=("-t",), book=True, cgi_ignored=True),
    Option("--grayscale", 3, False, _color(False), book=True),
    Option("--header", 8, True, header_format("header"), exact=True, book=True),
    Option("--header1", 9, True, header_format("header1"), exact=True, book=True),
    Option("--headfootfont", 11, True, _head_foot_font, book=True),
    Option("--headfootsize", 11, True, clamped("head_foot_size", 6.0, 24.0), book=True),
    Option("--headingfont", 7, True, typeface("heading_font"), book=True),
    Option("--help", 6, False, _help),
    Option("--helpdir", 7, True, store("help_dir")),
    Option("--hfimage", 9, True, _hf_image, value_prefix="--hfimage"),
    Option("--jpeg", 3, False, _jpeg, book=True, value_prefix="--jpeg="),
    Option("--landscape", 4, False, flag("landscape", True), book=True),
    Option("--left", 5, True, measurement("page_left"), book=True),
    Option("--letterhead", 5, True, store("letterhead"), book=True),
    Option("--linkcolor", 7, True, store("link_color"), book=True),
    Option("--links", 7, False, flag("links", True), exact=True, book=True),
    Option("--linkstyle", 8, True, _link_style, book=True),
    Option("--logoimage", 5, True, store("logo_image"), aliases=("--logo",), book=True),
    Option("--no-compression", 6, False, flag("compression", 0), book=True),
    Option("--no-duplex", 4, False, flag("page_duplex", False)),
    Option("--no-embedfonts", 7, False, flag("embed_fonts", False), book=True),
    Option("--no-encryption", 7, False, flag("encryption", False), book=True),
    Option("--no-jpeg", 6, False, flag("output_jpeg", 0), book=True),
    Option("--no-links", 7, False, flag("links", False), book=True),
    Option("--no-localfiles", 7, False, _no_local_files),
    Option("--no-numbered", 6, False, flag("toc_numbers", False), book=True),
    Option("--no-overflow", 6, False, flag("overflow_errors", False), book=True),
    Option("--no-pscommands", 6, False, flag("ps_commands", False), book=True),
    Option("--no-strict", 6, False, flag("strict_html", False), book=True),
    Option("--no-title", 7, False, flag("title_page", False), book=True),
    Option("--no-toc", 7, False, flag("toc_levels", 0), book=True),
    Option("--no-truetype", 7, False, superseded("embed_fonts", False, "--no-embedfonts"), book=True),
    Option("--no-xrxcomments", 6, False, flag("xrx_comments", False), book=True),
    Option("--numbered", 5, False, flag("toc_numbers", True), book=True),
    Option("--nup", 5, True, _number_up, book=True),
    Option("--outdir", 6, True, _outdir, aliases=("-d",), book=True, cgi_ignored=True),
    Option("--outfile", 6, True, _outfile, aliases=("-f",), book=True, cgi_ignored=True,
           book_handler=_book_outfile),
    Option("--overflow", 4, False, flag("overflow_errors", True), book=True),
    Option("--owner-password", 4, True, store("owner_password"), book=True),
    Option("--pageduration", 7, True, at_least("pdf_page_duration", 1.0, "page duration"), book=True),
    Option("--pageeffect", 7, True, keyword("pdf_effect", PAGE_EFFECTS), book=True),
    Option("--pagelayout", 7, True, keyword("pdf_page_layout", PAGE_LAYOUTS), book=True),
    Option("--pagemode", 7, True, keyword("pdf_page_mode", PAGE_MODES), book=True),
    Option("--path", 5, True, store("path"), book=True),
    Option("--permissions", 4, True, _permissions, book=True),
    Option("--portrait", 4, False, flag("landscape", False), book=True),
    Option("--pre-indent", 5, True, measurement("pre_indent"), book=True),
    Option("--proxy", 4, True, store("proxy"), book=True),
    Option("--pscommands", 3, False, flag("ps_commands", True), book=True),
    Option("--quiet", 3, False, _quiet),
    Option("--referer", 4, True, store("referer")),
    Option("--right", 4, True, measurement("page_right"), book=True),
    Option("--size", 4, True, _size, book=True),
    Option("--strict", 4, False, flag("strict_html", True), book=True),
    Option("--textcolor", 7, True, store("text_color"), book=True),
    Option("--title", 7, False, flag("title_page", True), book=True),
    Option("--titlefile", 8, True, _title_image, aliases=("--titleimage",), book=True),
    Option("--tocfooter", 6, True, header_format("toc_footer"), book=True),
    Option("--tocheader", 6, True, header_format("toc_header"), book=True),
    Option("--toclevels", 6, True, _toc_levels, book=True),
    Option("--toctitle", 6, True, store("toc_title"), book=True),
    Option("--top", 5, True, measurement("page_top"), book=True),
    Option("--user-password", 4, True, store("user_password"), book=True),
    Option("--truetype", 4, False, superseded("embed_fonts", True, "--embedfonts"), book=True),
    Option("--verbose", 6, False, _verbose, aliases=("-v",)),
    Option("--version", 6, False, _version),
    Option("--webpage", 3, False, page_flow(OutputType.WEBPAGES), book=True),
    Option("--xrxcomments", 3, False, flag("xrx_comments", True), book=True),
)


def _matches_name(option: Option, token: str, name: str) -> bool:
    if token == name:
        return True
    if option.exact:
        return False
    return len(token) >= option.min_length and name.startswith(token)


def match_option(table: tuple[Option, ...], token: str) -> Option | None:
    """First entry that `token` names, abbreviated or not."""
    for option in table:
        if option.value_prefix and token.startswith(option.value_prefix):
            return option
        if any(_matches_name(option, token, name) for name in (option.name, *option.aliases)):
            return option
    return None


def book_spelling(name: str) -> str:
    """Book files may write long options with one dash: "-landscape"."""
    if name.startswith("-") and not name.startswith("--") and name not in SHORT_ALIASES:
        return "-" + name
    return name


def match_book_option(table: tuple[Option, ...], name: str) -> Option | None:
    """Book-file lookup: complete names only."""
    name = book_spelling(name)
    for option in table:
        if not option.book:
            continue
        if name == option.name or name in option.aliases:
            return option
        if option.value_prefix and name.startswith(option.value_prefix):
            return option
    return None


def parse_arguments(session: "ConversionSession", argv: list[str]):
    """
    Applies command-line arguments left to right.

    Options update the session configuration, "-" reads standard input and
    every other argument is an input document looked up through the search
    path in effect at that point.

    Raises:
        UsageError: unknown option, missing value or rejected value.
        SystemExit: --version.
    """
    index = 0
    while index < len(argv):
        token = argv[index]

        option = match_option(OPTIONS, token)

        if token == "-":
            session.read_stdin()
        elif option is not None:
            value = None
            if option.takes_value:
                index += 1
                if index >= len(argv):
                    raise UsageError(token)
                value = argv[index]
            option.handler(session, token, value)
        elif token.startswith("-"):
            raise UsageError(token)
        else:
            session.read_file(token, session.config.path)

        index += 1


def _read_word(line: str, pos: int) -> tuple[str, int]:
    """Reads up to the next space, then skips the spaces after it."""
    end = line.find(" ", pos)
    if end < 0:
        end = len(line)
    word = line[pos:end]
    while end < len(line) and line[end] == " ":
        end += 1
    return word, end


def _read_value(line: str, pos: int) -> tuple[str, int]:
    """A plain word or a double-quoted string that may contain spaces."""
    if pos < len(line) and line[pos] == '"':
        end = line.find('"', pos + 1)
        if end < 0:
            return line[pos + 1:], len(line)
        value, pos = line[pos + 1:end], end + 1
        while pos < len(line) and line[pos] == " ":
            pos += 1
        return value, pos
    return _read_word(line, pos)


def parse_directive_line(session: "ConversionSession", line: str):
    """
    Applies one option line from a book file.

    Rejected values are logged and skipped instead of aborting the run.
    Unknown options swallow the word that follows them.
    """
    pos = 0
    while pos < len(line) and line[pos] == " ":
        pos += 1

    while pos < len(line):
        word, pos = _read_word(line, pos)
        name = book_spelling(word)
        option = match_book_option(OPTIONS, name)

        value = None
        if option is None or option.takes_value:
            value, pos = _read_value(line, pos)

        if option is None:
            log.debug(f"Ignoring unknown book option {name} {value}")
            continue
        if option.cgi_ignored and session.config.cgi_mode:
            log.debug(f"Ignoring {name} in CGI mode")
            continue

        try:
            (option.book_handler or option.handler)(session, name, value)
        except UsageError as e:
            log.warning(f"Ignoring book option {name} {value or ''}: {e}")
