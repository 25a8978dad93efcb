"""
Defines the configuration record and the enumerations it uses.
"""
from dataclasses import dataclass, field
from enum import Enum, IntEnum, auto

from .structures import BLANK_FORMAT, FormatDescriptor


APP_NAME = "htmlbook"
APP_VERSION = "1.9.18"

MAX_HF_IMAGES = 10


class OutputType(IntEnum):
    BOOK = 0
    CONTINUOUS = 1
    WEBPAGES = 2


class ExportFormat(Enum):
    """Which exporter receives the assembled documents."""
    HTML = auto()
    HTMLSEP = auto()
    EPUB = auto()
    PSPDF = auto()


# The integer values below are persisted in .htmldocrc and book files.
class Typeface(IntEnum):
    COURIER = 0
    TIMES = 1
    HELVETICA = 2
    MONOSPACE = 3
    SERIF = 4
    SANS_SERIF = 5


class FontStyle(IntEnum):
    NORMAL = 0
    BOLD = 1
    ITALIC = 2
    BOLD_ITALIC = 3


class LinkStyle(IntEnum):
    PLAIN = 0
    UNDERLINE = 1


class PageMode(IntEnum):
    DOCUMENT = 0
    OUTLINE = 1
    FULLSCREEN = 2


class PageLayout(IntEnum):
    SINGLE = 0
    ONE = 1
    TWO_LEFT = 2
    TWO_RIGHT = 3


class FirstPage(IntEnum):
    PAGE_1 = 0
    TOC = 1
    CHAPTER_1 = 2


class PageEffect(IntEnum):
    NONE = 0
    BOX_INWARD = 1
    BOX_OUTWARD = 2
    DISSOLVE = 3
    GLITTER_DOWN = 4
    GLITTER_DOWN_RIGHT = 5
    GLITTER_RIGHT = 6
    HORIZONTAL_BLINDS = 7
    HORIZONTAL_SWEEP_INWARD = 8
    HORIZONTAL_SWEEP_OUTWARD = 9
    VERTICAL_BLINDS = 10
    VERTICAL_SWEEP_INWARD = 11
    VERTICAL_SWEEP_OUTWARD = 12
    WIPE_DOWN = 13
    WIPE_LEFT = 14
    WIPE_RIGHT = 15
    WIPE_UP = 16


# PDF permission bits and the two saturated masks
PERM_PRINT = 4
PERM_MODIFY = 8
PERM_COPY = 16
PERM_ANNOTATE = 32
PERM_ALL = -4
PERM_NONE = -64


@dataclass
class Configuration:
    """
    All settings that drive a conversion run.

    Created once with built-in defaults by the entry point (or by the CGI gate),
    then mutated by the preferences file, book files and command-line options,
    in that order. The export stage only reads it.
    """
    # --- Typography ---
    body_font: Typeface = Typeface.TIMES
    heading_font: Typeface = Typeface.HELVETICA
    font_size: float = 11.0
    font_spacing: float = 1.2
    head_foot_type: Typeface = Typeface.HELVETICA
    head_foot_style: FontStyle = FontStyle.NORMAL
    head_foot_size: float = 11.0
    text_color: str = ""
    body_color: str = ""
    body_image: str = ""
    link_color: str = ""
    link_style: LinkStyle = LinkStyle.UNDERLINE
    links: bool = True
    charset: str = "iso-8859-1"
    browser_width: float = 680.0
    pre_indent: int = 72

    # --- Page geometry, in points ---
    page_width: int = 595
    page_length: int = 792
    page_left: int = 72
    page_right: int = 36
    page_top: int = 36
    page_bottom: int = 36
    page_duplex: bool = False
    landscape: bool = False
    number_up: int = 1

    # --- Output ---
    output_type: OutputType = OutputType.BOOK
    output_path: str = ""
    output_files: bool = False     # True: output_path is a directory
    export_format: ExportFormat = ExportFormat.HTML
    ps_level: int = 2              # 0 means PDF
    pdf_version: int = 14
    output_color: bool = True
    grayscale: bool = False
    output_jpeg: int = 0
    compression: int = 1
    embed_fonts: bool = True
    ps_commands: bool = False
    xrx_comments: bool = False

    # --- Headers and footers ---
    header: FormatDescriptor = BLANK_FORMAT
    header1: FormatDescriptor = BLANK_FORMAT
    footer: FormatDescriptor = BLANK_FORMAT
    toc_header: FormatDescriptor = BLANK_FORMAT
    toc_footer: FormatDescriptor = BLANK_FORMAT
    logo_image: str = ""
    letterhead: str = ""
    title_image: str = ""
    hf_images: list[str] = field(default_factory=lambda: [""] * MAX_HF_IMAGES)

    # --- Table of contents ---
    toc_levels: int = 3
    toc_numbers: bool = False
    toc_title: str = "Table of Contents"
    title_page: bool = True

    # --- PDF ---
    pdf_page_mode: PageMode = PageMode.OUTLINE
    pdf_page_layout: PageLayout = PageLayout.SINGLE
    pdf_first_page: FirstPage = FirstPage.CHAPTER_1
    pdf_effect: PageEffect = PageEffect.NONE
    pdf_page_duration: float = 10.0
    pdf_effect_duration: float = 1.0
    encryption: bool = False
    permissions: int = PERM_ALL
    owner_password: str = ""
    user_password: str = ""

    # --- Networking and input lookup ---
    path: str = ""
    proxy: str = ""
    cookies: str = ""
    referer: str = ""
    local_files_disabled: bool = False

    # --- Diagnostics ---
    strict_html: bool = False
    overflow_errors: bool = False
    verbosity: int = 0
    errors: int = 0

    # --- Installation ---
    data_dir: str = ""
    help_dir: str = ""
    cgi_mode: bool = False

    def select_export(self, export_format: ExportFormat, *,
                      ps_level: int | None = None, pdf_version: int | None = None):
        """Makes `export_format` the single active exporter."""
        self.export_format = export_format
        if ps_level is not None:
            self.ps_level = ps_level
        if pdf_version is not None:
            self.pdf_version = pdf_version

    def set_output_color(self, color: bool):
        self.output_color = color
        self.grayscale = not color
