import io

import pytest

from htmlbook.core.options import OPTIONS, match_book_option, match_option, parse_arguments
from htmlbook.core.pipeline import ConversionSession
from htmlbook.utils.config import (
    Configuration, ExportFormat, FirstPage, FontStyle, OutputType, PageMode, Typeface,
    PERM_PRINT,
)
from htmlbook.utils.errors import UsageError


def _name(token):
    option = match_option(OPTIONS, token)
    return option.name if option else None


@pytest.mark.parametrize("token, expected", [
    ("--help", "--help"),
    ("--helpd", "--helpdir"),
    ("--no", "--no-duplex"),
    ("--header", "--header"),
    ("--heade", None),
    ("--header1", "--header1"),
    ("-t", "--format"),
    ("-f", "--outfile"),
    ("-d", "--outdir"),
    ("-v", "--verbose"),
    ("--jpeg=50", "--jpeg"),
    ("--compression=3", "--compression"),
    ("--hfimage3", "--hfimage"),
    ("--textfont", "--bodyfont"),
    ("--fonts", None),
    ("--fontsi", "--fontsize"),
    ("--gray", "--grayscale"),
    ("--links", "--links"),
    ("--logo", "--logoimage"),
    ("--bogus", None),
])
def test_match_option(token, expected):
    assert _name(token) == expected


def test_book_lookup_needs_complete_names():
    assert match_book_option(OPTIONS, "--landscape").name == "--landscape"
    assert match_book_option(OPTIONS, "-landscape").name == "--landscape"
    assert match_book_option(OPTIONS, "--land") is None
    assert match_book_option(OPTIONS, "-t").name == "--format"
    assert match_book_option(OPTIONS, "--batch") is None


def test_fontsize_is_clamped_and_last_wins(session):
    parse_arguments(session, ["--fontsize", "2", "--fontsize", "30"])
    assert session.config.font_size == 24.0

    parse_arguments(session, ["--fontsize", "2"])
    assert session.config.font_size == 4.0

    parse_arguments(session, ["--fontspacing", "9", "--headfootsize", "1"])
    assert session.config.font_spacing == 3.0
    assert session.config.head_foot_size == 6.0


def test_unknown_option(session):
    with pytest.raises(UsageError) as exc:
        parse_arguments(session, ["--bogus"])
    assert exc.value.arg == "--bogus"
    assert str(exc.value) == 'Bad option argument "--bogus"!'


def test_missing_value(session):
    with pytest.raises(UsageError) as exc:
        parse_arguments(session, ["--landscape", "--fontsize"])
    assert exc.value.arg == "--fontsize"


@pytest.mark.parametrize("argv", [
    ["--format", "doc"],
    ["--nup", "3"],
    ["--browserwidth", "0"],
    ["--pageduration", "0.5"],
    ["--effectduration", "-1"],
    ["--linkstyle", "bold"],
    ["--hfimage12", "x.png"],
    ["--hfimagex", "x.png"],
    ["--help"],
])
def test_rejected_values(session, argv):
    with pytest.raises(UsageError):
        parse_arguments(session, argv)


def test_format_selection(session):
    config = session.config
    parse_arguments(session, ["--format", "pdf13"])
    assert config.export_format == ExportFormat.PSPDF
    assert (config.ps_level, config.pdf_version) == (0, 13)

    parse_arguments(session, ["-t", "PDF11"])
    assert config.pdf_version == 11
    assert config.compression == 0

    parse_arguments(session, ["-t", "epub"])
    assert config.export_format == ExportFormat.EPUB


def test_outfile_extension_selects_format(session):
    config = session.config
    parse_arguments(session, ["--outfile", "book.pdf"])
    assert config.export_format == ExportFormat.PSPDF
    assert config.ps_level == 0
    assert config.output_path == "book.pdf"
    assert config.output_files is False

    parse_arguments(session, ["-f", "book.ps"])
    assert config.ps_level == 2

    parse_arguments(session, ["-d", "site"])
    assert config.output_path == "site"
    assert config.output_files is True


def test_compression_needs_pdf_12(session):
    config = session.config
    parse_arguments(session, ["--compression=5"])
    assert config.compression == 5

    parse_arguments(session, ["--format", "pdf11", "--compression=5"])
    assert config.compression == 0

    parse_arguments(session, ["--format", "pdf12", "--compress"])
    assert config.compression == 1


def test_jpeg(session):
    parse_arguments(session, ["--jpeg"])
    assert session.config.output_jpeg == 90
    parse_arguments(session, ["--jpeg=40"])
    assert session.config.output_jpeg == 40
    parse_arguments(session, ["--no-jpeg"])
    assert session.config.output_jpeg == 0


@pytest.mark.parametrize("option, output_type", [
    ("--continuous", OutputType.CONTINUOUS),
    ("--webpage", OutputType.WEBPAGES),
])
def test_page_flow_options(session, option, output_type):
    config = session.config
    parse_arguments(session, [option])
    assert config.output_type == output_type
    assert config.toc_levels == 0
    assert config.title_page is False
    assert config.pdf_page_mode == PageMode.DOCUMENT
    assert config.pdf_first_page == FirstPage.PAGE_1


def test_keyword_options_ignore_unknown_values(session):
    config = session.config
    parse_arguments(session, ["--pagemode", "bogus", "--firstpage", "TOC"])
    assert config.pdf_page_mode == PageMode.OUTLINE
    assert config.pdf_first_page == FirstPage.TOC

    parse_arguments(session, ["--bodyfont", "Arial", "--headingfont", "nope"])
    assert config.body_font == Typeface.HELVETICA
    assert config.heading_font == Typeface.HELVETICA

    parse_arguments(session, ["--headfootfont", "Times-Bold"])
    assert (config.head_foot_type, config.head_foot_style) == (Typeface.TIMES, FontStyle.BOLD)


def test_assorted_settings(session):
    config = session.config
    parse_arguments(session, [
        "--size", "a4", "--left", "1in", "--nup", "4", "--hfimage3", "logo.png",
        "--hfimage", "first.png", "--titleimage", "cover.png", "--no-title",
        "--permissions", "all,no-print", "--header", "c.1", "--no-localfiles",
    ])
    assert (config.page_width, config.page_length) == (595, 842)
    assert config.page_left == 72
    assert config.number_up == 4
    assert config.hf_images[0] == "first.png"
    assert config.hf_images[3] == "logo.png"
    assert config.title_image == "cover.png"
    assert config.title_page is False
    assert config.permissions & PERM_PRINT == 0
    assert config.encryption is True
    assert str(config.header) == "c.1"
    assert config.local_files_disabled is True


def test_verbosity(session):
    parse_arguments(session, ["--verbose", "-v"])
    assert session.config.verbosity == 2
    parse_arguments(session, ["--quiet"])
    assert session.config.verbosity == -1


def test_truetype_warns(session, caplog):
    parse_arguments(session, ["--no-truetype"])
    assert session.config.embed_fonts is False
    assert "superseded by --no-embedfonts" in caplog.text


def test_version_exits(session, capsys):
    with pytest.raises(SystemExit) as exc:
        parse_arguments(session, ["--version"])
    assert exc.value.code == 0
    assert capsys.readouterr().out == "1.9.18\n"


def test_inputs_use_path_in_effect(session, write_file, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    write_file("docs/a.html")
    write_file("b.html")

    parse_arguments(session, ["--path", "docs", "a.html", "b.html", "missing.html"])

    assert session.documents.origins() == ["a.html", "b.html"]
    assert session.config.errors == 1


def test_comment_only_inputs_are_not_errors(session, write_file, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    write_file("notes.md", "<!-- draft -->")
    write_file("blank.html", "<!-- nothing yet -->")

    parse_arguments(session, ["notes.md", "blank.html"])

    assert session.documents.origins() == ["notes.md", "blank.html"]
    assert session.config.errors == 0


def test_dash_reads_stdin():
    session = ConversionSession(Configuration(), stdin=io.BytesIO(b"<p>piped</p>"))
    parse_arguments(session, ["-"])
    assert session.documents.origins() == [""]
