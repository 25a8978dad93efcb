"""
Loads "#HTMLDOC" book files: saved option lines plus a list of inputs.
"""
import logging
from typing import TYPE_CHECKING

from ..utils.errors import AccessDeniedError, BadFormatError, NotFoundError, ReadError
from .locator import file_directory
from .options import parse_directive_line

if TYPE_CHECKING:
    from .pipeline import ConversionSession


log = logging.getLogger("htmlbook")

BOOK_HEADER = "#HTMLDOC"


def _working_path(book_dir: str, path: str) -> str:
    """Inputs listed in a book are looked up next to the book first."""
    return f"{book_dir};{path}" if path else book_dir


def load_book(session: "ConversionSession", filename: str, set_no_local: bool = False) -> bool:
    """
    Applies a book file to the session.

    Option lines (starting with '-') update the configuration; every other
    non-blank line names an input, with a leading backslash removed. When
    `set_no_local` is set, local files are disabled as soon as the book
    itself has been looked up.

    Returns:
        bool: True if the book was read, False if it was not found, could not
        be opened or has no #HTMLDOC header. Each failure is reported.
    """
    config = session.config
    book_dir = file_directory(filename)

    try:
        local = session.locator.find(config.path, filename)
    except (NotFoundError, AccessDeniedError) as e:
        if set_no_local:
            session.disable_local_files()
        session.report_error(e)
        return False

    if set_no_local:
        session.disable_local_files()

    try:
        with open(local, "r", encoding="utf-8", errors="replace") as f:
            lines = f.read().splitlines()
    except OSError as e:
        session.report_error(ReadError(f'Unable to open book file "{local}": {e.strerror or e}'))
        return False

    if not lines or not lines[0].startswith(BOOK_HEADER):
        session.report_error(BadFormatError(f'Bad or missing {BOOK_HEADER} header in "{filename}".'))
        return False

    log.info(f"Loading book file {filename}")
    working_path = _working_path(book_dir, config.path)

    for line in lines[1:]:
        if not line:
            continue
        if line.startswith("-"):
            parse_directive_line(session, line)
            working_path = _working_path(book_dir, config.path)
        else:
            if line.startswith("\\"):
                line = line[1:]
            session.read_file(line, working_path)

    return True
