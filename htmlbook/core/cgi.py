"""
Running as a CGI program: request detection, forced settings and the
request URL.

In CGI mode command-line arguments and the preferences file are ignored.
Per-directory settings may come from a ".book" file next to the requested
document, after which local file access is turned off for the rest of
the run.
"""
import logging
import os
from urllib.parse import quote

from ..utils.config import Configuration, ExportFormat, FirstPage, OutputType, PageMode
from ..utils.errors import NotFoundError
from .locator import file_directory
from .pipeline import ConversionSession


log = logging.getLogger("htmlbook")

DEFAULT_PORTS = {"http": 80, "https": 443}


def is_cgi_request(environ) -> bool:
    if "HTMLDOC_NOCGI" in environ:
        return False
    return all(name in environ for name in ("GATEWAY_INTERFACE", "SERVER_NAME", "SERVER_SOFTWARE"))


def configuration_from_cgi_environment(environ) -> Configuration:
    """Defaults plus the settings every CGI request gets: PDF web pages."""
    config = Configuration(
        cgi_mode=True,
        toc_levels=0,
        title_page=False,
        output_path="",
        output_type=OutputType.WEBPAGES,
        pdf_page_mode=PageMode.DOCUMENT,
        pdf_first_page=FirstPage.PAGE_1,
        cookies=environ.get("HTTP_COOKIE", ""),
        referer=environ.get("HTTP_REFERER", ""),
    )
    config.select_export(ExportFormat.PSPDF, ps_level=0, pdf_version=14)
    log.info(f"Starting in CGI mode, TMPDIR is \"{environ.get('TMPDIR', '')}\"")
    return config


def find_cgi_book(environ) -> str | None:
    """
    Looks for $PATH_TRANSLATED.book, then .book in the directory of
    $PATH_TRANSLATED, then .book in the working directory.
    """
    candidates = []
    path_translated = environ.get("PATH_TRANSLATED")
    if path_translated:
        candidates.append(f"{path_translated}.book")
        candidates.append(os.path.join(file_directory(path_translated), ".book"))
    candidates.append(".book")

    for candidate in candidates:
        if os.path.exists(candidate):
            return candidate
    return None


def load_cgi_book(session: ConversionSession, environ) -> bool:
    """Applies the directory's book file; local files are disabled either way."""
    book = find_cgi_book(environ)
    if book is None:
        session.disable_local_files()
        return False
    return session.load_book(book, set_no_local=True)


def cgi_request_url(environ) -> str | None:
    """
    Rebuilds the URL of the requested document from the CGI variables.
    Returns None when SERVER_PORT or PATH_INFO is missing.
    """
    port = environ.get("SERVER_PORT")
    path_info = environ.get("PATH_INFO")
    if not port or not path_info:
        return None

    https = environ.get("HTTPS")
    scheme = "https" if https and https != "off" else "http"
    host = environ.get("SERVER_NAME", "")
    try:
        port_number = int(port)
    except ValueError:
        port_number = 0
    netloc = host if port_number in (0, DEFAULT_PORTS[scheme]) else f"{host}:{port_number}"

    url = f"{scheme}://{netloc}{quote(path_info, safe='/')}"
    query = environ.get("QUERY_STRING", "")
    if query and not query.startswith("-"):
        url += f"?{query}"
    return url


def read_cgi_request(session: ConversionSession, environ) -> bool:
    """Reads the requested document, or reports why it cannot."""
    url = cgi_request_url(environ)
    if url is None:
        session.report_error(NotFoundError("PATH_INFO is not set in the environment!"))
        return False
    log.info(f'Converting "{url}".')
    return session.read_file(url, session.config.path)
