import logging
from importlib import resources as res


log = logging.getLogger("htmlbook")


TEXT_PACKAGE = "htmlbook.resources"


def load_text(filename: str, package: str = TEXT_PACKAGE) -> str:
    """Return a packaged text file's content, or "" if it is missing."""
    try:
        return res.files(package).joinpath(filename).read_text(encoding="utf-8")
    except Exception as e:
        log.error(f"Resource not found: {package}/{filename}: {e}")
        return ""


def usage_text() -> str:
    return load_text("usage.txt")


def cgi_usage_text() -> str:
    return load_text("cgi_usage.txt")
