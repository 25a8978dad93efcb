"""
Resolves input names against the search path and fetches URLs.
"""
import logging
import os
import shutil
import tempfile
from pathlib import Path
from urllib.parse import unquote, urljoin, urlparse

import requests

from ..utils.config import Configuration
from ..utils.errors import AccessDeniedError, NotFoundError


log = logging.getLogger("htmlbook")

URL_SCHEMES = ("http", "https")
FETCH_TIMEOUT = 60


def is_url(name: str) -> bool:
    return urlparse(name).scheme.lower() in URL_SCHEMES


def split_search_path(path: str) -> list[str]:
    """Semicolon-separated directories/URL prefixes, empty entries dropped."""
    return [entry for entry in path.split(";") if entry]


def file_directory(name: str) -> str:
    """Directory (or URL prefix) that relative links in `name` resolve against."""
    if is_url(name):
        parsed = urlparse(name)
        head, _, _ = parsed.path.rpartition("/")
        return f"{parsed.scheme}://{parsed.netloc}{head}"
    return os.path.dirname(name) or "."


def file_basename(name: str) -> str:
    if is_url(name):
        name = urlparse(name).path
    return name.replace("\\", "/").rsplit("/", 1)[-1]


def file_extension(name: str) -> str:
    """Extension without the dot, "" if there is none."""
    base = file_basename(name)
    _, dot, ext = base.rpartition(".")
    return ext if dot and ext else ""


def _local_name(name: str) -> str:
    """Strips a file: scheme; other names are returned as-is."""
    if name.lower().startswith("file:"):
        parsed = urlparse(name)
        return unquote(parsed.path) or name[5:]
    return name


class FileLocator:
    """
    Finds input files for one conversion run.

    URLs are downloaded once into a private cache directory that `cleanup()`
    removes. When `config.local_files_disabled` is set, only URLs resolve and
    every local path is refused, whether or not it exists.
    """

    def __init__(self, config: Configuration):
        self.config = config
        self._cache_dir: Path | None = None
        self._fetched: dict[str, str] = {}


    def find(self, path: str, name: str) -> str:
        """
        Returns a local filename for `name`.

        Raises:
            AccessDeniedError: `name` is local and local files are disabled.
            NotFoundError: nothing matched.
        """
        if not name:
            raise NotFoundError("No filename given.")

        if is_url(name):
            return self._fetch(name)

        local = _local_name(name)
        relative = not os.path.isabs(local)

        if not self.config.local_files_disabled:
            if os.path.exists(local):
                return local
            if not relative:
                raise NotFoundError(f'Unable to find "{name}"...')

        for entry in split_search_path(path):
            if is_url(entry):
                url = urljoin(entry.rstrip("/") + "/", local.replace("\\", "/"))
                try:
                    return self._fetch(url)
                except NotFoundError:
                    continue
            elif not self.config.local_files_disabled:
                candidate = os.path.join(entry, local)
                if os.path.exists(candidate):
                    return candidate

        if self.config.local_files_disabled:
            raise AccessDeniedError(f'Local file access is disabled, unable to open "{name}".')
        raise NotFoundError(f'Unable to find "{name}"...')


    def _fetch(self, url: str) -> str:
        """Downloads `url` into the cache (once) and returns the cached filename."""
        cached = self._fetched.get(url)
        if cached:
            return cached

        headers = {}
        if self.config.cookies:
            headers["Cookie"] = self.config.cookies
        if self.config.referer:
            headers["Referer"] = self.config.referer
        proxies = {"http": self.config.proxy, "https": self.config.proxy} if self.config.proxy else None

        target = self._cache_path(url)
        log.debug(f"Fetching {url} -> {target}")
        try:
            with requests.get(url, stream=True, timeout=FETCH_TIMEOUT,
                              headers=headers, proxies=proxies) as resp:
                resp.raise_for_status()
                with target.open("wb") as handle:
                    for chunk in resp.iter_content(chunk_size=8192):
                        if chunk:
                            handle.write(chunk)
        except requests.RequestException as e:
            target.unlink(missing_ok=True)
            raise NotFoundError(f'Unable to fetch "{url}": {e}') from e

        self._fetched[url] = str(target)
        return str(target)


    def _cache_path(self, url: str) -> Path:
        if self._cache_dir is None:
            self._cache_dir = Path(tempfile.mkdtemp(prefix="htmlbook-"))
        ext = file_extension(url)
        suffix = f".{ext}" if ext else ""
        return self._cache_dir / f"{len(self._fetched):04d}{suffix}"


    def cleanup(self):
        """Removes every fetched file."""
        if self._cache_dir is not None:
            shutil.rmtree(self._cache_dir, ignore_errors=True)
            self._cache_dir = None
        self._fetched.clear()
