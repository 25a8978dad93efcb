"""
The conversion session (Facade).

This module ties the locator, the document readers and the assembler
together. The option parser, book files and the CGI gate all feed inputs
through one ConversionSession, and the finished job is handed to whichever
exporter is registered for the selected format.
"""
import logging
import sys
from collections.abc import Callable
from dataclasses import dataclass

from ..utils.config import Configuration, ExportFormat, OutputType
from ..utils.errors import HtmlBookError
from .assembler import DocumentSet
from .book_file import load_book as load_book_file
from .locator import FileLocator, file_directory
from .source_document import read_document, read_stream


log = logging.getLogger("htmlbook")


@dataclass
class AssembledJob:
    """Everything the export stage receives."""
    config: Configuration
    documents: DocumentSet

    @property
    def wants_toc(self) -> bool:
        return self.config.output_type == OutputType.BOOK and self.config.toc_levels > 0


Exporter = Callable[[AssembledJob], None]

_EXPORTERS: dict[ExportFormat, Exporter] = {}


def register_exporter(export_format: ExportFormat, exporter: Exporter):
    _EXPORTERS[export_format] = exporter


def export(job: AssembledJob) -> bool:
    """Runs the exporter for the active format. Returns False if there is none."""
    exporter = _EXPORTERS.get(job.config.export_format)
    if exporter is None:
        log.info(f"No exporter registered for {job.config.export_format.name}, "
                 f"{len(job.documents)} document(s) assembled.")
        return False
    exporter(job)
    return True


class ConversionSession:
    """
    A facade over one run's inputs.

    Holds the configuration being built up, the file locator with its URL
    cache and the ordered set of documents read so far.
    """

    def __init__(self, config: Configuration, stdin=None):
        self.config = config
        self.stdin = stdin
        self.locator = FileLocator(config)
        self.documents = DocumentSet()


    def report_error(self, error: HtmlBookError):
        """Logs a non-fatal error and counts it towards the exit status."""
        self.config.errors += 1
        log.error(f"{error.code}: {error}")


    def read_file(self, name: str, path: str) -> bool:
        """
        Locates `name` through `path`, reads it and appends it to the set.
        Failures are reported and the input is skipped.
        """
        try:
            location = self.locator.find(path, name)
            log.info(f"Reading {name}...")
            document = read_document(name, location, file_directory(name))
        except HtmlBookError as e:
            self.report_error(e)
            return False

        self.documents.append(document)
        return True


    def read_stdin(self) -> bool:
        """Reads standard input as one HTML document."""
        stream = self.stdin if self.stdin is not None else sys.stdin.buffer
        try:
            document = read_stream(stream)
        except HtmlBookError as e:
            self.report_error(e)
            return False

        self.documents.append(document)
        return True


    def load_book(self, filename: str, set_no_local: bool = False) -> bool:
        return load_book_file(self, filename, set_no_local)


    def disable_local_files(self):
        self.config.local_files_disabled = True


    def finish(self) -> AssembledJob:
        return AssembledJob(self.config, self.documents)


    def cleanup(self):
        self.locator.cleanup()
