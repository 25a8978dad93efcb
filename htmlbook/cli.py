"""
Handles the command line (or CGI request) and runs one conversion.
This is the entry point for the console script.
"""
import logging
import os
import sys
import time

from .core.cgi import (
    configuration_from_cgi_environment, is_cgi_request, load_cgi_book, read_cgi_request,
)
from .core.format_spec import apply_default_formats
from .core.options import parse_arguments
from .core.pipeline import ConversionSession, export
from .core.preferences import load_preferences, preferences_path, resolve_data_dir
from .resources.loader import cgi_usage_text, usage_text
from .utils.config import APP_NAME, APP_VERSION, Configuration
from .utils.errors import UsageError
from .utils.logger import set_console_level, setup_main_logger


# Get logger (will be configured in run_cli)
log = logging.getLogger("htmlbook")


def usage(error: UsageError | None = None, cgi_mode: bool = False, stream=None):
    """Prints the version banner and the option summary (or CGI help)."""
    stream = stream or sys.stdout
    if cgi_mode:
        stream.write("Content-Type: text/plain\r\n\r\n")

    stream.write(f"{APP_NAME} version {APP_VERSION}\n\n")

    if cgi_mode:
        stream.write(cgi_usage_text())
        return

    message = str(error) if error else ""
    if message:
        stream.write(f"ERROR: {message}\n\n")
    stream.write(usage_text())


def initial_configuration(environ) -> Configuration:
    """CGI settings, or defaults overlaid with the user's preferences."""
    if is_cgi_request(environ):
        config = configuration_from_cgi_environment(environ)
        apply_default_formats(config)
    else:
        config = Configuration()
        load_preferences(config, preferences_path(environ))
    config.data_dir = resolve_data_dir(environ)
    return config


def run_cli(argv: list[str] | None = None, environ=None, stdin=None) -> int:
    """
    The main function for the command-line interface.

    Returns:
        int: the exit status, which is the number of errors reported, or 1
        after printing usage.
    """
    argv = sys.argv[1:] if argv is None else argv
    environ = os.environ if environ is None else environ

    debug = environ.get("HTMLDOC_DEBUG")
    setup_main_logger(logging.WARNING, debug)
    start_time = time.perf_counter()

    config = initial_configuration(environ)
    session = ConversionSession(config, stdin)

    try:
        if config.cgi_mode:
            # Arguments are never read in CGI mode
            load_cgi_book(session, environ)
            read_cgi_request(session, environ)
        else:
            parse_arguments(session, argv)

        if not session.documents:
            raise UsageError("No HTML files!")

        set_console_level(config.verbosity)
        load_time = time.perf_counter()
        export(session.finish())
        end_time = time.perf_counter()

        if debug and ("all" in debug or "timing" in debug):
            print(f"TIMING: {load_time - start_time:.3f} {end_time - load_time:.3f} "
                  f"{end_time - start_time:.3f}", file=sys.stderr)

    except UsageError as e:
        usage(e, config.cgi_mode)
        return 1
    finally:
        session.cleanup()

    return config.errors
