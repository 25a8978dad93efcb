"""
The main entry point for htmlbook.
"""
import logging
import signal
import sys


def _terminate(signum, frame):
    # Unwinds through run_cli(), which removes fetched files on the way out
    raise SystemExit(1)


def main():
    """Runs the command line and exits with its status."""
    log = logging.getLogger("htmlbook")
    signal.signal(signal.SIGTERM, _terminate)

    try:
        from .cli import run_cli
        status = run_cli()
    except Exception:
        log.exception("A critical error occurred while running the CLI.")
        sys.exit(1)

    sys.exit(status)


if __name__ == '__main__':
    main()
