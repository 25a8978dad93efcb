import signal
from pathlib import Path

import pytest

from htmlbook import cli
from htmlbook import main as main_module
from htmlbook.main import _terminate
from htmlbook.core import pipeline
from htmlbook.core.pipeline import register_exporter
from htmlbook.resources import loader
from htmlbook.utils.config import ExportFormat
from htmlbook.utils.errors import UsageError


@pytest.fixture
def exported(monkeypatch):
    """Collects every job handed to the export stage."""
    jobs = []
    monkeypatch.setattr(pipeline, "_EXPORTERS", {})
    for export_format in ExportFormat:
        register_exporter(export_format, jobs.append)
    return jobs


@pytest.fixture
def home(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    return {"HOME": str(tmp_path)}


def test_converts_inputs_with_preferences_then_options(home, write_file, tmp_path, exported):
    write_file(".htmldocrc", "#HTMLDOCRC 1.9.18\nFONTSIZE=14\nLANDSCAPE=1\n")
    write_file("a.html")

    status = cli.run_cli(["--fontsize", "16", "a.html"], home)

    assert status == 0
    assert len(exported) == 1
    job = exported[0]
    assert job.config.font_size == 16.0
    assert job.config.landscape is True
    assert str(job.config.footer) == "h.1"
    assert job.documents.origins() == ["a.html"]
    assert job.wants_toc is True


def test_error_count_is_exit_status(home, write_file, exported):
    write_file("a.html")
    assert cli.run_cli(["a.html", "missing.html", "gone.html"], home) == 2
    assert exported[0].documents.origins() == ["a.html"]


def test_no_documents_prints_usage(home, exported, capsys):
    assert cli.run_cli([], home) == 1
    out = capsys.readouterr().out
    assert "ERROR: No HTML files!" in out
    assert "--batch filename.book" in out
    assert not exported


def test_bad_option_prints_usage(home, capsys):
    assert cli.run_cli(["--bogus", "a.html"], home) == 1
    assert 'ERROR: Bad option argument "--bogus"!' in capsys.readouterr().out


def test_help(home, capsys):
    assert cli.run_cli(["--help"], home) == 1
    out = capsys.readouterr().out
    assert "ERROR" not in out
    assert "Usage:" in out


def test_version(home, capsys):
    with pytest.raises(SystemExit) as exc:
        cli.run_cli(["--version"], home)
    assert exc.value.code == 0


def test_cgi_mode_ignores_arguments(home, write_file, capsys, exported):
    write_file("a.html")
    env = {**home, "GATEWAY_INTERFACE": "CGI/1.1", "SERVER_NAME": "example.com",
           "SERVER_SOFTWARE": "Apache"}

    assert cli.run_cli(["a.html"], env) == 1
    out = capsys.readouterr().out
    assert out.startswith("Content-Type: text/plain\r\n\r\n")
    assert "HTMLDOC_NOCGI" in out
    assert not exported


def test_timing_is_reported_when_debugging(home, write_file, tmp_path, exported, capsys, monkeypatch):
    monkeypatch.setattr(cli, "setup_main_logger", lambda level, debug: None)
    write_file("a.html")
    assert cli.run_cli(["a.html"], {**home, "HTMLDOC_DEBUG": "timing"}) == 0
    assert "TIMING:" in capsys.readouterr().err


def test_termination_removes_fetched_files(home, fake_web, monkeypatch):
    fake_web.pages["http://example.com/a.html"] = b"<p>remote</p>"
    fetched = []

    def interrupted(job):
        location = Path(job.documents.head.location)
        assert location.is_file()
        fetched.append(location)
        _terminate(signal.SIGTERM, None)

    monkeypatch.setattr(pipeline, "_EXPORTERS", {})
    register_exporter(ExportFormat.HTML, interrupted)

    with pytest.raises(SystemExit) as exc:
        cli.run_cli(["http://example.com/a.html"], home)

    assert exc.value.code == 1
    assert fetched[0].parent.name.startswith("htmlbook-")
    assert not fetched[0].parent.exists()


def test_main_installs_termination_handler(monkeypatch):
    installed = {}
    monkeypatch.setattr(main_module.signal, "signal",
                        lambda signum, handler: installed.update({signum: handler}))
    monkeypatch.setattr(cli, "run_cli", lambda: 3)

    with pytest.raises(SystemExit) as exc:
        main_module.main()

    assert exc.value.code == 3
    assert installed[signal.SIGTERM] is _terminate


def test_usage_survives_unreadable_resources(monkeypatch, caplog, capsys):
    def broken(package):
        raise NotADirectoryError(package)

    monkeypatch.setattr(loader.res, "files", broken)

    assert loader.usage_text() == ""
    cli.usage(UsageError("No HTML files!"))

    out = capsys.readouterr().out
    assert out.startswith("htmlbook version 1.9.18")
    assert "ERROR: No HTML files!" in out
    assert "Resource not found: htmlbook.resources/usage.txt" in caplog.text


def test_usage_text_is_packaged():
    assert "--batch filename.book" in loader.usage_text()
    assert "HTMLDOC_NOCGI" in loader.cgi_usage_text()
