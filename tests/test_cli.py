# tests/test_cli.py
import json
import sys
from pathlib import Path

import pytest

from periscope import cli
from periscope.probe import ProbeResult


@pytest.fixture(autouse=True)
def offline_tokenizer(monkeypatch):
    # Keep tiktoken from fetching encodings during tests
    monkeypatch.setattr(cli.Tokenizer, "count", staticmethod(lambda text: len(text) // 4))


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for var in ("PERISCOPE_ROOT", "PERISCOPE_EXTENSIONS", "PERISCOPE_EXCLUDE_DIRS", "PERISCOPE_MAX_FILE_SIZE", "PERISCOPE_EXCLUDE_PATTERNS"):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def project(tmp_path):
    (tmp_path / "src").mkdir()
    (tmp_path / "src" / "page.tsx").write_text("export default function Page() {}", encoding="utf-8")
    (tmp_path / "README.md").write_text("# Vessel", encoding="utf-8")
    (tmp_path / "node_modules").mkdir()
    (tmp_path / "node_modules" / "lib.js").write_text("module.exports = {}", encoding="utf-8")
    return tmp_path


def test_scan_json(project, capsys):
    assert cli.main(["scan", str(project), "--json"]) == 0

    doc = json.loads(capsys.readouterr().out)
    assert sorted(f["path"] for f in doc["files"]) == ["README.md", "src/page.tsx"]


def test_scan_summary_with_tree(project, capsys):
    assert cli.main(["scan", str(project), "--tree"]) == 0

    out = capsys.readouterr().out
    assert "Total files: 2" in out
    assert "src/page.tsx" in out
    assert "└── page.tsx" in out
    assert "lib.js" not in out


def test_scan_flags_override_environment(project, capsys, monkeypatch):
    monkeypatch.setenv("PERISCOPE_EXTENSIONS", ".md")
    assert cli.main(["scan", str(project), "--json", "-e", "tsx"]) == 0

    doc = json.loads(capsys.readouterr().out)
    assert [f["path"] for f in doc["files"]] == ["src/page.tsx"]


def test_scan_root_from_environment(project, capsys, monkeypatch):
    monkeypatch.setenv("PERISCOPE_ROOT", str(project))
    assert cli.main(["scan", "--json"]) == 0

    doc = json.loads(capsys.readouterr().out)
    assert len(doc["files"]) == 2


def test_scan_failure_exit_code(tmp_path, capsys):
    not_a_dir = tmp_path / "page.tsx"
    not_a_dir.write_text("x", encoding="utf-8")

    assert cli.main(["scan", str(not_a_dir)]) == 1
    assert "scan failed" in capsys.readouterr().err


def test_bad_max_size(project, capsys):
    assert cli.main(["scan", str(project), "--max-size", "huge"]) == 1
    assert "Invalid max file size" in capsys.readouterr().err


def test_scan_exclude_pattern_flag(project, capsys):
    (project / "src" / "generated").mkdir()
    (project / "src" / "generated" / "api.ts").write_text("export {}", encoding="utf-8")

    assert cli.main(["scan", str(project), "--json", "--exclude-pattern", "generated/"]) == 0

    doc = json.loads(capsys.readouterr().out)
    assert sorted(f["path"] for f in doc["files"]) == ["README.md", "src/page.tsx"]


def test_os_error_reported_without_traceback(project, capsys, monkeypatch):
    def denied(settings):
        raise PermissionError(13, "Permission denied", str(settings.root))

    monkeypatch.setattr(cli, "take_snapshot", denied)

    assert cli.main(["scan", str(project)]) == 1
    assert "Error: [Errno 13] Permission denied" in capsys.readouterr().err


def test_serve_passes_settings_to_server(project, monkeypatch):
    seen = {}

    def fake_run(settings, host, port):
        seen.update(root=settings.root, host=host, port=port)

    monkeypatch.setattr(cli, "run", fake_run)
    assert cli.main(["serve", str(project), "--port", "4000"]) == 0
    assert seen == {"root": project.resolve(), "host": "127.0.0.1", "port": 4000}


@pytest.mark.parametrize("found, code", [(True, 0), (False, 1)])
def test_probe_exit_code(monkeypatch, capsys, found, code):
    result = ProbeResult(status_code=200, body_length=10, found=found, snippet='{"files":[]}', needle="page.tsx")
    monkeypatch.setattr(cli, "probe", lambda url, needle, timeout: result)

    assert cli.main(["probe"]) == code
    assert "STATUS: 200" in capsys.readouterr().out
