"""
Tests for Command Line

Tests the parse, doc and init-config commands.
"""

import io
import json
import logging

from extmodel.cli import main
from extmodel.configs import get_config_path, get_snapshot_path


class TestCli:
    """Test command line entry points."""

    def teardown_method(self):
        logging.getLogger("extmodel").handlers.clear()

    def test_parse_prints_components(self, source_tree, capsys):
        path = source_tree / "store" / "Users.js"
        assert main(["parse", str(path), "--project", "app"]) == 0

        data = json.loads(capsys.readouterr().out)
        assert [c["component_class"] for c in data] == ["App.store.Users"]
        assert data[0]["project"] == "app"
        assert data[0]["types"][0]["name"] == "users"

    def test_parse_nothing_found(self, source_tree, capsys):
        assert main(["parse", str(source_tree / "README.md")]) == 1
        assert json.loads(capsys.readouterr().out) == []

    def test_parse_save_snapshot(self, source_tree):
        files = [str(p) for p in sorted(source_tree.rglob("*.js"))]
        assert main(["--debug", "parse", *files, "--project", "app", "--save"]) == 0
        assert get_snapshot_path("app").exists()

    def test_doc_from_file(self, tmp_path, capsys):
        comment = tmp_path / "comment.txt"
        comment.write_text("/**\n * @param {String} name Who to greet\n */")
        assert main(["doc", str(comment), "--property", "greet", "--type", "method", "--class", "App.A"]) == 0

        data = json.loads(capsys.readouterr().out)
        assert data["returns"] == "void"
        assert data["params"][0]["name"] == "name"
        assert data["title"].startswith("function greet: returns void")

    def test_doc_from_stdin(self, monkeypatch, capsys):
        monkeypatch.setattr("sys.stdin", io.StringIO("@deprecated Use other"))
        assert main(["doc", "--property", "old", "--type", "property", "--private"]) == 0

        data = json.loads(capsys.readouterr().out)
        assert data["deprecated"] is True
        assert data["private"] is True

    def test_init_config(self, capsys):
        assert main(["init-config"]) == 0
        assert get_config_path().exists()
        assert "Created" in capsys.readouterr().out

        assert main(["init-config"]) == 0
        assert "already exists" in capsys.readouterr().out

    def test_log_file(self, source_tree, tmp_path):
        log_file = tmp_path / "logs" / "cli.log"
        path = source_tree / "store" / "Users.js"
        assert main(["--debug", "--log-file", str(log_file), "parse", str(path)]) == 0
        assert log_file.exists()
        assert len(logging.getLogger("extmodel").handlers) == 2
