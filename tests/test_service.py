"""
Tests for Parse Service

Tests request validation, incremental reparsing, indexing and snapshots.
"""

import pytest
from conftest import USERS_STORE

from extmodel.exceptions import RequestValidationError
from extmodel.registry import ComponentRegistry
from extmodel.service import ParseRequest, ParseService


def _edit(start, end, text):
    return {
        "start": {"line": start[0], "column": start[1]},
        "end": {"line": end[0], "column": end[1]},
        "text": text,
    }


class TestRequests:
    """Test request payload validation."""

    def setup_method(self):
        self.service = ParseService(ComponentRegistry())

    def test_payload_aliases(self):
        request = self.service.validate({"text": "var a;", "fsPath": "a.js", "nameSpace": "ws"})
        assert request.fs_path == "a.js"
        assert request.namespace == "ws"
        assert request.project is None
        assert request.edits == []

    def test_field_names_accepted(self):
        request = ParseRequest(text="var a;", fs_path="a.js")
        assert self.service.validate(request) is request

    def test_missing_text(self):
        with pytest.raises(RequestValidationError) as exc_info:
            self.service.parse({"fsPath": "a.js"})
        assert exc_info.value.errors

    def test_malformed_edit(self):
        with pytest.raises(RequestValidationError):
            self.service.parse({"text": "var a;", "edits": [{"start": "top"}]})


class TestParse:
    """Test parsing requests into the registry."""

    def setup_method(self):
        self.registry = ComponentRegistry()
        self.service = ParseService(self.registry)

    def test_parse_upserts(self):
        components = self.service.parse({"text": USERS_STORE, "fsPath": "app/store/Users.js", "project": "app"})
        assert [c.component_class for c in components] == ["App.store.Users"]
        assert self.registry.get_by_class_name("App.store.Users", "app") is components[0]

    def test_default_project(self):
        self.service.parse({"text": USERS_STORE})
        assert self.registry.components()[0].project == "default"

    def test_syntax_error_yields_empty(self):
        assert self.service.parse({"text": 'Ext.define("App.A", { foo: , });'}) == []
        assert len(self.registry) == 0

    def test_incremental_edit(self):
        request = {"text": USERS_STORE, "fsPath": "app/store/Users.js"}
        self.service.parse(request)

        edited = dict(request, edits=[_edit((2, 13), (2, 27), "Ext.data.BufferedStore")])
        (component,) = self.service.parse(edited)

        assert component.extend == "Ext.data.BufferedStore"
        assert len(self.registry) == 1
        assert self.registry.components()[0].extend == "Ext.data.BufferedStore"

    def test_edit_outside_text_yields_empty(self):
        request = {"text": USERS_STORE, "fsPath": "app/store/Users.js", "edits": [_edit((90, 0), (90, 1), "x")]}
        assert self.service.parse(request) == []

    def test_parse_doc(self):
        doc = self.service.parse_doc("width", "property", "App.A", comment="@property {Number} width")
        assert doc.type == "number"


class TestIndexing:
    """Test indexing files from disk and snapshots."""

    def setup_method(self):
        self.registry = ComponentRegistry()
        self.service = ParseService(self.registry)

    def test_index_files(self, source_tree):
        count = self.service.index_files(sorted(source_tree.rglob("*")), project="app")
        assert count == 3
        assert self.registry.get_by_alias("users", project="app").component_class == "App.store.Users"
        assert self.registry.get_by_class_name("App.store.Users", "app").fs_path.endswith("Users.js")

    def test_broken_files_skipped(self, source_tree):
        (source_tree / "Broken.js").write_text('Ext.define("App.Broken", { a: , });')
        count = self.service.index_files(sorted(source_tree.rglob("*.js")), project="app")
        assert count == 3

    def test_snapshot_round_trip(self, source_tree, isolated_data_path):
        self.service.index_files(sorted(source_tree.rglob("*.js")), project="app")
        path = self.service.save_snapshot("app")
        assert path.exists()
        assert path.parent == isolated_data_path / "snapshots"

        fresh = ParseService(ComponentRegistry())
        assert fresh.load_snapshot("app") == 3
        assert fresh.registry.components() == self.registry.components()

    def test_missing_snapshot(self):
        assert self.service.load_snapshot("nothing-here") == 0
