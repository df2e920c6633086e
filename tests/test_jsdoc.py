"""
Tests for Doc-Comment Parsing

Tests the line state machine, markdown rendering and Doc records.
"""

from extmodel.jsdoc import (
    DocState,
    JsDocParser,
    classify_line,
    default_doc,
    normalize_type,
    parse_doc,
    split_comment,
    transition,
)
from extmodel.jsdoc.markdown import convert_links

NL = "  \n"


class TestStates:
    """Test line classification and state transitions."""

    def test_tag_lines_start_states(self):
        assert classify_line("@param {String} name") == DocState.PARAM
        assert classify_line("@return {Boolean}") == DocState.RETURNS
        assert classify_line("@returns {Boolean}") == DocState.RETURNS
        assert classify_line("@cfg {Number} width") == DocState.CONFIG
        assert classify_line("@config {Number} width") == DocState.CONFIG
        assert classify_line("@singleton") == DocState.SINGLETON

    def test_unrecognized_tag_starts_nothing(self):
        assert classify_line("@fires change") is None

    def test_indented_line_is_code(self):
        assert classify_line("    var x = 1;") == DocState.CODE
        assert classify_line("\tvar x = 1;") == DocState.CODE
        assert classify_line("  x") is None

    def test_plain_line_continues_state(self):
        assert transition(DocState.PARAM, "more about the parameter") == DocState.PARAM
        assert transition(DocState.TEXT, "plain") == DocState.TEXT

    def test_code_block_resumes_previous_state(self):
        assert transition(DocState.CODE, "after the example", before_code=DocState.PARAM) == DocState.PARAM
        assert transition(DocState.CODE, "    more code", before_code=DocState.PARAM) == DocState.CODE


class TestSplitComment:
    """Test comment line splitting."""

    def test_strips_delimiters_and_stars(self):
        lines = split_comment("/**\n * Hello\n *\n *     code()\n */")
        assert lines == ["Hello", "    code()"]

    def test_line_comments(self):
        assert split_comment(" first\n second") == ["first", "second"]

    def test_blank_comment(self):
        assert split_comment("/** */") == []


class TestNormalizeType:
    """Test documented type normalization."""

    def test_lowercases(self):
        assert normalize_type("String") == "string"

    def test_alternates(self):
        assert normalize_type("String/Number") == "string | number"
        assert normalize_type("{Object|Array}") == "object | array"

    def test_star_is_any(self):
        assert normalize_type("*") == "any"


class TestDocBodies:
    """Test rendered doc bodies."""

    def setup_method(self):
        self.parser = JsDocParser()

    def test_plain_text(self):
        doc = self.parser.parse("width", "property", "App.A", comment="/** The width. */")
        assert doc.body == "The width."

    def test_multiple_lines_break(self):
        doc = self.parser.parse("width", "property", "App.A", comment="/**\n * One\n * Two\n */")
        assert doc.body == f"One{NL}Two"

    def test_code_block(self):
        comment = "/**\n * Example:\n *     var x = 1;\n * After\n */"
        doc = self.parser.parse("width", "property", "App.A", comment=comment)
        assert doc.body == f"Example:{NL}{NL}    var x = 1;{NL}<!-- -->{NL}After"

    def test_code_block_at_end_is_flushed(self):
        comment = "/**\n * Example:\n *     var x = 1;\n */"
        doc = self.parser.parse("width", "property", "App.A", comment=comment)
        assert doc.body.endswith(f"    var x = 1;{NL}<!-- -->")

    def test_links_rendered_bold_italic(self):
        doc = self.parser.parse("width", "property", "App.A", comment="See {@link App.Foo} for more")
        assert doc.body == "See _**{@link App.Foo}**_ for more"

    def test_convert_links(self):
        assert convert_links("{@link Ext.Panel#show}") == "_**{@link Ext.Panel#show}**_"

    def test_unknown_tag_treated_as_text(self):
        doc = self.parser.parse("width", "property", "App.A", comment="@fires change")
        assert doc.body == "*@fires* change"

    def test_control_marker_line_skipped(self):
        doc = self.parser.parse("width", "property", "App.A", comment="eslint-disable-line\nReal text")
        assert doc.body == "Real text"

    def test_line_cap(self):
        parser = JsDocParser(max_lines=2)
        doc = parser.parse("width", "property", "App.A", comment="one\ntwo\nthree")
        assert doc.body == f"one{NL}two"

    def test_deprecated(self):
        doc = self.parser.parse("width", "property", "App.A", comment="@deprecated Use height instead")
        assert doc.deprecated
        assert "**deprecated** Use height instead" in doc.body

    def test_private_tag(self):
        doc = self.parser.parse("x", "property", "App.A", comment="@private\nSecret")
        assert doc.private
        assert doc.body.startswith("**private**")
        assert doc.title == f"property x: unknown{NL}private property"


class TestDocTags:
    """Test tag handling into Doc fields."""

    def setup_method(self):
        self.parser = JsDocParser()
        self.comment = (
            "/**\n"
            " * Format a name.\n"
            " * @param {String} first First name\n"
            " * @param {String} [last=none] Last name\n"
            " * @returns {String}\n"
            " */"
        )

    def test_params(self):
        doc = self.parser.parse("formatName", "method", "App.AppUtilities", comment=self.comment)
        assert [p.name for p in doc.params] == ["first", "last"]

        first, last = doc.params
        assert first.type == "string"
        assert first.default is None
        assert first.body == "First name"
        assert first.title == "string first"

        assert last.default == "none"
        assert last.body == "Last name"
        assert last.title == "string last: defaults to none"

    def test_param_body_fallback(self):
        doc = self.parser.parse("go", "method", "App.A", comment="@param {Number} speed")
        assert doc.params[0].body == "No documentation found"

    def test_param_keeps_documented_type(self):
        doc = self.parser.parse("go", "method", "App.A", comment="@param {App.model.User} user")
        assert doc.params[0].type == "app.model.user"
        assert doc.params[0].documented_type == "App.model.User"

    def test_dotted_sub_parameters(self):
        comment = (
            "@param {Object} options Load options\n"
            "@param {Function} options.callback Called when done\n"
            "@param {Object} options.scope Callback scope"
        )
        doc = self.parser.parse("load", "method", "App.A", comment=comment)
        assert [(p.name, p.type) for p in doc.params] == [
            ("options", "object"),
            ("options.callback", "function"),
            ("options.scope", "object"),
        ]
        assert doc.params[0].body == "Load options"
        assert doc.params[2].body == "Callback scope"

    def test_array_types(self):
        comment = (
            "@param {String[]} names Names to load\n"
            "@param {Ext.data.Model[]} records Records to load\n"
            "@return {String[]} Loaded names"
        )
        doc = self.parser.parse("load", "method", "App.A", comment=comment)
        assert [(p.name, p.documented_type) for p in doc.params] == [
            ("names", "String[]"),
            ("records", "Ext.data.Model[]"),
        ]
        assert doc.params[1].body == "Records to load"
        assert doc.returns == "string[]"
        assert "    returns: string[]" in doc.body

    def test_leading_param_has_no_blank_line(self):
        doc = self.parser.parse("toggle", "method", "App.A", comment="@param {Boolean} show Show the button")
        assert doc.body.startswith("    parameter show: boolean")

    def test_param_rendering(self):
        doc = self.parser.parse("formatName", "method", "App.AppUtilities", comment=self.comment)
        assert doc.body.startswith("Format a name.")
        assert "    parameter first: string" in doc.body
        assert "    parameter last: string" in doc.body
        assert "*Defaults to: none*" in doc.body
        assert "    returns: string" in doc.body

    def test_method_title(self):
        doc = self.parser.parse("formatName", "method", "App.AppUtilities", comment=self.comment)
        assert doc.returns == "string"
        assert doc.title == f"function formatName: returns string{NL}parameters:  first, last"

    def test_method_without_returns_is_void(self):
        doc = self.parser.parse("refresh", "method", "App.A", comment="Reload everything")
        assert doc.returns == "void"
        assert doc.title == f"function refresh: returns void{NL}parameters:  none"

    def test_since(self):
        assert self.parser.parse("x", "property", "A", comment="@since 6.2.0").since == "v6.2.0"
        assert self.parser.parse("x", "property", "A", comment="@since").since == "?"

    def test_singleton_tag(self):
        doc = self.parser.parse("App.Name", "class", "App.Name", comment="@singleton")
        assert doc.singleton
        assert doc.title == "singleton Name: App.Name"


class TestDocTypes:
    """Test declaration kind and type inference."""

    def setup_method(self):
        self.parser = JsDocParser()

    def test_unknown_kind_inferred_from_tag(self):
        doc = self.parser.parse("foo", "unknown", "App.A", comment="@cfg {Number} foo\nThe foo")
        assert doc.p_type == "cfg"
        assert doc.type == "number"
        assert doc.title == "config foo: number"

    def test_unknown_kind_defaults_to_class(self):
        doc = self.parser.parse("App.Widget", "unknown", "App.Widget", comment="Just text")
        assert doc.p_type == "class"
        assert doc.type == "unknown"
        assert doc.title == "class Widget: App.Widget"

    def test_known_kind_takes_type_from_tag(self):
        doc = self.parser.parse("displayField", "property", "App.A", comment="@property {String} displayField")
        assert doc.p_type == "property"
        assert doc.type == "string"
        assert doc.title == "property displayField: string"

    def test_flags_are_combined(self):
        doc = self.parser.parse("x", "property", "App.A", is_static=True, comment="Counter")
        assert doc.static
        assert doc.title == f"property x: unknown{NL}static property"


class TestDefaults:
    """Test empty comments and the module-level entry point."""

    def test_default_doc(self):
        doc = default_doc("cfg")
        assert doc.p_type == "cfg"
        assert doc.body == ""
        assert doc.params == []

    def test_empty_comment_keeps_flags(self):
        doc = parse_doc("x", "property", "App.A", is_private=True, comment=None)
        assert doc.private
        assert doc.body == ""

    def test_parse_doc_uses_global_parser(self):
        doc = parse_doc("x", "property", "App.A", comment="Hello")
        assert doc.body == "Hello"
