"""
Component Model Builder

Finds every `<Namespace>.define("Class.Name", { ... })` call in a parsed
file and builds one Component per call from the definition object.

Each well-known key (singleton, extend, requires, ...) has its own handler.
A declaration with the wrong literal form is logged and skipped without
affecting the rest of the component or file.
"""

from typing import Callable, Optional

from extmodel.ast.extractors.base import Extractor
from extmodel.ast.extractors.declarations import classify_declarations, referenced_widgets
from extmodel.ast.extractors.methods import MethodAnalyzer
from extmodel.ast.literals import literal_value, property_key
from extmodel.ast.models import (
    Component,
    Config,
    Method,
    ObjectRange,
    Property,
    Reference,
    ReferenceBlock,
    ValueRange,
)
from extmodel.ast.nodes import NodeKind, SyntaxNode
from extmodel.ast.parser import ParsedSource, SourceParser
from extmodel.configs.constants import OBJECT_RANGE_IGNORED_KEYS, WELL_KNOWN_KEYS
from extmodel.configs.logging import get_logger
from extmodel.exceptions import ParseFailure, UnexpectedShapeError
from extmodel.jsdoc import JsDocParser

logger = get_logger("ast.component")

BLOCK_KEYS = ("statics", "privates")


def base_namespace(component_class: str) -> str:
    """Leading segment of a class name (the whole name if it has no dot)."""
    return component_class.split(".", 1)[0]


def accessor_names(config_name: str) -> tuple[str, str]:
    """Generated getter and setter names for a config property."""
    proper = config_name[:1].upper() + config_name[1:]
    return f"get{proper}", f"set{proper}"


class ComponentExtractor(Extractor):
    """
    Builds Component records from class definition calls.

    Usage:
        extractor = ComponentExtractor()
        components = extractor.extract_text(source, fs_path="app/view/Main.js", project="app")
    """

    def __init__(
        self,
        config: Optional[dict] = None,
        doc_parser: Optional[JsDocParser] = None,
        parser: Optional[SourceParser] = None,
    ):
        super().__init__(config, doc_parser)
        self.parser = parser or SourceParser(strict_syntax=self.config["strict_syntax"])
        self.methods = MethodAnalyzer(self.config, self.doc_parser)

    # --- Entry points ---

    def extract_text(
        self,
        text: str,
        fs_path: str = "",
        project: Optional[str] = None,
        namespace: str = "",
    ) -> list[Component]:
        """Parse text and extract its components ([] if it does not parse)."""
        try:
            parsed = self.parser.parse(text)
        except ParseFailure as e:
            logger.warning(f"Failed to parse {fs_path or '<text>'}: {e}")
            return []
        return self.extract(parsed, fs_path=fs_path, project=project, namespace=namespace)

    def extract(
        self,
        parsed: ParsedSource,
        fs_path: str = "",
        project: Optional[str] = None,
        namespace: str = "",
    ) -> list[Component]:
        """
        Extract one Component per well-formed define call.

        Args:
            parsed: Parsed source
            fs_path: Path the source was read from
            project: Project scope (defaults to the configured default project)
            namespace: Workspace namespace recorded on each component

        Returns:
            Components in source order
        """
        if project is None:
            project = self.config["default_project"]

        components = []
        for call in self.define_calls(parsed.root):
            try:
                component = self._build_component(call, fs_path, project, namespace)
            except UnexpectedShapeError as e:
                logger.warning(f"Skipping class definition in {fs_path or '<text>'}: {e}")
                continue
            components.append(component)

        logger.debug(f"Extracted {len(components)} component(s) from {fs_path or '<text>'}")
        return components

    def get_component_class(self, text: str) -> Optional[str]:
        """Class name of the first well-formed define call, if any."""
        try:
            parsed = self.parser.parse(text)
        except ParseFailure as e:
            logger.debug(f"Class name lookup failed: {e}")
            return None

        for call in self.define_calls(parsed.root):
            args = self.call_arguments(call)
            if len(args) >= 2 and args[0].kind == NodeKind.STRING and args[1].kind == NodeKind.OBJECT:
                return args[0].string_value()
        return None

    def define_calls(self, root: SyntaxNode) -> list[SyntaxNode]:
        """Calls of the form `<factory namespace>.<define method>(...)`."""
        calls = []
        for call in root.find_all(NodeKind.CALL):
            callee = call.field("function")
            if callee is None or callee.kind != NodeKind.MEMBER:
                continue
            obj = callee.field("object")
            prop = callee.field("property")
            if (
                obj is not None
                and prop is not None
                and obj.kind == NodeKind.IDENTIFIER
                and obj.text == self.config["factory_namespace"]
                and prop.text == self.config["define_method"]
            ):
                calls.append(call)
        return calls

    # --- Component ---

    def _build_component(self, call: SyntaxNode, fs_path: str, project: str, namespace: str) -> Component:
        args = self.call_arguments(call)
        self.require(
            len(args) >= 2 and args[0].kind == NodeKind.STRING and args[1].kind == NodeKind.OBJECT,
            "define() expects a class name string and a definition object",
            self.config["define_method"],
            call,
        )

        component_class = args[0].string_value()
        body = args[1]
        component = Component(
            component_class=component_class,
            base_namespace=base_namespace(component_class),
            project=project,
            namespace=namespace,
            fs_path=fs_path,
            start=call.start,
            end=call.end,
            body_start=body.start,
            body_end=body.end,
        )
        logger.debug(f"Component {component_class}")

        handlers: list[tuple[str, Callable[[Component, SyntaxNode], None]]] = [
            ("singleton", self._handle_singleton),
            ("extend", self._handle_extend),
            ("requires", self._handle_requires),
            ("uses", self._handle_uses),
            ("mixins", self._handle_mixins),
            ("alias", self._handle_aliases),
            ("xtype", self._handle_xtypes),
            ("alternateClassName", self._handle_aliases),
            ("type", self._handle_types),
            ("config", self._handle_config),
            ("privates", self._handle_block),
            ("statics", self._handle_block),
        ]
        for key, handler in handlers:
            pair = self.find_pair(body, key)
            if pair is None or self.pair_value(pair) is None:
                continue
            try:
                handler(component, pair)
            except UnexpectedShapeError as e:
                logger.warning(f"{component_class}: skipping '{key}' declaration: {e}")

        # Class-level doc comes from the comment leading the define statement
        statement = call.parent
        doc_anchor = statement if statement is not None and statement.kind == NodeKind.EXPRESSION_STATEMENT else call
        component.doc = self.member_doc(
            doc_anchor, component_class, "class", component_class, is_singleton=component.singleton
        )
        component.since = component.doc.since
        component.private = component.doc.private
        component.deprecated = component.doc.deprecated

        members, properties = self._collect_members(body, component_class)
        component.properties.extend(properties)
        component.object_ranges.extend(self.object_ranges(body))
        component.methods.extend(members)
        for method in component.methods:
            component.object_ranges.extend(method.object_ranges)

        component.widgets.extend(referenced_widgets(body, component_class, component.xtypes, component.types))
        return component

    # --- Well-known key handlers ---

    def _handle_singleton(self, component: Component, pair: SyntaxNode) -> None:
        value = self.pair_value(pair)
        self.require(value.kind in (NodeKind.TRUE, NodeKind.FALSE), "'singleton' must be a boolean", "singleton", pair)
        component.singleton = value.kind == NodeKind.TRUE

    def _handle_extend(self, component: Component, pair: SyntaxNode) -> None:
        value = self.pair_value(pair)
        self.require(value.kind == NodeKind.STRING, "'extend' must be a string", "extend", pair)
        component.extend = value.string_value()

    def _string_references(self, nodes: list[SyntaxNode]) -> list[Reference]:
        refs = []
        for node in nodes:
            if node.kind == NodeKind.STRING:
                refs.append(Reference(name=node.string_value(), start=node.start, end=node.end))
            elif node.kind != NodeKind.COMMENT:
                logger.debug(f"Ignoring non-string class reference: {node.text[:60]}")
        return refs

    def _reference_block(self, key: str, pair: SyntaxNode) -> ReferenceBlock:
        value = self.pair_value(pair)
        self.require(value.kind == NodeKind.ARRAY, f"'{key}' must be an array of class names", key, pair)
        return ReferenceBlock(value=self._string_references(value.named_children), start=pair.start, end=pair.end)

    def _handle_requires(self, component: Component, pair: SyntaxNode) -> None:
        component.requires = self._reference_block("requires", pair)

    def _handle_uses(self, component: Component, pair: SyntaxNode) -> None:
        component.uses = self._reference_block("uses", pair)

    def _handle_mixins(self, component: Component, pair: SyntaxNode) -> None:
        value = self.pair_value(pair)
        if value.kind == NodeKind.ARRAY:
            refs = self._string_references(value.named_children)
        elif value.kind == NodeKind.OBJECT:
            refs = []
            for entry in value.children_of_kind(NodeKind.PAIR):
                mixin = self.pair_value(entry)
                if mixin is None:
                    continue
                if mixin.kind == NodeKind.ARRAY:
                    refs.extend(self._string_references(mixin.named_children))
                else:
                    refs.extend(self._string_references([mixin]))
        else:
            raise UnexpectedShapeError("'mixins' must be an array or an object", key="mixins", line=pair.start.line)
        component.mixins = ReferenceBlock(value=refs, start=pair.start, end=pair.end)

    def _handle_aliases(self, component: Component, pair: SyntaxNode) -> None:
        key = property_key(pair)
        for declaration in classify_declarations(key, self.pair_value(pair), component.component_class):
            if declaration.kind == "xtype":
                component.xtypes.append(declaration)
            elif declaration.kind == "type":
                component.types.append(declaration)
            else:
                component.aliases.append(declaration)

    def _handle_xtypes(self, component: Component, pair: SyntaxNode) -> None:
        component.xtypes.extend(classify_declarations("xtype", self.pair_value(pair), component.component_class))

    def _handle_types(self, component: Component, pair: SyntaxNode) -> None:
        component.types.extend(classify_declarations("type", self.pair_value(pair), component.component_class))

    def _handle_config(self, component: Component, pair: SyntaxNode) -> None:
        value = self.pair_value(pair)
        self.require(value.kind == NodeKind.OBJECT, "'config' must be an object", "config", pair)

        for entry in value.children_of_kind(NodeKind.PAIR):
            name = property_key(entry)
            entry_value = entry.field("value")
            if name is None or entry_value is None:
                logger.debug(f"{component.component_class}: skipping config entry without a plain key")
                continue
            doc = self.member_doc(entry, name, "cfg", component.component_class)
            getter, setter = accessor_names(name)
            component.configs.append(
                Config(
                    name=name,
                    start=entry.start,
                    end=entry.end,
                    getter=getter,
                    setter=setter,
                    component_class=component.component_class,
                    doc=doc,
                    value=ValueRange(start=entry_value.start, end=entry_value.end, value=literal_value(entry_value)),
                    since=doc.since,
                    private=doc.private,
                    deprecated=doc.deprecated,
                )
            )

    def _handle_block(self, component: Component, pair: SyntaxNode) -> None:
        key = property_key(pair)
        value = self.pair_value(pair)
        self.require(value.kind == NodeKind.OBJECT, f"'{key}' must be an object", key, pair)

        members = self._block_members(value, component.component_class, key == "statics", key == "privates")
        if key == "statics":
            component.statics.extend(members)
        else:
            component.privates.extend(members)

    def _block_members(
        self, block: SyntaxNode, component_class: str, is_static: bool, is_private: bool
    ) -> list[Method | Property]:
        """Methods then properties of a statics/privates block, nested blocks included."""
        methods, properties = self._collect_members(block, component_class, is_static, is_private, nested=True)
        members: list[Method | Property] = []
        members.extend(methods)
        members.extend(properties)

        for pair in block.children_of_kind(NodeKind.PAIR):
            key = property_key(pair)
            value = self.pair_value(pair)
            if key in BLOCK_KEYS and value is not None and value.kind == NodeKind.OBJECT:
                members.extend(
                    self._block_members(
                        value, component_class, is_static or key == "statics", is_private or key == "privates"
                    )
                )
        return members

    # --- Members ---

    def _collect_members(
        self,
        obj: SyntaxNode,
        component_class: str,
        is_static: bool = False,
        is_private: bool = False,
        nested: bool = False,
    ) -> tuple[list[Method], list[Property]]:
        """
        Function-valued entries become Methods, other non-reserved pairs
        become Properties. At the top level the well-known keys are
        reserved; inside statics/privates only nested blocks are.
        """
        reserved = set(BLOCK_KEYS) if nested else WELL_KNOWN_KEYS
        methods: list[Method] = []
        properties: list[Property] = []

        for entry in self.object_entries(obj):
            if entry.kind == NodeKind.METHOD:
                name_node = entry.field("name")
                if name_node is None or name_node.kind not in (NodeKind.PROPERTY_NAME, NodeKind.STRING):
                    continue
                name = name_node.string_value() if name_node.kind == NodeKind.STRING else name_node.text
                methods.append(self._method(name, entry, entry, component_class, is_static, is_private))
                continue

            if entry.kind != NodeKind.PAIR:
                continue
            name = property_key(entry)
            value = self.pair_value(entry)
            if name is None or value is None or name in reserved:
                continue

            if self.is_function(value):
                methods.append(self._method(name, entry, value, component_class, is_static, is_private))
            else:
                properties.append(self._property(name, entry, value, component_class, is_static, is_private))

        return methods, properties

    def _method(
        self,
        name: str,
        node: SyntaxNode,
        function: SyntaxNode,
        component_class: str,
        is_static: bool,
        is_private: bool,
    ) -> Method:
        doc = self.member_doc(node, name, "method", component_class, is_private, is_static)
        return self.methods.analyze(name, node, function, component_class, doc, is_static, is_private)

    def _property(
        self,
        name: str,
        node: SyntaxNode,
        value: SyntaxNode,
        component_class: str,
        is_static: bool,
        is_private: bool,
    ) -> Property:
        doc = self.member_doc(node, name, "property", component_class, is_private, is_static)
        return Property(
            name=name,
            start=node.start,
            end=node.end,
            component_class=component_class,
            doc=doc,
            value=ValueRange(start=value.start, end=value.end, value=literal_value(value)),
            since=doc.since,
            private=doc.private,
            deprecated=doc.deprecated,
            static=doc.static,
        )

    # --- Object ranges ---

    def object_ranges(self, body: SyntaxNode) -> list[ObjectRange]:
        """
        Object-literal spans under the definition's own properties.

        Object values are tagged with their key, objects in arrays with the
        array's key; returned and spread objects are untagged.
        """
        ranges: list[ObjectRange] = []
        self._push_object_ranges(body.children_of_kind(NodeKind.PAIR, NodeKind.SPREAD), ranges)
        return ranges

    def _push_object_ranges(self, entries: list[SyntaxNode], ranges: list[ObjectRange]) -> None:
        for entry in entries:
            if entry.kind == NodeKind.SPREAD:
                self._push_spread(entry, ranges)
                continue

            key = property_key(entry)
            value = self.pair_value(entry)
            if key is None or value is None or key in OBJECT_RANGE_IGNORED_KEYS:
                continue

            if value.kind == NodeKind.OBJECT:
                ranges.append(ObjectRange(start=entry.start, end=entry.end, kind="pair", name=key))
                self._push_object_ranges(value.children_of_kind(NodeKind.PAIR), ranges)
            elif self.is_function(value):
                for returned in self._returned_objects(value):
                    ranges.append(ObjectRange(start=returned.start, end=returned.end, kind="object", name=None))
                    self._push_object_ranges(returned.children_of_kind(NodeKind.PAIR), ranges)
            elif value.kind == NodeKind.ARRAY:
                for element in value.children_of_kind(NodeKind.OBJECT):
                    ranges.append(ObjectRange(start=element.start, end=element.end, kind="object", name=key))
                    self._push_object_ranges(element.children_of_kind(NodeKind.PAIR), ranges)

    def _push_spread(self, spread: SyntaxNode, ranges: list[ObjectRange]) -> None:
        argument = spread.first_named_child()
        if argument is None:
            return
        argument = argument.unwrap_parens()
        if argument.kind == NodeKind.OBJECT:
            ranges.append(ObjectRange(start=spread.start, end=spread.end, kind="spread", name=None))
            self._push_object_ranges(argument.children_of_kind(NodeKind.PAIR), ranges)
        elif argument.kind == NodeKind.ARRAY:
            for element in argument.children_of_kind(NodeKind.OBJECT):
                ranges.append(ObjectRange(start=element.start, end=element.end, kind="object", name=None))
                self._push_object_ranges(element.children_of_kind(NodeKind.PAIR), ranges)

    def _returned_objects(self, function: SyntaxNode) -> list[SyntaxNode]:
        """Objects returned by a function's top-level return statements."""
        body = function.field("body")
        if body is None:
            return []
        body = body.unwrap_parens()
        if body.kind == NodeKind.OBJECT:  # Arrow function with an expression body
            return [body]
        if body.kind != NodeKind.BLOCK:
            return []

        objects = []
        for statement in body.children_of_kind(NodeKind.RETURN):
            argument = statement.first_named_child()
            if argument is not None and argument.unwrap_parens().kind == NodeKind.OBJECT:
                objects.append(argument.unwrap_parens())
        return objects
