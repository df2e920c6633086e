"""
Method Body Analyzer

Extracts parameters, local variables and object-literal regions from a
function-valued class member.
"""

from typing import Optional

from extmodel.ast.extractors.base import Extractor
from extmodel.ast.literals import property_key
from extmodel.ast.models import Doc, Method, ObjectRange, Parameter, Variable
from extmodel.ast.nodes import NodeKind, SyntaxNode
from extmodel.configs.constants import THIS_CLASS, VARIABLE_TYPE_ANY, VARIABLE_TYPE_CLASS, VARIABLE_TYPES
from extmodel.configs.logging import get_logger
from extmodel.exceptions import UnresolvedReferenceError

logger = get_logger("ast.methods")

# Variable name recorded for a bare call statement
ANONYMOUS_VARIABLE = "_"


def resolve_member_chain(member: SyntaxNode) -> tuple[str, str]:
    """
    Split a member expression into its object chain and final property.

    `A.b.C.create` gives ("A.b.C", "create"); `this.down` gives
    ("this", "down"); `me.down` gives ("me", "down").

    Raises:
        UnresolvedReferenceError: If any part is computed, or the chain is
            rooted in something other than an identifier or `this`
    """
    prop = member.field("property")
    if prop is None or prop.kind != NodeKind.PROPERTY_NAME:
        raise UnresolvedReferenceError("Computed member access", {"expression": member.text})

    obj = member.field("object")
    if obj is None:
        raise UnresolvedReferenceError("Member expression without object", {"expression": member.text})
    obj = obj.unwrap_parens()

    if obj.kind == NodeKind.IDENTIFIER:
        return obj.text, prop.text
    if obj.kind == NodeKind.THIS:
        return THIS_CLASS, prop.text
    if obj.kind != NodeKind.MEMBER:
        raise UnresolvedReferenceError("Chain is not rooted in an identifier", {"expression": member.text})

    parts = []
    node = obj
    while node.kind == NodeKind.MEMBER:
        part = node.field("property")
        if part is None or part.kind != NodeKind.PROPERTY_NAME:
            raise UnresolvedReferenceError("Computed member access", {"expression": member.text})
        parts.append(part.text)
        node = node.field("object").unwrap_parens()
    if node.kind != NodeKind.IDENTIFIER:
        raise UnresolvedReferenceError("Chain is not rooted in an identifier", {"expression": member.text})
    parts.append(node.text)

    return ".".join(reversed(parts)), prop.text


def _first_string_argument(call: SyntaxNode) -> Optional[str]:
    arguments = call.field("arguments")
    if arguments is None:
        return None
    for arg in arguments.named_children:
        if arg.kind == NodeKind.COMMENT:
            continue
        return arg.string_value()
    return None


def infer_instance_class(node: SyntaxNode, settings: dict) -> Optional[str]:
    """
    Best-effort guess of the class a local binding holds.

    - `this` gives "this"
    - `new A.b.C(...)` gives "A.b.C"
    - `X.y.create("Cls")`, `me.down("Cls")` and calls made directly on the
      factory namespace (`Ext.create("Cls")`) give the first string
      argument; without one nothing is inferred
    - any other `a.b.c(...)` call gives the callee's object chain "a.b"
    - `await` unwraps one level and applies the call rule

    Returns:
        The inferred class name, or None when the initializer is not one of
        these shapes or its chain cannot be resolved statically
    """
    node = node.unwrap_parens()

    if node.kind == NodeKind.THIS:
        return THIS_CLASS

    if node.kind == NodeKind.AWAIT:
        inner = node.first_named_child()
        if inner is None or inner.unwrap_parens().kind != NodeKind.CALL:
            logger.debug(f"Unhandled await expression: {node.text[:60]}")
            return None
        node = inner.unwrap_parens()

    try:
        if node.kind == NodeKind.NEW:
            constructor = node.field("constructor")
            if constructor is None or constructor.kind != NodeKind.MEMBER:
                return None
            owner, name = resolve_member_chain(constructor)
            if owner == THIS_CLASS:
                return None
            return f"{owner}.{name}"

        if node.kind == NodeKind.CALL:
            callee = node.field("function")
            if callee is None or callee.kind != NodeKind.MEMBER:
                return None
            owner, name = resolve_member_chain(callee)
            if name in settings["instantiation_selectors"] or owner == settings["factory_namespace"]:
                return _first_string_argument(node)
            return owner
    except UnresolvedReferenceError as e:
        logger.debug(f"Skipping variable: {e}")
        return None

    return None


def map_documented_type(documented: str) -> tuple[str, Optional[str]]:
    """
    Map a documented parameter type onto the variable type vocabulary.

    Returns:
        (type, class name); the class name is set only for class references
    """
    normalized = documented.strip().lower()
    if "|" in normalized:
        return VARIABLE_TYPE_ANY, None
    if normalized.endswith("[]"):
        return VARIABLE_TYPES["array"], None
    if normalized in VARIABLE_TYPES:
        return VARIABLE_TYPES[normalized], None
    return VARIABLE_TYPE_CLASS, documented.strip()


class MethodAnalyzer(Extractor):
    """
    Analyzes one function-valued member of a class definition.

    `node` is the declaration (pair or shorthand method) whose span the
    Method reports; `function` is the node holding parameters and body,
    which for shorthand methods is the declaration itself.
    """

    def analyze(
        self,
        name: str,
        node: SyntaxNode,
        function: SyntaxNode,
        component_class: str,
        doc: Doc,
        is_static: bool = False,
        is_private: bool = False,
    ) -> Method:
        body_start, body_end = self.body_span(function)
        return Method(
            name=name,
            start=node.start,
            end=node.end,
            component_class=component_class,
            doc=doc,
            params=self.parameters(function, name, component_class, doc),
            variables=self.variables(function, name),
            object_ranges=self.object_ranges(function, name),
            returns=doc.returns,
            body_start=body_start,
            body_end=body_end,
            is_async=any(child.grammar_type == "async" for child in function.children),
            since=doc.since,
            private=doc.private or is_private,
            deprecated=doc.deprecated,
            static=doc.static or is_static,
        )

    # --- Parameters ---

    def _parameter_names(self, function: SyntaxNode) -> list[SyntaxNode]:
        single = function.field("parameter")  # Arrow function without parentheses
        if single is not None and single.kind == NodeKind.IDENTIFIER:
            return [single]

        parameters = function.field("parameters")
        if parameters is None:
            return []

        names = []
        for param in parameters.named_children:
            if param.kind == NodeKind.IDENTIFIER:
                names.append(param)
            elif param.kind == NodeKind.PARAMETER:
                pattern = param.field("pattern")
                if pattern is not None and pattern.kind == NodeKind.IDENTIFIER:
                    names.append(pattern)
            # Destructuring and rest patterns carry no single name
        return names

    def parameters(self, function: SyntaxNode, method_name: str, component_class: str, doc: Doc) -> list[Parameter]:
        documented = {}
        for doc_param in doc.params:
            documented.setdefault(doc_param.name, doc_param)
        params = []

        for ident in self._parameter_names(function):
            param = Parameter(
                name=ident.text,
                start=ident.start,
                end=ident.end,
                method_name=method_name,
                component_class=component_class,
                type=VARIABLE_TYPE_ANY,
            )
            doc_param = documented.get(param.name)
            if doc_param is not None and doc_param.type:
                param.type, class_name = map_documented_type(doc_param.type)
                if class_name is not None:
                    param.component_class = doc_param.documented_type or class_name
            params.append(param)

        return params

    # --- Variables ---

    def _declaration_kind(self, declaration: SyntaxNode) -> str:
        if declaration.grammar_type == "variable_declaration":
            return "var"
        for child in declaration.children:
            if child.text in ("let", "const"):
                return child.text
        return "let"

    def variables(self, function: SyntaxNode, method_name: str) -> list[Variable]:
        body = function.field("body")
        if body is None:
            return []

        variables = []
        for node in body.walk():
            if node.kind == NodeKind.VARIABLE_DECLARATION:
                kind = self._declaration_kind(node)
                for declarator in node.children_of_kind(NodeKind.DECLARATOR):
                    name = declarator.field("name")
                    value = declarator.field("value")
                    if name is None or value is None or name.kind != NodeKind.IDENTIFIER:
                        continue
                    cls = infer_instance_class(value, self.config)
                    if cls:
                        variables.append(
                            Variable(
                                name=name.text,
                                start=declarator.start,
                                end=declarator.end,
                                method_name=method_name,
                                component_class=cls,
                                declaration_kind=kind,
                            )
                        )

            elif node.kind == NodeKind.EXPRESSION_STATEMENT:
                expression = node.first_named_child()
                if expression is None:
                    continue
                variable = self._statement_variable(expression, method_name)
                if variable is not None:
                    variables.append(variable)

        return variables

    def _statement_variable(self, expression: SyntaxNode, method_name: str) -> Optional[Variable]:
        """Variable recorded for `x = <init>;` or a bare `call();` statement."""
        if expression.kind == NodeKind.ASSIGNMENT:
            left = expression.field("left")
            right = expression.field("right")
            if left is None or right is None or left.kind != NodeKind.IDENTIFIER:
                return None
            name, value = left.text, right
        elif expression.kind == NodeKind.CALL:
            name, value = ANONYMOUS_VARIABLE, expression
        else:
            return None

        cls = infer_instance_class(value, self.config)
        if not cls:
            return None
        return Variable(
            name=name,
            start=expression.start,
            end=expression.end,
            method_name=method_name,
            component_class=cls,
            declaration_kind="let",
        )

    # --- Object ranges ---

    def _push_ranges(self, nodes: list[SyntaxNode], name: Optional[str], ranges: list[ObjectRange]) -> None:
        for node in nodes:
            node = node.unwrap_parens()
            if node.kind != NodeKind.OBJECT:
                continue
            ranges.append(ObjectRange(start=node.start, end=node.end, kind="object", name=name))
            for pair in node.children_of_kind(NodeKind.PAIR):
                key = property_key(pair)
                value = self.pair_value(pair)
                if key is None or value is None:
                    continue
                if value.kind == NodeKind.OBJECT:
                    self._push_ranges([value], key, ranges)
                elif value.kind == NodeKind.ARRAY:
                    self._push_ranges(value.children_of_kind(NodeKind.OBJECT), key, ranges)

    def object_ranges(self, function: SyntaxNode, method_name: str) -> list[ObjectRange]:
        """
        Object literals reachable from the top-level statements of a body.

        Call/new arguments and object initializers are tagged with the
        method name, nested objects with their property key; returned
        objects are untagged.
        """
        body = function.field("body")
        if body is None or body.kind != NodeKind.BLOCK:
            return []

        ranges: list[ObjectRange] = []
        for statement in body.named_children:
            if statement.kind == NodeKind.VARIABLE_DECLARATION:
                for declarator in statement.children_of_kind(NodeKind.DECLARATOR):
                    value = declarator.field("value")
                    if value is not None:
                        self._push_initializer(value.unwrap_parens(), method_name, ranges)

            elif statement.kind == NodeKind.EXPRESSION_STATEMENT:
                expression = statement.first_named_child()
                if expression is None:
                    continue
                if expression.kind == NodeKind.CALL:
                    self._push_ranges(self.call_arguments(expression), method_name, ranges)
                elif expression.kind == NodeKind.ASSIGNMENT:
                    right = expression.field("right")
                    if right is not None:
                        self._push_initializer(right.unwrap_parens(), method_name, ranges)

            elif statement.kind == NodeKind.RETURN:
                argument = statement.first_named_child()
                if argument is not None:
                    self._push_ranges([argument], None, ranges)

        return ranges

    def _push_initializer(self, value: SyntaxNode, method_name: str, ranges: list[ObjectRange]) -> None:
        if value.kind in (NodeKind.CALL, NodeKind.NEW):
            self._push_ranges(self.call_arguments(value), method_name, ranges)
        elif value.kind == NodeKind.AWAIT:
            inner = value.first_named_child()
            if inner is not None and inner.unwrap_parens().kind == NodeKind.CALL:
                self._push_ranges(self.call_arguments(inner.unwrap_parens()), method_name, ranges)
            else:
                logger.debug(f"Unhandled object range: unexpected await syntax in {method_name}")
        elif value.kind == NodeKind.OBJECT:
            self._push_ranges([value], method_name, ranges)
