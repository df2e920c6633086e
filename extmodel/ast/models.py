"""
Data Models for Component Extraction

Structured, position-annotated records produced from class definition files.
Lines are 1-based, columns are 0-based character offsets.
"""

from dataclasses import asdict, dataclass, field
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import Field


@dataclass(frozen=True)
class Position:
    """A point in the source text."""

    line: int = 1
    column: int = 0


@dataclass
class TextEdit:
    """Replace the text between start and end with new text."""

    start: Position
    end: Position
    text: str = ""


@dataclass
class Reference:
    """A referenced class name (requires/uses/mixins entry)."""

    name: str
    start: Position
    end: Position


@dataclass
class ReferenceBlock:
    """A requires/uses/mixins declaration and the span of its property."""

    value: list[Reference] = field(default_factory=list)
    start: Position = field(default_factory=Position)
    end: Position = field(default_factory=Position)


@dataclass
class WidgetDeclaration:
    """An xtype, alias or type name, declared by or referenced from a component."""

    name: str
    start: Position
    end: Position
    component_class: str
    kind: str  # xtype, alias, type
    namespace: str = ""
    parent_property: str = ""  # Enclosing property for referenced widgets (items, layout, ...)


@dataclass
class ObjectRange:
    """Span of an object literal, tagged with the property that owns it."""

    start: Position
    end: Position
    kind: str  # object, pair, spread
    name: Optional[str] = None


@dataclass
class ValueRange:
    """Initializer span of a property plus its literal rendering."""

    start: Position
    end: Position
    value: Any = None


@dataclass
class DocParam:
    """A documented @param entry."""

    name: str
    type: str = ""  # Normalized: lowercased, alternates joined with " | "
    default: Optional[str] = None
    body: str = ""
    title: str = ""
    documented_type: str = ""  # Type as written, braces removed


@dataclass
class Doc:
    """Structured documentation parsed from a block comment."""

    body: str = ""
    title: str = ""
    p_type: str = "unknown"  # property, param, cfg, class, method, unknown
    type: str = ""
    params: list[DocParam] = field(default_factory=list)
    returns: str = ""
    since: str = ""
    deprecated: bool = False
    private: bool = False
    static: bool = False
    singleton: bool = False


@dataclass
class Parameter:
    """A declared method parameter."""

    name: str
    start: Position
    end: Position
    method_name: str
    component_class: str = ""
    type: str = "any"


@dataclass
class Variable:
    """A local binding inside a method body and the class it was inferred to hold."""

    name: str
    start: Position
    end: Position
    method_name: str
    component_class: str  # Inferred instance class, or "this"
    declaration_kind: str = "let"  # var, let, const


@dataclass
class Property:
    """A non-function property of a class definition."""

    name: str
    start: Position
    end: Position
    component_class: str = ""
    doc: Optional[Doc] = None
    value: Optional[ValueRange] = None
    since: str = ""
    private: bool = False
    deprecated: bool = False
    static: bool = False
    member_kind: Literal["property"] = "property"


@dataclass
class Config:
    """An entry of the `config` block; implies generated accessors."""

    name: str
    start: Position
    end: Position
    getter: str = ""
    setter: str = ""
    component_class: str = ""
    doc: Optional[Doc] = None
    value: Optional[ValueRange] = None
    since: str = ""
    private: bool = False
    deprecated: bool = False
    static: bool = False
    member_kind: Literal["config"] = "config"


@dataclass
class Method:
    """A function-valued property of a class definition."""

    name: str
    start: Position
    end: Position
    component_class: str = ""
    doc: Optional[Doc] = None
    params: list[Parameter] = field(default_factory=list)
    variables: list[Variable] = field(default_factory=list)
    object_ranges: list[ObjectRange] = field(default_factory=list)
    returns: str = ""
    body_start: Optional[Position] = None
    body_end: Optional[Position] = None
    is_async: bool = False
    since: str = ""
    private: bool = False
    deprecated: bool = False
    static: bool = False
    member_kind: Literal["method"] = "method"


# Entries of statics/privates blocks
BlockMember = Annotated[Union[Method, Property], Field(discriminator="member_kind")]


@dataclass
class Component:
    """Everything declared by one class definition call."""

    component_class: str
    base_namespace: str = ""
    project: str = ""
    namespace: str = ""  # Workspace namespace supplied by the request
    fs_path: str = ""

    start: Position = field(default_factory=Position)
    end: Position = field(default_factory=Position)
    body_start: Position = field(default_factory=Position)
    body_end: Position = field(default_factory=Position)

    singleton: bool = False
    extend: Optional[str] = None
    requires: Optional[ReferenceBlock] = None
    uses: Optional[ReferenceBlock] = None
    mixins: Optional[ReferenceBlock] = None

    aliases: list[WidgetDeclaration] = field(default_factory=list)
    xtypes: list[WidgetDeclaration] = field(default_factory=list)
    types: list[WidgetDeclaration] = field(default_factory=list)
    widgets: list[WidgetDeclaration] = field(default_factory=list)  # Referenced, not declared

    configs: list[Config] = field(default_factory=list)
    properties: list[Property] = field(default_factory=list)
    methods: list[Method] = field(default_factory=list)
    statics: list[BlockMember] = field(default_factory=list)
    privates: list[BlockMember] = field(default_factory=list)
    object_ranges: list[ObjectRange] = field(default_factory=list)

    doc: Optional[Doc] = None
    since: str = ""
    private: bool = False
    deprecated: bool = False

    @property
    def name(self) -> str:
        return self.component_class

    @property
    def key(self) -> tuple[str, str]:
        """Registry key."""
        return (self.component_class, self.project)

    def to_dict(self) -> dict:
        """Plain nested dict suitable for JSON serialization."""
        return asdict(self)
