"""
extmodel Constants

Static values describing the class-definition dialect: well-known
configuration keys, alias namespaces and supported file extensions.
"""

# --- Source Files ---

EXTENSION_TO_LANGUAGE = {
    ".js": "typescript",  # Use TS parser for JS (superset)
    ".mjs": "typescript",
    ".cjs": "typescript",
    ".ts": "typescript",
}

# --- Class Definition Keys ---
# Keys of the definition object that are processed by a dedicated handler
# and therefore never reported as plain properties.

WELL_KNOWN_KEYS = {
    "singleton",
    "extend",
    "requires",
    "uses",
    "mixins",
    "alias",
    "alternateClassName",
    "xtype",
    "type",
    "config",
    "statics",
    "privates",
}

# Keys whose object values are not walked for object ranges
OBJECT_RANGE_IGNORED_KEYS = {"config", "requires", "privates", "statics", "uses"}

# --- Alias Namespaces ---

XTYPE_NAMESPACE = "widget"
TYPE_NAMESPACES = ("store", "layout")

# --- Declaration Kinds ---

KIND_XTYPE = "xtype"
KIND_ALIAS = "alias"
KIND_TYPE = "type"

# --- Documented Type Vocabulary ---

VARIABLE_TYPES = {
    "arr": "array",
    "array": "array",
    "bool": "boolean",
    "boolean": "boolean",
    "int": "number",
    "number": "number",
    "object": "object",
    "string": "string",
    "*": "any",
    "any": "any",
}

VARIABLE_TYPE_ANY = "any"
VARIABLE_TYPE_CLASS = "class"

# Inferred class for `const me = this`
THIS_CLASS = "this"
