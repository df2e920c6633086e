"""
Doc-Comment Parsing

Turns block comments attached to class declarations into Doc records.
"""

from extmodel.jsdoc.parser import (
    JsDocParser,
    default_doc,
    get_doc_parser,
    normalize_type,
    parse_doc,
    split_comment,
)
from extmodel.jsdoc.states import DocState, classify_line, transition

__all__ = [
    "JsDocParser",
    "DocState",
    "classify_line",
    "default_doc",
    "get_doc_parser",
    "normalize_type",
    "parse_doc",
    "split_comment",
    "transition",
]
