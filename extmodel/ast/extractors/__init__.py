"""
Class Definition Extractors

The component builder walks define calls; the method analyzer handles each
function-valued member it finds.
"""

from extmodel.ast.extractors.base import Extractor
from extmodel.ast.extractors.component import ComponentExtractor, accessor_names, base_namespace
from extmodel.ast.extractors.declarations import classify_declaration, referenced_widgets, split_alias
from extmodel.ast.extractors.methods import MethodAnalyzer, infer_instance_class, map_documented_type

__all__ = [
    "Extractor",
    "ComponentExtractor",
    "MethodAnalyzer",
    "accessor_names",
    "base_namespace",
    "classify_declaration",
    "infer_instance_class",
    "map_documented_type",
    "referenced_widgets",
    "split_alias",
]
