"""
extmodel - A component model extractor for ExtJS class definition files.

This package parses `Ext.define` calls with tree-sitter, renders their
doc comments, and keeps a queryable registry of the resulting components.
"""

__version__ = "0.1.0"
