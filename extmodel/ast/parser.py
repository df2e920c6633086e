"""
Tree-sitter Parser Wrapper

Turns class definition source text into a syntax tree, applying
incremental edit descriptors against a previous parse when given.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import tree_sitter_typescript
from tree_sitter import Language, Parser, Tree

from extmodel.ast.models import Position, TextEdit
from extmodel.ast.nodes import SyntaxNode
from extmodel.configs.constants import EXTENSION_TO_LANGUAGE
from extmodel.configs.logging import get_logger
from extmodel.exceptions import ParseFailure, SyntaxFailure

logger = get_logger("ast.parser")


# Supported languages and their tree-sitter modules
LANGUAGE_MODULES = {
    "typescript": tree_sitter_typescript.language_typescript,
}


@dataclass
class ParsedSource:
    """A syntax tree plus the exact text it was parsed from."""

    tree: Tree
    text: str
    language: str = "typescript"

    @property
    def source(self) -> bytes:
        return self.text.encode("utf-8")

    @property
    def root(self) -> SyntaxNode:
        return SyntaxNode(self.tree.root_node, self.source)


def _line_offsets(text: str) -> list[int]:
    """Character offset of the start of every line."""
    offsets = [0]
    for index, char in enumerate(text):
        if char == "\n":
            offsets.append(index + 1)
    return offsets


def position_to_offset(text: str, position: Position) -> int:
    """
    Convert a line/column position into a character offset.

    Raises:
        ParseFailure: If the position lies outside the text
    """
    offsets = _line_offsets(text)
    if position.line < 1 or position.line > len(offsets):
        raise ParseFailure(
            "Edit position outside of text",
            {"line": position.line, "column": position.column, "lines": len(offsets)},
        )
    line_start = offsets[position.line - 1]
    if position.line < len(offsets):
        line_end = offsets[position.line] - 1
    else:
        line_end = len(text)
    if position.column < 0 or line_start + position.column > line_end:
        raise ParseFailure(
            "Edit position outside of line",
            {"line": position.line, "column": position.column},
        )
    return line_start + position.column


def _point(text: str, offset: int) -> tuple[int, int]:
    """Tree-sitter point (row, byte column) for a character offset."""
    prefix = text[:offset]
    row = prefix.count("\n")
    line_start = prefix.rfind("\n") + 1
    return (row, len(prefix[line_start:].encode("utf-8")))


def apply_edit(text: str, edit: TextEdit, tree: Optional[Tree] = None) -> str:
    """
    Apply one edit to text, mirroring it onto a previous tree if given.

    Returns:
        The edited text
    """
    start = position_to_offset(text, edit.start)
    end = position_to_offset(text, edit.end)
    if end < start:
        raise ParseFailure(
            "Edit ends before it starts",
            {"start": (edit.start.line, edit.start.column), "end": (edit.end.line, edit.end.column)},
        )

    new_text = text[:start] + edit.text + text[end:]

    if tree is not None:
        start_byte = len(text[:start].encode("utf-8"))
        old_end_byte = len(text[:end].encode("utf-8"))
        new_end_byte = start_byte + len(edit.text.encode("utf-8"))
        tree.edit(
            start_byte=start_byte,
            old_end_byte=old_end_byte,
            new_end_byte=new_end_byte,
            start_point=_point(text, start),
            old_end_point=_point(text, end),
            new_end_point=_point(new_text, start + len(edit.text)),
        )

    return new_text


class SourceParser:
    """
    Tree-sitter based parser for class definition files.

    Lazily initializes the language and parser on first use. JavaScript is
    parsed with the TypeScript grammar (a superset).
    """

    def __init__(self, strict_syntax: bool = True):
        self.strict_syntax = strict_syntax
        self._parsers: dict[str, Parser] = {}
        self._languages: dict[str, Language] = {}

    def _get_language(self, lang_name: str) -> Language:
        """Get or create Language object for a language."""
        if lang_name in self._languages:
            return self._languages[lang_name]

        module = LANGUAGE_MODULES.get(lang_name)
        if module is None:
            raise ParseFailure(f"Unsupported language: {lang_name}")

        language = Language(module())
        self._languages[lang_name] = language
        return language

    def _get_parser(self, lang_name: str) -> Parser:
        """Get or create Parser for a language."""
        if lang_name in self._parsers:
            return self._parsers[lang_name]

        parser = Parser(self._get_language(lang_name))
        self._parsers[lang_name] = parser
        return parser

    def detect_language(self, file_path: str) -> Optional[str]:
        """
        Detect language from file extension.

        Args:
            file_path: Path to the source file

        Returns:
            Language name or None if unsupported
        """
        ext = Path(file_path).suffix.lower()
        return EXTENSION_TO_LANGUAGE.get(ext)

    def is_supported(self, file_path: str) -> bool:
        """Check if a file's language is supported."""
        return self.detect_language(file_path) is not None

    def parse(
        self,
        text: str,
        edits: Optional[list[TextEdit]] = None,
        previous: Optional[ParsedSource] = None,
        language: str = "typescript",
    ) -> ParsedSource:
        """
        Parse source text into a syntax tree.

        Edits are applied in order, each addressing the result of the one
        before. When `previous` was parsed from the same text its tree is
        edited in place and reused, so it must not be used afterwards.

        Args:
            text: Source text the edits apply to
            edits: Optional incremental edit descriptors
            previous: Optional earlier parse of `text`
            language: Language name

        Returns:
            ParsedSource holding the tree and the exact text it parsed

        Raises:
            ParseFailure: If the edits do not fit the text or parsing fails
            SyntaxFailure: If the tree contains syntax errors (strict mode)
        """
        old_tree = None
        if previous is not None and edits and previous.text == text:
            old_tree = previous.tree

        for edit in edits or []:
            text = apply_edit(text, edit, old_tree)

        parser = self._get_parser(language)
        try:
            tree = parser.parse(text.encode("utf-8"), old_tree) if old_tree else parser.parse(text.encode("utf-8"))
        except (ValueError, TypeError) as e:
            raise ParseFailure(f"Failed to parse {language} source", cause=e) from e

        parsed = ParsedSource(tree=tree, text=text, language=language)

        if self.strict_syntax and tree.root_node.has_error:
            error = parsed.root.first_error()
            if error is not None:
                raise SyntaxFailure(
                    f"Syntax error near '{error.text[:40]}'" if error.text else "Missing token",
                    line=error.start.line,
                    column=error.start.column,
                )
            raise SyntaxFailure("Syntax error")

        if old_tree is not None:
            logger.debug(f"Incremental reparse applied {len(edits)} edit(s)")
        return parsed

    def parse_file(self, file_path: str) -> ParsedSource:
        """
        Parse a file into a syntax tree.

        Args:
            file_path: Path to the source file

        Returns:
            ParsedSource for the file

        Raises:
            ParseFailure: If the file is unsupported, unreadable or malformed
        """
        language = self.detect_language(file_path)
        if language is None:
            raise ParseFailure("Unsupported file type", {"path": file_path})

        try:
            content = Path(file_path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise ParseFailure(f"Failed to read file {file_path}", cause=e) from e

        return self.parse(content, language=language)


# Global parser instance (lazy singleton)
_parser: Optional[SourceParser] = None


def get_parser() -> SourceParser:
    """Get the global SourceParser instance."""
    global _parser
    if _parser is None:
        _parser = SourceParser()
    return _parser
