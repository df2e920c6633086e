"""
Doc-Comment Parser

Converts a raw block comment into a Doc record with a single pass over its
lines. Each line either starts a state (a recognized @tag, or an indented
code line) or continues the current one; see extmodel.jsdoc.states.

Rendered bodies are markdown:

    Description text  \\n
      \\n
        parameter show: boolean  \\n
    Show the button  \\n
    *Defaults to: true*
"""

import re
from dataclasses import dataclass, field
from typing import Optional

from extmodel.ast.models import Doc, DocParam
from extmodel.configs.logging import get_logger
from extmodel.configs.runtime import get_full_config
from extmodel.exceptions import DocParseAnomaly
from extmodel.jsdoc import markdown
from extmodel.jsdoc.markdown import CODE_INDENT, NEW_LINE
from extmodel.jsdoc.states import DocState, classify_line, line_tag, transition

logger = get_logger("jsdoc")

P_TYPES = ("property", "param", "cfg", "class", "method", "unknown")

DEFAULT_MAX_LINES = 100
DEFAULT_CONTROL_MARKERS = ("eslint", "vscode-extjs", "extmodel")
NO_DOCUMENTATION = "No documentation found"

_TYPES_RE = re.compile(r"@(property|param|cfg|class|method) +\{([A-Za-z]+)\} +\w+")
_PARAM_RE = re.compile(r"@param\s*(\{[\w.*|/ \[\]()]+\})?\s*\[?([\w.$]+)(?: *= *([\w\"`' ]*) *)?\]? *(.+)?$")
_RETURNS_RE = re.compile(r"@returns? +\{([\w.*|/ \[\]()]+)\} *(.+)?")
_SINCE_RE = re.compile(r"@since +[vV]*(?:ersion)* *([0-9.-]+)?")
_DEPRECATED_RE = re.compile(r"@deprecated ?(.+)?")
_LEADING_TAG_RE = re.compile(r"@\w+ ")


def default_doc(p_type: str = "unknown") -> Doc:
    """An empty Doc record for a declaration kind."""
    return Doc(p_type=p_type)


def normalize_type(documented: str) -> str:
    """Lowercase a documented type; `*` is any, `/` and `|` separate alternates."""
    normalized = documented.replace("{", "").replace("}", "").lower()
    normalized = normalized.replace("*", "any").replace("/", "|").replace("|", " | ")
    return re.sub(r" +", " ", normalized).strip()


def split_comment(comment: str) -> list[str]:
    """
    Split a comment into logical lines.

    Comment delimiters, leading `*` decoration and blank lines are removed;
    indentation after the `* ` is kept so code blocks survive.
    """
    text = comment.strip()
    if text.startswith("/*"):
        text = text[2:]
    if text.endswith("*/"):
        text = text[:-2]
    text = re.sub(r"^[*\s]+", "", text)

    lines = []
    for raw in re.split(r"\r?\n", text):
        if re.match(r"^\s*\*", raw):
            line = re.sub(r"^\s*\* ?", "", raw)
        else:
            line = raw.lstrip()
        line = re.sub(r"\s*\*$", "", line.rstrip())
        if line.strip():
            lines.append(line)
    return lines


@dataclass
class _DocPass:
    """Mutable state for one parse of one comment."""

    doc: Doc
    lines: list[str]
    state: DocState = DocState.TEXT
    before_code: DocState = DocState.TEXT
    indented: str = ""
    trailers: list[str] = field(default_factory=list)

    def push(self, text: str) -> None:
        self.doc.body += markdown.convert_links(text)

    def ensure_line_break(self) -> None:
        if self.doc.body and not self.doc.body.endswith(NEW_LINE):
            self.push(NEW_LINE)

    def flush_code(self) -> None:
        if self.indented:
            self.push(self.indented)
            self.push(f"{NEW_LINE}{markdown.CODE_BLOCK_END}")
            self.indented = ""

    def flush_trailers(self) -> None:
        for trailer in self.trailers:
            self.push(trailer)
        self.trailers = []


class JsDocParser:
    """
    Line-oriented doc-comment parser.

    Stateless between calls; every parse builds its own _DocPass.
    """

    def __init__(
        self,
        max_lines: int = DEFAULT_MAX_LINES,
        control_markers: tuple[str, ...] = DEFAULT_CONTROL_MARKERS,
    ):
        self.max_lines = max_lines
        self.control_markers = tuple(control_markers)

    def parse(
        self,
        property_name: str,
        p_type: str,
        component_class: str,
        is_private: bool = False,
        is_static: bool = False,
        is_singleton: bool = False,
        comment: Optional[str] = None,
    ) -> Doc:
        """
        Build a Doc from a raw comment.

        Args:
            property_name: Name of the documented declaration
            p_type: Declaration kind (property, param, cfg, class, method, unknown)
            component_class: Class the declaration belongs to
            is_private: Declared inside a privates block
            is_static: Declared inside a statics block
            is_singleton: Declared on a singleton class
            comment: Raw comment text, delimiters optional

        Returns:
            Doc record; an empty comment yields the default Doc with the flags
        """
        doc = default_doc(p_type if p_type in P_TYPES else "unknown")

        lines = split_comment(comment) if comment else []
        if lines:
            self._infer_types(doc, lines)
            self._process(doc, lines)

        doc.private = doc.private or is_private
        doc.static = doc.static or is_static
        doc.singleton = doc.singleton or is_singleton
        if doc.p_type == "method" and not doc.returns:
            doc.returns = "void"

        self._populate_title(doc, property_name, component_class)
        return doc

    # --- Pass ---

    def _process(self, doc: Doc, lines: list[str]) -> None:
        ctx = _DocPass(doc=doc, lines=lines)
        processed = 0

        for line in lines:
            if processed == 0 and any(marker in line for marker in self.control_markers):
                logger.debug(f"Skipping control comment line: {line}")
                continue

            if doc.body and ctx.state != DocState.CODE:
                ctx.push(NEW_LINE)

            started = classify_line(line)
            next_state = transition(ctx.state, line, ctx.before_code)

            if next_state != DocState.CODE:
                ctx.flush_code()
            if started is not None and started != DocState.CODE:
                ctx.flush_trailers()

            if next_state == DocState.CODE and ctx.state != DocState.CODE:
                ctx.before_code = ctx.state
            ctx.state = next_state

            try:
                self._dispatch(ctx, line, is_tag_line=started is not None and started != DocState.CODE)
            except DocParseAnomaly as e:
                logger.debug(f"{e}; treating as text")
                self._text_line(ctx, line)

            processed += 1
            if processed >= self.max_lines:
                logger.debug(f"Doc comment truncated at {self.max_lines} lines")
                break

        ctx.flush_code()
        ctx.flush_trailers()

    def _dispatch(self, ctx: _DocPass, line: str, is_tag_line: bool) -> None:
        state = ctx.state

        if line.startswith("@") and not is_tag_line:
            raise DocParseAnomaly("Unrecognized doc tag", {"tag": line_tag(line)})

        if state == DocState.CODE:
            ctx.indented += NEW_LINE + line
        elif state in (DocState.CONFIG, DocState.PROPERTY, DocState.METHOD, DocState.CLASS):
            if not is_tag_line:
                ctx.ensure_line_break()
                ctx.push(line.strip())
        elif state == DocState.PARAM:
            if is_tag_line:
                self._param_line(ctx, line)
            else:
                ctx.push(line.strip())
        elif not is_tag_line:
            self._text_line(ctx, line)
        elif state == DocState.RETURNS:
            self._returns_line(ctx, line)
        elif state == DocState.SINCE:
            self._since_line(ctx, line)
        elif state == DocState.DEPRECATED:
            self._deprecated_line(ctx, line)
        elif state == DocState.PRIVATE:
            ctx.doc.private = True
            ctx.ensure_line_break()
            ctx.push(markdown.bold("private"))
        elif state == DocState.SINGLETON:
            ctx.doc.singleton = True
        else:
            self._text_line(ctx, line)

    # --- Line handlers ---

    def _text_line(self, ctx: _DocPass, line: str) -> None:
        text = line.strip()
        if _LEADING_TAG_RE.match(text):
            tag, rest = text.split(" ", 1)
            text = f"{markdown.italic(tag)} {rest}"
        ctx.ensure_line_break()
        ctx.push(text)

    def _param_line(self, ctx: _DocPass, line: str) -> None:
        match = _PARAM_RE.match(line.strip())
        if not match:
            raise DocParseAnomaly("Malformed @param line", {"line": line.strip()})

        raw_type, name, raw_default, doc_line = match.groups()
        documented_type = raw_type.strip("{}").strip() if raw_type else ""
        param_type = normalize_type(documented_type)
        default = raw_default.strip().replace("`", "") if raw_default and raw_default.strip() else None

        title = f"{param_type} {name}"
        if default:
            title += f": defaults to {default}"

        ctx.doc.params.append(
            DocParam(
                name=name,
                type=param_type,
                default=default,
                body=self._param_body(ctx.lines, name),
                title=title,
                documented_type=documented_type,
            )
        )

        param_line = f"{CODE_INDENT}parameter {name}: {param_type}"
        if doc_line:
            param_line += f"{NEW_LINE}{doc_line.strip()}"

        # Blank line between parameters
        if ctx.doc.body:
            ctx.ensure_line_break()
            if not ctx.doc.body.endswith(NEW_LINE + NEW_LINE):
                ctx.push(NEW_LINE)
        ctx.push(param_line)

        if default:
            ctx.trailers.append(f"{NEW_LINE}{markdown.italic(f'Defaults to: {default}')}{NEW_LINE}{NEW_LINE}")
        else:
            ctx.push(NEW_LINE)

    def _param_body(self, lines: list[str], name: str) -> str:
        """Full description of a parameter, up to the next tag line."""
        pattern = re.compile(
            r"@param\s*(?:\{[\w.*|/ \[\]()]+\})?\s*\[?"
            + re.escape(name)
            + r"(?![\w.$])(?: *= *[\w\"`' ]*)? *\]?(.*?)(?=^@[a-z]+|\Z)",
            re.MULTILINE | re.DOTALL,
        )
        match = pattern.search("\n".join(lines))
        if match:
            body = match.group(1).strip()
            if body:
                return body
        return NO_DOCUMENTATION

    def _returns_line(self, ctx: _DocPass, line: str) -> None:
        match = _RETURNS_RE.search(line)
        if match:
            ctx.doc.returns = normalize_type(match.group(1))
            text = f"{CODE_INDENT}returns: {ctx.doc.returns}"
            if match.group(2):
                text += f"{NEW_LINE}{match.group(2).strip()}"
        else:
            ctx.doc.returns = "void"
            text = f"{CODE_INDENT}returns: void"
        ctx.ensure_line_break()
        ctx.push(text)

    def _since_line(self, ctx: _DocPass, line: str) -> None:
        match = _SINCE_RE.search(line)
        version = match.group(1) if match and match.group(1) else None
        shown = version or "?"
        ctx.doc.since = f"v{version}" if version else "?"
        ctx.ensure_line_break()
        ctx.push(f"{NEW_LINE}{markdown.italic(f'since version {shown}')}")

    def _deprecated_line(self, ctx: _DocPass, line: str) -> None:
        ctx.doc.deprecated = True
        match = _DEPRECATED_RE.search(line)
        text = markdown.bold("deprecated")
        if match and match.group(1):
            text += f" {match.group(1).strip()}"
        ctx.ensure_line_break()
        ctx.push(text)

    # --- Types and title ---

    def _infer_types(self, doc: Doc, lines: list[str]) -> None:
        match = None
        for line in lines:
            match = _TYPES_RE.search(line)
            if match:
                break

        if doc.p_type == "unknown":
            if match:
                doc.p_type = match.group(1)
                doc.type = match.group(2).lower()
            else:
                doc.p_type = "class"
                doc.type = "unknown"
        elif not doc.type:
            doc.type = match.group(2).lower() if match else "unknown"

    def _populate_title(self, doc: Doc, property_name: str, component_class: str) -> None:
        private_text = f"{NEW_LINE}private {doc.p_type}" if doc.private else ""
        static_text = f"{NEW_LINE}static {doc.p_type}" if doc.static else ""

        if doc.p_type == "method":
            params = ", ".join(p.name for p in doc.params) or "none"
            doc.title = (
                f"function {property_name}: returns {doc.returns}{private_text}{static_text}"
                f"{NEW_LINE}parameters:  {params}"
            )
        elif doc.p_type == "property":
            doc.title = f"property {property_name}: {doc.type}{private_text}{static_text}"
        elif doc.p_type == "cfg":
            doc.title = f"config {property_name}: {doc.type}"
        elif doc.p_type == "param":
            doc.title = f"parameter {property_name}: {doc.type}"
        else:
            short_name = property_name.rsplit(".", 1)[-1]
            kind = "singleton" if doc.singleton else doc.p_type
            doc.title = f"{kind} {short_name}: {component_class}{private_text}{static_text}"


# Global doc parser instance (lazy singleton)
_doc_parser: Optional[JsDocParser] = None


def get_doc_parser() -> JsDocParser:
    """Get the global JsDocParser, configured from the runtime config."""
    global _doc_parser
    if _doc_parser is None:
        config = get_full_config()
        _doc_parser = JsDocParser(
            max_lines=config["doc_max_lines"],
            control_markers=tuple(config["doc_control_markers"]),
        )
    return _doc_parser


def parse_doc(
    property_name: str,
    p_type: str,
    component_class: str,
    is_private: bool = False,
    is_static: bool = False,
    is_singleton: bool = False,
    comment: Optional[str] = None,
) -> Doc:
    """Parse a comment with the global doc parser."""
    return get_doc_parser().parse(
        property_name, p_type, component_class, is_private, is_static, is_singleton, comment
    )
