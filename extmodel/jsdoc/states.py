"""
Doc-Comment States

The line-oriented state machine behind the doc parser: which state a line
starts, and which state the parser is in after reading it.
"""

from enum import Enum
from typing import Optional


class DocState(Enum):
    CLASS = "class"
    PROPERTY = "property"
    CONFIG = "config"
    METHOD = "method"
    PARAM = "param"
    RETURNS = "returns"
    SINCE = "since"
    DEPRECATED = "deprecated"
    PRIVATE = "private"
    SINGLETON = "singleton"
    CODE = "code"
    TEXT = "text"


TAG_STATES = {
    "@cfg": DocState.CONFIG,
    "@config": DocState.CONFIG,
    "@class": DocState.CLASS,
    "@property": DocState.PROPERTY,
    "@param": DocState.PARAM,
    "@return": DocState.RETURNS,
    "@returns": DocState.RETURNS,
    "@method": DocState.METHOD,
    "@since": DocState.SINCE,
    "@deprecated": DocState.DEPRECATED,
    "@private": DocState.PRIVATE,
    "@singleton": DocState.SINGLETON,
}

# States whose tag line carries all of the tag's data
SINGLE_LINE_STATES = (
    DocState.RETURNS,
    DocState.SINCE,
    DocState.DEPRECATED,
    DocState.PRIVATE,
    DocState.SINGLETON,
)


def line_tag(line: str) -> Optional[str]:
    """The leading @tag of a line, or None."""
    if not line.startswith("@"):
        return None
    return line.split(None, 1)[0]


def is_code_line(line: str) -> bool:
    """Indented by three spaces or a tab, and not a tag."""
    if len(line) <= 3 or line.startswith("@"):
        return False
    return line[:3] == "   " or line[0] == "\t"


def classify_line(line: str) -> Optional[DocState]:
    """
    State a line starts, if any.

    Returns:
        The tag's state for a recognized tag line, CODE for an indented
        line, None for plain text and unrecognized tags
    """
    tag = line_tag(line)
    if tag is not None:
        return TAG_STATES.get(tag)
    if is_code_line(line):
        return DocState.CODE
    return None


def transition(state: DocState, line: str, before_code: DocState = DocState.TEXT) -> DocState:
    """
    State after reading `line` in `state`.

    Lines that start no state continue the current one, except that the
    first non-code line after a code block resumes `before_code`.
    """
    started = classify_line(line)
    if started is not None:
        return started
    if state == DocState.CODE:
        return before_code
    return state
