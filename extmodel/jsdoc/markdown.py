"""
Markdown fragments used when rendering doc bodies.
"""

import re

NEW_LINE = "  \n"
CODE_INDENT = "    "
BOLD = "**"
ITALIC = "*"
BOLD_ITALIC_START = "_**"
BOLD_ITALIC_END = "**_"
CODE_BLOCK_END = "<!-- -->"

_LINK_RE = re.compile(r"\{\s*@link [\w.#]+\s*\}")


def bold(text: str) -> str:
    return f"{BOLD}{text}{BOLD}"


def italic(text: str) -> str:
    return f"{ITALIC}{text}{ITALIC}"


def bold_italic(text: str) -> str:
    return f"{BOLD_ITALIC_START}{text}{BOLD_ITALIC_END}"


def convert_links(text: str) -> str:
    """Render inline {@link X} tokens bold-italic."""
    return _LINK_RE.sub(lambda m: bold_italic(m.group(0)), text)
