"""Front matter handling for markdown documents.

A header is a YAML block fenced by ``---`` lines at the very start of the
text. CRLF line endings, trailing spaces after the fences and a closing
fence at the end of the text are accepted.
"""

import re
from typing import Any, Optional

import yaml

HEADER_REGEX = re.compile(
    r"\A---[ \t]*\r?\n(?:(.*?)\r?\n)?---[ \t]*(?:\r?\n|\Z)",
    re.DOTALL,
)


def get_header_data(text: str) -> Optional[Any]:
    """Parse the YAML header of ``text``.

    Returns:
        None if the text has no header, ``{}`` for an empty header, otherwise
        whatever the YAML block holds

    Raises:
        yaml.YAMLError: If the header is not valid YAML
    """
    match = HEADER_REGEX.match(text)
    if match is None:
        return None
    data = yaml.safe_load(match.group(1) or "")
    return {} if data is None else data


def get_body(text: str) -> str:
    """Return the text after the header (the whole text when there is none)."""
    match = HEADER_REGEX.match(text)
    if match is None:
        return text
    return text[match.end():]
