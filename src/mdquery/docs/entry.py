"""Document entries and their hierarchical ids."""

import re
from dataclasses import dataclass
from pathlib import Path, PurePath
from typing import Any, Dict, NamedTuple, Optional, Union

from pydantic import BaseModel

NAME_SEPARATOR = "/"

# "0.buttons" -> "buttons"; the prefix only orders files inside a folder
_ORDER_PREFIX = re.compile(r"^\d+\.")
# "buttons.with.dot.my-type" -> ("buttons.with.dot", "my-type")
_TYPE_SUFFIX = re.compile(r"^(.+)\.(.+)$")


class EntryMeta(BaseModel):
    """Default metadata schema: no fields besides ``query``."""
    pass


class EntryId(NamedTuple):
    name: str
    type: Optional[str]


def compute_entry_id(
    root: Union[str, PurePath],
    path: Union[str, PurePath],
    separator: str = NAME_SEPARATOR,
) -> EntryId:
    """Derive the entry id and type from a file location.

    ``ember/template/uses/buttons.md``           -> ("ember/template/uses/buttons", None)
    ``ember/template/uses/buttons/buttons.md``   -> ("ember/template/uses/buttons", None)
    ``ember/template/uses/0.buttons.my-type.md`` -> ("ember/template/uses/buttons", "my-type")

    Args:
        root: Directory the ids are relative to
        path: Document path inside ``root``
        separator: Joins the id segments

    Returns:
        EntryId(name, type)
    """
    path = PurePath(path)
    dir_parts = list(path.parent.relative_to(PurePath(root)).parts)
    last_folder = dir_parts.pop() if dir_parts else ""

    name = _ORDER_PREFIX.sub("", path.stem)

    entry_type = None
    match = _TYPE_SUFFIX.match(name)
    if match:
        name, entry_type = match.group(1), match.group(2)

    # A file named after its folder stands for the folder itself
    if last_folder == name:
        parts = dir_parts + [name]
    else:
        parts = dir_parts + [last_folder, name]

    return EntryId(separator.join(p for p in parts if p), entry_type)


@dataclass(frozen=True)
class Entry:
    """One loaded document.

    Attributes:
        id: Hierarchical id derived from the file location
        type: Type suffix of the file name, if any
        content: Trimmed body, None when empty
        path: Absolute path of the source file
        query: The entry's own query, validated, in plain-dict form
        meta: Validated front matter (instance of the store's entry schema)

    Metadata fields are also readable as attributes (``entry.status``).
    """

    id: str
    type: Optional[str]
    content: Optional[str]
    path: Path
    query: Dict[str, Any]
    meta: BaseModel

    @property
    def data(self) -> Dict[str, Any]:
        """Front matter fields other than ``query``."""
        return self.meta.model_dump(exclude={"query"})

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_") or name == "meta":
            raise AttributeError(name)
        try:
            return getattr(self.meta, name)
        except AttributeError:
            raise AttributeError(
                f"'{type(self).__name__}' has no attribute or metadata field '{name}'"
            ) from None
