"""Stock predicates over files.

``file_query_engine()`` gives an engine whose input is a :class:`FileInput`,
with the predicates most document stores start from:

    {"contains": "useState"}          content contains a substring
    {"glob": ["src/**/*.tsx"]}        path matches one of the globs
    {"extension": ["ts", "tsx"]}      file extension is in the list
"""

from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import List, Union

from mdquery.globs import glob_matches
from mdquery.query.engine import QueryEngine


@dataclass(frozen=True)
class FileInput:
    """A file being matched: POSIX path relative to the project and its text."""

    path: str
    content: str = ""

    @property
    def extension(self) -> str:
        return PurePosixPath(self.path).suffix.lstrip(".")

    @classmethod
    def read(cls, path: Path, base: Path) -> "FileInput":
        relative = path.resolve().relative_to(base.resolve()).as_posix()
        return cls(path=relative, content=path.read_text(encoding="utf-8"))


def _as_list(value: Union[str, List[str]]) -> List[str]:
    return [value] if isinstance(value, str) else list(value)


def file_query_engine() -> QueryEngine:
    return (
        QueryEngine.default()
        .add_predicate(
            "contains",
            str,
            lambda text: lambda file: text in file.content,
        )
        .add_predicate(
            "glob",
            Union[str, List[str]],
            lambda globs: lambda file: glob_matches(file.path, _as_list(globs)),
            cache_key=lambda globs, file: file.path,
        )
        .add_predicate(
            "extension",
            List[str],
            lambda extensions: lambda file: file.extension in extensions,
            cache_key=lambda extensions, file: file.extension,
        )
    )
