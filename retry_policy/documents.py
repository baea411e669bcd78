"""Step document I/O (ruamel.yaml round-trip).

Step files are loaded in round-trip mode so comments, key order and quoting
survive a rewrite.  Dumps use a fixed layout:

- mappings indented by 2, sequences indented under their key
- no line folding
- no anchors/aliases: a sub-structure shared in memory is written out in full
"""
from __future__ import annotations

from contextlib import suppress
from io import StringIO
from pathlib import Path
from typing import Dict, List, Union

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

Node = Union[None, bool, int, float, str, List["Node"], Dict[str, "Node"]]


class DocumentError(Exception):
    """Raised when a step file cannot be read, parsed, serialized or written."""

    def __init__(self, path: Path, message: str):
        super().__init__(f"{path}: {message}")
        self.path = path


def _make_yaml() -> YAML:
    yaml = YAML(typ='rt')
    yaml.preserve_quotes = True
    yaml.width = 4096  # avoid folding
    yaml.indent(mapping=2, sequence=4, offset=2)
    yaml.representer.ignore_aliases = lambda *args: True
    return yaml


yaml = _make_yaml()


def load_document(path: Path) -> Node:
    """Parse the YAML file at *path*. An empty file loads as ``None``."""
    try:
        with path.open('r', encoding='utf-8') as fp:
            return yaml.load(fp)
    except (OSError, UnicodeDecodeError) as exc:
        raise DocumentError(path, f"cannot read file: {exc}") from exc
    except YAMLError as exc:
        raise DocumentError(path, f"invalid YAML: {exc}") from exc


def dump_document(doc: Node) -> str:
    sio = StringIO()
    yaml.dump(doc, sio)
    return sio.getvalue()


def save_document(path: Path, doc: Node) -> None:
    """Serialize *doc* and replace the file at *path* with the result.

    The text is written to a sibling ``.tmp`` file first and moved over the
    target, so the step file is either the old or the new version.
    """
    try:
        text = dump_document(doc)
    except YAMLError as exc:
        raise DocumentError(path, f"cannot serialize document: {exc}") from exc
    tmp = path.with_name(path.name + '.tmp')
    try:
        tmp.write_text(text, encoding='utf-8', newline='\n')
        tmp.replace(path)
    except OSError as exc:
        with suppress(OSError):
            tmp.unlink(missing_ok=True)
        raise DocumentError(path, f"cannot write file: {exc}") from exc
