"""
Print and convert operations behind the hmap command line.

The in-memory variants work on bytes and are what the tests drive; the file
variants add path handling on top.
"""

import enum
import os

from .errors import CannotOpenFile, SameFormat, UnknownFormat
from .headermap import HeaderMap, encode
from .interchange import dump_json, dump_yaml, load_json, load_yaml


class HeaderMapFileFormat(enum.Enum):
    HMAP = "hmap"
    JSON = "json"
    YAML = "yaml"


# File extension → format.
FORMAT_EXTENSIONS = {
    ".hmap": HeaderMapFileFormat.HMAP,
    ".json": HeaderMapFileFormat.JSON,
    ".yaml": HeaderMapFileFormat.YAML,
    ".yml":  HeaderMapFileFormat.YAML,
}


def resolve_format(path: str) -> HeaderMapFileFormat:
    """Determine a file's format from its extension."""
    ext = os.path.splitext(path)[1].lower()
    if ext not in FORMAT_EXTENSIONS:
        raise UnknownFormat(path)
    return FORMAT_EXTENSIONS[ext]


def print_header_map(data: bytes, strict: bool = False) -> str:
    """Render a header map binary as text, one "key -> path" line per entry,
    sorted by key."""
    entries = sorted(HeaderMap.from_bytes(data, strict=strict),
                     key=lambda e: e.key)
    return "\n".join(f"{e.key} -> {e.path}" for e in entries)


def convert(data: bytes,
            from_format: HeaderMapFileFormat,
            to_format: HeaderMapFileFormat,
            strict: bool = False) -> bytes:
    """Convert header map data between formats.

    Raises:
        SameFormat: If both formats are the same.
        HeaderMapError: If the input cannot be read or the output built.
    """
    if from_format == to_format:
        raise SameFormat(from_format)

    if from_format == HeaderMapFileFormat.HMAP:
        entries = HeaderMap.from_bytes(data, strict=strict).entries()
    elif from_format == HeaderMapFileFormat.JSON:
        entries = load_json(data)
    else:
        entries = load_yaml(data)

    if to_format == HeaderMapFileFormat.HMAP:
        return encode(entries)
    if to_format == HeaderMapFileFormat.JSON:
        return dump_json(entries).encode("utf-8")
    return dump_yaml(entries).encode("utf-8")


def _read_file(path: str) -> bytes:
    try:
        with open(path, "rb") as f:
            return f.read()
    except OSError as e:
        raise CannotOpenFile(path) from e


def _write_file(path: str, data: bytes):
    """Write ``data`` beside ``path`` and move it into place, so a failed
    write never leaves a truncated file behind."""
    tmp_path = path + ".tmp"
    try:
        os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
        with open(tmp_path, "wb") as f:
            f.write(data)
        os.replace(tmp_path, path)
    except OSError as e:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise CannotOpenFile(path) from e


def print_file(path: str, strict: bool = False) -> str:
    return print_header_map(_read_file(path), strict=strict)


def convert_file(source: str, dest: str, strict: bool = False):
    """Convert ``source`` into ``dest``, formats chosen by extension."""
    from_format = resolve_format(source)
    to_format = resolve_format(dest)
    if from_format == to_format:
        raise SameFormat(from_format)
    data = convert(_read_file(source), from_format, to_format, strict=strict)
    _write_file(dest, data)
