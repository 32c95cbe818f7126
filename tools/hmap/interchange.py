"""
JSON and YAML interchange documents for header maps.

Both formats use the same document shape, a mapping from key to its path
split into prefix and suffix:

    {
      "Foo/Foo.h": {"prefix": "/src/Foo/", "suffix": "Foo.h"}
    }
"""

import json
from typing import Iterable, List, Union

import yaml

from .entry import Entry
from .errors import (
    InvalidDocument,
    InvalidEntryObject,
    InvalidTopLevelObject,
    MissingPrefix,
    MissingSuffix,
)
from .hashing import encode_string

PREFIX_KEY = "prefix"
SUFFIX_KEY = "suffix"


def entries_from_document(document: object) -> List[Entry]:
    """Validate a decoded document and turn it into entries.

    Raises:
        InterchangeError: If the document does not have the expected shape.
        UnencodableString: If a key or path cannot be stored in a header map.
    """
    if not isinstance(document, dict):
        raise InvalidTopLevelObject()

    entries = []
    for key, value in document.items():
        if not isinstance(key, str) or not isinstance(value, dict):
            raise InvalidEntryObject(str(key))
        if value.get(PREFIX_KEY) is None:
            raise MissingPrefix(key)
        if value.get(SUFFIX_KEY) is None:
            raise MissingSuffix(key)
        prefix = value[PREFIX_KEY]
        suffix = value[SUFFIX_KEY]
        if not isinstance(prefix, str) or not isinstance(suffix, str):
            raise InvalidEntryObject(key)
        for s in (key, prefix, suffix):
            encode_string(s)
        entries.append(Entry(key=key, prefix=prefix, suffix=suffix))
    return entries


def document_from_entries(entries: Iterable[Entry]) -> dict:
    return {
        entry.key: {PREFIX_KEY: entry.prefix, SUFFIX_KEY: entry.suffix}
        for entry in entries
    }


# ---- JSON ----


def load_json(text: Union[str, bytes]) -> List[Entry]:
    try:
        document = json.loads(text)
    except ValueError as e:
        raise InvalidDocument(f"Invalid JSON: {e}") from e
    return entries_from_document(document)


def dump_json(entries: Iterable[Entry]) -> str:
    return json.dumps(document_from_entries(entries), indent=2,
                      sort_keys=True, ensure_ascii=False) + "\n"


# ---- YAML ----


def load_yaml(text: Union[str, bytes]) -> List[Entry]:
    try:
        document = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise InvalidDocument(f"Invalid YAML: {e}") from e
    return entries_from_document(document)


def dump_yaml(entries: Iterable[Entry]) -> str:
    return yaml.safe_dump(document_from_entries(entries), sort_keys=True,
                          allow_unicode=True, default_flow_style=False)
