"""
Case-insensitive lookup over header map entries, plus the decode/encode
entry points used by the interchange formats and commands.
"""

from typing import Dict, Iterable, Iterator, List, Optional

from .binary import BinaryHeaderMap
from .bytebuf import Buffer
from .entry import Entry, sanitize
from .errors import EncodingError
from .hashing import header_map_hash, lowercased_key_bytes
from .maker import make_header_map


class HeaderMap:
    """Entries indexed by their ASCII-lowercased key bytes.

    Matching follows clang: ASCII letters compare case-insensitively, every
    other byte (including all of multi-byte UTF-8) must match exactly, so
    "Ä" does not find "ä" and precomposed and decomposed forms of a
    character are different keys.
    """

    def __init__(self, entries: Iterable[Entry],
                 binary: Optional[BinaryHeaderMap] = None):
        self.binary = binary
        self._index: Dict[bytes, Entry] = {}
        for entry in sanitize(entries):
            # Keys differing only in ASCII case share a slot; keep the first.
            self._index.setdefault(lowercased_key_bytes(entry.key), entry)

    @classmethod
    def from_bytes(cls, data: Buffer, strict: bool = False) -> "HeaderMap":
        """Index a header map binary.

        Entries are taken in the order a probing reader reaches them from
        their key's home bucket, so among keys that differ only in ASCII
        case the index keeps the one clang would find.
        """
        binary = BinaryHeaderMap.parse(data)
        mask = binary.bucket_count - 1

        def probe_distance(item):
            index, entry = item
            return (index - header_map_hash(lowercased_key_bytes(entry.key))) & mask

        indexed = sorted(binary.make_indexed_entries(strict=strict),
                         key=probe_distance)
        return cls([entry for _, entry in indexed], binary=binary)

    def lookup(self, key: str) -> Optional[Entry]:
        try:
            return self._index.get(lowercased_key_bytes(key))
        except EncodingError:
            return None

    def __getitem__(self, key: str) -> Entry:
        entry = self.lookup(key)
        if entry is None:
            raise KeyError(key)
        return entry

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.lookup(key) is not None

    def __len__(self) -> int:
        return len(self._index)

    def __iter__(self) -> Iterator[Entry]:
        return iter(self._index.values())

    def entries(self) -> List[Entry]:
        return list(self._index.values())

    def to_bytes(self) -> bytes:
        return make_header_map(self.entries())


def decode(data: Buffer, strict: bool = False) -> List[Entry]:
    """Decode a header map binary into its entries.

    Raises:
        ParseError: If the header is invalid, or in ``strict`` mode if any
            bucket does not resolve to strings.
    """
    return BinaryHeaderMap.parse(data).make_entries(strict=strict)


def encode(entries: Iterable[Entry]) -> bytes:
    """Encode entries into a header map binary (duplicate keys: first wins)."""
    return make_header_map(entries)


def lookup(header_map: HeaderMap, key: str) -> Optional[Entry]:
    return header_map.lookup(key)
