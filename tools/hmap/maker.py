"""
Header map builder.

Produces v1 header map binaries in native byte order from a list of entries,
the same layout clang's own tooling writes:
  - 24-byte header
  - bucket section sized to keep the load factor at or below 70%
  - string section holding every distinct key, prefix and suffix once
"""

import struct
from dataclasses import dataclass
from typing import Dict, Iterable, List

from .binary import (
    BUCKET_SIZE,
    HEADER_SIZE,
    HMAP_MAGIC,
    HMAP_RESERVED,
    HMAP_VERSION,
)
from .bytebuf import NATIVE, ByteBuilder
from .entry import Entry, sanitize
from .errors import (
    HashTableFull,
    InvalidStringSectionOffset,
    StringWithoutOffsetInTable,
    UnencodableString,
    UnhashableKey,
)
from .hashing import encode_string, header_map_hash, lowercased_key_bytes

MAX_OFFSET = 0xFFFFFFFF

_BUCKET_FMT = NATIVE + "III"
_EMPTY_BUCKET = b"\x00" * BUCKET_SIZE


@dataclass
class StringSection:
    data: bytes
    offsets: Dict[str, int]

    @property
    def string_count(self) -> int:
        return len(self.offsets)


@dataclass
class BucketSection:
    data: bytes
    bucket_count: int


def number_of_buckets(entry_count: int) -> int:
    """Smallest power of two holding ``entry_count`` entries at <= 70% load."""
    # ceil(entry_count / 0.7) without floating point
    minimum_slots = (entry_count * 10 + 6) // 7
    bucket_count = 1
    while bucket_count < minimum_slots:
        bucket_count <<= 1
    return bucket_count


def collect_strings(entries: Iterable[Entry]) -> List[str]:
    """Distinct strings of all entries, in order of first appearance."""
    strings: Dict[str, None] = {}
    for entry in entries:
        strings.setdefault(entry.key)
        strings.setdefault(entry.prefix)
        strings.setdefault(entry.suffix)
    return list(strings)


def make_string_section(strings: Iterable[str]) -> StringSection:
    """Lay out strings as a pool of NUL-terminated UTF-8.

    Byte 0 of a non-empty pool is reserved, so every recorded offset is
    greater than zero.
    """
    buffer = bytearray()
    offsets: Dict[str, int] = {}

    for string in strings:
        if string in offsets:
            continue
        if not buffer:
            buffer.append(0)  # reserved, offset 0 means "no string"

        string_bytes = encode_string(string)
        offset = len(buffer)
        if offset > MAX_OFFSET:
            raise InvalidStringSectionOffset(offset=offset)

        offsets[string] = offset
        buffer.extend(string_bytes)
        buffer.append(0)  # NUL

    return StringSection(data=bytes(buffer), offsets=offsets)


def _is_bucket_empty(buckets: bytearray, index: int) -> bool:
    begin = index * BUCKET_SIZE
    return buckets[begin:begin + BUCKET_SIZE] == _EMPTY_BUCKET


def make_bucket_section(entries: List[Entry],
                        string_section: StringSection) -> BucketSection:
    """Insert entries into an open-addressing table with linear probing.

    Entries are inserted in order; an earlier entry always sits earlier on
    its probe sequence than a later one with the same start bucket.
    """
    if not entries:
        return BucketSection(data=b"", bucket_count=0)

    bucket_count = number_of_buckets(len(entries))
    mask = bucket_count - 1
    buckets = bytearray(bucket_count * BUCKET_SIZE)

    for entry in entries:
        try:
            key_hash = header_map_hash(lowercased_key_bytes(entry.key))
        except UnencodableString as e:
            raise UnhashableKey(entry.key) from e

        offsets = []
        for string in (entry.key, entry.prefix, entry.suffix):
            if string not in string_section.offsets:
                raise StringWithoutOffsetInTable(string)
            offsets.append(string_section.offsets[string])

        for attempt in range(bucket_count):
            index = (key_hash + attempt) & mask
            if _is_bucket_empty(buckets, index):
                struct.pack_into(_BUCKET_FMT, buckets, index * BUCKET_SIZE,
                                 *offsets)
                break
        else:
            raise HashTableFull(bucket_count)

    return BucketSection(data=bytes(buckets), bucket_count=bucket_count)


def value_length(entry: Entry) -> int:
    return len(encode_string(entry.prefix)) + len(encode_string(entry.suffix))


def make_header_map(entries: Iterable[Entry]) -> bytes:
    """Build a header map binary from entries.

    Later entries with an already seen key are dropped. The input is not
    modified.

    Raises:
        EncodingError: If a string cannot be stored as UTF-8.
        CreateError: If the hash table cannot be built.
    """
    safe_entries = sanitize(entries)
    string_section = make_string_section(collect_strings(safe_entries))
    bucket_section = make_bucket_section(safe_entries, string_section)

    max_value_length = max((value_length(e) for e in safe_entries), default=0)
    string_section_offset = HEADER_SIZE + len(bucket_section.data)
    if string_section_offset > MAX_OFFSET:
        raise InvalidStringSectionOffset(offset=string_section_offset)

    builder = ByteBuilder()
    builder.append_u32(HMAP_MAGIC)
    builder.append_u16(HMAP_VERSION)
    builder.append_u16(HMAP_RESERVED)
    builder.append_u32(string_section_offset)
    builder.append_u32(string_section.string_count)
    builder.append_u32(bucket_section.bucket_count)
    builder.append_u32(max_value_length)
    builder.append(bucket_section.data)
    builder.append(string_section.data)
    return builder.getvalue()
