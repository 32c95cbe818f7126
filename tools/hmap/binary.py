"""
Reader for the v1 clang header map binary format.

Layout (byte order given by the magic number):
  - 24-byte header
  - bucket section: bucket_count buckets of three u32 string offsets
    (key, prefix, suffix), all-zero for an empty slot
  - string section: a reserved byte at offset 0, then NUL-terminated UTF-8
    strings addressed by their offset from the start of the section

Reference: clang/include/clang/Lex/HeaderMapTypes.h and
clang/lib/Lex/HeaderMap.cpp.

``BinaryHeaderMap`` validates the header strictly and then reads buckets and
strings lazily from the buffer without copying it.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

from .bytebuf import Buffer, ByteCursor
from .entry import Entry
from .errors import (
    BucketCountNotPowerOf2,
    BucketsSectionOverflow,
    InvalidStringSectionOffset,
    InvalidVersion,
    MissingDataHeader,
    OutOfBoundsStringSectionOffset,
    ReservedValueMismatch,
    UnknownFileMagic,
)
from .hashing import STRING_ENCODING

# 'hmap'
HMAP_MAGIC = 0x686D6170
HMAP_VERSION = 1
HMAP_RESERVED = 0

# On-disk sizes
OFFSET_SIZE = 4
BUCKET_SIZE = 3 * OFFSET_SIZE
HEADER_SIZE = 4 + 2 + 2 + 4 * OFFSET_SIZE

# Raw string offset that marks an absent string / empty bucket.
EMPTY_OFFSET = 0


def is_power_of_2(value: int) -> bool:
    return value != 0 and (value & (value - 1)) == 0


def header_plus_buckets_size(bucket_count: int) -> int:
    return HEADER_SIZE + bucket_count * BUCKET_SIZE


@dataclass(frozen=True)
class StringSectionOffset:
    """A present string offset, relative to the string section start.

    Raw offsets become instances only through ``from_raw``; the reserved
    value 0 comes back as ``None``.
    """
    offset: int

    @staticmethod
    def from_raw(raw: int) -> Optional["StringSectionOffset"]:
        if raw == EMPTY_OFFSET:
            return None
        return StringSectionOffset(raw)


@dataclass(frozen=True)
class Bucket:
    key: StringSectionOffset
    prefix: StringSectionOffset
    suffix: StringSectionOffset


@dataclass(frozen=True)
class DataHeader:
    magic: int
    version: int
    reserved: int
    string_section_offset: int
    string_count: int
    bucket_count: int
    max_value_length: int


@dataclass(frozen=True)
class HeaderParseResult:
    header: DataHeader
    byte_swap: bool


def parse_header(data: Buffer) -> HeaderParseResult:
    """Decode and validate the data header of a header map buffer.

    Args:
        data: The complete header map buffer.

    Returns:
        The validated header and whether the buffer is byte-swapped relative
        to this machine.

    Raises:
        ParseError: One of its subclasses, naming the first check that fails.
    """
    size = len(data)
    if size < HEADER_SIZE:
        raise MissingDataHeader()

    cursor = ByteCursor(data)
    magic = cursor.read_u32_expecting(HMAP_MAGIC)
    if magic != HMAP_MAGIC:
        raise UnknownFileMagic(magic)

    version = cursor.read_u16()
    if version != HMAP_VERSION:
        raise InvalidVersion(expected=HMAP_VERSION, found=version)

    reserved = cursor.read_u16()
    if reserved != HMAP_RESERVED:
        raise ReservedValueMismatch(expected=HMAP_RESERVED, found=reserved)

    string_section_offset = cursor.read_u32()
    string_count = cursor.read_u32()
    bucket_count = cursor.read_u32()
    max_value_length = cursor.read_u32()

    if bucket_count != 0 and not is_power_of_2(bucket_count):
        raise BucketCountNotPowerOf2(found=bucket_count)

    if string_section_offset > size:
        raise OutOfBoundsStringSectionOffset(string_section_offset, size)

    if header_plus_buckets_size(bucket_count) > size:
        raise BucketsSectionOverflow(bucket_count, size)

    header = DataHeader(
        magic=magic,
        version=version,
        reserved=reserved,
        string_section_offset=string_section_offset,
        string_count=string_count,
        bucket_count=bucket_count,
        max_value_length=max_value_length,
    )
    return HeaderParseResult(header=header, byte_swap=cursor.byte_swap)


class BinaryHeaderMap:
    """A validated, read-only view of a header map buffer.

    ``bytes`` buffers are referenced, not copied; other buffer types are
    frozen into ``bytes`` once so the view cannot change underneath it.
    """

    def __init__(self, data: Buffer):
        if not isinstance(data, bytes):
            data = bytes(data)
        result = parse_header(data)
        self._data = data
        self.header = result.header
        self.byte_swap = result.byte_swap

    @classmethod
    def parse(cls, data: Buffer) -> "BinaryHeaderMap":
        return cls(data)

    @property
    def bucket_count(self) -> int:
        return self.header.bucket_count

    def __len__(self) -> int:
        return len(self._data)

    # -- Buckets --

    def _read_bucket_offsets(self, index: int) -> Optional[Tuple[int, int, int]]:
        begin = HEADER_SIZE + index * BUCKET_SIZE
        if index < 0 or begin + BUCKET_SIZE > len(self._data):
            return None
        cursor = ByteCursor(self._data, begin, self.byte_swap)
        return cursor.read_u32(), cursor.read_u32(), cursor.read_u32()

    def get_bucket(self, index: int) -> Optional[Bucket]:
        """Bucket at ``index``, or None if it is out of range or any of its
        offsets is the reserved empty value."""
        raw = self._read_bucket_offsets(index)
        if raw is None:
            return None
        key, prefix, suffix = (StringSectionOffset.from_raw(r) for r in raw)
        if key is None or prefix is None or suffix is None:
            return None
        return Bucket(key=key, prefix=prefix, suffix=suffix)

    def _is_empty_slot(self, index: int) -> bool:
        return self._read_bucket_offsets(index) == (
            EMPTY_OFFSET, EMPTY_OFFSET, EMPTY_OFFSET)

    # -- Strings --

    def get_string(self, offset: StringSectionOffset) -> Optional[str]:
        """Read the NUL-terminated string at ``offset``.

        Returns None when the position falls inside the header or bucket
        section or past the buffer, when no terminator is found, or when the
        bytes are not valid UTF-8.
        """
        begin = self.header.string_section_offset + offset.offset
        if not header_plus_buckets_size(self.bucket_count) <= begin < len(self._data):
            return None
        end = self._data.find(b"\x00", begin)
        if end < 0:
            return None
        try:
            return self._data[begin:end].decode(STRING_ENCODING)
        except UnicodeDecodeError:
            return None

    # -- Entries --

    def make_entry(self, bucket: Bucket) -> Optional[Entry]:
        key = self.get_string(bucket.key)
        prefix = self.get_string(bucket.prefix)
        suffix = self.get_string(bucket.suffix)
        if key is None or prefix is None or suffix is None:
            return None
        return Entry(key=key, prefix=prefix, suffix=suffix)

    def make_indexed_entries(self, strict: bool = False) -> List[Tuple[int, Entry]]:
        """Decode every populated bucket into ``(bucket index, entry)``.

        Buckets whose offsets do not resolve to strings are dropped, so a
        partially corrupt map still yields its readable entries. With
        ``strict`` such a bucket raises ``InvalidStringSectionOffset``
        instead; wholly empty slots are skipped in both modes.
        """
        entries: List[Tuple[int, Entry]] = []
        for index in range(self.bucket_count):
            bucket = self.get_bucket(index)
            entry = self.make_entry(bucket) if bucket is not None else None
            if entry is not None:
                entries.append((index, entry))
            elif strict and not self._is_empty_slot(index):
                raise InvalidStringSectionOffset(bucket=index)
        return entries

    def make_entries(self, strict: bool = False) -> List[Entry]:
        """Decode every populated bucket into an entry, in bucket order."""
        return [entry for _, entry in self.make_indexed_entries(strict=strict)]
