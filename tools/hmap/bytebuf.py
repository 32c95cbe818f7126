"""
Fixed-width integer reader and writer for header map buffers.

Header maps are written in the byte order of the machine that produced them,
and say which one it was through the magic number. ``ByteCursor`` reads in
native order until told otherwise by ``read_u32_expecting``; ``ByteBuilder``
always writes native order.
"""

import struct
import sys
from typing import Union

Buffer = Union[bytes, bytearray, memoryview]

# struct prefixes: standard sizes, no padding
NATIVE = "<" if sys.byteorder == "little" else ">"
SWAPPED = ">" if NATIVE == "<" else "<"


def byte_swap_u16(value: int) -> int:
    return ((value & 0xFF) << 8) | ((value >> 8) & 0xFF)


def byte_swap_u32(value: int) -> int:
    return int.from_bytes(value.to_bytes(4, "little"), "big")


class ByteCursor:
    """Sequential reader over a fixed buffer.

    Every read checks the remaining length first and raises ``IndexError``
    instead of reading past the end.
    """

    def __init__(self, data: Buffer, offset: int = 0, byte_swap: bool = False):
        self.data = data
        self.offset = offset
        self.byte_swap = byte_swap

    @property
    def remaining(self) -> int:
        return len(self.data) - self.offset

    def _read(self, code: str, size: int) -> int:
        if size > self.remaining:
            raise IndexError(
                f"read of {size} bytes at offset {self.offset} "
                f"overruns {len(self.data)} byte buffer")
        order = SWAPPED if self.byte_swap else NATIVE
        (value,) = struct.unpack_from(order + code, self.data, self.offset)
        self.offset += size
        return value

    def read_u16(self) -> int:
        return self._read("H", 2)

    def read_u32(self) -> int:
        return self._read("I", 4)

    def read_u32_expecting(self, expected: int) -> int:
        """Read a u32 and use it to detect the buffer's byte order.

        Returns ``expected`` if the value matches it in native or swapped form
        (latching swap mode in the latter case), otherwise the raw native
        value so the caller can report it.
        """
        self.byte_swap = False
        value = self.read_u32()
        if value == expected:
            return expected
        if value == byte_swap_u32(expected):
            self.byte_swap = True
            return expected
        return value


class ByteBuilder:
    """Append-only byte sink writing native-order integers."""

    def __init__(self):
        self._buffer = bytearray()

    def __len__(self) -> int:
        return len(self._buffer)

    def append_u16(self, value: int) -> "ByteBuilder":
        self._buffer.extend(struct.pack(NATIVE + "H", value))
        return self

    def append_u32(self, value: int) -> "ByteBuilder":
        self._buffer.extend(struct.pack(NATIVE + "I", value))
        return self

    def append(self, data: Buffer) -> "ByteBuilder":
        self._buffer.extend(data)
        return self

    def getvalue(self) -> bytes:
        return bytes(self._buffer)
