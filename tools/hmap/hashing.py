"""
Case folding, string encoding and the header map key hash.

These are pure functions over bytes. Case folding is the fixed ASCII table
clang uses for header map keys, never a locale-aware lowercase, so that the
bucket a writer picks is the bucket any compatible reader probes first.
"""

from .errors import UnencodableString

STRING_ENCODING = "utf-8"

# 'A'..'Z' -> 'a'..'z'; every other byte, including UTF-8 lead and
# continuation bytes, maps to itself.
_ASCII_LOWER = bytes(
    b + 32 if 65 <= b <= 90 else b for b in range(256)
)


def encode_string(s: str) -> bytes:
    """Encode a key, prefix or suffix as it is stored in the string pool.

    Raises:
        UnencodableString: If ``s`` is not valid UTF-8 text (e.g. it holds a
            lone surrogate) or contains a NUL, which would end the string
            early on disk.
    """
    try:
        data = s.encode(STRING_ENCODING)
    except UnicodeEncodeError as e:
        raise UnencodableString(s) from e
    if b"\x00" in data:
        raise UnencodableString(s)
    return data


def ascii_lowercase(data: bytes) -> bytes:
    """Lowercase ASCII letters in ``data``, leaving all other bytes alone."""
    return data.translate(_ASCII_LOWER)


def lowercased_key_bytes(key: str) -> bytes:
    """The case-folded byte form a key is indexed and hashed under."""
    return ascii_lowercase(encode_string(key))


def header_map_hash(data: bytes) -> int:
    """Header map bucket hash of already case-folded key bytes.

    Sum of ``byte * 13`` with 32-bit wraparound. Must stay bit-for-bit
    identical to clang's ``llvm::HashHMapKey``.
    """
    h = 0
    for b in data:
        h = (h + b * 13) & 0xFFFFFFFF
    return h
