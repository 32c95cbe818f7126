"""
hmap: reader and writer for clang header maps (.hmap).

A header map maps an #include spelling to a (prefix, suffix) path pair
through an on-disk open-addressing hash table and string pool. The codec
lives in binary.py (decode) and maker.py (encode); headermap.py adds
clang's case-insensitive lookup and the decode/encode entry points.
"""

from .entry import Entry
from .errors import HeaderMapError
from .headermap import HeaderMap, decode, encode, lookup

__all__ = ["Entry", "HeaderMap", "HeaderMapError", "decode", "encode", "lookup"]
