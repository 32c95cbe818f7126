"""
Exception hierarchy for the header map codec and its tools.

Every failure raised by this package derives from ``HeaderMapError``.
Parse, create and encoding failures each get their own family so callers can
report or handle them separately; the subclasses carry the structured values
(expected/found, bucket index, offending string) needed for a diagnostic.
"""

from typing import Optional


class HeaderMapError(Exception):
    """Base class for all header map errors."""
    pass


# ---- encoding ----


class EncodingError(HeaderMapError):
    """A string could not be represented in the on-disk text encoding."""
    pass


class UnencodableString(EncodingError):
    def __init__(self, string: str):
        self.string = string
        super().__init__(f"String cannot be encoded: {string!r}")


# ---- parse ----


class ParseError(HeaderMapError):
    """A buffer is not a valid header map."""
    pass


class MissingDataHeader(ParseError):
    def __init__(self):
        super().__init__("File is missing a header section")


class UnknownFileMagic(ParseError):
    def __init__(self, found: int):
        self.found = found
        super().__init__(f"File magic is unknown: 0x{found:08X}")


class InvalidVersion(ParseError):
    def __init__(self, expected: int, found: int):
        self.expected = expected
        self.found = found
        super().__init__(f"Found invalid version {found}, expected {expected}")


class ReservedValueMismatch(ParseError):
    def __init__(self, expected: int, found: int):
        self.expected = expected
        self.found = found
        super().__init__(
            f"Found invalid reserved value {found}, expected {expected}")


class BucketCountNotPowerOf2(ParseError):
    def __init__(self, found: int):
        self.found = found
        super().__init__(
            f"Bucket count is not a power of 2, found {found} buckets")


class OutOfBoundsStringSectionOffset(ParseError):
    def __init__(self, offset: int, size: int):
        self.offset = offset
        self.size = size
        super().__init__(
            f"String section offset {offset} is out of bounds "
            f"(buffer is {size} bytes)")


class BucketsSectionOverflow(ParseError):
    def __init__(self, bucket_count: int, size: int):
        self.bucket_count = bucket_count
        self.size = size
        super().__init__(
            f"Bucket section of {bucket_count} buckets overflows "
            f"a {size} byte buffer")


# ---- create ----


class CreateError(HeaderMapError):
    """A header map could not be built from the given entries."""
    pass


class InvalidStringSectionOffset(ParseError, CreateError):
    """A string section offset is unusable.

    Raised while decoding in strict mode when bucket 'bucket' does not
    resolve to three strings, and while building when a pool offset does
    not fit the 32-bit offset field.
    """

    def __init__(self, bucket: Optional[int] = None,
                 offset: Optional[int] = None):
        self.bucket = bucket
        self.offset = offset
        if bucket is not None:
            message = f"The string section offset in bucket {bucket} is invalid"
        elif offset is not None:
            message = f"The string section offset {offset} is invalid"
        else:
            message = "The string section offset is invalid"
        super().__init__(message)


class StringWithoutOffsetInTable(CreateError):
    def __init__(self, string: str):
        self.string = string
        super().__init__(f"String not present in string section: {string!r}")


class HashTableFull(CreateError):
    def __init__(self, bucket_count: int):
        self.bucket_count = bucket_count
        super().__init__(f"Header map is full ({bucket_count} buckets)")


class UnhashableKey(CreateError):
    def __init__(self, key: str):
        self.key = key
        super().__init__(f"Key cannot be hashed: {key!r}")


# ---- interchange ----


class InterchangeError(HeaderMapError):
    """A JSON or YAML header map document is malformed."""
    pass


class InvalidDocument(InterchangeError):
    pass


class InvalidTopLevelObject(InterchangeError):
    def __init__(self):
        super().__init__("The top level object in the document is invalid")


class InvalidEntryObject(InterchangeError):
    def __init__(self, key: str):
        self.key = key
        super().__init__(f"The entry object for {key!r} is invalid")


class MissingPrefix(InterchangeError):
    def __init__(self, key: str):
        self.key = key
        super().__init__(
            f"The entry object for {key!r} does not have a 'prefix' value")


class MissingSuffix(InterchangeError):
    def __init__(self, key: str):
        self.key = key
        super().__init__(
            f"The entry object for {key!r} does not have a 'suffix' value")


# ---- commands ----


class CommandError(HeaderMapError):
    """A print or convert command was invoked with unusable arguments."""
    pass


class SameFormat(CommandError):
    def __init__(self, fmt):
        self.format = fmt
        super().__init__("Must specify different formats for conversion")


class UnknownFormat(CommandError):
    def __init__(self, path: str):
        self.path = path
        super().__init__(
            f"The format of the file at path {path} could not be determined")


class CannotOpenFile(CommandError):
    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Cannot open file at path {path}")
