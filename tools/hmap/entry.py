"""
Header map entry: a lookup key and the (prefix, suffix) path it maps to.
"""

from dataclasses import dataclass
from typing import Iterable, List, Set


@dataclass(frozen=True)
class Entry:
    key: str
    prefix: str
    suffix: str

    @property
    def path(self) -> str:
        """The full path clang resolves the key to."""
        return self.prefix + self.suffix


def sanitize(entries: Iterable[Entry]) -> List[Entry]:
    """Drop entries whose key was already seen; the first occurrence wins."""
    seen: Set[str] = set()
    result: List[Entry] = []
    for entry in entries:
        if entry.key in seen:
            continue
        seen.add(entry.key)
        result.append(entry)
    return result
