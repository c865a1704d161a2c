"""In-process memo of the parsed config document."""

from __future__ import annotations

import copy
import dataclasses
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Callable

Fingerprint = tuple[int, int] | None


@dataclasses.dataclass
class CacheEntry:
    document: dict[str, Any]
    fingerprint: Fingerprint = None


class ConfigCache:
    """Memoizes the last loaded document until it is invalidated.

    An entry is reused only while the caller-supplied fingerprint matches the
    one recorded at load time, so an external edit that changes the file's
    mtime or size forces a reload. With ``disabled=True`` every call goes to
    the loader and nothing is stored.
    """

    def __init__(self, disabled: bool = False) -> None:
        self.disabled = disabled
        self._entry: CacheEntry | None = None

    @property
    def entry(self) -> CacheEntry | None:
        return self._entry

    def get_or_load(
        self,
        loader: Callable[[], dict[str, Any]],
        fingerprint: Fingerprint = None,
    ) -> dict[str, Any]:
        if self.disabled:
            return loader()

        entry = self._entry
        if entry is None or entry.fingerprint != fingerprint:
            entry = CacheEntry(document=loader(), fingerprint=fingerprint)
            self._entry = entry
        # Callers get a private copy; the memo stays pristine.
        return copy.deepcopy(entry.document)

    def invalidate(self) -> None:
        self._entry = None
