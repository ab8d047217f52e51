# -*- coding: utf-8 -*-
"""Header lookup for the seed CSV."""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Sequence

from ..errors import MissingColumnError


class ColumnResolver:
    """Maps logical column names to header positions, ignoring case."""

    def __init__(self, header: Sequence[str]) -> None:
        self.header: List[str] = [h.strip() for h in header]
        self._index: Dict[str, int] = {}
        for idx, name in enumerate(self.header):
            # First match wins.
            self._index.setdefault(name.lower(), idx)

    def find(self, name: str) -> Optional[int]:
        return self._index.get(name.strip().lower())

    def resolve(self, name: str) -> int:
        idx = self.find(name)
        if idx is None:
            raise MissingColumnError(name, self.header)
        return idx

    def resolve_all(self, names: Iterable[str]) -> Dict[str, int]:
        return {name: self.resolve(name) for name in names}
