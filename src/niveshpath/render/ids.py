"""Identifier minting for interactive fragments.

Hidden design decisions:
- Ids are ``<prefix>-<8 hex chars>`` drawn from uuid4
- Uniqueness is guaranteed per minter by re-drawing on collision
- A sequential minter gives reproducible ids for tests and snapshots
"""

import itertools
from uuid import uuid4

TABLE_PREFIX = "table"
CODE_PREFIX = "code"


class IdMinter:
    """Mints process-unique ids for tables and code blocks."""

    def __init__(self) -> None:
        self._issued: set[str] = set()

    def _draw(self, prefix: str) -> str:
        return f"{prefix}-{uuid4().hex[:8]}"

    def mint(self, prefix: str) -> str:
        """Mint a new id with the given prefix.

        Args:
            prefix: Id prefix, e.g. "table" or "code"

        Returns:
            An id never returned before by this minter
        """
        candidate = self._draw(prefix)
        while candidate in self._issued:
            candidate = self._draw(prefix)
        self._issued.add(candidate)
        return candidate

    def table_id(self) -> str:
        return self.mint(TABLE_PREFIX)

    def code_id(self) -> str:
        return self.mint(CODE_PREFIX)


class SequentialIdMinter(IdMinter):
    """Deterministic minter: table-00000001, code-00000002, ..."""

    def __init__(self, start: int = 1) -> None:
        super().__init__()
        self._counter = itertools.count(start)

    def _draw(self, prefix: str) -> str:
        return f"{prefix}-{next(self._counter):08x}"
