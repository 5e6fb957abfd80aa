from __future__ import annotations

from songregistry.database.db_manager import LEDGER_HEIGHT_KEY

from .stores import StateCell


class LedgerClock(StateCell):
    """Ledger height kept by the host.

    Every committed mutating call is one block: the call sees
    ``pending_height()`` while it runs and the height is advanced to that
    value in the same transaction. Failed calls leave the height untouched.
    """

    def __init__(self, session) -> None:
        super().__init__(session, LEDGER_HEIGHT_KEY)

    def pending_height(self) -> int:
        return self.current() + 1


__all__ = ["LedgerClock"]
