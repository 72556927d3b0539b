"""Administrator gate for privileged ledger actions.

This module defines the access-control seam of the ledger:
- LedgerAction: Enum of the actions the ledger authorizes
- AuthorityCheck: Protocol every authority implementation satisfies
- SingleAdministrator: The built-in gate, one administrator identity

The ledger only ever asks "is this caller authorized for this action", so a
different policy can be dropped in without touching ledger logic.
"""

from __future__ import annotations

from enum import Enum
from typing import Protocol, runtime_checkable


class LedgerAction(str, Enum):
    """Actions that can be gated by an authority.

    Using str, Enum allows JSON serialization and string comparison.
    """

    MINT = "mint"
    """Issue a new token."""

    BURN = "burn"
    """Revoke any token, regardless of holder."""

    SET_TRANSFERABILITY = "set_transferability"
    """Toggle the global transferability flag."""

    TRANSFER = "transfer"
    """Move any token, regardless of holder or flag."""


@runtime_checkable
class AuthorityCheck(Protocol):
    """Protocol for access-control policies consulted by the ledger."""

    def is_authorized(self, caller: str | None, action: LedgerAction) -> bool:
        """Return True if caller may perform action."""
        ...


class SingleAdministrator:
    """Single-identity gate: the administrator may do everything privileged.

    No multi-owner or role-based control; the administrator is fixed at
    construction.
    """

    _administrator: str

    def __init__(self, administrator: str) -> None:
        if not administrator or not administrator.strip():
            raise ValueError("administrator identity must be non-empty")
        self._administrator = administrator

    @property
    def administrator(self) -> str:
        """The administrator identity."""
        return self._administrator

    def is_administrator(self, caller: str | None) -> bool:
        """Check if caller is the administrator."""
        return caller is not None and caller == self._administrator

    def is_authorized(self, caller: str | None, action: LedgerAction) -> bool:
        """Every gated action is reserved to the administrator."""
        return self.is_administrator(caller)
