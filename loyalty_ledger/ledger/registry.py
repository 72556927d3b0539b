"""Ownership Registry - token identifier to holder mapping

The registry is the only place that records who holds a token. The token
ledger never edits the mapping directly; it calls the primitives below and
relies on them to fail on inconsistent input:

- register_mint fails if the identifier already has a holder
- clear_ownership fails if the identifier has no holder
- transfer fails if the identifier is unknown or `from_holder` is not the holder

Usage:
    registry = OwnershipRegistry()

    registry.register_mint(1, "alice")
    registry.owner_of(1)  # "alice"

    registry.approve("alice", "bob", 1)
    registry.is_approved_or_owner("bob", 1)  # True

    registry.clear_ownership(1)
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from .errors import DuplicateIdentifier, Unauthorized, UnknownIdentifier


@runtime_checkable
class OwnershipQuery(Protocol):
    """Capability query the ledger uses to authorize holders and delegates."""

    def is_approved_or_owner(self, caller: str, token_id: int) -> bool:
        """True if caller holds token_id or was delegated to by its holder."""
        ...


@runtime_checkable
class OwnershipBackend(OwnershipQuery, Protocol):
    """Everything the token ledger needs from a holder registry.

    Mutation primitives must raise the ledger errors named in their
    docstrings on inconsistent input and leave the mapping unchanged.
    """

    def register_mint(self, token_id: int, recipient: str) -> None: ...

    def clear_ownership(self, token_id: int) -> str: ...

    def transfer(self, token_id: int, from_holder: str, to_holder: str) -> None: ...

    def approve(self, caller: str, approved: str | None, token_id: int) -> None: ...

    def set_approval_for_all(self, holder: str, operator: str, approved: bool) -> None: ...

    def exists(self, token_id: int) -> bool: ...

    def owner_of(self, token_id: int) -> str | None: ...

    def balance_of(self, holder: str) -> int: ...


class OwnershipRegistry:
    """In-memory holder registry with per-token and operator approvals.

    Thread-safety: This class is NOT thread-safe. The token ledger serializes
    every call it makes under its own lock.
    """

    _owners: dict[int, str]
    _token_approvals: dict[int, str]
    _operators: dict[str, set[str]]

    def __init__(self) -> None:
        """Initialize empty registry."""
        self._owners = {}
        self._token_approvals = {}
        self._operators = {}

    # ===== MUTATION PRIMITIVES =====

    def register_mint(self, token_id: int, recipient: str) -> None:
        """Record a new token as held by recipient.

        Raises:
            DuplicateIdentifier: If token_id already has a holder
        """
        if token_id in self._owners:
            raise DuplicateIdentifier(token_id, self._owners[token_id])
        self._owners[token_id] = recipient

    def clear_ownership(self, token_id: int) -> str:
        """Remove the holder record for token_id.

        Returns:
            The holder the token was removed from

        Raises:
            UnknownIdentifier: If token_id has no holder
        """
        if token_id not in self._owners:
            raise UnknownIdentifier(token_id)
        self._token_approvals.pop(token_id, None)
        return self._owners.pop(token_id)

    def transfer(self, token_id: int, from_holder: str, to_holder: str) -> None:
        """Move token_id from from_holder to to_holder.

        Clears any per-token approval.

        Raises:
            UnknownIdentifier: If token_id has no holder
            Unauthorized: If from_holder is not the current holder
        """
        holder = self._owners.get(token_id)
        if holder is None:
            raise UnknownIdentifier(token_id)
        if holder != from_holder:
            raise Unauthorized(
                from_holder,
                f"transfer token {token_id}",
                holder=holder,
            )
        self._token_approvals.pop(token_id, None)
        self._owners[token_id] = to_holder

    # ===== DELEGATION =====

    def approve(self, caller: str, approved: str | None, token_id: int) -> None:
        """Delegate a single token to `approved` (None revokes).

        Only the holder or one of the holder's operators may approve.
        """
        holder = self._owners.get(token_id)
        if holder is None:
            raise UnknownIdentifier(token_id)
        if caller != holder and not self.is_approved_for_all(holder, caller):
            raise Unauthorized(caller, f"approve token {token_id}", holder=holder)
        if approved:
            self._token_approvals[token_id] = approved
        else:
            self._token_approvals.pop(token_id, None)

    def set_approval_for_all(self, holder: str, operator: str, approved: bool) -> None:
        """Grant or revoke operator rights over every token of holder."""
        if approved:
            self._operators.setdefault(holder, set()).add(operator)
            return
        operators = self._operators.get(holder)
        if operators is not None:
            operators.discard(operator)
            if not operators:
                del self._operators[holder]

    # ===== QUERIES =====

    def exists(self, token_id: int) -> bool:
        """Check if token_id currently has a holder."""
        return token_id in self._owners

    def owner_of(self, token_id: int) -> str | None:
        """Look up the holder of token_id, None if it has none."""
        return self._owners.get(token_id)

    def balance_of(self, holder: str) -> int:
        """Count the tokens held by holder."""
        return sum(1 for owner in self._owners.values() if owner == holder)

    def tokens_of(self, holder: str) -> list[int]:
        """List the token identifiers held by holder, ascending."""
        return sorted(tid for tid, owner in self._owners.items() if owner == holder)

    def get_approved(self, token_id: int) -> str | None:
        """Get the per-token delegate for token_id, if any."""
        return self._token_approvals.get(token_id)

    def is_approved_for_all(self, holder: str, operator: str) -> bool:
        """Check if operator may act on all of holder's tokens."""
        return operator in self._operators.get(holder, set())

    def is_approved_or_owner(self, caller: str, token_id: int) -> bool:
        """True if caller is the holder, the token delegate, or an operator."""
        holder = self._owners.get(token_id)
        if holder is None:
            return False
        return (
            caller == holder
            or self._token_approvals.get(token_id) == caller
            or self.is_approved_for_all(holder, caller)
        )

    def count(self) -> int:
        """Get total number of held tokens."""
        return len(self._owners)
