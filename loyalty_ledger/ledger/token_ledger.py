"""Token ledger for non-transferable loyalty points

Issues numbered tokens to user identities, burns them, and gates transfers
behind a global switch.

State owned here:
1. Identifier counter - next identifier to issue, starts at 1, only grows
2. Burnt-set - identifiers permanently revoked; 0 is burnt from the start
3. Transferability flag - False until the administrator enables it

Holder records live in the OwnershipRegistry; privileged actions are checked
against an AuthorityCheck. The ledger composes both and never reaches into
either one's internals.
"""

# All token lifecycle changes go through here.
# Burnt identifiers are never reissued - minting always draws the counter.
from __future__ import annotations

import logging
import threading
from enum import Enum
from typing import TYPE_CHECKING

from .authority import AuthorityCheck, LedgerAction, SingleAdministrator
from .errors import (
    AlreadyBurnt,
    DuplicateIdentifier,
    InvalidRecipient,
    NotTransferable,
    Unauthorized,
    UnknownIdentifier,
)
from .logger import EventLogger
from .registry import OwnershipBackend, OwnershipRegistry

if TYPE_CHECKING:
    from ..config_schema import AppConfig

logger = logging.getLogger(__name__)

# Identifier 0 is reserved and never mintable
RESERVED_TOKEN_ID = 0
FIRST_TOKEN_ID = 1
NULL_ADDRESS = "0x0000000000000000000000000000000000000000"


class TokenState(str, Enum):
    """Lifecycle state of a single token identifier."""

    UNMINTED = "unminted"
    LIVE = "live"
    BURNT = "burnt"


def _is_valid_identity(identity: object) -> bool:
    if not isinstance(identity, str):
        return False
    stripped = identity.strip()
    return bool(stripped) and stripped != NULL_ADDRESS


class TokenLedger:
    """
    Tracks the lifecycle of loyalty tokens.

    - mint: administrator issues the next identifier to a recipient
    - burn: holder, delegate, or administrator revokes a token forever
    - transfer: moves a live token, only while transfers are enabled
      (the administrator is exempt from the flag)

    Every mutating operation runs under one re-entrant lock covering the
    counter, the burnt-set, the flag, and the registry call it makes. A failed
    operation leaves no trace: no state change and no notification.
    """

    name: str
    symbol: str
    registry: OwnershipBackend
    authority: AuthorityCheck
    events: EventLogger
    _next_token_id: int
    _burnt: dict[int, bool]
    _transferable: bool
    _lock: threading.RLock

    def __init__(
        self,
        authority: AuthorityCheck,
        registry: OwnershipBackend | None = None,
        events: EventLogger | None = None,
        name: str = "Loyalty Point",
        symbol: str = "LOYAL",
    ) -> None:
        self.name = name
        self.symbol = symbol
        self.authority = authority
        self.registry = registry if registry is not None else OwnershipRegistry()
        self.events = events if events is not None else EventLogger()
        self._next_token_id = FIRST_TOKEN_ID
        self._burnt = {RESERVED_TOKEN_ID: True}
        self._transferable = False
        self._lock = threading.RLock()

    @classmethod
    def from_config(cls, config: "AppConfig | None" = None) -> "TokenLedger":
        """Create a TokenLedger from validated config.

        Args:
            config: Validated AppConfig; the global config is used if omitted

        Returns:
            Ledger with a SingleAdministrator gate and a fresh registry
        """
        if config is None:
            from ..config import get_validated_config
            config = get_validated_config()

        return cls(
            authority=SingleAdministrator(config.administrator),
            events=EventLogger(
                output_file=config.logging.output_file,
                buffer_size=config.logging.buffer_size,
            ),
            name=config.token.name,
            symbol=config.token.symbol,
        )

    # ===== COMMANDS =====

    def mint(self, caller: str, recipient: str) -> int:
        """Issue the next token identifier to recipient.

        Raises:
            Unauthorized: caller is not the administrator
            InvalidRecipient: recipient is null or empty
            DuplicateIdentifier: registry already holds the identifier (fatal)
        """
        with self._lock:
            if not self.authority.is_authorized(caller, LedgerAction.MINT):
                logger.warning("Rejected mint by non-administrator '%s'", caller)
                raise Unauthorized(caller, "mint")
            if not _is_valid_identity(recipient):
                raise InvalidRecipient(recipient)

            token_id = self._next_token_id
            try:
                self.registry.register_mint(token_id, recipient)
            except DuplicateIdentifier:
                logger.error(
                    "Counter/registry mismatch: token %d already registered", token_id
                )
                raise
            self._next_token_id = token_id + 1

            logger.info("Minted token %d to '%s'", token_id, recipient)
            self.events.log_minted(recipient, token_id)
            return token_id

    def burn(self, caller: str, token_id: int) -> None:
        """Permanently revoke token_id.

        Raises:
            AlreadyBurnt: token_id was burnt before (always true for 0)
            UnknownIdentifier: token_id was never minted
            Unauthorized: caller is not holder, delegate, or administrator
        """
        with self._lock:
            if self._burnt.get(token_id, False):
                raise AlreadyBurnt(token_id)
            if not self.registry.exists(token_id):
                raise UnknownIdentifier(token_id)
            if not (
                self.registry.is_approved_or_owner(caller, token_id)
                or self.authority.is_authorized(caller, LedgerAction.BURN)
            ):
                logger.warning("Rejected burn of token %d by '%s'", token_id, caller)
                raise Unauthorized(caller, f"burn token {token_id}")

            self._burnt[token_id] = True
            try:
                holder = self.registry.clear_ownership(token_id)
            except Exception:
                del self._burnt[token_id]
                raise

            logger.info("Burned token %d held by '%s' (caller '%s')", token_id, holder, caller)
            self.events.log_burned(caller, token_id)

    def set_transferability(self, caller: str, enabled: bool) -> None:
        """Overwrite the global transferability flag.

        Raises:
            Unauthorized: caller is not the administrator
        """
        with self._lock:
            if not self.authority.is_authorized(caller, LedgerAction.SET_TRANSFERABILITY):
                logger.warning("Rejected set_transferability by '%s'", caller)
                raise Unauthorized(caller, "set transferability")
            self._transferable = bool(enabled)
            logger.info("Transferability set to %s", self._transferable)
            self.events.log_transferability_changed(caller, self._transferable)

    def transfer(
        self,
        caller: str,
        token_id: int,
        from_holder: str,
        to_holder: str,
    ) -> None:
        """Move a live token between holders.

        The flag check applies regardless of the caller's rights over the
        token; only the administrator bypasses it.

        Raises:
            AlreadyBurnt: token_id is burnt
            UnknownIdentifier: token_id was never minted
            InvalidRecipient: to_holder is null or empty
            NotTransferable: transfers are disabled
            Unauthorized: caller may not move the token, or from_holder
                is not its holder
        """
        with self._lock:
            if self._burnt.get(token_id, False):
                raise AlreadyBurnt(token_id)
            if not self.registry.exists(token_id):
                raise UnknownIdentifier(token_id)
            if not _is_valid_identity(to_holder):
                raise InvalidRecipient(to_holder)

            is_admin = self.authority.is_authorized(caller, LedgerAction.TRANSFER)
            if not self._transferable and not is_admin:
                raise NotTransferable(token_id)
            if not (is_admin or self.registry.is_approved_or_owner(caller, token_id)):
                logger.warning("Rejected transfer of token %d by '%s'", token_id, caller)
                raise Unauthorized(caller, f"transfer token {token_id}")

            self.registry.transfer(token_id, from_holder, to_holder)

            logger.info("Transferred token %d from '%s' to '%s'", token_id, from_holder, to_holder)
            self.events.log_transferred(caller, from_holder, to_holder, token_id)

    # ===== DELEGATION (passthrough to registry) =====

    def approve(self, caller: str, approved: str | None, token_id: int) -> None:
        """Delegate token_id to approved (None revokes)."""
        with self._lock:
            if self._burnt.get(token_id, False):
                raise AlreadyBurnt(token_id)
            if approved is not None and not _is_valid_identity(approved):
                raise InvalidRecipient(approved)
            self.registry.approve(caller, approved, token_id)

    def set_approval_for_all(self, caller: str, operator: str, approved: bool) -> None:
        """Grant or revoke operator rights over all of caller's tokens."""
        if not _is_valid_identity(operator) or operator == caller:
            raise InvalidRecipient(operator)
        with self._lock:
            self.registry.set_approval_for_all(caller, operator, approved)

    # ===== QUERIES =====

    def is_burnt(self, token_id: int) -> bool:
        """Check burnt-set membership (identifier 0 is always burnt)."""
        return self._burnt.get(token_id, False)

    def get_transferability(self) -> bool:
        """Current value of the transferability flag."""
        return self._transferable

    def owner_of(self, token_id: int) -> str:
        """Get the holder of a live token.

        Raises:
            AlreadyBurnt: token_id is burnt
            UnknownIdentifier: token_id was never minted
        """
        if self.is_burnt(token_id):
            raise AlreadyBurnt(token_id)
        holder = self.registry.owner_of(token_id)
        if holder is None:
            raise UnknownIdentifier(token_id)
        return holder

    def balance_of(self, holder: str) -> int:
        """Count the live tokens held by holder."""
        if not _is_valid_identity(holder):
            raise InvalidRecipient(holder)
        return self.registry.balance_of(holder)

    def token_state(self, token_id: int) -> TokenState:
        """Lifecycle state of token_id."""
        with self._lock:
            if self.is_burnt(token_id):
                return TokenState.BURNT
            if self.registry.exists(token_id):
                return TokenState.LIVE
            return TokenState.UNMINTED

    @property
    def next_token_id(self) -> int:
        """Identifier the next successful mint will return."""
        return self._next_token_id

    @property
    def total_minted(self) -> int:
        """Number of successful mints so far."""
        return self._next_token_id - FIRST_TOKEN_ID

    @property
    def total_burnt(self) -> int:
        """Number of burnt minted tokens (the reserved identifier excluded)."""
        return sum(1 for tid in self._burnt if tid != RESERVED_TOKEN_ID)

    def token_info(self) -> dict[str, object]:
        """Summary of token metadata and ledger counters."""
        with self._lock:
            return {
                "name": self.name,
                "symbol": self.symbol,
                "next_token_id": self._next_token_id,
                "total_minted": self.total_minted,
                "total_burnt": self.total_burnt,
                "transferable": self._transferable,
            }
