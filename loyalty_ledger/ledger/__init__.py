# Token ledger package
from .token_ledger import TokenLedger, TokenState, NULL_ADDRESS, RESERVED_TOKEN_ID
from .registry import OwnershipRegistry, OwnershipQuery, OwnershipBackend
from .authority import AuthorityCheck, LedgerAction, SingleAdministrator
from .logger import EventLogger
from .service import LedgerService
from .errors import (
    LedgerError, Unauthorized, InvalidRecipient, AlreadyBurnt,
    DuplicateIdentifier, NotTransferable, UnknownIdentifier,
    ErrorCategory, ErrorCode, ErrorResponse,
)

__all__ = [
    "TokenLedger", "TokenState", "NULL_ADDRESS", "RESERVED_TOKEN_ID",
    "OwnershipRegistry", "OwnershipQuery", "OwnershipBackend",
    "AuthorityCheck", "LedgerAction", "SingleAdministrator",
    "EventLogger",
    "LedgerService",
    # Error taxonomy
    "LedgerError", "Unauthorized", "InvalidRecipient", "AlreadyBurnt",
    "DuplicateIdentifier", "NotTransferable", "UnknownIdentifier",
    "ErrorCategory", "ErrorCode", "ErrorResponse",
]
