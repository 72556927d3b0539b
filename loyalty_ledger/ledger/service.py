"""Ledger Service - named-method surface over the token ledger

Callers invoke methods by name with a positional argument list and their own
identity, and always get a dict back:

    service.invoke("mint", ["alice"], "admin")
    # {"success": True, "token_id": 1}

    service.invoke("burn", [1], "mallory")
    # {"success": False, "code": "not_authorized", "category": "permission", ...}

Ledger exceptions become standardized error dicts; nothing is retried.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable

from .errors import (
    DuplicateIdentifier,
    ErrorCode,
    LedgerError,
    validation_error,
)
from .token_ledger import TokenLedger

MethodHandler = Callable[[list[Any], str], dict[str, Any]]


@dataclass
class ServiceMethod:
    """A method exposed by the ledger service"""
    name: str
    handler: MethodHandler
    required: list[str]
    description: str


class _ArgumentError(Exception):
    def __init__(self, message: str, field: str) -> None:
        self.field = field
        super().__init__(message)


def _require_int(value: Any, field: str) -> int:
    # bool is an int subclass but never a valid identifier
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise _ArgumentError(
            f"{field} must be a non-negative integer, got {type(value).__name__}: {value!r}",
            field,
        )
    return value


def _require_bool(value: Any, field: str) -> bool:
    if not isinstance(value, bool):
        raise _ArgumentError(
            f"{field} must be a boolean, got {type(value).__name__}: {value!r}",
            field,
        )
    return value


class LedgerService:
    """Dispatches named method calls to a TokenLedger."""

    ledger: TokenLedger
    methods: dict[str, ServiceMethod]

    def __init__(self, ledger: TokenLedger) -> None:
        self.ledger = ledger
        self.methods = {}

        self.register_method("mint", self._mint, ["recipient"],
                             "Issue the next token to recipient (administrator only)")
        self.register_method("burn", self._burn, ["token_id"],
                             "Permanently revoke a token (holder, delegate, or administrator)")
        self.register_method("transfer", self._transfer, ["token_id", "from", "to"],
                             "Move a live token while transfers are enabled")
        self.register_method("approve", self._approve, ["approved", "token_id"],
                             "Delegate a single token (null revokes)")
        self.register_method("set_approval_for_all", self._set_approval_for_all,
                             ["operator", "approved"],
                             "Grant or revoke operator rights over all your tokens")
        self.register_method("set_transferability", self._set_transferability, ["enabled"],
                             "Enable or disable transfers (administrator only)")
        self.register_method("is_burnt", self._is_burnt, ["token_id"],
                             "Check whether a token is burnt")
        self.register_method("get_transferability", self._get_transferability, [],
                             "Check whether transfers are enabled")
        self.register_method("owner_of", self._owner_of, ["token_id"],
                             "Get the holder of a live token")
        self.register_method("balance_of", self._balance_of, ["holder"],
                             "Count the live tokens of a holder")
        self.register_method("token_info", self._token_info, [],
                             "Token name, symbol, and ledger counters")

    def register_method(
        self,
        name: str,
        handler: MethodHandler,
        required: list[str],
        description: str = "",
    ) -> None:
        """Register a callable method on this service"""
        self.methods[name] = ServiceMethod(
            name=name,
            handler=handler,
            required=required,
            description=description,
        )

    def list_methods(self) -> list[dict[str, Any]]:
        """List available methods"""
        return [
            {"name": m.name, "args": list(m.required), "description": m.description}
            for m in self.methods.values()
        ]

    def invoke(self, method_name: str, args: list[Any] | None, caller: str) -> dict[str, Any]:
        """Invoke a method by name on behalf of caller.

        Returns:
            {"success": True, ...} on success, a standardized error dict otherwise
        """
        method = self.methods.get(method_name)
        if method is None:
            return validation_error(
                f"Unknown method '{method_name}'. Available: {sorted(self.methods)}",
                code=ErrorCode.UNKNOWN_METHOD,
                method=method_name,
            )
        args = list(args or [])
        if len(args) < len(method.required):
            return validation_error(
                f"{method_name} requires {method.required} "
                f"({len(method.required)} args, got {len(args)})",
                code=ErrorCode.MISSING_ARGUMENT,
                required=method.required,
            )
        try:
            return method.handler(args, caller)
        except _ArgumentError as e:
            return validation_error(str(e), code=ErrorCode.INVALID_ARGUMENT, field=e.field)
        except DuplicateIdentifier:
            # Invariant breach: surface to the host rather than answer normally
            raise
        except LedgerError as e:
            return e.to_response()

    # ===== HANDLERS =====

    def _mint(self, args: list[Any], caller: str) -> dict[str, Any]:
        token_id = self.ledger.mint(caller, args[0])
        return {"success": True, "token_id": token_id, "recipient": args[0]}

    def _burn(self, args: list[Any], caller: str) -> dict[str, Any]:
        token_id = _require_int(args[0], "token_id")
        self.ledger.burn(caller, token_id)
        return {"success": True, "token_id": token_id}

    def _transfer(self, args: list[Any], caller: str) -> dict[str, Any]:
        token_id = _require_int(args[0], "token_id")
        self.ledger.transfer(caller, token_id, args[1], args[2])
        return {"success": True, "token_id": token_id, "from": args[1], "to": args[2]}

    def _approve(self, args: list[Any], caller: str) -> dict[str, Any]:
        token_id = _require_int(args[1], "token_id")
        self.ledger.approve(caller, args[0], token_id)
        return {"success": True, "token_id": token_id, "approved": args[0]}

    def _set_approval_for_all(self, args: list[Any], caller: str) -> dict[str, Any]:
        approved = _require_bool(args[1], "approved")
        self.ledger.set_approval_for_all(caller, args[0], approved)
        return {"success": True, "operator": args[0], "approved": approved}

    def _set_transferability(self, args: list[Any], caller: str) -> dict[str, Any]:
        enabled = _require_bool(args[0], "enabled")
        self.ledger.set_transferability(caller, enabled)
        return {"success": True, "transferable": enabled}

    def _is_burnt(self, args: list[Any], caller: str) -> dict[str, Any]:
        token_id = _require_int(args[0], "token_id")
        return {"success": True, "token_id": token_id, "burnt": self.ledger.is_burnt(token_id)}

    def _get_transferability(self, args: list[Any], caller: str) -> dict[str, Any]:
        return {"success": True, "transferable": self.ledger.get_transferability()}

    def _owner_of(self, args: list[Any], caller: str) -> dict[str, Any]:
        token_id = _require_int(args[0], "token_id")
        return {"success": True, "token_id": token_id, "owner": self.ledger.owner_of(token_id)}

    def _balance_of(self, args: list[Any], caller: str) -> dict[str, Any]:
        return {"success": True, "holder": args[0], "balance": self.ledger.balance_of(args[0])}

    def _token_info(self, args: list[Any], caller: str) -> dict[str, Any]:
        return {"success": True, **self.ledger.token_info()}
