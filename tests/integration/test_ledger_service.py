"""Integration tests for the named-method LedgerService surface."""

import pytest

from loyalty_ledger.ledger import (
    DuplicateIdentifier,
    LedgerService,
    OwnershipRegistry,
    SingleAdministrator,
    TokenLedger,
)

ADMIN = "admin"


class TestScenarios:
    """End-to-end lifecycle through the service."""

    def test_mint_burn_lifecycle(self, service: LedgerService) -> None:
        minted = service.invoke("mint", ["user_a"], ADMIN)
        assert minted == {"success": True, "token_id": 1, "recipient": "user_a"}

        assert service.invoke("is_burnt", [1], "anyone")["burnt"] is False
        assert service.invoke("get_transferability", [], "anyone")["transferable"] is False

        assert service.invoke("burn", [1], "user_a")["success"] is True
        assert service.invoke("is_burnt", [1], "anyone")["burnt"] is True

        again = service.invoke("burn", [1], "user_a")
        assert again["success"] is False
        assert again["code"] == "already_burnt"

    def test_transferability_toggle(self, service: LedgerService) -> None:
        service.invoke("mint", ["user_a"], ADMIN)

        denied = service.invoke("set_transferability", [True], "user_a")
        assert denied["success"] is False
        assert denied["code"] == "not_authorized"

        assert service.invoke("set_transferability", [True], ADMIN)["success"] is True
        assert service.invoke("get_transferability", [], "user_a")["transferable"] is True

    def test_transfer_gating(self, service: LedgerService) -> None:
        service.invoke("mint", ["user_a"], ADMIN)

        blocked = service.invoke("transfer", [1, "user_a", "user_b"], "user_a")
        assert blocked["code"] == "not_transferable"

        service.invoke("set_transferability", [True], ADMIN)
        moved = service.invoke("transfer", [1, "user_a", "user_b"], "user_a")
        assert moved["success"] is True
        assert service.invoke("owner_of", [1], "anyone")["owner"] == "user_b"
        assert service.invoke("balance_of", ["user_b"], "anyone")["balance"] == 1

    def test_invalid_recipient_response(self, service: LedgerService) -> None:
        result = service.invoke("mint", [""], ADMIN)
        assert result["code"] == "invalid_argument"
        assert result["category"] == "validation"
        assert service.invoke("mint", ["user_a"], ADMIN)["token_id"] == 1

    def test_delegation_through_service(self, service: LedgerService) -> None:
        service.invoke("mint", ["user_a"], ADMIN)
        assert service.invoke("approve", ["user_b", 1], "user_a")["success"] is True
        assert service.invoke("burn", [1], "user_b")["success"] is True

        service.invoke("mint", ["user_a"], ADMIN)
        assert service.invoke("set_approval_for_all", ["ops", True], "user_a")["success"] is True
        assert service.invoke("burn", [2], "ops")["success"] is True

    def test_token_info(self, service: LedgerService) -> None:
        service.invoke("mint", ["user_a"], ADMIN)
        info = service.invoke("token_info", [], "anyone")
        assert info["success"] is True
        assert info["symbol"] == "LOYAL"
        assert info["next_token_id"] == 2


class TestArgumentValidation:
    """Malformed calls get validation errors, not exceptions."""

    def test_unknown_method(self, service: LedgerService) -> None:
        result = service.invoke("royalty", [], ADMIN)
        assert result["success"] is False
        assert result["code"] == "unknown_method"

    def test_missing_argument(self, service: LedgerService) -> None:
        result = service.invoke("burn", [], "user_a")
        assert result["code"] == "missing_argument"
        assert result["details"] == {"required": ["token_id"]}

    @pytest.mark.parametrize("token_id", ["1", -1, True, 1.0])
    def test_bad_token_id(self, service: LedgerService, token_id: object) -> None:
        result = service.invoke("burn", [token_id], "user_a")
        assert result["code"] == "invalid_argument"
        assert result["details"] == {"field": "token_id"}

    def test_non_bool_flag(self, service: LedgerService) -> None:
        result = service.invoke("set_transferability", ["yes"], ADMIN)
        assert result["code"] == "invalid_argument"
        assert service.invoke("get_transferability", [], ADMIN)["transferable"] is False

    def test_none_args(self, service: LedgerService) -> None:
        assert service.invoke("get_transferability", None, ADMIN)["success"] is True


class TestServiceSurface:
    """Tests for method listing and invariant breaches."""

    def test_list_methods(self, service: LedgerService) -> None:
        names = {m["name"] for m in service.list_methods()}
        assert {"mint", "burn", "set_transferability", "is_burnt", "get_transferability"} <= names

    def test_duplicate_identifier_propagates(self) -> None:
        """A registry collision is fatal and is not converted to a dict."""
        registry = OwnershipRegistry()
        registry.register_mint(1, "squatter")
        service = LedgerService(TokenLedger(SingleAdministrator(ADMIN), registry=registry))

        with pytest.raises(DuplicateIdentifier):
            service.invoke("mint", ["user_a"], ADMIN)
