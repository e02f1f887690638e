"""Unit tests for the kernel error hierarchy."""

from __future__ import annotations

import json

import pytest

from es_commerce.kernel.errors import (
    ApplicationError,
    BaseError,
    ConcurrencyConflictError,
    ConflictError,
    DomainError,
    HandlerError,
    InvariantViolationError,
    ProjectionHandlerError,
    ReactionHandlerError,
    UnknownCommandError,
    UnknownStreamError,
    ValidationError,
)


class TestBaseError:
    def test_code_defaults_per_class(self) -> None:
        assert BaseError("Cart is closed").code == "base_error"
        assert ConflictError("Email taken").code == "conflict"
        assert BaseError("Cart is closed", code="cart_closed").code == "cart_closed"

    def test_response_body(self) -> None:
        err = BaseError("Cart is closed", code="cart_closed", detail={"stream": "cart-1"})
        assert err.to_dict() == {
            "code": "cart_closed",
            "message": "Cart is closed",
            "detail": {"stream": "cart-1"},
        }

    def test_detail_is_copied(self) -> None:
        detail = {"stream": "cart-1"}
        err = BaseError("m", detail=detail)
        detail["stream"] = "cart-2"
        assert err.detail == {"stream": "cart-1"}

    def test_cause_is_chained_and_reported(self) -> None:
        cause = KeyError("price")
        err = BaseError("Projection failed", cause=cause)
        assert err.__cause__ is cause
        assert err.to_dict()["cause"] == "KeyError: 'price'"

    def test_str_and_repr(self) -> None:
        err = BaseError("Cart is closed", code="cart_closed")
        assert str(err) == "Cart is closed"
        assert repr(err) == "BaseError(cart_closed: 'Cart is closed')"

    def test_to_json(self) -> None:
        body = json.loads(ConflictError("Email taken", detail={"email": "a@b.c"}).to_json())
        assert body == {"code": "conflict", "message": "Email taken", "detail": {"email": "a@b.c"}}


# ---------------------------------------------------------------------------
# Domain errors
# ---------------------------------------------------------------------------


class TestDomainErrors:
    def test_invariant_violation_keeps_description(self) -> None:
        err = InvariantViolationError("Cart must be open")
        assert err.description == "Cart must be open"
        assert err.message == "Cart must be open"
        assert err.code == "invariant_violation"
        assert isinstance(err, DomainError)

    def test_validation_error_lists_field_errors(self) -> None:
        err = ValidationError(
            "bad payload", errors=[{"loc": ("items", 0, "price"), "msg": "required"}]
        )
        d = err.to_dict()
        assert d["code"] == "validation_error"
        assert d["detail"]["errors"] == [{"loc": ("items", 0, "price"), "msg": "required"}]
        assert err.fields == ["items.0.price"]

    def test_validation_error_defaults_to_no_field_errors(self) -> None:
        assert ValidationError("bad").errors == []

    def test_concurrency_conflict_detail(self) -> None:
        err = ConcurrencyConflictError("cart-1", 0, 1)
        assert isinstance(err, ConflictError)
        assert (err.stream, err.expected, err.actual) == ("cart-1", 0, 1)
        assert err.detail == {"stream": "cart-1", "expected": 0, "actual": 1}
        assert "cart-1" in err.message


# ---------------------------------------------------------------------------
# Application errors
# ---------------------------------------------------------------------------


class TestApplicationErrors:
    def test_unknown_command(self) -> None:
        err = UnknownCommandError("Nope")
        assert err.command == "Nope"
        assert err.code == "unknown_command"
        assert isinstance(err, ApplicationError)

    def test_unknown_stream(self) -> None:
        err = UnknownStreamError("Ghost")
        assert err.name == "Ghost"
        assert "Ghost" in err.message

    @pytest.mark.parametrize("cls", [ReactionHandlerError, ProjectionHandlerError])
    def test_handler_errors_wrap_the_cause(self, cls: type[HandlerError]) -> None:
        cause = RuntimeError("boom")
        err = cls("reaction:x", 7, "CartSubmitted", cause=cause)
        assert isinstance(err, HandlerError)
        assert err.cause is cause
        assert err.detail == {"consumer": "reaction:x", "event_id": 7, "event_name": "CartSubmitted"}
