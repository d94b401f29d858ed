"""
Tests for stock rules and InventoryRepository.adjust_stock.
"""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from storefront.domains.inventory import (
    InventoryError,
    NegativeStockError,
    apply_adjustment,
    parse_stock_input,
    validate_quick_adjustment,
    validate_stock_adjustment,
)
from storefront.infrastructure.data.repositories.inventory import (
    InventoryRepository,
    inventory_error_message,
)
from storefront.infrastructure.http.api_client import ApiClient
from storefront.infrastructure.http.errors import ApiError


@pytest.fixture
def api() -> MagicMock:
    return MagicMock(spec=ApiClient)


@pytest.fixture
def repo(api: MagicMock) -> InventoryRepository:
    return InventoryRepository(api)


def test_apply_adjustment() -> None:
    assert apply_adjustment(10, 4) == 14
    assert apply_adjustment(3, -3) == 0
    with pytest.raises(NegativeStockError) as exc_info:
        apply_adjustment(3, -5)
    assert str(exc_info.value) == "Cannot reduce stock below zero. Current: 3, Adjustment: -5"


def test_adjust_below_zero_writes_nothing(repo: InventoryRepository, api: MagicMock) -> None:
    api.get.return_value = {"productId": "p-1", "quantity": 3}

    with pytest.raises(NegativeStockError):
        repo.adjust_stock("p-1", -5)

    api.get.assert_called_once_with("/inventory/p-1")
    api.put.assert_not_called()


def test_adjust_writes_absolute_quantity(repo: InventoryRepository, api: MagicMock) -> None:
    api.get.return_value = {"productId": "p-1", "quantity": 10}
    api.put.return_value = {"productId": "p-1", "quantity": 14}

    updated = repo.adjust_stock("p-1", 4)

    api.put.assert_called_once_with("/inventory/p-1", {"quantity": 14})
    assert updated == {"productId": "p-1", "quantity": 14}


def test_adjust_missing_record(repo: InventoryRepository, api: MagicMock) -> None:
    api.get.return_value = None
    with pytest.raises(InventoryError, match="Product inventory not found"):
        repo.adjust_stock("p-9", 1)
    api.put.assert_not_called()


@pytest.mark.parametrize(
    "status,expected",
    [
        (401, "Unauthorized: Admin authentication required to modify inventory"),
        (403, "Forbidden: You do not have permission to modify inventory"),
        (404, "Product inventory not found"),
    ],
)
def test_adjust_translates_http_errors(
    repo: InventoryRepository, api: MagicMock, status: int, expected: str
) -> None:
    api.get.return_value = {"quantity": 5}
    cause = ApiError(status, "rejected")
    api.put.side_effect = cause

    with pytest.raises(InventoryError) as exc_info:
        repo.adjust_stock("p-1", 1)

    assert str(exc_info.value) == expected
    assert exc_info.value.status == status
    assert exc_info.value.original is cause


def test_fetch_failure_is_wrapped(repo: InventoryRepository, api: MagicMock) -> None:
    api.get.side_effect = ApiError(0, "Network error or server unavailable")
    with pytest.raises(InventoryError) as exc_info:
        repo.adjust_stock("p-1", 1)
    assert exc_info.value.status == 0
    assert str(exc_info.value) == "Network error or server unavailable"


def test_error_message_fallbacks() -> None:
    assert inventory_error_message(ApiError(400, "bad", {"error": "Quantity too large"}), "update") == (
        "Quantity too large"
    )
    assert inventory_error_message(ApiError(500, "Internal Server Error"), "update") == "Internal Server Error"
    assert inventory_error_message(RuntimeError(""), "update stock") == "Failed to update stock"


def test_low_stock_and_update(repo: InventoryRepository, api: MagicMock) -> None:
    repo.get_low_stock()
    api.get.assert_called_with("/inventory/low-stock")
    repo.update_stock(7, {"quantity": 2, "reorderLevel": 5})
    api.put.assert_called_with("/inventory/7", {"quantity": 2, "reorderLevel": 5})


def test_validate_stock_adjustment() -> None:
    assert validate_stock_adjustment(10, 5).valid
    assert validate_stock_adjustment(10, 0).error == "Adjustment cannot be zero"
    assert validate_stock_adjustment(10, "5").error == "Adjustment must be a valid number"
    assert validate_stock_adjustment(10, -2, "add").error == "Quantity to add must be a positive number"
    assert validate_stock_adjustment(4, 5, "remove").error == (
        "Cannot remove more than available stock (4 units)"
    )
    assert validate_stock_adjustment(4, 4, "remove").valid


def test_validate_quick_adjustment() -> None:
    assert validate_quick_adjustment(0, "increment").valid
    assert not validate_quick_adjustment(0, "decrement").valid
    assert validate_quick_adjustment(1, "decrement").valid


@pytest.mark.parametrize(
    "raw,value",
    [("12", 12), (" 7 ", 7), ("-3", -3), ("+4", 4), ("15abc", 15), (9, 9)],
)
def test_parse_stock_input_accepts(raw: object, value: int) -> None:
    result = parse_stock_input(raw)
    assert result.valid
    assert result.value == value


@pytest.mark.parametrize("raw", [None, "", "   ", "abc", "-", "٣"])
def test_parse_stock_input_rejects(raw: object) -> None:
    assert not parse_stock_input(raw).valid


def test_list_all_sends_no_paging(repo: InventoryRepository, api: MagicMock) -> None:
    repo.list_all()
    api.get.assert_called_once_with("/inventory")
