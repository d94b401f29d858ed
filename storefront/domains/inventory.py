"""
Inventory rules: stock arithmetic, input validation and domain errors.

Nothing in this module touches the network; the repository layer calls in
here before issuing any write.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


class InventoryError(RuntimeError):
    """Inventory operation failed; message is safe to show to an operator."""

    def __init__(self, message: str, status: int | None = None, original: Exception | None = None) -> None:
        super().__init__(message)
        self.status = status
        self.original = original


class NegativeStockError(InventoryError):
    """An adjustment would take stock below zero. Raised before any write."""

    def __init__(self, current: int, adjustment: int) -> None:
        super().__init__(
            f"Cannot reduce stock below zero. Current: {current}, Adjustment: {adjustment}"
        )
        self.current = current
        self.adjustment = adjustment


@dataclass(frozen=True)
class StockValidation:
    valid: bool
    error: str | None = None
    value: int | None = None


def apply_adjustment(current: int, adjustment: int) -> int:
    """
    Return the absolute quantity after applying `adjustment`.

    Raises:
        NegativeStockError: If the result would be negative.
    """
    new_quantity = current + adjustment
    if new_quantity < 0:
        raise NegativeStockError(current, adjustment)
    return new_quantity


def validate_stock_adjustment(current_stock: int, adjustment: Any, operation: str = "add") -> StockValidation:
    """
    Validate a bulk add/remove before it is sent.

    `adjustment` is always a positive amount; for "remove" it is negated by
    the caller.
    """
    if isinstance(adjustment, bool) or not isinstance(adjustment, (int, float)) or adjustment != adjustment:
        return StockValidation(False, "Adjustment must be a valid number")
    if adjustment == 0:
        return StockValidation(False, "Adjustment cannot be zero")
    if operation == "add" and adjustment <= 0:
        return StockValidation(False, "Quantity to add must be a positive number")
    if operation == "remove" and adjustment <= 0:
        return StockValidation(False, "Quantity to remove must be a positive number")
    if operation == "remove" and adjustment > current_stock:
        return StockValidation(False, f"Cannot remove more than available stock ({current_stock} units)")
    return StockValidation(True)


def validate_quick_adjustment(current_stock: int, direction: str) -> StockValidation:
    """Single-unit increment/decrement check."""
    if direction == "decrement" and current_stock <= 0:
        return StockValidation(False, "Cannot decrease stock below zero")
    return StockValidation(True)


def parse_stock_input(raw: Any) -> StockValidation:
    """Parse operator input into an int. Leading digits win, like parseInt."""
    if raw is None or str(raw).strip() == "":
        return StockValidation(False, "Please enter a quantity")
    text = str(raw).strip()
    sign = ""
    if text[0] in "+-":
        sign, text = text[0], text[1:]
    digits = ""
    for ch in text:
        if ch not in "0123456789":
            break
        digits += ch
    if not digits:
        return StockValidation(False, "Please enter a valid number")
    return StockValidation(True, value=int(sign + digits))
