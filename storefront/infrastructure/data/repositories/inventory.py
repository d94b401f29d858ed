"""
Inventory repository, including the read-modify-write stock adjustment.

`adjust_stock` reads the current quantity, computes the new absolute value
locally and writes it back. Two clients adjusting the same product at the
same time can lose one of the updates (both read 10, both write 11); the
backend offers no version token to detect this, so it is a known limitation.
"""

from __future__ import annotations

from typing import Any

from storefront.domains.inventory import InventoryError, apply_adjustment
from storefront.infrastructure.data import endpoints
from storefront.infrastructure.data.repositories.base import BaseRepository
from storefront.infrastructure.http.api_client import ApiClient
from storefront.infrastructure.http.errors import ApiError
from storefront.utils.logger import get_logger

logger = get_logger("inventory")


def inventory_error_message(error: Exception, operation: str) -> str:
    """Operator-facing text for a failed inventory call."""
    status = getattr(error, "status", None)
    if status == 401:
        return "Unauthorized: Admin authentication required to modify inventory"
    if status == 403:
        return "Forbidden: You do not have permission to modify inventory"
    if status == 404:
        return "Product inventory not found"
    detail = getattr(error, "detail", None)
    if isinstance(detail, dict) and detail.get("error"):
        return str(detail["error"])
    if str(error):
        return str(error)
    return f"Failed to {operation}"


class InventoryRepository(BaseRepository):
    def __init__(self, api: ApiClient) -> None:
        super().__init__(api, endpoints.INVENTORY)

    def list_all(self) -> Any:
        """Every inventory record. Unlike `get_all`, sends no paging params."""
        return self.api.get(endpoints.INVENTORY)

    def get_low_stock(self) -> Any:
        return self.api.get(endpoints.INVENTORY_LOW_STOCK)

    def get_by_product(self, product_id: Any) -> Any:
        return self.api.get(endpoints.inventory_by_product(product_id))

    def update_stock(self, product_id: Any, data: dict[str, Any]) -> Any:
        return self.api.put(endpoints.inventory_by_product(product_id), data)

    def adjust_stock(self, product_id: Any, adjustment: int) -> Any:
        """
        Add (positive) or remove (negative) units of stock.

        Args:
            product_id: Product whose inventory record is adjusted.
            adjustment: Signed delta.

        Returns:
            The updated inventory record from the server.

        Raises:
            NegativeStockError: If the result would be below zero; nothing is written.
            InventoryError: If fetching or writing fails.
        """
        try:
            current = self.get_by_product(product_id)
        except ApiError as e:
            raise InventoryError(inventory_error_message(e, "fetch current stock"), e.status, e) from e

        if not isinstance(current, dict) or "quantity" not in current:
            raise InventoryError("Product inventory not found")

        new_quantity = apply_adjustment(int(current["quantity"]), adjustment)

        try:
            updated = self.update_stock(product_id, {"quantity": new_quantity})
        except ApiError as e:
            raise InventoryError(inventory_error_message(e, "update stock"), e.status, e) from e
        logger.info("Stock for %s adjusted by %+d to %d", product_id, adjustment, new_quantity)
        return updated
