from __future__ import annotations

from typing import Any

from storefront.infrastructure.data import endpoints
from storefront.infrastructure.data.repositories.base import BaseRepository
from storefront.infrastructure.http.api_client import ApiClient


class OrderRepository(BaseRepository):
    default_params = {
        "page": 1,
        "pageSize": 20,
        "sortBy": "orderId",
        "sortDescending": True,
    }

    def __init__(self, api: ApiClient) -> None:
        super().__init__(api, endpoints.ORDERS)

    def get_by_user(self, user_id: Any) -> Any:
        return self.api.get(endpoints.orders_by_user(user_id))

    def get_by_status(self, status: Any) -> Any:
        return self.api.get(endpoints.orders_by_status(status))

    def pay(self, order_id: Any) -> Any:
        return self.api.post(endpoints.order_pay(order_id))

    def cancel(self, order_id: Any) -> Any:
        # The backend models cancellation as DELETE on the order.
        return self.api.delete(endpoints.order_by_id(order_id))
