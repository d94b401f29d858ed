"""
Base repository: paginated list and CRUD over one REST collection.
"""

from __future__ import annotations

from typing import Any

from storefront.infrastructure.http.api_client import ApiClient


class BaseRepository:
    """
    CRUD wrapper around an ApiClient for one endpoint.

    Subclasses override `default_params` to change page size and sort order.
    """

    default_params: dict[str, Any] = {
        "page": 1,
        "pageSize": 20,
        "sortBy": "id",
        "sortDescending": False,
    }

    def __init__(self, api: ApiClient, endpoint: str) -> None:
        self.api = api
        self.endpoint = endpoint

    def get_all(self, **params: Any) -> Any:
        """
        Fetch one page of the collection.

        Args:
            **params: Overrides for page, pageSize, sortBy, sortDescending, etc.
        """
        return self.api.get(self.endpoint, {**self.default_params, **params})

    def get_by_id(self, item_id: Any) -> Any:
        return self.api.get(f"{self.endpoint}/{item_id}")

    def create(self, data: dict[str, Any]) -> Any:
        return self.api.post(self.endpoint, data)

    def update(self, item_id: Any, data: dict[str, Any]) -> Any:
        return self.api.put(f"{self.endpoint}/{item_id}", data)

    def delete(self, item_id: Any) -> Any:
        return self.api.delete(f"{self.endpoint}/{item_id}")
