from __future__ import annotations

from pathlib import Path
from typing import Any, BinaryIO

from storefront.infrastructure.data import endpoints
from storefront.infrastructure.data.repositories.base import BaseRepository
from storefront.infrastructure.http.api_client import ApiClient


class ProductRepository(BaseRepository):
    default_params = {
        "page": 1,
        "pageSize": 12,
        "sortBy": "name",
        "sortDescending": False,
    }

    def __init__(self, api: ApiClient) -> None:
        super().__init__(api, endpoints.PRODUCTS)

    def get_active(self) -> Any:
        return self.api.get(endpoints.PRODUCTS_ACTIVE)

    def search(self, name: str) -> Any:
        return self.api.get(endpoints.PRODUCTS_SEARCH, {"name": name})

    def upload_image(self, product_id: Any, file: Path | BinaryIO, filename: str | None = None) -> Any:
        """Upload a product image as the multipart field `file`."""
        if isinstance(file, Path):
            with open(file, "rb") as f:
                return self.api.post_form(
                    endpoints.product_image(product_id),
                    files={"file": (filename or file.name, f)},
                )
        return self.api.post_form(
            endpoints.product_image(product_id),
            files={"file": (filename or "upload", file)},
        )
