from __future__ import annotations

from storefront.infrastructure.data import endpoints
from storefront.infrastructure.data.repositories.base import BaseRepository
from storefront.infrastructure.http.api_client import ApiClient


class UserRepository(BaseRepository):
    default_params = {
        "page": 1,
        "pageSize": 20,
        "sortBy": "fullName",
        "sortDescending": False,
    }

    def __init__(self, api: ApiClient) -> None:
        super().__init__(api, endpoints.USERS)
