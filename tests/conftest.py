"""
Shared fixtures: temp-dir storage, wired store/events, fake HTTP responses.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable
from unittest.mock import MagicMock

import pytest

from storefront.infrastructure.http.api_client import ApiClient
from storefront.infrastructure.http.token_store import TokenStore
from storefront.infrastructure.storage.local_storage import LocalStorage
from storefront.services.events import EventChannel
from storefront.services.store.state_container import StateContainer

BASE_URL = "http://shop.test/api"
REQUEST_PATCH = "storefront.infrastructure.http.api_client.requests.request"


@pytest.fixture
def storage(tmp_path: Path) -> LocalStorage:
    return LocalStorage(tmp_path / "storage")


@pytest.fixture
def events() -> EventChannel:
    return EventChannel()


@pytest.fixture
def store(storage: LocalStorage, events: EventChannel) -> StateContainer:
    return StateContainer(storage, events)


@pytest.fixture
def tokens(storage: LocalStorage) -> TokenStore:
    return TokenStore(storage)


@pytest.fixture
def sleeps() -> list[float]:
    return []


@pytest.fixture
def client(tokens: TokenStore, sleeps: list[float]) -> ApiClient:
    return ApiClient(
        base_url=BASE_URL,
        token_store=tokens,
        timeout_ms=10_000,
        max_attempts=3,
        retry_base_delay=1.0,
        sleep=sleeps.append,
    )


@pytest.fixture
def make_response() -> Callable[..., MagicMock]:
    def factory(
        status: int = 200,
        json_data: Any = None,
        reason: str = "OK",
        body: bytes | None = None,
    ) -> MagicMock:
        r = MagicMock()
        r.status_code = status
        r.reason = reason
        if body is None:
            body = b"" if json_data is None else json.dumps(json_data).encode()
        payload = body
        r.iter_content.side_effect = lambda chunk_size=1, decode_unicode=False: iter([payload] if payload else [])
        return r

    return factory
