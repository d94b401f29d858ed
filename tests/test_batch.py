"""
Tests for ApiClient.batch_request: windowing, partial failure, fail-fast.
"""

from __future__ import annotations

import threading
import time
from typing import Any, Callable
from unittest.mock import MagicMock, patch

import pytest

from storefront.infrastructure.http.api_client import ApiClient, RequestDescriptor
from storefront.infrastructure.http.errors import ApiError, BatchAbortedError
from tests.conftest import BASE_URL, REQUEST_PATCH


def _descriptors(n: int) -> list[RequestDescriptor]:
    return [RequestDescriptor("GET", f"/products/{i}") for i in range(n)]


def _fake_server(make_response: Callable[..., MagicMock], failing: set[int], calls: list[int]) -> Callable[..., Any]:
    lock = threading.Lock()

    def handler(method: str, url: str, **kwargs: Any) -> MagicMock:
        index = int(url.rsplit("/", 1)[1])
        with lock:
            calls.append(index)
        if index in failing:
            return make_response(400, {"message": f"bad {index}"}, reason="Bad Request")
        return make_response(200, {"id": index})

    return handler


def test_partial_failure_keeps_indices(client: ApiClient, make_response: Callable[..., MagicMock]) -> None:
    calls: list[int] = []
    with patch(REQUEST_PATCH, side_effect=_fake_server(make_response, {2, 5}, calls)):
        result = client.batch_request(_descriptors(7), concurrency=3)

    assert set(result.results) == {0, 1, 3, 4, 6}
    assert set(result.errors) == {2, 5}
    assert result.results[4] == {"id": 4}
    assert isinstance(result.errors[5], ApiError)
    assert result.errors[5].status == 400
    assert result.has_errors
    assert result.completed == 7
    # 400 is not retried, so each job is called exactly once
    assert sorted(calls) == list(range(7))


def test_fail_fast_raises_first_failure(client: ApiClient, make_response: Callable[..., MagicMock]) -> None:
    calls: list[int] = []
    with patch(REQUEST_PATCH, side_effect=_fake_server(make_response, {2}, calls)):
        with pytest.raises(BatchAbortedError) as exc_info:
            client.batch_request(_descriptors(7), concurrency=3, fail_fast=True)

    assert exc_info.value.index == 2
    assert isinstance(exc_info.value.error, ApiError)
    # later windows never start
    assert all(i < 3 for i in calls)


def test_windows_run_sequentially(client: ApiClient, make_response: Callable[..., MagicMock]) -> None:
    lock = threading.Lock()
    state = {"active": 0, "peak": 0}
    order: list[int] = []

    def slow(method: str, url: str, **kwargs: Any) -> MagicMock:
        with lock:
            state["active"] += 1
            state["peak"] = max(state["peak"], state["active"])
        time.sleep(0.02)
        with lock:
            state["active"] -= 1
            order.append(int(url.rsplit("/", 1)[1]))
        return make_response(200, {"url": url})

    with patch(REQUEST_PATCH, side_effect=slow):
        result = client.batch_request(_descriptors(5), concurrency=2)

    assert state["peak"] <= 2
    assert set(order[:2]) == {0, 1}
    assert set(order[2:4]) == {2, 3}
    assert order[4] == 4
    assert result.results[3] == {"url": f"{BASE_URL}/products/3"}


def test_empty_batch(client: ApiClient) -> None:
    with patch(REQUEST_PATCH) as mock_request:
        result = client.batch_request([], concurrency=3)
    assert result.results == {}
    assert not result.has_errors
    mock_request.assert_not_called()
