"""
HTTP client for the storefront REST API.

Every call goes through `ApiClient.request`, which resolves the URL, attaches
the bearer token, applies the timeout budget and turns every failure into an
ApiError. Retry and batching are layered on top.
"""

from __future__ import annotations

import json
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from concurrent.futures import TimeoutError as FutureTimeout
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, TypeVar

import requests

from storefront.infrastructure.http.errors import (
    NETWORK_ERROR_STATUS,
    TIMEOUT_STATUS,
    ApiError,
    BatchAbortedError,
)
from storefront.infrastructure.http.retry import with_retry
from storefront.infrastructure.http.token_store import TokenStore
from storefront.utils.config import (
    api_base_url,
    batch_concurrency,
    request_timeout_ms,
    retry_base_delay_ms,
    retry_max_attempts,
)
from storefront.utils.logger import get_logger

logger = get_logger("http")

T = TypeVar("T")

_MAX_DEBUG_BODY_CHARS = 500
_READ_CHUNK_BYTES = 8192


@dataclass
class RequestDescriptor:
    """One HTTP call. `body` is sent as JSON; `files` switches to multipart."""

    method: str
    path: str
    params: dict[str, Any] | None = None
    body: Any = None
    headers: dict[str, str] | None = None
    files: dict[str, Any] | None = None
    data: dict[str, Any] | None = None
    timeout_ms: int | None = None

    @property
    def is_multipart(self) -> bool:
        return self.files is not None


@dataclass
class BatchResult:
    """Outcome of `ApiClient.batch_request`, keyed by the job's original index."""

    results: dict[int, Any] = field(default_factory=dict)
    errors: dict[int, Exception] = field(default_factory=dict)

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    @property
    def completed(self) -> int:
        return len(self.results) + len(self.errors)


def _encode_params(params: dict[str, Any]) -> dict[str, Any]:
    # Match the server's query binding: lowercase booleans, no None values.
    out: dict[str, Any] = {}
    for k, v in params.items():
        if v is None:
            continue
        out[k] = ("true" if v else "false") if isinstance(v, bool) else v
    return out


@dataclass
class _Transfer:
    status: int
    reason: str
    body: bytes


def _transfer(method: str, url: str, kwargs: dict[str, Any], cancelled: threading.Event) -> _Transfer:
    """Send the request and read the whole body, stopping early once `cancelled` is set."""
    response = requests.request(method, url, stream=True, **kwargs)
    try:
        chunks: list[bytes] = []
        for chunk in response.iter_content(chunk_size=_READ_CHUNK_BYTES):
            if cancelled.is_set():
                break
            chunks.append(chunk)
        return _Transfer(response.status_code, response.reason or "", b"".join(chunks))
    finally:
        response.close()


def _decode_error(transfer: _Transfer) -> ApiError:
    status = transfer.status
    message = transfer.reason or f"HTTP {status}"
    detail: Any = None
    if transfer.body:
        try:
            detail = json.loads(transfer.body)
        except ValueError:
            detail = None
    if isinstance(detail, dict) and detail.get("message"):
        message = str(detail["message"])
    return ApiError(status, message, detail)


class ApiClient:
    """
    REST client with timeout, bearer auth, error classification, retry and
    windowed batch execution.
    """

    def __init__(
        self,
        base_url: str | None = None,
        token_store: TokenStore | None = None,
        timeout_ms: int | None = None,
        max_attempts: int | None = None,
        retry_base_delay: float | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.base_url = (base_url if base_url is not None else api_base_url()).rstrip("/")
        self.token_store = token_store
        self.timeout_ms = timeout_ms if timeout_ms is not None else request_timeout_ms()
        self.max_attempts = max_attempts if max_attempts is not None else retry_max_attempts()
        self.retry_base_delay = (
            retry_base_delay if retry_base_delay is not None else retry_base_delay_ms() / 1000
        )
        self._sleep = sleep

    # --- token helpers ---

    def set_auth_token(self, token: str | None) -> None:
        if self.token_store is not None:
            self.token_store.set_token(token)

    def get_auth_token(self) -> str | None:
        return self.token_store.get_token() if self.token_store is not None else None

    def clear_auth_token(self) -> None:
        if self.token_store is not None:
            self.token_store.clear_token()

    # --- core request ---

    def _url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    def _headers(self, descriptor: RequestDescriptor) -> dict[str, str]:
        headers: dict[str, str] = {}
        if not descriptor.is_multipart:
            headers["Content-Type"] = "application/json"
        headers.update(descriptor.headers or {})
        token = self.get_auth_token()
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def request(self, descriptor: RequestDescriptor) -> Any:
        """
        Execute one HTTP call within a wall-clock budget.

        The transfer (connect, headers and body) runs on a worker thread; the
        caller waits at most `timeout_ms`. Past the deadline the worker is told
        to stop reading and the call fails with 408, whatever the transport
        reports afterwards. The budget is also passed to `requests` so a
        stalled socket releases the worker.

        Returns:
            Decoded JSON body, or None for 204 / empty responses.

        Raises:
            ApiError: status 408 on timeout, 0 on any other transport failure,
                otherwise the HTTP status of a non-2xx response.
        """
        url = self._url(descriptor.path)
        timeout_ms = descriptor.timeout_ms if descriptor.timeout_ms is not None else self.timeout_ms
        kwargs: dict[str, Any] = {
            "headers": self._headers(descriptor),
            "timeout": timeout_ms / 1000,
        }
        if descriptor.params:
            kwargs["params"] = _encode_params(descriptor.params)
        if descriptor.is_multipart:
            kwargs["files"] = descriptor.files
            if descriptor.data:
                kwargs["data"] = descriptor.data
        elif descriptor.body is not None:
            kwargs["json"] = descriptor.body

        logger.debug("%s %s", descriptor.method, url)
        budget = timeout_ms / 1000
        started = time.monotonic()
        cancelled = threading.Event()
        pending: Future[_Transfer] = Future()

        def run() -> None:
            try:
                pending.set_result(_transfer(descriptor.method, url, kwargs, cancelled))
            except Exception as e:
                pending.set_exception(e)

        threading.Thread(target=run, name="storefront-http", daemon=True).start()
        try:
            transfer = pending.result(timeout=budget)
        except (FutureTimeout, requests.Timeout) as e:
            cancelled.set()
            raise self._timeout_error(descriptor, url, timeout_ms) from e
        except requests.RequestException as e:
            if time.monotonic() - started >= budget:
                raise self._timeout_error(descriptor, url, timeout_ms) from e
            logger.warning("%s %s failed: %s (%s)", descriptor.method, url, e, type(e).__name__)
            raise ApiError(
                NETWORK_ERROR_STATUS,
                "Network error or server unavailable",
                {"original_error": str(e), "error_type": type(e).__name__},
            ) from e

        if not 200 <= transfer.status < 300:
            error = _decode_error(transfer)
            logger.info("%s %s -> %d %s", descriptor.method, url, error.status, error.message)
            raise error

        if transfer.status == 204 or not transfer.body:
            return None
        try:
            return json.loads(transfer.body)
        except ValueError as e:
            body = transfer.body.decode("utf-8", errors="replace")
            raise ApiError(
                NETWORK_ERROR_STATUS,
                "Invalid JSON in response",
                {"body": body[:_MAX_DEBUG_BODY_CHARS]},
            ) from e

    def _timeout_error(self, descriptor: RequestDescriptor, url: str, timeout_ms: int) -> ApiError:
        logger.warning("%s %s timed out after %d ms", descriptor.method, url, timeout_ms)
        return ApiError(TIMEOUT_STATUS, "Request timeout", {"timeout_ms": timeout_ms})

    # --- sugar ---

    def get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        return self.request(RequestDescriptor("GET", path, params=params))

    def post(self, path: str, data: Any = None) -> Any:
        return self.request(RequestDescriptor("POST", path, body=data))

    def put(self, path: str, data: Any = None) -> Any:
        return self.request(RequestDescriptor("PUT", path, body=data))

    def delete(self, path: str) -> Any:
        return self.request(RequestDescriptor("DELETE", path))

    def post_form(self, path: str, files: dict[str, Any], data: dict[str, Any] | None = None) -> Any:
        """Multipart upload. No JSON content type; requests sets the boundary."""
        return self.request(RequestDescriptor("POST", path, files=files, data=data))

    # --- resilience ---

    def with_retry(
        self,
        operation: Callable[[], T],
        max_attempts: int | None = None,
        base_delay: float | None = None,
    ) -> T:
        return with_retry(
            operation,
            max_attempts=max_attempts if max_attempts is not None else self.max_attempts,
            base_delay=base_delay if base_delay is not None else self.retry_base_delay,
            sleep=self._sleep,
        )

    def request_with_retry(self, descriptor: RequestDescriptor, max_attempts: int | None = None) -> Any:
        return self.with_retry(lambda: self.request(descriptor), max_attempts=max_attempts)

    def batch_request(
        self,
        descriptors: Iterable[RequestDescriptor],
        concurrency: int | None = None,
        fail_fast: bool = False,
    ) -> BatchResult:
        """
        Run requests in sequential windows of `concurrency`; each window runs
        concurrently through the retry wrapper and finishes before the next.

        Raises:
            BatchAbortedError: With fail_fast, on the first failure observed.
        """
        jobs = list(descriptors)
        size = max(1, concurrency if concurrency is not None else batch_concurrency())
        result = BatchResult()
        for start in range(0, len(jobs), size):
            self._run_window(start, jobs[start:start + size], result, fail_fast)
        if result.has_errors:
            logger.warning("Batch finished with %d/%d failed requests", len(result.errors), len(jobs))
        return result

    def _run_window(
        self,
        offset: int,
        window: list[RequestDescriptor],
        result: BatchResult,
        fail_fast: bool,
    ) -> None:
        pool = ThreadPoolExecutor(max_workers=len(window), thread_name_prefix="storefront-batch")
        aborted = False
        try:
            futures = {
                pool.submit(self.request_with_retry, descriptor): offset + i
                for i, descriptor in enumerate(window)
            }
            for future in as_completed(futures):
                index = futures[future]
                try:
                    result.results[index] = future.result()
                except Exception as e:
                    if fail_fast:
                        aborted = True
                        raise BatchAbortedError(index, e, result) from e
                    logger.warning("Batch request %d failed: %s", index, e)
                    result.errors[index] = e
        finally:
            # An aborted window does not wait for its siblings.
            pool.shutdown(wait=not aborted, cancel_futures=aborted)
