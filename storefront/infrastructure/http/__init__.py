"""HTTP client with timeout, retry and batching."""

from storefront.infrastructure.http.api_client import ApiClient, BatchResult, RequestDescriptor
from storefront.infrastructure.http.errors import ApiError, BatchAbortedError, ErrorKind
from storefront.infrastructure.http.token_store import TokenStore

__all__ = [
    "ApiClient",
    "ApiError",
    "BatchAbortedError",
    "BatchResult",
    "ErrorKind",
    "RequestDescriptor",
    "TokenStore",
]
