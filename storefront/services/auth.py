"""
Login / logout against the backend token endpoint.

The token is opaque to the client: it is stored and attached to requests,
never inspected.
"""

from __future__ import annotations

from typing import Any

from storefront.domains.state import StateKey
from storefront.infrastructure.data import endpoints
from storefront.infrastructure.http.api_client import ApiClient
from storefront.infrastructure.http.errors import ApiError
from storefront.services.events import EventChannel, Events
from storefront.services.store.state_container import StateContainer
from storefront.utils.logger import get_logger

logger = get_logger("auth")

ADMIN_ROLE = "admin"


def user_is_admin(user: dict[str, Any] | None) -> bool:
    """
    Admin when the user carries an Admin role. Users without a roles list
    fall back to the legacy rule: "admin" in the full name, or VIP.
    """
    if not user:
        return False
    roles = user.get("roles")
    if isinstance(roles, list):
        return any(str(r).lower() == ADMIN_ROLE for r in roles)
    full_name = str(user.get("fullName") or "")
    return ADMIN_ROLE in full_name.lower() or bool(user.get("isVip"))


class AuthService:
    def __init__(self, api: ApiClient, store: StateContainer, events: EventChannel | None = None) -> None:
        self.api = api
        self.store = store
        self.events = events

    def _emit(self, channel: str, payload: Any = None) -> None:
        if self.events is not None:
            self.events.publish(channel, payload)

    def login(self, email: str, password: str) -> dict[str, Any]:
        """
        Exchange credentials for a token and record the signed-in user.

        Returns:
            The raw response envelope ({"success", "message", "data"}).

        Raises:
            ApiError: On any request failure; `auth:error` is published first.
        """
        try:
            response = self.api.post(endpoints.AUTH_TOKEN, {"email": email, "password": password}) or {}
        except ApiError as e:
            logger.warning("Login failed for %s: %s", email, e)
            self._emit(Events.AUTH_ERROR, e)
            raise

        data = response.get("data") or {}
        token = data.get("token")
        if response.get("success") and token:
            self.api.set_auth_token(token)
            user = data.get("user")
            admin = user_is_admin(user)
            self.store.set(StateKey.CURRENT_USER, user)
            self.store.set(StateKey.IS_ADMIN, admin)
            logger.info("Signed in %s (admin=%s)", email, admin)
            self._emit(Events.AUTH_LOGIN, {"user": user, "is_admin": admin})
        else:
            logger.info("Login rejected for %s: %s", email, response.get("message"))
        return response

    def logout(self) -> None:
        self.api.clear_auth_token()
        self.store.reset()
        self._emit(Events.AUTH_LOGOUT)

    def is_logged_in(self) -> bool:
        return self.store.get(StateKey.CURRENT_USER) is not None

    def is_admin(self) -> bool:
        return bool(self.store.get(StateKey.IS_ADMIN))

    def current_user(self) -> dict[str, Any] | None:
        return self.store.get(StateKey.CURRENT_USER)
