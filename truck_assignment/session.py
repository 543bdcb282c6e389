# session.py
# The logged-in user's credential, handed explicitly to the API client.

import logging
import time

import requests

from . import config
from .errors import AuthorizationError, TransportError
from .roles import Role

logger = logging.getLogger(__name__)


class Session:
    """
    Bearer credential provider.

    expires_at is a unix timestamp; None means the token has no known
    expiry and is trusted until the server refuses it.
    """

    def __init__(self, token, username="", role=None, email="", expires_at=None,
                 clock=time.time):
        self.token = token
        self.username = username
        self.role = role
        self.email = email
        self.expires_at = expires_at
        self._clock = clock

    def is_expired(self):
        if self.expires_at is None:
            return False
        return self._clock() >= self.expires_at

    def bearer(self):
        if not self.token:
            raise AuthorizationError("You are not logged in. Please log in first.")
        if self.is_expired():
            raise AuthorizationError(config.SESSION_EXPIRED_MESSAGE)
        return self.token

    def auth_header(self):
        return {"Authorization": f"Bearer {self.bearer()}"}

    def clear(self):
        self.token = None

    @classmethod
    def from_login_response(cls, data, ttl=None):
        role = data.get("role")
        expires_at = None
        if ttl is not None:
            expires_at = time.time() + ttl
        return cls(
            token=data["token"],
            username=data.get("username", ""),
            role=Role.parse(role) if role else None,
            email=data.get("email") or "",
            expires_at=expires_at,
        )


def login(username, password, base_url=None, http=None, timeout=None):
    """
    POST /auth/login and return a Session.

    Raises AuthorizationError for bad credentials and TransportError when
    the backend cannot be reached.
    """
    if not username or not username.strip():
        raise AuthorizationError("Username cannot be empty")
    if not password or not password.strip():
        raise AuthorizationError("Password cannot be empty")

    base_url = (base_url or config.API_BASE_URL).rstrip("/")
    http = http or requests.Session()
    timeout = timeout or config.REQUEST_TIMEOUT

    logger.info("Logging in as %s", username)
    try:
        response = http.post(
            f"{base_url}/auth/login",
            json={"username": username, "password": password},
            headers={"Accept": "application/json"},
            timeout=timeout,
        )
    except requests.exceptions.RequestException as e:
        logger.error("Login request failed: %s", e)
        raise TransportError("Login failed. Please try again.") from e

    try:
        data = response.json()
    except ValueError:
        data = {}

    if response.status_code != 200 or not data.get("token"):
        message = data.get("message") or "Invalid username or password"
        logger.warning("Login refused for %s (%s)", username, response.status_code)
        raise AuthorizationError(message)

    return Session.from_login_response(data)
