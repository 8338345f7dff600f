"""Client-side session state.

The bearer token is persisted under the ``token`` key. The role carried by the
token (or by the login response) is mapped to the internal role exactly once,
when the session is established; everything downstream reads the mapped role.
"""
import logging
import threading
import time
from dataclasses import dataclass, replace
from typing import Callable, Protocol
from jose import jwt
from jose.exceptions import JWTError
from pmc_portal.core.roles import PortalRole, map_role

logger = logging.getLogger(__name__)

TOKEN_KEY = "token"
ROLE_CLAIM_URI = "http://schemas.microsoft.com/ws/2008/06/identity/claims/role"
ID_CLAIM_URI = "http://schemas.xmlsoap.org/ws/2005/05/identity/claims/nameidentifier"

INACTIVITY_TIMEOUT_SECONDS = 30 * 60
ACTIVITY_EVENTS = frozenset({"mousemove", "keydown", "click", "scroll", "touchstart"})


class Storage(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...


@dataclass(frozen=True)
class SessionUser:
    id: str
    email: str
    role: PortalRole


@dataclass(frozen=True)
class SessionState:
    user: SessionUser | None = None
    token: str | None = None
    is_authenticated: bool = False
    is_loading: bool = True


def user_from_claims(claims: dict) -> SessionUser:
    external_role = claims.get("role") or claims.get(ROLE_CLAIM_URI)
    return SessionUser(
        id=str(claims.get("sub") or claims.get(ID_CLAIM_URI) or ""),
        email=claims.get("email") or "",
        role=map_role(external_role),
    )


class SessionStore:
    def __init__(self, storage: Storage, clock: Callable[[], float] = time.time):
        self._storage = storage
        self._clock = clock
        self._state = SessionState()
        self._listeners: list[Callable[[SessionState], None]] = []

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def token(self) -> str | None:
        return self._state.token

    def subscribe(self, listener: Callable[[SessionState], None]) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _set_state(self, state: SessionState) -> None:
        self._state = state
        for listener in list(self._listeners):
            listener(state)

    def bootstrap(self) -> SessionState:
        """Restore the session from storage, dropping expired or unreadable tokens."""
        token = self._storage.get(TOKEN_KEY)
        if not token:
            self._set_state(SessionState(is_loading=False))
            return self._state
        try:
            claims = jwt.get_unverified_claims(token)
        except JWTError:
            logger.warning("Stored token could not be decoded; signing out")
            return self._clear()

        exp = claims.get("exp")
        if exp is not None and exp <= self._clock():
            logger.info("Stored token has expired; signing out")
            return self._clear()

        self._set_state(
            SessionState(user=user_from_claims(claims), token=token, is_authenticated=True, is_loading=False)
        )
        return self._state

    def login(self, token: str, email: str | None = None, role: str | None = None) -> SessionState:
        """Persist ``token`` and sign in.

        ``email``/``role`` come from the login response; without them the token
        claims are used.
        """
        try:
            claims = jwt.get_unverified_claims(token)
        except JWTError:
            claims = {}
        user = user_from_claims(claims)
        if email:
            user = replace(user, email=email)
        if role:
            user = replace(user, role=map_role(role))

        self._storage.set(TOKEN_KEY, token)
        self._set_state(SessionState(user=user, token=token, is_authenticated=True, is_loading=False))
        return self._state

    def logout(self) -> SessionState:
        return self._clear()

    def _clear(self) -> SessionState:
        self._storage.remove(TOKEN_KEY)
        self._set_state(SessionState(is_loading=False))
        return self._state


def daemon_timer(interval: float, callback: Callable[[], None]) -> threading.Timer:
    timer = threading.Timer(interval, callback)
    timer.daemon = True
    return timer


class InactivityMonitor:
    """Signs the session out after a stretch without user activity.

    ``timer_factory(interval, callback)`` must return an object with ``start()``
    and ``cancel()``, as ``threading.Timer`` does. The default timer runs on a
    daemon thread, so a pending sign-out never keeps the process alive.
    """

    def __init__(
        self,
        store: SessionStore,
        timeout: float = INACTIVITY_TIMEOUT_SECONDS,
        timer_factory: Callable[[float, Callable[[], None]], object] = daemon_timer,
    ):
        self._store = store
        self._timeout = timeout
        self._timer_factory = timer_factory
        self._timer = None
        self._lock = threading.Lock()
        self._unsubscribe = store.subscribe(self._on_state)

    def _on_state(self, state: SessionState) -> None:
        if state.is_authenticated:
            self.reset()
        else:
            self._cancel()

    def _cancel(self) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None

    def _expire(self) -> None:
        logger.info("Signing out after %s seconds of inactivity", self._timeout)
        with self._lock:
            self._timer = None
        self._store.logout()

    def reset(self) -> None:
        self._cancel()
        if not self._store.state.is_authenticated:
            return
        with self._lock:
            self._timer = self._timer_factory(self._timeout, self._expire)
            self._timer.start()

    def record_activity(self, event: str) -> None:
        if event in ACTIVITY_EVENTS:
            self.reset()

    def close(self) -> None:
        self._unsubscribe()
        self._cancel()

    @property
    def active(self) -> bool:
        return self._timer is not None
