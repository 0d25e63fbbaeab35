"""Auth emulator: one process-wide session plus change notifications.

States are ``ANONYMOUS`` and ``AUTHENTICATED``. Every listener registered via
``on_auth_state_change`` gets one event describing the state at registration,
then one event per transition, each delivered from its own queue so a
listener always sees events in transition order.
"""

from __future__ import annotations

import asyncio
import enum
import inspect
import logging
from typing import Any, Awaitable, Callable, Dict, Optional, Union
from uuid import uuid4

from inkpress.db.responses import AuthResponse, AuthUser, ErrorCode, Session
from inkpress.db.store import FixtureStore

logger = logging.getLogger("mock.auth")


class AuthState(str, enum.Enum):
    ANONYMOUS = "ANONYMOUS"
    AUTHENTICATED = "AUTHENTICATED"


class AuthChangeEvent(str, enum.Enum):
    SIGNED_IN = "SIGNED_IN"
    SIGNED_OUT = "SIGNED_OUT"


Listener = Callable[[AuthChangeEvent, Optional[Session]], Union[None, Awaitable[None]]]


def _to_user(record: Dict[str, Any]) -> AuthUser:
    username = record.get("username") or record["email"].split("@", 1)[0]
    return AuthUser(
        id=str(record["id"]),
        email=record["email"],
        display_name=username,
        user_metadata={"username": username},
    )


class Subscription:
    """Handle returned by ``on_auth_state_change``."""

    def __init__(self, listener: Listener, owner: "MockAuth") -> None:
        self.id = uuid4().hex
        self._listener = listener
        self._owner = owner
        self._queue: asyncio.Queue = asyncio.Queue()
        self.active = True
        self._task = asyncio.get_running_loop().create_task(self._pump())

    def push(self, event: AuthChangeEvent, session: Optional[Session]) -> None:
        if self.active:
            self._queue.put_nowait((event, session))

    async def _pump(self) -> None:
        while True:
            event, session = await self._queue.get()
            try:
                if not self.active:
                    continue
                result = self._listener(event, session)
                if inspect.isawaitable(result):
                    await result
            except Exception:  # noqa: BLE001 - a failing listener must not stop delivery
                logger.exception("auth listener %s failed on %s", self.id, event.value)
            finally:
                self._queue.task_done()

    async def flush(self) -> None:
        """Wait until every queued event has been delivered."""
        if self.active:
            await self._queue.join()

    def unsubscribe(self) -> None:
        if not self.active:
            return
        self.active = False
        self._owner._detach(self)
        self._task.cancel()


class MockAuth:
    """Credential checks and session state over the store's seeded users."""

    def __init__(self, store: FixtureStore, *, latency: float = 0.0, default_user_email: Optional[str] = None) -> None:
        self._store = store
        self._latency = max(0.0, float(latency))
        self._session: Optional[Session] = None
        self._subscriptions: Dict[str, Subscription] = {}
        if default_user_email:
            record = store.find_user(default_user_email)
            if record is None:
                logger.warning("default user %s is not seeded; starting anonymous", default_user_email)
            else:
                self._session = Session(user=_to_user(record))

    @property
    def state(self) -> AuthState:
        return AuthState.AUTHENTICATED if self._session is not None else AuthState.ANONYMOUS

    def _current(self) -> Optional[Session]:
        return self._session.model_copy(deep=True) if self._session is not None else None

    def _response(self) -> AuthResponse:
        session = self._current()
        return AuthResponse(user=session.user if session else None, session=session, error=None)

    def _emit(self, event: AuthChangeEvent) -> None:
        for sub in list(self._subscriptions.values()):
            sub.push(event, self._current())

    def _detach(self, sub: Subscription) -> None:
        self._subscriptions.pop(sub.id, None)

    def _start_session(self, record: Dict[str, Any]) -> AuthResponse:
        self._session = Session(user=_to_user(record))
        logger.info("signed in user_id=%s", self._session.user.id)
        self._emit(AuthChangeEvent.SIGNED_IN)
        return self._response()

    # ---- public contract ----------------------------------------------------
    async def get_session(self) -> AuthResponse:
        await asyncio.sleep(0)
        return self._response()

    async def get_user(self) -> AuthResponse:
        await asyncio.sleep(0)
        return self._response()

    async def sign_in_with_password(self, credentials: Dict[str, Any]) -> AuthResponse:
        await asyncio.sleep(self._latency)
        email = credentials.get("email")
        password = credentials.get("password")
        record = self._store.find_user(email) if isinstance(email, str) else None
        if record is None or record.get("password") != password:
            logger.info("sign-in rejected for %s", email)
            return AuthResponse.failure(ErrorCode.INVALID_CREDENTIALS, "Invalid email or password")
        return self._start_session(record)

    async def sign_up(self, credentials: Dict[str, Any]) -> AuthResponse:
        await asyncio.sleep(self._latency)
        email = credentials.get("email")
        password = credentials.get("password")
        if not isinstance(email, str) or not email or not isinstance(password, str) or not password:
            return AuthResponse.failure(ErrorCode.INVALID_CREDENTIALS, "Email and password are required")
        if self._store.find_user(email) is not None:
            return AuthResponse.failure(ErrorCode.DUPLICATE_ACCOUNT, "An account with this email already exists")
        data = ((credentials.get("options") or {}).get("data") or {})
        username = data.get("username") or data.get("display_name") or email.split("@", 1)[0]
        record = self._store.add_user(
            {"id": f"new_user_{uuid4().hex[:12]}", "email": email, "password": password, "username": username}
        )
        return self._start_session(record)

    async def sign_out(self) -> AuthResponse:
        await asyncio.sleep(0)
        if self._session is not None:
            logger.info("signed out user_id=%s", self._session.user.id)
        self._session = None
        self._emit(AuthChangeEvent.SIGNED_OUT)
        return AuthResponse(user=None, session=None, error=None)

    def on_auth_state_change(self, listener: Listener) -> Subscription:
        """Register ``listener(event, session)``; must be called inside a running loop."""
        sub = Subscription(listener, self)
        self._subscriptions[sub.id] = sub
        initial = AuthChangeEvent.SIGNED_IN if self._session is not None else AuthChangeEvent.SIGNED_OUT
        sub.push(initial, self._current())
        return sub

    def close(self) -> None:
        for sub in list(self._subscriptions.values()):
            sub.unsubscribe()
