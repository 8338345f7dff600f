import time

from jose import jwt

from pmc_portal.client.route_guard import GuardOutcome, guard
from pmc_portal.client.session import (
    ROLE_CLAIM_URI,
    TOKEN_KEY,
    InactivityMonitor,
    SessionState,
    SessionStore,
    daemon_timer,
)
from pmc_portal.client.storage import JsonFileStorage, MemoryStorage
from pmc_portal.core.roles import PortalRole


def make_token(exp_offset: int = 3600, **claims) -> str:
    claims.setdefault("sub", "7")
    claims.setdefault("email", "officer@pmc.example.com")
    claims["exp"] = int(time.time()) + exp_offset
    return jwt.encode(claims, "any-key", algorithm="HS256")


def test_bootstrap_without_token():
    store = SessionStore(MemoryStorage())
    assert store.state.is_loading
    state = store.bootstrap()
    assert not state.is_loading
    assert not state.is_authenticated


def test_bootstrap_restores_and_maps_role():
    token = make_token(role="JuniorEngineer")
    store = SessionStore(MemoryStorage({TOKEN_KEY: token}))
    state = store.bootstrap()
    assert state.is_authenticated
    assert state.user.role == PortalRole.JUNIOR_ARCHITECT
    assert state.user.id == "7"
    assert state.token == token


def test_bootstrap_reads_microsoft_role_claim():
    token = make_token(**{ROLE_CLAIM_URI: "AssistantEngineer"})
    store = SessionStore(MemoryStorage({TOKEN_KEY: token}))
    assert store.bootstrap().user.role == PortalRole.ASSISTANT_ARCHITECT


def test_bootstrap_clears_expired_token():
    storage = MemoryStorage({TOKEN_KEY: make_token(exp_offset=-10, role="Clerk")})
    state = SessionStore(storage).bootstrap()
    assert not state.is_authenticated
    assert not state.is_loading
    assert storage.get(TOKEN_KEY) is None


def test_bootstrap_clears_garbage_token():
    storage = MemoryStorage({TOKEN_KEY: "definitely.not.a-jwt"})
    state = SessionStore(storage).bootstrap()
    assert not state.is_authenticated
    assert storage.get(TOKEN_KEY) is None


def test_login_prefers_response_role_and_persists_token(tmp_path):
    storage = JsonFileStorage(tmp_path / "client.json")
    store = SessionStore(storage)
    token = make_token(role="User")
    state = store.login(token, email="ee@pmc.example.com", role="ExecutiveEngineer")
    assert state.user.role == PortalRole.EXECUTIVE_ENGINEER
    assert state.user.email == "ee@pmc.example.com"

    reopened = SessionStore(JsonFileStorage(tmp_path / "client.json"))
    assert reopened.bootstrap().is_authenticated

    store.logout()
    assert JsonFileStorage(tmp_path / "client.json").get(TOKEN_KEY) is None


def test_subscribers_see_every_change():
    store = SessionStore(MemoryStorage())
    seen = []
    unsubscribe = store.subscribe(lambda s: seen.append(s.is_authenticated))
    store.login(make_token(role="Clerk"))
    store.logout()
    unsubscribe()
    store.login(make_token(role="Clerk"))
    assert seen == [True, False]


class FakeTimer:
    created = []

    def __init__(self, interval, callback):
        self.interval = interval
        self.callback = callback
        self.started = False
        self.cancelled = False
        FakeTimer.created.append(self)

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True

    def fire(self):
        self.callback()


def test_inactivity_logs_out():
    FakeTimer.created = []
    store = SessionStore(MemoryStorage())
    monitor = InactivityMonitor(store, timeout=1800, timer_factory=FakeTimer)
    assert not monitor.active

    store.login(make_token(role="Clerk"))
    assert monitor.active
    first = FakeTimer.created[-1]
    assert first.interval == 1800 and first.started

    monitor.record_activity("keydown")
    assert first.cancelled
    second = FakeTimer.created[-1]
    assert second is not first

    monitor.record_activity("resize")
    assert FakeTimer.created[-1] is second

    second.fire()
    assert not store.state.is_authenticated
    assert not monitor.active
    monitor.close()


def test_inactivity_timer_stops_on_logout():
    FakeTimer.created = []
    store = SessionStore(MemoryStorage())
    monitor = InactivityMonitor(store, timer_factory=FakeTimer)
    store.login(make_token(role="User"))
    timer = FakeTimer.created[-1]
    store.logout()
    assert timer.cancelled
    monitor.record_activity("click")
    assert len(FakeTimer.created) == 1


def _signed_in(role: PortalRole) -> SessionState:
    store = SessionStore(MemoryStorage())
    store.login(make_token(), role={
        PortalRole.USER: "User",
        PortalRole.ASSISTANT_ARCHITECT: "AssistantArchitect",
        PortalRole.EXECUTIVE_ENGINEER: "ExecutiveEngineer",
    }[role])
    return store.state


def test_route_guard():
    loading = SessionState()
    anonymous = SessionState(is_loading=False)

    assert guard(loading, "/user/dashboard").outcome == GuardOutcome.LOADING

    decision = guard(anonymous, "/officers/chief-engineer/applications")
    assert decision.outcome == GuardOutcome.REDIRECT
    assert decision.location == "/auth/login"
    assert decision.from_path == "/officers/chief-engineer/applications"

    citizen = _signed_in(PortalRole.USER)
    assert guard(citizen, "/payment/checkout").outcome == GuardOutcome.RENDER
    decision = guard(citizen, "/officers/clerk/dashboard")
    assert decision.outcome == GuardOutcome.REDIRECT
    assert decision.location == "/unauthorized"

    assistant = _signed_in(PortalRole.ASSISTANT_ARCHITECT)
    assert guard(assistant, "/officers/assistant-engineer/dashboard").outcome == GuardOutcome.RENDER
    assert guard(assistant, "/officers/assistant-architect/dashboard").outcome == GuardOutcome.RENDER

    executive = _signed_in(PortalRole.EXECUTIVE_ENGINEER)
    assert guard(executive, "/officers/chief-engineer").outcome == GuardOutcome.RENDER

    assert guard(anonymous, "/auth/login").outcome == GuardOutcome.RENDER
    assert guard(anonymous, "/no/such/page").outcome == GuardOutcome.NOT_FOUND
    assert guard(citizen, "/anything", allowed_roles=frozenset({PortalRole.ADMIN})).location == "/unauthorized"


def test_default_inactivity_timer_is_daemon():
    timer = daemon_timer(60, lambda: None)
    assert timer.daemon

    store = SessionStore(MemoryStorage())
    monitor = InactivityMonitor(store)
    store.login(make_token(role="Clerk"))
    try:
        assert monitor.active
        assert monitor._timer.daemon
    finally:
        monitor.close()
    assert not monitor.active
