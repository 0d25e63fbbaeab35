import pytest

from inkpress.db.auth import AuthChangeEvent, AuthState
from inkpress.db.client import MockSupabaseClient
from inkpress.db.responses import ErrorCode

pytestmark = pytest.mark.anyio("asyncio")


class Recorder:
    def __init__(self):
        self.events = []

    def __call__(self, event, session):
        self.events.append((event, session.user.id if session else None))


@pytest.mark.anyio("asyncio")
async def test_starts_anonymous(client):
    resp = await client.auth.get_session()
    assert resp.session is None and resp.user is None and resp.error is None
    assert client.auth.state == AuthState.ANONYMOUS


@pytest.mark.parametrize("email,user_id", [("erin@example.com", "user2"), ("frank@example.com", "user3")])
@pytest.mark.anyio("asyncio")
async def test_every_commenter_can_sign_in(client, email, user_id):
    resp = await client.auth.sign_in_with_password({"email": email, "password": "password"})
    assert resp.error is None
    assert resp.user.id == user_id


@pytest.mark.anyio("asyncio")
async def test_sign_in_with_seeded_credentials(client):
    resp = await client.auth.sign_in_with_password({"email": "bob@example.com", "password": "password"})
    assert resp.error is None
    assert resp.user.id == "2"
    assert resp.user.display_name == "bob"

    session = await client.auth.get_session()
    assert session.session.user.id == "2"
    user = await client.auth.get_user()
    assert user.user.email == "bob@example.com"


@pytest.mark.anyio("asyncio")
async def test_wrong_password_keeps_prior_state(client):
    await client.auth.sign_in_with_password({"email": "bob@example.com", "password": "password"})
    resp = await client.auth.sign_in_with_password({"email": "bob@example.com", "password": "nope"})
    assert resp.error.code == ErrorCode.INVALID_CREDENTIALS
    assert resp.user is None

    session = await client.auth.get_session()
    assert session.session.user.id == "2"


@pytest.mark.anyio("asyncio")
async def test_sign_up_then_sign_in_round_trip(client):
    created = await client.auth.sign_up({"email": "newbie@example.com", "password": "secret1"})
    assert created.error is None
    assert created.user.display_name == "newbie"
    assert created.user.id.startswith("new_user_")

    await client.auth.sign_out()
    resp = await client.auth.sign_in_with_password({"email": "newbie@example.com", "password": "secret1"})
    assert resp.error is None
    session = await client.auth.get_session()
    assert session.session.user.id == created.user.id


@pytest.mark.anyio("asyncio")
async def test_sign_up_uses_supplied_username(client):
    resp = await client.auth.sign_up(
        {"email": "x@example.com", "password": "secret1", "options": {"data": {"username": "Xavier"}}}
    )
    assert resp.user.display_name == "Xavier"
    assert resp.user.user_metadata == {"username": "Xavier"}


@pytest.mark.anyio("asyncio")
async def test_sign_up_duplicate_email(client):
    resp = await client.auth.sign_up({"email": "alice@example.com", "password": "whatever"})
    assert resp.error.code == ErrorCode.DUPLICATE_ACCOUNT
    assert client.auth.state == AuthState.ANONYMOUS


@pytest.mark.anyio("asyncio")
async def test_sign_out_clears_session(client):
    await client.auth.sign_in_with_password({"email": "alice@example.com", "password": "password"})
    resp = await client.auth.sign_out()
    assert resp.error is None
    session = await client.auth.get_session()
    assert session.session is None


@pytest.mark.anyio("asyncio")
async def test_listener_gets_initial_event_then_transitions(client):
    rec = Recorder()
    sub = client.auth.on_auth_state_change(rec)
    assert rec.events == []  # delivery is asynchronous
    await sub.flush()
    assert rec.events == [(AuthChangeEvent.SIGNED_OUT, None)]

    await client.auth.sign_in_with_password({"email": "alice@example.com", "password": "password"})
    await client.auth.sign_out()
    await sub.flush()
    assert rec.events == [
        (AuthChangeEvent.SIGNED_OUT, None),
        (AuthChangeEvent.SIGNED_IN, "1"),
        (AuthChangeEvent.SIGNED_OUT, None),
    ]


@pytest.mark.anyio("asyncio")
async def test_signed_out_once_per_sign_out_call(client):
    await client.auth.sign_in_with_password({"email": "alice@example.com", "password": "password"})
    rec = Recorder()
    sub = client.auth.on_auth_state_change(rec)
    await client.auth.sign_out()
    await client.auth.sign_out()
    await sub.flush()
    outs = [e for e, _ in rec.events if e == AuthChangeEvent.SIGNED_OUT]
    assert rec.events[0] == (AuthChangeEvent.SIGNED_IN, "1")
    assert len(outs) == 2


@pytest.mark.anyio("asyncio")
async def test_failed_sign_in_emits_nothing(client):
    rec = Recorder()
    sub = client.auth.on_auth_state_change(rec)
    await client.auth.sign_in_with_password({"email": "alice@example.com", "password": "bad"})
    await sub.flush()
    assert rec.events == [(AuthChangeEvent.SIGNED_OUT, None)]


@pytest.mark.anyio("asyncio")
async def test_unsubscribe_stops_delivery(client):
    rec = Recorder()
    sub = client.auth.on_auth_state_change(rec)
    await sub.flush()
    sub.unsubscribe()
    await client.auth.sign_in_with_password({"email": "alice@example.com", "password": "password"})
    await sub.flush()
    assert rec.events == [(AuthChangeEvent.SIGNED_OUT, None)]


@pytest.mark.anyio("asyncio")
async def test_unsubscribe_drops_queued_events(client):
    rec = Recorder()
    sub = client.auth.on_auth_state_change(rec)
    sub.unsubscribe()
    await client.auth.sign_out()
    assert rec.events == []


@pytest.mark.anyio("asyncio")
async def test_listeners_are_independent(client):
    first, second = Recorder(), Recorder()
    sub1 = client.auth.on_auth_state_change(first)
    await client.auth.sign_in_with_password({"email": "alice@example.com", "password": "password"})
    sub2 = client.auth.on_auth_state_change(second)
    await client.auth.sign_out()
    await sub1.flush()
    await sub2.flush()
    assert [e for e, _ in first.events] == [
        AuthChangeEvent.SIGNED_OUT,
        AuthChangeEvent.SIGNED_IN,
        AuthChangeEvent.SIGNED_OUT,
    ]
    assert [e for e, _ in second.events] == [AuthChangeEvent.SIGNED_IN, AuthChangeEvent.SIGNED_OUT]


@pytest.mark.anyio("asyncio")
async def test_async_and_failing_listeners(client):
    seen = []

    async def async_listener(event, session):
        seen.append(event)

    def broken(event, session):
        raise RuntimeError("boom")

    good = client.auth.on_auth_state_change(async_listener)
    bad = client.auth.on_auth_state_change(broken)
    await client.auth.sign_in_with_password({"email": "alice@example.com", "password": "password"})
    await good.flush()
    await bad.flush()
    assert seen == [AuthChangeEvent.SIGNED_OUT, AuthChangeEvent.SIGNED_IN]


@pytest.mark.anyio("asyncio")
async def test_default_user_starts_signed_in():
    c = MockSupabaseClient(latency=0, default_user_email="carol@example.com")
    try:
        resp = await c.auth.get_session()
        assert resp.session.user.id == "3"
    finally:
        c.close()


@pytest.mark.anyio("asyncio")
async def test_session_is_a_copy(client):
    await client.auth.sign_in_with_password({"email": "alice@example.com", "password": "password"})
    resp = await client.auth.get_session()
    resp.session.user.user_metadata["username"] = "mallory"
    again = await client.auth.get_session()
    assert again.session.user.user_metadata["username"] == "alice"
