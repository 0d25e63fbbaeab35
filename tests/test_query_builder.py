import asyncio
import time

import pytest

from inkpress.db.client import MockSupabaseClient
from inkpress.db.responses import ErrorCode
from inkpress.db.store import FixtureStore

pytestmark = pytest.mark.anyio("asyncio")


@pytest.mark.anyio("asyncio")
async def test_published_page_scenario(seeded_client):
    resp = await (
        seeded_client.table("posts")
        .eq("status", "published")
        .order("created_at", ascending=False)
        .range(0, 9)
        .execute()
    )

    assert resp.error is None
    assert resp.count == 9
    assert len(resp.data) == 9
    stamps = [row["created_at"] for row in resp.data]
    assert stamps == sorted(stamps, reverse=True)
    assert all(row["status"] == "published" for row in resp.data)


@pytest.mark.anyio("asyncio")
async def test_filters_and_together(seeded_client):
    resp = await seeded_client.table("posts").eq("status", "published").eq("author_id", "1").execute()
    expected = [
        r for r in seeded_client.store.snapshot("posts") if r["status"] == "published" and r["author_id"] == "1"
    ]
    assert [r["id"] for r in resp.data] == [r["id"] for r in expected]
    assert resp.count == len(expected)


@pytest.mark.anyio("asyncio")
async def test_in_matches_membership(seeded_client):
    resp = await seeded_client.table("posts").in_("id", ["1", "3", "99"]).execute()
    assert [r["id"] for r in resp.data] == ["1", "3"]


@pytest.mark.anyio("asyncio")
async def test_unknown_column_never_matches(seeded_client):
    resp = await seeded_client.table("posts").eq("no_such_column", None).execute()
    assert resp.data == []
    assert resp.count == 0
    assert resp.error is None


@pytest.mark.anyio("asyncio")
async def test_malformed_filter_values_match_nothing(seeded_client):
    resp = await seeded_client.table("posts").in_("id", 5).execute()
    assert resp.data == [] and resp.error is None

    resp = await seeded_client.table("posts").in_("id", "1").execute()
    assert resp.data == []

    resp = await seeded_client.table("posts").eq(None, "1").execute()
    assert resp.data == []


@pytest.mark.anyio("asyncio")
async def test_eq_is_exact_equality(seeded_client):
    resp = await seeded_client.table("posts").eq("id", 1).execute()
    assert resp.data == []


@pytest.mark.parametrize("start,end,expected", [(0, 4, 5), (10, 14, 2), (12, 20, 0), (3, 2, 0), (11, 11, 1), (-2, 2, 3), (-5, -1, 0)])
@pytest.mark.anyio("asyncio")
async def test_range_window_size_and_count(seeded_client, start, end, expected):
    resp = await seeded_client.table("posts").order("id").range(start, end).execute()
    assert len(resp.data) == expected
    assert resp.count == 12


@pytest.mark.anyio("asyncio")
async def test_range_starts_at_offset(seeded_client):
    full = await seeded_client.table("posts").order("created_at").execute()
    page = await seeded_client.table("posts").order("created_at").range(4, 6).execute()
    assert page.data == full.data[4:7]


@pytest.mark.anyio("asyncio")
async def test_limit_uses_current_offset(seeded_client):
    resp = await seeded_client.table("posts").order("created_at").limit(2).execute()
    assert [r["id"] for r in resp.data] == ["1", "2"]


@pytest.mark.anyio("asyncio")
async def test_single_zero_one_many(seeded_client):
    none = await seeded_client.table("posts").eq("id", "missing").single().execute()
    assert none.data is None and none.error is None

    one = await seeded_client.table("posts").eq("id", "3").single().execute()
    assert isinstance(one.data, dict) and one.data["id"] == "3"

    many = await seeded_client.table("posts").eq("status", "published").order("created_at", desc=True).single().execute()
    assert many.data["id"] == "12"
    assert many.count == 9


@pytest.mark.anyio("asyncio")
async def test_only_last_order_applies(seeded_client):
    resp = await (
        seeded_client.table("posts")
        .order("created_at", desc=True)
        .order("author_id", ascending=False)
        .execute()
    )
    ids = [r["id"] for r in resp.data]
    # author "2" first, ties keep table order rather than the earlier created_at sort
    assert ids == ["2", "4", "6", "8", "10", "12", "1", "3", "5", "7", "9", "11"]


@pytest.mark.anyio("asyncio")
async def test_resolving_twice_is_idempotent(seeded_client):
    query = seeded_client.table("posts").eq("status", "published").order("view_count", desc=True).range(0, 3)
    first = await query.execute()
    second = await query.execute()
    assert first.data == second.data
    assert first.count == second.count


@pytest.mark.anyio("asyncio")
async def test_projection_and_embedding(client):
    resp = await client.table("posts").select("id, title").eq("id", "1").execute()
    assert resp.data == [{"id": "1", "title": "What's new in React 18"}]

    resp = await client.table("comments").select("*, profiles(username), posts(title, id)").eq("id", "2").single().execute()
    row = resp.data
    assert row["content"].startswith("Would love")
    assert row["profiles"] == {"username": "erin"}
    assert row["posts"] == {"title": "What's new in React 18", "id": "1"}


@pytest.mark.anyio("asyncio")
async def test_embedding_missing_relation_is_none(seeded_client):
    await seeded_client.table("posts").update({"author_id": "ghost"}).eq("id", "1").execute()
    resp = await seeded_client.table("posts").select("*, profiles(username)").eq("id", "1").single().execute()
    assert resp.data["profiles"] is None


@pytest.mark.anyio("asyncio")
async def test_unknown_table_and_users_are_empty(client):
    resp = await client.table("nope").select("*").execute()
    assert resp.data == [] and resp.error is None and resp.count == 0

    resp = await client.table("users").select("*").execute()
    assert resp.data == []


@pytest.mark.anyio("asyncio")
async def test_results_do_not_alias_store(client):
    resp = await client.table("posts").eq("id", "1").single().execute()
    resp.data["title"] = "changed"
    again = await client.table("posts").eq("id", "1").single().execute()
    assert again.data["title"] != "changed"


@pytest.mark.anyio("asyncio")
async def test_writes_are_visible_to_later_reads(client):
    inserted = await client.table("comments").insert([{"post_id": "1", "user_id": "1", "content": "hi"}]).execute()
    assert inserted.error is None and inserted.count == 1
    new_id = inserted.data[0]["id"]
    assert inserted.data[0]["created_at"].endswith("Z")

    updated = await client.table("comments").update({"content": "edited"}).eq("id", new_id).execute()
    assert updated.data[0]["content"] == "edited"

    read = await client.table("comments").eq("id", new_id).single().execute()
    assert read.data["content"] == "edited"

    deleted = await client.table("comments").delete().eq("id", new_id).execute()
    assert [r["id"] for r in deleted.data] == [new_id]

    gone = await client.table("comments").eq("id", new_id).single().execute()
    assert gone.data is None


@pytest.mark.anyio("asyncio")
async def test_insert_applies_table_defaults(client):
    resp = await client.table("posts").insert({"title": "t", "content": "c", "author_id": "1"}).execute()
    row = resp.data[0]
    assert row["status"] == "draft"
    assert row["view_count"] == 0 and row["like_count"] == 0
    assert row["id"]


@pytest.mark.anyio("asyncio")
async def test_read_after_write_is_invalid_state(client):
    before = client.store.snapshot("comments")
    resp = await client.table("comments").insert({"post_id": "1", "user_id": "1", "content": "x"}).select("*").execute()
    assert resp.data is None
    assert resp.error.code == ErrorCode.INVALID_QUERY_STATE
    assert client.store.snapshot("comments") == before


@pytest.mark.anyio("asyncio")
async def test_write_after_read_and_double_write_are_invalid(client):
    resp = await client.table("posts").select("*").delete().eq("id", "1").execute()
    assert resp.error.code == ErrorCode.INVALID_QUERY_STATE

    resp = await client.table("posts").update({"title": "x"}).delete().eq("id", "1").execute()
    assert resp.error.code == ErrorCode.INVALID_QUERY_STATE

    still = await client.table("posts").eq("id", "1").single().execute()
    assert still.data["title"] == "What's new in React 18"


@pytest.mark.anyio("asyncio")
async def test_unfiltered_update_and_delete_are_rejected(client):
    resp = await client.table("posts").delete().execute()
    assert resp.error.code == ErrorCode.INVALID_QUERY_STATE
    resp = await client.table("posts").update({"status": "draft"}).execute()
    assert resp.error.code == ErrorCode.INVALID_QUERY_STATE
    assert len(client.store.snapshot("posts")) == 4


@pytest.mark.anyio("asyncio")
async def test_execute_suspends_for_latency():
    slow = MockSupabaseClient(latency=0.02)
    t0 = time.perf_counter()
    await slow.table("posts").execute()
    assert time.perf_counter() - t0 >= 0.015


@pytest.mark.anyio("asyncio")
async def test_concurrent_writes_do_not_interleave():
    c = MockSupabaseClient(FixtureStore(tables={"posts": []}), latency=0.001)
    await asyncio.gather(
        *(c.table("posts").insert({"title": f"p{i}", "content": "c", "author_id": "1"}).execute() for i in range(20))
    )
    resp = await c.table("posts").execute()
    assert resp.count == 20
    assert len({r["id"] for r in resp.data}) == 20
