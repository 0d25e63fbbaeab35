import os
import sys
from pathlib import Path

import pytest

# Ensure repo root on sys.path for imports like `inkpress...`
ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

os.environ.setdefault("BACKEND_MODE", "mock")
os.environ["MOCK_LATENCY_MS"] = "0"
os.environ.setdefault("LOG_LEVEL", "WARNING")

from inkpress.db.client import MockSupabaseClient  # noqa: E402
from inkpress.db.store import FixtureStore  # noqa: E402


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def client():
    c = MockSupabaseClient(latency=0)
    yield c
    c.close()


def make_posts(published: int = 9, drafts: int = 3):
    """``published + drafts`` posts, one day apart, statuses interleaved."""
    rows = []
    total = published + drafts
    draft_slots = set(range(1, total, max(1, total // max(drafts, 1))))
    draft_slots = set(sorted(draft_slots)[:drafts])
    for i in range(total):
        rows.append(
            {
                "id": str(i + 1),
                "title": f"Post {i + 1}",
                "content": "...",
                "status": "draft" if i in draft_slots else "published",
                "author_id": "1" if i % 2 == 0 else "2",
                "view_count": i * 10,
                "like_count": i,
                "created_at": f"2024-02-{i + 1:02d}T12:00:00Z",
                "updated_at": f"2024-02-{i + 1:02d}T12:00:00Z",
            }
        )
    return rows


@pytest.fixture
def seeded_client():
    store = FixtureStore(
        tables={
            "posts": make_posts(),
            "profiles": [
                {"id": "1", "username": "alice", "role": "admin"},
                {"id": "2", "username": "bob", "role": "blogger"},
            ],
            "comments": [],
        },
        users=[{"id": "1", "email": "alice@example.com", "password": "password", "username": "alice"}],
    )
    c = MockSupabaseClient(store, latency=0)
    yield c
    c.close()
