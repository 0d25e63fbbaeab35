"""Seed data for the emulator: posts, comments, profiles and the auth user set."""

from __future__ import annotations

from typing import Any, Dict, List

# Foreign keys used to embed a related row: (table, relation) -> column on table.
RELATIONS: Dict[tuple[str, str], str] = {
    ("posts", "profiles"): "author_id",
    ("comments", "profiles"): "user_id",
    ("comments", "posts"): "post_id",
}

# Column defaults applied on insert, mirroring the database schema.
TABLE_DEFAULTS: Dict[str, Dict[str, Any]] = {
    "posts": {"status": "draft", "view_count": 0, "like_count": 0, "summary": ""},
    "comments": {},
    "profiles": {"role": "user"},
}

TIMESTAMPED_TABLES = frozenset({"posts", "comments", "profiles"})

POSTS: List[Dict[str, Any]] = [
    {
        "id": "1",
        "title": "What's new in React 18",
        "summary": "React 18 ships concurrent rendering, better Suspense and a handful of new hooks. "
        "This post walks through each of them...",
        "content": """# What's new in React 18

React 18 is a major release with a number of new features and improvements.

## Highlights

### 1. Concurrent rendering
Concurrent rendering is the headline feature of React 18...

### 2. Suspense improvements
Suspense got noticeably better in React 18...

### 3. New hooks
- `useId`: generate unique ids
- `useTransition`: mark non-urgent state updates
- `useDeferredValue`: defer non-critical updates

## Summary

The new features give developers better performance and a nicer workflow...""",
        "status": "published",
        "view_count": 156,
        "like_count": 12,
        "author_id": "1",
        "created_at": "2024-01-15T10:30:00Z",
        "updated_at": "2024-01-15T10:30:00Z",
    },
    {
        "id": "2",
        "title": "A deep dive into the Vue 3 Composition API",
        "summary": "The Composition API changes how component logic is organised in Vue 3...",
        "content": """# A deep dive into the Vue 3 Composition API

The Composition API gives better logic reuse and code organisation.

## setup()

Everything starts in the `setup()` function:

```javascript
import { ref, reactive, computed } from 'vue'

export default {
  setup() {
    const count = ref(0)
    const doubled = computed(() => count.value * 2)
    return { count, doubled }
  }
}
```

## Why bother

- better TypeScript support
- simpler logic reuse
- more flexible code organisation""",
        "status": "published",
        "view_count": 89,
        "like_count": 8,
        "author_id": "2",
        "created_at": "2024-01-12T14:20:00Z",
        "updated_at": "2024-01-12T14:20:00Z",
    },
    {
        "id": "3",
        "title": "TypeScript best practices",
        "summary": "TypeScript adds a type system to JavaScript and keeps large projects maintainable...",
        "content": """# TypeScript best practices

## Interfaces

```typescript
interface User {
  id: string
  name: string
  email?: string
  readonly createdAt: Date
}
```

## Generics

```typescript
function createArray<T>(items: T[]): T[] {
  return new Array().concat(items)
}
```

## Utility types
- Partial<T>
- Required<T>
- Pick<T, K>""",
        "status": "published",
        "view_count": 234,
        "like_count": 18,
        "author_id": "3",
        "created_at": "2024-01-10T09:15:00Z",
        "updated_at": "2024-01-10T09:15:00Z",
    },
    {
        "id": "4",
        "title": "Front-end performance tips",
        "summary": "Every front-end developer ends up optimising page performance sooner or later...",
        "content": """# Front-end performance tips

## Images
- use modern formats (WebP, AVIF)
- lazy load
- responsive images

## JavaScript
- requestAnimationFrame
- avoid forced synchronous layout
- virtual scrolling

## CSS
- prefer transform over left/top
- use will-change sparingly
- CSS containment""",
        "status": "draft",
        "view_count": 0,
        "like_count": 0,
        "author_id": "user1",
        "created_at": "2024-01-20T15:30:00Z",
        "updated_at": "2024-01-20T15:30:00Z",
    },
]

COMMENTS: List[Dict[str, Any]] = [
    {
        "id": "1",
        "post_id": "1",
        "user_id": "user1",
        "content": "Great write-up! The concurrent rendering section was really helpful.",
        "created_at": "2024-01-16T08:30:00Z",
        "updated_at": "2024-01-16T08:30:00Z",
    },
    {
        "id": "2",
        "post_id": "1",
        "user_id": "user2",
        "content": "Would love to see more real-world useTransition examples.",
        "created_at": "2024-01-16T10:15:00Z",
        "updated_at": "2024-01-16T10:15:00Z",
    },
    {
        "id": "3",
        "post_id": "2",
        "user_id": "user3",
        "content": "The Composition API really is more flexible than the Options API.",
        "created_at": "2024-01-13T14:20:00Z",
        "updated_at": "2024-01-13T14:20:00Z",
    },
    {
        "id": "4",
        "post_id": "3",
        "user_id": "user1",
        "content": "Types make maintaining a big codebase so much easier. Recommended!",
        "created_at": "2024-01-11T09:45:00Z",
        "updated_at": "2024-01-11T09:45:00Z",
    },
]

PROFILES: List[Dict[str, Any]] = [
    {"id": "1", "username": "alice", "role": "admin", "created_at": "2024-01-01T00:00:00Z", "updated_at": "2024-01-01T00:00:00Z"},
    {"id": "2", "username": "bob", "role": "blogger", "created_at": "2024-01-02T00:00:00Z", "updated_at": "2024-01-02T00:00:00Z"},
    {"id": "3", "username": "carol", "role": "blogger", "created_at": "2024-01-03T00:00:00Z", "updated_at": "2024-01-03T00:00:00Z"},
    {"id": "user1", "username": "dave", "role": "user", "created_at": "2024-01-04T00:00:00Z", "updated_at": "2024-01-04T00:00:00Z"},
    {"id": "user2", "username": "erin", "role": "user", "created_at": "2024-01-05T00:00:00Z", "updated_at": "2024-01-05T00:00:00Z"},
    {"id": "user3", "username": "frank", "role": "user", "created_at": "2024-01-06T00:00:00Z", "updated_at": "2024-01-06T00:00:00Z"},
]

# Credentials known to the auth emulator. Not reachable through table().
USERS: List[Dict[str, Any]] = [
    {"id": "1", "email": "alice@example.com", "password": "password", "username": "alice"},
    {"id": "2", "email": "bob@example.com", "password": "password", "username": "bob"},
    {"id": "3", "email": "carol@example.com", "password": "password", "username": "carol"},
    {"id": "user1", "email": "dave@example.com", "password": "password", "username": "dave"},
    {"id": "user2", "email": "erin@example.com", "password": "password", "username": "erin"},
    {"id": "user3", "email": "frank@example.com", "password": "password", "username": "frank"},
]

TABLES: Dict[str, List[Dict[str, Any]]] = {
    "posts": POSTS,
    "comments": COMMENTS,
    "profiles": PROFILES,
}
