from typing import Any, Dict, List, Tuple
from datetime import datetime, timezone

def current_timestamp() -> datetime:
    """Get current UTC timestamp"""
    return datetime.now(timezone.utc)

def format_timestamp(dt: datetime) -> str:
    """Format datetime the way the fixtures store it (second precision, ``Z`` suffix)"""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")

def now_iso() -> str:
    return format_timestamp(current_timestamp())

def page_bounds(page: int, per_page: int) -> Tuple[int, int]:
    """Inclusive ``(from, to)`` row bounds for a 1-based page"""
    page = max(1, int(page))
    per_page = max(1, int(per_page))
    start = (page - 1) * per_page
    return start, start + per_page - 1

def paginate_meta(total: int, page: int, per_page: int) -> Dict[str, Any]:
    """Pagination block for list responses"""
    pages = (total + per_page - 1) // per_page if per_page else 0
    return {
        'page': page,
        'per_page': per_page,
        'total': total,
        'pages': pages,
        'has_next': page < pages,
        'has_prev': page > 1,
    }

def sum_column(rows: List[Dict[str, Any]], column: str) -> int:
    """Sum a numeric column, treating missing/null as 0"""
    return sum((row.get(column) or 0) for row in rows)
