"""
Standard response envelope helpers
"""
from typing import Any, Optional


def envelope(data: Any = None, message: Optional[str] = None, pagination: Optional[dict] = None, **extra) -> dict:
    """Build a `{success, message?, data?, pagination?}` response body"""
    body = {"success": True}
    if message is not None:
        body["message"] = message
    if data is not None:
        body["data"] = data
    if pagination is not None:
        body["pagination"] = pagination
    body.update(extra)
    return body


def error_body(message: str, code: str, field: Optional[str] = None) -> dict:
    body = {"success": False, "message": message, "error": code}
    if field:
        body["field"] = field
    return body


def pagination_meta(page: int, limit: int, total: int) -> dict:
    return {
        "page": page,
        "limit": limit,
        "total": total,
        "pages": (total + limit - 1) // limit if limit else 0,
    }


def normalize_paging(page: Optional[int], limit: Optional[int], default_limit: int, max_limit: int = 100):
    """Clamp page/limit query values to sane positive numbers"""
    page = page if page and page > 0 else 1
    limit = limit if limit and limit > 0 else default_limit
    return page, min(limit, max_limit)
