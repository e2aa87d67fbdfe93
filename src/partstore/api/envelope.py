"""Response envelopes shared by every route.

Success: ``{success, message, data}``; paginated responses add a
``pagination`` block.
"""

import math

from fastapi.encoders import jsonable_encoder

from partstore.shared.queries import Page


def ok(message: str, data=None) -> dict:
    body = {"success": True, "message": message}
    if data is not None:
        body["data"] = jsonable_encoder(data)
    return body


def paginated(message: str, key: str, items: list, page: Page, **extra) -> dict:
    total_pages = math.ceil(page.total / page.limit) if page.limit else 0
    return {
        "success": True,
        "message": message,
        "data": jsonable_encoder({key: items, **extra}),
        "pagination": {
            "total": page.total,
            "page": page.page,
            "limit": page.limit,
            "total_pages": total_pages,
            "has_next_page": page.page < total_pages,
            "has_prev_page": page.page > 1,
        },
    }
