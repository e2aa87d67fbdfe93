"""Read-side helpers shared by the query modules."""

from dataclasses import dataclass
from datetime import UTC

from protean.utils.globals import current_domain

PAGE_SIZE = 100


@dataclass(frozen=True)
class Page:
    items: list
    total: int
    page: int
    limit: int


def fetch_all(entity_cls, **filters) -> list:
    """Every record matching ``filters``, walking the DAO page by page."""
    dao = current_domain.repository_for(entity_cls)._dao
    records = []
    offset = 0
    while True:
        query = dao.query.filter(**filters) if filters else dao.query
        batch = query.offset(offset).limit(PAGE_SIZE).all().items
        records.extend(batch)
        if len(batch) < PAGE_SIZE:
            return records
        offset += PAGE_SIZE


def fetch_one(entity_cls, **filters):
    items = current_domain.repository_for(entity_cls)._dao.query.filter(**filters).limit(1).all().items
    return items[0] if items else None


def paginate(records: list, page: int = 1, limit: int = 20) -> Page:
    page = max(int(page or 1), 1)
    limit = max(int(limit or 20), 1)
    start = (page - 1) * limit
    return Page(items=records[start : start + limit], total=len(records), page=page, limit=limit)


def newest_first(records: list, field: str = "created_at") -> list:
    return sorted(records, key=lambda r: (getattr(r, field) is not None, getattr(r, field)), reverse=True)


def as_utc(value):
    """Treat naive datetimes read back from a provider as UTC."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=UTC)
