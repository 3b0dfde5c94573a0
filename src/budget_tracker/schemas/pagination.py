"""Service-layer pagination container.

Page[T] is a plain dataclass, not a Pydantic model: services shouldn't know
about serialization. Routers unpack it into ``paginated_response``::

    page = await list_transactions(db, user_id, pagination, sort, filters)
    return paginated_response(
        [TransactionResponse.model_validate(t) for t in page.items],
        page.page,
        page.limit,
        page.total,
    )
"""

from dataclasses import dataclass


@dataclass
class Page[T]:
    items: list[T]
    total: int
    page: int
    limit: int
