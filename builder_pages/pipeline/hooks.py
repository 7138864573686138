"""
Extension points for the record pipeline.

Each hook is optional. Leaving one unset selects its default:

    filter                  keep every qualifying record
    resolve_dynamic_entries return the batch unchanged
    map_entry_to_context    contribute no extra context

Example:
    >>> async def add_title(record, query):
    ...     return {"title": record["content"]["data"].get("title")}
    >>> hooks = PageHooks(
    ...     filter=lambda record: not record["content"]["data"].get("draft"),
    ...     map_entry_to_context=add_title,
    ... )
"""

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Optional

Record = Dict[str, Any]
QueryFn = Callable[..., Awaitable[Dict[str, Any]]]

FilterFn = Callable[[Record], bool]
ResolveFn = Callable[[List[Record]], Awaitable[List[Record]]]
MapContextFn = Callable[[Record, QueryFn], Awaitable[Dict[str, Any]]]


def keep_all(record: Record) -> bool:
    return True


async def identity_batch(records: List[Record]) -> List[Record]:
    return records


async def empty_context(record: Record, query: QueryFn) -> Dict[str, Any]:
    return {}


@dataclass
class PageHooks:
    """User-supplied callables that customise how records become pages."""
    filter: Optional[FilterFn] = None
    resolve_dynamic_entries: Optional[ResolveFn] = None
    map_entry_to_context: Optional[MapContextFn] = None

    @property
    def record_filter(self) -> FilterFn:
        return self.filter or keep_all

    @property
    def resolver(self) -> ResolveFn:
        return self.resolve_dynamic_entries or identity_batch

    @property
    def context_mapper(self) -> MapContextFn:
        return self.map_entry_to_context or empty_context
