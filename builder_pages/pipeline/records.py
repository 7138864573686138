"""
RecordPipeline - turns one model's batch of records into pages.

Steps, in order:
    1. Qualification: keep records with a URL whose status is "published"
    2. User filter (sync predicate)
    3. Dynamic resolution (async, whole batch)
    4. Context mapping (async, per record)
    5. Emission to the page registry

Disqualified records are dropped silently. Hook errors are not caught.
"""

from typing import Any, Dict, Iterable, List, Mapping, Optional

from builder_pages.pipeline.hooks import PageHooks, QueryFn, Record
from builder_pages.registry import PageRegistry, PageRequest
from builder_pages.utils.logging_config import get_logger

logger = get_logger("pipeline")

PUBLISHED = "published"


def get_url(record: Any) -> Optional[str]:
    """Return ``record.content.data.url``, or None when any level is missing."""
    if not isinstance(record, Mapping):
        return None
    content = record.get("content")
    if not isinstance(content, Mapping):
        return None
    data = content.get("data")
    if not isinstance(data, Mapping):
        return None
    return data.get("url")


def is_qualifying(record: Any) -> bool:
    """A record becomes a page only if it has a URL and is published."""
    if not get_url(record):
        return False
    return record["content"].get("published") == PUBLISHED


def qualifying(records: Iterable[Any]) -> List[Record]:
    return [record for record in records if is_qualifying(record)]


def merge_context(
    global_context: Optional[Mapping[str, Any]],
    mapped_context: Optional[Mapping[str, Any]],
) -> Dict[str, Any]:
    """Shallow merge; keys from the mapped context win."""
    return {**(global_context or {}), **(mapped_context or {})}


class RecordPipeline:
    """Filters, resolves and maps records, then creates a page for each."""

    def __init__(
        self,
        registry: PageRegistry,
        query_fn: QueryFn,
        hooks: Optional[PageHooks] = None,
        global_context: Optional[Mapping[str, Any]] = None,
    ):
        """
        Args:
            registry: Receives the generated pages
            query_fn: Handed to the context mapper for follow-up queries
            hooks: Optional filter/resolver/context mapper
            global_context: Merged into every page's context
        """
        self._registry = registry
        self._query_fn = query_fn
        self._hooks = hooks or PageHooks()
        self._global_context = dict(global_context or {})

    async def process(self, model: str, component: str, records: List[Record]) -> int:
        """
        Create pages for one model's batch.

        Returns:
            Number of pages emitted
        """
        entries = qualifying(records)
        dropped = len(records) - len(entries)
        if dropped:
            logger.debug(f"{model}: skipped {dropped} unpublished or URL-less records")

        record_filter = self._hooks.record_filter
        entries = [entry for entry in entries if record_filter(entry)]

        entries = await self._hooks.resolver(entries)
        # Resolvers may return rewritten records
        entries = qualifying(entries)

        context_mapper = self._hooks.context_mapper
        emitted = 0
        for entry in entries:
            mapped = await context_mapper(entry, self._query_fn)
            self._registry.create_page(
                PageRequest(
                    path=get_url(entry),
                    component=component,
                    context=merge_context(self._global_context, mapped),
                )
            )
            emitted += 1

        return emitted
