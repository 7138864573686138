"""
PageCoordinator - drives paginated fetching of every configured model.

Each round issues one query that asks every model for ``limit`` records at
its current offset. After a round, each model's offset advances by the
number of records it returned; a model that returned a full page may have
more, so another round follows. The build ends after the first round in
which no model returned a full page.

Every round re-queries every model, including models that already ran dry,
so the round shape stays uniform.

Rounds run strictly one after another: fetch, offset update and record
pipeline for all models complete before the next round's query is built.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from builder_pages.config import PagesConfig, RetryConfig
from builder_pages.coordination.executor import QueryFn, RetryingFetchExecutor
from builder_pages.cursors import FetchRoundState
from builder_pages.pipeline import PageHooks, RecordPipeline
from builder_pages.queries import build_round_query
from builder_pages.registry import PageRegistry
from builder_pages.utils.exceptions import GraphQLQueryError
from builder_pages.utils.logging_config import get_logger

logger = get_logger("coordinator")


@dataclass
class BuildStats:
    """Summary of one page build."""
    rounds: int = 0
    attempts: int = 0
    pages_created: int = 0
    offsets: Dict[str, int] = field(default_factory=dict)
    pages_by_model: Dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "rounds": self.rounds,
            "attempts": self.attempts,
            "pages_created": self.pages_created,
            "offsets": dict(self.offsets),
            "pages_by_model": dict(self.pages_by_model),
        }


class PageCoordinator:
    """
    Fetches all models round by round and feeds each batch to the record
    pipeline.

    The fetch round state is created fresh for every ``create_pages`` call
    and is never shared with hooks.
    """

    def __init__(
        self,
        options: PagesConfig,
        registry: PageRegistry,
        query_fn: QueryFn,
        hooks: Optional[PageHooks] = None,
        retry_config: Optional[RetryConfig] = None,
    ):
        """
        Args:
            options: Models, templates, limit and context settings
            registry: Receives generated pages
            query_fn: Coroutine function executing a GraphQL document and
                returning its data mapping
            hooks: Optional record pipeline hooks
            retry_config: Retry budget for each round's fetch
        """
        self._options = options
        self._registry = registry
        self._query_fn = query_fn
        self._hooks = hooks or PageHooks()
        self._retry_config = retry_config or RetryConfig()
        self._state: Optional[FetchRoundState] = None

    @property
    def state(self) -> Optional[FetchRoundState]:
        """State of the build in progress or most recently finished."""
        return self._state

    def _batches(self, data: Dict[str, Any]) -> Dict[str, List[Dict[str, Any]]]:
        field_name = self._options.field_name
        namespace = data.get(field_name)
        if not isinstance(namespace, dict):
            raise GraphQLQueryError(
                f"Response is missing the {field_name} field",
                field_name=field_name,
            )
        return {model: namespace.get(model) or [] for model in self._options.models}

    async def create_pages(self) -> BuildStats:
        """
        Run rounds until every model is exhausted.

        Returns:
            BuildStats for the run

        Raises:
            ConfigurationError: before any fetch, if a template is missing
            Exception: the fetch error once retries are exhausted, or any
                error raised by a hook. Pages from earlier rounds remain.
        """
        options = self._options
        options.validate()

        models = options.models
        stats = BuildStats(pages_by_model={model: 0 for model in models})
        if not models:
            logger.info("No templates configured, skipping page creation")
            return stats

        state = FetchRoundState.for_models(models)
        self._state = state

        executor = RetryingFetchExecutor(
            self._query_fn,
            field_name=options.field_name,
            retry_config=self._retry_config,
        )
        pipeline = RecordPipeline(
            registry=self._registry,
            query_fn=self._query_fn,
            hooks=self._hooks,
            global_context=options.global_context,
        )

        has_more = True
        while has_more:
            state.rounds += 1
            offsets = state.offsets()
            logger.info(f"Round {state.rounds}: fetching {options.field_name} at offsets {offsets}")

            query = build_round_query(
                options.field_name,
                offsets,
                options.limit,
                cache_seconds=options.cache_seconds,
                stale_cache_seconds=options.stale_cache_seconds,
            )
            try:
                data = await executor.execute(query)
            finally:
                stats.attempts = executor.total_attempts

            batches = self._batches(data)

            has_more = False
            for model in models:
                records = batches[model]
                if state.cursors[model].advance(len(records), options.limit):
                    has_more = True

                created = await pipeline.process(model, options.templates[model], records)
                stats.pages_by_model[model] += created
                stats.pages_created += created

        stats.rounds = state.rounds
        stats.offsets = state.offsets()
        logger.info(
            f"Created {stats.pages_created} pages from {options.field_name} "
            f"in {stats.rounds} rounds"
        )
        return stats
