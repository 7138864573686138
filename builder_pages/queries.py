"""
GraphQL query rendering for a fetch round.

Every round issues a single query covering all configured models, each at
its own offset:

    query {
      allBuilderModels {
        page(limit: 100, offset: 200, options: { cacheSeconds: 2, staleCacheSeconds: 2 }) {
          content
        }
        ...
      }
    }
"""

import re
from typing import Mapping

_NAME_PATTERN = re.compile(r"^[_A-Za-z][_0-9A-Za-z]*$")


def is_valid_name(name) -> bool:
    """True if ``name`` can be used as a GraphQL field name."""
    return isinstance(name, str) and bool(_NAME_PATTERN.match(name))


def _check_name(kind: str, name: str) -> str:
    if not is_valid_name(name):
        raise ValueError(f"Invalid GraphQL {kind} name: {name!r}")
    return name


def build_model_selection(
    model: str,
    limit: int,
    offset: int,
    cache_seconds: int = 2,
    stale_cache_seconds: int = 2,
) -> str:
    """Render the selection for one model at one offset."""
    return (
        f"{_check_name('model', model)}(limit: {int(limit)}, offset: {int(offset)}, "
        f"options: {{ cacheSeconds: {int(cache_seconds)}, "
        f"staleCacheSeconds: {int(stale_cache_seconds)} }}) {{\n"
        f"      content\n"
        f"    }}"
    )


def build_round_query(
    field_name: str,
    offsets: Mapping[str, int],
    limit: int,
    cache_seconds: int = 2,
    stale_cache_seconds: int = 2,
) -> str:
    """
    Render the combined query for one round.

    Args:
        field_name: Field every model is namespaced under
        offsets: Model name -> offset to query it at, in query order
        limit: Records requested per model
        cache_seconds: Server-side cache hint
        stale_cache_seconds: Server-side stale cache hint

    Returns:
        GraphQL document string
    """
    selections = "\n    ".join(
        build_model_selection(model, limit, offset, cache_seconds, stale_cache_seconds)
        for model, offset in offsets.items()
    )
    return (
        "query {\n"
        f"  {_check_name('field', field_name)} {{\n"
        f"    {selections}\n"
        "  }\n"
        "}"
    )
