"""
Record pipeline - qualification, user hooks and page emission.
"""

from builder_pages.pipeline.hooks import PageHooks
from builder_pages.pipeline.records import (
    RecordPipeline,
    get_url,
    is_qualifying,
    merge_context,
)

__all__ = [
    "PageHooks",
    "RecordPipeline",
    "get_url",
    "is_qualifying",
    "merge_context",
]
