"""
Cursor tracking for paginated model fetching.
"""

from builder_pages.cursors.state import FetchRoundState, ModelCursor

__all__ = [
    "FetchRoundState",
    "ModelCursor",
]
