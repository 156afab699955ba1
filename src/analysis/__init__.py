"""Issue analysis toolkit - pure functions over fetched issue lists.

Components:
- similarity: word-set Jaccard similarity and duplicate pair detection
- staleness: issues whose status category has not moved within a window
- assignees: unique assignees and case-insensitive partial name matching
- priorities: due-date rows with time-left and overdue annotations
"""

from src.analysis.similarity import (
    DUPLICATE_THRESHOLD,
    SimilarityPair,
    find_duplicates,
    format_duplicates_table,
    similarity,
    tokenize,
)
from src.analysis.staleness import (
    STALE_WINDOW,
    find_stale_issues,
    is_stale,
)
from src.analysis.assignees import (
    match_assignees,
    unique_assignees,
)
from src.analysis.priorities import (
    PriorityRow,
    format_priority_table,
    format_time_left,
    rank_by_due_date,
)

__all__ = [
    # similarity
    "DUPLICATE_THRESHOLD",
    "SimilarityPair",
    "find_duplicates",
    "format_duplicates_table",
    "similarity",
    "tokenize",
    # staleness
    "STALE_WINDOW",
    "find_stale_issues",
    "is_stale",
    # assignees
    "match_assignees",
    "unique_assignees",
    # priorities
    "PriorityRow",
    "format_priority_table",
    "format_time_left",
    "rank_by_due_date",
]
