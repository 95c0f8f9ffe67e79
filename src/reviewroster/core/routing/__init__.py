"""Reviewer selection engine."""
from .selector import ReviewerSelector, eligible_pool, get_selector, init_selector

__all__ = [
    "ReviewerSelector",
    "eligible_pool",
    "get_selector",
    "init_selector",
]
