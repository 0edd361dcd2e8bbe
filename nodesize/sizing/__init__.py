"""Sizing core: exclusion rules, reachability weights and size resolution."""

from .exclusion import ExclusionEvaluator, InvalidTitlePattern, is_excluded
from .reachability import ReachabilityAggregator, Traversal, weight
from .resolver import (
    MIN_SIZE,
    SizeResolution,
    SizeResolver,
    SizeSource,
    resolve,
    scale_weight,
)

__all__ = [
    "ExclusionEvaluator",
    "InvalidTitlePattern",
    "MIN_SIZE",
    "ReachabilityAggregator",
    "SizeResolution",
    "SizeResolver",
    "SizeSource",
    "Traversal",
    "is_excluded",
    "resolve",
    "scale_weight",
    "weight",
]
