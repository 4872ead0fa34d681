"""Player stats aggregation and its run-scoped cache."""

from domain.stats.aggregator import StatsAggregator
from domain.stats.cache import StatsCache

__all__ = ["StatsAggregator", "StatsCache"]
