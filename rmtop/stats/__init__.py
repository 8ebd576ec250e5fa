from .aggregator import CommandStat, FrequencyAggregator, Snapshot
from .reporter import IntervalReporter, format_rate
from .render import TableRenderer, pretty_num

__all__ = [
    "CommandStat",
    "FrequencyAggregator",
    "Snapshot",
    "IntervalReporter",
    "format_rate",
    "TableRenderer",
    "pretty_num",
]
