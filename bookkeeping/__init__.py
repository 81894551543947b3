"""Financial rollup and period-bucketing engine for small-business bookkeeping."""

__version__ = "0.1.0"
