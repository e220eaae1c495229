# src/portfolio_ledger_engine/monitoring.py
from prometheus_client import Histogram

REPLAY_DEPTH = Histogram(
    "ledger_replay_depth",
    "Number of ledger operations replayed while reconstructing a single holding.",
    buckets=(1, 5, 10, 25, 50, 100, 250, 500, 1000)
)

XIRR_ITERATIONS = Histogram(
    "ledger_xirr_iterations",
    "Number of bisection iterations used by a single XIRR solve.",
    buckets=(1, 5, 10, 20, 30, 40, 50, 75, 100)
)
