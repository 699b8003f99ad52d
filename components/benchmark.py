"""
Timing harness for the string-set backends.

Every backend in `stringsets.registry.BACKENDS` is fed the same keys and the
same queries; per repeat we time a full insert pass, a `contains` pass and a
`prefixes_of` pass. Results come back as a tidy pandas DataFrame (one row per
backend / repeat / op), which `summarize` reduces to per-op latency figures.
"""

import logging
import time
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np
import pandas as pd

from components.work_loads import KINDS, WorkLoad
from stringsets.registry import BACKENDS, create_empty


log = logging.getLogger(__name__)

OPS = ("insert", "contains", "prefixes_of")


@dataclass
class BenchConfig:
    """
    Configuration for run_benchmark
        workload: one of components.work_loads.KINDS
        num_keys / num_queries: sizes of the key set and the query stream
        prefix_freq: clustering knob for the "words" workload (0 -> 1)
        hit_ratio: share of queries built from stored keys
        repeat: how many times each backend is rebuilt and timed
        backends: names from stringsets.registry.BACKENDS
        verify: compare answers across backends after each repeat
    """
    workload: str = "words"
    num_keys: int = 5_000
    num_queries: int = 2_000
    prefix_freq: float = 0.5
    hit_ratio: float = 0.5
    repeat: int = 3
    seed: Optional[int] = None
    backends: Tuple[str, ...] = ("radix", "char")
    verify: bool = True

    def __post_init__(self):
        if self.workload not in KINDS:
            raise ValueError(f"workload must be one of {KINDS}")
        if self.num_keys < 1 or self.num_queries < 1:
            raise ValueError("num_keys and num_queries must be positive")
        if self.repeat < 1:
            raise ValueError("repeat must be positive")
        if not 0.0 <= self.prefix_freq <= 1.0:
            raise ValueError("prefix_freq must be between 0 and 1")
        self.backends = tuple(self.backends)
        if not self.backends:
            raise ValueError("at least one backend is required")
        unknown = [b for b in self.backends if b not in BACKENDS]
        if unknown:
            raise ValueError(f"unknown backends: {unknown}")


def build_inputs(config):
    """Return (keys, queries) for the configured workload."""
    wl = WorkLoad(config.seed)
    keys = wl.keys(config.workload, config.num_keys, config.prefix_freq)
    if config.workload == "routes":
        queries = wl.route_queries(keys, config.num_queries, config.hit_ratio)
    else:
        queries = wl.queries(keys, config.num_queries, config.hit_ratio)
    return keys, queries


def _timed(fn, items):
    start = time.perf_counter()
    out = [fn(x) for x in items]
    return time.perf_counter() - start, out


def run_benchmark(config, keys=None, queries=None):
    """Time every configured backend; return one row per backend/run/op.

    Columns: backend, run, op, ops, seconds, us_per_op, size, nodes.
    Raises RuntimeError when `config.verify` is set and two backends disagree.
    """
    if keys is None or queries is None:
        keys, queries = build_inputs(config)

    rows = []
    for run in range(config.repeat):
        answers = {}
        for name in config.backends:
            s = create_empty(name)
            t_ins, _ = _timed(s.insert, keys)
            t_con, hits = _timed(s.contains, queries)
            t_pre, fams = _timed(s.prefixes_of, queries)
            size, nodes = s.size(), s.count_nodes()
            s.destroy()
            answers[name] = (hits, fams, size)

            for op, seconds, ops in (("insert", t_ins, len(keys)),
                                     ("contains", t_con, len(queries)),
                                     ("prefixes_of", t_pre, len(queries))):
                rows.append({
                    "backend": name, "run": run, "op": op, "ops": ops,
                    "seconds": seconds, "us_per_op": seconds * 1e6 / ops,
                    "size": size, "nodes": nodes,
                })
            log.info("run %d %s: insert %.4fs contains %.4fs prefixes_of %.4fs (%d keys, %d nodes)",
                     run, name, t_ins, t_con, t_pre, size, nodes)

        if config.verify:
            _check_agreement(answers)
    return pd.DataFrame(rows, columns=["backend", "run", "op", "ops", "seconds",
                                       "us_per_op", "size", "nodes"])


def _check_agreement(answers):
    names = list(answers)
    ref = answers[names[0]]
    for name in names[1:]:
        if answers[name] != ref:
            raise RuntimeError(f"backends {names[0]!r} and {name!r} disagree")


def summarize(df):
    """Median, p90 and mean microseconds per op, by backend and op."""
    grouped = df.groupby(["backend", "op"])["us_per_op"]
    out = grouped.agg(
        median_us="median",
        p90_us=lambda s: float(np.percentile(s.to_numpy(), 90)),
        mean_us="mean",
    ).reset_index()
    nodes = df.groupby("backend")["nodes"].max().rename("nodes")
    return out.merge(nodes, on="backend")
