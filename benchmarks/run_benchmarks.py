#!/usr/bin/env python3
"""Benchmark suite for pyskiplist comparing against sortedcontainers."""

import argparse
import json
import random
import time
from pathlib import Path
from typing import Dict, List

import numpy as np
import plotly.graph_objects as go
from sortedcontainers import SortedList
from tqdm import tqdm

from pyskiplist import SkipList

class Metrics:
    def __init__(self):
        self.insert_latencies: List[float] = []
        self.search_latencies: List[float] = []
        self.remove_latencies: List[float] = []
        self.levels: List[int] = []  # head level after each batch of inserts

    def to_dict(self) -> Dict:
        return {
            "insert_latencies": self._percentiles(self.insert_latencies),
            "search_latencies": self._percentiles(self.search_latencies),
            "remove_latencies": self._percentiles(self.remove_latencies),
            "final_level": self.levels[-1] if self.levels else None,
        }

    @staticmethod
    def _percentiles(samples: List[float]) -> Dict[str, float]:
        if not samples:
            return {}
        return {
            "p50": float(np.percentile(samples, 50)),
            "p95": float(np.percentile(samples, 95)),
            "p99": float(np.percentile(samples, 99)),
        }

    def plot_latencies(self, title: str, output_path: Path):
        fig = go.Figure()

        for name, samples in (
            ("Insert Latency", self.insert_latencies),
            ("Search Latency", self.search_latencies),
            ("Remove Latency", self.remove_latencies),
        ):
            fig.add_trace(go.Box(y=samples, name=name, boxpoints="outliers"))

        fig.update_layout(
            title=title,
            yaxis_title="Latency (µs)",
            boxmode="group"
        )

        fig.write_html(output_path)

class BenchmarkSuite:
    def __init__(self, num_entries: int, seed: int):
        self.num_entries = num_entries
        rng = random.Random(seed)
        self._keys = [rng.randrange(num_entries * 4) for _ in range(num_entries)]
        self._lookups = rng.sample(self._keys, len(self._keys))

    def run_skiplist_benchmark(self) -> Metrics:
        metrics = Metrics()
        sl: SkipList[int, int] = SkipList()
        step = max(1, self.num_entries // 100)

        for i in tqdm(range(self.num_entries), desc="SkipList Insert"):
            start = time.perf_counter()
            sl.insert((self._keys[i], i))
            metrics.insert_latencies.append((time.perf_counter() - start) * 1e6)
            if i % step == 0:
                metrics.levels.append(sl.level)
        metrics.levels.append(sl.level)

        for key in tqdm(self._lookups, desc="SkipList Search"):
            start = time.perf_counter()
            sl.search(key)
            metrics.search_latencies.append((time.perf_counter() - start) * 1e6)

        for key in tqdm(self._lookups, desc="SkipList Remove"):
            start = time.perf_counter()
            sl.remove(key)
            metrics.remove_latencies.append((time.perf_counter() - start) * 1e6)

        return metrics

    def run_sortedlist_benchmark(self) -> Metrics:
        metrics = Metrics()
        sl = SortedList()

        for i in tqdm(range(self.num_entries), desc="SortedList Insert"):
            start = time.perf_counter()
            sl.add((self._keys[i], i))
            metrics.insert_latencies.append((time.perf_counter() - start) * 1e6)

        for key in tqdm(self._lookups, desc="SortedList Search"):
            start = time.perf_counter()
            list(sl.irange((key,), (key + 1,), inclusive=(True, False)))
            metrics.search_latencies.append((time.perf_counter() - start) * 1e6)

        for key in tqdm(self._lookups, desc="SortedList Remove"):
            start = time.perf_counter()
            idx = sl.bisect_left((key,))
            if idx < len(sl) and sl[idx][0] == key:
                del sl[idx]
            metrics.remove_latencies.append((time.perf_counter() - start) * 1e6)

        return metrics

def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("--size", type=int, default=100000, help="Number of entries")
    parser.add_argument("--seed", type=int, default=0, help="Seed for the generated keys")
    parser.add_argument("--output", type=Path, default=Path("benchmark_results"), help="Output directory")
    args = parser.parse_args()

    args.output.mkdir(parents=True, exist_ok=True)

    suite = BenchmarkSuite(args.size, args.seed)
    skiplist_metrics = suite.run_skiplist_benchmark()
    sortedlist_metrics = suite.run_sortedlist_benchmark()

    # Generate reports
    skiplist_metrics.plot_latencies(
        "SkipList Latency Distribution",
        args.output / "skiplist_latencies.html"
    )
    sortedlist_metrics.plot_latencies(
        "SortedList Latency Distribution",
        args.output / "sortedlist_latencies.html"
    )

    # Save metrics
    with open(args.output / "metrics.json", "w") as f:
        json.dump({
            "skiplist": skiplist_metrics.to_dict(),
            "sortedlist": sortedlist_metrics.to_dict(),
        }, f, indent=2)

if __name__ == "__main__":
    main()
