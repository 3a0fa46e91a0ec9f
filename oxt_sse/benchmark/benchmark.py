"""
OXT performance benchmarking module.

Measures: index build time, persisted index size, single-keyword, conjunctive and
substring search latency. Uses synthetic documents in an isolated temp directory.
"""

import csv
import logging
import secrets
import tempfile
import time
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple

from ..client import BooleanQueryScheme, Document, SubstringQueryScheme
from ..server import JsonIndexBackend, SqliteIndexBackend

logger = logging.getLogger(__name__)

BENCHMARK_COUNTS = (10, 100, 500)
WORDS_PER_DOC = 12
SEARCH_RUNS = 5

_VOCABULARY = [
    "alpha", "beta", "gamma", "delta", "invoice", "confidential", "report", "data",
    "ledger", "audit", "budget", "contract", "payroll", "vendor", "summary", "quarter",
]
# Keywords placed in every synthetic document so searches always have work to do
_COMMON = ["invoice", "report"]


def _synthetic_documents(count: int, words_per_doc: int = WORDS_PER_DOC) -> List[Document]:
    rng = secrets.SystemRandom()
    docs = []
    for i in range(count):
        words = _COMMON + [rng.choice(_VOCABULARY) for _ in range(max(0, words_per_doc - len(_COMMON)))]
        docs.append(Document(f"doc_{i}", " ".join(words)))
    return docs


def _timed(fn: Callable[[], Any], runs: int) -> Tuple[float, Any]:
    """Average seconds over `runs` calls, and the last result."""
    result = None
    times = []
    for _ in range(runs):
        t0 = time.perf_counter()
        result = fn()
        times.append(time.perf_counter() - t0)
    return sum(times) / len(times), result


def _compute_scaling_analysis(results: List[Dict[str, Any]]) -> Dict[str, Any]:
    valid = [r for r in results if r.get("error") is None]
    if not valid:
        return {"summary": "Insufficient data for scaling analysis.", "setup_time_per_doc_ms": None}
    largest = max(valid, key=lambda r: r["num_docs"])
    n = largest["num_docs"]
    setup_per_doc_ms = largest["setup_sec"] / n * 1000 if n else None
    idx_per_doc = largest["index_size_bytes"] / n if n else None
    parts = []
    if setup_per_doc_ms is not None:
        parts.append(f"Setup: ~{setup_per_doc_ms:.2f} ms per doc.")
    parts.append(f"Conjunctive search at N={n}: {largest['conjunctive_search_ms']:.2f} ms.")
    if idx_per_doc is not None:
        parts.append(f"Index growth: ~{idx_per_doc:.0f} bytes per doc.")
    return {
        "summary": " ".join(parts),
        "setup_time_per_doc_ms": round(setup_per_doc_ms, 4) if setup_per_doc_ms is not None else None,
        "index_bytes_per_doc": round(idx_per_doc, 1) if idx_per_doc is not None else None,
        "max_n_tested": n,
    }


def run_benchmark(
    counts: Tuple[int, ...] = BENCHMARK_COUNTS,
    use_sqlite: bool = False,
    search_runs: int = SEARCH_RUNS,
    max_occurrences: Optional[int] = None,
    csv_path: Optional[Path] = None,
) -> Dict[str, Any]:
    """
    Run the benchmark in a temp directory. Returns per-run rows and a scaling analysis.
    max_occurrences defaults to the largest count, so query cost tracks the dataset.
    """
    cap = max_occurrences or max(counts)
    results: List[Dict[str, Any]] = []
    with tempfile.TemporaryDirectory() as tmp:
        for count in counts:
            docs = _synthetic_documents(count)
            row: Dict[str, Any] = {"num_docs": count, "use_sqlite": use_sqlite}
            try:
                scheme = BooleanQueryScheme(max_occurrences=cap)
                t0 = time.perf_counter()
                index = scheme.setup(docs)
                row["setup_sec"] = round(time.perf_counter() - t0, 4)
                row["posting_count"] = index.posting_count
                row["cross_tag_count"] = index.cross_tag_count

                path = Path(tmp) / f"index_{count}.{'db' if use_sqlite else 'json'}"
                backend = SqliteIndexBackend(path) if use_sqlite else JsonIndexBackend(path)
                try:
                    backend.save(index)
                    row["index_size_bytes"] = backend.size_bytes()
                finally:
                    backend.close()

                sec, _ = _timed(lambda: scheme.search(index, "invoice"), search_runs)
                row["single_search_ms"] = round(sec * 1000, 3)
                sec, _ = _timed(lambda: scheme.search(index, ["invoice", "report"]), search_runs)
                row["conjunctive_search_ms"] = round(sec * 1000, 3)

                substring = SubstringQueryScheme(max_occurrences=cap)
                t0 = time.perf_counter()
                sub_index = substring.setup(docs)
                row["substring_setup_sec"] = round(time.perf_counter() - t0, 4)
                sec, _ = _timed(lambda: substring.search(sub_index, "voic"), search_runs)
                row["substring_search_ms"] = round(sec * 1000, 3)
            except Exception as e:
                logger.exception("Benchmark run failed for %d documents", count)
                row["error"] = str(e)
            results.append(row)

    out: Dict[str, Any] = {
        "benchmark_results": results,
        "dataset_sizes": list(counts),
        "scaling_analysis": _compute_scaling_analysis(results),
    }
    if csv_path:
        fieldnames = [
            "num_docs", "use_sqlite", "setup_sec", "posting_count", "cross_tag_count",
            "index_size_bytes", "single_search_ms", "conjunctive_search_ms",
            "substring_setup_sec", "substring_search_ms",
        ]
        if any("error" in r for r in results):
            fieldnames.append("error")
        with open(csv_path, "w", newline="", encoding="utf-8") as f:
            w = csv.DictWriter(f, fieldnames=fieldnames, extrasaction="ignore")
            w.writeheader()
            w.writerows(results)
    return out
