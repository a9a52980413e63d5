"""
Benchmark runner: bytehuff vs zlib on synthetic datasets

Outputs (in --outdir):
  - metrics.csv     (raw row per run per configuration)
  - summary.csv     (grouped mean/stdev)
  - *.png           (charts)

How to run:
  python -m bytehuff.experiments --outdir results --runs 5
  python -m bytehuff.experiments --outdir results --runs 3 --exp1_size_kb 256 --exp2_max_kb 2048
  python -m bytehuff.experiments --outdir results --exp1_generators uniform128,zipf128,english_like

Notes:
  every generator stays within MAX_SYMBOLS distinct byte values
"""

from __future__ import annotations

import argparse
import csv
import math
import random
import statistics
import time
import zlib
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple

import matplotlib.pyplot as plt

from bytehuff.codec import compress, decompress
from bytehuff.container import Header
from bytehuff.huffman import MAX_SYMBOLS, build_code_table, frequency_table

PIPELINES = ("bytehuff", "zlib")


# Utilities

def now_ns() -> int:
    return time.perf_counter_ns()

def ns_to_ms(ns: int) -> float:
    return ns / 1_000_000.0

def safe_mkdir(p: Path) -> None:
    p.mkdir(parents=True, exist_ok=True)

def shannon_entropy(ft: Dict[int, int]) -> float:
    """Bits per symbol of the zero-order source described by ft"""
    total = sum(ft.values())
    if total == 0:
        return 0.0
    return -sum((c / total) * math.log2(c / total) for c in ft.values())


# Synthetic dataset generators

def gen_uniform(size: int, alphabet: int = MAX_SYMBOLS, seed: int = 0) -> bytes:
    rng = random.Random(seed)
    return bytes(rng.randrange(0, alphabet) for _ in range(size))

def gen_repetitive(size: int, dominant: int = ord('A'), dom_frac: float = 0.90, seed: int = 0) -> bytes:
    rng = random.Random(seed)
    other_symbols = [i for i in range(MAX_SYMBOLS) if i != dominant]
    out = bytearray()
    for _ in range(size):
        if rng.random() < dom_frac:
            out.append(dominant)
        else:
            out.append(rng.choice(other_symbols))
    return bytes(out)

def _sample_cdf(rng: random.Random, cdf: List[float]) -> int:
    r = rng.random()
    lo, hi = 0, len(cdf) - 1
    while lo < hi:
        mid = (lo + hi) // 2
        if r <= cdf[mid]:
            hi = mid
        else:
            lo = mid + 1
    return lo

def _cdf(weights: List[float]) -> List[float]:
    total = sum(weights)
    cdf = []
    acc = 0.0
    for w in weights:
        acc += w / total
        cdf.append(acc)
    return cdf

def gen_zipf_like(size: int, alphabet: int = MAX_SYMBOLS, s: float = 1.2, seed: int = 0) -> bytes:
    rng = random.Random(seed)
    cdf = _cdf([1.0 / ((i + 1) ** s) for i in range(alphabet)])
    return bytes(_sample_cdf(rng, cdf) for _ in range(size))

def gen_english_like(size: int, seed: int = 0) -> bytes:
    rng = random.Random(seed)
    chars = (
        " etaoinshrdlcumwfgypbvkjxq"
        "ETAOINSHRDLCUMWFGYPBVKJXQ"
        ".,\n"
    )
    weights = []
    for ch in chars:
        if ch == ' ':
            weights.append(13.0)
        elif ch in ".,\n":
            weights.append(1.5)
        elif ch.lower() in "etaoinshrdlu":
            weights.append(6.0)
        elif ch.lower() in "cmfwgypbvk":
            weights.append(2.5)
        else:
            weights.append(1.2)

    cdf = _cdf(weights)
    return bytes(ord(chars[_sample_cdf(rng, cdf)]) for _ in range(size))

GENERATOR_REGISTRY: Dict[str, Callable[[int, int], bytes]] = {
    "uniform128": lambda size, seed: gen_uniform(size, alphabet=128, seed=seed),
    "uniform64": lambda size, seed: gen_uniform(size, alphabet=64, seed=seed),
    "zipf128": lambda size, seed: gen_zipf_like(size, alphabet=128, s=1.2, seed=seed),
    "zipf64": lambda size, seed: gen_zipf_like(size, alphabet=64, s=1.2, seed=seed),
    "repetitive90": lambda size, seed: gen_repetitive(size, dominant=ord('A'), dom_frac=0.90, seed=seed),
    "repetitive99": lambda size, seed: gen_repetitive(size, dominant=ord('A'), dom_frac=0.99, seed=seed),
    "english_like": lambda size, seed: gen_english_like(size, seed=seed),
}

def generate_dataset(name: str, size_bytes: int, seed: int) -> Tuple[str, bytes]:
    """
    Unknown dataset names fall back to uniform128 so a typo in the
    generator list does not abort a long run
    """
    fn = GENERATOR_REGISTRY.get(name)
    if fn is None:
        return f"{name}_fallback_uniform128", gen_uniform(size_bytes, alphabet=128, seed=seed)
    return name, fn(size_bytes, seed)


# Experiment runner

@dataclass
class MetricRow:
    exp_name: str
    dataset_name: str
    file_size_bytes: int
    run_id: int
    pipeline: str  # "bytehuff" or "zlib"
    unique_symbols: int

    build_table_ms: float
    compress_ms: float
    decompress_ms: float
    total_ms: float

    compressed_bytes: int
    header_bytes: int
    compression_ratio: float

    entropy_bits_per_symbol: float
    achieved_bits_per_symbol: float
    correctness_ok: int  # 1 or 0


def run_one(data: bytes, pipeline: str) -> MetricRow:
    ft = frequency_table(data)
    build_table_ms = 0.0
    header_bytes = 0

    if pipeline == "bytehuff":
        # table build is timed on its own, compress() repeats it internally
        t0 = now_ns()
        code_table = build_code_table(ft)
        t1 = now_ns()
        build_table_ms = ns_to_ms(t1 - t0)
        header_bytes = Header(lengths={s: c.length for s, c in code_table.items()}).size

        t2 = now_ns()
        blob = compress(data)
        t3 = now_ns()
        decoded = decompress(blob)
        t4 = now_ns()

    elif pipeline == "zlib":
        t2 = now_ns()
        blob = zlib.compress(data, 9)
        t3 = now_ns()
        decoded = zlib.decompress(blob)
        t4 = now_ns()
    else:
        raise ValueError("pipeline must be 'bytehuff' or 'zlib'")

    compress_ms = ns_to_ms(t3 - t2)
    decompress_ms = ns_to_ms(t4 - t3)
    comp_bytes = len(blob)
    n = max(1, len(data))

    return MetricRow(
        exp_name="",
        dataset_name="",
        file_size_bytes=len(data),
        run_id=0,
        pipeline=pipeline,
        unique_symbols=len(ft),
        build_table_ms=build_table_ms,
        compress_ms=compress_ms,
        decompress_ms=decompress_ms,
        total_ms=compress_ms + decompress_ms,
        compressed_bytes=comp_bytes,
        header_bytes=header_bytes,
        compression_ratio=comp_bytes / n,
        entropy_bits_per_symbol=shannon_entropy(ft),
        achieved_bits_per_symbol=(comp_bytes - header_bytes) * 8 / n,
        correctness_ok=1 if decoded == data else 0,
    )


def write_csv(path: Path, rows: List[MetricRow]) -> None:
    fields = list(MetricRow.__dataclass_fields__.keys())
    with path.open("w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=fields)
        w.writeheader()
        for r in rows:
            w.writerow({k: getattr(r, k) for k in fields})


SUMMARY_METRICS = (
    "compression_ratio",
    "compress_ms",
    "decompress_ms",
    "build_table_ms",
    "total_ms",
    "achieved_bits_per_symbol",
)


def mean_stdev(vals: List[float]) -> Tuple[float, float]:
    if len(vals) == 1:
        return vals[0], 0.0
    return statistics.mean(vals), statistics.stdev(vals)


def group_summary(rows: List[MetricRow], out_path: Path) -> None:
    """
    Group by exp_name, dataset_name, file_size_bytes, pipeline and compute mean/stdev
    """
    key_to: Dict[Tuple[str, str, int, str], List[MetricRow]] = {}
    for r in rows:
        key = (r.exp_name, r.dataset_name, r.file_size_bytes, r.pipeline)
        key_to.setdefault(key, []).append(r)

    summary_fields = ["exp_name", "dataset_name", "file_size_bytes", "pipeline", "n_runs"]
    for m in SUMMARY_METRICS:
        summary_fields += [f"{m}_mean", f"{m}_stdev"]
    summary_fields += ["entropy_bits_per_symbol_mean", "correctness_ok_rate"]

    with out_path.open("w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=summary_fields)
        w.writeheader()
        for key, items in sorted(key_to.items()):
            exp_name, dataset_name, size_b, pipeline = key
            out = {
                "exp_name": exp_name,
                "dataset_name": dataset_name,
                "file_size_bytes": size_b,
                "pipeline": pipeline,
                "n_runs": len(items),
            }
            for m in SUMMARY_METRICS:
                out[f"{m}_mean"], out[f"{m}_stdev"] = mean_stdev([getattr(x, m) for x in items])
            out["entropy_bits_per_symbol_mean"] = statistics.mean(x.entropy_bits_per_symbol for x in items)
            out["correctness_ok_rate"] = sum(x.correctness_ok for x in items) / len(items)
            w.writerow(out)


# Plotting

def _line_chart(x, series: Dict[str, List[float]], outfile: Path, title: str, ylabel: str,
                xlabel: str = "", xticks: Optional[List[str]] = None) -> None:
    plt.figure()
    for label, y in series.items():
        plt.plot(x, y, marker="o", label=label)
    if xticks is not None:
        plt.xticks(x, xticks, rotation=20, ha="right")
    if xlabel:
        plt.xlabel(xlabel)
    plt.ylabel(ylabel)
    plt.title(title)
    plt.legend()
    plt.tight_layout()
    plt.savefig(outfile, dpi=200)
    plt.close()


def plot_experiment_1(rows: List[MetricRow], outdir: Path) -> None:
    exp_rows = [r for r in rows if r.exp_name == "exp1_distribution"]
    if not exp_rows:
        return

    datasets = sorted(set(r.dataset_name for r in exp_rows))

    def mean_for(dataset: str, pipeline: str, field: str) -> float:
        vals = [getattr(r, field) for r in exp_rows if r.dataset_name == dataset and r.pipeline == pipeline]
        return statistics.mean(vals) if vals else float("nan")

    x = list(range(len(datasets)))

    _line_chart(x, {p: [mean_for(d, p, "compression_ratio") for d in datasets] for p in PIPELINES},
                outdir / "exp1_compression_ratio.png",
                "Experiment 1: Compression Ratio by Distribution",
                "Compressed Bytes / Original Bytes", xticks=datasets)

    _line_chart(x, {p: [mean_for(d, p, "compress_ms") for d in datasets] for p in PIPELINES},
                outdir / "exp1_compress_time.png",
                "Experiment 1: Compress Time by Distribution",
                "Compress Time (ms)", xticks=datasets)

    # Huffman can not beat the zero-order entropy, the gap is the coding overhead
    _line_chart(x, {
                    "entropy": [mean_for(d, "bytehuff", "entropy_bits_per_symbol") for d in datasets],
                    "bytehuff": [mean_for(d, "bytehuff", "achieved_bits_per_symbol") for d in datasets],
                },
                outdir / "exp1_bits_per_symbol.png",
                "Experiment 1: Bits per Symbol vs Entropy",
                "Bits per Symbol", xticks=datasets)


def plot_experiment_2(rows: List[MetricRow], outdir: Path) -> None:
    exp_rows = [r for r in rows if r.exp_name == "exp2_size_scaling"]
    if not exp_rows:
        return

    distributions = sorted(set(r.dataset_name for r in exp_rows))

    for dist in distributions:
        dist_rows = [r for r in exp_rows if r.dataset_name == dist]
        sizes = sorted(set(r.file_size_bytes for r in dist_rows))

        def mean_size(size: int, pipeline: str, field: str) -> float:
            vals = [getattr(r, field) for r in dist_rows if r.file_size_bytes == size and r.pipeline == pipeline]
            return statistics.mean(vals) if vals else float("nan")

        _line_chart(sizes, {p: [mean_size(s, p, "compress_ms") for s in sizes] for p in PIPELINES},
                    outdir / f"exp2_compress_time_{dist}.png",
                    f"Experiment 2: Compress Time vs Size ({dist})",
                    "Compress Time (ms)", xlabel="File Size (bytes)")

        _line_chart(sizes, {p: [mean_size(s, p, "decompress_ms") for s in sizes] for p in PIPELINES},
                    outdir / f"exp2_decompress_time_{dist}.png",
                    f"Experiment 2: Decompress Time vs Size ({dist})",
                    "Decompress Time (ms)", xlabel="File Size (bytes)")

        _line_chart(sizes, {p: [mean_size(s, p, "compression_ratio") for s in sizes] for p in PIPELINES},
                    outdir / f"exp2_compression_ratio_{dist}.png",
                    f"Experiment 2: Compression Ratio vs Size ({dist})",
                    "Compressed Bytes / Original Bytes", xlabel="File Size (bytes)")


# Main

def parse_csv_list(s: str) -> List[str]:
    return [x.strip() for x in s.split(",") if x.strip()]

def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="bytehuff.experiments")
    ap.add_argument("--outdir", type=str, default="results", help="Output directory for CSV and plots")
    ap.add_argument("--runs", type=int, default=5, help="Repetitions per configuration (>=3 recommended for timing)")
    ap.add_argument("--seed", type=int, default=123, help="Base random seed")

    # Experiment toggles
    ap.add_argument("--no_exp1", action="store_true", help="Disable experiment 1 (distribution)")
    ap.add_argument("--no_exp2", action="store_true", help="Disable experiment 2 (size scaling)")

    # Experiment 1 controls
    ap.add_argument("--exp1_size_kb", type=int, default=256, help="Experiment 1 fixed file size in KB")
    ap.add_argument("--exp1_generators", type=str, default="uniform128,zipf128,repetitive90,english_like",
                    help="Comma-separated dataset generator names for experiment 1")

    # Experiment 2 controls
    ap.add_argument("--exp2_min_kb", type=int, default=4, help="Experiment 2 min size in KB (power-of-two growth)")
    ap.add_argument("--exp2_max_kb", type=int, default=1024, help="Experiment 2 max size in KB (power-of-two growth)")
    ap.add_argument("--exp2_generators", type=str, default="uniform128,zipf128,repetitive90",
                    help="Comma-separated dataset generator names for experiment 2")
    return ap

def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    outdir = Path(args.outdir)
    safe_mkdir(outdir)

    rows: List[MetricRow] = []

    # Experiment 1: distributions (fixed size)
    if not args.no_exp1:
        fixed_size = max(1, args.exp1_size_kb) * 1024
        for gen_name in parse_csv_list(args.exp1_generators):
            for run_id in range(1, args.runs + 1):
                dataset_name, data = generate_dataset(gen_name, fixed_size, args.seed + run_id)
                for pipeline in PIPELINES:
                    row = run_one(data, pipeline)
                    row.exp_name = "exp1_distribution"
                    row.dataset_name = dataset_name
                    row.run_id = run_id
                    rows.append(row)

    # Experiment 2: size scaling (multiple sizes, powers of 2)
    if not args.no_exp2:
        min_bytes = max(1, args.exp2_min_kb) * 1024
        max_bytes = max(1, args.exp2_max_kb) * 1024

        sizes: List[int] = []
        s = min_bytes
        while s <= max_bytes:
            sizes.append(s)
            s *= 2

        for gen_name in parse_csv_list(args.exp2_generators):
            for size_b in sizes:
                for run_id in range(1, args.runs + 1):
                    dataset_name, data = generate_dataset(gen_name, size_b, args.seed + 10_000 + size_b + run_id)
                    for pipeline in PIPELINES:
                        row = run_one(data, pipeline)
                        row.exp_name = "exp2_size_scaling"
                        row.dataset_name = dataset_name
                        row.run_id = run_id
                        rows.append(row)

    # Write raw and summary
    metrics_csv = outdir / "metrics.csv"
    summary_csv = outdir / "summary.csv"
    write_csv(metrics_csv, rows)
    group_summary(rows, summary_csv)

    # Plots
    plot_experiment_1(rows, outdir)
    plot_experiment_2(rows, outdir)

    ok_rate = sum(r.correctness_ok for r in rows) / max(1, len(rows))
    print(f"Wrote {len(rows)} rows to {metrics_csv}")
    print(f"Wrote grouped summary to {summary_csv}")
    print(f"Correctness rate across all runs: {ok_rate:.3f}")
    print("Charts saved in:", outdir.resolve())
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
