"""
Huffman codec experiments

Measures the static Huffman codec on synthetic datasets, with repeated runs
per configuration, and compares two pipelines:
  - bitstring: encode to a '0'/'1' string and decode it back
  - packed:    same, plus packing to bytes and unpacking before decoding

Outputs (in --outdir):
  - metrics.csv     (raw row per run per configuration)
  - summary.csv     (grouped mean/stdev)
  - *.png           (charts)

How to run:
  python experiments.py --outdir results --runs 5
  python experiments.py --outdir results --runs 3 --exp1_size_kb 64 --exp2_max_kb 1024
  python experiments.py --outdir results --no_exp2 --exp1_generators uniform256,zipf128,english_like
"""

from __future__ import annotations

import argparse
import csv
import random
import statistics
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, List, Sequence, Tuple

import matplotlib.pyplot as plt

import huffman as huff
from bitpack import pack_bits, unpack_bits

PIPELINES = ("bitstring", "packed")


# Utilities

def now_ns() -> int:
    return time.perf_counter_ns()

def ns_to_ms(ns: int) -> float:
    return ns / 1_000_000.0

def safe_mkdir(p: Path) -> None:
    p.mkdir(parents=True, exist_ok=True)


# Synthetic dataset generators

def _sample_weighted(rng: random.Random, weights: Sequence[float], size: int) -> List[int]:
    """Draws size indices from the (unnormalised) weights by binary search on the CDF"""
    total = sum(weights)
    cdf = []
    acc = 0.0
    for w in weights:
        acc += w / total
        cdf.append(acc)

    out = []
    for _ in range(size):
        r = rng.random()
        lo, hi = 0, len(cdf) - 1
        while lo < hi:
            mid = (lo + hi) // 2
            if r <= cdf[mid]:
                hi = mid
            else:
                lo = mid + 1
        out.append(lo)
    return out

def gen_uniform(size: int, alphabet: int = 256, seed: int = 0) -> bytes:
    rng = random.Random(seed)
    return bytes(rng.randrange(0, alphabet) for _ in range(size))

def gen_repetitive(size: int, dominant: int = ord('A'), dom_frac: float = 0.90, seed: int = 0) -> bytes:
    rng = random.Random(seed)
    others = [i for i in range(256) if i != dominant]
    return bytes(dominant if rng.random() < dom_frac else rng.choice(others) for _ in range(size))

def gen_zipf_like(size: int, alphabet: int = 128, s: float = 1.2, seed: int = 0) -> bytes:
    rng = random.Random(seed)
    weights = [1.0 / ((i + 1) ** s) for i in range(alphabet)]
    return bytes(_sample_weighted(rng, weights, size))

ENGLISH_CHARS = " etaoinshrdlcumwfgypbvkjxqETAOINSHRDLCUMWFGYPBVKJXQ\n"

def _english_weight(ch: str) -> float:
    if ch == ' ':
        return 13.0
    if ch == '\n':
        return 1.5
    if ch.lower() in "etaoinshrdlu":
        return 6.0
    if ch.lower() in "cmfwgypbvk":
        return 2.5
    return 1.2

def gen_english_like(size: int, seed: int = 0) -> bytes:
    rng = random.Random(seed)
    weights = [_english_weight(ch) for ch in ENGLISH_CHARS]
    return bytes(ord(ENGLISH_CHARS[i]) for i in _sample_weighted(rng, weights, size))

GENERATOR_REGISTRY: Dict[str, Callable[[int, int], bytes]] = {
    "uniform256": lambda size, seed: gen_uniform(size, alphabet=256, seed=seed),
    "uniform16": lambda size, seed: gen_uniform(size, alphabet=16, seed=seed),
    "zipf128": lambda size, seed: gen_zipf_like(size, alphabet=128, s=1.2, seed=seed),
    "zipf32": lambda size, seed: gen_zipf_like(size, alphabet=32, s=1.2, seed=seed),
    "repetitive90": lambda size, seed: gen_repetitive(size, dominant=ord('A'), dom_frac=0.90, seed=seed),
    "repetitive99": lambda size, seed: gen_repetitive(size, dominant=ord('A'), dom_frac=0.99, seed=seed),
    "english_like": lambda size, seed: gen_english_like(size, seed=seed),
}

def generate_dataset(name: str, size_bytes: int, seed: int) -> Tuple[str, bytes]:
    """
    Unknown dataset names fall back to uniform256 so a typo in the
    generator list does not abort a long run; the returned name says so
    """
    fn = GENERATOR_REGISTRY.get(name)
    if fn is None:
        return f"{name}_fallback_uniform256", gen_uniform(size_bytes, alphabet=256, seed=seed)
    return name, fn(size_bytes, seed)


# Experiment runner

@dataclass
class MetricRow:
    exp_name: str
    dataset_name: str
    file_size_bytes: int
    run_id: int
    pipeline: str  # "bitstring" or "packed"
    unique_symbols: int

    build_ms: float
    encode_ms: float
    decode_ms: float
    total_ms: float

    encoded_bits: int
    packed_bytes: int
    pad_bits: int
    compression_ratio: float

    avg_code_length: float
    entropy_bits: float
    correctness_ok: int  # 1 or 0


def run_one(data: bytes, pipeline: str) -> MetricRow:
    if pipeline not in PIPELINES:
        raise ValueError(f"pipeline must be one of {PIPELINES}, got {pipeline!r}")

    # count + tree + code table
    t0 = now_ns()
    ft = huff.count_frequencies(data)
    root = huff.build_huffman_tree(ft)
    code_map = huff.generate_huffman_codes(root)
    t1 = now_ns()

    # encode (and pack)
    bits = huff.huffman_encode(data, code_map)
    if pipeline == "packed":
        packed, pad_bits = pack_bits(bits)
    t2 = now_ns()

    # decode (after unpacking for the packed pipeline)
    if pipeline == "packed":
        decoded = huff.decode_bytes(unpack_bits(packed, pad_bits), root)
    else:
        decoded = huff.decode_bytes(bits, root)
    t3 = now_ns()

    if pipeline == "bitstring":
        # sizes are reported for both pipelines, packing here stays out of the timings
        packed, pad_bits = pack_bits(bits)

    build_ms = ns_to_ms(t1 - t0)
    encode_ms = ns_to_ms(t2 - t1)
    decode_ms = ns_to_ms(t3 - t2)

    return MetricRow(
        exp_name="",
        dataset_name="",
        file_size_bytes=len(data),
        run_id=0,
        pipeline=pipeline,
        unique_symbols=len(ft),
        build_ms=build_ms,
        encode_ms=encode_ms,
        decode_ms=decode_ms,
        total_ms=build_ms + encode_ms + decode_ms,
        encoded_bits=len(bits),
        packed_bytes=len(packed),
        pad_bits=pad_bits,
        compression_ratio=len(packed) / max(1, len(data)),
        avg_code_length=huff.average_code_length(code_map, ft),
        entropy_bits=huff.entropy(ft),
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
    "compression_ratio", "avg_code_length", "entropy_bits",
    "build_ms", "encode_ms", "decode_ms", "total_ms",
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
    for metric in SUMMARY_METRICS:
        summary_fields += [f"{metric}_mean", f"{metric}_stdev"]
    summary_fields.append("correctness_ok_rate")

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
                "correctness_ok_rate": sum(x.correctness_ok for x in items) / len(items),
            }
            for metric in SUMMARY_METRICS:
                m, s = mean_stdev([getattr(x, metric) for x in items])
                out[f"{metric}_mean"] = m
                out[f"{metric}_stdev"] = s
            w.writerow(out)



# Plotting

def _mean_of(rows: List[MetricRow], field: str) -> float:
    vals = [getattr(r, field) for r in rows]
    return statistics.mean(vals) if vals else float("nan")


def _save(outdir: Path, name: str) -> None:
    plt.legend()
    plt.tight_layout()
    plt.savefig(outdir / name, dpi=200)
    plt.close()


def plot_experiment_1(rows: List[MetricRow], outdir: Path) -> None:
    exp_rows = [r for r in rows if r.exp_name == "exp1_distribution"]
    if not exp_rows:
        return

    names = sorted({r.dataset_name for r in exp_rows})
    ticks = range(len(names))

    def series(field: str, pipeline: str = "bitstring") -> List[float]:
        return [
            _mean_of([r for r in exp_rows if r.dataset_name == n and r.pipeline == pipeline], field)
            for n in names
        ]

    def finish(ylabel: str, title: str, filename: str) -> None:
        plt.xticks(list(ticks), names, rotation=20, ha="right")
        plt.ylabel(ylabel)
        plt.title(title)
        _save(outdir, filename)

    # code length against the entropy bound
    plt.figure()
    plt.plot(ticks, series("avg_code_length"), marker="o", label="avg code length")
    plt.plot(ticks, series("entropy_bits"), marker="s", linestyle="--", label="entropy")
    finish("Bits per Symbol", "Experiment 1: Code Length vs Entropy", "exp1_code_length.png")

    plt.figure()
    plt.bar(ticks, series("compression_ratio", "packed"), label="packed")
    finish("Packed Bytes / Input Bytes", "Experiment 1: Packed Size by Distribution", "exp1_compression_ratio.png")

    plt.figure()
    for p in PIPELINES:
        plt.plot(ticks, series("total_ms", p), marker="o", label=p)
    finish("Build + Encode + Decode (ms)", "Experiment 1: Runtime by Distribution", "exp1_total_time.png")


def plot_experiment_2(rows: List[MetricRow], outdir: Path) -> None:
    exp_rows = [r for r in rows if r.exp_name == "exp2_size_scaling"]
    if not exp_rows:
        return

    for dist in sorted(set(r.dataset_name for r in exp_rows)):
        dist_rows = [r for r in exp_rows if r.dataset_name == dist]
        sizes = sorted(set(r.file_size_bytes for r in dist_rows))

        def mean_size(size: int, pipeline: str, field: str) -> float:
            return _mean_of([r for r in dist_rows if r.file_size_bytes == size and r.pipeline == pipeline], field)

        for field, label in (("encode_ms", "Encode Time (ms)"), ("decode_ms", "Decode Time (ms)")):
            plt.figure()
            for p in PIPELINES:
                plt.plot(sizes, [mean_size(s, p, field) for s in sizes], marker="o", label=p)
            plt.xscale("log", base=2)
            plt.xlabel("File Size (bytes)")
            plt.ylabel(label)
            plt.title(f"Experiment 2: {label} vs Size ({dist})")
            _save(outdir, f"exp2_{field}_{dist}.png")


def plot_experiment_3(rows: List[MetricRow], outdir: Path) -> None:
    exp_rows = [r for r in rows if r.exp_name == "exp3_alphabet_size" and r.pipeline == "bitstring"]
    if not exp_rows:
        return

    alphabets = sorted(set(r.unique_symbols for r in exp_rows))

    def mean_alpha(k: int, field: str) -> float:
        return _mean_of([r for r in exp_rows if r.unique_symbols == k], field)

    plt.figure()
    plt.plot(alphabets, [mean_alpha(k, "avg_code_length") for k in alphabets], marker="o", label="avg code length")
    plt.plot(alphabets, [mean_alpha(k, "entropy_bits") for k in alphabets], linestyle="--", label="entropy")
    plt.xscale("log", base=2)
    plt.xlabel("Distinct Symbols")
    plt.ylabel("Bits per Symbol")
    plt.title("Experiment 3: Code Length vs Alphabet Size (uniform)")
    _save(outdir, "exp3_code_length.png")

    plt.figure()
    plt.plot(alphabets, [mean_alpha(k, "build_ms") for k in alphabets], marker="o", label="build")
    plt.xscale("log", base=2)
    plt.xlabel("Distinct Symbols")
    plt.ylabel("Tree + Code Table Build Time (ms)")
    plt.title("Experiment 3: Build Time vs Alphabet Size")
    _save(outdir, "exp3_build_time.png")



# Main

def parse_csv_list(s: str) -> List[str]:
    return [item.strip() for item in s.split(",") if item.strip()]

def power_of_two_range(lo: int, hi: int) -> List[int]:
    out = []
    v = max(1, lo)
    while v <= hi:
        out.append(v)
        v *= 2
    return out

def record(rows: List[MetricRow], data: bytes, exp_name: str, dataset_name: str, run_id: int) -> None:
    for pipeline in PIPELINES:
        row = run_one(data, pipeline)
        row.exp_name = exp_name
        row.dataset_name = dataset_name
        row.run_id = run_id
        rows.append(row)


def parse_args(argv: List[str] | None = None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(description="Static Huffman codec experiments")
    ap.add_argument("--outdir", default="results", help="Directory for metrics.csv, summary.csv and charts")
    ap.add_argument("--runs", type=int, default=5, help="Runs per configuration")
    ap.add_argument("--seed", type=int, default=123, help="Base random seed")

    for n, what in ((1, "distribution"), (2, "size scaling"), (3, "alphabet size")):
        ap.add_argument(f"--no_exp{n}", action="store_true", help=f"Skip experiment {n} ({what})")

    ap.add_argument("--exp1_size_kb", type=int, default=256, help="Experiment 1: data size in KB")
    ap.add_argument("--exp1_generators", default="uniform256,zipf128,repetitive90,english_like",
                    help="Experiment 1: comma-separated generator names")
    ap.add_argument("--exp2_min_kb", type=int, default=4, help="Experiment 2: smallest size in KB, doubled up to the max")
    ap.add_argument("--exp2_max_kb", type=int, default=2048, help="Experiment 2: largest size in KB")
    ap.add_argument("--exp2_generators", default="uniform256,english_like",
                    help="Experiment 2: comma-separated generator names")
    ap.add_argument("--exp3_size_kb", type=int, default=64, help="Experiment 3: data size in KB")
    ap.add_argument("--exp3_max_alphabet", type=int, default=256, help="Experiment 3: largest alphabet, up to 256")
    return ap.parse_args(argv)


def run_experiments(args: argparse.Namespace) -> List[MetricRow]:
    rows: List[MetricRow] = []

    if not args.no_exp1:
        size_b = max(1, args.exp1_size_kb) * 1024
        for gen_name in parse_csv_list(args.exp1_generators):
            for run_id in range(1, args.runs + 1):
                name, data = generate_dataset(gen_name, size_b, args.seed + run_id)
                record(rows, data, "exp1_distribution", name, run_id)

    if not args.no_exp2:
        for gen_name in parse_csv_list(args.exp2_generators):
            for kb in power_of_two_range(args.exp2_min_kb, args.exp2_max_kb):
                for run_id in range(1, args.runs + 1):
                    name, data = generate_dataset(gen_name, kb * 1024, args.seed + 10_000 + kb + run_id)
                    record(rows, data, "exp2_size_scaling", name, run_id)

    if not args.no_exp3:
        size_b = max(1, args.exp3_size_kb) * 1024
        for alphabet in power_of_two_range(2, min(256, args.exp3_max_alphabet)):
            for run_id in range(1, args.runs + 1):
                data = gen_uniform(size_b, alphabet=alphabet, seed=args.seed + 200_000 + alphabet + run_id)
                record(rows, data, "exp3_alphabet_size", f"uniform{alphabet}", run_id)

    return rows


def main(argv: List[str] | None = None) -> int:
    args = parse_args(argv)
    outdir = Path(args.outdir)
    safe_mkdir(outdir)

    rows = run_experiments(args)

    write_csv(outdir / "metrics.csv", rows)
    group_summary(rows, outdir / "summary.csv")
    for plot in (plot_experiment_1, plot_experiment_2, plot_experiment_3):
        plot(rows, outdir)

    ok_rate = sum(r.correctness_ok for r in rows) / max(1, len(rows))
    print(f"{len(rows)} runs written to {outdir / 'metrics.csv'} (summary in {outdir / 'summary.csv'})")
    print(f"Correctness rate across all runs: {ok_rate:.3f}")
    print(f"Charts in {outdir.resolve()}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
