"""
Experiment runner: orchestrates a full benchmarking sweep from a YAML config.

Usage (from repo root):
    flexsort-bench experiments/configs/01_pivot_strategies.yaml
    python -m flexsort.bench.runner experiments/configs/01_pivot_strategies.yaml --log-level DEBUG

Outputs in a new run directory:
    - config_resolved.yaml    # the config we actually used
    - meta.json               # environment info (python, numpy, cpu/ram, git commit)
    - results.jsonl           # one JSON line per timing sample or failure
    - summary.csv             # mean/median/IQR per (algo, n) + ratio to baseline
    - (console) rich table + tqdm progress

Config keys:
    required: experiment_name, output_dir, seed, repeats, warmup, disable_gc,
              timeout_seconds, dataset, sizes, algorithms
    optional: baseline (an algorithm label), verify (bool, default true)

Each `algorithms` entry:
    {name: <module in flexsort.algorithms>, label: <unique display name>, config: {...}}
`label` defaults to `name`, so the same module can be listed once per config
(e.g. one entry per pivot strategy).

Design notes:
- For each size n, we generate ONE dataset and give the same input to every algorithm.
- On timeout/error/incorrect output for an algorithm at size n, we skip larger sizes for it.
"""

from __future__ import annotations

import argparse
import datetime as _dt
import importlib
import json
import logging
import os
import platform
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

import numpy as np
import pandas as pd
import psutil
import yaml
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table
from tqdm import tqdm

from flexsort.bench.measure import summarize_ns, time_sort_call
from flexsort.datasets import make_dataset

logger = logging.getLogger(__name__)
_console = Console()

REQUIRED_KEYS = [
    "experiment_name",
    "output_dir",
    "seed",
    "repeats",
    "warmup",
    "disable_gc",
    "timeout_seconds",
    "dataset",
    "sizes",
    "algorithms",
]
SUMMARY_COLUMNS = [
    "algo", "n", "samples_ok", "mean_ns", "median_ns", "iqr_ns", "min_ns", "max_ns",
]


# ------------------------- data structures ------------------------- #

@dataclass(frozen=True)
class AlgoSpec:
    label: str
    name: str
    sort_fn: Any
    config: Dict[str, Any]


# ------------------------- helpers: IO & meta ------------------------- #

def _load_yaml(path: Path) -> Dict[str, Any]:
    with path.open("r", encoding="utf-8") as f:
        cfg = yaml.safe_load(f)
    if not isinstance(cfg, dict):
        raise ValueError(f"Experiment config must be a YAML mapping: {path}")
    return cfg


def _write_yaml(obj: Dict[str, Any], path: Path) -> None:
    with path.open("w", encoding="utf-8") as f:
        yaml.safe_dump(obj, f, sort_keys=False)


def _append_jsonl(obj: Dict[str, Any], path: Path) -> None:
    with path.open("a", encoding="utf-8") as f:
        f.write(json.dumps(obj, separators=(",", ":"), ensure_ascii=False))
        f.write("\n")


def _timestamp() -> str:
    return _dt.datetime.now().strftime("%Y%m%d_%H%M%S_%f")


def _ensure_run_dir(base_dir: Path, experiment_name: str) -> Path:
    base_dir.mkdir(parents=True, exist_ok=True)
    run_dir = base_dir / f"{_timestamp()}_{experiment_name}"
    run_dir.mkdir(parents=False, exist_ok=False)
    return run_dir


def _git_commit_short() -> Optional[str]:
    try:
        out = subprocess.check_output(["git", "rev-parse", "--short", "HEAD"], stderr=subprocess.DEVNULL)
    except (OSError, subprocess.CalledProcessError):
        return None
    return out.decode("utf-8").strip()


def _gather_meta() -> Dict[str, Any]:
    return {
        "python": platform.python_version(),
        "numpy": np.__version__,
        "pandas": pd.__version__,
        "psutil": psutil.__version__,
        "git_commit": _git_commit_short(),
        "machine": {
            "cpu": platform.processor() or platform.machine(),
            "cores_logical": psutil.cpu_count(logical=True),
            "cores_physical": psutil.cpu_count(logical=False),
            "ram_gb": round(psutil.virtual_memory().total / (1024**3), 2),
            "platform": platform.platform(),
        },
        "start_time": _dt.datetime.now().isoformat(timespec="seconds"),
        "pid": os.getpid(),
        "cwd": str(Path.cwd()),
    }


def _resolve_algorithms(cfg_algos: List[Dict[str, Any]]) -> List[AlgoSpec]:
    specs: List[AlgoSpec] = []
    seen = set()
    for entry in cfg_algos:
        if not isinstance(entry, dict):
            raise ValueError(f"Each algorithm entry must be a mapping; got {entry!r}")
        name = entry.get("name")
        if not name or not isinstance(name, str):
            raise ValueError("Each algorithm must have a string 'name' field")
        label = entry.get("label", name)
        if not isinstance(label, str) or not label:
            raise ValueError(f"Algorithm '{name}': 'label' must be a non-empty string")
        if label in seen:
            raise ValueError(f"Duplicate algorithm label in config: {label}")
        seen.add(label)

        try:
            mod = importlib.import_module(f"flexsort.algorithms.{name}")
        except ImportError as e:
            raise ImportError(f"Could not import algorithm module 'flexsort.algorithms.{name}': {e!r}") from e

        if not callable(getattr(mod, "sort", None)):
            raise AttributeError(f"Algorithm module '{name}' must define a callable `sort(a, *, config=None)`")

        config = entry.get("config") or {}
        if not isinstance(config, dict):
            raise ValueError(f"Algorithm '{label}': 'config' must be a dict if provided")

        specs.append(AlgoSpec(label=label, name=name, sort_fn=mod.sort, config=config))
    return specs


def _aggregate_summary(jsonl_path: Path, baseline: Optional[str] = None) -> pd.DataFrame:
    columns = SUMMARY_COLUMNS + (["ratio_to_baseline"] if baseline else [])
    if not jsonl_path.exists():
        return pd.DataFrame(columns=columns)
    df = pd.read_json(jsonl_path, lines=True)
    if "time_ns" not in df.columns:
        return pd.DataFrame(columns=columns)
    # Only successful samples carry time_ns
    df = df[df["time_ns"].notna()]
    if df.empty:
        return pd.DataFrame(columns=columns)

    grouped = df.groupby(["algo", "n"])["time_ns"]
    out = grouped.agg(
        samples_ok="count",
        mean_ns="mean",
        median_ns="median",
        min_ns="min",
        max_ns="max",
    )
    out["iqr_ns"] = grouped.quantile(0.75) - grouped.quantile(0.25)
    out = out.reset_index()
    int_cols = ["mean_ns", "median_ns", "iqr_ns", "min_ns", "max_ns"]
    out[int_cols] = out[int_cols].round().astype("int64")

    if baseline:
        base = out[out["algo"] == baseline][["n", "median_ns"]].rename(columns={"median_ns": "_base"})
        out = out.merge(base, on="n", how="left")
        out["ratio_to_baseline"] = (out["median_ns"] / out["_base"]).round(3)
        out = out.drop(columns="_base")

    return out[columns].sort_values(["algo", "n"], ignore_index=True)


def _print_rich_summary(summary: pd.DataFrame, sizes: List[int]) -> None:
    table = Table(title="Benchmark Summary (median ± IQR in ms)")
    table.add_column("Algorithm", style="bold")
    picks = sorted({sizes[0], sizes[len(sizes) // 2], sizes[-1]})
    has_ratio = "ratio_to_baseline" in summary.columns
    for n in picks:
        table.add_column(f"n={n}", justify="right")
    if has_ratio:
        table.add_column(f"ratio @ n={picks[-1]}", justify="right")

    for algo in summary["algo"].unique():
        row = [f"[bold]{algo}[/]"]
        rows = summary[summary["algo"] == algo]
        for n in picks:
            s = rows[rows["n"] == n]
            if s.empty:
                row.append("—")
                continue
            med_ms = int(s["median_ns"].values[0]) / 1e6
            iqr_ms = int(s["iqr_ns"].values[0]) / 1e6
            row.append(f"{med_ms:.2f} ± {iqr_ms:.2f}")
        if has_ratio:
            s = rows[rows["n"] == picks[-1]]
            ratio = s["ratio_to_baseline"].values[0] if not s.empty else None
            row.append("—" if ratio is None or pd.isna(ratio) else f"{ratio:.3f}")
        table.add_row(*row)
    _console.print()
    _console.print(table)
    _console.print()


# ------------------------- core runner ------------------------- #

def run_experiment(config_path: Path) -> Path:
    cfg = _load_yaml(config_path)

    missing = [k for k in REQUIRED_KEYS if k not in cfg]
    if missing:
        raise ValueError(f"Missing required config keys: {missing}")

    experiment_name: str = str(cfg["experiment_name"])
    output_dir = Path(cfg["output_dir"])
    sizes: List[int] = [int(n) for n in cfg["sizes"] or []]
    repeats: int = int(cfg["repeats"])
    warmup: bool = bool(cfg["warmup"])
    disable_gc: bool = bool(cfg["disable_gc"])
    timeout_seconds: float = float(cfg["timeout_seconds"])
    dataset_spec: Dict[str, Any] = dict(cfg["dataset"])
    verify: bool = bool(cfg.get("verify", True))
    baseline: Optional[str] = cfg.get("baseline")

    if not sizes or any(n < 0 for n in sizes):
        raise ValueError("Config 'sizes' must be a non-empty list of nonnegative integers")

    algos: List[AlgoSpec] = _resolve_algorithms(list(cfg["algorithms"] or []))
    if not algos:
        raise ValueError("Config 'algorithms' must list at least one algorithm")
    if baseline is not None and baseline not in {a.label for a in algos}:
        raise ValueError(f"baseline {baseline!r} is not one of the algorithm labels")

    run_dir = _ensure_run_dir(output_dir, experiment_name)
    results_path = run_dir / "results.jsonl"
    summary_path = run_dir / "summary.csv"
    meta_path = run_dir / "meta.json"
    cfg_resolved_path = run_dir / "config_resolved.yaml"

    _write_yaml(cfg, cfg_resolved_path)
    with meta_path.open("w", encoding="utf-8") as f:
        json.dump(_gather_meta(), f, indent=2)

    rng = np.random.default_rng(int(cfg["seed"]))
    per_algo_skip = {a.label: False for a in algos}

    _console.print(f"[bold green]Run directory:[/bold green] {run_dir}")
    _console.print(f"[bold]Experiment:[/bold] {experiment_name}")
    _console.print(f"[bold]Algorithms:[/bold] {', '.join(a.label for a in algos)}")
    _console.print()

    for n in tqdm(sizes, desc="Sizes", unit="n"):
        base_a = make_dataset(n, dataset_spec, rng)

        for a_spec in algos:
            if per_algo_skip[a_spec.label]:
                continue

            res = time_sort_call(
                algo_name=a_spec.label,
                algo_fn=a_spec.sort_fn,
                a=base_a,
                config=a_spec.config,
                repeats=repeats,
                warmup=warmup,
                disable_gc=disable_gc,
                timeout_seconds=timeout_seconds,
                defensive_copy=True,
                verify=verify,
            )

            for trial_idx, t_ns in enumerate(res["samples_ns"]):
                _append_jsonl(
                    {
                        "algo": a_spec.label,
                        "module": a_spec.name,
                        "n": n,
                        "dataset": dataset_spec,
                        "trial": trial_idx,
                        "time_ns": int(t_ns),
                        "config": a_spec.config,
                    },
                    results_path,
                )

            if res["samples_ns"]:
                stats = summarize_ns(res["samples_ns"])
                logger.info(
                    "%s n=%d: median %.3f ms, IQR %.3f ms over %d runs",
                    a_spec.label, n, stats["median"] / 1e6, stats["iqr"] / 1e6, stats["runs"],
                )

            status = res["status"]
            if status != "ok":
                per_algo_skip[a_spec.label] = True
                logger.info("Skipping larger sizes for %s after status=%s at n=%d", a_spec.label, status, n)
                _append_jsonl(
                    {
                        "algo": a_spec.label,
                        "module": a_spec.name,
                        "n": n,
                        "status": status,
                        "error": res.get("error"),
                        "timed_out_on_repeat": res.get("timed_out_on_repeat"),
                        "config": a_spec.config,
                    },
                    results_path,
                )

    summary_df = _aggregate_summary(results_path, baseline)
    summary_df.to_csv(summary_path, index=False)

    if summary_df.empty:
        _console.print("[yellow](no samples)[/yellow]")
    else:
        _print_rich_summary(summary_df, sizes)

    _console.print("[bold green]Done.[/bold green] Wrote:")
    for path in (results_path, summary_path, meta_path, cfg_resolved_path):
        _console.print(f" - {path}")

    return run_dir


# ------------------------- CLI ------------------------- #

def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Run a sorting benchmark experiment from a YAML config.")
    p.add_argument("config", type=str, help="Path to YAML experiment config")
    p.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (DEBUG also logs per-call quicksort statistics)",
    )
    return p.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    args = _parse_args(argv)
    logging.basicConfig(
        level=args.log_level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=_console, rich_tracebacks=True)],
    )
    config_path = Path(args.config).resolve()
    if not config_path.exists():
        raise SystemExit(f"Config file not found: {config_path}")
    try:
        run_experiment(config_path)
    except Exception as e:
        _console.print(f"[bold red]Runner failed:[/bold red] {e!r}")
        raise


if __name__ == "__main__":
    main()
