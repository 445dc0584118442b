"""
End-to-end run of the YAML experiment runner in a temporary directory.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict

import pandas as pd
import pytest
import yaml

from flexsort.bench.runner import main, run_experiment


def _write_config(tmp_path: Path, **overrides: Any) -> Path:
    cfg: Dict[str, Any] = {
        "experiment_name": "smoke",
        "output_dir": str(tmp_path / "runs"),
        "seed": 1,
        "repeats": 2,
        "warmup": True,
        "disable_gc": False,
        "timeout_seconds": 30,
        "baseline": "builtin",
        "dataset": {"dist": "few_uniques", "params": {"unique": 5}},
        "sizes": [50, 400],
        "algorithms": [
            {"name": "builtin_timsort", "label": "builtin"},
            {"name": "quicksort", "label": "quick_median3", "config": {"pivot": "median3"}},
            {"name": "quicksort", "label": "quick_stable", "config": {"stable": True, "seed": 3}},
        ],
    }
    cfg.update(overrides)
    path = tmp_path / "experiment.yaml"
    path.write_text(yaml.safe_dump(cfg, sort_keys=False), encoding="utf-8")
    return path


def test_run_experiment_writes_outputs(tmp_path: Path) -> None:
    run_dir = run_experiment(_write_config(tmp_path))

    for name in ("config_resolved.yaml", "meta.json", "results.jsonl", "summary.csv"):
        assert (run_dir / name).exists(), name

    meta = json.loads((run_dir / "meta.json").read_text(encoding="utf-8"))
    assert "numpy" in meta and "machine" in meta

    lines = [json.loads(line) for line in (run_dir / "results.jsonl").read_text(encoding="utf-8").splitlines()]
    assert len(lines) == 3 * 2 * 2
    assert all("time_ns" in rec for rec in lines)

    summary = pd.read_csv(run_dir / "summary.csv")
    assert set(summary["algo"]) == {"builtin", "quick_median3", "quick_stable"}
    assert set(summary["n"]) == {50, 400}
    assert (summary["samples_ok"] == 2).all()
    base = summary[summary["algo"] == "builtin"]
    assert (base["ratio_to_baseline"] == 1.0).all()


def test_timed_out_algorithm_is_skipped_for_larger_sizes(tmp_path: Path) -> None:
    path = _write_config(
        tmp_path,
        baseline=None,
        algorithms=[{"name": "quicksort", "config": {"comparator": None}}],
        timeout_seconds=1e-9,
    )
    run_dir = run_experiment(path)
    lines = [json.loads(line) for line in (run_dir / "results.jsonl").read_text(encoding="utf-8").splitlines()]
    statuses = [rec for rec in lines if rec.get("status") == "timeout"]
    assert len(statuses) == 1
    assert statuses[0]["n"] == 50


@pytest.mark.parametrize(
    "overrides, exc",
    [
        ({"sizes": []}, ValueError),
        ({"algorithms": [{"name": "quicksort"}, {"name": "quicksort"}]}, ValueError),
        ({"algorithms": [{"name": "does_not_exist"}]}, ImportError),
        ({"baseline": "missing"}, ValueError),
    ],
)
def test_invalid_configs(tmp_path: Path, overrides: Dict[str, Any], exc: type) -> None:
    with pytest.raises(exc):
        run_experiment(_write_config(tmp_path, **overrides))


def test_missing_keys(tmp_path: Path) -> None:
    path = tmp_path / "bad.yaml"
    path.write_text("experiment_name: x\n", encoding="utf-8")
    with pytest.raises(ValueError, match="Missing required config keys"):
        run_experiment(path)


def test_main_cli(tmp_path: Path) -> None:
    main([str(_write_config(tmp_path, sizes=[20])), "--log-level", "INFO"])
    assert len(list((tmp_path / "runs").iterdir())) == 1


def test_logs_timing_summary_per_size(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.INFO, logger="flexsort.bench.runner"):
        run_experiment(_write_config(tmp_path, sizes=[30]))
    messages = [r.getMessage() for r in caplog.records if r.name == "flexsort.bench.runner"]
    assert any(m.startswith("quick_median3 n=30: median") and "over 2 runs" in m for m in messages)


def test_main_missing_file(tmp_path: Path) -> None:
    with pytest.raises(SystemExit):
        main([str(tmp_path / "nope.yaml")])
