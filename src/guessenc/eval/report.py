"""Helpers to log evaluation summaries for trend tracking."""

from __future__ import annotations

import csv
import json
from collections.abc import Mapping
from dataclasses import asdict, is_dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from guessenc.eval.harness import EvalSummary


def summary_to_row(
    summary: EvalSummary | Mapping[str, object], source: str, tag: str | None = None
) -> dict:
    """Flatten EvalSummary into a CSV/JSONL-friendly row."""
    if isinstance(summary, Mapping):
        samples_obj: Any = summary.get("samples", 0)
        correct_obj: Any = summary.get("correct", 0)
        accuracy_obj: Any = summary.get("accuracy", 0.0)
        counts_obj: Any = summary.get("detected_counts", {})
        samples = int(samples_obj or 0)
        correct = int(correct_obj or 0)
        accuracy = float(accuracy_obj or 0.0)
        counts = dict(counts_obj) if isinstance(counts_obj, Mapping) else {}
        notes = str(summary.get("notes", ""))
    else:
        samples = summary.samples
        correct = summary.correct
        accuracy = summary.accuracy
        counts = summary.detected_counts
        notes = summary.notes
    return {
        "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        "source": source,
        "tag": tag or "",
        "samples": samples,
        "correct": correct,
        "accuracy": accuracy,
        "detected_counts": json.dumps(counts),
        "notes": notes,
    }


def _default(obj: Any) -> Any:
    if is_dataclass(obj) and not isinstance(obj, type):
        return asdict(obj)
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


def append_csv(path: Path, row: dict) -> None:
    """Append a row to a CSV file, writing headers when the file is new."""
    path.parent.mkdir(parents=True, exist_ok=True)
    is_new = not path.exists()
    with path.open("a", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=list(row.keys()))
        if is_new:
            writer.writeheader()
        writer.writerow(row)


def append_jsonl(path: Path, payload: dict) -> None:
    """Append a JSON line (UTF-8) to a log file; dataclasses are expanded."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("a", encoding="utf-8") as f:
        f.write(json.dumps(payload, default=_default) + "\n")
