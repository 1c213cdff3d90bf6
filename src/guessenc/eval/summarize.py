"""Aggregates over eval trend logs (CSV rows or JSONL payloads)."""

from __future__ import annotations

import csv
import json
from collections import Counter, defaultdict
from collections.abc import Iterator
from pathlib import Path
from typing import Any


def _csv_entries(path: Path) -> Iterator[dict[str, Any]]:
    with path.open(newline="", encoding="utf-8") as f:
        yield from csv.DictReader(f)


def _jsonl_entries(path: Path) -> Iterator[dict[str, Any]]:
    with path.open(encoding="utf-8") as f:
        for line in f:
            if not line.strip():
                continue
            payload = json.loads(line)
            if not isinstance(payload, dict):
                continue
            # `eval run --log-jsonl` nests the summary under "evaluation"
            entry = dict(payload.get("evaluation", payload))
            entry.setdefault("tag", payload.get("tag"))
            yield entry


def summarize_log(path: Path) -> dict[str, object]:
    """Entry count, sample total, mean/min/max accuracy, per-tag accuracy, detected labels."""
    entries = _csv_entries(path) if path.suffix.lower() == ".csv" else _jsonl_entries(path)

    accuracies: list[float] = []
    by_tag: dict[str, list[float]] = defaultdict(list)
    samples_total = 0
    detected: Counter[str] = Counter()

    for entry in entries:
        samples_total += int(entry.get("samples") or 0)
        raw_counts = entry.get("detected_counts") or {}
        if isinstance(raw_counts, str):
            raw_counts = json.loads(raw_counts)
        detected.update({label: int(n) for label, n in raw_counts.items()})

        if entry.get("accuracy") in (None, ""):
            continue
        accuracy = float(entry["accuracy"])
        accuracies.append(accuracy)
        by_tag[entry.get("tag") or "untagged"].append(accuracy)

    mean = sum(accuracies) / len(accuracies) if accuracies else 0.0
    return {
        "entries": len(accuracies),
        "samples_total": samples_total,
        "average_accuracy": round(mean, 4),
        "min_accuracy": min(accuracies, default=0.0),
        "max_accuracy": max(accuracies, default=0.0),
        "accuracy_by_tag": {
            tag: round(sum(values) / len(values), 4) for tag, values in sorted(by_tag.items())
        },
        "detected_counts": dict(detected),
    }
