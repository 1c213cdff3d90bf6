"""Accuracy harness for the detector over labelled samples.

Purpose:
- Track how the rule chain behaves on a reproducible synthetic corpus.
- Break results down by expected label so regressions in one rule stand out.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass

from guessenc.data.samples import Sample, generate_samples
from guessenc.guess import Guesser
from guessenc.reader import DEFAULT_CHUNK_SIZE


@dataclass
class Miss:
    language: str
    expected: str
    detected: str
    has_bom: bool


@dataclass
class EvalSummary:
    samples: int
    correct: int
    accuracy: float
    detected_counts: dict[str, int]
    confusion: dict[str, dict[str, int]]
    misses: list[Miss]
    notes: str


def evaluate_samples(
    samples: list[Sample],
    guesser: Guesser | None = None,
    chunk_size: int | None = DEFAULT_CHUNK_SIZE,
    ignore_bom: bool = False,
    miss_limit: int = 5,
) -> EvalSummary:
    """Run the detector on every sample and summarize hits and misses."""
    guesser = guesser or Guesser()
    detected_counts: Counter[str] = Counter()
    confusion: dict[str, Counter[str]] = {}
    misses: list[Miss] = []
    correct = 0

    for sample in samples:
        result = guesser.guess_bytes(sample.data, chunk_size=chunk_size, ignore_bom=ignore_bom)
        detected = str(result)
        detected_counts[detected] += 1
        confusion.setdefault(sample.expected, Counter())[detected] += 1
        if detected == sample.expected:
            correct += 1
        elif len(misses) < miss_limit:
            misses.append(
                Miss(
                    language=sample.language,
                    expected=sample.expected,
                    detected=detected,
                    has_bom=sample.has_bom,
                )
            )

    total = len(samples)
    return EvalSummary(
        samples=total,
        correct=correct,
        accuracy=round(correct / total, 4) if total else 0.0,
        detected_counts=dict(detected_counts),
        confusion={label: dict(counts) for label, counts in confusion.items()},
        misses=misses,
        notes="ignore_bom" if ignore_bom else "bom+heuristics",
    )


def evaluate_synthetic(
    count: int = 16,
    seed: int = 1234,
    chunk_size: int | None = DEFAULT_CHUNK_SIZE,
    ignore_bom: bool = False,
    guesser: Guesser | None = None,
) -> dict[str, object]:
    """Generate a synthetic corpus and return its evaluation plus generator settings."""
    samples = generate_samples(count=count, seed=seed)
    summary = evaluate_samples(
        samples, guesser=guesser, chunk_size=chunk_size, ignore_bom=ignore_bom
    )
    return {
        "generator": {"count": count, "seed": seed, "chunk_size": chunk_size},
        "evaluation": summary,
    }
