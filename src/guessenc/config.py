"""Detection settings, loadable from YAML or JSON."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from guessenc.guess import Guesser
from guessenc.heuristics import TEST_THRESHOLD_APPROX, TEST_THRESHOLD_DIRECT, build_rules
from guessenc.reader import DEFAULT_CHUNK_SIZE
from guessenc.registry import build_registry
from guessenc.testchars import DEFAULT_RESOURCE, TestCharTable


class ConfigError(ValueError):
    """Raised for malformed detection settings."""


@dataclass
class GuessConfig:
    chunk_size: int | None = DEFAULT_CHUNK_SIZE  # None reads the whole stream at once
    ignore_bom: bool = False
    test_chars: Path | None = None  # alternate test character resource
    extra_encodings: list[str] = field(default_factory=list)  # appended to the statistical pool
    direct_threshold: float = TEST_THRESHOLD_DIRECT
    approx_threshold: float = TEST_THRESHOLD_APPROX

    def __post_init__(self) -> None:
        if self.chunk_size is not None and (
            isinstance(self.chunk_size, bool)
            or not isinstance(self.chunk_size, int)
            or self.chunk_size <= 0
        ):
            raise ConfigError(f"chunk_size must be a positive integer, got {self.chunk_size!r}")
        for label, value in (
            ("direct_threshold", self.direct_threshold),
            ("approx_threshold", self.approx_threshold),
        ):
            if not 0 < float(value) <= 1:
                raise ConfigError(f"{label} must be in (0, 1], got {value!r}")

    @staticmethod
    def from_mapping(payload: dict[str, Any]) -> GuessConfig:
        unknown = set(payload) - {
            "chunk_size",
            "ignore_bom",
            "test_chars",
            "extra_encodings",
            "direct_threshold",
            "approx_threshold",
        }
        if unknown:
            raise ConfigError(f"Unknown config keys: {sorted(unknown)}")
        extra = payload.get("extra_encodings") or []
        if isinstance(extra, str):
            extra = [extra]
        chunk_size = payload.get("chunk_size", DEFAULT_CHUNK_SIZE)
        try:
            return GuessConfig(
                chunk_size=chunk_size,
                ignore_bom=bool(payload.get("ignore_bom", False)),
                test_chars=Path(payload["test_chars"]) if payload.get("test_chars") else None,
                extra_encodings=[str(name) for name in extra],
                direct_threshold=float(payload.get("direct_threshold", TEST_THRESHOLD_DIRECT)),
                approx_threshold=float(payload.get("approx_threshold", TEST_THRESHOLD_APPROX)),
            )
        except ConfigError:
            raise
        except (TypeError, ValueError) as exc:
            raise ConfigError(str(exc)) from exc


def load_config(path: Path) -> GuessConfig:
    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")
    try:
        if path.suffix.lower() in {".yml", ".yaml"}:
            payload = yaml.safe_load(path.read_text())
        else:
            payload = json.loads(path.read_text())
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise ConfigError(f"Malformed config file {path}: {exc}") from exc
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise ConfigError(f"Config must be a mapping: {path}")
    return GuessConfig.from_mapping(payload)


def build_guesser(config: GuessConfig) -> Guesser:
    """Fresh registry, table and rule chain wired from `config`."""
    registry = build_registry()
    table = TestCharTable.from_resource(config.test_chars or DEFAULT_RESOURCE, registry=registry)
    for name in config.extra_encodings:
        table.char_bytes_for(name)
    rules = build_rules(table, direct=config.direct_threshold, approx=config.approx_threshold)
    return Guesser(registry=registry, table=table, rules=rules)
