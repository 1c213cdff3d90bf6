"""Public entry points: BOM first, then the heuristic chain chunk by chunk."""

from __future__ import annotations

import io
import logging
from collections.abc import Sequence
from pathlib import Path
from typing import BinaryIO

from guessenc.bom import BOM_RULES, BomRule, detect_bom
from guessenc.heuristics import HeuristicRule, build_rules
from guessenc.reader import DEFAULT_CHUNK_SIZE, ByteReader
from guessenc.registry import UNKNOWN, Encoding, EncodingRegistry
from guessenc.testchars import TestCharTable, default_test_chars

logger = logging.getLogger(__name__)


class Guesser:
    """Detects the most likely encoding of a byte stream; falls back to UNKNOWN."""

    def __init__(
        self,
        registry: EncodingRegistry | None = None,
        table: TestCharTable | None = None,
        rules: Sequence[HeuristicRule] | None = None,
        bom_rules: tuple[BomRule, ...] = BOM_RULES,
    ) -> None:
        if table is not None and registry is not None and table.registry is not registry:
            raise ValueError("table must be built on the same registry as the guesser")
        if table is None:
            table = default_test_chars() if registry is None else TestCharTable.from_resource(
                registry=registry
            )
        self.registry = registry if registry is not None else table.registry
        self.table = table
        if rules is None:
            rules = build_rules(table)
        self.rules: tuple[HeuristicRule, ...] = tuple(rules)
        self.bom_rules = bom_rules

    @property
    def supported_encodings(self) -> tuple[Encoding, ...]:
        """Everything the heuristic chain can report, in rule order."""
        seen: list[Encoding] = []
        for rule in self.rules:
            for encoding in rule.encodings:
                if encoding not in seen:
                    seen.append(encoding)
        return tuple(seen)

    @property
    def supported_boms(self) -> tuple[Encoding, ...]:
        return tuple(rule.encoding for rule in self.bom_rules)

    def guess(
        self,
        stream: BinaryIO,
        chunk_size: int | None = DEFAULT_CHUNK_SIZE,
        ignore_bom: bool = False,
    ) -> Encoding:
        if not ignore_bom:
            bom = detect_bom(stream, self.bom_rules)
            if bom is not None:
                return bom

        reader = ByteReader(stream, chunk_size)
        while reader.read_chunk():
            for rule in self.rules:
                encoding = rule.evaluate(reader)
                if encoding and encoding in self.registry:
                    logger.debug(
                        "Rule %s picked %s after %d bytes", rule.name, encoding, reader.total
                    )
                    return encoding

        return UNKNOWN

    def guess_bytes(
        self, data: bytes, chunk_size: int | None = DEFAULT_CHUNK_SIZE, ignore_bom: bool = False
    ) -> Encoding:
        return self.guess(io.BytesIO(data), chunk_size=chunk_size, ignore_bom=ignore_bom)

    def guess_path(
        self, path: Path, chunk_size: int | None = DEFAULT_CHUNK_SIZE, ignore_bom: bool = False
    ) -> Encoding:
        with Path(path).open("rb") as handle:
            return self.guess(handle, chunk_size=chunk_size, ignore_bom=ignore_bom)


def guess(
    stream: BinaryIO, chunk_size: int | None = DEFAULT_CHUNK_SIZE, ignore_bom: bool = False
) -> Encoding:
    return Guesser().guess(stream, chunk_size=chunk_size, ignore_bom=ignore_bom)


def guess_bytes(
    data: bytes, chunk_size: int | None = DEFAULT_CHUNK_SIZE, ignore_bom: bool = False
) -> Encoding:
    return Guesser().guess_bytes(data, chunk_size=chunk_size, ignore_bom=ignore_bom)


def guess_path(
    path: Path, chunk_size: int | None = DEFAULT_CHUNK_SIZE, ignore_bom: bool = False
) -> Encoding:
    return Guesser().guess_path(path, chunk_size=chunk_size, ignore_bom=ignore_bom)
