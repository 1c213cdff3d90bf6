"""Synthetic labelled corpus for exercising the detector.

Each sample is a short multilingual paragraph encoded into one encoding,
optionally prefixed with that encoding's BOM. Generation is seeded so eval
runs and regression tests are reproducible.
"""

from __future__ import annotations

import random
from collections.abc import Sequence
from dataclasses import dataclass

PARAGRAPHS: dict[str, str] = {
    "en": (
        "The quick brown fox jumps over the lazy dog. Pack my box with five dozen "
        "liquor jugs, then send the invoice to the accounting department."
    ),
    "de": (
        "Der Bericht über die Entwicklung der Stadt wurde gestern im Rathaus vorgestellt. "
        "Die Verwaltung möchte mehr Geld für Schulen und Straßen ausgeben, aber einige "
        "Anwohner befürchten höhere Gebühren."
    ),
    "fr": (
        "Le centre de la ville était déjà animé: les cafés à côté de la gare servaient "
        "des crêpes, et l'été s'annonçait très chaud pour les élèves."
    ),
    "es": (
        "El niño pequeño comió una piña en el jardín mientras su mamá leía un "
        "artículo sobre la educación y la información pública."
    ),
}

# (python codec, expected label, BOM prefix)
TARGETS: tuple[tuple[str, str, bytes], ...] = (
    ("latin-1", "ISO-8859-1", b""),
    ("utf-8", "UTF-8", b""),
    ("utf-8", "UTF-8", b"\xef\xbb\xbf"),
    ("utf-16-le", "UTF-16LE", b"\xff\xfe"),
    ("utf-16-be", "UTF-16BE", b"\xfe\xff"),
    ("utf-32-le", "UTF-32LE", b"\xff\xfe\x00\x00"),
    ("utf-32-be", "UTF-32BE", b"\x00\x00\xfe\xff"),
)


@dataclass
class Sample:
    language: str
    codec: str
    expected: str
    data: bytes
    bom: bytes = b""

    @property
    def has_bom(self) -> bool:
        return bool(self.bom)


def expected_label(text: str, codec: str, expected: str, bom: bytes) -> str:
    if not bom and text.isascii() and codec in {"latin-1", "utf-8"}:
        return "ASCII"
    return expected


def generate_samples(
    count: int = 16,
    *,
    seed: int = 1234,
    repeat: int = 3,
    targets: Sequence[tuple[str, str, bytes]] = TARGETS,
) -> list[Sample]:
    """Draw `count` samples of `repeat` joined paragraphs each."""
    rng = random.Random(seed)
    languages = sorted(PARAGRAPHS)
    samples: list[Sample] = []
    for _ in range(count):
        language = rng.choice(languages)
        codec, expected, bom = rng.choice(list(targets))
        text = " ".join([PARAGRAPHS[language]] * repeat)
        samples.append(
            Sample(
                language=language,
                codec=codec,
                expected=expected_label(text, codec, expected, bom),
                data=bom + text.encode(codec),
                bom=bom,
            )
        )
    return samples

