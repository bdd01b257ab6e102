"""
models/preprocessor.py
──────────────────────
Turns raw Standard + Requirement rows into a label-encoded training set,
and provides the text normaliser shared by training and search.

Key transformations
───────────────────
1. Normalise free text (lowercase, strip punctuation, collapse whitespace)
2. Join every requirement to the FIRST standard whose id prefixes its
   reference id (unmatched requirements are dropped)
3. Label-encode the matched standard ref ids in first-seen order (1, 2, …)
4. Hand the encoded rows to a trainer as a DataFrame
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterable, Sequence

import pandas as pd

from models.entities import (
    EncodedTrainingRecord,
    Standard,
    StandardRequirement,
    TrainingRecord,
)
from utils.logger import logger

_NON_ALNUM = re.compile(r"[^a-z0-9\s]")
_WHITESPACE = re.compile(r"\s+")

TRAINING_COLUMNS = ["reference_id", "description", "category", "change_note", "label"]


# ── text ──────────────────────────────────────────────────────────────────────

def normalize_text(text: str | None) -> str:
    """Lowercase, keep only [a-z0-9] and whitespace, collapse runs of spaces."""
    if not text or not text.strip():
        return ""
    text = _NON_ALNUM.sub("", text.lower())
    return _WHITESPACE.sub(" ", text).strip()


# ── join ──────────────────────────────────────────────────────────────────────

def match_standard(
    reference_id: str, standards: Sequence[Standard]
) -> Standard | None:
    """First standard (in the given order) whose id prefixes `reference_id`."""
    return next((s for s in standards if reference_id.startswith(s.id)), None)


def join_standards(
    standards: Sequence[Standard],
    requirements: Iterable[StandardRequirement],
) -> list[TrainingRecord]:
    """
    Pair each requirement with its originating standard.

    Standards are tried in input order, so when two ids both prefix the
    same reference id ("A" and "AB" for "AB123") the earlier one wins.
    Output keeps requirement order; requirements with no standard are skipped.
    """
    records: list[TrainingRecord] = []
    dropped = 0
    for req in requirements:
        standard = match_standard(req.reference_id, standards)
        if standard is None:
            dropped += 1
            logger.debug(f"No standard prefixes requirement '{req.reference_id}'")
            continue
        records.append(TrainingRecord.from_match(req, standard))

    logger.info(
        f"Joined {len(records):,} requirements to {len(standards):,} standards "
        f"({dropped:,} unmatched)"
    )
    return records


# ── label encoding ────────────────────────────────────────────────────────────

def build_label_map(records: Iterable[TrainingRecord]) -> dict[str, int]:
    label_map: dict[str, int] = {}
    next_code = 1
    for rec in records:
        if rec.standard_ref_id not in label_map:
            label_map[rec.standard_ref_id] = next_code
            next_code += 1
    return label_map


def encode_labels(
    records: Sequence[TrainingRecord],
) -> tuple[list[EncodedTrainingRecord], dict[str, int]]:
    """
    Replace every `standard_ref_id` with a sequential integer code.

    Codes start at 1 and follow first-seen order; a repeated ref id reuses
    its first code. The map is created fresh for each call and returned to
    the caller, who must pass it along to decode predictions later.
    """
    label_map = build_label_map(records)
    encoded = [
        EncodedTrainingRecord(
            reference_id=rec.reference_id,
            description=rec.description,
            category=rec.category,
            change_note=rec.change_note,
            label=label_map[rec.standard_ref_id],
        )
        for rec in records
    ]
    logger.info(f"Encoded {len(encoded):,} records into {len(label_map):,} labels")
    return encoded, label_map


# ── training set ──────────────────────────────────────────────────────────────

@dataclass
class TrainingSet:
    records:   list[EncodedTrainingRecord]
    label_map: dict[str, int]
    dropped:   int = 0
    _inverse:  dict[int, str] = field(default_factory=dict, init=False, repr=False)

    def __post_init__(self) -> None:
        self._inverse = {code: ref_id for ref_id, code in self.label_map.items()}

    def decode(self, label: int) -> str:
        """Map an integer label back to its standard ref id (KeyError if unknown)."""
        return self._inverse[label]

    def to_frame(self) -> pd.DataFrame:
        if not self.records:
            return pd.DataFrame(columns=TRAINING_COLUMNS)
        return pd.DataFrame([r.to_dict() for r in self.records], columns=TRAINING_COLUMNS)

    def summary(self) -> str:
        lines = [
            "═══ TrainingSet Summary ═══",
            f"  Records   : {len(self.records):,}",
            f"  Labels    : {len(self.label_map):,}",
            f"  Unmatched : {self.dropped:,}",
        ]
        for ref_id, code in self.label_map.items():
            lines.append(f"    {code:>4} → {ref_id}")
        return "\n".join(lines)


def prepare_training_set(
    standards: Sequence[Standard],
    requirements: Sequence[StandardRequirement],
    sample_size: int | None = None,
) -> TrainingSet:
    """
    join → take the first `sample_size` joined rows → encode.

    `sample_size=None` keeps every joined row. Sampling happens before
    encoding so codes only cover labels present in the sample.
    """
    if sample_size is not None and sample_size < 0:
        raise ValueError(f"sample_size must be >= 0, got {sample_size}")

    joined = join_standards(standards, requirements)
    dropped = len(requirements) - len(joined)
    if sample_size is not None:
        joined = joined[:sample_size]

    encoded, label_map = encode_labels(joined)
    return TrainingSet(records=encoded, label_map=label_map, dropped=dropped)
