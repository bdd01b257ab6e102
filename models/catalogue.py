"""
models/catalogue.py
───────────────────
In-memory catalogue of standards and requirements.

Rows arrive already loaded (lists of records, or DataFrames handed over by
whatever reads the workbook); the catalogue keeps their order, answers
id lookups and prepares the training set.
"""

from __future__ import annotations

import re
from typing import Any, Sequence

import pandas as pd

from models.entities import Standard, StandardRequirement
from models.preprocessor import TrainingSet, prepare_training_set
from utils.logger import logger

# accepted header variants per field, tried in order
_STANDARD_COLUMNS: dict[str, tuple[str, ...]] = {
    "id":       ("mlsr_id", "mlsrid", "standard_id", "id"),
    "type":     ("standard_type", "type"),
    "ref_id":   ("standard_ref_id", "standardrefid", "ref_id"),
    "ref_name": ("standard_ref_name", "standard_name", "ref_name"),
}
_REQUIREMENT_COLUMNS: dict[str, tuple[str, ...]] = {
    "reference_id": ("reference_mlsr_id", "referencemlsrid", "reference_id", "id"),
    "description":  ("requirement_description", "requirement", "description"),
    "category":     ("category",),
    "change_note":  ("change_in_requirement", "change_in_requirements", "change_note"),
}


# ─────────────────────────────────────────────────────────────────────────────
#  DataFrame helpers
# ─────────────────────────────────────────────────────────────────────────────

def _snake(name: Any) -> str:
    return re.sub(r"[^a-z0-9]+", "_", str(name).strip().lower()).strip("_")


def _resolve_columns(
    df: pd.DataFrame, wanted: dict[str, tuple[str, ...]], required: str
) -> dict[str, str | None]:
    by_snake = {_snake(c): c for c in df.columns}
    resolved = {
        fld: next((by_snake[c] for c in candidates if c in by_snake), None)
        for fld, candidates in wanted.items()
    }
    if resolved[required] is None:
        raise KeyError(
            f"No column for '{required}' found. "
            f"Expected one of {list(wanted[required])}, got {list(df.columns)}"
        )
    return resolved


def _cell_text(value: Any) -> str:
    """
    Cell value as displayed text. Integer columns with blanks arrive as
    float64, so 101.0 is rendered back as '101'.
    """
    if isinstance(value, float) and value.is_integer():
        return f"{value:.0f}"
    return str(value).strip()


def _rows(df: pd.DataFrame, wanted: dict[str, tuple[str, ...]], required: str) -> list[dict[str, str]]:
    columns = _resolve_columns(df, wanted, required)
    clean = df.astype(object).where(df.notna(), "")
    rows: list[dict[str, str]] = []
    for _, row in clean.iterrows():
        values = {
            fld: (_cell_text(row[col]) if col is not None else "")
            for fld, col in columns.items()
        }
        if not values[required]:
            continue   # blank / trailing sheet rows
        rows.append(values)
    return rows


# ─────────────────────────────────────────────────────────────────────────────
#  Catalogue
# ─────────────────────────────────────────────────────────────────────────────

class RequirementCatalogue:
    """
    Parameters
    ----------
    standards    : Standard records, in source order (order decides prefix ties)
    requirements : StandardRequirement records, in source order
    """

    def __init__(
        self,
        standards: Sequence[Standard] = (),
        requirements: Sequence[StandardRequirement] = (),
    ) -> None:
        self._standards = list(standards)
        self._requirements = list(requirements)
        logger.info(
            f"Catalogue ready: {len(self._standards):,} standards, "
            f"{len(self._requirements):,} requirements"
        )

    @classmethod
    def from_frames(
        cls,
        standards_df: pd.DataFrame,
        requirements_df: pd.DataFrame,
    ) -> RequirementCatalogue:
        """Build a catalogue from DataFrames with loosely-named headers."""
        standards = [Standard(**r) for r in _rows(standards_df, _STANDARD_COLUMNS, "id")]
        requirements = [
            StandardRequirement(**r)
            for r in _rows(requirements_df, _REQUIREMENT_COLUMNS, "reference_id")
        ]
        return cls(standards, requirements)

    # ── listing ───────────────────────────────────────────────────────────────

    def standards(self) -> list[Standard]:
        return list(self._standards)

    def requirements(self) -> list[StandardRequirement]:
        return list(self._requirements)

    # ── lookups ───────────────────────────────────────────────────────────────

    def get_standard(self, standard_id: str) -> Standard | None:
        return next((s for s in self._standards if s.id == standard_id), None)

    def get_requirement(self, reference_id: str) -> StandardRequirement | None:
        return next(
            (r for r in self._requirements if r.reference_id == reference_id), None
        )

    # ── training ──────────────────────────────────────────────────────────────

    def prepare_training_set(self, sample_size: int | None = None) -> TrainingSet:
        return prepare_training_set(self._standards, self._requirements, sample_size)

    def __len__(self) -> int:
        return len(self._requirements)
