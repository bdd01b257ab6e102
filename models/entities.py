"""
models/entities.py
──────────────────
Plain record types shared by the training-set pipeline, the search engine
and the API layer.

  Standard              — a source document; its `id` prefixes requirement ids
  StandardRequirement   — one extracted requirement row (also a search candidate)
  TrainingRecord        — a requirement joined to its standard's ref id
  EncodedTrainingRecord — a training record with the ref id label-encoded
"""

from __future__ import annotations

from dataclasses import asdict, dataclass

MAX_DESCRIPTION_LENGTH = 500


@dataclass(frozen=True)
class Standard:
    id:       str
    type:     str = ""
    ref_id:   str = ""
    ref_name: str = ""

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True, eq=False)
class StandardRequirement:
    """
    Compared by identity: search results must point back at the exact
    candidate objects they were ranked from.
    """
    reference_id: str
    description:  str = ""
    category:     str = ""
    change_note:  str = ""

    def __post_init__(self) -> None:
        if len(self.description) > MAX_DESCRIPTION_LENGTH:
            object.__setattr__(
                self, "description", self.description[:MAX_DESCRIPTION_LENGTH]
            )

    def to_dict(self) -> dict:
        return asdict(self)


# Raw requirement rows and search candidates carry the same fields.
Requirement = StandardRequirement


@dataclass(frozen=True)
class TrainingRecord:
    reference_id:    str
    description:     str
    category:        str
    change_note:     str
    standard_ref_id: str

    @classmethod
    def from_match(cls, requirement: StandardRequirement, standard: Standard) -> TrainingRecord:
        return cls(
            reference_id=requirement.reference_id,
            description=requirement.description,
            category=requirement.category,
            change_note=requirement.change_note,
            standard_ref_id=standard.ref_id,
        )


@dataclass(frozen=True)
class EncodedTrainingRecord:
    reference_id: str
    description:  str
    category:     str
    change_note:  str
    label:        int

    def to_dict(self) -> dict:
        return asdict(self)
