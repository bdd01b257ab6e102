"""
Shared fixtures: a deterministic stub embedder and a small catalogue.
"""

import numpy as np
import pytest

from models.catalogue import RequirementCatalogue
from models.entities import Standard, StandardRequirement


class StubEmbedder:
    """
    Looks normalised text up in a fixed table; unknown text gets the
    zero vector. Records every call so tests can count embeddings.
    """

    def __init__(self, table: dict[str, list[float]], dim: int = 3):
        self.table = {k: np.asarray(v, dtype=np.float32) for k, v in table.items()}
        self.dim = dim
        self.calls: list[str] = []

    def embed(self, normalized_text: str) -> np.ndarray:
        self.calls.append(normalized_text)
        return self.table.get(normalized_text, np.zeros(self.dim, dtype=np.float32))


ENCRYPTION = [1.0, 0.0, 0.0]
LOGIN = [0.0, 1.0, 0.0]
LOGGING = [0.0, 0.0, 1.0]


@pytest.fixture
def stub_embedder():
    return StubEmbedder({
        "encrypt data at rest": ENCRYPTION,
        "data must be encrypted when stored": ENCRYPTION,
        "stored data shall be encrypted": ENCRYPTION,
        "login requires a password": LOGIN,
        "security events are logged": LOGGING,
    })


@pytest.fixture
def standards():
    return [
        Standard(id="SEC", type="ISO", ref_id="ISO-27001", ref_name="Information security"),
        Standard(id="PRV", type="GDPR", ref_id="GDPR-32", ref_name="Security of processing"),
        Standard(id="SECX", type="IEC", ref_id="IEC-62443", ref_name="Industrial security"),
    ]


@pytest.fixture
def requirements():
    return [
        StandardRequirement("SEC-001", "Data must be encrypted when stored", "Crypto", "New"),
        StandardRequirement("PRV-002", "Login requires a password", "Access", ""),
        StandardRequirement("XYZ-003", "Unrelated requirement", "Other", ""),
        StandardRequirement("SECX-004", "Security events are logged", "Audit", "Updated"),
        StandardRequirement("PRV-005", "Stored data shall be encrypted", "Crypto", ""),
    ]


@pytest.fixture
def catalogue(standards, requirements):
    return RequirementCatalogue(standards, requirements)
