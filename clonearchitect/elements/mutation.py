from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, Sequence

import numpy as np
from numpy.typing import NDArray


@dataclass(frozen=True, eq=False)
class Mutation:
    """A single somatic variant with its allele frequency in every sample."""

    mutation_id: int
    chromosome: str
    position: int
    description: str = ""
    frequencies: NDArray[np.float64] = field(
        default_factory=lambda: np.zeros(0), repr=False
    )

    @classmethod
    def from_values(
        cls,
        mutation_id: int,
        frequencies: Sequence[float],
        chromosome: str = "",
        position: int = 0,
        description: str = "",
    ) -> "Mutation":
        return cls(
            mutation_id=mutation_id,
            chromosome=chromosome,
            position=position,
            description=description,
            frequencies=np.asarray(frequencies, dtype=float),
        )

    def __str__(self) -> str:
        return f"snv{self.mutation_id}: {self.chromosome} {self.position} {self.description}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.mutation_id,
            "chromosome": self.chromosome,
            "position": self.position,
            "description": self.description,
            "frequencies": self.frequencies.tolist(),
        }
