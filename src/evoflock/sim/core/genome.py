from __future__ import annotations

from typing import Iterable, Iterator

import numpy as np

from .rng import DeterministicRng


class Genome:
    """Fixed-length sequence of float32 genes.

    Genomes are the currency between a brain and the genetic algorithm: a
    network flattens itself into one, crossover and mutation produce new ones,
    and a network is rebuilt from the result.
    """

    __slots__ = ("_genes",)

    def __init__(self, genes: Iterable[float]):
        self._genes = np.array(list(genes), dtype=np.float32)

    @classmethod
    def random(cls, rng: DeterministicRng, length: int) -> "Genome":
        return cls(rng.next_range(-1.0, 1.0) for _ in range(length))

    @property
    def genes(self) -> np.ndarray:
        return self._genes

    def __len__(self) -> int:
        return len(self._genes)

    def __getitem__(self, index: int) -> float:
        return float(self._genes[index])

    def __setitem__(self, index: int, value: float) -> None:
        self._genes[index] = value

    def __iter__(self) -> Iterator[float]:
        return (float(gene) for gene in self._genes)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Genome):
            return NotImplemented
        return bool(np.array_equal(self._genes, other._genes))

    def __repr__(self) -> str:
        return f"Genome({self._genes.tolist()!r})"

    def copy(self) -> "Genome":
        return Genome(self._genes)
