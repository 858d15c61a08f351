from __future__ import annotations

from typing import List

from .eye import Eye
from .genome import Genome
from .network import Network
from .rng import DeterministicRng


def brain_topology(eye: Eye) -> List[int]:
    # vision cells -> hidden -> (speed change, rotation change)
    return [eye.cells, 2 * eye.cells, 2]


class Brain:
    __slots__ = ("network",)

    def __init__(self, network: Network):
        self.network = network

    @classmethod
    def random(cls, rng: DeterministicRng, eye: Eye) -> "Brain":
        return cls(Network.random(rng, brain_topology(eye)))

    @classmethod
    def from_genome(cls, genome: Genome, eye: Eye) -> "Brain":
        return cls(Network.from_genome(brain_topology(eye), genome))

    def as_genome(self) -> Genome:
        return self.network.to_genome()
