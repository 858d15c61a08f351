from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, List, Sequence

import numpy as np

from .genome import Genome
from .rng import DeterministicRng


def validate_topology(topology: Sequence[int]) -> None:
    if len(topology) < 2:
        raise ValueError(f"topology needs at least 2 layers, got {len(topology)}")
    for size in topology:
        if size < 1:
            raise ValueError(f"layer sizes must be positive, got {list(topology)}")


def genome_length(topology: Sequence[int]) -> int:
    return sum((1 + inputs) * outputs for inputs, outputs in zip(topology, topology[1:]))


@dataclass(slots=True, eq=False)
class Neuron:
    bias: np.float32
    weights: np.ndarray

    @classmethod
    def random(cls, rng: DeterministicRng, input_size: int) -> "Neuron":
        bias = rng.next_range(-1.0, 1.0)
        weights = [rng.next_range(-1.0, 1.0) for _ in range(input_size)]
        return cls(np.float32(bias), np.array(weights, dtype=np.float32))

    @classmethod
    def from_genes(cls, input_size: int, genes: Iterator[float]) -> "Neuron":
        bias = next(genes, None)
        if bias is None:
            raise ValueError("genome too short: missing neuron bias")
        weights = []
        for _ in range(input_size):
            weight = next(genes, None)
            if weight is None:
                raise ValueError("genome too short: missing neuron weights")
            weights.append(weight)
        return cls(np.float32(bias), np.array(weights, dtype=np.float32))

    def propagate(self, inputs: np.ndarray) -> float:
        if len(inputs) != len(self.weights):
            raise ValueError(f"neuron expects {len(self.weights)} inputs, got {len(inputs)}")
        output = np.float32(np.dot(inputs, self.weights)) + self.bias
        return max(np.float32(0.0), output)


@dataclass(slots=True, eq=False)
class Layer:
    neurons: List[Neuron]

    @classmethod
    def random(cls, rng: DeterministicRng, input_size: int, output_size: int) -> "Layer":
        return cls([Neuron.random(rng, input_size) for _ in range(output_size)])

    @classmethod
    def from_genes(cls, input_size: int, output_size: int, genes: Iterator[float]) -> "Layer":
        return cls([Neuron.from_genes(input_size, genes) for _ in range(output_size)])

    def propagate(self, inputs: np.ndarray) -> np.ndarray:
        return np.array([neuron.propagate(inputs) for neuron in self.neurons], dtype=np.float32)


class Network:
    """Fixed-topology feed-forward network with ReLU activations.

    Parameters are laid out neuron by neuron, layer by layer, bias first and
    then one weight per input. ``to_genome`` and ``from_genome`` use that same
    order, so flattening and rebuilding is lossless.
    """

    def __init__(self, layers: List[Layer]):
        self.layers = layers

    @classmethod
    def random(cls, rng: DeterministicRng, topology: Sequence[int]) -> "Network":
        validate_topology(topology)
        layers = [
            Layer.random(rng, inputs, outputs) for inputs, outputs in zip(topology, topology[1:])
        ]
        return cls(layers)

    @classmethod
    def from_genome(cls, topology: Sequence[int], genome: Genome) -> "Network":
        validate_topology(topology)
        genes = iter(genome)
        layers = [
            Layer.from_genes(inputs, outputs, genes) for inputs, outputs in zip(topology, topology[1:])
        ]
        if next(genes, None) is not None:
            raise ValueError(
                f"genome too long: topology {list(topology)} uses {genome_length(topology)} "
                f"genes, got {len(genome)}"
            )
        return cls(layers)

    @property
    def topology(self) -> List[int]:
        if not self.layers:
            return []
        sizes = [len(self.layers[0].neurons[0].weights)]
        sizes.extend(len(layer.neurons) for layer in self.layers)
        return sizes

    def to_genome(self) -> Genome:
        return Genome(self._flatten())

    def _flatten(self) -> Iterator[float]:
        for layer in self.layers:
            for neuron in layer.neurons:
                yield neuron.bias
                yield from neuron.weights

    def propagate(self, inputs: Sequence[float]) -> np.ndarray:
        values = np.asarray(inputs, dtype=np.float32)
        for layer in self.layers:
            values = layer.propagate(values)
        return values

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Network):
            return NotImplemented
        return self.topology == other.topology and self.to_genome() == other.to_genome()
