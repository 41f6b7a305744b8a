"""
Neural Network Brain for EvoSim.

A plain feed-forward stack of fully connected layers:
  eye cells → [hidden layers] → motor outputs

Forward pass (per simulation step):
  each neuron computes max(0, bias + Σ weight_i · input_i)
  and the layer's outputs become the next layer's inputs.

The brain is built from, and flattened back into, a genome with the
explicit pair decode_genome / encode_layers. Gene order is layer by
layer, neuron by neuron, each neuron contributing its bias followed by
one weight per input.
"""

import numpy as np

from exceptions import ShapeMismatch
from genome import genome_length, random_genome, validate_topology


class Neuron:
    """One ReLU unit: a bias and one weight per input."""

    __slots__ = ("bias", "weights")

    def __init__(self, bias: float, weights):
        self.bias    = float(bias)
        self.weights = np.array(weights, dtype=np.float64)

    def propagate(self, inputs) -> float:
        inputs = np.asarray(inputs, dtype=np.float64)
        if inputs.shape != self.weights.shape:
            raise ShapeMismatch(
                f"neuron expects {len(self.weights)} inputs, got {inputs.size}")
        return max(0.0, float(np.dot(self.weights, inputs)) + self.bias)


class Layer:
    """
    An ordered group of neurons sharing the same inputs.
    Weights are stacked into a (outputs, inputs) matrix for the forward pass.
    """

    def __init__(self, neurons: list):
        if not neurons:
            raise ShapeMismatch("a layer needs at least one neuron")
        n_inputs = len(neurons[0].weights)
        if any(len(n.weights) != n_inputs for n in neurons):
            raise ShapeMismatch("all neurons of a layer need the same input width")
        self.neurons  = list(neurons)
        self._biases  = np.array([n.bias for n in neurons], dtype=np.float64)
        self._weights = np.stack([n.weights for n in neurons])

    @property
    def n_inputs(self) -> int:
        return self._weights.shape[1]

    @property
    def n_outputs(self) -> int:
        return self._weights.shape[0]

    def propagate(self, inputs) -> np.ndarray:
        inputs = np.asarray(inputs, dtype=np.float64)
        if inputs.shape != (self.n_inputs,):
            raise ShapeMismatch(
                f"layer expects {self.n_inputs} inputs, got shape {inputs.shape}")
        return np.maximum(0.0, self._weights @ inputs + self._biases)


# ──────────────────────────────────────────────────────────────────────────────
# Genome ↔ layers
# ──────────────────────────────────────────────────────────────────────────────

def decode_genome(topology, genome) -> list:
    """Split a flat genome into layers; raises ShapeMismatch on bad length."""
    topology = validate_topology(topology)
    genes    = np.array(genome, dtype=np.float64).ravel()
    expected = genome_length(topology)
    if genes.size != expected:
        raise ShapeMismatch(
            f"topology {topology} needs {expected} genes, got {genes.size}")

    layers = []
    offset = 0
    for n_in, n_out in zip(topology[:-1], topology[1:]):
        neurons = []
        for _ in range(n_out):
            bias    = genes[offset]
            weights = genes[offset + 1: offset + 1 + n_in]
            neurons.append(Neuron(bias, weights))
            offset += 1 + n_in
        layers.append(Layer(neurons))
    return layers


def encode_layers(layers: list) -> np.ndarray:
    """Inverse of decode_genome."""
    genes = []
    for layer in layers:
        for neuron in layer.neurons:
            genes.append(neuron.bias)
            genes.extend(neuron.weights)
    return np.array(genes, dtype=np.float64)


# ──────────────────────────────────────────────────────────────────────────────

class NeuralNetwork:
    """
    Immutable feed-forward brain built from a topology and a genome.
    """

    def __init__(self, layers: list):
        if not layers:
            raise ShapeMismatch("a network needs at least one layer")
        for prev, nxt in zip(layers[:-1], layers[1:]):
            if nxt.n_inputs != prev.n_outputs:
                raise ShapeMismatch(
                    f"layer of width {prev.n_outputs} cannot feed a layer "
                    f"expecting {nxt.n_inputs} inputs")
        self.layers = list(layers)

    @classmethod
    def from_weights(cls, topology, weights) -> "NeuralNetwork":
        return cls(decode_genome(topology, weights))

    @classmethod
    def random(cls, rng: np.random.Generator, topology) -> "NeuralNetwork":
        """Every bias and weight drawn uniformly from [-1, 1]."""
        return cls.from_weights(topology, random_genome(topology, rng))

    # ──────────────────────────────────────────────────────────────────────────

    @property
    def topology(self) -> tuple:
        return (self.layers[0].n_inputs,) + tuple(l.n_outputs for l in self.layers)

    def propagate(self, inputs) -> np.ndarray:
        """
        Run one forward pass.

        Args:
            inputs: array of shape (topology[0],)

        Returns:
            array of shape (topology[-1],), every value >= 0
        """
        inputs = np.asarray(inputs, dtype=np.float64)
        if inputs.shape != (self.layers[0].n_inputs,):
            raise ShapeMismatch(
                f"network expects {self.layers[0].n_inputs} inputs, "
                f"got shape {inputs.shape}")
        for layer in self.layers:
            inputs = layer.propagate(inputs)
        return inputs

    def weights(self) -> np.ndarray:
        """Flatten the brain back into its genome."""
        return encode_layers(self.layers)

    def summary(self) -> str:
        lines = [f"NeuralNetwork {self.topology} ({self.weights().size} genes)"]
        for i, layer in enumerate(self.layers):
            lines.append(
                f"  L{i}: {layer.n_inputs:>3} → {layer.n_outputs:<3}"
                f"  |w| mean={np.abs(layer._weights).mean():.3f}"
                f"  bias mean={layer._biases.mean():+.3f}"
            )
        return "\n".join(lines)
