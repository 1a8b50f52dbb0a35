"""
creature_sim module: neural/brain.py

A fixed-topology feed-forward network:
- inputs -> tanh hidden layer -> sigmoid outputs
- weights evolve by gaussian mutation and crossover, never by gradients
- mutation rate/magnitude are carried per brain and evolve too
"""

from __future__ import annotations
import copy
import logging
import math
import random
from typing import List, Sequence, Tuple

logger = logging.getLogger(__name__)

Matrix = List[List[float]]


def _tanh(x: float) -> float:
    # stable tanh for typical magnitudes
    return math.tanh(max(-20.0, min(20.0, x)))


def _sigmoid(x: float) -> float:
    return 1.0 / (1.0 + math.exp(-max(-500.0, min(500.0, x))))


def _finite(x: float) -> float:
    return x if math.isfinite(x) else 0.0


def _clamp(x: float, bounds: Tuple[float, float]) -> float:
    return max(bounds[0], min(bounds[1], x))


def box_muller(rng: random.Random) -> float:
    """Standard normal draw from two uniforms (Box-Muller)."""
    u1 = rng.random()
    while u1 == 0.0:
        u1 = rng.random()
    u2 = rng.random()
    return math.sqrt(-2.0 * math.log(u1)) * math.cos(2.0 * math.pi * u2)


class Brain:
    MAGNITUDE_BOUNDS = (0.05, 0.8)
    RATE_BOUNDS = (0.05, 0.4)
    META_MUTATION_P = 0.1

    def __init__(
        self,
        input_size: int,
        hidden_size: int,
        output_size: int,
        rng: random.Random | None = None,
        mutation_rate: float = 0.15,
    ):
        if min(input_size, hidden_size, output_size) < 1:
            raise ValueError("brain dimensions must be positive")
        rng = rng or random.Random()

        self.input_size = input_size
        self.hidden_size = hidden_size
        self.output_size = output_size

        self.weights_ih = self._random_matrix(hidden_size, input_size, rng)
        self.bias_h = [0.0] * hidden_size
        self.weights_ho = self._random_matrix(output_size, hidden_size, rng)
        self.bias_o = [0.0] * output_size

        self.mutation_rate = _clamp(mutation_rate, self.RATE_BOUNDS)
        self.mutation_magnitude = 0.3

    @staticmethod
    def _random_matrix(rows: int, cols: int, rng: random.Random) -> Matrix:
        # He-style init, fan_in == cols
        scale = math.sqrt(2.0 / cols)
        return [[box_muller(rng) * scale for _ in range(cols)] for _ in range(rows)]

    @property
    def shape(self) -> Tuple[int, int, int]:
        return (self.input_size, self.hidden_size, self.output_size)

    @property
    def param_count(self) -> int:
        return self.hidden_size * (self.input_size + 1) + self.output_size * (self.hidden_size + 1)

    def clone(self) -> "Brain":
        return copy.deepcopy(self)

    def forward(self, inputs: Sequence[float]) -> List[float]:
        if len(inputs) != self.input_size:
            logger.debug("expected %d inputs, got %d; returning neutral output", self.input_size, len(inputs))
            return [0.5] * self.output_size

        xs = [_finite(float(v)) for v in inputs]

        hidden = [
            _tanh(self.bias_h[i] + sum(w * x for w, x in zip(self.weights_ih[i], xs)))
            for i in range(self.hidden_size)
        ]
        return [
            _sigmoid(self.bias_o[i] + sum(w * h for w, h in zip(self.weights_ho[i], hidden)))
            for i in range(self.output_size)
        ]

    # ---- evolution ----

    def mutate(self, rng: random.Random) -> None:
        """
        Mutate in-place. The adaptive parameters are perturbed first
        (each with p=0.1), then every weight and bias independently with
        p=mutation_rate gets N(0, 1) * mutation_magnitude added.
        """
        if rng.random() < self.META_MUTATION_P:
            self.mutation_magnitude = _clamp(
                self.mutation_magnitude + box_muller(rng) * 0.05, self.MAGNITUDE_BOUNDS
            )
        if rng.random() < self.META_MUTATION_P:
            self.mutation_rate = _clamp(self.mutation_rate + box_muller(rng) * 0.03, self.RATE_BOUNDS)

        def nudge(v: float) -> float:
            if rng.random() < self.mutation_rate:
                return _finite(v + box_muller(rng) * self.mutation_magnitude)
            return v

        self._apply(nudge)

    def _apply(self, fn) -> None:
        for i in range(self.hidden_size):
            row = self.weights_ih[i]
            for j in range(self.input_size):
                row[j] = fn(row[j])
            self.bias_h[i] = fn(self.bias_h[i])
        for i in range(self.output_size):
            row = self.weights_ho[i]
            for j in range(self.hidden_size):
                row[j] = fn(row[j])
            self.bias_o[i] = fn(self.bias_o[i])

    def _check_partner(self, partner: "Brain") -> None:
        if partner.shape != self.shape:
            raise ValueError(f"brain shapes differ: {self.shape} vs {partner.shape}")

    def _combine(self, partner: "Brain", pick) -> "Brain":
        self._check_partner(partner)
        child = self.clone()
        child.set_weights([pick(a, b) for a, b in zip(self.get_weights(), partner.get_weights())])
        child.mutation_rate = (self.mutation_rate + partner.mutation_rate) / 2.0
        child.mutation_magnitude = (self.mutation_magnitude + partner.mutation_magnitude) / 2.0
        return child

    def crossover(self, partner: "Brain", rng: random.Random) -> "Brain":
        """Blend crossover: each child scalar is alpha*self + (1-alpha)*partner, alpha ~ U(0, 1)."""

        def blend(a: float, b: float) -> float:
            alpha = rng.random()
            return alpha * a + (1.0 - alpha) * b

        return self._combine(partner, blend)

    def uniform_crossover(self, partner: "Brain", rng: random.Random) -> "Brain":
        """Each child scalar is copied from one parent chosen by a fair coin."""
        return self._combine(partner, lambda a, b: a if rng.random() < 0.5 else b)

    def genomic_distance(self, other: "Brain") -> float:
        self._check_partner(other)
        total = sum(abs(a - b) for a, b in zip(self.get_weights(), other.get_weights()))
        return total / self.param_count

    # ---- (de)serialization ----

    def get_weights(self) -> List[float]:
        """
        Flatten as: each hidden row's input weights followed by its bias,
        then each output row's hidden weights followed by its bias.
        """
        flat: List[float] = []
        for i in range(self.hidden_size):
            flat.extend(self.weights_ih[i])
            flat.append(self.bias_h[i])
        for i in range(self.output_size):
            flat.extend(self.weights_ho[i])
            flat.append(self.bias_o[i])
        return flat

    def set_weights(self, weights: Sequence[float]) -> None:
        if len(weights) != self.param_count:
            raise ValueError(f"expected {self.param_count} weights, got {len(weights)}")

        it = iter(_finite(float(w)) for w in weights)
        for i in range(self.hidden_size):
            self.weights_ih[i] = [next(it) for _ in range(self.input_size)]
            self.bias_h[i] = next(it)
        for i in range(self.output_size):
            self.weights_ho[i] = [next(it) for _ in range(self.hidden_size)]
            self.bias_o[i] = next(it)
