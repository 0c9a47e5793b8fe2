"""Boxes, populations and the self-adaptive parameters of the evolution.

The control parameters F (scale factor) and CR (crossover rate) follow the
success-history scheme of jSO: each strategy keeps a small circular memory of
good values, samples new ones around them and updates the memory with a
weighted Lehmer mean of the values that produced improvements.  Constraint
handling uses an epsilon level that shrinks as evaluations are spent.
"""

from __future__ import annotations

import math
import random
from dataclasses import dataclass, field
from typing import Sequence

__all__ = [
    "MEMORY_SIZE",
    "WINS_SIZE",
    "Interval",
    "Box",
    "EpsilonLevel",
    "Strategy",
    "update_selection_rates",
    "Populations",
    "allocate_all",
]

MEMORY_SIZE = 5
WINS_SIZE = 25
INITIAL_MEMORY_SF = 0.3
INITIAL_MEMORY_CR = 0.8
INITIAL_SELECTION_RATE = 0.33
ADAPTATION_WARMUP_GENERATIONS = 100


@dataclass
class Interval:
    """A closed interval ``[bi, bs]``."""

    bi: float = 0.0
    bs: float = 0.0


@dataclass
class Box:
    """An individual: a box of intervals with a sample point and its fitness."""

    intervals: list[Interval]
    point: list[float]
    proportions: list[float]
    cost: float = math.inf
    violation: float = math.inf
    stagnation: int = 0
    divisions: int = 0

    @classmethod
    def create(cls, size: int) -> "Box":
        """Make a box of ``size`` intervals with unknown (infinite) fitness."""
        if size < 0:
            raise ValueError("box size must not be negative")
        return cls(
            intervals=[Interval() for _ in range(size)],
            point=[0.0] * size,
            proportions=[0.0] * size,
        )


@dataclass
class EpsilonLevel:
    """The epsilon level of the epsilon-constrained comparison."""

    level: float = 0.0
    initial: float = 0.0
    apply_minimum: bool = False
    minimum: float = 0.0

    def reset(self) -> None:
        """Set the level back to zero."""
        self.level = 0.0

    def initialize(self, box: Box) -> None:
        """Start the level at the violation of ``box``."""
        self.initial = self.level = box.violation
        if self.apply_minimum and self.initial < self.minimum:
            self.initial = self.level = self.minimum

    def update(self, nfeval: int, tc_fes: int) -> None:
        """Shrink the level after ``nfeval`` evaluations; zero past ``tc_fes``."""
        if nfeval > tc_fes:
            self.level = 0.0
        else:
            self.level = self.initial * (1.0 - nfeval / tc_fes) ** 4.0

    def better(self, cost_a: float, eps_a: float, cost_b: float, eps_b: float) -> bool:
        """Return True when solution A beats solution B."""
        if eps_a <= self.level and eps_b <= self.level:
            return cost_a < cost_b
        if eps_a == eps_b:
            return cost_a < cost_b
        return eps_a < eps_b


def _cauchy(rng: random.Random, mu: float, gamma: float) -> float:
    return mu + gamma * math.tan(math.pi * (rng.random() - 0.5))


@dataclass
class Strategy:
    """Success-history memory of F and CR for one mutation strategy."""

    success_sf: list[float]
    success_cr: list[float]
    pop_sf: list[float]
    pop_cr: list[float]
    dif_fitness: list[float]
    wins: list[float] = field(default_factory=lambda: [0.0] * WINS_SIZE)
    memory_sf: list[float] = field(
        default_factory=lambda: [INITIAL_MEMORY_SF] * MEMORY_SIZE
    )
    memory_cr: list[float] = field(
        default_factory=lambda: [INITIAL_MEMORY_CR] * MEMORY_SIZE
    )
    memory_pos: int = 0
    wins_pos: int = 0
    nsucc_params: int = 0
    sr: float = INITIAL_SELECTION_RATE

    @classmethod
    def create(cls, np: int) -> "Strategy":
        """Make a strategy for a population of ``np`` individuals."""
        if np < 0:
            raise ValueError("population size must not be negative")
        return cls(
            success_sf=[0.0] * np,
            success_cr=[0.0] * np,
            pop_sf=[0.0] * np,
            pop_cr=[0.0] * np,
            dif_fitness=[0.0] * np,
        )

    def generate_params(
        self, i: int, nfeval: int, maxfes: int, rng: random.Random
    ) -> tuple[float, float]:
        """Sample F and CR for individual ``i``; return them as ``(sf, cr)``."""
        slot = int(rng.random() * MEMORY_SIZE)
        if slot == MEMORY_SIZE - 1:
            mu_sf = mu_cr = 0.9
        else:
            mu_sf = self.memory_sf[slot]
            mu_cr = self.memory_cr[slot]

        if mu_cr < 0:
            cr = 0.0
        else:
            cr = min(1.0, max(0.0, rng.gauss(mu_cr, 0.1)))
        if nfeval < 0.25 * maxfes and cr < 0.7:
            cr = 0.7
        if nfeval < 0.50 * maxfes and cr < 0.6:
            cr = 0.6

        sf = _cauchy(rng, mu_sf, 0.1)
        while sf <= 0.0:
            sf = _cauchy(rng, mu_sf, 0.1)
        if sf > 1:
            sf = 1.0
        if nfeval < 0.6 * maxfes and sf > 0.7:
            sf = 0.7

        self.pop_sf[i] = sf
        self.pop_cr[i] = cr
        return sf, cr

    def record_improvement(
        self,
        old: Sequence[Box],
        new: Sequence[Box],
        i: int,
        real_dim: int,
        tolerance: float,
    ) -> None:
        """Remember the F and CR of individual ``i``, which improved."""
        before, after = old[i], new[i]
        if before.violation < after.violation:
            gain = tolerance
        else:
            gain = math.sqrt(
                sum(
                    (b - a) ** 2
                    for a, b in zip(before.point[:real_dim], after.point[:real_dim])
                )
            )
        k = self.nsucc_params
        self.dif_fitness[k] = gain
        self.success_sf[k] = self.pop_sf[i]
        self.success_cr[k] = self.pop_cr[i]
        self.nsucc_params += 1

        self.wins[self.wins_pos] = float(self.nsucc_params)
        self.wins_pos = (self.wins_pos + 1) % WINS_SIZE

    def update_memory(self, np: int, tolerance: float) -> None:
        """Fold the recorded successes into the memory slot and clear them."""
        n = self.nsucc_params
        if n <= 0:
            return
        pos = self.memory_pos
        old_sf = self.memory_sf[pos]
        old_cr = self.memory_cr[pos]

        total = sum(self.dif_fitness[:n]) or tolerance

        mem_sf = mem_cr = 0.0
        sum_sf = sum_cr = 0.0
        for gain, sf, cr in zip(
            self.dif_fitness[:n], self.success_sf[:n], self.success_cr[:n]
        ):
            weight = gain / total or tolerance
            mem_sf += weight * sf * sf
            sum_sf += weight * sf
            mem_cr += weight * cr * cr
            sum_cr += weight * cr

        sum_sf = sum_sf or tolerance
        sum_cr = sum_cr or tolerance

        mem_sf /= sum_sf
        if mem_cr == -1:
            mem_cr = -1.0
        else:
            mem_cr /= sum_cr

        self.memory_sf[pos] = (mem_sf + old_sf) / 2.0
        self.memory_cr[pos] = (mem_cr + old_cr) / 2.0
        self.memory_pos = (pos + 1) % MEMORY_SIZE

        for j in range(np):
            self.success_sf[j] = 0.0
            self.success_cr[j] = 0.0
            self.dif_fitness[j] = 0.0


def update_selection_rates(
    s1: Strategy, s2: Strategy, s3: Strategy, generation: int, tolerance: float
) -> None:
    """Set each strategy's selection rate from its recent wins."""
    if generation < ADAPTATION_WARMUP_GENERATIONS:
        s1.sr = s2.sr = s3.sr = INITIAL_SELECTION_RATE
        return
    nw1 = sum(s1.wins[: WINS_SIZE - 1])
    nw2 = sum(s2.wins[: WINS_SIZE - 1])
    nw3 = sum(s3.wins[: WINS_SIZE - 1])
    denominator = nw1 + nw2 + nw3 + tolerance
    s1.sr = nw1 / denominator
    s2.sr = nw2 / denominator
    s3.sr = nw3 / denominator


@dataclass
class Populations:
    """All populations and strategies used by the search."""

    first: list[Box]
    second: list[Box]
    temporary: list[Box]
    auxiliary: list[Box]
    consistent: list[Box]
    strategies: tuple[Strategy, Strategy, Strategy]


def _boxes(count: int, real_dim: int, inter_dim: int) -> list[Box]:
    return [
        Box(
            intervals=[Interval() for _ in range(inter_dim)],
            point=[0.0] * real_dim,
            proportions=[0.0] * inter_dim,
        )
        for _ in range(count)
    ]


def allocate_all(real_dim: int, inter_dim: int, np: int, popc_maxnp: int) -> Populations:
    """Create every population and three fresh strategies."""
    if min(real_dim, inter_dim, np, popc_maxnp) < 0:
        raise ValueError("sizes must not be negative")
    return Populations(
        first=_boxes(np, real_dim, inter_dim),
        second=_boxes(np, real_dim, inter_dim),
        temporary=_boxes(3, real_dim, inter_dim),
        auxiliary=_boxes(5, real_dim, inter_dim),
        consistent=_boxes(popc_maxnp, real_dim, inter_dim),
        strategies=(Strategy.create(np), Strategy.create(np), Strategy.create(np)),
    )