"""Seeded random streams for reproducible trader behaviour.

Each stream is a linear congruential generator producing uniforms in [0, 1).
Poisson, normal and log-normal samplers are derived from a single stream so
that a run is a pure function of its seed. Arrival counts, purchase sizes and
sale decisions each draw from their own stream, which keeps changes to one
behavioural parameter from shifting the draws consumed by another.
"""

import math
from dataclasses import dataclass


# Numerical Recipes LCG constants (full period modulo 2^32)
LCG_MULTIPLIER = 1664525
LCG_INCREMENT = 1013904223
LCG_MODULUS = 2 ** 32

# Fixed seed offsets per behavioural stream
PURCHASE_STREAM_OFFSET = 0
SALE_STREAM_OFFSET = 1
ARRIVAL_STREAM_OFFSET = 2

# Largest |z| normal() can return: u1 is clamped to 1 / LCG_MODULUS
MAX_STANDARD_NORMAL = math.sqrt(-2.0 * math.log(1.0 / LCG_MODULUS))

# exp(-lam) must stay a normal float or the product loop truncates the count
MAX_POISSON_LAMBDA = 700.0


class RandomStream:
    """Linear congruential uniform generator with derived samplers."""

    def __init__(self, seed: int) -> None:
        self.seed = seed
        self.state = seed % LCG_MODULUS

    def next(self) -> float:
        """Advance the recurrence and return the next uniform in [0, 1)."""
        self.state = (LCG_MULTIPLIER * self.state + LCG_INCREMENT) % LCG_MODULUS
        return self.state / LCG_MODULUS

    def poisson(self, lam: float) -> int:
        """Sample a Poisson count by multiplying uniforms down to exp(-lam).

        Always consumes at least one draw. ``lam == 0`` returns 0 because the
        first product can never exceed 1.
        """
        if not 0 <= lam <= MAX_POISSON_LAMBDA:
            raise ValueError(f"Poisson lambda must be in [0, {MAX_POISSON_LAMBDA}], got {lam}")
        limit = math.exp(-lam)
        count = 0
        product = 1.0
        while True:
            count += 1
            product *= self.next()
            if product <= limit:
                return count - 1

    def normal(self) -> float:
        """Standard normal via the cosine branch of Box-Muller (two draws)."""
        u1 = self.next()
        u2 = self.next()
        # log(0) is undefined; clamp to the stream's resolution
        u1 = max(u1, 1.0 / LCG_MODULUS)
        return math.sqrt(-2.0 * math.log(u1)) * math.cos(2.0 * math.pi * u2)

    def lognormal(self, mu: float, sigma: float) -> float:
        return math.exp(sigma * self.normal() + mu)

    def bernoulli(self, probability: float) -> bool:
        return self.next() < probability


@dataclass
class RandomStreams:
    """The three independent streams consumed by one simulation run."""
    purchase: RandomStream   # Log-normal purchase sizes
    sale: RandomStream       # Bernoulli sale decisions
    arrival: RandomStream    # Poisson daily arrival counts


def create_streams(seed: int) -> RandomStreams:
    """Derive the purchase, sale and arrival streams from one base seed."""
    return RandomStreams(
        purchase=RandomStream(seed + PURCHASE_STREAM_OFFSET),
        sale=RandomStream(seed + SALE_STREAM_OFFSET),
        arrival=RandomStream(seed + ARRIVAL_STREAM_OFFSET),
    )
