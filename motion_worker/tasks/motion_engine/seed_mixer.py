"""
Deterministic Seed Mixer

Turns an integer seed into small, reproducible phase and frequency
perturbations for the shake envelopes. Uses SplitMix64, so the same
(seed, axis) always yields the same perturbation on every platform and
no process-global random state is ever consulted.
"""

import math
from dataclasses import dataclass
from typing import Dict, Tuple

MASK64 = 0xFFFFFFFFFFFFFFFF
GOLDEN_GAMMA = 0x9E3779B97F4A7C15

# Per-axis salts (hex digits of pi) keep the x and y streams independent.
AXIS_SALTS: Dict[str, int] = {
    "x": 0x243F6A8885A308D3,
    "y": 0x13198A2E03707344,
}

PHASE_JITTER_MAX = math.pi / 4
FREQUENCY_JITTER_MAX = 0.08


@dataclass(frozen=True)
class SeedPerturbation:
    """
    Perturbation applied to one shake axis.

    Attributes:
        phase_offset: Phase offset in radians, in [-pi/4, pi/4)
        frequency_jitter: Relative frequency change, in [-0.08, 0.08)
    """

    phase_offset: float
    frequency_jitter: float


def _splitmix64(state: int) -> Tuple[int, int]:
    """Advance a SplitMix64 state; returns (next_state, output)."""
    state = (state + GOLDEN_GAMMA) & MASK64
    z = state
    z = ((z ^ (z >> 30)) * 0xBF58476D1CE4E5B9) & MASK64
    z = ((z ^ (z >> 27)) * 0x94D049BB133111EB) & MASK64
    return state, z ^ (z >> 31)


def _unit(value: int) -> float:
    """Map a 64-bit integer to [0, 1) using its top 53 bits."""
    return (value >> 11) * (1.0 / (1 << 53))


def mix(seed: int, axis: str) -> SeedPerturbation:
    """
    Derive the perturbation for one axis from a seed.

    Args:
        seed: Signed 64-bit seed (reduced modulo 2**64)
        axis: Axis tag ("x" or "y")

    Returns:
        SeedPerturbation

    Raises:
        ValueError: If axis is unknown
    """
    if axis not in AXIS_SALTS:
        raise ValueError(f"Unknown axis: {axis!r}")

    state = (seed & MASK64) ^ AXIS_SALTS[axis]
    state, phase_bits = _splitmix64(state)
    _, freq_bits = _splitmix64(state)

    return SeedPerturbation(
        phase_offset=(2.0 * _unit(phase_bits) - 1.0) * PHASE_JITTER_MAX,
        frequency_jitter=(2.0 * _unit(freq_bits) - 1.0) * FREQUENCY_JITTER_MAX,
    )
