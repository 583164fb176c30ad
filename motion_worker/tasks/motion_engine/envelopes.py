"""
Attack-Peak-Decay Envelope Functions

Two closed-form envelope families:

    Oscillating:   E(t) = A * sin(w*t + phi) * exp(-k*t)
    Single pulse:  E(t) = A * sin(pi*t/T) * exp(-k*t)

Timing mapping from a validated (attack, peak, decay) triple, in seconds:

    k = 3 / decay                          (falls to ~5% over the decay)
    T = 2 * (attack + peak) + decay        (twice the attack+peak+decay/2 half-width)
    w = 2*pi*f*(1 + jitter) / (1 + attack)  (oscillating only)

The oscillating family has no pulse width, so its hold phase stretches the
decay instead: k = 3 / (peak + decay).
"""

import math
from dataclasses import dataclass
from typing import List, Literal, Optional

EnvelopeFamily = Literal["oscillating", "single_pulse"]

# exp(-3) ~= 0.05, same falloff the beat pulses use
DECAY_CONSTANT = 3.0

# Attack (seconds) at which the oscillation frequency is halved
ATTACK_REFERENCE_S = 1.0

# Below the 1 ms resolution of the timings, so 0 ms and 1 ms still map apart
MIN_TIMING_S = 0.0005


@dataclass(frozen=True)
class Envelope:
    """
    Stateless APD envelope.

    Attributes:
        family: "oscillating" or "single_pulse"
        amplitude: Signed amplitude A (negative contracts)
        decay_rate: k in 1/s
        angular_frequency: w in rad/s (oscillating only)
        pulse_width: T in seconds (single_pulse only)
        phase: phi in radians (oscillating only)
    """

    family: EnvelopeFamily
    amplitude: float
    decay_rate: float
    angular_frequency: Optional[float] = None
    pulse_width: Optional[float] = None
    phase: float = 0.0

    def evaluate(self, t: float) -> float:
        """Evaluate the envelope at time t (seconds)."""
        falloff = math.exp(-self.decay_rate * t)
        if self.family == "oscillating":
            return self.amplitude * math.sin(self.angular_frequency * t + self.phase) * falloff
        return self.amplitude * math.sin(math.pi * t / self.pulse_width) * falloff

    def peak_time(self) -> float:
        """
        Time of the single-pulse maximum: (T/pi) * atan(pi / (k*T)).

        Grows strictly with T, so longer attacks peak later.
        """
        if self.family != "single_pulse":
            raise ValueError("peak_time is only defined for single_pulse envelopes")
        width = self.pulse_width
        return (width / math.pi) * math.atan(math.pi / (self.decay_rate * width))

    def sample(self, duration_s: float, fps: int) -> List[float]:
        """
        Evaluate the envelope at every frame time in [0, duration_s).

        Args:
            duration_s: Clip duration in seconds
            fps: Frame rate

        Returns:
            One value per output frame
        """
        total_frames = int(round(duration_s * fps))
        return [self.evaluate(frame / fps) for frame in range(total_frames)]


# =============================================================================
# Timing Mapping
# =============================================================================


def decay_rate(decay_ms: int) -> float:
    """k = 3 / decay, with decay floored at 0.5 ms."""
    return DECAY_CONSTANT / max(decay_ms / 1000.0, MIN_TIMING_S)


def pulse_width(attack_ms: int, peak_ms: int, decay_ms: int) -> float:
    """T = 2 * (attack + peak) + decay, floored at 0.5 ms."""
    width = (2 * (attack_ms + peak_ms) + decay_ms) / 1000.0
    return max(width, MIN_TIMING_S)


def angular_frequency(frequency_hz: float, attack_ms: int, frequency_jitter: float = 0.0) -> float:
    """w = 2*pi*f*(1 + jitter) / (1 + attack / ATTACK_REFERENCE_S)."""
    attack_s = attack_ms / 1000.0
    return 2 * math.pi * frequency_hz * (1.0 + frequency_jitter) / (1.0 + attack_s / ATTACK_REFERENCE_S)


# =============================================================================
# Envelope Builders
# =============================================================================


def build_oscillating(
    amplitude: float,
    frequency_hz: float,
    attack_ms: int,
    peak_ms: int,
    decay_ms: int,
    phase: float = 0.0,
    frequency_jitter: float = 0.0,
) -> Envelope:
    """
    Build an oscillating envelope for one shake axis.

    Args:
        amplitude: Peak displacement A
        frequency_hz: Base oscillation frequency
        attack_ms: Attack time (slows the oscillation as it grows)
        peak_ms: Hold time (stretches the decay)
        decay_ms: Decay time
        phase: Phase offset phi in radians
        frequency_jitter: Relative frequency perturbation

    Returns:
        Envelope
    """
    return Envelope(
        family="oscillating",
        amplitude=amplitude,
        decay_rate=decay_rate(peak_ms + decay_ms),
        angular_frequency=angular_frequency(frequency_hz, attack_ms, frequency_jitter),
        phase=phase,
    )


def build_single_pulse(
    amplitude: float,
    attack_ms: int,
    peak_ms: int,
    decay_ms: int,
) -> Envelope:
    """
    Build a single-pulse envelope.

    Args:
        amplitude: Signed amplitude A (negative contracts)
        attack_ms: Attack time (widens T)
        peak_ms: Plateau time (widens T, leaves k unchanged)
        decay_ms: Decay time (sets k)

    Returns:
        Envelope
    """
    return Envelope(
        family="single_pulse",
        amplitude=amplitude,
        decay_rate=decay_rate(decay_ms),
        pulse_width=pulse_width(attack_ms, peak_ms, decay_ms),
    )
