"""
Effect Specializers

Maps a ValidatedMotionSpec onto effect-specific envelope parameters.
The effect catalog is closed: SPECIALIZERS holds exactly one entry per
effect family and dispatch never goes through anything else.
"""

import logging
import math
from dataclasses import dataclass
from typing import Callable, Dict, Union

from .envelopes import Envelope, build_oscillating, build_single_pulse
from .seed_mixer import mix
from .validator import ValidatedMotionSpec

logger = logging.getLogger(__name__)

# Minimum scale / speed factor allowed in any emitted expression
SCALE_FLOOR = 0.01


@dataclass(frozen=True)
class ShakeParams:
    """Two oscillating envelopes; y leads x by a quarter cycle."""

    x: Envelope
    y: Envelope


@dataclass(frozen=True)
class ScaleParams:
    """
    Single pulse applied to both width and height: scale(t) = max(floor, 1 + E(t)).

    A positive amplitude expands (zoom punch); a negative one contracts
    (zoom out, reverse burst).
    """

    envelope: Envelope
    floor: float = SCALE_FLOOR

    def scale_at(self, t: float) -> float:
        """Evaluate the floored scale factor at time t."""
        return max(self.floor, 1.0 + self.envelope.evaluate(t))


@dataclass(frozen=True)
class SpeedRampParams:
    """
    Speed multiplier s(t) = s0 + (s_peak - s0) * sin(pi*t/T) * exp(-k*t).

    The renderer divides presentation timestamps by s(t).
    """

    start_speed: float
    peak_speed: float
    envelope: Envelope
    floor: float = SCALE_FLOOR

    def speed_at(self, t: float) -> float:
        """Evaluate the floored speed multiplier at time t."""
        return max(self.floor, self.start_speed + self.envelope.evaluate(t))


EffectParams = Union[ShakeParams, ScaleParams, SpeedRampParams]


def specialize_shake(spec: ValidatedMotionSpec) -> ShakeParams:
    """
    Build the x/y shake envelopes.

    The x axis takes its phase and frequency jitter from mix(seed, "x");
    the y axis keeps the quarter-cycle offset to x and takes only its
    frequency jitter from mix(seed, "y"), giving elliptical jitter.
    """
    x_mix = mix(spec.seed, "x")
    y_mix = mix(spec.seed, "y")

    x = build_oscillating(
        amplitude=spec.amplitude,
        frequency_hz=spec.frequency_hz,
        attack_ms=spec.attack_ms,
        peak_ms=spec.peak_ms,
        decay_ms=spec.decay_ms,
        phase=x_mix.phase_offset,
        frequency_jitter=x_mix.frequency_jitter,
    )
    y = build_oscillating(
        amplitude=spec.amplitude,
        frequency_hz=spec.frequency_hz,
        attack_ms=spec.attack_ms,
        peak_ms=spec.peak_ms,
        decay_ms=spec.decay_ms,
        phase=x_mix.phase_offset + math.pi / 2,
        frequency_jitter=y_mix.frequency_jitter,
    )
    return ShakeParams(x=x, y=y)


def specialize_zoom_punch(spec: ValidatedMotionSpec) -> ScaleParams:
    """Expanding single pulse."""
    return ScaleParams(envelope=_pulse(spec, spec.amplitude))


def specialize_zoom_out(spec: ValidatedMotionSpec) -> ScaleParams:
    """Contracting single pulse."""
    return ScaleParams(envelope=_pulse(spec, -spec.amplitude))


def specialize_reverse_burst(spec: ValidatedMotionSpec) -> ScaleParams:
    """Same shape as zoom out; its defaults come from its own preset family."""
    return ScaleParams(envelope=_pulse(spec, -spec.amplitude))


def specialize_speed_ramp(spec: ValidatedMotionSpec) -> SpeedRampParams:
    """Single pulse carrying the speed delta on top of the start speed."""
    return SpeedRampParams(
        start_speed=spec.start_speed,
        peak_speed=spec.peak_speed,
        envelope=_pulse(spec, spec.peak_speed - spec.start_speed),
    )


SPECIALIZERS: Dict[str, Callable[[ValidatedMotionSpec], EffectParams]] = {
    "shake": specialize_shake,
    "zoom_punch": specialize_zoom_punch,
    "zoom_out": specialize_zoom_out,
    "reverse_burst": specialize_reverse_burst,
    "speed_ramp": specialize_speed_ramp,
}


def specialize(spec: ValidatedMotionSpec) -> EffectParams:
    """
    Dispatch a validated spec to its effect specializer.

    Args:
        spec: ValidatedMotionSpec

    Returns:
        ShakeParams, ScaleParams or SpeedRampParams
    """
    params = SPECIALIZERS[spec.effect](spec)
    logger.debug(f"Specialized {spec.effect}: {params}")
    return params


def _pulse(spec: ValidatedMotionSpec, amplitude: float) -> Envelope:
    return build_single_pulse(
        amplitude=amplitude,
        attack_ms=spec.attack_ms,
        peak_ms=spec.peak_ms,
        decay_ms=spec.decay_ms,
    )
