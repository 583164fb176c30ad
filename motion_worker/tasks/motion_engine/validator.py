"""
Motion Request Validation

Checks a MotionRequest against effect-specific bounds, resolves omitted
fields from presets, and produces the immutable ValidatedMotionSpec that
every later stage consumes without re-validating.

Usage:
    spec = validate(request)
    for event in spec.clamp_events:
        print(f"{event.field}: {event.requested} -> {event.applied}")
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from motion_worker.schemas.motion_request import MotionRequest

from .errors import (
    AmplitudeOutOfBounds,
    InvalidDuration,
    MissingPresetOrFields,
    SpeedOutOfBounds,
    UnsupportedFrameRate,
)
from .presets import PRESET_TABLE, Preset, PresetTable

logger = logging.getLogger(__name__)

MIN_FPS = 24
MAX_FPS = 120

DEFAULT_SEED = 0

# Only validate() holds this; direct construction of ValidatedMotionSpec fails.
_VALIDATOR_TOKEN = object()


@dataclass(frozen=True)
class ClampEvent:
    """Record of a field the validator adjusted to fit its legal range."""

    field: str
    requested: float
    applied: float
    reason: str


@dataclass(frozen=True)
class ValidatedMotionSpec:
    """
    Fully resolved, bounds-checked motion parameters.

    Invariant: attack_ms + peak_ms + decay_ms <= duration_ms.
    """

    effect: str
    duration_ms: int
    amplitude: Optional[float]
    attack_ms: int
    peak_ms: int
    decay_ms: int
    fps: int
    seed: int
    preset_name: Optional[str] = None
    frequency_hz: Optional[float] = None
    start_speed: Optional[float] = None
    peak_speed: Optional[float] = None
    source_cfr: Optional[bool] = None
    clamp_events: Tuple[ClampEvent, ...] = ()
    _token: object = field(default=None, repr=False, compare=False)

    def __post_init__(self):
        if self._token is not _VALIDATOR_TOKEN:
            raise TypeError("ValidatedMotionSpec is only produced by validate()")

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "effect": self.effect,
            "duration_ms": self.duration_ms,
            "amplitude": self.amplitude,
            "attack_ms": self.attack_ms,
            "peak_ms": self.peak_ms,
            "decay_ms": self.decay_ms,
            "fps": self.fps,
            "seed": self.seed,
            "preset": self.preset_name,
            "frequency_hz": self.frequency_hz,
            "start_speed": self.start_speed,
            "peak_speed": self.peak_speed,
            "source_cfr": self.source_cfr,
            "clamp_events": [
                {
                    "field": e.field,
                    "requested": e.requested,
                    "applied": e.applied,
                    "reason": e.reason,
                }
                for e in self.clamp_events
            ],
        }


def validate(
    request: MotionRequest,
    preset_table: PresetTable = PRESET_TABLE,
) -> ValidatedMotionSpec:
    """
    Validate and normalize a motion request.

    Rules are applied in order: duration, frame rate, preset / field
    resolution, amplitude (or speed) bounds, timing fit.

    Args:
        request: Parsed MotionRequest
        preset_table: Preset table to resolve defaults from

    Returns:
        ValidatedMotionSpec

    Raises:
        InvalidDuration: duration_ms is not positive
        UnsupportedFrameRate: fps outside 24-120
        MissingPresetOrFields: unknown preset or required fields absent
        AmplitudeOutOfBounds: amplitude outside the hard safety bound
        SpeedOutOfBounds: speed ramp speeds outside [0.5, 2.0]
    """
    # 1. Duration
    if request.duration_ms <= 0:
        raise InvalidDuration(
            f"duration_ms must be > 0, got {request.duration_ms}",
            path="duration_ms",
        )

    # 2. Frame rate
    if not (MIN_FPS <= request.fps <= MAX_FPS):
        raise UnsupportedFrameRate(
            f"fps must be between {MIN_FPS} and {MAX_FPS}, got {request.fps}",
            path="fps",
        )

    # 3. Resolve omitted fields from the preset
    preset = _resolve_preset(request, preset_table)
    bounds = preset_table.bounds_for(request.effect)
    clamp_events: List[ClampEvent] = []

    attack_ms = _pick(request.attack_ms, preset, "attack_ms")
    peak_ms = _pick(request.peak_ms, preset, "peak_ms")
    decay_ms = _pick(request.decay_ms, preset, "decay_ms")

    amplitude: Optional[float] = None
    start_speed: Optional[float] = None
    peak_speed: Optional[float] = None
    frequency_hz: Optional[float] = None

    if request.effect == "speed_ramp":
        start_speed, peak_speed = _resolve_speeds(request, preset)
        _require(request, attack_ms=attack_ms, peak_ms=peak_ms, decay_ms=decay_ms,
                 start_speed=start_speed, peak_speed=peak_speed)
        # 6. Speeds are rejected, never auto-fixed
        lo, hi = bounds.speed_range
        for name, value in (("start_speed", start_speed), ("peak_speed", peak_speed)):
            if not (lo <= value <= hi):
                raise SpeedOutOfBounds(
                    f"{name} must be between {lo} and {hi}, got {value}",
                    path=name,
                )
    else:
        if isinstance(request.amplitude, tuple):
            raise MissingPresetOrFields(
                f"amplitude must be a single number for {request.effect}",
                path="amplitude",
            )
        amplitude = request.amplitude if request.amplitude is not None else (
            preset.amplitude if preset else None
        )
        _require(request, attack_ms=attack_ms, peak_ms=peak_ms, decay_ms=decay_ms,
                 amplitude=amplitude)

        # 4. Amplitude: hard bound rejects, soft range clamps
        if not (0 < amplitude <= bounds.hard_max):
            raise AmplitudeOutOfBounds(
                f"{request.effect} amplitude must be in (0, {bounds.hard_max}], got {amplitude}",
                path="amplitude",
            )
        soft_lo, soft_hi = preset.soft_range if preset else bounds.soft_range
        clamped = min(max(amplitude, soft_lo), soft_hi)
        if clamped != amplitude:
            clamp_events.append(ClampEvent("amplitude", amplitude, clamped, "soft_range"))
            amplitude = clamped

        if request.effect == "shake":
            frequency_hz = preset.frequency_hz if preset else bounds.frequency_hz

    # 5. Fit the APD timings into the clip
    fitted = fit_timings(attack_ms, peak_ms, decay_ms, request.duration_ms)
    for name, before, after in zip(
        ("attack_ms", "peak_ms", "decay_ms"),
        (attack_ms, peak_ms, decay_ms),
        fitted,
    ):
        if before != after:
            clamp_events.append(ClampEvent(name, before, after, "duration_fit"))
    attack_ms, peak_ms, decay_ms = fitted

    for event in clamp_events:
        logger.warning(
            f"Clamped {request.effect}.{event.field}: "
            f"{event.requested} -> {event.applied} ({event.reason})"
        )

    return ValidatedMotionSpec(
        effect=request.effect,
        duration_ms=request.duration_ms,
        amplitude=amplitude,
        attack_ms=attack_ms,
        peak_ms=peak_ms,
        decay_ms=decay_ms,
        fps=request.fps,
        seed=request.seed if request.seed is not None else DEFAULT_SEED,
        preset_name=preset.name if preset else None,
        frequency_hz=frequency_hz,
        start_speed=start_speed,
        peak_speed=peak_speed,
        source_cfr=request.source_cfr,
        clamp_events=tuple(clamp_events),
        _token=_VALIDATOR_TOKEN,
    )


def fit_timings(
    attack_ms: int,
    peak_ms: int,
    decay_ms: int,
    duration_ms: int,
) -> Tuple[int, int, int]:
    """
    Scale the APD triple down proportionally when it overruns the clip.

    Uses the largest-remainder method so the fitted triple sums to exactly
    duration_ms. Ties go to decay, then peak, then attack.

    Args:
        attack_ms: Requested attack
        peak_ms: Requested plateau
        decay_ms: Requested decay
        duration_ms: Clip duration

    Returns:
        (attack_ms, peak_ms, decay_ms), unchanged when they already fit
    """
    timings = (attack_ms, peak_ms, decay_ms)
    total = sum(timings)
    if total <= duration_ms:
        return timings

    exact = [value * duration_ms / total for value in timings]
    floors = [int(value) for value in exact]
    remaining = duration_ms - sum(floors)

    # Rank by fractional part, later phases first on ties
    order = sorted(range(3), key=lambda i: (exact[i] - floors[i], i), reverse=True)
    for i in order[:remaining]:
        floors[i] += 1

    return floors[0], floors[1], floors[2]


# =========================================================================
# Private Helpers
# =========================================================================


def _resolve_preset(request: MotionRequest, preset_table: PresetTable) -> Optional[Preset]:
    if request.preset is None:
        return None
    preset = preset_table.get(request.effect, request.preset)
    if preset is None:
        raise MissingPresetOrFields(
            f"Unknown preset '{request.preset}' for {request.effect}",
            path="preset",
        )
    return preset


def _pick(value, preset: Optional[Preset], name: str):
    if value is not None:
        return value
    return getattr(preset, name) if preset else None


def _resolve_speeds(
    request: MotionRequest,
    preset: Optional[Preset],
) -> Tuple[Optional[float], Optional[float]]:
    """Explicit speed fields win over the amplitude pair, which wins over the preset."""
    start_speed = preset.start_speed if preset else None
    peak_speed = preset.peak_speed if preset else None

    if isinstance(request.amplitude, tuple):
        start_speed, peak_speed = request.amplitude
    elif request.amplitude is not None:
        raise MissingPresetOrFields(
            "speed_ramp amplitude must be a [start_speed, peak_speed] pair",
            path="amplitude",
        )

    if request.start_speed is not None:
        start_speed = request.start_speed
    if request.peak_speed is not None:
        peak_speed = request.peak_speed
    return start_speed, peak_speed


def _require(request: MotionRequest, **fields) -> None:
    missing = [name for name, value in fields.items() if value is None]
    if missing:
        hint = "" if request.preset else " (or supply a preset)"
        raise MissingPresetOrFields(
            f"{request.effect} requires {', '.join(missing)}{hint}",
            path=missing[0],
        )
