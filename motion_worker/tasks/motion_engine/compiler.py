"""
Motion Envelope Compiler

Pure pipeline from a MotionRequest to a CompiledExpression:

    validate -> specialize -> (audio tempo) -> serialize -> frame-rate contract

Equal requests always produce byte-identical output; nothing here reads
the clock, the environment, or any mutable shared state.
"""

import json
import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from motion_worker.schemas.motion_request import MotionRequest

from .audio_tempo import couple_audio_tempo
from .expressions import CompiledExpression, format_number, serialize
from .frame_rate import resolve_frame_rate
from .presets import PRESET_TABLE, PresetTable
from .specializers import SpeedRampParams, specialize
from .validator import ValidatedMotionSpec, validate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CompiledChain:
    """
    Several compiled segments sharing one audio track.

    Attributes:
        segments: Compiled expressions in request order
        audio_tempo: Single tempo for the track, or None without a speed ramp
    """

    segments: Tuple[CompiledExpression, ...]
    audio_tempo: Optional[float] = None

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "segments": [segment.to_dict() for segment in self.segments],
            "audio_tempo": None if self.audio_tempo is None else format_number(self.audio_tempo),
        }

    def to_json(self) -> str:
        """Canonical JSON: sorted keys, compact separators."""
        return json.dumps(self.to_dict(), sort_keys=True, separators=(",", ":"))


def compile_spec(spec: ValidatedMotionSpec) -> CompiledExpression:
    """
    Compile an already validated spec.

    Args:
        spec: ValidatedMotionSpec

    Returns:
        CompiledExpression
    """
    params = specialize(spec)

    audio_tempo = None
    if isinstance(params, SpeedRampParams):
        audio_tempo = couple_audio_tempo([params])

    return serialize(
        effect=spec.effect,
        params=params,
        frame_rate=resolve_frame_rate(spec),
        audio_tempo=audio_tempo,
    )


def compile_motion(
    request: MotionRequest,
    preset_table: PresetTable = PRESET_TABLE,
) -> CompiledExpression:
    """
    Compile one motion request.

    Args:
        request: Parsed MotionRequest
        preset_table: Preset table for default resolution

    Returns:
        CompiledExpression

    Raises:
        MotionValidationError: Any validation failure (see errors module)
    """
    spec = validate(request, preset_table)
    compiled = compile_spec(spec)
    logger.debug(
        f"Compiled {spec.effect} ({spec.duration_ms}ms @ {spec.fps}fps, "
        f"{len(spec.clamp_events)} clamps)"
    )
    return compiled


def compile_chain(
    requests: Sequence[MotionRequest],
    preset_table: PresetTable = PRESET_TABLE,
) -> CompiledChain:
    """
    Compile sequential motion requests that share one audio track.

    Every request is validated before anything is compiled, and at most
    one of them may be a speed ramp.

    Args:
        requests: Motion requests in timeline order
        preset_table: Preset table for default resolution

    Returns:
        CompiledChain

    Raises:
        UnsupportedChaining: More than one speed ramp in the chain
        MotionValidationError: Any per-request validation failure
    """
    specs = [validate(request, preset_table) for request in requests]
    params = [specialize(spec) for spec in specs]

    speed_ramps: List[SpeedRampParams] = [p for p in params if isinstance(p, SpeedRampParams)]
    audio_tempo = couple_audio_tempo(speed_ramps)

    segments = tuple(
        serialize(
            effect=spec.effect,
            params=p,
            frame_rate=resolve_frame_rate(spec),
            audio_tempo=audio_tempo if isinstance(p, SpeedRampParams) else None,
        )
        for spec, p in zip(specs, params)
    )
    logger.debug(f"Compiled chain of {len(segments)} segments (audio tempo {audio_tempo})")
    return CompiledChain(segments=segments, audio_tempo=audio_tempo)
