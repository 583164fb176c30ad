"""
Expression Serializer

Renders specialized effect parameters into the textual expression grammar
evaluated per frame by the renderer:

    numbers     plain decimal, 6 significant digits, no exponent
    variable    t (seconds)
    constant    PI
    operators   + - * /
    functions   sin cos exp, and max for the scale/speed floor only

Numbers are rounded to 6 significant digits, so two requests that differ
only below that precision may serialize identically.
"""

import json
import math
from dataclasses import dataclass
from decimal import Decimal
from types import MappingProxyType
from typing import Dict, Mapping, Optional

from .envelopes import Envelope
from .frame_rate import FrameRateContract
from .specializers import EffectParams, ScaleParams, ShakeParams, SpeedRampParams

SIGNIFICANT_DIGITS = 6

CHANNEL_ORDER = ("x", "y", "scale_w", "scale_h", "pts_scale", "audio_tempo")


@dataclass(frozen=True)
class CompiledExpression:
    """
    Compiled per-frame expressions for one effect plus its frame-rate contract.

    Attributes:
        effect: Effect family
        channels: Channel name -> expression string
        frame_rate: FrameRateContract
    """

    effect: str
    channels: Mapping[str, str]
    frame_rate: FrameRateContract

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "effect": self.effect,
            "channels": dict(self.channels),
            "frame_rate": self.frame_rate.to_dict(),
        }

    def to_json(self) -> str:
        """Canonical JSON: sorted keys, compact separators."""
        return json.dumps(self.to_dict(), sort_keys=True, separators=(",", ":"))

    @classmethod
    def from_dict(cls, data: dict) -> "CompiledExpression":
        """Rebuild from to_dict() output, e.g. a cache entry."""
        channels = data["channels"]
        ordered = {name: channels[name] for name in CHANNEL_ORDER if name in channels}
        return cls(
            effect=data["effect"],
            channels=MappingProxyType(ordered),
            frame_rate=FrameRateContract(**data["frame_rate"]),
        )


# =============================================================================
# Number Formatting
# =============================================================================


def format_number(value: float) -> str:
    """
    Format a number with 6 significant digits in plain decimal notation.

    Examples:
        10.714285714 -> "10.7143"
        0.56         -> "0.56"
        1.0          -> "1"
        0.00001      -> "0.00001"
    """
    text = format(Decimal(f"{value:.{SIGNIFICANT_DIGITS}g}"), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    if text in ("-0", ""):
        text = "0"
    return text


def _signed(value: float) -> str:
    """Format as an explicit "+x" / "-x" term."""
    text = format_number(abs(value))
    return f"-{text}" if value < 0 and text != "0" else f"+{text}"


# =============================================================================
# Envelope Terms
# =============================================================================


def oscillating_term(envelope: Envelope, quadrature: bool = False) -> str:
    """
    Serialize A*sin(w*t+phi)*exp(-k*t).

    With quadrature=True the envelope's phase is written as a cosine a
    quarter cycle back, i.e. sin(w*t+phi) == cos(w*t+phi-pi/2).
    """
    func = "sin"
    phase = envelope.phase
    if quadrature:
        func = "cos"
        phase -= math.pi / 2

    phase_text = _signed(phase)
    phase_part = "" if phase_text == "+0" else phase_text
    return (
        f"{format_number(envelope.amplitude)}*"
        f"{func}({format_number(envelope.angular_frequency)}*t{phase_part})*"
        f"exp(-{format_number(envelope.decay_rate)}*t)"
    )


def pulse_term(envelope: Envelope, amplitude: Optional[float] = None) -> str:
    """Serialize sin(PI*t/T)*exp(-k*t) scaled by a signed amplitude, as "+A*..." / "-A*..."."""
    amplitude = envelope.amplitude if amplitude is None else amplitude
    return (
        f"{_signed(amplitude)}*"
        f"sin(PI*t/{format_number(envelope.pulse_width)})*"
        f"exp(-{format_number(envelope.decay_rate)}*t)"
    )


# =============================================================================
# Channel Builders
# =============================================================================


def shake_channels(params: ShakeParams) -> Dict[str, str]:
    """x/y pixel displacement channels."""
    return {
        "x": oscillating_term(params.x),
        "y": oscillating_term(params.y, quadrature=True),
    }


def scale_channels(params: ScaleParams) -> Dict[str, str]:
    """Symmetric width/height scale channels with the floor clamp."""
    expr = f"max({format_number(params.floor)},1{pulse_term(params.envelope)})"
    return {"scale_w": expr, "scale_h": expr}


def speed_channels(params: SpeedRampParams, audio_tempo: Optional[float]) -> Dict[str, str]:
    """Time-remap channel plus the coupled audio tempo."""
    start = format_number(params.start_speed)
    if format_number(params.envelope.amplitude) == "0":
        expr = start
    else:
        expr = f"max({format_number(params.floor)},{start}{pulse_term(params.envelope)})"

    channels = {"pts_scale": expr}
    if audio_tempo is not None:
        channels["audio_tempo"] = format_number(audio_tempo)
    return channels


def serialize(
    effect: str,
    params: EffectParams,
    frame_rate: FrameRateContract,
    audio_tempo: Optional[float] = None,
) -> CompiledExpression:
    """
    Render specialized parameters into a CompiledExpression.

    Args:
        effect: Effect family
        params: Output of the effect specializer
        frame_rate: Frame-rate contract to attach
        audio_tempo: Coupled audio tempo (speed_ramp only)

    Returns:
        CompiledExpression
    """
    if isinstance(params, ShakeParams):
        channels = shake_channels(params)
    elif isinstance(params, ScaleParams):
        channels = scale_channels(params)
    elif isinstance(params, SpeedRampParams):
        channels = speed_channels(params, audio_tempo)
    else:
        raise TypeError(f"Unsupported effect parameters: {type(params).__name__}")

    ordered = {name: channels[name] for name in CHANNEL_ORDER if name in channels}
    return CompiledExpression(
        effect=effect,
        channels=MappingProxyType(ordered),
        frame_rate=frame_rate,
    )
