"""
Pydantic schema for the MotionRequest JSON input contract.

A MotionRequest is the small declarative document the render pipeline
sends to the compiler: which effect, how long, how strong, and an
optional seed. Field names are normative for interop with the renderer
invocation layer.

Example usage:
    from motion_worker.schemas.motion_request import MotionRequest

    request = MotionRequest.model_validate(json_data)
"""

from typing import Literal, Optional, Tuple, Union

from pydantic import BaseModel, Field


# =============================================================================
# Type Aliases and Literals
# =============================================================================

EffectType = Literal[
    "shake",
    "zoom_punch",
    "zoom_out",
    "reverse_burst",
    "speed_ramp",
]

INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1


class MotionRequest(BaseModel):
    """
    Declarative motion request.

    duration_ms, fps and amplitude are deliberately unconstrained here;
    the Parameter Validator checks them so that failures carry the
    motion error taxonomy instead of a schema error.

    Example:
        {
            "effect": "zoom_punch",
            "duration_ms": 420,
            "amplitude": 0.18,
            "attack_ms": 80,
            "peak_ms": 60,
            "decay_ms": 280,
            "fps": 30
        }
    """
    effect: EffectType = Field(..., description="Effect family")
    duration_ms: int = Field(..., description="Clip duration in milliseconds (must be > 0)")
    amplitude: Optional[Union[float, Tuple[float, float]]] = Field(
        default=None,
        description="Pixels for shake, scale fraction for zoom/burst, [start, peak] speed pair for speed_ramp",
    )
    attack_ms: Optional[int] = Field(default=None, ge=0, description="Attack time in milliseconds")
    peak_ms: Optional[int] = Field(default=None, ge=0, description="Plateau time in milliseconds")
    decay_ms: Optional[int] = Field(default=None, ge=0, description="Decay time in milliseconds")
    fps: int = Field(..., description="Target constant frame rate")
    seed: Optional[int] = Field(
        default=None,
        ge=INT64_MIN,
        le=INT64_MAX,
        description="64-bit seed for reproducible variation (default seed when omitted)",
    )
    preset: Optional[str] = Field(
        default=None,
        min_length=1,
        description="Preset supplying omitted fields (micro, medium, heavy, or a name added by a preset override)",
    )
    start_speed: Optional[float] = Field(default=None, description="Speed ramp start multiplier")
    peak_speed: Optional[float] = Field(default=None, description="Speed ramp peak multiplier")
    source_cfr: Optional[bool] = Field(
        default=None,
        description="Whether the source timeline is already constant frame rate (None = unknown)",
    )

    model_config = {
        "frozen": True,
        "extra": "forbid",
        "json_schema_extra": {
            "examples": [
                {
                    "effect": "zoom_punch",
                    "duration_ms": 420,
                    "amplitude": 0.18,
                    "attack_ms": 80,
                    "peak_ms": 60,
                    "decay_ms": 280,
                    "fps": 30,
                },
                {
                    "effect": "shake",
                    "duration_ms": 600,
                    "preset": "medium",
                    "fps": 30,
                    "seed": 42,
                },
                {
                    "effect": "speed_ramp",
                    "duration_ms": 1200,
                    "amplitude": [1.0, 1.5],
                    "preset": "medium",
                    "fps": 24,
                    "source_cfr": True,
                },
            ]
        },
    }
