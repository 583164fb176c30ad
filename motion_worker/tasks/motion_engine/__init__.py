"""
Motion Envelope Compiler

Compiles declarative motion requests (shake, zoom punch, zoom out,
reverse burst, speed ramp) into closed-form per-frame FFmpeg
expressions. Compilation is pure: equal requests always produce
byte-identical output.

Usage:
    from motion_worker.tasks.motion_engine import compile_motion
    from motion_worker.schemas.motion_request import MotionRequest

    compiled = compile_motion(MotionRequest.model_validate({
        "effect": "zoom_punch",
        "duration_ms": 420,
        "amplitude": 0.18,
        "attack_ms": 80,
        "peak_ms": 60,
        "decay_ms": 280,
        "fps": 30,
    }))
    compiled.channels["scale_w"]
    # 'max(0.01,1+0.18*sin(PI*t/0.56)*exp(-10.7143*t))'
"""

from .errors import (
    MotionValidationError,
    InvalidDuration,
    UnsupportedFrameRate,
    AmplitudeOutOfBounds,
    SpeedOutOfBounds,
    AudioOutOfRange,
    UnsupportedChaining,
    MissingPresetOrFields,
)

from .presets import (
    Preset,
    PresetTable,
    EffectBounds,
    PRESET_TABLE,
    get_preset,
    list_presets,
    load_preset_table,
)

from .validator import (
    ClampEvent,
    ValidatedMotionSpec,
    validate,
)

from .envelopes import (
    Envelope,
    build_oscillating,
    build_single_pulse,
)

from .seed_mixer import (
    SeedPerturbation,
    mix,
)

from .specializers import (
    ShakeParams,
    ScaleParams,
    SpeedRampParams,
    specialize,
)

from .audio_tempo import (
    derive_audio_tempo,
    couple_audio_tempo,
)

from .frame_rate import (
    FrameRateContract,
    resolve_frame_rate,
)

from .expressions import (
    CompiledExpression,
    serialize,
)

from .compiler import (
    CompiledChain,
    compile_motion,
    compile_chain,
)

from .ffmpeg_templates import (
    RenderConfig,
    build_video_filter,
    build_audio_filter,
    build_render_command,
)

from .cache import (
    CompiledExpressionCache,
    generate_cache_key,
)

__all__ = [
    # Errors
    "MotionValidationError",
    "InvalidDuration",
    "UnsupportedFrameRate",
    "AmplitudeOutOfBounds",
    "SpeedOutOfBounds",
    "AudioOutOfRange",
    "UnsupportedChaining",
    "MissingPresetOrFields",
    # Presets
    "Preset",
    "PresetTable",
    "EffectBounds",
    "PRESET_TABLE",
    "get_preset",
    "list_presets",
    "load_preset_table",
    # Validation
    "ClampEvent",
    "ValidatedMotionSpec",
    "validate",
    # Envelopes
    "Envelope",
    "build_oscillating",
    "build_single_pulse",
    # Seed mixing
    "SeedPerturbation",
    "mix",
    # Specializers
    "ShakeParams",
    "ScaleParams",
    "SpeedRampParams",
    "specialize",
    # Audio
    "derive_audio_tempo",
    "couple_audio_tempo",
    # Frame rate
    "FrameRateContract",
    "resolve_frame_rate",
    # Serialization
    "CompiledExpression",
    "serialize",
    # Compiler
    "CompiledChain",
    "compile_motion",
    "compile_chain",
    # FFmpeg
    "RenderConfig",
    "build_video_filter",
    "build_audio_filter",
    "build_render_command",
    # Cache
    "CompiledExpressionCache",
    "generate_cache_key",
]
