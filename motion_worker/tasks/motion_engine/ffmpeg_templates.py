"""
FFmpeg Filter Templates for Compiled Motion

Renders a CompiledExpression into the FFmpeg filter chains and command
handed to the external renderer. Nothing here runs FFmpeg.
"""

import logging
import re
from dataclasses import dataclass
from typing import List, Optional

from .expressions import CompiledExpression

logger = logging.getLogger(__name__)

# Effects whose scale pulse shrinks the frame and therefore needs padding
CONTRACTING_EFFECTS = ("zoom_out", "reverse_burst")

_TIME_TOKEN = re.compile(r"\bt\b")


@dataclass
class RenderConfig:
    """Configuration for motion effect rendering."""

    width: int = 1920
    height: int = 1080
    crf: int = 20
    preset: str = "medium"
    pix_fmt: str = "yuv420p"
    # Crop margin for shake; matches the shake hard amplitude bound
    shake_margin: int = 40


# =============================================================================
# Filter Expression Builders
# =============================================================================


def rename_time_variable(expr: str, variable: str) -> str:
    """
    Rewrite the time symbol t for filters that name it differently.

    setpts, for example, exposes time in seconds as T.
    """
    return _TIME_TOKEN.sub(variable, expr)


def build_normalize_filter(compiled: CompiledExpression) -> Optional[str]:
    """
    Build the constant-frame-rate normalization stage, if the contract asks for it.

    Returns:
        "fps=N" or None
    """
    contract = compiled.frame_rate
    if not contract.must_normalize:
        return None
    return f"fps={contract.required_fps}"


def build_shake_filter(compiled: CompiledExpression, config: RenderConfig) -> str:
    """
    Build a moving crop window for shake.

    Formula: crop=w=iw-2m:h=ih-2m:x='m+(x(t))':y='m+(y(t))',scale=W:H
    """
    margin = config.shake_margin
    x_expr = compiled.channels["x"]
    y_expr = compiled.channels["y"]
    return (
        f"crop=w=iw-{2 * margin}:h=ih-{2 * margin}:"
        f"x='{margin}+({x_expr})':"
        f"y='{margin}+({y_expr})',"
        f"scale={config.width}:{config.height}"
    )


def build_scale_filter(compiled: CompiledExpression, config: RenderConfig) -> str:
    """
    Build a per-frame scale pulse.

    The input is first scaled to the output size so the pulse always
    works on a W x H frame. Expanding pulses are center-cropped back to
    the output size; contracting pulses are center-padded.
    """
    w_expr = compiled.channels["scale_w"]
    h_expr = compiled.channels["scale_h"]
    base = f"scale={config.width}:{config.height}"
    scale = f"scale=w='iw*({w_expr})':h='ih*({h_expr})':eval=frame"

    if compiled.effect in CONTRACTING_EFFECTS:
        fit = f"pad={config.width}:{config.height}:(ow-iw)/2:(oh-ih)/2:black"
    else:
        fit = f"crop={config.width}:{config.height}"
    return f"{base},{scale},{fit}"


def build_speed_filter(compiled: CompiledExpression) -> str:
    """
    Build the time remap: pts' = pts / s(t).

    Formula: setpts='PTS/(s(T))'
    """
    speed_expr = rename_time_variable(compiled.channels["pts_scale"], "T")
    return f"setpts='PTS/({speed_expr})'"


def build_video_filter(compiled: CompiledExpression, config: RenderConfig) -> str:
    """
    Build the complete -vf chain for a compiled effect.

    The frame-rate normalization stage, when required, always comes first
    so every time-dependent expression sees a drift-free t.

    Args:
        compiled: CompiledExpression
        config: RenderConfig with output settings

    Returns:
        Filter string for FFmpeg -vf
    """
    stages: List[str] = []

    normalize = build_normalize_filter(compiled)
    if normalize:
        stages.append(normalize)

    channels = compiled.channels
    if "x" in channels:
        stages.append(build_shake_filter(compiled, config))
    elif "scale_w" in channels:
        stages.append(build_scale_filter(compiled, config))
    elif "pts_scale" in channels:
        stages.append(build_speed_filter(compiled))

    stages.append("setsar=1")
    return ",".join(stages)


def build_audio_filter(compiled: CompiledExpression) -> Optional[str]:
    """
    Build the -af chain for a speed ramp's coupled audio tempo.

    The tempo is always within [0.5, 2.0], so one atempo instance suffices.

    Returns:
        "atempo=X" or None when the effect carries no audio tempo
    """
    tempo = compiled.channels.get("audio_tempo")
    if tempo is None:
        return None
    return f"atempo={tempo}"


# =============================================================================
# Full Command Builders
# =============================================================================


def build_render_command(
    input_path: str,
    output_path: str,
    compiled: CompiledExpression,
    config: RenderConfig,
) -> List[str]:
    """
    Build the FFmpeg command applying a compiled effect to a video clip.

    Args:
        input_path: Path to input video
        output_path: Path for output MP4
        compiled: CompiledExpression to apply
        config: RenderConfig with encoding settings

    Returns:
        List of command arguments for subprocess
    """
    vf = build_video_filter(compiled, config)
    af = build_audio_filter(compiled)

    cmd = [
        "ffmpeg",
        "-y",  # Overwrite output
        "-i", input_path,
        "-vf", vf,
    ]
    if af:
        cmd += ["-af", af, "-c:a", "aac"]
    else:
        cmd += ["-c:a", "copy"]

    cmd += [
        "-c:v", "libx264",
        "-preset", config.preset,
        "-crf", str(config.crf),
        "-pix_fmt", config.pix_fmt,
        output_path,
    ]

    logger.debug(f"Render command for {compiled.effect}: {' '.join(cmd)}")
    return cmd
