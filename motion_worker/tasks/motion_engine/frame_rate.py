"""
Frame-Rate Contract Resolution

Envelopes assume a stable, drift-free t. When the source timeline is not
known to be constant frame rate, the contract tells the renderer to
normalize it before any time-dependent expression runs.
"""

from dataclasses import dataclass

from .validator import ValidatedMotionSpec


@dataclass(frozen=True)
class FrameRateContract:
    """Required output fps and whether a normalization stage must be inserted."""

    required_fps: int
    must_normalize: bool

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "required_fps": self.required_fps,
            "must_normalize": self.must_normalize,
        }


def resolve_frame_rate(spec: ValidatedMotionSpec) -> FrameRateContract:
    """
    Build the frame-rate contract for a validated spec.

    An unknown source (source_cfr is None) is treated as variable frame rate.
    """
    return FrameRateContract(
        required_fps=spec.fps,
        must_normalize=spec.source_cfr is not True,
    )
