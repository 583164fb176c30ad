"""
Motion Compilation Errors

Every failure the compiler can report is raised while validating a
request. Each error carries a snake_case code and, where it applies,
the request field that violated the constraint.
"""

from typing import Optional


class MotionValidationError(Exception):
    """Base class for all motion request failures."""

    code = "motion_validation_error"

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.path = path

    def to_detail(self) -> dict:
        """Convert to the error dict returned in job results."""
        return {
            "code": self.code,
            "message": self.message,
            "path": self.path,
        }


class InvalidDuration(MotionValidationError):
    """Raised when duration_ms is not positive."""

    code = "invalid_duration"


class UnsupportedFrameRate(MotionValidationError):
    """Raised when fps is outside the supported range."""

    code = "unsupported_frame_rate"


class AmplitudeOutOfBounds(MotionValidationError):
    """Raised when amplitude exceeds the effect's hard safety bound."""

    code = "amplitude_out_of_bounds"


class SpeedOutOfBounds(MotionValidationError):
    """Raised when a speed ramp start or peak speed is outside [0.5, 2.0]."""

    code = "speed_out_of_bounds"


class AudioOutOfRange(MotionValidationError):
    """Raised when the damped audio tempo still falls outside [0.5, 2.0]."""

    code = "audio_out_of_range"


class UnsupportedChaining(MotionValidationError):
    """Raised when more than one speed ramp would drive one audio track."""

    code = "unsupported_chaining"


class MissingPresetOrFields(MotionValidationError):
    """Raised when a preset is unknown or required fields are absent."""

    code = "missing_preset_or_fields"
