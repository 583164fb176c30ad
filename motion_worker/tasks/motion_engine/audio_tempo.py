"""
Audio Tempo Coupling for Speed Ramps

Audio never follows the full video speed curve; it gets one damped tempo
factor derived from the ramp's peak speed. The result always fits a
single FFmpeg atempo instance, whose range is [0.5, 2.0].
"""

import logging
from typing import Optional, Sequence

from .errors import AudioOutOfRange, UnsupportedChaining
from .specializers import SpeedRampParams

logger = logging.getLogger(__name__)

MIN_TEMPO = 0.5
MAX_TEMPO = 2.0

# Fraction of the video speed change carried over to audio
TEMPO_DAMPING = 0.5


def derive_audio_tempo(speed_ramp: SpeedRampParams) -> float:
    """
    Derive the damped audio tempo from a speed ramp's peak speed.

    tempo = clamp(1 + 0.5 * (s_peak - 1), 0.5, 2.0)

    Args:
        speed_ramp: Specialized speed ramp

    Returns:
        Tempo factor in [0.5, 2.0]

    Raises:
        AudioOutOfRange: If the damped tempo falls outside [0.5, 2.0]
    """
    tempo = 1.0 + TEMPO_DAMPING * (speed_ramp.peak_speed - 1.0)
    if not (MIN_TEMPO <= tempo <= MAX_TEMPO):
        raise AudioOutOfRange(
            f"Audio tempo {tempo:.4f} outside [{MIN_TEMPO}, {MAX_TEMPO}] "
            f"for peak speed {speed_ramp.peak_speed}",
            path="peak_speed",
        )
    return min(max(tempo, MIN_TEMPO), MAX_TEMPO)


def couple_audio_tempo(speed_ramps: Sequence[SpeedRampParams]) -> Optional[float]:
    """
    Derive the single audio tempo for one audio track.

    Args:
        speed_ramps: All speed ramp specializations feeding the track

    Returns:
        Tempo factor, or None when no speed ramp is present

    Raises:
        UnsupportedChaining: If more than one speed ramp feeds the track
        AudioOutOfRange: If the damped tempo is out of range
    """
    if not speed_ramps:
        return None
    if len(speed_ramps) > 1:
        raise UnsupportedChaining(
            f"Only one speed_ramp per audio track is supported, got {len(speed_ramps)}",
            path="effect",
        )

    tempo = derive_audio_tempo(speed_ramps[0])
    logger.debug(f"Audio tempo {tempo} for peak speed {speed_ramps[0].peak_speed}")
    return tempo
