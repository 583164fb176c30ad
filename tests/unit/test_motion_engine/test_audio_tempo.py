"""
Unit tests for motion_engine.audio_tempo module.
"""

import pytest

from motion_worker.tasks.motion_engine.audio_tempo import (
    MAX_TEMPO,
    MIN_TEMPO,
    couple_audio_tempo,
    derive_audio_tempo,
)
from motion_worker.tasks.motion_engine.envelopes import build_single_pulse
from motion_worker.tasks.motion_engine.errors import AudioOutOfRange, UnsupportedChaining
from motion_worker.tasks.motion_engine.specializers import SpeedRampParams


def make_ramp(start_speed: float, peak_speed: float) -> SpeedRampParams:
    """Build SpeedRampParams directly, bypassing validation."""
    return SpeedRampParams(
        start_speed=start_speed,
        peak_speed=peak_speed,
        envelope=build_single_pulse(peak_speed - start_speed, 200, 300, 400),
    )


class TestDeriveAudioTempo:
    """Tests for damped tempo derivation."""

    @pytest.mark.parametrize("peak_speed,expected", [
        (1.0, 1.0),
        (1.5, 1.25),
        (2.0, 1.5),
        (0.5, 0.75),
    ])
    def test_damped_tempo(self, peak_speed, expected):
        """Test tempo = 1 + 0.5 * (s_peak - 1)."""
        assert derive_audio_tempo(make_ramp(1.0, peak_speed)) == pytest.approx(expected)

    def test_ignores_start_speed(self):
        """Test only the peak speed drives the tempo."""
        assert derive_audio_tempo(make_ramp(0.5, 1.5)) == derive_audio_tempo(make_ramp(2.0, 1.5))

    def test_bounded_for_all_valid_peaks(self):
        """Test tempo stays in [0.5, 2.0] across the legal peak range."""
        for i in range(0, 151):
            peak = 0.5 + i * 0.01
            tempo = derive_audio_tempo(make_ramp(1.0, peak))
            assert MIN_TEMPO <= tempo <= MAX_TEMPO

    def test_out_of_range_raises(self):
        """Test the last-line check fires for unvalidated extremes."""
        with pytest.raises(AudioOutOfRange):
            derive_audio_tempo(make_ramp(1.0, 4.0))
        with pytest.raises(AudioOutOfRange):
            derive_audio_tempo(make_ramp(1.0, -0.5))


class TestCoupleAudioTempo:
    """Tests for the one-ramp-per-track rule."""

    def test_no_ramps(self):
        """Test no speed ramp means no audio tempo."""
        assert couple_audio_tempo([]) is None

    def test_single_ramp(self):
        """Test one ramp gives its tempo."""
        assert couple_audio_tempo([make_ramp(1.0, 2.0)]) == pytest.approx(1.5)

    def test_chained_ramps_rejected(self):
        """Test two ramps on one audio track are rejected."""
        with pytest.raises(UnsupportedChaining) as exc_info:
            couple_audio_tempo([make_ramp(1.0, 1.5), make_ramp(1.0, 1.25)])
        assert exc_info.value.code == "unsupported_chaining"
