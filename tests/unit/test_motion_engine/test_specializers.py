"""
Unit tests for motion_engine.specializers module.
"""

import math

import pytest

from motion_worker.tasks.motion_engine.presets import EFFECT_TYPES
from motion_worker.tasks.motion_engine.seed_mixer import mix
from motion_worker.tasks.motion_engine.specializers import (
    SCALE_FLOOR,
    SPECIALIZERS,
    ScaleParams,
    ShakeParams,
    SpeedRampParams,
    specialize,
)
from motion_worker.tasks.motion_engine.validator import validate


class TestDispatch:
    """Tests for the closed effect dispatch table."""

    def test_one_specializer_per_effect(self):
        """Test the table covers exactly the effect catalog."""
        assert set(SPECIALIZERS) == set(EFFECT_TYPES)

    @pytest.mark.parametrize("effect,expected", [
        ("shake", ShakeParams),
        ("zoom_punch", ScaleParams),
        ("zoom_out", ScaleParams),
        ("reverse_burst", ScaleParams),
        ("speed_ramp", SpeedRampParams),
    ])
    def test_param_types(self, make_request, effect, expected):
        """Test each effect yields its parameter type."""
        spec = validate(make_request(effect=effect, preset="medium", amplitude=None, duration_ms=2000))
        assert isinstance(specialize(spec), expected)


class TestShake:
    """Tests for the shake specializer."""

    def _shake(self, make_request, seed=42):
        spec = validate(make_request(effect="shake", preset="medium", amplitude=None, seed=seed))
        return spec, specialize(spec)

    def test_quarter_cycle_offset(self, make_request):
        """Test y leads x by exactly pi/2."""
        _, params = self._shake(make_request)
        assert params.y.phase - params.x.phase == pytest.approx(math.pi / 2)

    def test_phase_from_seed(self, make_request):
        """Test the x phase comes from the seed mixer."""
        _, params = self._shake(make_request, seed=7)
        assert params.x.phase == mix(7, "x").phase_offset

    def test_pixel_amplitude(self, make_request):
        """Test both axes use the validated pixel amplitude."""
        spec, params = self._shake(make_request)
        assert params.x.amplitude == spec.amplitude == 10.0
        assert params.y.amplitude == spec.amplitude

    def test_frequency_from_preset(self, make_request):
        """Test w is near 2*pi*f, perturbed only by jitter and attack."""
        spec, params = self._shake(make_request)
        nominal = 2 * math.pi * spec.frequency_hz
        assert params.x.angular_frequency == pytest.approx(nominal, rel=0.2)

    def test_same_seed_same_params(self, make_request):
        """Test shake is reproducible for a seed."""
        assert self._shake(make_request, 9)[1] == self._shake(make_request, 9)[1]

    def test_different_seed_different_params(self, make_request):
        """Test different seeds give different jitter."""
        assert self._shake(make_request, 9)[1] != self._shake(make_request, 10)[1]


class TestScaleEffects:
    """Tests for zoom punch, zoom out and reverse burst."""

    def test_zoom_punch_expands(self, make_request):
        """Test zoom punch scales above 1."""
        params = specialize(validate(make_request()))
        assert params.envelope.amplitude == 0.18
        assert params.scale_at(0.1) > 1.0

    @pytest.mark.parametrize("effect", ["zoom_out", "reverse_burst"])
    def test_contracting_effects(self, make_request, effect):
        """Test zoom out and reverse burst scale below 1."""
        params = specialize(validate(make_request(effect=effect, amplitude=0.2)))
        assert params.envelope.amplitude == -0.2
        assert params.scale_at(0.1) < 1.0

    def test_floor_clamp(self):
        """Test scale never drops below the floor."""
        from motion_worker.tasks.motion_engine.envelopes import build_single_pulse

        params = ScaleParams(envelope=build_single_pulse(-50.0, 80, 60, 280))
        assert params.scale_at(0.08) == SCALE_FLOOR

    def test_reverse_burst_uses_own_presets(self, make_request):
        """Test reverse burst and zoom out differ under the same preset name."""
        burst = specialize(validate(make_request(effect="reverse_burst", preset="medium", amplitude=None,
                                                 attack_ms=None, peak_ms=None, decay_ms=None)))
        zoom_out = specialize(validate(make_request(effect="zoom_out", preset="medium", amplitude=None,
                                                    attack_ms=None, peak_ms=None, decay_ms=None)))
        assert burst.envelope != zoom_out.envelope


class TestSpeedRamp:
    """Tests for the speed ramp specializer."""

    def test_speed_curve(self, make_request):
        """Test s(t) starts at s0 and rises toward s_peak."""
        params = specialize(validate(make_request(effect="speed_ramp", amplitude=[1.0, 1.5])))
        assert params.start_speed == 1.0
        assert params.peak_speed == 1.5
        assert params.envelope.amplitude == pytest.approx(0.5)
        assert params.speed_at(0.0) == 1.0
        assert 1.0 < params.speed_at(params.envelope.peak_time()) <= 1.5

    def test_slow_down_ramp(self, make_request):
        """Test a peak below the start speed dips the curve."""
        params = specialize(validate(make_request(effect="speed_ramp", amplitude=[1.0, 0.5])))
        assert params.speed_at(0.1) < 1.0
