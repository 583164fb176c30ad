"""
Unit tests for motion_engine.ffmpeg_templates module.
"""

from motion_worker.tasks.motion_engine.compiler import compile_motion
from motion_worker.tasks.motion_engine.ffmpeg_templates import (
    RenderConfig,
    build_audio_filter,
    build_normalize_filter,
    build_render_command,
    build_video_filter,
    rename_time_variable,
)


class TestRenameTimeVariable:
    """Tests for time symbol rewriting."""

    def test_only_whole_tokens(self):
        """Test t inside function names is left alone."""
        assert rename_time_variable("sqrt(t)*exp(-2*t)", "T") == "sqrt(T)*exp(-2*T)"
        assert rename_time_variable("max(0.01,1+sin(PI*t/2))", "T") == "max(0.01,1+sin(PI*T/2))"


class TestVideoFilter:
    """Tests for -vf chain construction."""

    def test_zoom_punch_normalized(self, make_request):
        """Test fps normalization comes first and the expansion is cropped."""
        compiled = compile_motion(make_request())
        vf = build_video_filter(compiled, RenderConfig())
        assert vf.startswith("fps=30,scale=1920:1080,scale=w='iw*(max(0.01,1+0.18*sin(PI*t/0.56)")
        assert ":eval=frame,crop=1920:1080," in vf
        assert vf.endswith("setsar=1")

    def test_cfr_source_skips_normalize(self, make_request):
        compiled = compile_motion(make_request(source_cfr=True))
        assert build_normalize_filter(compiled) is None
        assert build_video_filter(compiled, RenderConfig()).startswith("scale=1920:1080,scale=w=")

    def test_zoom_punch_custom_output_size(self, make_request):
        """Test the input is brought to the output size before the pulse and crop."""
        compiled = compile_motion(make_request(source_cfr=True))
        vf = build_video_filter(compiled, RenderConfig(width=1280, height=720))
        stages = vf.split(",scale=w=")
        assert stages[0] == "scale=1280:720"
        assert vf.endswith(":eval=frame,crop=1280:720,setsar=1")
        assert "1920" not in vf

    def test_zoom_out_padded(self, make_request):
        compiled = compile_motion(make_request(effect="zoom_out", amplitude=0.1, source_cfr=True))
        vf = build_video_filter(compiled, RenderConfig(width=1280, height=720))
        assert vf.startswith("scale=1280:720,scale=w=")
        assert "pad=1280:720:(ow-iw)/2:(oh-ih)/2:black" in vf
        assert "crop" not in vf

    def test_shake_crop_window(self, make_request):
        compiled = compile_motion(make_request(effect="shake", amplitude=10.0, source_cfr=True))
        vf = build_video_filter(compiled, RenderConfig())
        assert vf.startswith("crop=w=iw-80:h=ih-80:x='40+(10*sin(")
        assert ":y='40+(10*cos(" in vf
        assert ",scale=1920:1080,setsar=1" in vf

    def test_speed_ramp_setpts(self, make_request):
        """Test the time remap uses setpts with T for time."""
        compiled = compile_motion(make_request(
            effect="speed_ramp", preset="medium", amplitude=None,
            attack_ms=None, peak_ms=None, decay_ms=None, duration_ms=1200, source_cfr=True,
        ))
        vf = build_video_filter(compiled, RenderConfig())
        assert vf == "setpts='PTS/(max(0.01,1+0.5*sin(PI*T/1.4)*exp(-7.5*T)))',setsar=1"


class TestAudioFilter:
    """Tests for -af chain construction."""

    def test_speed_ramp_atempo(self, make_request):
        compiled = compile_motion(make_request(effect="speed_ramp", amplitude=[1.0, 1.5]))
        assert build_audio_filter(compiled) == "atempo=1.25"

    def test_no_audio_filter_for_zoom(self, make_request):
        assert build_audio_filter(compile_motion(make_request())) is None


class TestRenderCommand:
    """Tests for full FFmpeg command construction."""

    def test_command_without_audio_filter(self, make_request):
        compiled = compile_motion(make_request())
        cmd = build_render_command("in.mp4", "out.mp4", compiled, RenderConfig())
        assert cmd[:4] == ["ffmpeg", "-y", "-i", "in.mp4"]
        assert cmd[cmd.index("-vf") + 1] == build_video_filter(compiled, RenderConfig())
        assert "-af" not in cmd
        assert cmd[cmd.index("-c:a") + 1] == "copy"
        assert cmd[-1] == "out.mp4"

    def test_command_with_audio_filter(self, make_request):
        compiled = compile_motion(make_request(effect="speed_ramp", amplitude=[1.0, 2.0]))
        cmd = build_render_command("in.mp4", "out.mp4", compiled, RenderConfig(crf=18))
        assert cmd[cmd.index("-af") + 1] == "atempo=1.5"
        assert cmd[cmd.index("-c:a") + 1] == "aac"
        assert cmd[cmd.index("-crf") + 1] == "18"
