"""
Root conftest for motion compiler tests.

Sets up Python path to allow 'from motion_worker...' imports without an
editable install, and provides request and settings fixtures.
"""
import sys
from pathlib import Path
from typing import Callable

import pytest

ROOT_DIR = Path(__file__).parent.parent.resolve()

if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from motion_worker.core.config import Settings
from motion_worker.schemas.motion_request import MotionRequest
from motion_worker.tasks.compile_motion import get_preset_table


# ============================================================================
# Request fixtures
# ============================================================================

ZOOM_PUNCH_SCENARIO = {
    "effect": "zoom_punch",
    "amplitude": 0.18,
    "attack_ms": 80,
    "peak_ms": 60,
    "decay_ms": 280,
    "duration_ms": 420,
    "fps": 30,
}


@pytest.fixture
def make_request() -> Callable[..., MotionRequest]:
    """
    Factory for MotionRequest objects.

    Defaults to the 420ms zoom punch scenario; keyword arguments override
    fields, and passing a field as None removes it.
    """
    def _make(**overrides) -> MotionRequest:
        data = dict(ZOOM_PUNCH_SCENARIO)
        data.update(overrides)
        data = {key: value for key, value in data.items() if value is not None}
        return MotionRequest.model_validate(data)

    return _make


@pytest.fixture
def scenario_payload() -> dict:
    """The zoom punch scenario as a raw JSON payload."""
    return dict(ZOOM_PUNCH_SCENARIO)


# ============================================================================
# Settings fixtures
# ============================================================================


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Settings isolated from the environment with a temporary storage root."""
    return Settings(_env_file=None, STORAGE_PATH=str(tmp_path / "storage"))


@pytest.fixture(autouse=True)
def clear_preset_table_cache():
    """Reset the once-per-process preset table between tests."""
    get_preset_table.cache_clear()
    yield
    get_preset_table.cache_clear()
