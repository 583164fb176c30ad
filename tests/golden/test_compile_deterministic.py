"""
Golden compile tests - verify byte-identical compiled output.

Each vector pairs a MotionRequest with the canonical JSON it must compile
to. Any change to envelope timing, number formatting or channel layout
shows up here as a diff.

Usage:
    pytest tests/golden/test_compile_deterministic.py -v
"""
import json
from pathlib import Path

import pytest

from motion_worker.schemas.motion_request import MotionRequest
from motion_worker.tasks.motion_engine.compiler import compile_motion

VECTORS_DIR = Path(__file__).parent / "vectors"
VECTOR_NAMES = sorted(path.stem for path in VECTORS_DIR.glob("*.json"))


def load_vector(name: str) -> dict:
    return json.loads((VECTORS_DIR / f"{name}.json").read_text())


class TestCompileDeterministic:
    """Golden tests comparing compiled output to expected canonical JSON."""

    def test_vectors_present(self):
        assert VECTOR_NAMES

    @pytest.mark.parametrize("vector_name", VECTOR_NAMES)
    def test_golden_output(self, vector_name: str):
        """Compile the vector request and compare against the stored JSON."""
        vector = load_vector(vector_name)
        request = MotionRequest.model_validate(vector["request"])

        actual = compile_motion(request).to_json()

        assert actual == vector["expected"], (
            f"Compiled output for {vector_name} changed.\n"
            f"Expected: {vector['expected']}\n"
            f"Actual:   {actual}"
        )

    @pytest.mark.parametrize("vector_name", VECTOR_NAMES)
    def test_repeated_compiles_identical(self, vector_name: str):
        """Compile the same request many times; every output must match."""
        request = MotionRequest.model_validate(load_vector(vector_name)["request"])
        outputs = {compile_motion(request).to_json() for _ in range(20)}
        assert len(outputs) == 1
