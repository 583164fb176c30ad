"""
Motion Worker Tasks

Tasks:
- compile_motion_job: Compile one MotionRequest payload
- compile_chain_job: Compile sequential requests sharing one audio track
"""

from .compile_motion import (
    compile_motion_job,
    compile_chain_job,
    get_preset_table,
)

__all__ = [
    "compile_motion_job",
    "compile_chain_job",
    "get_preset_table",
]
