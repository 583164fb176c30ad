"""Pydantic schemas for the motion compiler's JSON contracts."""

from .motion_request import EffectType, MotionRequest

__all__ = [
    "EffectType",
    "MotionRequest",
]
