"""
Motion Envelope Compiler

Turns declarative motion requests into deterministic, closed-form
per-frame expressions for the FFmpeg renderer.
"""

__version__ = "0.1.0"
