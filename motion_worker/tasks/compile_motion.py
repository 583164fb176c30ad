"""
Motion Compilation Task

Thin caller around the pure compiler. Owns everything process-wide:
settings, the once-loaded preset table, the on-disk cache and logging.

Result format:
    {"status": "complete", "cache_key": ..., "cached": bool,
     "compiled": {...}, "video_filter": "...", "audio_filter": "..." | None}
    {"status": "failed", "error": {"code": ..., "message": ..., "path": ...}}
"""

import logging
from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError

from motion_worker.core.config import Settings, get_settings
from motion_worker.schemas.motion_request import MotionRequest

from .motion_engine.cache import CompiledExpressionCache, generate_cache_key
from .motion_engine.compiler import compile_chain, compile_motion
from .motion_engine.errors import MotionValidationError
from .motion_engine.expressions import CompiledExpression
from .motion_engine.ffmpeg_templates import RenderConfig, build_audio_filter, build_video_filter
from .motion_engine.presets import PRESET_TABLE, PresetTable, load_preset_table

logger = logging.getLogger(__name__)


@lru_cache()
def get_preset_table(preset_table_path: Optional[str] = None) -> PresetTable:
    """
    Get the process-wide preset table.

    Loaded once per path and never mutated afterwards.

    Args:
        preset_table_path: Optional JSON override file

    Returns:
        PresetTable
    """
    if not preset_table_path:
        return PRESET_TABLE
    return load_preset_table(preset_table_path)


def parse_request(payload: dict, settings: Settings) -> MotionRequest:
    """
    Parse a JSON payload and fill caller-level defaults.

    Raises:
        pydantic.ValidationError: If the payload does not match the schema
    """
    request = MotionRequest.model_validate(payload)
    if request.source_cfr is None and settings.assume_source_cfr is not None:
        request = request.model_copy(update={"source_cfr": settings.assume_source_cfr})
    return request


def compile_motion_job(
    payload: dict,
    settings: Optional[Settings] = None,
    config: Optional[RenderConfig] = None,
) -> dict:
    """
    Compile one motion request payload.

    Args:
        payload: MotionRequest JSON document
        settings: Settings (defaults to get_settings())
        config: RenderConfig for the FFmpeg filter chain

    Returns:
        Result dict (see module docstring)
    """
    settings = settings or get_settings()
    config = config or RenderConfig()

    try:
        request = parse_request(payload, settings)
    except ValidationError as e:
        return _schema_failure(e)

    preset_table = get_preset_table(settings.preset_table_path)
    cache_key = generate_cache_key(request, preset_table.fingerprint())
    cache = _open_cache(settings)

    cached = cache.get(cache_key) if cache else None
    if cached is not None:
        compiled = CompiledExpression.from_dict(cached)
    else:
        try:
            compiled = compile_motion(request, preset_table)
        except MotionValidationError as e:
            logger.warning(f"Motion request rejected: {e.code}: {e.message}")
            return {"status": "failed", "error": e.to_detail()}
        if cache:
            try:
                cache.store(cache_key, compiled.to_dict())
            except IOError as e:
                logger.warning(f"Continuing without caching {cache_key[:12]}: {e}")

    logger.info(
        f"Compiled {compiled.effect} [{cache_key[:12]}] "
        f"{'(cached)' if cached is not None else ''}".rstrip()
    )

    return {
        "status": "complete",
        "cache_key": cache_key,
        "cached": cached is not None,
        "compiled": compiled.to_dict(),
        "video_filter": build_video_filter(compiled, config),
        "audio_filter": build_audio_filter(compiled),
    }


def compile_chain_job(
    payloads: List[dict],
    settings: Optional[Settings] = None,
    config: Optional[RenderConfig] = None,
) -> dict:
    """
    Compile sequential motion requests sharing one audio track.

    Args:
        payloads: MotionRequest JSON documents in timeline order
        settings: Settings (defaults to get_settings())
        config: RenderConfig for the FFmpeg filter chains

    Returns:
        Result dict with "segments" (one filter pair per segment) and "audio_tempo"
    """
    settings = settings or get_settings()
    config = config or RenderConfig()

    try:
        requests = [parse_request(payload, settings) for payload in payloads]
    except ValidationError as e:
        return _schema_failure(e)

    try:
        chain = compile_chain(requests, get_preset_table(settings.preset_table_path))
    except MotionValidationError as e:
        logger.warning(f"Motion chain rejected: {e.code}: {e.message}")
        return {"status": "failed", "error": e.to_detail()}

    logger.info(f"Compiled chain of {len(chain.segments)} segments")

    result = chain.to_dict()
    result["status"] = "complete"
    result["filters"] = [
        {
            "video_filter": build_video_filter(segment, config),
            "audio_filter": build_audio_filter(segment),
        }
        for segment in chain.segments
    ]
    return result


def _schema_failure(error: ValidationError) -> dict:
    first = error.errors()[0]
    path = ".".join(str(x) for x in first["loc"])
    logger.warning(f"Malformed motion request: {first['msg']} at {path}")
    return {
        "status": "failed",
        "error": {
            "code": "invalid_request",
            "message": first["msg"],
            "path": path,
        },
    }


def _open_cache(settings: Settings) -> Optional[CompiledExpressionCache]:
    """Open the on-disk cache, or None when disabled or its root is unusable."""
    if not settings.cache_enabled:
        return None
    try:
        return CompiledExpressionCache(Path(settings.cache_root))
    except OSError as e:
        logger.warning(f"Compiled expression cache unavailable at {settings.cache_root}: {e}")
        return None
