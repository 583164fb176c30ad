"""
Compiled Expression Cache

Provides deterministic cache key generation and on-disk storage for
compiled motion expressions. Compilation is pure, so a key derived from
the canonical request fully identifies its output.
"""

import hashlib
import json
import logging
from pathlib import Path
from typing import Optional

from motion_worker.schemas.motion_request import MotionRequest

from .expressions import SIGNIFICANT_DIGITS

logger = logging.getLogger(__name__)


def generate_cache_key(request: MotionRequest, preset_fingerprint: str) -> str:
    """
    Generate deterministic cache key for a motion request.

    The key is a SHA-256 hash of every input that affects the compiled
    output: the request itself, the fingerprint of the preset table it is
    resolved against and the serializer precision.

    Args:
        request: Parsed MotionRequest
        preset_fingerprint: PresetTable.fingerprint() of the table in use

    Returns:
        SHA-256 hash string (64 characters)
    """
    payload = {
        "request": request.model_dump(mode="json"),
        "preset_table": preset_fingerprint,
        "precision": SIGNIFICANT_DIGITS,
    }

    canonical = json.dumps(payload, sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(canonical.encode()).hexdigest()


class CompiledExpressionCache:
    """
    Cache manager for compiled expressions.

    Stores entries in a sharded directory structure:
    {cache_root}/{key[:2]}/{key}.json

    Usage:
        cache = CompiledExpressionCache(Path("/data/derived/cache/compiled_motion"))

        cached = cache.get(cache_key)
        if cached is None:
            compiled = compile_motion(request)
            cache.store(cache_key, compiled.to_dict())
    """

    def __init__(self, cache_root: Path):
        """
        Initialize cache manager.

        Args:
            cache_root: Root directory for cache storage
        """
        self.cache_root = Path(cache_root)
        self.cache_root.mkdir(parents=True, exist_ok=True)

    def _get_cache_path(self, cache_key: str) -> Path:
        """
        Get filesystem path for cache key.

        Uses first 2 characters for sharding to avoid
        too many files in one directory.
        """
        shard = cache_key[:2]
        return self.cache_root / shard / f"{cache_key}.json"

    def get(self, cache_key: str) -> Optional[dict]:
        """
        Get a cached compiled expression.

        Args:
            cache_key: SHA-256 hash string

        Returns:
            Compiled expression dict if cached, None otherwise
        """
        cache_path = self._get_cache_path(cache_key)
        if not cache_path.exists():
            return None
        try:
            data = json.loads(cache_path.read_text())
        except (json.JSONDecodeError, IOError) as e:
            logger.warning(f"Ignoring unreadable cache entry {cache_key[:16]}...: {e}")
            return None
        logger.debug(f"Cache hit: {cache_key[:16]}...")
        return data

    def store(self, cache_key: str, compiled: dict) -> str:
        """
        Store a compiled expression dict.

        Writes through a temp file and renames to prevent partial entries.

        Args:
            cache_key: SHA-256 hash string
            compiled: CompiledExpression.to_dict() output

        Returns:
            Path to cached entry

        Raises:
            IOError: If the write fails
        """
        cache_path = self._get_cache_path(cache_key)
        cache_path.parent.mkdir(parents=True, exist_ok=True)

        temp_path = cache_path.with_suffix(".tmp")
        try:
            temp_path.write_text(json.dumps(compiled, sort_keys=True, separators=(",", ":")))
            temp_path.rename(cache_path)
            logger.debug(f"Cached: {cache_key[:16]}...")
            return str(cache_path)
        except OSError as e:
            if temp_path.exists():
                temp_path.unlink()
            raise IOError(f"Failed to cache compiled expression: {e}") from e
