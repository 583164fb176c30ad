"""
Motion Preset Definitions

Defines the versioned Micro / Medium / Heavy preset catalog per effect
family together with the per-family safety bounds. The table is built
once and never mutated; concurrent readers need no locking.
"""

import hashlib
import json
import logging
from dataclasses import asdict, dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Tuple

logger = logging.getLogger(__name__)

EFFECT_TYPES: Tuple[str, ...] = (
    "shake",
    "zoom_punch",
    "zoom_out",
    "reverse_burst",
    "speed_ramp",
)

CATALOG_VERSION = "1"

# Speed ramps are never auto-fixed; both speeds must already lie here.
MIN_SPEED = 0.5
MAX_SPEED = 2.0


@dataclass(frozen=True)
class EffectBounds:
    """
    Safety bounds for one effect family.

    Attributes:
        effect: Effect family
        hard_max: Absolute amplitude ceiling, independent of any preset
        soft_range: Default soft amplitude range used without a preset
        frequency_hz: Default oscillation frequency (shake only)
        speed_range: Legal start/peak speed range (speed_ramp only)
    """

    effect: str
    hard_max: float
    soft_range: Tuple[float, float]
    frequency_hz: Optional[float] = None
    speed_range: Tuple[float, float] = (MIN_SPEED, MAX_SPEED)


@dataclass(frozen=True)
class Preset:
    """
    Named default parameter bundle for one effect family.

    Attributes:
        name: Preset identifier (micro, medium, heavy)
        effect: Effect family the preset belongs to
        attack_ms: Default attack time
        peak_ms: Default plateau time
        decay_ms: Default decay time
        amplitude: Default amplitude (px for shake, scale fraction otherwise)
        soft_range: Amplitude range outside which values are clamped
        frequency_hz: Oscillation frequency (shake only)
        start_speed: Initial speed multiplier (speed_ramp only)
        peak_speed: Peak speed multiplier (speed_ramp only)
        version: Catalog version the preset was published in
        description: Human-readable description
    """

    name: str
    effect: str
    attack_ms: int
    peak_ms: int
    decay_ms: int
    amplitude: Optional[float] = None
    soft_range: Optional[Tuple[float, float]] = None
    frequency_hz: Optional[float] = None
    start_speed: Optional[float] = None
    peak_speed: Optional[float] = None
    version: str = CATALOG_VERSION
    description: str = ""

    def validate(self) -> bool:
        """Validate preset parameters are within valid ranges."""
        if self.effect not in EFFECT_TYPES:
            return False
        if min(self.attack_ms, self.peak_ms, self.decay_ms) < 0:
            return False
        if self.effect == "speed_ramp":
            if self.start_speed is None or self.peak_speed is None:
                return False
            if not (MIN_SPEED <= self.start_speed <= MAX_SPEED):
                return False
            if not (MIN_SPEED <= self.peak_speed <= MAX_SPEED):
                return False
            return True
        if self.amplitude is None or self.soft_range is None:
            return False
        lo, hi = self.soft_range
        if not (0 < lo <= self.amplitude <= hi):
            return False
        if self.effect == "shake" and not self.frequency_hz:
            return False
        return True

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "name": self.name,
            "effect": self.effect,
            "attack_ms": self.attack_ms,
            "peak_ms": self.peak_ms,
            "decay_ms": self.decay_ms,
            "amplitude": self.amplitude,
            "soft_range": list(self.soft_range) if self.soft_range else None,
            "frequency_hz": self.frequency_hz,
            "start_speed": self.start_speed,
            "peak_speed": self.peak_speed,
            "version": self.version,
            "description": self.description,
        }


@dataclass(frozen=True)
class PresetTable:
    """
    Read-only lookup of presets by (effect, name) plus per-family bounds.
    """

    presets: Mapping[Tuple[str, str], Preset]
    bounds: Mapping[str, EffectBounds]
    version: str = CATALOG_VERSION

    def get(self, effect: str, name: str) -> Optional[Preset]:
        """Get a preset by effect family and name, or None."""
        return self.presets.get((effect, name))

    def bounds_for(self, effect: str) -> EffectBounds:
        """Get the safety bounds for an effect family."""
        return self.bounds[effect]

    def names(self, effect: str) -> List[str]:
        """List preset names available for an effect family."""
        return [name for (fx, name) in self.presets if fx == effect]

    def fingerprint(self) -> str:
        """
        SHA-256 digest of everything in the table that affects compiled output.

        Two tables with the same version string but different presets or
        bounds get different fingerprints.
        """
        payload = {
            "version": self.version,
            "presets": sorted(
                (p.to_dict() for p in self.presets.values()),
                key=lambda d: (d["effect"], d["name"]),
            ),
            "bounds": {effect: asdict(b) for effect, b in sorted(self.bounds.items())},
        }
        canonical = json.dumps(payload, sort_keys=True, separators=(",", ":"))
        return hashlib.sha256(canonical.encode()).hexdigest()


# =============================================================================
# Built-in Catalog
# =============================================================================

EFFECT_BOUNDS: Dict[str, EffectBounds] = {
    "shake": EffectBounds(
        effect="shake",
        hard_max=40.0,
        soft_range=(1.0, 32.0),
        frequency_hz=12.0,
    ),
    "zoom_punch": EffectBounds(
        effect="zoom_punch",
        hard_max=0.5,
        soft_range=(0.02, 0.35),
    ),
    "zoom_out": EffectBounds(
        effect="zoom_out",
        hard_max=0.5,
        soft_range=(0.02, 0.28),
    ),
    "reverse_burst": EffectBounds(
        effect="reverse_burst",
        hard_max=0.6,
        soft_range=(0.04, 0.40),
    ),
    "speed_ramp": EffectBounds(
        effect="speed_ramp",
        hard_max=MAX_SPEED,
        soft_range=(MIN_SPEED, MAX_SPEED),
    ),
}

_BUILTIN_PRESETS: List[Preset] = [
    # Shake
    Preset(
        name="micro", effect="shake",
        attack_ms=20, peak_ms=40, decay_ms=180,
        amplitude=4.0, soft_range=(1.0, 8.0), frequency_hz=9.0,
        description="Barely-there handheld jitter",
    ),
    Preset(
        name="medium", effect="shake",
        attack_ms=30, peak_ms=60, decay_ms=260,
        amplitude=10.0, soft_range=(4.0, 16.0), frequency_hz=12.0,
        description="Impact shake for hits and drops",
    ),
    Preset(
        name="heavy", effect="shake",
        attack_ms=40, peak_ms=80, decay_ms=380,
        amplitude=22.0, soft_range=(12.0, 32.0), frequency_hz=15.0,
        description="Violent camera shake",
    ),
    # Zoom punch
    Preset(
        name="micro", effect="zoom_punch",
        attack_ms=60, peak_ms=40, decay_ms=200,
        amplitude=0.06, soft_range=(0.02, 0.10),
        description="Subtle punch-in",
    ),
    Preset(
        name="medium", effect="zoom_punch",
        attack_ms=80, peak_ms=60, decay_ms=280,
        amplitude=0.12, soft_range=(0.06, 0.20),
        description="Editorial punch-in on the beat",
    ),
    Preset(
        name="heavy", effect="zoom_punch",
        attack_ms=100, peak_ms=80, decay_ms=360,
        amplitude=0.22, soft_range=(0.15, 0.35),
        description="Hard punch-in",
    ),
    # Zoom out
    Preset(
        name="micro", effect="zoom_out",
        attack_ms=80, peak_ms=60, decay_ms=240,
        amplitude=0.05, soft_range=(0.02, 0.08),
        description="Gentle breathe-out",
    ),
    Preset(
        name="medium", effect="zoom_out",
        attack_ms=100, peak_ms=80, decay_ms=320,
        amplitude=0.10, soft_range=(0.05, 0.16),
        description="Pull-back pulse",
    ),
    Preset(
        name="heavy", effect="zoom_out",
        attack_ms=120, peak_ms=100, decay_ms=400,
        amplitude=0.18, soft_range=(0.12, 0.28),
        description="Strong pull-back pulse",
    ),
    # Reverse burst
    Preset(
        name="micro", effect="reverse_burst",
        attack_ms=40, peak_ms=30, decay_ms=160,
        amplitude=0.08, soft_range=(0.04, 0.12),
        description="Quick inward snap",
    ),
    Preset(
        name="medium", effect="reverse_burst",
        attack_ms=50, peak_ms=40, decay_ms=220,
        amplitude=0.15, soft_range=(0.08, 0.24),
        description="Inward burst",
    ),
    Preset(
        name="heavy", effect="reverse_burst",
        attack_ms=60, peak_ms=50, decay_ms=300,
        amplitude=0.26, soft_range=(0.18, 0.40),
        description="Implosion burst",
    ),
    # Speed ramp
    Preset(
        name="micro", effect="speed_ramp",
        attack_ms=150, peak_ms=200, decay_ms=300,
        start_speed=1.0, peak_speed=1.25,
        description="Slight surge",
    ),
    Preset(
        name="medium", effect="speed_ramp",
        attack_ms=200, peak_ms=300, decay_ms=400,
        start_speed=1.0, peak_speed=1.5,
        description="Speed surge",
    ),
    Preset(
        name="heavy", effect="speed_ramp",
        attack_ms=250, peak_ms=400, decay_ms=500,
        start_speed=1.0, peak_speed=2.0,
        description="Double-time surge",
    ),
]


def build_preset_table(
    presets: List[Preset],
    bounds: Optional[Dict[str, EffectBounds]] = None,
    version: str = CATALOG_VERSION,
) -> PresetTable:
    """
    Build an immutable PresetTable.

    Args:
        presets: Presets to publish
        bounds: Per-family bounds (defaults to EFFECT_BOUNDS)
        version: Catalog version string

    Returns:
        PresetTable

    Raises:
        ValueError: If a preset fails validation or exceeds its hard bound
    """
    bounds = dict(bounds or EFFECT_BOUNDS)
    table: Dict[Tuple[str, str], Preset] = {}
    for preset in presets:
        if not preset.validate():
            raise ValueError(f"Invalid preset: {preset.effect}/{preset.name}")
        if preset.amplitude is not None and preset.amplitude > bounds[preset.effect].hard_max:
            raise ValueError(
                f"Preset {preset.effect}/{preset.name} amplitude {preset.amplitude} "
                f"exceeds hard bound {bounds[preset.effect].hard_max}"
            )
        table[(preset.effect, preset.name)] = preset

    return PresetTable(
        presets=MappingProxyType(table),
        bounds=MappingProxyType(bounds),
        version=version,
    )


PRESET_TABLE: PresetTable = build_preset_table(_BUILTIN_PRESETS)


def get_preset(effect: str, name: str) -> Optional[Preset]:
    """
    Get a built-in preset by effect family and name.

    Args:
        effect: Effect family (e.g., "zoom_punch")
        name: Preset name (e.g., "medium")

    Returns:
        Preset if found, None otherwise
    """
    return PRESET_TABLE.get(effect, name)


def list_presets(effect: str) -> list:
    """
    List built-in preset names for an effect family.

    Returns:
        List of preset name strings
    """
    return PRESET_TABLE.names(effect)


def load_preset_table(preset_path: str) -> PresetTable:
    """
    Load a preset table from JSON, layered over the built-in catalog.

    Expected format:
    {
        "version": "2",
        "presets": [
            {"effect": "shake", "name": "heavy", "attack_ms": 40, ...},
            ...
        ]
    }

    Entries replace built-in presets with the same (effect, name) and
    add new names otherwise.

    Args:
        preset_path: Path to the preset JSON file

    Returns:
        PresetTable

    Raises:
        ValueError: If the file cannot be read or an entry is invalid
    """
    path = Path(preset_path)
    try:
        with open(path) as f:
            data = json.load(f)
    except (json.JSONDecodeError, IOError) as e:
        logger.error(f"Failed to load preset table: {e}")
        raise ValueError(f"Cannot load preset table from {preset_path}: {e}") from e

    merged: Dict[Tuple[str, str], Preset] = {
        (p.effect, p.name): p for p in _BUILTIN_PRESETS
    }
    version = str(data.get("version", CATALOG_VERSION))

    for entry in data.get("presets", []):
        entry = dict(entry)
        if entry.get("soft_range") is not None:
            entry["soft_range"] = tuple(entry["soft_range"])
        entry.setdefault("version", version)
        try:
            preset = Preset(**entry)
        except TypeError as e:
            raise ValueError(f"Invalid preset entry {entry.get('name')!r}: {e}") from e
        merged[(preset.effect, preset.name)] = preset

    table = build_preset_table(list(merged.values()), version=version)
    logger.info(f"Loaded preset table v{version} from {path} ({len(table.presets)} presets)")
    return table
