"""
Material weights — the five fixed categories every Symbiote is made of.

Gemini assigns raw counts per category. Those counts are untrusted: keys may be
missing, values may be strings, floats, or sum far outside the allowed range.
normalize_materials() is the single boundary where they become valid
MaterialCounts: five non-negative integers summing to [MIN_TOTAL, MAX_TOTAL].

Pure Python. No AI, no I/O.
"""

import math
from collections.abc import Mapping
from fractions import Fraction

from .config import settings

# Order matters: ties for "largest" go to the earliest key
MATERIAL_KEYS = ("metal", "synthetic", "stone", "organic", "fabric")

MIN_TOTAL = settings.MATERIAL_MIN_TOTAL
MAX_TOTAL = settings.MATERIAL_MAX_TOTAL

# Per-key value used when the model gives us nothing at all
ZERO_FILL = 2


def _coerce(value) -> Fraction:
    """
    Numbers become exact Fractions; anything else (str, None, bool, NaN) counts as 0.

    json.loads() hands back arbitrarily large ints, so ints never go through float.
    """
    if isinstance(value, bool):
        return Fraction(0)
    if isinstance(value, int):
        return Fraction(value) if value > 0 else Fraction(0)
    if isinstance(value, float):
        if not math.isfinite(value) or value < 0:
            return Fraction(0)
        return Fraction(value)
    return Fraction(0)


def _largest_key(materials: dict) -> str:
    """First key holding the maximum value. Replaced only on strictly greater."""
    max_key = MATERIAL_KEYS[0]
    for key in MATERIAL_KEYS:
        if materials[key] > materials[max_key]:
            max_key = key
    return max_key


def normalize_materials(raw, min_total: int = None, max_total: int = None) -> dict:
    """
    Rescale raw material counts so they sum to [min_total, max_total].

    1. Coerce each of the five keys to an exact number (missing/non-numeric -> 0).
    2. Scale: all zero -> 2 each; under range -> ceil(v * min/total);
       over range -> floor(v * max/total).
    3. Correct rounding drift: under range -> add the whole gap to the largest
       key; over range -> decrement the largest key one step at a time.

    Never raises for any input. Returns a new dict with exactly the five keys;
    the input is not modified and extra keys are dropped.
    """
    min_total = MIN_TOTAL if min_total is None else min_total
    max_total = MAX_TOTAL if max_total is None else max_total
    if min_total < 0 or min_total > max_total:
        raise ValueError(f"Invalid material range [{min_total}, {max_total}]")

    if not isinstance(raw, Mapping):
        raw = {}

    materials = {k: _coerce(raw.get(k)) for k in MATERIAL_KEYS}
    total = sum(materials.values())

    if total == 0:
        materials = {k: ZERO_FILL for k in MATERIAL_KEYS}
    elif total < min_total:
        factor = min_total / total
        materials = {k: math.ceil(v * factor) for k, v in materials.items()}
    elif total > max_total:
        factor = max_total / total
        materials = {k: math.floor(v * factor) for k, v in materials.items()}
    else:
        # In range already; only fractional values change
        materials = {k: math.floor(v) for k, v in materials.items()}

    total = sum(materials.values())

    if total < min_total:
        max_key = _largest_key(materials)
        materials[max_key] += min_total - total
    elif total > max_total:
        remaining = total - max_total
        while remaining > 0:
            max_key = _largest_key(materials)
            if materials[max_key] <= 0:
                break
            materials[max_key] -= 1
            remaining -= 1

    return materials


def add_materials(base: Mapping, delta: Mapping) -> dict:
    """Per-key sum of two material maps. Used for inventory and card merges."""
    base = base if isinstance(base, Mapping) else {}
    delta = delta if isinstance(delta, Mapping) else {}
    return {
        k: int(_coerce(base.get(k)) + _coerce(delta.get(k)))
        for k in MATERIAL_KEYS
    }


def empty_materials() -> dict:
    return {k: 0 for k in MATERIAL_KEYS}
