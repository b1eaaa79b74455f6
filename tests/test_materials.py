"""
Tests for material normalization (materials.py).

Tests:
1.  All-zero input -> 2 each
2.  In-range input is returned unchanged
3.  Under-range input scales up with ceiling
4.  Over-range input scales down with floor
5.  Under-range correction goes to the first largest key
6.  Over-range correction decrements the largest key, re-picked each step
7.  Garbage / missing / extra keys never crash
8.  Invariant holds over a seeded sweep of random inputs
9.  Re-normalizing normalized output is the identity
10. add_materials per-key sum
11. Arbitrarily large integers from the model never overflow
"""

import json
import math
import random

import pytest

from pareido import materials
from pareido.materials import (
    MATERIAL_KEYS,
    add_materials,
    normalize_materials,
)


def _m(metal=0, synthetic=0, stone=0, organic=0, fabric=0):
    return {"metal": metal, "synthetic": synthetic, "stone": stone,
            "organic": organic, "fabric": fabric}


def _assert_valid(result, min_total=10, max_total=20):
    assert list(result.keys()) == list(MATERIAL_KEYS)
    for key, value in result.items():
        assert isinstance(value, int) and not isinstance(value, bool), f"{key}={value!r}"
        assert value >= 0
    assert min_total <= sum(result.values()) <= max_total


# --- Scaling ---

def test_constants():
    assert MATERIAL_KEYS == ("metal", "synthetic", "stone", "organic", "fabric")
    assert materials.MIN_TOTAL == 10
    assert materials.MAX_TOTAL == 20


def test_all_zero_becomes_twos():
    assert normalize_materials(_m()) == _m(2, 2, 2, 2, 2)


def test_empty_dict_becomes_twos():
    assert normalize_materials({}) == _m(2, 2, 2, 2, 2)


def test_in_range_unchanged():
    assert normalize_materials(_m(3, 3, 3, 3, 3)) == _m(3, 3, 3, 3, 3)


def test_boundaries_unchanged():
    assert normalize_materials(_m(10, 0, 0, 0, 0)) == _m(10, 0, 0, 0, 0)
    assert normalize_materials(_m(5, 5, 5, 5, 0)) == _m(5, 5, 5, 5, 0)


def test_under_range_scales_up_with_ceiling():
    """Sum 3 -> factor 10/3, each 1 -> ceil(3.33) = 4. Total 12 needs no correction."""
    assert normalize_materials(_m(1, 1, 1, 0, 0)) == _m(4, 4, 4, 0, 0)


def test_over_range_scales_down_with_floor():
    """Sum 50 -> factor 0.4, each 10 -> 4. Total 20 is in range."""
    assert normalize_materials(_m(10, 10, 10, 10, 10)) == _m(4, 4, 4, 4, 4)


def test_over_range_floor_can_land_inside_range():
    """Sum 21 -> factor 20/21, each 7 -> floor(6.67) = 6. Total 18 is left alone."""
    assert normalize_materials(_m(7, 7, 7, 0, 0)) == _m(6, 6, 6, 0, 0)


def test_single_key_over_range():
    assert normalize_materials(_m(metal=50)) == _m(metal=20)


# --- Correction ---

def test_under_range_correction_goes_to_first_largest():
    """2.5 x4 sums to 10 but floors to 8; the missing 2 go to metal (first of the tied keys)."""
    result = normalize_materials(_m(2.5, 2.5, 2.5, 2.5, 0))
    assert result == _m(4, 2, 2, 2, 0)


def test_under_range_correction_strictly_greater_wins():
    result = normalize_materials(_m(2.5, 2.5, 3.5, 1.5, 0))  # sum 10 -> floors 2,2,3,1 = 8
    assert result == _m(2, 2, 5, 1, 0)


def test_zero_fill_below_custom_minimum_tops_up_metal():
    result = normalize_materials({}, min_total=15, max_total=20)
    assert result == _m(7, 2, 2, 2, 2)


def test_over_range_correction_decrements_largest():
    """Sum 9 -> ceil scaling gives 2,2,2,2,6 = 14; range [10, 11] strips 3 from fabric."""
    result = normalize_materials(_m(1, 1, 1, 1, 5), min_total=10, max_total=11)
    assert result == _m(2, 2, 2, 2, 3)


def test_over_range_correction_repicks_largest_each_step():
    """1 x5 with range [7, 8] -> ceil(1.4) = 2 each = 10; metal then synthetic lose one."""
    result = normalize_materials(_m(1, 1, 1, 1, 1), min_total=7, max_total=8)
    assert result == _m(1, 1, 2, 2, 2)


def test_invalid_range_rejected():
    with pytest.raises(ValueError):
        normalize_materials({}, min_total=20, max_total=10)


def test_module_constants_are_the_defaults(monkeypatch):
    monkeypatch.setattr(materials, "MIN_TOTAL", 5)
    monkeypatch.setattr(materials, "MAX_TOTAL", 6)
    result = normalize_materials(_m(3, 3, 3, 3, 3))
    _assert_valid(result, 5, 6)


# --- Untrusted input ---

@pytest.mark.parametrize("raw", [None, "metal", 42, [1, 2, 3], {"metal": None}])
def test_garbage_input_becomes_twos(raw):
    assert normalize_materials(raw) == _m(2, 2, 2, 2, 2)


def test_non_numeric_values_count_as_zero():
    raw = {"metal": "7", "synthetic": True, "stone": 12, "organic": None, "fabric": float("nan")}
    assert normalize_materials(raw) == _m(stone=12)


def test_negative_values_count_as_zero():
    assert normalize_materials({"metal": -5, "stone": 12}) == _m(stone=12)


def test_missing_keys_filled():
    assert normalize_materials({"organic": 15}) == _m(organic=15)


def test_extra_keys_tolerated_and_dropped():
    raw = dict(_m(3, 3, 3, 3, 3), glitter=99, lore="ancient")
    result = normalize_materials(raw)
    assert result == _m(3, 3, 3, 3, 3)


def test_input_not_mutated():
    raw = {"metal": 50, "note": "x"}
    normalize_materials(raw)
    assert raw == {"metal": 50, "note": "x"}


def test_float_values_in_range_become_ints():
    result = normalize_materials({"metal": 5.5, "stone": 6.5})
    assert result == _m(metal=5, stone=6)


# --- Properties ---

def test_invariant_over_random_integer_inputs():
    rng = random.Random(1234)
    for _ in range(2000):
        raw = {k: rng.randint(0, rng.choice([1, 5, 20, 100, 10_000])) for k in MATERIAL_KEYS}
        _assert_valid(normalize_materials(raw))


def test_invariant_over_random_float_inputs():
    rng = random.Random(99)
    for _ in range(1000):
        raw = {k: rng.uniform(0, 50) for k in MATERIAL_KEYS if rng.random() > 0.2}
        _assert_valid(normalize_materials(raw))


def test_invariant_over_random_custom_ranges():
    rng = random.Random(7)
    for _ in range(1000):
        lo = rng.randint(0, 30)
        hi = lo + rng.randint(0, 10)
        raw = {k: rng.randint(0, 60) for k in MATERIAL_KEYS}
        _assert_valid(normalize_materials(raw, min_total=lo, max_total=hi), lo, hi)


def test_renormalizing_is_identity():
    rng = random.Random(42)
    for _ in range(500):
        raw = {k: rng.randint(0, 40) for k in MATERIAL_KEYS}
        once = normalize_materials(raw)
        assert normalize_materials(once) == once


def test_proportions_roughly_kept():
    result = normalize_materials(_m(metal=80, organic=20))
    assert result["metal"] > result["organic"] > 0
    assert math.isclose(result["metal"] / result["organic"], 4, rel_tol=0.01)


# --- Accumulation ---

def test_add_materials_sums_per_key():
    assert add_materials(_m(1, 2, 3, 4, 5), _m(5, 4, 3, 2, 1)) == _m(6, 6, 6, 6, 6)


def test_add_materials_partial_delta():
    assert add_materials(_m(1, 1, 1, 1, 1), {"stone": 4}) == _m(1, 1, 5, 1, 1)


def test_add_materials_garbage():
    assert add_materials(None, {"metal": "lots", "fabric": 2}) == _m(fabric=2)


def test_add_materials_huge_values():
    assert add_materials({"metal": 10**400}, {"metal": 1})["metal"] == 10**400 + 1


# --- Oversized model output ---

def test_huge_integer_from_json_scales_down():
    raw = json.loads('{"metal": 1' + '0' * 400 + ', "stone": 3}')
    result = normalize_materials(raw)
    _assert_valid(result)
    # 20 * 10**400 / (10**400 + 3) floors to 19, which is already in range
    assert result == _m(metal=19)


def test_huge_integers_keep_proportions():
    big = 10**400
    assert normalize_materials(_m(metal=3 * big, organic=big)) == _m(metal=15, organic=5)


def test_huge_integer_mixed_with_float():
    result = normalize_materials({"metal": 10**400, "fabric": 2.5})
    assert result == _m(metal=19)


def test_overflowing_float_literal_counts_as_zero():
    raw = json.loads('{"metal": 1e400, "stone": 12}')
    assert normalize_materials(raw) == _m(stone=12)
