"""Tests for property synthesis and heuristic leveling."""

from __future__ import annotations

import random

import pytest

from ifcquant.extraction.classifier import (
    PLACEHOLDER_AREA,
    PLACEHOLDER_VOLUME,
    RULES,
    classify,
    element_name,
    synthesize_properties,
)
from ifcquant.extraction.levels import LevelAssigner, attach_elements, default_levels
from ifcquant.models.element import Element
from ifcquant.parsing.record import parse_record


def _record(line: str):
    rec = parse_record(line)
    assert rec is not None
    return rec


# ---------------------------------------------------------------------------
# Rule table
# ---------------------------------------------------------------------------

class TestRules:

    def test_wall_from_params(self):
        props = synthesize_properties(_record("#10=IFCWALL('W1',3000,200,(#1,#2,#3))"))
        assert props["height"] == 3000.0
        assert props["thickness"] == 200.0
        assert props["area"] == pytest.approx(0.6)
        assert "volume" not in props

    def test_wall_defaults(self):
        props = synthesize_properties(_record("#10=IFCWALL('W1')"))
        assert props == {"height": 3000.0, "thickness": 200.0, "area": pytest.approx(0.6)}

    def test_door_defaults(self):
        props = synthesize_properties(_record("#5=IFCDOOR('D1');"))
        assert props["width"] == 800
        assert props["height"] == 2100
        assert props["area"] == pytest.approx((800 * 2100) / 1_000_000)
        assert props["area"] == pytest.approx(1.68)

    def test_door_from_params(self):
        props = synthesize_properties(_record("#5=IFCDOOR('D1',900,2000)"))
        assert props["area"] == pytest.approx(1.8)

    def test_window_defaults(self):
        props = synthesize_properties(_record("#6=IFCWINDOW($,$,$)"))
        assert props["width"] == 1200
        assert props["height"] == 1500
        assert props["area"] == pytest.approx(1.8)

    def test_space_reads_area_and_volume(self):
        props = synthesize_properties(_record("#7=IFCSPACE('Office',30,90)"))
        assert props == {"area": 30.0, "volume": 90.0}

    def test_space_defaults(self):
        props = synthesize_properties(_record("#7=IFCSPACE('Office')"))
        assert props == {"area": 25.0, "volume": 75.0}

    def test_unparsable_token_uses_default(self):
        props = synthesize_properties(_record("#10=IFCWALL('W1',.T.,$)"))
        assert props["height"] == 3000.0
        assert props["thickness"] == 200.0

    def test_zero_is_a_value_not_missing(self):
        props = synthesize_properties(_record("#5=IFCDOOR('D1',0,2100)"))
        assert props["width"] == 0.0
        assert props["area"] == 0.0

    def test_known_types(self):
        assert set(RULES) == {"IFCWALL", "IFCDOOR", "IFCWINDOW", "IFCSPACE"}


class TestPlaceholders:
    """Types without a rule."""

    def test_deterministic_without_rng(self):
        rec = _record("#20=IFCCOLUMN('C1',#4)")
        first = synthesize_properties(rec)
        second = synthesize_properties(rec)
        assert first == second == {"area": 6.0, "volume": 15.0}

    def test_rng_values_in_range(self):
        rng = random.Random(42)
        rec = _record("#20=IFCBEAM('B1')")
        for _ in range(50):
            props = synthesize_properties(rec, rng)
            assert PLACEHOLDER_AREA[0] <= props["area"] < sum(PLACEHOLDER_AREA)
            assert PLACEHOLDER_VOLUME[0] <= props["volume"] < sum(PLACEHOLDER_VOLUME)

    def test_seeded_rng_reproducible(self):
        rec = _record("#20=IFCSLAB('S1')")
        a = synthesize_properties(rec, random.Random(7))
        b = synthesize_properties(rec, random.Random(7))
        assert a == b


# ---------------------------------------------------------------------------
# Element construction
# ---------------------------------------------------------------------------

class TestClassify:

    def test_name_from_first_param(self):
        el = classify(_record("#1=IFCWALL('O''Brien''s wall',3000,200)"))
        assert el.name == "O'Brien's wall"

    def test_name_fallback(self):
        assert element_name(_record("#7=IFCCOLUMN($,#2)")) == "IFCCOLUMN_7"
        assert element_name(_record("#8=IFCWALL()")) == "IFCWALL_8"

    def test_element_fields(self):
        el = classify(_record("#10=IFCWALL('W1',3000,200,(#1,#2,#3))"), level="First Floor")
        assert el.id == "10"
        assert el.type == "IFCWALL"
        assert el.level == "First Floor"
        assert el.params == ("'W1'", "3000", "200", "(#1,#2,#3)")
        assert el.material is None

    def test_volume_override(self):
        el = classify(_record("#10=IFCWALL('W1')"), volume_overrides={"10": 3.25, "11": 1.0})
        assert el.properties["volume"] == pytest.approx(3.25)
        assert el.properties["area"] == pytest.approx(0.6)

    def test_override_miss_leaves_properties(self):
        el = classify(_record("#10=IFCWALL('W1')"), volume_overrides={"99": 3.0})
        assert "volume" not in el.properties

    def test_element_is_immutable(self):
        el = classify(_record("#10=IFCWALL('W1')"))
        with pytest.raises(Exception):
            el.name = "other"

    def test_properties_are_read_only(self):
        el = classify(_record("#10=IFCWALL('W1',3000,200)"))
        with pytest.raises(TypeError):
            el.properties["area"] = 99.0
        assert el.properties["area"] == pytest.approx(0.6)

    def test_properties_copied_from_input(self):
        props = {"area": 1.0}
        el = Element(id="1", type="IFCPROXY", name="P", properties=props)
        props["area"] = 5.0
        assert el.number("area") == 1.0
        assert el.model_dump()["properties"] == {"area": 1.0}

    def test_number_helper(self):
        el = classify(_record("#10=IFCWALL('W1')"))
        assert el.number("area") == pytest.approx(0.6)
        assert el.number("volume") == 0.0


# ---------------------------------------------------------------------------
# Leveling heuristic
# ---------------------------------------------------------------------------

class TestLevels:

    def test_default_levels(self):
        levels = default_levels()
        assert [lvl.name for lvl in levels] == ["Ground Floor", "First Floor", "Second Floor"]
        assert [lvl.elevation for lvl in levels] == [0.0, 3000.0, 6000.0]
        assert all(lvl.elements == [] for lvl in levels)

    def test_modulo_cycles(self):
        assigner = LevelAssigner(default_levels())
        names = [assigner.assign(i) for i in range(5)]
        assert names == [
            "Ground Floor", "First Floor", "Second Floor", "Ground Floor", "First Floor",
        ]

    def test_random_strategy_seeded(self):
        levels = default_levels()
        a = LevelAssigner(levels, strategy="random", rng=random.Random(3))
        b = LevelAssigner(levels, strategy="random", rng=random.Random(3))
        picks = [a.assign(i) for i in range(20)]
        assert picks == [b.assign(i) for i in range(20)]
        assert set(picks) <= {lvl.name for lvl in levels}

    def test_unknown_strategy(self):
        with pytest.raises(ValueError):
            LevelAssigner(default_levels(), strategy="spatial")

    def test_no_levels(self):
        with pytest.raises(ValueError):
            LevelAssigner([])

    def test_attach_elements_keeps_order(self):
        levels = default_levels()
        assigner = LevelAssigner(levels)
        elements = [
            classify(_record(f"#{i}=IFCWALL('W{i}')"), level=assigner.assign(i - 1))
            for i in range(1, 7)
        ]
        attached = attach_elements(levels, elements)
        assert [e.id for e in attached[0].elements] == ["1", "4"]
        assert [e.id for e in attached[1].elements] == ["2", "5"]
        assert [e.id for e in attached[2].elements] == ["3", "6"]
        # originals untouched
        assert levels[0].elements == []
