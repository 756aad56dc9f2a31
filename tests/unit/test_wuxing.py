"""
Tests for the Five Elements table and the Ten Gods grid.

The Ten Gods grid is stored literally; every cell is checked against the
element relationship + polarity derivation.
"""

import pytest

from divination.pillars import HEAVENLY_STEMS
from divination.wuxing import (
    ELEMENT_BY_CHINESE,
    GENERATED_BY,
    GENERATES,
    OVERCOME_BY,
    OVERCOMES,
    TEN_GODS,
    Element,
    TenGod,
    element_of,
    pillar_element_text,
    stem_with_god,
    ten_god,
)


def relation_of(day_element, other_element):
    """Relationship of other_element to day_element in the two cycles."""
    if day_element is other_element:
        return "same"
    if GENERATES[other_element] is day_element:
        return "produces_me"
    if GENERATES[day_element] is other_element:
        return "i_produce"
    if OVERCOMES[day_element] is other_element:
        return "i_control"
    return "controls_me"


# (relationship, same_polarity) → Ten God
DERIVED_TEN_GODS = {
    ("same", True): TenGod.COMPANION,
    ("same", False): TenGod.ROB_WEALTH,
    ("produces_me", True): TenGod.INDIRECT_RESOURCE,
    ("produces_me", False): TenGod.DIRECT_RESOURCE,
    ("i_produce", True): TenGod.EATING_GOD,
    ("i_produce", False): TenGod.HURTING_OFFICER,
    ("i_control", True): TenGod.INDIRECT_WEALTH,
    ("i_control", False): TenGod.DIRECT_WEALTH,
    ("controls_me", True): TenGod.SEVEN_KILLINGS,
    ("controls_me", False): TenGod.DIRECT_OFFICER,
}


class TestElements:
    @pytest.mark.parametrize("chars, element", [
        ("甲乙寅卯", Element.WOOD),
        ("丙丁巳午", Element.FIRE),
        ("戊己辰戌丑未", Element.EARTH),
        ("庚辛申酉", Element.METAL),
        ("壬癸亥子", Element.WATER),
    ])
    def test_table(self, chars, element):
        for char in chars:
            assert element_of(char) is element

    def test_accepts_stem_record(self):
        assert element_of(HEAVENLY_STEMS[2]) is Element.FIRE

    def test_unknown_character(self):
        with pytest.raises(ValueError):
            element_of("X")

    def test_chinese_names(self):
        assert [e.chinese for e in Element] == ["木", "火", "土", "金", "水"]
        assert ELEMENT_BY_CHINESE["金"] is Element.METAL

    def test_cycles_are_inverse(self):
        for element in Element:
            assert GENERATED_BY[GENERATES[element]] is element
            assert OVERCOME_BY[OVERCOMES[element]] is element

    @pytest.mark.parametrize("pair, text", [("甲寅", "木"), ("丙子", "火水"), ("己巳", "土火")])
    def test_pillar_element_text(self, pair, text):
        assert pillar_element_text(pair) == text


class TestTenGods:
    def test_grid_shape(self):
        assert len(TEN_GODS) == 10
        for row in TEN_GODS.values():
            assert len(row) == 10
            assert set(row) == set(TenGod)

    def test_diagonal_is_companion(self):
        for stem in HEAVENLY_STEMS:
            assert ten_god(stem, stem) is TenGod.COMPANION

    def test_matches_derivation(self):
        for day in HEAVENLY_STEMS:
            for other in HEAVENLY_STEMS:
                relation = relation_of(day.element, other.element)
                expected = DERIVED_TEN_GODS[(relation, day.polarity == other.polarity)]
                assert ten_god(day, other) is expected, f"{day.chinese}→{other.chinese}"

    @pytest.mark.parametrize("day, other, god", [
        ("甲", "戊", "偏财"),
        ("甲", "辛", "正官"),
        ("丙", "己", "伤官"),
        ("癸", "戊", "正官"),
        ("庚", "壬", "食神"),
    ])
    def test_spot_checks(self, day, other, god):
        assert ten_god(day, other).value == god

    def test_rejects_branch(self):
        with pytest.raises(ValueError):
            ten_god("甲", "子")

    def test_stem_with_god(self):
        assert stem_with_god("甲", TenGod.INDIRECT_WEALTH) == "戊"
        assert stem_with_god("甲", TenGod.DIRECT_OFFICER) == "辛"
        assert stem_with_god("丙", TenGod.DIRECT_OFFICER) == "癸"
