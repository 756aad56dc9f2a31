"""
Five Elements (五行) and Ten Gods (十神) lookups.

The element table covers all 10 stems and 12 branches. The Ten Gods
table is the canonical 10x10 grid keyed by (day stem, other stem); it is
stored literally and cross-checked against the generating/overcoming
derivation in the test suite.
"""

from enum import Enum
from typing import Union


class Polarity(Enum):
    YANG = "yang"
    YIN = "yin"


class Element(Enum):
    WOOD = "wood"
    FIRE = "fire"
    EARTH = "earth"
    METAL = "metal"
    WATER = "water"

    @property
    def chinese(self) -> str:
        return ELEMENT_CHINESE[self]


ELEMENT_CHINESE = {
    Element.WOOD: "木",
    Element.FIRE: "火",
    Element.EARTH: "土",
    Element.METAL: "金",
    Element.WATER: "水",
}

ELEMENT_BY_CHINESE = {v: k for k, v in ELEMENT_CHINESE.items()}


class TenGod(Enum):
    COMPANION = "比肩"
    ROB_WEALTH = "劫财"
    EATING_GOD = "食神"
    HURTING_OFFICER = "伤官"
    INDIRECT_WEALTH = "偏财"
    DIRECT_WEALTH = "正财"
    SEVEN_KILLINGS = "七杀"
    DIRECT_OFFICER = "正官"
    INDIRECT_RESOURCE = "偏印"
    DIRECT_RESOURCE = "正印"


# ============================================================
# ELEMENT TABLE
# ============================================================

ELEMENT_OF = {
    # Stems
    "甲": Element.WOOD, "乙": Element.WOOD,
    "丙": Element.FIRE, "丁": Element.FIRE,
    "戊": Element.EARTH, "己": Element.EARTH,
    "庚": Element.METAL, "辛": Element.METAL,
    "壬": Element.WATER, "癸": Element.WATER,
    # Branches
    "子": Element.WATER, "丑": Element.EARTH, "寅": Element.WOOD, "卯": Element.WOOD,
    "辰": Element.EARTH, "巳": Element.FIRE, "午": Element.FIRE, "未": Element.EARTH,
    "申": Element.METAL, "酉": Element.METAL, "戌": Element.EARTH, "亥": Element.WATER,
}

# Production cycle: Wood → Fire → Earth → Metal → Water → Wood
GENERATES = {
    Element.WOOD: Element.FIRE,
    Element.FIRE: Element.EARTH,
    Element.EARTH: Element.METAL,
    Element.METAL: Element.WATER,
    Element.WATER: Element.WOOD,
}

# Control cycle: Wood → Earth → Water → Fire → Metal → Wood
OVERCOMES = {
    Element.WOOD: Element.EARTH,
    Element.EARTH: Element.WATER,
    Element.WATER: Element.FIRE,
    Element.FIRE: Element.METAL,
    Element.METAL: Element.WOOD,
}

GENERATED_BY = {v: k for k, v in GENERATES.items()}
OVERCOME_BY = {v: k for k, v in OVERCOMES.items()}


def _char(stem_or_branch) -> str:
    # Accepts a bare character or a stem/branch record
    return getattr(stem_or_branch, "chinese", stem_or_branch)


def element_of(stem_or_branch: Union[str, object]) -> Element:
    """Element of a single stem or branch character."""
    char = _char(stem_or_branch)
    try:
        return ELEMENT_OF[char]
    except KeyError:
        raise ValueError(f"Not a heavenly stem or earthly branch: {char!r}") from None


def pillar_element_text(stem_or_branch_pair: str) -> str:
    """
    Combined element label of a two-character stem-branch pair.

    "甲寅" → "木" (same element), "丙子" → "火水".
    """
    stem_element = element_of(stem_or_branch_pair[0]).chinese
    branch_element = element_of(stem_or_branch_pair[1]).chinese
    if stem_element == branch_element:
        return stem_element
    return stem_element + branch_element


# ============================================================
# TEN GODS TABLE
# ============================================================

_T = TenGod

# Rows: day stem. Columns: other stem in 甲乙丙丁戊己庚辛壬癸 order.
TEN_GODS = {
    "甲": (_T.COMPANION, _T.ROB_WEALTH, _T.EATING_GOD, _T.HURTING_OFFICER, _T.INDIRECT_WEALTH,
          _T.DIRECT_WEALTH, _T.SEVEN_KILLINGS, _T.DIRECT_OFFICER, _T.INDIRECT_RESOURCE, _T.DIRECT_RESOURCE),
    "乙": (_T.ROB_WEALTH, _T.COMPANION, _T.HURTING_OFFICER, _T.EATING_GOD, _T.DIRECT_WEALTH,
          _T.INDIRECT_WEALTH, _T.DIRECT_OFFICER, _T.SEVEN_KILLINGS, _T.DIRECT_RESOURCE, _T.INDIRECT_RESOURCE),
    "丙": (_T.INDIRECT_RESOURCE, _T.DIRECT_RESOURCE, _T.COMPANION, _T.ROB_WEALTH, _T.EATING_GOD,
          _T.HURTING_OFFICER, _T.INDIRECT_WEALTH, _T.DIRECT_WEALTH, _T.SEVEN_KILLINGS, _T.DIRECT_OFFICER),
    "丁": (_T.DIRECT_RESOURCE, _T.INDIRECT_RESOURCE, _T.ROB_WEALTH, _T.COMPANION, _T.HURTING_OFFICER,
          _T.EATING_GOD, _T.DIRECT_WEALTH, _T.INDIRECT_WEALTH, _T.DIRECT_OFFICER, _T.SEVEN_KILLINGS),
    "戊": (_T.SEVEN_KILLINGS, _T.DIRECT_OFFICER, _T.INDIRECT_RESOURCE, _T.DIRECT_RESOURCE, _T.COMPANION,
          _T.ROB_WEALTH, _T.EATING_GOD, _T.HURTING_OFFICER, _T.INDIRECT_WEALTH, _T.DIRECT_WEALTH),
    "己": (_T.DIRECT_OFFICER, _T.SEVEN_KILLINGS, _T.DIRECT_RESOURCE, _T.INDIRECT_RESOURCE, _T.ROB_WEALTH,
          _T.COMPANION, _T.HURTING_OFFICER, _T.EATING_GOD, _T.DIRECT_WEALTH, _T.INDIRECT_WEALTH),
    "庚": (_T.INDIRECT_WEALTH, _T.DIRECT_WEALTH, _T.SEVEN_KILLINGS, _T.DIRECT_OFFICER, _T.INDIRECT_RESOURCE,
          _T.DIRECT_RESOURCE, _T.COMPANION, _T.ROB_WEALTH, _T.EATING_GOD, _T.HURTING_OFFICER),
    "辛": (_T.DIRECT_WEALTH, _T.INDIRECT_WEALTH, _T.DIRECT_OFFICER, _T.SEVEN_KILLINGS, _T.DIRECT_RESOURCE,
          _T.INDIRECT_RESOURCE, _T.ROB_WEALTH, _T.COMPANION, _T.HURTING_OFFICER, _T.EATING_GOD),
    "壬": (_T.EATING_GOD, _T.HURTING_OFFICER, _T.INDIRECT_WEALTH, _T.DIRECT_WEALTH, _T.SEVEN_KILLINGS,
          _T.DIRECT_OFFICER, _T.INDIRECT_RESOURCE, _T.DIRECT_RESOURCE, _T.COMPANION, _T.ROB_WEALTH),
    "癸": (_T.HURTING_OFFICER, _T.EATING_GOD, _T.DIRECT_WEALTH, _T.INDIRECT_WEALTH, _T.DIRECT_OFFICER,
          _T.SEVEN_KILLINGS, _T.DIRECT_RESOURCE, _T.INDIRECT_RESOURCE, _T.ROB_WEALTH, _T.COMPANION),
}

_STEM_ORDER = "甲乙丙丁戊己庚辛壬癸"


def ten_god(day_stem, other_stem) -> TenGod:
    """
    Ten God of other_stem relative to the day master.

    Args:
        day_stem: day master, a stem character or stem record
        other_stem: the stem being evaluated
    """
    day_char, other_char = _char(day_stem), _char(other_stem)
    if day_char not in TEN_GODS or other_char not in TEN_GODS:
        raise ValueError(f"Not a heavenly stem pair: {day_char!r}, {other_char!r}")
    return TEN_GODS[day_char][_STEM_ORDER.index(other_char)]


def stem_with_god(day_stem, god: TenGod) -> str:
    """The single stem that stands in the given Ten God relation to day_stem."""
    row = TEN_GODS[_char(day_stem)]
    return _STEM_ORDER[row.index(god)]
