"""
BaZi (Four Pillars of Destiny) reading engine.

Handles:
- Solar to lunar date for display (skipped for lunar input)
- Four pillars and Ten Gods of the visible stems
- Element tally over the eight characters
- Strength buckets and favorable/unfavorable elements
- Narrative fragments picked from fixed tables

Design principle: every narrative line is a table lookup. Nothing here
interprets beyond choosing keys.
"""

from dataclasses import dataclass
import logging

from divination.birth import BirthEvent, Gender
from divination.calendar import LunarDate, solar_to_lunar
from divination.pillars import FourPillars, HeavenlyStem, four_pillars
from divination.wuxing import (
    GENERATED_BY,
    GENERATES,
    OVERCOME_BY,
    OVERCOMES,
    Element,
    TenGod,
    element_of,
    pillar_element_text,
    stem_with_god,
    ten_god,
)

logger = logging.getLogger(__name__)


# ============================================================
# RESULT STRUCTURES
# ============================================================

@dataclass(frozen=True)
class StrengthBuckets:
    strongest: tuple
    strong: tuple
    weak: tuple
    weakest: tuple

    def bucket_of(self, element: Element) -> str:
        for name in ("strongest", "strong", "weak", "weakest"):
            if element in getattr(self, name):
                return name
        raise ValueError(f"{element} not classified")

    def to_dict(self):
        return {
            name: [e.chinese for e in getattr(self, name)]
            for name in ("strongest", "strong", "weak", "weakest")
        }


@dataclass(frozen=True)
class BaziResult:
    name: str
    gender: Gender
    birth_date: str
    birth_time: str
    lunar: LunarDate
    pillars: FourPillars
    day_master: HeavenlyStem
    shi_shen: dict        # "year" / "month" / "hour" → TenGod
    pillar_elements: dict  # "year" / ... → "木火"
    element_count: dict   # Element → count, sums to 8
    strength: StrengthBuckets
    favorable_elements: tuple
    unfavorable_elements: tuple
    personality: tuple
    career: tuple
    wealth: tuple
    marriage: tuple
    health: tuple
    suggestions: tuple

    @property
    def day_master_element(self) -> Element:
        return self.day_master.element

    def to_dict(self):
        return {
            "name": self.name,
            "gender": self.gender.label,
            "birth_date": self.birth_date,
            "birth_time": self.birth_time,
            "lunar_date": str(self.lunar),
            "lunar": self.lunar.to_dict(),
            "pillars": self.pillars.to_dict(),
            "year_pillar": str(self.pillars.year),
            "month_pillar": str(self.pillars.month),
            "day_pillar": str(self.pillars.day),
            "hour_pillar": str(self.pillars.hour),
            "zodiac": self.pillars.zodiac,
            "shi_chen": self.pillars.shi_chen,
            "day_master": self.day_master.chinese,
            "day_master_element": self.day_master_element.chinese,
            "shi_shen": {k: v.value for k, v in self.shi_shen.items()},
            "wu_xing": dict(self.pillar_elements),
            "wu_xing_count": {e.value: n for e, n in self.element_count.items()},
            "wu_xing_strength": self.strength.to_dict(),
            "favorable_elements": [e.chinese for e in self.favorable_elements],
            "unfavorable_elements": [e.chinese for e in self.unfavorable_elements],
            "personality": list(self.personality),
            "career": list(self.career),
            "wealth": list(self.wealth),
            "marriage": list(self.marriage),
            "health": list(self.health),
            "suggestions": list(self.suggestions),
        }


# ============================================================
# ELEMENT ANALYSIS
# ============================================================

def count_elements(pillars: FourPillars) -> dict:
    """Tally the element of each stem and branch (8 characters)."""
    count = {e: 0 for e in Element}
    for pillar in pillars.pillars:
        count[pillar.stem.element] += 1
        count[pillar.branch.element] += 1
    return count


def classify_strength(count: dict) -> StrengthBuckets:
    """
    Bucket each element by its count.

    Elements are visited in descending count order (ties keep the
    wood-fire-earth-metal-water order). Every element tied at the maximum
    lands in "strongest" once that maximum reaches 3.
    """
    ordered = sorted(count.items(), key=lambda item: -item[1])
    top = ordered[0][1]

    buckets = {"strongest": [], "strong": [], "weak": [], "weakest": []}
    for element, num in ordered:
        if num == top and num >= 3:
            buckets["strongest"].append(element)
        elif num >= 2:
            buckets["strong"].append(element)
        elif num == 1:
            buckets["weak"].append(element)
        else:
            buckets["weakest"].append(element)

    return StrengthBuckets(**{k: tuple(v) for k, v in buckets.items()})


def favorable_elements(day_master: Element, strength: StrengthBuckets) -> tuple:
    """
    Favorable (用神) and unfavorable (忌神) elements for the day master.

    Strong day master wants outflow: what it generates, what overcomes it
    and what it overcomes; its own element and its generator are
    unfavorable. Weak day master wants support from its own element and
    its generator; the element overcoming it is unfavorable.

    Returns:
        (favorable, unfavorable) tuples of Element
    """
    is_strong = day_master in strength.strongest or day_master in strength.strong
    if is_strong:
        favorable = (GENERATES[day_master], OVERCOME_BY[day_master], OVERCOMES[day_master])
        unfavorable = (day_master, GENERATED_BY[day_master])
    else:
        favorable = (day_master, GENERATED_BY[day_master])
        unfavorable = (OVERCOME_BY[day_master],)
    return favorable, unfavorable


# ============================================================
# NARRATIVE TABLES
# ============================================================

DAY_MASTER_TRAITS = {
    "甲": ("正直刚毅", "进取心强", "有领导力", "有时过于固执"),
    "乙": ("温和谦逊", "善于适应", "心思细腻", "有时优柔寡断"),
    "丙": ("热情开朗", "乐于助人", "有创造力", "有时冲动急躁"),
    "丁": ("文雅有礼", "细心周到", "善于表达", "有时敏感多疑"),
    "戊": ("稳重踏实", "值得信赖", "有责任感", "有时固执保守"),
    "己": ("包容温和", "善于协调", "脚踏实地", "有时优柔寡断"),
    "庚": ("果断坚毅", "有正义感", "讲义气", "有时过于强硬"),
    "辛": ("优雅精致", "有审美观", "善解人意", "有时过于敏感"),
    "壬": ("聪明灵活", "适应力强", "有谋略", "有时变化无常"),
    "癸": ("内敛深沉", "洞察力强", "富有同情心", "有时过于消极"),
}

ZODIAC_TRAITS = {
    "虎": "热情奔放，行动力强",
    "马": "热情奔放，行动力强",
    "牛": "沉稳踏实，做事有恒心",
}

CAREER_FIELDS = {
    "甲": ("企业管理", "政治", "林业", "教育"),
    "乙": ("艺术", "设计", "文化", "教育"),
    "丙": ("传媒", "演艺", "能源", "科技"),
    "丁": ("文化", "艺术", "教育", "服务"),
    "戊": ("金融", "房地产", "建筑", "农业"),
    "己": ("服务", "协调", "人力资源", "行政"),
    "庚": ("军警", "法律", "机械", "金融"),
    "辛": ("珠宝", "时尚", "美容", "艺术"),
    "壬": ("贸易", "航运", "旅游", "物流"),
    "癸": ("研究", "咨询", "医疗", "服务"),
}

WEALTH_FAVORED = ("财运较好，善于理财", "正财偏财皆有")
WEALTH_PLAIN = ("财运平稳，需要稳健理财", "不宜投机冒险")

MARRIAGE_COMMON = ("宜晚婚，婚姻更稳定", "夫妻之间需要相互包容理解")

ELEMENT_ORGANS = {
    Element.WOOD: ("肝", "胆", "眼睛", "筋"),
    Element.FIRE: ("心", "小肠", "舌头", "血脉"),
    Element.EARTH: ("脾", "胃", "唇", "肌肉"),
    Element.METAL: ("肺", "大肠", "鼻", "皮毛"),
    Element.WATER: ("肾", "膀胱", "耳", "骨"),
}

LUCKY_COLORS = {
    Element.WOOD: ("绿色", "青色"),
    Element.FIRE: ("红色", "紫色", "粉色"),
    Element.EARTH: ("黄色", "棕色"),
    Element.METAL: ("白色", "金色", "银色"),
    Element.WATER: ("黑色", "蓝色"),
}

LUCKY_NUMBERS = {
    Element.WOOD: (3, 8),
    Element.FIRE: (2, 7),
    Element.EARTH: (5, 10),
    Element.METAL: (4, 9),
    Element.WATER: (1, 6),
}

LUCKY_DIRECTIONS = {
    Element.WOOD: ("东方", "东南"),
    Element.FIRE: ("南方",),
    Element.EARTH: ("中央", "西南", "东北"),
    Element.METAL: ("西方", "西北"),
    Element.WATER: ("北方",),
}


def _joined(elements) -> str:
    return "、".join(e.chinese for e in elements)


def personality_traits(day_master: HeavenlyStem, zodiac: str) -> tuple:
    traits = DAY_MASTER_TRAITS[day_master.chinese]
    if zodiac in ZODIAC_TRAITS:
        traits += (ZODIAC_TRAITS[zodiac],)
    return traits


def career_outlook(day_master: HeavenlyStem, favorable: tuple) -> tuple:
    return CAREER_FIELDS[day_master.chinese] + (f"适合五行属{_joined(favorable)}的行业",)


def wealth_outlook(day_master: HeavenlyStem, favorable: tuple) -> tuple:
    """Wealth reads well when the wealth star's element is favorable."""
    wealth_stem = stem_with_god(day_master, TenGod.INDIRECT_WEALTH)
    return WEALTH_FAVORED if element_of(wealth_stem) in favorable else WEALTH_PLAIN


def marriage_outlook(gender: Gender, day_master: HeavenlyStem) -> tuple:
    """Spouse star: wealth star for a man, officer star for a woman."""
    if gender is Gender.MALE:
        star = stem_with_god(day_master, TenGod.INDIRECT_WEALTH)
        line = f"妻星为{star}，宜找五行属{element_of(star).chinese}的伴侣"
    else:
        star = stem_with_god(day_master, TenGod.DIRECT_OFFICER)
        line = f"夫星为{star}，宜找五行属{element_of(star).chinese}的伴侣"
    return (line,) + MARRIAGE_COMMON


def health_notes(count: dict) -> tuple:
    notes = []
    for element, organs in ELEMENT_ORGANS.items():
        if count[element] == 0:
            notes.append(f"注意{'、'.join(organs)}方面的健康")
        elif count[element] >= 3:
            notes.append(f"{'、'.join(organs)}功能较强，但不要过度消耗")
    return tuple(notes)


def element_suggestions(favorable: tuple) -> tuple:
    colors = [c for e in favorable for c in LUCKY_COLORS[e]]
    numbers = [str(n) for e in favorable for n in LUCKY_NUMBERS[e]]
    directions = [d for e in favorable for d in LUCKY_DIRECTIONS[e]]

    suggestions = []
    if colors:
        suggestions.append(f"幸运颜色：{'、'.join(colors)}")
    if numbers:
        suggestions.append(f"幸运数字：{'、'.join(numbers)}")
    if directions:
        suggestions.append(f"吉利方位：{'、'.join(directions)}")
    return tuple(suggestions)


# ============================================================
# FULL READING
# ============================================================

def compute_bazi(birth: BirthEvent) -> BaziResult:
    """
    Compute a full BaZi reading.

    The pillars always come from the given year/month/day numbers. The
    lunar date shown alongside is converted unless the input is already
    lunar.

    Raises:
        OutOfRangeCalendarError: solar input outside the lunar table.
    """
    if birth.is_lunar:
        lunar = LunarDate(birth.birth_year, birth.birth_month, birth.birth_day, False)
    else:
        lunar = solar_to_lunar(*birth.date)

    pillars = four_pillars(*birth.date, birth.birth_hour)
    day_master = pillars.day.stem

    count = count_elements(pillars)
    strength = classify_strength(count)
    favorable, unfavorable = favorable_elements(day_master.element, strength)

    logger.info("bazi %s %s %s %s for %s",
                pillars.year, pillars.month, pillars.day, pillars.hour, birth.date_text)

    return BaziResult(
        name=birth.name,
        gender=birth.gender,
        birth_date=birth.date_text,
        birth_time=birth.time_text,
        lunar=lunar,
        pillars=pillars,
        day_master=day_master,
        shi_shen={
            "year": ten_god(day_master, pillars.year.stem),
            "month": ten_god(day_master, pillars.month.stem),
            "hour": ten_god(day_master, pillars.hour.stem),
        },
        pillar_elements={p.position: pillar_element_text(str(p)) for p in pillars.pillars},
        element_count=count,
        strength=strength,
        favorable_elements=favorable,
        unfavorable_elements=unfavorable,
        personality=personality_traits(day_master, pillars.zodiac),
        career=career_outlook(day_master, favorable),
        wealth=wealth_outlook(day_master, favorable),
        marriage=marriage_outlook(birth.gender, day_master),
        health=health_notes(count),
        suggestions=element_suggestions(favorable),
    )
