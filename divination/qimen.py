"""
Qimen Dunjia (奇门遁甲) nine-palace chart.

Handles:
- Day/hour stem and branch from simplified numeric formulas
- Yin/Yang Dun type and Ju number
- XunShou (旬首) decade head
- Nine palace layout: stars, doors, spirits and stems
- Three treasures in command (三奇得使)
- Named patterns (格局), auspiciousness level, direction and time advice

The day/hour arithmetic here is deliberately separate from the Four
Pillars calculator and does not agree with it.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional
import logging

from divination.birth import BirthEvent, Gender
from divination.calendar import BRANCH_NAMES, STEM_NAMES

logger = logging.getLogger(__name__)


class DunType(Enum):
    YANG = "阳"
    YIN = "阴"

    @property
    def step(self) -> int:
        return 1 if self is DunType.YANG else -1


# ============================================================
# FIXED TABLES
# ============================================================

EIGHT_DOORS = ("开门", "休门", "生门", "伤门", "杜门", "景门", "死门", "惊门")

NINE_STARS = ("天蓬", "天任", "天冲", "天辅", "天英", "天芮", "天柱", "天心", "天禽")

EIGHT_SPIRITS = ("值符", "螣蛇", "太阴", "六合", "白虎", "玄武", "九地", "九天")

# Grid order, read row by row: SE S SW / E C W / NE N NW
PALACE_NAMES = (
    "巽四", "离九", "坤二",
    "震三", "中五", "兑七",
    "艮八", "坎一", "乾六",
)

LUO_SHU = (4, 9, 2, 3, 5, 7, 8, 1, 6)

CENTER = 4
OUTER_PALACES = tuple(i for i in range(9) if i != CENTER)

PALACE_DIRECTIONS = {
    "坎一": "正北",
    "坤二": "西南",
    "震三": "正东",
    "巽四": "东南",
    "中五": "中央",
    "乾六": "西北",
    "兑七": "正西",
    "艮八": "东北",
    "离九": "正南",
}

XUN_SHOU = ("甲子", "甲戌", "甲申", "甲午", "甲辰", "甲寅")

SIX_YI = ("戊", "己", "庚", "辛", "壬", "癸")
THREE_QI = ("乙", "丙", "丁")
YI_QI = SIX_YI + THREE_QI

AUSPICIOUS_DOORS = ("开门", "休门", "生门")
INAUSPICIOUS_DOORS = ("死门", "惊门")
# Directions also avoid 伤门
AVOID_DIRECTION_DOORS = ("死门", "惊门", "伤门")

FAVORABLE_HOUR_STEMS = ("甲", "乙", "丙", "丁", "戊")
UNFAVORABLE_HOUR_STEMS = ("庚", "辛", "壬", "癸")
FAVORABLE_HOUR_BRANCHES = ("子", "寅", "卯", "午")
UNFAVORABLE_HOUR_BRANCHES = ("丑", "申", "酉")

JU_DESCRIPTIONS = {
    1: "一局主水，利于流动、变化之事",
    2: "二局主土，利于稳定、奠基之事",
    3: "三局主木，利于生长、发展之事",
    4: "四局主木，利于文职、协商之事",
    5: "五局主土，居于中央，诸事皆需平衡",
    6: "六局主金，利于决断、执法之事",
    7: "七局主金，利于交际、合作之事",
    8: "八局主土，利于守成、积蓄之事",
    9: "九局主火，利于展示、推广之事",
}


# ============================================================
# RESULT STRUCTURES
# ============================================================

@dataclass(frozen=True)
class Palace:
    position: str
    number: int
    door: str
    star: str
    spirit: str
    stem: str

    @property
    def direction(self) -> str:
        return PALACE_DIRECTIONS[self.position]

    def to_dict(self):
        return {
            "position": self.position,
            "number": self.number,
            "door": self.door,
            "star": self.star,
            "spirit": self.spirit,
            "stem": self.stem,
        }


@dataclass(frozen=True)
class ThreeTreasures:
    has: bool
    matches: tuple  # one "<palace>宫<stem>加<door>" line per match

    @property
    def description(self) -> str:
        return f"三奇得使：{'、'.join(self.matches)}" if self.has else "无三奇得使"


@dataclass(frozen=True)
class GeJu:
    name: str
    quality: str  # 上吉 / 吉 / 中平 / 平
    description: str


@dataclass(frozen=True)
class Auspiciousness:
    level: str  # 大吉 / 吉 / 中平 / 凶
    description: str


@dataclass(frozen=True)
class QimenResult:
    name: str
    gender: Gender
    birth_date: str
    birth_time: str
    question: Optional[str]
    day_stem: str
    day_branch: str
    hour_stem: str
    hour_branch: str
    dun_type: DunType
    ju: int
    xun_shou: str
    palaces: tuple
    three_treasures: ThreeTreasures
    ge_ju: GeJu
    auspiciousness: Auspiciousness
    favorable_directions: tuple
    unfavorable_directions: tuple
    favorable_times: tuple
    unfavorable_times: tuple
    suggestions: tuple

    @property
    def ju_name(self) -> str:
        return f"{self.dun_type.value}遁{self.ju}局"

    @property
    def ju_description(self) -> str:
        return f"{self.ju_name}：{JU_DESCRIPTIONS[self.ju]}"

    @property
    def dun_jia(self) -> str:
        return f"{self.xun_shou}遁"

    def to_dict(self):
        return {
            "name": self.name,
            "gender": self.gender.label,
            "birth_date": self.birth_date,
            "birth_time": self.birth_time,
            "question": self.question,
            "day": f"{self.day_stem}{self.day_branch}",
            "hour": f"{self.hour_stem}{self.hour_branch}",
            "dun_type": self.dun_type.value,
            "ju": self.ju,
            "ju_name": self.ju_name,
            "ju_description": self.ju_description,
            "xun_shou": self.xun_shou,
            "dun_jia": self.dun_jia,
            "palaces": [p.to_dict() for p in self.palaces],
            "three_treasures": {
                "has": self.three_treasures.has,
                "matches": list(self.three_treasures.matches),
                "description": self.three_treasures.description,
            },
            "ge_ju": {
                "name": self.ge_ju.name,
                "quality": self.ge_ju.quality,
                "description": self.ge_ju.description,
            },
            "auspiciousness": {
                "level": self.auspiciousness.level,
                "description": self.auspiciousness.description,
            },
            "directions": {
                "favorable": list(self.favorable_directions),
                "unfavorable": list(self.unfavorable_directions),
            },
            "times": {
                "favorable": list(self.favorable_times),
                "unfavorable": list(self.unfavorable_times),
            },
            "suggestions": list(self.suggestions),
        }


# ============================================================
# DAY / HOUR AND LAYOUT PARAMETERS
# ============================================================

def day_indices(year: int, month: int, day: int) -> tuple:
    """(stem_index, branch_index) of the day under the Qimen formula."""
    return (year * 5 + month * 30 + day) % 10, (year + month + day) % 12


def hour_indices(day_stem_index: int, hour: int) -> tuple:
    """(stem_index, branch_index) of the hour under the Qimen formula."""
    return (day_stem_index * 5 + hour // 2) % 10, ((hour + 1) // 2) % 12


def dun_type(month: int) -> DunType:
    """
    Yang Dun for months 3-8, Yin Dun otherwise.

    Coarse stand-in for the solstice rule (Yang from winter solstice to
    summer solstice).
    """
    return DunType.YANG if 3 <= month <= 8 else DunType.YIN


def ju_number(day_stem_index: int, day_branch_index: int) -> int:
    """Ju 1-9: day branch sets the base, day stem shifts it."""
    base = day_branch_index % 9 + 1
    return (base + day_stem_index // 2 - 1) % 9 + 1


def xun_shou(day_stem_index: int, day_branch_index: int) -> str:
    return XUN_SHOU[((day_stem_index - day_branch_index) % 12) % 6]


# ============================================================
# NINE PALACE ARRANGEMENT
# ============================================================

def _walk(sequence: tuple, start: int, step: int, count: int) -> list:
    return [sequence[(start + i * step) % len(sequence)] for i in range(count)]


def arrange_palaces(ju: int, dun: DunType, hour_stem_index: int) -> tuple:
    """
    Lay out the nine palaces.

    Stars fill all nine palaces from star Ju-1. Doors start at door
    (Ju-1) mod 8 and spirits at 值符; both fill the eight outer palaces
    in grid order, leaving 中五 empty. Yang walks forward, Yin backward.
    Stems always walk forward through 六仪 + 三奇 from the hour stem index.
    """
    stars = _walk(NINE_STARS, ju - 1, dun.step, 9)
    doors = _walk(EIGHT_DOORS, (ju - 1) % 8, dun.step, 8)
    spirits = _walk(EIGHT_SPIRITS, 0, dun.step, 8)
    stems = _walk(YI_QI, hour_stem_index, 1, 9)

    door_at = dict(zip(OUTER_PALACES, doors))
    spirit_at = dict(zip(OUTER_PALACES, spirits))

    return tuple(
        Palace(
            position=PALACE_NAMES[i],
            number=LUO_SHU[i],
            door=door_at.get(i, ""),
            star=stars[i],
            spirit=spirit_at.get(i, ""),
            stem=stems[i],
        )
        for i in range(9)
    )


def three_treasures(palaces: tuple) -> ThreeTreasures:
    """乙/丙/丁 sharing a palace with 开/休/生."""
    matches = tuple(
        f"{p.position}宫{p.stem}加{p.door}"
        for p in palaces
        if p.stem in THREE_QI and p.door in AUSPICIOUS_DOORS
    )
    return ThreeTreasures(has=bool(matches), matches=matches)


# ============================================================
# PATTERNS (格局)
# ============================================================

@dataclass(frozen=True)
class PatternRule:
    name: str
    quality: str
    description: str
    # (day_stem, hour_stem) -> bool
    condition: Callable[[str, str], bool]


PATTERN_RULES = (
    PatternRule("青龙回首", "上吉", "大吉之象，百事皆宜，利于求财、婚姻、出行等",
                lambda d, h: d == "辛" and h == "乙"),
    PatternRule("飞鸟跌穴", "上吉", "大吉之象，利于求官、考试、经营等",
                lambda d, h: d == "乙" and h == "辛"),
    PatternRule("龙虎相争", "中平", "中平之象，主争执竞争，需谨慎行事",
                lambda d, h: d == "辛" and h == "庚"),
    PatternRule("奇仪相合", "吉", "吉象，主合作、和谐、贵人相助",
                lambda d, h: (h, d) in (("乙", "庚"), ("丙", "辛"), ("丁", "壬"), ("戊", "癸"))),
)

DEFAULT_PATTERN = GeJu("普通格局", "平", "无特殊格局，需综合分析其他因素")


def match_pattern(day_stem: str, hour_stem: str) -> GeJu:
    """First rule matching the day/hour stem pair, else 普通格局."""
    for rule in PATTERN_RULES:
        if rule.condition(day_stem, hour_stem):
            return GeJu(rule.name, rule.quality, rule.description)
    return DEFAULT_PATTERN


# ============================================================
# JUDGEMENT AND ADVICE
# ============================================================

LEVEL_DESCRIPTIONS = {
    "大吉": "吉利之象，百事顺遂，可积极进取",
    "吉": "吉利之象，可以行动，但需谨慎",
    "中平": "吉凶参半，需根据具体情况判断",
    "凶": "不利之象，宜静不宜动，宜守不宜攻",
}

QUALITY_LEVELS = {"上吉": "大吉", "吉": "吉", "中平": "中平"}


def door_tally(palaces: tuple) -> tuple:
    """(auspicious, inauspicious) door counts over the whole grid."""
    good = sum(1 for p in palaces if p.door in AUSPICIOUS_DOORS)
    bad = sum(1 for p in palaces if p.door in INAUSPICIOUS_DOORS)
    return good, bad


def judge(palaces: tuple, ge_ju: GeJu) -> Auspiciousness:
    """
    Overall level. A named pattern fixes the level; for 普通格局 the door
    tally decides. A full grid always holds all eight doors, so 普通格局
    charts tally 3 auspicious against 2 inauspicious.
    """
    level = QUALITY_LEVELS.get(ge_ju.quality)
    if level is None:
        good, bad = door_tally(palaces)
        if good >= 3:
            level = "大吉"
        elif good >= 2:
            level = "吉"
        elif good == 1 and bad <= 1:
            level = "中平"
        else:
            level = "凶"
    return Auspiciousness(level, LEVEL_DESCRIPTIONS[level])


def direction_advice(palaces: tuple) -> tuple:
    favorable = tuple(p.direction for p in palaces if p.door in AUSPICIOUS_DOORS)
    unfavorable = tuple(p.direction for p in palaces if p.door in AVOID_DIRECTION_DOORS)
    return favorable, unfavorable


def time_advice(hour_stem: str, hour_branch: str) -> tuple:
    favorable, unfavorable = [], []
    if hour_stem in FAVORABLE_HOUR_STEMS:
        favorable.append("当前时辰吉利")
    if hour_stem in UNFAVORABLE_HOUR_STEMS:
        unfavorable.append("当前时辰不利")
    if hour_branch in FAVORABLE_HOUR_BRANCHES:
        favorable.append(f"{hour_branch}时较为吉利")
    if hour_branch in UNFAVORABLE_HOUR_BRANCHES:
        unfavorable.append(f"{hour_branch}时需要谨慎")
    return tuple(favorable), tuple(unfavorable)


QUALITY_SUGGESTIONS = {
    "上吉": ("当前格局大吉，可以大胆行动", "宜积极进取，把握良机"),
    "吉": ("当前格局吉利，可以行动", "宜稳中求进，谨慎而为"),
    "中平": ("当前格局一般，需谨慎决策", "宜观察时机，不宜冒进"),
}
DEFAULT_QUALITY_SUGGESTIONS = ("当前格局不利，宜静待时机", "宜守不宜攻，不宜做重大决策")

LEVEL_SUGGESTIONS = {
    "大吉": "此为吉利之象，可以进行重要活动",
    "吉": "此为吉利之象，可以进行重要活动",
    "中平": "吉凶参半，需根据具体情况判断",
    "凶": "此为不利之象，宜低调行事",
}


def suggestions(palaces: tuple, ge_ju: GeJu, verdict: Auspiciousness) -> tuple:
    lines = list(QUALITY_SUGGESTIONS.get(ge_ju.quality, DEFAULT_QUALITY_SUGGESTIONS))
    lines.append(LEVEL_SUGGESTIONS[verdict.level])
    good = [p.direction for p in palaces if p.door in AUSPICIOUS_DOORS]
    if good:
        lines.append(f"吉门在：{'、'.join(good)}")
    return tuple(lines)


# ============================================================
# FULL CHART
# ============================================================

def compute_qimen(birth: BirthEvent) -> QimenResult:
    """
    Compute a Qimen Dunjia chart from the birth numbers.

    The is_lunar flag is not consulted: the formulas take the numbers as
    given.
    """
    day_stem_index, day_branch_index = day_indices(*birth.date)
    hour_stem_index, hour_branch_index = hour_indices(day_stem_index, birth.birth_hour)

    dun = dun_type(birth.birth_month)
    ju = ju_number(day_stem_index, day_branch_index)
    palaces = arrange_palaces(ju, dun, hour_stem_index)

    day_stem = STEM_NAMES[day_stem_index]
    hour_stem = STEM_NAMES[hour_stem_index]
    hour_branch = BRANCH_NAMES[hour_branch_index]

    ge_ju = match_pattern(day_stem, hour_stem)
    verdict = judge(palaces, ge_ju)
    favorable_dirs, unfavorable_dirs = direction_advice(palaces)
    favorable_times, unfavorable_times = time_advice(hour_stem, hour_branch)

    logger.info("qimen %s遁%d局 pattern=%s level=%s for %s",
                dun.value, ju, ge_ju.name, verdict.level, birth.date_text)

    return QimenResult(
        name=birth.name,
        gender=birth.gender,
        birth_date=birth.date_text,
        birth_time=birth.time_text,
        question=birth.question,
        day_stem=day_stem,
        day_branch=BRANCH_NAMES[day_branch_index],
        hour_stem=hour_stem,
        hour_branch=hour_branch,
        dun_type=dun,
        ju=ju,
        xun_shou=xun_shou(day_stem_index, day_branch_index),
        palaces=palaces,
        three_treasures=three_treasures(palaces),
        ge_ju=ge_ju,
        auspiciousness=verdict,
        favorable_directions=favorable_dirs,
        unfavorable_directions=unfavorable_dirs,
        favorable_times=favorable_times,
        unfavorable_times=unfavorable_times,
        suggestions=suggestions(palaces, ge_ju, verdict),
    )
