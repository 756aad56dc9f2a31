"""
Four Pillars (四柱) sexagenary computation.

Handles:
- Heavenly Stem / Earthly Branch records
- Year pillar (Feb 4 boundary, 1900 = 庚子 anchor)
- Month pillar (Five Tigers rule)
- Day pillar (1900-01-01 = 甲戌 epoch)
- Hour pillar (Five Rats rule, 23:00 folds into 子)

None of these functions validate the Gregorian date; that is the
caller's job. An impossible date gives a well-formed but meaningless pillar.
"""

from dataclasses import dataclass

from divination.calendar import BRANCH_NAMES, STEM_NAMES, ZODIAC_ANIMALS, days_between
from divination.wuxing import Element, Polarity, element_of


# ============================================================
# FUNDAMENTAL DATA STRUCTURES
# ============================================================

@dataclass(frozen=True)
class HeavenlyStem:
    chinese: str
    pinyin: str
    element: Element
    polarity: Polarity
    index: int  # 0-9 in the cycle

    def __str__(self):
        return self.chinese


@dataclass(frozen=True)
class EarthlyBranch:
    chinese: str
    pinyin: str
    animal: str
    element: Element
    polarity: Polarity
    index: int  # 0-11 in the cycle

    def __str__(self):
        return self.chinese


@dataclass(frozen=True)
class Pillar:
    stem: HeavenlyStem
    branch: EarthlyBranch
    position: str  # "year", "month", "day", "hour"

    def __post_init__(self):
        # Only same-parity pairs exist in the 60-term cycle
        if self.stem.index % 2 != self.branch.index % 2:
            raise ValueError(f"{self.stem.chinese}{self.branch.chinese} is not a sexagenary pair")

    def __str__(self):
        return f"{self.stem.chinese}{self.branch.chinese}"

    @property
    def cycle_index(self) -> int:
        """Position 0-59 in the sexagenary cycle (甲子 = 0)."""
        return (6 * self.stem.index - 5 * self.branch.index) % 60

    def to_dict(self):
        return {
            "position": self.position,
            "stem": {
                "chinese": self.stem.chinese,
                "pinyin": self.stem.pinyin,
                "element": self.stem.element.value,
                "polarity": self.stem.polarity.value,
            },
            "branch": {
                "chinese": self.branch.chinese,
                "pinyin": self.branch.pinyin,
                "animal": self.branch.animal,
                "element": self.branch.element.value,
                "polarity": self.branch.polarity.value,
            },
            "combined": str(self),
        }


@dataclass(frozen=True)
class FourPillars:
    year: Pillar
    month: Pillar
    day: Pillar
    hour: Pillar
    zodiac: str
    shi_chen: str

    @property
    def pillars(self) -> tuple:
        return (self.year, self.month, self.day, self.hour)

    def to_dict(self):
        return {
            "year": self.year.to_dict(),
            "month": self.month.to_dict(),
            "day": self.day.to_dict(),
            "hour": self.hour.to_dict(),
            "zodiac": self.zodiac,
            "shi_chen": self.shi_chen,
        }


# ============================================================
# STEM AND BRANCH DEFINITIONS
# ============================================================

_STEM_PINYIN = ("Jia", "Yi", "Bing", "Ding", "Wu", "Ji", "Geng", "Xin", "Ren", "Gui")
_BRANCH_PINYIN = ("Zi", "Chou", "Yin", "Mao", "Chen", "Si", "Wu", "Wei", "Shen", "You", "Xu", "Hai")


def _polarity(index: int) -> Polarity:
    return Polarity.YANG if index % 2 == 0 else Polarity.YIN


HEAVENLY_STEMS = tuple(
    HeavenlyStem(name, _STEM_PINYIN[i], element_of(name), _polarity(i), i)
    for i, name in enumerate(STEM_NAMES)
)

EARTHLY_BRANCHES = tuple(
    EarthlyBranch(name, _BRANCH_PINYIN[i], ZODIAC_ANIMALS[i], element_of(name), _polarity(i), i)
    for i, name in enumerate(BRANCH_NAMES)
)

# Lookup helpers
STEM_BY_CHINESE = {s.chinese: s for s in HEAVENLY_STEMS}

SHI_CHEN_NAMES = tuple(f"{name}时" for name in BRANCH_NAMES)


# ============================================================
# EPOCHS AND RULE TABLES
# ============================================================

# 1900 is a 庚子 year
YEAR_EPOCH = 1900
YEAR_EPOCH_STEM = 6
YEAR_EPOCH_BRANCH = 0

# 1900-01-01 is a 甲戌 day
DAY_EPOCH = (1900, 1, 1)
DAY_EPOCH_STEM = 0
DAY_EPOCH_BRANCH = 10

# Five Tigers (五虎遁): year stem → stem of month 1 (寅)
TIGER_START_STEMS = {
    0: 2, 5: 2,   # 甲/己 year → 丙寅
    1: 4, 6: 4,   # 乙/庚 year → 戊寅
    2: 6, 7: 6,   # 丙/辛 year → 庚寅
    3: 8, 8: 8,   # 丁/壬 year → 壬寅
    4: 0, 9: 0,   # 戊/癸 year → 甲寅
}

# Five Rats (五鼠遁): day stem → stem of the 子 hour
RAT_START_STEMS = {
    0: 0, 5: 0,   # 甲/己 day → 甲子
    1: 2, 6: 2,   # 乙/庚 day → 丙子
    2: 4, 7: 4,   # 丙/辛 day → 戊子
    3: 6, 8: 6,   # 丁/壬 day → 庚子
    4: 8, 9: 8,   # 戊/癸 day → 壬子
}


def _pillar(stem_index: int, branch_index: int, position: str) -> Pillar:
    return Pillar(
        stem=HEAVENLY_STEMS[stem_index % 10],
        branch=EARTHLY_BRANCHES[branch_index % 12],
        position=position,
    )


# ============================================================
# PILLAR COMPUTATION
# ============================================================

def effective_year(year: int, month: int, day: int,
                   li_chun_month: int = 2, li_chun_day: int = 4) -> int:
    """Gregorian year shifted back by one before the Li Chun cutoff."""
    if month < li_chun_month or (month == li_chun_month and day < li_chun_day):
        return year - 1
    return year


def year_pillar(year: int, month: int, day: int,
                li_chun_month: int = 2, li_chun_day: int = 4) -> Pillar:
    """
    Compute the Year Pillar.

    The year changes at Li Chun, approximated as a fixed Feb 4 (no solar
    term computation). Born before it, the previous year's pillar applies.
    """
    offset = effective_year(year, month, day, li_chun_month, li_chun_day) - YEAR_EPOCH
    return _pillar(YEAR_EPOCH_STEM + offset, YEAR_EPOCH_BRANCH + offset, "year")


def month_pillar(year: int, month: int, day: int) -> Pillar:
    """
    Compute the Month Pillar from the Gregorian month number.

    Branch is fixed per month (month 1 → 寅). Stem follows the Five Tigers
    rule from the year stem.
    """
    year_stem = year_pillar(year, month, day).stem
    start_stem = TIGER_START_STEMS[year_stem.index]
    return _pillar(start_stem + month - 1, month + 1, "month")


def day_offset(year: int, month: int, day: int) -> int:
    """Whole days from the 1900-01-01 day epoch."""
    return days_between(DAY_EPOCH, (year, month, day))


def day_pillar(year: int, month: int, day: int) -> Pillar:
    """Compute the Day Pillar by counting days from 1900-01-01 (甲戌)."""
    offset = day_offset(year, month, day)
    return _pillar(DAY_EPOCH_STEM + offset, DAY_EPOCH_BRANCH + offset, "day")


def hour_branch_index(hour: int) -> int:
    """
    Map a 24h clock hour to its double-hour branch.

    23:00-00:59 = 子 (0), 01:00-02:59 = 丑 (1), ... 21:00-22:59 = 亥 (11)
    """
    return ((hour + 1) // 2) % 12


def hour_pillar(year: int, month: int, day: int, hour: int) -> Pillar:
    """
    Compute the Hour Pillar using the Five Rats rule.

    Hour 23 belongs to the 子 block but stays on the same calendar day.
    """
    day_stem = day_pillar(year, month, day).stem
    branch_index = hour_branch_index(hour)
    return _pillar(RAT_START_STEMS[day_stem.index] + branch_index, branch_index, "hour")


def shi_chen(hour: int) -> str:
    """Name of the double hour, e.g. 23 → 子时, 10 → 巳时."""
    return SHI_CHEN_NAMES[hour_branch_index(hour)]


def four_pillars(year: int, month: int, day: int, hour: int) -> FourPillars:
    """Compute all four pillars for a solar date and clock hour."""
    yp = year_pillar(year, month, day)
    return FourPillars(
        year=yp,
        month=month_pillar(year, month, day),
        day=day_pillar(year, month, day),
        hour=hour_pillar(year, month, day, hour),
        zodiac=yp.branch.animal,
        shi_chen=shi_chen(hour),
    )


if __name__ == "__main__":
    chart = four_pillars(2000, 1, 1, 12)
    print(" ".join(str(p) for p in chart.pillars), chart.zodiac, chart.shi_chen)
    # Expected day pillar for 2000-01-01: 戊午
