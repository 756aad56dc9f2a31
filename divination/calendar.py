"""
Lunar calendar utilities for the divination engine.
Handles the packed lunar year table (1900-2100), Gregorian to lunar
conversion, Julian day arithmetic and the fixed stem/branch name tables.

The lunar table is fixed historical data, not an astronomical computation.
"""

from dataclasses import dataclass
import logging

import swisseph as swe

logger = logging.getLogger(__name__)


# ============================================================
# NAME TABLES
# ============================================================

STEM_NAMES = ("甲", "乙", "丙", "丁", "戊", "己", "庚", "辛", "壬", "癸")

BRANCH_NAMES = ("子", "丑", "寅", "卯", "辰", "巳", "午", "未", "申", "酉", "戌", "亥")

ZODIAC_ANIMALS = ("鼠", "牛", "虎", "兔", "龙", "蛇", "马", "羊", "猴", "鸡", "狗", "猪")


# ============================================================
# PACKED LUNAR YEAR TABLE
# ============================================================
#
# One 17-bit record per lunar year, 1900 first:
#   bit 16        leap month has 30 days (only meaningful with a leap month)
#   bits 15..4    months 1..12, set = 30 days, clear = 29 days
#   bits 3..0     leap month number, 0 = no leap month

LUNAR_INFO = (
    0x04bd8, 0x04ae0, 0x0a570, 0x054d5, 0x0d260, 0x0d950, 0x16554, 0x056a0, 0x09ad0, 0x055d2,
    0x04ae0, 0x0a5b6, 0x0a4d0, 0x0d250, 0x1d255, 0x0b540, 0x0d6a0, 0x0ada2, 0x095b0, 0x14977,
    0x04970, 0x0a4b0, 0x0b4b5, 0x06a50, 0x06d40, 0x1ab54, 0x02b60, 0x09570, 0x052f2, 0x04970,
    0x06566, 0x0d4a0, 0x0ea50, 0x06e95, 0x05ad0, 0x02b60, 0x186e3, 0x092e0, 0x1c8d7, 0x0c950,
    0x0d4a0, 0x1d8a6, 0x0b550, 0x056a0, 0x1a5b4, 0x025d0, 0x092d0, 0x0d2b2, 0x0a950, 0x0b557,
    0x06ca0, 0x0b550, 0x15355, 0x04da0, 0x0a5d0, 0x14573, 0x052d0, 0x0a9a8, 0x0e950, 0x06aa0,
    0x0aea6, 0x0ab50, 0x04b60, 0x0aae4, 0x0a570, 0x05260, 0x0f263, 0x0d950, 0x05b57, 0x056a0,
    0x096d0, 0x04dd5, 0x04ad0, 0x0a4d0, 0x0d4d4, 0x0d250, 0x0d558, 0x0b540, 0x0b5a0, 0x195a6,
    0x095b0, 0x049b0, 0x0a974, 0x0a4b0, 0x0b27a, 0x06a50, 0x06d40, 0x0af46, 0x0ab60, 0x09570,
    0x04af5, 0x04970, 0x064b0, 0x074a3, 0x0ea50, 0x06b58, 0x055c0, 0x0ab60, 0x096d5, 0x092e0,
    0x0c960, 0x0d954, 0x0d4a0, 0x0da50, 0x07552, 0x056a0, 0x0abb7, 0x025d0, 0x092d0, 0x0cab5,
    0x0a950, 0x0b4a0, 0x0baa4, 0x0ad50, 0x055d9, 0x04ba0, 0x0a5b0, 0x15176, 0x052b0, 0x0a930,
    0x07954, 0x06aa0, 0x0ad50, 0x05b52, 0x04b60, 0x0a6e6, 0x0a4e0, 0x0d260, 0x0ea65, 0x0d530,
    0x05aa0, 0x076a3, 0x096d0, 0x04afb, 0x04ad0, 0x0a4d0, 0x1d0b6, 0x0d250, 0x0d520, 0x0dd45,
    0x0b5a0, 0x056d0, 0x055b2, 0x049b0, 0x0a577, 0x0a4b0, 0x0aa50, 0x1b255, 0x06d20, 0x0ada0,
    0x14b63, 0x09370, 0x049f8, 0x04970, 0x064b0, 0x168a6, 0x0ea50, 0x06b20, 0x1a6c4, 0x0aae0,
    0x0a2e0, 0x0d2e3, 0x0c960, 0x0d557, 0x0d4a0, 0x0da50, 0x05d55, 0x056a0, 0x0a6d0, 0x055d4,
    0x052d0, 0x0a9b8, 0x0a950, 0x0b4a0, 0x0b6a6, 0x0ad50, 0x055a0, 0x0aba4, 0x0a5b0, 0x052b0,
    0x0b273, 0x06930, 0x07337, 0x06aa0, 0x0ad50, 0x14b55, 0x04b60, 0x0a570, 0x054e4, 0x0d160,
    0x0e968, 0x0d520, 0x0daa0, 0x16aa6, 0x056d0, 0x04ae0, 0x0a9d4, 0x0a2d0, 0x0d150, 0x0f252,
    0x0d520,
)

FIRST_LUNAR_YEAR = 1900
LAST_LUNAR_YEAR = FIRST_LUNAR_YEAR + len(LUNAR_INFO) - 1  # 2100

# Lunar New Year 1900 (正月初一)
LUNAR_EPOCH = (1900, 1, 31)

_LEAP_MONTH_MASK = 0xF
_MONTH_BITS_SHIFT = 4
_MONTH_BITS_MASK = 0xFFF
_LEAP_LONG_BIT = 0x10000


class OutOfRangeCalendarError(ValueError):
    """Raised when a date falls outside the lunar table (1900-2100)."""


@dataclass(frozen=True)
class LunarYear:
    year: int
    leap_month: int  # 0 = no leap month
    month_bits: int  # 12 bits, month 1 is the most significant
    leap_month_long: bool

    def month_days(self, month: int) -> int:
        """Length of ordinary month 1-12."""
        return 30 if self.month_bits & (0x800 >> (month - 1)) else 29

    @property
    def leap_days(self) -> int:
        if not self.leap_month:
            return 0
        return 30 if self.leap_month_long else 29

    @property
    def total_days(self) -> int:
        long_months = bin(self.month_bits).count("1")
        return 12 * 29 + long_months + self.leap_days

    def months(self):
        """
        Yield (month, is_leap, days) in calendar order.
        The leap month follows immediately after its nominal month.
        """
        for month in range(1, 13):
            yield month, False, self.month_days(month)
            if month == self.leap_month:
                yield month, True, self.leap_days


def decode_lunar_record(year: int, raw: int) -> LunarYear:
    """Unpack one 17-bit table record into named fields."""
    return LunarYear(
        year=year,
        leap_month=raw & _LEAP_MONTH_MASK,
        month_bits=(raw >> _MONTH_BITS_SHIFT) & _MONTH_BITS_MASK,
        leap_month_long=bool(raw & _LEAP_LONG_BIT),
    )


LUNAR_YEARS = tuple(
    decode_lunar_record(FIRST_LUNAR_YEAR + i, raw) for i, raw in enumerate(LUNAR_INFO)
)


@dataclass(frozen=True)
class LunarDate:
    year: int
    month: int
    day: int
    is_leap_month: bool = False

    def __str__(self):
        return f"{self.year}年{self.month}月{self.day}日{'(闰)' if self.is_leap_month else ''}"

    def to_dict(self):
        return {
            "year": self.year,
            "month": self.month,
            "day": self.day,
            "is_leap_month": self.is_leap_month,
            "text": str(self),
        }


# ============================================================
# TABLE QUERIES
# ============================================================

def lunar_year(year: int) -> LunarYear:
    """Decoded table record for a lunar year."""
    if not FIRST_LUNAR_YEAR <= year <= LAST_LUNAR_YEAR:
        raise OutOfRangeCalendarError(
            f"Lunar year {year} outside supported range "
            f"{FIRST_LUNAR_YEAR}-{LAST_LUNAR_YEAR}"
        )
    return LUNAR_YEARS[year - FIRST_LUNAR_YEAR]


def lunar_year_days(year: int) -> int:
    return lunar_year(year).total_days


def lunar_month_days(year: int, month: int) -> int:
    return lunar_year(year).month_days(month)


def leap_month(year: int) -> int:
    """Leap month number for the year, 0 if there is none."""
    return lunar_year(year).leap_month


def leap_month_days(year: int) -> int:
    return lunar_year(year).leap_days


# ============================================================
# DAY ARITHMETIC
# ============================================================

def julian_day_number(year: int, month: int, day: int) -> int:
    """
    Julian Day Number of a Gregorian date (noon, so the value is integral).

    swe.julday does not validate the date: an impossible day such as
    Feb 30 rolls over linearly instead of raising.
    """
    return int(round(swe.julday(year, month, day, 12.0)))


def days_between(start: tuple, end: tuple) -> int:
    """Whole days from start to end, both (year, month, day) tuples."""
    return julian_day_number(*end) - julian_day_number(*start)


# ============================================================
# SOLAR TO LUNAR CONVERSION
# ============================================================

def solar_to_lunar(year: int, month: int, day: int) -> LunarDate:
    """
    Convert a Gregorian date to a lunar date.

    Counts days from Lunar New Year 1900 (1900-01-31), then walks the
    table year by year and month by month until the remainder fits.

    Raises:
        OutOfRangeCalendarError: the date is before 1900-01-31 or its
            lunar year is past 2100.
    """
    offset = days_between(LUNAR_EPOCH, (year, month, day))
    if offset < 0:
        raise OutOfRangeCalendarError(
            f"{year}-{month:02d}-{day:02d} is before the lunar table epoch 1900-01-31"
        )

    record = lunar_year(FIRST_LUNAR_YEAR)
    while offset >= record.total_days:
        offset -= record.total_days
        record = lunar_year(record.year + 1)

    logger.debug("solar %d-%d-%d falls in lunar year %d, day %d of year",
                 year, month, day, record.year, offset + 1)

    for lunar_month_no, is_leap, days in record.months():
        if offset < days:
            return LunarDate(record.year, lunar_month_no, offset + 1, is_leap)
        offset -= days

    # months() sums to total_days, so the walk above always returns
    raise AssertionError(f"lunar month walk overran year {record.year}")


# Quick verification
if __name__ == "__main__":
    for sample in [(1900, 1, 31), (2000, 2, 5), (2023, 3, 22), (2024, 2, 10)]:
        print(f"{sample} -> {solar_to_lunar(*sample)}")
