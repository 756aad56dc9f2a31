"""Lunar calendar, Four Pillars and Qimen Dunjia computation."""

from divination.bazi import BaziResult, compute_bazi
from divination.birth import BirthEvent, Gender
from divination.calendar import LunarDate, OutOfRangeCalendarError, solar_to_lunar
from divination.chart import DivinationType, compute_reading
from divination.pillars import (
    FourPillars,
    Pillar,
    day_pillar,
    four_pillars,
    hour_pillar,
    month_pillar,
    year_pillar,
)
from divination.qimen import QimenResult, compute_qimen
from divination.wuxing import Element, TenGod, element_of, ten_god

__all__ = [
    "BaziResult",
    "BirthEvent",
    "DivinationType",
    "Element",
    "FourPillars",
    "Gender",
    "LunarDate",
    "OutOfRangeCalendarError",
    "Pillar",
    "QimenResult",
    "TenGod",
    "compute_bazi",
    "compute_qimen",
    "compute_reading",
    "day_pillar",
    "element_of",
    "four_pillars",
    "hour_pillar",
    "month_pillar",
    "solar_to_lunar",
    "ten_god",
    "year_pillar",
]
