"""
Reading dispatch.
Computes a BaZi or Qimen reading from birth data and returns a JSON-ready
dict. Quota checks before the call and storage after it are the caller's
concern.

Usage from Python:
    from divination.chart import compute_reading
    compute_reading("bazi", {
        "name": "Alex", "gender": "male",
        "birthYear": 1990, "birthMonth": 3, "birthDay": 15,
        "birthHour": 10, "birthMinute": 30, "isLunar": False,
    })
"""

from enum import Enum
from typing import Union
import logging

from divination.bazi import compute_bazi
from divination.birth import BirthEvent
from divination.qimen import compute_qimen

logger = logging.getLogger(__name__)


class DivinationType(Enum):
    BAZI = "bazi"
    QIMEN = "qimen"


ENGINES = {
    DivinationType.BAZI: compute_bazi,
    DivinationType.QIMEN: compute_qimen,
}


def compute_reading(kind: Union[DivinationType, str], birth: Union[BirthEvent, dict]) -> dict:
    """
    Run one engine and serialise its result.

    Args:
        kind: DivinationType or its value ("bazi", "qimen")
        birth: BirthEvent, or an interchange dict with camelCase keys

    Returns:
        dict with "type" and "result" keys

    Raises:
        ValueError: unknown kind or malformed birth data
        OutOfRangeCalendarError: solar date outside the lunar table (bazi)
    """
    kind = DivinationType(kind)
    if isinstance(birth, dict):
        birth = BirthEvent.from_dict(birth)

    logger.debug("computing %s reading for %s", kind.value, birth.date_text)
    result = ENGINES[kind](birth)
    return {"type": kind.value, "result": result.to_dict()}
