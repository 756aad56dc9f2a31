"""
Birth event input shared by the Bazi and Qimen engines.

Range validation of the numeric fields belongs to the calling layer;
this model only normalises types.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Gender(Enum):
    MALE = "male"
    FEMALE = "female"

    @property
    def label(self) -> str:
        return "男" if self is Gender.MALE else "女"


@dataclass(frozen=True)
class BirthEvent:
    name: str
    gender: Gender
    birth_year: int
    birth_month: int
    birth_day: int
    birth_hour: int = 0
    birth_minute: int = 0
    is_lunar: bool = False
    question: Optional[str] = None

    def __post_init__(self):
        if not isinstance(self.gender, Gender):
            try:
                object.__setattr__(self, "gender", Gender(self.gender))
            except ValueError:
                raise ValueError(f"gender must be 'male' or 'female', got {self.gender!r}") from None

    @property
    def date(self) -> tuple:
        return (self.birth_year, self.birth_month, self.birth_day)

    @property
    def date_text(self) -> str:
        return f"{self.birth_year}年{self.birth_month}月{self.birth_day}日"

    @property
    def time_text(self) -> str:
        return f"{self.birth_hour:02d}:{self.birth_minute:02d}"

    @classmethod
    def from_dict(cls, data: dict) -> "BirthEvent":
        """
        Build from an interchange dict with camelCase keys
        (birthYear, birthMonth, ..., isLunar).
        """
        return cls(
            name=data.get("name", ""),
            gender=data["gender"],
            birth_year=int(data["birthYear"]),
            birth_month=int(data["birthMonth"]),
            birth_day=int(data["birthDay"]),
            birth_hour=int(data.get("birthHour", 0)),
            birth_minute=int(data.get("birthMinute", 0)),
            is_lunar=bool(data.get("isLunar", False)),
            question=data.get("question"),
        )


def parse_birth_time(birth_time: str) -> tuple:
    """Split an "HH:MM" string into (hour, minute)."""
    try:
        hour, minute = map(int, birth_time.split(":"))
    except ValueError:
        raise ValueError(f"birth time must be HH:MM, got {birth_time!r}") from None
    return hour, minute
