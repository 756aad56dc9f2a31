"""
Tests for the Qimen Dunjia chart.

Checked invariants:
1. Luo Shu numbering of the nine palaces
2. Eight doors and eight spirits on the outer palaces only; 中五 is empty
3. Every star, door and spirit appears exactly once
4. Ju stays within 1-9; Yang Dun for months 3-8
5. Named patterns fix the level; 普通格局 falls back to the door tally
"""

import json

import pytest

from divination.birth import BirthEvent
from divination.qimen import (
    CENTER,
    DEFAULT_PATTERN,
    EIGHT_DOORS,
    EIGHT_SPIRITS,
    LUO_SHU,
    NINE_STARS,
    PALACE_NAMES,
    PATTERN_RULES,
    DunType,
    GeJu,
    Palace,
    arrange_palaces,
    compute_qimen,
    day_indices,
    door_tally,
    dun_type,
    hour_indices,
    judge,
    ju_number,
    match_pattern,
    three_treasures,
    time_advice,
    xun_shou,
)


def _birth(year, month, day, hour=0, question=None):
    return BirthEvent(
        name="测试",
        gender="female",
        birth_year=year,
        birth_month=month,
        birth_day=day,
        birth_hour=hour,
        question=question,
    )


def _palace(position, door="", stem="戊"):
    number = LUO_SHU[PALACE_NAMES.index(position)]
    return Palace(position=position, number=number, door=door, star="天蓬", spirit="", stem=stem)


# =============================================================================
# PARAMETERS
# =============================================================================


class TestParameters:
    def test_day_indices(self):
        assert day_indices(1990, 1, 1) == (1, 0)
        assert day_indices(1990, 5, 1) == (1, 4)

    def test_hour_indices(self):
        assert hour_indices(1, 0) == (5, 0)
        assert hour_indices(1, 12) == (1, 6)
        assert hour_indices(1, 23)[1] == 0

    @pytest.mark.parametrize("month, dun", [
        (1, DunType.YIN), (2, DunType.YIN), (3, DunType.YANG),
        (8, DunType.YANG), (9, DunType.YIN), (12, DunType.YIN),
    ])
    def test_dun_type(self, month, dun):
        assert dun_type(month) is dun

    def test_ju_number(self):
        assert ju_number(0, 0) == 1
        assert ju_number(1, 4) == 5
        assert ju_number(9, 8) == 4

    def test_ju_in_range(self):
        for stem in range(10):
            for branch in range(12):
                assert 1 <= ju_number(stem, branch) <= 9

    def test_xun_shou(self):
        assert xun_shou(0, 0) == "甲子"
        assert xun_shou(1, 0) == "甲戌"
        assert xun_shou(1, 4) == "甲午"


# =============================================================================
# NINE PALACE LAYOUT
# =============================================================================


class TestArrangePalaces:
    @pytest.mark.parametrize("ju", range(1, 10))
    @pytest.mark.parametrize("dun", list(DunType))
    def test_layout_invariants(self, ju, dun):
        palaces = arrange_palaces(ju, dun, hour_stem_index=ju % 10)

        assert [p.number for p in palaces] == [4, 9, 2, 3, 5, 7, 8, 1, 6]
        assert palaces[CENTER].position == "中五"
        assert palaces[CENTER].door == ""
        assert palaces[CENTER].spirit == ""

        outer = [p for i, p in enumerate(palaces) if i != CENTER]
        assert sorted(p.door for p in outer) == sorted(EIGHT_DOORS)
        assert sorted(p.spirit for p in outer) == sorted(EIGHT_SPIRITS)
        assert sorted(p.star for p in palaces) == sorted(NINE_STARS)

    def test_yang_doors_are_a_rotation(self):
        palaces = arrange_palaces(5, DunType.YANG, 1)
        doors = [p.door for i, p in enumerate(palaces) if i != CENTER]
        start = EIGHT_DOORS.index(doors[0])
        assert doors == [EIGHT_DOORS[(start + i) % 8] for i in range(8)]

    def test_yin_walks_backward(self):
        palaces = arrange_palaces(1, DunType.YIN, 5)
        assert [p.star for p in palaces] == [
            "天蓬", "天禽", "天心", "天柱", "天芮", "天英", "天辅", "天冲", "天任",
        ]
        outer = [p for i, p in enumerate(palaces) if i != CENTER]
        assert [p.door for p in outer] == [
            "开门", "惊门", "死门", "景门", "杜门", "伤门", "生门", "休门",
        ]
        assert [p.spirit for p in outer] == [
            "值符", "九天", "九地", "玄武", "白虎", "六合", "太阴", "螣蛇",
        ]

    def test_stems_walk_forward_from_hour_stem(self):
        palaces = arrange_palaces(1, DunType.YIN, 5)
        assert [p.stem for p in palaces] == ["癸", "乙", "丙", "丁", "戊", "己", "庚", "辛", "壬"]

    def test_direction(self):
        palaces = arrange_palaces(1, DunType.YANG, 0)
        assert [p.direction for p in palaces] == [
            "东南", "正南", "西南", "正东", "中央", "正西", "东北", "正北", "西北",
        ]


# =============================================================================
# THREE TREASURES, PATTERNS, JUDGEMENT
# =============================================================================


class TestThreeTreasures:
    def test_match(self):
        palaces = (_palace("坎一", "生门", "丁"), _palace("离九", "死门", "乙"))
        result = three_treasures(palaces)
        assert result.has is True
        assert result.matches == ("坎一宫丁加生门",)
        assert result.description == "三奇得使：坎一宫丁加生门"

    def test_none(self):
        result = three_treasures((_palace("坎一", "开门", "戊"),))
        assert result.has is False
        assert result.description == "无三奇得使"


class TestPatterns:
    @pytest.mark.parametrize("day, hour, name", [
        ("辛", "乙", "青龙回首"),
        ("乙", "辛", "飞鸟跌穴"),
        ("辛", "庚", "龙虎相争"),
        ("庚", "乙", "奇仪相合"),
        ("甲", "甲", "普通格局"),
    ])
    def test_stem_pairs(self, day, hour, name):
        assert match_pattern(day, hour).name == name

    def test_first_rule_wins(self):
        assert [r.name for r in PATTERN_RULES] == ["青龙回首", "飞鸟跌穴", "龙虎相争", "奇仪相合"]

    @pytest.mark.parametrize("day", ["丙", "乙", "丁"])
    def test_day_stem_alone_is_plain(self, day):
        # Only the stem pair is consulted; the door under the day stem is not
        for hour in ("甲", "戊", "己", "壬"):
            assert match_pattern(day, hour) == DEFAULT_PATTERN


class TestJudge:
    @pytest.mark.parametrize("quality, level", [("上吉", "大吉"), ("吉", "吉"), ("中平", "中平")])
    def test_named_pattern_fixes_level(self, quality, level):
        assert judge((), GeJu("x", quality, "")).level == level

    @pytest.mark.parametrize("doors, level", [
        (("开门", "休门", "生门"), "大吉"),
        (("开门", "休门", "死门"), "吉"),
        (("开门", "杜门", "惊门"), "中平"),
        (("开门", "死门", "惊门"), "凶"),
        (("杜门", "景门", "伤门"), "凶"),
    ])
    def test_door_tally_decides_plain_pattern(self, doors, level):
        palaces = tuple(
            _palace(position, door)
            for position, door in zip(("坎一", "坤二", "震三"), doors)
        )
        assert judge(palaces, DEFAULT_PATTERN).level == level

    def test_tally_counts_every_palace(self):
        palaces = (_palace("坎一", "开门", "戊"), _palace("坤二", "死门", "乙"))
        assert door_tally(palaces) == (1, 1)

    @pytest.mark.parametrize("ju", range(1, 10))
    @pytest.mark.parametrize("dun", list(DunType))
    def test_full_grid_tally(self, ju, dun):
        palaces = arrange_palaces(ju, dun, hour_stem_index=0)
        assert door_tally(palaces) == (3, 2)
        assert judge(palaces, DEFAULT_PATTERN).level == "大吉"

    def test_named_pattern_outranks_tally(self):
        palaces = arrange_palaces(1, DunType.YANG, 0)
        assert judge(palaces, GeJu("龙虎相争", "中平", "")).level == "中平"


class TestTimeAdvice:
    def test_unfavorable(self):
        assert time_advice("庚", "申") == ((), ("当前时辰不利", "申时需要谨慎"))

    def test_neutral(self):
        assert time_advice("己", "辰") == ((), ())


# =============================================================================
# END-TO-END
# =============================================================================


class TestComputeQimenYin:
    @pytest.fixture(scope="class")
    def result(self):
        return compute_qimen(_birth(1990, 1, 1, 0))

    def test_parameters(self, result):
        assert (result.day_stem, result.day_branch) == ("乙", "子")
        assert (result.hour_stem, result.hour_branch) == ("己", "子")
        assert result.dun_type is DunType.YIN
        assert result.ju == 1
        assert result.ju_name == "阴遁1局"
        assert result.xun_shou == "甲戌"
        assert result.dun_jia == "甲戌遁"

    def test_judgement(self, result):
        assert result.three_treasures.has is False
        assert result.ge_ju == DEFAULT_PATTERN
        assert result.auspiciousness.level == "大吉"

    def test_advice(self, result):
        assert result.favorable_directions == ("东南", "正北", "西北")
        assert result.unfavorable_directions == ("正南", "西南", "东北")
        assert result.favorable_times == ("子时较为吉利",)
        assert result.unfavorable_times == ()
        assert result.suggestions == (
            "当前格局不利，宜静待时机",
            "宜守不宜攻，不宜做重大决策",
            "此为吉利之象，可以进行重要活动",
            "吉门在：东南、正北、西北",
        )


class TestComputeQimenYang:
    @pytest.fixture(scope="class")
    def result(self):
        return compute_qimen(_birth(1990, 5, 1, 12, question="能否出行"))

    def test_parameters(self, result):
        assert (result.day_stem, result.day_branch) == ("乙", "辰")
        assert (result.hour_stem, result.hour_branch) == ("乙", "午")
        assert result.dun_type is DunType.YANG
        assert result.ju == 5
        assert result.xun_shou == "甲午"

    def test_palaces(self, result):
        assert [p.star for p in result.palaces] == [
            "天英", "天芮", "天柱", "天心", "天禽", "天蓬", "天任", "天冲", "天辅",
        ]
        assert [p.stem for p in result.palaces] == ["己", "庚", "辛", "壬", "癸", "乙", "丙", "丁", "戊"]
        outer = [p for i, p in enumerate(result.palaces) if i != CENTER]
        assert [p.door for p in outer] == [
            "杜门", "景门", "死门", "惊门", "开门", "休门", "生门", "伤门",
        ]
        assert [p.spirit for p in outer] == list(EIGHT_SPIRITS)

    def test_three_treasures(self, result):
        assert result.three_treasures.matches == (
            "兑七宫乙加开门", "艮八宫丙加休门", "坎一宫丁加生门",
        )

    def test_pattern_and_level(self, result):
        # 乙 day with 开门 under it is still a plain chart: only the stem pair counts
        assert result.ge_ju == DEFAULT_PATTERN
        assert result.auspiciousness.level == "大吉"

    def test_advice(self, result):
        assert result.favorable_directions == ("正西", "东北", "正北")
        assert result.unfavorable_directions == ("西南", "正东", "西北")
        assert result.favorable_times == ("当前时辰吉利", "午时较为吉利")
        assert result.suggestions == (
            "当前格局不利，宜静待时机",
            "宜守不宜攻，不宜做重大决策",
            "此为吉利之象，可以进行重要活动",
            "吉门在：正西、东北、正北",
        )

    def test_to_dict(self, result):
        data = result.to_dict()
        assert data["question"] == "能否出行"
        assert data["gender"] == "女"
        assert data["day"] == "乙辰"
        assert data["ju_name"] == "阳遁5局"
        assert len(data["palaces"]) == 9
        assert data["palaces"][CENTER]["door"] == ""
        assert data["ge_ju"]["name"] == "普通格局"
        assert data["directions"]["favorable"] == ["正西", "东北", "正北"]


class TestComputeQimenProperties:
    def test_deterministic(self):
        birth = _birth(2024, 7, 15, 9)
        first = json.dumps(compute_qimen(birth).to_dict(), ensure_ascii=False)
        second = json.dumps(compute_qimen(birth).to_dict(), ensure_ascii=False)
        assert first == second

    def test_ignores_lunar_flag(self):
        solar = compute_qimen(_birth(2024, 7, 15, 9)).to_dict()
        lunar_birth = BirthEvent(name="测试", gender="female", birth_year=2024,
                                 birth_month=7, birth_day=15, birth_hour=9, is_lunar=True)
        assert compute_qimen(lunar_birth).to_dict() == solar

    @pytest.mark.parametrize("month", range(1, 13))
    def test_ju_in_range_across_months(self, month):
        for day in (1, 10, 20, 28):
            assert 1 <= compute_qimen(_birth(2000, month, day, 6)).ju <= 9

    def test_question_absent(self):
        assert compute_qimen(_birth(2000, 1, 1)).question is None
