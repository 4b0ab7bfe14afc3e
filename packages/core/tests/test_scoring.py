"""评分与升级阶段单元测试

测试内容：
1. 优先级分数各项加分与计算顺序
2. 升级阶段阈值与优先级
3. 展示意图查表
4. 默认微步骤模板
"""

from datetime import datetime

import pytest
from neverforget.core.models import EscalationStage, Importance
from neverforget.core.scoring import (
    compute_priority_score,
    derive_metrics,
    determine_escalation_stage,
    generate_default_micro_steps,
    generate_visual_indicators,
    visual_indicators_for,
)

# 创建超过 24 小时，不再有新建加分
OLD = 48


class TestPriorityScore:
    """compute_priority_score"""

    @pytest.mark.parametrize(
        "importance,expected",
        [
            (Importance.CRITICAL, 100),
            (Importance.HIGH, 50),
            (Importance.MEDIUM, 25),
            (Importance.LOW, 10),
        ],
    )
    def test_importance_base(self, make_task, now: datetime, importance, expected):
        """无截止时间的老任务只有基础分"""
        task = make_task(importance=importance, created_ago=OLD)
        assert compute_priority_score(task, now) == expected

    def test_unknown_importance_uses_medium_weight(self, make_task, now: datetime):
        """缺失的重要度按 medium 计分"""
        task = make_task(created_ago=OLD).model_copy(update={"importance": None})
        assert compute_priority_score(task, now) == 25

    @pytest.mark.parametrize(
        "deadline_in,bonus",
        [
            (0, 150),
            (10, 150),
            (23.9, 150),
            (24, 100),
            (71, 100),
            (72, 50),
            (167, 50),
            (168, 0),
            (500, 0),
        ],
    )
    def test_deadline_bonus(self, make_task, now: datetime, deadline_in, bonus):
        """截止时间越近加分越高，阈值左闭右开"""
        task = make_task(deadline_in=deadline_in, created_ago=OLD)
        assert compute_priority_score(task, now) == pytest.approx(50 + bonus)

    def test_overdue_grows_linearly(self, make_task, now: datetime):
        """逾期：+200 + 每小时 10 分"""
        one_hour = compute_priority_score(make_task(deadline_in=-1, created_ago=OLD), now)
        ten_hours = compute_priority_score(make_task(deadline_in=-10, created_ago=OLD), now)
        assert one_hour == pytest.approx(50 + 200 + 10)
        assert ten_hours == pytest.approx(50 + 200 + 100)

    def test_overdue_critical_scenario(self, make_task, now: datetime):
        """critical 任务逾期 100 小时 -> 100 + 200 + 1000"""
        task = make_task(
            importance=Importance.CRITICAL, deadline_in=-100, created_ago=200
        )
        assert compute_priority_score(task, now) == pytest.approx(1300)
        assert determine_escalation_stage(task, now) == EscalationStage.EMERGENCY

    @pytest.mark.parametrize(
        "created_ago,bonus",
        [(0, 30), (0.5, 30), (1, 10), (23, 10), (24, 0), (100, 0)],
    )
    def test_recency_bonus(self, make_task, now: datetime, created_ago, bonus):
        """新建任务临时曝光"""
        task = make_task(importance=Importance.LOW, created_ago=created_ago)
        assert compute_priority_score(task, now) == 10 + bonus

    def test_fresh_medium_task_scenario(self, make_task, now: datetime):
        """medium、无截止、刚创建 -> 25 + 30"""
        task = make_task(importance=Importance.MEDIUM)
        assert compute_priority_score(task, now) == 55
        assert determine_escalation_stage(task, now) == EscalationStage.NORMAL

    def test_active_snooze_suppresses_to_zero(self, make_task, now: datetime):
        """推迟期内的 high 任务 -> 50 + 30 - 100，下限 0"""
        task = make_task(importance=Importance.HIGH, snoozed_for=1)
        assert compute_priority_score(task, now) == 0
        assert determine_escalation_stage(task, now) == EscalationStage.NORMAL

    def test_expired_snooze_does_not_suppress(self, make_task, now: datetime):
        """推迟期已过不再压制"""
        task = make_task(created_ago=OLD, snoozed_for=-1)
        assert compute_priority_score(task, now) == 50

    def test_snoozed_overdue_task_resurfaces(self, make_task, now: datetime):
        """压制作用在累计分上：严重逾期的推迟任务仍有正分"""
        task = make_task(
            importance=Importance.CRITICAL,
            deadline_in=-50,
            created_ago=200,
            snoozed_for=2,
        )
        assert compute_priority_score(task, now) == pytest.approx(100 + 200 + 500 - 100)

    def test_snooze_penalty_applied_after_suppression(self, make_task, now: datetime):
        """推迟次数惩罚在压制之后累加：10 -> 0 -> +40"""
        task = make_task(
            importance=Importance.LOW,
            created_ago=OLD,
            snooze_count=2,
            snoozed_for=3,
        )
        assert compute_priority_score(task, now) == 40

    def test_snooze_count_penalty_without_active_snooze(self, make_task, now: datetime):
        """推迟次数惩罚与当前是否处于推迟期无关"""
        task = make_task(created_ago=OLD, snooze_count=3)
        assert compute_priority_score(task, now) == 50 + 60

    @pytest.mark.parametrize(
        "kwargs",
        [
            {},
            {"deadline_in": 30},
            {"deadline_in": -5},
            {"snoozed_for": 4},
            {"deadline_in": -80, "snoozed_for": 4, "importance": Importance.LOW},
        ],
    )
    def test_monotonic_in_snooze_count(self, make_task, now: datetime, kwargs):
        """其他条件不变时，分数随 snooze_count 单调不减"""
        scores = [
            compute_priority_score(make_task(snooze_count=count, **kwargs), now)
            for count in range(0, 12)
        ]
        assert scores == sorted(scores)

    def test_score_never_negative(self, make_task, now: datetime):
        task = make_task(importance=Importance.LOW, created_ago=OLD, snoozed_for=10)
        assert compute_priority_score(task, now) == 0


class TestEscalationStage:
    """determine_escalation_stage"""

    @pytest.mark.parametrize("snooze_count", [0, 1, 2, 3, 4])
    def test_no_deadline_is_normal(self, make_task, now: datetime, snooze_count):
        """无截止时间且推迟少于 5 次 -> normal"""
        task = make_task(snooze_count=snooze_count)
        assert determine_escalation_stage(task, now) == EscalationStage.NORMAL

    @pytest.mark.parametrize("snooze_count", [5, 6, 20])
    def test_no_deadline_avoidance_is_urgent(self, make_task, now: datetime, snooze_count):
        task = make_task(snooze_count=snooze_count)
        assert determine_escalation_stage(task, now) == EscalationStage.URGENT

    @pytest.mark.parametrize(
        "deadline_in,expected",
        [
            (-500, EscalationStage.EMERGENCY),
            (-73, EscalationStage.EMERGENCY),
            (-72, EscalationStage.CRITICAL),
            (-25, EscalationStage.CRITICAL),
            (-24, EscalationStage.URGENT),
            (-0.1, EscalationStage.URGENT),
            (0, EscalationStage.CRITICAL),
            (5.9, EscalationStage.CRITICAL),
            (6, EscalationStage.URGENT),
            (23.9, EscalationStage.URGENT),
            (24, EscalationStage.ATTENTION),
            (71.9, EscalationStage.ATTENTION),
            (72, EscalationStage.NORMAL),
            (1000, EscalationStage.NORMAL),
        ],
    )
    def test_deadline_thresholds(self, make_task, now: datetime, deadline_in, expected):
        """逾期 / 剩余时间阈值"""
        task = make_task(deadline_in=deadline_in)
        assert determine_escalation_stage(task, now) == expected

    @pytest.mark.parametrize("importance", list(Importance))
    def test_long_overdue_is_emergency_regardless_of_importance(
        self, make_task, now: datetime, importance
    ):
        task = make_task(importance=importance, deadline_in=-73)
        assert determine_escalation_stage(task, now) == EscalationStage.EMERGENCY

    @pytest.mark.parametrize(
        "snooze_count,expected",
        [
            (2, EscalationStage.NORMAL),
            (3, EscalationStage.ATTENTION),
            (4, EscalationStage.ATTENTION),
            (5, EscalationStage.URGENT),
        ],
    )
    def test_far_deadline_avoidance_fallback(
        self, make_task, now: datetime, snooze_count, expected
    ):
        """截止时间尚远时，推迟次数决定阶段"""
        task = make_task(deadline_in=100, snooze_count=snooze_count)
        assert determine_escalation_stage(task, now) == expected

    def test_deadline_branches_take_precedence_over_snooze_count(
        self, make_task, now: datetime
    ):
        """剩余时间分支先于推迟次数兜底"""
        near = make_task(deadline_in=30, snooze_count=10)
        overdue = make_task(deadline_in=-2, snooze_count=10)
        assert determine_escalation_stage(near, now) == EscalationStage.ATTENTION
        assert determine_escalation_stage(overdue, now) == EscalationStage.URGENT


class TestVisualIndicators:
    """展示意图查表"""

    @pytest.mark.parametrize(
        "stage,icon,color,level,pulse,sound",
        [
            (EscalationStage.EMERGENCY, "alert", "red", 100, True, True),
            (EscalationStage.CRITICAL, "exclamation", "orange", 85, True, False),
            (EscalationStage.URGENT, "warning", "yellow", 65, False, False),
            (EscalationStage.ATTENTION, "bell", "blue", 40, False, False),
            (EscalationStage.NORMAL, "note", "green", 20, False, False),
        ],
    )
    def test_lookup_table(self, stage, icon, color, level, pulse, sound):
        indicators = visual_indicators_for(stage)
        assert indicators.icon == icon
        assert indicators.color == color
        assert indicators.urgency_level == level
        assert indicators.pulse is pulse
        assert indicators.sound is sound

    def test_lookup_returns_independent_copy(self):
        """修改返回值不影响查表结果"""
        indicators = visual_indicators_for(EscalationStage.NORMAL)
        indicators.urgency_level = 99
        assert visual_indicators_for(EscalationStage.NORMAL).urgency_level == 20

    def test_generated_from_task_stage(self, make_task, now: datetime):
        task = make_task(deadline_in=-100)
        indicators = generate_visual_indicators(task, now)
        assert indicators.icon == "alert"
        assert indicators.sound is True


class TestDefaultMicroSteps:
    """默认微步骤模板"""

    def test_three_fixed_steps(self):
        steps = generate_default_micro_steps()
        assert [s.description for s in steps] == [
            "Review what needs to be done",
            "Break down into smaller parts",
            "Start with the easiest part",
        ]
        assert [s.estimated_duration for s in steps] == ["2 min", "5 min", "10 min"]
        assert all(s.completed is False for s in steps)

    def test_fresh_ids_each_call(self):
        first = {s.step_id for s in generate_default_micro_steps()}
        second = {s.step_id for s in generate_default_micro_steps()}
        assert len(first) == 3
        assert first.isdisjoint(second)


class TestDeriveMetrics:
    def test_metrics_consistent_with_individual_functions(self, make_task, now: datetime):
        task = make_task(importance=Importance.CRITICAL, deadline_in=3)
        metrics = derive_metrics(task, now)
        assert metrics.priority_score == compute_priority_score(task, now)
        assert metrics.escalation_stage == EscalationStage.CRITICAL
        assert metrics.visual_indicators == visual_indicators_for(EscalationStage.CRITICAL)
