"""Tests for adherence service."""

from dataclasses import replace
from datetime import date, timedelta
from uuid import uuid4

import pytest

from wellness_tracker.domain.adherence import AdherenceStreaks, DailyAdherence
from wellness_tracker.services.adherence import (
    AdherenceService,
    adherence_level,
    consistency_score,
    generate_insights,
    motivational_message,
)
from tests.conftest import InMemoryAdherenceRepository

MONDAY = date(2024, 5, 6)


def _days(completed: list[int], planned: int = 5) -> list[DailyAdherence]:
    return [
        DailyAdherence(MONDAY + timedelta(days=offset), planned, count)
        for offset, count in enumerate(completed)
    ]


def test_calculate_metrics_aggregates_range() -> None:
    repository = InMemoryAdherenceRepository(
        daily=[
            DailyAdherence(MONDAY, 5, 5),
            DailyAdherence(MONDAY + timedelta(days=1), 5, 4),
            DailyAdherence(MONDAY + timedelta(days=2), 0, 0),
        ],
        streaks=AdherenceStreaks(2, 6, MONDAY),
    )

    metrics = AdherenceService(repository).calculate_metrics(
        uuid4(), MONDAY, MONDAY + timedelta(days=6)
    )

    assert metrics is not None
    assert metrics.total_days == 3
    assert metrics.total_planned == 10
    assert metrics.total_completed == 9
    assert metrics.adherence_rate == 90.0
    assert metrics.consistency_score == 5
    assert metrics.perfect_days == 1
    assert metrics.current_streak == 2
    assert metrics.longest_streak == 6
    assert metrics.last_perfect_date == MONDAY


def test_consistency_score_uses_unrounded_rate() -> None:
    repository = InMemoryAdherenceRepository(daily=[DailyAdherence(MONDAY, 2500, 2249)])

    metrics = AdherenceService(repository).calculate_metrics(uuid4(), MONDAY, MONDAY)

    assert metrics is not None
    assert metrics.adherence_rate == 90.0
    assert metrics.consistency_score == 4


def test_calculate_metrics_without_data() -> None:
    service = AdherenceService(InMemoryAdherenceRepository())

    assert service.calculate_metrics(uuid4(), MONDAY, MONDAY) is None


def test_range_must_be_ordered() -> None:
    service = AdherenceService(InMemoryAdherenceRepository())

    with pytest.raises(ValueError):
        service.get_daily(uuid4(), MONDAY, MONDAY - timedelta(days=1))


@pytest.mark.parametrize(
    ("rate", "expected"), [(95, 5), (80, 4), (75, 3), (60, 2), (59.9, 1)]
)
def test_consistency_score(rate: float, expected: int) -> None:
    assert consistency_score(rate) == expected


def test_adherence_levels_and_milestones() -> None:
    assert adherence_level(95).level == "exemplary"
    assert adherence_level(95).next_milestone is None
    assert adherence_level(80).level == "dedicated"
    assert adherence_level(80).next_milestone == 90
    assert adherence_level(65).next_milestone == 75
    assert adherence_level(10).level == "beginner"


def test_motivational_message_mentions_gap_to_next_level() -> None:
    repository = InMemoryAdherenceRepository(daily=_days([4]))
    metrics = AdherenceService(repository).calculate_metrics(uuid4(), MONDAY, MONDAY)
    assert metrics is not None

    assert "Only 10.0% more" in motivational_message(metrics)
    low = replace(metrics, adherence_rate=20.0)
    assert motivational_message(low).startswith("Every start is hard. At 20.0%")


def test_insights_need_a_week_of_data() -> None:
    assert generate_insights(_days([5, 5, 5])) == [
        "Keep logging your meals to unlock personalised insights."
    ]


def test_insights_find_worst_and_best_weekday() -> None:
    insights = generate_insights(_days([0, 5, 5, 5, 5, 5, 5]))

    assert insights == [
        "You find it hardest to follow your plan on Mondays (0.0%). "
        "Try preparing meals ahead for that day.",
        "Your best day is Tuesday with 100.0% adherence. "
        "Apply the same strategy to other days.",
    ]


def test_insights_report_weekly_trend() -> None:
    insights = generate_insights(_days([3] * 7 + [5] * 7))

    assert insights[0] == "You improved 40.0% over the last week. Keep it up!"
    assert len(insights) == 3


def test_insights_report_weekly_drop() -> None:
    insights = generate_insights(_days([5] * 7 + [4] * 7))

    assert insights[0].startswith("Your adherence dropped 20.0% last week.")
