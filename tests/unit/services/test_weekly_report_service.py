"""Tests for habit_insights/services/weekly_report_service.py"""

from datetime import date

import pytest

from habit_insights.models import StreakState
from habit_insights.services.streak_prediction_service import StreakPredictionService
from habit_insights.services.timing_pattern_service import TimingPatternService
from habit_insights.services.weekly_report_service import WeeklyReportService


class TestGenerateWeeklyReport:

    def test_summarizes_week(self, make_history, today, catalog):
        week = make_history([1, 1, 0, 1, 1, 1, 0], hours=[8, 8, None, 8, 9, 8, None])
        pattern = TimingPatternService.analyze_timing('h1', week)
        prediction = StreakPredictionService.predict_risk('h1', StreakState(), pattern, week, today)

        report = WeeklyReportService.generate_weekly_report(
            'h1', 'Stretch', week, pattern, prediction, start=date(2024, 5, 12), catalog=catalog
        )

        assert report.completions == 5
        assert report.target_completions == 7
        assert report.success_rate == pytest.approx(5 / 7)
        assert report.streak_change == 1
        assert report.most_productive_hour == 8
        assert report.avg_completion_time == '08:00'
        assert report.consistency_score == pattern.completion_rate
        assert report.next_week_success == prediction.confidence_score
        assert report.streak_continuation == pytest.approx(prediction.confidence_score * 0.9)
        assert report.week_start == date(2024, 5, 12)

    def test_recommended_focus_names_difficult_day(self, make_history, today, catalog):
        # Ends Wednesday: Thursday and Friday are the two missed days
        week = make_history([0, 0, 1, 1, 1, 1, 1])
        pattern = TimingPatternService.analyze_timing('h1', week)
        prediction = StreakPredictionService.predict_risk('h1', StreakState(), pattern, week, today)

        report = WeeklyReportService.generate_weekly_report(
            'h1', 'Stretch', week, pattern, prediction, start=date(2024, 5, 12), catalog=catalog
        )

        assert report.recommended_focus == catalog.render('weekly_focus', 'difficult_day', day='Thursday')

    def test_failure_returns_default(self, today, catalog):
        report = WeeklyReportService.generate_weekly_report(
            'h1', 'Stretch', [], None, None, start=date(2024, 5, 12), catalog=catalog
        )

        assert report.completions == 0
        assert report.recommended_focus == catalog.render('weekly_focus', 'start_tracking')

    def test_to_dict_shape(self, make_history, today):
        week = make_history([1] * 7)
        pattern = TimingPatternService.analyze_timing('h1', week)
        prediction = StreakPredictionService.predict_risk('h1', StreakState(current=7), pattern, week, today)

        data = WeeklyReportService.generate_weekly_report(
            'h1', 'Stretch', week, pattern, prediction, start=date(2024, 5, 12)
        ).to_dict()

        assert data['weekStart'] == '2024-05-12'
        assert set(data['timeAnalysis']) == {'mostProductiveHour', 'avgCompletionTime', 'consistencyScore'}
        assert set(data['predictions']) == {'nextWeekSuccess', 'streakContinuation', 'recommendedFocus'}


class TestStreakChange:

    @pytest.mark.parametrize("completions,expected", [
        (7, 1), (5, 1), (4, 0), (3, 0), (2, -1), (0, -1),
    ])
    def test_tiers(self, completions, expected):
        assert WeeklyReportService.calculate_streak_change(completions) == expected
