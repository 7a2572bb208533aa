"""
Roast planner handler tests
Input validation, single clock read and display lines
"""
import pytest
from datetime import datetime
from core.config import Settings
from handlers.roast_planner import MISSING_FIELDS_MESSAGE, TOO_LARGE_MESSAGE, RoastPlanner
from models.roast import PlanStatus, ThawState


class FixedClock:
    """Clock stub that counts reads"""

    def __init__(self, now: datetime):
        self.now = now
        self.calls = 0

    def __call__(self) -> datetime:
        self.calls += 1
        return self.now


def make_planner(hour: int, minute: int = 0, settings: Settings = None):
    clock = FixedClock(datetime(2024, 11, 28, hour, minute))
    return RoastPlanner(settings, clock=clock), clock


class TestValidation:
    """User-facing validation messages"""

    @pytest.mark.parametrize("weight,target", [(None, "18:00"), ("", "18:00"), ("4", None), ("4", "  ")])
    def test_missing_fields(self, weight, target):
        planner, clock = make_planner(12)
        response = planner.handle(weight, "thawed", target)

        assert response.ok is False
        assert response.error == MISSING_FIELDS_MESSAGE
        assert clock.calls == 0

    def test_non_numeric_weight(self):
        planner, _ = make_planner(12)
        response = planner.handle("heavy", "thawed", "18:00")
        assert response.ok is False
        assert "number" in response.error

    @pytest.mark.parametrize("weight", ["0", "-2", -0.5])
    def test_non_positive_weight(self, weight):
        planner, _ = make_planner(12)
        response = planner.handle(weight, "thawed", "18:00")
        assert response.ok is False
        assert response.error == "Weight must be greater than zero."

    def test_non_positive_oven_temp(self):
        planner, _ = make_planner(12)
        response = planner.handle("4", "thawed", "18:00", "0")
        assert response.ok is False
        assert response.error == "Oven temperature must be greater than zero."

    @pytest.mark.parametrize("weight", ["inf", "-inf", "nan"])
    def test_non_finite_weight(self, weight):
        planner, clock = make_planner(12)
        response = planner.handle(weight, "thawed", "18:00")

        assert response.ok is False
        assert response.error == "Weight must be a finite number of pounds."
        assert clock.calls == 0

    def test_non_finite_oven_temp(self):
        planner, _ = make_planner(12)
        response = planner.handle("4", "thawed", "18:00", "inf")
        assert response.ok is False
        assert response.error == "Oven temperature must be a finite number."

    @pytest.mark.parametrize("oven_temp", ["0.0001", "50", "199", "501", "900"])
    def test_oven_temp_outside_search_bounds(self, oven_temp):
        """Fixed oven temperatures share the 200-500°F bounds"""
        planner, _ = make_planner(12)
        response = planner.handle("4", "thawed", "18:00", oven_temp)
        assert response.ok is False
        assert response.error == "Oven temperature must be between 200°F and 500°F."

    @pytest.mark.parametrize("weight,oven_temp", [("1e7", None), ("1e300", "325"), ("1e308", None)])
    def test_weight_too_large_to_schedule(self, weight, oven_temp):
        """Schedules past the calendar range are reported, not raised"""
        planner, clock = make_planner(12)
        response = planner.handle(weight, "thawed", "18:00", oven_temp)

        assert response.ok is False
        assert response.error == TOO_LARGE_MESSAGE
        assert clock.calls == 1

    def test_bad_target_time(self):
        planner, _ = make_planner(12)
        response = planner.handle("4", "thawed", "25:00")
        assert response.ok is False
        assert "out of range" in response.error


class TestThawState:
    """Default and unrecognized thaw states"""

    def test_blank_uses_configured_default(self):
        planner, _ = make_planner(6)
        response = planner.handle("4", "", "18:00", "325")
        assert response.schedule.fixed.main_phase_minutes == pytest.approx(420)

    def test_default_is_configurable(self):
        settings = Settings(default_thaw_state=ThawState.THAWED)
        planner, _ = make_planner(6, settings=settings)
        response = planner.handle("4", None, "18:00", "325")
        assert response.schedule.fixed.main_phase_minutes == pytest.approx(280)

    def test_unrecognized_is_neutral(self):
        planner, _ = make_planner(6)
        response = planner.handle("4", "slushy", "18:00", "325")
        assert response.ok is True
        assert response.schedule.fixed.total_minutes == pytest.approx(340)


class TestFixedTemperature:
    """Single plan at the caller's oven temperature"""

    def test_on_schedule(self):
        planner, clock = make_planner(12)
        response = planner.handle("4", "thawed", "18:00", "325")

        assert response.ok is True
        assert clock.calls == 1
        assert response.lines[0] == "Total cooking time: 5 hours 40 min"
        assert "Required start time: 12:20 PM" in response.lines
        assert "Drop to 180°F at 5:00 PM and hold for 1 hour 0 min" in response.lines
        assert response.lines[-1] == "You are on schedule."

    def test_behind_schedule_with_catch_up(self):
        planner, _ = make_planner(13)
        response = planner.handle(4, "thawed", "18:00", 325)

        assert response.schedule.fixed.status is PlanStatus.LATE
        assert "You are behind schedule by 40 minutes." in response.lines
        assert "Suggested oven temperature to catch up: 366°F" in response.lines

    def test_behind_schedule_without_catch_up(self):
        planner, _ = make_planner(17)
        response = planner.handle("10", "frozen", "18:00", "325")
        assert any(line.startswith("Even at 500°F the soonest finish is") for line in response.lines)


class TestTwoPlans:
    """Ideal and start-now plans"""

    def test_ideal_late_start_now_solved(self):
        planner, clock = make_planner(8)
        response = planner.handle("4", "frozen", "18:00")

        assert clock.calls == 1
        assert response.lines[0] == "Ready at: 6:00 PM"
        assert response.schedule.ideal.status is PlanStatus.LATE
        assert response.schedule.start_now.status is PlanStatus.SOLVED
        assert any(line.startswith("Ideal plan: 240°F") for line in response.lines)
        assert any("ideal start was" in line for line in response.lines)
        assert any(line.startswith("Start-now plan:") for line in response.lines)

    def test_too_early(self):
        planner, _ = make_planner(8)
        response = planner.handle("2", "thawed", "18:00")
        assert response.schedule.start_now.status is PlanStatus.TOO_EARLY_DEFER_TO_IDEAL
        assert any(line.startswith("Too early to start now") for line in response.lines)

    def test_no_hold_room(self):
        planner, _ = make_planner(17, 10)
        response = planner.handle("4", "thawed", "18:00")
        assert response.schedule.start_now.status is PlanStatus.INFEASIBLE_NO_HOLD_ROOM
        assert any(line.startswith("Not enough time") for line in response.lines)

    def test_infeasible_at_max(self):
        planner, _ = make_planner(10)
        response = planner.handle("10", "frozen", "18:00")
        assert response.schedule.start_now.status is PlanStatus.INFEASIBLE_EVEN_AT_MAX
        assert "Cannot finish on time even at 500°F." in response.lines
