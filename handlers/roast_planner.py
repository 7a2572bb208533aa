"""
Roast Planner Handler
Validates raw form fields, runs the solver once per request and renders display lines
"""
from datetime import datetime
from typing import Callable, List, Optional
from loguru import logger
from pydantic import BaseModel, ValidationError
from core.config import Settings
from core.plan_solver import PlanSolver
from core.target_time import parse_time_of_day
from core.timing_model import TimingModel
from models.roast import CookInput, PlanResult, PlanStatus, RoastSchedule, ThawState
from utils.text_utils import format_12_hour, format_duration, format_temperature

MISSING_FIELDS_MESSAGE = "Please fill out all fields."
TOO_LARGE_MESSAGE = "This roast is too large to schedule; check the weight."


class RoastPlanResponse(BaseModel):
    """
    Handler output consumed by the presentation layer
    """
    ok: bool
    error: Optional[str] = None
    schedule: Optional[RoastSchedule] = None
    lines: List[str] = []


def _is_blank(value) -> bool:
    return value is None or (isinstance(value, str) and value.strip() == "")


class RoastPlanner:
    """
    Entry point for one planning request
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        solver: Optional[PlanSolver] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        """
        Args:
            settings: Settings instance (defaults if omitted)
            solver: PlanSolver instance (built from settings if omitted)
            clock: Returns the current time; read once per request
        """
        self.settings = settings or Settings()
        self.solver = solver or PlanSolver(TimingModel(), self.settings.solver)
        self.clock = clock

    def handle(self, weight, thaw_state=None, target_time=None, oven_temp=None) -> RoastPlanResponse:
        """
        Plan a roast from raw form values

        Args:
            weight: Weight in pounds (string or number)
            thaw_state: "thawed" / "partial" / "frozen" (configured default if blank)
            target_time: Ready time of day, "HH:MM"
            oven_temp: Optional fixed oven temperature (°F)

        Returns:
            RoastPlanResponse
        """
        try:
            cook = self.build_input(weight, thaw_state, target_time, oven_temp)
        except ValueError as e:
            logger.info(f"Rejected roast input: {e}")
            return RoastPlanResponse(ok=False, error=str(e))

        now = self.clock()
        try:
            schedule = self.solver.plan(cook, now)
        except OverflowError:
            logger.info(f"Schedule for {cook.weight_lb} lb roast falls outside the calendar range")
            return RoastPlanResponse(ok=False, error=TOO_LARGE_MESSAGE)
        logger.debug(f"Planned {cook.weight_lb} lb {cook.thaw_state.value} roast for {schedule.target.isoformat()}")
        return RoastPlanResponse(ok=True, schedule=schedule, lines=self.render(schedule))

    def build_input(self, weight, thaw_state, target_time, oven_temp) -> CookInput:
        """
        Convert raw values into a CookInput
        Raises ValueError with a user-facing message
        """
        if _is_blank(weight) or _is_blank(target_time):
            raise ValueError(MISSING_FIELDS_MESSAGE)

        try:
            weight_lb = float(weight)
        except (TypeError, ValueError):
            raise ValueError("Weight must be a number of pounds.") from None

        oven_temp_f = None
        if not _is_blank(oven_temp):
            try:
                oven_temp_f = float(oven_temp)
            except (TypeError, ValueError):
                raise ValueError("Oven temperature must be a number.") from None

        time_of_day = parse_time_of_day(str(target_time))

        state = self.settings.default_thaw_state if _is_blank(thaw_state) else ThawState.coerce(thaw_state)
        if state is ThawState.UNKNOWN:
            logger.debug(f"Unrecognized thaw state {thaw_state!r}, using neutral multiplier")

        try:
            cook = CookInput(
                weight_lb=weight_lb,
                thaw_state=state,
                target_time_of_day=time_of_day,
                oven_temp_f=oven_temp_f,
            )
        except ValidationError as e:
            error = e.errors()[0]
            field = error["loc"][0]
            if field == "weight_lb":
                if error["type"] == "finite_number":
                    raise ValueError("Weight must be a finite number of pounds.") from None
                raise ValueError("Weight must be greater than zero.") from None
            if field == "oven_temp_f":
                if error["type"] == "finite_number":
                    raise ValueError("Oven temperature must be a finite number.") from None
                raise ValueError("Oven temperature must be greater than zero.") from None
            raise ValueError(f"Invalid input: {error['msg']}") from None

        if cook.oven_temp_f is not None and not (
            self.solver.min_temp_f <= cook.oven_temp_f <= self.solver.max_temp_f
        ):
            raise ValueError(
                f"Oven temperature must be between {format_temperature(self.solver.min_temp_f)} "
                f"and {format_temperature(self.solver.max_temp_f)}."
            )
        return cook

    def render(self, schedule: RoastSchedule) -> List[str]:
        """
        Display lines for a schedule
        Rounds durations to whole minutes and temperatures to whole degrees
        """
        if schedule.fixed is not None:
            return self._render_fixed(schedule.fixed)

        lines = [f"Ready at: {format_12_hour(schedule.target)}"]
        lines += self._render_ideal(schedule.ideal)
        lines += self._render_start_now(schedule.start_now)
        return lines

    def _hold_line(self, plan: PlanResult) -> str:
        hold_temp = self.solver.model.params.hold_temp_f
        return (
            f"Drop to {format_temperature(hold_temp)} at {format_12_hour(plan.hold_drop_time)} "
            f"and hold for {format_duration(plan.hold_minutes)}"
        )

    def _render_fixed(self, plan: PlanResult) -> List[str]:
        lines = [
            f"Total cooking time: {format_duration(plan.total_minutes)}",
            f"Required start time: {format_12_hour(plan.start_time)}",
            self._hold_line(plan),
        ]
        if plan.status is PlanStatus.LATE:
            lines.append(f"You are behind schedule by {format_duration(plan.late_minutes)}.")
            if plan.catch_up_temp_f is not None:
                lines.append(f"Suggested oven temperature to catch up: {format_temperature(plan.catch_up_temp_f)}")
            elif plan.soonest_finish is not None:
                lines.append(
                    f"Even at {format_temperature(self.solver.max_temp_f)} the soonest finish is "
                    f"{format_12_hour(plan.soonest_finish)}."
                )
        else:
            lines.append("You are on schedule.")
        return lines

    def _render_ideal(self, plan: PlanResult) -> List[str]:
        lines = [
            f"Ideal plan: {format_temperature(plan.main_phase_temp_f)} for {format_duration(plan.main_phase_minutes)}, "
            f"start at {format_12_hour(plan.start_time)} (total {format_duration(plan.total_minutes)})",
            self._hold_line(plan),
        ]
        if plan.status is PlanStatus.LATE:
            lines.append(f"The ideal start was {format_duration(plan.late_minutes)} ago.")
        return lines

    def _render_start_now(self, plan: PlanResult) -> List[str]:
        status = plan.status
        if status is PlanStatus.SOLVED:
            return [
                f"Start-now plan: {format_temperature(plan.main_phase_temp_f)} for "
                f"{format_duration(plan.main_phase_minutes)}",
                self._hold_line(plan),
            ]
        if status is PlanStatus.TOO_EARLY_DEFER_TO_IDEAL:
            return [f"Too early to start now; begin the ideal plan at {format_12_hour(plan.start_time)}."]
        if status is PlanStatus.INFEASIBLE_NO_HOLD_ROOM:
            return [
                f"Not enough time: the roast needs at least {format_duration(plan.required_minimum_minutes)}.",
                f"Soonest finish if started now: {format_12_hour(plan.soonest_finish)}",
            ]
        return [
            f"Cannot finish on time even at {format_temperature(plan.main_phase_temp_f)}.",
            f"Soonest finish if started now: {format_12_hour(plan.soonest_finish)} "
            f"(drop to hold at {format_12_hour(plan.hold_drop_time)})",
        ]
