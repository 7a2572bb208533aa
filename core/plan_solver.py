"""
Plan Solver
Ideal (fixed temperature) plans and Start-Now (solved temperature) plans
"""
from datetime import datetime, timedelta
from typing import Optional
from loguru import logger
from core.target_time import next_occurrence_of
from core.timing_model import TimingModel
from models.roast import (
    CookInput,
    PlanResult,
    PlanStatus,
    RoastSchedule,
    SolverParameters,
    ThawState,
)


def _minutes_between(start: datetime, end: datetime) -> float:
    return (end - start).total_seconds() / 60.0


class PlanSolver:
    """
    Reverse-solves roast schedules against a target finish time

    Every method takes the caller's captured "now"; the solver never reads the clock.
    """

    def __init__(self, model: Optional[TimingModel] = None, settings: Optional[SolverParameters] = None):
        """
        Args:
            model: TimingModel instance
            settings: SolverParameters instance
        """
        self.model = model or TimingModel()
        self.settings = settings or SolverParameters()

        p = self.model.params
        # Bisection needs a single feasibility threshold over the bounds
        if not self.model.is_monotonic_decreasing(p.min_temp_f, p.max_temp_f):
            raise ValueError(
                f"Timing model is not monotonically decreasing over "
                f"[{p.min_temp_f}, {p.max_temp_f}]°F; bisection cannot be used"
            )
        if not p.min_temp_f <= self.settings.ideal_temp_f <= p.max_temp_f:
            raise ValueError(
                f"Ideal temperature {self.settings.ideal_temp_f}°F is outside "
                f"[{p.min_temp_f}, {p.max_temp_f}]°F"
            )

    @property
    def min_temp_f(self) -> float:
        return self.model.params.min_temp_f

    @property
    def max_temp_f(self) -> float:
        return self.model.params.max_temp_f

    def ideal_plan(
        self,
        weight_lb: float,
        thaw_state: ThawState,
        target: datetime,
        now: datetime,
        temp_f: Optional[float] = None,
    ) -> PlanResult:
        """
        Plan at a fixed main phase temperature, working back from the target

        Args:
            weight_lb: Roast weight (lb)
            thaw_state: Starting thaw state
            target: Finish timestamp
            now: Captured current time
            temp_f: Main phase temperature (preferred ideal temperature if None)

        Returns:
            PlanResult with status ON_SCHEDULE or LATE
        """
        if temp_f is None:
            temp_f = self.settings.ideal_temp_f

        main = self.model.main_phase_minutes(temp_f, weight_lb, thaw_state)
        hold = self.model.hold_minutes
        total = main + hold
        start = target - timedelta(minutes=total)

        late_minutes = 0.0
        status = PlanStatus.ON_SCHEDULE
        if start < now:
            status = PlanStatus.LATE
            late_minutes = _minutes_between(start, now)

        return PlanResult(
            status=status,
            feasible=True,
            main_phase_temp_f=temp_f,
            main_phase_minutes=main,
            hold_minutes=hold,
            total_minutes=total,
            start_time=start,
            hold_drop_time=target - timedelta(minutes=hold),
            finish_time=target,
            late_minutes=late_minutes,
        )

    def solve_temperature(self, weight_lb: float, thaw_state: ThawState, available_minutes: float) -> float:
        """
        Lowest temperature within bounds whose total time fits the window
        Assumes total_minutes(max_temp_f) <= available_minutes

        Args:
            weight_lb: Roast weight (lb)
            thaw_state: Starting thaw state
            available_minutes: Minutes until the target

        Returns:
            Temperature (°F) in [min_temp_f, max_temp_f]
        """
        lo, hi = self.min_temp_f, self.max_temp_f
        if self.model.total_minutes(lo, weight_lb, thaw_state) <= available_minutes:
            return lo

        for _ in range(self.settings.bisection_iterations):
            mid = (lo + hi) / 2.0
            if self.model.total_minutes(mid, weight_lb, thaw_state) <= available_minutes:
                hi = mid
            else:
                lo = mid
        return hi

    def start_now_plan(
        self,
        weight_lb: float,
        thaw_state: ThawState,
        target: datetime,
        now: datetime,
    ) -> PlanResult:
        """
        Plan that starts immediately and solves for the oven temperature

        Args:
            weight_lb: Roast weight (lb)
            thaw_state: Starting thaw state
            target: Finish timestamp
            now: Captured current time

        Returns:
            PlanResult with one of SOLVED, INFEASIBLE_NO_HOLD_ROOM,
            INFEASIBLE_EVEN_AT_MAX, TOO_EARLY_DEFER_TO_IDEAL
        """
        return self._evaluate_window(weight_lb, thaw_state, target, now, self.settings.defer_when_early)

    def fixed_temperature_plan(
        self,
        weight_lb: float,
        thaw_state: ThawState,
        oven_temp_f: float,
        target: datetime,
        now: datetime,
    ) -> PlanResult:
        """
        Plan at the caller's oven temperature, with a catch-up temperature when late

        Returns:
            PlanResult; when LATE, catch_up_temp_f is set if the deadline can still
            be met, otherwise soonest_finish is set
        """
        if not self.min_temp_f <= oven_temp_f <= self.max_temp_f:
            raise ValueError(
                f"oven_temp_f must be within [{self.min_temp_f}, {self.max_temp_f}]°F, got {oven_temp_f}"
            )

        plan = self.ideal_plan(weight_lb, thaw_state, target, now, temp_f=oven_temp_f)
        if plan.status is not PlanStatus.LATE:
            return plan

        window = self._evaluate_window(weight_lb, thaw_state, target, now, allow_defer=False)
        if window.status is PlanStatus.SOLVED:
            logger.debug(f"Behind by {plan.late_minutes:.1f} min, catch-up at {window.main_phase_temp_f:.1f}°F")
            return plan.model_copy(update={"catch_up_temp_f": window.main_phase_temp_f})

        logger.debug(f"Behind by {plan.late_minutes:.1f} min, no catch-up temperature ({window.status.value})")
        return plan.model_copy(update={"soonest_finish": window.soonest_finish})

    def plan(self, cook: CookInput, now: datetime) -> RoastSchedule:
        """
        Resolve the target time and produce the plans for one request

        Args:
            cook: Validated CookInput
            now: Captured current time

        Returns:
            RoastSchedule (fixed plan if cook.oven_temp_f is set, else ideal + start_now)
        """
        target = next_occurrence_of(cook.target_time_of_day, now)

        if cook.oven_temp_f is not None:
            fixed = self.fixed_temperature_plan(cook.weight_lb, cook.thaw_state, cook.oven_temp_f, target, now)
            return RoastSchedule(now=now, target=target, fixed=fixed)

        ideal = self.ideal_plan(cook.weight_lb, cook.thaw_state, target, now)
        start_now = self.start_now_plan(cook.weight_lb, cook.thaw_state, target, now)
        return RoastSchedule(now=now, target=target, ideal=ideal, start_now=start_now)

    def _evaluate_window(
        self,
        weight_lb: float,
        thaw_state: ThawState,
        target: datetime,
        now: datetime,
        allow_defer: bool,
    ) -> PlanResult:
        available = _minutes_between(now, target)
        hold = self.model.hold_minutes
        fastest_main = self.model.main_phase_minutes(self.max_temp_f, weight_lb, thaw_state)
        soonest_finish = now + timedelta(minutes=fastest_main + hold)

        if available <= hold + self.settings.hold_safety_margin_minutes:
            logger.debug(f"Window of {available:.1f} min leaves no room for the {hold:.0f} min hold")
            return PlanResult(
                status=PlanStatus.INFEASIBLE_NO_HOLD_ROOM,
                feasible=False,
                hold_minutes=hold,
                required_minimum_minutes=fastest_main + hold,
                soonest_finish=soonest_finish,
                hold_drop_time=soonest_finish - timedelta(minutes=hold),
            )

        needed_main = available - hold
        if fastest_main > needed_main:
            logger.debug(
                f"Main phase needs {fastest_main:.1f} min even at {self.max_temp_f:.0f}°F, "
                f"only {needed_main:.1f} min available"
            )
            return PlanResult(
                status=PlanStatus.INFEASIBLE_EVEN_AT_MAX,
                feasible=False,
                main_phase_temp_f=self.max_temp_f,
                main_phase_minutes=fastest_main,
                hold_minutes=hold,
                total_minutes=fastest_main + hold,
                start_time=now,
                required_minimum_minutes=fastest_main + hold,
                soonest_finish=soonest_finish,
                hold_drop_time=soonest_finish - timedelta(minutes=hold),
            )

        slowest_total = self.model.total_minutes(self.min_temp_f, weight_lb, thaw_state)
        if allow_defer and available > slowest_total + self.settings.too_early_buffer_minutes:
            ideal = self.ideal_plan(weight_lb, thaw_state, target, now)
            logger.debug(
                f"Window of {available:.1f} min exceeds slowest cook ({slowest_total:.1f} min) "
                f"by more than the buffer, deferring to ideal start"
            )
            return ideal.model_copy(update={"status": PlanStatus.TOO_EARLY_DEFER_TO_IDEAL})

        temp_f = self.solve_temperature(weight_lb, thaw_state, available)
        main = self.model.main_phase_minutes(temp_f, weight_lb, thaw_state)
        logger.debug(f"Solved start-now temperature {temp_f:.2f}°F for {available:.1f} min window")
        return PlanResult(
            status=PlanStatus.SOLVED,
            feasible=True,
            main_phase_temp_f=temp_f,
            main_phase_minutes=main,
            hold_minutes=hold,
            total_minutes=main + hold,
            start_time=now,
            hold_drop_time=target - timedelta(minutes=hold),
            finish_time=target,
        )
