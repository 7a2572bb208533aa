"""
Roast Models
Value types shared by the timing model, the plan solver and the handler
"""
from datetime import datetime, time
from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator


class ThawState(str, Enum):
    """
    Starting thaw state of the roast
    UNKNOWN is the explicit fallback for anything unrecognized
    """
    THAWED = "thawed"
    PARTIAL = "partial"
    FROZEN = "frozen"
    UNKNOWN = "unknown"

    @classmethod
    def coerce(cls, value) -> "ThawState":
        """
        Map a raw value onto a thaw state, never failing

        Args:
            value: ThawState, string or None

        Returns:
            Matching ThawState, or UNKNOWN
        """
        if isinstance(value, cls):
            return value
        if value is None:
            return cls.UNKNOWN
        key = str(value).strip().lower()
        for state in cls:
            if state.value == key:
                return state
        return cls.UNKNOWN


class PlanStatus(str, Enum):
    """Result state of a single plan"""
    ON_SCHEDULE = "on_schedule"
    LATE = "late"
    SOLVED = "solved"
    INFEASIBLE_NO_HOLD_ROOM = "infeasible_no_hold_room"
    INFEASIBLE_EVEN_AT_MAX = "infeasible_even_at_max"
    TOO_EARLY_DEFER_TO_IDEAL = "too_early_defer_to_ideal"


class ModelParameters(BaseModel):
    """
    Constants of the roast timing model
    """
    model_config = ConfigDict(frozen=True)

    ref_temp_f: float = 325.0
    baseline_min_per_lb: float = 70.0
    alpha: float = 1.3
    hold_temp_f: float = 180.0
    hold_minutes: float = 60.0
    low_temp_threshold_f: float = 250.0
    low_temp_bonus: float = 1.15
    thawed_multiplier: float = 1.00
    partial_multiplier: float = 1.25
    frozen_multiplier: float = 1.50
    min_temp_f: float = 200.0
    max_temp_f: float = 500.0


class SolverParameters(BaseModel):
    """
    Constants of the plan solver
    """
    model_config = ConfigDict(frozen=True)

    bisection_iterations: int = Field(default=40, ge=1)
    hold_safety_margin_minutes: float = Field(default=5.0, ge=0, allow_inf_nan=False)
    too_early_buffer_minutes: float = Field(default=30.0, ge=0, allow_inf_nan=False)
    defer_when_early: bool = True
    # Must stay inside the search bounds of ModelParameters
    ideal_temp_f: float = Field(default=240.0, ge=200.0, le=500.0)


class CookInput(BaseModel):
    """
    Validated caller input for one planning request
    """
    model_config = ConfigDict(frozen=True)

    weight_lb: float = Field(gt=0, allow_inf_nan=False)
    thaw_state: ThawState = ThawState.UNKNOWN
    target_time_of_day: time
    oven_temp_f: Optional[float] = Field(default=None, gt=0, allow_inf_nan=False)

    @field_validator("thaw_state", mode="before")
    @classmethod
    def _coerce_thaw_state(cls, value):
        return ThawState.coerce(value)


class PlanResult(BaseModel):
    """
    Outcome of one solve call
    Durations and temperatures are unrounded
    """
    model_config = ConfigDict(frozen=True)

    status: PlanStatus
    feasible: bool
    main_phase_temp_f: Optional[float] = None
    main_phase_minutes: Optional[float] = None
    hold_minutes: float
    total_minutes: Optional[float] = None
    start_time: Optional[datetime] = None
    hold_drop_time: Optional[datetime] = None
    finish_time: Optional[datetime] = None
    late_minutes: float = 0.0
    required_minimum_minutes: Optional[float] = None
    soonest_finish: Optional[datetime] = None
    catch_up_temp_f: Optional[float] = None


class RoastSchedule(BaseModel):
    """
    Plans produced for one request
    Either fixed is set, or ideal and start_now are
    """
    model_config = ConfigDict(frozen=True)

    now: datetime
    target: datetime
    ideal: Optional[PlanResult] = None
    start_now: Optional[PlanResult] = None
    fixed: Optional[PlanResult] = None
