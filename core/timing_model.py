"""
Roast Timing Model
Main phase and total cook duration as a function of oven temperature
"""
from typing import Optional
from models.roast import ModelParameters, ThawState


class TimingModel:
    """
    Closed-form cook time heuristic

    main = weight * baseline * (ref / oven)^alpha * low_temp_bonus * thaw multiplier
    total = main + hold
    """

    def __init__(self, params: Optional[ModelParameters] = None):
        """
        Args:
            params: ModelParameters instance (defaults if omitted)
        """
        self.params = params or ModelParameters()

    @property
    def hold_minutes(self) -> float:
        return self.params.hold_minutes

    def low_temp_bonus(self, oven_temp_f: float) -> float:
        """
        Collagen time penalty, a step at the threshold (inclusive)
        """
        if oven_temp_f <= self.params.low_temp_threshold_f:
            return self.params.low_temp_bonus
        return 1.0

    def state_multiplier(self, thaw_state: Optional[ThawState]) -> float:
        """
        Cook time multiplier for a thaw state

        Args:
            thaw_state: ThawState, or None

        Returns:
            Multiplier (1.0 for UNKNOWN or None)
        """
        if thaw_state is ThawState.THAWED:
            return self.params.thawed_multiplier
        if thaw_state is ThawState.PARTIAL:
            return self.params.partial_multiplier
        if thaw_state is ThawState.FROZEN:
            return self.params.frozen_multiplier
        return 1.0

    def main_phase_minutes(self, oven_temp_f: float, weight_lb: float, thaw_state: Optional[ThawState]) -> float:
        """
        Main phase duration in minutes

        Args:
            oven_temp_f: Oven temperature (°F), must be > 0
            weight_lb: Roast weight (lb)
            thaw_state: Starting thaw state

        Returns:
            Unrounded minutes
        """
        if oven_temp_f <= 0:
            raise ValueError(f"oven_temp_f must be > 0, got {oven_temp_f}")

        p = self.params
        temp_factor = (p.ref_temp_f / oven_temp_f) ** p.alpha
        return (
            weight_lb
            * p.baseline_min_per_lb
            * temp_factor
            * self.low_temp_bonus(oven_temp_f)
            * self.state_multiplier(thaw_state)
        )

    def total_minutes(self, oven_temp_f: float, weight_lb: float, thaw_state: Optional[ThawState]) -> float:
        """Main phase plus the fixed hold"""
        return self.main_phase_minutes(oven_temp_f, weight_lb, thaw_state) + self.params.hold_minutes

    def is_monotonic_decreasing(
        self,
        lower_f: float,
        upper_f: float,
        weight_lb: float = 1.0,
        thaw_state: Optional[ThawState] = ThawState.THAWED,
    ) -> bool:
        """
        True if main phase time strictly drops from lower_f to upper_f
        (both ends and either side of the low-temperature step)
        """
        probes = [lower_f, upper_f]
        threshold = self.params.low_temp_threshold_f
        if lower_f < threshold < upper_f:
            probes = [lower_f, threshold, threshold + 1e-6, upper_f]

        minutes = [self.main_phase_minutes(t, weight_lb, thaw_state) for t in probes]
        return all(a > b for a, b in zip(minutes, minutes[1:]))
