"""PID controller with integral clamping and derivative taken on the measurement."""

from __future__ import annotations


class PidController:
    """Proportional-integral-derivative controller with clamped output."""

    def __init__(self) -> None:
        self.kp = 1.0
        self.ki = 0.0
        self.kd = 0.0
        self.output_min = -1000.0
        self.output_max = 1000.0
        self.integral_limit = 500.0
        self._integral = 0.0
        self._prev_measurement = 0.0
        self._first_update = True

    def set_gains(self, kp: float, ki: float, kd: float) -> None:
        self.kp = float(kp)
        self.ki = float(ki)
        self.kd = float(kd)

    def set_output_limits(self, minimum: float, maximum: float) -> None:
        self.output_min = float(minimum)
        self.output_max = float(maximum)

    def set_integral_limit(self, limit: float) -> None:
        self.integral_limit = float(limit)

    def reset(self) -> None:
        """Forget the accumulated integral and the previous measurement."""
        self._integral = 0.0
        self._prev_measurement = 0.0
        self._first_update = True

    def update(self, setpoint: float, measurement: float, dt: float) -> float:
        """One control step; a non-positive dt yields 0.0 and changes nothing."""
        if dt <= 0.0:
            return 0.0

        error = setpoint - measurement
        p_term = self.kp * error

        self._integral += self.ki * error * dt
        self._integral = max(-self.integral_limit, min(self.integral_limit, self._integral))

        # Differentiating the measurement rather than the error avoids a kick
        # when the setpoint jumps.
        d_term = 0.0
        if not self._first_update:
            d_term = -self.kd * (measurement - self._prev_measurement) / dt
        self._prev_measurement = measurement
        self._first_update = False

        output = p_term + self._integral + d_term
        if output > self.output_max:
            return self.output_max
        if output < self.output_min:
            return self.output_min
        return output