"""Continuous-rotation servos driven by 50 Hz PWM with 14-bit duty resolution."""

from __future__ import annotations

from typing import Protocol

NUM_SERVOS = 4
SERVO_MIN_PULSE_US = 500
SERVO_MAX_PULSE_US = 2500
SERVO_STOP_PULSE_US = 1500
SERVO_SPEED_MIN = -1000
SERVO_SPEED_MAX = 1000

SERVO_FREQ_HZ = 50
SERVO_DUTY_MAX = (1 << 14) - 1
SERVO_PERIOD_US = 20000


class PwmOutput(Protocol):
    """The PWM peripheral the servos are wired to."""

    def set_duty(self, channel: int, duty: int) -> None: ...


def clamp_speed(speed: float) -> int:
    """Limit a speed to -1000..1000 as an integer."""
    return int(max(SERVO_SPEED_MIN, min(SERVO_SPEED_MAX, int(speed))))


def speed_to_duty(speed: float) -> int:
    """Map a speed to a duty value: -1000 -> 500 us, 0 -> 1500 us, 1000 -> 2500 us."""
    pulse_us = SERVO_STOP_PULSE_US + clamp_speed(speed)
    return pulse_us * (SERVO_DUTY_MAX + 1) // SERVO_PERIOD_US


class ServoBank:
    """The four servos; all start stopped."""

    def __init__(self, output: PwmOutput | None = None) -> None:
        self.output = output
        self._speeds = [0] * NUM_SERVOS
        if output is not None:
            stop_duty = speed_to_duty(0)
            for channel in range(NUM_SERVOS):
                output.set_duty(channel, stop_duty)

    def set_speed(self, servo_id: int, speed: float) -> None:
        """Drive a servo; ids outside the bank are ignored."""
        if not 0 <= servo_id < NUM_SERVOS:
            return
        speed = clamp_speed(speed)
        self._speeds[servo_id] = speed
        if self.output is not None:
            self.output.set_duty(servo_id, speed_to_duty(speed))

    def stop(self, servo_id: int) -> None:
        self.set_speed(servo_id, 0)

    def speed(self, servo_id: int) -> int:
        """The last speed commanded for a servo."""
        if not 0 <= servo_id < NUM_SERVOS:
            raise IndexError(f"servo id must be within 0..{NUM_SERVOS - 1}, got {servo_id}")
        return self._speeds[servo_id]