"""Static torque and motor power sizing for 6-DoF serial arms."""
from .torque import (
    CalculationFailure,
    CalculationInput,
    CalculationOutcome,
    CalculationSuccess,
    Link,
    Motor,
    MotorResult,
    ValidationError,
    compute,
    example_input,
    joint_positions,
    joint_torque,
    link_weights,
    motor_weights,
    results_summary,
    validate_input,
)

__all__ = [
    "CalculationFailure",
    "CalculationInput",
    "CalculationOutcome",
    "CalculationSuccess",
    "Link",
    "Motor",
    "MotorResult",
    "ValidationError",
    "compute",
    "example_input",
    "joint_positions",
    "joint_torque",
    "link_weights",
    "motor_weights",
    "results_summary",
    "validate_input",
]
