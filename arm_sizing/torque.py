from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, List, Mapping, Sequence, Tuple, Union

import numpy as np

from arm_sizing.constants import GRAVITY, JOINT_COUNT, PI, POWER_CONVERSION, POWER_SCALE

logger = logging.getLogger(__name__)


class ValidationError(ValueError):
    """Rejected calculation input; ``message`` names the field and 1-based index."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


@dataclass(frozen=True)
class Link:
    length: float
    radius: float


@dataclass(frozen=True)
class Motor:
    mass: float
    body_length: float
    pivot_position: float
    rpm: float
    gear_ratio: float
    safety_factor: float


@dataclass(frozen=True)
class CalculationInput:
    """Arm description: payload, link material and six links/motors from the base outward."""

    payload_mass: float
    link_density: float
    links: Tuple[Link, ...]
    motors: Tuple[Motor, ...]

    @classmethod
    def from_mapping(cls, record: Mapping[str, Any]) -> "CalculationInput":
        """Build an input from a form record.

        The record uses the form's field names: ``m_payload``, ``density``,
        ``links`` (``length``, ``radius``) and ``motors`` (``mass``,
        ``bodyLength``, ``pivotPosition``, ``rpm``, ``gearRatio``,
        ``safetyFactor``). Range checks are left to :func:`validate_input`.
        """

        links = tuple(
            Link(
                length=_number(entry, "length", f"Link {i} length"),
                radius=_number(entry, "radius", f"Link {i} radius"),
            )
            for i, entry in enumerate(_entries(record, "links"), start=1)
        )
        motors = tuple(
            Motor(
                mass=_number(entry, "mass", f"Motor {i} mass"),
                body_length=_number(entry, "bodyLength", f"Motor {i} body length"),
                pivot_position=_number(entry, "pivotPosition", f"Motor {i} pivot position"),
                rpm=_number(entry, "rpm", f"Motor {i} RPM"),
                gear_ratio=_number(entry, "gearRatio", f"Motor {i} gear ratio"),
                safety_factor=_number(entry, "safetyFactor", f"Motor {i} safety factor"),
            )
            for i, entry in enumerate(_entries(record, "motors"), start=1)
        )
        return cls(
            payload_mass=_number(record, "m_payload", "Payload mass"),
            link_density=_number(record, "density", "Link density"),
            links=links,
            motors=motors,
        )


@dataclass(frozen=True)
class MotorResult:
    motor: int
    torque_total: float
    torque_with_safety_factor: float
    torque_before_gearing: float
    torque_before_gearing_with_safety_factor: float
    power: float
    power_with_safety_factor: float


@dataclass(frozen=True)
class CalculationSuccess:
    results: Tuple[MotorResult, ...]


@dataclass(frozen=True)
class CalculationFailure:
    error: ValidationError

    @property
    def message(self) -> str:
        return self.error.message


CalculationOutcome = Union[CalculationSuccess, CalculationFailure]


def _entries(record: Mapping[str, Any], key: str) -> Sequence[Mapping[str, Any]]:
    try:
        entries = record[key]
    except (KeyError, TypeError):
        raise ValidationError(f"Missing '{key}' in input") from None
    if isinstance(entries, (str, bytes)) or not isinstance(entries, Sequence):
        raise ValidationError(f"'{key}' must be a list")
    return entries


def _number(record: Mapping[str, Any], key: str, label: str) -> float:
    try:
        value = record[key]
    except (KeyError, TypeError):
        raise ValidationError(f"{label} is missing") from None
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{label} must be a number") from None


def validate_input(calc_input: CalculationInput) -> None:
    """Raise :class:`ValidationError` for the first constraint the input violates."""

    if calc_input.payload_mass < 0:
        raise ValidationError("Payload mass cannot be negative")
    if calc_input.link_density < 0:
        raise ValidationError("Link density cannot be negative")
    if len(calc_input.links) != JOINT_COUNT:
        raise ValidationError(f"Exactly {JOINT_COUNT} links are required")
    if len(calc_input.motors) != JOINT_COUNT:
        raise ValidationError(f"Exactly {JOINT_COUNT} motors are required")

    for idx, (link, motor) in enumerate(zip(calc_input.links, calc_input.motors), start=1):
        if link.length <= 0:
            raise ValidationError(f"Link {idx} length must be positive")
        if link.radius <= 0:
            raise ValidationError(f"Link {idx} radius must be positive")
        if motor.mass < 0:
            raise ValidationError(f"Motor {idx} mass cannot be negative")
        if motor.body_length < 0:
            raise ValidationError(f"Motor {idx} body length cannot be negative")
        if motor.pivot_position < 0:
            raise ValidationError(f"Motor {idx} pivot position cannot be negative")
        if motor.rpm < 0:
            raise ValidationError(f"Motor {idx} RPM cannot be negative")
        if motor.gear_ratio < 0:
            raise ValidationError(f"Motor {idx} gear ratio cannot be negative")
        if motor.safety_factor < 1:
            raise ValidationError(f"Motor {idx} safety factor must be at least 1")


def joint_positions(links: Sequence[Link]) -> np.ndarray:
    """Distance from the base to the far end of each link."""

    return np.cumsum([link.length for link in links], dtype=float)


def link_weights(links: Sequence[Link], density: float, gravity: float = GRAVITY) -> np.ndarray:
    """Weight of each link treated as a solid cylinder."""

    radii = np.array([link.radius for link in links], dtype=float)
    lengths = np.array([link.length for link in links], dtype=float)
    return gravity * density * PI * radii**2 * lengths


def motor_weights(motors: Sequence[Motor], gravity: float = GRAVITY) -> np.ndarray:
    return gravity * np.array([motor.mass for motor in motors], dtype=float)


def _static_torque(
    joint: int,
    positions: np.ndarray,
    links: Sequence[Link],
    motors: Sequence[Motor],
    w_links: np.ndarray,
    w_motors: np.ndarray,
    w_payload: float,
) -> float:
    pivot = motors[joint].pivot_position
    torque = w_payload * (positions[-1] - pivot)
    for k in range(joint, len(links)):
        torque += w_links[k] * (positions[k] - pivot - links[k].length / 2)
    for k in range(joint + 1, len(motors)):
        torque += w_motors[k] * (motors[k].pivot_position + motors[k].body_length / 2 - pivot)
    return float(torque)


def joint_torque(calc_input: CalculationInput, joint: int, gravity: float = GRAVITY) -> float:
    """Load-side static torque about a single joint (0 = base motor).

    Sums the payload at the arm tip, every link from ``joint`` outward acting at
    its midpoint, and every motor beyond ``joint`` acting at its body midpoint.
    Raises :class:`ValidationError` for input :func:`compute` would reject.
    """

    validate_input(calc_input)
    if not 0 <= joint < len(calc_input.motors):
        raise IndexError(f"joint index {joint} out of range")
    return _static_torque(
        joint,
        joint_positions(calc_input.links),
        calc_input.links,
        calc_input.motors,
        link_weights(calc_input.links, calc_input.link_density, gravity),
        motor_weights(calc_input.motors, gravity),
        gravity * calc_input.payload_mass,
    )


def compute(calc_input: CalculationInput, gravity: float = GRAVITY) -> CalculationOutcome:
    """Static torque and power requirement for every motor, end-effector motor first.

    Returns :class:`CalculationFailure` for the first invalid field instead of
    raising. A zero gear ratio or rpm yields zero for the derived motor-side
    torque or power.
    """

    try:
        validate_input(calc_input)
    except ValidationError as err:
        logger.warning(f"Torque calculation rejected: {err.message}")
        return CalculationFailure(err)

    links = calc_input.links
    motors = calc_input.motors
    positions = joint_positions(links)
    w_links = link_weights(links, calc_input.link_density, gravity)
    w_motors = motor_weights(motors, gravity)
    w_payload = gravity * calc_input.payload_mass

    results: List[MotorResult] = []
    for joint in reversed(range(len(motors))):
        motor = motors[joint]
        total = _static_torque(joint, positions, links, motors, w_links, w_motors, w_payload)
        before = total / motor.gear_ratio if motor.gear_ratio != 0 else 0.0
        power = before * motor.rpm * POWER_SCALE / POWER_CONVERSION if motor.rpm != 0 else 0.0
        logger.debug(f"Motor {joint + 1}: torque={total:.4f} N·m, motor-side={before:.4f} N·m, power={power:.2f} W")
        results.append(
            MotorResult(
                motor=joint + 1,
                torque_total=total,
                torque_with_safety_factor=motor.safety_factor * total,
                torque_before_gearing=before,
                torque_before_gearing_with_safety_factor=motor.safety_factor * before,
                power=power,
                power_with_safety_factor=motor.safety_factor * power,
            )
        )
    return CalculationSuccess(tuple(results))


def results_summary(results: Sequence[MotorResult]) -> List[dict]:
    """Table rows numbered 1..n in output order."""

    summary = []
    for idx, result in enumerate(results, start=1):
        summary.append(
            {
                "Motor": idx,
                "Torque Total (Nm)": result.torque_total,
                "Torque SF (Nm)": result.torque_with_safety_factor,
                "Torque Before (Nm)": result.torque_before_gearing,
                "Torque Before SF (Nm)": result.torque_before_gearing_with_safety_factor,
                "Power (W)": result.power,
                "Power SF (W)": result.power_with_safety_factor,
            }
        )
    return summary


def example_input() -> CalculationInput:
    """Aluminium reference arm with a 5 kg payload."""

    links = (
        Link(0.5, 0.02),
        Link(0.4, 0.02),
        Link(0.3, 0.015),
        Link(0.3, 0.015),
        Link(0.2, 0.01),
        Link(0.1, 0.01),
    )
    motors = (
        Motor(mass=2.0, body_length=0.1, pivot_position=0.0, rpm=100, gear_ratio=10, safety_factor=1.5),
        Motor(mass=1.5, body_length=0.08, pivot_position=0.5, rpm=120, gear_ratio=8, safety_factor=1.5),
        Motor(mass=1.2, body_length=0.07, pivot_position=0.9, rpm=150, gear_ratio=6, safety_factor=1.5),
        Motor(mass=1.0, body_length=0.06, pivot_position=1.2, rpm=180, gear_ratio=5, safety_factor=1.5),
        Motor(mass=0.8, body_length=0.05, pivot_position=1.5, rpm=200, gear_ratio=4, safety_factor=1.5),
        Motor(mass=0.5, body_length=0.04, pivot_position=1.7, rpm=250, gear_ratio=3, safety_factor=1.5),
    )
    return CalculationInput(payload_mass=5.0, link_density=2700.0, links=links, motors=motors)
