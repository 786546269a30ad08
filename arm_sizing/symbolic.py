"""Closed-form joint torque expressions built with SymPy.

Each expression is the same inward sum the numeric calculator performs, written
over named symbols so it can be displayed or checked term by term:

* ``m_p``, ``rho``, ``g`` — payload mass, link density, gravity
* ``L1..L6``, ``r1..r6`` — link lengths and radii
* ``m1..m6``, ``a1..a6``, ``M1..M6`` — motor masses, body lengths, pivot positions
"""

from __future__ import annotations

from typing import Dict, List

import sympy as sp

from arm_sizing.constants import GRAVITY, JOINT_COUNT
from arm_sizing.torque import CalculationInput, validate_input

m_p, rho, g = sp.symbols("m_p rho g", nonnegative=True, real=True)
L = sp.symbols(f"L1:{JOINT_COUNT + 1}", positive=True, real=True)
r = sp.symbols(f"r1:{JOINT_COUNT + 1}", positive=True, real=True)
m = sp.symbols(f"m1:{JOINT_COUNT + 1}", nonnegative=True, real=True)
a = sp.symbols(f"a1:{JOINT_COUNT + 1}", nonnegative=True, real=True)
M = sp.symbols(f"M1:{JOINT_COUNT + 1}", nonnegative=True, real=True)


def joint_torque_expression(motor: int) -> sp.Expr:
    """Load-side static torque about ``motor`` (1 = base, 6 = end-effector)."""

    if not 1 <= motor <= JOINT_COUNT:
        raise ValueError(f"motor must be between 1 and {JOINT_COUNT}")
    j = motor - 1
    positions = [sum(L[: k + 1]) for k in range(JOINT_COUNT)]

    expr = g * m_p * (positions[-1] - M[j])
    for k in range(j, JOINT_COUNT):
        link_weight = g * rho * sp.pi * r[k] ** 2 * L[k]
        expr += link_weight * (positions[k] - M[j] - L[k] / 2)
    for k in range(j + 1, JOINT_COUNT):
        expr += g * m[k] * (M[k] + a[k] / 2 - M[j])
    return expr


def substitutions(calc_input: CalculationInput, gravity: float = GRAVITY) -> Dict[sp.Symbol, float]:
    validate_input(calc_input)
    values: Dict[sp.Symbol, float] = {m_p: calc_input.payload_mass, rho: calc_input.link_density, g: gravity}
    for k, (link, motor) in enumerate(zip(calc_input.links, calc_input.motors)):
        values[L[k]] = link.length
        values[r[k]] = link.radius
        values[m[k]] = motor.mass
        values[a[k]] = motor.body_length
        values[M[k]] = motor.pivot_position
    return values


def evaluate_torques(calc_input: CalculationInput, gravity: float = GRAVITY) -> List[float]:
    """Numeric joint torques from the symbolic expressions, end-effector motor first."""

    values = substitutions(calc_input, gravity)
    return [float(joint_torque_expression(motor).subs(values)) for motor in range(JOINT_COUNT, 0, -1)]


def torque_latex(motor: int) -> str:
    return sp.latex(joint_torque_expression(motor))
