from dataclasses import replace

import pytest
import sympy as sp

from arm_sizing.symbolic import L, M, a, evaluate_torques, g, joint_torque_expression, m, m_p, substitutions, torque_latex
from arm_sizing.torque import ValidationError, compute, example_input


def test_symbolic_torques_agree_with_calculator():
    calc_input = example_input()

    numeric = [result.torque_total for result in compute(calc_input).results]

    assert evaluate_torques(calc_input) == pytest.approx(numeric, rel=1e-9)


def test_symbolic_torques_follow_input_changes():
    calc_input = replace(example_input(), payload_mass=12.0, link_density=7850.0)

    numeric = [result.torque_total for result in compute(calc_input).results]

    assert evaluate_torques(calc_input) == pytest.approx(numeric, rel=1e-9)


def test_end_effector_expression_has_no_motor_mass_terms():
    expr = joint_torque_expression(6)

    assert not expr.has(*m)
    assert sp.expand(expr).coeff(m_p) == sp.expand(g * (sum(L) - M[5]))


def test_base_expression_includes_outer_motors_only():
    expr = joint_torque_expression(1)

    assert not expr.has(m[0])
    assert not expr.has(a[0])
    assert all(expr.has(mass) for mass in m[1:])


def test_rejects_motor_out_of_range():
    with pytest.raises(ValueError):
        joint_torque_expression(0)
    with pytest.raises(ValueError):
        joint_torque_expression(7)


def test_latex_mentions_payload_symbol():
    assert "m_{p}" in torque_latex(3)


def test_evaluate_torques_rejects_five_links():
    calc_input = replace(example_input(), links=example_input().links[:5])

    with pytest.raises(ValidationError, match="6 links"):
        evaluate_torques(calc_input)


def test_substitutions_reject_low_safety_factor():
    calc_input = example_input()
    motors = calc_input.motors[:5] + (replace(calc_input.motors[5], safety_factor=0.9),)

    with pytest.raises(ValidationError, match="Motor 6 safety factor"):
        substitutions(replace(calc_input, motors=motors))
