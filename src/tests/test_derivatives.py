from __future__ import annotations
import math
import pytest
from typing import Callable

import VectorCalcEngine.Utils.Symbolic.symbolic as sym
from VectorCalcEngine.Utils.Symbolic.derivatives import derivative_body, derivative
from VectorCalcEngine.Utils.Symbolic.lambda_function import Lambda


def _numdiff(f: Callable[[float], float], x: float, h: float = 1e-6) -> float:
    """Central finite-difference derivative."""
    return (f(x + h) - f(x - h)) / (2 * h)


# -----------------------------------------------------------------------------
# Leaves
# -----------------------------------------------------------------------------

@pytest.mark.parametrize("value", [0.0, 1.0, -3.5, 1e10, math.pi])
def test_constant_rule(value):
    assert derivative_body(sym.Const(value), "x") == sym.Const(0)


def test_variable_rule():
    assert derivative_body(sym.Var("x"), "x") == sym.Const(1)
    assert derivative_body(sym.Var("y"), "x") == sym.Const(0)
    assert derivative_body(sym.Var("x"), sym.Var("x")) == sym.Const(1)


# -----------------------------------------------------------------------------
# Structure of the basic rules
# -----------------------------------------------------------------------------

def test_negate_rule():
    x = sym.Var("x")
    assert derivative_body(-x, "x") == sym.Neg(sym.Const(1))


def test_sum_and_difference_rules():
    x, y = sym.Var("x"), sym.Var("y")
    assert derivative_body(x + y, "x") == sym.Add(sym.Const(1), sym.Const(0))
    assert derivative_body(x - y, "y") == sym.Sub(sym.Const(0), sym.Const(1))


def test_product_rule():
    x, y = sym.Var("x"), sym.Var("y")
    # (f g)' = f g' + g f'
    expected = sym.Add(sym.Mul(x, sym.Const(0)), sym.Mul(y, sym.Const(1)))
    assert derivative_body(x * y, "x") == expected


def test_quotient_rule():
    x, y = sym.Var("x"), sym.Var("y")
    d = derivative_body(x / y, "y")  # -x / y^2
    for xv, yv in [(1.0, 2.0), (-3.0, 0.5)]:
        assert math.isclose(d.eval(x=xv, y=yv), -xv / yv ** 2)


def test_input_is_not_modified():
    x = sym.Var("x")
    expr = sym.sin(x) * x ** 2
    copy = sym.Expr.from_json(expr.to_json())
    derivative_body(expr, "x")
    assert expr == copy


# -----------------------------------------------------------------------------
# Elementary functions: chain rule against finite differences
# -----------------------------------------------------------------------------

@pytest.mark.parametrize(
    "sym_func, math_func, point",
    [
        (sym.sin, math.sin, 0.3),
        (sym.cos, math.cos, 0.3),
        (sym.tan, math.tan, 0.3),
        (sym.exp, math.exp, 0.3),
        (sym.log, math.log, 1.3),
        (sym.sqrt, math.sqrt, 1.3),
        (sym.abs_, abs, -0.7),
        (sym.asin, math.asin, 0.3),
        (sym.acos, math.acos, 0.3),
        (sym.atan, math.atan, 0.3),
    ],
)
def test_elementary_functions(sym_func, math_func, point):
    x = sym.Var("x")
    # composed with 2x to exercise the chain factor
    expr = sym_func(2 * x)
    d_expr = derivative_body(expr, "x")
    numeric = _numdiff(lambda t: math_func(2 * t), point / 2)
    assert math.isclose(d_expr.eval(x=point / 2), numeric, rel_tol=1e-5)
    # the simplified derivative has the same value
    assert math.isclose(d_expr.simplify().eval(x=point / 2), numeric, rel_tol=1e-5)


def test_derivative_of_other_variable_function_is_zero():
    x, y = sym.Var("x"), sym.Var("y")
    d = derivative_body(sym.sin(y) * sym.exp(y), "x")
    assert d.eval(x=0.1, y=0.2) == 0.0


# -----------------------------------------------------------------------------
# General power rule (u(x) ** v(x))
# -----------------------------------------------------------------------------

def test_general_power_rule():
    x = sym.Var("x")
    expr = x ** x
    d = derivative_body(expr, "x").simplify()  # x**x * (log(x) + 1)
    expected = lambda t: t ** t * (math.log(t) + 1)  # noqa: E731
    assert math.isclose(d.eval(x=2.0), expected(2.0), rel_tol=1e-9)


def test_pow_call_uses_power_rule():
    x = sym.Var("x")
    d_call = derivative_body(sym.pow_(x, 3), "x")
    d_node = derivative_body(x ** 3, "x")
    assert d_call == d_node
    assert math.isclose(d_call.eval(x=1.3), 3 * 1.3 ** 2)


def test_exponential_base():
    x = sym.Var("x")
    d = derivative_body(2 ** x, "x")
    assert math.isclose(d.eval(x=1.5), 2 ** 1.5 * math.log(2))


# -----------------------------------------------------------------------------
# Higher-order derivatives
# -----------------------------------------------------------------------------

def test_higher_order_derivatives():
    x = sym.Var("x")
    expr = x ** 3
    second = sym.diff(expr, x, 2).simplify()
    third = expr.diff(x, 3)
    assert math.isclose(second.eval(x=4), 6 * 4, rel_tol=1e-9)
    assert math.isclose(third.eval(x=2), 6, rel_tol=1e-9)


def test_zero_order_is_identity():
    x = sym.Var("x")
    assert sym.diff(sym.sin(x), x, 0) == sym.sin(x)
    with pytest.raises(ValueError):
        sym.diff(x, x, -1)


# -----------------------------------------------------------------------------
# Linearity
# -----------------------------------------------------------------------------

@pytest.mark.parametrize("point", [(0.5, 0.2), (1.0, 1.0), (2.5, -1.5)])
def test_linearity(point):
    x, y = sym.Var("x"), sym.Var("y")
    f = x ** 2 * y
    g = sym.sin(x * y) / (1 + x)
    lhs = derivative_body(f + g, "x")
    rhs = sym.Add(derivative_body(f, "x"), derivative_body(g, "x"))
    assert lhs.eval(x=point[0], y=point[1]) == rhs.eval(x=point[0], y=point[1])


# -----------------------------------------------------------------------------
# Permissive fallback for functions without a known derivative
# -----------------------------------------------------------------------------

def test_unknown_function_differentiates_argument():
    x = sym.Var("x")
    f = sym.Func("erf", (x ** 2,))
    assert derivative_body(f, "x") == derivative_body(x ** 2, "x")


def test_not_an_expression():
    with pytest.raises(TypeError):
        derivative_body(3.0, "x")


# -----------------------------------------------------------------------------
# Lambda level
# -----------------------------------------------------------------------------

def test_lambda_derivative_keeps_parameters():
    x, y = sym.Var("x"), sym.Var("y")
    f = Lambda(("x", "y"), x * sym.cos(y))
    df_dy = derivative(f, "y")
    assert df_dy.parameters == ("x", "y")
    assert math.isclose(df_dy(2.0, 0.5), -2.0 * math.sin(0.5))


def test_lambda_nth_derivative():
    x = sym.Var("x")
    f = Lambda(("x",), sym.sin(x))
    d4 = f.derivative("x", order=4)
    assert math.isclose(d4(0.7), math.sin(0.7), rel_tol=1e-12)
    assert d4.simplify().parameters == ("x",)


def test_empty_lambda_derivative():
    assert derivative(Lambda.empty(), "x").is_empty()
