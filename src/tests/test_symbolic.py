from __future__ import annotations
import json
import math
import pytest
import numpy as np
from types import MappingProxyType

import VectorCalcEngine.Utils.Symbolic.symbolic as sym
from VectorCalcEngine.enumerations import FunctionName
from VectorCalcEngine.exceptions import ArityError, UnboundVariableError, UnknownFunctionError, EmptyLambdaError
from VectorCalcEngine.Utils.Symbolic.lambda_function import Lambda

# -----------------------------------------------------------------------------
# Atomic & basic operations
# -----------------------------------------------------------------------------


def test_const_eval():
    assert sym.Const(42).eval() == 42
    assert isinstance(sym.Const(42).value, float)


def test_var_eval():
    x = sym.Var("x")
    assert x.eval(x=3.14) == 3.14
    with pytest.raises(ValueError):
        x.eval()  # missing binding
    with pytest.raises(UnboundVariableError):
        x.eval(y=1.0)


def test_binary_arithmetic():
    x, y = sym.Var("x1"), sym.Var("y")
    expr = 2 * x + y / 4 - 1
    result = expr.eval(x1=8, y=20)  # 2*8 + 20/4 - 1 = 16 + 5 - 1 = 20
    assert result == 20


def test_operators_build_nodes():
    x, y = sym.Var("x"), sym.Var("y")
    assert x + y == sym.Add(x, y)
    assert x - 1 == sym.Sub(x, sym.Const(1))
    assert 2 * x == sym.Mul(sym.Const(2), x)
    assert 1 / x == sym.Div(sym.Const(1), x)
    assert x ** 2 == sym.Power(x, sym.Const(2))
    assert 2 ** x == sym.Power(sym.Const(2), x)
    assert -x == sym.Neg(x)
    assert +x is x


def test_unary_neg_pow():
    x = sym.Var("x")
    expr = -(x ** 2)
    assert expr.eval(x=3) == -9


def test_trig_and_exp():
    x = sym.Var("x")
    expr = sym.sin(x) + sym.exp(2 * x)
    val = expr.eval(x=0)
    assert math.isclose(val, 1.0)  # sin(0)=0, exp(0)=1


def test_vectorized_eval():
    x = sym.Var("x")
    vals = (x ** 2).eval(x=np.array([1.0, 2.0, 3.0]))
    assert np.allclose(vals, [1.0, 4.0, 9.0])


def test_eval_never_raises_on_numeric_errors():
    x = sym.Var("x")
    assert math.isinf((1 / x).eval(x=0.0))
    assert math.isnan((x / x).eval(x=0.0))
    assert math.isnan(sym.sqrt(x).eval(x=-1.0))
    assert sym.log(x).eval(x=0.0) == -math.inf


def test_eval_with_var_keys():
    x, y = sym.Var("x"), sym.Var("y")
    assert sym.eval_expr(x * y, {x: 2.0, "y": 5.0}) == 10.0


# -----------------------------------------------------------------------------
# Structural equality and sharing
# -----------------------------------------------------------------------------

def test_structural_equality():
    assert sym.Var("x") == sym.Var("x")
    assert sym.Add(sym.Var("x"), sym.Const(1)) == sym.Add(sym.Var("x"), sym.Const(1.0))
    assert sym.Add(sym.Var("x"), sym.Var("y")) != sym.Sub(sym.Var("x"), sym.Var("y"))
    assert hash(sym.sin(sym.Var("x"))) == hash(sym.sin(sym.Var("x")))


def test_shared_subtrees():
    x = sym.Var("x")
    shared = sym.sin(x) * x
    a = shared + 1
    b = shared * shared
    assert a.left is shared
    assert b.left is b.right
    assert math.isclose(b.eval(x=0.5), (math.sin(0.5) * 0.5) ** 2)


# -----------------------------------------------------------------------------
# Function nodes
# -----------------------------------------------------------------------------

def test_func_arity():
    x = sym.Var("x")
    with pytest.raises(ArityError):
        sym.Func(FunctionName.Sin, (x, x))
    with pytest.raises(ArityError):
        sym.Func(FunctionName.Pow, (x,))
    with pytest.raises(ArityError):
        sym.Func("my_function", tuple())


def test_func_name_parsing():
    x = sym.Var("x")
    assert sym.Func("sin", (x,)) == sym.sin(x)
    assert sym.Func("Sin", [x]) == sym.sin(x)
    assert sym.Func("sin", (x,)).is_known()

    f = sym.Func("erf", (x,))
    assert f.name == "erf"
    assert not f.is_known()
    with pytest.raises(UnknownFunctionError):
        f.eval(x=1.0)


def test_pow_function():
    x = sym.Var("x")
    assert sym.pow_(x, 3).eval(x=2.0) == 8.0


# -----------------------------------------------------------------------------
# Variables & substitution
# -----------------------------------------------------------------------------

def test_variables_order():
    x, y, z = sym.variables("x", "y", "z")
    expr = sym.cos(y) * x + y / z
    assert expr.variables() == ["y", "x", "z"]


def test_substitution():
    x, y = sym.Var("x"), sym.Var("y")
    expr = x ** 2 + y
    replaced = expr.subs({x: y + 1})
    assert replaced.eval(y=3) == (3 + 1) ** 2 + 3  # 16 + 3 = 19
    assert expr.subs({"y": 2}).eval(x=1.0) == 3.0
    # the input is untouched
    assert expr == x ** 2 + y


# -----------------------------------------------------------------------------
# JSON round-trip
# -----------------------------------------------------------------------------

def test_serialisation_roundtrip():
    x, y = sym.Var("x"), sym.Var("y")
    expr = sym.sin(x) * (y + 3) - sym.pow_(x, y) / -y

    blob = expr.to_json()
    clone = sym.Expr.from_json(blob)

    assert clone == expr
    assert json.loads(blob)["type"] == "BinOp"


def test_unknown_serialised_type():
    with pytest.raises(ValueError):
        sym.Expr.from_dict({"type": "Matrix"})


# -----------------------------------------------------------------------------
# Immutability guarantees
# -----------------------------------------------------------------------------

def test_impl_mappingproxy():
    assert isinstance(sym.BinOp._impl, MappingProxyType)
    with pytest.raises(TypeError):
        sym.BinOp._impl["+"] = None  # mappingproxy is read-only
    with pytest.raises(TypeError):
        sym.Func._impl[FunctionName.Sin] = None


def test_frozen_dataclass_immutable():
    c = sym.Const(1)
    with pytest.raises(AttributeError):
        c.value = 2  # type: ignore[misc]


def test_bad_operand():
    with pytest.raises(TypeError):
        sym.Var("x") + "y"
    with pytest.raises(TypeError):
        sym.Var("x") * True


# -----------------------------------------------------------------------------
# String representations (non-critical, but nice to see)
# -----------------------------------------------------------------------------

def test_str():
    x = sym.Var("x")
    expr = (2 * x) / 5 - sym.cos(x)
    assert str(expr) == "(((2 * x) / 5) - cos(x))"
    assert str(sym.Const(0.5)) == "0.5"
    assert str(-x) == "-x"
    assert str(sym.pow_(x, 2)) == "pow(x, 2)"


# -----------------------------------------------------------------------------
# Lambda
# -----------------------------------------------------------------------------

def test_lambda_evaluation():
    x, y = sym.variables("x", "y")
    f = Lambda((x, y), x * sym.cos(y))
    assert f.parameters == ("x", "y")
    assert math.isclose(f(2.0, 0.0), 2.0)
    assert str(f) == "(x, y) => (x * cos(y))"
    with pytest.raises(ValueError):
        f(1.0)

    g = Lambda.array(("x", "y"), (x + y, 3))
    assert g.is_array()
    assert np.allclose(g(1.0, 2.0), [3.0, 3.0])
    assert str(g) == "(x, y) => [(x + y), 3]"


def test_empty_lambda():
    empty = Lambda.empty()
    assert empty.is_empty()
    assert str(empty) == "(empty)"
    with pytest.raises(EmptyLambdaError):
        empty()


def test_lambda_serialisation_roundtrip():
    x, y = sym.variables("x", "y")
    for f in (Lambda((x, y), sym.sin(x) / y), Lambda.array((x, y), (x, -y)), Lambda.empty()):
        assert Lambda.from_json(f.to_json()) == f
