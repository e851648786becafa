# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.
# SPDX-License-Identifier: MPL-2.0

"""
Symbolic differentiation

derivative_body() rewrites an expression tree into the tree of its
derivative w.r.t one named variable. Every other variable is a constant.
The rules are applied literally, no simplification is done here,
so the results are usually verbose: call simplify on them.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Callable, Mapping, Union

from VectorCalcEngine.enumerations import FunctionName
from VectorCalcEngine.Utils.Symbolic.symbolic import (Expr, Const, Var, Neg, Add, Sub, Mul, Div, Power, Func,
                                                      log, exp, abs_, sqrt, sin, cos)
from VectorCalcEngine.Utils.Symbolic.lambda_function import Lambda


def derivative_body(expr: Expr, with_respect_to: Union[Var, str]) -> Expr:
    """
    Derivative of an expression
    :param expr: expression tree (it is not modified)
    :param with_respect_to: Var or variable name
    :return: new expression tree
    """
    name = with_respect_to.name if isinstance(with_respect_to, Var) else with_respect_to

    # dc/dx = 0
    if isinstance(expr, Const):
        return Const(0.0)

    # dx/dx = 1, dy/dx = 0
    elif isinstance(expr, Var):
        return Const(1.0) if expr.name == name else Const(0.0)

    # (-f)' = -f'
    elif isinstance(expr, Neg):
        return Neg(derivative_body(expr.operand, name))

    # (f + g)' = f' + g'
    elif isinstance(expr, Add):
        return Add(derivative_body(expr.left, name), derivative_body(expr.right, name))

    # (f - g)' = f' - g'
    elif isinstance(expr, Sub):
        return Sub(derivative_body(expr.left, name), derivative_body(expr.right, name))

    # (f * g)' = f g' + g f'
    elif isinstance(expr, Mul):
        return Add(Mul(expr.left, derivative_body(expr.right, name)),
                   Mul(expr.right, derivative_body(expr.left, name)))

    # (f / g)' = (g f' - f g') / g^2
    elif isinstance(expr, Div):
        f = expr.left
        g = expr.right
        return Div(Sub(Mul(g, derivative_body(f, name)),
                       Mul(f, derivative_body(g, name))),
                   Power(g, Const(2.0)))

    elif isinstance(expr, Power):
        return _d_power(expr.left, expr.right, name)

    elif isinstance(expr, Func):
        return _d_func(expr, name)

    raise TypeError(f"Cannot differentiate {type(expr).__name__}")


def _d_power(f: Expr, g: Expr, name: str) -> Expr:
    """
    General exponentiation rule, valid for f > 0:
    (f ^ g)' = f^g * (g' ln(f) + g f' / f)
    """
    return Mul(Power(f, g),
               Add(Mul(derivative_body(g, name), log(f)),
                   Div(Mul(g, derivative_body(f, name)), f)))


# derivative of each single argument function w.r.t its argument (outer part of the chain rule)
_OUTER_DERIVATIVES: Mapping[FunctionName, Callable[[Expr], Expr]] = MappingProxyType({
    FunctionName.Log: lambda x: Div(Const(1.0), x),
    FunctionName.Exp: lambda x: exp(x),
    FunctionName.Abs: lambda x: Div(x, abs_(x)),
    FunctionName.Sqrt: lambda x: Div(Const(1.0), Mul(Const(2.0), sqrt(x))),
    FunctionName.Sin: lambda x: cos(x),
    FunctionName.Cos: lambda x: Neg(sin(x)),
    FunctionName.Tan: lambda x: Div(Const(1.0), Power(cos(x), Const(2.0))),
    FunctionName.Asin: lambda x: Div(Const(1.0), sqrt(Sub(Const(1.0), Power(x, Const(2.0))))),
    FunctionName.Acos: lambda x: Neg(Div(Const(1.0), sqrt(Sub(Const(1.0), Power(x, Const(2.0)))))),
    FunctionName.Atan: lambda x: Div(Const(1.0), Add(Const(1.0), Power(x, Const(2.0)))),
})


def _d_func(expr: Func, name: str) -> Expr:
    """
    Chain rule for the named functions: f(u)' = f'(u) * u'
    """
    if expr.name == FunctionName.Pow:
        return _d_power(expr.args[0], expr.args[1], name)

    outer = _OUTER_DERIVATIVES.get(expr.name, None)

    if outer is None:
        # function without a known derivative: differentiate the argument alone
        return derivative_body(expr.arg, name)

    return Mul(outer(expr.arg), derivative_body(expr.arg, name))


def derivative(lmbda: Lambda, with_respect_to: Union[Var, str], order: int = 1) -> Lambda:
    """
    n-th derivative of a Lambda
    :param lmbda: Lambda (array valued lambdas are differentiated component-wise)
    :param with_respect_to: Var or parameter name
    :param order: number of times the single variable rule is applied
    :return: Lambda with the same parameters
    """
    if order < 0:
        raise ValueError(f"The derivative order must be non negative, got {order}")

    res = lmbda
    for _ in range(order):
        res = res.map_body(lambda body: derivative_body(body, with_respect_to))

    return res
