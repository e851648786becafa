# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.
# SPDX-License-Identifier: MPL-2.0

"""
Partial simplification of expression trees

simplify_body() is a single bottom-up pass: the children are simplified
first, then one local identity is applied to the node (constant folding,
x + 0 = x, 1 * x = x, x / x = 1, ln(e^x) = x, ...).
It does not distribute, factor or apply trigonometric identities.
Divisions by zero and 0^0 are left untouched, they become inf / nan
only when the expression is evaluated.
"""

from __future__ import annotations

from typing import Callable

import numpy as np

from VectorCalcEngine.enumerations import FunctionName
from VectorCalcEngine.Utils.Symbolic.symbolic import Expr, Const, Var, Neg, Add, Sub, Mul, Div, Power, Func
from VectorCalcEngine.Utils.Symbolic.lambda_function import Lambda


def _is_const(expr: Expr) -> bool:
    return isinstance(expr, Const)


def _is_zero(expr: Expr) -> bool:
    return isinstance(expr, Const) and expr.value == 0.0


def _is_one(expr: Expr) -> bool:
    return isinstance(expr, Const) and expr.value == 1.0


def _fold(fn: Callable, *args: Const) -> Const:
    """
    Numeric evaluation of a function of constants.
    inf and nan results are kept as constants.
    """
    with np.errstate(all="ignore"):
        return Const(float(fn(*[np.float64(a.value) for a in args])))


def simplify_body(expr: Expr) -> Expr:
    """
    Simplify an expression
    :param expr: expression tree (it is not modified)
    :return: new expression tree
    """
    if isinstance(expr, (Const, Var)):
        return expr

    elif isinstance(expr, Neg):
        return _simplify_negate(expr)

    elif isinstance(expr, Add):
        return _simplify_add(expr)

    elif isinstance(expr, Sub):
        return _simplify_subtract(expr)

    elif isinstance(expr, Mul):
        return _simplify_multiply(expr)

    elif isinstance(expr, Div):
        return _simplify_divide(expr)

    elif isinstance(expr, Power):
        return _simplify_power(simplify_body(expr.left), simplify_body(expr.right),
                               rebuild=lambda a, b: Power(a, b))

    elif isinstance(expr, Func):
        return _simplify_func(expr)

    raise TypeError(f"Cannot simplify {type(expr).__name__}")


def _simplify_negate(expr: Neg) -> Expr:
    """
    -c => constant -c
    """
    operand = simplify_body(expr.operand)
    if isinstance(operand, Const):
        return Const(-operand.value)
    return Neg(operand)


def _simplify_add(expr: Add) -> Expr:
    """
    c1 + c2 => constant
    0 + y => y
    x + 0 => x
    """
    left = simplify_body(expr.left)
    right = simplify_body(expr.right)

    if isinstance(left, Const):
        if isinstance(right, Const):
            return _fold(np.add, left, right)
        if left.value == 0.0:
            return right

    elif isinstance(right, Const):
        if right.value == 0.0:
            return left

    return Add(left, right)


def _simplify_subtract(expr: Sub) -> Expr:
    """
    c1 - c2 => constant
    0 - y => -y
    x - 0 => x
    """
    left = simplify_body(expr.left)
    right = simplify_body(expr.right)

    if isinstance(left, Const):
        if isinstance(right, Const):
            return _fold(np.subtract, left, right)
        if left.value == 0.0:
            return Neg(right)

    elif isinstance(right, Const):
        if right.value == 0.0:
            return left

    return Sub(left, right)


def _simplify_multiply(expr: Mul) -> Expr:
    """
    c1 * c2 => constant
    0 * y, x * 0 => 0
    1 * y => y
    x * 1 => x
    """
    left = simplify_body(expr.left)
    right = simplify_body(expr.right)

    if isinstance(left, Const):
        if isinstance(right, Const):
            return _fold(np.multiply, left, right)
        if left.value == 0.0:
            return Const(0.0)
        if left.value == 1.0:
            return right

    elif isinstance(right, Const):
        if right.value == 0.0:
            return Const(0.0)
        if right.value == 1.0:
            return left

    return Mul(left, right)


def _simplify_divide(expr: Div) -> Expr:
    """
    x / 0 => x / 0 (nan or inf at evaluation)
    x / x => 1
    0 / y => 0
    x / 1 => x
    c1 / c2 => constant
    """
    left = simplify_body(expr.left)
    right = simplify_body(expr.right)

    if _is_zero(right):
        return Div(left, right)

    if left == right:
        return Const(1.0)

    if _is_zero(left):
        return Const(0.0)

    if _is_one(right):
        return left

    if _is_const(left) and _is_const(right):
        return _fold(np.divide, left, right)

    return Div(left, right)


def _simplify_power(base: Expr, exponent: Expr, rebuild: Callable[[Expr, Expr], Expr]) -> Expr:
    """
    Shared by Power nodes and pow() calls, the operands come already simplified
    0 ^ 0 => 0 ^ 0 (nan at evaluation)
    0 ^ y => 0
    1 ^ y => 1
    x ^ 0 => 1
    x ^ 1 => x
    c1 ^ c2 => constant
    :param base: simplified base
    :param exponent: simplified exponent
    :param rebuild: function to build the node when nothing can be done
    """
    if _is_zero(base):
        if _is_zero(exponent):
            return rebuild(base, exponent)
        return Const(0.0)

    if _is_one(base) or _is_zero(exponent):
        return Const(1.0)

    if _is_one(exponent):
        return base

    if _is_const(base) and _is_const(exponent):
        return _fold(np.power, base, exponent)

    return rebuild(base, exponent)


def _simplify_func(expr: Func) -> Expr:
    """
    f(c) => constant f(c)
    ln(e^x) => x
    e^ln(x) => x
    """
    args = tuple(simplify_body(a) for a in expr.args)

    if not expr.is_known():
        # nothing is known about this function
        return Func(expr.name, args)

    if expr.name == FunctionName.Pow:
        return _simplify_power(args[0], args[1], rebuild=lambda a, b: Func(FunctionName.Pow, (a, b)))

    arg = args[0]

    if isinstance(arg, Const):
        return _fold(Func._impl[expr.name], arg)

    if expr.name == FunctionName.Log:
        if isinstance(arg, Func) and arg.name == FunctionName.Exp:
            return simplify_body(arg.arg)

    elif expr.name == FunctionName.Exp:
        if isinstance(arg, Func) and arg.name == FunctionName.Log:
            return simplify_body(arg.arg)

    return Func(expr.name, args)


def simplify_full(expr: Expr, max_iter: int = 10) -> Expr:
    """
    Apply the simplification pass until the expression does not change
    :param expr: Expr
    :param max_iter: maximum number of passes
    :return: simplified expression
    """
    cur = expr
    for _ in range(max_iter):
        nxt = simplify_body(cur)
        if str(nxt) == str(cur):  # no further change
            break
        cur = nxt
    return cur


def simplify(lmbda: Lambda) -> Lambda:
    """
    Simplify the body of a Lambda
    :param lmbda: Lambda (array valued lambdas are simplified component-wise)
    :return: Lambda with the same parameters and the simplified body
    """
    return lmbda.map_body(simplify_body)
