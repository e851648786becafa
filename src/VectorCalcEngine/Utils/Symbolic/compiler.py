# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.
# SPDX-License-Identifier: MPL-2.0

"""
Code generation for expression trees

The expressions are written as python source over an array of values
(values[0], values[1], ...), executed, and optionally jit-compiled with numba.
Divisions and powers are emitted as numpy ufuncs so that both the python
and the numba versions produce inf / nan instead of raising.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Sequence, Tuple, Union

import numba as nb
import numpy as np
import scipy.sparse as sp

from VectorCalcEngine.basic_structures import Vec
from VectorCalcEngine.enumerations import FunctionName
from VectorCalcEngine.exceptions import UnboundVariableError, UnknownFunctionError
from VectorCalcEngine.Utils.Symbolic.symbolic import Expr, Const, Var, Neg, BinOp, Div, Power, Func
from VectorCalcEngine.Utils.Symbolic.derivatives import derivative_body
from VectorCalcEngine.Utils.Symbolic.simplification import simplify_body
from VectorCalcEngine.Calculus.calculus_options import CalculusOptions

_NP_FUNCTIONS: Dict[FunctionName, str] = {
    FunctionName.Log: "np.log",
    FunctionName.Exp: "np.exp",
    FunctionName.Pow: "np.power",
    FunctionName.Abs: "np.abs",
    FunctionName.Sqrt: "np.sqrt",
    FunctionName.Sin: "np.sin",
    FunctionName.Cos: "np.cos",
    FunctionName.Tan: "np.tan",
    FunctionName.Asin: "np.arcsin",
    FunctionName.Acos: "np.arccos",
    FunctionName.Atan: "np.arctan",
}


def _emit_const(value: float) -> str:
    if np.isnan(value):
        return "np.nan"
    if np.isinf(value):
        return "np.inf" if value > 0 else "(-np.inf)"
    return repr(float(value))


def _emit(expr: Expr, name2sym: Dict[str, str]) -> str:
    """
    Python source of an expression
    :param expr: Expr
    :param name2sym: variable name -> symbol in the generated code (i.e. values[0])
    :return: source code string
    """
    if isinstance(expr, Const):
        return _emit_const(expr.value)

    elif isinstance(expr, Var):
        sym = name2sym.get(expr.name, None)
        if sym is None:
            raise UnboundVariableError(expr.name, message="The variable is not a parameter")
        return sym

    elif isinstance(expr, Neg):
        return f"(-{_emit(expr.operand, name2sym)})"

    elif isinstance(expr, Div):
        return f"np.divide({_emit(expr.left, name2sym)}, {_emit(expr.right, name2sym)})"

    elif isinstance(expr, Power):
        return f"np.power({_emit(expr.left, name2sym)}, {_emit(expr.right, name2sym)})"

    elif isinstance(expr, BinOp):
        return f"({_emit(expr.left, name2sym)} {expr.op} {_emit(expr.right, name2sym)})"

    elif isinstance(expr, Func):
        fn = _NP_FUNCTIONS.get(expr.name, None)
        if fn is None:
            raise UnknownFunctionError(expr.name)
        return f"{fn}({', '.join(_emit(a, name2sym) for a in expr.args)})"

    raise TypeError(f"Cannot emit code for {type(expr).__name__}")


def _python_wrapper(fn: Callable[[Vec], Vec]) -> Callable[[Vec], Vec]:
    """
    Run the generated python function with numpy's floating point errors silenced
    """

    def _f(values: Vec) -> Vec:
        with np.errstate(all="ignore"):
            return fn(values)

    return _f


def compile_equations(eqs: Sequence[Expr],
                      parameters: Sequence[str],
                      options: CalculusOptions | None = None) -> Callable[[Vec], Vec]:
    """
    Compile the array of expressions to a function that returns an array of values for those expressions
    :param eqs: Iterable of expressions (Expr)
    :param parameters: parameter names, the i-th parameter is values[i] in the generated function
    :param options: CalculusOptions
    :return: Function pointer f(values) -> array of len(eqs)
    """
    if options is None:
        options = CalculusOptions()

    name2sym = {name: f"values[{i}]" for i, name in enumerate(parameters)}

    # Build source
    src = "def _f(values):\n"
    src += f"    out = np.zeros({len(eqs)})\n"
    for i, e in enumerate(eqs):
        src += f"    out[{i}] = {_emit(e, name2sym)}\n"
    src += "    return out"

    ns: Dict[str, Any] = {"np": np}
    exec(src, ns)

    if options.use_numba:
        fn = nb.njit(ns["_f"], error_model=options.error_model)
    else:
        fn = _python_wrapper(ns["_f"])

    if options.add_doc_string:
        fn.__doc__ = src

    return fn


def get_jacobian_structure(eqs: Sequence[Expr],
                           parameters: Sequence[str]) -> List[Tuple[int, int, Expr]]:
    """
    Symbolic partial derivatives of each equation w.r.t each parameter, skipping the structural zeros
    :param eqs: equations
    :param parameters: parameter names
    :return: list of (row, col, simplified partial derivative)
    """
    triplets: List[Tuple[int, int, Expr]] = list()

    for row, eq in enumerate(eqs):
        for col, name in enumerate(parameters):
            d_expression = simplify_body(derivative_body(eq, name))
            if isinstance(d_expression, Const) and d_expression.value == 0:
                continue  # structural zero
            triplets.append((row, col, d_expression))

    return triplets


def compile_jacobian(eqs: Sequence[Expr],
                     parameters: Sequence[str],
                     options: CalculusOptions | None = None) -> Callable[[Vec], sp.csc_matrix]:
    """
    Compile a sparse Jacobian evaluator for the equations w.r.t the parameters
    :param eqs: Array of equations
    :param parameters: parameter names to differentiate against
    :param options: CalculusOptions
    :return: jac_fn(values) -> scipy.sparse.csc_matrix of shape (len(eqs), len(parameters))
    """
    n_rows = len(eqs)
    n_cols = len(parameters)

    # Sort by column, then row for CSC layout
    triplets = get_jacobian_structure(eqs, parameters)
    triplets.sort(key=lambda t: (t[1], t[0]))

    nnz = len(triplets)
    indices = np.array([t[0] for t in triplets], dtype=np.int32)
    indptr = np.zeros(n_cols + 1, dtype=np.int32)
    for _, c, _ in triplets:
        indptr[c + 1] += 1
    np.cumsum(indptr, out=indptr)

    data_fn: Union[Callable[[Vec], Vec], None] = None
    if nnz > 0:
        data_fn = compile_equations(eqs=[t[2] for t in triplets], parameters=parameters, options=options)

    def jac_fn(values: Vec) -> sp.csc_matrix:
        """
        Evaluate the Jacobian
        :param values: one value per parameter
        :return: csc_matrix
        """
        data = data_fn(np.asarray(values, dtype=float)) if data_fn is not None else np.zeros(0)
        return sp.csc_matrix((data, indices.copy(), indptr.copy()), shape=(n_rows, n_cols))

    return jac_fn
