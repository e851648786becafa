# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.
# SPDX-License-Identifier: MPL-2.0

from __future__ import annotations

from typing import Union

from VectorCalcEngine.enumerations import FunctionName, LogSeverity
from VectorCalcEngine.exceptions import (SymbolicError, ArityError, UnboundVariableError,
                                         UnknownFunctionError, EmptyLambdaError)
from VectorCalcEngine.basic_structures import Logger, LogEntry
from VectorCalcEngine.Utils.Symbolic.symbolic import (Expr, Const, Var, Neg, BinOp, Add, Sub, Mul, Div, Power, Func,
                                                      log, exp, pow_, abs_, sqrt, sin, cos, tan, asin, acos, atan,
                                                      variables, diff)
from VectorCalcEngine.Utils.Symbolic.lambda_function import Lambda
from VectorCalcEngine.Utils.Symbolic.derivatives import derivative_body, derivative
from VectorCalcEngine.Utils.Symbolic.simplification import simplify_body, simplify
from VectorCalcEngine.Utils.Symbolic.simplification import simplify_full as simplify_body_full
from VectorCalcEngine.Calculus.calculus_options import CalculusOptions
from VectorCalcEngine.Calculus.vector_field import VectorField


def simplify_full(lmbda: Lambda, options: CalculusOptions | None = None) -> Lambda:
    """
    Simplify a Lambda until its body stops changing
    :param lmbda: Lambda
    :param options: CalculusOptions (simplify_max_iter is used)
    :return: Lambda
    """
    if options is None:
        options = CalculusOptions()

    return lmbda.map_body(lambda body: simplify_body_full(body, max_iter=options.simplify_max_iter))


def gradient(scalar_field: Lambda, logger: Union[Logger, None] = None) -> VectorField:
    """
    Gradient of a scalar field
    :param scalar_field: scalar Lambda
    :param logger: Logger (optional)
    :return: VectorField (empty if the gradient is not defined)
    """
    return VectorField.gradient(scalar_field, logger=logger)


def divergence(field: Union[VectorField, Lambda], logger: Union[Logger, None] = None) -> Lambda:
    """
    Divergence of a vector field
    :param field: VectorField or array valued Lambda
    :param logger: Logger (optional, only used when a Lambda is given)
    :return: Lambda (empty if the field has no components)
    """
    if isinstance(field, Lambda):
        field = VectorField(field, logger=logger)

    return field.divergence()


def curl(field: Union[VectorField, Lambda], logger: Union[Logger, None] = None) -> VectorField:
    """
    Curl of a three-dimensional vector field
    :param field: VectorField or array valued Lambda
    :param logger: Logger (optional, only used when a Lambda is given)
    :return: VectorField (empty if the field is not three-dimensional)
    """
    if isinstance(field, Lambda):
        field = VectorField(field, logger=logger)

    return field.curl()


def laplacian(scalar_field: Lambda, logger: Union[Logger, None] = None) -> Lambda:
    """
    Laplacian of a scalar field (divergence of the gradient)
    :param scalar_field: scalar Lambda
    :param logger: Logger (optional)
    :return: Lambda
    """
    return VectorField.laplacian(scalar_field, logger=logger)
