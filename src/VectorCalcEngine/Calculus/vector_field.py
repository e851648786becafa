# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.
# SPDX-License-Identifier: MPL-2.0

from __future__ import annotations

from typing import Callable, List, Tuple, Union

import numpy as np
import scipy.sparse as sp

from VectorCalcEngine.basic_structures import Logger, Vec
from VectorCalcEngine.Calculus.calculus_options import CalculusOptions
from VectorCalcEngine.Utils.Symbolic.symbolic import Expr, Add, Sub, NUMBER
from VectorCalcEngine.Utils.Symbolic.lambda_function import Lambda
from VectorCalcEngine.Utils.Symbolic.derivatives import derivative_body
from VectorCalcEngine.Utils.Symbolic.simplification import simplify_body
from VectorCalcEngine.Utils.Symbolic.compiler import compile_equations, compile_jacobian


class VectorField:
    """
    n-dimensional vector field: n scalar Lambdas sharing the same n parameters

    VectorField(Lambda.array(("x", "y"), (x, y))) holds
        (x, y) => x
        (x, y) => y

    If the number of parameters and outputs differ, the field is built empty
    (no components) and the problem is recorded in the logger.
    The operators that are not defined for a field also return empty results
    and log the reason, they never raise.
    """

    def __init__(self, func: Lambda, logger: Logger | None = None):
        """
        VectorField constructor
        :param func: array valued Lambda (x, y, ...) => [f0, f1, ...]
        :param logger: Logger to record the problems (a new one if None)
        """
        self.logger: Logger = Logger() if logger is None else logger

        self._functions: Tuple[Lambda, ...] = tuple()

        if func.is_empty():
            self.logger.add_error("Cannot build a VectorField from an empty Lambda. "
                                  "Aborting VectorField construction.",
                                  subject=str(func), subject_class="VectorField")
            return

        parameters = func.parameters
        bodies = func.components

        if len(parameters) != len(bodies):
            self.logger.add_error(f"Unequal number of parameters ({len(parameters)}) "
                                  f"and return values ({len(bodies)}). Aborting VectorField construction.",
                                  subject=str(func),
                                  subject_class="VectorField",
                                  value=len(bodies),
                                  expected_value=len(parameters))
            return

        self._functions = tuple(Lambda(parameters, body) for body in bodies)

    @staticmethod
    def empty(logger: Logger | None = None) -> "VectorField":
        """
        VectorField without components
        """
        return VectorField(Lambda.array(tuple(), tuple()), logger=logger)

    @property
    def functions(self) -> Tuple[Lambda, ...]:
        return self._functions

    @property
    def parameters(self) -> Tuple[str, ...]:
        """
        Parameters shared by every component
        """
        if len(self._functions) == 0:
            return tuple()
        return self._functions[0].parameters

    @property
    def bodies(self) -> Tuple[Expr, ...]:
        return tuple(f.body for f in self._functions)

    def is_empty(self) -> bool:
        return len(self._functions) == 0

    def __len__(self) -> int:
        return len(self._functions)

    def __getitem__(self, item: int) -> Lambda:
        return self._functions[item]

    def to_lambda(self) -> Lambda:
        """
        Array valued Lambda equivalent to this field
        """
        return Lambda.array(self.parameters, self.bodies)

    # ------------------------------------------------------------------------------------------------------------------
    # Differential operators
    # ------------------------------------------------------------------------------------------------------------------

    @staticmethod
    def gradient(scalar_field: Lambda, logger: Logger | None = None) -> "VectorField":
        """
        Gradient of a scalar field: [df/dp0, df/dp1, ...]
        Example: (x, y) => x*y gives the field
            (x, y) => y (partial w.r.t x)
            (x, y) => x (partial w.r.t y)
        :param scalar_field: scalar Lambda
        :param logger: Logger
        :return: VectorField
        """
        logger = Logger() if logger is None else logger

        if scalar_field.is_empty() or scalar_field.is_array():
            logger.add_error("The gradient is only defined for scalar fields. Aborting Gradient.",
                             subject=str(scalar_field), subject_class="VectorField")
            return VectorField.empty(logger=logger)

        result = [derivative_body(scalar_field.body, p) for p in scalar_field.parameters]

        return VectorField(Lambda.array(scalar_field.parameters, result), logger=logger)

    def divergence(self) -> Lambda:
        """
        Divergence: d(f0)/dp0 + d(f1)/dp1 + ... + d(fn)/dpn
        The i-th component is differentiated w.r.t the i-th parameter (by position)
        :return: Lambda, empty if the field has no components
        """
        if len(self._functions) < 1:
            self.logger.add_error("No functions in VectorField. Aborting Divergence.",
                                  subject_class="VectorField", value=0, expected_value=">= 1")
            return Lambda.empty()

        parameters = self.parameters

        div_body = derivative_body(self._functions[0].body, parameters[0])

        for i in range(1, len(self._functions)):
            div_body = Add(div_body, derivative_body(self._functions[i].body, parameters[i]))

        return Lambda(parameters, div_body)

    def curl(self) -> "VectorField":
        """
        Curl of a three-dimensional field
            [df2/dp1 - df1/dp2,
             df2/dp0 - df0/dp2,
             df1/dp0 - df0/dp1]
        :return: VectorField, empty if the field is not three-dimensional
        """
        if len(self._functions) != 3:
            self.logger.add_error("Curl is only defined for three-dimensional VectorFields. Aborting Curl.",
                                  subject_class="VectorField",
                                  value=len(self._functions),
                                  expected_value=3)
            return VectorField.empty(logger=self.logger)

        p = self.parameters
        f = self.bodies

        result = [
            Sub(derivative_body(f[2], p[1]), derivative_body(f[1], p[2])),
            Sub(derivative_body(f[2], p[0]), derivative_body(f[0], p[2])),
            Sub(derivative_body(f[1], p[0]), derivative_body(f[0], p[1])),
        ]

        return VectorField(Lambda.array(p, result), logger=self.logger)

    @staticmethod
    def laplacian(scalar_field: Lambda, logger: Logger | None = None) -> Lambda:
        """
        Laplacian of a scalar field, as the divergence of its gradient
        :param scalar_field: scalar Lambda
        :param logger: Logger
        :return: Lambda
        """
        return VectorField.gradient(scalar_field, logger=logger).divergence()

    def jacobian(self) -> List[List[Expr]]:
        """
        Symbolic Jacobian matrix J[i][j] = d(fi)/d(pj), without simplification
        :return: list of rows
        """
        return [[derivative_body(body, p) for p in self.parameters] for body in self.bodies]

    def simplify(self) -> "VectorField":
        """
        Component-wise simplification
        """
        if self.is_empty():
            return VectorField.empty(logger=self.logger)
        return VectorField(self.to_lambda().simplify(), logger=self.logger)

    # ------------------------------------------------------------------------------------------------------------------
    # Numerical evaluation
    # ------------------------------------------------------------------------------------------------------------------

    def evaluate(self, *args: Union[NUMBER, np.ndarray]) -> Vec:
        """
        Evaluate every component at a point
        :param args: one value per parameter
        :return: array with one value per component
        """
        return np.array([f.evaluate(*args) for f in self._functions])

    def __call__(self, *args: Union[NUMBER, np.ndarray]) -> Vec:
        return self.evaluate(*args)

    def compile(self, options: CalculusOptions | None = None) -> Callable[[Vec], Vec]:
        """
        Compile the field
        :param options: CalculusOptions
        :return: f(values) -> array with one value per component
        """
        return compile_equations(eqs=self.bodies, parameters=self.parameters, options=options)

    def compile_jacobian(self, options: CalculusOptions | None = None) -> Callable[[Vec], sp.csc_matrix]:
        """
        Compile the sparse Jacobian of the field
        :param options: CalculusOptions
        :return: f(values) -> csc_matrix
        """
        return compile_jacobian(eqs=self.bodies, parameters=self.parameters, options=options)

    def __str__(self) -> str:
        result = ""
        for i, f in enumerate(self._functions):
            result += "\n" + "F_" + str(i) + str(f.map_body(simplify_body))
        return result
