# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.
# SPDX-License-Identifier: MPL-2.0

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Callable, Dict, Sequence, Tuple, Union, TYPE_CHECKING

import numpy as np

from VectorCalcEngine.exceptions import EmptyLambdaError
from VectorCalcEngine.Utils.Symbolic.symbolic import Expr, Var, NUMBER, _to_expr

if TYPE_CHECKING:  # Only imports the below statements during type checking
    from VectorCalcEngine.Calculus.calculus_options import CalculusOptions

BODY = Union[Expr, Tuple[Expr, ...], None]


def _param_names(parameters: Sequence[Union[Var, str]]) -> Tuple[str, ...]:
    return tuple(p.name if isinstance(p, Var) else str(p) for p in parameters)


@dataclass(frozen=True)
class Lambda:
    """
    Symbolic function: ordered parameter names + body

    (x, y) => x * cos(y)

    The body is one expression for a scalar function, a tuple of
    expressions for an array valued function (used to build vector fields),
    or None for the empty Lambda that signals a failed operation.
    """
    parameters: Tuple[str, ...] = tuple()
    body: BODY = None

    def __post_init__(self):
        object.__setattr__(self, "parameters", _param_names(self.parameters))

        if isinstance(self.body, (list, tuple)):
            object.__setattr__(self, "body", tuple(_to_expr(b) for b in self.body))
        elif self.body is not None:
            object.__setattr__(self, "body", _to_expr(self.body))

    @staticmethod
    def array(parameters: Sequence[Union[Var, str]], bodies: Sequence[Union[Expr, NUMBER]]) -> "Lambda":
        """
        Array valued Lambda: (x, y) => [f0, f1, ...]
        :param parameters: parameter names (or Var)
        :param bodies: one expression per output
        :return: Lambda
        """
        return Lambda(parameters=tuple(parameters), body=tuple(bodies))

    @staticmethod
    def empty() -> "Lambda":
        """
        The empty Lambda, result of an operation that could not be performed
        """
        return Lambda(parameters=tuple(), body=None)

    def is_empty(self) -> bool:
        return self.body is None

    def is_array(self) -> bool:
        return isinstance(self.body, tuple)

    @property
    def components(self) -> Tuple[Expr, ...]:
        """
        Bodies of an array valued Lambda (a scalar Lambda has one component)
        """
        if self.body is None:
            return tuple()
        if isinstance(self.body, tuple):
            return self.body
        return (self.body,)

    @property
    def n_params(self) -> int:
        return len(self.parameters)

    def map_body(self, fn: Callable[[Expr], Expr]) -> "Lambda":
        """
        New Lambda with the same parameters and fn applied to the body (or to each component)
        :param fn: Expr -> Expr
        :return: Lambda
        """
        if self.body is None:
            return Lambda.empty()
        if isinstance(self.body, tuple):
            return Lambda(self.parameters, tuple(fn(b) for b in self.body))
        return Lambda(self.parameters, fn(self.body))

    def derivative(self, with_respect_to: Union[Var, str], order: int = 1) -> "Lambda":
        """
        n-th derivative w.r.t one of the parameters
        """
        from VectorCalcEngine.Utils.Symbolic.derivatives import derivative
        return derivative(self, with_respect_to, order)

    def simplify(self) -> "Lambda":
        """
        One simplification pass over the body
        """
        from VectorCalcEngine.Utils.Symbolic.simplification import simplify
        return simplify(self)

    def evaluate(self, *args: Union[NUMBER, np.ndarray]) -> Union[float, np.ndarray]:
        """
        Evaluate positionally: f(1.0, 2.0)
        :param args: one value per parameter
        :return: float for scalar lambdas, array for array valued lambdas
        """
        if self.body is None:
            raise EmptyLambdaError()

        if len(args) != len(self.parameters):
            raise ValueError(f"Expected {len(self.parameters)} arguments ({', '.join(self.parameters)}), "
                             f"got {len(args)}")

        bindings = dict(zip(self.parameters, args))

        if isinstance(self.body, tuple):
            return np.array([b.eval(**bindings) for b in self.body])

        return self.body.eval(**bindings)

    def __call__(self, *args: Union[NUMBER, np.ndarray]) -> Union[float, np.ndarray]:
        return self.evaluate(*args)

    def compile(self, options: "CalculusOptions" | None = None) -> Callable[..., Union[float, np.ndarray]]:
        """
        Generate and compile the code of this Lambda
        :param options: CalculusOptions
        :return: function taking one value per parameter
        """
        from VectorCalcEngine.Utils.Symbolic.compiler import compile_equations

        if self.body is None:
            raise EmptyLambdaError()

        fn = compile_equations(eqs=self.components, parameters=self.parameters, options=options)
        is_array = self.is_array()

        def _call(*args):
            res = fn(np.array(args, dtype=float))
            return res if is_array else float(res[0])

        _call.__doc__ = fn.__doc__
        return _call

    def to_dict(self) -> Dict[str, Any]:
        if self.body is None:
            body = None
        elif isinstance(self.body, tuple):
            body = [b.to_dict() for b in self.body]
        else:
            body = self.body.to_dict()
        return {"type": "Lambda", "parameters": list(self.parameters), "body": body}

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "Lambda":
        body = data["body"]
        if body is None:
            return Lambda(tuple(data["parameters"]), None)
        if isinstance(body, list):
            return Lambda(tuple(data["parameters"]), tuple(Expr.from_dict(b) for b in body))
        return Lambda(tuple(data["parameters"]), Expr.from_dict(body))

    @staticmethod
    def from_json(blob: str) -> "Lambda":
        return Lambda.from_dict(json.loads(blob))

    def __str__(self) -> str:
        if self.body is None:
            return "(empty)"
        params = "(" + ", ".join(self.parameters) + ")"
        if isinstance(self.body, tuple):
            return params + " => [" + ", ".join(str(b) for b in self.body) + "]"
        return f"{params} => {self.body}"
