# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.
# SPDX-License-Identifier: MPL-2.0

"""
Symbolic expression trees

An expression is an immutable tree of nodes:

    Const, Var, Neg, Add, Sub, Mul, Div, Power, Func

Nodes are frozen dataclasses, so equality and hashing are structural and
any subtree can be shared among several parent trees.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, ClassVar, Dict, List, Mapping, Set, Tuple, Union

import numpy as np

from VectorCalcEngine.enumerations import FunctionName
from VectorCalcEngine.exceptions import ArityError, UnboundVariableError, UnknownFunctionError

NUMBER = Union[int, float]


def _to_expr(val: Union["Expr", NUMBER]) -> "Expr":
    """
    Wrap python numbers as constants
    :param val: Expr or number
    :return: Expr
    """
    if isinstance(val, Expr):
        return val
    if isinstance(val, (bool, np.bool_)):
        raise TypeError(f"Cannot convert a boolean ({val}) into an expression")
    if isinstance(val, (int, float, np.integer, np.floating)):
        return Const(float(val))
    raise TypeError(f"Cannot convert {type(val).__name__} into an expression")


def _format_number(value: float) -> str:
    """
    Compact rendering of a constant: 2.0 -> "2", 0.5 -> "0.5"
    """
    if np.isfinite(value) and float(value).is_integer():
        return str(int(value))
    return repr(float(value))


class Expr:
    """
    Base class of every expression node
    """

    # ------------------------------------------------------------------------------------------------------------------
    # Operator overloading, so that trees can be written as python arithmetic
    # ------------------------------------------------------------------------------------------------------------------

    def __add__(self, other):
        return Add(self, _to_expr(other))

    def __radd__(self, other):
        return Add(_to_expr(other), self)

    def __sub__(self, other):
        return Sub(self, _to_expr(other))

    def __rsub__(self, other):
        return Sub(_to_expr(other), self)

    def __mul__(self, other):
        return Mul(self, _to_expr(other))

    def __rmul__(self, other):
        return Mul(_to_expr(other), self)

    def __truediv__(self, other):
        return Div(self, _to_expr(other))

    def __rtruediv__(self, other):
        return Div(_to_expr(other), self)

    def __pow__(self, other):
        return Power(self, _to_expr(other))

    def __rpow__(self, other):
        return Power(_to_expr(other), self)

    def __neg__(self):
        return Neg(self)

    def __pos__(self):
        return self

    # ------------------------------------------------------------------------------------------------------------------
    # Structural services
    # ------------------------------------------------------------------------------------------------------------------

    def children(self) -> Tuple["Expr", ...]:
        """
        Direct sub-expressions of this node
        """
        return tuple()

    def eval(self, **bindings: Union[NUMBER, np.ndarray]) -> Union[float, np.ndarray]:
        """
        Evaluate the expression with name based bindings: (x * y).eval(x=1, y=2)
        Division by zero and domain errors produce inf / nan, never an exception.
        :param bindings: variable name -> value (scalars or numpy arrays)
        :return: float, or array if any of the bindings is an array
        """
        values = {key: np.asarray(val, dtype=float) for key, val in bindings.items()}
        with np.errstate(all="ignore"):
            res = _eval(self, values)
        if np.ndim(res) == 0:
            return float(res)
        return res

    def subs(self, mapping: Mapping[Union["Var", str], Union["Expr", NUMBER]]) -> "Expr":
        """
        Substitute variables by expressions
        :param mapping: Var or variable name -> Expr or number
        :return: new expression
        """
        by_name: Dict[str, Expr] = dict()
        for key, val in mapping.items():
            name = key.name if isinstance(key, Var) else str(key)
            by_name[name] = _to_expr(val)
        return _subs(self, by_name)

    def variables(self) -> List[str]:
        """
        Names of the variables in the expression,
        depth-first, left-to-right, without repetitions
        """
        out: List[str] = list()
        _collect_vars(self, out, set())
        return out

    def diff(self, var: Union["Var", str], order: int = 1) -> "Expr":
        """
        Derivative of this expression w.r.t a variable
        :param var: Var or variable name
        :param order: derivative order
        :return: new expression
        """
        return diff(self, var, order)

    def simplify(self) -> "Expr":
        """
        One pass of the local simplification rules
        :return: new expression
        """
        from VectorCalcEngine.Utils.Symbolic.simplification import simplify_body
        return simplify_body(self)

    # ------------------------------------------------------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        raise NotImplementedError()

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "Expr":
        """
        Build an expression from its dictionary representation
        :param data: dictionary produced by to_dict()
        :return: Expr
        """
        tpe = data["type"]

        if tpe == "Const":
            return Const(data["value"])

        elif tpe == "Var":
            return Var(data["name"])

        elif tpe == "Neg":
            return Neg(Expr.from_dict(data["operand"]))

        elif tpe == "BinOp":
            cls = _BINOP_BY_SYMBOL.get(data["op"], None)
            if cls is None:
                raise ValueError(f"Unknown binary operator {data['op']}")
            return cls(Expr.from_dict(data["left"]), Expr.from_dict(data["right"]))

        elif tpe == "Func":
            return Func(data["name"], tuple(Expr.from_dict(a) for a in data["args"]))

        else:
            raise ValueError(f"Unknown expression type {tpe}")

    @staticmethod
    def from_json(blob: str) -> "Expr":
        return Expr.from_dict(json.loads(blob))


# ----------------------------------------------------------------------------------------------------------------------
# Leaves
# ----------------------------------------------------------------------------------------------------------------------

@dataclass(frozen=True)
class Const(Expr):
    """
    Real constant
    """
    value: float = 0.0

    def __post_init__(self):
        object.__setattr__(self, "value", float(self.value))

    def to_dict(self) -> Dict[str, Any]:
        return {"type": "Const", "value": self.value}

    def __str__(self) -> str:
        return _format_number(self.value)


@dataclass(frozen=True)
class Var(Expr):
    """
    Variable, bound by name to a parameter of a Lambda
    """
    name: str = "x"

    def to_dict(self) -> Dict[str, Any]:
        return {"type": "Var", "name": self.name}

    def __str__(self) -> str:
        return self.name


# ----------------------------------------------------------------------------------------------------------------------
# Operators
# ----------------------------------------------------------------------------------------------------------------------

@dataclass(frozen=True)
class Neg(Expr):
    """
    Negation: -operand
    """
    operand: Expr = field(default_factory=Const)

    def children(self) -> Tuple[Expr, ...]:
        return (self.operand,)

    def to_dict(self) -> Dict[str, Any]:
        return {"type": "Neg", "operand": self.operand.to_dict()}

    def __str__(self) -> str:
        return f"-{self.operand}"


@dataclass(frozen=True)
class BinOp(Expr):
    """
    Binary operation, the concrete operation is given by the subclass
    """
    left: Expr = field(default_factory=Const)
    right: Expr = field(default_factory=Const)

    op: ClassVar[str] = ""

    # numeric implementation of each operator symbol (read only)
    _impl: ClassVar[Mapping[str, Callable]] = MappingProxyType({
        "+": np.add,
        "-": np.subtract,
        "*": np.multiply,
        "/": np.divide,
        "**": np.power,
    })

    def children(self) -> Tuple[Expr, ...]:
        return self.left, self.right

    def to_dict(self) -> Dict[str, Any]:
        return {"type": "BinOp", "op": self.op, "left": self.left.to_dict(), "right": self.right.to_dict()}

    def __str__(self) -> str:
        return f"({self.left} {self.op} {self.right})"


@dataclass(frozen=True)
class Add(BinOp):
    op: ClassVar[str] = "+"


@dataclass(frozen=True)
class Sub(BinOp):
    op: ClassVar[str] = "-"


@dataclass(frozen=True)
class Mul(BinOp):
    op: ClassVar[str] = "*"


@dataclass(frozen=True)
class Div(BinOp):
    op: ClassVar[str] = "/"


@dataclass(frozen=True)
class Power(BinOp):
    op: ClassVar[str] = "**"


_BINOP_BY_SYMBOL: Mapping[str, type] = MappingProxyType({cls.op: cls for cls in (Add, Sub, Mul, Div, Power)})


@dataclass(frozen=True)
class Func(Expr):
    """
    Call to a named real function.
    Pow takes (base, exponent), every other known function takes one argument.
    Names that are not a FunctionName are kept as plain strings.
    """
    name: Union[FunctionName, str] = FunctionName.Exp
    args: Tuple[Expr, ...] = tuple()

    # numeric implementation of each function (read only)
    _impl: ClassVar[Mapping[FunctionName, Callable]] = MappingProxyType({
        FunctionName.Log: np.log,
        FunctionName.Exp: np.exp,
        FunctionName.Pow: np.power,
        FunctionName.Abs: np.abs,
        FunctionName.Sqrt: np.sqrt,
        FunctionName.Sin: np.sin,
        FunctionName.Cos: np.cos,
        FunctionName.Tan: np.tan,
        FunctionName.Asin: np.arcsin,
        FunctionName.Acos: np.arccos,
        FunctionName.Atan: np.arctan,
    })

    def __post_init__(self):
        name = FunctionName.argparse(self.name)
        args = tuple(_to_expr(a) for a in self.args)

        if isinstance(name, FunctionName):
            if len(args) != name.arity:
                raise ArityError(function_name=name, n_args=len(args), expected=name.arity)
        elif len(args) == 0:
            raise ArityError(function_name=name, n_args=0, expected="at least 1")

        object.__setattr__(self, "name", name)
        object.__setattr__(self, "args", args)

    @property
    def arg(self) -> Expr:
        """
        First argument
        """
        return self.args[0]

    def is_known(self) -> bool:
        """
        Is this a function with a known numeric implementation and derivative?
        """
        return isinstance(self.name, FunctionName)

    def children(self) -> Tuple[Expr, ...]:
        return self.args

    def to_dict(self) -> Dict[str, Any]:
        return {"type": "Func", "name": str(self.name), "args": [a.to_dict() for a in self.args]}

    def __str__(self) -> str:
        return f"{self.name}({', '.join(str(a) for a in self.args)})"


# ----------------------------------------------------------------------------------------------------------------------
# Constructors
# ----------------------------------------------------------------------------------------------------------------------

def log(x: Union[Expr, NUMBER]) -> Func:
    return Func(FunctionName.Log, (x,))


def exp(x: Union[Expr, NUMBER]) -> Func:
    return Func(FunctionName.Exp, (x,))


def pow_(base: Union[Expr, NUMBER], exponent: Union[Expr, NUMBER]) -> Func:
    return Func(FunctionName.Pow, (base, exponent))


def abs_(x: Union[Expr, NUMBER]) -> Func:
    return Func(FunctionName.Abs, (x,))


def sqrt(x: Union[Expr, NUMBER]) -> Func:
    return Func(FunctionName.Sqrt, (x,))


def sin(x: Union[Expr, NUMBER]) -> Func:
    return Func(FunctionName.Sin, (x,))


def cos(x: Union[Expr, NUMBER]) -> Func:
    return Func(FunctionName.Cos, (x,))


def tan(x: Union[Expr, NUMBER]) -> Func:
    return Func(FunctionName.Tan, (x,))


def asin(x: Union[Expr, NUMBER]) -> Func:
    return Func(FunctionName.Asin, (x,))


def acos(x: Union[Expr, NUMBER]) -> Func:
    return Func(FunctionName.Acos, (x,))


def atan(x: Union[Expr, NUMBER]) -> Func:
    return Func(FunctionName.Atan, (x,))


def variables(*names: str) -> Tuple[Var, ...]:
    """
    Declare several variables at once: x, y, z = variables("x", "y", "z")
    """
    return tuple(Var(n) for n in names)


def diff(expr: Expr, var: Union[Var, str], order: int = 1) -> Expr:
    """
    n-th derivative of an expression w.r.t a variable
    :param expr: Expr
    :param var: Var or variable name
    :param order: number of times to apply the differentiation
    :return: new expression
    """
    from VectorCalcEngine.Utils.Symbolic.derivatives import derivative_body
    if order < 0:
        raise ValueError(f"The derivative order must be non negative, got {order}")
    res = expr
    for _ in range(order):
        res = derivative_body(res, var)
    return res


def eval_expr(expr: Expr, bindings: Mapping[Union[Var, str], Union[NUMBER, np.ndarray]]) -> Union[float, np.ndarray]:
    """
    Evaluate with a mapping whose keys can be variables or names
    :param expr: Expr
    :param bindings: Var or name -> value
    :return: value
    """
    return expr.eval(**{(k.name if isinstance(k, Var) else str(k)): v for k, v in bindings.items()})


# ----------------------------------------------------------------------------------------------------------------------
# Recursive helpers
# ----------------------------------------------------------------------------------------------------------------------

def _eval(expr: Expr, values: Dict[str, np.ndarray]) -> Any:
    """
    Numeric evaluation (numpy semantics)
    :param expr: Expr
    :param values: variable name -> value
    :return: numpy scalar or array
    """
    if isinstance(expr, Const):
        return np.float64(expr.value)

    elif isinstance(expr, Var):
        if expr.name not in values:
            raise UnboundVariableError(expr.name)
        return values[expr.name]

    elif isinstance(expr, Neg):
        return np.negative(_eval(expr.operand, values))

    elif isinstance(expr, BinOp):
        return BinOp._impl[expr.op](_eval(expr.left, values), _eval(expr.right, values))

    elif isinstance(expr, Func):
        fn = Func._impl.get(expr.name, None)
        if fn is None:
            raise UnknownFunctionError(expr.name)
        return fn(*[_eval(a, values) for a in expr.args])

    raise TypeError(f"Cannot evaluate {type(expr).__name__}")


def _subs(expr: Expr, mapping: Dict[str, Expr]) -> Expr:
    """
    Rebuild the tree replacing variables
    """
    if isinstance(expr, Const):
        return expr

    elif isinstance(expr, Var):
        return mapping.get(expr.name, expr)

    elif isinstance(expr, Neg):
        return Neg(_subs(expr.operand, mapping))

    elif isinstance(expr, BinOp):
        return type(expr)(_subs(expr.left, mapping), _subs(expr.right, mapping))

    elif isinstance(expr, Func):
        return Func(expr.name, tuple(_subs(a, mapping) for a in expr.args))

    raise TypeError(f"Cannot substitute in {type(expr).__name__}")


def _collect_vars(expr: Expr, out: List[str], seen: Set[str]) -> None:
    """
    Collect variable names in a deterministic order
    Depth-first, left-to-right variable harvest.
    :param expr: Some expression
    :param out: List to fill
    :param seen: names already in the list
    """
    if isinstance(expr, Var):
        if expr.name not in seen:
            seen.add(expr.name)
            out.append(expr.name)
    else:
        for child in expr.children():
            _collect_vars(child, out, seen)
