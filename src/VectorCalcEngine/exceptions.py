# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.
# SPDX-License-Identifier: MPL-2.0


class SymbolicError(Exception):
    """Base class for exceptions in the symbolic engine."""
    pass


class ArityError(SymbolicError):
    """Exception raised when a function node is built with the wrong number of arguments."""
    def __init__(self, function_name, n_args, expected=None, message="Wrong number of arguments"):
        self.function_name = function_name
        self.n_args = n_args
        self.expected = expected
        if expected is None:
            self.message = f"{message} for {function_name}: found {n_args}"
        else:
            self.message = f"{message} for {function_name}: expected {expected}, found {n_args}"
        super().__init__(self.message)


class UnboundVariableError(SymbolicError, ValueError):
    """Exception raised when an expression is evaluated without a value for one of its variables."""
    def __init__(self, name, message="No value provided for variable"):
        self.name = name
        self.message = f"{message} '{name}'"
        super().__init__(self.message)


class UnknownFunctionError(SymbolicError):
    """Exception raised when evaluating or compiling a function that has no numeric implementation."""
    def __init__(self, function_name, message="There is no numeric implementation for function"):
        self.function_name = function_name
        self.message = f"{message} '{function_name}'"
        super().__init__(self.message)


class EmptyLambdaError(SymbolicError):
    """Exception raised when the empty (invalid) Lambda is evaluated or compiled."""
    def __init__(self, message="The Lambda is empty and cannot be evaluated"):
        self.message = message
        super().__init__(self.message)
