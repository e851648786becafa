# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.
# SPDX-License-Identifier: MPL-2.0

from enum import Enum


class FunctionName(Enum):
    """
    Named real functions that a Func node can call
    """
    Log = 'log'  # natural logarithm
    Exp = 'exp'
    Pow = 'pow'  # the only two-argument function: pow(base, exponent)
    Abs = 'abs'
    Sqrt = 'sqrt'
    Sin = 'sin'
    Cos = 'cos'
    Tan = 'tan'
    Asin = 'asin'
    Acos = 'acos'
    Atan = 'atan'

    def __str__(self) -> str:
        return str(self.value)

    def __repr__(self):
        return str(self)

    @property
    def arity(self) -> int:
        """
        Number of arguments that the function takes
        :return: 2 for Pow, 1 otherwise
        """
        return 2 if self == FunctionName.Pow else 1

    @staticmethod
    def argparse(s):
        """
        Get the FunctionName from its member name ("Sin") or its value ("sin")
        :param s: FunctionName or string
        :return: FunctionName if known, the string itself otherwise
        """
        if isinstance(s, FunctionName):
            return s
        try:
            return FunctionName[s]
        except KeyError:
            try:
                return FunctionName(s)
            except ValueError:
                return s


class LogSeverity(Enum):
    """
    Enumeration of logs severities
    """
    Error = 'Error'
    Warning = 'Warning'
    Information = 'Information'

    def __str__(self):
        return self.value

    def __repr__(self):
        return str(self)

    @staticmethod
    def argparse(s):
        """

        :param s:
        :return:
        """
        try:
            return LogSeverity[s]
        except KeyError:
            return s
