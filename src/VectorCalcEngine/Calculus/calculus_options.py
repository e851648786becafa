# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.
# SPDX-License-Identifier: MPL-2.0
from VectorCalcEngine.Calculus.options_template import OptionsTemplate


class CalculusOptions(OptionsTemplate):
    """
    Symbolic calculus options
    """

    def __init__(self,
                 simplify_max_iter: int = 10,
                 use_numba: bool = True,
                 error_model: str = "numpy",
                 add_doc_string: bool = True):
        """
        Symbolic calculus options class
        :param simplify_max_iter: Maximum number of simplification passes for the full simplification
        :param use_numba: Compile the generated code with numba?
        :param error_model: numba error model ("numpy" returns inf/nan on division by zero, "python" raises)
        :param add_doc_string: Attach the generated source code as docstring of the compiled functions
        """
        OptionsTemplate.__init__(self, name='CalculusOptions')

        self.simplify_max_iter = simplify_max_iter

        self.use_numba = use_numba

        self.error_model = error_model

        self.add_doc_string = add_doc_string

        self.register(key="simplify_max_iter", tpe=int,
                      definition="Maximum number of passes of the full simplification")
        self.register(key="use_numba", tpe=bool,
                      definition="Compile the generated code with numba")
        self.register(key="error_model", tpe=str,
                      definition="numba error model")
        self.register(key="add_doc_string", tpe=bool,
                      definition="Attach the generated code as docstring")
