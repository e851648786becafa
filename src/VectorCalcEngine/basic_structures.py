# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.
# SPDX-License-Identifier: MPL-2.0

from __future__ import annotations

import datetime
from typing import List, Any, Dict, Union

import numpy as np
import numpy.typing as npt
import pandas as pd

from VectorCalcEngine.enumerations import LogSeverity

Vec = npt.NDArray[np.float64]


class LogEntry:
    """
    Logger entry
    """

    def __init__(self,
                 time: Union[str, None] = None,
                 msg="",
                 severity: LogSeverity = LogSeverity.Information,
                 subject="",
                 subject_class="",
                 value="",
                 expected_value=""):
        """

        :param time: time stamp (now if None)
        :param msg: message
        :param severity: LogSeverity
        :param subject: textual representation of the object that produced the entry
        :param subject_class: class of that object (i.e. VectorField)
        :param value: value found
        :param expected_value: value expected
        """
        if time is None:
            self.time = "{date:%H:%M:%S}".format(date=datetime.datetime.now())
        else:
            self.time = time
        self.msg = str(msg)
        self.severity = severity
        self.subject = subject
        self.subject_class = subject_class
        self.value = value
        self.expected_value = str(expected_value)

    def to_list(self) -> List[Any]:
        """
        Get list representation of this entry
        :return:
        """
        return [self.time, self.severity.value, self.msg,
                self.subject_class, self.subject, self.value, self.expected_value]

    def __str__(self):
        return "{0} {1}: {2} {3} {4} {5}".format(self.time,
                                                 self.severity.value,
                                                 self.msg,
                                                 self.subject,
                                                 self.value,
                                                 self.expected_value)


class Logger:
    """
    Logger class

    Collects the non-fatal diagnostics of the calculus operations
    (shape mismatches, undefined operators, etc.)
    """

    def __init__(self) -> None:

        self.entries: List[LogEntry] = list()

        self.debug_entries: List[str] = list()

    def add_debug(self, *args):
        """
        Add debug entry
        :param args:
        """
        self.debug_entries.append(" ".join([str(x) for x in args]))

    def append(self, txt: str):
        """
        simple text log
        :param txt: some message text
        """
        self.entries.append(LogEntry(msg=txt))

    def has_logs(self) -> bool:
        """
        Are there any logs?
        :return: True / False
        """
        return len(self.entries) > 0

    def add(self, msg: str, severity: LogSeverity = LogSeverity.Error, subject="", subject_class="",
            value="", expected_value=""):
        """
        Add general entry
        :param msg: message
        :param severity: LogSeverity
        :param subject: object that produced the entry
        :param subject_class: class of the object
        :param value: value found
        :param expected_value: value expected
        """
        self.entries.append(LogEntry(msg=str(msg),
                                     severity=severity,
                                     subject=str(subject),
                                     subject_class=str(subject_class),
                                     value=str(value),
                                     expected_value=str(expected_value)))

    def add_info(self, msg: str, subject="", subject_class="", value="", expected_value=""):
        """
        Add info entry
        """
        self.add(msg=msg, severity=LogSeverity.Information, subject=subject,
                 subject_class=subject_class, value=value, expected_value=expected_value)

    def add_warning(self, msg: str, subject="", subject_class="", value="", expected_value=""):
        """
        Add warning entry
        """
        self.add(msg=msg, severity=LogSeverity.Warning, subject=subject,
                 subject_class=subject_class, value=value, expected_value=expected_value)

    def add_error(self, msg: str, subject="", subject_class="", value="", expected_value=""):
        """
        Add error entry
        """
        self.add(msg=msg, severity=LogSeverity.Error, subject=subject,
                 subject_class=subject_class, value=value, expected_value=expected_value)

    def to_dict(self) -> Dict[str, Dict[str, List[List[Any]]]]:
        """
        Get the logs sorted by severity and message
        :return: {severity: {message: [[time, class, subject, value, expected value], ...]}}
        """
        by_severity = dict()

        for e in self.entries:

            if e.severity.value not in by_severity.keys():
                by_severity[e.severity.value] = dict()

            by_msg = by_severity[e.severity.value]

            row = [e.time, e.subject_class, e.subject, e.value, e.expected_value]
            if e.msg in by_msg.keys():
                by_msg[e.msg].append(row)
            else:
                by_msg[e.msg] = [row]

        return by_severity

    def to_df(self) -> pd.DataFrame:
        """
        Get DataFrame
        :return: DataFrame
        """
        data = [e.to_list() for e in self.entries]
        df = pd.DataFrame(data=data, columns=['Time', 'Severity', 'Message', 'Class',
                                              'Subject', 'Value', 'Expected value'])
        df.set_index('Time', inplace=True)
        return df

    def to_csv(self, fname):
        """
        Save to CSV
        :param fname: file name
        """
        self.to_df().to_csv(fname)

    def print(self) -> None:
        """
        Print the logs
        """
        print(self.to_df())

    def __str__(self):

        val = ''
        for e in self.entries:
            val += str(e) + '\n'
        return val

    def __getitem__(self, key):
        """
        get [index] implementation
        :param key: integer
        :return: LogEntry
        """
        return self.entries[key]

    def __iadd__(self, other: "Logger"):
        """
        += implementation
        :param other:
        :return:
        """

        if other is not None:
            self.entries += other.entries
        return self

    def __len__(self) -> int:
        return len(self.entries)

    def count_type(self, severity: LogSeverity) -> int:
        """
        Count the number of entries of a certain severity
        :param severity: LogSeverity
        :return: number of occurrences
        """
        c = 0
        for entry in self.entries:
            if entry.severity == severity:
                c += 1

        return c

    def info_count(self) -> int:
        return self.count_type(LogSeverity.Information)

    def warning_count(self) -> int:
        return self.count_type(LogSeverity.Warning)

    def error_count(self) -> int:
        return self.count_type(LogSeverity.Error)
