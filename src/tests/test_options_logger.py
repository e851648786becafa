import os

import pytest

from VectorCalcEngine.basic_structures import Logger, LogEntry
from VectorCalcEngine.enumerations import LogSeverity
from VectorCalcEngine.Calculus.calculus_options import CalculusOptions


def test_options_defaults():
    options = CalculusOptions()
    assert options.to_dict() == {
        "simplify_max_iter": 10,
        "use_numba": True,
        "error_model": "numpy",
        "add_doc_string": True,
    }
    assert options.get_keys() == ["simplify_max_iter", "use_numba", "error_model", "add_doc_string"]
    assert str(options).startswith("CalculusOptions: ")


def test_options_parse():
    options = CalculusOptions()
    options.parse({"simplify_max_iter": "3", "use_numba": 0, "not_an_option": 1})
    assert options.simplify_max_iter == 3
    assert options.use_numba is False
    assert not hasattr(options, "not_an_option")


def test_options_register_errors():
    options = CalculusOptions()
    with pytest.raises(KeyError):
        options.register(key="use_numba", tpe=bool)
    with pytest.raises(AttributeError):
        options.register(key="tolerance", tpe=float)


def test_logger_counts():
    logger = Logger()
    assert not logger.has_logs()

    logger.add_error("Bad field", subject="(x) => x", subject_class="VectorField", value=2, expected_value=3)
    logger.add_warning("Suspicious")
    logger.add_info("Note")
    logger.append("plain text")

    assert logger.has_logs()
    assert len(logger) == 4
    assert logger.error_count() == 1
    assert logger.warning_count() == 1
    assert logger.info_count() == 2
    assert logger[0].expected_value == "3"
    assert logger.to_dict()["Error"]["Bad field"][0][1] == "VectorField"


def test_logger_merge():
    a = Logger()
    a.add_error("first")
    b = Logger()
    b.add_error("second")
    a += b
    a += None
    assert [e.msg for e in a] == ["first", "second"]


def test_logger_to_df(tmp_path):
    logger = Logger()
    logger.add_error("Curl is only defined for three-dimensional VectorFields", value=2, expected_value=3)
    df = logger.to_df()
    assert list(df.columns) == ['Severity', 'Message', 'Class', 'Subject', 'Value', 'Expected value']
    assert df.index.name == 'Time'
    assert df['Severity'].iloc[0] == 'Error'

    fname = os.path.join(tmp_path, "logs.csv")
    logger.to_csv(fname)
    assert os.path.exists(fname)


def test_log_entry_str():
    entry = LogEntry(time="10:00:00", msg="hello", severity=LogSeverity.Warning)
    assert str(entry).startswith("10:00:00 Warning: hello")
