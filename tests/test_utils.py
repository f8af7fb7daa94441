import logging

import pytest

from projectctl.commands.utils import parse_vars, setup_logging
from projectctl.lib.errors import InvalidVarsError


class TestParseVars:
    def test_nothing_given(self):
        assert parse_vars(None, None) is None

    def test_json_argument(self):
        assert parse_vars('{"a": [1, 2]}', None) == {"a": [1, 2]}
        assert parse_vars('"text"', None) == "text"

    def test_yaml_file(self, tmp_path):
        path = tmp_path / "vars.yaml"
        path.write_text("name: demo\nports:\n  - 80\n  - 443\n")
        assert parse_vars(None, path) == {"name": "demo", "ports": [80, 443]}

    def test_argument_is_merged_over_file(self, tmp_path):
        path = tmp_path / "vars.yaml"
        path.write_text("name: demo\nport: 80\n")
        assert parse_vars('{"port": 8080}', path) == {"name": "demo", "port": 8080}

    def test_non_object_argument_replaces_file(self, tmp_path):
        path = tmp_path / "vars.yaml"
        path.write_text("name: demo\n")
        assert parse_vars("[1]", path) == [1]

    def test_invalid_json(self):
        with pytest.raises(InvalidVarsError):
            parse_vars("{oops", None)

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "vars.yaml"
        path.write_text("a: [1, 2\n")
        with pytest.raises(InvalidVarsError):
            parse_vars(None, path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(InvalidVarsError):
            parse_vars(None, tmp_path / "missing.yaml")


@pytest.mark.parametrize(
    "verbosity,quiet,level",
    [
        (0, False, logging.WARNING),
        (1, False, logging.INFO),
        (2, False, logging.DEBUG),
        (0, True, logging.ERROR),
    ],
)
def test_setup_logging_levels(monkeypatch, verbosity, quiet, level):
    monkeypatch.delenv("PROJECTCTL_DEBUG", raising=False)
    setup_logging(verbosity, quiet)
    logger = logging.getLogger("projectctl")
    assert logger.level == level
    assert len(logger.handlers) == 1


def test_setup_logging_debug_env(monkeypatch):
    monkeypatch.setenv("PROJECTCTL_DEBUG", "1")
    setup_logging(0, quiet=True)
    assert logging.getLogger("projectctl").level == logging.DEBUG
