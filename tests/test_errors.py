import pytest

from projectctl.lib.errors import (
    EX_CANTCREAT,
    EX_USAGE,
    DestExistsError,
    GitError,
    MissingTemplateError,
    exit_with_error,
    handle_error,
    iter_causes,
)


def test_error_exit_codes(tmp_path):
    assert DestExistsError(tmp_path).exit_code == EX_CANTCREAT
    assert MissingTemplateError().exit_code == EX_USAGE
    assert GitError("boom").message == "git error: boom"


def test_iter_causes():
    try:
        try:
            raise OSError("disk full")
        except OSError as e:
            raise GitError("clone failed") from e
    except GitError as e:
        causes = list(iter_causes(e))
    assert [str(c) for c in causes] == ["disk full"]


def test_handle_error_prints_message_and_causes(capsys):
    error = GitError("fetch failed")
    error.__cause__ = OSError("network down")

    with pytest.raises(SystemExit) as exc_info:
        handle_error(error)

    assert exc_info.value.code == 70
    err = capsys.readouterr().err
    assert "Error: git error: fetch failed" in err
    assert "caused by: network down" in err


def test_handle_error_unexpected(capsys):
    with pytest.raises(SystemExit) as exc_info:
        handle_error(RuntimeError("oops"))
    assert exc_info.value.code == 1
    assert "Unexpected error: oops" in capsys.readouterr().err


def test_exit_with_error_accepts_any_iterable_of_causes(capsys):
    for causes in ([OSError("first")], ()):
        with pytest.raises(SystemExit):
            exit_with_error("failed", 74, causes)
    with pytest.raises(SystemExit):
        exit_with_error("failed again")

    err = capsys.readouterr().err
    assert err.count("caused by: first") == 1
    assert err.count("Error: failed\n") == 2
    assert "Error: failed again" in err
