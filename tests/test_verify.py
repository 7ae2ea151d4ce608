import subprocess
from unittest import mock

import pytest

from rustlings.exercise import Exercise, Mode
from rustlings.verify import VerificationFailed, prompt_for_completion, test, verify

PENDING_SOURCE = "// fake_exercise\n\n// I AM NOT DONE\n\nfn main() {\n\n}\n"
FINISHED_SOURCE = "// fake_exercise\n\nfn main() {\n\n}\n"


def _fake_run(compile_code=0, run_code=0, stdout=b"", stderr=b"", calls=None):
    def runner(args, **kwargs):
        if calls is not None:
            calls.append(list(args))
        if args[0] in ("rustc", "cargo"):
            return subprocess.CompletedProcess(args, compile_code, b"", stderr)
        return subprocess.CompletedProcess(args, run_code, stdout, stderr)

    return runner


def _exercise(tmp_path, name, source, mode=Mode.COMPILE, hint=""):
    path = tmp_path / f"{name}.rs"
    path.write_text(source, encoding="utf-8")
    return Exercise(name=name, path=path, mode=mode, hint=hint)


def test_verify_all_done_succeeds(tmp_path, capsys):
    exercises = [
        _exercise(tmp_path, "compSuccess", FINISHED_SOURCE),
        _exercise(tmp_path, "testSuccess", FINISHED_SOURCE, Mode.TEST),
    ]
    with mock.patch("rustlings.exercise.subprocess.run", side_effect=_fake_run()):
        assert verify(exercises, (0, 2), False, False) is None
    err = capsys.readouterr().err
    assert "2/2" in err
    assert "(100.0 %)" in err


def test_verify_pending_exercise_fails(tmp_path, capsys):
    exercise = _exercise(tmp_path, "pending_exercise", PENDING_SOURCE)
    with mock.patch("rustlings.exercise.subprocess.run", side_effect=_fake_run()):
        with pytest.raises(VerificationFailed) as info:
            verify([exercise], (0, 1), False, False)
    assert info.value.exercise is exercise
    assert "I AM NOT DONE" in capsys.readouterr().out


def test_verify_stops_at_first_failure(tmp_path, capsys):
    first = _exercise(tmp_path, "compFailure", FINISHED_SOURCE)
    second = _exercise(tmp_path, "compSuccess", FINISHED_SOURCE)
    calls = []
    runner = _fake_run(compile_code=1, stderr=b"expected pattern", calls=calls)
    with mock.patch("rustlings.exercise.subprocess.run", side_effect=runner):
        with pytest.raises(VerificationFailed) as info:
            verify([first, second], (0, 2), False, False)
    assert info.value.exercise is first
    assert all(str(second.path) not in call for call in calls)
    out = capsys.readouterr().out
    assert f"Compiling of {first} failed!" in out
    assert "expected pattern" in out


def test_verify_run_failure_reports_output(tmp_path, capsys):
    exercise = _exercise(tmp_path, "crash", FINISHED_SOURCE)
    runner = _fake_run(run_code=101, stdout=b"partial", stderr=b"panicked")
    with mock.patch("rustlings.exercise.subprocess.run", side_effect=runner):
        with pytest.raises(VerificationFailed):
            verify([exercise], (0, 1), False, False)
    out = capsys.readouterr().out
    assert f"Ran {exercise} with errors" in out
    assert "partial" in out and "panicked" in out


def test_verify_failing_test_harness(tmp_path, capsys):
    exercise = _exercise(tmp_path, "testNotPassed", FINISHED_SOURCE, Mode.TEST)
    runner = _fake_run(run_code=101, stdout=b"test not_passing ... FAILED")
    with mock.patch("rustlings.exercise.subprocess.run", side_effect=runner):
        with pytest.raises(VerificationFailed):
            verify([exercise], (0, 1), False, False)
    out = capsys.readouterr().out
    assert f"Testing of {exercise} failed!" in out
    assert "FAILED" in out


def test_test_skips_prompt_for_pending(tmp_path, capsys):
    exercise = _exercise(tmp_path, "pending_test_exercise", PENDING_SOURCE, Mode.TEST)
    with mock.patch("rustlings.exercise.subprocess.run", side_effect=_fake_run()):
        test(exercise, False)
    assert "I AM NOT DONE" not in capsys.readouterr().out


def test_test_verbose_shows_output(tmp_path, capsys):
    exercise = _exercise(tmp_path, "testSuccess", FINISHED_SOURCE, Mode.TEST)
    runner = _fake_run(stdout=b"THIS TEST TOO SHALL PASS")
    with mock.patch("rustlings.exercise.subprocess.run", side_effect=runner):
        test(exercise, True)
    assert "THIS TEST TOO SHALL PASS" in capsys.readouterr().out


def test_test_quiet_hides_output(tmp_path, capsys):
    exercise = _exercise(tmp_path, "testSuccess", FINISHED_SOURCE, Mode.TEST)
    runner = _fake_run(stdout=b"THIS TEST TOO SHALL PASS")
    with mock.patch("rustlings.exercise.subprocess.run", side_effect=runner):
        test(exercise, False)
    assert "THIS TEST TOO SHALL PASS" not in capsys.readouterr().out


def test_test_compile_failure_raises(tmp_path):
    exercise = _exercise(tmp_path, "testFailure", FINISHED_SOURCE, Mode.TEST)
    runner = _fake_run(compile_code=1)
    with mock.patch("rustlings.exercise.subprocess.run", side_effect=runner):
        with pytest.raises(VerificationFailed) as info:
            test(exercise, False)
    assert info.value.exercise is exercise


def test_prompt_done_returns_true_silently(tmp_path, capsys):
    exercise = _exercise(tmp_path, "finished_exercise", FINISHED_SOURCE)
    assert prompt_for_completion(exercise, "out", True) is True
    assert capsys.readouterr().out == ""


def test_prompt_pending_shows_context(tmp_path, capsys, monkeypatch):
    monkeypatch.setenv("NO_EMOJI", "1")
    exercise = _exercise(tmp_path, "pending_exercise", PENDING_SOURCE, hint="Hello!")
    assert prompt_for_completion(exercise, "program said hi", True) is False
    out = capsys.readouterr().out
    assert f"Successfully ran {exercise}!" in out
    assert "~*~ The code is compiling! ~*~" in out
    assert "program said hi" in out
    assert "Hello!" in out
    assert "// I AM NOT DONE" in out
    assert "fn main() {" in out


def test_prompt_without_hints_omits_hint(tmp_path, capsys, monkeypatch):
    monkeypatch.setenv("NO_EMOJI", "1")
    exercise = _exercise(
        tmp_path, "pending_test", PENDING_SOURCE, Mode.TEST, hint="secret hint text"
    )
    assert prompt_for_completion(exercise, None, False) is False
    out = capsys.readouterr().out
    assert "The code is compiling, and the tests pass!" in out
    assert "secret hint text" not in out
    assert "Output:" not in out