"""Running and resetting single exercises."""

from __future__ import annotations

import subprocess

from rustlings.exercise import ExerciseFailed, Mode
from rustlings.ui import success, warn
from rustlings.verify import VerificationFailed, test


class RunError(Exception):
    """Running or resetting an exercise failed."""

    def __init__(self, exercise):
        super().__init__(f"running {exercise} failed")
        self.exercise = exercise


def _compile_and_run(exercise):
    try:
        compiled = exercise.compile()
    except ExerciseFailed as exc:
        warn(f"Compilation of {exercise} failed!, Compiler error message:\n")
        print(exc.output.stderr)
        raise RunError(exercise) from exc

    with compiled:
        try:
            output = compiled.run()
        except ExerciseFailed as exc:
            print(exc.output.stdout)
            print(exc.output.stderr)
            warn(f"Ran {exercise} with errors")
            raise RunError(exercise) from exc

    print(output.stdout)
    success(f"Successfully ran {exercise}")


def run(exercise, verbose=False):
    """Compile and run, or test, a single exercise; raise RunError on failure."""
    if exercise.mode in (Mode.TEST, Mode.BUILD_SCRIPT):
        try:
            test(exercise, verbose)
        except VerificationFailed as exc:
            raise RunError(exercise) from exc
    else:
        _compile_and_run(exercise)


def reset(exercise):
    """Stash the changes made to the exercise's file with git."""
    try:
        return subprocess.Popen(["git", "stash", "--", str(exercise.path)])
    except OSError as exc:
        raise RunError(exercise) from exc