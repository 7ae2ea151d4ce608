"""Verification of exercises: compile, run or test them and check completion."""

from __future__ import annotations

import enum
import sys

from rustlings.exercise import ExerciseFailed, Mode
from rustlings.ui import no_emoji, style, success, warn


class RunMode(enum.Enum):
    """Whether a successful test run goes on to the completion prompt."""

    INTERACTIVE = "interactive"
    NON_INTERACTIVE = "non-interactive"


class VerificationFailed(Exception):
    """An exercise failed to build, failed to run, or is still marked pending."""

    def __init__(self, exercise):
        super().__init__(f"verification of {exercise} failed")
        self.exercise = exercise


class _ProgressBar:
    """A one-line progress bar drawn on standard error."""

    WIDTH = 60

    def __init__(self, total, position, stream=None):
        self.total = total
        self.position = position
        self.stream = stream if stream is not None else sys.stderr
        self.percentage = position / total * 100.0 if total else 0.0
        self._draw()

    def _bar(self):
        if self.total <= 0 or self.position >= self.total:
            return "#" * self.WIDTH
        filled = self.WIDTH * self.position // self.total
        return "#" * filled + ">" + "-" * (self.WIDTH - filled - 1)

    def _draw(self):
        line = (
            f"Progress: [{self._bar()}] {self.position}/{self.total} "
            f"({self.percentage:.1f} %)"
        )
        self.stream.write(f"\r{line}")
        self.stream.flush()

    def inc(self):
        self.position += 1
        if self.total:
            self.percentage += 100.0 / self.total
        self._draw()

    def finish(self):
        self.stream.write("\n")
        self.stream.flush()


def _separator():
    return style("====================", bold=True)


def _compile(exercise):
    """Compile the exercise, reporting the compiler output on failure."""
    try:
        return exercise.compile()
    except ExerciseFailed as exc:
        warn(f"Compiling of {exercise} failed! Please try again. Here's the output:")
        print(exc.output.stderr)
        return None


def _compile_only(exercise, success_hints):
    compiled = _compile(exercise)
    if compiled is None:
        return False
    with compiled:
        pass
    return prompt_for_completion(exercise, None, success_hints)


def _compile_and_run_interactively(exercise, success_hints):
    compiled = _compile(exercise)
    if compiled is None:
        return False
    with compiled:
        try:
            output = compiled.run()
        except ExerciseFailed as exc:
            warn(f"Ran {exercise} with errors")
            print(exc.output.stdout)
            print(exc.output.stderr)
            return False
        return prompt_for_completion(exercise, output.stdout, success_hints)


def _compile_and_test(exercise, run_mode, verbose, success_hints):
    compiled = _compile(exercise)
    if compiled is None:
        return False
    with compiled:
        try:
            output = compiled.run()
        except ExerciseFailed as exc:
            warn(f"Testing of {exercise} failed! Please try again. Here's the output:")
            print(exc.output.stdout)
            return False
        if verbose:
            print(output.stdout)
        if run_mode is RunMode.INTERACTIVE:
            return prompt_for_completion(exercise, None, success_hints)
        return True


def _check(exercise, verbose, success_hints):
    if exercise.mode in (Mode.TEST, Mode.BUILD_SCRIPT):
        return _compile_and_test(exercise, RunMode.INTERACTIVE, verbose, success_hints)
    if exercise.mode is Mode.COMPILE:
        return _compile_and_run_interactively(exercise, success_hints)
    return _compile_only(exercise, success_hints)


def verify(exercises, progress, verbose=False, success_hints=False):
    """Check each exercise in turn; raise VerificationFailed at the first that fails."""
    num_done, total = progress
    bar = _ProgressBar(total, num_done)
    try:
        for exercise in exercises:
            if not _check(exercise, verbose, success_hints):
                raise VerificationFailed(exercise)
            bar.inc()
    finally:
        bar.finish()


def test(exercise, verbose=False):
    """Compile and run an exercise's test harness without the completion prompt."""
    if not _compile_and_test(exercise, RunMode.NON_INTERACTIVE, verbose, False):
        raise VerificationFailed(exercise)


_SUCCESS_HEADLINES = {
    Mode.COMPILE: "Successfully ran {}!",
    Mode.TEST: "Successfully tested {}!",
    Mode.CLIPPY: "Successfully compiled {}!",
    Mode.BUILD_SCRIPT: "Successfully compiled {}!",
}


def prompt_for_completion(exercise, prompt_output=None, success_hints=False):
    """Return True if the exercise is done; otherwise explain how to move on."""
    state = exercise.state()
    if state.done():
        return True

    success(_SUCCESS_HEADLINES[exercise.mode].format(exercise))

    emoji_free = no_emoji()
    if exercise.mode is Mode.CLIPPY:
        success_msg = (
            "The code is compiling, and Clippy is happy!"
            if emoji_free
            else "The code is compiling, and 📎 Clippy 📎 is happy!"
        )
    else:
        success_msg = {
            Mode.COMPILE: "The code is compiling!",
            Mode.TEST: "The code is compiling, and the tests pass!",
            Mode.BUILD_SCRIPT: "Build script works!",
        }[exercise.mode]

    print()
    if emoji_free:
        print(f"~*~ {success_msg} ~*~")
    else:
        print(f"🎉 🎉  {success_msg} 🎉 🎉")
    print()

    if prompt_output is not None:
        print("Output:")
        print(_separator())
        print(prompt_output)
        print(_separator())
        print()
    if success_hints:
        print("Hints:")
        print(_separator())
        print(exercise.hint)
        print(_separator())
        print()

    print("You can keep working on this exercise,")
    print(
        "or jump into the next one by removing the "
        f"{style('`I AM NOT DONE`', bold=True)} comment:"
    )
    print()
    for context_line in state.context:
        line = (
            style(context_line.line, bold=True)
            if context_line.important
            else context_line.line
        )
        number = style(f"{context_line.number:>2}", "blue", bold=True)
        print(f"{number} {style('|', 'blue')}  {line}")

    return False