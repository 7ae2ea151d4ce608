"""Exercises: their description, compilation, execution and completion state."""

from __future__ import annotations

import contextlib
import enum
import os
import re
import subprocess
import threading
import tomllib
from dataclasses import dataclass, field
from pathlib import Path

from rustlings.ui import no_emoji

RUSTC_COLOR_ARGS = ("--color", "always")
RUSTC_EDITION_ARGS = ("--edition", "2021")
I_AM_DONE_REGEX = re.compile(r"(?m)^\s*///?\s*I\s+AM\s+NOT\s+DONE")
CONTEXT = 2
CLIPPY_CARGO_TOML_PATH = "./exercises/clippy/Cargo.toml"
BUILD_SCRIPT_CARGO_TOML_PATH = "./exercises/tests/Cargo.toml"


def temp_file():
    """Return a temporary binary name unique to this process and thread."""
    return f"./temp_{os.getpid()}_ThreadId{threading.get_ident()}"


def clean():
    """Remove the temporary binary, ignoring any error."""
    with contextlib.suppress(OSError):
        os.remove(temp_file())


class Mode(enum.Enum):
    """How an exercise is checked."""

    COMPILE = "compile"
    TEST = "test"
    CLIPPY = "clippy"
    BUILD_SCRIPT = "buildscript"


@dataclass(frozen=True)
class ContextLine:
    """A source line shown around a pending marker."""

    line: str
    number: int
    important: bool


@dataclass(frozen=True)
class State:
    """Completion state; an empty context means the exercise is done."""

    context: tuple[ContextLine, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "context", tuple(self.context))

    def done(self):
        return not self.context


@dataclass
class ExerciseOutput:
    """Captured output of a compiler or exercise run."""

    stdout: str = ""
    stderr: str = ""


class ExerciseFailed(Exception):
    """Compiling or running an exercise failed."""

    def __init__(self, output):
        super().__init__(output.stderr or output.stdout)
        self.output = output


def _output_of(completed):
    return ExerciseOutput(
        stdout=completed.stdout.decode("utf-8", errors="replace"),
        stderr=completed.stderr.decode("utf-8", errors="replace"),
    )


def _source_lines(source):
    parts = source.split("\n")
    if parts and parts[-1] == "":
        parts.pop()
    return [part[:-1] if part.endswith("\r") else part for part in parts]


class CompiledExercise:
    """A successfully compiled exercise; closing it removes the binary."""

    def __init__(self, exercise):
        self.exercise = exercise

    def run(self):
        """Run the compiled binary; raise ExerciseFailed on a non-zero exit."""
        return self.exercise._run()

    def close(self):
        clean()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()
        return False


def _cargo_toml(name):
    return (
        "[package]\n"
        f'name = "{name}"\n'
        'version = "0.0.1"\n'
        'edition = "2021"\n'
        "[[bin]]\n"
        f'name = "{name}"\n'
        f'path = "{name}.rs"'
    )


def _write_cargo_toml(path, name):
    message = (
        "Failed to write Clippy Cargo.toml file."
        if no_emoji()
        else "Failed to write 📎 Clippy 📎 Cargo.toml file."
    )
    try:
        Path(path).write_text(_cargo_toml(name), encoding="utf-8")
    except OSError as exc:
        raise RuntimeError(message) from exc


@dataclass
class Exercise:
    """One exercise as described in info.toml."""

    name: str
    path: Path
    mode: Mode
    hint: str = ""
    _source_path: Path = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        self.path = Path(self.path)
        self.mode = Mode(self.mode)

    def __str__(self):
        return str(self.path)

    def _rustc(self, *extra):
        return [
            "rustc",
            *extra,
            str(self.path),
            "-o",
            temp_file(),
            *RUSTC_COLOR_ARGS,
            *RUSTC_EDITION_ARGS,
        ]

    def compile(self):
        """Build the exercise; raise ExerciseFailed with compiler output on failure."""
        if self.mode is Mode.COMPILE:
            completed = subprocess.run(self._rustc(), capture_output=True)
        elif self.mode is Mode.TEST:
            completed = subprocess.run(self._rustc("--test"), capture_output=True)
        elif self.mode is Mode.CLIPPY:
            _write_cargo_toml(CLIPPY_CARGO_TOML_PATH, self.name)
            # Build a runnable binary too; a failure here shows up again in clippy.
            subprocess.run(self._rustc(), capture_output=True)
            subprocess.run(
                ["cargo", "clean", "--manifest-path", CLIPPY_CARGO_TOML_PATH, *RUSTC_COLOR_ARGS],
                capture_output=True,
            )
            completed = subprocess.run(
                [
                    "cargo",
                    "clippy",
                    "--manifest-path",
                    CLIPPY_CARGO_TOML_PATH,
                    *RUSTC_COLOR_ARGS,
                    "--",
                    "-D",
                    "warnings",
                    "-D",
                    "clippy::float_cmp",
                ],
                capture_output=True,
            )
        else:
            _write_cargo_toml(BUILD_SCRIPT_CARGO_TOML_PATH, self.name)
            completed = subprocess.run(
                ["cargo", "test", "--manifest-path", BUILD_SCRIPT_CARGO_TOML_PATH],
                capture_output=True,
            )

        if completed.returncode == 0:
            return CompiledExercise(self)
        clean()
        raise ExerciseFailed(_output_of(completed))

    def _run(self):
        if self.mode is Mode.BUILD_SCRIPT:
            return ExerciseOutput()
        args = ["--show-output"] if self.mode is Mode.TEST else []
        completed = subprocess.run([temp_file(), *args], capture_output=True)
        output = _output_of(completed)
        if completed.returncode != 0:
            raise ExerciseFailed(output)
        return output

    def state(self):
        """Read the source and report whether the pending marker is still there."""
        source = self.path.read_text(encoding="utf-8")
        if not I_AM_DONE_REGEX.search(source):
            return State()

        lines = _source_lines(source)
        matched = next(
            (i for i, line in enumerate(lines) if I_AM_DONE_REGEX.search(line)),
            None,
        )
        if matched is None:
            raise ValueError(f"pending marker in {self.path} does not sit on one line")

        first = max(matched - CONTEXT, 0)
        last = matched + CONTEXT
        return State(
            tuple(
                ContextLine(line=line, number=i + 1, important=i == matched)
                for i, line in enumerate(lines[first : last + 1], start=first)
            )
        )

    def looks_done(self):
        """True when the pending marker has been removed from the source."""
        return self.state().done()


def load_exercises(path="info.toml"):
    """Read the exercise list from an info.toml file."""
    with open(path, "rb") as handle:
        data = tomllib.load(handle)
    exercises = []
    for entry in data.get("exercises", []):
        try:
            exercises.append(
                Exercise(
                    name=entry["name"],
                    path=Path(entry["path"]),
                    mode=Mode(entry["mode"]),
                    hint=entry["hint"],
                )
            )
        except KeyError as exc:
            raise ValueError(f"exercise entry is missing {exc.args[0]!r}") from None
    return exercises