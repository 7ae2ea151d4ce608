"""Watch mode: re-verify exercises whenever their files change."""

from __future__ import annotations

import enum
import errno
import itertools
import os
import queue
import subprocess
import sys
import threading
from pathlib import Path

from watchdog.events import FileSystemEventHandler
from watchdog.observers import Observer

from rustlings.verify import VerificationFailed, verify

WATCH_ROOT = "exercises"
_POLL_SECONDS = 1.0

_HELP = "\n".join(
    [
        "Commands available to you in watch mode:",
        "  hint   - prints the current exercise's hint",
        "  clear  - clears the screen",
        "  quit   - quits watch mode",
        "  !<cmd> - executes a command, like `!rustc --explain E0381`",
        "  help   - displays this help message",
        "",
        "Watch mode automatically re-evaluates the current exercise",
        "when you edit a file's contents.",
    ]
)


class WatchStatus(enum.Enum):
    """How watch mode ended."""

    FINISHED = "finished"
    UNFINISHED = "unfinished"


def handle_shell_command(line, hint=None):
    """Act on one line typed in watch mode; return True when asked to quit."""
    command = line.strip()
    if command == "hint":
        if hint is not None:
            print(hint)
    elif command == "clear":
        print("\x1b[2J\x1b[1;1H")
    elif command == "quit":
        print("Bye!")
        return True
    elif command == "help":
        print(_HELP)
    elif command.startswith("!"):
        cmd = command[1:]
        parts = cmd.split()
        if not parts:
            print("no command provided")
        else:
            try:
                subprocess.run(parts)
            except OSError as exc:
                print(f"failed to execute command `{cmd}`: {exc}")
    else:
        print(f"unknown command: {command}")
    return False


class _SharedHint:
    """The hint of the exercise that failed last, shared with the shell thread."""

    def __init__(self, value):
        self._lock = threading.Lock()
        self._value = value

    def get(self):
        with self._lock:
            return self._value

    def set(self, value):
        with self._lock:
            self._value = value


class _ChangeHandler(FileSystemEventHandler):
    """Queue the paths of created or modified files."""

    def __init__(self, events):
        super().__init__()
        self._events = events

    def on_any_event(self, event):
        if event.is_directory:
            return
        if event.event_type in ("created", "modified"):
            self._events.put(os.fsdecode(event.src_path))


def _clear_screen():
    print("\x1bc")


def _spawn_watch_shell(hint, should_quit):
    print(
        "Welcome to watch mode! You can type 'help' to get an overview "
        "of the commands you can use here."
    )

    def loop():
        while True:
            try:
                line = sys.stdin.readline()
            except (OSError, ValueError) as exc:
                print(f"error reading command: {exc}")
                return
            if not line:
                return
            if handle_shell_command(line, hint.get()):
                should_quit.set()

    threading.Thread(target=loop, name="watch-shell", daemon=True).start()


def _ends_with(full_path, tail):
    tail_parts = tuple(part for part in Path(tail).parts if part != ".")
    if not tail_parts:
        return True
    return full_path.parts[-len(tail_parts):] == tail_parts


def _drain(events, first):
    changed = [first]
    while True:
        try:
            changed.append(events.get_nowait())
        except queue.Empty:
            return list(dict.fromkeys(changed))


def _reverify(exercises, changed, verbose, success_hints):
    """Verify after a change to ``changed``; return the failing exercise or None."""
    filepath = Path(changed).resolve()
    matching = next((e for e in exercises if _ends_with(filepath, e.path)), None)
    pending = itertools.chain(
        [matching] if matching is not None else [],
        (
            e
            for e in exercises
            if not e.looks_done() and not _ends_with(filepath, e.path)
        ),
    )
    num_done = sum(1 for e in exercises if e.looks_done())
    _clear_screen()
    try:
        verify(pending, (num_done, len(exercises)), verbose, success_hints)
    except VerificationFailed as exc:
        return exc.exercise
    return None


def watch(exercises, verbose=False, success_hints=False):
    """Verify the exercises, then re-verify whenever a file below exercises/ changes."""
    exercises = list(exercises)
    root = Path(WATCH_ROOT)
    if not root.is_dir():
        raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(root))

    events = queue.Queue()
    observer = Observer()
    observer.schedule(_ChangeHandler(events), str(root), recursive=True)
    observer.start()
    try:
        _clear_screen()
        try:
            verify(exercises, (0, len(exercises)), verbose, success_hints)
        except VerificationFailed as exc:
            hint = _SharedHint(exc.exercise.hint)
        else:
            return WatchStatus.FINISHED

        should_quit = threading.Event()
        _spawn_watch_shell(hint, should_quit)
        while not should_quit.is_set():
            try:
                first = events.get(timeout=_POLL_SECONDS)
            except queue.Empty:
                continue
            for changed in _drain(events, first):
                path = Path(changed)
                if path.suffix != ".rs" or not path.exists():
                    continue
                failed = _reverify(exercises, changed, verbose, success_hints)
                if failed is None:
                    return WatchStatus.FINISHED
                hint.set(failed.hint)
        return WatchStatus.UNFINISHED
    finally:
        observer.stop()
        observer.join()