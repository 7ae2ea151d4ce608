# rustlings

A command-line companion for working through small Rust exercises. Each
exercise is a `.rs` file listed in an `info.toml` file. The tool compiles the
exercise, runs it or its tests, and tells you when it looks finished.

An exercise counts as finished once its `// I AM NOT DONE` marker comment has
been removed. Until then, even an exercise that passes is reported as pending,
and the lines around the marker are shown.

## Requirements

- Python 3.11 or later
- `rustc` on your `PATH`
- `cargo` for exercises checked with Clippy or built through a build script
- `git` for `rustlings reset`

## Installation

```
pip install .
```

## Usage

Run every command from the directory that holds `info.toml`. Without that
file, or without a working `rustc`, the tool prints a message and exits with
status 1. With no subcommand it prints a welcome banner and a short
introduction.

```
rustlings watch            # verify, then re-verify whenever a .rs file under exercises/ changes
rustlings verify           # verify every exercise in the listed order, stopping at the first failure
rustlings run <name>       # compile and run (or test) one exercise
rustlings hint <name>      # print the hint for an exercise
rustlings reset <name>     # start "git stash -- <path>" for the exercise's file
rustlings list             # list exercises with their status and overall progress
rustlings lsp              # write rust-project.json so rust-analyzer understands the exercises
rustlings cicvverify       # run every exercise concurrently and write a JSON report
rustlings --version
```

For `run`, `hint` and `reset`, the name `next` picks the first exercise that is
not yet finished. An unknown name prints `No exercise found for '<name>'!` and
exits with status 1.

Options:

- `--nocapture` shows the output of test exercises.
- `watch --success-hints` shows the exercise's hint after it passes.
- `list -p/--paths` or `list -n/--names` print only paths or only names.
- `list -f/--filter a,b` keeps exercises whose name or path contains one of the
  comma-separated patterns.
- `list -s/--solved` and `list -u/--unsolved` filter by status.

Set the `NO_EMOJI` environment variable to use plain-text symbols instead of
emoji.

### Watch mode commands

While `watch` is running you can type:

- `hint`: print the hint of the exercise that failed last
- `clear`: clear the screen
- `quit`: leave watch mode
- `!<cmd>`: run a command, for example `!rustc --explain E0381`
- `help`: list these commands

### Grading report

`cicvverify` runs every exercise in a thread pool, prints progress as each one
finishes, and writes the results with totals and elapsed seconds to
`.github/result/check_result.json`. The `.github/result` directory must
already exist; otherwise the report cannot be written and the command exits
with status 1.

### rust-analyzer

`lsp` takes the standard library sources from `RUST_SRC_PATH`, or else from
`rustc --print sysroot`, and adds one crate for every `.rs` file below
`exercises/` to `rust-project.json`.

## The exercise list

`info.toml` holds one `[[exercises]]` table per exercise. All four keys are
required:

```toml
[[exercises]]
name = "intro1"
path = "exercises/intro/intro1.rs"
mode = "compile"     # compile, test, clippy or buildscript
hint = "Remove the I AM NOT DONE comment to move on."
```

## What it does not include

The package ships no exercises and no `info.toml`; it works on an exercise set
that you supply in the current directory.

## Using it from Python

The pieces are importable: `rustlings.exercise.load_exercises` reads
`info.toml`, `Exercise.state()` and `Exercise.looks_done()` report the marker,
`rustlings.verify.verify` and `rustlings.run.run` check exercises, and
`rustlings.cli.main(argv)` runs the command line and returns its exit status.

## Running the tests

```
pip install .[test]
pytest
```