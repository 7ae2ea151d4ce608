"""Check, run and grade small Rust exercises from the command line."""

__version__ = "5.5.1"
__all__ = ["__version__"]