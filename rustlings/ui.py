"""Terminal styling and the warning/success status lines."""

import os

_COLOURS = {"red": 31, "green": 32, "blue": 34}
_RESET = "\x1b[0m"


def no_emoji():
    """Return True when the NO_EMOJI environment variable is set."""
    return "NO_EMOJI" in os.environ


def style(text, color=None, bold=False):
    """Wrap ``text`` in ANSI escape codes for the given colour and weight."""
    codes = []
    if color is not None:
        try:
            codes.append(_COLOURS[color])
        except KeyError:
            raise ValueError(f"unknown colour: {color!r}") from None
    if bold:
        codes.append(1)
    if not codes:
        return str(text)
    prefix = "".join(f"\x1b[{code}m" for code in codes)
    return f"{prefix}{text}{_RESET}"


def warn(message):
    """Print ``message`` as a red warning line."""
    marker = "!" if no_emoji() else "⚠️ "
    print(f"{style(marker, 'red')} {style(message, 'red')}")


def success(message):
    """Print ``message`` as a green success line."""
    marker = "✓" if no_emoji() else "✅"
    print(f"{style(marker, 'green')} {style(message, 'green')}")