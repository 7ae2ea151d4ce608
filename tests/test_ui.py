import pytest

from rustlings import ui


def test_no_emoji_follows_environment(monkeypatch):
    monkeypatch.delenv("NO_EMOJI", raising=False)
    assert ui.no_emoji() is False
    monkeypatch.setenv("NO_EMOJI", "1")
    assert ui.no_emoji() is True


def test_style_red_escape_sequence():
    assert ui.style("x", "red") == "\x1b[31mx\x1b[0m"


def test_style_plain_text_unchanged():
    assert ui.style("plain") == "plain"


def test_style_bold_and_colour_wrap_text():
    styled = ui.style("word", "blue", bold=True)
    assert "word" in styled
    assert styled.startswith("\x1b[")
    assert styled.endswith("\x1b[0m")
    assert styled.count("\x1b[") == 3


def test_style_accepts_non_strings():
    assert "42" in ui.style(42, "green")


def test_style_unknown_colour():
    with pytest.raises(ValueError):
        ui.style("x", "purple")


def test_warn_without_emoji(monkeypatch, capsys):
    monkeypatch.setenv("NO_EMOJI", "1")
    ui.warn("Compilation failed")
    out = capsys.readouterr().out
    assert "Compilation failed" in out
    assert "!" in out
    assert "⚠️" not in out


def test_warn_with_emoji(monkeypatch, capsys):
    monkeypatch.delenv("NO_EMOJI", raising=False)
    ui.warn("Ran with errors")
    out = capsys.readouterr().out
    assert "⚠️" in out
    assert "Ran with errors" in out


def test_success_markers(monkeypatch, capsys):
    monkeypatch.setenv("NO_EMOJI", "1")
    ui.success("Successfully ran")
    plain = capsys.readouterr().out
    assert "✓" in plain and "✅" not in plain
    monkeypatch.delenv("NO_EMOJI")
    ui.success("Successfully ran")
    fancy = capsys.readouterr().out
    assert "✅" in fancy
    assert "Successfully ran" in fancy