"""Tests for column text fitting."""

from src.renderer.text_fitting import ELLIPSIS, ellipsize, fit_text, text_width, wrap_text

FONT = "Helvetica"
SIZE = 12


def test_short_text_stays_on_one_line():
    assert wrap_text("Consulting", 80, FONT, SIZE) == ["Consulting"]


def test_blank_text_yields_one_empty_line():
    assert wrap_text("", 80, FONT, SIZE) == [""]
    assert wrap_text(None, 80, FONT, SIZE) == [""]


def test_wrapped_lines_fit_and_keep_every_word():
    text = "Design and delivery of the quarterly marketing brochure including two revision rounds"
    lines = wrap_text(text, 40, FONT, SIZE)

    assert len(lines) > 1
    assert all(text_width(line, FONT, SIZE) <= 40 for line in lines)
    assert " ".join(lines).split() == text.split()


def test_explicit_line_breaks_are_kept():
    assert wrap_text("12 Market Road\nPune", 80, FONT, SIZE) == ["12 Market Road", "Pune"]


def test_long_word_is_broken_by_character():
    word = "x" * 200
    lines = wrap_text(word, 20, FONT, SIZE)

    assert len(lines) > 1
    assert "".join(lines) == word
    assert all(text_width(line, FONT, SIZE) <= 20 for line in lines)


def test_ellipsize_marks_cut_text():
    text = "A description that is far too long for a narrow column"
    line = ellipsize(text, 30, FONT, SIZE)

    assert line.endswith(ELLIPSIS)
    assert text_width(line, FONT, SIZE) <= 30
    assert text.startswith(line[:-len(ELLIPSIS)])


def test_ellipsize_leaves_fitting_text_alone():
    assert ellipsize("Short", 30, FONT, SIZE) == "Short"


def test_fit_text_ellipsis_policy_is_single_line():
    lines = fit_text("word " * 50, 30, FONT, SIZE, policy="ellipsis")
    assert len(lines) == 1
    assert lines[0].endswith(ELLIPSIS)


def test_fit_text_caps_lines_with_marker():
    lines = fit_text("word " * 200, 30, FONT, SIZE, policy="wrap", max_lines=3)

    assert len(lines) == 3
    assert lines[-1].endswith(ELLIPSIS)
    assert not lines[0].endswith(ELLIPSIS)


def test_fit_text_without_overflow_is_unchanged():
    assert fit_text("Travel", 30, FONT, SIZE, policy="wrap", max_lines=3) == ["Travel"]
