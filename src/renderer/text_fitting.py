"""
Text Fitting Module.

Measures text with the PDF standard font metrics and fits it into a
column width. Two explicit overflow policies exist:

    - wrap: break at spaces, split words longer than the column by
      character, keep explicit line breaks
    - ellipsis: one line, overflowing text replaced by "..."

Text is never cut without the ellipsis marker.

Author: ML Engineering Team
"""

from typing import List, Optional

from reportlab.lib.units import mm
from reportlab.pdfbase.pdfmetrics import stringWidth

ELLIPSIS = "..."


def text_width(text: str, font: str, size: float) -> float:
    """Width of ``text`` in millimetres."""
    return stringWidth(text, font, size) / mm


def _break_word(word: str, max_width: float, font: str, size: float) -> List[str]:
    # At least one character per piece so a too-narrow column cannot loop
    pieces = []
    current = ""
    for char in word:
        if current and text_width(current + char, font, size) > max_width:
            pieces.append(current)
            current = char
        else:
            current += char
    if current:
        pieces.append(current)
    return pieces


def wrap_text(text: str, max_width: float, font: str, size: float) -> List[str]:
    """
    Wrap text into lines no wider than ``max_width``.

    Args:
        text: Text to wrap; newlines force a line break.
        max_width: Available width in mm.
        font: Standard font name.
        size: Font size in points.

    Returns:
        List of lines; a blank input yields one empty line.

    Example:
        >>> wrap_text("Consulting services for March", 30, "Helvetica", 12)
        ['Consulting', 'services for', 'March']
    """
    lines: List[str] = []

    for paragraph in (text or "").replace("\r\n", "\n").replace("\r", "\n").split("\n"):
        words = paragraph.split()
        if not words:
            lines.append("")
            continue

        current = ""
        for word in words:
            candidate = f"{current} {word}" if current else word
            if text_width(candidate, font, size) <= max_width:
                current = candidate
                continue

            if current:
                lines.append(current)
                current = ""

            if text_width(word, font, size) <= max_width:
                current = word
            else:
                pieces = _break_word(word, max_width, font, size)
                lines.extend(pieces[:-1])
                current = pieces[-1]

        lines.append(current)

    return lines or [""]


def ellipsize(text: str, max_width: float, font: str, size: float, force: bool = False) -> str:
    """
    Fit text on one line, ending it with "..." when it had to be cut.

    Args:
        text: Text to fit; line breaks become spaces.
        max_width: Available width in mm.
        font: Standard font name.
        size: Font size in points.
        force: Append the marker even if the text already fits.

    Returns:
        The fitted line.
    """
    line = " ".join((text or "").split())
    if not force and text_width(line, font, size) <= max_width:
        return line

    while line and text_width(line + ELLIPSIS, font, size) > max_width:
        line = line[:-1]
    return line.rstrip() + ELLIPSIS


def fit_text(
    text: str,
    max_width: float,
    font: str,
    size: float,
    policy: str = "wrap",
    max_lines: Optional[int] = None
) -> List[str]:
    """
    Fit text into a column according to the overflow policy.

    With ``wrap`` the result has at most ``max_lines`` lines; when the
    wrapped text is longer, the last kept line ends with "...".

    Returns:
        Lines to draw, top to bottom.
    """
    if policy == "ellipsis":
        return [ellipsize(text, max_width, font, size)]

    lines = wrap_text(text, max_width, font, size)
    if max_lines is not None and len(lines) > max_lines:
        kept = lines[:max(1, max_lines)]
        kept[-1] = ellipsize(kept[-1], max_width, font, size, force=True)
        return kept
    return lines
