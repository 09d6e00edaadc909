"""Display cleanup for model output."""
import re

_MARKDOWN_CHARS = re.compile(r"[*_#`]")
_LINE_EDGE_SPACE = re.compile(r"^[ \t]+|[ \t]+$", re.MULTILINE)
_BLANK_LINES = re.compile(r"\n\s*\n")


def strip_markdown_chars(text: str) -> str:
    """Drop *, _, # and backticks; digits and punctuation stay."""
    return _MARKDOWN_CHARS.sub("", text)


def clean_markdown(text: str) -> str:
    """Strip markdown decoration and collapse blank-line runs into one blank line.

    Spaces left at line edges (e.g. after a removed "* " bullet) are dropped too.
    Idempotent: clean_markdown(clean_markdown(t)) == clean_markdown(t).
    """
    text = strip_markdown_chars(text)
    text = _LINE_EDGE_SPACE.sub("", text)
    text = _BLANK_LINES.sub("\n\n", text)
    return text.strip()
