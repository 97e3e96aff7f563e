"""Line, character and word counts for note content."""

from pydantic import BaseModel


class TextStats(BaseModel):
    lines: int
    characters: int
    words: int


def count_words(text: str) -> int:
    if not text or not text.strip():
        return 0
    return len(text.split())


def count_lines(text: str) -> int:
    if not text:
        return 0
    return len(text.split("\n"))


def text_stats(text: str) -> TextStats:
    text = text or ""
    return TextStats(
        lines=count_lines(text),
        characters=len(text),
        words=count_words(text),
    )
