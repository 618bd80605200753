"""Text parser - sentence splitting and word extraction for English-like prose."""

import re
from typing import List

_SENTENCE_BOUNDARY = re.compile(r"[.?!|;]\s+")
_WORD = re.compile(r"[A-Za-z']+")


def split_into_sentences(text: str) -> List[str]:
    """
    Split a block of text into sentences.

    Rules:
    - A sentence ends at whitespace following one of `. ? ! | ;`
    - The terminator stays with its sentence
    - Each sentence is trimmed; empty fragments are dropped
    - A trailing fragment without punctuation becomes the last sentence

    Args:
        text: Raw passage submitted by the reader.

    Returns:
        Ordered list of non-empty sentences (empty for empty input).
    """
    if not text:
        return []

    sentences: List[str] = []
    last_end = 0
    for match in _SENTENCE_BOUNDARY.finditer(text):
        sentence = text[last_end:match.end()].strip()
        if sentence:
            sentences.append(sentence)
        last_end = match.end()

    remaining = text[last_end:].strip()
    if remaining:
        sentences.append(remaining)

    return sentences


def extract_words(text: str) -> List[str]:
    """Return lowercased `[A-Za-z']+` tokens in order of appearance."""
    return [match.group(0).lower() for match in _WORD.finditer(text)]
