"""Word highlighting helpers - click tokens, highlight spans and word colours."""

import hashlib
from dataclasses import dataclass
from typing import List, Optional, Sequence

from glossia.core import WordMeaning

WORD_COLORS = [
    "#e53e3e",
    "#dd6b20",
    "#d69e2e",
    "#38a169",
    "#319795",
    "#3182ce",
    "#805ad5",
    "#d53f8c",
    "#2d3748",
    "#744210",
]


@dataclass
class HighlightSpan:
    """A run of tokens (inclusive indices) highlighted as one unit."""

    start_index: int
    end_index: int
    text: str
    is_phrase: bool


def generate_word_color(word: str) -> str:
    """Pick a stable palette colour for a word (case-insensitive)."""
    digest = hashlib.md5(word.lower().encode("utf-8")).digest()
    index = int.from_bytes(digest[:8], "big") % len(WORD_COLORS)
    return WORD_COLORS[index]


def tokenize_text_for_clicks(text: str) -> List[str]:
    """
    Split text into alternating word and non-word tokens.

    Concatenating the tokens reproduces the input exactly, so the UI can
    render every token and attach click handlers to the word ones.
    """
    tokens: List[str] = []
    current = ""
    in_word = False

    for ch in text:
        is_alpha = ch.isalpha()
        if is_alpha != in_word:
            if current:
                tokens.append(current)
                current = ""
            in_word = is_alpha
        current += ch

    if current:
        tokens.append(current)
    return tokens


def is_word_token(token: str) -> bool:
    return bool(token) and token.isalpha()


def _match_phrase_at(tokens: Sequence[str], start: int, phrase_words: Sequence[str]) -> Optional[int]:
    """Return the index of the last token of the phrase if it starts at `start`."""
    token_idx = start
    matched = 0

    while matched < len(phrase_words) and token_idx < len(tokens):
        token = tokens[token_idx]
        if is_word_token(token):
            if token.lower() != phrase_words[matched].lower():
                return None
            matched += 1
        token_idx += 1

    if matched == len(phrase_words) and token_idx > 0:
        return token_idx - 1
    return None


def find_phrase_matches(tokens: Sequence[str], word_meanings: Sequence[WordMeaning]) -> List[HighlightSpan]:
    """
    Locate highlight spans for annotated words within tokenized text.

    Phrases are matched first; single words are then highlighted only
    where no phrase already covers them.

    Args:
        tokens: Output of tokenize_text_for_clicks.
        word_meanings: Annotated words/phrases for the sentence.

    Returns:
        Spans sorted by start index.
    """
    if not tokens or not word_meanings:
        return []

    spans: List[HighlightSpan] = []

    for meaning in word_meanings:
        if not meaning.is_phrase:
            continue
        phrase_words = meaning.word.split()
        if not phrase_words:
            continue

        i = 0
        while i < len(tokens):
            if not is_word_token(tokens[i]):
                i += 1
                continue
            end = _match_phrase_at(tokens, i, phrase_words)
            if end is None:
                i += 1
                continue
            spans.append(
                HighlightSpan(
                    start_index=i,
                    end_index=end,
                    text="".join(tokens[i:end + 1]),
                    is_phrase=True,
                )
            )
            i = end + 1

    single_words = {m.word.lower() for m in word_meanings if not m.is_phrase}
    for idx, token in enumerate(tokens):
        if not is_word_token(token):
            continue
        covered = any(span.start_index <= idx <= span.end_index for span in spans)
        if not covered and token.lower() in single_words:
            spans.append(HighlightSpan(start_index=idx, end_index=idx, text=token, is_phrase=False))

    spans.sort(key=lambda span: span.start_index)
    return spans


def format_promotion_message(promoted_words: Sequence[str]) -> Optional[str]:
    """Build the notification shown after words are promoted to known."""
    if not promoted_words:
        return None
    if len(promoted_words) == 1:
        return f"'{promoted_words[0]}' added to known words!"
    return f"{len(promoted_words)} words added to known words!"
