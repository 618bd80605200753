"""Text processing services - sentence parsing, tokenization, and highlighting."""

from glossia.services.text_processing.text_parser import extract_words, split_into_sentences
from glossia.services.text_processing.word_highlighting import (
    HighlightSpan,
    find_phrase_matches,
    format_promotion_message,
    generate_word_color,
    is_word_token,
    tokenize_text_for_clicks,
)

__all__ = [
    "split_into_sentences",
    "extract_words",
    "HighlightSpan",
    "find_phrase_matches",
    "format_promotion_message",
    "generate_word_color",
    "is_word_token",
    "tokenize_text_for_clicks",
]
