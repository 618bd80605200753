"""Prompt templates shared by every LLM provider."""

from glossia.core import ImageQueryOptimizationRequest

SIMPLIFICATION_PROMPT = """
You are a language assistant helping advanced English learners (3+ years experience) understand sophisticated text.

Simplify the sentence below using clear and modern English, without losing important meaning.

Then identify words AND phrases that would be challenging for learners with intermediate-advanced English (C1/C2 level). Focus ONLY on:
- Advanced academic vocabulary (sophisticated, nuanced terms)
- Professional/technical terminology
- Literary and formal expressions
- Complex idioms and phrasal verbs
- Sophisticated collocations
- Words rarely used in everyday conversation

DO NOT include basic or intermediate words that 3+ year learners already know (common verbs, everyday adjectives, basic prepositions, etc.).

For each challenging word or phrase, provide a clear definition using simpler English.

Respond ONLY in this exact JSON format:
{{
  "original": "{sentence}",
  "simplified": "the simplified version",
  "words": [
    {{ "word": "sophisticated_word", "meaning": "simple explanation", "is_phrase": false }},
    {{ "word": "complex phrasal expression", "meaning": "simple explanation", "is_phrase": true }}
  ]
}}

Sentence to analyze: "{sentence}"
"""

WORD_MEANING_PROMPT = """Define the word "{word}" in simple English using maximum 15 words.

Context: "{context}"

Provide a clear, concise definition that helps someone understand the word's meaning in this context.

Respond with ONLY the definition, no extra formatting or quotes."""

IMAGE_QUERY_PROMPT = """Generate an image search query for the word '{word}' based on its contextual meaning.

Context: "{context}"
Definition: {meaning}

RULES:
1. If the word itself is already visually descriptive (e.g., "hermit", "lighthouse", "castle"), use it directly
2. Output ONLY valid JSON: {{"optimized_query": "your query"}}
3. Maximum 4 words
4. Add context words that enhance, not distract
5. AVOID extracting unrelated or inappropriate descriptors from context
6. Focus on the PRIMARY subject and its relevant setting

PROHIBITED:
- NO nudity, body parts, or clothing state descriptors (naked, nude, bare, etc.)
- NO sexual or suggestive content
- NO inappropriate physical descriptions

Examples:
- "hermits" + "sea hermits issuing from" → {{"optimized_query": "hermit on sea"}}
- "lighthouse" + "the old lighthouse keeper" → {{"optimized_query": "lighthouse coastal tower"}}
- "crown" + "heavy crown of responsibility" → {{"optimized_query": "royal crown gold"}}
- "bank" + "river bank was muddy" → {{"optimized_query": "river bank shore"}}

Word: '{word}'
Context: '{context}'
Meaning: {meaning}"""

HEALTH_CHECK_PROMPT = "Hello"


def escape_quotes(text: str) -> str:
    """Escape double quotes so injected text cannot break the JSON shape."""
    return text.replace('"', '\\"')


def build_simplification_prompt(sentence: str) -> str:
    return SIMPLIFICATION_PROMPT.format(sentence=escape_quotes(sentence))


def build_word_meaning_prompt(word: str, context: str) -> str:
    return WORD_MEANING_PROMPT.format(word=escape_quotes(word), context=escape_quotes(context))


def build_image_query_prompt(request: ImageQueryOptimizationRequest) -> str:
    return IMAGE_QUERY_PROMPT.format(
        word=escape_quotes(request.word),
        context=escape_quotes(request.sentence_context),
        meaning=escape_quotes(request.word_meaning),
    )
