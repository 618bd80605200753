"""
Glossia - An assisted-reading engine for English language learners.

This package provides the core of a reader that offers:
- Sentence-by-sentence simplification through a language model
- Short in-context word definitions
- Illustrative image search for difficult words
- Vocabulary tracking with automatic promotion to known words
"""

__version__ = "0.1.0"
