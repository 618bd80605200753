"""Main entry point for the Glossia reading assistant."""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import List, Optional

from glossia import __version__
from glossia.coordinators import ReadingEngine
from glossia.core import GlossiaError, describe_error
from glossia.io import JsonVocabularyRepository
from glossia.services import GlossiaSettings, SettingsManager, init_logging, log_shutdown, log_startup
from glossia.services.http import ResilientHttpClient
from glossia.services.images import ImageClientFactory
from glossia.services.llm import LLMClientFactory, ProviderType
from glossia.services.vocabulary import VocabularyManager

logger = logging.getLogger(__name__)

_HTTP_PROVIDERS = (ProviderType.OPENAI, ProviderType.CLAUDE)


def build_reading_engine(settings: GlossiaSettings) -> ReadingEngine:
    """
    Wire providers, vocabulary storage and the engine together.
    This is the only place that knows how to instantiate every component.
    """
    # 1. Transport for HTTP-based language models
    llm_http = None
    if settings.llm.provider in _HTTP_PROVIDERS:
        llm_http = ResilientHttpClient(timeout=settings.llm.timeout, retry_config=settings.retry)

    # 2. Providers
    llm_client = LLMClientFactory.create(settings.llm, http_client=llm_http)
    image_client = ImageClientFactory.create(settings.image)

    # 3. Vocabulary
    repository = JsonVocabularyRepository(settings.vocabulary_dir)
    vocabulary = VocabularyManager(repository, promotion_threshold=settings.word_promotion_threshold)

    # 4. Engine
    return ReadingEngine(
        llm_client=llm_client,
        image_client=image_client,
        vocabulary=vocabulary,
        settings=settings,
    )


async def read_text(engine: ReadingEngine, text: str) -> None:
    """Print each sentence next to its simplification until the end of the text."""
    try:
        total = engine.load_text(text)
        while True:
            sentence = engine.current_sentence()
            response = await engine.process_current_sentence()
            print(f"[{engine.position() + 1}/{total}] {sentence}")
            if response is not None:
                print(f"    -> {response.simplified}")
                for word in engine.get_display_words(response.words):
                    print(f"       {word.word}: {word.meaning}")
            if not engine.next():
                break
    finally:
        await engine.aclose()


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="glossia", description="Read a text with sentence-by-sentence simplification.")
    parser.add_argument("path", type=Path, help="UTF-8 text file to read")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """
    Bootstrap logging and settings, then read the given file.

    Returns:
        Process exit code.
    """
    args = parse_args(argv)

    try:
        init_logging()
    except GlossiaError as e:
        print(f"Logging configuration error: {e}", file=sys.stderr)
        return 2

    log_startup("glossia", __version__)
    try:
        settings = SettingsManager().load()
        text = args.path.read_text(encoding="utf-8")
        engine = build_reading_engine(settings)
        asyncio.run(read_text(engine, text))
    except GlossiaError as e:
        logger.error(f"{e.kind} error: {e}")
        print(describe_error(e), file=sys.stderr)
        return 1
    except OSError as e:
        print(f"Could not read {args.path}: {e}", file=sys.stderr)
        return 1
    finally:
        log_shutdown("glossia")

    return 0


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
