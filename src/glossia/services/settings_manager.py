"""Settings Manager - Handles provider keys and reader preferences."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv

from glossia.core import ConfigError
from glossia.io import default_vocabulary_dir
from glossia.services.env_parsing import env_bool, env_float, env_int, env_str
from glossia.services.http import RetryConfig
from glossia.services.images import ImageConfig
from glossia.services.llm import LLMConfig
from glossia.services.vocabulary import DEFAULT_PROMOTION_THRESHOLD

THEMES = ("light", "dark")


@dataclass
class GlossiaSettings:
    """Everything the composition root needs to build a reading engine."""

    llm: LLMConfig = field(default_factory=LLMConfig.mock)
    image: ImageConfig = field(default_factory=ImageConfig.mock)
    retry: RetryConfig = field(default_factory=RetryConfig)
    word_promotion_threshold: int = DEFAULT_PROMOTION_THRESHOLD
    auto_track_encounters: bool = False
    default_theme: str = "light"
    prefetch_lookahead: int = 1
    vocabulary_dir: Path = field(default_factory=default_vocabulary_dir)


class SettingsManager:
    """
    Manages settings and API key configuration.

    Reads a .env file from the project root into the process environment,
    then builds typed config objects from it.
    """

    def __init__(self, project_root: Optional[Path] = None, environ: Optional[Mapping[str, str]] = None):
        """
        Initialize settings manager.

        Args:
            project_root: Path to project root where .env is located.
                         If None, searches upward from current file.
            environ: Mapping to read instead of os.environ. Mostly for tests.
        """
        if project_root is None:
            current = Path(__file__).resolve()
            project_root = current.parent.parent.parent.parent

        env_path = project_root / ".env"
        load_dotenv(dotenv_path=env_path)

        self._project_root = project_root
        self._environ = environ

    @property
    def environ(self) -> Mapping[str, str]:
        return os.environ if self._environ is None else self._environ

    def reload_env(self) -> None:
        """Reload environment variables from .env file."""
        env_path = self._project_root / ".env"
        load_dotenv(dotenv_path=env_path, override=True)

    def get_llm_config(self) -> LLMConfig:
        return LLMConfig.from_env(self.environ)

    def get_image_config(self) -> ImageConfig:
        return ImageConfig.from_env(self.environ)

    def get_retry_config(self) -> RetryConfig:
        env = self.environ
        config = RetryConfig()
        max_retries = env_int("LLM_MAX_RETRIES", env)
        base_delay = env_float("RETRY_BASE_DELAY", env)
        max_delay = env_float("RETRY_MAX_DELAY", env)
        if max_retries is not None:
            config.max_retries = max_retries
        if base_delay is not None:
            config.base_delay = base_delay
        if max_delay is not None:
            config.max_delay = max_delay
        if config.max_retries < 0:
            raise ConfigError("LLM_MAX_RETRIES cannot be negative")
        return config

    def load(self) -> GlossiaSettings:
        """
        Build the full settings object.

        Raises:
            ConfigError: When a provider is misconfigured or a value is invalid.
        """
        env = self.environ

        llm = self.get_llm_config()
        llm.validate()
        image = self.get_image_config()
        image.validate()

        threshold = env_int("WORD_PROMOTION_THRESHOLD", env)
        if threshold is not None and threshold <= 0:
            raise ConfigError("WORD_PROMOTION_THRESHOLD must be greater than 0")

        lookahead = env_int("PREFETCH_LOOKAHEAD", env)
        if lookahead is not None and lookahead < 0:
            raise ConfigError("PREFETCH_LOOKAHEAD cannot be negative")

        theme = (env_str("DEFAULT_THEME", env) or "light").lower()
        if theme not in THEMES:
            raise ConfigError(f"DEFAULT_THEME must be one of {', '.join(THEMES)}, got '{theme}'")

        home = env_str("GLOSSIA_HOME", env)

        return GlossiaSettings(
            llm=llm,
            image=image,
            retry=self.get_retry_config(),
            word_promotion_threshold=threshold if threshold is not None else DEFAULT_PROMOTION_THRESHOLD,
            auto_track_encounters=env_bool("AUTO_TRACK_ENCOUNTERS", False, env),
            default_theme=theme,
            prefetch_lookahead=lookahead if lookahead is not None else 1,
            vocabulary_dir=Path(home).expanduser() if home else default_vocabulary_dir(),
        )
