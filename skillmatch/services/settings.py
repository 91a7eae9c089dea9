"""
Process-wide matcher configuration.

Vocabularies and scoring rules are read once (defaults, optionally overridden
by the JSON file named in SKILLMATCH_CONFIG) and shared read-only by the
extractor and the scorer.
"""
import json
import os
from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import ValidationError as PydanticValidationError

from skillmatch.models.settings import MatcherSettings
from skillmatch.utils.exceptions import ConfigurationError
from skillmatch.utils.logging_config import get_logger

load_dotenv()

logger = get_logger(__name__)

CONFIG_ENV_VAR = "SKILLMATCH_CONFIG"


def load_settings(path: Optional[str] = None) -> MatcherSettings:
    if not path:
        logger.info("Using built-in skill vocabularies and scoring rules")
        return MatcherSettings()

    config_path = Path(path)
    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise ConfigurationError(
            f"Matcher config file not found: {path}", config_key=CONFIG_ENV_VAR, config_value=path, cause=e
        ) from e
    except json.JSONDecodeError as e:
        raise ConfigurationError(
            f"Matcher config file is not valid JSON: {e}", config_key=CONFIG_ENV_VAR, config_value=path, cause=e
        ) from e

    try:
        settings = MatcherSettings(**data)
    except (PydanticValidationError, TypeError) as e:
        raise ConfigurationError(
            f"Invalid matcher configuration in {path}", config_key=CONFIG_ENV_VAR, config_value=path, cause=e
        ) from e

    vocab = settings.vocabulary
    logger.info(
        f"Loaded matcher config from {path}: {len(vocab.technical)} technical, "
        f"{len(vocab.soft)} soft, {len(vocab.tools)} tool skills"
    )
    return settings


@lru_cache(maxsize=1)
def get_settings() -> MatcherSettings:
    return load_settings(os.getenv(CONFIG_ENV_VAR))
