"""
Configuration management for replbook.

Handles loading the notebook conventions used when converting source files
into cells and when rendering execution results.

Configuration priority (highest to lowest):
1. Environment variables
2. config.json file (for local development)
3. Built-in defaults
"""

import json
import logging
import os
from pathlib import Path
from typing import Dict, Any, Optional

logger = logging.getLogger(__name__)

# Config file path at project root
CONFIG_FILE = Path(__file__).parent.parent / "config.json"

# Default values (used when neither env var nor config.json specifies)
DEFAULT_CODE_LANGUAGE = "clojure"
DEFAULT_MARKUP_LANGUAGE = "markdown"
DEFAULT_COMMENT_MARKER = ";; "
DEFAULT_STRUCTURED_MIME = "x-application/edn"


class Config:
    """
    Project-level configuration manager.

    Priority: ENV > config.json > defaults

    Environment variables:
      - REPLBOOK_CODE_LANGUAGE: language id of executable cells
      - REPLBOOK_MARKUP_LANGUAGE: language id of prose cells
      - REPLBOOK_COMMENT_MARKER: line-comment prefix used for prose blocks
      - REPLBOOK_STRUCTURED_MIME: mime tag of the structured result output
    """

    def __init__(self, config_file: Optional[Path] = None):
        self.config_file = Path(config_file) if config_file else CONFIG_FILE
        self.data = self.load()

    def load(self) -> Dict[str, Any]:
        """Load configuration from file."""
        if self.config_file.exists():
            try:
                with open(self.config_file, 'r') as f:
                    return json.load(f)
            except (OSError, json.JSONDecodeError) as e:
                logger.error(f"Failed to load config: {e}")
                return self._default_config()
        else:
            return self._default_config()

    def _default_config(self) -> Dict[str, Any]:
        """Return default configuration."""
        return {
            "notebook": {
                "code_language": DEFAULT_CODE_LANGUAGE,
                "markup_language": DEFAULT_MARKUP_LANGUAGE,
                "comment_marker": DEFAULT_COMMENT_MARKER,
            },
            "execution": {
                "structured_mime": DEFAULT_STRUCTURED_MIME,
            },
        }

    def _lookup(self, env_var: str, section: str, key: str, default: str) -> str:
        # Environment variable takes precedence
        env_value = os.getenv(env_var)
        if env_value:
            return env_value

        # Config file second
        return self.data.get(section, {}).get(key, default)

    def get_code_language(self) -> str:
        """Language id attached to executable cells."""
        return self._lookup("REPLBOOK_CODE_LANGUAGE", "notebook", "code_language", DEFAULT_CODE_LANGUAGE)

    def get_markup_language(self) -> str:
        """Language id attached to prose cells."""
        return self._lookup("REPLBOOK_MARKUP_LANGUAGE", "notebook", "markup_language", DEFAULT_MARKUP_LANGUAGE)

    def get_comment_marker(self) -> str:
        """
        Line-comment prefix that marks a prose block in source.

        The marker includes its trailing space: ``";; "``.
        """
        return self._lookup("REPLBOOK_COMMENT_MARKER", "notebook", "comment_marker", DEFAULT_COMMENT_MARKER)

    def get_structured_mime(self) -> str:
        """Mime tag used for the structured-data rendering of a result."""
        return self._lookup("REPLBOOK_STRUCTURED_MIME", "execution", "structured_mime", DEFAULT_STRUCTURED_MIME)


# Global config instance
config = Config()
