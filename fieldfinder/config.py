"""Configuration management."""
import logging
import os
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


class Config:
    """Configuration manager."""

    def __init__(self, config_path: str = None):
        """Initialize configuration."""
        if config_path is None:
            config_path = os.getenv('FIELDFINDER_CONFIG', 'config.yaml')
        self.config_path = config_path
        self.config = self._merge(self._default_config(), self._load_config())

    def _load_config(self) -> Dict[str, Any]:
        """Load configuration from YAML file."""
        if not os.path.exists(self.config_path):
            return {}

        with open(self.config_path, 'r', encoding='utf-8') as f:
            return yaml.safe_load(f) or {}

    def _default_config(self) -> Dict[str, Any]:
        """Return default configuration."""
        return {
            'similarity': {
                'algorithm': 'levenshtein',
                'threshold': 0.66,
                'length_offset': 1
            },
            'search': {
                'offset_radius': 5,
                'duplicate_limit': 2
            },
            'grid': {
                'size': 3
            },
            'layout': {
                'vertical_tolerance': 6.0,
                'min_text_length': 2
            },
            'phonetic': {
                'encoder': 'default'
            },
            'locale': {
                'decimal_separator': '.'
            },
            'logging': {
                'level': 'INFO'
            }
        }

    def _merge(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Overlay loaded values on top of the defaults, section by section."""
        merged = dict(base)
        for key, value in override.items():
            if isinstance(value, dict) and isinstance(merged.get(key), dict):
                merged[key] = self._merge(merged[key], value)
            else:
                merged[key] = value
        return merged

    def get(self, key_path: str, default: Any = None) -> Any:
        """Get configuration value by dot-separated path."""
        keys = key_path.split('.')
        value = self.config
        for key in keys:
            if isinstance(value, dict):
                value = value.get(key)
                if value is None:
                    return default
            else:
                return default
        return value

    @property
    def similarity_algorithm(self) -> str:
        """Get the name of the similarity algorithm."""
        return self.get('similarity.algorithm', 'levenshtein')

    @property
    def similarity_threshold(self) -> float:
        """Get the minimum accepted similarity ratio."""
        return float(self.get('similarity.threshold', 0.66))

    @property
    def length_offset(self) -> int:
        """Get the maximum length difference of a scored pair."""
        return int(self.get('similarity.length_offset', 1))

    @property
    def offset_radius(self) -> int:
        """Get the number of lines searched above and below an anchor."""
        return int(self.get('search.offset_radius', 5))

    @property
    def duplicate_limit(self) -> int:
        """Get how many offset nodes one parent may hold per line."""
        return int(self.get('search.duplicate_limit', 2))

    @property
    def grid_size(self) -> int:
        return int(self.get('grid.size', 3))

    @property
    def vertical_tolerance(self) -> float:
        return float(self.get('layout.vertical_tolerance', 6.0))

    @property
    def min_text_length(self) -> int:
        return int(self.get('layout.min_text_length', 2))

    @property
    def phonetic_encoder(self) -> str:
        return self.get('phonetic.encoder', 'default')

    @property
    def decimal_separator(self) -> str:
        return self.get('locale.decimal_separator', '.')

    @property
    def log_level(self) -> str:
        return os.getenv('FIELDFINDER_LOG_LEVEL') or self.get('logging.level', 'INFO')


def setup_logging(level: Optional[str] = None) -> None:
    """Configure root logging for command line and batch runs.

    Args:
        level: Level name; the configured ``logging.level`` is used when omitted
    """
    level_name = (level or config.log_level).upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format=LOG_FORMAT,
    )


# Global config instance
config = Config()
