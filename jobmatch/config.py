"""Configuration loader for matching settings and the skill taxonomy."""
from pathlib import Path
from typing import Optional, Dict, Any, Union
import yaml
import os
import logging
from dotenv import load_dotenv
from .domain.taxonomy import SkillTaxonomy

logger = logging.getLogger(__name__)

DEFAULT_TAXONOMY_FILES = ["skills.yml", "skills.yaml"]


def load_taxonomy(path: Optional[Union[str, Path]] = None) -> SkillTaxonomy:
    """Load and validate a skill taxonomy from a YAML file.

    The file holds a mapping of category name to a list of skills, either at
    the top level or under a ``categories`` key.

    Args:
        path: Path to the taxonomy file (defaults to skills.yml in the working directory)
    Returns:
        SkillTaxonomy built from the file
    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file is not a mapping of names to skill lists
    """
    if path is None:
        for fname in DEFAULT_TAXONOMY_FILES:
            if Path(fname).exists():
                path = Path(fname)
                break
        else:
            raise FileNotFoundError("No taxonomy file found (skills.yml or skills.yaml)")
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Taxonomy file not found: {path}")
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if isinstance(data, dict) and 'categories' in data:
        data = data['categories']
    if not isinstance(data, dict) or not data:
        raise ValueError("Invalid taxonomy: expected a mapping of categories to skill lists")
    categories = {}
    for name, skills in data.items():
        if not isinstance(name, str) or not name.strip():
            raise ValueError("Invalid taxonomy: category names must be non-empty strings")
        if not isinstance(skills, list) or not all(isinstance(s, str) for s in skills):
            raise ValueError(f"Invalid taxonomy: category '{name}' must list skill names")
        categories[name] = skills
    logger.info(f"Loaded {len(categories)} skill categories from {path}")
    return SkillTaxonomy(categories)


class Config:
    """Configuration manager with environment variable and .env file support."""

    def __init__(self, env_file: Optional[str] = None):
        """Initialize configuration.

        Args:
            env_file: Optional path to .env file
        """
        if env_file and os.path.exists(env_file):
            load_dotenv(env_file)
            logger.info(f"Loaded configuration from {env_file}")
        elif os.path.exists(".env"):
            load_dotenv(".env")
            logger.info("Loaded configuration from .env file")
        else:
            logger.debug("No .env file found, using environment variables only")

    def get(self, key: str, default: Any = None, required: bool = False) -> Any:
        """Get configuration value.

        Args:
            key: Configuration key
            default: Default value if key not found
            required: Whether the key is required

        Returns:
            Configuration value

        Raises:
            ValueError: If required key is missing
        """
        value = os.getenv(key, default)

        if required and value is None:
            raise ValueError(f"Required configuration key '{key}' is missing")

        return value

    def get_bool(self, key: str, default: bool = False) -> bool:
        value = self.get(key, str(default).lower())
        return str(value).lower() in ('true', '1', 'yes', 'on')

    def get_int(self, key: str, default: int = 0) -> int:
        value = self.get(key, str(default))
        try:
            return int(value)
        except (ValueError, TypeError):
            logger.warning(f"Invalid integer value for {key}: {value}, using default {default}")
            return default

    def get_float(self, key: str, default: float = 0.0) -> float:
        value = self.get(key, str(default))
        try:
            return float(value)
        except (ValueError, TypeError):
            logger.warning(f"Invalid float value for {key}: {value}, using default {default}")
            return default

    def get_list(self, key: str, default: Optional[list] = None, separator: str = ",") -> list:
        """Get list configuration value.

        Args:
            key: Configuration key
            default: Default list value
            separator: List item separator

        Returns:
            List value
        """
        if default is None:
            default = []

        value = self.get(key)
        if not value:
            return default

        return [item.strip() for item in str(value).split(separator) if item.strip()]

    def get_database_config(self) -> Dict[str, Any]:
        return {
            'url': self.get('DATABASE_URL', 'sqlite:///jobs.db'),
            'echo': self.get_bool('DATABASE_ECHO', False),
        }

    def get_matching_config(self) -> Dict[str, Any]:
        """Get deduplication and skill matching configuration.

        Returns:
            Matching configuration dictionary
        """
        threshold = self.get_float('DEDUP_THRESHOLD', 0.8)
        if not 0.0 <= threshold <= 1.0:
            logger.warning(f"DEDUP_THRESHOLD {threshold} is outside [0, 1], using default 0.8")
            threshold = 0.8
        return {
            'similarity_threshold': threshold,
            'enable_deduplication': self.get_bool('ENABLE_DEDUPLICATION', True),
            'taxonomy_path': self.get('SKILL_TAXONOMY_PATH'),
            'recommendation_limit': self.get_int('RECOMMENDATION_LIMIT', 10),
        }

    def get_web_config(self) -> Dict[str, Any]:
        return {
            'host': self.get('WEB_HOST', '0.0.0.0'),
            'port': self.get_int('WEB_PORT', 8000),
            'reload': self.get_bool('WEB_RELOAD', False),
        }

    def get_log_level(self) -> str:
        return str(self.get('LOG_LEVEL', 'INFO')).upper()

    def get_all_config(self) -> Dict[str, Any]:
        return {
            'database': self.get_database_config(),
            'matching': self.get_matching_config(),
            'web': self.get_web_config(),
            'log_level': self.get_log_level(),
        }


# Global configuration instance
config = Config()
