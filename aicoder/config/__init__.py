"""
ai-coder model profile catalogue

Loads configuration from YAML files with support for:
- Default configs in aicoder/config/*.yaml
- Project-level overrides in .ai-coder.yaml
- Environment variable overrides
"""

import os
from pathlib import Path
from typing import Dict, Any, Optional, List

import yaml
from loguru import logger


# Config directory (where default configs live)
CONFIG_DIR = Path(__file__).parent

# Project config locations (checked in order)
PROJECT_CONFIG_PATHS = [
    ".ai-coder/config.yaml",
    ".ai-coder/config.yml",
    ".ai-coder.yaml",
    ".ai-coder.yml",
]


def _load_yaml_file(path: Path) -> Dict[str, Any]:
    """Load a YAML file, returning empty dict if not found or invalid."""
    if not path.exists():
        return {}

    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.warning(f"Failed to load config from {path}: {e}")
        return {}

    if not isinstance(data, dict):
        logger.warning(f"Ignoring {path}: top level is not a mapping")
        return {}
    return data


def _deep_merge(base: Dict, override: Dict) -> Dict:
    """Deep merge two dictionaries, with override taking precedence."""
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def _parse_env_value(value: str) -> Any:
    if value.lower() == 'true':
        return True
    if value.lower() == 'false':
        return False
    if value.isdigit():
        return int(value)
    try:
        return float(value)
    except ValueError:
        return value


def _set_override(config: Dict, key: str, value: Any) -> Dict:
    """Set `key` in a copy of `config`, descending into the longest matching section."""
    result = dict(config)
    section_name = max(
        (name for name, section in result.items()
         if isinstance(section, dict) and key.startswith(f"{str(name).lower()}_")),
        key=lambda name: len(str(name)),
        default=None,
    )
    if section_name is None:
        result[key] = value
    else:
        rest = key[len(str(section_name)) + 1:]
        result[section_name] = _set_override(result[section_name], rest, value)
    return result


class ConfigLoader:
    """
    Loads and merges configuration from multiple sources.

    Priority (highest to lowest):
    1. Environment variables (AICODER_<NAME>_<KEY>)
    2. Project-level config (.ai-coder.yaml)
    3. Default config (aicoder/config/*.yaml)
    """

    _cache: Dict[str, Dict[str, Any]] = {}
    _project_root: Optional[Path] = None

    @classmethod
    def set_project_root(cls, path: Path):
        """Set the project root for loading project-level configs."""
        cls._project_root = Path(path)
        cls._cache.clear()  # Clear cache when project changes

    @classmethod
    def load(cls, config_name: str) -> Dict[str, Any]:
        """
        Load a configuration by name.

        Args:
            config_name: Name of config file (without .yaml extension), e.g. "models"

        Returns:
            Merged configuration dictionary
        """
        if config_name in cls._cache:
            return cls._cache[config_name]

        config = _load_yaml_file(CONFIG_DIR / f"{config_name}.yaml")

        root = cls._project_root or Path.cwd()
        for rel_path in PROJECT_CONFIG_PATHS:
            project_config_path = root / rel_path
            if project_config_path.exists():
                project_config = _load_yaml_file(project_config_path)
                section = project_config.get(config_name)
                if isinstance(section, dict):
                    config = _deep_merge(config, section)
                break

        config = cls._apply_env_overrides(config_name, config)

        cls._cache[config_name] = config
        return config

    @classmethod
    def _apply_env_overrides(cls, config_name: str, config: Dict) -> Dict:
        """
        Apply environment variable overrides.

        The key after the prefix descends into existing sections:
            AICODER_MODELS_DEFAULT_CONTEXT_WINDOW=8192
                -> config["default"]["context_window"]
            AICODER_MODELS_MODELS_MISTRAL_MAX_TOKENS=1024
                -> config["models"]["mistral"]["max_tokens"]
        Only sections that already exist are descended into; the rest of the
        key is set at the deepest matching level.
        """
        prefix = f"AICODER_{config_name.upper()}_"
        result = dict(config)

        for key, value in os.environ.items():
            if not key.startswith(prefix):
                continue
            config_key = key[len(prefix):].lower()
            result = _set_override(result, config_key, _parse_env_value(value))

        return result

    @classmethod
    def reload(cls, config_name: Optional[str] = None):
        """Reload configuration(s) from disk."""
        if config_name:
            cls._cache.pop(config_name, None)
        else:
            cls._cache.clear()

    @classmethod
    def get_all_configs(cls) -> List[str]:
        """List all available config files."""
        return sorted(path.stem for path in CONFIG_DIR.glob("*.yaml"))


# Convenience functions
def load_config(name: str) -> Dict[str, Any]:
    """Load a configuration by name."""
    return ConfigLoader.load(name)
