"""
Configuration management for ai-coder.
Loads settings from environment variables and .env file.
"""

import os
import sys
from pathlib import Path
from typing import Optional
from dotenv import load_dotenv
from loguru import logger

# Load environment variables from .env file
# Try: current directory, then user config directory
_possible_env_paths = [
    Path.cwd() / ".env",
    Path.home() / ".ai-coder" / ".env",
]
for _env_path in _possible_env_paths:
    if _env_path.exists():
        load_dotenv(_env_path)
        break
else:
    load_dotenv()

DEFAULT_HOST = "http://localhost:11434"
DEFAULT_MODEL = "qwen2.5-coder"


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in {"true", "1", "yes"}


class Config:
    """Configuration manager for ai-coder."""

    def __init__(self):
        """Initialize configuration from environment variables."""

        # Provider
        self.provider: str = os.getenv("AICODER_PROVIDER", "ollama").lower()
        self.ollama_host: str = os.getenv("OLLAMA_HOST", DEFAULT_HOST)
        self.request_timeout: float = float(os.getenv("REQUEST_TIMEOUT", "300"))
        self.max_retries: int = int(os.getenv("MAX_RETRIES", "3"))

        # Model
        self.default_model: str = os.getenv("DEFAULT_MODEL", DEFAULT_MODEL)

        # Agent mode
        self.shell: str = os.getenv("AICODER_SHELL", "bash")
        self.capture_output: bool = _env_flag("CAPTURE_OUTPUT")

        # GitHub
        self.github_token: Optional[str] = os.getenv("GITHUB_TOKEN")
        self.github_api_url: str = os.getenv("GITHUB_API_URL", "https://api.github.com")

        # Logging
        self.log_level: str = os.getenv("LOG_LEVEL", "INFO")
        self.console_log_level: str = os.getenv("CONSOLE_LOG_LEVEL", "WARNING")
        log_file = os.getenv("LOG_FILE")
        self.log_file: Optional[Path] = Path(log_file) if log_file else None
        self.console_logging: bool = _env_flag("CONSOLE_LOGGING", "true")

        self.debug_mode: bool = _env_flag("DEBUG_MODE")

        self._validate()
        self._setup_logging()

    def _validate(self):
        """Validate configuration settings."""
        if not self.ollama_host.startswith(("http://", "https://")):
            logger.warning(
                f"OLLAMA_HOST '{self.ollama_host}' has no scheme; assuming http://"
            )
            self.ollama_host = f"http://{self.ollama_host}"

        self.ollama_host = self.ollama_host.rstrip("/")

        if self.provider not in ("ollama", "mock"):
            logger.warning(f"Unknown provider '{self.provider}'. Valid options: ollama, mock")

    def _setup_logging(self, console_level: Optional[str] = None):
        """Configure logging based on settings."""
        logger.remove()  # Remove default handler

        level = console_level or ("DEBUG" if self.debug_mode else self.console_log_level)
        if self.console_logging:
            # stdout carries the streamed response, so logs go to stderr
            logger.add(
                sys.stderr,
                level=level,
                colorize=True,
                format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>"
            )

        if self.log_file:
            logger.add(
                self.log_file,
                level=self.log_level,
                rotation="10 MB",
                retention="1 week",
                format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function} - {message}"
            )

        if self.debug_mode:
            logger.info("Debug mode enabled")

    def set_verbose(self, verbose: bool) -> None:
        """Switch console logging to DEBUG for this process."""
        if verbose:
            self._setup_logging(console_level="DEBUG")

    def resolve_host(self, host: Optional[str] = None) -> str:
        """CLI flag > OLLAMA_HOST > default."""
        chosen = (host or self.ollama_host).rstrip("/")
        if not chosen.startswith(("http://", "https://")):
            chosen = f"http://{chosen}"
        return chosen

    def __repr__(self) -> str:
        """String representation of config."""
        return (
            f"Config(provider={self.provider}, host={self.ollama_host}, "
            f"model={self.default_model}, github={'yes' if self.github_token else 'no'})"
        )


# Global config instance
config = Config()
