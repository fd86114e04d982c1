"""Configuration system using platformdirs for cross-platform paths."""

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import platformdirs
from dotenv import load_dotenv

from .errors import ConfigurationError

APP_NAME = "hive-orchestrator"
APP_AUTHOR = "hive-orchestrator"

DEFAULT_MODEL = "claude-sonnet-4-5-20250929"


@dataclass
class Config:
	"""Central configuration with XDG/platform conventions."""

	config_dir: Path = field(default_factory=lambda: Path(platformdirs.user_config_dir(APP_NAME)))
	data_dir: Path = field(default_factory=lambda: Path(platformdirs.user_data_dir(APP_NAME)))

	# Derived paths
	log_dir: Path = field(init=False)

	# Task defaults
	default_model: str = DEFAULT_MODEL
	default_budget: float = 5.00
	reserve_percent: float = 0.10
	max_turns: int = 100

	# Passed to setup_logging_from_config()
	log_level: str = "INFO"

	def __post_init__(self) -> None:
		self.log_dir = self.data_dir / "logs"

	def ensure_dirs(self) -> None:
		"""Create all required directories."""
		self.config_dir.mkdir(parents=True, exist_ok=True)
		self.data_dir.mkdir(parents=True, exist_ok=True)
		self.log_dir.mkdir(parents=True, exist_ok=True)

	def validate(self) -> list[str]:
		"""Return a list of configuration problems (empty when valid)."""
		errors: list[str] = []
		if self.default_budget <= 0:
			errors.append(f"default_budget must be positive, got {self.default_budget}")
		if not 0 <= self.reserve_percent < 1:
			errors.append(f"reserve_percent must be in [0, 1), got {self.reserve_percent}")
		if self.max_turns < 1:
			errors.append(f"max_turns must be at least 1, got {self.max_turns}")
		return errors

	def require_valid(self) -> None:
		"""Raise ConfigurationError listing every problem found by validate()."""
		errors = self.validate()
		if errors:
			raise ConfigurationError("; ".join(errors))


def _parse_number(env_key: str, raw: str, cast):
	try:
		return cast(raw)
	except ValueError:
		raise ConfigurationError(f"{env_key} must be a number, got {raw!r}") from None


def _apply_env_overrides(config: Config) -> Config:
	"""Apply environment variable overrides."""
	path_map = {
		"HIVE_CONFIG_DIR": "config_dir",
		"HIVE_DATA_DIR": "data_dir",
	}
	for env_key, attr in path_map.items():
		val = os.getenv(env_key)
		if val:
			setattr(config, attr, Path(val).expanduser().resolve())

	str_map = {
		"DEFAULT_MODEL": "default_model",
		"LOG_LEVEL": "log_level",
	}
	for env_key, attr in str_map.items():
		val = os.getenv(env_key)
		if val:
			setattr(config, attr, val)

	number_map = {
		"DEFAULT_BUDGET": ("default_budget", float),
		"HIVE_RESERVE_PERCENT": ("reserve_percent", float),
		"HIVE_MAX_TURNS": ("max_turns", int),
	}
	for env_key, (attr, cast) in number_map.items():
		val = os.getenv(env_key)
		if val:
			setattr(config, attr, _parse_number(env_key, val, cast))

	# Recompute derived paths after overrides
	config.__post_init__()
	return config


def _apply_toml(config: Config) -> Config:
	"""Apply config.toml overrides if file exists."""
	toml_path = config.config_dir / "config.toml"
	if not toml_path.exists():
		return config

	with open(toml_path, "rb") as f:
		data = tomllib.load(f)

	path_fields = {"config_dir", "data_dir"}
	for key, val in data.items():
		if hasattr(config, key):
			if key in path_fields:
				setattr(config, key, Path(os.path.expanduser(val)))
			else:
				setattr(config, key, val)

	# Recompute derived paths after toml overrides
	config.__post_init__()
	return config


def load_config(env_file: Optional[Path] = None) -> Config:
	"""Load config with precedence: env vars > config.toml > defaults."""
	load_dotenv(env_file)
	config = Config()
	config = _apply_toml(config)
	config = _apply_env_overrides(config)
	config.ensure_dirs()
	return config


# Singleton
_config: Config | None = None


def get_config() -> Config:
	"""Get or create the global config instance."""
	global _config
	if _config is None:
		_config = load_config()
	return _config
