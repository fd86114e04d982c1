"""Centralized logging configuration for hive-orchestrator."""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from .config import Config

ROOT_LOGGER = "hive_orchestrator"


def setup_logging(
	name: str = ROOT_LOGGER,
	level: Optional[str] = None,
	log_dir: Optional[Path] = None,
) -> logging.Logger:
	"""
	Set up logging with console and file handlers.

	Args:
		name: Logger name
		level: Log level (DEBUG, INFO, WARNING, ERROR). Defaults to env var or INFO.
		log_dir: Directory for log files. No file handler when omitted.

	Returns:
		Configured logger
	"""
	level = level or os.getenv("LOG_LEVEL", "INFO")
	log_level = getattr(logging, level.upper(), logging.INFO)

	logger = logging.getLogger(name)
	logger.setLevel(log_level)

	# Avoid duplicate handlers
	if logger.handlers:
		return logger

	detailed_formatter = logging.Formatter(
		"%(asctime)s [%(levelname)s] %(name)s:%(lineno)d - %(message)s",
		datefmt="%Y-%m-%d %H:%M:%S",
	)
	simple_formatter = logging.Formatter(
		"%(asctime)s [%(levelname)s] %(message)s",
		datefmt="%H:%M:%S",
	)
	redactor = SensitiveDataFilter()

	console_handler = logging.StreamHandler(sys.stdout)
	console_handler.setLevel(log_level)
	console_handler.setFormatter(simple_formatter)
	console_handler.addFilter(redactor)
	logger.addHandler(console_handler)

	if log_dir is not None:
		log_path = Path(log_dir)
		log_path.mkdir(parents=True, exist_ok=True)

		file_handler = RotatingFileHandler(
			log_path / f"{name}.log",
			maxBytes=10 * 1024 * 1024,  # 10 MB
			backupCount=5,
		)
		file_handler.setLevel(logging.DEBUG)
		file_handler.setFormatter(detailed_formatter)
		file_handler.addFilter(redactor)
		logger.addHandler(file_handler)

	return logger


def setup_logging_from_config(config: Config, name: str = ROOT_LOGGER) -> logging.Logger:
	"""Set up logging at config.log_level, writing files under config.log_dir."""
	return setup_logging(name=name, level=config.log_level, log_dir=config.log_dir)


def get_logger(name: str) -> logging.Logger:
	"""Get a child logger with the given name."""
	return logging.getLogger(f"{ROOT_LOGGER}.{name}")


class SensitiveDataFilter(logging.Filter):
	"""Flag log records that mention credentials."""

	SENSITIVE_PATTERNS = [
		"access_token",
		"bearer ",
		"password",
		"secret",
		"api_key",
		"authorization",
	]

	def filter(self, record: logging.LogRecord) -> bool:
		if isinstance(record.msg, str) and not record.msg.startswith("[SENSITIVE]"):
			msg_lower = record.msg.lower()
			for pattern in self.SENSITIVE_PATTERNS:
				if pattern in msg_lower:
					record.msg = f"[SENSITIVE] {record.msg}"
					break
		return True
