"""structlog setup for the engine.

Every module takes its logger from :func:`get_logger`, which tags events with
the engine area (``component``). Chunk operations add ``chunk_x`` /
``chunk_z`` through ``structlog.contextvars``.
"""

from __future__ import annotations

import logging
from typing import Any

import structlog

from cropsim.config import LogFormat, Settings, get_settings

_configured = False


def _level_number(name: str) -> int:
	return logging.getLevelNamesMapping().get(name.upper(), logging.INFO)


def _processors(log_format: LogFormat) -> list[Any]:
	processors: list[Any] = [
		structlog.contextvars.merge_contextvars,
		structlog.processors.add_log_level,
		structlog.processors.TimeStamper(fmt="iso", utc=True),
	]
	if log_format == LogFormat.json:
		processors += [structlog.processors.dict_tracebacks, structlog.processors.JSONRenderer()]
	else:
		processors.append(structlog.dev.ConsoleRenderer())
	return processors


def configure_structured_logging(settings: Settings | None = None, *, force: bool = False) -> None:
	"""Install the engine's structlog pipeline; later calls are no-ops unless ``force``."""
	global _configured
	if _configured and not force:
		return

	settings = settings or get_settings()
	structlog.configure(
		processors=_processors(settings.log_format),
		wrapper_class=structlog.make_filtering_bound_logger(_level_number(settings.log_level)),
		logger_factory=structlog.PrintLoggerFactory(),
		cache_logger_on_first_use=False,
	)
	_configured = True


def get_logger(area: str) -> Any:
	# Stays lazy: resolved against the current configuration on every call.
	return structlog.get_logger(f"cropsim.{area}", component=area)
