"""Observability – JsonLoggerFactory."""
from __future__ import annotations

import logging
from typing import Any

import structlog

from traceability.config.settings import OptionsProvider, TraceabilityOptions, resolve_options
from traceability.observability.logging.processors import (
    CorrelationIdProcessor,
    FieldSelectionProcessor,
    SourceProcessor,
    TraceContextProcessor,
)
from traceability.observability.logging.service_name import resolve_service_name


def _level_number(level: int | str) -> int:
    if isinstance(level, int):
        return level
    return logging.getLevelNamesMapping()[level.upper()]


class JsonLoggerFactory:
    """Configure structlog and the stdlib root logger for JSON output.

    Every event, whether logged through structlog or plain :mod:`logging`,
    carries ``source``, ``correlation_id`` and the current span ids.
    """

    @staticmethod
    def shared_processors(source: str) -> list[Any]:
        return [
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True, key="timestamp"),
            SourceProcessor(source),
            CorrelationIdProcessor(),
            TraceContextProcessor(),
            structlog.processors.StackInfoRenderer(),
        ]

    @staticmethod
    def configure(
        options: TraceabilityOptions | OptionsProvider | None = None,
        source: str | None = None,
        level: int | str | None = None,
    ) -> str:
        """Install the JSON pipeline and return the resolved service name.

        Raises :class:`MissingRequiredSettingError` when no service name can
        be resolved.
        """
        snapshot = resolve_options(options)
        service = resolve_service_name(source, snapshot)
        shared = JsonLoggerFactory.shared_processors(service)

        structlog.configure(
            processors=shared + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )
        formatter = structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                structlog.processors.format_exc_info,
                FieldSelectionProcessor(snapshot),
                structlog.processors.JSONRenderer(),
            ],
        )
        handler = logging.StreamHandler()
        handler.setFormatter(formatter)
        root = logging.getLogger()
        root.handlers.clear()
        root.addHandler(handler)
        root.setLevel(_level_number(level if level is not None else snapshot.minimum_log_level))
        return service


__all__ = ["JsonLoggerFactory"]
