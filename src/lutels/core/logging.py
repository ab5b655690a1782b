"""structlog setup shared by the language server and the CLI.

structlog events and stdlib records (pygls) go through one
``ProcessorFormatter`` chain, so both end up in the same outputs and format.
Events logged inside ``lint_cycle`` carry the cycle's ``lint_id``, ``uri``
and ``generation``.

stdout is never a log destination: in stdio mode it carries the language
server protocol stream.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from pathlib import Path
from typing import TYPE_CHECKING, Any
from uuid import uuid4

import structlog

if TYPE_CHECKING:
    from lutels.config.models import LoggingConfig, LogOutputConfig

_lint_id: ContextVar[str | None] = ContextVar("lint_id", default=None)

_LEVELS = {
    name: getattr(logging, name) for name in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
}


def get_lint_id() -> str | None:
    return _lint_id.get()


def set_lint_id(lint_id: str | None = None) -> str:
    """Set or generate the correlation ID for the current lint cycle."""
    lid = lint_id or uuid4().hex[:12]
    _lint_id.set(lid)
    return lid


def clear_lint_id() -> None:
    _lint_id.set(None)


@contextmanager
def lint_cycle(uri: str, generation: int) -> Iterator[str]:
    """Correlate everything logged while one lint cycle of ``uri`` runs.

    Yields the cycle's lint ID. The ID and the bound fields are dropped on
    exit, including when the cycle raises.
    """
    lid = set_lint_id()
    try:
        with structlog.contextvars.bound_contextvars(uri=uri, generation=generation):
            yield lid
    finally:
        clear_lint_id()


def _add_lint_id(
    _logger: structlog.types.WrappedLogger,
    _method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    if lid := get_lint_id():
        event_dict["lint_id"] = lid
    return event_dict


def _renderer(output: LogOutputConfig) -> structlog.types.Processor:
    if output.format == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(
        colors=output.destination == "stderr" and sys.stderr.isatty(),
        pad_event_to=0,
        pad_level=False,
    )


def _handler(
    output: LogOutputConfig, level: int, pre_chain: list[structlog.types.Processor]
) -> logging.Handler:
    handler: logging.Handler
    if output.destination == "stderr":
        handler = logging.StreamHandler(sys.stderr)
    else:
        path = Path(output.destination)
        path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(path, mode="a")
    handler.setLevel(level)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=_renderer(output),
            foreign_pre_chain=pre_chain,
        )
    )
    return handler


def configure_logging(
    *,
    config: LoggingConfig | None = None,
    json_format: bool = False,
    level: str = "INFO",
) -> None:
    """Route structlog and stdlib logging to the configured outputs.

    Args:
        config: Logging configuration with outputs. Takes precedence over
                ``json_format`` and ``level``.
        json_format: Single stderr output rendered as JSON lines
        level: Root level for the single-output setup
    """
    from lutels.config.models import LoggingConfig, LogOutputConfig

    if config is None:
        config = LoggingConfig(
            level=level,
            outputs=[LogOutputConfig(format="json" if json_format else "console")],
        )

    root_level = _LEVELS.get(config.level.upper(), logging.INFO)
    pre_chain: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S", key="timestamp"),
        _add_lint_id,  # type: ignore[list-item]
    ]

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.make_filtering_bound_logger(root_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(root_level)
    # pygls logs every JSON-RPC message at DEBUG
    logging.getLogger("pygls").setLevel(max(root_level, logging.INFO))

    for output in config.outputs:
        output_level = _LEVELS.get((output.level or config.level).upper(), root_level)
        root_logger.addHandler(_handler(output, output_level, pre_chain))
