"""Reader telemetry backed by telelog.

Four calls cover every layer of the reader: ``configure`` picks a preset or
adopts an explicit ``telelog.Config``, ``get_logger`` hands out cached
loggers, ``record_event`` writes one structured ``event::<name>`` entry and
``span`` profiles a block, optionally as a tracked component.

The TUI owns the terminal, so console output stays off unless
``BOOKRAT_LOG_CONSOLE`` turns it on.
"""

from __future__ import annotations

import os
from contextlib import ExitStack, contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, Mapping, MutableMapping, Optional, cast

import telelog  # type: ignore[import]

tl = cast(Any, telelog)

ENV_PREFIX = "BOOKRAT_"
ROOT_LOGGER = os.getenv(f"{ENV_PREFIX}LOGGER", "bookrat")

PRESET_SETTINGS: Dict[str, Dict[str, Any]] = {
    "development": {"level": "DEBUG", "console": True, "json": False},
    # bookrat.log next to the books, as the reader has always written it
    "production": {
        "level": "INFO",
        "console": False,
        "buffered": True,
        "file": "bookrat.log",
    },
    "performance": {
        "level": "DEBUG",
        "console": False,
        "buffered": True,
        "json": True,
        "file": "bookrat-performance.log",
    },
}
PRESETS = tuple(PRESET_SETTINGS)

_loggers: MutableMapping[str, Any] = {}
_config: Optional[Any] = None


def _env(name: str) -> Optional[str]:
    return os.getenv(f"{ENV_PREFIX}{name}")


def _env_flag(name: str, default: bool) -> bool:
    raw = _env(name)
    if raw is None:
        return default
    return raw.lower() in {"1", "true", "yes", "on"}


def _text(value: Any) -> str:
    if isinstance(value, str):
        return value
    return repr(value) if isinstance(value, (dict, list, tuple, set)) else str(value)


def _environment_settings() -> Dict[str, Any]:
    settings: Dict[str, Any] = {
        "level": (_env("LOG_LEVEL") or "INFO").upper(),
        "console": _env_flag("LOG_CONSOLE", False),
        "buffered": _env_flag("LOG_BUFFERED", False),
        "buffer_size": int(_env("LOG_BUFFER_SIZE") or "2048"),
    }
    if _env_flag("LOG_JSON", False):
        settings["json"] = True
    if _env("LOG_FILE"):
        settings["file"] = _env("LOG_FILE")
    return settings


def _build_config(settings: Mapping[str, Any]) -> Any:
    config = tl.Config()
    config.with_min_level(settings["level"])
    config.with_console_output(bool(settings.get("console")))
    if settings.get("console"):
        config.with_colored_output(not _env_flag("NO_COLOR", False))
    if "json" in settings:
        config.with_json_format(settings["json"])
    if settings.get("file"):
        config.with_file_output(settings["file"])
    if settings.get("buffered"):
        config.with_buffering(True)
        if "buffer_size" in settings:
            config.with_buffer_size(settings["buffer_size"])
    config.with_profiling(True)
    return config


def preset_config(preset: str) -> Any:
    """Build the ``tl.Config`` for one of ``PRESETS``.

    ``BOOKRAT_LOG_FILE`` redirects the file a preset writes to.
    """

    key = preset.lower()
    if key not in PRESET_SETTINGS:
        raise ValueError(f"Unknown preset '{preset}'. Expected one of {PRESETS}.")
    settings = dict(PRESET_SETTINGS[key])
    if settings.get("file") and _env("LOG_FILE"):
        settings["file"] = _env("LOG_FILE")
    return _build_config(settings)


def configure(*, config: Optional[Any] = None, preset: Optional[str] = None) -> None:
    """Replace the active configuration and drop every cached logger.

    With neither argument the configuration is read from ``BOOKRAT_*``
    environment variables. ``config`` and ``preset`` are mutually exclusive.
    """

    global _config
    if config is not None and preset:
        raise ValueError("Provide either `config` or `preset`, not both.")
    if preset:
        config = preset_config(preset)
    elif config is None:
        config = _build_config(_environment_settings())
    else:
        config.with_profiling(True)
    _config = config
    _loggers.clear()


def get_logger(name: Optional[str] = None) -> Any:
    key = name or ROOT_LOGGER
    logger = _loggers.get(key)
    if logger is None:
        if _config is None:
            configure()
        logger = _loggers[key] = tl.Logger.with_config(key, _config)
    return logger


def _write(logger: Any, level: str, message: str, fields: Mapping[str, Any]) -> None:
    name = str(level).lower()
    pairs = [(str(key), _text(value)) for key, value in fields.items()]
    structured = getattr(logger, f"{name}_with", None)
    if structured is not None:
        structured(message, pairs)
        return
    plain = getattr(logger, name, None)
    if plain is None:
        raise ValueError(f"Unsupported log level '{level}'.")
    plain(f"{message} {dict(pairs)}")


def record_event(
    name: str,
    *,
    level: str = "info",
    data: Optional[Dict[str, Any]] = None,
    logger_name: Optional[str] = None,
) -> None:
    """Write ``event::<name>`` with ``data`` as structured fields."""

    _write(get_logger(logger_name), level, f"event::{name}", {"event": name, **(data or {})})


@dataclass
class SpanHandle:
    """Yielded by ``span``; metadata added here lands on the failure entry."""

    logger: Any
    name: str
    component: Optional[str] = None
    metadata: Dict[str, str] = field(default_factory=dict)

    def add_metadata(self, key: str, value: Any) -> None:
        self.metadata[key] = _text(value)

    def fail(self, reason: str) -> None:
        fields: Dict[str, Any] = {"span": self.name, **self.metadata, "reason": reason}
        if self.component:
            fields["component"] = self.component
        _write(self.logger, "error", "span::fail", fields)


@contextmanager
def span(
    name: str,
    *,
    logger_name: Optional[str] = None,
    component: Optional[str | bool] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> Iterator[SpanHandle]:
    """Profile the block under ``name``.

    ``component=True`` also tracks the block as a component called ``name``;
    a string names the component. ``metadata`` is logger context for the
    duration of the block. An exception escaping the block is logged as
    ``span::fail`` and re-raised.
    """

    log = get_logger(logger_name)
    component_name = name if component is True else (component or None)
    context = {key: _text(value) for key, value in (metadata or {}).items()}
    handle = SpanHandle(log, name, component_name, dict(context))

    with ExitStack() as stack:
        for key, value in context.items():
            log.add_context(key, value)
            stack.callback(log.remove_context, key)
        if component_name:
            stack.enter_context(log.track_component(component_name))
        stack.enter_context(log.profile(name))
        try:
            yield handle
        except Exception as exc:
            handle.fail(str(exc))
            raise


__all__ = [
    "PRESETS",
    "SpanHandle",
    "configure",
    "get_logger",
    "preset_config",
    "record_event",
    "span",
]
