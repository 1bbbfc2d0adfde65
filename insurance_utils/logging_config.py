"""
Loguru setup for the insurance UI.

Every record is tagged with the component that emitted it (``flags``,
``pages``, ``config`` or ``app``) and passes through a scrubber before it
reaches a sink. The scrubber removes configured credential patterns, any flag
management key registered at runtime, and general PII.
"""

import re
import sys
import threading

import scrubadub
from human_id import generate_id
from loguru import logger

from insurance_common import global_config
from insurance_utils.context import session_id

_logging_initialized = False
_logging_lock = threading.Lock()

# Top-level package -> component label
COMPONENTS = {
    "insurance_features": "flags",
    "insurance_pages": "pages",
    "insurance_common": "config",
}

SECRET_PLACEHOLDER = "[REDACTED_KEY]"
# Shorter values would redact ordinary words
MIN_SECRET_LENGTH = 8


def component_for(module_name: str | None) -> str:
    package = (module_name or "").split(".", 1)[0]
    return COMPONENTS.get(package, "app")


class _LogScrubber:
    """
    Credential and PII scrubber shared by every sink.

    Registered secrets are matched literally, configured patterns as one
    combined regex, then scrubadub handles the rest.
    """

    def __init__(self, config=None):
        config = config or global_config.logging.redaction
        self.enabled = config.enabled
        self.scrubber = (
            scrubadub.Scrubber() if self.enabled and config.use_default_pii else None
        )

        self.placeholder_map = {f"p{i}": p.placeholder for i, p in enumerate(config.patterns)}
        self.combined_regex = None
        if self.enabled and config.patterns:
            self.combined_regex = re.compile(
                "|".join(f"(?P<p{i}>{p.regex})" for i, p in enumerate(config.patterns))
            )

        self._secrets: frozenset[str] = frozenset()
        self._secret_regex = None
        self._secrets_lock = threading.Lock()

    def add_secret(self, value: str) -> None:
        if len(value) < MIN_SECRET_LENGTH:
            return
        with self._secrets_lock:
            if value in self._secrets:
                return
            self._secrets = self._secrets | {value}
            # Longest first so a key never leaves a suffix of a longer one behind
            ordered = sorted(self._secrets, key=len, reverse=True)
            self._secret_regex = re.compile("|".join(re.escape(s) for s in ordered))

    def _redact_callback(self, match):
        return self.placeholder_map.get(match.lastgroup, "[REDACTED]")

    def scrub(self, text: str) -> str:
        if not self.enabled or not text:
            return text
        secret_regex = self._secret_regex
        if secret_regex is not None:
            text = secret_regex.sub(SECRET_PLACEHOLDER, text)
        # Credentials before PII so detectors never see partial keys
        if self.combined_regex:
            text = self.combined_regex.sub(self._redact_callback, text)
        if self.scrubber:
            text = self.scrubber.clean(text)
        return text


_SCRUBBER = _LogScrubber()


def register_secret(value: str | None) -> None:
    """Redact ``value`` verbatim from every later log record."""
    _SCRUBBER.add_secret(value or "")


def scrub_sensitive_data(record):
    """Loguru patcher: scrub the message, exception arguments and string extras in place."""
    if not _SCRUBBER.enabled:
        return

    record["message"] = _SCRUBBER.scrub(record["message"])

    exception = record.get("exception")
    if exception:
        _, value, _ = exception
        args = getattr(value, "args", None)
        if args and _SCRUBBER.scrub(str(value)) != str(value):
            try:
                value.args = tuple(
                    _SCRUBBER.scrub(arg) if isinstance(arg, str) else arg for arg in args
                )
            except (AttributeError, TypeError):
                # Exception types with read-only args keep their message
                pass

    for key, val in (record.get("extra") or {}).items():
        if isinstance(val, str):
            record["extra"][key] = _SCRUBBER.scrub(val)


def _should_show_location(level: str) -> bool:
    config = global_config.logging.format.location
    if not config.enabled:
        return False
    return getattr(config, f"show_for_{level.lower()}", True)


def _build_format_string(record: dict) -> str:
    fmt = global_config.logging.format
    parts = ["<level>{level: <6}</level>"]
    if fmt.show_time:
        parts.append("{time:HH:mm:ss}")
    if fmt.show_session_id:
        parts.append("<green>{extra[session_id]}</green>")
    parts.append("<magenta>{extra[component]}</magenta>")

    if _should_show_location(record["level"].name):
        location = fmt.location
        fields = [
            name
            for name, shown in (
                ("{file.name}", location.show_file),
                ("{function}", location.show_function),
                ("{line}", location.show_line),
            )
            if shown
        ]
        if fields:
            parts.append("<cyan>" + ":".join(fields) + "</cyan>")

    parts.append("<level>{message}</level>{exception}")
    return " | ".join(parts) + "\n"


def _level_enabled(level: str, overrides: dict[str, bool]) -> bool:
    level = level.lower()
    if level in overrides:
        return overrides[level]
    return getattr(global_config.logging.levels, level, True)


def setup_logging(*, debug=None, info=None, warning=None, error=None, critical=None):
    """Install the scrubbing patcher and the stderr sink once per process.

    Keyword arguments override the per-level switches from ``logging.levels``;
    ``setup_logging(debug=True)`` shows flag snapshot rebuilds. Later calls are
    no-ops, including concurrent ones.
    """
    global _logging_initialized

    if _logging_initialized:
        return

    with _logging_lock:
        if _logging_initialized:
            return

        logger.remove()
        logger.configure(patcher=scrub_sensitive_data)

        if session_id.get() is None:
            session_id.set(generate_id())

        requested = {
            "debug": debug,
            "info": info,
            "warning": warning,
            "error": error,
            "critical": critical,
        }
        overrides = {level: value for level, value in requested.items() if value is not None}

        def log_filter(record):
            record["extra"]["session_id"] = session_id.get() or "---"
            record["extra"]["component"] = component_for(record["name"])
            return _level_enabled(record["level"].name, overrides)

        logger.add(
            sys.stderr,
            format=_build_format_string,
            colorize=True,
            enqueue=True,
            backtrace=True,
            diagnose=False,
            catch=True,
            filter=log_filter,
        )

        _logging_initialized = True
