import json
import logging
import os
import re
import sys
from typing import Any

from infrastructure.observability.context import get_run_id


LOG_FORMAT = "%(asctime)s %(levelname)s [run=%(run_id)s] %(name)s: %(message)s"
REDACTED = "[REDACTED]"

# (padrao, substituicao): o prefixo capturado e mantido para o log continuar legivel.
_SECRET_PATTERNS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"(x-access-token:)[^@\s]+", re.IGNORECASE), rf"\1{REDACTED}"),
    (re.compile(r"((?:Bearer|Basic)\s+)[A-Za-z0-9_\-.+/=]+", re.IGNORECASE), rf"\1{REDACTED}"),
    (re.compile(r"\b(?:gh[pousr]_|github_pat_)[A-Za-z0-9_]+\b"), REDACTED),
)
_known_secrets: set[str] = set()


def register_sensitive_values(*values: str) -> None:
    _known_secrets.update(value for value in values if value)


def redact_secrets(text: str) -> str:
    # Segredos maiores primeiro: um valor pode conter outro (ex.: header base64 e a senha).
    for secret in sorted(_known_secrets, key=len, reverse=True):
        text = text.replace(secret, REDACTED)
    for pattern, replacement in _SECRET_PATTERNS:
        text = pattern.sub(replacement, text)
    return text


def safe_message(message: str) -> str:
    return redact_secrets(message)


class RunContextFormatter(logging.Formatter):
    """Stamps the current run id and redacts the fully rendered line."""

    def format(self, record: logging.LogRecord) -> str:
        if not hasattr(record, "run_id"):
            record.run_id = get_run_id()
        return redact_secrets(super().format(record))


def _resolve_log_level() -> int:
    level = logging.getLevelName(os.getenv("LOG_LEVEL", "INFO").strip().upper())
    return level if isinstance(level, int) else logging.INFO


def configure_logging() -> None:
    root_logger = logging.getLogger()
    root_logger.setLevel(_resolve_log_level())
    if any(isinstance(handler.formatter, RunContextFormatter) for handler in root_logger.handlers):
        return
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(RunContextFormatter(LOG_FORMAT))
    root_logger.addHandler(handler)


def _render_value(value: Any) -> str:
    if isinstance(value, bool):
        text = "true" if value else "false"
    elif isinstance(value, (list, tuple)):
        text = ",".join(str(item) for item in value)
    else:
        text = str(value)
    text = redact_secrets(text)
    # logfmt: aspas apenas quando o valor e vazio ou tem espaco, aspas ou "=".
    if not text or any(char in text for char in ' "='):
        return json.dumps(text, ensure_ascii=False)
    return text


def structured_message(event: str, **fields: Any) -> str:
    rendered = [f"event={event}"]
    rendered.extend(f"{key}={_render_value(value)}" for key, value in fields.items() if value is not None)
    return " ".join(rendered)


def log_event(logger: logging.Logger, level: int, event: str, **fields: Any) -> None:
    logger.log(level, structured_message(event, **fields), extra={"event": event})
