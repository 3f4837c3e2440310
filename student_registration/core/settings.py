from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv


_TRUE_VALUES = {"1", "true", "yes", "on"}


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in _TRUE_VALUES


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw.strip())
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


@dataclass(frozen=True, slots=True)
class Settings:
    title: str = "ACLC Mandaue Student Form"
    log_level: str = "INFO"
    reset_after_submit: bool = False
    preview_size: int = 128


def load_settings() -> Settings:
    """Reads STUDENT_FORM_* variables (a .env file is loaded first if present)."""
    load_dotenv()
    defaults = Settings()
    return Settings(
        title=os.getenv("STUDENT_FORM_TITLE", defaults.title),
        log_level=os.getenv("STUDENT_FORM_LOG_LEVEL", defaults.log_level).upper(),
        reset_after_submit=_env_bool("STUDENT_FORM_RESET_AFTER_SUBMIT", defaults.reset_after_submit),
        preview_size=_env_int("STUDENT_FORM_PREVIEW_SIZE", defaults.preview_size),
    )


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
