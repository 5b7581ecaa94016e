"""
Log Handlers
============

File handlers used when LOG_TO_FILE is enabled:
- DailyRotatingFileHandler: one file per category per day
- CategoryRoutingHandler: routes every record to its category file by logger name
- error handler: mirrors ERROR/CRITICAL into error/

Directory Structure:
-------------------
logs/
├── app/            # Everything not matched below
├── error/          # ERROR + CRITICAL only
├── pipeline/       # Orchestrator, scout, researcher, serializer
├── agent/          # SEM / SEO / Director reasoning calls, providers
├── alert/          # Constraint violations and output-analysis alerts
└── performance/    # Stage timings and report metrics

File naming: {category}_YYYY-MM-DD.log
"""

import os
import logging
from datetime import datetime, timedelta
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

from src.core.logging.formatters import FileFormatter, JsonFormatter


CATEGORIES = ["app", "error", "pipeline", "agent", "alert", "performance"]

# Order matters: first match wins
CATEGORY_KEYWORDS = [
    ("alert", ["alert", "constraint", "output_analysis"]),
    ("performance", ["metric", "perf", "timing"]),
    ("agent", ["sem_agent", "seo_agent", "director", "provider", "base_agent"]),
    ("pipeline", ["interplay", "orchestrator", "scout", "researcher", "serializ", "prompt", "skill"]),
]


def detect_category(logger_name: str) -> str:
    """Map a logger name onto one of CATEGORIES."""
    name_lower = logger_name.lower()
    for category, keywords in CATEGORY_KEYWORDS:
        if any(kw in name_lower for kw in keywords):
            return category
    return "app"


def get_log_dir() -> Path:
    """Get the base log directory."""
    return Path(os.environ.get("LOG_DIR", "logs"))


def ensure_log_directories() -> None:
    """Create all log category directories."""
    base_dir = get_log_dir()
    for category in CATEGORIES:
        (base_dir / category).mkdir(parents=True, exist_ok=True)


def cleanup_old_logs(retention_days: int = 15) -> int:
    """
    Remove log files older than retention_days.

    Returns:
        Number of files deleted
    """
    base_dir = get_log_dir()
    cutoff_date = datetime.now() - timedelta(days=retention_days)
    deleted_count = 0

    for category in CATEGORIES:
        category_dir = base_dir / category
        if not category_dir.exists():
            continue

        for log_file in category_dir.glob("*.log"):
            try:
                file_date = datetime.strptime(log_file.stem.split("_")[-1], "%Y-%m-%d")
            except ValueError:
                continue
            if file_date < cutoff_date:
                log_file.unlink()
                deleted_count += 1

    return deleted_count


class DailyRotatingFileHandler(TimedRotatingFileHandler):
    """Daily rotating handler writing {category}_YYYY-MM-DD.log."""

    def __init__(self, category: str, retention_days: int = 15, use_json: bool = False):
        self.category = category
        self.retention_days = retention_days

        category_dir = get_log_dir() / category
        category_dir.mkdir(parents=True, exist_ok=True)
        filename = category_dir / f"{category}_{datetime.now().strftime('%Y-%m-%d')}.log"

        super().__init__(
            filename=str(filename),
            when="midnight",
            interval=1,
            backupCount=retention_days,
            encoding="utf-8",
        )
        self.setFormatter(JsonFormatter() if use_json else FileFormatter())

    def doRollover(self):
        """Reopen under today's date instead of suffixing the old file."""
        if self.stream:
            self.stream.close()
            self.stream = None

        today = datetime.now().strftime("%Y-%m-%d")
        self.baseFilename = str(get_log_dir() / self.category / f"{self.category}_{today}.log")
        self.stream = self._open()

        cleanup_old_logs(self.retention_days)


class ErrorMirrorFilter(logging.Filter):
    """Only allows ERROR and CRITICAL records."""

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno >= logging.ERROR


def create_error_handler(use_json: bool = False, retention_days: int = 15) -> DailyRotatingFileHandler:
    """Create handler that mirrors all ERROR/CRITICAL logs into error/."""
    handler = DailyRotatingFileHandler(
        category="error",
        retention_days=retention_days,
        use_json=use_json,
    )
    handler.setLevel(logging.ERROR)
    handler.addFilter(ErrorMirrorFilter())
    return handler


class CategoryRoutingHandler(logging.Handler):
    """
    Root-level handler that routes records to per-category files.

    Any module using logging.getLogger(__name__) is routed without changes.
    """

    def __init__(self, use_json: bool = False, retention_days: int = 15, level: int = logging.DEBUG):
        super().__init__(level)
        self.use_json = use_json
        self.retention_days = retention_days
        self._category_handlers: dict[str, DailyRotatingFileHandler] = {}

    def _get_category_handler(self, category: str) -> DailyRotatingFileHandler:
        if category not in self._category_handlers:
            self._category_handlers[category] = DailyRotatingFileHandler(
                category=category,
                retention_days=self.retention_days,
                use_json=self.use_json,
            )
        return self._category_handlers[category]

    def emit(self, record: logging.LogRecord) -> None:
        try:
            self._get_category_handler(detect_category(record.name)).emit(record)
        except Exception:
            self.handleError(record)

    def close(self) -> None:
        for handler in self._category_handlers.values():
            handler.close()
        self._category_handlers.clear()
        super().close()
