"""
Logging for the jobboard API.

A thin wrapper over stdlib logging that appends keyword context as JSON
and keeps per-endpoint request counters, summarized at shutdown.
"""

import json
import logging
import sys
from dataclasses import asdict, dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional

CONSOLE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
FILE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


@dataclass
class EndpointStats:
    attempts: int = 0
    successes: int = 0
    failures: int = 0
    errors_by_type: Dict[str, int] = field(default_factory=dict)

    @property
    def success_rate(self) -> Optional[float]:
        if not self.attempts:
            return None
        return round(self.successes / self.attempts, 3)


def _handlers(level: int, log_dir: Optional[Path], enable_file: bool, enable_console: bool) -> List[logging.Handler]:
    handlers: List[logging.Handler] = []
    if enable_console:
        console = logging.StreamHandler(sys.stdout)
        console.setLevel(level)
        console.setFormatter(logging.Formatter(CONSOLE_FORMAT, datefmt=DATE_FORMAT))
        handlers.append(console)
    if enable_file:
        log_dir = log_dir or Path("logs")
        log_dir.mkdir(parents=True, exist_ok=True)
        log_file = log_dir / f"jobboard_{datetime.now():%Y%m%d}.log"
        to_file = logging.FileHandler(log_file, encoding="utf-8")
        to_file.setLevel(logging.DEBUG)  # file gets everything
        to_file.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=DATE_FORMAT))
        handlers.append(to_file)
    return handlers


class StructuredLogger:
    """
    Logger with optional console/file output and request metrics.

    Args:
        name: Logger name
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_dir: Directory for the daily log file (default: logs/)
        enable_file: Write logs to a file under log_dir
        enable_console: Write logs to stdout
    """

    def __init__(
        self,
        name: str = "jobboard",
        level: str = "INFO",
        log_dir: Optional[Path] = None,
        enable_file: bool = False,
        enable_console: bool = True,
    ):
        numeric_level = getattr(logging, level.upper())
        self.logger = logging.getLogger(name)
        self.logger.setLevel(numeric_level)
        for handler in list(self.logger.handlers):
            self.logger.removeHandler(handler)
            handler.close()
        for handler in _handlers(numeric_level, log_dir, enable_file, enable_console):
            self.logger.addHandler(handler)

        self.endpoints: Dict[str, EndpointStats] = {}

    def debug(self, message: str, **context):
        self._log(logging.DEBUG, message, context)

    def info(self, message: str, **context):
        self._log(logging.INFO, message, context)

    def warning(self, message: str, **context):
        self._log(logging.WARNING, message, context)

    def error(self, message: str, **context):
        self._log(logging.ERROR, message, context)

    def critical(self, message: str, **context):
        self._log(logging.CRITICAL, message, context)

    def _log(self, level: int, message: str, context: dict):
        if context:
            message = f"{message} | Context: {json.dumps(context, default=str)}"
        self.logger.log(level, message)

    def _stats(self, endpoint: str) -> EndpointStats:
        return self.endpoints.setdefault(endpoint, EndpointStats())

    def record_request_attempt(self, endpoint: str):
        self._stats(endpoint).attempts += 1

    def record_request_success(self, endpoint: str):
        self._stats(endpoint).successes += 1

    def record_request_failure(self, endpoint: str, error_type: str):
        stats = self._stats(endpoint)
        stats.failures += 1
        stats.errors_by_type[error_type] = stats.errors_by_type.get(error_type, 0) + 1

    def get_metrics(self) -> dict:
        """
        Snapshot of the counters.

        The returned dicts are independent copies; mutating them does not
        affect the logger.
        """
        endpoints = {}
        errors_by_type: Dict[str, int] = {}
        for endpoint, stats in self.endpoints.items():
            snapshot = asdict(stats)
            snapshot["success_rate"] = stats.success_rate
            endpoints[endpoint] = snapshot
            for error_type, count in stats.errors_by_type.items():
                errors_by_type[error_type] = errors_by_type.get(error_type, 0) + count

        return {
            "requests_attempted": sum(s.attempts for s in self.endpoints.values()),
            "requests_successful": sum(s.successes for s in self.endpoints.values()),
            "requests_failed": sum(s.failures for s in self.endpoints.values()),
            "errors_by_type": errors_by_type,
            "endpoints": endpoints,
        }

    def log_metrics_summary(self):
        """Log totals, then one line per endpoint with its error breakdown."""
        metrics = self.get_metrics()
        attempted = metrics["requests_attempted"]
        overall = round(metrics["requests_successful"] / attempted * 100, 1) if attempted else 0

        self.info("=== Request Metrics ===")
        self.info(f"Requests: {metrics['requests_successful']}/{attempted} ({overall}% success)")
        for endpoint, stats in metrics["endpoints"].items():
            rate = (stats["success_rate"] or 0) * 100
            line = f"  {endpoint}: {stats['successes']}/{stats['attempts']} ({rate:.1f}%)"
            if stats["failures"]:
                errors = ", ".join(f"{name}={count}" for name, count in stats["errors_by_type"].items())
                line += f" failures={stats['failures']} [{errors}]"
            self.info(line)


_global_logger: Optional[StructuredLogger] = None


def get_logger(name: str = "jobboard", level: str = "INFO", **kwargs) -> StructuredLogger:
    """Return the process-wide logger, creating it on first use."""
    global _global_logger

    if _global_logger is None:
        _global_logger = StructuredLogger(name=name, level=level, **kwargs)

    return _global_logger


def reset_logger():
    """Forget the process-wide logger (used by tests)."""
    global _global_logger
    _global_logger = None
