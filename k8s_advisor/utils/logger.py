from colorama import Fore, Style
from enum import Enum
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional
import json

# Config is optional here so the logger still works if configuration fails to load
try:
    from k8s_advisor.config.config import Config
    config = Config()
except Exception:
    config = None


class ComponentColor(Enum):
    # Knowledge stores
    K8S_ADVISOR_VECTOR_DB = Fore.GREEN
    K8S_ADVISOR_VECTOR_STORE = Fore.LIGHTGREEN_EX
    K8S_ADVISOR_EMBEDDING = Fore.CYAN

    # Recommendation pipeline
    K8S_ADVISOR_RECOMMENDER = Fore.LIGHTBLUE_EX
    K8S_ADVISOR_AI_PROVIDER = Fore.BLUE

    # Cluster access and entry point
    K8S_ADVISOR_KUBECTL = Fore.MAGENTA
    K8S_ADVISOR_CLI = Fore.LIGHTMAGENTA_EX

    BASE = Fore.WHITE


class LogLevelColor(Enum):
    DEBUG = Fore.LIGHTBLACK_EX
    INFO = Fore.BLUE
    WARNING = Fore.YELLOW
    ERROR = Fore.RED
    CRITICAL = Fore.LIGHTRED_EX


def _setting(key: str, override: Any, default: Any) -> Any:
    if override is not None:
        return override
    if config is None:
        return default
    return config.get(key, default)


class ComponentLogger:
    """
    Colored console and optional file logging for one component.

    Console lines go to stderr so command output on stdout stays machine
    readable.
    """

    def __init__(
        self,
        component: str = "BASE",
        log_to_console: Optional[bool] = None,
        log_to_file: Optional[bool] = None,
        log_level: Optional[str] = None,
        log_file: Optional[str] = None,
    ) -> None:
        self.component = component
        self.log_to_console = _setting('LOG_TO_CONSOLE', log_to_console, True)
        self.log_to_file = _setting('LOG_TO_FILE', log_to_file, False)
        self.log_level = str(_setting('LOG_LEVEL', log_level, 'INFO')).upper()
        self.log_file = _setting('LOG_FILE', log_file, 'k8s_advisor.log')

        self.logger = logging.getLogger(f"k8s_advisor.{component}")
        self.logger.setLevel(self.log_level)
        self.logger.handlers = []
        self.logger.propagate = False
        if self.log_to_file:
            file_handler = logging.FileHandler(self.log_file)
            file_handler.setLevel(self.log_level)
            file_handler.setFormatter(logging.Formatter('%(message)s'))
            self.logger.addHandler(file_handler)

    def _is_enabled(self, level: str) -> bool:
        return logging.getLevelName(level) >= logging.getLevelName(self.log_level)

    def _console_line(self, message: str, level: str) -> str:
        try:
            component_color = ComponentColor[self.component].value
        except KeyError:
            component_color = ComponentColor.BASE.value
        try:
            level_color = LogLevelColor[level].value
        except KeyError:
            level_color = Fore.WHITE
        timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "+00:00"
        return (
            f"{level_color}[{level}]{Style.RESET_ALL} "
            f"{component_color}{self.component}{Style.RESET_ALL}: [{timestamp}] {message}"
        )

    def log(self, message: str, level: str = "INFO") -> None:
        level = level.upper()
        if self.log_to_console and self._is_enabled(level):
            print(self._console_line(message, level), file=sys.stderr)
        if self.log_to_file:
            getattr(self.logger, level.lower())(message)

    def log_structured(
        self,
        level: str = "INFO",
        message: str = "",
        extra: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        Log a message with key/value context.

        With LOG_STRUCTURED_JSON the entry is emitted as one JSON object;
        otherwise the context is appended as ``key=value`` pairs.

        Args:
            level: Log level (e.g. "INFO", "WARNING")
            message: Human readable message
            extra: Context fields such as collection, stage or error
        """
        structured = bool(_setting('LOG_STRUCTURED_JSON', None, False))
        if structured:
            entry = {
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "component": self.component,
                "level": level,
                "message": message,
            }
            entry.update(extra or {})
            text = json.dumps(entry, default=str)
        else:
            pairs = [f"{k}={v}" for k, v in (extra or {}).items()]
            text = " ".join([message, *pairs]) if pairs else message
        self.log(text, level=level)
