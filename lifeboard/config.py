"""
Runtime settings for lifeboard, read from environment variables.

    LIFEBOARD_STORE_PATH       JSON Lines board file (in-memory store if unset)
    LIFEBOARD_LOG_LEVEL        Logging level name (default INFO)
    LIFEBOARD_LOG_FILE         Optional log file in addition to stderr
    LIFEBOARD_VERIFY_CYCLES    Confirm detected cycles by full board comparison
    LIFEBOARD_MAX_ITERATIONS   Default bound for final-state requests (default 900)
"""

from dataclasses import dataclass, asdict
from typing import Any, Mapping, Optional
import logging
import os

from .service.conway_service import ConwayService
from .storage.board_store import BoardStore, InMemoryBoardStore, JsonlBoardStore

LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


def _parse_bool(name: str, value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be a boolean, got {value!r}")


@dataclass
class Settings:
    """Service configuration.

    Attributes:
        store_path: Board file for JsonlBoardStore; None keeps boards in memory
        log_level: Logging level name
        log_file: Optional path for a file log handler
        verify_cycles: Confirm hash-detected cycles with a full board comparison
        default_max_iterations: Bound used when a final-state request gives none
    """

    store_path: Optional[str] = None
    log_level: str = "INFO"
    log_file: Optional[str] = None
    verify_cycles: bool = False
    default_max_iterations: int = 900

    def __post_init__(self) -> None:
        self._validate()

    def _validate(self) -> None:
        level = logging.getLevelName(self.log_level.upper())
        if not isinstance(level, int):
            raise ValueError(f"log_level must be a logging level name, got {self.log_level}")

        if self.default_max_iterations < 1:
            raise ValueError(f"default_max_iterations must be >= 1, got {self.default_max_iterations}")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from environment variables (os.environ by default)."""
        env = os.environ if environ is None else environ

        return cls(
            store_path=env.get('LIFEBOARD_STORE_PATH') or None,
            log_level=env.get('LIFEBOARD_LOG_LEVEL', 'INFO'),
            log_file=env.get('LIFEBOARD_LOG_FILE') or None,
            verify_cycles=_parse_bool('LIFEBOARD_VERIFY_CYCLES', env.get('LIFEBOARD_VERIFY_CYCLES', '')),
            default_max_iterations=int(env.get('LIFEBOARD_MAX_ITERATIONS', '900')),
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    def build_store(self) -> BoardStore:
        if self.store_path:
            return JsonlBoardStore(self.store_path)
        return InMemoryBoardStore()

    def build_service(self, store: Optional[BoardStore] = None) -> ConwayService:
        if store is None:
            store = self.build_store()
        return ConwayService(store, verify_cycles=self.verify_cycles)


def configure_logging(settings: Settings) -> None:
    """Configure root logging from settings."""
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if settings.log_file:
        handlers.append(logging.FileHandler(settings.log_file, encoding='utf-8'))

    logging.basicConfig(
        level=settings.log_level.upper(),
        format=LOG_FORMAT,
        handlers=handlers,
        force=True,
    )
