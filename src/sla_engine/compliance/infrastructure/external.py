"""
Policy File Integration
========================

Sector SLA policies loaded from a YAML file, with hot reload through
watchdog so policy edits apply without restarting the service.

File format:

    policies:
      - sector_id: billing
        sector_name: Billing
        p0_hours: 4
        p1_hours: 24
        p2_hours: 72
        p3_hours: 168
"""

import threading
from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import ValidationError
from watchdog.events import FileSystemEventHandler
from watchdog.observers import Observer

from sla_engine.core import ConfigurationException
from sla_engine.compliance.application.services import IPolicyProvider
from sla_engine.compliance.domain import Policy, PolicyConfig
from sla_engine.shared.infrastructure.logging import get_logger

logger = get_logger(__name__)


class PolicyFileHandler(FileSystemEventHandler):
    """Watchdog event handler for policy file changes."""

    def __init__(self, manager: "PolicyConfigManager", policy_path: Path):
        self.manager = manager
        self.policy_path = policy_path
        super().__init__()

    def on_modified(self, event):
        if event.is_directory:
            return
        if Path(event.src_path).resolve() == self.policy_path.resolve():
            logger.info("Policy file changed", extra={"path": str(event.src_path)})
            self.manager.reload()

    on_created = on_modified


class PolicyConfigManager(IPolicyProvider):
    """
    Thread-safe sector policy manager with hot-reload support.

    A missing file means "no sector policies" (every ticket falls back to
    the system defaults). A broken file fails the initial load; a broken
    edit during hot reload keeps the last good policies.
    """

    def __init__(self):
        self._config: Optional[PolicyConfig] = None
        self._lock = threading.Lock()
        self._path: Optional[Path] = None
        self._observer = None

    def load(self, path: Path) -> PolicyConfig:
        """
        Initial configuration load.

        Raises:
            ConfigurationException: the file exists but is not a valid
                policy document
        """
        self._path = Path(path)
        try:
            config = self._load_from_file(self._path)
        except (yaml.YAMLError, ValidationError, TypeError) as e:
            raise ConfigurationException(
                f"Invalid SLA policy file: {self._path}",
                {"error": str(e)}
            ) from e

        with self._lock:
            self._config = config
        logger.info(
            "SLA policies loaded",
            extra={"path": str(self._path), "policy_count": len(config.policies)}
        )
        return config

    def _load_from_file(self, path: Path) -> PolicyConfig:
        """Load and parse YAML policy file."""
        if not path.exists():
            logger.warning(
                "SLA policy file not found, using system defaults",
                extra={"path": str(path)}
            )
            return PolicyConfig()

        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            raise TypeError("policy file root must be a mapping")

        declared = data.get("policies") or []
        sectors = [entry.get("sector_id") for entry in declared if isinstance(entry, dict)]
        duplicates = sorted({s for s in sectors if s is not None and sectors.count(s) > 1})
        if duplicates:
            logger.warning(
                "Duplicate sector policies, last declaration wins",
                extra={"sectors": duplicates}
            )

        return PolicyConfig(**data)

    def reload(self) -> bool:
        """Reload policies from file, keeping the previous ones on failure."""
        if self._path is None:
            return False

        try:
            new_config = self._load_from_file(self._path)
        except (OSError, yaml.YAMLError, ValidationError, TypeError) as e:
            logger.error(
                "Failed to reload SLA policies, keeping previous policies",
                extra={"path": str(self._path), "error": str(e)}
            )
            return False

        with self._lock:
            self._config = new_config
        logger.info(
            "SLA policies reloaded",
            extra={"policy_count": len(new_config.policies)}
        )
        return True

    def start_watching(self) -> None:
        """
        Start watching the policy file for changes.

        Skips watching when the file's directory does not exist or the
        platform cannot deliver file events.
        """
        if self._path is None:
            raise RuntimeError("Policies not loaded. Call load() first.")

        if not self._path.parent.exists():
            logger.info(
                "Policy directory doesn't exist, skipping file watch",
                extra={"path": str(self._path)}
            )
            return

        try:
            self._observer = Observer()
            handler = PolicyFileHandler(self, self._path)
            self._observer.schedule(
                handler,
                str(self._path.parent),
                recursive=False
            )
            self._observer.start()
            logger.info("Started watching policy file", extra={"path": str(self._path)})
        except OSError as e:
            logger.warning(
                "File watching not available, using static policies",
                extra={"error": str(e)}
            )
            self._observer = None

    def stop_watching(self) -> None:
        """Stop watching the policy file (safe to call even if not watching)."""
        if self._observer is not None:
            self._observer.stop()
            self._observer.join(timeout=5)
            self._observer = None

    @property
    def is_watching(self) -> bool:
        return self._observer is not None

    @property
    def config(self) -> PolicyConfig:
        """Get current configuration."""
        with self._lock:
            if self._config is None:
                raise RuntimeError("SLA policies not loaded")
            return self._config

    def get_policies(self) -> List[Policy]:
        return list(self.config.policies)
