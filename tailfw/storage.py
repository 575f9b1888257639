"""File-backed storage of configuration blobs, one namespace per file."""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path

from tailfw.config_types import CONFIG_BLOB_SIZE, SystemConfig

MAIN_NAMESPACE = "tail_cfg"
MAX_PROFILE_SLOTS = 4
_NAMESPACE_RE = re.compile(r"[A-Za-z0-9_]{1,15}")

_log = logging.getLogger(__name__)


def profile_namespace(slot: int) -> str:
    """The storage namespace of a profile slot."""
    if not 0 <= slot < MAX_PROFILE_SLOTS:
        raise ValueError(f"profile slot must be within 0..{MAX_PROFILE_SLOTS - 1}, got {slot}")
    return f"tail_prof{slot}"


class ConfigStore:
    """Keeps configuration blobs as files in a directory."""

    def __init__(self, directory: str | os.PathLike[str]) -> None:
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)

    def _path(self, namespace: str) -> Path:
        if not _NAMESPACE_RE.fullmatch(namespace):
            raise ValueError(f"invalid namespace {namespace!r}")
        return self.directory / f"{namespace}.cfg"

    def save_config(self, namespace: str, config: SystemConfig) -> None:
        """Write a configuration atomically."""
        path = self._path(namespace)
        blob = config.to_bytes()
        tmp = path.with_suffix(".tmp")
        tmp.write_bytes(blob)
        os.replace(tmp, path)
        _log.info("Config saved to '%s' (%d bytes)", namespace, len(blob))

    def load_config(self, namespace: str) -> SystemConfig | None:
        """Read a configuration; None if absent or of the wrong size."""
        path = self._path(namespace)
        try:
            blob = path.read_bytes()
        except FileNotFoundError:
            _log.debug("No config stored in '%s'", namespace)
            return None
        if len(blob) != CONFIG_BLOB_SIZE:
            _log.warning(
                "Config size mismatch in '%s': stored=%d expected=%d",
                namespace,
                len(blob),
                CONFIG_BLOB_SIZE,
            )
            return None
        config = SystemConfig.from_bytes(blob)
        _log.info("Config loaded from '%s'", namespace)
        return config

    def erase(self, namespace: str) -> None:
        """Remove everything stored in a namespace."""
        self._path(namespace).unlink(missing_ok=True)

    def profile_slots(self) -> list[bool]:
        """For each profile slot, whether it holds a valid configuration."""
        occupied = []
        for slot in range(MAX_PROFILE_SLOTS):
            path = self._path(profile_namespace(slot))
            occupied.append(path.is_file() and path.stat().st_size == CONFIG_BLOB_SIZE)
        return occupied