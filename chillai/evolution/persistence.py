"""
Named save slots for trained networks.

Each slot is a single ``<name>.chill`` file inside the store directory.  A
missing file is a normal condition (nothing has been trained yet) and is
reported with :class:`MissingSaveFileError` rather than a generic I/O error.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Union

from loguru import logger

from chillai.exceptions import ChillAIConfigError, MissingSaveFileError

from .genome import Genome
from .record import NetworkRecord, decode
from .topology import Topology

SUFFIX = ".chill"


class NetworkStore:
    """Read and write persisted network records in a directory."""

    def __init__(self, directory: Union[str, Path] = "networks") -> None:
        self.directory = Path(directory)

    def path_for(self, name: str) -> Path:
        slot = name.strip()
        if not slot or Path(slot).name != slot:
            raise ChillAIConfigError(f"Invalid save name '{name}'.", context={"name": name})
        return self.directory / f"{slot}{SUFFIX}"

    def exists(self, name: str) -> bool:
        return self.path_for(name).exists()

    def save(self, name: str, genome: Genome, input_size: int, output_size: int) -> Path:
        path = self.path_for(name)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(genome.save(input_size, output_size))
        logger.info("Saved network '{}' to {}", name, path)
        return path

    def read_bytes(self, name: str) -> bytes:
        path = self.path_for(name)
        if not path.exists():
            raise MissingSaveFileError(
                f"No saved network named '{name}'.",
                context={"path": str(path)},
            )
        return path.read_bytes()

    def load(self, name: str, topology: Topology) -> Genome:
        """Load a slot and check it against ``topology`` (see :meth:`Genome.load`)."""
        return Genome.load(self.read_bytes(name), topology)

    def read_record(self, name: str) -> NetworkRecord:
        """Decode a slot without checking it against any topology."""
        return decode(self.read_bytes(name))

    def list_slots(self) -> List[str]:
        if not self.directory.exists():
            return []
        return sorted(entry.stem for entry in self.directory.glob(f"*{SUFFIX}") if entry.is_file())


__all__ = ["NetworkStore", "SUFFIX"]
