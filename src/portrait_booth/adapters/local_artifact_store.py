"""Composed images written to a local directory."""

from dataclasses import dataclass
from pathlib import Path

from portrait_booth.services.composition import ArtifactStore


@dataclass
class LocalArtifactStore(ArtifactStore):
    """Writes each artifact once; never overwrites an existing file."""

    directory: Path

    def save(self, filename: str, data: bytes) -> Path:
        """Write bytes, appending ``_<n>`` to the stem if the name is taken."""
        self.directory.mkdir(parents=True, exist_ok=True)
        stem, suffix = Path(filename).stem, Path(filename).suffix
        candidate = self.directory / filename
        counter = 1
        while True:
            try:
                with candidate.open("xb") as handle:
                    handle.write(data)
            except FileExistsError:
                candidate = self.directory / f"{stem}_{counter}{suffix}"
                counter += 1
                continue
            return candidate
