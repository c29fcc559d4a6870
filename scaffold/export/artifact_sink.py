from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List

from scaffold.logging_utils import get_logger

logger = get_logger("export")


@dataclass(frozen=True)
class Artifact:
    relative_path: Path     # under the output root
    content: str
    kind: str = "model"     # "model" | "test" | "fixture"


class ArtifactSink:
    """
    Writes artifacts under one output root.
    Directories are created on demand; any OSError is fatal for the run and
    propagates to the caller. Files written before the failure stay on disk.
    """

    def __init__(self, output_dir: Path) -> None:
        self.output_dir = Path(output_dir)
        self.written: List[Path] = []

    def write(self, artifact: Artifact) -> Path:
        path = self.output_dir / artifact.relative_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(artifact.content, encoding="utf-8")
        self.written.append(path)
        logger.info("Generated %s: %s", artifact.kind, path)
        return path
