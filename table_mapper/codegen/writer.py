"""
Writes rendered artifacts to disk.
"""

from pathlib import Path
from typing import Iterable, List, Union

from ..logging_config import get_logger
from .core.generator import RenderedFile

logger = get_logger(__name__)


class ArtifactWriter:
    """
    Writes rendered files below an output directory.

    I/O errors propagate to the caller unchanged.
    """

    def __init__(self, output_dir: Union[str, Path], dry_run: bool = False):
        self.output_dir = Path(output_dir)
        self.dry_run = dry_run

    def target_for(self, rendered: RenderedFile) -> Path:
        return self.output_dir / rendered.path

    def write(self, files: Iterable[RenderedFile]) -> List[Path]:
        """
        Write every file, creating package directories as needed.

        Returns:
            Paths written (or that would be written in dry-run mode)
        """
        written = []
        for rendered in files:
            target = self.target_for(rendered)
            if self.dry_run:
                logger.info(f"Would write {target}")
            else:
                target.parent.mkdir(parents=True, exist_ok=True)
                target.write_text(rendered.content, encoding="utf-8")
                logger.debug(f"Wrote {target}")
            written.append(target)
        return written
