"""
File-based upload collaborator for exported masks.

Desktop hosts have no upload endpoint, so the binary mask is written to a
directory instead. MaskFileUploader is a drop-in ``upload`` callable for
MaskEditingSession.export.

Classes:
    MaskFileUploader: Writes MaskExport payloads into an output directory
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from IM_Libs.constants import FILENAME_REPLACEMENT_CHAR, SAFE_FILENAME_CHARS
from IM_Libs.MaskEditingLib.mask_models import MaskExport

logger = logging.getLogger(__name__)


def sanitize_filename(name: str) -> str:
    """Replace anything outside ``[A-Za-z0-9._-]`` and strip directory parts."""
    base = Path(str(name)).name
    cleaned = "".join(
        ch if ch.isalnum() or ch in SAFE_FILENAME_CHARS or ch == "." else FILENAME_REPLACEMENT_CHAR
        for ch in base
    )
    return cleaned.strip(".") or FILENAME_REPLACEMENT_CHAR


@dataclass
class MaskFileUploader:
    """Save exported masks as files.

    Attributes:
        output_dir: Existing directory to write into
        overwrite: Replace an existing file instead of picking a new name
        filename: Override for the export's own filename
    """
    output_dir: Path
    overwrite: bool = False
    filename: Optional[str] = None

    def __post_init__(self):
        self.output_dir = Path(self.output_dir)

    def resolve_path(self, mask: MaskExport) -> Path:
        """Target path for ``mask``, numbered ``name_1.png`` etc. when taken."""
        name = sanitize_filename(self.filename or mask.filename)
        path = self.output_dir / name
        if self.overwrite or not path.exists():
            return path

        counter = 1
        while True:
            candidate = self.output_dir / f"{path.stem}_{counter}{path.suffix}"
            if not candidate.exists():
                return candidate
            counter += 1

    def __call__(self, mask: MaskExport) -> Path:
        """
        Write ``mask`` to disk.

        Returns:
            Path of the written file

        Raises:
            OSError: If the output directory is missing or not writable
        """
        if not self.output_dir.exists():
            raise OSError(f"Output directory does not exist: {self.output_dir}")

        if not self.output_dir.is_dir():
            raise OSError(f"Output path is not a directory: {self.output_dir}")

        path = self.resolve_path(mask)
        path.write_bytes(mask.data)
        logger.info("Saved %dx%d mask to %s", mask.width, mask.height, path)
        return path
