"""Golden store: reads the approved screenshot and overwrites it on approval."""

from __future__ import annotations

import hashlib
import logging
import os
import tempfile
from pathlib import Path

from ssr_screenshot.errors import GoldenNotFoundError
from ssr_screenshot.imaging import codec
from ssr_screenshot.models.pixel_buffer import PixelBuffer

logger = logging.getLogger(__name__)


class GoldenStore:
    """A single golden PNG addressed by path."""

    def __init__(self, golden_path: Path):
        self.golden_path = Path(golden_path)

    def exists(self) -> bool:
        return self.golden_path.is_file()

    def load(self) -> PixelBuffer:
        """Decode the golden image. Raises GoldenNotFoundError if it is missing."""
        if not self.exists():
            raise GoldenNotFoundError(self.golden_path)
        data = self.golden_path.read_bytes()
        logger.debug("Loaded golden %s (%d bytes)", self.golden_path, len(data))
        return codec.decode(data)

    def approve(self, buffer: PixelBuffer) -> str:
        """Replace the golden with ``buffer``. Returns the SHA-256 of the written file.

        Symlinks are followed so a runfiles link updates the source file it
        points at. The write goes through a temp file in the same directory so
        the golden is never left half written.
        """
        data = codec.encode(buffer)
        dest = self.golden_path.resolve()
        dest.parent.mkdir(parents=True, exist_ok=True)

        mode = dest.stat().st_mode & 0o777 if dest.exists() else 0o644
        fd, tmp_name = tempfile.mkstemp(prefix=f".{dest.name}.", dir=dest.parent)
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
            os.chmod(tmp_name, mode)
            os.replace(tmp_name, dest)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

        image_hash = hashlib.sha256(data).hexdigest()
        logger.info(
            "Stored golden %s (%dx%d, sha256 %s)",
            dest, buffer.width, buffer.height, image_hash[:12],
        )
        return image_hash
