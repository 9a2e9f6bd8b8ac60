"""
Filesystem storage for ngpackager.

Provides the file operations a packaging run needs:
- Atomic text writes (write to temp, then rename)
- Copies with optional rename
- Sorted recursive listing
- Automatic parent directory creation

Every OS-level failure is re-raised as StorageError.
"""

import os
import shutil
import tempfile
from pathlib import Path
from typing import List, Optional, Union
import logging

from ..errors import StorageError

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class Storage:
    """
    Host filesystem access used by the packaging services.

    Example:
        storage = Storage()
        storage.create_directory(Path("dist/bundles"))
        storage.copy_file(Path("bin/core.umd.js"), Path("dist/bundles"))
        storage.write_text(Path("dist/package.json"), content)
    """

    encoding = 'utf-8'

    def create_directory(self, path: PathLike) -> None:
        """Create ``path`` and any missing parents."""
        try:
            Path(path).mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(f"Cannot create directory {path}: {e}", str(path)) from e

    def read_text(self, path: PathLike) -> str:
        """Read a UTF-8 text file."""
        try:
            with open(path, 'r', encoding=self.encoding, newline='') as f:
                return f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise StorageError(f"Cannot read {path}: {e}", str(path)) from e

    def write_text(self, path: PathLike, text: str) -> None:
        """Write text atomically, creating parent directories."""
        target = Path(path)
        self.create_directory(target.parent)
        try:
            self._write_atomic(target, text)
        except OSError as e:
            raise StorageError(f"Cannot write {target}: {e}", str(target)) from e
        logger.debug(f"Wrote {target}")

    def _write_atomic(self, target: Path, text: str) -> None:
        """Write text atomically using temp file and rename."""
        # Write to temp file in same directory
        fd, temp_path = tempfile.mkstemp(
            dir=target.parent,
            prefix=f".{target.name}.",
            suffix=".tmp"
        )

        try:
            with os.fdopen(fd, 'w', encoding=self.encoding, newline='') as f:
                f.write(text)

            # Atomic rename
            os.replace(temp_path, target)

        except Exception:
            # Clean up temp file on error
            try:
                os.unlink(temp_path)
            except OSError:
                pass
            raise

    def copy_file(self, src: PathLike, dst_dir: PathLike, name: Optional[str] = None) -> Path:
        """
        Copy ``src`` into ``dst_dir``.

        Args:
            src: File to copy
            dst_dir: Destination directory (created if missing)
            name: File name in ``dst_dir``; defaults to the source name

        Returns:
            Path of the copy
        """
        source = Path(src)
        target = Path(dst_dir) / (name or source.name)
        self.create_directory(target.parent)
        try:
            shutil.copyfile(source, target)
        except OSError as e:
            raise StorageError(f"Cannot copy {source} to {target}: {e}", str(source)) from e
        logger.debug(f"Copied {source} -> {target}")
        return target

    def list_files_recursive(self, root: PathLike) -> List[Path]:
        """List every file below ``root``, sorted."""
        base = Path(root)
        if not base.is_dir():
            raise StorageError(f"Not a directory: {base}", str(base))
        try:
            return sorted(p for p in base.rglob('*') if p.is_file())
        except OSError as e:
            raise StorageError(f"Cannot list {base}: {e}", str(base)) from e
