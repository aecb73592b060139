"""Local filesystem storage with root confinement and atomic writes."""

import os
import shutil
import tempfile
from collections.abc import Callable
from pathlib import Path
from typing import BinaryIO

from ingest.logging.logger import Log
from ingest.storage.base import BaseStorageBackend
from ingest.storage.exceptions import StorageError, StoragePathError
from ingest.upload.models import Visibility

FILE_MODES: dict[Visibility, int] = {
    Visibility.PUBLIC: 0o644,
    Visibility.PRIVATE: 0o600,
}

DIRECTORY_MODES: dict[Visibility, int] = {
    Visibility.PUBLIC: 0o755,
    Visibility.PRIVATE: 0o700,
}


class LocalStorageBackend(BaseStorageBackend):
    """Stores files under a root directory.

    Writes go to a temp file in the target directory and are renamed into
    place, so readers never observe a partially written file.
    """

    def __init__(self, root: str | Path) -> None:
        self._root = Path(root).resolve()
        self._root.mkdir(mode=DIRECTORY_MODES[Visibility.PUBLIC], parents=True, exist_ok=True)

    @property
    def root(self) -> Path:
        return self._root

    def exists(self, path: str) -> bool:
        return self._full_path(path).exists()

    def make_directory(self, path: str, visibility: Visibility | str = Visibility.PUBLIC) -> None:
        mode = self._mode(DIRECTORY_MODES, path, visibility)
        full_path = self._full_path(path)
        if full_path.is_dir():
            return
        try:
            full_path.mkdir(mode=mode, parents=True, exist_ok=True)
            os.chmod(full_path, mode)
        except OSError as exc:
            raise StorageError(path, str(exc)) from exc
        Log.debug(f"Ensured directory {full_path}")

    def put(self, path: str, data: bytes, visibility: Visibility | str = Visibility.PUBLIC) -> bool:
        self._atomic_write(path, lambda fh: fh.write(data), visibility)
        return True

    def put_file_as(
        self,
        directory: str,
        source: BinaryIO,
        name: str,
        visibility: Visibility | str = Visibility.PUBLIC,
    ) -> bool:
        path = f"{directory.rstrip('/')}/{name}" if directory else name
        source.seek(0)
        self._atomic_write(path, lambda fh: shutil.copyfileobj(source, fh), visibility)
        source.seek(0)
        return True

    def _full_path(self, path: str) -> Path:
        full_path = (self._root / path.lstrip("/")).resolve()
        try:
            full_path.relative_to(self._root)
        except ValueError as exc:
            raise StoragePathError(path, "path escapes storage root") from exc
        return full_path

    def _atomic_write(
        self,
        path: str,
        write: Callable[[BinaryIO], object],
        visibility: Visibility | str,
    ) -> None:
        mode = self._mode(FILE_MODES, path, visibility)
        full_path = self._full_path(path)
        try:
            fd, tmp_name = tempfile.mkstemp(dir=full_path.parent, prefix=".upload-")
        except OSError as exc:
            raise StorageError(path, str(exc)) from exc
        try:
            with os.fdopen(fd, "wb") as fh:
                write(fh)
                fh.flush()
                os.fsync(fh.fileno())
            os.chmod(tmp_name, mode)
            os.replace(tmp_name, full_path)
        except OSError as exc:
            Path(tmp_name).unlink(missing_ok=True)
            raise StorageError(path, str(exc)) from exc
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        Log.debug(f"Wrote {full_path}", visibility=Visibility(visibility).value)

    @staticmethod
    def _mode(modes: dict[Visibility, int], path: str, visibility: Visibility | str) -> int:
        try:
            return modes[Visibility(visibility)]
        except ValueError as exc:
            raise StorageError(path, f"unknown visibility '{visibility}'") from exc
