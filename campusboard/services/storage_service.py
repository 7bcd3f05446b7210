"""업로드 파일을 UPLOAD_DIR 아래에 저장/이동/삭제하는 로컬 Blob 저장소입니다.

저장소가 돌려주는 경로는 UPLOAD_DIR 기준의 상대 경로(``contents/<hex>.pdf``)이며,
DB 에는 이 상대 경로만 기록한다. 정적 파일은 ``/uploads/<상대 경로>`` 로 서빙된다.
"""

import logging
import mimetypes
import os
import uuid
from pathlib import Path, PurePosixPath
from typing import Optional

from campusboard.config import settings

logger = logging.getLogger(__name__)


def _extension(filename: str, declared_type: str) -> str:
    if "." in filename:
        return filename.rsplit(".", 1)[-1].lower()
    guessed = mimetypes.guess_extension(declared_type or "") or ""
    return guessed.lstrip(".")


class LocalBlobStore:
    def __init__(self, root: Optional[str] = None):
        self._root = root

    @property
    def root(self) -> Path:
        # 테스트에서 settings.UPLOAD_DIR 를 바꿀 수 있도록 매 호출 시점에 읽는다.
        return Path(self._root or settings.UPLOAD_DIR)

    def absolute(self, path: str) -> Path:
        relative = PurePosixPath(path)
        if relative.is_absolute() or ".." in relative.parts:
            raise ValueError(f"invalid blob path: {path}")
        return self.root.joinpath(*relative.parts)

    def exists(self, path: str) -> bool:
        return self.absolute(path).is_file()

    def store(self, data: bytes, declared_type: str, filename: str = "", subfolder: Optional[str] = None) -> str:
        subfolder = subfolder or settings.CONTENT_SUBDIR
        ext = _extension(filename, declared_type)
        name = f"{uuid.uuid4().hex}.{ext}" if ext else uuid.uuid4().hex
        path = f"{subfolder}/{name}"
        target = self.absolute(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        with open(target, "wb") as f:
            f.write(data)
        logger.info("[storage] stored %s (%d bytes, %s)", path, len(data), declared_type)
        return path

    def move(self, path: str, new_path: str) -> None:
        source = self.absolute(path)
        target = self.absolute(new_path)
        target.parent.mkdir(parents=True, exist_ok=True)
        os.replace(source, target)
        logger.info("[storage] moved %s -> %s", path, new_path)

    def delete(self, path: str) -> None:
        try:
            self.absolute(path).unlink()
        except FileNotFoundError:
            return
        logger.info("[storage] deleted %s", path)

    def version_path_for(self, path: str) -> str:
        base = PurePosixPath(path).name
        return f"{settings.VERSIONS_SUBDIR}/{uuid.uuid4().hex}-{base}"


blob_store = LocalBlobStore()
