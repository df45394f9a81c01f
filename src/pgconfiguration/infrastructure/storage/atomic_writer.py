"""
原子文件写入

先把完整内容写入目标目录下的临时文件（同一文件系统，rename 才是原子的），
再用 os.replace 覆盖目标文件。读者在任何时刻看到的都是完整的旧内容或完整的新内容。
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
import threading

from pgconfiguration.shared.constants import get_temp_persist_filename
from pgconfiguration.shared.errors import PersistenceError

logger = logging.getLogger(__name__)


def _fsync_dir(directory: Path) -> None:
    # Best-effort: directory fsync is not supported on every platform/filesystem.
    try:
        fd = os.open(directory, os.O_RDONLY)
    except OSError:
        return
    try:
        os.fsync(fd)
    except OSError as e:
        logger.debug(f"无法 fsync 目录 {directory}: {str(e)}")
    finally:
        os.close(fd)


def _remove_quietly(path: Path) -> None:
    try:
        path.unlink(missing_ok=True)
    except OSError as e:
        logger.warning(f"无法清理临时文件 {path}: {str(e)}")


class AtomicFileWriter:
    """
    Writes files via temp-file + rename.

    One lock per writer instance guards the whole "write temp + rename" sequence, so
    concurrent callers never race on the shared temp file name.
    """

    def __init__(self, encoding: str = "utf-8"):
        self.encoding = encoding
        self._lock = threading.Lock()

    def write_text(self, path: Path, content: str) -> None:
        """
        原子地把 content 写入 path

        Raises:
            PersistenceError: 内容无法编码、写临时文件或 rename 失败；此时 path 的原内容保持不变
        """
        path = Path(path)
        tmp_path = path.with_name(get_temp_persist_filename(path.name))

        # 编码失败时还没有创建临时文件
        try:
            data = content.encode(self.encoding)
        except UnicodeError as e:
            logger.error(f"写入 {path} 失败，内容无法编码为 {self.encoding}: {str(e)}")
            raise PersistenceError(f"写入 {path} 失败：内容无法编码为 {self.encoding}（{e}）") from e

        with self._lock:
            try:
                with open(tmp_path, "wb") as f:
                    f.write(data)
                    f.flush()
                    os.fsync(f.fileno())
                os.replace(tmp_path, path)
            except OSError as e:
                _remove_quietly(tmp_path)
                logger.error(f"写入 {path} 失败: {str(e)}")
                raise PersistenceError(f"写入 {path} 失败：{e}") from e

            _fsync_dir(path.parent)

        logger.debug(f"已原子写入 {path}（{len(content)} 字符）")
