"""In-memory implementation of the engine's virtual filesystem.

WHY: The orchestration logic only needs five filesystem primitives. An
in-memory implementation with the same error behavior as the engine's own
filesystem lets the whole conversion flow run without a native engine,
both in tests and in engine bindings that keep their scratch space in
Python.

HOW: Directories are a set of normalized paths, files a dict of path to
bytes. Errors mirror POSIX: FileExistsError, FileNotFoundError,
NotADirectoryError, IsADirectoryError.

RULES:
- Paths are absolute POSIX paths; trailing slashes are ignored
- Parents must exist before a child directory or file is created
- write_file replaces content; str data is stored UTF-8 encoded
- readdir returns ".", ".." and then the entries in sorted order
"""

from __future__ import annotations

import posixpath
import threading
from typing import Dict, List, Set, Union


class InMemoryFileSystem:
    """Dict-backed VirtualFileSystem."""

    def __init__(self) -> None:
        self._dirs: Set[str] = {"/"}
        self._files: Dict[str, bytes] = {}
        self._lock = threading.Lock()

    @staticmethod
    def _normalize(path: str) -> str:
        if not path.startswith("/"):
            path = "/" + path
        return posixpath.normpath(path)

    def _require_parent(self, path: str) -> None:
        parent = posixpath.dirname(path)
        if parent not in self._dirs:
            if parent in self._files:
                raise NotADirectoryError(parent)
            raise FileNotFoundError(parent)

    def mkdir(self, path: str) -> None:
        path = self._normalize(path)
        with self._lock:
            if path in self._dirs or path in self._files:
                raise FileExistsError(path)
            self._require_parent(path)
            self._dirs.add(path)

    def readdir(self, path: str) -> List[str]:
        path = self._normalize(path)
        with self._lock:
            if path not in self._dirs:
                if path in self._files:
                    raise NotADirectoryError(path)
                raise FileNotFoundError(path)
            prefix = path.rstrip("/") + "/"
            children = {
                candidate[len(prefix):]
                for candidate in list(self._dirs) + list(self._files)
                if candidate != path
                and candidate.startswith(prefix)
                and "/" not in candidate[len(prefix):]
            }
        return [".", ".."] + sorted(children)

    def read_file(self, path: str) -> bytes:
        path = self._normalize(path)
        with self._lock:
            if path in self._dirs:
                raise IsADirectoryError(path)
            try:
                return self._files[path]
            except KeyError:
                raise FileNotFoundError(path) from None

    def write_file(self, path: str, data: Union[bytes, str]) -> None:
        path = self._normalize(path)
        if isinstance(data, str):
            data = data.encode("utf-8")
        with self._lock:
            if path in self._dirs:
                raise IsADirectoryError(path)
            self._require_parent(path)
            self._files[path] = bytes(data)

    def unlink(self, path: str) -> None:
        path = self._normalize(path)
        with self._lock:
            if path in self._dirs:
                raise IsADirectoryError(path)
            if self._files.pop(path, None) is None:
                raise FileNotFoundError(path)

    def exists(self, path: str) -> bool:
        path = self._normalize(path)
        with self._lock:
            return path in self._dirs or path in self._files
