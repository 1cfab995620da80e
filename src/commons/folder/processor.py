"""List accepted upload files in a folder. Extend by implementing FolderProcessor."""

import os
from typing import List, Protocol

from commons.config import config, get_section
from commons.files import ACCEPTED_EXTENSIONS, InputFile

# Fallback when config not available
DEFAULT_EXTENSIONS = ACCEPTED_EXTENSIONS


def _extensions_from_config() -> tuple[str, ...]:
    lst = get_section(config, "folder").get("extensions")
    if lst:
        return tuple(e.lower() for e in lst)
    return DEFAULT_EXTENSIONS


class FolderProcessor(Protocol):
    """Return the input files found in a folder."""

    def list_files(self, folder_path: str) -> List[InputFile]:
        ...


class LocalFolderProcessor:
    """
    List a local folder (non-recursive), keeping files whose extension is accepted.
    extensions default from config.yaml folder.extensions. Sorted by file name.
    """

    def __init__(self, extensions: tuple[str, ...] | None = None):
        self.extensions = extensions if extensions is not None else _extensions_from_config()

    def list_files(self, folder_path: str) -> List[InputFile]:
        if not os.path.isdir(folder_path):
            raise ValueError(f"Not a folder: {folder_path}")

        files = []
        for filename in sorted(os.listdir(folder_path)):
            file_path = os.path.join(folder_path, filename)
            if not os.path.isfile(file_path):
                continue
            if not filename.lower().endswith(self.extensions):
                continue
            files.append(InputFile(path=file_path))
        return files
