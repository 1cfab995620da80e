"""Folder discovery. Extend by adding new processors."""

from commons.folder.processor import DEFAULT_EXTENSIONS, FolderProcessor, LocalFolderProcessor

__all__ = ["DEFAULT_EXTENSIONS", "FolderProcessor", "LocalFolderProcessor"]
