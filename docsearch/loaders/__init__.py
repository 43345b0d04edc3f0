"""Loaders turning files on disk into ``Document`` objects."""

from .directory import DEFAULT_LOADERS, extension_glob, load_directory, load_text_file

__all__ = ["DEFAULT_LOADERS", "extension_glob", "load_directory", "load_text_file"]
