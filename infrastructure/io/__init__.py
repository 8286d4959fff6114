# infrastructure/io/__init__.py
from .file_byte_source import FileByteSource
from .file_byte_sink import FileByteSink

__all__ = [
    "FileByteSource",
    "FileByteSink",
]
