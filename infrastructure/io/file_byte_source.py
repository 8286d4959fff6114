# infrastructure/io/file_byte_source.py
# Implementation of IByteSource reading straight from the local filesystem.

import os

from application.ports.byte_source_port import IByteSource


class FileByteSource(IByteSource):
    """Read an entire file into memory."""

    def read_bytes(self, path: str) -> bytes:
        if not os.path.exists(path):
            raise FileNotFoundError(f"Input file not found: '{path}'.")
        if not os.path.isfile(path):
            raise ValueError(f"Input path is not a file: '{path}'.")

        with open(path, "rb") as f:
            data: bytes = f.read()

        if not data:
            raise ValueError(f"Input file is empty: '{path}'.")
        return data
