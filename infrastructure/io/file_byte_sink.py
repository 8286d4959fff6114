# infrastructure/io/file_byte_sink.py
# Implementation of IByteSink writing to the local filesystem.

from application.ports.byte_sink_port import IByteSink


class FileByteSink(IByteSink):
    """Write bytes to a file, replacing whatever was there."""

    def write_bytes(self, path: str, data: bytes) -> None:
        with open(path, "wb") as f:
            f.write(data)
