# application/ports/byte_source_port.py
# Port interface for loading a whole input file into memory.

from abc import ABC, abstractmethod


class IByteSource(ABC):
    """Abstract base class for anything that can hand over a file's bytes."""

    @abstractmethod
    def read_bytes(self, path: str) -> bytes:
        """
        Return the complete contents stored under *path*.

        Raises:
            FileNotFoundError: nothing exists under *path*.
            ValueError:        *path* exists but holds no usable bytes
                               (directory, zero-length file).
        """
        ...
