# application/ports/byte_sink_port.py
from abc import ABC, abstractmethod


class IByteSink(ABC):
    @abstractmethod
    def write_bytes(self, path: str, data: bytes) -> None:
        """Persist *data* under *path*, creating or overwriting it."""
        pass
