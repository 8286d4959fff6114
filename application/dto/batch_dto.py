# application/dto/batch_dto.py
# Data Transfer Objects for batch trim requests and results.

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class TrimRequestDTO:
    """Single file trim request."""
    input_path: str
    output_path: str


@dataclass
class TrimResultDTO:
    """Result for a single file."""
    input_path: str
    output_path: str
    status: str = "queued"       # queued | saved | skipped | error
    average_volume: Optional[float] = None
    error: Optional[str] = None


@dataclass
class BatchTrimResultDTO:
    """Result for a whole batch, in request order."""
    results: List[TrimResultDTO] = field(default_factory=list)
    total: int = 0

    def count(self, status: str) -> int:
        return sum(1 for r in self.results if r.status == status)

    @property
    def saved(self) -> int:
        return self.count("saved")

    @property
    def skipped(self) -> int:
        return self.count("skipped")

    @property
    def failed(self) -> int:
        return self.count("error")

    @property
    def failed_paths(self) -> List[str]:
        return [r.input_path for r in self.results if r.status == "error"]
