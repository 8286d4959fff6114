import glob
import os
from typing import List

from application.dto.batch_dto import TrimRequestDTO

# Default parameters, overridable from the environment
DEFAULT_PARAMS: dict[str, float] = {
    "length_ms": int(os.environ.get("EXTRACT_LENGTH_MS", "1000")),
    "min_volume": float(os.environ.get("EXTRACT_MIN_VOLUME", "0.004")),
    "workers": int(os.environ.get("EXTRACT_WORKERS", "1")),
}

PARAM_RANGES: dict[str, tuple[float, float]] = {
    "length_ms": (1, 600_000),
    "min_volume": (0.0, 1.0),
    "workers": (1, 64),
}


# Validation helpers
def validate_param_range(
    value: float, name: str, min_val: float, max_val: float
) -> None:
    """Raise ValueError if a numeric parameter is out of its valid range."""
    if not (min_val <= value <= max_val):
        raise ValueError(
            f"Parameter '{name}' must be between {min_val} and {max_val}. Got: {value}.\n"
            f"    → Adjust the value to be within the valid range."
        )


def validate_params(length_ms: int, min_volume: float, workers: int = 1) -> None:
    """Check all pipeline parameters against PARAM_RANGES."""
    for name, value in (
        ("length_ms", length_ms),
        ("min_volume", min_volume),
        ("workers", workers),
    ):
        low, high = PARAM_RANGES[name]
        validate_param_range(value, name, low, high)


# Path helpers

def expand_input_pattern(pattern: str) -> List[str]:
    """
    Expand a glob pattern (with ``~`` expansion) into a sorted list of files.

    Example: '~/clips/*.wav' → ['/home/me/clips/a.wav', '/home/me/clips/b.wav']
    """
    expanded: str = os.path.expanduser(pattern)
    return sorted(p for p in glob.glob(expanded) if os.path.isfile(p))


def get_output_path(input_path: str, output_root: str) -> str:
    """
    Place the output next to its siblings under *output_root*, keeping the
    input's base name.

    Example: data/yes/a1.wav, out  →  out/a1.wav
    """
    return os.path.join(output_root, os.path.basename(input_path))


def ensure_output_dirs(output_paths: List[str]) -> None:
    """Create every distinct parent directory of *output_paths*."""
    for output_dir in sorted({os.path.dirname(os.path.abspath(p)) for p in output_paths}):
        os.makedirs(output_dir, exist_ok=True)


def build_requests(input_paths: List[str], output_root: str) -> List[TrimRequestDTO]:
    """Pair every input with its derived output path."""
    return [
        TrimRequestDTO(input_path=p, output_path=get_output_path(p, output_root))
        for p in input_paths
    ]
