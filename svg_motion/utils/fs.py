"""Filesystem helpers: atomic program writes and YAML loading.

Generated programs are written tmp file -> fsync -> rename, so a robot
controller polling the output directory never picks up a half-written
job.

Usage:
    from svg_motion.utils import fs
    fs.atomic_write_text(out_dir / "drawing.gcode", program)
    data = fs.load_yaml("converter.yaml")
"""

import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Union

import yaml


def ensure_dir(p: Union[str, Path]) -> Path:
    """Create directory (and parents) if missing, return it as ``Path``."""
    p = Path(p)
    p.mkdir(parents=True, exist_ok=True)
    return p


def atomic_write_bytes(path: Union[str, Path], data: bytes) -> None:
    """Write bytes to *path* atomically (tmp -> fsync -> rename).

    Parameters
    ----------
    path : Union[str, Path]
        Target file path; parent directories are created.
    data : bytes
        Content to write.

    Raises
    ------
    OSError
        If the temporary file cannot be written or renamed.  The
        temporary file is removed and the target is left untouched.

    Notes
    -----
    The temporary file lives in the target directory so the final
    rename stays on one filesystem.
    """
    path = Path(path)
    ensure_dir(path.parent)

    fd, tmp_name = tempfile.mkstemp(
        prefix=f".{path.name}.", suffix=".tmp", dir=path.parent,
    )
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        tmp_path.replace(path)
    except OSError:
        tmp_path.unlink(missing_ok=True)
        raise


def atomic_write_text(
    path: Union[str, Path],
    text: str,
    encoding: str = "utf-8",
) -> None:
    """Text wrapper around :func:`atomic_write_bytes`."""
    atomic_write_bytes(path, text.encode(encoding))


def load_yaml(path: Union[str, Path]) -> Dict[str, Any]:
    """Load a YAML file with ``yaml.safe_load``.

    Raises
    ------
    FileNotFoundError
        If file doesn't exist
    yaml.YAMLError
        If YAML parsing fails
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"YAML file not found: {path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            return yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise yaml.YAMLError(f"Failed to parse YAML file {path}: {e}") from e
