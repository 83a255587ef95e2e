import os
import tempfile
from collections.abc import Sequence
from pathlib import Path

from pyexpand.core.errors import OutputWriteFailed
from pyexpand.models import ExpansionResult, KeptRange


def _separator(result: ExpansionResult) -> bytes:
    return b"\n" if result.is_multiline else b" "


def render_region(result: ExpansionResult) -> bytes:
    """Bytes placed between a directive's ``*/`` and the next ``/*``."""
    sep = _separator(result)
    return sep + result.stdout_bytes + sep + result.indent_prefix


def render(source: bytes, kept_ranges: Sequence[KeptRange], results: Sequence[ExpansionResult]) -> bytes:
    if len(kept_ranges) != len(results) + 1:
        raise ValueError(f"Expected {len(results) + 1} kept ranges for {len(results)} results, got {len(kept_ranges)}")

    parts = [kept_ranges[0].slice(source)]
    for kept, result in zip(kept_ranges[1:], results, strict=True):
        parts.append(render_region(result))
        parts.append(kept.slice(source))
    return b"".join(parts)


def write_output(path: Path, data: bytes) -> None:
    """Replace *path* with *data* through a sibling temporary file.

    Symlinks are followed, so the file they point to is the one replaced.
    """
    target = path.resolve()
    tmp_path: Path | None = None
    try:
        mode = target.stat().st_mode & 0o777 if target.exists() else None
        with tempfile.NamedTemporaryFile("wb", delete=False, dir=target.parent, prefix=f".{target.name}.") as tmp:
            tmp.write(data)
            tmp.flush()
            os.fsync(tmp.fileno())
            tmp_path = Path(tmp.name)
        if mode is not None:
            os.chmod(tmp_path, mode)
        os.replace(tmp_path, target)
        tmp_path = None
    except OSError as exc:
        raise OutputWriteFailed(f"Failed to open the target file '{path}' for writing the result!") from exc
    finally:
        if tmp_path is not None:
            tmp_path.unlink(missing_ok=True)
