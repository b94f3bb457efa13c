"""Read and write the ``chars.txt`` subject metadata file."""

from pathlib import Path

from ..core.models import SubjectInfo


def write_subject_info(path: Path, subject: SubjectInfo) -> None:
    """
    Write ``sex=``, ``hand=`` and ``height=`` lines to ``path``.

    Directories are created as needed.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as fh:
        fh.write(subject.to_text())


def read_subject_info(path: Path) -> SubjectInfo:
    values = {}
    with path.open("r", encoding="utf-8") as fh:
        for line in fh:
            key, sep, value = line.strip().partition("=")
            if sep:
                values[key] = value
    height = values.get("height", "none")
    return SubjectInfo(
        sex=values.get("sex", ""),
        hand=values.get("hand", ""),
        height_cm=None if height in ("", "none") else int(height),
    )
