# File: coursejoin/scripts/errors.py
from typing import Iterable


class CourseJoinError(Exception):
    """Base class for fatal pipeline errors."""


class InputMissingError(CourseJoinError, FileNotFoundError):
    def __init__(self, path, label: str | None = None, reason: str = "not found"):
        self.path = str(path)
        self.label = label
        what = f"{label} file" if label else "Input file"
        super().__init__(f"{what} {reason}: {self.path}")


class MalformedInputError(CourseJoinError, ValueError):
    def __init__(self, path, reason: str):
        self.path = str(path)
        self.reason = reason
        super().__init__(f"Malformed input in {self.path}: {reason}")


class MissingColumnsError(MalformedInputError):
    def __init__(self, path, missing: Iterable[str]):
        self.missing = list(missing)
        super().__init__(path, f"missing required columns {self.missing}")
