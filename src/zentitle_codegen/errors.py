"""Exceptions raised by the generator pipeline."""

from pathlib import Path


class GeneratorError(Exception):
    """Base class for all generation failures."""


class DownloadError(GeneratorError):
    """The OpenAPI document could not be fetched."""

    def __init__(self, status_code: int | None, reason: str, url: str = ""):
        self.status_code = status_code
        self.reason = reason
        self.url = url
        if status_code is None:
            message = f"Failed to download OpenAPI spec: {reason}"
        else:
            message = f"Failed to download OpenAPI spec: {status_code} {reason}"
        super().__init__(message)


class FileSystemError(GeneratorError):
    """Writing a generated artifact failed."""

    def __init__(self, path: Path, cause: OSError):
        self.path = path
        self.cause = cause
        super().__init__(f"Failed to write {path}: {cause}")


class ArtifactValidationError(GeneratorError):
    """A rendered artifact failed structural validation."""

    def __init__(self, errors: dict[str, str]):
        self.errors = errors
        details = "; ".join(f"{name}: {msg}" for name, msg in errors.items())
        super().__init__(f"Generated artifacts failed validation: {details}")
