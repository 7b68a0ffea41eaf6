from __future__ import annotations


class CatalogBuildError(RuntimeError):
    """A failure that invalidates the whole catalog run."""


class SourceUnavailableError(CatalogBuildError):
    pass


class CatalogWriteError(CatalogBuildError):
    pass


def error_summary(error: Exception) -> str:
    message = str(error).strip()
    if message:
        return f"{error.__class__.__name__}: {message}"
    return error.__class__.__name__
