from pathlib import Path, PurePosixPath
from typing import Optional, Union

from app.errors import InvalidArtifactPath


def has_extension(name: str) -> bool:
    """Check if a file name carries a non-empty extension after its stem."""
    stem, dot, extension = name.rpartition(".")
    return bool(dot and stem.strip(".") and extension)


def resolve_in_repository(relative_path: str, repo_dir: Union[str, Path]) -> Optional[Path]:
    """Join a relative path onto the repository root and canonicalize it.

    Returns None when the canonical result is not strictly below the root.
    """
    root = Path(repo_dir).resolve()
    try:
        candidate = (root / relative_path).resolve()
    except (OSError, RuntimeError, ValueError):
        # Symlink loops, embedded NUL bytes
        return None
    if root not in candidate.parents:
        return None
    return candidate


def build_artifact_path(request_path: str, repo_dir: Union[str, Path]) -> Path:
    """Map a percent-decoded request path onto a file under the repository root."""
    if not request_path.startswith("/"):
        raise InvalidArtifactPath(request_path, "Path must be absolute")
    if request_path.endswith("/"):
        raise InvalidArtifactPath(request_path, "Path must not end with a separator")
    if not has_extension(PurePosixPath(request_path).name):
        raise InvalidArtifactPath(request_path, "Artifact file name has no extension")

    path = resolve_in_repository(request_path[1:], repo_dir)
    if path is None:
        raise InvalidArtifactPath(request_path, "Path resolves outside the repository")
    return path
