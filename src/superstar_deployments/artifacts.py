"""Contract artifact access for superstar-deployments library."""

from pathlib import Path
from typing import Optional, Union

from .constants import DEFAULT_ARTIFACT_PATH
from .exceptions import ArtifactNotFoundError


def get_default_artifact_path() -> Path:
    """
    Get default location of the compiled contract.

    Returns:
        Path to ./artifacts/super_star.wasm
    """
    return Path.cwd() / DEFAULT_ARTIFACT_PATH


def read_artifact(path: Optional[Union[Path, str]] = None) -> bytes:
    """
    Read the compiled contract.

    Args:
        path: Artifact file (defaults to ./artifacts/super_star.wasm)

    Returns:
        File contents

    Raises:
        ArtifactNotFoundError: If the file does not exist
    """
    if path is None:
        artifact_path = get_default_artifact_path()
    else:
        artifact_path = Path(path).absolute()

    if not artifact_path.is_file():
        raise ArtifactNotFoundError(
            f"Contract artifact not found at {artifact_path}. "
            "Build the contract or set $ARTIFACT_PATH."
        )
    return artifact_path.read_bytes()
