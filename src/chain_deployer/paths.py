"""Path management utilities for chain-deployer library."""

import os
from pathlib import Path
from typing import Dict, Optional, Union

from .constants import ARTIFACTS_DIR_ENV


def get_default_artifacts_dir() -> Path:
    """
    Get default artifacts directory.

    Returns:
        Path from $CHAIN_DEPLOYER_ARTIFACTS if set, else ./artifacts
    """
    env_dir = os.environ.get(ARTIFACTS_DIR_ENV)
    if env_dir:
        return Path(env_dir).absolute()
    return Path.cwd() / "artifacts"


def is_contract_artifact(path: Path, artifacts_root: Path) -> bool:
    """
    Check whether a JSON file under a Hardhat artifacts tree is a contract artifact.

    Hardhat writes <Name>.dbg.json debug files next to each artifact and keeps
    compiler input/output under build-info/; neither is a contract.
    """
    if path.name.endswith(".dbg.json"):
        return False
    relative = path.relative_to(artifacts_root)
    return relative.parts[0] != "build-info"


def _artifact_priority(path: Path, artifacts_root: Path) -> tuple[int, Path]:
    relative = path.relative_to(artifacts_root)
    return (0 if relative.parts[0] == "contracts" else 1, relative)


def find_artifact_paths(artifacts_root: Optional[Union[Path, str]] = None) -> Dict[str, Path]:
    """
    Map contract names to their artifact files.

    Hardhat layout: artifacts/contracts/<Source>.sol/<Name>.json

    Args:
        artifacts_root: Artifacts directory (defaults to get_default_artifacts_dir())

    Returns:
        Dictionary mapping contract name (file stem) -> artifact path.
        When two sources define the same name, project sources under contracts/
        win over dependency artifacts (e.g. @openzeppelin/); ties go to sorted path order.
    """
    if artifacts_root is None:
        artifacts_root = get_default_artifacts_dir()
    else:
        artifacts_root = Path(artifacts_root).absolute()

    result: Dict[str, Path] = {}
    candidates = sorted(
        artifacts_root.rglob("*.json"), key=lambda p: _artifact_priority(p, artifacts_root)
    )
    for path in candidates:
        if not is_contract_artifact(path, artifacts_root):
            continue
        result.setdefault(path.stem, path)

    return result
