"""Contract factory over a Hardhat artifacts tree."""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .exceptions import ArtifactsNotFoundError, DefectiveArtifactError, UnknownContractError
from .paths import find_artifact_paths, get_default_artifacts_dir
from .types import Blueprint


def parse_artifact(file_path: Path) -> Dict[str, Any]:
    """
    Parse a Hardhat contract artifact JSON file.

    Args:
        file_path: Path to <Name>.json artifact

    Returns:
        Dictionary with canonical field names:
        - name: contractName, falling back to the file stem
        - abi: contract ABI (empty list if absent)
        - bytecode: creation bytecode ("" if absent)
    """
    with open(file_path) as f:
        data = json.load(f)

    return {
        "name": data.get("contractName", file_path.stem),
        "abi": data.get("abi", []),
        "bytecode": data.get("bytecode", ""),
    }


def has_deployable_bytecode(bytecode: str) -> bool:
    """Interfaces and abstract contracts compile to empty bytecode ("0x")."""
    return bytecode not in ("", "0x")


class ContractFactory:
    """Produces deployable blueprints from compiled contract artifacts."""

    def __init__(self, artifacts_dir: Optional[Union[Path, str]] = None):
        """
        Initialize the contract factory.

        Args:
            artifacts_dir: Hardhat artifacts directory
                          If None, uses $CHAIN_DEPLOYER_ARTIFACTS or ./artifacts

        Raises:
            ArtifactsNotFoundError: If the artifacts directory does not exist
        """
        if artifacts_dir is None:
            artifacts_dir = get_default_artifacts_dir()

        self.artifacts_dir = Path(artifacts_dir)
        if not self.artifacts_dir.is_dir():
            raise ArtifactsNotFoundError(
                f"Artifacts directory not found at {self.artifacts_dir}. "
                "Run 'npx hardhat compile' first."
            )

        self._paths = find_artifact_paths(self.artifacts_dir)

    def contract_names(self) -> List[str]:
        """Get sorted list of contract names with compiled artifacts."""
        return sorted(self._paths.keys())

    def has_contract(self, contract_name: str) -> bool:
        return contract_name in self._paths

    def get_factory(self, contract_name: str) -> Blueprint:
        """
        Build a blueprint for the named contract.

        Args:
            contract_name: Contract name as compiled (e.g., "PatientRecordVerification")

        Returns:
            Blueprint with ABI and creation bytecode

        Raises:
            UnknownContractError: If no artifact exists for the contract
            DefectiveArtifactError: If the artifact has no deployable bytecode
        """
        if contract_name not in self._paths:
            raise UnknownContractError(
                f"Contract '{contract_name}' not found in artifacts at {self.artifacts_dir}"
            )

        artifact_path = self._paths[contract_name]
        artifact = parse_artifact(artifact_path)

        if not has_deployable_bytecode(artifact["bytecode"]):
            raise DefectiveArtifactError(
                f"Contract '{contract_name}' has no deployable bytecode "
                f"(interface or abstract contract?): {artifact_path}"
            )

        return Blueprint(
            name=artifact["name"],
            abi=artifact["abi"],
            bytecode=artifact["bytecode"],
            source_path=str(artifact_path),
        )
