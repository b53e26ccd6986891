"""Shared pytest fixtures for chain-deployer tests."""

import asyncio
import json
from pathlib import Path
from typing import Any, Callable, List, Optional

import pytest

PATIENT_RECORD_ABI = [
    {
        "type": "function",
        "name": "verifyRecord",
        "inputs": [{"name": "recordHash", "type": "bytes32"}],
        "outputs": [{"name": "", "type": "bool"}],
        "stateMutability": "view",
    }
]
PATIENT_RECORD_BYTECODE = "0x608060405234801561001057600080fd5b50610150806100206000396000f3fe"


def write_artifact(path: Path, data: Any) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data))
    return path


@pytest.fixture
def artifacts_dir(tmp_path: Path) -> Path:
    """Create a Hardhat-style artifacts tree with one deployable contract and one interface."""
    root = tmp_path / "artifacts"
    source_dir = root / "contracts" / "PatientRecordVerification.sol"
    write_artifact(
        source_dir / "PatientRecordVerification.json",
        {
            "_format": "hh-sol-artifact-1",
            "contractName": "PatientRecordVerification",
            "sourceName": "contracts/PatientRecordVerification.sol",
            "abi": PATIENT_RECORD_ABI,
            "bytecode": PATIENT_RECORD_BYTECODE,
            "deployedBytecode": "0x6080604052",
        },
    )
    write_artifact(
        source_dir / "PatientRecordVerification.dbg.json",
        {"_format": "hh-sol-dbg-1", "buildInfo": "../../build-info/abc123.json"},
    )
    write_artifact(
        root / "contracts" / "IRecords.sol" / "IRecords.json",
        {"contractName": "IRecords", "abi": [], "bytecode": "0x"},
    )
    write_artifact(root / "build-info" / "abc123.json", {"id": "abc123"})
    return root


@pytest.fixture
def calls() -> List[str]:
    """Record of capability invocations, in order."""
    return []


@pytest.fixture
def capability(calls: List[str]) -> Callable[..., Callable[[], Any]]:
    """
    Build an async capability that records its name when invoked.

    Usage: capability("wait_for_deployment", result=..., error=..., delay=...)
    """

    def _capability(
        name: str,
        result: Any = None,
        error: Optional[BaseException] = None,
        delay: float = 0.0,
    ) -> Callable[[], Any]:
        async def _run() -> Any:
            calls.append(name)
            if delay:
                await asyncio.sleep(delay)
            if error is not None:
                raise error
            return result

        return _run

    return _capability
