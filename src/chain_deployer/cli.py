"""Command-line entry point: maps deployment outcomes to process exit codes."""

import argparse
import sys
from typing import List, Optional

from loguru import logger

from .constants import DEFAULT_CONFIRMATION_TIMEOUT, NETWORK_CONFIG
from .exceptions import DeploymentError
from .orchestrator import deploy_contract
from .types import DeploymentStatus

EXIT_OK = 0
EXIT_FAILED = 1

LOG_LEVELS = ["TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="chain-deployer",
        description="Deploy a compiled contract and confirm it across client generations",
    )
    parser.add_argument("contract", help="Contract name as compiled (e.g., PatientRecordVerification)")
    parser.add_argument(
        "--network",
        default="localhost",
        help=f"Network alias ({', '.join(sorted(NETWORK_CONFIG))})",
    )
    parser.add_argument("--rpc-url", default=None, help="RPC URL, overrides the network default")
    parser.add_argument("--artifacts", default=None, help="Hardhat artifacts directory")
    parser.add_argument("--sender", default=None, help="Deployer account (unlocked on the node)")
    parser.add_argument(
        "--timeout",
        type=float,
        default=DEFAULT_CONFIRMATION_TIMEOUT,
        help="Upper bound on confirmation wait in seconds",
    )
    parser.add_argument(
        "--require-confirmation",
        action="store_true",
        help="Exit with failure if the deployment cannot be confirmed",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        type=str.upper,
        choices=LOG_LEVELS,
        help="Log level for stderr output",
    )
    return parser


def run(args: argparse.Namespace) -> int:
    try:
        outcome = deploy_contract(
            args.contract,
            network=args.network,
            rpc_url=args.rpc_url,
            artifacts_dir=args.artifacts,
            sender=args.sender,
            confirmation_timeout=args.timeout,
            require_confirmation=args.require_confirmation,
        )
    except (DeploymentError, ValueError) as e:
        logger.error(f"Deployment {DeploymentStatus.FAILED.value}: {e}")
        return EXIT_FAILED

    if outcome.status == DeploymentStatus.UNCONFIRMED:
        logger.warning(f"Deployment not confirmed; check transaction {outcome.transaction_hash}")
    elif outcome.block is not None:
        logger.info(f"Deployment confirmed in block: {outcome.block}")

    print(outcome.address)
    return EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    """
    Run a deployment and return the process exit status.

    Returns:
        0 on SUCCEEDED or UNCONFIRMED outcomes, 1 on any fatal deployment error
    """
    args = build_parser().parse_args(argv)

    # Swap loguru's handlers for one stderr sink at the chosen level, then put
    # back loguru's default stderr handler
    logger.remove()
    handler_id = logger.add(sys.stderr, level=args.log_level)
    try:
        return run(args)
    finally:
        logger.remove(handler_id)
        logger.add(sys.stderr)


if __name__ == "__main__":
    sys.exit(main())
