"""Main API for chain-deployer library."""

import asyncio
import os
from pathlib import Path
from typing import Any, Awaitable, Dict, Optional, Sequence, Union

from loguru import logger

from .artifacts import ContractFactory
from .constants import (
    DEFAULT_ADDRESS_TIMEOUT,
    DEFAULT_CONFIRMATION_TIMEOUT,
    DEFAULT_POLL_INTERVAL,
    NETWORK_CONFIG,
)
from .exceptions import (
    AddressUnresolvedError,
    DeploymentRevertedError,
    SubmissionFailedError,
    UnconfirmedDeploymentError,
)
from .rpc import RpcChainClient
from .strategies import (
    ADDRESS_STRATEGIES,
    CONFIRMATION_STRATEGIES,
    AddressStrategy,
    ConfirmationStrategy,
)
from .types import (
    Blueprint,
    Confirmation,
    ConfirmationStatus,
    DeploymentOutcome,
    DeploymentStatus,
    is_address,
)


class DeadlineExpired(Exception):
    """Internal signal: run_within() cancelled the awaitable at its deadline."""


async def run_within(awaitable: Awaitable[Any], timeout: Optional[float]) -> Any:
    """
    Await with an upper bound, telling our deadline apart from errors raised inside.

    Unlike asyncio.wait_for, expiry is reported as DeadlineExpired, never as a
    TimeoutError that the awaitable might raise itself.

    Raises:
        DeadlineExpired: If timeout elapsed first
    """
    task = asyncio.ensure_future(awaitable)
    try:
        done, _ = await asyncio.wait({task}, timeout=timeout)
    except asyncio.CancelledError:
        task.cancel()
        raise

    if task in done:
        # Cancellation raised by the awaitable itself, not by us or our caller
        if task.cancelled():
            raise RuntimeError("Capability was cancelled")
        return task.result()

    task.cancel()
    await asyncio.gather(task, return_exceptions=True)
    raise DeadlineExpired()


def transaction_id(pending: Any) -> Optional[str]:
    """Get the creation transaction hash from any pending-deployment shape."""
    tx_hash = getattr(pending, "transaction_hash", None)
    if tx_hash:
        return tx_hash
    transaction = getattr(pending, "deploy_transaction", None)
    return getattr(transaction, "hash", None) if transaction is not None else None


class Deployer:
    """Submits contract-creation transactions and confirms them across client generations."""

    def __init__(
        self,
        client: Any,
        factory: Optional[Any] = None,
        confirmation_timeout: Optional[float] = DEFAULT_CONFIRMATION_TIMEOUT,
        address_timeout: Optional[float] = DEFAULT_ADDRESS_TIMEOUT,
        require_confirmation: bool = False,
        confirmation_strategies: Sequence[ConfirmationStrategy] = CONFIRMATION_STRATEGIES,
        address_strategies: Sequence[AddressStrategy] = ADDRESS_STRATEGIES,
    ):
        """
        Initialize the deployer.

        Args:
            client: Chain client exposing async deploy(blueprint)
            factory: Contract factory exposing get_factory(name); required by deploy()
            confirmation_timeout: Overall bound in seconds on confirm(); None waits forever
            address_timeout: Bound in seconds on an asynchronous address accessor
            require_confirmation: Raise UnconfirmedDeploymentError instead of
                                  returning an UNCONFIRMED outcome
            confirmation_strategies: Confirmation strategies in priority order
            address_strategies: Address strategies in priority order
        """
        self.client = client
        self.factory = factory
        self.confirmation_timeout = confirmation_timeout
        self.address_timeout = address_timeout
        self.require_confirmation = require_confirmation
        self.confirmation_strategies = tuple(confirmation_strategies)
        self.address_strategies = tuple(address_strategies)

    async def submit(self, blueprint: Blueprint) -> Any:
        """
        Send the contract-creation request.

        Args:
            blueprint: Blueprint from the contract factory

        Returns:
            The client's pending deployment object

        Raises:
            SubmissionFailedError: If the client rejects the request
        """
        logger.info(f"Submitting creation transaction for {blueprint.name}")
        try:
            pending = await self.client.deploy(blueprint)
        except Exception as e:
            raise SubmissionFailedError(f"Deployment of {blueprint.name} rejected: {e}") from e

        tx_hash = transaction_id(pending)
        if not tx_hash:
            raise SubmissionFailedError(
                f"Client returned no transaction identifier for {blueprint.name}"
            )

        logger.info(f"Creation transaction sent: {tx_hash}")
        return pending

    async def confirm(self, pending: Any) -> Confirmation:
        """
        Wait for inclusion using the first strategy that completes.

        Strategies run in priority order. A strategy that is unavailable is
        skipped; one that raises is demoted to the next. The whole cascade
        shares one deadline.

        Args:
            pending: Pending deployment returned by submit()

        Returns:
            Confirmation; status is UNCONFIRMED when nothing completed in time
        """
        loop = asyncio.get_running_loop()
        deadline = None
        if self.confirmation_timeout is not None:
            deadline = loop.time() + self.confirmation_timeout

        errors: Dict[str, str] = {}
        for strategy in self.confirmation_strategies:
            if not strategy.available(pending):
                continue

            remaining = None
            if deadline is not None:
                remaining = deadline - loop.time()
                if remaining <= 0:
                    errors[strategy.name] = "deadline expired before attempt"
                    break

            logger.debug(f"Confirming with {strategy.name}")
            try:
                confirmation = await run_within(strategy.run(pending), remaining)
            except DeadlineExpired:
                logger.warning(
                    f"Confirmation timed out after {self.confirmation_timeout}s "
                    f"during {strategy.name}"
                )
                errors[strategy.name] = "timed out"
                break
            except Exception as e:
                # Client-raised TimeoutError lands here and demotes
                logger.warning(f"Confirmation strategy {strategy.name} failed: {e}")
                errors[strategy.name] = str(e) or type(e).__name__
                continue

            confirmation.errors = errors
            return confirmation

        if not errors:
            logger.warning("Client exposes no confirmation capability")
        return Confirmation(status=ConfirmationStatus.UNCONFIRMED, errors=errors)

    async def resolve_address(
        self, pending: Any, confirmation: Optional[Confirmation] = None
    ) -> str:
        """
        Resolve the deployed contract address.

        Args:
            pending: Pending deployment returned by submit()
            confirmation: Result of confirm(), if any

        Returns:
            Well-formed contract address

        Raises:
            AddressUnresolvedError: If no strategy yields a well-formed address
        """
        for strategy in self.address_strategies:
            if not strategy.available(pending, confirmation):
                continue

            try:
                address = await run_within(
                    strategy.run(pending, confirmation), self.address_timeout
                )
            except DeadlineExpired:
                logger.warning(
                    f"Address strategy {strategy.name} timed out after {self.address_timeout}s"
                )
                continue
            except Exception as e:
                logger.warning(f"Address strategy {strategy.name} failed: {e!r}")
                continue

            if is_address(address):
                logger.debug(f"Address resolved with {strategy.name}: {address}")
                return address
            logger.warning(f"Address strategy {strategy.name} returned malformed value {address!r}")

        raise AddressUnresolvedError(
            f"Could not resolve contract address for transaction {transaction_id(pending)}"
        )

    async def deploy(self, contract_name: str) -> DeploymentOutcome:
        """
        Deploy a contract and report one outcome.

        Args:
            contract_name: Name of compiled contract

        Returns:
            DeploymentOutcome with status SUCCEEDED or UNCONFIRMED

        Raises:
            UnknownContractError: If the factory has no such contract
            SubmissionFailedError: If the client rejects the request
            DeploymentRevertedError: If the creation transaction reverted
            AddressUnresolvedError: If no address could be resolved
            UnconfirmedDeploymentError: If unconfirmed and require_confirmation is set
        """
        if self.factory is None:
            raise ValueError("Deployer has no contract factory; pass factory=...")

        blueprint = self.factory.get_factory(contract_name)
        pending = await self.submit(blueprint)
        tx_hash = transaction_id(pending)

        confirmation = await self.confirm(pending)
        if confirmation.status == ConfirmationStatus.REVERTED:
            raise DeploymentRevertedError(
                f"Deployment of {contract_name} reverted in block {confirmation.block} "
                f"(transaction {tx_hash})"
            )

        address = await self.resolve_address(pending, confirmation)

        if confirmation.confirmed:
            status = DeploymentStatus.SUCCEEDED
            logger.success(f"{contract_name} deployed to {address}")
        else:
            if self.require_confirmation:
                raise UnconfirmedDeploymentError(
                    f"Deployment of {contract_name} at {address} was not confirmed "
                    f"(transaction {tx_hash})"
                )
            status = DeploymentStatus.UNCONFIRMED
            logger.warning(
                f"{contract_name} submitted at {address} but not confirmed; "
                f"transaction {tx_hash} may still be mined"
            )

        return DeploymentOutcome(
            contract_name=contract_name,
            address=address,
            transaction_hash=tx_hash,
            status=status,
            confirmation=confirmation,
        )


def resolve_rpc_url(network: str, rpc_url: Optional[str] = None) -> str:
    """
    Resolve the RPC URL for a network.

    Precedence: explicit argument, then the network's environment variable,
    then the network's default URL.

    Raises:
        ValueError: If network is unknown and no rpc_url is given
    """
    if rpc_url is not None:
        return rpc_url

    if network not in NETWORK_CONFIG:
        raise ValueError(
            f"Unknown network '{network}'; pass rpc_url or use one of "
            f"{', '.join(sorted(NETWORK_CONFIG))}"
        )

    network_config = NETWORK_CONFIG[network]
    return os.environ.get(network_config["default_rpc_env"], network_config["default_rpc_url"])


def deploy_contract(
    contract_name: str,
    network: str = "localhost",
    rpc_url: Optional[str] = None,
    artifacts_dir: Optional[Union[Path, str]] = None,
    sender: Optional[str] = None,
    confirmation_timeout: Optional[float] = DEFAULT_CONFIRMATION_TIMEOUT,
    poll_interval: float = DEFAULT_POLL_INTERVAL,
    require_confirmation: bool = False,
) -> DeploymentOutcome:
    """
    Deploy a compiled contract to a JSON-RPC node.

    Args:
        contract_name: Name of compiled contract
        network: Network name ("localhost" or "hardhat"); a known network also
                 pins the chain id the node must report
        rpc_url: RPC URL (defaults to $LOCALHOST_RPC_URL / $HARDHAT_RPC_URL,
                 then http://127.0.0.1:8545)
        artifacts_dir: Hardhat artifacts directory (defaults to ./artifacts)
        sender: Deployer account (defaults to the node's first account)
        confirmation_timeout: Overall bound on confirmation in seconds
        poll_interval: Seconds between receipt polls
        require_confirmation: Treat an unconfirmed deployment as fatal

    Returns:
        DeploymentOutcome

    Raises:
        ValueError: If network is unknown and no rpc_url is given
        DeploymentError: On any fatal deployment error
    """
    factory = ContractFactory(artifacts_dir)
    network_config = NETWORK_CONFIG.get(network)
    client = RpcChainClient(
        resolve_rpc_url(network, rpc_url),
        sender=sender,
        poll_interval=poll_interval,
        expected_chain_id=network_config["chain_id"] if network_config else None,
    )
    deployer = Deployer(
        client,
        factory=factory,
        confirmation_timeout=confirmation_timeout,
        require_confirmation=require_confirmation,
    )
    return asyncio.run(deployer.deploy(contract_name))
