"""JSON-RPC chain client for chain-deployer library."""

import asyncio
from typing import Any, Dict, List, Optional

import requests
from loguru import logger

from .constants import DEFAULT_POLL_INTERVAL, DEFAULT_RPC_TIMEOUT
from .types import Blueprint, PendingDeployment, TransactionReceipt


def rpc_call(
    rpc_url: str, method: str, params: List[Any], timeout: float = DEFAULT_RPC_TIMEOUT
) -> Any:
    """
    Make a single JSON-RPC 2.0 call.

    Args:
        rpc_url: RPC endpoint URL
        method: JSON-RPC method name (e.g., "eth_sendTransaction")
        params: Positional parameters
        timeout: HTTP timeout in seconds

    Returns:
        The "result" member of the response

    Raises:
        ValueError: If RPC returns an error
        RuntimeError: If network error occurs or HTTP status is not 200
    """
    try:
        response = requests.post(
            rpc_url,
            json={
                "jsonrpc": "2.0",
                "method": method,
                "params": params,
                "id": 1,
            },
            timeout=timeout,
        )
    except requests.RequestException as e:
        raise RuntimeError(f"Network error during RPC call {method}: {e}") from e

    # Check for HTTP errors
    if response.status_code != 200:
        raise RuntimeError(f"RPC request {method} failed with status {response.status_code}")

    result = response.json()

    # Check for RPC errors
    if "error" in result:
        raise ValueError(f"RPC error in {method}: {result['error']}")

    return result.get("result")


def parse_receipt(data: Dict[str, Any]) -> TransactionReceipt:
    """
    Convert a raw eth_getTransactionReceipt result into a TransactionReceipt.

    Pre-Byzantium receipts carry no status field; they are treated as successful.
    """
    status_hex = data.get("status")
    return TransactionReceipt(
        transaction_hash=data["transactionHash"],
        block_number=int(data["blockNumber"], 16),
        status=int(status_hex, 16) if status_hex is not None else 1,
        contract_address=data.get("contractAddress"),
    )


class RpcTransaction:
    """Raw transaction handle with a suspend-until-mined capability."""

    def __init__(
        self,
        rpc_url: str,
        transaction_hash: str,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        timeout: float = DEFAULT_RPC_TIMEOUT,
    ):
        self.rpc_url = rpc_url
        self.hash = transaction_hash
        self.poll_interval = poll_interval
        self.timeout = timeout

    def get_receipt(self) -> Optional[TransactionReceipt]:
        """Fetch the receipt once. Returns None while the transaction is pending."""
        data = rpc_call(
            self.rpc_url, "eth_getTransactionReceipt", [self.hash], timeout=self.timeout
        )
        if data is None:
            return None
        return parse_receipt(data)

    async def wait(self) -> TransactionReceipt:
        """
        Poll until the transaction is mined.

        No timeout of its own; callers bound it (see Deployer.confirm).
        """
        while True:
            receipt = await asyncio.to_thread(self.get_receipt)
            if receipt is not None:
                return receipt
            logger.debug(f"Transaction {self.hash} pending, polling again in {self.poll_interval}s")
            await asyncio.sleep(self.poll_interval)


class RpcChainClient:
    """Chain client submitting creation transactions through unlocked node accounts."""

    def __init__(
        self,
        rpc_url: str,
        sender: Optional[str] = None,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        gas: Optional[int] = None,
        expected_chain_id: Optional[int] = None,
        timeout: float = DEFAULT_RPC_TIMEOUT,
    ):
        """
        Initialize the chain client.

        Args:
            rpc_url: RPC endpoint URL (e.g., "http://127.0.0.1:8545")
            sender: Deployer account; defaults to the node's first unlocked account
            poll_interval: Seconds between receipt polls
            gas: Gas limit; if None the node estimates it
            expected_chain_id: Refuse to deploy unless the node reports this chain id
            timeout: HTTP timeout per request in seconds
        """
        self.rpc_url = rpc_url
        self.sender = sender
        self.poll_interval = poll_interval
        self.gas = gas
        self.expected_chain_id = expected_chain_id
        self.timeout = timeout

    def accounts(self) -> List[str]:
        return rpc_call(self.rpc_url, "eth_accounts", [], timeout=self.timeout) or []

    def chain_id(self) -> int:
        return int(rpc_call(self.rpc_url, "eth_chainId", [], timeout=self.timeout), 16)

    def _send_creation(self, blueprint: Blueprint) -> str:
        if self.expected_chain_id is not None:
            chain_id = self.chain_id()
            if chain_id != self.expected_chain_id:
                raise ValueError(
                    f"Node at {self.rpc_url} reports chain id {chain_id}, "
                    f"expected {self.expected_chain_id}"
                )

        sender = self.sender
        if sender is None:
            accounts = self.accounts()
            if not accounts:
                raise ValueError(f"No unlocked accounts available at {self.rpc_url}")
            sender = accounts[0]

        transaction: Dict[str, Any] = {"from": sender, "data": blueprint.bytecode}
        if self.gas is not None:
            transaction["gas"] = hex(self.gas)

        return rpc_call(
            self.rpc_url, "eth_sendTransaction", [transaction], timeout=self.timeout
        )

    async def deploy(self, blueprint: Blueprint) -> PendingDeployment:
        """
        Send a contract-creation transaction.

        Args:
            blueprint: Contract blueprint to deploy (empty constructor)

        Returns:
            PendingDeployment exposing deploy_transaction.wait()

        Raises:
            ValueError: If the node rejects the transaction or has no accounts,
                        or reports an unexpected chain id
            RuntimeError: If network error occurs
        """
        transaction_hash = await asyncio.to_thread(self._send_creation, blueprint)
        return PendingDeployment(
            transaction_hash=transaction_hash,
            deploy_transaction=RpcTransaction(
                self.rpc_url,
                transaction_hash,
                poll_interval=self.poll_interval,
                timeout=self.timeout,
            ),
        )
