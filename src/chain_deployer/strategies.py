"""
Capability strategies for confirming deployments and resolving addresses.

Client libraries of different generations expose different shapes on the
object returned by a contract-creation call:

- wait_for_deployment()          current generation
- deployed()                     previous generation
- deploy_transaction.wait()      raw transaction handle, returns a receipt

and for the address:

- address                        attribute set at submission
- get_address()                  asynchronous accessor
- receipt contract address       only known after confirmation

Each strategy probes for its own shape before it is invoked, so the
orchestrator never relies on an exception to discover what a client supports.
"""

import inspect
from collections.abc import Mapping
from typing import Any, Callable, Optional, Tuple

from .types import Confirmation, ConfirmationStatus


def get_capability(obj: Any, name: str) -> Optional[Callable[..., Any]]:
    """Return obj.<name> if it exists and is callable, else None."""
    attr = getattr(obj, name, None)
    return attr if callable(attr) else None


async def invoke(capability: Callable[..., Any]) -> Any:
    """Call a capability, awaiting the result if the client returned an awaitable."""
    result = capability()
    if inspect.isawaitable(result):
        result = await result
    return result


def receipt_field(receipt: Any, *names: str) -> Any:
    """Read the first present field from a mapping- or attribute-shaped receipt."""
    for name in names:
        if isinstance(receipt, Mapping):
            value = receipt.get(name)
        else:
            value = getattr(receipt, name, None)
        if value is not None:
            return value
    return None


def _as_int(value: Any) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, str):
        return int(value, 0)
    return int(value)


class ConfirmationStrategy:
    """Base class for confirmation strategies."""

    name = "base"

    def available(self, pending: Any) -> bool:
        raise NotImplementedError

    async def run(self, pending: Any) -> Confirmation:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name}>"


class _AwaitCapabilityStrategy(ConfirmationStrategy):
    capability = ""

    def available(self, pending: Any) -> bool:
        return get_capability(pending, self.capability) is not None

    async def run(self, pending: Any) -> Confirmation:
        await invoke(getattr(pending, self.capability))
        return Confirmation(status=ConfirmationStatus.CONFIRMED, strategy=self.name)


class DirectAwaitStrategy(_AwaitCapabilityStrategy):
    name = "direct-await"
    capability = "wait_for_deployment"


class LegacyAwaitStrategy(_AwaitCapabilityStrategy):
    name = "legacy-await"
    capability = "deployed"


class ReceiptWaitStrategy(ConfirmationStrategy):
    name = "receipt-wait"

    def available(self, pending: Any) -> bool:
        transaction = getattr(pending, "deploy_transaction", None)
        return transaction is not None and get_capability(transaction, "wait") is not None

    async def run(self, pending: Any) -> Confirmation:
        receipt = await invoke(pending.deploy_transaction.wait)
        if receipt is None:
            raise ValueError("Transaction wait returned no receipt")

        block = _as_int(receipt_field(receipt, "blockNumber", "block_number"))
        if block is None:
            raise ValueError("Receipt has no block number")

        status = _as_int(receipt_field(receipt, "status"))
        return Confirmation(
            status=ConfirmationStatus.REVERTED if status == 0 else ConfirmationStatus.CONFIRMED,
            block=block,
            address=receipt_field(receipt, "contractAddress", "contract_address"),
            strategy=self.name,
        )


class AddressStrategy:
    """Base class for address resolution strategies."""

    name = "base"

    def available(self, pending: Any, confirmation: Optional[Confirmation]) -> bool:
        raise NotImplementedError

    async def run(self, pending: Any, confirmation: Optional[Confirmation]) -> Any:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name}>"


class DirectFieldStrategy(AddressStrategy):
    name = "direct-field"

    def available(self, pending: Any, confirmation: Optional[Confirmation]) -> bool:
        # A callable "address" is some other client's method, not a field
        value = getattr(pending, "address", None)
        return bool(value) and not callable(value)

    async def run(self, pending: Any, confirmation: Optional[Confirmation]) -> Any:
        return pending.address


class AsyncAccessorStrategy(AddressStrategy):
    name = "async-accessor"

    def available(self, pending: Any, confirmation: Optional[Confirmation]) -> bool:
        return get_capability(pending, "get_address") is not None

    async def run(self, pending: Any, confirmation: Optional[Confirmation]) -> Any:
        return await invoke(pending.get_address)


class ConfirmationFieldStrategy(AddressStrategy):
    name = "confirmation-field"

    def available(self, pending: Any, confirmation: Optional[Confirmation]) -> bool:
        return confirmation is not None and bool(confirmation.address)

    async def run(self, pending: Any, confirmation: Optional[Confirmation]) -> Any:
        return confirmation.address


# Fixed priority order
CONFIRMATION_STRATEGIES: Tuple[ConfirmationStrategy, ...] = (
    DirectAwaitStrategy(),
    LegacyAwaitStrategy(),
    ReceiptWaitStrategy(),
)

ADDRESS_STRATEGIES: Tuple[AddressStrategy, ...] = (
    DirectFieldStrategy(),
    AsyncAccessorStrategy(),
    ConfirmationFieldStrategy(),
)
