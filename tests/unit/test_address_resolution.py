"""Unit tests for contract address resolution."""

import asyncio
from types import SimpleNamespace

import pytest

from chain_deployer.exceptions import AddressUnresolvedError
from chain_deployer.orchestrator import Deployer
from chain_deployer.types import Confirmation, ConfirmationStatus, is_address

TX_HASH = "0x" + "ef" * 32
DIRECT_ADDRESS = "0x5FbDB2315678afecb367f032d93F642f64180aa3"
ACCESSOR_ADDRESS = "0xABC" + "0" * 37
RECEIPT_ADDRESS = "0xe7f1725E7734CE288F8367e1Bb143E90bb3F0512"


def confirmed(address=None):
    return Confirmation(status=ConfirmationStatus.CONFIRMED, block=1, address=address)


class TestIsAddress:
    @pytest.mark.parametrize("value", [DIRECT_ADDRESS, ACCESSOR_ADDRESS, "0x" + "f" * 40])
    def test_well_formed(self, value):
        assert is_address(value)

    @pytest.mark.parametrize(
        "value",
        [
            None,
            "",
            "0x",
            "0xABC",
            "5FbDB2315678afecb367f032d93F642f64180aa3",
            42,
            DIRECT_ADDRESS + "\n",
            " " + DIRECT_ADDRESS,
            DIRECT_ADDRESS + "00",
        ],
    )
    def test_malformed(self, value):
        assert not is_address(value)


class TestResolveAddress:
    """Test Deployer.resolve_address strategy order."""

    @pytest.mark.asyncio
    async def test_direct_field_wins_without_calling_accessor(self, capability, calls):
        pending = SimpleNamespace(
            address=DIRECT_ADDRESS,
            get_address=capability("get_address", result=ACCESSOR_ADDRESS),
        )

        address = await Deployer(client=None).resolve_address(pending, confirmed(RECEIPT_ADDRESS))

        assert address == DIRECT_ADDRESS
        assert calls == []

    @pytest.mark.asyncio
    async def test_accessor_used_when_no_direct_address(self, capability, calls):
        pending = SimpleNamespace(address=None, get_address=capability("get_address", result=ACCESSOR_ADDRESS))

        address = await Deployer(client=None).resolve_address(pending, confirmed(RECEIPT_ADDRESS))

        assert address == ACCESSOR_ADDRESS
        assert calls == ["get_address"]

    @pytest.mark.asyncio
    async def test_empty_direct_address_is_skipped(self, capability):
        pending = SimpleNamespace(address="", get_address=capability("get_address", result=ACCESSOR_ADDRESS))

        address = await Deployer(client=None).resolve_address(pending, None)

        assert address == ACCESSOR_ADDRESS

    @pytest.mark.asyncio
    async def test_malformed_direct_address_is_skipped(self, capability):
        pending = SimpleNamespace(
            address="pending", get_address=capability("get_address", result=ACCESSOR_ADDRESS)
        )

        address = await Deployer(client=None).resolve_address(pending, None)

        assert address == ACCESSOR_ADDRESS

    @pytest.mark.asyncio
    async def test_newline_suffixed_direct_address_is_skipped(self, capability, calls):
        pending = SimpleNamespace(
            address=DIRECT_ADDRESS + "\n",
            get_address=capability("get_address", result=ACCESSOR_ADDRESS),
        )

        address = await Deployer(client=None).resolve_address(pending, None)

        assert address == ACCESSOR_ADDRESS
        assert calls == ["get_address"]

    @pytest.mark.asyncio
    async def test_newline_suffixed_values_never_resolve(self, capability):
        pending = SimpleNamespace(
            address=DIRECT_ADDRESS + "\n",
            get_address=capability("get_address", result=ACCESSOR_ADDRESS + "\n"),
        )

        with pytest.raises(AddressUnresolvedError):
            await Deployer(client=None).resolve_address(pending, confirmed(RECEIPT_ADDRESS + "\n"))

    @pytest.mark.asyncio
    async def test_self_cancelling_accessor_demotes(self, capability):
        pending = SimpleNamespace(
            get_address=capability("get_address", error=asyncio.CancelledError())
        )

        address = await Deployer(client=None).resolve_address(pending, confirmed(RECEIPT_ADDRESS))

        assert address == RECEIPT_ADDRESS

    @pytest.mark.asyncio
    async def test_confirmation_field_is_last_resort(self, capability, calls):
        pending = SimpleNamespace(get_address=capability("get_address", error=RuntimeError("no runner")))

        address = await Deployer(client=None).resolve_address(pending, confirmed(RECEIPT_ADDRESS))

        assert address == RECEIPT_ADDRESS
        assert calls == ["get_address"]

    @pytest.mark.asyncio
    async def test_confirmation_field_only(self):
        address = await Deployer(client=None).resolve_address(
            SimpleNamespace(transaction_hash=TX_HASH), confirmed(RECEIPT_ADDRESS)
        )

        assert address == RECEIPT_ADDRESS

    @pytest.mark.asyncio
    async def test_hanging_accessor_times_out(self, capability):
        pending = SimpleNamespace(get_address=capability("get_address", result=ACCESSOR_ADDRESS, delay=5.0))

        address = await Deployer(client=None, address_timeout=0.05).resolve_address(
            pending, confirmed(RECEIPT_ADDRESS)
        )

        assert address == RECEIPT_ADDRESS

    @pytest.mark.asyncio
    async def test_callable_address_attribute_is_not_a_field(self, capability):
        pending = SimpleNamespace(address=capability("address", result=DIRECT_ADDRESS))

        with pytest.raises(AddressUnresolvedError):
            await Deployer(client=None).resolve_address(pending, None)

    @pytest.mark.asyncio
    async def test_nothing_resolves(self, capability):
        pending = SimpleNamespace(
            transaction_hash=TX_HASH,
            address=None,
            get_address=capability("get_address", error=RuntimeError("boom")),
        )
        unconfirmed = Confirmation(status=ConfirmationStatus.UNCONFIRMED)

        with pytest.raises(AddressUnresolvedError, match=TX_HASH):
            await Deployer(client=None).resolve_address(pending, unconfirmed)

    @pytest.mark.asyncio
    async def test_resolution_is_idempotent(self, capability, calls):
        pending = SimpleNamespace(get_address=capability("get_address", result=ACCESSOR_ADDRESS))
        deployer = Deployer(client=None)

        first = await deployer.resolve_address(pending, None)
        second = await deployer.resolve_address(pending, None)

        assert first == second == ACCESSOR_ADDRESS
        assert calls == ["get_address", "get_address"]
