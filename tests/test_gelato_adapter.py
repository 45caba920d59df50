"""
Gelato Adapter Test Suite

Tests for the Gelato relay adapter and its HTTP client. The Gelato API is
served by an ``httpx.MockTransport`` handler; the forwarder wrapping step
is patched where the test is about the HTTP exchange.

Usage:
    pytest tests/test_gelato_adapter.py -v
"""

import json
import os
import pytest
from unittest.mock import AsyncMock, Mock, patch

import httpx
from eth_account import Account
from eth_account.messages import encode_typed_data
from web3 import AsyncWeb3

from test_mocks import (
    MOCK_PRIVATE_KEY,
    MOCK_SIGNER_ADDRESS,
    MOCK_TARGET_ADDRESS,
    MOCK_FORWARDER_ADDRESS,
    MOCK_CALL_DATA,
    MOCK_CHAIN_ID_POLYGON,
    MOCK_TX_HASH,
    create_forwarder_config,
)

from eth_relay.adapters.gelato import GelatoConfig, GelatoRelayClient, GelatoRelayer
from eth_relay.adapters.gelato.constants import (
    GELATO_RELAY_ERC2771_ADDRESS,
    network_group,
)
from eth_relay.engine.exceptions import (
    ConfigurationError,
    PreconditionError,
    RelayProviderError,
    UnsupportedOperationError,
)
from eth_relay.metatx.signers import LocalSigner
from eth_relay.metatx.standards import SPONSORED_CALL_ERC2771_TYPES
from eth_relay.schemas.bases import RelayState


# ========================================================================
# Test Helpers
# ========================================================================

class GelatoApiStub:
    """
    Scripted Gelato API.

    ``routes`` maps ``"METHOD /path"`` to an ``httpx.Response``; every request
    is recorded in ``requests``.
    """

    def __init__(self, routes):
        self.routes = routes
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = f"{request.method} {request.url.path}"
        if key not in self.routes:
            return httpx.Response(500, json={"message": f"unexpected {key}"})
        return self.routes[key]

    def client(self) -> GelatoRelayClient:
        return GelatoRelayClient(transport=httpx.MockTransport(self))


def create_relayer(stub, forwarder=None, chain_id=MOCK_CHAIN_ID_POLYGON, w3=None):
    signer = LocalSigner(MOCK_PRIVATE_KEY, w3=w3 or Mock())
    return GelatoRelayer(signer, chain_id, "sponsor-key", forwarder, stub.client())


# ========================================================================
# Test Classes
# ========================================================================

class TestGelatoConfig:
    """Test configuration loading."""

    def test_from_env(self):
        env = {
            "GELATO_API_KEY": "key-from-env",
            "RELAY_FORWARDER_ADDRESS": MOCK_FORWARDER_ADDRESS,
            "RELAY_FORWARDER_NAME": "F",
            "RELAY_FORWARDER_VERSION": "1",
        }
        with patch.dict(os.environ, env, clear=True):
            config = GelatoConfig.from_env()

        assert config.api_key == "key-from-env"
        assert config.forwarder.address == MOCK_FORWARDER_ADDRESS
        assert config.forwarder.eip712_domain.name == "F"
        assert config.api_url == "https://api.gelato.digital"

    def test_from_env_without_forwarder(self):
        with patch.dict(os.environ, {"GELATO_API_KEY": "k"}, clear=True):
            assert GelatoConfig.from_env().forwarder is None

    def test_from_env_missing_key(self):
        with patch.dict(os.environ, {}, clear=True):
            with pytest.raises(ConfigurationError, match="GELATO_API_KEY"):
                GelatoConfig.from_env()

    def test_incomplete_forwarder_env(self):
        env = {"GELATO_API_KEY": "k", "RELAY_FORWARDER_ADDRESS": MOCK_FORWARDER_ADDRESS}
        with patch.dict(os.environ, env, clear=True):
            with pytest.raises(ConfigurationError):
                GelatoConfig.from_env()


class TestGelatoSend:
    """Test submitting transactions to Gelato."""

    @pytest.mark.asyncio
    async def test_missing_data_fails_without_request(self):
        stub = GelatoApiStub({})
        relayer = create_relayer(stub, forwarder=create_forwarder_config())

        with pytest.raises(PreconditionError, match="Gelato requires a data field and to address"):
            await relayer.send({"to": MOCK_TARGET_ADDRESS})
        assert stub.requests == []

    @pytest.mark.asyncio
    async def test_forwarder_route_uses_sponsored_call(self):
        """With a forwarder the execute call is sponsored, targeting the forwarder."""
        stub = GelatoApiStub({
            "POST /relays/v2/sponsored-call": httpx.Response(201, json={"taskId": "0xtask"}),
        })
        relayer = create_relayer(stub, forwarder=create_forwarder_config())
        forwarded = AsyncMock(return_value={"to": MOCK_FORWARDER_ADDRESS, "data": "0x47153f82abcd"})

        with patch("eth_relay.adapters.gelato.adapter.create_forwarded_transaction", forwarded):
            response = await relayer.send({"to": MOCK_TARGET_ADDRESS, "data": MOCK_CALL_DATA})

        assert response.task_id == "0xtask"
        assert len(stub.requests) == 1
        body = json.loads(stub.requests[0].content)
        assert body == {
            "chainId": "137",
            "target": MOCK_FORWARDER_ADDRESS,
            "data": "0x47153f82abcd",
            "sponsorApiKey": "sponsor-key",
        }
        forwarded.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_erc2771_route_signs_user_struct(self):
        """Without a forwarder the user signs a SponsoredCallERC2771 struct."""
        stub = GelatoApiStub({
            "POST /relays/v2/sponsored-call-erc2771": httpx.Response(201, json={"taskId": "0xtask"}),
        })
        relay_contract = Mock()
        relay_contract.address = AsyncWeb3.to_checksum_address(GELATO_RELAY_ERC2771_ADDRESS)
        relay_contract.functions.userNonce.return_value.call = AsyncMock(return_value=7)
        w3 = Mock()
        w3.eth.contract = Mock(return_value=relay_contract)
        relayer = create_relayer(stub, w3=w3)

        response = await relayer.send({"to": MOCK_TARGET_ADDRESS, "data": MOCK_CALL_DATA})

        assert response.task_id == "0xtask"
        body = json.loads(stub.requests[0].content)
        assert body["chainId"] == "137"
        assert body["target"] == MOCK_TARGET_ADDRESS
        assert body["data"] == MOCK_CALL_DATA
        assert body["user"] == MOCK_SIGNER_ADDRESS
        assert body["userNonce"] == 7
        assert body["sponsorApiKey"] == "sponsor-key"

        message = {k: body[k] for k in ("target", "user", "userNonce", "userDeadline")}
        message.update(chainId=137, data=bytes.fromhex(MOCK_CALL_DATA[2:]))
        signable = encode_typed_data(
            domain_data={
                "name": "GelatoRelay1BalanceERC2771",
                "version": "1",
                "chainId": 137,
                "verifyingContract": relay_contract.address,
            },
            message_types=SPONSORED_CALL_ERC2771_TYPES,
            message_data=message,
        )
        assert Account.recover_message(signable, signature=body["userSignature"]) == MOCK_SIGNER_ADDRESS

    @pytest.mark.asyncio
    async def test_missing_task_id(self):
        stub = GelatoApiStub({
            "POST /relays/v2/sponsored-call": httpx.Response(201, json={}),
        })
        relayer = create_relayer(stub, forwarder=create_forwarder_config())
        forwarded = AsyncMock(return_value={"to": MOCK_FORWARDER_ADDRESS, "data": "0x01"})

        with patch("eth_relay.adapters.gelato.adapter.create_forwarded_transaction", forwarded):
            with pytest.raises(RelayProviderError):
                await relayer.send({"to": MOCK_TARGET_ADDRESS, "data": MOCK_CALL_DATA})

    @pytest.mark.asyncio
    async def test_http_error_propagates(self):
        stub = GelatoApiStub({
            "POST /relays/v2/sponsored-call": httpx.Response(401, json={"message": "Unauthorized"}),
        })
        relayer = create_relayer(stub, forwarder=create_forwarder_config())
        forwarded = AsyncMock(return_value={"to": MOCK_FORWARDER_ADDRESS, "data": "0x01"})

        with patch("eth_relay.adapters.gelato.adapter.create_forwarded_transaction", forwarded):
            with pytest.raises(httpx.HTTPStatusError):
                await relayer.send({"to": MOCK_TARGET_ADDRESS, "data": MOCK_CALL_DATA})


class TestGelatoLookup:
    """Test mapping Gelato task states onto relay statuses."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("task_state, expected", [
        ("CheckPending", RelayState.PENDING),
        ("ExecPending", RelayState.PENDING),
        ("WaitingForConfirmation", RelayState.PENDING),
        ("ExecSuccess", RelayState.COMPLETE),
        ("ExecReverted", RelayState.ERRORED),
        ("Cancelled", RelayState.ERRORED),
        ("Blacklisted", RelayState.ERRORED),
        ("NotFound", RelayState.ERRORED),
    ])
    async def test_task_state_mapping(self, task_state, expected):
        stub = GelatoApiStub({
            "GET /tasks/status/0xtask": httpx.Response(200, json={
                "task": {"taskState": task_state, "transactionHash": MOCK_TX_HASH, "blockNumber": 42},
            }),
        })
        status = await create_relayer(stub).lookup("0xtask")

        assert status.state == expected
        assert status.task_state == task_state
        assert status.transaction_hash == MOCK_TX_HASH
        assert status.block_number == 42

    @pytest.mark.asyncio
    async def test_unindexed_task_is_pending(self):
        """Gelato answers 404 for a task it has not indexed yet."""
        stub = GelatoApiStub({
            "GET /tasks/status/0xnew": httpx.Response(404, json={"message": "Status not found"}),
        })
        status = await create_relayer(stub).lookup("0xnew")
        assert status.state == RelayState.PENDING

    @pytest.mark.asyncio
    async def test_empty_task_is_error(self):
        stub = GelatoApiStub({
            "GET /tasks/status/0xtask": httpx.Response(200, json={}),
        })
        status = await create_relayer(stub).lookup("0xtask")
        assert status.is_error

    @pytest.mark.asyncio
    async def test_server_error_propagates(self):
        stub = GelatoApiStub({
            "GET /tasks/status/0xtask": httpx.Response(503, text="unavailable"),
        })
        with pytest.raises(httpx.HTTPStatusError):
            await create_relayer(stub).lookup("0xtask")


class TestGelatoAccount:
    """Test chain support and 1Balance queries."""

    @pytest.mark.asyncio
    async def test_supports_chain(self):
        stub = GelatoApiStub({
            "GET /relays/v2": httpx.Response(200, json={"relays": ["1", "137", "10"]}),
        })
        relayer = create_relayer(stub)
        assert await relayer.supports_chain(137) is True
        assert await relayer.supports_chain(5) is False

    @pytest.mark.asyncio
    async def test_get_balance(self):
        stub = GelatoApiStub({
            f"GET /1balance/networks/mainnets/sponsors/{MOCK_SIGNER_ADDRESS}": httpx.Response(
                200, json={"sponsor": {"remainingBalance": "1500000"}},
            ),
        })
        assert await create_relayer(stub).get_balance() == 1_500_000

    @pytest.mark.asyncio
    async def test_get_balance_null_response(self):
        stub = GelatoApiStub({
            f"GET /1balance/networks/testnets/sponsors/{MOCK_SIGNER_ADDRESS}": httpx.Response(
                200, json={"sponsor": None},
            ),
        })
        relayer = create_relayer(stub, chain_id=80001)
        with pytest.raises(RelayProviderError, match="getSponsorBalance"):
            await relayer.get_balance()

    @pytest.mark.asyncio
    async def test_fund_unsupported(self):
        stub = GelatoApiStub({})
        with pytest.raises(UnsupportedOperationError, match="not supported"):
            await create_relayer(stub).fund(10)
        assert stub.requests == []

    def test_network_group(self):
        assert network_group(1) == "mainnets"
        assert network_group(137) == "mainnets"
        assert network_group(80001) == "testnets"

    @pytest.mark.asyncio
    async def test_builder(self):
        build = GelatoRelayer.builder(GelatoConfig(api_key="k"))
        relayer = await build(137, LocalSigner(MOCK_PRIVATE_KEY))
        try:
            assert isinstance(relayer, GelatoRelayer)
            assert relayer.chain_id == 137
            assert relayer.network_group == "mainnets"
        finally:
            await relayer.aclose()
