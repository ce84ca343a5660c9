"""ABI descriptor, codec and value conversion tests."""

from __future__ import annotations

import pytest
from eth_abi import encode

from conftest import EXCHANGE_RATES_ABI, fn, return_data
from synthetix_cli.pneuma.abi import (
    EventDescriptor,
    FunctionDescriptor,
    decode_log,
    decode_result,
    encode_call,
    events,
    find_function,
    format_ether,
    from_bytes32,
    name_outputs,
    parse_gwei,
    to_bytes32,
    to_checksum_address,
)


class TestFormatEther:
    @pytest.mark.parametrize(
        "wei, expected",
        [
            (0, "0.0"),
            (123, "0.000000000000000123"),
            (10**18, "1.0"),
            (1_500_000_000_000_000_000, "1.5"),
            (-(10**17), "-0.1"),
        ],
    )
    def test_format(self, wei: int, expected: str) -> None:
        assert format_ether(wei) == expected


class TestBytes32:
    def test_right_padded(self) -> None:
        assert to_bytes32("SNX") == b"SNX" + b"\x00" * 29

    def test_strip_padding(self) -> None:
        assert from_bytes32(to_bytes32("sUSD")) == "sUSD"

    def test_overlong_left_for_encoder(self) -> None:
        assert len(to_bytes32("x" * 40)) == 40


class TestParseGwei:
    def test_whole_and_fractional(self) -> None:
        assert parse_gwei(1) == 1_000_000_000
        assert parse_gwei(1.5) == 1_500_000_000
        assert parse_gwei(0.1) == 100_000_000


class TestChecksum:
    def test_known_vector(self) -> None:
        assert (
            to_checksum_address("0x5aaeb6053f3e94c9b9a09f33669435e7ef1beaed")
            == "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed"
        )


class TestFunctionDescriptor:
    def test_selector(self) -> None:
        transfer = FunctionDescriptor.from_abi(
            fn("transfer", [("address", "to"), ("uint256", "value")], [("bool", "")], mutability="nonpayable")
        )
        assert transfer.signature == "transfer(address,uint256)"
        assert transfer.selector.hex() == "a9059cbb"
        assert not transfer.is_view

    def test_legacy_constant_flag(self) -> None:
        entry = {"type": "function", "name": "owner", "constant": True, "inputs": [], "outputs": []}
        assert FunctionDescriptor.from_abi(entry).state_mutability == "view"

        entry = {"type": "function", "name": "nominate", "constant": False, "inputs": [], "outputs": []}
        assert FunctionDescriptor.from_abi(entry).state_mutability == "nonpayable"

    def test_pure_is_view(self) -> None:
        assert FunctionDescriptor.from_abi(fn("decimals", mutability="pure")).is_view

    def test_tuple_params_expanded(self) -> None:
        entry = fn("setPair", [("tuple", "pair")], mutability="nonpayable")
        entry["inputs"][0]["components"] = [
            {"type": "address", "name": "a"},
            {"type": "uint256", "name": "b"},
        ]
        assert FunctionDescriptor.from_abi(entry).signature == "setPair((address,uint256))"

    def test_find_function(self) -> None:
        assert find_function(EXCHANGE_RATES_ABI, "owner").name == "owner"
        with pytest.raises(ValueError, match="not found"):
            find_function(EXCHANGE_RATES_ABI, "missing")


class TestCodec:
    rates = find_function(EXCHANGE_RATES_ABI, "rateAndUpdatedTime")
    rate = find_function(EXCHANGE_RATES_ABI, "rateForCurrency")

    def test_encode_call(self) -> None:
        data = encode_call(self.rate, [to_bytes32("sUSD")])
        assert data.startswith("0x" + self.rate.selector.hex())
        assert data[10:] == encode(["bytes32"], [to_bytes32("sUSD")]).hex()

    def test_single_output_is_bare(self) -> None:
        assert decode_result(self.rate, return_data(["uint256"], [5])) == 5

    def test_multiple_outputs_in_order(self) -> None:
        assert decode_result(self.rates, return_data(["uint256", "uint256"], [5, 6])) == (5, 6)

    def test_empty_return_data(self) -> None:
        with pytest.raises(ValueError, match="returned no data"):
            decode_result(self.rate, "0x")

    def test_no_outputs(self) -> None:
        assert decode_result(FunctionDescriptor.from_abi(fn("poke")), "0x") is None

    def test_name_outputs(self) -> None:
        assert name_outputs(self.rates, (5, 6)) == {"rate": 5, "time": 6}
        assert name_outputs(self.rate, 5) == {"0": 5}


class TestDecodeLog:
    transfer = EventDescriptor.from_abi(
        {
            "type": "event",
            "name": "Transfer",
            "inputs": [
                {"type": "address", "name": "from", "indexed": True},
                {"type": "address", "name": "to", "indexed": True},
                {"type": "uint256", "name": "value", "indexed": False},
            ],
        }
    )

    def _topic(self, address: str) -> str:
        return "0x" + encode(["address"], [address]).hex()

    def test_transfer_topic(self) -> None:
        assert self.transfer.topic == (
            "0xddf252ad1be2c89b69c2b068fc378daa952ba7f163c4a11628f55a4df523b3ef"
        )

    def test_decodes_indexed_and_data(self) -> None:
        sender = "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed"
        receiver = "0xfB6916095ca1df60bB79Ce92cE3Ea74c37c5d359"
        log = {
            "topics": [self.transfer.topic, self._topic(sender), self._topic(receiver)],
            "data": return_data(["uint256"], [10**18]),
        }
        name, values = decode_log([self.transfer], log)
        assert name == "Transfer"
        assert values["from"].lower() == sender.lower()
        assert values["to"].lower() == receiver.lower()
        assert values["value"] == 10**18
        assert list(values) == ["from", "to", "value"]

    def test_unknown_topic(self) -> None:
        assert decode_log([self.transfer], {"topics": ["0x" + "00" * 32], "data": "0x"}) is None

    def test_no_topics(self) -> None:
        assert decode_log([self.transfer], {"topics": [], "data": "0x"}) is None

    def test_events_from_abi(self) -> None:
        assert [e.name for e in events(EXCHANGE_RATES_ABI)] == ["RatesUpdated"]
