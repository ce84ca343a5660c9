"""Argument coercion tests."""

from __future__ import annotations

import pytest

from conftest import fn
from synthetix_cli.errors import ArgumentMismatchError
from synthetix_cli.oracle.coercion import (
    check_arguments,
    coerce,
    collect_arguments,
    element_type,
    is_array,
    prompt_message,
)
from synthetix_cli.pneuma.abi import FunctionDescriptor, Param, to_bytes32


class TestCoerce:
    def test_bytes32_array_splits_on_commas(self) -> None:
        assert coerce("bytes32[]", "a,b,c") == [to_bytes32("a"), to_bytes32("b"), to_bytes32("c")]

    def test_bytes32_scalar(self) -> None:
        value = coerce("bytes32", "sUSD")
        assert value == b"sUSD" + b"\x00" * 28
        assert len(value) == 32

    def test_empty_array_is_empty_list(self) -> None:
        assert coerce("bytes32[]", "") == []
        assert coerce("uint256[]", "") == []

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("42", 42),
            ("0x10", 16),
            ("  7 ", 7),
            ("-3", -3),
        ],
    )
    def test_integers(self, raw: str, expected: int) -> None:
        assert coerce("uint256", raw) == expected
        assert coerce("int128", raw) == expected

    def test_unparseable_integer_passes_through(self) -> None:
        assert coerce("uint256", "abc") == "abc"

    def test_integer_array(self) -> None:
        assert coerce("uint256[]", "1,2,3") == [1, 2, 3]

    @pytest.mark.parametrize("raw", ["true", "True", "1", "yes"])
    def test_truthy(self, raw: str) -> None:
        assert coerce("bool", raw) is True

    @pytest.mark.parametrize("raw", ["false", "0", "no", ""])
    def test_falsy(self, raw: str) -> None:
        assert coerce("bool", raw) is False

    def test_address_is_checksummed(self) -> None:
        raw = "0x5aaeb6053f3e94c9b9a09f33669435e7ef1beaed"
        assert coerce("address", raw) == "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed"

    def test_address_array(self) -> None:
        raw = "0x5aaeb6053f3e94c9b9a09f33669435e7ef1beaed,0xfb6916095ca1df60bb79ce92ce3ea74c37c5d359"
        assert coerce("address[]", raw) == [
            "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed",
            "0xfB6916095ca1df60bB79Ce92cE3Ea74c37c5d359",
        ]

    def test_dynamic_bytes_from_hex(self) -> None:
        assert coerce("bytes", "0xdeadbeef") == b"\xde\xad\xbe\xef"

    def test_string_kept_verbatim(self) -> None:
        assert coerce("string", " hello, world ") == " hello, world "


class TestTypeHelpers:
    def test_array_detection(self) -> None:
        assert is_array("uint256[]")
        assert not is_array("uint256")
        assert element_type("bytes32[]") == "bytes32"
        assert element_type("address") == "address"


class TestPromptMessage:
    def test_bytes32_hint(self) -> None:
        assert prompt_message(Param("currencyKey", "bytes32")) == "currencyKey (uses toBytes32)"

    def test_bytes32_array_hint(self) -> None:
        assert prompt_message(Param("keys", "bytes32[]")) == (
            "keys (uses toBytes32 - if array, use a,b,c syntax)"
        )

    def test_plain_array_has_no_hint(self) -> None:
        assert prompt_message(Param("rates", "uint256[]")) == "rates"

    def test_unnamed_param_uses_type(self) -> None:
        assert prompt_message(Param("", "address")) == "address"


class TestCollectArguments:
    def test_prompts_in_declared_order(self, capsys) -> None:
        descriptor = FunctionDescriptor.from_abi(
            fn(
                "updateRates",
                [("bytes32[]", "currencyKeys"), ("uint256[]", "newRates"), ("uint256", "timeSent")],
                mutability="nonpayable",
            )
        )
        answers = {"currencyKeys": "sETH,sBTC", "newRates": "1,2", "timeSent": "100"}
        asked: list[str] = []

        def ask(message: str) -> str:
            asked.append(message)
            return answers[message.split(" ")[0]]

        args = collect_arguments(descriptor, ask)

        assert [m.split(" ")[0] for m in asked] == ["currencyKeys", "newRates", "timeSent"]
        assert args == [[to_bytes32("sETH"), to_bytes32("sBTC")], [1, 2], 100]

        out = capsys.readouterr().out
        assert "> raw inputs: sETH,sBTC" in out
        assert "> processed inputs (2):" in out
        assert "> processed inputs (1): 100" in out

    def test_no_inputs_asks_nothing(self) -> None:
        descriptor = FunctionDescriptor.from_abi(fn("owner", [], [("address", "")]))
        assert collect_arguments(descriptor, lambda message: pytest.fail("asked")) == []


class TestCheckArguments:
    descriptor = FunctionDescriptor.from_abi(
        fn("rates", [("bytes32[]", "keys"), ("uint256", "time")])
    )

    def test_valid(self) -> None:
        check_arguments(self.descriptor, [[b"x" * 32], 1])

    def test_length_mismatch(self) -> None:
        with pytest.raises(ArgumentMismatchError, match="expects 2"):
            check_arguments(self.descriptor, [[b"x" * 32]])

    def test_scalar_for_array(self) -> None:
        with pytest.raises(ArgumentMismatchError, match="must be an array"):
            check_arguments(self.descriptor, [b"x" * 32, 1])

    def test_array_for_scalar(self) -> None:
        with pytest.raises(ArgumentMismatchError, match="must be a single value"):
            check_arguments(self.descriptor, [[b"x" * 32], [1]])
