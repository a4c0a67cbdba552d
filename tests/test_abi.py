"""
Tests for the ABI value tree, its encoding and display.
"""
import pytest

from safe_hash import abi
from safe_hash.exceptions import DecodingError, EncodingError
from safe_hash.utils import hex_to_bytes

from conftest import USDC_TRANSFER_DATA

RECIPIENT = "0x92d0ebaf7eb707f0650f9471e61348f4656c29bc"


def word(n: int) -> bytes:
    return n.to_bytes(32, "big")


class TestEncode:
    def test_uint_is_left_padded(self):
        assert abi.encode(abi.Uint(1)) == word(1)
        assert abi.encode(abi.Uint(255, 8)) == word(255)

    def test_int_is_twos_complement(self):
        assert abi.encode(abi.Int(-1)) == b"\xff" * 32
        assert abi.encode(abi.Int(-2, 8)) == b"\xff" * 31 + b"\xfe"

    def test_bool(self):
        assert abi.encode(abi.Bool(True)) == word(1)
        assert abi.encode(abi.Bool(False)) == word(0)

    def test_address_is_left_padded(self):
        encoded = abi.encode(abi.Address(RECIPIENT))
        assert encoded == bytes(12) + hex_to_bytes(RECIPIENT)

    def test_fixed_bytes_is_right_padded(self):
        assert abi.encode(abi.FixedBytes(b"\x01\x02", 4)) == b"\x01\x02" + bytes(30)
        assert abi.FixedBytes("0x01", 2).value == b"\x01\x00"

    def test_dynamic_bytes_lone_value_has_offset_head(self):
        encoded = abi.encode(abi.Bytes(b"\x01\x02"))
        assert encoded == word(32) + word(2) + b"\x01\x02" + bytes(30)

    def test_string(self):
        encoded = abi.encode(abi.String("hi"))
        assert encoded == word(32) + word(2) + b"hi" + bytes(30)

    def test_static_tuple_encodes_in_place(self):
        value = abi.Tuple([abi.Uint(1), abi.Bool(True)])
        assert not value.is_dynamic
        assert abi.encode(value) == word(1) + word(1)

    def test_dynamic_array(self):
        value = abi.Array([abi.Uint(7), abi.Uint(8)], "uint256")
        assert value.abi_type == "uint256[]"
        assert abi.encode(value) == word(32) + word(2) + word(7) + word(8)

    def test_empty_array_keeps_item_type(self):
        value = abi.Array([], "address")
        assert abi.encode(value) == word(32) + word(0)

    def test_fixed_array_type(self):
        value = abi.FixedArray([abi.Uint(1), abi.Uint(2)], "uint256")
        assert value.abi_type == "uint256[2]"
        assert not value.is_dynamic
        assert abi.encode(value) == word(1) + word(2)

    def test_encode_params_matches_erc20_transfer(self):
        args = abi.encode_params([abi.Address(RECIPIENT), abi.Uint(25_000_000_000)])
        assert args == hex_to_bytes(USDC_TRANSFER_DATA)[4:]


class TestValidation:
    @pytest.mark.parametrize("value,bits", [(256, 8), (-1, 256), (2 ** 256, 256)])
    def test_uint_out_of_range(self, value, bits):
        with pytest.raises(EncodingError):
            abi.Uint(value, bits)

    @pytest.mark.parametrize("value,bits", [(128, 8), (-129, 8)])
    def test_int_out_of_range(self, value, bits):
        with pytest.raises(EncodingError):
            abi.Int(value, bits)

    @pytest.mark.parametrize("bits", [0, 7, 264])
    def test_invalid_integer_width(self, bits):
        with pytest.raises(EncodingError):
            abi.Uint(0, bits)

    def test_bool_is_not_an_integer(self):
        with pytest.raises(EncodingError):
            abi.Uint(True)

    @pytest.mark.parametrize("size", [0, 33])
    def test_invalid_fixed_bytes_width(self, size):
        with pytest.raises(EncodingError):
            abi.FixedBytes(b"", size)

    def test_fixed_bytes_no_silent_truncation(self):
        with pytest.raises(EncodingError):
            abi.FixedBytes(b"\x00" * 5, 4)

    def test_address_must_be_20_bytes(self):
        with pytest.raises(EncodingError):
            abi.Address("0x1234")

    def test_undecodable_hex(self):
        with pytest.raises(EncodingError):
            abi.Bytes("0xnothex")

    def test_array_items_must_match_item_type(self):
        with pytest.raises(EncodingError):
            abi.Array([abi.Uint(1, 8)], "uint256")


class TestDecode:
    def test_decode_params(self):
        values = abi.decode_params(["address", "uint256"], hex_to_bytes(USDC_TRANSFER_DATA)[4:])
        assert values[0] == abi.Address(RECIPIENT)
        assert values[1] == abi.Uint(25_000_000_000)

    def test_decode_nested(self):
        data = abi.encode_params([
            abi.Tuple([abi.Address(RECIPIENT), abi.Array([abi.Uint(1), abi.Uint(2)], "uint256")]),
            abi.String("memo"),
        ])
        values = abi.decode_params(["(address,uint256[])", "string"], data)
        assert values[0].items[1].items == (abi.Uint(1), abi.Uint(2))
        assert values[1] == abi.String("memo")

    def test_decode_rejects_garbage(self):
        with pytest.raises(DecodingError):
            abi.decode_params(["uint256"], b"\x01\x02")

    def test_decode_rejects_dirty_padding(self):
        with pytest.raises(DecodingError):
            abi.decode("uint8", word(256))

    def test_parse_type_rejects_unknown_types(self):
        with pytest.raises(DecodingError):
            abi.parse_type("uint7")

    def test_parse_type_rejects_empty_tuple(self):
        with pytest.raises(DecodingError):
            abi.parse_type("()")


class TestDisplay:
    @pytest.mark.parametrize("value,expected", [
        (0, "0"),
        (9999, "9999"),
        (10000, "10000 [1e4]"),
        (12314, "12314 [1.231e4]"),
        (25_000_000_000, "25000000000 [2.5e10]"),
    ])
    def test_format_uint_exp(self, value, expected):
        assert abi.format_uint_exp(value) == expected

    def test_format_int_exp_keeps_sign(self):
        assert abi.format_int_exp(-12314) == "-12314 [-1.231e4]"
        assert abi.format_int_exp(-5) == "-5"

    def test_to_exp_notation_without_trimming(self):
        assert abi.to_exp_notation(10000, trim_end_zeros=False) == "1.000e4"

    def test_raw_mode_has_no_decoration(self):
        assert abi.format_value(abi.Uint(12314), raw=True) == "12314"
        assert abi.format_value(abi.String("hi"), raw=True) == "hi"

    def test_pretty_mode(self):
        assert abi.format_value(abi.String("hi")) == '"hi"'
        assert abi.format_value(abi.Bool(True)) == "true"
        assert abi.format_value(abi.Bytes(b"\xab")) == "0xab"
        assert abi.format_value(abi.Address(RECIPIENT)) == abi.Address(RECIPIENT).checksum

    def test_containers(self):
        array = abi.Array([abi.Uint(1), abi.Uint(2)], "uint256")
        assert abi.format_value(array) == "[1, 2]"
        assert abi.format_value(abi.Tuple([abi.Uint(1), abi.Bool(False)])) == "(1, false)"

    def test_struct(self):
        value = abi.Struct([abi.Uint(1), abi.Bool(True)], name="Foo", field_names=["a", "b"])
        assert abi.format_value(value) == "Foo({ a: 1, b: true })"
        assert abi.format_value(value, raw=True) == "(1, true)"

    def test_display_never_changes_encoding(self):
        value = abi.Uint(12314)
        abi.format_value(value)
        assert abi.encode(value) == word(12314)
