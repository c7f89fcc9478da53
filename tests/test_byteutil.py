import pytest

from pkcs5 import byteutil as bu


def test_store_int32_be():
    buf = bytearray(8)
    bu.store_int32_be(1, buf, 4)
    assert buf == bytearray(b"\x00\x00\x00\x00\x00\x00\x00\x01")
    bu.store_int32_be(0x01020304, buf, 0)
    assert buf[:4] == b"\x01\x02\x03\x04"
    bu.store_int32_be(2**32 - 1, buf, 2)
    assert buf[2:6] == b"\xff\xff\xff\xff"


def test_store_int32_be_masks_to_32_bits():
    buf = bytearray(4)
    bu.store_int32_be(-1, buf, 0)
    assert buf == b"\xff\xff\xff\xff"
    bu.store_int32_be(2**32 + 5, buf, 0)
    assert buf == b"\x00\x00\x00\x05"


def test_little_endian_stores():
    buf = bytearray(8)
    bu.store_int32_le(0x01020304, buf, 0)
    assert buf[:4] == b"\x04\x03\x02\x01"
    bu.store_int64_le(0x0102030405060708, buf, 0)
    assert buf == b"\x08\x07\x06\x05\x04\x03\x02\x01"


def test_loads_are_signed():
    assert bu.load_int16_be(b"\x80\x00", 0) == -32768
    assert bu.load_int16_be(b"\x01\x02", 0) == 0x0102
    assert bu.load_int32_be(b"\xff\xff\xff\xff", 0) == -1
    assert bu.load_int32_be(b"\x00\x01\x02\x03\x04", 1) == 0x01020304
    assert bu.load_int32_le(b"\x04\x03\x02\x01", 0) == 0x01020304
    assert bu.load_int64_be(b"\x00" * 7 + b"\x2a", 0) == 42
    assert bu.load_int64_le(b"\x2a" + b"\x00" * 7, 0) == 42
    assert bu.load_int64_le(b"\xff" * 8, 0) == -1


def test_hex_helpers():
    assert bu.bytes_to_hex(b"\x00\x0f\xab") == "000fab"
    assert bu.bytes_to_hex(None) is None
    assert bu.hex_to_bytes("000FaB") == b"\x00\x0f\xab"
    assert bu.hex_to_bytes("abc") == b"\xab"
    assert bu.hex_to_bytes("a") is None
    assert bu.hex_to_bytes(None) is None
    with pytest.raises(ValueError):
        bu.hex_to_bytes("zz")


@pytest.mark.parametrize("count,text", [
    (0, "0 B"),
    (1023, "1023 B"),
    (1024, "1.0 KB"),
    (1536, "1.5 KB"),
    (1024 ** 2, "1.0 MB"),
    (1024 ** 3 * 5, "5.0 GB"),
    (1024 ** 6, "1.0 EB"),
])
def test_human_readable_byte_count(count, text):
    assert bu.human_readable_byte_count(count) == text


def test_arrays_are_equal():
    assert bu.arrays_are_equal(b"abc", bytearray(b"abc"))
    assert not bu.arrays_are_equal(b"abc", b"abd")
    assert not bu.arrays_are_equal(b"abc", b"ab")
    assert bu.arrays_are_equal(b"", b"")


def test_wipe_and_wiped():
    a = bytearray(b"secret")
    b = bytearray(b"other")
    with pytest.raises(KeyError):
        with bu.wiped(a, b):
            assert a == b"secret"
            raise KeyError("x")
    assert a == bytearray(6)
    assert b == bytearray(5)
    c = bytearray(b"xyz")
    bu.wipe(c)
    assert c == bytearray(3)


@pytest.mark.parametrize("text", ["12 34 56", "12\n34", " 1234", "+f00"])
def test_hex_to_bytes_rejects_non_hex_characters(text):
    with pytest.raises(ValueError):
        bu.hex_to_bytes(text)


def test_hex_to_bytes_ignores_only_the_trailing_odd_character():
    assert bu.hex_to_bytes("1234 ") == b"\x12\x34"
