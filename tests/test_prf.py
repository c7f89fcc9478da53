import hashlib
import hmac

import pytest

from pkcs5 import PRF, HmacPRF, PRFProviderFailure, UnsupportedPRF, digest_available


@pytest.mark.parametrize("choice,expected", [
    (PRF.HMAC_SHA256, PRF.HMAC_SHA256),
    ("HMAC_RIPEMD160", PRF.HMAC_RIPEMD160),
    ("ripemd160", PRF.HMAC_RIPEMD160),
    ("Hmac-Whirlpool", PRF.HMAC_WHIRLPOOL),
    ("SHA256", PRF.HMAC_SHA256),
])
def test_resolve(choice, expected):
    assert PRF.resolve(choice) is expected


@pytest.mark.parametrize("choice", ["sha1", "md5", "", 256, object()])
def test_resolve_rejects_unknown(choice):
    with pytest.raises(UnsupportedPRF):
        PRF.resolve(choice)


def test_algorithm_names():
    assert [p.algorithm_name for p in PRF] == [
        "SHA-256/HMAC", "SHA-512/HMAC", "RIPEMD160/HMAC", "Whirlpool/HMAC",
    ]


def test_streaming_and_one_shot_agree_with_hmac():
    prf = HmacPRF(PRF.HMAC_SHA256)
    assert prf.output_size == 32
    prf.init(b"key")
    prf.update(b"hello ")
    prf.update(b"world")
    first = prf.finalize()
    want = hmac.new(b"key", b"hello world", hashlib.sha256).digest()
    assert first == want
    # finalize() leaves the provider keyed and reset
    prf.update(b"hello world")
    assert prf.finalize() == want
    assert prf.compute(b"hello world") == want


def test_reset_discards_pending_input():
    prf = HmacPRF(PRF.HMAC_SHA512)
    prf.init(b"k")
    prf.update(b"junk")
    prf.reset()
    prf.update(b"msg")
    assert prf.finalize() == hmac.new(b"k", b"msg", hashlib.sha512).digest()


def test_use_before_init_and_after_clear():
    prf = HmacPRF(PRF.HMAC_SHA256)
    with pytest.raises(PRFProviderFailure):
        prf.compute(b"x")
    prf.init(b"k")
    prf.clear()
    with pytest.raises(PRFProviderFailure):
        prf.update(b"x")


def test_bad_key_type_is_provider_failure():
    prf = HmacPRF(PRF.HMAC_SHA256)
    with pytest.raises(PRFProviderFailure):
        prf.init("text key")


def test_digest_available():
    assert digest_available("sha256")
    assert not digest_available("no-such-digest")


@pytest.mark.skipif(not digest_available("ripemd160"), reason="ripemd160 not available")
def test_ripemd160_output_size():
    assert HmacPRF(PRF.HMAC_RIPEMD160).output_size == 20


def test_whirlpool_is_built_on_the_whirlpool_package():
    import whirlpool

    assert digest_available("whirlpool")
    prf = HmacPRF(PRF.HMAC_WHIRLPOOL)
    assert prf.output_size == 64
    assert PRF.HMAC_WHIRLPOOL.digestmod is whirlpool.new
    prf.init(b"key")
    assert prf.compute(b"msg") == hmac.new(b"key", b"msg", whirlpool.new).digest()
