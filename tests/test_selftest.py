from pkcs5 import selftest


def test_run_self_test_passes():
    report = selftest.run_self_test()
    failures = {k: v["why"] for k, v in report["tests"].items() if not v["ok"]}
    assert report["all_passed"], failures
    assert set(report["tests"]) == {
        "ripemd160_vector", "whirlpool_vector", "sha256_vectors", "hashlib_parity",
        "truncation", "errors", "close_wipes_salt",
    }
    assert report["prfs"]["HMAC_SHA256"] is True


def test_failing_check_is_reported(monkeypatch):
    def broken():
        raise RuntimeError("nope")

    monkeypatch.setattr(selftest, "_CHECKS", (("broken", broken),))
    report = selftest.run_self_test()
    assert report["all_passed"] is False
    assert "RuntimeError" in report["tests"]["broken"]["why"]


def test_print_report(capsys):
    selftest.print_report({
        "engine": "PBKDF2",
        "prfs": {"HMAC_SHA256": True, "HMAC_WHIRLPOOL": False},
        "all_passed": False,
        "tests": {"a": {"ok": True, "why": ""}, "b": {"ok": False, "why": "bad"}},
    })
    out = capsys.readouterr().out
    assert "HMAC_WHIRLPOOL=n/a" in out
    assert "FAIL  (bad)" in out
