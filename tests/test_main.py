# pylint: disable=missing-module-docstring,redefined-outer-name
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import json

import pytest

from rsacore import __main__ as cli
from rsacore import rsa as rsau


@pytest.fixture
def keypaths(tmp_path):
    return tmp_path / "key.pub", tmp_path / "key"


def run_keygen(keypaths, *extra):
    pub, priv = keypaths
    cli.main(["-n", "keygen", "-p", str(pub), "-P", str(priv), "--keysize", "512", *extra])


def run_encrypt(pub, message, capsys) -> str:
    with pytest.warns(RuntimeWarning, match="Textbook RSA is deterministic"):
        cli.main(["-n", "encrypt", "-p", str(pub), "--message", message])
    return capsys.readouterr().out.strip()


def test_keygen_pem(keypaths, capsys):
    run_keygen(keypaths)
    pub, priv = keypaths
    assert rsau.pem_subtype(pub) == "PKCS1_PUB"
    assert rsau.pem_subtype(priv) == "PKCS8"
    pubkey = rsau.RSAPubKey.import_key(pub)
    assert pubkey.mod.bit_length() == 512
    assert pubkey.expo == 65537
    assert capsys.readouterr().out == ""


def test_keygen_json(keypaths):
    run_keygen(keypaths, "--key-format", "json")
    pub, priv = keypaths
    with open(pub, "r", encoding="ascii") as f:
        assert set(json.load(f)) == {"e", "n"}
    with open(priv, "r", encoding="ascii") as f:
        assert set(json.load(f)) == {"d", "n"}


@pytest.mark.parametrize("key_format", ["pem", "json"])
def test_encrypt_decrypt_roundtrip(keypaths, capsys, key_format):
    run_keygen(keypaths, "--key-format", key_format)
    capsys.readouterr()
    pub, priv = keypaths
    ciphertext = run_encrypt(pub, "Hi there!", capsys)
    assert ciphertext == run_encrypt(pub, "Hi there!", capsys)
    cli.main(["-n", "decrypt", "-P", str(priv), "--message", ciphertext])
    assert capsys.readouterr().out == "Hi there!\n"


def test_encrypt_message_file(keypaths, capsys, tmp_path):
    run_keygen(keypaths)
    capsys.readouterr()
    payload = tmp_path / "payload.txt"
    payload.write_text("From a file.", encoding="utf-8")
    ciphertext = run_encrypt(keypaths[0], f"P:{payload}", capsys)
    cli.main(["-n", "decrypt", "-P", str(keypaths[1]), "--message", ciphertext])
    assert capsys.readouterr().out == "From a file.\n"


def test_keygen_refuses_overwrite(keypaths, capsys):
    run_keygen(keypaths)
    before = keypaths[0].read_text(encoding="ascii")
    run_keygen(keypaths)
    assert "already exists" in capsys.readouterr().out
    assert keypaths[0].read_text(encoding="ascii") == before
    run_keygen(keypaths, "-o")
    assert keypaths[0].read_text(encoding="ascii") != before


def test_encrypt_too_large_exits(keypaths, capsys):
    run_keygen(keypaths)
    with pytest.raises(SystemExit) as exc, pytest.warns(RuntimeWarning):
        cli.main(["-n", "encrypt", "-p", str(keypaths[0]), "--message", "A" * 100])
    assert exc.value.code == 1
    assert "Operation failed" in capsys.readouterr().out


def test_decrypt_out_of_range_exits(keypaths, capsys):
    run_keygen(keypaths)
    too_large = rsau.b64_enc(2**600, 76)
    with pytest.raises(SystemExit) as exc:
        cli.main(["-n", "decrypt", "-P", str(keypaths[1]), "--message", too_large])
    assert exc.value.code == 1
    assert "Operation failed" in capsys.readouterr().out


@pytest.mark.parametrize("pub_exponent", ["4", "1"])
def test_keygen_invalid_exponent_exits(keypaths, capsys, pub_exponent):
    with pytest.raises(SystemExit) as exc:
        run_keygen(keypaths, "--pub-exponent", pub_exponent)
    assert exc.value.code == 1
    assert "Operation failed: Public exponent must be odd" in capsys.readouterr().out
    assert not keypaths[0].exists()


def test_non_interactive_missing_argument():
    with pytest.raises(IOError, match="non-interactive mode"):
        cli.main(["-n", "encrypt", "--message", "Hi"])


def test_interactive_prompts(mocker, keypaths, capsys):
    pub, priv = keypaths
    mocker.patch("builtins.input", side_effect=["keygen", str(pub), str(priv), "512"])
    cli.main([])
    out = capsys.readouterr().out
    assert "Please specify the subcommand!" in out
    assert "Key pair generated!" in out
    assert rsau.RSAPubKey.import_key(pub).mod.bit_length() == 512


def test_input_handler_retries(mocker):
    mocker.patch("builtins.input", side_effect=["abc", "17", "", "Hi"])
    prntr = mocker.Mock()
    assert cli.input_handler("pub_exponent", (False, True), prntr) == 17
    prntr.assert_any_call("We could not convert your value to int.")
    assert cli.input_handler("message", (False, False), prntr) == "Hi"
    prntr.assert_any_call("Please provide a value.")


def test_choice_handler_default(mocker):
    mocker.patch("builtins.input", side_effect=["bogus", ""])
    prntr = mocker.Mock()
    assert cli.choice_handler("keysize", (False, False), prntr) == "2048"
    prntr.assert_any_call("Please select an option from the list.")


def test_checkmodes_advanced_defaults():
    assert cli.checkmodes("encoding", (False, False)) == "utf-8"
    assert isinstance(cli.checkmodes("encoding", (False, True)), cli.HelpData)
    assert cli.checkmodes("keysize", (True, False)) == "2048"
