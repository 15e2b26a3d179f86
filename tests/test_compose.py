import random

import pytest

from cipher_suite.base import DECODE_FAILED, ENCODE_FAILED, UNRESOLVED, UnknownEncoderError
from cipher_suite.compose import ShuffleEncoder
from cipher_suite.settings import ParameterBag
from cipher_suite.watermark import WatermarkEngine


def test_chain_reversibility(chain):
    assert chain.is_chain_reversible(["caesar", "base64"])
    assert not chain.is_chain_reversible(["caesar", "zalgo"])


def test_chain_round_trip(chain):
    links = [("caesar", 3), "base64"]
    encoded = chain.encode("Secret123", links)
    assert encoded.ok
    assert [step.encoder_id for step in encoded.steps] == ["caesar", "base64"]
    assert encoded.steps[0].result == "Vhfuhw123"

    decoded = chain.decode(encoded.final_result, links)
    assert decoded.ok
    assert decoded.final_result == "Secret123"
    assert [step.encoder_id for step in decoded.steps] == ["base64", "caesar"]


def test_chain_links_as_dicts(chain):
    links = [{"id": "vigenere", "param": "LEMON"}, {"id": "reverse"}]
    assert chain.encode("attack", links).final_result == "vpofxl"


def test_chain_parameter_precedence(chain):
    bag = ParameterBag({"caesar": 7, "vigenere": "LEMON"})
    assert chain.encode("abc", [("caesar", 1)], caesar_shift=5, params=bag).final_result == "bcd"
    assert chain.encode("abc", ["caesar"], caesar_shift=1, params=bag).final_result == "bcd"
    assert chain.encode("abc", ["rot-n"], caesar_shift=2).final_result == "cde"
    assert chain.encode("attack", ["vigenere"], params=bag).final_result == "lxfopv"
    assert chain.encode("attack", ["vigenere"], params={"vigenere": "LEMON"}).final_result == "lxfopv"


def test_chain_sub_path_parameters(chain, registry):
    params = {"adfgvx.key1": "NACHTBOMMENWERPER", "adfgvx.key2": "CARGO"}
    expected = registry.get("adfgvx").encode("attack", ("NACHTBOMMENWERPER", "CARGO"))
    assert chain.encode("attack", ["adfgvx"], params=params).final_result == expected


def test_chain_decode_stops_at_one_way_member(chain):
    links = ["zalgo", "base64"]
    encoded = chain.encode("hi", links).final_result
    decoded = chain.decode(encoded, links)
    assert not decoded.ok
    assert decoded.failed_step == 0
    assert decoded.final_result.startswith("h")
    assert not decoded.steps[0].error
    assert decoded.steps[1].error


def test_chain_decode_failure_keeps_partial_result(chain):
    decoded = chain.decode("!!!", ["reverse", "base64"])
    assert decoded.failed_step == 1
    assert decoded.final_result == "!!!"
    assert decoded.steps[0].result == DECODE_FAILED


def test_chain_unknown_encoder(chain):
    with pytest.raises(UnknownEncoderError):
        chain.encode("x", ["caesar", "does-not-exist"])


def test_empty_chain_is_identity(chain):
    assert chain.encode("same", []).final_result == "same"
    assert chain.decode("same", []).final_result == "same"


def make_shuffle(registry, seed=7):
    shuffle = ShuffleEncoder(rng=random.Random(seed))
    shuffle.registry = registry
    return shuffle


@pytest.mark.parametrize("seed", [1, 7, 42])
def test_shuffle_round_trip(registry, seed):
    shuffle = make_shuffle(registry, seed)
    text = "Hello, World! ✓ 123"
    assert shuffle.decode(shuffle.encode(text)) == text


def test_shuffle_is_deterministic_for_a_seed(registry):
    assert make_shuffle(registry, 3).encode("abc") == make_shuffle(registry, 3).encode("abc")


def test_shuffle_one_way_palette_falls_back_to_literals(registry):
    shuffle = make_shuffle(registry)
    encoded = shuffle.encode("abc", ["zalgo", "upside-down"])
    assert shuffle.decode(encoded) == "abc"


def test_shuffle_palette_from_string(registry):
    shuffle = make_shuffle(registry)
    encoded = shuffle.encode("Mixed", "hex, base64")
    label, _ = WatermarkEngine.read_header(encoded)
    assert label == "shuffle:hex,base64"
    assert shuffle.decode(encoded) == "Mixed"


def test_shuffle_unknown_palette(registry):
    assert make_shuffle(registry).encode("abc", ["nope"]) == ENCODE_FAILED


def test_shuffle_without_preamble(registry):
    assert make_shuffle(registry).decode("plain text") == DECODE_FAILED


def test_shuffle_truncated_unit(registry):
    shuffle = make_shuffle(registry)
    encoded = shuffle.encode("abc")
    assert shuffle.decode(encoded[:-1]) == "ab" + UNRESOLVED


def test_shuffle_bad_units_resync(registry):
    shuffle = make_shuffle(registry)
    header = WatermarkEngine.header
    text = (header("shuffle:caesar") + header("9.1") + "x" + header("0.1") + "n"
            + "zz" + header("-.1") + "!")
    assert shuffle.decode(text) == UNRESOLVED + "a" + UNRESOLVED + "!"


def test_shuffle_from_registry_is_bound(registry):
    shuffle = registry.get("shuffle")
    assert shuffle.registry is registry
    assert shuffle.decode(shuffle.encode("bound")) == "bound"
