import base64
import json

import pytest

from cipher_suite.custom import (
    CustomEncoder, CustomEncoderLimitError, CustomEncoderManager, CustomEncoderSpec,
    InvalidEncoderData, MappingCodec, export_encoder, import_encoder, parse_share_link,
    share_link, templates, token_encoder_id,
)


def make_spec(encoder_id="custom-test", mapping=None, **kwargs):
    return CustomEncoderSpec(
        id=encoder_id,
        name="Vowel Map",
        mapping=mapping or {"a": "@", "e": "3", "o": "0"},
        **kwargs
    )


def test_longest_match_wins_both_ways():
    codec = MappingCodec({"a": "12", "aa": "99"})
    assert codec.encode("aa") == "99"
    assert codec.encode("a") == "12"
    assert codec.encode("aaa") == "9912"
    assert codec.decode("99") == "aa"
    assert codec.decode("9912") == "aaa"


def test_single_character_keys_map_per_character():
    assert MappingCodec({"a": "12"}).encode("aa") == "1212"
    spec = make_spec(mapping={"a": "12", "aa": "99"}).validate()
    assert CustomEncoder(spec).encode("aa") == "99"


def test_unmapped_characters_pass_through():
    codec = MappingCodec({"a": "@"})
    assert codec.encode("cat!") == "c@t!"
    assert codec.decode("c@t!") == "cat!"


def test_case_insensitive_single_characters_keep_case():
    codec = MappingCodec({"a": "x"})
    assert codec.encode("A") == "X"
    assert codec.decode("X") == "A"


def test_case_sensitive_mapping():
    codec = MappingCodec({"a": "1", "A": "2"}, case_sensitive=True)
    assert codec.encode("aA") == "12"
    assert codec.decode("12") == "aA"


def test_duplicate_values_decode_to_last_key():
    codec = MappingCodec({"i": "1", "l": "1"})
    assert codec.encode("il") == "11"
    assert codec.decode("11") == "ll"


def test_custom_encoder_contract():
    encoder = CustomEncoder(make_spec())
    assert encoder.id == "custom-test"
    assert encoder.custom
    assert encoder.category == "custom"
    assert encoder.decode(encoder.encode("hello")) == "hello"
    assert encoder.describe()["custom"] is True


def test_spec_validation():
    with pytest.raises(InvalidEncoderData):
        CustomEncoderSpec(id="x", name="", mapping={"a": "b"}).validate()
    with pytest.raises(InvalidEncoderData):
        CustomEncoderSpec(id="x", name="y", mapping={"a": ""}).validate()


def test_dict_round_trip_uses_camel_case():
    spec = make_spec(case_sensitive=True, created_at=123)
    data = spec.to_dict()
    assert data["caseSensitive"] is True
    assert data["createdAt"] == 123
    assert CustomEncoderSpec.from_dict(data) == spec


def test_export_import_assigns_fresh_id():
    spec = make_spec()
    imported = import_encoder(export_encoder(spec))
    assert imported.mapping == spec.mapping
    assert imported.name == spec.name
    assert imported.id.startswith("custom-")
    assert imported.id != spec.id
    assert imported.created_at is not None


def test_import_rejects_other_versions():
    token = base64.b64encode(json.dumps({
        "version": "2.0",
        "encoder": {"name": "x", "mapping": {"a": "b"}},
    }).encode("utf-8")).decode("ascii")
    with pytest.raises(InvalidEncoderData):
        import_encoder(token)


@pytest.mark.parametrize("token", ["not base64!", base64.b64encode(b"[]").decode("ascii"), ""])
def test_import_rejects_garbage(token):
    with pytest.raises(InvalidEncoderData):
        import_encoder(token)


def test_share_link_round_trip():
    spec = make_spec()
    link = share_link(spec)
    assert link.startswith("https://cipher-suite.app/custom?encoder=")
    assert parse_share_link(link).mapping == spec.mapping


def test_share_link_without_parameter():
    with pytest.raises(InvalidEncoderData):
        parse_share_link("https://cipher-suite.app/custom?other=1")


def test_manager_enforces_limit_but_allows_replacing():
    manager = CustomEncoderManager(max_encoders=2)
    manager.save(make_spec("custom-1"))
    manager.save(make_spec("custom-2"))
    with pytest.raises(CustomEncoderLimitError):
        manager.save(make_spec("custom-3"))
    manager.save(make_spec("custom-2", mapping={"x": "y"}))
    assert len(manager) == 2
    assert manager.get("custom-2").mapping == {"x": "y"}


def test_manager_persists_to_disk(tmp_path):
    path = tmp_path / "custom.json"
    manager = CustomEncoderManager(str(path))
    manager.save(make_spec("custom-1"))
    manager.import_token(export_encoder(make_spec("custom-2")))

    reloaded = CustomEncoderManager(str(path))
    assert len(reloaded) == 2
    assert reloaded.get("custom-1").mapping == {"a": "@", "e": "3", "o": "0"}
    assert reloaded.delete("custom-1")
    assert not reloaded.delete("custom-1")
    assert len(CustomEncoderManager(str(path))) == 1


def test_manager_builds_encoders():
    manager = CustomEncoderManager()
    manager.save(make_spec())
    [encoder] = manager.encoders()
    assert encoder.encode("ace") == "@c3"


def test_templates_are_fresh_copies():
    first = templates()
    first[0].mapping["a"] = "changed"
    assert templates()[0].mapping["a"] == "4"
    assert len(first) == 5


def test_leet_template():
    elite = CustomEncoder(templates()[0])
    assert elite.encode("bag") == "849"


def test_token_encoder_id_is_stable():
    token = export_encoder(make_spec())
    assert token_encoder_id(token) == token_encoder_id(" " + token + "\n")
    assert token_encoder_id(token) != token_encoder_id(export_encoder(make_spec(mapping={"a": "4"})))
    assert import_encoder(token, token_encoder_id(token)).id == token_encoder_id(token)
    assert token_encoder_id(token).startswith("custom-")
