import base64

import pytest

from buttonbot.custom_id import CustomIdTooLong, MAX_CUSTOM_ID_LENGTH, base_of, decode, encode


def _b64(text):
    return base64.b64encode(text.encode()).decode()


class TestEncode:
    def test_no_params_returns_base(self):
        assert encode("like_button") == "like_button"
        assert encode("like_button", {}) == "like_button"

    def test_params_are_appended_after_separator(self):
        custom_id = encode("order_details", {"order_id": "A1"})
        assert custom_id == "order_details|" + _b64('{"order_id":"A1"}')

    def test_too_long_raises(self):
        with pytest.raises(CustomIdTooLong) as exc_info:
            encode("order_details", {"note": "x" * 100})
        assert exc_info.value.length > MAX_CUSTOM_ID_LENGTH
        assert isinstance(exc_info.value, ValueError)

    def test_exactly_at_limit_is_allowed(self):
        params = {"a": "x" * 60}
        encoded_len = len(_b64('{"a":"' + "x" * 60 + '"}'))
        base = "b" * (MAX_CUSTOM_ID_LENGTH - encoded_len - 1)
        custom_id = encode(base, params)
        assert len(custom_id) == MAX_CUSTOM_ID_LENGTH


class TestDecode:
    @pytest.mark.parametrize("params", [
        {"page": 2},
        {"page": 2, "data_type": "orders"},
        {"tags": ["a", "b"], "ok": True},
        {"meta": {"x": None}},
        {"n": 1.5, "neg": -3},
        {"name": "鼠标 🖱️"},
    ])
    def test_round_trip(self, params):
        custom_id = encode("page_next", params)
        assert len(custom_id) <= MAX_CUSTOM_ID_LENGTH
        assert decode(custom_id) == ("page_next", params)

    def test_plain_id(self):
        assert decode("like_button") == ("like_button", {})

    def test_invalid_base64_falls_back(self):
        assert decode("btn|!!not-base64!!") == ("btn|!!not-base64!!", {})

    def test_invalid_json_falls_back(self):
        custom_id = "btn|" + _b64("not json")
        assert decode(custom_id) == (custom_id, {})

    def test_non_object_payload_falls_back(self):
        custom_id = "btn|" + _b64("[1, 2]")
        assert decode(custom_id) == (custom_id, {})

    def test_empty_suffix_falls_back(self):
        assert decode("btn|") == ("btn|", {})

    def test_extra_separator_is_part_of_payload(self):
        custom_id = "btn|" + _b64('{"a":1}') + "|extra"
        assert decode(custom_id) == (custom_id, {})


def test_base_of():
    assert base_of("like_button") == "like_button"
    assert base_of(encode("order_details", {"order_id": "A1"})) == "order_details"
    assert base_of("btn|garbage|more") == "btn"
