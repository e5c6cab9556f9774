"""
Tests for push payload normalization.
"""

import json

import pytest

from cobrafacil.core.config import NotificationDefaultsConfig
from cobrafacil.worker.normalizer import PushMessageData, default_model, normalize

DEFAULT = {
    "title": "CobraFácil",
    "body": "Você tem uma nova notificação",
    "icon": "/pwa-192x192.png",
    "badge": "/pwa-192x192.png",
    "tag": "cobrafacil-notification",
    "data": {"url": "/dashboard"},
}


def payload(obj) -> PushMessageData:
    return PushMessageData(json.dumps(obj).encode("utf-8"))


class TestDefaults:
    """Missing payloads and missing fields."""

    def test_no_payload_gives_default_model(self):
        model = normalize(None)
        assert model.to_dict() == DEFAULT

    def test_empty_object_gives_default_model(self):
        assert normalize(payload({})).to_dict() == DEFAULT

    def test_defaults_are_not_shared_between_events(self):
        first = normalize(payload({"url": "/loans/1"}))
        second = normalize(None)
        assert first.url == "/loans/1"
        assert second.url == "/dashboard"

    def test_custom_defaults(self):
        defaults = NotificationDefaultsConfig(title="Outro", url="/home")
        model = normalize(None, defaults=defaults)
        assert model.title == "Outro"
        assert model.url == "/home"
        assert default_model(defaults).to_dict() == model.to_dict()


class TestJsonPayload:
    """Valid JSON object payloads."""

    def test_concrete_payment_payload(self):
        model = normalize(payload({
            "title": "Pagamento recebido",
            "body": "R$150 pago",
            "data": {"url": "/loans/42"},
        }))
        assert model.to_dict() == {
            "title": "Pagamento recebido",
            "body": "R$150 pago",
            "icon": "/pwa-192x192.png",
            "badge": "/pwa-192x192.png",
            "tag": "cobrafacil-notification",
            "data": {"url": "/loans/42"},
        }

    def test_subset_of_fields_overrides_only_those(self):
        model = normalize(payload({"tag": "loan-7", "icon": "/logo.png"}))
        assert model.tag == "loan-7"
        assert model.icon == "/logo.png"
        assert model.title == DEFAULT["title"]
        assert model.body == DEFAULT["body"]
        assert model.badge == DEFAULT["badge"]
        assert model.data == DEFAULT["data"]

    def test_field_order_does_not_matter(self):
        a = normalize(PushMessageData(b'{"title": "A", "body": "B", "tag": "t"}'))
        b = normalize(PushMessageData(b'{"tag": "t", "body": "B", "title": "A"}'))
        assert a.to_dict() == b.to_dict()

    def test_empty_strings_fall_back_to_defaults(self):
        model = normalize(payload({"title": "", "body": "", "icon": ""}))
        assert model.title == DEFAULT["title"]
        assert model.body == DEFAULT["body"]
        assert model.icon == DEFAULT["icon"]

    def test_top_level_url_overrides_data_url(self):
        model = normalize(payload({"data": {"url": "/a"}, "url": "/b"}))
        assert model.url == "/b"

    def test_data_url_used_without_top_level_url(self):
        model = normalize(payload({"data": {"url": "/a"}}))
        assert model.url == "/a"

    def test_top_level_url_without_data(self):
        model = normalize(payload({"url": "/clients/3"}))
        assert model.data == {"url": "/clients/3"}

    def test_extra_data_keys_are_kept(self):
        model = normalize(payload({"data": {"url": "/a", "loanId": 42}}))
        assert model.data == {"url": "/a", "loanId": 42}

    def test_data_without_url_gets_default_url(self):
        model = normalize(payload({"data": {"loanId": 42}}))
        assert model.data == {"loanId": 42, "url": "/dashboard"}

    def test_non_string_fields_fall_back(self):
        model = normalize(payload({"title": 5, "data": "nope", "url": 7}))
        assert model.title == DEFAULT["title"]
        assert model.data == {"url": "/dashboard"}


class TestMalformedPayload:
    """Payloads that are not a JSON object."""

    def test_plain_text_becomes_body(self):
        model = normalize(PushMessageData(b"Parcela de Maria vence hoje"))
        expected = dict(DEFAULT, body="Parcela de Maria vence hoje")
        assert model.to_dict() == expected

    def test_truncated_json_becomes_body(self):
        raw = '{"title": "Pagamento'
        model = normalize(PushMessageData(raw))
        assert model.body == raw
        assert model.title == DEFAULT["title"]

    @pytest.mark.parametrize("raw", [b'"Pagamento recebido"', b"[1, 2]", b"42", b"true"])
    def test_non_object_json_gives_default_model(self, raw):
        assert normalize(PushMessageData(raw)).to_dict() == DEFAULT

    def test_json_null_becomes_body(self):
        model = normalize(PushMessageData(b"null"))
        assert model.body == "null"
        assert model.title == DEFAULT["title"]

    def test_invalid_utf8_does_not_raise(self):
        model = normalize(PushMessageData(b"\xff\xfe pago"))
        assert model.body.endswith("pago")
        assert model.tag == DEFAULT["tag"]
