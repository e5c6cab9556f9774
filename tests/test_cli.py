"""
Tests for cobractl.
"""

import json

from cobrafacil import __version__
from cobrafacil.api import http_server
from cobrafacil.cli import cobractl
from cobrafacil.cli.cobractl import (
    check_subscription_store,
    check_vapid_config,
    format_check_result,
    main,
)
from cobrafacil.core.config import get_config, reload_config
from cobrafacil.push.models import PushSubscription
from cobrafacil.push.store import SubscriptionStore

ORIGIN = "https://cobrafacil.online"


class TestPreview:
    def test_preview_payload(self, capsys):
        assert main(["preview", '{"title": "Pagamento recebido", "data": {"url": "/loans/42"}}']) == 0
        output = json.loads(capsys.readouterr().out)
        assert output["title"] == "Pagamento recebido"
        assert output["options"]["data"] == {"url": "/loans/42"}
        assert output["options"]["tag"] == "cobrafacil-notification"

    def test_preview_plain_text(self, capsys):
        main(["preview", "Parcela atrasada"])
        output = json.loads(capsys.readouterr().out)
        assert output["options"]["body"] == "Parcela atrasada"

    def test_preview_from_file(self, capsys, tmp_path):
        path = tmp_path / "payload.json"
        path.write_text('{"url": "/clients/7"}', encoding="utf-8")
        main(["preview", "--file", str(path)])
        output = json.loads(capsys.readouterr().out)
        assert output["options"]["data"] == {"url": "/clients/7"}


class TestSimulateClick:
    def test_focuses_existing_window(self, capsys):
        code = main([
            "simulate-click", '{"data": {"url": "/loans/42"}}',
            "--action", "open",
            "--window", f"{ORIGIN}/dashboard",
        ])
        out = capsys.readouterr().out
        assert code == 0
        assert "Notification state: clicked" in out
        assert f"* w1: {ORIGIN}/loans/42" in out

    def test_opens_window_when_none_match(self, capsys):
        code = main(["simulate-click", '{"url": "/clients/7"}', "--window", "https://example.com/"])
        out = capsys.readouterr().out
        assert code == 0
        assert f"* w2: {ORIGIN}/clients/7" in out

    def test_close_action_leaves_window(self, capsys):
        main(["simulate-click", "--action", "close", "--window", f"{ORIGIN}/dashboard"])
        out = capsys.readouterr().out
        assert f"   w1: {ORIGIN}/dashboard" in out

    def test_dismiss(self, capsys):
        assert main(["simulate-click", "--dismiss"]) == 0
        assert "Notification state: dismissed" in capsys.readouterr().out

    def test_origin_flag_leaves_global_config_alone(self, capsys):
        other = "https://staging.cobrafacil.online"
        code = main([
            "simulate-click", '{"url": "/loans/42"}',
            "--origin", other,
            "--window", f"{other}/dashboard",
        ])
        assert code == 0
        assert f"* w1: {other}/loans/42" in capsys.readouterr().out
        assert get_config().worker.origin == ORIGIN


class TestSend:
    def test_send_without_vapid_keys_fails(self, capsys):
        assert main(["send", "--title", "t", "--body", "b"]) == 1
        assert "VAPID" in capsys.readouterr().err

    def test_send_no_subscriptions(self, capsys, monkeypatch):
        monkeypatch.setenv("VAPID_PUBLIC_KEY", "BPublicKey")
        monkeypatch.setenv("VAPID_PRIVATE_KEY", "private")
        reload_config()
        assert main(["send", "--user-id", "42", "--title", "t", "--body", "b"]) == 0
        assert "No active subscriptions" in capsys.readouterr().out


class TestHelpers:
    def test_subscription_store_empty(self):
        status, message = check_subscription_store()
        assert status == "WARN"
        assert "No active subscriptions" in message

    def test_subscription_store_counts(self):
        store = SubscriptionStore(get_config().push.subscriptions_db)
        for endpoint in ("https://push.example/1", "https://push.example/2"):
            store.upsert(PushSubscription(user_id="u1", endpoint=endpoint, p256dh="p", auth="a"))

        status, message = check_subscription_store()

        assert status == "OK"
        assert message == "2 active subscriptions for 1 users"

    def test_logging_setup_is_shared_with_server(self):
        assert cobractl.setup_logging is http_server.setup_logging

    def test_vapid_config_missing(self):
        status, _ = check_vapid_config()
        assert status == "ERROR"

    def test_format_check_result(self):
        line = format_check_result("VAPID keys", "OK", "present", width=12)
        assert line == "VAPID keys:  [OK] present"

    def test_version(self, capsys):
        assert main(["version"]) == 0
        assert __version__ in capsys.readouterr().out
