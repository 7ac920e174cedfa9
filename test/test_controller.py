#!/usr/bin/env python3
import json
import unittest
from unittest.mock import Mock, patch

from alert_gateway.config import Config, ServerConfig
from alert_gateway.controller import create_app
from alert_gateway.errors import RemoteNack, TransportError
from alert_gateway.services import SynologyChatSender

EXAMPLE = {
    "receiver": "r",
    "status": "firing",
    "alerts": [
        {"status": "firing", "labels": {"alertname": "HighCPU"}, "annotations": {"summary": "cpu hot"}},
    ],
    "truncatedAlerts": 3,
}


def _sender():
    sender = Mock(spec=SynologyChatSender)
    sender.configured = True
    return sender


class WebhookTestCase(unittest.TestCase):
    debug = False

    def make_client(self, sender=None):
        config = Config(server=ServerConfig(webhook_path="/webhook"), debug=self.debug)
        app = create_app(config, sender=sender)
        app.testing = True
        return app.test_client()


class TestWebhook(WebhookTestCase):
    def test_valid_payload_is_sent_and_acknowledged(self):
        sender = _sender()
        client = self.make_client(sender)

        with self.assertLogs("alert_gateway.controller", level="INFO") as logs:
            resp = client.post("/webhook", data=json.dumps(EXAMPLE), content_type="application/json")

        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.get_data(as_text=True), "ok\n")
        sender.send_text.assert_called_once()
        self.assertEqual(sender.send_text.call_args.args[0], "[HighCPU] cpu hot")
        output = "\n".join(logs.output)
        self.assertIn("alertmanager webhook received status=firing receiver=r alerts=1 truncated=3", output)
        self.assertIn("synology chat sent OK", output)

    def test_sender_failure_still_returns_200(self):
        sender = _sender()
        sender.send_text.side_effect = TransportError(ConnectionError("refused"))
        client = self.make_client(sender)

        with self.assertLogs("alert_gateway.controller", level="INFO") as logs:
            resp = client.post("/webhook", data=json.dumps(EXAMPLE))

        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.get_data(as_text=True), "ok\n")
        self.assertTrue(any("ERROR" in line and "synology send failed" in line for line in logs.output))

    def test_remote_nack_still_returns_200(self):
        sender = _sender()
        sender.send_text.side_effect = RemoteNack(404, "invalid token")
        resp = self.make_client(sender).post("/webhook", data=json.dumps(EXAMPLE))
        self.assertEqual(resp.status_code, 200)

    def test_unexpected_sender_exception_still_returns_200(self):
        sender = _sender()
        sender.send_text.side_effect = RuntimeError("bug")
        with self.assertLogs("alert_gateway.controller", level="ERROR"):
            resp = self.make_client(sender).post("/webhook", data=json.dumps(EXAMPLE))
        self.assertEqual(resp.status_code, 200)

    def test_malformed_json_returns_400_without_sending(self):
        sender = _sender()
        client = self.make_client(sender)
        for body in ("{not json", "[]", ""):
            with self.assertLogs("alert_gateway.controller", level="ERROR"):
                resp = client.post("/webhook", data=body)
            self.assertEqual(resp.status_code, 400, f"body={body!r}")
            self.assertIn("invalid JSON", resp.get_data(as_text=True))
        sender.send_text.assert_not_called()

    def test_non_post_is_method_not_allowed(self):
        sender = _sender()
        client = self.make_client(sender)
        with patch("alert_gateway.controller.read_limited") as read_limited:
            for method in ("get", "put", "delete", "patch", "options"):
                resp = getattr(client, method)("/webhook", data=json.dumps(EXAMPLE))
                self.assertEqual(resp.status_code, 405, method)
            read_limited.assert_not_called()
        sender.send_text.assert_not_called()

    def test_nulls_inside_payload_are_acknowledged(self):
        sender = _sender()
        body = '{"alerts": [null, {"labels": {"alertname": "HighCPU"}, "annotations": {"summary": null, "message": "cpu hot"}}]}'
        resp = self.make_client(sender).post("/webhook", data=body)
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(
            sender.send_text.call_args.args[0],
            "[(no alertname)] (no description/message/summary)\n[HighCPU] cpu hot",
        )

    def test_without_sender_acknowledges(self):
        resp = self.make_client(None).post("/webhook", data=json.dumps(EXAMPLE))
        self.assertEqual(resp.status_code, 200)

    def test_sender_with_blank_url_is_not_invoked(self):
        sender = _sender()
        sender.configured = False
        resp = self.make_client(sender).post("/webhook", data=json.dumps(EXAMPLE))
        self.assertEqual(resp.status_code, 200)
        sender.send_text.assert_not_called()

    def test_empty_alerts_sends_fallback(self):
        sender = _sender()
        self.make_client(sender).post("/webhook", data=json.dumps({"receiver": "r", "alerts": []}))
        self.assertEqual(sender.send_text.call_args.args[0], "[Alertmanager] (no alerts in payload)")

    def test_body_is_truncated_at_limit(self):
        sender = _sender()
        client = self.make_client(sender)
        with patch("alert_gateway.controller.MAX_REQUEST_BODY_BYTES", 10):
            with self.assertLogs("alert_gateway.controller", level="ERROR"):
                resp = client.post("/webhook", data=json.dumps(EXAMPLE))
        self.assertEqual(resp.status_code, 400)
        sender.send_text.assert_not_called()

    def test_unreadable_body_returns_400(self):
        client = self.make_client(_sender())
        with patch("alert_gateway.controller.read_limited", side_effect=OSError("connection reset")):
            with self.assertLogs("alert_gateway.controller", level="ERROR"):
                resp = client.post("/webhook", data=json.dumps(EXAMPLE))
        self.assertEqual(resp.status_code, 400)
        self.assertIn("failed to read body", resp.get_data(as_text=True))

    def test_healthz(self):
        resp = self.make_client().get("/healthz")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.get_data(as_text=True), "ok\n")

    def test_custom_webhook_path(self):
        config = Config(server=ServerConfig(webhook_path="/alertmanager"))
        client = create_app(config).test_client()
        self.assertEqual(client.post("/alertmanager", data=json.dumps(EXAMPLE)).status_code, 200)
        self.assertEqual(client.post("/webhook", data=json.dumps(EXAMPLE)).status_code, 404)


class TestWebhookDebug(WebhookTestCase):
    debug = True

    def test_debug_logs_request_text_and_response(self):
        sender = _sender()

        def fake_send(text, on_response=None):
            on_response("200 OK", '{"success":true}')

        sender.send_text.side_effect = fake_send
        client = self.make_client(sender)

        with self.assertLogs("alert_gateway.controller", level="INFO") as logs:
            resp = client.post("/webhook", data=json.dumps(EXAMPLE), content_type="application/json")

        self.assertEqual(resp.status_code, 200)
        output = "\n".join(logs.output)
        self.assertIn("INCOMING REQUEST START", output)
        self.assertIn("JSON PRETTY START", output)
        self.assertIn("[HighCPU] cpu hot", output)
        self.assertIn("synology response status=200 OK", output)
        self.assertIn('synology response body={"success":true}', output)

    def test_debug_notes_missing_sender(self):
        with self.assertLogs("alert_gateway.controller", level="INFO") as logs:
            self.make_client(None).post("/webhook", data=json.dumps(EXAMPLE))
        self.assertTrue(any("synology sender not configured" in line for line in logs.output))


if __name__ == '__main__':
    unittest.main()
