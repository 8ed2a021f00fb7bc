import json
import unittest
from unittest import mock

from apps.common import views


@mock.patch("apps.common.views._cache_check", return_value={"status": "ok"})
class HealthViewsUnitTests(unittest.TestCase):
    def test_live_health_returns_alive_payload(self, _cache_check):
        response = views.live_health(None)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(json.loads(response.content)["status"], "alive")

    @mock.patch("apps.common.views.os.getenv", return_value=None)
    @mock.patch("apps.common.views._db_check", return_value={"status": "ok", "latency_ms": 0.8})
    def test_ready_health_ok_without_redis(self, mock_db_check, _getenv, _cache_check):
        response = views.ready_health(None)
        self.assertEqual(response.status_code, 200)
        payload = json.loads(response.content)
        self.assertEqual(payload["status"], "ok")
        self.assertEqual(payload["checks"]["database"], mock_db_check.return_value)
        self.assertEqual(payload["checks"]["redis"]["status"], "skipped")

    @mock.patch("apps.common.views.os.getenv", return_value="redis://localhost")
    @mock.patch("apps.common.views._redis_ping", return_value={"status": "fail", "error": "unreachable"})
    @mock.patch("apps.common.views._db_check", return_value={"status": "ok", "latency_ms": 1.0})
    def test_ready_health_degraded_when_redis_down(self, _db, mock_redis, _getenv, _cache_check):
        response = views.ready_health(None)
        self.assertEqual(response.status_code, 503)
        payload = json.loads(response.content)
        self.assertEqual(payload["status"], "degraded")
        self.assertEqual(payload["checks"]["redis"], mock_redis.return_value)

    @mock.patch("apps.common.views.os.getenv", return_value=None)
    @mock.patch("apps.common.views._db_check", return_value={"status": "fail", "error": "db down"})
    def test_ready_health_degraded_when_database_fails(self, _db, _getenv, _cache_check):
        response = views.ready_health(None)
        self.assertEqual(response.status_code, 503)
        self.assertEqual(json.loads(response.content)["status"], "degraded")


class RedisPingTests(unittest.TestCase):
    @mock.patch("apps.common.views.redis.from_url")
    def test_ping_ok(self, from_url):
        from_url.return_value.ping.return_value = True
        self.assertEqual(views._redis_ping("redis://x")["status"], "ok")

    @mock.patch("apps.common.views.redis.from_url")
    def test_ping_error_reports_fail(self, from_url):
        from_url.return_value.ping.side_effect = views.redis.ConnectionError("refused")
        result = views._redis_ping("redis://x")
        self.assertEqual(result["status"], "fail")
        self.assertIn("refused", result["error"])
