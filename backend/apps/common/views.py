import os
import time

import redis
from django.core.cache import cache
from django.db import connections
from django.db.utils import OperationalError
from django.http import JsonResponse

from .logger import get_logger

logger = get_logger(__name__).bind(component="common", layer="health")

_CACHE_PROBE_KEY = "health:probe"


def _elapsed_ms(started: float) -> float:
    return round((time.monotonic() - started) * 1000, 2)


def _redis_ping(url: str, timeout: float = 0.3):
    started = time.monotonic()
    try:
        client = redis.from_url(
            url, socket_connect_timeout=timeout, socket_timeout=timeout
        )
        if not client.ping():
            logger.warning("Redis ping returned a falsy response", url=url)
            return {"status": "fail", "error": "no PONG"}
    except redis.RedisError as exc:
        logger.warning("Redis health check failed", error=str(exc))
        return {"status": "fail", "error": str(exc)}
    latency = _elapsed_ms(started)
    logger.debug("Redis health check succeeded", latency_ms=latency)
    return {"status": "ok", "latency_ms": latency}


def _db_check(alias: str = "default"):
    started = time.monotonic()
    try:
        with connections[alias].cursor() as cursor:
            cursor.execute("SELECT 1")
    except OperationalError as exc:
        logger.warning("Database health check failed", alias=alias, error=str(exc))
        return {"status": "fail", "error": str(exc)}
    latency = _elapsed_ms(started)
    logger.debug("Database health check succeeded", alias=alias, latency_ms=latency)
    return {"status": "ok", "latency_ms": latency}


def _cache_check():
    """Round-trip a probe value through the configured cache backend."""
    token = str(time.monotonic())
    cache.set(_CACHE_PROBE_KEY, token, timeout=5)
    if cache.get(_CACHE_PROBE_KEY) != token:
        # IGNORE_EXCEPTIONS turns a Redis outage into silent misses
        logger.warning("Cache probe value was not readable")
        return {"status": "degraded", "detail": "cache miss on probe"}
    return {"status": "ok"}


def live_health(request):
    """Liveness probe: the process is up and serving requests."""
    logger.debug("Liveness probe served")
    return JsonResponse({"status": "alive"})


def ready_health(request):
    """Readiness probe: database must answer; Redis is checked when configured."""
    checks = {"database": _db_check(), "cache": _cache_check()}
    redis_url = os.getenv("REDIS_URL")
    if redis_url:
        checks["redis"] = _redis_ping(redis_url)
    else:
        checks["redis"] = {"status": "skipped", "detail": "REDIS_URL not set"}

    failing = sorted(name for name, result in checks.items() if result.get("status") == "fail")
    overall = "degraded" if failing else "ok"
    logger.info("Readiness probe evaluated", status=overall, failing=failing)
    return JsonResponse(
        {"status": overall, "checks": checks}, status=503 if failing else 200
    )
