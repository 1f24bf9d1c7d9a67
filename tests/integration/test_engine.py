"""
Integration tests for engine wiring, script registration and realtime mode.
"""

from unittest.mock import AsyncMock

import pytest
from prometheus_client import CollectorRegistry

from rsmq.config import Settings
from rsmq.engine import RedisSMQ
from rsmq.exceptions import ValidationError
from rsmq.observability.metrics import MetricsCollector


class TestEngineConstruction:
    """Tests for RedisSMQ construction and shutdown."""

    async def test_use_existing_redis_client(self, redis_client, namespace: str):
        """Test an adopted client is used and left open on quit."""
        async with RedisSMQ(client=redis_client, ns=namespace) as engine:
            assert engine.redis is redis_client
            await engine.create_queue("adopted")
            await engine.delete_queue("adopted")

        assert await redis_client.ping()

    async def test_client_from_settings(self):
        """Test a client is built from settings when none is passed."""
        settings = Settings(redis_url="redis://redis.internal:6380/2", namespace="jobs")
        engine = RedisSMQ(settings=settings)

        kwargs = engine.redis.connection_pool.connection_kwargs
        assert kwargs["host"] == "redis.internal"
        assert kwargs["port"] == 6380
        assert kwargs["db"] == 2
        assert kwargs["decode_responses"] is False
        assert engine.namespace == "jobs"

        await engine.quit()

    async def test_explicit_arguments_win(self):
        """Test host and port arguments override settings."""
        settings = Settings(redis_url="redis://redis.internal:6380/2")
        engine = RedisSMQ(host="10.0.0.5", port=7000, ns="other", settings=settings)

        kwargs = engine.redis.connection_pool.connection_kwargs
        assert kwargs["host"] == "10.0.0.5"
        assert kwargs["port"] == 7000
        assert engine.namespace == "other"

        await engine.quit()

    async def test_engines_share_nothing(self, redis_client, namespace: str):
        """Test two engines on one client keep separate namespaces and scripts."""
        first = RedisSMQ(client=redis_client, ns=f"{namespace}a")
        second = RedisSMQ(client=redis_client, ns=f"{namespace}b")

        assert first.registry is not second.registry
        assert first.messages is not second.messages

        await first.create_queue("shared-name")
        await second.create_queue("shared-name")
        await first.send_message("shared-name", "only in first")

        assert await second.receive_message("shared-name") is None
        assert (await first.receive_message("shared-name")).message == "only in first"

        await first.delete_queue("shared-name")
        await second.delete_queue("shared-name")

    async def test_namespace_with_colon_rejected(self, redis_client):
        """Test a namespace that would overlap another namespace's keys."""
        with pytest.raises(ValidationError, match="Invalid ns format"):
            RedisSMQ(client=redis_client, ns="app:prod")

    async def test_engine_metrics_collector(self, redis_client, namespace: str, qname: str):
        """Test an engine records into the collector it was given."""
        registry = CollectorRegistry()
        engine = RedisSMQ(
            client=redis_client,
            ns=namespace,
            metrics=MetricsCollector(registry=registry),
        )

        await engine.create_queue(qname)
        message_id = await engine.send_message(qname, "counted")
        await engine.receive_message(qname)
        await engine.delete_message(qname, message_id)

        labels = {"queue": qname}
        assert engine.metrics is engine.messages._metrics
        assert registry.get_sample_value("rsmq_messages_sent_total", labels) == 1
        assert registry.get_sample_value("rsmq_messages_received_total", labels) == 1
        assert registry.get_sample_value("rsmq_messages_deleted_total", labels) == 1

        await engine.delete_queue(qname)


class TestScriptRegistration:
    """Tests for atomic script handling."""

    async def test_scripts_reload_after_flush(self, rsmq: RedisSMQ, qname: str):
        """Test operations keep working after the server forgets the scripts."""
        await rsmq.create_queue(qname)
        await rsmq.send_message(qname, "before")
        assert (await rsmq.receive_message(qname, vt=0)).message == "before"

        await rsmq.redis.script_flush()

        assert (await rsmq.receive_message(qname, vt=0)).message == "before"
        popped = await rsmq.pop_message(qname)
        assert popped.message == "before"


class TestRealtime:
    """Tests for realtime notifications from send."""

    async def test_send_publishes_depth(self, redis_client, namespace: str, clock, qname: str):
        """Test each send publishes the index size."""
        engine = RedisSMQ(client=redis_client, ns=namespace, realtime=True, clock=clock)
        publish = AsyncMock(return_value=0)
        engine.redis.publish = publish

        await engine.create_queue(qname)
        await engine.send_message(qname, "Hello")
        await engine.send_message(qname, "World")

        assert publish.await_count == 2
        publish.assert_awaited_with(f"{namespace}rt:{qname}", 2)

        await engine.delete_queue(qname)
        del engine.redis.publish

    async def test_realtime_disabled(self, rsmq: RedisSMQ, qname: str):
        """Test nothing is published when realtime is off."""
        publish = AsyncMock()
        rsmq.redis.publish = publish

        await rsmq.create_queue(qname)
        await rsmq.send_message(qname, "Hello")

        publish.assert_not_awaited()
        del rsmq.redis.publish
