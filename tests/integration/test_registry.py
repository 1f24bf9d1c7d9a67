"""
Integration tests for queue creation, listing and attributes.
"""

import pytest

from rsmq.engine import RedisSMQ
from rsmq.exceptions import (
    NoAttributeSuppliedError,
    QueueExistsError,
    QueueNotFoundError,
    ValidationError,
)


class TestCreateQueue:
    """Tests for create_queue."""

    async def test_create_queue_defaults(self, rsmq: RedisSMQ, qname: str, clock):
        """Test a new queue starts with defaults and zeroed counters."""
        assert await rsmq.create_queue(qname) == 1

        attrs = await rsmq.get_queue_attributes(qname)

        assert attrs.vt == 30
        assert attrs.delay == 0
        assert attrs.maxsize == 65536
        assert attrs.created == int(clock.now)
        assert attrs.modified == int(clock.now)
        assert attrs.msgs == 0
        assert attrs.totalsent == 0
        assert attrs.totalrecv == 0
        assert attrs.hiddenmsgs == 0

    async def test_create_queue_custom_values(self, rsmq: RedisSMQ, qname: str):
        """Test explicit vt, delay and unlimited maxsize are stored."""
        await rsmq.create_queue(qname, vt=0, delay=5, maxsize=-1)

        attrs = await rsmq.get_queue_attributes(qname)

        assert attrs.vt == 0
        assert attrs.delay == 5
        assert attrs.maxsize == -1

    async def test_create_same_queue_again(self, rsmq: RedisSMQ, qname: str):
        """Test duplicate creation fails."""
        await rsmq.create_queue(qname)

        with pytest.raises(QueueExistsError) as exc_info:
            await rsmq.create_queue(qname, vt=99)

        assert exc_info.value.kind == "queue_exists"
        assert (await rsmq.get_queue_attributes(qname)).vt == 30

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"qname": "should throw"},
            {"qname": "long_name" * 100},
            {"qname": "test1", "vt": -20},
            {"qname": "test1", "vt": "not_a_number"},
            {"qname": "test1", "vt": 10_000_000},
            {"qname": "test1", "delay": -20},
            {"qname": "test1", "delay": 10_000_000},
            {"qname": "test1", "maxsize": -20},
            {"qname": "test1", "maxsize": 66_000},
            {"qname": "test1", "maxsize": 900},
        ],
    )
    async def test_create_queue_invalid_input(self, rsmq: RedisSMQ, kwargs: dict):
        """Test malformed input is rejected before anything is written."""
        with pytest.raises(ValidationError):
            await rsmq.create_queue(**kwargs)

        assert await rsmq.list_queues() == []

    async def test_create_queue_with_ttl(self, rsmq: RedisSMQ, qname: str):
        """Test a ttl is attached to the metadata record."""
        await rsmq.create_queue(qname, ttl=60)

        ttl = await rsmq.redis.ttl(rsmq.registry.keys(qname).meta)

        assert 0 < ttl <= 60


class TestListAndDeleteQueues:
    """Tests for list_queues and delete_queue."""

    async def test_list_queues_empty(self, rsmq: RedisSMQ):
        """Test a fresh namespace has no queues."""
        assert await rsmq.list_queues() == []

    async def test_list_queues_two_elements(self, rsmq: RedisSMQ):
        """Test every created queue is listed."""
        await rsmq.create_queue("a")
        await rsmq.create_queue("b")

        assert set(await rsmq.list_queues()) == {"a", "b"}

    async def test_namespaces_are_isolated(self, rsmq: RedisSMQ, redis_client, namespace: str):
        """Test queues of another namespace are not listed."""
        other = RedisSMQ(client=redis_client, ns=f"{namespace}other")
        await other.create_queue("elsewhere")
        await rsmq.create_queue("here")

        try:
            assert await rsmq.list_queues() == ["here"]
            assert await other.list_queues() == ["elsewhere"]
        finally:
            await other.delete_queue("elsewhere")

    async def test_delete_queue(self, rsmq: RedisSMQ, qname: str):
        """Test a deleted queue disappears with its messages."""
        await rsmq.create_queue(qname)
        await rsmq.send_message(qname, "Hello")

        assert await rsmq.delete_queue(qname) == 1

        assert await rsmq.list_queues() == []
        assert await rsmq.redis.exists(rsmq.registry.keys(qname).index) == 0
        with pytest.raises(QueueNotFoundError):
            await rsmq.get_queue_attributes(qname)

    async def test_list_ignores_longer_namespace(self, rsmq: RedisSMQ, namespace: str, qname: str):
        """Test keys of a namespace extending this one are not listed."""
        await rsmq.create_queue(qname)
        foreign = f"{namespace}:nested:orders:Q"
        await rsmq.redis.hset(foreign, "vt", 30)

        try:
            assert await rsmq.list_queues() == [qname]
        finally:
            await rsmq.redis.delete(foreign)

    async def test_delete_missing_queue(self, rsmq: RedisSMQ):
        """Test deleting a missing queue is not an error."""
        assert await rsmq.delete_queue("nothing-here") == 1

    async def test_queue_exists(self, rsmq: RedisSMQ, qname: str):
        """Test existence follows create and delete."""
        assert await rsmq.registry.queue_exists(qname) is False

        await rsmq.create_queue(qname)
        assert await rsmq.registry.queue_exists(qname) is True

        await rsmq.delete_queue(qname)
        assert await rsmq.registry.queue_exists(qname) is False


class TestQueueAttributes:
    """Tests for get_queue_attributes and set_queue_attributes."""

    async def test_get_queue_attributes_bogus_queue(self, rsmq: RedisSMQ):
        """Test a missing queue is reported."""
        with pytest.raises(QueueNotFoundError):
            await rsmq.get_queue_attributes("sdfsdfsdf")

    async def test_set_queue_attributes_bogus_queue(self, rsmq: RedisSMQ):
        """Test a missing queue wins over a missing attribute."""
        with pytest.raises(QueueNotFoundError):
            await rsmq.set_queue_attributes("kjdsfh3h")
        with pytest.raises(QueueNotFoundError):
            await rsmq.set_queue_attributes("kjdsfh3h", vt=1000)

    async def test_set_queue_attributes_nothing_supplied(self, rsmq: RedisSMQ, qname: str):
        """Test calling the setter with nothing to change."""
        await rsmq.create_queue(qname)

        with pytest.raises(NoAttributeSuppliedError):
            await rsmq.set_queue_attributes(qname)

    async def test_set_queue_attributes_vt(self, rsmq: RedisSMQ, qname: str):
        """Test only supplied fields change."""
        await rsmq.create_queue(qname)

        attrs = await rsmq.set_queue_attributes(qname, vt=1234)

        assert attrs.vt == 1234
        assert attrs.delay == 0
        assert attrs.maxsize == 65536

    async def test_set_queue_attributes_refreshes_modified(
        self, rsmq: RedisSMQ, qname: str, clock
    ):
        """Test modified moves forward while created stays."""
        await rsmq.create_queue(qname)
        created = (await rsmq.get_queue_attributes(qname)).modified
        clock.advance(2)

        attrs = await rsmq.set_queue_attributes(qname, delay=7)

        assert attrs.delay == 7
        assert attrs.modified == created + 2
        assert attrs.created == created

    async def test_set_queue_attributes_all(self, rsmq: RedisSMQ, qname: str):
        """Test all three defaults at once, including unlimited maxsize."""
        await rsmq.create_queue(qname)

        attrs = await rsmq.set_queue_attributes(qname, vt=30, delay=0, maxsize=-1)

        assert (attrs.vt, attrs.delay, attrs.maxsize) == (30, 0, -1)

    @pytest.mark.parametrize("kwargs", [{"maxsize": 50}, {"vt": -5}, {"delay": "x"}])
    async def test_set_queue_attributes_invalid(self, rsmq: RedisSMQ, qname: str, kwargs: dict):
        """Test malformed values are rejected and nothing changes."""
        await rsmq.create_queue(qname)

        with pytest.raises(ValidationError):
            await rsmq.set_queue_attributes(qname, **kwargs)

        attrs = await rsmq.get_queue_attributes(qname)
        assert (attrs.vt, attrs.delay, attrs.maxsize) == (30, 0, 65536)
