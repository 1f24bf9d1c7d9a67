"""
Lua scripts for the atomic queue and message operations.

Every script takes KEYS[1] = queue index (sorted set) and KEYS[2] = queue
metadata hash. Redis runs each script without interleaving other clients,
which is what makes leasing race-free.
"""

from typing import Any

from redis.commands.core import AsyncScript

# Shared tail: one message left the queue. msgs never drops below 0 and
# hiddenmsgs stays within [0, msgs].
_RELEASE_MESSAGE = """
local msgs = tonumber(redis.call("HGET", KEYS[2], "msgs") or "0")
if msgs > 0 then
    msgs = redis.call("HINCRBY", KEYS[2], "msgs", -1)
end
local hidden = tonumber(redis.call("HGET", KEYS[2], "hiddenmsgs") or "0")
if hidden > msgs then
    redis.call("HSET", KEYS[2], "hiddenmsgs", math.max(msgs, 0))
end
"""

# Shared head of receive and pop: lowest-score id with score <= ARGV[1].
# Index entries whose body is gone (metadata expired or deleted) are dropped.
_SELECT_ELIGIBLE = """
local id
local body
while true do
    local msg = redis.call("ZRANGEBYSCORE", KEYS[1], "-inf", ARGV[1], "LIMIT", "0", "1")
    if #msg == 0 then
        return {}
    end
    id = msg[1]
    body = redis.call("HGET", KEYS[2], id)
    if body then
        break
    end
    redis.call("ZREM", KEYS[1], id)
    redis.call("HDEL", KEYS[2], id .. ":rc", id .. ":fr", id .. ":sent", id .. ":bin")
end
"""

# ARGV = vt, delay, maxsize, now, ttl ("" when none)
CREATE_QUEUE = """
if redis.call("EXISTS", KEYS[2]) == 1 then
    return 0
end
redis.call("DEL", KEYS[1])
redis.call(
    "HSET", KEYS[2],
    "vt", ARGV[1],
    "delay", ARGV[2],
    "maxsize", ARGV[3],
    "created", ARGV[4],
    "modified", ARGV[4],
    "msgs", 0,
    "totalsent", 0,
    "totalrecv", 0,
    "hiddenmsgs", 0
)
if ARGV[5] ~= "" then
    redis.call("EXPIRE", KEYS[2], ARGV[5])
end
return 1
"""

# ARGV[1] = now, ARGV[2] = new lease deadline
RECEIVE_MESSAGE = _SELECT_ELIGIBLE + """
redis.call("ZADD", KEYS[1], ARGV[2], id)
redis.call("HINCRBY", KEYS[2], "totalrecv", 1)
local rc = redis.call("HINCRBY", KEYS[2], id .. ":rc", 1)
local fr
if rc == 1 then
    redis.call("HSET", KEYS[2], id .. ":fr", ARGV[1])
    fr = ARGV[1]
else
    fr = redis.call("HGET", KEYS[2], id .. ":fr")
end
local hidden = tonumber(redis.call("HGET", KEYS[2], "hiddenmsgs") or "0")
if hidden > 0 then
    redis.call("HINCRBY", KEYS[2], "hiddenmsgs", -1)
end
local sent = redis.call("HGET", KEYS[2], id .. ":sent")
local binary = redis.call("HGET", KEYS[2], id .. ":bin")
return {id, body, rc, fr or ARGV[1], sent or "", binary or ""}
"""

# ARGV[1] = now
POP_MESSAGE = _SELECT_ELIGIBLE + """
redis.call("HINCRBY", KEYS[2], "totalrecv", 1)
local rc = redis.call("HINCRBY", KEYS[2], id .. ":rc", 1)
local fr
if rc == 1 then
    fr = ARGV[1]
else
    fr = redis.call("HGET", KEYS[2], id .. ":fr")
end
local sent = redis.call("HGET", KEYS[2], id .. ":sent")
local binary = redis.call("HGET", KEYS[2], id .. ":bin")
redis.call("ZREM", KEYS[1], id)
redis.call("HDEL", KEYS[2], id, id .. ":rc", id .. ":fr", id .. ":sent", id .. ":bin")
""" + _RELEASE_MESSAGE + """
return {id, body, rc, fr or ARGV[1], sent or "", binary or ""}
"""

# ARGV[1] = message id, ARGV[2] = new deadline
CHANGE_MESSAGE_VISIBILITY = """
if not redis.call("ZSCORE", KEYS[1], ARGV[1]) then
    return 0
end
redis.call("ZADD", KEYS[1], ARGV[2], ARGV[1])
return 1
"""

# ARGV[1] = message id
DELETE_MESSAGE = """
if redis.call("ZREM", KEYS[1], ARGV[1]) == 0 then
    return 0
end
local id = ARGV[1]
local stored = redis.call("HDEL", KEYS[2], id)
redis.call("HDEL", KEYS[2], id .. ":rc", id .. ":fr", id .. ":sent", id .. ":bin")
if stored == 1 then
""" + _RELEASE_MESSAGE + """
end
return 1
"""


class QueueScripts:
    """
    Script handles registered against one Redis client.

    Handles run via EVALSHA and reload themselves when the server answers
    NOSCRIPT (after a restart or SCRIPT FLUSH).
    """

    def __init__(self, client: Any):
        """
        Register all scripts on the client.

        Args:
            client: A redis.asyncio.Redis instance.
        """
        self.create_queue: AsyncScript = client.register_script(CREATE_QUEUE)
        self.receive_message: AsyncScript = client.register_script(RECEIVE_MESSAGE)
        self.pop_message: AsyncScript = client.register_script(POP_MESSAGE)
        self.change_message_visibility: AsyncScript = client.register_script(
            CHANGE_MESSAGE_VISIBILITY
        )
        self.delete_message: AsyncScript = client.register_script(DELETE_MESSAGE)
