import asyncio

from services.ws_manager import SCOPE_GLOBAL, ConnectionManager


class FakeWebSocket:
    def __init__(self, closed=False):
        self.closed = closed
        self.sent = []

    async def send_json(self, message):
        if self.closed:
            raise RuntimeError("Cannot call send once a close message has been sent.")
        self.sent.append(message)


def test_broadcast_drops_closed_connection():
    async def scenario():
        manager = ConnectionManager()
        dead = await manager.connect(FakeWebSocket(closed=True))
        await manager.bind(dead, "AB12CD", "teacher")

        await manager.broadcast("AB12CD", "text_updated", {"text": "x"})
        return manager

    manager = asyncio.run(scenario())
    assert manager.topics == {}
    assert manager.connections == set()


def test_broadcast_keeps_live_connections():
    async def scenario():
        manager = ConnectionManager()
        live_ws = FakeWebSocket()
        live = await manager.connect(live_ws)
        dead = await manager.connect(FakeWebSocket(closed=True))
        await manager.bind(live, "AB12CD", "teacher")
        await manager.bind(dead, "AB12CD", "student", "student_1")

        await manager.broadcast("AB12CD", "text_updated", {"text": "x"})
        return manager, live, live_ws

    manager, live, live_ws = asyncio.run(scenario())
    assert live_ws.sent == [{"event": "text_updated", "data": {"text": "x"}}]
    assert manager.subscribers("AB12CD") == {live}
    assert manager.connections == {live}


def test_send_to_closed_socket_returns_false():
    async def scenario():
        manager = ConnectionManager()
        conn = await manager.connect(FakeWebSocket(closed=True))
        return await manager.send(conn, "error", {"error": "x"})

    assert asyncio.run(scenario()) is False


def test_rebind_moves_topic():
    async def scenario():
        manager = ConnectionManager()
        conn = await manager.connect(FakeWebSocket())
        await manager.bind(conn, "AAAAAA", "teacher")
        await manager.bind(conn, "BBBBBB", "teacher")
        return manager, conn

    manager, conn = asyncio.run(scenario())
    assert manager.topics == {"BBBBBB": {conn}}


def test_global_scope_skips_unbound():
    async def scenario():
        manager = ConnectionManager(scope=SCOPE_GLOBAL)
        bound_ws, unbound_ws = FakeWebSocket(), FakeWebSocket()
        bound = await manager.connect(bound_ws)
        await manager.connect(unbound_ws)
        await manager.bind(bound, "AAAAAA", "teacher")
        await manager.broadcast("BBBBBB", "text_updated", {})
        return bound_ws, unbound_ws

    bound_ws, unbound_ws = asyncio.run(scenario())
    assert len(bound_ws.sent) == 1
    assert unbound_ws.sent == []
