"""Unit tests for BroadcastDispatcher."""

import logging

import pytest

from revogi_smart_strip import BroadcastDispatcher, UdpResponse


class TestBroadcast:
    @pytest.mark.asyncio
    async def test_sends_to_every_address(self, make_dispatcher, fake_network):
        dispatcher = make_dispatcher(["192.168.1.255", "10.0.0.255"])

        await dispatcher.broadcast("00sw=all,,,;")

        assert sorted(fake_network.sent) == sorted(
            [
                (b"00sw=all,,,;", ("192.168.1.255", 8888)),
                (b"00sw=all,,,;", ("10.0.0.255", 8888)),
            ]
        )
        assert all(sock.close_count == 1 for sock in fake_network.sockets)

    @pytest.mark.asyncio
    async def test_results_follow_address_order(self, make_dispatcher, fake_network):
        fake_network.add_reply("10.0.0.255", "b1", sender="10.0.0.5")
        fake_network.add_reply("192.168.1.255", "a1", sender="192.168.1.10")
        fake_network.add_reply("192.168.1.255", "a2", sender="192.168.1.11")
        dispatcher = make_dispatcher(["192.168.1.255", "10.0.0.255"])

        result = await dispatcher.broadcast("query")

        assert result == [
            UdpResponse("a1", "192.168.1.10"),
            UdpResponse("a2", "192.168.1.11"),
            UdpResponse("b1", "10.0.0.5"),
        ]

    @pytest.mark.asyncio
    async def test_no_addresses_sends_nothing(self, make_dispatcher, fake_network):
        result = await make_dispatcher([]).broadcast("query")

        assert result == []
        assert fake_network.sockets == []

    @pytest.mark.asyncio
    async def test_unresolvable_address_does_not_affect_others(
        self, make_dispatcher, fake_network, unresolvable_host, caplog
    ):
        host = await unresolvable_host()
        fake_network.add_reply("192.168.1.255", "reply", sender="192.168.1.10")
        dispatcher = make_dispatcher([host, "192.168.1.255"])

        with caplog.at_level(logging.WARNING, logger="revogi_smart_strip"):
            result = await dispatcher.broadcast("query")

        assert result == [UdpResponse("reply", "192.168.1.10")]
        assert host in caplog.text
        assert [addr for _, addr in fake_network.sent] == [("192.168.1.255", 8888)]

    @pytest.mark.asyncio
    async def test_address_provider_is_called_per_broadcast(self, transport):
        calls = []

        def provider():
            calls.append(1)
            return ["192.168.1.255"]

        dispatcher = BroadcastDispatcher(transport=transport, broadcast_addresses=provider)
        await dispatcher.broadcast("query")
        await dispatcher.broadcast("query")

        assert len(calls) == 2

    def test_defaults_to_interface_enumeration(self, monkeypatch, transport):
        monkeypatch.setattr(
            "revogi_smart_strip.broadcast.get_local_broadcast_addresses", lambda: ["172.17.255.255"]
        )

        dispatcher = BroadcastDispatcher(transport=transport)

        assert dispatcher.get_broadcast_addresses() == ["172.17.255.255"]


class TestSendTo:
    @pytest.mark.asyncio
    async def test_unicast(self, make_dispatcher, fake_network):
        fake_network.add_reply("192.168.1.10", "reply")

        result = await make_dispatcher([]).send_to("query", "192.168.1.10")

        assert result == [UdpResponse("reply", "192.168.1.10")]
        assert fake_network.sent == [(b"query", ("192.168.1.10", 8888))]

    @pytest.mark.asyncio
    async def test_unresolvable_returns_empty(self, make_dispatcher, fake_network, unresolvable_host):
        host = await unresolvable_host()

        result = await make_dispatcher([]).send_to("query", host)

        assert result == []
        assert fake_network.sockets == []

    @pytest.mark.asyncio
    async def test_replies_are_logged(self, make_dispatcher, fake_network, caplog):
        fake_network.add_reply("192.168.1.10", "hello strip")

        with caplog.at_level(logging.INFO, logger="revogi_smart_strip"):
            await make_dispatcher([]).send_to("query", "192.168.1.10")

        assert "hello strip" in caplog.text
