"""Pytest fixtures for legacyping tests."""

import asyncio
import contextlib
import socket

import pytest

from legacyping.datatypes import KICK, Field, PacketBase, Struct, Utf16String


class LegacyKick(PacketBase):
    id = Field(Struct(">B"))
    reason = Field(Utf16String())


def kick_packet(protocol_version=61, server_version='1.5.2', motd='A Minecraft Server',
                player_count=3, max_players=20):
    """Encode a legacy status response the way a 1.4 - 1.5 server sends it."""
    reason = '\0'.join(['§1', str(protocol_version), server_version, motd,
                        str(player_count), str(max_players)])
    return LegacyKick.encode({'id': KICK, 'reason': reason})


@pytest.fixture
def status_packet():
    return kick_packet


@pytest.fixture
def unused_port():
    with socket.socket() as sock:
        sock.bind(('127.0.0.1', 0))
        return sock.getsockname()[1]


@pytest.fixture
def legacy_server():
    """Factory for an in-process server answering one legacy ping.

    `response=None` keeps the connection open without answering.
    With `close=True` the server closes its end right after writing."""

    @contextlib.asynccontextmanager
    async def serve(response=None, close=False):
        received = bytearray()
        connections = []

        async def handle(reader, writer):
            connections.append(writer)
            try:
                received.extend(await reader.readexactly(2))
                if response is not None:
                    writer.write(response)
                    await writer.drain()
                    if close:
                        return
                # Wait for the client to hang up.
                await reader.read()
            except (asyncio.IncompleteReadError, ConnectionError):
                pass
            finally:
                writer.close()

        server = await asyncio.start_server(handle, '127.0.0.1', 0)
        port = server.sockets[0].getsockname()[1]
        try:
            yield port, received, connections
        finally:
            server.close()
            await server.wait_closed()

    return serve
