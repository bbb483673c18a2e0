"""Tests for the aiohttp receiver endpoint and the aiohttp transport."""
import asyncio
import io

import aiohttp
import pytest
from aiohttp import web
from aiohttp.test_utils import TestClient, TestServer
from multidict import CIMultiDict, CIMultiDictProxy, MultiDict, MultiDictProxy
from unittest.mock import patch

from partialuploader.core.config import ReceiverConfig, RetryConfig
from partialuploader.core.exceptions import FailureKind, TransportError
from partialuploader.core.sender import AiohttpChunkTransport, ChunkSender
from partialuploader.core.sender.models import ChunkRequest
from partialuploader.core.storage import LocalStorageGateway, MemoryStorageGateway
from partialuploader.server import RECEIVER_KEY, create_app
from partialuploader.server.forms import parse_chunk_form


def chunk_form(ordinal, payload, session_field='sessionId', part_name=None, **overrides):
    fields = {
        session_field: 'abc',
        'isDone': 'false',
        'totalSize': '25',
        'totalChunks': '3',
        'filename': 'report.pdf',
    }
    fields.update(overrides)
    form = aiohttp.FormData()
    for name, value in fields.items():
        form.add_field(name, value)
    form.add_field(
        'file',
        payload,
        filename=part_name or f"report.pdf_chunk_{ordinal}",
        content_type='application/octet-stream'
    )
    return form


@pytest.fixture
def app(receiver_config):
    return create_app(receiver_config)


class TestChunkEndpoint:
    """Test suite for POST /upload."""

    @pytest.mark.asyncio
    async def test_accepts_chunk(self, app, receiver_config):
        async with TestClient(TestServer(app)) as client:
            resp = await client.post('/upload', data=chunk_form(1, b"a" * 10))
            body = await resp.json()

        assert resp.status == 200
        assert body == {'sessionId': 'abc', 'accepted': True, 'message': 'accepted'}
        staged = LocalStorageGateway(receiver_config.base_path).base_path / "__chunk-staging__" / "abc"
        assert (staged / "report.pdf_chunk_1").read_bytes() == b"a" * 10

    @pytest.mark.asyncio
    async def test_assembles_on_last_chunk(self, app, receiver_config):
        parts = [b"a" * 10, b"b" * 10, b"c" * 5]
        async with TestClient(TestServer(app)) as client:
            for ordinal, payload in enumerate(parts, start=1):
                done = 'true' if ordinal == 3 else 'false'
                resp = await client.post('/upload', data=chunk_form(ordinal, payload, isDone=done))
                assert resp.status == 200

            session = await (await client.get('/upload/abc')).json()

        artifact = LocalStorageGateway(receiver_config.base_path).base_path / "tmp" / "abc" / "report.pdf"
        assert artifact.read_bytes() == b"".join(parts)
        assert session['state'] == 'completed'
        assert session['receivedChunks'] == [1, 2, 3]

    @pytest.mark.asyncio
    async def test_file_guid_alias(self, app):
        async with TestClient(TestServer(app)) as client:
            resp = await client.post('/upload', data=chunk_form(1, b"x", session_field='fileGuid'))

        assert resp.status == 200
        assert app[RECEIVER_KEY].session('abc') is not None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("overrides", [
        {'totalChunks': 'three'},
        {'isDone': 'maybe'},
        {'filename': ''},
        {'part_name': 'report.pdf'},
        {'part_name': 'other.pdf_chunk_1'},
        {'totalChunks': '0'},
    ])
    async def test_malformed_form_is_not_found(self, app, receiver_config, overrides):
        async with TestClient(TestServer(app)) as client:
            resp = await client.post('/upload', data=chunk_form(1, b"x", **overrides))
            body = await resp.json()

        assert resp.status == 404
        assert body['accepted'] is False
        assert not (LocalStorageGateway(receiver_config.base_path).base_path / "__chunk-staging__").exists()

    @pytest.mark.asyncio
    async def test_missing_file_part(self, app):
        async with TestClient(TestServer(app)) as client:
            resp = await client.post('/upload', data={'sessionId': 'abc', 'filename': 'report.pdf'})

        assert resp.status == 404

    @pytest.mark.asyncio
    async def test_missing_chunk_is_not_acceptable(self, app):
        async with TestClient(TestServer(app)) as client:
            await client.post('/upload', data=chunk_form(1, b"a" * 10))
            resp = await client.post('/upload', data=chunk_form(3, b"c" * 5, isDone='true'))
            session = await (await client.get('/upload/abc')).json()

        assert resp.status == 406
        assert session['state'] == 'aborted'

    @pytest.mark.asyncio
    async def test_storage_failure_is_bad_request(self, flaky_storage):
        config = ReceiverConfig(save_retry=RetryConfig(max_retries=3, delay=0.0))
        app = create_app(config, storage=flaky_storage(4))

        async with TestClient(TestServer(app)) as client:
            resp = await client.post('/upload', data=chunk_form(1, b"a"))

        assert resp.status == 400


class TestInfoEndpoints:

    @pytest.mark.asyncio
    async def test_chunk_size(self):
        app = create_app(ReceiverConfig(max_chunk_size=1024), storage=MemoryStorageGateway())

        async with TestClient(TestServer(app)) as client:
            resp = await client.get('/upload/chunk-size')
            body = await resp.json()

        assert body == {'chunkSize': 1024}

    @pytest.mark.asyncio
    async def test_unknown_session(self, app):
        async with TestClient(TestServer(app)) as client:
            resp = await client.get('/upload/nope')

        assert resp.status == 404

    @pytest.mark.asyncio
    async def test_custom_route(self):
        app = create_app(ReceiverConfig(route='/api/files/'), storage=MemoryStorageGateway())

        async with TestClient(TestServer(app)) as client:
            resp = await client.post('/api/files', data=chunk_form(1, b"x"))

        assert resp.status == 200


class TestEndToEnd:
    """ChunkSender with the real aiohttp transport against the receiver app."""

    @pytest.mark.asyncio
    async def test_round_trip(self, app, receiver_config, sender_config, make_file, random_bytes):
        data = random_bytes(95)
        path = make_file(data, name="blob.bin")

        async with TestClient(TestServer(app)) as client:
            async with ChunkSender(sender_config) as sender:
                result = await sender.send(str(client.make_url('/upload')), path)

        assert result.success
        assert result.chunks_sent == 10
        artifact = LocalStorageGateway(receiver_config.base_path).base_path / "tmp" / result.id / "blob.bin"
        assert artifact.read_bytes() == data

    @pytest.mark.asyncio
    async def test_rejected_chunk_stops_transfer(self, sender_config, make_file):
        app = create_app(ReceiverConfig(max_chunk_size=9), storage=MemoryStorageGateway())

        async with TestClient(TestServer(app)) as client:
            async with ChunkSender(sender_config) as sender:
                result = await sender.send(str(client.make_url('/upload')), make_file(b"x" * 25))

        assert not result.success
        assert result.fatal
        assert result.status == 413
        assert result.error_kind is FailureKind.REJECTED
        assert result.chunks_sent == 0

    @pytest.mark.asyncio
    async def test_transport_wraps_connection_errors(self, unused_tcp_port):
        transport = AiohttpChunkTransport()
        request = ChunkRequest("abc", 1, 1, 1, "a.bin", b"x")
        try:
            with pytest.raises(TransportError):
                await transport.send_chunk(f"http://127.0.0.1:{unused_tcp_port}/upload", request)
        finally:
            await transport.close()

    @pytest.mark.asyncio
    async def test_transport_passes_headers(self):
        seen = {}

        async def capture(request):
            seen['auth'] = request.headers.get('Authorization')
            form = await request.post()
            seen['fields'] = {k: v for k, v in form.items() if isinstance(v, str)}
            seen['part'] = form['file'].filename
            return web.Response(status=200)

        app = web.Application()
        app.router.add_post('/upload', capture)
        request = ChunkRequest("abc", 2, 2, 12, "a.bin", b"payload")

        async with TestClient(TestServer(app)) as client:
            async with aiohttp.ClientSession() as session:
                transport = AiohttpChunkTransport(session=session)
                status = await transport.send_chunk(
                    str(client.make_url('/upload')), request, {'Authorization': 'Bearer t'}
                )
                await transport.close()
                assert not session.closed

        assert status == 200
        assert seen['auth'] == 'Bearer t'
        assert seen['part'] == 'a.bin_chunk_2'
        assert seen['fields'] == {
            'sessionId': 'abc',
            'isDone': 'true',
            'totalSize': '12',
            'totalChunks': '2',
            'filename': 'a.bin',
        }


class TestParseChunkForm:
    """Test suite for parse_chunk_form."""

    @staticmethod
    def form(payload):
        part = web.FileField(
            name='file',
            filename='report.pdf_chunk_2',
            file=io.BytesIO(payload),
            content_type='application/octet-stream',
            headers=CIMultiDictProxy(CIMultiDict())
        )
        return MultiDictProxy(MultiDict([
            ('fileGuid', 'abc'),
            ('isDone', 'true'),
            ('totalSize', '12'),
            ('totalChunks', '2'),
            ('filename', 'report.pdf'),
            ('file', part),
        ]))

    @pytest.mark.asyncio
    async def test_reads_part_in_executor(self):
        loop = asyncio.get_running_loop()

        with patch.object(loop, 'run_in_executor', wraps=loop.run_in_executor) as run_in_executor:
            chunk = await parse_chunk_form(self.form(b"second half!"))

        run_in_executor.assert_called_once()
        assert chunk.payload == b"second half!"
        assert chunk.ordinal == 2
        assert chunk.session_id == 'abc'
        assert chunk.is_last
