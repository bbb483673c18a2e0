"""
HTTP receiver endpoint.

Exposes a ChunkReceiver through aiohttp.web. Outcomes travel as status
codes; the JSON body is informational only.
"""
from http import HTTPStatus
from typing import Optional

from aiohttp import web

from ..core.config import ReceiverConfig
from ..core.exceptions import ValidationError
from ..core.logging import get_logger
from ..core.receiver import ChunkReceiver, ChunkReceipt
from ..core.storage import LocalStorageGateway, StorageGateway
from .forms import parse_chunk_form, session_id_of

logger = get_logger('server')

RECEIVER_KEY = web.AppKey('receiver', ChunkReceiver)


def _receipt_response(receipt: ChunkReceipt) -> web.Response:
    return web.json_response(
        {
            'sessionId': receipt.session_id,
            'accepted': receipt.accepted,
            'message': receipt.message,
        },
        status=int(receipt.status)
    )


async def handle_chunk(request: web.Request) -> web.Response:
    """Receive one chunk posted as a multipart form."""
    receiver = request.app[RECEIVER_KEY]
    form = await request.post()
    try:
        chunk = await parse_chunk_form(form)
    except ValidationError as e:
        session_id = session_id_of(form)
        logger.warning(f"Malformed chunk request from {request.remote} for session {session_id!r}: {e}")
        return _receipt_response(ChunkReceipt.rejected(session_id, e, HTTPStatus.NOT_FOUND))

    receipt = await receiver.receive_chunk(chunk)
    return _receipt_response(receipt)


async def handle_chunk_size(request: web.Request) -> web.Response:
    """Advertise the largest chunk this receiver accepts."""
    receiver = request.app[RECEIVER_KEY]
    return web.json_response({'chunkSize': receiver.config.max_chunk_size})


async def handle_session(request: web.Request) -> web.Response:
    """Report the state of one session."""
    receiver = request.app[RECEIVER_KEY]
    session = receiver.session(request.match_info['session_id'])
    if session is None:
        raise web.HTTPNotFound(text='Upload session not found')
    return web.json_response(session.to_dict())


def create_app(
    config: Optional[ReceiverConfig] = None,
    storage: Optional[StorageGateway] = None,
    receiver: Optional[ChunkReceiver] = None
) -> web.Application:
    """
    Build the receiver application.

    Args:
        config: Receiver configuration
        storage: Storage gateway (local disk under config.base_path by default)
        receiver: Pre-built receiver; overrides config and storage

    Returns:
        aiohttp Application with the chunk routes registered
    """
    if receiver is None:
        config = config or ReceiverConfig()
        receiver = ChunkReceiver(storage or LocalStorageGateway(config.base_path), config)
    config = receiver.config

    app = web.Application(client_max_size=config.max_request_size)
    app[RECEIVER_KEY] = receiver

    route = config.route.rstrip('/')
    app.router.add_post(route or '/', handle_chunk)
    # Registered before the session route so it is not taken for a session id
    app.router.add_get(f"{route}/chunk-size", handle_chunk_size)
    app.router.add_get(f"{route}/{{session_id}}", handle_session)
    return app


def run_server(config: ReceiverConfig, host: str = '127.0.0.1', port: int = 8080) -> None:
    """Run the receiver until interrupted."""
    app = create_app(config)
    logger.info(f"Receiving chunks on http://{host}:{port}{config.route} into {config.base_path}")
    web.run_app(app, host=host, port=port, print=None)
