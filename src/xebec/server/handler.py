"""ASGI handler — translates ASGI scope/messages to xebec types.

The only component that touches raw ASGI directly. Converts the scope
to a typed Request, hands it to the dispatcher, and sends the Response
back through ASGI send().
"""

import logging

from xebec._internal.asgi import Receive, Scope, Send
from xebec.http.request import Request
from xebec.server.dispatch import Dispatcher
from xebec.server.sender import send_response

logger = logging.getLogger("xebec.server")


async def handle_lifespan(receive: Receive, send: Send) -> None:
    """Acknowledge startup and shutdown; there is nothing to set up."""
    while True:
        message = await receive()
        match message["type"]:
            case "lifespan.startup":
                await send({"type": "lifespan.startup.complete"})
            case "lifespan.shutdown":
                await send({"type": "lifespan.shutdown.complete"})
                return


async def handle_request(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    dispatcher: Dispatcher,
) -> None:
    """Process a single ASGI connection scope."""
    match scope["type"]:
        case "http":
            request = Request.from_asgi(scope, receive)
            response = await dispatcher.dispatch(request)
            await send_response(response, send)
        case "lifespan":
            await handle_lifespan(receive, send)
        case other:
            logger.debug("Ignoring unsupported ASGI scope type %r", other)
