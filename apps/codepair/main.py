import logging

import socketio
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Environment is loaded by Pydantic Settings (see codepair.core.settings).
from codepair.api import register_routes
from codepair.core.dependencies import get_session_protocol_handler, get_socketio_server
from codepair.core.exceptions import register_exception_handlers
from codepair.core.logging import setup_logging
from codepair.core.settings import settings
from codepair.realtime.socketio import register_session_events

# Initialize logging early so all modules inherit the handlers/level
setup_logging(settings.log_level or settings.log_level_fallback)

app = FastAPI(title="codepair API")
register_exception_handlers(app)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)

register_routes(app)

sio = get_socketio_server()
register_session_events(sio, get_session_protocol_handler())

# Socket.IO sits in front of FastAPI: it answers both Engine.IO long-polling
# and WebSocket upgrades on its path and forwards everything else.
application = socketio.ASGIApp(
    sio,
    other_asgi_app=app,
    socketio_path=settings.socketio_path,
)

logger = logging.getLogger(__name__)
logger.info("codepair API initialized (socket.io path: /%s)", settings.socketio_path)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "codepair.main:application",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
