# contact_relay/main.py
from contextlib import asynccontextmanager
import logging

import uvicorn
from fastapi import FastAPI

from contact_relay.core.cors import StrictCORSMiddleware
from contact_relay.core.errors import register_exception_handlers
from contact_relay.core.mailer import init_transport
from contact_relay.core.rate_limit import RateLimitMiddleware
from contact_relay.core.settings import settings
from contact_relay.routers.contact import router as contact_router
from contact_relay.routers.health import router as health_router

log = logging.getLogger("uvicorn.error")


def configure_logging(level: int = logging.INFO) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_transport()
    log.info(f"Server running in {settings.environment} mode on port {settings.port}")
    yield


app = FastAPI(title=settings.api_title, lifespan=lifespan)

# Last added runs first: CORS wraps the limiter
app.add_middleware(RateLimitMiddleware, paths=("/send-email",))
app.add_middleware(
    StrictCORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_methods=["POST", "OPTIONS"],
    allow_headers=["Content-Type"],
)

register_exception_handlers(app)

# Routers
app.include_router(contact_router)
app.include_router(health_router)


def run() -> None:
    configure_logging()
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
