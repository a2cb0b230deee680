#run it with uvicorn contact_relay.main:app --reload
import logging
import os
from contextlib import asynccontextmanager
from typing import Optional

import httpx
import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from contact_relay.api.api_router import api_router
from contact_relay.core.config import Settings, get_settings
from contact_relay.core.errors import ContactError
from contact_relay.core.middleware import CORSHeadersMiddleware
from contact_relay.core.slack_notifier import SlackNotifier

# Set up logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

# Load environment variables from .env file
load_dotenv()

logger = logging.getLogger(__name__)


async def contact_error_handler(request: Request, exc: ContactError):
    """Render pipeline errors as {"error": ...} without internal details"""
    return JSONResponse(status_code=exc.status_code, content={"error": exc.public_message})


def create_app(settings: Optional[Settings] = None, transport: Optional[httpx.AsyncBaseTransport] = None) -> FastAPI:
    """
    Build the application.

    Args:
        settings: Configuration read once at startup (defaults to get_settings())
        transport: Optional httpx transport for the Slack notifier
    """
    if settings is None:
        settings = get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"🚀 Server started: http://localhost:{settings.port}")
        if not settings.webhook_configured:
            logger.warning("⚠️ SLACK_WEBHOOK_URL is not set - contact submissions will only be logged")
            logger.warning("   Set it with: SLACK_WEBHOOK_URL=https://hooks.slack.com/... contact-relay")
        yield

    app = FastAPI(title="Contact Relay", version="1.0.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.notifier = SlackNotifier(settings.slack_webhook_url, timeout=settings.webhook_timeout, transport=transport)

    app.add_middleware(CORSHeadersMiddleware)
    app.add_exception_handler(ContactError, contact_error_handler)

    app.include_router(api_router)

    @app.get("/api/health")
    def health_check():
        """Health check endpoint."""
        return {
            "status": "ok",
            "slack_webhook_configured": settings.webhook_configured,
        }

    # Static files last so API routes win
    if os.path.isdir(settings.static_dir):
        app.mount("/", StaticFiles(directory=settings.static_dir, html=True), name="static")
    else:
        logger.warning(f"Static directory not found, static files disabled: {settings.static_dir}")

    return app


app = create_app()


def main():
    settings = get_settings()
    logging.getLogger().setLevel(settings.log_level.upper())
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
