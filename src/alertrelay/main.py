"""
Alert Relay - FastAPI Application Entry Point
"""

import argparse
import sys
from contextlib import asynccontextmanager
from typing import List, Optional

import structlog
from fastapi import FastAPI
from prometheus_client import make_asgi_app

from alertrelay import __version__
from alertrelay.api.routes import alerts, health, ping
from alertrelay.core.config import (
    DEFAULT_CONFIG_PATH,
    DEFAULT_LISTEN_ADDRESS,
    Settings,
    load_settings,
    parse_listen_address,
)
from alertrelay.core.exceptions import ConfigurationError, TelegramError, TemplateLoadError
from alertrelay.core.logging import setup_logging
from alertrelay.delivery.coordinator import MessageSender
from alertrelay.telegram.client import TelegramBot
from alertrelay.telegram.listener import UpdateListener
from alertrelay.templating.renderer import TemplateRenderer, create_environment
from alertrelay.templating.store import TemplateStore

logger = structlog.get_logger()


def create_app(settings: Settings, bot: Optional[MessageSender] = None) -> FastAPI:
    """
    Build the application.

    The default template is loaded here, so a broken default template
    fails before anything is served. When no bot is given, one is
    created and authenticated at startup.

    Raises:
        TemplateLoadError: If the default template cannot be loaded
    """
    environment = create_environment(
        zone=settings.zone,
        date_format=settings.time_outdata,
        split_token=settings.split_token,
    )
    store = TemplateStore(
        settings.template_path,
        environment=environment,
        reload=settings.reload_templates,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan events."""
        # Startup
        logger.info("Starting Alert Relay", version=__version__, debug=settings.debug)

        owned_bot: Optional[TelegramBot] = None
        listener: Optional[UpdateListener] = None

        if app.state.bot is None:
            owned_bot = TelegramBot(
                settings.telegram_token.get_secret_value(),
                api_url=settings.telegram_api_url,
                timeout=settings.telegram_timeout,
            )
            try:
                await owned_bot.get_me()
            except TelegramError as e:
                logger.critical("Cannot authorise on Telegram", error=e.message)
                await owned_bot.close()
                raise
            logger.info("Authorised on account", username=owned_bot.username)
            app.state.bot = owned_bot

            if settings.listen_updates:
                listener = UpdateListener(owned_bot)
                listener.start()

        yield

        # Shutdown
        logger.info("Shutting down Alert Relay")
        if listener is not None:
            await listener.stop()
        if owned_bot is not None:
            await owned_bot.close()

    app = FastAPI(
        title="Alert Relay",
        description="Relays Prometheus Alertmanager notifications to Telegram",
        version=__version__,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.template_store = store
    app.state.renderer = TemplateRenderer()
    app.state.bot = bot

    # Mount Prometheus metrics endpoint
    app.mount("/metrics", make_asgi_app())

    app.include_router(health.router, tags=["Health"])
    app.include_router(alerts.router, tags=["Alerts"])
    app.include_router(ping.router, tags=["Ping"])

    return app


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="alertrelay",
        description="Relay Prometheus alerts to Telegram chats",
    )
    parser.add_argument("-c", dest="config", default=DEFAULT_CONFIG_PATH, help="Path to a config file")
    parser.add_argument(
        "-l",
        dest="listen",
        default=None,
        help=f"Listen address (default {DEFAULT_LISTEN_ADDRESS})",
    )
    parser.add_argument("-t", dest="template", default="", help="Path to a template file")
    parser.add_argument("-d", dest="debug", action="store_true", help="Debug template")
    return parser.parse_args(argv)


def run(argv: Optional[List[str]] = None) -> None:
    """Run the application using uvicorn."""
    import uvicorn

    args = parse_args(argv)

    try:
        settings = load_settings(
            config_path=args.config,
            template_path=args.template or None,
            listen_address=args.listen,
            debug=args.debug or None,
        )
    except ConfigurationError as e:
        setup_logging(debug=args.debug)
        logger.critical(e.message, code=e.code, **e.details)
        sys.exit(1)

    # debug may come from the config file as well as from -d
    setup_logging(debug=settings.debug)

    try:
        host, port = parse_listen_address(settings.listen_address)
        app = create_app(settings)
    except (ConfigurationError, TemplateLoadError) as e:
        logger.critical(e.message, code=e.code, **e.details)
        sys.exit(1)

    uvicorn.run(
        app,
        host=host,
        port=port,
        log_level="debug" if settings.debug else "info",
    )


if __name__ == "__main__":
    run()
