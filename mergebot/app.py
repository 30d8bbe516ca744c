"""
Webhook receiver.

A small FastAPI application that verifies GitHub webhook deliveries and runs
the merge engine for the pull requests they affect. Evaluation happens in a
background task so GitHub gets its response immediately.
"""

import json
import logging
import os
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Any

from fastapi import BackgroundTasks, FastAPI, Header, HTTPException, Request, status

from mergebot.async_client import AsyncGitHubClient
from mergebot.config import DEFAULT_CONFIG_PATH, ConfigLoader
from mergebot.engine import MergeEngine
from mergebot.exceptions import ConfigurationError, WebhookSignatureError
from mergebot.logging import get_logger
from mergebot.router import EventRouter, handles, resolve_targets
from mergebot.scheduler import RecheckConfig, RecheckScheduler
from mergebot.signing import verify_webhook_signature

logger = get_logger("webhook")

ClientFactory = Callable[[int | None], Any]


@dataclass
class Settings:
    """Process-level settings for the webhook receiver."""

    webhook_secret: str | None = None
    config_path: str = DEFAULT_CONFIG_PATH
    log_level: int = logging.INFO
    recheck: RecheckConfig = field(default_factory=RecheckConfig)

    @classmethod
    def from_env(cls) -> "Settings":
        """
        Read settings from the environment.

        Environment variables:
            GITHUB_WEBHOOK_SECRET: Shared secret for X-Hub-Signature-256
            MERGEBOT_CONFIG_PATH: Repository config file (default: .github/auto-merge.yml)
            MERGEBOT_LOG_LEVEL: Logging level name (default: INFO)
            MERGEBOT_RECHECK_DELAY / MERGEBOT_MAX_RECHECKS: see RecheckConfig

        Raises:
            ConfigurationError: If a value is invalid
        """
        level_name = os.environ.get("MERGEBOT_LOG_LEVEL", "INFO").upper()
        level = logging.getLevelName(level_name)
        if not isinstance(level, int):
            raise ConfigurationError(f"Invalid MERGEBOT_LOG_LEVEL: {level_name}")

        return cls(
            webhook_secret=os.environ.get("GITHUB_WEBHOOK_SECRET") or None,
            config_path=os.environ.get("MERGEBOT_CONFIG_PATH", DEFAULT_CONFIG_PATH),
            log_level=level,
            recheck=RecheckConfig.from_env(),
        )


def _default_client_factory(installation_id: int | None) -> AsyncGitHubClient:
    return AsyncGitHubClient.from_env(installation_id=installation_id)


class Dispatcher:
    """Keeps one client and router per installation for the life of the process.

    Clients outlive the delivery that created them because scheduled rechecks
    keep using them.
    """

    def __init__(
        self,
        settings: Settings,
        client_factory: ClientFactory,
        scheduler: RecheckScheduler,
    ) -> None:
        self.settings = settings
        self.client_factory = client_factory
        self.scheduler = scheduler
        self._clients: dict[int | None, Any] = {}
        self._routers: dict[int | None, EventRouter] = {}

    def router_for(self, installation_id: int | None) -> EventRouter:
        if installation_id not in self._routers:
            client = self.client_factory(installation_id)
            engine = MergeEngine(
                client,
                scheduler=self.scheduler,
                logger=get_logger("engine"),
                recheck=self.settings.recheck,
            )
            self._clients[installation_id] = client
            self._routers[installation_id] = EventRouter(
                engine, ConfigLoader(client, self.settings.config_path)
            )
        return self._routers[installation_id]

    async def dispatch(
        self, event: str, payload: dict[str, Any], delivery: str | None
    ) -> None:
        installation_id = (payload.get("installation") or {}).get("id")
        try:
            await self.router_for(installation_id).dispatch(event, payload)
        except Exception:
            logger.exception("Delivery %s (%s) failed", delivery, event)
            raise

    async def aclose(self) -> None:
        await self.scheduler.aclose()
        for client in self._clients.values():
            await client.close()
        self._clients.clear()
        self._routers.clear()


def create_app(
    settings: Settings | None = None,
    client_factory: ClientFactory | None = None,
    scheduler: RecheckScheduler | None = None,
) -> FastAPI:
    """
    Build the webhook application.

    Args:
        settings: Receiver settings (default: read from the environment)
        client_factory: Builds a GitHub client for an installation id
            (default: AsyncGitHubClient.from_env)
        scheduler: Scheduler for rechecks (default: a new RecheckScheduler)
    """
    settings = settings or Settings.from_env()
    dispatcher = Dispatcher(
        settings,
        client_factory or _default_client_factory,
        scheduler or RecheckScheduler(get_logger("scheduler")),
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await dispatcher.aclose()

    app = FastAPI(title="mergebot", lifespan=lifespan)
    app.state.dispatcher = dispatcher

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.post("/webhook", status_code=status.HTTP_202_ACCEPTED)
    async def webhook(
        request: Request,
        background_tasks: BackgroundTasks,
        x_github_event: str = Header(default=None),
        x_github_delivery: str = Header(default=None),
        x_hub_signature_256: str = Header(default=None),
    ) -> dict[str, Any]:
        body = await request.body()

        if settings.webhook_secret:
            try:
                verify_webhook_signature(settings.webhook_secret, body, x_hub_signature_256)
            except WebhookSignatureError as e:
                logger.warning("Rejected delivery %s: %s", x_github_delivery, e.message)
                raise HTTPException(
                    status_code=status.HTTP_401_UNAUTHORIZED, detail=e.message
                ) from e

        if not x_github_event:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail="X-GitHub-Event header missing"
            )

        try:
            payload = json.loads(body.decode("utf-8") or "{}")
        except ValueError as e:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail="Body is not valid JSON"
            ) from e

        if not isinstance(payload, dict):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail="Body must be a JSON object"
            )

        if not handles(x_github_event, payload.get("action")):
            return {"status": "ignored"}

        targets = resolve_targets(x_github_event, payload)
        logger.info(
            "Delivery %s: %s.%s -> %s",
            x_github_delivery,
            x_github_event,
            payload.get("action"),
            ", ".join(str(t) for t in targets) or "no pull requests",
        )
        background_tasks.add_task(
            dispatcher.dispatch, x_github_event, payload, x_github_delivery
        )
        return {"status": "accepted", "targets": len(targets)}

    return app
