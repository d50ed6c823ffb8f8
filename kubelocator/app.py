"""Application bootstrap for the kubelocator service.

Startup order: config -> logging -> K8s client -> locator -> REST
Shutdown runs in reverse order; a failing teardown step is logged and does
not stop the remaining steps.
"""

from __future__ import annotations

import asyncio
import signal
from typing import TYPE_CHECKING

from kubelocator.config import load_config
from kubelocator.models.config import LocatorConfig
from kubelocator.observability.logging import get_logger, setup_logging

if TYPE_CHECKING:
    import structlog
    from kubernetes_asyncio.client import ApiClient  # type: ignore[import-untyped]

    from kubelocator.locator.service import ObjectLocatorService

_SHUTDOWN_GRACE_SECONDS = 15


class ComponentError(Exception):
    """Raised when a mandatory component fails to start."""

    def __init__(self, component: str, cause: Exception) -> None:
        super().__init__(f"Component '{component}' failed to start: {cause}")
        self.component = component
        self.cause = cause


class LocatorApp:
    """Application root.  Owns the K8s client, the locator and the REST server.

    ``stop()`` is safe to call on an app that was never started or is already
    stopped.
    """

    def __init__(self, config: LocatorConfig | None = None) -> None:
        self.config = config
        self.locator: ObjectLocatorService | None = None
        self._api_client: ApiClient | None = None
        self._rest_server: object | None = None
        self._background_tasks: list[asyncio.Task[None]] = []
        self._running = False
        self._log: structlog.stdlib.BoundLogger | None = None

    # ------------------------------------------------------------------
    # Startup
    # ------------------------------------------------------------------

    async def start(self, serve: bool = True) -> None:
        """Start components in dependency order.

        With ``serve=False`` only the locator is wired (used by the CLI).
        Raises ComponentError if a component cannot start.
        """
        if self.config is None:
            self.config = load_config()

        setup_logging(self.config.log.level, self.config.log.format)
        self._log = get_logger("app")
        self._log.info("kubelocator starting", version=_kubelocator_version())

        await self._start_k8s_client()
        await self._start_locator()
        if serve:
            await self._start_rest()

        self._running = True
        self._log.info("kubelocator started", serving=serve)

    async def _start_k8s_client(self) -> None:
        assert self._log is not None
        assert self.config is not None
        self._log.debug("starting k8s client")
        try:
            from kubernetes_asyncio.client import ApiClient

            from kubelocator.k8s.client import load_kube_configuration

            await load_kube_configuration(self.config.kubernetes.kubeconfig)
            self._api_client = ApiClient()
        except Exception as exc:
            raise ComponentError("k8s_client", exc) from exc

    async def _start_locator(self) -> None:
        assert self._log is not None
        assert self.config is not None
        assert self._api_client is not None
        self._log.debug("starting locator")
        try:
            from kubelocator.k8s.client import build_locator

            self.locator = await build_locator(self._api_client, self.config)
            self._log.info("locator started", max_candidates=self.config.traversal.max_candidates)
        except Exception as exc:
            raise ComponentError("locator", exc) from exc

    async def _start_rest(self) -> None:
        """Start the uvicorn REST server."""
        assert self._log is not None
        assert self.config is not None
        self._log.debug("starting rest api")
        try:
            import uvicorn

            from kubelocator.api import create_app

            fastapi_app = create_app(locator=self.locator, config=self.config)
            uv_config = uvicorn.Config(
                app=fastapi_app,
                host="0.0.0.0",
                port=self.config.api.port,
                log_config=None,  # structlog handles all logging
                access_log=False,
            )
            server = uvicorn.Server(uv_config)
            task = asyncio.create_task(server.serve(), name="rest-server")
            self._background_tasks.append(task)
            self._rest_server = server
            self._log.info("rest api started", port=self.config.api.port)
        except Exception as exc:
            raise ComponentError("rest", exc) from exc

    # ------------------------------------------------------------------
    # Shutdown
    # ------------------------------------------------------------------

    async def stop(self) -> None:
        """Stop components in reverse startup order."""
        if not self._running and self._log is None:
            return

        log = self._log or get_logger("app")
        log.info("kubelocator shutting down")
        self._running = False

        if self._rest_server is not None:
            self._rest_server.should_exit = True  # type: ignore[attr-defined]
        if self._background_tasks:
            try:
                await asyncio.wait_for(
                    asyncio.gather(*self._background_tasks, return_exceptions=True),
                    timeout=_SHUTDOWN_GRACE_SECONDS,
                )
            except TimeoutError:
                log.warning("rest server stop timed out", timeout=_SHUTDOWN_GRACE_SECONDS)
                for task in self._background_tasks:
                    task.cancel()
        self._background_tasks.clear()
        self._rest_server = None
        self.locator = None

        if self._api_client is not None:
            try:
                await self._api_client.close()
            except Exception as exc:
                log.debug("k8s client close raised (non-fatal)", error=str(exc))
            self._api_client = None

        log.info("kubelocator stopped")


def _kubelocator_version() -> str:
    from kubelocator import __version__

    return __version__


# ---------------------------------------------------------------------------
# Async entrypoint
# ---------------------------------------------------------------------------


async def main() -> None:
    """Start the service and serve until SIGTERM/SIGINT or until the REST server exits.

    Exits non-zero when a component fails to start or the REST server stops
    without being asked to.
    """
    app = LocatorApp()
    log = get_logger("app")
    stop_requested = asyncio.Event()

    def _on_signal(sig: signal.Signals) -> None:
        if not stop_requested.is_set():
            log.info("shutdown requested", signal=sig.name)
            stop_requested.set()

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGTERM, signal.SIGINT):
        loop.add_signal_handler(sig, _on_signal, sig)

    try:
        await app.start()
    except ComponentError as exc:
        log.critical("fatal startup error", component=exc.component, error=str(exc.cause))
        await app.stop()
        raise SystemExit(1) from exc

    signalled = asyncio.create_task(stop_requested.wait(), name="shutdown-signal")
    try:
        done, _ = await asyncio.wait([signalled, *app._background_tasks], return_when=asyncio.FIRST_COMPLETED)
    finally:
        signalled.cancel()
        await app.stop()

    if signalled not in done:
        log.error("rest server exited unexpectedly", port=app.config.api.port if app.config else None)
        raise SystemExit(1)
