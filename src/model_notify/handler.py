"""Turn-end hook that announces model switches.

On every finished turn the active provider, model and last-good auth
profile are folded into a signature. When the signature differs from the
one last seen, a ``Model switch -> provider/model @ profile`` message is
sent. State lives on the handler instance and is never persisted, so a
restarted process announces its current model on the first turn.

Usage:
    handler = register(api)  # subscribes to "turn_end"
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Callable, Mapping, Optional

from model_notify.auth_profiles import resolve_last_good_profile
from model_notify.notifications import TelegramNotifier, WarnOnce
from model_notify.protocols import ExtensionAPI, TurnContextLike, TurnEndEventLike
from model_notify.signature import build_signature, format_switch_message
from model_notify.target import DeliveryTarget, resolve_delivery_target

logger = logging.getLogger(__name__)

TURN_END_EVENT = "turn_end"


@dataclass
class LastReported:
    """Signature and run key of the most recently processed turn."""

    signature: Optional[str] = None
    run_key: Optional[str] = None


class TurnEndHandler:
    """Detects model identity changes between turns and notifies once each.

    Turns are processed one at a time, so a slow delivery can't let a
    later turn compare against a stale signature.
    """

    def __init__(
        self,
        notifier: Optional[TelegramNotifier] = None,
        resolve_target: Optional[Callable[[], DeliveryTarget]] = None,
        resolve_profile: Optional[Callable[[str], Optional[str]]] = None,
        env: Optional[Mapping[str, str]] = None,
    ):
        """Initialize TurnEndHandler.

        Args:
            notifier: Message sender. A TelegramNotifier is created if None.
            resolve_target: Returns a fresh DeliveryTarget per notification.
            resolve_profile: Maps a provider id to its last-good profile.
            env: Environment mapping for the default resolvers.
        """
        self._notifier = notifier or TelegramNotifier()
        self._resolve_target = resolve_target or (
            lambda: resolve_delivery_target(env=env)
        )
        self._resolve_profile = resolve_profile or (
            lambda provider: resolve_last_good_profile(provider, env=env)
        )
        self._last_reported = LastReported()
        self._lock = asyncio.Lock()
        self._tasks: set[asyncio.Task] = set()

    @property
    def last_reported(self) -> LastReported:
        return self._last_reported

    @property
    def warn(self) -> WarnOnce:
        """Warning sink shared with the notifier."""
        return self._notifier.warn

    async def handle(self, event: TurnEndEventLike, ctx: TurnContextLike) -> bool:
        """Process one finished turn.

        Args:
            event: The turn-end event.
            ctx: Context carrying the active model and session id.

        Returns:
            True if the model identity changed and a send was attempted.
        """
        model = ctx.model
        if model is None:
            return False
        provider = model.provider
        model_id = model.id
        if not provider or not model_id:
            return False

        async with self._lock:
            # Store and log reads are blocking file I/O
            profile_id = await asyncio.to_thread(self._resolve_profile, provider)
            signature = build_signature(provider, model_id, profile_id)
            run_key = f"{ctx.session_id}:{event.turn_index}"

            if self._last_reported.signature == signature:
                self._last_reported.run_key = run_key
                logger.debug("Model unchanged (%s) at %s", signature, run_key)
                return False

            logger.info("Model switch detected: %s", signature)
            message = format_switch_message(provider, model_id, profile_id)
            try:
                target = await asyncio.to_thread(self._resolve_target)
                await self._notifier.send(target, message)
            finally:
                # At most one attempt per change, even if it failed
                self._last_reported = LastReported(signature=signature, run_key=run_key)
            return True

    def on_turn_end(
        self, event: TurnEndEventLike, ctx: TurnContextLike
    ) -> Optional[asyncio.Task]:
        """Event callback for the host. Schedules ``handle`` and returns.

        Returns:
            The scheduled task, or None when no loop was running and the
            turn was processed inline.
        """
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            try:
                asyncio.run(self.handle(event, ctx))
            except Exception as e:
                self._report_failure(e)
            return None

        task = loop.create_task(self.handle(event, ctx))
        self._tasks.add(task)
        task.add_done_callback(self._on_task_done)
        return task

    def _on_task_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            self._report_failure(exc)

    def _report_failure(self, exc: BaseException) -> None:
        self.warn(
            f"turn-end-{type(exc).__name__}",
            f"[model-notify] Turn-end handler failed: {exc!r}",
        )

    async def drain(self) -> None:
        """Wait for scheduled turns to finish."""
        if self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def close(self) -> None:
        """Wait for pending turns and release the notifier's session."""
        await self.drain()
        await self._notifier.close()


def register(
    api: ExtensionAPI, handler: Optional[TurnEndHandler] = None
) -> TurnEndHandler:
    """Subscribe a TurnEndHandler to the host's turn-end event.

    Args:
        api: Host extension API.
        handler: Handler to register. A default one is created if None.

    Returns:
        The registered handler.
    """
    handler = handler or TurnEndHandler()
    api.on(TURN_END_EVENT, handler.on_turn_end)
    logger.debug("Registered model switch notifier for %s", TURN_END_EVENT)
    return handler
