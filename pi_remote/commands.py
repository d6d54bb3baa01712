"""One-shot remote command dispatch."""

from __future__ import annotations

import logging
from typing import Mapping, Optional, Union

from .core import (
    VOLUME_DIRECTIONS,
    ActionRoute,
    CommandAction,
    CommandOutcome,
    CommandRequest,
    HttpTransport,
    PiRemoteError,
    ProtocolError,
    send_request,
)

LOGGER = logging.getLogger(__name__)

ActionLike = Union[CommandAction, CommandRequest, str]


def _standard(action: CommandAction) -> ActionRoute:
    return ActionRoute(method="POST", path=f"/{action.value}")


ACTION_ROUTES: Mapping[CommandAction, ActionRoute] = {
    CommandAction.MAKE_NOTE: _standard(CommandAction.MAKE_NOTE),
    CommandAction.SEND_SMS: _standard(CommandAction.SEND_SMS),
    CommandAction.SHOW_NEWS: _standard(CommandAction.SHOW_NEWS),
    CommandAction.GIVE_ALPHA: _standard(CommandAction.GIVE_ALPHA),
    CommandAction.GIVE_TRANSLATION: _standard(CommandAction.GIVE_TRANSLATION),
    CommandAction.FETCH_CAMERA: _standard(CommandAction.FETCH_CAMERA),
    CommandAction.HOME_AUTO: ActionRoute("POST", "/home_auto", reports_outcome=False),
    CommandAction.SPOTIFY_PLAY: ActionRoute(
        "GET", "/spotify_play", reports_outcome=False
    ),
    CommandAction.ADJUST_VOLUME_UP: ActionRoute("POST", "/adjust_volume/up"),
    CommandAction.ADJUST_VOLUME_DOWN: ActionRoute("POST", "/adjust_volume/down"),
}


def success_message(action: CommandAction) -> str:
    return f"{action.label} action successful."


def failure_message(action: CommandAction) -> str:
    return f"Failed to perform {action.label}. Please try again."


class CommandDispatcher:
    """Sends user-triggered actions to the home server.

    Every dispatch issues exactly one request and never retries. Status 200
    is success; anything else, including a transport failure, is reported as
    a failed :class:`CommandOutcome` rather than raised. Fire-and-forget
    actions (``home_auto``, ``spotify_play``) report nothing once the server
    answered, whatever the status.

    The dispatcher holds no mutable state, so concurrent dispatches are
    independent and may complete in any order.
    """

    def __init__(
        self,
        transport: HttpTransport,
        *,
        request_timeout: Optional[float] = None,
    ) -> None:
        self._transport = transport
        self._request_timeout = request_timeout

    async def dispatch(self, action: ActionLike) -> Optional[CommandOutcome]:
        """Send one action.

        Returns:
            The outcome, or None for a fire-and-forget action that reached
            the server.

        Raises:
            ValueError: If ``action`` names no known action. Nothing is sent.
        """
        request = (
            action
            if isinstance(action, CommandRequest)
            else CommandRequest(CommandAction.parse(action))
        )
        command = request.action
        route = ACTION_ROUTES[command]

        LOGGER.debug("Dispatching %s via %s %s", command.value, route.method, route.path)

        try:
            response = await send_request(
                self._transport,
                route.method,
                route.path,
                timeout=self._request_timeout,
            )
        except PiRemoteError as exc:
            LOGGER.warning("Action %s failed: %s", command.value, exc)
            return CommandOutcome(
                succeeded=False,
                action=command,
                message=f"An error occurred: {exc}",
                error=exc,
            )

        if not route.reports_outcome:
            LOGGER.info(
                "Action %s sent (status %d not inspected)", command.value, response.status
            )
            return None

        if response.ok:
            LOGGER.info("Action %s succeeded", command.value)
            return CommandOutcome(
                succeeded=True,
                action=command,
                message=success_message(command),
                status=response.status,
            )

        error = ProtocolError(response.status, response.text().strip()[:200])
        LOGGER.warning("Action %s failed: %s", command.value, error)
        return CommandOutcome(
            succeeded=False,
            action=command,
            message=failure_message(command),
            status=response.status,
            error=error,
        )

    async def adjust_volume(self, direction: str) -> Optional[CommandOutcome]:
        """Raise or lower the volume; any direction but up/down is ignored."""
        if not isinstance(direction, str) or direction not in VOLUME_DIRECTIONS:
            LOGGER.debug("Ignoring volume adjustment with direction %r", direction)
            return None
        return await self.dispatch(CommandAction.for_volume(direction))

    async def make_note(self) -> Optional[CommandOutcome]:
        return await self.dispatch(CommandAction.MAKE_NOTE)

    async def send_sms(self) -> Optional[CommandOutcome]:
        return await self.dispatch(CommandAction.SEND_SMS)

    async def show_news(self) -> Optional[CommandOutcome]:
        return await self.dispatch(CommandAction.SHOW_NEWS)

    async def give_alpha(self) -> Optional[CommandOutcome]:
        return await self.dispatch(CommandAction.GIVE_ALPHA)

    async def give_translation(self) -> Optional[CommandOutcome]:
        return await self.dispatch(CommandAction.GIVE_TRANSLATION)

    async def fetch_camera(self) -> Optional[CommandOutcome]:
        return await self.dispatch(CommandAction.FETCH_CAMERA)

    async def home_auto(self) -> Optional[CommandOutcome]:
        return await self.dispatch(CommandAction.HOME_AUTO)

    async def spotify_play(self) -> Optional[CommandOutcome]:
        return await self.dispatch(CommandAction.SPOTIFY_PLAY)
