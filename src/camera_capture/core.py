"""
Camera capture for the live beauty coach.

A CameraSession exclusively owns one media stream. The stream is released
(every track stopped) on stop() and whenever the owning view is torn down,
which is modelled as leaving the session's async context.
"""

from collections.abc import Awaitable, Callable, Sequence
from typing import Protocol

from common.logging_config import get_logger
from common.session import SessionContext

logger = get_logger("camera_capture")

CAMERA_ERROR_MESSAGE = "Could not start camera."


class MediaTrack(Protocol):
    def stop(self) -> None: ...


class MediaStream(Protocol):
    def get_tracks(self) -> Sequence[MediaTrack]: ...


StreamAcquirer = Callable[[], Awaitable[MediaStream]]


class CameraSession:
    def __init__(self, acquire: StreamAcquirer, session: SessionContext):
        self._acquire = acquire
        self.session = session
        self.stream: MediaStream | None = None
        self.camera_error: str | None = None

    @property
    def is_on(self) -> bool:
        return self.stream is not None

    def _release(self) -> None:
        if self.stream is None:
            return
        for track in self.stream.get_tracks():
            track.stop()
        self.stream = None
        logger.debug("Camera stream released")

    async def start(self) -> bool:
        self._release()
        self.camera_error = None
        try:
            self.stream = await self._acquire()
        except Exception as e:
            self.camera_error = CAMERA_ERROR_MESSAGE
            self.session.errors.handle(e)
            return False
        logger.info("Camera started")
        return True

    def stop(self) -> None:
        self._release()

    async def __aenter__(self) -> "CameraSession":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self._release()
