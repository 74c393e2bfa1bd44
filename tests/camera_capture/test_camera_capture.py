"""Tests for the camera capture session."""

from camera_capture.core import CAMERA_ERROR_MESSAGE, CameraSession


class FakeTrack:
    def __init__(self):
        self.stopped = False

    def stop(self):
        self.stopped = True


class FakeStream:
    def __init__(self, n_tracks: int = 2):
        self.tracks = [FakeTrack() for _ in range(n_tracks)]

    def get_tracks(self):
        return self.tracks


class TestCameraSession:
    async def test_start_and_stop_release_all_tracks(self, session):
        stream = FakeStream()

        async def acquire():
            return stream

        camera = CameraSession(acquire, session)
        assert await camera.start()
        assert camera.is_on

        camera.stop()

        assert not camera.is_on
        assert all(track.stopped for track in stream.tracks)

    async def test_restart_releases_previous_stream(self, session):
        streams = [FakeStream(), FakeStream()]

        async def acquire():
            return streams.pop(0)

        camera = CameraSession(acquire, session)
        await camera.start()
        first = camera.stream
        await camera.start()

        assert all(track.stopped for track in first.tracks)
        assert camera.stream is not first

    async def test_teardown_releases_stream(self, session):
        stream = FakeStream()

        async def acquire():
            return stream

        async with CameraSession(acquire, session) as camera:
            await camera.start()

        assert all(track.stopped for track in stream.tracks)
        assert not camera.is_on

    async def test_start_failure_sets_error(self, session):
        async def acquire():
            raise PermissionError("Permission denied")

        camera = CameraSession(acquire, session)

        assert not await camera.start()

        assert camera.camera_error == CAMERA_ERROR_MESSAGE
        assert not camera.is_on
        assert session.notifications.messages("error") == ["Permission denied"]
