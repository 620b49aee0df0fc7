"""Tests for file stream provisioning."""

import pytest
from structlog.testing import capture_logs

from reportwire.errors import StreamProvisionError
from reportwire.streams import FileStream, create_stream


class TestCreateStream:
    """Test opening formatter output files."""

    @pytest.mark.asyncio
    async def test_creates_parent_directories(self, temp_dir):
        """Nested targets get their directory created."""
        stream, directory = await create_stream("reports/deep/out.txt", lambda: None, temp_dir)

        assert isinstance(stream, FileStream)
        assert directory == (temp_dir / "reports" / "deep").resolve()
        assert directory.is_dir()
        await stream.close()

    @pytest.mark.asyncio
    async def test_writes_reach_file_after_close(self, temp_dir):
        stream, _ = await create_stream("out.txt", lambda: None, temp_dir)

        stream.write("hello ")
        stream.write("world")
        await stream.close()

        assert (temp_dir / "out.txt").read_text() == "hello world"
        assert stream.closed is True

    @pytest.mark.asyncio
    async def test_absolute_target(self, temp_dir):
        target = temp_dir / "abs.txt"

        stream, directory = await create_stream(str(target), lambda: None, "/")

        assert stream.path == target.resolve()
        assert directory == temp_dir.resolve()
        await stream.close()

    @pytest.mark.asyncio
    async def test_file_not_tty(self, temp_dir):
        stream, _ = await create_stream("out.txt", lambda: None, temp_dir)

        assert stream.isatty() is False
        await stream.close()

    @pytest.mark.asyncio
    async def test_open_failure_raises(self, temp_dir):
        """A target that is a directory cannot be opened."""
        (temp_dir / "taken").mkdir()

        with pytest.raises(StreamProvisionError) as exc_info:
            await create_stream("taken", lambda: None, temp_dir)

        assert exc_info.value.target == "taken"

    @pytest.mark.asyncio
    async def test_directory_failure_logged(self, temp_dir):
        """A file in place of the parent directory is logged, then open fails."""
        (temp_dir / "blocker").write_text("")

        with capture_logs() as logs:
            with pytest.raises(StreamProvisionError):
                await create_stream("blocker/out.txt", lambda: None, temp_dir)

        assert any(log["event"] == "formatter_directory_failed" for log in logs)


class TestFileStream:
    """Test write error reporting."""

    @pytest.mark.asyncio
    async def test_write_error_reported_not_raised(self, temp_dir):
        errors = []
        stream, _ = await create_stream("out.txt", lambda: errors.append("error"), temp_dir)
        await stream.close()

        with capture_logs() as logs:
            stream.write("late")

        assert errors == ["error"]
        assert any(log["event"] == "formatter_stream_error" for log in logs)
