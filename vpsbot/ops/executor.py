"""Allow-listed external command runner.

Every program name is checked against a fixed allow-list before anything is
spawned. Children run in their own process group with stderr merged into
stdout. The group is killed on timeout or cancellation, and any member still
running when the leader exits is killed too, so no privileged process outlives
the request.
"""

import asyncio
import logging
import os
import signal
from dataclasses import dataclass
from typing import Optional

from vpsbot.core.errors import (
    CommandFailedError,
    CommandNotAllowedError,
    CommandTimeoutError,
    ExecutionError,
    PrivilegeError,
)

logger = logging.getLogger(__name__)

DEFAULT_ALLOWED = ("apt-get",)
DEFAULT_TIMEOUT = 600  # 10 minutes
READ_CHUNK = 4096
EXIT_POLL_INTERVAL = 0.1


@dataclass(frozen=True)
class ExecutionResult:
    output: bytes = b""
    error: Optional[ExecutionError] = None

    @property
    def ok(self):
        return self.error is None

    def text(self):
        return self.output.decode("utf-8", errors="replace")


class PrivilegedExecutor:
    def __init__(self, allowed=DEFAULT_ALLOWED, timeout=DEFAULT_TIMEOUT, env=None, geteuid=None):
        self.allowed = frozenset(allowed)
        self.timeout = timeout
        self.env = dict(os.environ, DEBIAN_FRONTEND="noninteractive") if env is None else env
        self._geteuid = geteuid or os.geteuid

    def check(self, program, privileged=False):
        """Raise if `program` may not be spawned right now."""
        if program not in self.allowed:
            raise CommandNotAllowedError(program)
        if privileged and self._geteuid() != 0:
            raise PrivilegeError("must run as root")

    async def run(self, program, *args, privileged=False):
        """Run one allow-listed program and capture its combined output."""
        try:
            self.check(program, privileged)
        except ExecutionError as e:
            logger.warning("refused %s: %s", program, e)
            return ExecutionResult(error=e)

        argv = (program, *args)
        logger.info("running %s", " ".join(argv))
        buffer = bytearray()
        try:
            proc = await asyncio.create_subprocess_exec(
                *argv,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.STDOUT,
                env=self.env,
                start_new_session=True,
            )
        except OSError as e:
            return ExecutionResult(error=ExecutionError(f"cannot start {program}: {e}"))

        try:
            returncode = await asyncio.wait_for(_communicate(proc, buffer), timeout=self.timeout)
        except asyncio.TimeoutError:
            await _kill(proc)
            logger.warning("%s timed out after %ss, killed process group %s", program, self.timeout, proc.pid)
            return ExecutionResult(bytes(buffer), CommandTimeoutError(argv, self.timeout))
        except asyncio.CancelledError:
            await _kill(proc)
            raise

        if returncode != 0:
            logger.warning("%s exited with status %s", " ".join(argv), returncode)
            return ExecutionResult(bytes(buffer), CommandFailedError(argv, returncode))
        logger.info("%s finished", program)
        return ExecutionResult(bytes(buffer))

    async def run_sequence(self, steps, privileged=False):
        """Run argv lists in order, stopping at the first failure.

        The returned output holds everything produced up to and including
        the failing step.
        """
        steps = [tuple(step) for step in steps]
        # Refuse the whole sequence up front rather than after earlier steps ran.
        for step in steps:
            try:
                self.check(step[0], privileged)
            except ExecutionError as e:
                logger.warning("refused %s: %s", step[0], e)
                return ExecutionResult(error=e)

        output = bytearray()
        for step in steps:
            result = await self.run(*step, privileged=privileged)
            output.extend(result.output)
            if not result.ok:
                return ExecutionResult(bytes(output), result.error)
        return ExecutionResult(bytes(output))


async def _communicate(proc, buffer):
    reader = asyncio.ensure_future(_pump(proc.stdout, buffer))
    try:
        while not reader.done():
            if proc.returncode is not None:
                # Leader is gone; whatever still holds the pipe is a leftover
                # member of its session.
                _killpg(proc)
                break
            await asyncio.wait({reader}, timeout=EXIT_POLL_INTERVAL)
        await reader
        return await proc.wait()
    finally:
        reader.cancel()


async def _pump(stream, buffer):
    while True:
        chunk = await stream.read(READ_CHUNK)
        if not chunk:
            break
        buffer.extend(chunk)


def _killpg(proc):
    try:
        os.killpg(proc.pid, signal.SIGKILL)
    except ProcessLookupError:
        pass


async def _kill(proc):
    # The group may outlive its leader, so kill it even after the leader exited.
    _killpg(proc)
    await proc.wait()
