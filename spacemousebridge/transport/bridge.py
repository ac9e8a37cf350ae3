"""Supervision of the hardware-access helper subprocess."""

from __future__ import annotations

import asyncio
import logging
import subprocess
from asyncio.subprocess import Process
from collections.abc import AsyncIterator, Sequence
from os import PathLike
from pathlib import Path

import msgspec
import psutil

from ..config.const import DEFAULT_STOP_TIMEOUT
from ..errors import SpawnFailed, WriteFailed
from ..protocol.codec import decode_line, encode_line
from ..protocol.protocol import LINE_ENCODING, MAX_LINE_LENGTH
from ..protocol.structures import DecodedLine, ProtocolError

logger = logging.getLogger("spacemousebridge.bridge")


class ProcessExited(msgspec.Struct, frozen=True, tag="process_exited"):
    """Terminal event: the helper is gone. ``status`` is its exit code."""

    status: int | None


BridgeEvent = DecodedLine | ProcessExited


def _terminate_descendants(pid: int, timeout: float) -> None:
    """Terminate every process spawned by the helper, then kill stragglers.

    The helper itself is left alone: it is an asyncio child and must be
    reaped by the event loop, not by psutil.
    """
    try:
        process = psutil.Process(pid)
        children = process.children(recursive=True)
    except psutil.Error:
        return
    if not children:
        return

    for child in children:
        try:
            child.terminate()
        except psutil.Error:
            continue

    try:
        _, alive = psutil.wait_procs(children, timeout=max(0.1, timeout))
    except psutil.Error:
        alive = children
    for child in alive:
        try:
            child.kill()
        except psutil.Error:
            continue


class BridgeProcess:
    """Own exactly one helper process and its line-oriented pipes.

    Helper stdout is decoded line by line into protocol messages that are
    exposed through :meth:`events`. When the child exits the stream yields a
    single :class:`ProcessExited` and ends. The bridge never restarts the
    helper; that decision belongs to its owner.
    """

    def __init__(self, proc: Process, *, stop_timeout: float = DEFAULT_STOP_TIMEOUT) -> None:
        self._proc = proc
        self._stop_timeout = stop_timeout
        self._events: asyncio.Queue[BridgeEvent] = asyncio.Queue()
        self._discard = False
        self._exhausted = False
        self._stdout_task: asyncio.Task[None] | None = None
        self._stderr_task: asyncio.Task[None] | None = None

    @classmethod
    async def spawn(
        cls,
        executable_path: str | PathLike[str],
        *,
        args: Sequence[str] = (),
        stop_timeout: float = DEFAULT_STOP_TIMEOUT,
        line_limit: int = MAX_LINE_LENGTH,
    ) -> BridgeProcess:
        path = Path(executable_path).absolute()
        if not path.is_file():
            raise SpawnFailed(f"helper executable not found: {path}")
        try:
            proc = await asyncio.create_subprocess_exec(
                str(path),
                *args,
                stdin=subprocess.PIPE,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                cwd=str(path.parent),
                limit=line_limit,
            )
        except OSError as exc:
            raise SpawnFailed(f"cannot start helper {path}: {exc}") from exc

        bridge = cls(proc, stop_timeout=stop_timeout)
        bridge._start_pumps()
        logger.info("Started helper %s (pid %d)", path.name, proc.pid)
        return bridge

    @property
    def pid(self) -> int:
        return self._proc.pid

    @property
    def returncode(self) -> int | None:
        return self._proc.returncode

    @property
    def running(self) -> bool:
        return self._proc.returncode is None

    def _start_pumps(self) -> None:
        self._stdout_task = asyncio.create_task(
            self._pump_stdout(), name=f"spacemouse-helper-stdout-{self._proc.pid}"
        )
        self._stderr_task = asyncio.create_task(
            self._pump_stderr(), name=f"spacemouse-helper-stderr-{self._proc.pid}"
        )

    async def _pump_stdout(self) -> None:
        reader = self._proc.stdout
        if reader is not None:
            while True:
                try:
                    raw = await reader.readline()
                except ValueError:
                    # readline() drops the overlong chunk and resyncs.
                    self._deliver(ProtocolError(raw_line="", reason="line exceeds length limit"))
                    continue
                except OSError as exc:
                    logger.warning("Helper stdout read failed: %s", exc)
                    break
                if not raw:
                    break
                self._deliver(decode_line(raw))

        returncode = await self._proc.wait()
        logger.info("Helper pid %d exited with status %s", self._proc.pid, returncode)
        self._events.put_nowait(ProcessExited(status=returncode))

    async def _pump_stderr(self) -> None:
        reader = self._proc.stderr
        if reader is None:
            return
        while True:
            try:
                raw = await reader.readline()
            except ValueError:
                continue
            except OSError:
                break
            if not raw:
                break
            text = raw.decode(LINE_ENCODING, errors="replace").strip()
            if text:
                logger.warning("helper: %s", text)

    def _deliver(self, event: DecodedLine) -> None:
        if self._discard:
            return
        if isinstance(event, ProtocolError):
            logger.warning("Malformed helper line %r: %s", event.raw_line, event.reason)
        self._events.put_nowait(event)

    async def events(self) -> AsyncIterator[BridgeEvent]:
        """Yield decoded events until (and including) :class:`ProcessExited`."""
        while not self._exhausted:
            event = await self._events.get()
            if isinstance(event, ProcessExited):
                self._exhausted = True
            yield event

    def __aiter__(self) -> AsyncIterator[BridgeEvent]:
        return self.events()

    async def send_line(self, text: str) -> None:
        payload = encode_line(text)
        writer = self._proc.stdin
        if writer is None or writer.is_closing() or self._proc.returncode is not None:
            raise WriteFailed("helper stdin is closed")
        try:
            writer.write(payload)
            await writer.drain()
        except OSError as exc:
            raise WriteFailed(f"write to helper failed: {exc}") from exc
        logger.debug("Sent %r to helper pid %d", text, self._proc.pid)

    async def terminate(self) -> None:
        """Stop the helper and its descendants; safe on an already-dead child."""
        self._discard = True
        proc = self._proc
        if proc.returncode is None:
            await asyncio.to_thread(_terminate_descendants, proc.pid, self._stop_timeout)
            try:
                proc.terminate()
            except ProcessLookupError:
                pass
            try:
                async with asyncio.timeout(self._stop_timeout):
                    await proc.wait()
            except TimeoutError:
                logger.warning("Helper pid %d ignored SIGTERM; killing", proc.pid)
                try:
                    proc.kill()
                except ProcessLookupError:
                    pass
                await proc.wait()

        writer = proc.stdin
        if writer is not None and not writer.is_closing():
            writer.close()

        pumps = [task for task in (self._stdout_task, self._stderr_task) if task is not None and not task.done()]
        if pumps:
            _, pending = await asyncio.wait(pumps, timeout=self._stop_timeout)
            for task in pending:
                task.cancel()


__all__ = ["BridgeEvent", "BridgeProcess", "ProcessExited"]
