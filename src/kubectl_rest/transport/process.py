"""
kubectl process I/O.

Owns one kubectl subprocess per request: spawns it, feeds the request
body to stdin while stdout is being read, and hands stdout back either
buffered after exit or as a live byte stream. stderr is inherited so
kubectl's own diagnostics reach the user unchanged.
"""

from __future__ import annotations

import asyncio
import json
import shlex
from typing import TYPE_CHECKING, Any, TypeVar

from kubectl_rest.errors import RequestCancelledError, SubprocessError
from kubectl_rest.telemetry import get_logger
from kubectl_rest.types.stream import ResponseStream

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from kubectl_rest.client.cancel import CancelReason, CancelToken
    from kubectl_rest.pipeline.base import Decoder
    from kubectl_rest.transport.config import KubectlConfig
    from kubectl_rest.transport.command import KubectlInvocation
    from kubectl_rest.types.request import RestRequest

logger = get_logger("kubectl_rest.transport.process")

T = TypeVar("T")


class KubectlProcess:
    """A single kubectl subprocess and its pipes.

    Example:
        >>> proc = await KubectlProcess.spawn(config, invocation, request)
        >>> output = await proc.read_all()
    """

    def __init__(
        self,
        process: asyncio.subprocess.Process,
        args: tuple[str, ...],
        *,
        cancel_token: CancelToken | None = None,
        read_chunk_size: int = 64 * 1024,
    ) -> None:
        """Wrap an already spawned process (use spawn() instead)."""
        self._process = process
        self._args = args
        self._cancel_token = cancel_token
        self._read_chunk_size = read_chunk_size
        self._feeder: asyncio.Task[None] | None = None
        self._exit_watcher: asyncio.Task[None] | None = None
        self._feeder_error: BaseException | None = None
        self._killed_by_cancel = False
        self._killed_by_release = False
        self._released = False

        if cancel_token is not None:
            cancel_token.on_cancel(self._on_cancel)

    @classmethod
    async def spawn(
        cls,
        config: KubectlConfig,
        invocation: KubectlInvocation,
        request: RestRequest,
    ) -> KubectlProcess:
        """Start kubectl for a translated request.

        The request body, if any, starts flowing to stdin right away in a
        background task so large bodies cannot deadlock against stdout.

        Raises:
            SubprocessError: If kubectl cannot be started
        """
        args = (*config.context_args(), *invocation.args)
        command_line = "$ kubectl " + " ".join(shlex.quote(a) for a in args)
        if invocation.has_input_body:
            command_line += " < input"
        logger.echo(config.verbose, command_line)

        try:
            process = await asyncio.create_subprocess_exec(
                config.executable,
                *args,
                stdin=asyncio.subprocess.PIPE if invocation.has_input_body else asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=None,
            )
        except OSError as e:
            raise SubprocessError(
                f"Failed to start {config.executable}: {e}",
                args=args,
                cause=e,
            ).with_hint("Check that kubectl is installed and on PATH") from e

        proc = cls(
            process,
            args,
            cancel_token=request.cancel_token,
            read_chunk_size=config.read_chunk_size,
        )
        if invocation.has_input_body:
            proc._feeder = asyncio.create_task(proc._feed_stdin(request, verbose=config.verbose))
        return proc

    @property
    def pid(self) -> int:
        """Process id of the kubectl subprocess."""
        return self._process.pid

    @property
    def args(self) -> tuple[str, ...]:
        """Arguments kubectl was started with."""
        return self._args

    @property
    def returncode(self) -> int | None:
        """Exit status, None while still running."""
        return self._process.returncode

    def _on_cancel(self, reason: CancelReason) -> None:
        if self._process.returncode is None:
            logger.debug("Killing kubectl on cancel", pid=self._process.pid, reason=reason.value)
            self._killed_by_cancel = True
            self._kill()

    async def _feed_stdin(self, request: RestRequest, *, verbose: bool = False) -> None:
        """Write the request body to stdin, then close it."""
        stdin = self._process.stdin
        assert stdin is not None
        try:
            if request.body_stream is not None:
                async for chunk in request.body_stream:
                    stdin.write(chunk)
                    await stdin.drain()
            elif request.body_raw is not None:
                stdin.write(request.body_raw)
                await stdin.drain()
            else:
                payload = json.dumps(request.body_json)
                logger.echo(verbose, payload)
                stdin.write(payload.encode("utf-8"))
                await stdin.drain()
        except (BrokenPipeError, ConnectionResetError) as e:
            # kubectl exited before reading everything; its exit code tells the story
            logger.debug("kubectl closed stdin early", pid=self._process.pid, error=str(e))
        finally:
            if not stdin.is_closing():
                stdin.close()
            try:
                await stdin.wait_closed()
            except (BrokenPipeError, ConnectionResetError):
                logger.debug("kubectl stdin already gone", pid=self._process.pid)

    async def _wait_exit(self) -> int:
        """Wait for kubectl to exit, then stop feeding its stdin."""
        code = await self._process.wait()
        await self._stop_feeder()
        return code

    async def _stop_feeder(self) -> None:
        feeder = self._feeder
        self._feeder = None
        if feeder is None:
            return
        if not feeder.done():
            # kubectl is gone; a body stream may never finish on its own
            feeder.cancel()
            await asyncio.wait([feeder])
        if feeder.cancelled():
            logger.debug("Body feeder cancelled", pid=self._process.pid)
        elif feeder.exception() is not None:
            self._feeder_error = feeder.exception()
            logger.debug("Body feeder failed", pid=self._process.pid, error=str(self._feeder_error))

    async def read_all(self) -> bytes:
        """Collect stdout after kubectl exits.

        Raises:
            RequestCancelledError: If the cancel token killed the process
            SubprocessError: If kubectl exited non-zero; no output is returned
        """
        stdout = self._process.stdout
        assert stdout is not None
        try:
            output, code = await asyncio.gather(stdout.read(), self._wait_exit())
        finally:
            await self.release()

        if self._killed_by_cancel:
            token = self._cancel_token
            raise RequestCancelledError(
                "Request was cancelled while kubectl was running",
                reason=token.reason.value if token and token.reason else None,
            )
        if self._feeder_error is not None:
            raise self._feeder_error
        if code != 0:
            raise SubprocessError(
                f"Failed to call kubectl: code {code}",
                exit_code=code,
                args=self._args,
            )
        return output

    async def iter_stdout(self) -> AsyncIterator[bytes]:
        """Yield stdout chunks as soon as kubectl writes them.

        The process is released once stdout is exhausted or the iterator
        is closed.
        """
        stdout = self._process.stdout
        assert stdout is not None
        try:
            while True:
                chunk = await stdout.read(self._read_chunk_size)
                if not chunk:
                    break
                yield chunk
            await self._wait_exit()
        finally:
            await self.release()
        if self._feeder_error is not None and not self._killed_by_cancel:
            raise self._feeder_error

    def open_stream(self, decoder: Decoder[T] | None = None) -> ResponseStream[Any]:
        """Hand stdout to the caller as a live stream.

        With a decoder, the stream yields decoded items instead of raw
        byte chunks.

        Exit status is awaited in the background. A non-zero exit can only
        be reported as a warning, since output was already handed out.
        """
        self._exit_watcher = asyncio.create_task(self._watch_exit())
        source: AsyncIterator[Any] = self.iter_stdout()
        if decoder is not None:
            source = decoder.decode(source)
        return ResponseStream(source, on_close=self.release)

    async def _watch_exit(self) -> None:
        code = await self._process.wait()
        if code != 0 and not (self._killed_by_cancel or self._killed_by_release):
            logger.warning(
                f"Failed to call kubectl streaming: code {code}",
                exit_code=code,
                pid=self._process.pid,
            )

    async def release(self) -> None:
        """Stop kubectl if still running and drop all handles.

        Safe to call more than once.
        """
        if self._released:
            return
        self._released = True

        if self._cancel_token is not None:
            self._cancel_token.remove_callback(self._on_cancel)

        if self._process.returncode is None:
            self._killed_by_release = True
            self._kill()

        await self._stop_feeder()

        await self._process.wait()
        if self._exit_watcher is not None:
            await self._exit_watcher

    def _kill(self) -> None:
        try:
            self._process.kill()
        except ProcessLookupError:
            logger.debug("kubectl already exited", pid=self._process.pid)

    async def __aenter__(self) -> KubectlProcess:
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.release()
