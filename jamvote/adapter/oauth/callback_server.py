"""Local OAuth callback listener.

A short-lived HTTP server that receives exactly one authorization redirect,
checks it against the state nonce issued for this attempt, and hands the
authorization code (or the reason it failed) back to the waiting caller.

Lifecycle:
    IDLE --start()--> LISTENING --callback/timeout/cancel--> COMPLETED | FAILED

The listening socket is released on every terminal transition, so the same
port can be bound again straight away.

Usage:
    state = generate_state()
    async with CallbackServer(port=8080) as server:
        await server.start(state)
        webbrowser.open(authorization_url)
        code = await server.wait_for_code(timeout=120)
"""

import asyncio
import os
import secrets
import socket
from enum import Enum

import logfire
import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse

from jamvote.adapter.error import AdapterError

STARTUP_TIMEOUT_SECONDS = 5.0


class CallbackState(str, Enum):
    """Lifecycle state of a callback listener."""

    IDLE = "idle"
    LISTENING = "listening"
    COMPLETED = "completed"
    FAILED = "failed"


class CallbackError(AdapterError):
    """Base error for the OAuth callback flow."""

    pass


class CallbackBindError(CallbackError):
    """The callback port could not be bound."""

    pass


class StateMismatchError(CallbackError):
    """The redirect carried a state that was not issued for this attempt."""

    def __init__(self) -> None:
        super().__init__("OAuth callback state does not match the issued nonce")


class ProviderDeniedError(CallbackError):
    """The identity provider redirected with an error instead of a code."""

    def __init__(self, error: str, description: str | None = None) -> None:
        self.error = error
        self.description = description
        message = f"Authorization denied by provider: {error}"
        if description:
            message = f"{message} ({description})"
        super().__init__(message)


class MissingCodeError(CallbackError):
    """The redirect carried neither a code nor an error."""

    def __init__(self) -> None:
        super().__init__("OAuth callback did not include an authorization code")


class CallbackTimeoutError(CallbackError):
    """No redirect arrived within the wait window."""

    def __init__(self, timeout: float) -> None:
        self.timeout = timeout
        super().__init__(f"No OAuth callback received within {timeout:g} seconds")


class CallbackAbortedError(CallbackError):
    """The caller gave up on the attempt before a redirect arrived."""

    def __init__(self) -> None:
        super().__init__("OAuth callback wait was aborted")


def _page(title: str, message: str) -> str:
    """Render the static page shown in the browser tab."""
    return (
        "<!DOCTYPE html>"
        f"<html><head><meta charset='utf-8'><title>{title}</title></head>"
        "<body style='font-family: sans-serif; text-align: center; margin-top: 4rem;'>"
        f"<h1>{title}</h1><p>{message}</p>"
        "<p>You can close this window and return to the terminal.</p>"
        "</body></html>"
    )


SUCCESS_PAGE = _page("Authentication successful", "Your login was received.")
FAILURE_PAGE = _page("Authentication failed", "Please try logging in again.")
ALREADY_USED_PAGE = _page("Link already used", "This login attempt is finished.")


class CallbackServer:
    """Single-use listener for one OAuth authorization redirect.

    One instance serves one authorization attempt. It binds the port on
    start, claims the first request to the callback path, and tears the
    listener down on completion, failure, timeout or cancellation.
    """

    def __init__(
        self,
        host: str = "127.0.0.1",
        port: int = 8080,
        path: str = "/callback",
        shutdown_timeout: float = 2.0,
    ) -> None:
        """Initialize callback server.

        Args:
            host: Interface to bind
            port: Port to bind (0 picks a free port)
            path: Callback path registered as redirect URI
            shutdown_timeout: Upper bound on graceful teardown in seconds
        """
        self.host = host
        self.path = path
        self.shutdown_timeout = shutdown_timeout
        self.state = CallbackState.IDLE
        self.failure: CallbackError | None = None

        self._port = port
        self._expected_state: str | None = None
        self._result: asyncio.Future[str] | None = None
        self._claimed = False
        self._socket: socket.socket | None = None
        self._server: uvicorn.Server | None = None
        self._serve_task: asyncio.Task | None = None

    @property
    def port(self) -> int:
        """Port the listener is (or will be) bound to."""
        if self._socket is not None:
            return self._socket.getsockname()[1]
        return self._port

    @property
    def redirect_uri(self) -> str:
        """Redirect URI pointing at this listener."""
        return f"http://localhost:{self.port}{self.path}"

    async def __aenter__(self) -> "CallbackServer":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self.state is CallbackState.LISTENING:
            self._mark_failed(CallbackAbortedError())
        await self._teardown()

    async def start(self, expected_state: str) -> None:
        """Bind the port and start listening for the redirect.

        Args:
            expected_state: State nonce sent with the authorization request

        Raises:
            ValueError: If expected_state is empty
            CallbackError: If this instance was already started
            CallbackBindError: If the port cannot be bound
        """
        if self.state is not CallbackState.IDLE:
            raise CallbackError("Callback server instances are single-use")
        if not expected_state:
            raise ValueError("Expected state nonce must not be empty")

        self._expected_state = expected_state
        self._result = asyncio.get_running_loop().create_future()

        try:
            self._socket = self._bind()
        except OSError as e:
            logfire.error(
                "Could not bind OAuth callback port", port=self._port, error=str(e)
            )
            self._mark_failed(
                CallbackBindError(f"Cannot listen on {self.host}:{self._port}: {e}")
            )
            raise self.failure from e

        config = uvicorn.Config(
            self._build_app(),
            host=self.host,
            port=self.port,
            lifespan="off",
            access_log=False,
            log_config=None,
            log_level="warning",
            timeout_graceful_shutdown=max(1, int(self.shutdown_timeout)),
        )
        self._server = uvicorn.Server(config)
        self._serve_task = asyncio.create_task(
            self._server.serve(sockets=[self._socket])
        )
        self.state = CallbackState.LISTENING

        try:
            await self._wait_until_serving()
        except BaseException:
            self._mark_failed(CallbackBindError("Callback listener failed to start"))
            await self._teardown()
            raise

        logfire.info("OAuth callback listener started", port=self.port, path=self.path)

    async def wait_for_code(self, timeout: float = 120.0) -> str:
        """Wait for the redirect and return its authorization code.

        The listener is torn down before this returns or raises.

        Args:
            timeout: Seconds to wait for the redirect

        Returns:
            Authorization code

        Raises:
            StateMismatchError: If the redirect's state does not match
            ProviderDeniedError: If the provider reported an error
            MissingCodeError: If the redirect had no code
            CallbackTimeoutError: If no redirect arrived in time
            asyncio.CancelledError: If the caller cancelled the wait
        """
        if self.state is not CallbackState.LISTENING or self._result is None:
            raise CallbackError("Callback server is not listening")

        try:
            code = await asyncio.wait_for(self._result, timeout)
        except asyncio.TimeoutError:
            logfire.warn("OAuth callback timed out", timeout=timeout)
            self._mark_failed(CallbackTimeoutError(timeout))
            raise self.failure
        except CallbackError as e:
            self._mark_failed(e)
            raise
        except asyncio.CancelledError:
            logfire.info("OAuth callback wait cancelled")
            self._mark_failed(CallbackAbortedError())
            raise
        else:
            self.state = CallbackState.COMPLETED
            logfire.info("OAuth callback completed")
            return code
        finally:
            await self._teardown()

    def _bind(self) -> socket.socket:
        """Acquire the listening socket."""
        family = socket.AF_INET6 if ":" in self.host else socket.AF_INET
        sock = socket.socket(family, socket.SOCK_STREAM)
        try:
            if os.name == "posix":
                # Lets an immediate retry rebind while old connections linger
                sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            sock.bind((self.host, self._port))
            sock.listen(8)
        except OSError:
            sock.close()
            raise
        return sock

    def _build_app(self) -> FastAPI:
        app = FastAPI(openapi_url=None, docs_url=None, redoc_url=None)
        app.add_api_route(
            self.path,
            self._handle_callback,
            methods=["GET"],
            response_class=HTMLResponse,
        )
        return app

    async def _wait_until_serving(self) -> None:
        loop = asyncio.get_running_loop()
        deadline = loop.time() + STARTUP_TIMEOUT_SECONDS
        while not self._server.started:
            if self._serve_task.done():
                raise CallbackError("Callback listener exited during startup")
            if loop.time() > deadline:
                raise CallbackError("Callback listener did not start in time")
            await asyncio.sleep(0.01)

    async def _handle_callback(self, request: Request) -> HTMLResponse:
        """Claim the redirect and deliver its outcome to the waiter."""
        if self._claimed:
            logfire.warn("Rejected repeated OAuth callback")
            return HTMLResponse(ALREADY_USED_PAGE, status_code=410)
        self._claimed = True

        params = request.query_params
        state = params.get("state")
        if state is None or not secrets.compare_digest(
            state.encode(), self._expected_state.encode()
        ):
            logfire.warn("OAuth callback state mismatch")
            self._deliver_error(StateMismatchError())
            return HTMLResponse(FAILURE_PAGE, status_code=400)

        error = params.get("error")
        if error:
            logfire.warn("OAuth provider denied authorization", error=error)
            self._deliver_error(
                ProviderDeniedError(error, params.get("error_description"))
            )
            return HTMLResponse(FAILURE_PAGE, status_code=400)

        code = params.get("code")
        if not code:
            self._deliver_error(MissingCodeError())
            return HTMLResponse(FAILURE_PAGE, status_code=400)

        if not self._result.done():
            self._result.set_result(code)
        return HTMLResponse(SUCCESS_PAGE)

    def _deliver_error(self, error: CallbackError) -> None:
        if not self._result.done():
            self._result.set_exception(error)

    def _mark_failed(self, error: CallbackError) -> None:
        self.state = CallbackState.FAILED
        self.failure = error

    async def _teardown(self) -> None:
        """Stop the listener and release the port. Safe to call repeatedly."""
        self._claimed = True
        server, task = self._server, self._serve_task
        self._serve_task = None

        try:
            if server is not None and task is not None:
                server.should_exit = True
                done, _ = await asyncio.wait({task}, timeout=self.shutdown_timeout)
                if not done:
                    logfire.warn("Callback listener shutdown overran, forcing exit")
                    server.force_exit = True
                    task.cancel()
                    await asyncio.wait({task})
                if not task.cancelled() and task.exception() is not None:
                    logfire.error(
                        "Callback listener crashed", error=str(task.exception())
                    )
        finally:
            if self._socket is not None:
                self._socket.close()
                self._socket = None
                logfire.info("OAuth callback listener stopped", state=self.state.value)
            # An undelivered outcome is no longer of interest to anyone
            if self._result is not None and self._result.done():
                if not self._result.cancelled():
                    self._result.exception()
