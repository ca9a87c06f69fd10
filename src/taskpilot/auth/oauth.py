"""Interactive browser login.

A short-lived HTTP listener on 127.0.0.1 receives the OAuth redirect. The
authorization page at claude.ai redirects back to ``/callback`` with the
tokens as query parameters.
"""

import asyncio
import html
import inspect
import random
import secrets
from collections.abc import Callable
from typing import Any
from urllib.parse import urlencode

from aiohttp import web

from ..config import (
    AUTHORIZE_URL,
    CALLBACK_HOST,
    CALLBACK_PATH,
    CALLBACK_PORT_RANGE,
    DEFAULT_EXPIRES_IN,
    LOGIN_TIMEOUT_SECONDS,
)
from ..errors import AuthFlowError
from .models import Credentials
from .store import CredentialStore

_PAGE_STYLE = """
    body { font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
           display: flex; align-items: center; justify-content: center; height: 100vh;
           margin: 0; background: #f5f5f5; }
    .container { text-align: center; background: white; padding: 40px;
                 border-radius: 8px; box-shadow: 0 2px 8px rgba(0,0,0,0.1); }
    p { color: #666; margin: 0; }
"""

SUCCESS_PAGE = f"""<html>
  <head><title>Authentication Successful</title><style>{_PAGE_STYLE}
    h1 {{ color: #4caf50; margin: 0 0 16px 0; }}</style></head>
  <body>
    <div class="container">
      <h1>Successfully Signed In!</h1>
      <p>You can now close this window and return to your terminal.</p>
    </div>
    <script>setTimeout(() => window.close(), 3000);</script>
  </body>
</html>"""

FAILURE_PAGE = f"""<html>
  <head><title>Authentication Failed</title><style>{_PAGE_STYLE}
    h1 {{ color: #d32f2f; margin: 0 0 16px 0; }}</style></head>
  <body>
    <div class="container">
      <h1>Authentication Failed</h1>
      <p>{{reason}}</p>
      <p style="margin-top: 20px;">You can close this window.</p>
    </div>
  </body>
</html>"""


def build_authorize_url(redirect_uri: str, state: str) -> str:
    """Build the external authorization URL for the browser."""
    return f"{AUTHORIZE_URL}?{urlencode({'redirect_uri': redirect_uri, 'state': state})}"


class CallbackListener:
    """Local HTTP listener for the OAuth redirect.

    Used as an async context manager; the server is torn down on exit no
    matter how the flow ended. The first callback outcome wins, later
    requests cannot change it.

    Usage:
        async with CallbackListener(state) as listener:
            open_browser(build_authorize_url(listener.redirect_uri, state))
            credentials = await listener.wait()
    """

    def __init__(
        self,
        expected_state: str | None = None,
        host: str = CALLBACK_HOST,
        port: int | None = None
    ):
        """Initialize the listener.

        Args:
            expected_state: Anti-forgery token the callback must echo back
            host: Interface to bind (local only)
            port: Fixed port; None picks a random high port
        """
        self._expected_state = expected_state
        self._host = host
        self._port = port
        self._runner: web.AppRunner | None = None
        self._outcome: asyncio.Future[Credentials] | None = None

    @property
    def port(self) -> int:
        if self._port is None:
            raise RuntimeError("Listener is not running")
        return self._port

    @property
    def redirect_uri(self) -> str:
        return f"http://{self._host}:{self.port}{CALLBACK_PATH}"

    async def __aenter__(self) -> "CallbackListener":
        self._outcome = asyncio.get_running_loop().create_future()

        app = web.Application()
        app.router.add_get(CALLBACK_PATH, self._handle_callback)
        self._runner = web.AppRunner(app, access_log=None)
        await self._runner.setup()

        try:
            port = self._port or random.randrange(*CALLBACK_PORT_RANGE)
            try:
                await web.TCPSite(self._runner, self._host, port).start()
            except OSError:
                if self._port is not None:
                    raise
                # Port in use, let the OS pick one
                await web.TCPSite(self._runner, self._host, 0).start()
        except OSError as e:
            await self._runner.cleanup()
            raise AuthFlowError(f"Could not start callback listener: {e}") from e

        self._port = self._runner.addresses[0][1]
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if self._outcome is not None and not self._outcome.done():
            self._outcome.cancel()
        if self._runner is not None:
            await self._runner.cleanup()
            self._runner = None

    async def wait(self) -> Credentials:
        """Wait for the callback outcome.

        Raises:
            AuthFlowError: If the browser reported an error or sent bad data
        """
        if self._outcome is None:
            raise RuntimeError("Listener is not running")
        return await self._outcome

    def _settle(self, result: Credentials | None = None, error: Exception | None = None) -> None:
        if self._outcome is None or self._outcome.done():
            return
        if error is not None:
            self._outcome.set_exception(error)
        else:
            self._outcome.set_result(result)

    async def _handle_callback(self, request: web.Request) -> web.Response:
        params = request.query

        error = params.get("error")
        if error:
            reason = params.get("error_description") or error
            self._settle(error=AuthFlowError(f"Authentication failed: {reason}"))
            return web.Response(
                text=FAILURE_PAGE.replace("{reason}", html.escape(reason)),
                content_type="text/html",
            )

        if self._expected_state is not None and params.get("state") not in (None, self._expected_state):
            self._settle(error=AuthFlowError("Authentication failed: state mismatch"))
            return web.Response(status=400, text="State mismatch")

        access_token = params.get("access_token")
        refresh_token = params.get("refresh_token")
        if not access_token or not refresh_token:
            self._settle(error=AuthFlowError("Missing authentication tokens"))
            return web.Response(status=400, text="Missing authentication tokens")

        try:
            expires_in = int(params.get("expires_in") or DEFAULT_EXPIRES_IN)
        except ValueError:
            self._settle(error=AuthFlowError("Invalid expires_in parameter"))
            return web.Response(status=400, text="Invalid expires_in parameter")

        credentials = Credentials.from_expires_in(access_token, refresh_token, expires_in)
        self._settle(result=credentials)
        return web.Response(text=SUCCESS_PAGE, content_type="text/html")


class LoginFlow:
    """Interactive login: browser hand-off plus local callback.

    Hidden design decisions:
    - Listener port selection
    - State token generation
    - Timeout handling
    - Persisting the resulting credentials
    """

    def __init__(
        self,
        store: CredentialStore,
        open_browser: Callable[[str], Any] | None = None,
        timeout: float = LOGIN_TIMEOUT_SECONDS,
        debug_callback: Any | None = None
    ):
        """Initialize the login flow.

        Args:
            store: Credential store that receives the new credentials
            open_browser: Callable receiving the authorization URL
                (default: typer.launch); may be sync or async
            timeout: Seconds to wait for the callback before giving up
            debug_callback: Optional callable(level, component, message)
        """
        if open_browser is None:
            import typer
            open_browser = typer.launch

        self._store = store
        self._open_browser = open_browser
        self._timeout = timeout
        self._debug_callback = debug_callback

    def _debug(self, level: str, component: str, message: str) -> None:
        if self._debug_callback:
            self._debug_callback(level, component, message)

    async def run(self) -> Credentials:
        """Run the flow to completion.

        Returns:
            The new credentials, already persisted

        Raises:
            AuthFlowError: On timeout, browser-reported error or bad callback
            AuthError: If the credentials could not be saved anywhere
        """
        state = secrets.token_hex(16)

        async with CallbackListener(expected_state=state) as listener:
            url = build_authorize_url(listener.redirect_uri, state)
            self._debug("info", "login", f"Listening on {listener.redirect_uri}")
            self._debug("info", "login", f"Opening browser: {url}")

            opened = self._open_browser(url)
            if inspect.isawaitable(opened):
                await opened

            try:
                credentials = await asyncio.wait_for(listener.wait(), timeout=self._timeout)
            except asyncio.TimeoutError:
                raise AuthFlowError("Authentication timed out") from None

        await self._store.save(credentials)
        self._debug("info", "login", "Successfully signed in")
        return credentials
