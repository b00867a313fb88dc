"""Test doubles shared across the test suite."""

import asyncio

from mail_gateway.transports import SendResult


class DummySMTP:
    """Stand-in for ``aiosmtplib.SMTP`` recording what the transport does."""

    response = "250 Accepted"

    def __init__(self, hostname, port, start_tls=True, use_tls=False, timeout=None):
        self.hostname = hostname
        self.port = port
        self.start_tls = start_tls
        self.use_tls = use_tls
        self.timeout = timeout
        self.login_credentials = None
        self.is_connected = False
        self.sent = []
        self.fail_with = None
        self.send_delay = 0.0
        self.quit_delay = 0.0
        self.closed = False

    async def connect(self):
        self.is_connected = True

    async def login(self, user, password):
        self.login_credentials = (user, password)

    async def send_message(self, message):
        if self.send_delay:
            await asyncio.sleep(self.send_delay)
        if self.fail_with is not None:
            raise self.fail_with
        self.sent.append(message)
        return {}, self.response

    async def quit(self):
        if self.quit_delay:
            await asyncio.sleep(self.quit_delay)
        self.is_connected = False

    def close(self):
        self.closed = True
        self.is_connected = False


class DummyTransport:
    """Transport double returning a canned result or raising a canned error."""

    def __init__(self, result=None, error=None, delay=0.0):
        self.result = result or SendResult(message_id="<dummy@example.com>")
        self.error = error
        self.delay = delay
        self.requests = []

    async def send(self, request):
        self.requests.append(request)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.result
