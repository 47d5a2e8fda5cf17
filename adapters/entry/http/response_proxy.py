"""
Deferred HTTP responses for the GraphQL endpoint.

The GraphQL engine writes its full response (status, headers, body) into a
`BufferedResponse`. Once execution has settled, the request pipeline releases
its store connection and only then replays the buffer onto the live ASGI
response. Both sides implement `ResponseSink`, so the engine never sees the
real response.
"""

from __future__ import annotations

from typing import Any, Awaitable, Callable, Dict, List, MutableMapping, Protocol

Message = MutableMapping[str, Any]
Send = Callable[[Message], Awaitable[None]]


class ResponseSink(Protocol):
    async def set_status(self, status: int) -> None: ...

    async def set_header(self, name: str, value: str) -> None: ...

    async def write(self, chunk: bytes) -> None: ...

    async def end(self) -> None: ...


class BufferedResponse:
    """
    In-memory response: written once, replayed once.
    """

    def __init__(self) -> None:
        self.status: int = 200
        self.headers: Dict[str, str] = {}
        self._chunks: List[bytes] = []
        self._ended = False
        self._replayed = False

    @property
    def ended(self) -> bool:
        return self._ended

    @property
    def body(self) -> bytes:
        return b"".join(self._chunks)

    def _check_writable(self) -> None:
        if self._ended:
            raise RuntimeError("buffered response already ended")

    async def set_status(self, status: int) -> None:
        self._check_writable()
        self.status = int(status)

    async def set_header(self, name: str, value: str) -> None:
        self._check_writable()
        self.headers[name] = value

    async def write(self, chunk: bytes) -> None:
        self._check_writable()
        if chunk:
            self._chunks.append(bytes(chunk))

    async def end(self) -> None:
        self._ended = True

    async def replay(self, target: ResponseSink) -> None:
        """
        Copy status and headers onto `target`, stream the body, then end it.
        """
        if not self._ended:
            raise RuntimeError("cannot replay a response that has not ended")
        if self._replayed:
            raise RuntimeError("buffered response already replayed")
        self._replayed = True

        await target.set_status(self.status)
        for name, value in self.headers.items():
            await target.set_header(name, value)
        for chunk in self._chunks:
            await target.write(chunk)
        await target.end()
        self._chunks = []


class ASGIResponseSink:
    """
    The live response, written through an ASGI `send` callable.

    `http.response.start` goes out with the first body chunk (or on `end()`),
    so status and headers can be set in any order before that.
    """

    def __init__(self, send: Send) -> None:
        self._send = send
        self._status = 200
        self._headers: List[tuple[bytes, bytes]] = []
        self._started = False
        self._ended = False

    async def set_status(self, status: int) -> None:
        if self._started:
            raise RuntimeError("response already started")
        self._status = int(status)

    async def set_header(self, name: str, value: str) -> None:
        if self._started:
            raise RuntimeError("response already started")
        key = name.lower().encode("latin-1")
        self._headers = [(k, v) for k, v in self._headers if k != key]
        self._headers.append((key, str(value).encode("latin-1")))

    async def _start(self) -> None:
        if not self._started:
            self._started = True
            await self._send({"type": "http.response.start", "status": self._status, "headers": self._headers})

    async def write(self, chunk: bytes) -> None:
        await self._start()
        if chunk:
            await self._send({"type": "http.response.body", "body": bytes(chunk), "more_body": True})

    async def end(self) -> None:
        if self._ended:
            return
        await self._start()
        self._ended = True
        await self._send({"type": "http.response.body", "body": b"", "more_body": False})


class BufferedSend:
    """
    ASGI `send` callable that feeds an inner ASGI app's response into a ResponseSink.
    """

    def __init__(self, sink: ResponseSink) -> None:
        self._sink = sink

    async def __call__(self, message: Message) -> None:
        mtype = message.get("type")
        if mtype == "http.response.start":
            await self._sink.set_status(int(message["status"]))
            for raw_name, raw_value in message.get("headers") or []:
                await self._sink.set_header(_text(raw_name), _text(raw_value))
        elif mtype == "http.response.body":
            await self._sink.write(message.get("body", b""))
            if not message.get("more_body", False):
                await self._sink.end()


def _text(value: Any) -> str:
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("latin-1")
    return str(value)
