"""Token stream that runs the lexer as an independent producer."""

import logging
import queue
import threading
from collections.abc import Iterator
from enum import StrEnum

from dqdlpy.lexer.lexer import Lexer
from dqdlpy.lexer.tokens import Token, TokenKind

logger = logging.getLogger(__name__)

_POLL_INTERVAL = 0.05
_JOIN_TIMEOUT = 2.0


class LexMode(StrEnum):
    """How the lexer is scheduled relative to the parser."""

    THREADED = "threaded"
    INLINE = "inline"


class TokenStream:
    """Single-producer/single-consumer handoff between lexer and parser.

    In THREADED mode the lexer runs on a daemon thread and hands tokens over through a
    queue holding at most one token. In INLINE mode the consumer drives the lexer
    generator directly. Both modes share the cancellation flag and the
    `next`/`cancel`/`close` lifecycle.
    """

    def __init__(self, lexer: Lexer, mode: LexMode = LexMode.THREADED) -> None:
        self._lexer = lexer
        self._mode = mode
        self._cancel = threading.Event()
        self._queue: queue.Queue[Token | None] = queue.Queue(maxsize=1)
        self._thread: threading.Thread | None = None
        self._inline: Iterator[Token] | None = None
        self._closed = False

    @property
    def lexer(self) -> Lexer:
        return self._lexer

    @property
    def mode(self) -> LexMode:
        return self._mode

    @property
    def is_cancelled(self) -> bool:
        return self._cancel.is_set()

    @property
    def is_closed(self) -> bool:
        """True once the producer has delivered its last token."""
        return self._closed

    def start(self) -> "TokenStream":
        if self._thread is not None or self._inline is not None:
            raise RuntimeError("token stream already started")

        if self._mode == LexMode.INLINE:
            self._inline = self._lexer.tokens(self._cancel)
            return self

        self._thread = threading.Thread(
            target=self._produce,
            name=f"dqdl-lexer-{self._lexer.name}",
            daemon=True,
        )
        self._thread.start()
        logger.debug("Started lexer thread for %s", self._lexer.name)
        return self

    def next(self) -> Token | None:
        """Block until the next token arrives. Returns None once the stream is closed."""
        if self._closed:
            return None

        if self._inline is not None:
            token = next(self._inline, None)
        elif self._thread is not None:
            token = self._get(self._thread)
        else:
            raise RuntimeError("token stream not started")

        if token is None:
            self._closed = True
        return token

    def cancel(self) -> None:
        if not self._cancel.is_set():
            logger.debug("Cancelling lexer for %s", self._lexer.name)
        self._cancel.set()

    def drain(self) -> Token | None:
        """Discard tokens up to and including EOF, or until the producer closes."""
        while True:
            token = self.next()
            if token is None or token.kind == TokenKind.EOF:
                return token

    def close(self) -> None:
        """Drain the remaining tokens and wait for the producer to finish."""
        self.drain()
        if self._thread is not None:
            self._thread.join(timeout=_JOIN_TIMEOUT)
            if self._thread.is_alive():
                logger.warning("Lexer thread for %s did not stop", self._lexer.name)
        self._closed = True

    def __iter__(self) -> Iterator[Token]:
        while (token := self.next()) is not None:
            yield token

    def _produce(self) -> None:
        try:
            for token in self._lexer.tokens(self._cancel):
                if not self._put(token):
                    logger.debug("Lexer for %s stopped: consumer gone after cancel", self._lexer.name)
                    return
        finally:
            self._put(None)

    def _put(self, item: Token | None) -> bool:
        # Blocks until the consumer takes the item, unless cancelled while waiting.
        while True:
            try:
                self._queue.put(item, timeout=_POLL_INTERVAL)
                return True
            except queue.Full:
                if self._cancel.is_set():
                    return False

    def _get(self, producer: threading.Thread) -> Token | None:
        while True:
            try:
                return self._queue.get(timeout=_POLL_INTERVAL)
            except queue.Empty:
                if producer.is_alive():
                    continue
            # The producer is gone, pick up anything it put right before exiting.
            try:
                return self._queue.get_nowait()
            except queue.Empty:
                return None
