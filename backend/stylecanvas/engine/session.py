"""Session state machine for the idle → loading model → processing → complete/error cycle.

A session is mutated only through SessionStateMachine transitions. Every
change to the request context (new upload, new style) bumps the session
generation; a run holds a RunTicket taken when it started, and results from
a ticket that no longer matches the session are dropped on arrival.
"""

from __future__ import annotations

import asyncio
import enum
import logging
import time
import uuid
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from stylecanvas.engine.buffer import PixelBuffer
from stylecanvas.engine.errors import (
    InvalidInput,
    InvalidTransition,
    SessionNotFound,
    StyleFilterError,
)

if TYPE_CHECKING:
    from stylecanvas.engine.filter_engine import StyleFilterEngine

logger = logging.getLogger(__name__)

GENERIC_FAILURE = "Failed to process image. Please try again."


class SessionState(str, enum.Enum):
    IDLE = "idle"
    LOADING_MODEL = "loading_model"
    PROCESSING = "processing"
    COMPLETE = "complete"
    ERROR = "error"


@dataclass(frozen=True)
class RunTicket:
    generation: int
    style_id: str
    input_buffer: PixelBuffer


@dataclass
class Session:
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    state: SessionState = SessionState.IDLE
    input_buffer: PixelBuffer | None = None
    output_buffer: PixelBuffer | None = None
    selected_style: str | None = None
    last_error: str | None = None
    generation: int = 0


class SessionStateMachine:
    def __init__(self, session: Session | None = None) -> None:
        self.session = session or Session()

    @property
    def state(self) -> SessionState:
        return self.session.state

    # ---- Context changes (always allowed, invalidate in-flight runs) ----

    def upload(self, buffer: PixelBuffer) -> None:
        if buffer is None:
            raise InvalidInput("No image uploaded")
        s = self.session
        s.input_buffer = buffer
        self._reset_to_idle()

    def select_style(self, style_id: str) -> None:
        if not style_id:
            raise InvalidInput("No style selected")
        s = self.session
        s.selected_style = style_id
        self._reset_to_idle()

    # ---- Run transitions ----

    def start(self) -> RunTicket:
        """idle | complete | error → loading_model."""
        s = self.session
        if s.state in (SessionState.LOADING_MODEL, SessionState.PROCESSING):
            raise InvalidTransition(f"Cannot start a run while {s.state.value}")
        return self._enter_loading()

    def retry(self) -> RunTicket:
        """error → loading_model with the same input and style."""
        if self.session.state is not SessionState.ERROR:
            raise InvalidTransition(f"Can only retry from error, not {self.session.state.value}")
        return self._enter_loading()

    def begin_processing(self, ticket: RunTicket) -> bool:
        if not self.is_current(ticket):
            return False
        s = self.session
        if s.state is not SessionState.LOADING_MODEL:
            raise InvalidTransition(f"Cannot begin processing while {s.state.value}")
        if s.input_buffer is None or not s.selected_style:
            raise InvalidTransition("Processing requires an image and a selected style")
        self._transition(SessionState.PROCESSING)
        return True

    def complete(self, ticket: RunTicket, output: PixelBuffer) -> bool:
        if not self.is_current(ticket):
            logger.info("Discarding stale result for session %s", self.session.id)
            return False
        s = self.session
        if s.state is not SessionState.PROCESSING:
            raise InvalidTransition(f"Cannot complete while {s.state.value}")
        if output is None:
            raise InvalidTransition("Complete requires an output image")
        s.output_buffer = output
        s.last_error = None
        self._transition(SessionState.COMPLETE)
        return True

    def fail(self, ticket: RunTicket, message: str) -> bool:
        if not self.is_current(ticket):
            return False
        s = self.session
        if s.state not in (SessionState.LOADING_MODEL, SessionState.PROCESSING):
            raise InvalidTransition(f"Cannot fail while {s.state.value}")
        s.output_buffer = None
        s.last_error = message or GENERIC_FAILURE
        self._transition(SessionState.ERROR)
        return True

    def is_current(self, ticket: RunTicket) -> bool:
        s = self.session
        return (
            ticket.generation == s.generation
            and ticket.style_id == s.selected_style
            and ticket.input_buffer is s.input_buffer
        )

    # ---- Driving a run ----

    async def run(self, engine: StyleFilterEngine) -> bool:
        """Start a run and drive it to completion. True when the result was kept."""
        return await self._drive(self.start(), engine)

    async def run_retry(self, engine: StyleFilterEngine) -> bool:
        return await self._drive(self.retry(), engine)

    async def _drive(self, ticket: RunTicket, engine: StyleFilterEngine) -> bool:
        try:
            engine.catalog.resolve(ticket.style_id)
            await engine.cache.ensure_ready(ticket.style_id)
            if not self.begin_processing(ticket):
                return False
            output = await engine.run(ticket.input_buffer, ticket.style_id)
        except StyleFilterError as e:
            logger.warning("Session %s run failed: %s", self.session.id, e.message)
            self.fail(ticket, e.message)
            return False
        except asyncio.CancelledError:
            self.fail(ticket, "Processing was cancelled")
            raise
        except Exception:
            logger.exception("Session %s run crashed", self.session.id)
            self.fail(ticket, GENERIC_FAILURE)
            return False
        return self.complete(ticket, output)

    # ---- Helpers ----

    def _enter_loading(self) -> RunTicket:
        s = self.session
        if s.input_buffer is None:
            raise InvalidInput("Please upload an image first")
        if not s.selected_style:
            raise InvalidInput("Please select a style first")
        s.output_buffer = None
        s.last_error = None
        self._transition(SessionState.LOADING_MODEL)
        return RunTicket(generation=s.generation, style_id=s.selected_style, input_buffer=s.input_buffer)

    def _reset_to_idle(self) -> None:
        s = self.session
        s.generation += 1
        s.output_buffer = None
        s.last_error = None
        self._transition(SessionState.IDLE)

    def _transition(self, new_state: SessionState) -> None:
        logger.debug("Session %s: %s -> %s", self.session.id, self.session.state.value, new_state.value)
        self.session.state = new_state


class SessionStore:
    """In-memory session registry keyed by session id.

    At most ``max_sessions`` are held: creating one more evicts the least
    recently used. Sessions untouched for ``ttl_seconds`` expire on the next
    store access. ``None`` disables either bound.
    """

    def __init__(
        self,
        max_sessions: int | None = None,
        ttl_seconds: float | None = None,
        clock: Callable[[], float] | None = None,
    ) -> None:
        if max_sessions is not None and max_sessions < 1:
            raise ValueError(f"max_sessions must be at least 1, got {max_sessions}")
        self.max_sessions = max_sessions
        self.ttl_seconds = ttl_seconds
        self._clock = clock or time.monotonic
        # Least recently used first
        self._sessions: dict[str, SessionStateMachine] = {}
        self._last_access: dict[str, float] = {}

    def create(self, buffer: PixelBuffer | None = None) -> SessionStateMachine:
        self._expire()
        machine = SessionStateMachine()
        if buffer is not None:
            machine.upload(buffer)
        if self.max_sessions is not None:
            while len(self._sessions) >= self.max_sessions:
                oldest = next(iter(self._sessions))
                logger.info("Evicting session %s, store is full", oldest)
                self._remove(oldest)
        self._touch(machine)
        return machine

    def get(self, session_id: str) -> SessionStateMachine:
        self._expire()
        try:
            machine = self._sessions[session_id]
        except KeyError:
            raise SessionNotFound(session_id) from None
        self._touch(machine)
        return machine

    def delete(self, session_id: str) -> None:
        self._expire()
        if session_id not in self._sessions:
            raise SessionNotFound(session_id)
        self._remove(session_id)

    def __len__(self) -> int:
        return len(self._sessions)

    def _touch(self, machine: SessionStateMachine) -> None:
        session_id = machine.session.id
        self._sessions.pop(session_id, None)
        self._sessions[session_id] = machine
        self._last_access[session_id] = self._clock()

    def _remove(self, session_id: str) -> None:
        del self._sessions[session_id]
        del self._last_access[session_id]

    def _expire(self) -> None:
        if self.ttl_seconds is None:
            return
        cutoff = self._clock() - self.ttl_seconds
        for session_id in [sid for sid, seen in self._last_access.items() if seen < cutoff]:
            logger.info("Expiring idle session %s", session_id)
            self._remove(session_id)
