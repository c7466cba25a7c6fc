"""Threaded control loop running a ColumnsGame.

The engine thread is the only one touching the game once started. Drivers talk
to it through two queues: commands go in with ``send`` and events come out of
``events``/``next_event``. Each event is handed over like an unbuffered
channel: the engine waits until the driver has taken it before the game moves
on.
"""

from __future__ import annotations

import logging
import queue
import threading
import time
from typing import Iterable, Iterator, List, Optional

from .core import ColumnsGame, Command, GameConfig
from .events import Event
from .grid import GameGrid
from .pieces import Randomizer

logger = logging.getLogger(__name__)

# Marks the end of a stream in either queue
_CLOSED = object()


class Engine(threading.Thread):
    def __init__(self, game: ColumnsGame) -> None:
        super().__init__(name="columns-engine", daemon=True)
        self.game = game
        self._commands: "queue.Queue[object]" = queue.Queue()
        self._events: "queue.Queue[object]" = queue.Queue(maxsize=1)
        self._done = threading.Event()

    @property
    def done(self) -> bool:
        return self._done.is_set()

    def send(self, command: Command) -> None:
        """Queue a command. Ignored once the game is over."""
        if self._done.is_set():
            return
        self._commands.put(Command(command))

    def close(self) -> None:
        """Close the command stream, which stops the game."""
        if not self._done.is_set():
            self._commands.put(_CLOSED)

    def next_event(self, timeout: Optional[float] = None) -> Optional[Event]:
        """Wait for the next event, or None once the stream is closed.

        Raises ``queue.Empty`` if nothing arrives within ``timeout`` seconds.
        """
        item = self._events.get(timeout=timeout)
        self._events.task_done()
        if item is _CLOSED:
            # Leave the marker for later readers
            self._events.put(_CLOSED)
            return None
        return item  # type: ignore[return-value]

    def events(self) -> Iterator[Event]:
        while True:
            event = self.next_event()
            if event is None:
                return
            yield event

    def poll_events(self) -> List[Event]:
        """Take every event available right now without blocking."""
        taken: List[Event] = []
        while True:
            try:
                event = self.next_event(timeout=0)
            except queue.Empty:
                return taken
            if event is None:
                return taken
            taken.append(event)

    def run(self) -> None:
        game = self.game
        try:
            self._emit(game.start())
            next_tick = time.monotonic() + game.fall_interval
            while not game.finished:
                timeout = next_tick - time.monotonic()
                if timeout <= 0:
                    self._emit(game.tick())
                    # Speed may have changed during the tick
                    next_tick = time.monotonic() + game.fall_interval
                    continue
                try:
                    command = self._commands.get(timeout=timeout)
                except queue.Empty:
                    continue
                if command is _CLOSED:
                    logger.debug("Command stream closed")
                    break
                self._emit(game.execute(command))  # type: ignore[arg-type]
            if not game.finished:
                self._emit(game.execute(Command.QUIT))
        finally:
            self._done.set()
            self._events.put(_CLOSED)
            logger.debug("Engine stopped at level %d with %d points", game.level, game.points)

    def _emit(self, events: Iterable[Event]) -> None:
        for event in events:
            self._events.put(event)
            self._events.join()


def play(
    config: Optional[GameConfig] = None,
    randomizer: Optional[Randomizer] = None,
    grid: Optional[GameGrid] = None,
) -> Engine:
    """Start a game on its own thread and return the running engine.

    Configuration errors are raised here, before any thread starts.
    """
    engine = Engine(ColumnsGame(config, randomizer, grid))
    engine.start()
    return engine
