"""Game endpoints: snapshot, choice, reset, and the SSE change feed."""

import asyncio
import logging

from fastapi import APIRouter, Depends, Request
from sse_starlette.sse import EventSourceResponse

from showdown.game.engine import RoundEngine
from showdown.lib.exceptions import ConfigurationError
from showdown.lib.models import ChoiceRequest, ChoiceResponse, GameSnapshot

HEARTBEAT_INTERVAL = 10  # seconds
EVENT_QUEUE_SIZE = 8

router = APIRouter()
logger = logging.getLogger(__name__)


def get_engine(request: Request) -> RoundEngine:
    """Return the engine owned by the application."""
    engine = getattr(request.app.state, "engine", None)
    if engine is None:
        raise ConfigurationError("Round engine not initialized", setting="engine")
    return engine


@router.get("/game", response_model=GameSnapshot)
async def get_game(engine: RoundEngine = Depends(get_engine)) -> GameSnapshot:
    """Current round, scores and commentary."""
    return engine.snapshot()


@router.post("/game/choice", response_model=ChoiceResponse)
async def submit_choice(
    choice: ChoiceRequest,
    engine: RoundEngine = Depends(get_engine),
) -> ChoiceResponse:
    """
    Submit the player's move.

    A submission while a round is deciding is ignored and reported with
    accepted=false rather than as an error.
    """
    accepted = engine.submit_choice(choice.move)
    return ChoiceResponse(accepted=accepted, snapshot=engine.snapshot())


@router.post("/game/reset", response_model=GameSnapshot)
async def reset_game(engine: RoundEngine = Depends(get_engine)) -> GameSnapshot:
    """Zero the scoreboard and return to idle."""
    engine.reset_session()
    return engine.snapshot()


def _enqueue_latest(queue: asyncio.Queue, snapshot: GameSnapshot) -> None:
    """Queue a snapshot, dropping the oldest when a slow client falls behind."""
    if queue.full():
        queue.get_nowait()
    queue.put_nowait(snapshot)


@router.get("/game/events")
async def game_events(
    request: Request,
    engine: RoundEngine = Depends(get_engine),
) -> EventSourceResponse:
    """Stream a snapshot event on every engine change, with heartbeats."""

    async def event_generator():
        queue: asyncio.Queue[GameSnapshot] = asyncio.Queue(maxsize=EVENT_QUEUE_SIZE)
        unsubscribe = engine.subscribe(lambda snapshot: _enqueue_latest(queue, snapshot))

        try:
            yield {"event": "snapshot", "data": engine.snapshot().model_dump_json()}

            while True:
                if await request.is_disconnected():
                    logger.info("Client disconnected from game events")
                    break

                try:
                    snapshot = await asyncio.wait_for(
                        queue.get(), timeout=HEARTBEAT_INTERVAL
                    )
                except asyncio.TimeoutError:
                    yield {"event": "heartbeat", "data": "{}"}
                    continue

                yield {"event": "snapshot", "data": snapshot.model_dump_json()}
        finally:
            unsubscribe()

    return EventSourceResponse(event_generator())
