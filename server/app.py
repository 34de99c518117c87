from __future__ import annotations

import asyncio
import json
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, HTTPException, WebSocket, WebSocketDisconnect

from subway_deal.settings import get_server_settings

from .registry import MatchRegistry
from .runner import MatchRunner
from .schemas import (
    ActionRequest,
    ActionResponse,
    CreateMatchRequest,
    CreateMatchResponse,
    LegalActionsResponse,
    MatchStatus,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifecycle - startup and shutdown."""
    settings = get_server_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info("Starting Subway Deal match host")

    yield

    logger.info("Shutting down match host")
    await registry.stop_all()


app = FastAPI(
    title="Subway Deal Server",
    version="0.1.0",
    lifespan=lifespan,
)
registry = MatchRegistry()


async def _runner_or_404(match_id: str) -> MatchRunner:
    runner = await registry.get(match_id)
    if not runner:
        raise HTTPException(status_code=404, detail="Match not found")
    return runner


@app.post("/matches", response_model=CreateMatchResponse)
async def create_match(req: CreateMatchRequest):
    try:
        mid = await registry.create_match([(p.id, p.name) for p in req.players], seed=req.seed)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return CreateMatchResponse(match_id=mid)


@app.get("/matches/{match_id}/snapshot")
async def get_snapshot(match_id: str, player_id: Optional[str] = None):
    runner = await _runner_or_404(match_id)
    return await runner.snapshot(player_id)


@app.get("/matches/{match_id}/legal_actions", response_model=LegalActionsResponse)
async def legal_actions(match_id: str, player_id: str):
    runner = await _runner_or_404(match_id)
    acts = await runner.get_legal_actions(player_id)
    return LegalActionsResponse(match_id=match_id, player_id=player_id, actions=acts)


@app.post("/matches/{match_id}/actions", response_model=ActionResponse)
async def apply_action(match_id: str, req: ActionRequest):
    runner = await _runner_or_404(match_id)
    result = await runner.submit(req.player_id, req.type, req.data)
    return ActionResponse(**result.to_dict())


@app.get("/matches/{match_id}/status", response_model=MatchStatus)
async def get_status(match_id: str):
    runner = await _runner_or_404(match_id)
    return MatchStatus(**await runner.status())


@app.delete("/matches/{match_id}")
async def stop_match(match_id: str):
    stopped = await registry.stop(match_id)
    if not stopped:
        raise HTTPException(status_code=404, detail="Match not found")
    return {"match_id": match_id, "stopped": True}


@app.websocket("/ws/matches/{match_id}")
async def ws_match(websocket: WebSocket, match_id: str):
    await websocket.accept()
    runner = await registry.get(match_id)
    if not runner:
        await websocket.close(code=4404)
        return

    player_id = websocket.query_params.get("player_id")
    queue = await runner.subscribe(player_id)
    heartbeat_seconds = get_server_settings().heartbeat_seconds

    # Forward outbound messages
    async def sender():
        while True:
            msg = await queue.get()
            await websocket.send_json(msg)

    async def heartbeat():
        while True:
            await asyncio.sleep(heartbeat_seconds)
            await queue.put({"type": "heartbeat"})

    sender_task = asyncio.create_task(sender())
    hb_task = asyncio.create_task(heartbeat())
    try:
        # Inbound messages are actions submitted on behalf of the connected player
        while True:
            try:
                raw = await websocket.receive_text()
            except WebSocketDisconnect:
                break
            try:
                message = json.loads(raw)
            except json.JSONDecodeError:
                await queue.put({"type": "error", "message": "Message is not valid JSON"})
                continue
            if not isinstance(message, dict) or player_id is None:
                await queue.put({"type": "error", "message": "Connect with ?player_id= to submit actions"})
                continue
            result = await runner.submit(player_id, message.get("type"), message.get("data"))
            await queue.put({"type": "action_result", **result.to_dict()})
    finally:
        await runner.unsubscribe(queue)
        sender_task.cancel()
        hb_task.cancel()


if __name__ == "__main__":
    # Convenience entrypoint for running directly: python -m server.app
    import uvicorn

    settings = get_server_settings()
    uvicorn.run("server.app:app", host=settings.host, port=settings.port, log_level=settings.log_level.lower())
