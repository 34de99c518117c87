from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class PlayerEntry(BaseModel):
    id: str = Field(min_length=1)
    name: str = Field(min_length=1)


class CreateMatchRequest(BaseModel):
    players: List[PlayerEntry] = Field(min_length=2)
    seed: Optional[int] = None


class CreateMatchResponse(BaseModel):
    match_id: str


class ActionRequest(BaseModel):
    """Inbound action message: ``{type, playerId, data}``."""

    model_config = ConfigDict(populate_by_name=True)

    type: str
    player_id: str = Field(alias="playerId")
    data: Dict[str, Any] = Field(default_factory=dict)


class ActionResponse(BaseModel):
    accepted: bool
    reason: Optional[str] = None
    message: str = ""


class LegalActionsResponse(BaseModel):
    match_id: str
    player_id: str
    actions: List[Dict[str, Any]]


class MatchStatus(BaseModel):
    match_id: str
    phase: str
    current_player: str
    turn_number: int
    winner: Optional[str] = None
    subscribers: int = 0
