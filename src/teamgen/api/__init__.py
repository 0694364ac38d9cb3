"""REST API for the team generator."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, List

from fastapi import FastAPI, File, Form, HTTPException, Request, UploadFile
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from teamgen.api.schemas import (
    GenerateTeamsRequest,
    GenerateTeamsResponse,
    MessageResponse,
    SavedTeamSetResponse,
    SaveTeamsRequest,
    TeamResponse,
)
from teamgen.config import Settings, load_settings
from teamgen.errors import (
    InvalidInputError,
    RecordNotFound,
    StoreUnavailable,
    TeamgenError,
)
from teamgen.generator import Team, generate_teams
from teamgen.models import Player, parse_stats, require_name
from teamgen.persistence import RosterStore, SavedTeamSet
from teamgen.photos import discard_photo, store_photo


logger = logging.getLogger("uvicorn.error")

DB_UNAVAILABLE_DETAIL = "Internal Server Error: Database unavailable."


def _http_error(exc: TeamgenError) -> HTTPException:
    if isinstance(exc, InvalidInputError):
        logger.warning("Rejected request: %s", exc)
        return HTTPException(status_code=400, detail=str(exc))
    if isinstance(exc, RecordNotFound):
        return HTTPException(status_code=404, detail=str(exc))
    if isinstance(exc, StoreUnavailable):
        return HTTPException(status_code=500, detail=DB_UNAVAILABLE_DETAIL)
    return HTTPException(status_code=500, detail=str(exc))


def team_to_response(team: Team) -> TeamResponse:
    return TeamResponse(name=team.name, members=team.members, average_rating=team.average_rating)


def saved_set_to_response(saved: SavedTeamSet) -> SavedTeamSetResponse:
    return SavedTeamSetResponse(id=saved.set_id, teams=saved.teams, created_at=saved.created_at)


def _jsonable_errors(exc: RequestValidationError) -> list[dict]:
    return [
        {"loc": list(error.get("loc", ())), "msg": error.get("msg", ""), "type": error.get("type", "")}
        for error in exc.errors()
    ]


async def _read_photo(upload: UploadFile | None, settings: Settings) -> str | None:
    if upload is None:
        return None
    if upload.size is not None and upload.size > settings.max_photo_bytes:
        raise InvalidInputError(f"Photo exceeds the {settings.max_photo_bytes} byte limit")
    contents = await upload.read(settings.max_photo_bytes + 1)
    if not contents:
        return None
    return store_photo(
        contents,
        filename=upload.filename,
        content_type=upload.content_type,
        settings=settings,
    )


def create_app(settings: Settings | None = None, store: RosterStore | None = None) -> FastAPI:
    settings = settings or load_settings()
    store = store or RosterStore(settings.db_path)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        store.close()

    app = FastAPI(title="teamgen", lifespan=lifespan)
    app.state.store = store
    app.state.settings = settings

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        logger.warning("Rejected %s %s: %s", request.method, request.url.path, exc.errors())
        return JSONResponse(status_code=400, content={"detail": _jsonable_errors(exc)})

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/api/persons", response_model=List[Player])
    async def list_persons() -> List[Player]:
        try:
            return store.list_players()
        except TeamgenError as exc:
            raise _http_error(exc) from exc

    @app.get("/api/persons/{person_id}", response_model=Player)
    async def get_person(person_id: str) -> Player:
        try:
            return store.get_player(person_id)
        except TeamgenError as exc:
            raise _http_error(exc) from exc

    @app.post("/api/persons", response_model=Player, status_code=201)
    async def create_person(
        name: str | None = Form(None),
        stats: str | None = Form(None),
        photo: UploadFile | None = File(None),
    ) -> Player:
        photo_ref = None
        try:
            clean_name = require_name(name)
            parsed = parse_stats(stats)
            photo_ref = await _read_photo(photo, settings)
            return store.create_player(name=clean_name, stats=parsed, photo=photo_ref)
        except TeamgenError as exc:
            discard_photo(photo_ref, settings)
            raise _http_error(exc) from exc

    @app.put("/api/persons/{person_id}", response_model=MessageResponse)
    async def update_person(
        person_id: str,
        name: str | None = Form(None),
        stats: str | None = Form(None),
        photo: UploadFile | None = File(None),
    ) -> MessageResponse:
        photo_ref = None
        try:
            clean_name = require_name(name)
            parsed = parse_stats(stats)
            photo_ref = await _read_photo(photo, settings)
            store.update_player(person_id, name=clean_name, stats=parsed, photo=photo_ref)
        except TeamgenError as exc:
            discard_photo(photo_ref, settings)
            raise _http_error(exc) from exc
        return MessageResponse(message="Person updated successfully")

    @app.delete("/api/persons/{person_id}", response_model=MessageResponse)
    async def delete_person(person_id: str) -> MessageResponse:
        try:
            store.delete_player(person_id)
        except TeamgenError as exc:
            raise _http_error(exc) from exc
        return MessageResponse(message="Person deleted successfully")

    @app.get("/api/teams", response_model=List[SavedTeamSetResponse])
    async def list_saved_teams() -> List[SavedTeamSetResponse]:
        try:
            return [saved_set_to_response(saved) for saved in store.list_saved_team_sets()]
        except TeamgenError as exc:
            raise _http_error(exc) from exc

    @app.get("/api/teams/{set_id}", response_model=SavedTeamSetResponse)
    async def get_saved_team(set_id: str) -> SavedTeamSetResponse:
        try:
            return saved_set_to_response(store.get_saved_team_set(set_id))
        except TeamgenError as exc:
            raise _http_error(exc) from exc

    @app.post("/api/teams", response_model=SavedTeamSetResponse, status_code=201)
    async def save_teams(payload: SaveTeamsRequest) -> SavedTeamSetResponse:
        try:
            return saved_set_to_response(store.create_saved_team_set(payload.teams))
        except TeamgenError as exc:
            raise _http_error(exc) from exc

    @app.delete("/api/teams/{set_id}", response_model=MessageResponse)
    async def delete_saved_team(set_id: str) -> MessageResponse:
        try:
            store.delete_saved_team_set(set_id)
        except TeamgenError as exc:
            raise _http_error(exc) from exc
        return MessageResponse(message="Saved team deleted successfully")

    @app.post("/api/teams/generate", response_model=GenerateTeamsResponse)
    async def generate(payload: GenerateTeamsRequest) -> GenerateTeamsResponse:
        try:
            players = store.list_players()
            if payload.player_ids is not None:
                by_id = {player.id: player for player in players}
                missing = [player_id for player_id in payload.player_ids if player_id not in by_id]
                if missing:
                    raise RecordNotFound(f"Person not found: {', '.join(missing)}")
                players = [by_id[player_id] for player_id in dict.fromkeys(payload.player_ids)]
            teams = generate_teams(players, payload.team_count)
        except TeamgenError as exc:
            raise _http_error(exc) from exc
        return GenerateTeamsResponse(teams=[team_to_response(team) for team in teams])

    return app