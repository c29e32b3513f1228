from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field
import uvicorn

from ..catalog import CatalogProvider
from ..config import DIFFICULTIES, Catalogs, Config, load_config
from ..generator import GenerationRequest, generate_dungeon

logger = logging.getLogger(__name__)

SIZE_ERROR = "size is required and must be >= 1"
DIFFICULTY_ERROR = "difficulty is required and must be easy, medium, or hard"


class DungeonInput(BaseModel):
    size: Optional[int] = None
    difficulty: Optional[str] = None
    seed: Optional[str] = None
    normal_enemy_ids: Optional[List[str]] = Field(default=None, alias="normalEnemyIds")
    boss_enemy_ids: Optional[List[str]] = Field(default=None, alias="bossEnemyIds")
    item_ids: Optional[List[str]] = Field(default=None, alias="itemIds")


class DungeonManager:
    def __init__(self, config: Config) -> None:
        self._config = config
        self._provider = CatalogProvider(config)

    def validate(self, size: Optional[int], difficulty: Optional[str]) -> Optional[str]:
        if size is None or size < 1:
            return SIZE_ERROR
        if size > self._config.generation.max_size:
            return f"size must be <= {self._config.generation.max_size}"
        if difficulty not in DIFFICULTIES:
            return DIFFICULTY_ERROR
        return None

    def generate(self, payload: DungeonInput) -> dict:
        if None in (payload.normal_enemy_ids, payload.boss_enemy_ids, payload.item_ids):
            fetched = self._provider.load()
        else:
            fetched = Catalogs()
        request = GenerationRequest(
            size=payload.size,
            difficulty=payload.difficulty,
            normal_enemy_ids=_pick(payload.normal_enemy_ids, fetched.normal_enemy_ids),
            boss_enemy_ids=_pick(payload.boss_enemy_ids, fetched.boss_enemy_ids),
            item_ids=_pick(payload.item_ids, fetched.item_ids),
            seed=payload.seed,
        )
        return generate_dungeon(request).to_dict()


def _pick(supplied: Optional[List[str]], fetched) -> List[str]:
    return list(supplied) if supplied is not None else list(fetched)


def _describe_validation_error(exc: RequestValidationError) -> str:
    fields = {str(error["loc"][-1]) for error in exc.errors() if error.get("loc")}
    if "size" in fields:
        return SIZE_ERROR
    if "difficulty" in fields:
        return DIFFICULTY_ERROR
    first = exc.errors()[0] if exc.errors() else {}
    message = first.get("msg", "malformed body")
    return f"invalid request: {message}"


def create_app(config_path: Path) -> FastAPI:
    manager = DungeonManager(load_config(config_path))

    app = FastAPI(title="Dungeon Path Generator", version="0.1.0")

    def respond(payload: DungeonInput, status_code: int) -> JSONResponse:
        error = manager.validate(payload.size, payload.difficulty)
        if error is not None:
            return JSONResponse({"error": error}, status_code=400)
        return JSONResponse(manager.generate(payload), status_code=status_code)

    @app.exception_handler(RequestValidationError)
    async def reject_invalid_input(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse({"error": _describe_validation_error(exc)}, status_code=400)

    @app.post("/api/dungeon")
    def create_dungeon(payload: DungeonInput) -> JSONResponse:
        return respond(payload, status_code=201)

    @app.get("/api/dungeon")
    def get_dungeon(
        size: Optional[int] = None,
        difficulty: Optional[str] = None,
        seed: Optional[str] = None,
    ) -> JSONResponse:
        return respond(DungeonInput(size=size, difficulty=difficulty, seed=seed), status_code=200)

    return app


def main(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Serve the dungeon path generator over HTTP.")
    parser.add_argument(
        "--config",
        type=Path,
        default=Path("config/default_config.toml"),
        help="Path to the dungeon configuration file.",
    )
    parser.add_argument("--host", default="127.0.0.1", help="Host interface to bind.")
    parser.add_argument("--port", type=int, default=8000, help="Port to listen on.")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    config_path = args.config.resolve()
    app = create_app(config_path)
    uvicorn.run(app, host=args.host, port=args.port)


if __name__ == "__main__":
    main()
