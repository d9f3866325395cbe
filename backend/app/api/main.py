from fastapi import APIRouter

from app.api.routes import character_packs, characters, prompts, users, utils

api_router = APIRouter()
api_router.include_router(utils.router, tags=["utils"])
api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(characters.router, prefix="/characters", tags=["characters"])
api_router.include_router(character_packs.router, prefix="/character-packs", tags=["character-packs"])
api_router.include_router(prompts.router, tags=["prompts"])
