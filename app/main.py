import logging

from fastapi import FastAPI

from app.config import settings
from app.rhythms.router import catalog_router
from app.rhythms.router import router as rhythms_router

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

app = FastAPI(title="Rhythms", version="0.1.0")
app.include_router(rhythms_router)
app.include_router(catalog_router)


@app.get("/")
async def root() -> dict:
    return {
        "status": "ok",
        "docs": "/docs",
        "health": "/health",
        "rhythms": {
            "chain_types": "/rhythms/chain-types",
            "chain_type_detail": "/rhythms/chain-types/{type}",
            "tiers": "/rhythms/tiers",
            "days": "/users/{user_id}/rhythms/{rhythm_id}/days",
            "chains": "/users/{user_id}/rhythms/{rhythm_id}/chains",
            "nudge": "/users/{user_id}/rhythms/{rhythm_id}/nudge",
            "progress": "/users/{user_id}/rhythms/{rhythm_id}/progress",
        },
    }


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}
