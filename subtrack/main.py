import logging

from fastapi import FastAPI

from subtrack.config import settings
from subtrack.routers import stats

logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(title=settings.app_name)

app.include_router(stats.router)


@app.get("/health")
async def health():
    return {"status": "ok"}
