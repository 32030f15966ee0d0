from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from gameswap.database import database
from gameswap.routes import fields, memberships, slots
from gameswap.utils.logging import logger


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:
    await database.connect()
    logger.info("Connected to database")
    try:
        yield
    finally:
        await database.disconnect()


app = FastAPI(title="GameSwap API", lifespan=lifespan)

for router in (fields.router, memberships.router, slots.router):
    app.include_router(router)
