import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from vocab_drill.config import get_settings, persistence_enabled
from vocab_drill.db import close_client, create_indexes, ping_db
from vocab_drill.logging_config import setup_logging
from vocab_drill.routes.decks import router as decks_router
from vocab_drill.routes.preferences import router as preferences_router
from vocab_drill.routes.session import router as session_router
from vocab_drill.services.runtime import DrillRuntime, set_runtime

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI):
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_dir or None, json_format=settings.log_json)
    if persistence_enabled(settings):
        try:
            await ping_db()
            await create_indexes()
        except Exception as exc:
            raise RuntimeError(
                "Failed to start backend. Check MongoDB connection and env values (MONGO_URL, MONGO_DB)."
            ) from exc
    else:
        logger.info("MONGO_URL/MONGO_DB not set; preferences and best streak are kept in memory")

    runtime = await DrillRuntime.create(settings)
    if settings.default_vocab_path:
        await runtime.load_default_list(settings.default_vocab_path, delimiter=settings.csv_delimiter)
    set_runtime(runtime)
    yield
    set_runtime(None)
    if persistence_enabled(settings):
        close_client()


app = FastAPI(title="Vocab Drill", version="1.0.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:5173",
        "http://127.0.0.1:5173",
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(session_router)
app.include_router(preferences_router)
app.include_router(decks_router)


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}
