from __future__ import annotations  # FastAPI server exposing the mock interview engine

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Dict

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.routes import router
from config.settings import settings
from interview_agents import build_collaborators
from interview_engine import InterviewEngine
from llm_gateway import LlmClient
from storage.migrate import migrate
from storage.store import InterviewStore


logger = logging.getLogger(__name__)

CONFIG_PATH = Path(__file__).resolve().parent / "app_config.json"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:  # Own the DB, LLM client and engine for the process
    config_path = Path(settings.LLM_CONFIG_PATH) if settings.LLM_CONFIG_PATH else CONFIG_PATH
    migrate(settings.DB_PATH)
    store = InterviewStore(settings.DB_PATH)
    client = LlmClient()
    agents = build_collaborators(client, config_path)
    app.state.store = store
    app.state.engine = InterviewEngine(store, agents.evaluator, agents.follow_up, agents.summarizer)
    logger.info("Mock interview engine ready db=%s config=%s", settings.DB_PATH, config_path)
    try:
        yield
    finally:
        client.close()


app = FastAPI(title="Mock Interview API", lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"]
)
app.include_router(router)


@app.get("/health")
def health() -> Dict[str, str]:
    return {"status": "ok"}
