import os
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from dotenv import load_dotenv

from core.completion_client import LLMSettings, create_client
from core.orchestrator import Orchestrator

load_dotenv()

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)

CORS_ORIGINS = [o.strip() for o in os.getenv(
    "CORS_ORIGINS", "http://localhost:5173,http://127.0.0.1:5173,http://localhost:3000"
).split(",") if o.strip()]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    logger.info("Zero Code ML API starting up...")

    settings = LLMSettings.from_env()
    app.state.orchestrator = Orchestrator(create_client(settings))
    logger.info(f"Completion provider ready: {settings.provider} / {settings.model}")

    yield

    logger.info("Zero Code ML API shutting down...")


app = FastAPI(
    title="Zero Code ML API",
    description="Upload a CSV and get cleaning steps, a chart and a training script from an LLM",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS — allow frontend dev server
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register routes
from api.routes import router
app.include_router(router, prefix="/api")


@app.get("/")
def root():
    return {
        "name": "Zero Code ML API",
        "version": "1.0.0",
        "status": "running",
        "docs": "/docs",
    }


@app.get("/health")
def health():
    return {"status": "ok"}
