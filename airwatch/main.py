import logging
import os
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .routers import aqi, readings, devices
from .database import check_db, init_db

load_dotenv()

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
)
logger = logging.getLogger(__name__)

CORS_ORIGINS = [
    o.strip()
    for o in os.getenv("CORS_ORIGINS", "http://localhost:3000,http://localhost:3001").split(",")
    if o.strip()
]


@asynccontextmanager
async def lifespan(app: FastAPI):
    if os.getenv("DB_CREATE_TABLES", "false").lower() in ("1", "true", "yes"):
        init_db()
    ok, msg = check_db()
    logger.info("Database %s", msg if ok else f"error: {msg}")
    yield


app = FastAPI(title="airwatch API", version="0.3.0", lifespan=lifespan)
# Cors
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.get("/healthz")
def healthz():
    ok, msg = check_db()
    return {"status": "ok" if ok else "error", "db": msg}

app.include_router(aqi.router, prefix="/v1")
app.include_router(readings.router, prefix="/v1")
app.include_router(devices.router,  prefix="/v1")
