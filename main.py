import logging
import os
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

load_dotenv()

from dashboard_route import router as dashboard_router
from data import DatabaseFetchError
from db import dispose_engine

logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO").upper())
logger = logging.getLogger(__name__)

CORS_ORIGINS = [
  x.strip()
  for x in os.getenv("CORS_ORIGINS", "http://127.0.0.1:3000,http://localhost:3000").split(",")
  if x.strip()
]


@asynccontextmanager
async def lifespan(app: FastAPI):
  yield
  await dispose_engine()


app = FastAPI(title="Dashboard Backend", version="1.0.0", lifespan=lifespan)
app.add_middleware(
  CORSMiddleware,
  allow_origins=CORS_ORIGINS,
  allow_credentials=True,
  allow_methods=["*"],
  allow_headers=["*"],
)
app.include_router(dashboard_router)


@app.exception_handler(DatabaseFetchError)
async def database_fetch_error_handler(request: Request, exc: DatabaseFetchError):
  return JSONResponse(status_code=500, content={"detail": exc.operation})


@app.get("/health")
def health():
  return {"ok": True}
