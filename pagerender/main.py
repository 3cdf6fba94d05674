from __future__ import annotations

from dotenv import load_dotenv
from fastapi import APIRouter, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .api.v1.routers import convert, health
from .app_logging import configure_logging
from .config import get_settings

load_dotenv()
settings = get_settings()
configure_logging(structured=settings.structured_logs)

app = FastAPI(title="Page Render Converter", version="0.1.0")


@app.middleware("http")
async def limit_upload_size(request: Request, call_next):
  # Checked before the multipart body is read.
  limit = get_settings().max_upload_bytes
  declared = request.headers.get("content-length")
  if declared is not None and declared.isdigit() and int(declared) > limit:
    return JSONResponse(
      status_code=413,
      content={"detail": f"Request body exceeds {limit} bytes"},
    )
  return await call_next(request)


app.add_middleware(
  CORSMiddleware,
  allow_origins=settings.cors_allow_origins,
  allow_credentials=True,
  allow_methods=["*"],
  allow_headers=["*"],
)


api_router = APIRouter(prefix="/api")
api_router.include_router(convert.router)
api_router.include_router(health.router)

app.include_router(api_router)
