from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional

from fastapi import Depends, FastAPI, File, Form, Query, Request, Response, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates
from sqlalchemy.orm import Session

from .config import settings
from .db import Base, engine, get_db
from . import models  # noqa: F401  регистрирует таблицы
from .schemas import HashCheckRequest, LookupOutcome, ScanStats
from .services.cache import ReportCache, SqlAlchemyStore
from .services.chart import pie_data, render_svg
from .services.scanner import lookup_file, lookup_hash
from .services.theme import get_theme
from .services.vt_client import VirusTotalClient

# Настройка логирования
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s | %(levelname)s | %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)
logger = logging.getLogger(__name__)

# Создаём таблицы
Base.metadata.create_all(bind=engine)

app = FastAPI(title=settings.app_name, debug=settings.debug)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

templates = Jinja2Templates(directory=str(Path(__file__).parent / "templates"))


def get_cache(db: Session = Depends(get_db)) -> ReportCache:
    return ReportCache(SqlAlchemyStore(db))


def get_vt_client() -> VirusTotalClient:
    return VirusTotalClient.from_settings(settings)


def _theme(name: Any):
    return get_theme(name, default=settings.DEFAULT_THEME)


@app.get("/health")
async def health():
    return {"status": "ok", "app": settings.app_name}


# Два экрана: проверка по хэшу и проверка файла
@app.get("/", response_class=HTMLResponse)
@app.get("/hash", response_class=HTMLResponse)
async def hash_screen(request: Request, theme: Optional[str] = None):
    return templates.TemplateResponse(
        request, "hash.html", {"theme": _theme(theme), "app_name": settings.app_name}
    )


@app.get("/file", response_class=HTMLResponse)
async def file_screen(request: Request, theme: Optional[str] = None):
    return templates.TemplateResponse(
        request, "file.html", {"theme": _theme(theme), "app_name": settings.app_name}
    )


@app.post("/check/hash", response_model=LookupOutcome)
async def check_hash(
    response: Response,
    payload: Optional[HashCheckRequest] = None,
    cache: ReportCache = Depends(get_cache),
    client: VirusTotalClient = Depends(get_vt_client),
):
    logger.info("=" * 80)
    logger.info("🎯 НОВЫЙ ЗАПРОС НА /check/hash")
    payload = payload or HashCheckRequest()
    outcome = await lookup_hash(cache, payload.sha256, client, _theme(payload.theme))
    response.status_code = outcome.status_code
    logger.info(f"   - Состояние: {outcome.state}, из кэша: {outcome.cached}")
    logger.info("=" * 80)
    return outcome


@app.post("/check/file", response_model=LookupOutcome)
async def check_file(
    response: Response,
    file: Optional[UploadFile] = File(None),
    theme: Optional[str] = Form(None),
    cache: ReportCache = Depends(get_cache),
    client: VirusTotalClient = Depends(get_vt_client),
):
    logger.info("=" * 80)
    logger.info("🎯 НОВЫЙ ЗАПРОС НА /check/file")
    outcome = await lookup_file(cache, file, client, _theme(theme))
    response.status_code = outcome.status_code
    logger.info(f"   - Состояние: {outcome.state}, из кэша: {outcome.cached}")
    logger.info("=" * 80)
    return outcome


@app.get("/chart.svg")
async def chart_svg(
    malicious: int = Query(0, ge=0),
    suspicious: int = Query(0, ge=0),
    undetected: int = Query(0, ge=0),
    harmless: int = Query(0, ge=0),
    progress: float = Query(1.0, ge=0.0, le=1.0),
    theme: Optional[str] = None,
):
    stats = ScanStats(
        malicious=malicious, suspicious=suspicious, undetected=undetected, harmless=harmless
    )
    svg = render_svg(pie_data(stats, _theme(theme)), progress=progress)
    return Response(content=svg, media_type="image/svg+xml")


# Возможность запуска напрямую (но лучше через uvicorn)
if __name__ == "__main__":
    import uvicorn
    uvicorn.run("hashscan.main:app", host="127.0.0.1", port=8000, reload=True)
