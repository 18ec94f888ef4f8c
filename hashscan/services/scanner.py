from __future__ import annotations

import logging
from enum import Enum
from typing import Any, List, Optional

from starlette.concurrency import run_in_threadpool

from ..errors import ScanError
from ..schemas import FileInfo, LookupOutcome, ScanResult
from .cache import ReportCache
from .chart import build_chart, pie_data
from .hasher import hash_upload, validate_fingerprint
from .severity import classify, severity_color
from .theme import Theme, get_theme
from .vt_client import VirusTotalClient


logger = logging.getLogger(__name__)


class LookupState(str, Enum):
    IDLE = "idle"
    RESOLVING = "resolving"
    CACHE_CHECK = "cache_check"
    CACHE_HIT = "cache_hit"
    CACHE_MISS = "cache_miss"
    FETCHING = "fetching"
    FETCH_ERROR = "fetch_error"
    CACHE_WRITE = "cache_write"
    DISPLAY = "display"
    ERROR_DISPLAY = "error_display"


class _Lookup:
    """Один проход: хэш -> кэш -> (VirusTotal -> запись в кэш) -> результат."""

    def __init__(self, source: str, cache: ReportCache, client: VirusTotalClient, theme: Theme):
        self.source = source
        self.cache = cache
        self.client = client
        self.theme = theme
        self.transitions: List[str] = [LookupState.IDLE.value]
        self.fingerprint: Optional[str] = None
        self.file: Optional[FileInfo] = None

    def enter(self, state: LookupState) -> None:
        self.transitions.append(state.value)
        logger.debug("   ➡️ %s", state.value)

    async def resolve(self, fingerprint: str) -> ScanResult:
        self.fingerprint = fingerprint
        self.enter(LookupState.CACHE_CHECK)
        cached = await run_in_threadpool(self.cache.get, fingerprint)
        if cached is not None:
            logger.info("   ⚡ НАЙДЕН В КЭШЕ - возвращаем сохраненный результат")
            self.enter(LookupState.CACHE_HIT)
            return cached

        logger.info("   🆕 НЕТ В КЭШЕ - запрашиваем VirusTotal")
        self.enter(LookupState.CACHE_MISS)
        self.enter(LookupState.FETCHING)
        try:
            result = await self.client.fetch(fingerprint)
        except ScanError:
            self.enter(LookupState.FETCH_ERROR)
            raise

        self.enter(LookupState.CACHE_WRITE)
        logger.info("   💾 Сохраняем результат в кэш...")
        await run_in_threadpool(self.cache.put, fingerprint, result)
        return result

    def display(self, result: ScanResult) -> LookupOutcome:
        self.enter(LookupState.DISPLAY)
        level = classify(result.stats)
        logger.info(f"   📊 ИТОГ: {level.value} (вендоров: {len(result.vendors)})")
        return LookupOutcome(
            state="display",
            source=self.source,
            theme=self.theme.name,
            fingerprint=self.fingerprint,
            file=self.file,
            cached=LookupState.CACHE_HIT.value in self.transitions,
            severity=level.value,
            severity_color=severity_color(level, self.theme),
            result=result,
            chart=build_chart(pie_data(result.stats, self.theme)),
            progress=1.0,
            transitions=self.transitions,
        )

    def error(self, exc: ScanError) -> LookupOutcome:
        self.enter(LookupState.ERROR_DISPLAY)
        logger.warning(f"   ❌ {exc.kind}: {exc.user_message}")
        return LookupOutcome(
            state="error",
            source=self.source,
            theme=self.theme.name,
            fingerprint=self.fingerprint,
            file=self.file,
            error=exc.user_message,
            error_kind=exc.kind,
            status_code=exc.status_code,
            progress=0.0,
            transitions=self.transitions,
        )


async def lookup_hash(
    cache: ReportCache,
    raw_fingerprint: Any,
    client: VirusTotalClient,
    theme: Theme | None = None,
) -> LookupOutcome:
    lookup = _Lookup("hash", cache, client, theme or get_theme(None))

    logger.info("🔍 ПРОВЕРКА ХЭША")
    logger.info(f"   🔐 Ввод: {str(raw_fingerprint)[:80]}")
    try:
        lookup.enter(LookupState.RESOLVING)
        fingerprint = validate_fingerprint(raw_fingerprint)
        result = await lookup.resolve(fingerprint)
    except ScanError as exc:
        return lookup.error(exc)
    return lookup.display(result)


async def lookup_file(
    cache: ReportCache,
    upload,
    client: VirusTotalClient,
    theme: Theme | None = None,
) -> LookupOutcome:
    lookup = _Lookup("file", cache, client, theme or get_theme(None))

    logger.info("🔍 ПРОВЕРКА ФАЙЛА")
    try:
        lookup.enter(LookupState.RESOLVING)
        lookup.file, fingerprint = await hash_upload(upload)
        result = await lookup.resolve(fingerprint)
    except ScanError as exc:
        return lookup.error(exc)
    return lookup.display(result)
