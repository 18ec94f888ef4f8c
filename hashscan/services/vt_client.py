from __future__ import annotations

import logging
from typing import Optional

import httpx
from pydantic import ValidationError

from ..config import settings
from ..errors import (
    MalformedResponse,
    NetworkError,
    NotFound,
    Unauthorized,
    UpstreamError,
)
from ..schemas import ScanResult, ScanStats, VendorResult


logger = logging.getLogger(__name__)

CLEAN_RESULT = "Clean"
STAT_FIELDS = ("malicious", "suspicious", "undetected", "harmless")


def _error_message(resp: httpx.Response, default: str) -> str:
    try:
        body = resp.json()
    except ValueError:
        return default
    error = body.get("error") if isinstance(body, dict) else None
    if isinstance(error, dict) and error.get("message"):
        return str(error["message"])
    return default


def normalize_report(body) -> ScanResult:
    """
    Превращает ответ ``GET /files/{hash}`` в ScanResult.
    Порядок вендоров сохраняется как в ``last_analysis_results``.
    """
    data = body.get("data") if isinstance(body, dict) else None
    attributes = data.get("attributes") if isinstance(data, dict) else None
    if not isinstance(attributes, dict):
        raise MalformedResponse("response has no file attributes")

    raw_stats = attributes.get("last_analysis_stats")
    raw_results = attributes.get("last_analysis_results")
    if not isinstance(raw_stats, dict):
        raise MalformedResponse("last_analysis_stats is missing")
    if not isinstance(raw_results, dict):
        raise MalformedResponse("last_analysis_results is missing")

    missing = [name for name in STAT_FIELDS if name not in raw_stats]
    if missing:
        raise MalformedResponse(f"last_analysis_stats lacks {', '.join(missing)}")

    try:
        stats = ScanStats(**{name: raw_stats[name] for name in STAT_FIELDS})
    except ValidationError as exc:
        raise MalformedResponse("last_analysis_stats has invalid counters") from exc

    vendors = []
    for vendor, entry in raw_results.items():
        entry = entry if isinstance(entry, dict) else {}
        vendors.append(
            VendorResult(
                vendor=str(vendor),
                result=str(entry.get("result") or CLEAN_RESULT),
                category=str(entry.get("category") or ""),
            )
        )

    return ScanResult(stats=stats, vendors=vendors)


class VirusTotalClient:
    def __init__(
        self,
        api_key: str,
        api_base: str = "https://www.virustotal.com/api/v3",
        timeout: Optional[float] = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.api_base = api_base.rstrip("/")
        self.timeout = timeout
        self.transport = transport

        logger.info("🛡️ VirusTotalClient init:")
        logger.info(f"   API Base: {self.api_base}")
        logger.info(f"   API Key present: {bool(self.api_key)}")

    @classmethod
    def from_settings(cls, cfg=settings, transport: Optional[httpx.AsyncBaseTransport] = None) -> "VirusTotalClient":
        return cls(
            api_key=cfg.VIRUSTOTAL_API_KEY,
            api_base=cfg.VIRUSTOTAL_API_BASE,
            timeout=cfg.VT_TIMEOUT,
            transport=transport,
        )

    async def fetch(self, fingerprint: str) -> ScanResult:
        if not self.api_key:
            logger.error("❌ VIRUSTOTAL_API_KEY not set")
            raise Unauthorized("API key is not configured")

        url = f"{self.api_base}/files/{fingerprint}"
        logger.info("🛡️ VIRUSTOTAL API ЗАПРОС:")
        logger.info(f"   🔗 URL: {url}")

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                resp = await client.get(url, headers={"x-apikey": self.api_key})
        except httpx.TransportError as exc:
            logger.error(f"   ❌ Ошибка соединения с VirusTotal: {exc}")
            raise NetworkError(str(exc) or exc.__class__.__name__) from exc

        logger.info(f"   📡 ОТВЕТ VirusTotal:")
        logger.info(f"      - Статус: {resp.status_code}")

        if resp.status_code == 404:
            logger.warning("      ⚠️ Хэш неизвестен VirusTotal")
            raise NotFound(_error_message(resp, f"File {fingerprint} not found"))
        if resp.status_code in (401, 403):
            logger.error(f"      ❌ Ключ отклонён: {resp.text[:200]}")
            raise Unauthorized(_error_message(resp, "API key was rejected"))
        if resp.status_code != 200:
            logger.error(f"      ❌ Ошибка: {resp.text[:200]}")
            raise UpstreamError(
                _error_message(resp, f"unexpected status {resp.status_code}"),
                upstream_status=resp.status_code,
            )

        try:
            body = resp.json()
        except ValueError as exc:
            raise MalformedResponse("response body is not JSON") from exc

        result = normalize_report(body)
        logger.info(f"      ✅ Вендоров: {len(result.vendors)}")
        logger.info(
            "      📊 malicious=%s suspicious=%s undetected=%s harmless=%s",
            result.stats.malicious,
            result.stats.suspicious,
            result.stats.undetected,
            result.stats.harmless,
        )
        return result
