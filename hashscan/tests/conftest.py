import io

import httpx
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from hashscan.db import Base
from hashscan import models  # noqa: F401
from hashscan.services.cache import InMemoryStore, ReportCache
from hashscan.services.vt_client import VirusTotalClient


SHA = "a" * 64


def vt_body(stats=None, results=None):
    return {
        "data": {
            "id": SHA,
            "type": "file",
            "attributes": {
                "last_analysis_stats": stats
                or {"malicious": 3, "suspicious": 1, "undetected": 40, "harmless": 10, "timeout": 0},
                "last_analysis_results": results
                if results is not None
                else {
                    "Kaspersky": {"category": "malicious", "result": "Trojan.Win32.Agent", "engine_name": "Kaspersky"},
                    "ESET-NOD32": {"category": "undetected", "result": None, "engine_name": "ESET-NOD32"},
                },
            },
        }
    }


class Upstream:
    """Поддельный VirusTotal: считает запросы и отдаёт заданный ответ."""

    def __init__(self, status_code=200, body=None, exc=None):
        self.status_code = status_code
        self.body = vt_body() if body is None and status_code == 200 else body
        self.exc = exc
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.exc is not None:
            raise self.exc
        if isinstance(self.body, (dict, list)):
            return httpx.Response(self.status_code, json=self.body)
        return httpx.Response(self.status_code, content=self.body or b"")

    def client(self, api_key="test-key"):
        return VirusTotalClient(
            api_key=api_key,
            api_base="https://vt.test/api/v3",
            timeout=5.0,
            transport=httpx.MockTransport(self),
        )


@pytest.fixture
def upstream():
    return Upstream()


@pytest.fixture
def memory_cache():
    return ReportCache(InMemoryStore())


@pytest.fixture
def db_session():
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


class FakeUpload:
    """Минимальный аналог UploadFile: имя и асинхронное чтение."""

    def __init__(self, filename, data=b"", fail=False):
        self.filename = filename
        self._stream = io.BytesIO(data)
        self.fail = fail

    async def read(self, size=-1):
        if self.fail:
            raise OSError("device not ready")
        return self._stream.read(size)
