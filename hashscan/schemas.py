from pydantic import BaseModel, Field, computed_field
from typing import Any, Literal, List, Optional


ThemeName = Literal["light", "dark"]


class HashCheckRequest(BaseModel):
    # проверка формата в services.hasher, чтобы ошибка дошла до экрана
    sha256: Optional[Any] = Field(None, description="SHA256 файла (64 hex-символа)")
    theme: Optional[Any] = None


class ScanStats(BaseModel):
    malicious: int = Field(..., ge=0)
    suspicious: int = Field(..., ge=0)
    undetected: int = Field(..., ge=0)
    harmless: int = Field(..., ge=0)


class VendorResult(BaseModel):
    vendor: str
    result: str
    category: str


class ScanResult(BaseModel):
    stats: ScanStats
    vendors: List[VendorResult] = []


class FileInfo(BaseModel):
    name: str
    size: int = Field(0, ge=0)

    @computed_field
    @property
    def size_kb(self) -> str:
        return f"{self.size / 1024:.2f}"


class SliceData(BaseModel):
    value: float = Field(..., ge=0)
    color: str


class ArcSlice(BaseModel):
    value: float
    color: str
    start_angle: float
    end_angle: float
    path: str

    @property
    def span(self) -> float:
        return self.end_angle - self.start_angle


class ChartPayload(BaseModel):
    width: int
    height: int
    duration_ms: int
    slices: List[ArcSlice]
    frames: List[List[str]] = []


class LookupOutcome(BaseModel):
    state: Literal["display", "error"]
    source: Literal["hash", "file"]
    theme: ThemeName = "light"
    fingerprint: Optional[str] = None
    file: Optional[FileInfo] = None
    cached: bool = False
    severity: str = "Unknown"
    severity_color: str = "#999"
    result: Optional[ScanResult] = None
    chart: Optional[ChartPayload] = None
    error: Optional[str] = None
    error_kind: Optional[str] = None
    status_code: int = 200
    progress: float = Field(0.0, ge=0.0, le=1.0)
    transitions: List[str] = []
