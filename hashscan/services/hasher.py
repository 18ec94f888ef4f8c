from __future__ import annotations

import hashlib
import logging
import re
from typing import Any

from ..errors import HashError, InvalidInput, PickerError
from ..schemas import FileInfo


logger = logging.getLogger(__name__)

SHA256_PATTERN = re.compile(r"^[a-fA-F0-9]{64}$")
CHUNK_SIZE = 64 * 1024


def is_fingerprint(value: str | None) -> bool:
    return bool(value) and SHA256_PATTERN.match(value) is not None


def validate_fingerprint(raw: Any) -> str:
    """Проверяет введённый пользователем хэш и приводит его к нижнему регистру."""
    candidate = raw.strip() if isinstance(raw, str) else ""
    if not is_fingerprint(candidate):
        logger.warning("❌ Некорректный SHA256: %r", str(raw)[:80])
        raise InvalidInput()
    return candidate.lower()


async def hash_upload(upload, chunk_size: int = CHUNK_SIZE) -> tuple[FileInfo, str]:
    """
    Считает SHA256 загруженного файла (starlette ``UploadFile``) по частям.
    Возвращает (информация о файле, хэш).
    """
    if upload is None or not getattr(upload, "filename", None):
        raise PickerError("no file selected")

    h = hashlib.sha256()
    size = 0
    try:
        while True:
            block = await upload.read(chunk_size)
            if not block:
                break
            h.update(block)
            size += len(block)
    except (OSError, ValueError) as exc:
        logger.error("   ❌ Ошибка чтения файла %s: %s", upload.filename, exc)
        raise HashError(str(exc)) from exc

    info = FileInfo(name=upload.filename, size=size)
    digest = h.hexdigest()
    logger.info("   📄 Файл: %s (%s KB)", info.name, info.size_kb)
    logger.info("   🔐 SHA256: %s", digest)
    return info, digest
