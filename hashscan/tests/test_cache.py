import pytest

from hashscan.errors import StorageError
from hashscan.models import CachedReport
from hashscan.schemas import ScanResult, ScanStats, VendorResult
from hashscan.services.cache import InMemoryStore, ReportCache, SqlAlchemyStore


SHA = "b" * 64


def _result(malicious=2):
    return ScanResult(
        stats=ScanStats(malicious=malicious, suspicious=0, undetected=60, harmless=5),
        vendors=[
            VendorResult(vendor="Avast", result="Win32:Malware-gen", category="malicious"),
            VendorResult(vendor="ClamAV", result="Clean", category="undetected"),
        ],
    )


def test_get_missing_key_returns_none(memory_cache):
    assert memory_cache.get(SHA) is None


def test_put_then_get_round_trip(memory_cache):
    result = _result()
    memory_cache.put(SHA, result)
    assert memory_cache.get(SHA) == result


def test_vendor_order_survives_serialization(memory_cache):
    result = _result()
    memory_cache.put(SHA, result)
    assert [v.vendor for v in memory_cache.get(SHA).vendors] == ["Avast", "ClamAV"]


def test_corrupted_entry_raises_storage_error():
    store = InMemoryStore()
    store.set(SHA, '{"stats": {"malicious": 1}}')
    with pytest.raises(StorageError):
        ReportCache(store).get(SHA)


def test_sqlalchemy_store_round_trip(db_session):
    cache = ReportCache(SqlAlchemyStore(db_session))
    result = _result()
    cache.put(SHA, result)

    assert cache.get(SHA) == result
    row = db_session.query(CachedReport).filter_by(sha256=SHA).first()
    assert row is not None
    assert row.created_at is not None


def test_sqlalchemy_store_last_writer_wins(db_session):
    cache = ReportCache(SqlAlchemyStore(db_session))
    cache.put(SHA, _result(malicious=1))
    cache.put(SHA, _result(malicious=7))

    assert cache.get(SHA).stats.malicious == 7
    assert db_session.query(CachedReport).count() == 1
