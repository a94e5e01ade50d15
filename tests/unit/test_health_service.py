from unittest.mock import MagicMock

from tourx.errors import StoreUnavailable
from tourx.health import service as health_service
from tourx.infra import supabase_client


def test_health_store_info_probes_every_collection(monkeypatch):
    client = MagicMock()
    client.table.return_value.select.return_value.limit.return_value.execute.return_value = MagicMock(data=[{"id": "1"}])
    monkeypatch.setattr(supabase_client, "get_service_supabase", lambda: client)

    info = health_service.health_store_info()

    assert info["connect_ok"] is True
    assert set(info["tables"]) == {"users", "packages", "bookings", "payments", "guides", "hiredguides", "reviews"}
    assert info["tables"]["payments"] == {"ok": True, "rows": 1}
    assert info["stripe_configured"] is True


def test_health_store_info_reports_missing_configuration(monkeypatch):
    def _missing():
        raise StoreUnavailable("SUPABASE_URL/SUPABASE_SERVICE_KEY manquants")

    monkeypatch.setattr(supabase_client, "get_service_supabase", _missing)

    info = health_service.health_store_info()
    assert info["connect_ok"] is False
    assert "manquants" in info["error"]
