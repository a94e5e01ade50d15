from urllib.parse import urlparse
from typing import Any, Dict

import tourx.infra.supabase_client as supabase_client
from tourx.config import SUPABASE_URL
from tourx.payments import stripe_client
from tourx.store.records import Collection

def _check_table(client, name: str) -> Dict[str, Any]:
    try:
        res = client.table(name).select("id").limit(1).execute()
        return {"ok": True, "rows": len(res.data or [])}
    except Exception as e:
        return {"ok": False, "error": str(e)}

def health_store_info() -> Dict[str, Any]:
    """Sonde du document store (une lecture par table) + état de configuration Stripe."""
    parsed = urlparse(SUPABASE_URL) if SUPABASE_URL else None
    info: Dict[str, Any] = {
        "supabase_url": SUPABASE_URL,
        "hostname": parsed.hostname if parsed else None,
        "connect_ok": False,
        "error": None,
        "tables": {},
        "stripe_configured": stripe_client.is_configured(),
    }
    try:
        client = supabase_client.get_service_supabase()
    except Exception as e:
        info["error"] = str(getattr(e, "detail", e))
        return info
    for c in Collection:
        info["tables"][c.value] = _check_table(client, c.value)
    info["connect_ok"] = all(t["ok"] for t in info["tables"].values())
    return info
