from typing import Optional
from supabase import create_client, Client
from tourx.config import SUPABASE_URL, SUPABASE_SERVICE_KEY
from tourx.errors import StoreUnavailable

_service_supabase: Optional[Client] = None

def get_service_supabase() -> Client:
    """
    Client service-role (bypass RLS). Le document store du serveur passe
    exclusivement par ce client: les contrôles d'accès sont faits par la
    gate d'autorisation avant chaque écriture.
    """
    global _service_supabase
    if _service_supabase is None:
        if not SUPABASE_URL or not SUPABASE_SERVICE_KEY:
            raise StoreUnavailable("SUPABASE_URL/SUPABASE_SERVICE_KEY manquants pour get_service_supabase()")
        _service_supabase = create_client(SUPABASE_URL, SUPABASE_SERVICE_KEY)
    return _service_supabase
