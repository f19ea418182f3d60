from typing import Optional
from supabase import create_client, Client
from backend.config import SUPABASE_URL, SUPABASE_KEY

_supabase: Optional[Client] = None

def get_supabase() -> Client:
    """
    Client Supabase 'anon' partagé (lecture seule du catalogue).
    Construit à la première utilisation pour ne pas exiger la config à l'import.
    """
    global _supabase
    if not SUPABASE_URL or not SUPABASE_KEY:
        raise RuntimeError("SUPABASE_URL / SUPABASE_KEY manquants pour get_supabase()")
    if _supabase is None:
        _supabase = create_client(SUPABASE_URL, SUPABASE_KEY)
    return _supabase
