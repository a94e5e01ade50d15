import re
from uuid import UUID

from tourx.errors import InvalidInput

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

def normalize_email(v: str) -> str:
    """Trim + minuscules; lève ValueError si le format est invalide (utilisable dans Pydantic)."""
    email = str(v or "").strip().lower()
    if not EMAIL_RE.match(email):
        raise ValueError("Adresse email invalide")
    return email

def parse_email(v: str) -> str:
    """Variante pour les paramètres de chemin/query: InvalidInput (400) au lieu de ValueError."""
    try:
        return normalize_email(v)
    except ValueError as e:
        raise InvalidInput(str(e))

def validate_identifier(v: str, label: str = "identifiant") -> str:
    """
    Les identifiants du store sont des UUID Supabase.
    Un identifiant mal formé est rejeté (400) avant tout accès au store.
    """
    raw = str(v or "").strip()
    try:
        return str(UUID(raw))
    except ValueError:
        raise InvalidInput(f"Format d'{label} invalide: {raw or '<vide>'}")
