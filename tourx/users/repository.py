"""Couche d’accès aux données pour le domaine Utilisateurs (collection users).
Les erreurs du store ne sont pas masquées: StoreUnavailable remonte jusqu'au handler (500).
"""
from typing import Any, Dict, List, Optional

from tourx.store import documents
from tourx.store.records import Collection, UserRecord

def get_user_by_email(email: str) -> Optional[UserRecord]:
    """Récupère un utilisateur par email (None si introuvable)."""
    return documents.find_one(Collection.USERS, email=email)

def get_user_by_id(user_id: str) -> Optional[UserRecord]:
    return documents.find_by_id(Collection.USERS, user_id)

def get_role_by_email(email: str) -> Optional[str]:
    """
    Fonction de lookup injectée dans la gate d'autorisation.
    Relue à chaque appel: une révocation de rôle prend effet à la requête suivante.
    """
    user = get_user_by_email(email)
    return user.role if user else None

def insert_user_if_absent(data: Dict[str, Any]) -> Optional[UserRecord]:
    """
    Insertion idempotente par email.
    - Retour: l'utilisateur créé, ou None s'il existait déjà.
    - Le rôle n'est jamais accepté depuis le client: tout nouveau compte est 'customer'.
    """
    payload = {k: v for k, v in (data or {}).items() if k != "role"}
    record = documents.build_record(Collection.USERS, {**payload, "role": "customer"})
    if get_user_by_email(record.email):
        return None
    return documents.insert_one(Collection.USERS, record)

def list_users() -> List[UserRecord]:
    return documents.find_many(Collection.USERS, order_by="email")

def set_role(user_id: str, role: str) -> Optional[UserRecord]:
    return documents.update_by_id(Collection.USERS, user_id, {"role": role})

def delete_user(user_id: str) -> int:
    return documents.delete_by_id(Collection.USERS, user_id)
