"""
Adaptateur « document store » générique au-dessus des tables Supabase.

- Une collection = une table (voir records.Collection).
- Écritures: le document est validé contre son type (records.RECORD_TYPES);
  un champ requis manquant ou invalide est rejeté (InvalidInput), rien n'est écrit.
- Lectures: les lignes non conformes sont journalisées puis ignorées.
- Toute erreur Supabase/réseau est remontée en StoreUnavailable: jamais de
  résultat vide « par défaut » qui masquerait une panne.
"""
import logging
from datetime import date, datetime
from decimal import Decimal
from typing import Annotated, Any, Dict, Iterable, List, Optional, Type

from postgrest.exceptions import APIError
from pydantic import TypeAdapter, ValidationError

import tourx.infra.supabase_client as supabase_client
from tourx.errors import InvalidInput, StoreUnavailable
from tourx.store.records import Collection, Record, RECORD_TYPES

logger = logging.getLogger(__name__)

# module tourx.store.documents
def record_type(collection: Collection) -> Type[Record]:
    return RECORD_TYPES[Collection(collection)]

def _describe(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ())) or "document"
        parts.append(f"{loc}: {err.get('msg')}")
    return "; ".join(parts)

def _jsonable(value: Any) -> Any:
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, (list, tuple, set)):
        return [_jsonable(v) for v in value]
    if isinstance(value, dict):
        return {k: _jsonable(v) for k, v in value.items()}
    return value

def build_record(collection: Collection, data: Dict[str, Any]) -> Record:
    """Valide un document avant écriture (noms de colonnes ou alias API acceptés)."""
    collection = Collection(collection)
    try:
        return record_type(collection).model_validate(data or {})
    except ValidationError as e:
        raise InvalidInput(f"Document {collection.value} invalide: {_describe(e)}")

def parse_record(collection: Collection, row: Dict[str, Any]) -> Optional[Record]:
    collection = Collection(collection)
    try:
        return record_type(collection).model_validate(row)
    except ValidationError as e:
        logger.warning(
            "store.parse_record skipped malformed row collection=%s id=%s errors=%s",
            collection.value, (row or {}).get("id"), _describe(e),
        )
        return None

def to_row(record: Record) -> Dict[str, Any]:
    """Ligne prête pour Supabase: colonnes snake_case, Decimal en chaîne, sans id."""
    return _jsonable(record.model_dump(mode="python", exclude={"id"}, exclude_none=True))

def validate_changes(collection: Collection, changes: Dict[str, Any]) -> Dict[str, Any]:
    """
    Valide une mise à jour partielle champ par champ avec les contraintes du type.
    - Clé inconnue, 'id' ou valeur invalide -> InvalidInput.
    """
    collection = Collection(collection)
    fields = record_type(collection).model_fields
    by_alias = {f.alias: name for name, f in fields.items() if f.alias}
    row: Dict[str, Any] = {}
    for key, value in (changes or {}).items():
        name = key if key in fields else by_alias.get(key)
        if not name or name == "id":
            raise InvalidInput(f"Champ inconnu pour {collection.value}: {key}")
        field = fields[name]
        tp = Annotated[(field.annotation, *field.metadata)] if field.metadata else field.annotation
        try:
            validated = TypeAdapter(tp).validate_python(value)
        except ValidationError as e:
            raise InvalidInput(f"Valeur invalide pour {key}: {_describe(e)}")
        row[name] = _jsonable(validated)
    if not row:
        raise InvalidInput("Aucun champ à mettre à jour")
    return row

def _table(collection: Collection):
    return supabase_client.get_service_supabase().table(Collection(collection).value)

def _failure(op: str, collection: Collection, exc: Exception) -> StoreUnavailable:
    if isinstance(exc, APIError):
        # erreur PostgREST: code SQLSTATE / PGRST utile au diagnostic
        logger.error("store.%s rejected collection=%s code=%s message=%s", op, Collection(collection).value, exc.code, exc.message)
    else:
        logger.exception("store.%s failed collection=%s", op, Collection(collection).value)
    return StoreUnavailable(f"Document store indisponible ({op} {Collection(collection).value})")

def _apply_filters(query, filters: Optional[Dict[str, Any]]):
    for column, value in (filters or {}).items():
        if isinstance(value, (list, tuple, set)):
            query = query.in_(column, _jsonable(value))
        else:
            query = query.eq(column, _jsonable(value))
    return query

def insert_one(collection: Collection, data: Dict[str, Any]) -> Record:
    """Insère un document validé et retourne le document stocké (avec son id)."""
    collection = Collection(collection)
    record = data if isinstance(data, Record) else build_record(collection, data)
    try:
        res = _table(collection).insert(to_row(record)).execute()
    except StoreUnavailable:
        raise
    except Exception as e:
        raise _failure("insert_one", collection, e) from e
    rows = getattr(res, "data", None) or []
    stored = parse_record(collection, rows[0]) if rows else None
    if stored is None or not stored.id:
        logger.error("store.insert_one returned no row collection=%s", collection.value)
        raise StoreUnavailable(f"Insertion non confirmée ({collection.value})")
    return stored

def find_many(
    collection: Collection,
    filters: Optional[Dict[str, Any]] = None,
    *,
    order_by: Optional[str] = None,
    desc: bool = False,
    limit: Optional[int] = None,
) -> List[Record]:
    """
    Sélection filtrée. filters: {colonne: valeur} (égalité) ou {colonne: [v1, v2]} (IN).
    """
    collection = Collection(collection)
    try:
        query = _apply_filters(_table(collection).select("*"), filters)
        if order_by:
            query = query.order(order_by, desc=desc)
        if limit:
            query = query.limit(limit)
        res = query.execute()
    except StoreUnavailable:
        raise
    except Exception as e:
        raise _failure("find_many", collection, e) from e
    records = (parse_record(collection, row) for row in (getattr(res, "data", None) or []))
    return [r for r in records if r is not None]

def find_one(collection: Collection, **filters: Any) -> Optional[Record]:
    rows = find_many(collection, filters, limit=1)
    return rows[0] if rows else None

def find_by_id(collection: Collection, doc_id: str) -> Optional[Record]:
    return find_one(collection, id=doc_id)

def update_by_id(
    collection: Collection,
    doc_id: str,
    changes: Dict[str, Any],
    expected: Optional[Dict[str, Any]] = None,
) -> Optional[Record]:
    """
    Met à jour un seul document par id.
    - expected: conditions d'égalité supplémentaires (compare-and-set), ex. {"status": "Pending"}.
    - Retourne le document mis à jour, ou None si aucune ligne ne correspond.
    """
    collection = Collection(collection)
    row = validate_changes(collection, changes)
    try:
        query = _apply_filters(_table(collection).update(row).eq("id", doc_id), expected)
        res = query.execute()
    except StoreUnavailable:
        raise
    except Exception as e:
        raise _failure("update_by_id", collection, e) from e
    rows = getattr(res, "data", None) or []
    return parse_record(collection, rows[0]) if rows else None

def delete_by_id(collection: Collection, doc_id: str) -> int:
    return delete_by_ids(collection, [doc_id])

def delete_by_ids(collection: Collection, ids: Iterable[str]) -> int:
    """Suppression groupée; retourne le nombre de lignes réellement supprimées (0 si déjà absentes)."""
    collection = Collection(collection)
    id_list = [str(i) for i in ids or []]
    if not id_list:
        return 0
    try:
        res = _table(collection).delete().in_("id", id_list).execute()
    except StoreUnavailable:
        raise
    except Exception as e:
        raise _failure("delete_by_ids", collection, e) from e
    return len(getattr(res, "data", None) or [])

def count(collection: Collection, **filters: Any) -> int:
    """Compte exact (count='exact'), fallback sur len(data)."""
    collection = Collection(collection)
    try:
        res = _apply_filters(_table(collection).select("id", count="exact"), filters).execute()
    except StoreUnavailable:
        raise
    except Exception as e:
        raise _failure("count", collection, e) from e
    if getattr(res, "count", None) is not None:
        return int(res.count)
    return len(getattr(res, "data", None) or [])

def column_values(collection: Collection, column: str, **filters: Any) -> List[Any]:
    """Projection d'une colonne (agrégats calculés côté serveur Python)."""
    collection = Collection(collection)
    try:
        res = _apply_filters(_table(collection).select(column), filters).execute()
    except StoreUnavailable:
        raise
    except Exception as e:
        raise _failure("column_values", collection, e) from e
    return [row.get(column) for row in (getattr(res, "data", None) or []) if row.get(column) is not None]
