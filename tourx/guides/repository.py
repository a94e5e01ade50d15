from typing import Any, Dict, List, Optional

from tourx.store import documents
from tourx.store.records import Collection, GuideRecord

def list_guides() -> List[GuideRecord]:
    return documents.find_many(Collection.GUIDES, order_by="name")

def get_guide(guide_id: str) -> Optional[GuideRecord]:
    return documents.find_by_id(Collection.GUIDES, guide_id)

def create_guide(data: Dict[str, Any]) -> GuideRecord:
    return documents.insert_one(Collection.GUIDES, data)
