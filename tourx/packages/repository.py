from typing import Any, Dict, List, Optional

from tourx.store import documents
from tourx.store.records import Collection, PackageRecord

def list_packages() -> List[PackageRecord]:
    return documents.find_many(Collection.PACKAGES, order_by="name")

def get_package(package_id: str) -> Optional[PackageRecord]:
    return documents.find_by_id(Collection.PACKAGES, package_id)

def create_package(data: Dict[str, Any]) -> PackageRecord:
    return documents.insert_one(Collection.PACKAGES, data)

def update_package(package_id: str, changes: Dict[str, Any]) -> Optional[PackageRecord]:
    return documents.update_by_id(Collection.PACKAGES, package_id, changes)

def delete_package(package_id: str) -> int:
    return documents.delete_by_id(Collection.PACKAGES, package_id)
