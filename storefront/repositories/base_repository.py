from typing import Any, Dict, Iterable, List, Mapping, Optional, Type

from bson import ObjectId
from pydantic import BaseModel
from pymongo import ReturnDocument

from storefront.models.documents import utcnow
from storefront.repositories.query import Populate, Query, parse_projection


class MongoRepository:
    """Executes :class:`Query` values against one MongoDB collection through Motor.

    Subclasses name their collection, the document model used to validate inserts and the
    reference fields that may be populated, mapped to the collection they point at.

    Documents leave the repository as plain dicts with ObjectIds turned into strings.
    """

    collection_name: str = ""
    document_cls: Type[BaseModel]
    references: Dict[str, str] = {}

    def __init__(self, db) -> None:
        self._db = db

    def _collection(self, name: Optional[str] = None):
        return self._db[name or self.collection_name]

    # -------------------------------------------------------------------------
    # Conversion helpers
    # -------------------------------------------------------------------------

    def _to_object_ids(self, data: Mapping[str, Any]) -> Dict[str, Any]:
        """Store ``_id`` and reference fields as ObjectIds, inside operators and ``$or`` too."""
        converted: Dict[str, Any] = {}
        for key, value in data.items():
            if key in ("$or", "$and", "$nor"):
                converted[key] = [self._to_object_ids(clause) for clause in value]
            elif key == "_id" or key in self.references:
                converted[key] = _object_ids(value)
            else:
                converted[key] = value
        return converted

    @classmethod
    def _serialize(cls, value: Any) -> Any:
        if isinstance(value, ObjectId):
            return str(value)
        if isinstance(value, dict):
            return {key: cls._serialize(item) for key, item in value.items()}
        if isinstance(value, list):
            return [cls._serialize(item) for item in value]
        return value

    async def _populate(self, docs: List[dict], populates: Iterable[Populate]) -> List[dict]:
        """Resolve each populate stage with a single ``$in`` lookup on the referenced collection."""
        for spec in populates:
            target = self.references.get(spec.path)
            if target is None:
                raise ValueError(f"'{spec.path}' is not a reference of '{self.collection_name}'")

            ids = set()
            for doc in docs:
                value = doc.get(spec.path)
                if isinstance(value, list):
                    ids.update(value)
                elif value is not None:
                    ids.add(value)
            if not ids:
                continue

            cursor = self._collection(target).find({"_id": {"$in": list(ids)}}, parse_projection(spec.select))
            related = {item["_id"]: item for item in await cursor.to_list(length=None)}

            for doc in docs:
                value = doc.get(spec.path)
                if isinstance(value, list):
                    doc[spec.path] = [related[ref] for ref in value if ref in related]
                elif value is not None:
                    doc[spec.path] = related.get(value)
        return docs

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    async def find(self, query: Query) -> List[dict]:
        cursor = self._collection().find(self._to_object_ids(query.filters), query.projection)
        if query.ordering:
            cursor = cursor.sort(list(query.ordering))
        if query.offset:
            cursor = cursor.skip(query.offset)
        if query.max_results:
            cursor = cursor.limit(query.max_results)

        docs = await cursor.to_list(length=None)
        docs = await self._populate(docs, query.populates)
        return [self._serialize(doc) for doc in docs]

    async def find_one(self, query: Query) -> Optional[dict]:
        doc = await self._collection().find_one(self._to_object_ids(query.filters), query.projection)
        if not doc:
            return None
        [doc] = await self._populate([doc], query.populates)
        return self._serialize(doc)

    async def find_by_id(
        self, doc_id: str, select: Optional[str] = None, populate: Iterable[str] = ()
    ) -> Optional[dict]:
        query = Query({"_id": doc_id}, fields=select)
        for path in populate:
            query = query.populate(path)
        return await self.find_one(query)

    async def estimated_count(self) -> int:
        return await self._collection().estimated_document_count()

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    async def insert(self, data: Mapping[str, Any]) -> dict:
        document = self._to_object_ids(self.document_cls(**data).model_dump())
        result = await self._collection().insert_one(document)
        document["_id"] = result.inserted_id
        return self._serialize(document)

    async def update_by_id(self, doc_id: str, changes: Mapping[str, Any]) -> Optional[dict]:
        """Apply ``changes`` and return the updated document, or None when no document matched."""
        update = {**self._to_object_ids(changes), "updated_at": utcnow()}
        doc = await self._collection().find_one_and_update(
            {"_id": ObjectId(doc_id)},
            {"$set": update},
            return_document=ReturnDocument.AFTER,
        )
        return self._serialize(doc) if doc else None

    async def save(self, document: Mapping[str, Any]) -> dict:
        """Write every field of a previously fetched document back to its record."""
        fields = {key: value for key, value in document.items() if key != "_id"}
        fields["updated_at"] = utcnow()
        await self._collection().update_one(
            {"_id": ObjectId(document["_id"])},
            {"$set": self._to_object_ids(fields)},
        )
        return self._serialize({**document, **fields})

    async def delete_by_id(self, doc_id: str, select: Optional[str] = None) -> Optional[dict]:
        doc = await self._collection().find_one_and_delete(
            {"_id": ObjectId(doc_id)},
            projection=parse_projection(select),
        )
        return self._serialize(doc) if doc else None


def _object_ids(value: Any) -> Any:
    if isinstance(value, str):
        return ObjectId(value)
    if isinstance(value, list):
        return [_object_ids(item) for item in value]
    if isinstance(value, dict):
        return {key: _object_ids(item) for key, item in value.items()}
    return value
