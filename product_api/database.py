# product_api/database.py
import logging
from typing import Any, Dict, List, Optional

from bson import ObjectId
from pymongo import AsyncMongoClient, ReturnDocument
from pymongo.errors import PyMongoError

from product_api.config import Settings
from product_api.errors import InternalError, StoreUnavailable
from product_api.models import ID_FIELD, NewProduct
from product_api.query import ProductQuery

logger = logging.getLogger(__name__)


class ProductStore:
    """
    Interface shared by the store backends.

    Records cross this boundary in their public form: the identifier is a
    string under "id". Lookups by id return None (or False for deletes) when
    nothing matched; every other failure is raised as InternalError.
    """

    @property
    def ready(self) -> bool:
        raise NotImplementedError

    async def connect(self) -> None:
        raise NotImplementedError

    async def close(self) -> None:
        pass

    async def find(self, query: ProductQuery) -> List[Dict[str, Any]]:
        raise NotImplementedError

    async def find_by_id(self, product_id: str) -> Optional[Dict[str, Any]]:
        raise NotImplementedError

    async def insert(self, product: NewProduct) -> str:
        raise NotImplementedError

    async def update_by_id(self, product_id: str, changes: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        raise NotImplementedError

    async def delete_by_id(self, product_id: str) -> bool:
        raise NotImplementedError


def to_public(doc: Dict[str, Any]) -> Dict[str, Any]:
    """Rename Mongo's _id to a string id, keeping it as the first key."""
    if "_id" not in doc:
        return doc
    rest = {k: v for k, v in doc.items() if k != "_id"}
    return {ID_FIELD: str(doc["_id"]), **rest}


# ---------------------------
# MongoDB
# ---------------------------
class MongoProductStore(ProductStore):
    def __init__(self, uri: str, db_name: str = "shop", collection_name: str = "products"):
        self.uri = uri
        self.db_name = db_name
        self.collection_name = collection_name
        self._client: Optional[AsyncMongoClient] = None
        self._collection = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "MongoProductStore":
        return cls(settings.mongo_uri, settings.db_name, settings.collection_name)

    @property
    def ready(self) -> bool:
        return self._collection is not None

    async def connect(self) -> None:
        client = AsyncMongoClient(self.uri)
        try:
            await client.admin.command("ping")
        except PyMongoError:
            await client.close()
            raise
        self._client = client
        self._collection = client[self.db_name][self.collection_name]
        logger.info("Connected to MongoDB (%s.%s)", self.db_name, self.collection_name)

    async def close(self) -> None:
        if self._client is not None:
            await self._client.close()
        self._client = None
        self._collection = None

    @property
    def collection(self):
        if self._collection is None:
            raise StoreUnavailable()
        return self._collection

    async def find(self, query: ProductQuery) -> List[Dict[str, Any]]:
        try:
            cursor = self.collection.find(
                query.mongo_filter(),
                projection=query.mongo_projection(),
                sort=query.mongo_sort(),
            )
            docs = await cursor.to_list(None)
        except PyMongoError as e:
            raise InternalError(f"find failed: {e}") from e
        return [to_public(d) for d in docs]

    async def find_by_id(self, product_id: str) -> Optional[Dict[str, Any]]:
        try:
            doc = await self.collection.find_one({"_id": ObjectId(product_id)})
        except PyMongoError as e:
            raise InternalError(f"find_one failed: {e}") from e
        return to_public(doc) if doc else None

    async def insert(self, product: NewProduct) -> str:
        try:
            result = await self.collection.insert_one(product.model_dump())
        except PyMongoError as e:
            raise InternalError(f"insert_one failed: {e}") from e
        return str(result.inserted_id)

    async def update_by_id(self, product_id: str, changes: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        try:
            doc = await self.collection.find_one_and_update(
                {"_id": ObjectId(product_id)},
                {"$set": changes},
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError as e:
            raise InternalError(f"find_one_and_update failed: {e}") from e
        return to_public(doc) if doc else None

    async def delete_by_id(self, product_id: str) -> bool:
        try:
            result = await self.collection.delete_one({"_id": ObjectId(product_id)})
        except PyMongoError as e:
            raise InternalError(f"delete_one failed: {e}") from e
        return result.deleted_count > 0


# ---------------------------
# In-memory (tests, local development)
# ---------------------------
class MemoryProductStore(ProductStore):
    def __init__(self, products: Optional[List[NewProduct]] = None):
        # insertion order doubles as the default sort order
        self.products: Dict[str, Dict[str, Any]] = {}
        for p in products or []:
            self._put(p)

    @property
    def ready(self) -> bool:
        return True

    async def connect(self) -> None:
        logger.info("Using in-memory product store")

    def clear(self) -> None:
        self.products.clear()

    def _put(self, product: NewProduct) -> str:
        pid = str(ObjectId())
        self.products[pid] = {ID_FIELD: pid, **product.model_dump()}
        return pid

    async def find(self, query: ProductQuery) -> List[Dict[str, Any]]:
        out = [p for p in self.products.values() if query.matches(p)]
        if query.sort_direction is not None:
            out.sort(key=lambda p: p["price"], reverse=query.sort_direction < 0)
        return [query.project(p) for p in out]

    async def find_by_id(self, product_id: str) -> Optional[Dict[str, Any]]:
        p = self.products.get(product_id)
        return dict(p) if p else None

    async def insert(self, product: NewProduct) -> str:
        return self._put(product)

    async def update_by_id(self, product_id: str, changes: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        p = self.products.get(product_id)
        if not p:
            return None
        p.update(changes)
        return dict(p)

    async def delete_by_id(self, product_id: str) -> bool:
        return self.products.pop(product_id, None) is not None


def build_store(settings: Settings) -> ProductStore:
    if settings.store_backend == "memory":
        return MemoryProductStore()
    return MongoProductStore.from_settings(settings)
