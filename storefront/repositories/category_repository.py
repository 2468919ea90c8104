from typing import Optional

from storefront.models.documents import CategoryDocument
from storefront.repositories.base_repository import MongoRepository
from storefront.repositories.query import Query


class CategoryRepository(MongoRepository):
    collection_name = "categories"
    document_cls = CategoryDocument

    async def get_by_name(self, name: str) -> Optional[dict]:
        return await self.find_one(Query({"name": name}))

    async def get_by_slug(self, slug: str) -> Optional[dict]:
        return await self.find_one(Query({"slug": slug}))
