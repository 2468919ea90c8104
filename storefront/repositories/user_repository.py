from typing import Optional

from storefront.models.documents import UserDocument
from storefront.repositories.base_repository import MongoRepository
from storefront.repositories.query import Query


class UserRepository(MongoRepository):
    collection_name = "users"
    document_cls = UserDocument

    async def get_by_email(self, email: str) -> Optional[dict]:
        return await self.find_one(Query({"email": email}))
