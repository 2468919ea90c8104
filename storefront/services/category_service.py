from fastapi.responses import JSONResponse

from storefront.core.responses import failure, respond, success
from storefront.core.slug import slugify
from storefront.core.validation import FieldRule, RequiredFields
from storefront.models import CategoryPayload
from storefront.repositories.query import Query

CATEGORY_FIELDS = RequiredFields.of(FieldRule("name", "Name is required"))


class CategoryController:
    def __init__(self, category_repo, logger):
        self.category_repo = category_repo
        self.logger = logger

    async def create_category(self, payload: CategoryPayload) -> JSONResponse:
        result = CATEGORY_FIELDS.validate(payload.model_dump())
        if not result.ok:
            return respond(401, result.first.as_body())

        try:
            if await self.category_repo.get_by_name(payload.name):
                return success(200, "Category Already Exisits")

            category = await self.category_repo.insert({"name": payload.name, "slug": slugify(payload.name)})
            self.logger.info("Category created", category_id=category["_id"], slug=category["slug"])
            return success(201, "new category created", category=category)
        except Exception as e:
            self.logger.error("Category creation failed", name=payload.name, exc_info=True)
            return failure(500, "Errro in Category", error=e)

    async def update_category(self, category_id: str, payload: CategoryPayload) -> JSONResponse:
        result = CATEGORY_FIELDS.validate(payload.model_dump())
        if not result.ok:
            return respond(401, result.first.as_body())

        try:
            category = await self.category_repo.update_by_id(
                category_id, {"name": payload.name, "slug": slugify(payload.name)}
            )
            return success(200, "Category Updated Successfully", category=category)
        except Exception as e:
            self.logger.error("Category update failed", category_id=category_id, exc_info=True)
            return failure(500, "Error while updating category", error=e)

    async def list_categories(self) -> JSONResponse:
        try:
            categories = await self.category_repo.find(Query())
            return success(200, "All Categories List", category=categories)
        except Exception as e:
            self.logger.error("Listing categories failed", exc_info=True)
            return failure(500, "Error while getting all categories", error=e)

    async def single_category(self, slug: str) -> JSONResponse:
        try:
            category = await self.category_repo.get_by_slug(slug)
            return success(200, "Get SIngle Category SUccessfully", category=category)
        except Exception as e:
            self.logger.error("Fetching category failed", slug=slug, exc_info=True)
            return failure(500, "Error While getting Single Category", error=e)

    async def delete_category(self, category_id: str) -> JSONResponse:
        try:
            await self.category_repo.delete_by_id(category_id)
            self.logger.info("Category deleted", category_id=category_id)
            return success(200, "Categry Deleted Successfully")
        except Exception as e:
            self.logger.error("Category deletion failed", category_id=category_id, exc_info=True)
            return failure(500, "error while deleting category", error=e)
