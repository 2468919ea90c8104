"""Product catalog controller.

Listings never carry the photo bytes. Photos are served separately by :meth:`ProductController.product_photo`
with the content type they were uploaded with.
"""

from typing import Optional

from fastapi import Response
from fastapi.responses import JSONResponse

from storefront.core.constants import PHOTO_TOO_LARGE, WITHOUT_PHOTO
from storefront.core.exceptions import DocumentNotFoundError
from storefront.core.responses import failure, respond, success
from storefront.core.slug import slugify
from storefront.core.validation import FieldRule, RequiredFields
from storefront.models import Photo, PhotoUpload, ProductFilterPayload, ProductForm
from storefront.repositories.query import Query

PRODUCT_FIELDS = RequiredFields.of(
    FieldRule("name", "Name is Required", key="error"),
    FieldRule("description", "Description is Required", key="error"),
    FieldRule("price", "Price is Required", key="error"),
    FieldRule("category", "Category is Required", key="error"),
    FieldRule("quantity", "Quantity is Required", key="error"),
)


def without_photo(product: Optional[dict]) -> Optional[dict]:
    if product is None:
        return None
    return {key: value for key, value in product.items() if key != "photo"}


class ProductController:
    def __init__(
        self,
        product_repo,
        category_repo,
        logger,
        *,
        photo_max_bytes: int = 1_000_000,
        per_page: int = 6,
        recent_limit: int = 12,
        related_limit: int = 3,
    ):
        self.product_repo = product_repo
        self.category_repo = category_repo
        self.logger = logger
        self.photo_max_bytes = photo_max_bytes
        self.per_page = per_page
        self.recent_limit = recent_limit
        self.related_limit = related_limit

    @classmethod
    def from_settings(cls, settings, product_repo, category_repo, logger) -> "ProductController":
        return cls(
            product_repo,
            category_repo,
            logger,
            photo_max_bytes=settings.PHOTO_MAX_BYTES,
            per_page=settings.PRODUCTS_PER_PAGE,
            recent_limit=settings.RECENT_PRODUCTS_LIMIT,
            related_limit=settings.RELATED_PRODUCTS_LIMIT,
        )

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _check_form(self, form: ProductForm, photo: Optional[PhotoUpload]) -> Optional[JSONResponse]:
        """Return the rejection for an invalid form, or None when it can be persisted."""
        result = PRODUCT_FIELDS.validate(form.model_dump())
        if not result.ok:
            return respond(500, result.first.as_body())
        if photo is not None and (photo.size or 0) > self.photo_max_bytes:
            return respond(500, {"error": PHOTO_TOO_LARGE})
        return None

    @staticmethod
    async def _read_photo(photo: Optional[PhotoUpload]) -> Optional[dict]:
        if photo is None:
            return None
        data = await photo.read()
        if not data:
            return None
        return Photo(data=data, content_type=photo.content_type or "application/octet-stream").model_dump()

    # -------------------------------------------------------------------------
    # Admin operations
    # -------------------------------------------------------------------------

    async def create_product(self, form: ProductForm, photo: Optional[PhotoUpload] = None) -> JSONResponse:
        rejection = self._check_form(form, photo)
        if rejection is not None:
            return rejection

        try:
            data = {**form.model_dump(exclude_none=True), "slug": slugify(form.name)}
            stored_photo = await self._read_photo(photo)
            if stored_photo:
                data["photo"] = stored_photo

            product = await self.product_repo.insert(data)
            self.logger.info("Product created", product_id=product["_id"], slug=product["slug"])
            return success(201, "Product Created Successfully", products=without_photo(product))
        except Exception as e:
            self.logger.error("Product creation failed", name=form.name, exc_info=True)
            return failure(500, "Error in creating product", error=e)

    async def update_product(
        self, product_id: str, form: ProductForm, photo: Optional[PhotoUpload] = None
    ) -> JSONResponse:
        """Update the product fields, then store the new photo in a second write."""
        rejection = self._check_form(form, photo)
        if rejection is not None:
            return rejection

        try:
            changes = {**form.model_dump(exclude_none=True), "slug": slugify(form.name)}
            product = await self.product_repo.update_by_id(product_id, changes)

            stored_photo = await self._read_photo(photo)
            if product is not None and stored_photo:
                product = await self.product_repo.save({**product, "photo": stored_photo})

            return success(201, "Product Updated Successfully", products=without_photo(product))
        except Exception as e:
            self.logger.error("Product update failed", product_id=product_id, exc_info=True)
            return failure(500, "Error in Update product", error=e)

    async def delete_product(self, product_id: str) -> JSONResponse:
        try:
            await self.product_repo.delete_by_id(product_id, select=WITHOUT_PHOTO)
            self.logger.info("Product deleted", product_id=product_id)
            return success(200, "Product Deleted successfully")
        except Exception as e:
            self.logger.error("Product deletion failed", product_id=product_id, exc_info=True)
            return failure(500, "Error while deleting product", error=e)

    # -------------------------------------------------------------------------
    # Catalog
    # -------------------------------------------------------------------------

    async def get_products(self) -> JSONResponse:
        try:
            query = (
                Query()
                .populate("category")
                .select(WITHOUT_PHOTO)
                .limit(self.recent_limit)
                .sort({"created_at": -1})
            )
            products = await self.product_repo.find(query)
            return success(200, "ALlProducts ", countTotal=len(products), products=products)
        except Exception as e:
            self.logger.error("Listing products failed", exc_info=True)
            return failure(500, "Error in getting products", error=e)

    async def get_single_product(self, slug: str) -> JSONResponse:
        try:
            product = await self.product_repo.find_one(
                Query({"slug": slug}).select(WITHOUT_PHOTO).populate("category")
            )
            return success(200, "Single Product Fetched", product=product)
        except Exception as e:
            self.logger.error("Fetching product failed", slug=slug, exc_info=True)
            return failure(500, "Error while getting single product", error=e)

    async def product_photo(self, product_id: str) -> Response:
        try:
            product = await self.product_repo.find_by_id(product_id, select="photo")
            if product is None:
                raise DocumentNotFoundError(f"Product with id '{product_id}' not found")

            photo = product.get("photo") or {}
            if not photo.get("data"):
                return failure(404, "No photo for this product")
            return Response(content=photo["data"], media_type=photo.get("content_type"))
        except Exception as e:
            self.logger.error("Fetching photo failed", product_id=product_id, exc_info=True)
            return failure(500, "Error while getting photo", error=e)

    async def product_filters(self, payload: ProductFilterPayload) -> JSONResponse:
        try:
            filters: dict = {}
            if payload.checked:
                filters["category"] = {"$in": payload.checked}
            if payload.radio:
                filters["price"] = {"$gte": payload.radio[0], "$lte": payload.radio[1]}

            products = await self.product_repo.find(Query(filters).select(WITHOUT_PHOTO))
            return success(200, products=products)
        except Exception as e:
            self.logger.error("Filtering products failed", exc_info=True)
            return failure(400, "Error WHile Filtering Products", error=e)

    async def product_count(self) -> JSONResponse:
        try:
            total = await self.product_repo.estimated_count()
            return success(200, total=total)
        except Exception as e:
            self.logger.error("Counting products failed", exc_info=True)
            return failure(400, "Error in product count", error=e)

    async def product_list(self, page: Optional[int] = None) -> JSONResponse:
        """One page of the newest products, pages starting at 1."""
        page = page or 1
        try:
            query = (
                Query()
                .select(WITHOUT_PHOTO)
                .skip((page - 1) * self.per_page)
                .limit(self.per_page)
                .sort({"created_at": -1})
            )
            products = await self.product_repo.find(query)
            return success(200, products=products)
        except Exception as e:
            self.logger.error("Listing product page failed", page=page, exc_info=True)
            return failure(400, "error in per page ctrl", error=e)

    async def search_product(self, keyword: str) -> JSONResponse:
        try:
            filters = {
                "$or": [
                    {"name": {"$regex": keyword, "$options": "i"}},
                    {"description": {"$regex": keyword, "$options": "i"}},
                ]
            }
            products = await self.product_repo.find(Query(filters).select(WITHOUT_PHOTO))
            return respond(200, products)
        except Exception as e:
            self.logger.error("Product search failed", keyword=keyword, exc_info=True)
            return failure(400, "Error In Search Product API", error=e)

    async def related_product(self, product_id: str, category_id: str) -> JSONResponse:
        try:
            query = (
                Query({"category": category_id, "_id": {"$ne": product_id}})
                .select(WITHOUT_PHOTO)
                .limit(self.related_limit)
                .populate("category")
            )
            products = await self.product_repo.find(query)
            return success(200, products=products)
        except Exception as e:
            self.logger.error("Fetching related products failed", product_id=product_id, exc_info=True)
            return failure(400, "error while getting related product", error=e)

    async def product_category(self, slug: str) -> JSONResponse:
        try:
            category = await self.category_repo.get_by_slug(slug)
            products = []
            if category is not None:
                products = await self.product_repo.find(
                    Query({"category": category["_id"]}).select(WITHOUT_PHOTO).populate("category")
                )
            return success(200, category=category, products=products)
        except Exception as e:
            self.logger.error("Fetching category products failed", slug=slug, exc_info=True)
            return failure(400, "Error While Getting products", error=e)
