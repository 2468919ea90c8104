"""Storefront Service - e-commerce backend for users, categories, products and orders."""

from contextlib import asynccontextmanager
from typing import Any, Callable, List, Mapping, Optional

from fastapi import Depends, FastAPI, File, Form, Request, UploadFile
from fastapi.middleware.cors import CORSMiddleware

from storefront.core import AuthGate, GateRejection, StorefrontSettings, TokenSigner, get_logger, get_settings
from storefront.core.middleware import RequestLoggingMiddleware
from storefront.core.responses import failure, respond
from storefront.db import Database
from storefront.models import (
    # Auth
    ForgotPasswordPayload,
    LoginPayload,
    ProfileUpdatePayload,
    RegisterPayload,
    # Category
    CategoryPayload,
    # Orders
    CheckoutPayload,
    OrderStatusPayload,
    # Products
    ProductFilterPayload,
    ProductForm,
)
from storefront.repositories import CategoryRepository, OrderRepository, ProductRepository, UserRepository
from storefront.services import AuthController, CategoryController, OrderController, ProductController

API_PREFIX = "/api/v1"


def product_form(
    name: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    price: Optional[float] = Form(None),
    category: Optional[str] = Form(None),
    quantity: Optional[int] = Form(None),
    shipping: Optional[bool] = Form(None),
) -> ProductForm:
    """Collect the multipart product fields into a :class:`ProductForm`."""
    return ProductForm(
        name=name,
        description=description,
        price=price,
        category=category,
        quantity=quantity,
        shipping=shipping,
    )


class StorefrontService:
    """Storefront service exposing auth, category, product and order endpoints.

    Everything is built from one settings object: the database connection, the token signer,
    the repositories and the controllers. Tests pass ``enable_db=False`` together with their own
    repositories::

        service = StorefrontService(settings, enable_db=False, repositories={"users": FakeUsers()})
    """

    def __init__(
        self,
        settings: Optional[StorefrontSettings] = None,
        *,
        repositories: Optional[Mapping[str, Any]] = None,
        enable_db: bool = True,
    ):
        self.settings = settings or get_settings()
        self.logger = get_logger("service", settings=self.settings)

        # Database and repositories
        self.database: Optional[Database] = Database(self.settings) if enable_db else None
        repos = dict(repositories or {})
        if self.database is not None:
            db = self.database.db
            repos.setdefault("users", UserRepository(db))
            repos.setdefault("categories", CategoryRepository(db))
            repos.setdefault("products", ProductRepository(db))
            repos.setdefault("orders", OrderRepository(db))
        self.user_repo = repos.get("users")
        self.category_repo = repos.get("categories")
        self.product_repo = repos.get("products")
        self.order_repo = repos.get("orders")

        # Auth
        self.signer = TokenSigner.from_settings(self.settings)
        self.gate = AuthGate(self.signer, self.user_repo, get_logger("auth.gate", settings=self.settings))

        # Controllers
        self.auth = AuthController(self.user_repo, self.signer, get_logger("auth", settings=self.settings))
        self.categories = CategoryController(self.category_repo, get_logger("category", settings=self.settings))
        self.products = ProductController.from_settings(
            self.settings, self.product_repo, self.category_repo, get_logger("product", settings=self.settings)
        )
        self.orders = OrderController(self.order_repo, get_logger("order", settings=self.settings))

        self.app = FastAPI(
            title="Storefront",
            summary="Storefront Backend Service",
            description="REST API for users, categories, products and orders",
            lifespan=self._lifespan,
        )

        # Middleware
        self.app.add_middleware(
            CORSMiddleware,
            allow_origins=self.settings.CORS_ORIGINS,
            allow_methods=["*"],
            allow_headers=["*"],
        )
        self.app.add_middleware(
            RequestLoggingMiddleware,
            logger=self.logger,
            service_name="storefront",
            add_request_id_header=True,
        )
        self.app.add_exception_handler(GateRejection, self._handle_gate_rejection)

        # Register endpoints
        self._register_root_endpoints()
        self._register_auth_endpoints()
        self._register_category_endpoints()
        self._register_product_endpoints()

    @asynccontextmanager
    async def _lifespan(self, app: FastAPI):
        if self.database is not None:
            await self.database.initialize()
        self.logger.info("Storefront started", url=self.settings.URL, db_enabled=self.database is not None)
        try:
            yield
        finally:
            if self.database is not None:
                self.database.close()
            self.logger.info("Storefront stopped")

    async def _handle_gate_rejection(self, request: Request, exc: GateRejection):
        return failure(exc.status_code, exc.message, error=exc.error)

    # -------------------------------------------------------------------------
    # Endpoint registration
    # -------------------------------------------------------------------------

    def add_endpoint(
        self,
        path: str,
        func: Callable,
        methods: List[str] | None = None,
        dependencies: List[Any] | None = None,
    ) -> None:
        """Register ``func`` as the handler of ``path``."""
        self.app.add_api_route(
            path,
            endpoint=func,
            methods=methods or ["POST"],
            dependencies=dependencies or [],
        )

    @property
    def signed_in(self) -> List[Any]:
        return [Depends(self.gate.require_sign_in)]

    @property
    def admin_only(self) -> List[Any]:
        return [Depends(self.gate.require_sign_in), Depends(self.gate.require_admin)]

    def _register_root_endpoints(self) -> None:
        self.add_endpoint("/", self.welcome, methods=["GET"])
        self.add_endpoint("/health", self.health, methods=["GET"])

    def _register_auth_endpoints(self) -> None:
        """Register auth, profile and order endpoints."""
        prefix = f"{API_PREFIX}/auth"
        self.add_endpoint(f"{prefix}/register", self.register, methods=["POST"])
        self.add_endpoint(f"{prefix}/login", self.login, methods=["POST"])
        self.add_endpoint(f"{prefix}/forgot-password", self.forgot_password, methods=["POST"])
        self.add_endpoint(f"{prefix}/test", self.test, methods=["GET"], dependencies=self.admin_only)
        self.add_endpoint(f"{prefix}/user-auth", self.user_auth, methods=["GET"], dependencies=self.signed_in)
        self.add_endpoint(f"{prefix}/admin-auth", self.admin_auth, methods=["GET"], dependencies=self.admin_only)
        self.add_endpoint(f"{prefix}/profile", self.update_profile, methods=["PUT"], dependencies=self.signed_in)
        self.add_endpoint(f"{prefix}/orders", self.get_orders, methods=["GET"], dependencies=self.signed_in)
        self.add_endpoint(f"{prefix}/all-orders", self.get_all_orders, methods=["GET"], dependencies=self.admin_only)
        self.add_endpoint(
            f"{prefix}/order-status/{{order_id}}", self.order_status, methods=["PUT"], dependencies=self.admin_only
        )

    def _register_category_endpoints(self) -> None:
        """Register category endpoints."""
        prefix = f"{API_PREFIX}/category"
        self.add_endpoint(
            f"{prefix}/create-category", self.create_category, methods=["POST"], dependencies=self.admin_only
        )
        self.add_endpoint(
            f"{prefix}/update-category/{{category_id}}",
            self.update_category,
            methods=["PUT"],
            dependencies=self.admin_only,
        )
        self.add_endpoint(f"{prefix}/get-category", self.list_categories, methods=["GET"])
        self.add_endpoint(f"{prefix}/single-category/{{slug}}", self.single_category, methods=["GET"])
        self.add_endpoint(
            f"{prefix}/delete-category/{{category_id}}",
            self.delete_category,
            methods=["DELETE"],
            dependencies=self.admin_only,
        )

    def _register_product_endpoints(self) -> None:
        """Register product catalog and checkout endpoints."""
        prefix = f"{API_PREFIX}/product"
        self.add_endpoint(
            f"{prefix}/create-product", self.create_product, methods=["POST"], dependencies=self.admin_only
        )
        self.add_endpoint(
            f"{prefix}/update-product/{{product_id}}",
            self.update_product,
            methods=["PUT"],
            dependencies=self.admin_only,
        )
        self.add_endpoint(f"{prefix}/get-product", self.get_products, methods=["GET"])
        self.add_endpoint(f"{prefix}/get-product/{{slug}}", self.get_single_product, methods=["GET"])
        self.add_endpoint(f"{prefix}/product-photo/{{product_id}}", self.product_photo, methods=["GET"])
        self.add_endpoint(
            f"{prefix}/delete-product/{{product_id}}",
            self.delete_product,
            methods=["DELETE"],
            dependencies=self.admin_only,
        )
        self.add_endpoint(f"{prefix}/product-filters", self.product_filters, methods=["POST"])
        self.add_endpoint(f"{prefix}/product-count", self.product_count, methods=["GET"])
        self.add_endpoint(f"{prefix}/product-list", self.product_list, methods=["GET"])
        self.add_endpoint(f"{prefix}/product-list/{{page}}", self.product_list, methods=["GET"])
        self.add_endpoint(f"{prefix}/search/{{keyword}}", self.search_product, methods=["GET"])
        self.add_endpoint(
            f"{prefix}/related-product/{{product_id}}/{{category_id}}", self.related_product, methods=["GET"]
        )
        self.add_endpoint(f"{prefix}/product-category/{{slug}}", self.product_category, methods=["GET"])
        self.add_endpoint(f"{prefix}/checkout", self.checkout, methods=["POST"], dependencies=self.signed_in)

    # -------------------------------------------------------------------------
    # Root endpoints
    # -------------------------------------------------------------------------

    async def welcome(self):
        return respond(200, {"message": "Welcome to the Storefront API"})

    async def health(self):
        return {"status": "ok"}

    # -------------------------------------------------------------------------
    # Auth endpoints
    # -------------------------------------------------------------------------

    async def register(self, payload: Optional[RegisterPayload] = None):
        return await self.auth.register(payload or RegisterPayload())

    async def login(self, payload: Optional[LoginPayload] = None):
        return await self.auth.login(payload or LoginPayload())

    async def forgot_password(self, payload: Optional[ForgotPasswordPayload] = None):
        return await self.auth.forgot_password(payload or ForgotPasswordPayload())

    async def test(self):
        return await self.auth.test()

    async def user_auth(self):
        return await self.auth.user_auth()

    async def admin_auth(self):
        return await self.auth.admin_auth()

    async def update_profile(self, request: Request, payload: Optional[ProfileUpdatePayload] = None):
        return await self.auth.update_profile(request.state.user, payload or ProfileUpdatePayload())

    # -------------------------------------------------------------------------
    # Order endpoints
    # -------------------------------------------------------------------------

    async def get_orders(self, request: Request):
        return await self.orders.get_orders(request.state.user)

    async def get_all_orders(self):
        return await self.orders.get_all_orders()

    async def order_status(self, order_id: str, payload: Optional[OrderStatusPayload] = None):
        return await self.orders.order_status(order_id, payload or OrderStatusPayload())

    async def checkout(self, request: Request, payload: Optional[CheckoutPayload] = None):
        return await self.orders.checkout(request.state.user, payload or CheckoutPayload())

    # -------------------------------------------------------------------------
    # Category endpoints
    # -------------------------------------------------------------------------

    async def create_category(self, payload: Optional[CategoryPayload] = None):
        return await self.categories.create_category(payload or CategoryPayload())

    async def update_category(self, category_id: str, payload: Optional[CategoryPayload] = None):
        return await self.categories.update_category(category_id, payload or CategoryPayload())

    async def list_categories(self):
        return await self.categories.list_categories()

    async def single_category(self, slug: str):
        return await self.categories.single_category(slug)

    async def delete_category(self, category_id: str):
        return await self.categories.delete_category(category_id)

    # -------------------------------------------------------------------------
    # Product endpoints
    # -------------------------------------------------------------------------

    async def create_product(
        self,
        form: ProductForm = Depends(product_form),
        photo: Optional[UploadFile] = File(None),
    ):
        return await self.products.create_product(form, photo)

    async def update_product(
        self,
        product_id: str,
        form: ProductForm = Depends(product_form),
        photo: Optional[UploadFile] = File(None),
    ):
        return await self.products.update_product(product_id, form, photo)

    async def get_products(self):
        return await self.products.get_products()

    async def get_single_product(self, slug: str):
        return await self.products.get_single_product(slug)

    async def product_photo(self, product_id: str):
        return await self.products.product_photo(product_id)

    async def delete_product(self, product_id: str):
        return await self.products.delete_product(product_id)

    async def product_filters(self, payload: Optional[ProductFilterPayload] = None):
        return await self.products.product_filters(payload or ProductFilterPayload())

    async def product_count(self):
        return await self.products.product_count()

    async def product_list(self, page: Optional[int] = None):
        return await self.products.product_list(page)

    async def search_product(self, keyword: str):
        return await self.products.search_product(keyword)

    async def related_product(self, product_id: str, category_id: str):
        return await self.products.related_product(product_id, category_id)

    async def product_category(self, slug: str):
        return await self.products.product_category(slug)
