from fastapi.responses import JSONResponse

from storefront.core.constants import DEFAULT_ORDER_STATUS, WITHOUT_PHOTO
from storefront.core.responses import failure, respond, success
from storefront.core.security import Identity
from storefront.core.validation import FieldRule, RequiredFields
from storefront.models import CheckoutPayload, OrderStatusPayload
from storefront.repositories.query import Query

CHECKOUT_FIELDS = RequiredFields.of(FieldRule("products", "Cart is Required"))


def order_query(filters: dict | None = None) -> Query:
    """Orders with their products (without photos) and the buyer's name resolved."""
    return Query(filters or {}).populate("products", WITHOUT_PHOTO).populate("buyer", "name")


class OrderController:
    def __init__(self, order_repo, logger):
        self.order_repo = order_repo
        self.logger = logger

    async def get_orders(self, identity: Identity) -> JSONResponse:
        try:
            orders = await self.order_repo.find(order_query({"buyer": identity.user_id}))
            return respond(200, orders)
        except Exception as e:
            self.logger.error("Fetching orders failed", user_id=identity.user_id, exc_info=True)
            return failure(500, "Error WHile Geting Orders", error=e)

    async def get_all_orders(self) -> JSONResponse:
        try:
            orders = await self.order_repo.find(order_query().sort({"created_at": -1}))
            return respond(200, orders)
        except Exception as e:
            self.logger.error("Fetching all orders failed", exc_info=True)
            return failure(500, "Error WHile Geting Orders", error=e)

    async def order_status(self, order_id: str, payload: OrderStatusPayload) -> JSONResponse:
        try:
            order = await self.order_repo.update_by_id(order_id, payload.model_dump(exclude_none=True))
            self.logger.info("Order status changed", order_id=order_id, status=payload.status)
            return respond(200, order)
        except Exception as e:
            self.logger.error("Order status update failed", order_id=order_id, exc_info=True)
            return failure(500, "Error While Updateing Order", error=e)

    async def checkout(self, identity: Identity, payload: CheckoutPayload) -> JSONResponse:
        """Place an order for the signed-in user's cart."""
        result = CHECKOUT_FIELDS.validate(payload.model_dump())
        if not result.ok:
            return respond(400, result.first.as_body())

        try:
            order = await self.order_repo.insert(
                {"products": payload.products, "buyer": identity.user_id, "status": DEFAULT_ORDER_STATUS}
            )
            self.logger.info("Order placed", order_id=order["_id"], buyer=identity.user_id)
            return success(201, "Order Placed Successfully", order=order)
        except Exception as e:
            self.logger.error("Checkout failed", user_id=identity.user_id, exc_info=True)
            return failure(500, "Error while placing order", error=e)
