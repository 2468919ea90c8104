from storefront.storefront import StorefrontService

__all__ = ["StorefrontService"]
