"""Entry point for running Storefront via `python -m storefront`."""

from urllib.parse import urlparse

import uvicorn

from storefront import StorefrontService
from storefront.core.settings import get_settings

if __name__ == "__main__":
    settings = get_settings()
    url = urlparse(settings.URL)

    print(f"Starting Storefront service at {settings.URL}...")
    print("Press Ctrl+C to stop.")

    service = StorefrontService(settings)
    uvicorn.run(service.app, host=url.hostname or "0.0.0.0", port=url.port or 8080, log_config=None)
