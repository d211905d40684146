from fastapi import Request

from app.application.use_cases.image_fetch import FetchImageUseCase
from app.infrastructure.adapters.bundles.image import get_image_fetch_adapter_bundle


def get_fetch_image_use_case(request: Request) -> FetchImageUseCase:
    """Compose the FetchImageUseCase around the browser session opened at startup."""
    adapters = get_image_fetch_adapter_bundle(request.app.state.browser_session)
    return FetchImageUseCase(adapters)
