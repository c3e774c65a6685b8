"""Public landing page content."""

from fastapi import APIRouter

from app.schemas.landing import LandingPageContent
from app.services.landing import get_landing_page_content

router = APIRouter()


@router.get("", response_model=LandingPageContent)
def get_landing() -> LandingPageContent:
    return get_landing_page_content()
