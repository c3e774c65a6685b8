"""Pydantic schemas for public landing page content."""

from pydantic import BaseModel


class LandingFeature(BaseModel):
    title: str
    description: str
    icon: str


class CallToAction(BaseModel):
    title: str
    description: str
    button_text: str


class LandingPageContent(BaseModel):
    """Static marketing copy for the public landing page."""

    title: str
    subtitle: str
    features: list[LandingFeature]
    call_to_action: CallToAction
