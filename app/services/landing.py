"""Public landing page copy."""

from app.schemas.landing import CallToAction, LandingFeature, LandingPageContent

FEATURES = (
    LandingFeature(
        title="Responsive Design",
        description="Beautiful interfaces that work seamlessly across all devices",
        icon="pi-mobile",
    ),
    LandingFeature(
        title="Secure Authentication",
        description="Enterprise-grade security with modern authentication flows",
        icon="pi-shield",
    ),
    LandingFeature(
        title="Real-time Dashboard",
        description="Monitor and manage your data with live updates and insights",
        icon="pi-chart-line",
    ),
)


def get_landing_page_content() -> LandingPageContent:
    return LandingPageContent(
        title="Welcome to Our Amazing App",
        subtitle="Build faster, scale better, and deliver exceptional user experiences",
        features=list(FEATURES),
        call_to_action=CallToAction(
            title="Ready to Get Started?",
            description="Join thousands of users who are already building amazing things",
            button_text="Sign Up Now",
        ),
    )
