"""Demo styleguide served for the showcase identifier.

Only used when nothing is persisted for that identifier and the fixture is
enabled in settings.
"""

from __future__ import annotations

from datetime import UTC, datetime

from studio_core.styleguide.models import StyleguideDocument

DEMO_USER_ID = "demo123"

_DEMO_IMAGES = (
    "https://i.postimg.cc/VLCFmXVr/1.png",
    "https://i.postimg.cc/WpDyqFyj/10.png",
    "https://i.postimg.cc/SRz1B3Hk/11.png",
)


def build_demo_styleguide(user_id: str = DEMO_USER_ID, now: datetime | None = None) -> StyleguideDocument:
    """Return the fully populated demo document stamped with *now*."""
    stamp = now or datetime.now(UTC)
    return StyleguideDocument(
        id=1,
        user_id=user_id,
        template_id="minimalistic",
        title="Sarah Johnson",
        subtitle="Strategic Brand Consultant",
        personal_mission=(
            "Empowering women entrepreneurs to build authentic, profitable brands that reflect "
            "their true essence and create meaningful impact in the world."
        ),
        brand_voice=(
            "Warm, professional, and inspiring with an authentic, conversational tone that makes "
            "complex business concepts feel accessible and achievable."
        ),
        target_audience=(
            "Ambitious women entrepreneurs ready to elevate their brand and scale their business "
            "with authentic, strategic positioning."
        ),
        visual_style="Refined minimal with editorial sophistication",
        color_palette={
            "primary": "#1a1a1a",
            "secondary": "#666666",
            "accent": "#f8f8f8",
            "text": "#1a1a1a",
            "background": "#fefefe",
            "border": "#f0f0f0",
        },
        typography={
            "headline": "Helvetica Neue, sans-serif",
            "subheading": "Helvetica Neue, sans-serif",
            "body": "Helvetica Neue, sans-serif",
            "accent": "Helvetica Neue, sans-serif",
        },
        image_selections={
            "heroImage": _DEMO_IMAGES[0],
            "portraitImages": list(_DEMO_IMAGES),
            "lifestyleImages": [*_DEMO_IMAGES, _DEMO_IMAGES[0]],
        },
        brand_personality={
            "traits": ["Authentic", "Professional", "Inspiring", "Strategic", "Warm", "Confident"],
            "keywords": ["Authentic", "Strategic", "Inspiring"],
            "vibe": "Refined Minimal Professional",
        },
        business_applications={
            "primaryService": "Strategic Brand Consulting",
            "priceRange": "Premium Investment",
            "clientExperience": "Transformational & Personal",
        },
        is_active=True,
        created_at=stamp,
        updated_at=stamp,
    )
