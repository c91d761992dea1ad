"""Styleguide domain: template catalog, chat responder, demo fixture."""

from studio_core.styleguide.catalog import (
    BUILTIN_TEMPLATES,
    MINIMALISTIC_TEMPLATE,
    BuiltinTemplateCatalog,
    DatabaseTemplateCatalog,
    TemplateRepository,
)
from studio_core.styleguide.demo import DEMO_USER_ID, build_demo_styleguide
from studio_core.styleguide.models import (
    ChatRequest,
    ChatResponse,
    ConversationResponse,
    OnboardingSnapshot,
    StyleguideCreatedResponse,
    StyleguideData,
    StyleguideDocument,
    StyleguideFields,
    StyleguideTemplate,
)
from studio_core.styleguide.responder import generate_styleguide_response, is_creation_request

__all__ = [
    "BUILTIN_TEMPLATES",
    "DEMO_USER_ID",
    "MINIMALISTIC_TEMPLATE",
    "BuiltinTemplateCatalog",
    "ChatRequest",
    "ChatResponse",
    "ConversationResponse",
    "DatabaseTemplateCatalog",
    "OnboardingSnapshot",
    "StyleguideCreatedResponse",
    "StyleguideData",
    "StyleguideDocument",
    "StyleguideFields",
    "StyleguideTemplate",
    "TemplateRepository",
    "build_demo_styleguide",
    "generate_styleguide_response",
    "is_creation_request",
]
