"""Money-saving recommendations."""

from studycost.advice.tips import (
    STATIC_TIPS,
    TipsGenerator,
    TipsServiceError,
    OpenAITipsGenerator,
    build_tips_generator,
    get_recommendations,
    parse_tips,
)

__all__ = [
    "STATIC_TIPS",
    "TipsGenerator",
    "TipsServiceError",
    "OpenAITipsGenerator",
    "build_tips_generator",
    "get_recommendations",
    "parse_tips",
]
