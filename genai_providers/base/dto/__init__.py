"""Pydantic DTOs exchanged between the provider facade, the request builder and the stream assembler."""

from .function_call import FunctionCallFragment
from .generate_config import GenerateContentConfig, HttpOptions
from .provider_settings import ProviderSettings
from .safety_setting import VALID_CATEGORIES, VALID_THRESHOLDS, SafetySetting

__all__ = [
    "FunctionCallFragment",
    "GenerateContentConfig",
    "HttpOptions",
    "ProviderSettings",
    "SafetySetting",
    "VALID_CATEGORIES",
    "VALID_THRESHOLDS",
]
