"""
Notification Extractor - Common Utilities
=========================================

Shared utilities for all Lambda functions.
"""

from .supabase_client import SupabaseClient
from .firefly_client import FireflyClient, FireflyAPIError, FireflyValidationError
from .notifier import Notifier
from .secrets import MissingSecretError, get_secret, require_secret

__all__ = [
    "SupabaseClient",
    "FireflyClient",
    "FireflyAPIError",
    "FireflyValidationError",
    "Notifier",
    "MissingSecretError",
    "get_secret",
    "require_secret",
]
