"""
Service Configuration
=====================

Firefly, Supabase and push gateway credentials live in one JSON secret in
AWS Secrets Manager. The secret is read once per Lambda container.
"""

import json
import os
from typing import Any
from functools import lru_cache

import boto3
from botocore.exceptions import ClientError
from aws_lambda_powertools import Logger

logger = Logger()

SECRET_NAME = os.environ.get("SECRET_NAME", "notification-extractor-secrets")

_secrets_client = None


class MissingSecretError(ValueError):
    """Raised when a required key is absent or empty in the service secret."""

    def __init__(self, key: str):
        super().__init__(f"{key} is not set in secret {SECRET_NAME}")
        self.key = key


def _get_secrets_client():
    global _secrets_client
    if _secrets_client is None:
        _secrets_client = boto3.client("secretsmanager")
    return _secrets_client


@lru_cache(maxsize=1)
def get_all_secrets() -> dict[str, Any]:
    """
    Load the service secret as a dict.

    Raises:
        ClientError: If Secrets Manager refuses or cannot find the secret
    """
    try:
        response = _get_secrets_client().get_secret_value(SecretId=SECRET_NAME)
    except ClientError as e:
        logger.error(f"Failed to load {SECRET_NAME}: {e.response.get('Error', {}).get('Code', 'Unknown')}")
        raise

    logger.info(f"Loaded configuration from {SECRET_NAME}")
    return json.loads(response["SecretString"])


def get_secret(key: str, default: Any = None) -> Any:
    """Value of one key in the service secret, or ``default``."""
    return get_all_secrets().get(key, default)


def require_secret(key: str) -> str:
    """Value of a key the service cannot run without."""
    value = get_secret(key)
    if not value:
        raise MissingSecretError(key)
    return value
