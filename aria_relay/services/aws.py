"""Shared AWS helpers for service clients."""

from __future__ import annotations

from typing import Any

import boto3
from botocore.config import Config

from aria_relay.config.settings import settings


def create_boto3_client(
    service_name: str,
    *,
    region_name: str | None = None,
    aws_access_key_id: str | None = None,
    aws_secret_access_key: str | None = None,
    timeout_seconds: float | None = None,
) -> Any:
    """Instantiate a boto3 client using configured credentials if available.

    When ``timeout_seconds`` is given the client also gets a bounded read
    timeout and a single attempt, since callers here never retry.
    """

    region = region_name or settings.aws.region
    client_kwargs: dict[str, Any] = {"region_name": region}
    if aws_access_key_id and aws_secret_access_key:
        client_kwargs["aws_access_key_id"] = aws_access_key_id
        client_kwargs["aws_secret_access_key"] = aws_secret_access_key
    elif settings.aws.access_key and settings.aws.secret_key:
        client_kwargs["aws_access_key_id"] = settings.aws.access_key
        client_kwargs["aws_secret_access_key"] = settings.aws.secret_key
    if timeout_seconds is not None:
        client_kwargs["config"] = Config(
            connect_timeout=timeout_seconds,
            read_timeout=timeout_seconds,
            retries={"total_max_attempts": 1},
        )
    return boto3.client(service_name, **client_kwargs)


def has_aws_credentials(
    aws_access_key_id: str | None = None,
    aws_secret_access_key: str | None = None,
) -> bool:
    """Return True when explicit, configured or ambient credentials exist."""

    if aws_access_key_id and aws_secret_access_key:
        return True
    if settings.aws.access_key and settings.aws.secret_key:
        return True
    return boto3.session.Session().get_credentials() is not None


__all__ = ["create_boto3_client", "has_aws_credentials"]
