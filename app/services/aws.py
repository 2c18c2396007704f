"""boto3 client factory shared by the Bedrock and Polly collaborators."""

from __future__ import annotations

from typing import Any

import boto3
from botocore.config import Config

from app.config.settings import settings


def client_config(service_name: str) -> Config:
    """Timeouts per service; Bedrock long-form generation needs a long read."""

    read_timeout = (
        settings.aws.bedrock_read_timeout
        if service_name == "bedrock-runtime"
        else settings.aws.read_timeout
    )
    return Config(
        connect_timeout=settings.aws.connect_timeout,
        read_timeout=read_timeout,
        retries={"max_attempts": 1, "mode": "standard"},
    )


def create_boto3_client(
    service_name: str,
    *,
    region_name: str | None = None,
    aws_access_key_id: str | None = None,
    aws_secret_access_key: str | None = None,
) -> Any:
    """Build a client, preferring explicit keys, then ``AWS_*`` settings, then the default chain.

    botocore's own retries are disabled; transient failures are retried by the
    pipeline's retry policy so attempts are counted in one place.
    """

    client_kwargs: dict[str, Any] = {
        "region_name": region_name or settings.aws.region,
        "config": client_config(service_name),
    }
    if aws_access_key_id and aws_secret_access_key:
        client_kwargs["aws_access_key_id"] = aws_access_key_id
        client_kwargs["aws_secret_access_key"] = aws_secret_access_key
    elif settings.aws.access_key and settings.aws.secret_key:
        client_kwargs["aws_access_key_id"] = settings.aws.access_key
        client_kwargs["aws_secret_access_key"] = settings.aws.secret_key
    return boto3.client(service_name, **client_kwargs)


__all__ = ["client_config", "create_boto3_client"]
