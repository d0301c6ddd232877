"""Thin Bedrock client wrapper for persona rewrite invocations."""

from __future__ import annotations

import asyncio
import base64
import logging
import threading
from typing import Any, Optional

from fastapi.concurrency import run_in_threadpool

from aria_relay.config.settings import settings
from aria_relay.services.aws import create_boto3_client, has_aws_credentials

logger = logging.getLogger(__name__)


class LlmInvocationError(RuntimeError):
    """Raised when the Bedrock invocation fails."""


class ConfigurationError(RuntimeError):
    """Raised when credentials for an optional collaborator are missing."""


def _decode_bedrock_api_key(secret_value: Optional[str]) -> tuple[str, str] | None:
    """Decode the BEDROCK_API_KEY secret into access/secret key components."""

    if not secret_value:
        return None

    try:
        decoded_bytes = base64.b64decode(secret_value.strip(), validate=True)
    except ValueError:
        decoded_bytes = secret_value.encode("utf-8", "ignore")

    filtered = "".join(chr(b) for b in decoded_bytes if 31 < b < 127)
    if ":" not in filtered:
        return None
    access_key, secret_key = filtered.split(":", 1)
    return access_key, secret_key


class BedrockLlmClient:
    """Invoke Amazon Bedrock models with standard configuration.

    The runtime client is built lazily on a worker thread, inside the same
    timeout bound as the ``converse`` call. A failed credential lookup is
    remembered so later invocations fail fast with ``ConfigurationError``.
    """

    def __init__(self, client: Any | None = None) -> None:
        self._model_id = settings.bedrock.model_id
        self._timeout = settings.bedrock.timeout_seconds
        self._client = client
        self._unavailable = False
        self._lock = threading.Lock()

    def _get_client(self) -> Any:
        """Return the cached runtime client; blocking, call from a worker thread."""

        with self._lock:
            if self._client is not None:
                return self._client
            if self._unavailable:
                raise ConfigurationError("No AWS credentials available for Bedrock.")

            api_key_tuple = None
            if settings.bedrock.api_key:
                api_key_tuple = _decode_bedrock_api_key(
                    settings.bedrock.api_key.get_secret_value()
                )
            access_key = api_key_tuple[0] if api_key_tuple else None
            secret_key = api_key_tuple[1] if api_key_tuple else None

            if not has_aws_credentials(access_key, secret_key):
                self._unavailable = True
                logger.warning("Bedrock disabled: no AWS credentials found")
                raise ConfigurationError("No AWS credentials available for Bedrock.")

            self._client = create_boto3_client(
                "bedrock-runtime",
                region_name=settings.bedrock.region,
                aws_access_key_id=access_key,
                aws_secret_access_key=secret_key,
                timeout_seconds=self._timeout,
            )
            return self._client

    async def invoke(
        self,
        *,
        system_prompt: str,
        user_prompt: str,
        max_tokens: int | None = None,
        temperature: float | None = None,
        top_p: float | None = None,
        model_id: str | None = None,
    ) -> str | None:
        """Run a Bedrock `converse` call and return the aggregate text output."""

        if self._unavailable:
            raise ConfigurationError("No AWS credentials available for Bedrock.")

        target_model_id = model_id or self._model_id
        inference_cfg = {
            "maxTokens": max_tokens or settings.bedrock.max_tokens,
            "temperature": (
                temperature
                if temperature is not None
                else settings.bedrock.temperature
            ),
            "topP": top_p if top_p is not None else settings.bedrock.top_p,
        }

        def _call() -> str:
            client = self._get_client()
            response = client.converse(
                modelId=target_model_id,
                system=[{"text": system_prompt}],
                messages=[{"role": "user", "content": [{"text": user_prompt}]}],
                inferenceConfig=inference_cfg,
            )
            content_blocks = (
                response.get("output", {})
                .get("message", {})
                .get("content", [])
            )
            texts = [block.get("text", "") for block in content_blocks if block.get("text")]
            return "\n".join(texts).strip()

        try:
            result = await asyncio.wait_for(run_in_threadpool(_call), timeout=self._timeout)
        except ConfigurationError:
            raise
        except Exception as exc:  # pragma: no cover - external dependency
            raise LlmInvocationError(str(exc) or type(exc).__name__) from exc

        return result or None


__all__ = ["BedrockLlmClient", "ConfigurationError", "LlmInvocationError"]
