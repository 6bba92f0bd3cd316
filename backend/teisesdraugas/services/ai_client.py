# teisesdraugas/services/ai_client.py
"""
Language model client using AWS Bedrock (Claude)
"""
import json
from dataclasses import dataclass

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from teisesdraugas.core.config import Settings
from teisesdraugas.core.logger import logger


@dataclass
class ModelResponse:
    text: str
    model_id: str
    input_tokens: int = 0
    output_tokens: int = 0

    @property
    def tokens_used(self) -> int:
        return self.input_tokens + self.output_tokens


class ModelCallError(Exception):
    """The model could not be reached or returned no text"""

    def __init__(self, message: str, model_id: str = ""):
        super().__init__(message)
        self.model_id = model_id


class BedrockModelClient:
    """
    Sends one Anthropic Messages request per call through bedrock-runtime.
    The boto3 client is created on the first call.
    """

    def __init__(self, config: Settings, client=None):
        self.config = config
        self.model_id = config.BEDROCK_MODEL_ID
        self.temperature = config.AI_TEMPERATURE
        self._client = client

    @property
    def client(self):
        if self._client is None:
            self._client = boto3.client(
                "bedrock-runtime",
                region_name=self.config.AWS_REGION,
                aws_access_key_id=self.config.AWS_ACCESS_KEY_ID or None,
                aws_secret_access_key=self.config.AWS_SECRET_ACCESS_KEY or None,
            )
        return self._client

    def complete(self, prompt: str, max_tokens: int) -> ModelResponse:
        body = json.dumps(
            {
                "anthropic_version": "bedrock-2023-05-31",
                "max_tokens": max_tokens,
                "temperature": self.temperature,
                "messages": [{"role": "user", "content": prompt}],
            }
        )
        try:
            response = self.client.invoke_model(
                modelId=self.model_id,
                contentType="application/json",
                accept="application/json",
                body=body,
            )
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Bedrock invoke_model failed for {self.model_id}: {str(e)}")
            raise ModelCallError(str(e), self.model_id) from e

        # Claude response: {"content": [{"type": "text", "text": "..."}], "usage": {...}}
        try:
            result = json.loads(response["body"].read())
            text_parts = [
                block.get("text", "")
                for block in result.get("content", [])
                if isinstance(block, dict) and block.get("type") == "text"
            ]
            usage = result.get("usage") or {}
            input_tokens = int(usage.get("input_tokens", 0))
            output_tokens = int(usage.get("output_tokens", 0))
        except (BotoCoreError, ValueError, KeyError, TypeError, AttributeError) as e:
            logger.error(f"Malformed Bedrock response from {self.model_id}: {str(e)}")
            raise ModelCallError(f"Malformed model response: {str(e)}", self.model_id) from e

        if not text_parts:
            raise ModelCallError("No text response from AI", self.model_id)

        return ModelResponse(
            text="".join(text_parts),
            model_id=self.model_id,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
        )
