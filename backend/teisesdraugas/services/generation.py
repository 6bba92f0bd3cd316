"""
Shared plumbing for model-backed generators.

Generators never raise on model trouble. They return a GenerationResult and
the caller decides whether to substitute a default or surface the error.
"""
import json
from dataclasses import dataclass
from typing import Generic, Optional, Type, TypeVar
from uuid import UUID

from pydantic import BaseModel, ValidationError
from sqlalchemy.orm import Session

from teisesdraugas.core.logger import logger
from teisesdraugas.db.models import AIInteractionType
from teisesdraugas.services.ai_client import ModelCallError, ModelResponse
from teisesdraugas.services.audit_service import audit_service

T = TypeVar("T", bound=BaseModel)

CALL_FAILED = "call_failed"
PARSE_FAILED = "parse_failed"


@dataclass
class GenerationError:
    kind: str
    message: str
    raw_text: Optional[str] = None


@dataclass
class GenerationResult(Generic[T]):
    value: Optional[T] = None
    error: Optional[GenerationError] = None
    response: Optional[ModelResponse] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T, response: ModelResponse) -> "GenerationResult[T]":
        return cls(value=value, response=response)

    @classmethod
    def failure(cls, error: GenerationError, response: Optional[ModelResponse] = None) -> "GenerationResult[T]":
        return cls(error=error, response=response)

    def unwrap_or(self, default: T) -> T:
        return self.value if self.ok else default


class ModelOutputError(ValueError):
    pass


def _balanced_object_end(text: str, start: int) -> int:
    """Index just past the brace closing the object opened at ``start``, or -1."""
    depth = 0
    in_string = False
    escaped = False
    for i in range(start, len(text)):
        ch = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return i + 1
    return -1


def extract_json_object(text: str) -> dict:
    """
    Return the first top-level JSON object embedded in model output.
    Prose, markdown fences and trailing commentary around it are ignored.
    """
    if not text:
        raise ModelOutputError("Empty model response")

    start = text.find("{")
    while start != -1:
        end = _balanced_object_end(text, start)
        if end == -1:
            break
        try:
            candidate = json.loads(text[start:end])
        except json.JSONDecodeError:
            start = text.find("{", end)
            continue
        if isinstance(candidate, dict):
            return candidate
        start = text.find("{", end)

    raise ModelOutputError("Could not parse AI response")


def parse_model_output(text: str, schema: Type[T]) -> T:
    data = extract_json_object(text)
    try:
        return schema.model_validate(data)
    except ValidationError as e:
        # A missing key is a parse failure, never a per-field default
        raise ModelOutputError(f"AI response does not match {schema.__name__}: {e.error_count()} error(s)") from e


def run_generation(
    db: Session,
    model_client,
    *,
    prompt: str,
    max_tokens: int,
    schema: Type[T],
    interaction_type: AIInteractionType,
    user_id: Optional[UUID] = None,
    case_id: Optional[UUID] = None,
) -> GenerationResult[T]:
    """
    One model call, parsed into ``schema``. The compliance log entry is
    written for every outcome before this returns.
    """
    try:
        response = model_client.complete(prompt, max_tokens=max_tokens)
    except ModelCallError as e:
        audit_service.record_ai_interaction(
            db,
            interaction_type=interaction_type,
            prompt=prompt,
            model_used=e.model_id or getattr(model_client, "model_id", "unknown"),
            success=False,
            user_id=user_id,
            case_id=case_id,
            error_message=str(e),
        )
        return GenerationResult.failure(GenerationError(CALL_FAILED, str(e)))

    try:
        value = parse_model_output(response.text, schema)
    except ModelOutputError as e:
        logger.warning(f"{interaction_type.value} output rejected for case {case_id}: {str(e)}")
        audit_service.record_ai_interaction(
            db,
            interaction_type=interaction_type,
            prompt=prompt,
            model_used=response.model_id,
            success=False,
            user_id=user_id,
            case_id=case_id,
            response=response.text,
            input_tokens=response.input_tokens,
            output_tokens=response.output_tokens,
            error_message=str(e),
        )
        return GenerationResult.failure(GenerationError(PARSE_FAILED, str(e), response.text), response)

    audit_service.record_ai_interaction(
        db,
        interaction_type=interaction_type,
        prompt=prompt,
        model_used=response.model_id,
        success=True,
        user_id=user_id,
        case_id=case_id,
        response=response.text,
        input_tokens=response.input_tokens,
        output_tokens=response.output_tokens,
    )
    return GenerationResult.success(value, response)
