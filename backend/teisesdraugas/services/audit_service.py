# teisesdraugas/services/audit_service.py

from typing import Optional
from uuid import UUID

from sqlalchemy.orm import Session

from teisesdraugas.core.logger import logger
from teisesdraugas.db.models import AIInteractionLog, AIInteractionType


class AuditService:
    """
    Compliance trail of language-model calls (EU AI Act traceability).

    Each record is committed on its own so it survives a failure in whatever
    the caller persists afterwards.
    """

    def record_ai_interaction(
        self,
        db: Session,
        *,
        interaction_type: AIInteractionType,
        prompt: str,
        model_used: str,
        success: bool,
        user_id: Optional[UUID] = None,
        case_id: Optional[UUID] = None,
        response: Optional[str] = None,
        input_tokens: int = 0,
        output_tokens: int = 0,
        error_message: Optional[str] = None,
    ) -> AIInteractionLog:
        entry = AIInteractionLog(
            user_id=user_id,
            case_id=case_id,
            interaction_type=interaction_type,
            prompt=prompt,
            response=response,
            model_used=model_used,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            tokens_used=input_tokens + output_tokens,
            success=success,
            error_message=error_message,
            disclaimer_shown=True,
        )
        db.add(entry)
        db.commit()

        log = logger.info if success else logger.warning
        log(
            f"AI interaction {interaction_type.value} case={case_id} "
            f"success={success} tokens={entry.tokens_used}"
        )
        return entry


audit_service = AuditService()
