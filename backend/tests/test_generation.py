"""Tests for model output parsing and the compliance log."""

import io
import json
from unittest.mock import MagicMock, patch

import pytest
from botocore.exceptions import ClientError

from teisesdraugas.core.config import settings
from teisesdraugas.db.models import AIInteractionLog, AIInteractionType
from teisesdraugas.db.schemas import NegotiationAdvice
from teisesdraugas.services.ai_client import BedrockModelClient, ModelCallError
from teisesdraugas.services.generation import (
    CALL_FAILED,
    PARSE_FAILED,
    ModelOutputError,
    extract_json_object,
    run_generation,
)


def test_extracts_object_wrapped_in_prose_and_fences():
    text = 'Štai analizė:\n```json\n{"a": 1, "b": {"c": "x"}}\n```\nSėkmės!'
    assert extract_json_object(text) == {"a": 1, "b": {"c": "x"}}


def test_braces_inside_strings_do_not_end_the_object():
    text = 'prefix {"content": "skliaustai } ir {", "n": 2} suffix {"other": true}'
    assert extract_json_object(text) == {"content": "skliaustai } ir {", "n": 2}


def test_skips_braces_that_are_not_json():
    text = 'Formatas {laukas} netinka, bet {"ok": true} tinka'
    assert extract_json_object(text) == {"ok": True}


def test_no_object_is_a_parse_error():
    with pytest.raises(ModelOutputError):
        extract_json_object("Atsiprašau, negaliu atsakyti.")
    with pytest.raises(ModelOutputError):
        extract_json_object("")


def test_successful_generation_is_logged(db_session, case, user, model_client, advice_json):
    model_client.reply_with(advice_json)

    result = run_generation(
        db_session,
        model_client,
        prompt="prompt",
        max_tokens=100,
        schema=NegotiationAdvice,
        interaction_type=AIInteractionType.negotiation_advice,
        user_id=user.id,
        case_id=case.id,
    )

    assert result.ok
    assert result.value.recommended_offer == 700
    log = db_session.query(AIInteractionLog).one()
    assert log.success is True
    assert log.tokens_used == 200
    assert log.response == advice_json
    assert log.disclaimer_shown is True


def test_missing_field_is_a_parse_failure(db_session, case, user, model_client):
    model_client.reply_with(json.dumps({"analysis": "x", "strategy": "y"}))

    result = run_generation(
        db_session,
        model_client,
        prompt="prompt",
        max_tokens=100,
        schema=NegotiationAdvice,
        interaction_type=AIInteractionType.negotiation_advice,
        user_id=user.id,
        case_id=case.id,
    )

    assert not result.ok
    assert result.error.kind == PARSE_FAILED
    log = db_session.query(AIInteractionLog).one()
    assert log.success is False
    assert log.error_message


def test_call_failure_is_logged_without_response(db_session, case, user, model_client):
    model_client.fail_with("throttled")

    result = run_generation(
        db_session,
        model_client,
        prompt="prompt",
        max_tokens=100,
        schema=NegotiationAdvice,
        interaction_type=AIInteractionType.negotiation_advice,
        user_id=user.id,
        case_id=case.id,
    )

    assert result.error.kind == CALL_FAILED
    assert result.unwrap_or("default") == "default"
    log = db_session.query(AIInteractionLog).one()
    assert log.response is None
    assert log.error_message == "throttled"


def _bedrock_body(payload: dict) -> dict:
    return {"body": io.BytesIO(json.dumps(payload).encode("utf-8"))}


def test_bedrock_client_reads_text_and_usage():
    bedrock = MagicMock()
    bedrock.invoke_model.return_value = _bedrock_body({
        "content": [{"type": "text", "text": "{\"a\": 1}"}],
        "usage": {"input_tokens": 10, "output_tokens": 5},
    })

    response = BedrockModelClient(settings, client=bedrock).complete("labas", max_tokens=50)

    assert response.text == '{"a": 1}'
    assert response.tokens_used == 15
    sent = json.loads(bedrock.invoke_model.call_args.kwargs["body"])
    assert sent["anthropic_version"] == "bedrock-2023-05-31"
    assert sent["max_tokens"] == 50
    assert sent["messages"] == [{"role": "user", "content": "labas"}]


def test_bedrock_client_wraps_client_errors():
    bedrock = MagicMock()
    bedrock.invoke_model.side_effect = ClientError(
        {"Error": {"Code": "ThrottlingException", "Message": "slow down"}}, "InvokeModel"
    )

    with pytest.raises(ModelCallError):
        BedrockModelClient(settings, client=bedrock).complete("labas", max_tokens=50)


def test_bedrock_client_without_text_block_fails():
    bedrock = MagicMock()
    bedrock.invoke_model.return_value = _bedrock_body({"content": [], "usage": {}})

    with pytest.raises(ModelCallError, match="No text response"):
        BedrockModelClient(settings, client=bedrock).complete("labas", max_tokens=50)


@pytest.mark.parametrize(
    "payload",
    [b"<html>502 Bad Gateway</html>", b'["not", "an", "object"]', b'{"content": "text"}'],
)
def test_bedrock_client_rejects_malformed_envelopes(payload):
    bedrock = MagicMock()
    bedrock.invoke_model.return_value = {"body": io.BytesIO(payload)}

    with pytest.raises(ModelCallError):
        BedrockModelClient(settings, client=bedrock).complete("labas", max_tokens=50)


def test_bedrock_client_is_created_on_first_call():
    with patch("teisesdraugas.services.ai_client.boto3.client") as boto_client:
        model = BedrockModelClient(settings)
        boto_client.assert_not_called()

        boto_client.return_value.invoke_model.return_value = _bedrock_body(
            {"content": [{"type": "text", "text": "ok"}]}
        )
        assert model.complete("labas", max_tokens=10).text == "ok"
        boto_client.assert_called_once()
