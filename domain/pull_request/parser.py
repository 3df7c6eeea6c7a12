import json
from typing import Any

from jsonschema import ValidationError, validate

from domain.models import CreatedPullRequest
from domain.pull_request.errors import response_error


# Apenas os campos que o fluxo consome; o resto da resposta da API e ignorado.
_RESPONSE_SCHEMA: dict[str, Any] = {
    "type": "object",
    "required": ["number"],
    "properties": {
        "number": {"type": "integer", "minimum": 1},
        "html_url": {"type": ["string", "null"]},
    },
}


def _decode_json_object(text: str) -> dict[str, Any]:
    try:
        decoded = json.loads(text)
    except (TypeError, ValueError) as error:
        raise response_error(f"body is not valid JSON ({error})") from error
    # A API de pulls sempre responde com um objeto na raiz.
    if not isinstance(decoded, dict):
        raise response_error("body must be a JSON object")
    return decoded


def parse_pull_request_response(text: str) -> CreatedPullRequest:
    response_data = _decode_json_object(text)
    try:
        validate(instance=response_data, schema=_RESPONSE_SCHEMA)
    except ValidationError as error:
        field_path = ".".join(str(part) for part in error.absolute_path) or "<root>"
        raise response_error(f"{field_path}: {error.message}") from error

    html_url = response_data.get("html_url")
    return CreatedPullRequest(
        number=response_data["number"],
        html_url=html_url if html_url else None,
    )
