"""Shared Cerebras LLM client and the generative capability built on it."""

import json
import logging
import os
from dataclasses import dataclass
from typing import Any, Protocol, TypeVar

from cerebras.cloud.sdk import Cerebras
from pydantic import BaseModel, ValidationError

from app.errors import GenerationError

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gpt-oss-120b"

OutputT = TypeVar("OutputT", bound=BaseModel)

_client: Cerebras | None = None


@dataclass(frozen=True)
class PromptSpec:
    """A named prompt template.

    ``template`` uses ``str.format`` placeholders resolved against the
    validated input model, so nested fields read as
    ``{extracted_data.patient_name}``.
    """

    name: str
    system: str
    template: str

    def render(self, payload: BaseModel) -> str:
        fields = {name: getattr(payload, name) for name in type(payload).model_fields}
        return self.template.format(**fields)


class GenerativeCapability(Protocol):
    """Given a prompt, an input schema and an output schema, return a valid output."""

    def generate(
        self,
        prompt: PromptSpec,
        input_schema: type[BaseModel],
        output_schema: type[OutputT],
        variables: dict[str, Any],
    ) -> OutputT: ...


def get_cerebras_client() -> Cerebras:
    """Return a cached Cerebras client, initialised on first call.

    Raises:
        RuntimeError: If CEREBRAS_API_KEY is not set.
    """
    global _client
    if _client is None:
        api_key = os.getenv("CEREBRAS_API_KEY")
        if not api_key:
            raise RuntimeError("CEREBRAS_API_KEY environment variable is not set.")
        _client = Cerebras(api_key=api_key)
    return _client


def call_llm(system_prompt: str, user_content: str, model: str | None = None) -> str:
    """Send a JSON-mode chat completion request to Cerebras and return raw content.

    Args:
        system_prompt: The system-level instruction.
        user_content: The user-level input text.
        model: Model name; defaults to ``CEREBRAS_MODEL`` or ``gpt-oss-120b``.

    Returns:
        The raw string content from the LLM response.

    Raises:
        RuntimeError: If the response carries no content.
    """
    client = get_cerebras_client()
    response = client.chat.completions.create(
        model=model or os.getenv("CEREBRAS_MODEL", DEFAULT_MODEL),
        messages=[
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_content},
        ],
        temperature=0,
        top_p=1,
        stream=False,
        response_format={"type": "json_object"},
    )
    if not response.choices or not response.choices[0].message.content:
        raise RuntimeError("LLM returned an empty response.")
    return response.choices[0].message.content.strip()


def strip_code_fence(text: str) -> str:
    """Remove a surrounding markdown code fence, if any."""
    text = text.strip()
    if text.startswith("```"):
        text = text.split("```")[1]
        if text.startswith("json"):
            text = text[4:]
        text = text.strip()
    return text


def describe_validation_error(exc: ValidationError) -> str:
    """Summarise a validation error as `field: message` pairs."""
    problems = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"]) or "<root>"
        problems.append(f"{location}: {error['msg']}")
    return "; ".join(problems)


def _schema_instructions(output_schema: type[BaseModel]) -> str:
    schema = json.dumps(output_schema.model_json_schema(by_alias=True), indent=2)
    return (
        "Respond with ONLY a JSON object that validates against this JSON schema:\n"
        f"{schema}\n"
        "Do not include any explanation, markdown formatting, or additional text."
    )


class CerebrasCapability:
    """Generative capability backed by a Cerebras chat model."""

    def __init__(self, model: str | None = None) -> None:
        self.model = model

    def generate(
        self,
        prompt: PromptSpec,
        input_schema: type[BaseModel],
        output_schema: type[OutputT],
        variables: dict[str, Any],
    ) -> OutputT:
        try:
            payload = input_schema.model_validate(variables)
        except ValidationError as exc:
            raise GenerationError(f"Invalid input for prompt '{prompt.name}': {exc}") from exc

        system_prompt = f"{prompt.system}\n\n{_schema_instructions(output_schema)}"
        user_content = prompt.render(payload)

        logger.info("LLM — prompt=%s input_chars=%d", prompt.name, len(user_content))
        try:
            raw = call_llm(system_prompt, user_content, model=self.model)
        except Exception as exc:
            logger.error("LLM — prompt=%s call failed: %s", prompt.name, exc)
            raise GenerationError(f"Model call for prompt '{prompt.name}' failed: {exc}") from exc

        try:
            return output_schema.model_validate_json(strip_code_fence(raw))
        except ValidationError as exc:
            logger.warning("LLM — prompt=%s returned schema-invalid output: %s", prompt.name, exc)
            raise GenerationError(
                f"Model output for prompt '{prompt.name}' did not match the expected schema: "
                f"{describe_validation_error(exc)}"
            ) from exc
