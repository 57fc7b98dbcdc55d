"""Validation results from the external scoring service."""

import json
import threading
from typing import Any, Callable, Dict, List, Optional, Union

from loguru import logger
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from ..errors import ValidationPayloadError
from ..parsing.labels import NarrativeStage

# Criterion -> (accepted payload keys, stage it scores)
CRITERIA: Dict[str, tuple] = {
    "hook": (("hook", "gancho"), NarrativeStage.IDENTIFICATION),
    "clarity": (("clarity", "clareza"), NarrativeStage.CONFLICT),
    "emotion": (("emotion", "emocao", "emoção"), NarrativeStage.TURN),
    "cta": (("cta",), NarrativeStage.MEMORABLE_ENDING),
}


class ValidationResult(BaseModel):
    """Four-criterion score of a script, each on a 0-10 scale.

    Accepts both field names and the scoring service's Portuguese keys.
    A missing total is filled with the mean of the four criteria.
    """

    model_config = ConfigDict(frozen=True)

    hook: float = Field(validation_alias=AliasChoices("hook", "gancho"))
    clarity: float = Field(validation_alias=AliasChoices("clarity", "clareza"))
    cta: float
    emotion: float = Field(validation_alias=AliasChoices("emotion", "emocao", "emoção"))
    total: float
    suggestions: str = Field(default="", validation_alias=AliasChoices("suggestions", "sugestoes", "sugestões"))

    @model_validator(mode="before")
    @classmethod
    def default_total(cls, data: Any) -> Any:
        if not isinstance(data, dict) or data.get("total") is not None:
            return data
        scores = []
        for keys, _ in CRITERIA.values():
            value = next((data[k] for k in keys if data.get(k) is not None), None)
            if value is None:
                return data
            scores.append(float(value))
        return {**data, "total": round(sum(scores) / len(scores), 1)}

    @field_validator("suggestions", mode="before")
    @classmethod
    def none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    def criterion(self, name: str) -> float:
        return getattr(self, name)


class BlockScore(BaseModel):
    model_config = ConfigDict(frozen=True)

    stage: NarrativeStage
    criterion: str
    score: float


class StructuredVerdict(BaseModel):
    """Pass/fix verdict per validation axis."""

    model_config = ConfigDict(frozen=True)

    structure: str = Field(validation_alias=AliasChoices("structure", "estrutura"))
    alignment: str = Field(validation_alias=AliasChoices("alignment", "alinhamento"))
    coherence: str = Field(validation_alias=AliasChoices("coherence", "coerencia"))
    final_suggestion: str = Field(validation_alias=AliasChoices("final_suggestion", "sugestaoFinal"))
    approved: bool


def block_scores(result: ValidationResult) -> List[BlockScore]:
    """Per-stage scores, in canonical stage order."""
    scores = [
        BlockScore(stage=stage, criterion=name, score=result.criterion(name))
        for name, (_, stage) in CRITERIA.items()
    ]
    return sorted(scores, key=lambda b: b.stage.position)


def structured_verdict(result: ValidationResult) -> StructuredVerdict:
    """
    Build the structure/alignment/coherence verdict for a result.

    The scoring service may put a JSON verdict in the suggestions field; it
    is used as-is when it parses. Otherwise the verdict is derived from the
    numeric scores.
    """
    if result.suggestions:
        try:
            return StructuredVerdict.model_validate_json(result.suggestions)
        except ValidationError:
            pass
        return StructuredVerdict(
            structure="ok" if result.hook > 7 else "Improve the opening hook",
            alignment="ok" if result.clarity > 7 else "Better alignment with the objective is needed",
            coherence="ok" if result.emotion > 7 else "Adjust tone and style",
            final_suggestion=result.suggestions,
            approved=result.total > 7,
        )

    return StructuredVerdict(
        structure="ok" if result.hook > 7 else "The narrative structure needs work",
        alignment="ok" if result.clarity > 7 else "Alignment with the objective needs adjusting",
        coherence="ok" if result.cta > 6 else "Coherence with the mentor's style needs review",
        final_suggestion="Script approved!" if result.total > 7 else "Script needs improvements",
        approved=result.total > 7,
    )


def criterion_suggestions(result: ValidationResult) -> List[str]:
    """Fixed writing advice for each criterion under its own bar."""
    suggestions = []
    if result.hook < 8:
        suggestions.append(
            "Make the opening hook more impactful with a rhetorical question or a surprising statistic."
        )
    if result.clarity < 8.5:
        suggestions.append(
            "Make the main benefit more specific by naming concrete results the client can expect."
        )
    if result.cta < 7:
        suggestions.append(
            "Strengthen the call to action with urgency or by stating what the client loses by not acting now."
        )
    if result.emotion < 7.5:
        suggestions.append(
            "Add a short testimonial or a real client's success story to deepen the emotional connection."
        )
    suggestions.append("Consider before/after images or animations that make the benefits visible.")
    return suggestions


def coerce_validation(payload: Union[ValidationResult, Dict[str, Any], str]) -> ValidationResult:
    """Turn a scoring-service payload (model, dict or JSON text) into a ValidationResult."""
    if isinstance(payload, ValidationResult):
        return payload
    try:
        if isinstance(payload, (str, bytes)):
            payload = json.loads(payload)
        return ValidationResult.model_validate(payload)
    except (ValueError, ValidationError) as e:
        raise ValidationPayloadError(f"Invalid validation payload: {e}") from e


Scorer = Callable[[str, str], Union[ValidationResult, Dict[str, Any], str]]


class ValidationStore:
    """Holds at most one ValidationResult per script; new results overwrite."""

    def __init__(self):
        self._results: Dict[str, ValidationResult] = {}
        self._lock = threading.Lock()

    def put(self, script_id: str, result: ValidationResult) -> ValidationResult:
        with self._lock:
            replaced = script_id in self._results
            self._results[script_id] = result
        if replaced:
            logger.debug(f"Replaced validation for script {script_id}")
        return result

    def get(self, script_id: str) -> Optional[ValidationResult]:
        """Stored result, or None if the script has not been validated yet."""
        with self._lock:
            return self._results.get(script_id)

    def validate(self, script_id: str, raw: str, scorer: Scorer) -> ValidationResult:
        """Score ``raw`` with the external scorer and store the result."""
        logger.info(f"Validating script {script_id}")
        result = coerce_validation(scorer(script_id, raw))
        logger.info(f"Script {script_id} scored {result.total:.1f}")
        return self.put(script_id, result)

    def __contains__(self, script_id: str) -> bool:
        with self._lock:
            return script_id in self._results

    def __len__(self) -> int:
        with self._lock:
            return len(self._results)
