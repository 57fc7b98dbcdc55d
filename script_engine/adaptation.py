"""Per-block rewrite workflow for scripts that scored below the bar."""

import threading
from concurrent.futures import ThreadPoolExecutor, wait
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from loguru import logger
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError

from .config import AdaptationConfig
from .errors import AdaptationPayloadError
from .parsing.document import ScriptDocument
from .parsing.labels import NarrativeStage
from .scoring.tone import ToneBand, improvement_focus, tone_for_score
from .scoring.validation import ValidationResult, block_scores

# Blocks scoring at or above this are good enough and never rewritten
ADAPTATION_THRESHOLD = 8.5


class SessionState(str, Enum):
    IDLE = "idle"
    GENERATING = "generating"


class BatchStatus(str, Enum):
    COMPLETED = "completed"
    BUSY = "busy"


class AdaptationOutput(BaseModel):
    """One rewritten block as returned by the adaptation service."""

    model_config = ConfigDict(frozen=True)

    adapted_text: str = Field(
        min_length=1, validation_alias=AliasChoices("adapted_text", "adaptedText", "texto_adaptado")
    )
    tone_note: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("tone_note", "toneNote", "nota_tom")
    )


class AdaptedBlock(BaseModel):
    model_config = ConfigDict(frozen=True)

    stage: NarrativeStage
    original_text: str
    adapted_text: Optional[str] = None
    tone_note: Optional[str] = None

    @property
    def adapted(self) -> bool:
        return self.adapted_text is not None


class AdaptationResult(BaseModel):
    """Outcome of one start_adaptation call."""

    status: BatchStatus
    requested: List[NarrativeStage] = Field(default_factory=list)
    adapted: List[NarrativeStage] = Field(default_factory=list)
    failed: Dict[NarrativeStage, str] = Field(default_factory=dict)
    # Below threshold but absent from the document
    skipped: List[NarrativeStage] = Field(default_factory=list)

    @property
    def busy(self) -> bool:
        return self.status == BatchStatus.BUSY

    @property
    def partial_failure(self) -> bool:
        return bool(self.failed)


Adapter = Callable[[NarrativeStage, str, ToneBand], Union[AdaptationOutput, Dict[str, Any], str]]
Listener = Callable[["AdaptationSession"], None]


def stages_needing_adaptation(validation: ValidationResult) -> List[NarrativeStage]:
    """Stages whose own score is under the adaptation threshold, in stage order."""
    return [b.stage for b in block_scores(validation) if b.score < ADAPTATION_THRESHOLD]


def coerce_adaptation(payload: Union[AdaptationOutput, Dict[str, Any], str]) -> AdaptationOutput:
    if isinstance(payload, AdaptationOutput):
        return payload
    if isinstance(payload, str):
        payload = {"adapted_text": payload}
    try:
        return AdaptationOutput.model_validate(payload)
    except ValidationError as e:
        raise AdaptationPayloadError(f"Invalid adaptation payload: {e}") from e


class AdaptationSession:
    """
    Tracks adapted versions of a script's narrative blocks.

    The session is idle or generating. Only one batch runs at a time: a
    start_adaptation call made while generating returns a BUSY result
    immediately. Within a batch every stage is requested concurrently and
    the session goes back to idle once all requests have settled.
    """

    def __init__(
        self,
        adapter: Adapter,
        max_workers: int = 4,
        batch_timeout: Optional[float] = None,
    ):
        """
        Args:
            adapter: Callable(stage, original_text, tone_band) returning the rewrite
            max_workers: Maximum concurrent stage requests
            batch_timeout: Seconds to wait for a batch; unfinished stages fail
        """
        self.adapter = adapter
        self.max_workers = max_workers
        self.batch_timeout = batch_timeout

        self._lock = threading.Lock()
        self._generating = False
        self._comparison_visible = False
        self._blocks: Dict[NarrativeStage, AdaptedBlock] = {}
        self._triggered: List[NarrativeStage] = []
        self._listeners: List[Listener] = []

    @classmethod
    def from_config(cls, adapter: Adapter, config: AdaptationConfig) -> "AdaptationSession":
        return cls(adapter, max_workers=config.max_workers, batch_timeout=config.batch_timeout)

    @property
    def state(self) -> SessionState:
        return SessionState.GENERATING if self.generating else SessionState.IDLE

    @property
    def generating(self) -> bool:
        with self._lock:
            return self._generating

    @property
    def comparison_visible(self) -> bool:
        return self._comparison_visible

    @property
    def blocks(self) -> Dict[NarrativeStage, AdaptedBlock]:
        with self._lock:
            return dict(self._blocks)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call ``listener`` on every state or block change. Returns an unsubscribe function."""
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe():
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def _notify(self):
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(self)
            except Exception as e:
                logger.error(f"Adaptation listener failed: {e}")

    def toggle_comparison(self) -> bool:
        self._comparison_visible = not self._comparison_visible
        self._notify()
        return self._comparison_visible

    def comparison(self, stage: NarrativeStage) -> Tuple[str, Optional[str]]:
        """(original, adapted) text for a stage; KeyError if the stage has no block."""
        block = self.blocks[stage]
        return block.original_text, block.adapted_text

    def pending_stages(self, validation: ValidationResult) -> List[NarrativeStage]:
        """Stages below threshold whose block has not been adapted yet."""
        blocks = self.blocks
        return [
            stage for stage in stages_needing_adaptation(validation)
            if stage in blocks and not blocks[stage].adapted
        ]

    def improvement_summary(self) -> List[str]:
        """Improvement focus for each stage that triggered the last batch, in stage order."""
        return [improvement_focus(stage.block_key) for stage in self._triggered]

    def start_adaptation(self, document: ScriptDocument, validation: ValidationResult) -> AdaptationResult:
        with self._lock:
            if self._generating:
                logger.warning("Adaptation batch already running, rejecting new request")
                return AdaptationResult(status=BatchStatus.BUSY)
            self._generating = True
        self._notify()

        try:
            return self._run_batch(document, validation)
        finally:
            with self._lock:
                self._generating = False
            self._notify()

    def _run_batch(self, document: ScriptDocument, validation: ValidationResult) -> AdaptationResult:
        present = document.stage_sections()

        with self._lock:
            for stage, section in present.items():
                block = self._blocks.get(stage)
                if block is None or block.original_text != section.text:
                    self._blocks[stage] = AdaptedBlock(stage=stage, original_text=section.text)

        triggered = stages_needing_adaptation(validation)
        self._triggered = triggered
        requested = [s for s in triggered if s in present]
        skipped = [s for s in triggered if s not in present]
        if skipped:
            logger.info(f"Stages below threshold but missing from script: {[s.value for s in skipped]}")

        tone = tone_for_score(validation.total)
        logger.info(f"Adapting {len(requested)} block(s) with tone '{tone.tone_label}'")
        outcomes = self._request_all({stage: present[stage].text for stage in requested}, tone)

        adapted, failed = [], {}
        with self._lock:
            for stage in requested:
                outcome = outcomes[stage]
                if isinstance(outcome, AdaptationOutput):
                    self._blocks[stage] = self._blocks[stage].model_copy(
                        update={"adapted_text": outcome.adapted_text, "tone_note": outcome.tone_note}
                    )
                    adapted.append(stage)
                else:
                    failed[stage] = outcome

        if failed:
            logger.warning(f"Adaptation failed for {len(failed)}/{len(requested)} block(s)")
        else:
            logger.success(f"Adapted {len(adapted)} block(s)")

        return AdaptationResult(
            status=BatchStatus.COMPLETED,
            requested=requested,
            adapted=adapted,
            failed=failed,
            skipped=skipped,
        )

    def _request_one(self, stage: NarrativeStage, original_text: str, tone: ToneBand) -> AdaptationOutput:
        return coerce_adaptation(self.adapter(stage, original_text, tone))

    def _request_all(
        self, originals: Dict[NarrativeStage, str], tone: ToneBand
    ) -> Dict[NarrativeStage, Union[AdaptationOutput, str]]:
        """Request every stage concurrently and wait for all of them to settle.

        Returns each stage's output, or an error message for stages that failed.
        """
        if not originals:
            return {}

        executor = ThreadPoolExecutor(max_workers=min(self.max_workers, len(originals)))
        futures = {
            executor.submit(self._request_one, stage, text, tone): stage
            for stage, text in originals.items()
        }
        _, not_done = wait(futures, timeout=self.batch_timeout)
        # Late results from timed-out stages are dropped
        executor.shutdown(wait=False, cancel_futures=True)

        outcomes: Dict[NarrativeStage, Union[AdaptationOutput, str]] = {}
        for future, stage in futures.items():
            if future in not_done:
                logger.error(f"Adaptation of {stage.value} timed out after {self.batch_timeout}s")
                outcomes[stage] = f"timed out after {self.batch_timeout}s"
                continue
            try:
                outcomes[stage] = future.result()
            except Exception as e:
                logger.error(f"Adaptation of {stage.value} failed: {e}")
                outcomes[stage] = str(e) or type(e).__name__
        return outcomes
