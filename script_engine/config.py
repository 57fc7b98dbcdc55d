from pathlib import Path
from typing import Dict, List, Optional
from pydantic import BaseModel, Field, field_validator
import yaml

class ParsingConfig(BaseModel):
    default_title: str = Field(default="Roteiro", min_length=1)
    # Extra label spellings seen in upstream output, keyed by stage name
    extra_stage_aliases: Dict[str, List[str]] = Field(default_factory=dict)

    @field_validator("extra_stage_aliases")
    @classmethod
    def known_stages(cls, value: Dict[str, List[str]]) -> Dict[str, List[str]]:
        from .parsing.labels import NarrativeStage

        names = {stage.value for stage in NarrativeStage}
        unknown = sorted(set(value) - names)
        if unknown:
            raise ValueError(f"Unknown narrative stage(s): {', '.join(unknown)}")
        return value

class AdaptationConfig(BaseModel):
    max_workers: int = Field(default=4, gt=0)
    batch_timeout: Optional[float] = Field(default=120.0, gt=0)

class Config(BaseModel):
    parsing: ParsingConfig = Field(default_factory=ParsingConfig)
    adaptation: AdaptationConfig = Field(default_factory=AdaptationConfig)
    log_level: str = Field(default="INFO")
    log_file: Optional[Path] = None

    @classmethod
    def from_yaml(cls, path: Path) -> "Config":
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        return cls(**data)

    def to_yaml(self, path: Path):
        with open(path, "w", encoding="utf-8") as f:
            yaml.safe_dump(self.model_dump(mode="json"), f, default_flow_style=False, allow_unicode=True)
