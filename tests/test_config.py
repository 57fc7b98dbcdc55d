import pytest
from pydantic import ValidationError

from script_engine.config import AdaptationConfig, Config, ParsingConfig
from script_engine.parsing import NarrativeStage, ScriptParser

def test_default_config():
    config = Config()
    assert config.parsing.default_title == "Roteiro"
    assert config.parsing.extra_stage_aliases == {}
    assert config.adaptation.max_workers == 4
    assert config.adaptation.batch_timeout == 120.0
    assert config.log_level == "INFO"
    assert config.log_file is None

def test_config_from_yaml(tmp_path):
    config_file = tmp_path / "config.yaml"
    config_file.write_text("""
parsing:
  default_title: Script
  extra_stage_aliases:
    memorable_ending:
      - CTA Final
adaptation:
  max_workers: 2
  batch_timeout: 30
log_level: DEBUG
""", encoding="utf-8")

    config = Config.from_yaml(config_file)
    assert config.parsing.default_title == "Script"
    assert config.parsing.extra_stage_aliases == {"memorable_ending": ["CTA Final"]}
    assert config.adaptation.max_workers == 2
    assert config.adaptation.batch_timeout == 30.0
    assert config.log_level == "DEBUG"

def test_empty_yaml_gives_defaults(tmp_path):
    config_file = tmp_path / "config.yaml"
    config_file.write_text("", encoding="utf-8")
    assert Config.from_yaml(config_file) == Config()

@pytest.mark.parametrize("kwargs", [{"max_workers": 0}, {"batch_timeout": -1}])
def test_adaptation_validation(kwargs):
    with pytest.raises(ValidationError):
        AdaptationConfig(**kwargs)

def test_unknown_stage_alias_rejected():
    with pytest.raises(ValidationError):
        ParsingConfig(extra_stage_aliases={"climax": ["Clímax"]})

def test_empty_default_title_rejected():
    with pytest.raises(ValidationError):
        ParsingConfig(default_title="")

def test_config_to_yaml(tmp_path):
    config = Config(
        parsing=ParsingConfig(extra_stage_aliases={"turn": ["Reviravolta"]}),
        adaptation=AdaptationConfig(batch_timeout=None),
    )
    output_file = tmp_path / "output.yaml"

    config.to_yaml(output_file)

    assert output_file.exists()
    loaded_config = Config.from_yaml(output_file)
    assert loaded_config == config

def test_extra_aliases_reach_parser():
    config = ParsingConfig(extra_stage_aliases={"memorable_ending": ["CTA Final"]})
    raw = "Identificação\nOi.\n\nConflito\nDor.\n\nVirada\nSolução.\n\nCTA Final\nAgende já."

    default_document = ScriptParser().parse(raw)
    document = ScriptParser(config).parse(raw)

    assert not default_document.has_canonical_structure
    assert document.has_canonical_structure
    assert document.stage_text(NarrativeStage.MEMORABLE_ENDING) == "CTA Final\nAgende já."
