import pytest
from click.testing import CliRunner
import json

from script_engine.cli import cli

from conftest import UNSTRUCTURED_SCRIPT

@pytest.fixture
def runner():
    return CliRunner()

@pytest.fixture
def no_config(tmp_path):
    return str(tmp_path / "missing.yaml")

@pytest.fixture
def validation_file(tmp_path):
    path = tmp_path / "validation.json"
    path.write_text(json.dumps({
        "gancho": 9.2,
        "clareza": 7.0,
        "cta": 6.5,
        "emocao": 8.8,
        "total": 7.9,
    }), encoding="utf-8")
    return path

def test_cli_help(runner):
    result = runner.invoke(cli, ['--help'])
    assert result.exit_code == 0
    for command in ('inspect', 'render', 'score', 'batch'):
        assert command in result.output

def test_inspect_command(runner, no_config, script_file):
    result = runner.invoke(cli, ['-c', no_config, 'inspect', str(script_file)])
    assert result.exit_code == 0
    assert 'Title: Laser X' in result.output
    assert 'Criar Conexão' in result.output
    assert 'Structured: yes' in result.output

def test_inspect_json(runner, no_config, script_file):
    result = runner.invoke(cli, ['-c', no_config, 'inspect', '--json', str(script_file)])
    assert result.exit_code == 0

    document = json.loads(result.output)
    assert document['metadata']['title'] == 'Laser X'
    assert document['has_canonical_structure'] is True
    kinds = [s['kind'] for s in document['sections']]
    assert kinds.count('stage_block') == 4

def test_render_command(runner, no_config, script_file):
    result = runner.invoke(cli, ['-c', no_config, 'render', str(script_file)])
    assert result.exit_code == 0
    assert result.output.startswith('LASER X')
    assert '## Virada' in result.output

def test_score_command(runner, no_config, validation_file):
    result = runner.invoke(cli, ['-c', no_config, 'score', str(validation_file)])
    assert result.exit_code == 0
    assert 'Tone: Confident and emotional' in result.output
    assert 'Blocks to adapt:' in result.output
    assert 'Conflito (7.0)' in result.output
    assert 'Final Marcante (6.5)' in result.output
    assert 'Identificação (' not in result.output

def test_score_rejects_invalid_payload(runner, no_config, tmp_path):
    bad = tmp_path / "bad.json"
    bad.write_text('{"gancho": 9}', encoding="utf-8")

    result = runner.invoke(cli, ['-c', no_config, 'score', str(bad)])
    assert result.exit_code == 1
    assert 'Invalid validation payload' in result.output

def test_batch_command(runner, no_config, tmp_path, script_file):
    (tmp_path / "botox.txt").write_text(UNSTRUCTURED_SCRIPT, encoding="utf-8")
    (tmp_path / "notes.md").write_text("ignored", encoding="utf-8")
    output_file = tmp_path / "out" / "parsed.jsonl"

    result = runner.invoke(cli, ['-c', no_config, 'batch', str(tmp_path), '-o', str(output_file)])
    assert result.exit_code == 0
    assert output_file.exists()

    with open(output_file, 'r', encoding='utf-8') as f:
        records = [json.loads(line) for line in f]
    assert [r['source'] for r in records] == ['botox.txt', 'laser.txt']
    assert records[0]['metadata']['title'] == 'Botox Premium'
    assert records[1]['has_canonical_structure'] is True

def test_config_file_is_used(runner, tmp_path):
    config_file = tmp_path / "config.yaml"
    config_file.write_text("parsing:\n  default_title: Sem título\n", encoding="utf-8")
    script = tmp_path / "untitled.txt"
    script.write_text("Texto sem título.", encoding="utf-8")

    result = runner.invoke(cli, ['-c', str(config_file), 'inspect', '--json', str(script)])
    assert result.exit_code == 0
    assert json.loads(result.output)['metadata']['title'] == 'Sem título'

def test_batch_skips_unreadable_scripts(runner, no_config, tmp_path, script_file):
    (tmp_path / "broken.txt").write_bytes(b"\xff\xfe Roteiro quebrado")

    result = runner.invoke(cli, ['-c', no_config, 'batch', str(tmp_path)])
    assert result.exit_code == 0

    with open(tmp_path / "parsed.jsonl", 'r', encoding='utf-8') as f:
        records = [json.loads(line) for line in f]
    assert [r['source'] for r in records] == ['laser.txt']
