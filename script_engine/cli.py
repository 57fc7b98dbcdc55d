import click
from pathlib import Path

from rich.console import Console
from rich.table import Table

from .config import Config
from .errors import ScriptEngineError
from .parsing import ScriptParser, parse_directory, render_text
from .scoring import (
    block_scores,
    coerce_validation,
    criterion_suggestions,
    improvement_focus,
    interpret_validation,
    structured_verdict,
)
from .adaptation import ADAPTATION_THRESHOLD
from .utils.logger import setup_logger

@click.group()
@click.option('--config', '-c', type=click.Path(), default='config.yaml',
              help='Path to configuration file')
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
@click.pass_context
def cli(ctx: click.Context, config: str, verbose: bool):
    """Script Engine - structure and score generated marketing scripts."""
    ctx.ensure_object(dict)

    config_path = Path(config)
    if config_path.exists():
        ctx.obj['config'] = Config.from_yaml(config_path)
    else:
        ctx.obj['config'] = Config()

    log_level = "DEBUG" if verbose else ctx.obj['config'].log_level
    logger = setup_logger(log_level, ctx.obj['config'].log_file)
    ctx.obj['logger'] = logger

    if config_path.exists():
        logger.debug(f"Config loaded from: {config_path}")

def _read_text(path: str) -> str:
    with open(path, 'r', encoding='utf-8') as f:
        return f.read()

@cli.command()
@click.argument('script', type=click.Path(exists=True, dir_okay=False))
@click.option('--json', 'as_json', is_flag=True, help='Print the parsed document as JSON')
@click.pass_context
def inspect(ctx: click.Context, script: str, as_json: bool):
    """Show metadata, structure and sections of a script."""
    config = ctx.obj['config']
    document = ScriptParser(config.parsing).parse(_read_text(script))

    if as_json:
        click.echo(document.model_dump_json(indent=2))
        return

    console = Console()
    meta = document.metadata
    console.print(f"[bold]Title:[/bold] {meta.title}")
    console.print(f"[bold]Objective:[/bold] {meta.objective or '-'}")
    console.print(f"[bold]Content type:[/bold] {meta.content_type or '-'}")
    console.print(f"[bold]Structured:[/bold] {'yes' if document.structured else 'no'}")

    table = Table(title="Sections")
    table.add_column("#", justify="right")
    table.add_column("Kind")
    table.add_column("Stage")
    table.add_column("Text", overflow="fold")
    for section in document.sections:
        preview = section.text if len(section.text) <= 80 else section.text[:77] + "..."
        table.add_row(
            str(section.index),
            section.kind.value,
            section.stage.display_name if section.stage else "",
            preview,
        )
    console.print(table)

@cli.command()
@click.argument('script', type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def render(ctx: click.Context, script: str):
    """Render a script as structured plain text."""
    config = ctx.obj['config']
    document = ScriptParser(config.parsing).parse(_read_text(script))
    click.echo(render_text(document))

@cli.command()
@click.argument('validation', type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def score(ctx: click.Context, validation: str):
    """Interpret a validation result (JSON from the scoring service)."""
    logger = ctx.obj['logger']

    try:
        result = coerce_validation(_read_text(validation))
    except ScriptEngineError as e:
        logger.error(f"Could not read validation: {e}")
        raise click.ClickException(str(e))

    report = interpret_validation(result)
    for name, band in report.criteria.items():
        click.echo(f"{name:<8} {result.criterion(name):>5.1f}  {band.label}")
    click.echo(f"{'total':<8} {result.total:>5.1f}  {report.total.label}")
    click.echo(report.descriptor)
    click.echo(f"Tone: {report.tone.tone_label} - {report.tone.action_hint}")

    verdict = structured_verdict(result)
    click.echo(f"\n{'Approved' if verdict.approved else 'Needs review'}: {verdict.final_suggestion}")
    click.echo(f"  structure: {verdict.structure}")
    click.echo(f"  alignment: {verdict.alignment}")
    click.echo(f"  coherence: {verdict.coherence}")

    weak = [b for b in block_scores(result) if b.score < ADAPTATION_THRESHOLD]
    if weak:
        click.echo("\nBlocks to adapt:")
        for block in weak:
            click.echo(f"  {block.stage.display_name} ({block.score:.1f}): {improvement_focus(block.stage.block_key)}")

    click.echo("\nSuggestions:")
    for suggestion in criterion_suggestions(result):
        click.echo(f"  - {suggestion}")

@cli.command()
@click.argument('input_dir', type=click.Path(exists=True, file_okay=False))
@click.option('--output', '-o', type=click.Path(), default=None, help='Output JSONL file')
@click.pass_context
def batch(ctx: click.Context, input_dir: str, output: str):
    """Parse every .txt script in a directory into JSONL."""
    config = ctx.obj['config']
    logger = ctx.obj['logger']
    input_path = Path(input_dir)
    output_path = Path(output) if output else input_path / "parsed.jsonl"

    try:
        count = parse_directory(input_path, output_path, config.parsing)
        logger.success(f"Parsed {count} scripts")
    except OSError as e:
        logger.error(f"Batch parse failed: {e}")
        raise click.ClickException(str(e))

def main():
    cli()

if __name__ == '__main__':
    main()
