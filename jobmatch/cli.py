"""Command-line interface for JobMatch."""
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional
import click
import uvicorn
import yaml
from rich.console import Console
from rich.table import Table
from rich.progress import Progress
from .config import config
from .core import JobService
from .database import Database
from .delivery.web.app import create_app
from .domain.deduplication import (
    DEFAULT_THRESHOLD,
    JobDeduplicator,
    compute_fingerprint,
)
from .domain.job import JobSignature
from .domain.matching import create_skill_matcher, rank_by_skill_overlap, skill_similarity
from .error_handling import DuplicateFingerprintError

console = Console()


def _load_records(path: Path, key: str) -> List[Dict[str, Any]]:
    """Load a YAML or JSON list of records, optionally nested under ``key``."""
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if isinstance(data, dict) and key in data:
        data = data[key]
    if not isinstance(data, list) or not all(isinstance(item, dict) for item in data):
        raise click.BadParameter(f"{path} must contain a list of {key}")
    return data


def _signature(record: Dict[str, Any]) -> JobSignature:
    return JobSignature(
        title=str(record.get('title', '')),
        company=str(record.get('company', '')),
        location_text=str(record.get('location_text', record.get('location', ''))),
        external_url=record.get('external_url'),
    )


def _split(value: str) -> List[str]:
    return [item.strip() for item in value.split(',') if item.strip()]


def _signature_table(title: str, signatures: List[JobSignature]) -> Table:
    table = Table(title=title)
    table.add_column("#", style="dim")
    table.add_column("Title", style="cyan")
    table.add_column("Company", style="green")
    table.add_column("Location", style="blue")
    for i, sig in enumerate(signatures, 1):
        table.add_row(str(i), sig.title, sig.company, sig.location_text)
    return table


@click.group()
@click.option('--taxonomy', type=click.Path(exists=True, dir_okay=False, path_type=Path),
              help='YAML skill taxonomy overriding the built-in one')
@click.option('--log-level', default=None, help='Logging level (DEBUG, INFO, WARNING, ...)')
@click.pass_context
def cli(ctx: click.Context, taxonomy: Optional[Path], log_level: Optional[str]):
    """JobMatch - job deduplication and skill matching."""
    logging.basicConfig(
        level=(log_level or config.get_log_level()).upper(),
        format='%(asctime)s | %(levelname)-8s | %(name)s | %(message)s',
    )
    ctx.ensure_object(dict)
    ctx.obj['taxonomy'] = taxonomy or config.get_matching_config()['taxonomy_path']


def _matcher(ctx: click.Context):
    if 'matcher' not in ctx.obj:
        ctx.obj['matcher'] = create_skill_matcher(ctx.obj.get('taxonomy'))
    return ctx.obj['matcher']


@cli.command()
@click.argument('title')
@click.argument('company')
@click.argument('location')
@click.option('--url', 'external_url', help='External posting URL (does not affect the fingerprint)')
def fingerprint(title: str, company: str, location: str, external_url: Optional[str]):
    """Print the identity fingerprint of a job posting."""
    signature = JobSignature(title, company, location, external_url)
    click.echo(compute_fingerprint(signature))


@cli.command()
@click.argument('jobs_file', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option('--threshold', type=click.FloatRange(0.0, 1.0), default=DEFAULT_THRESHOLD,
              show_default=True, help='Weighted similarity at which jobs count as duplicates')
@click.option('--group', 'show_groups', is_flag=True, help='Show duplicate groups instead of the deduplicated list')
def dedupe(jobs_file: Path, threshold: float, show_groups: bool):
    """Remove near-duplicate postings from a YAML/JSON batch of jobs."""
    signatures = [_signature(record) for record in _load_records(jobs_file, 'jobs')]
    deduplicator = JobDeduplicator(threshold)

    if show_groups:
        groups = deduplicator.group(signatures)
        for i, group in enumerate(groups, 1):
            if len(group) > 1:
                console.print(_signature_table(f"Group {i} ({len(group)} postings)", group))
        console.print(f"[green]{len(signatures)} jobs in {len(groups)} groups[/green]")
        return

    unique = deduplicator.deduplicate(signatures)
    console.print(_signature_table("Unique Jobs", unique))
    removed = len(signatures) - len(unique)
    console.print(f"[magenta]Kept {len(unique)} jobs, removed {removed} duplicates[/magenta]")


@cli.command()
@click.argument('jobs_file', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option('--db-url', default=None, help='Database URL (defaults to DATABASE_URL)')
@click.pass_context
def ingest(ctx: click.Context, jobs_file: Path, db_url: Optional[str]):
    """Store a batch of jobs, skipping exact duplicates."""
    records = _load_records(jobs_file, 'jobs')
    service = JobService(Database(db_url or config.get_database_config()['url']), matcher=_matcher(ctx))

    added = 0
    duplicates = 0
    with Progress() as progress:
        task = progress.add_task("[cyan]Ingesting jobs...", total=len(records))
        for record in records:
            record = dict(record)
            record.setdefault('location_text', record.pop('location', ''))
            try:
                service.create_job(record)
                added += 1
            except DuplicateFingerprintError:
                duplicates += 1
            except (TypeError, ValueError) as e:
                console.print(f"[red]Skipping invalid job {record.get('title', '?')!r}: {e}[/red]")
            progress.advance(task)

    console.print(f"[green]Added {added} jobs[/green], [yellow]skipped {duplicates} duplicates[/yellow]")


@cli.command('extract-skills')
@click.argument('text', required=False)
@click.option('--file', 'text_file', type=click.Path(exists=True, dir_okay=False, path_type=Path),
              help='Read the text from a file')
@click.pass_context
def extract_skills(ctx: click.Context, text: Optional[str], text_file: Optional[Path]):
    """Extract taxonomy skills from free text."""
    if text_file:
        text = text_file.read_text(encoding='utf-8')
    if not text:
        raise click.UsageError("Provide TEXT or --file")

    matcher = _matcher(ctx)
    skills = sorted(matcher.extract_skills(text))
    if not skills:
        console.print("[yellow]No skills found[/yellow]")
        return

    table = Table(title="Extracted Skills")
    table.add_column("Skill", style="cyan")
    table.add_column("Category", style="green")
    for skill in skills:
        table.add_row(skill, matcher.category_of(skill))
    console.print(table)


@cli.command()
@click.argument('skills_a')
@click.argument('skills_b')
def similarity(skills_a: str, skills_b: str):
    """Jaccard similarity of two comma-separated skill lists."""
    score = skill_similarity(_split(skills_a), _split(skills_b))
    click.echo(f"{score:.4f}")


@cli.command()
@click.pass_context
def categories(ctx: click.Context):
    """List the skill taxonomy."""
    table = Table(title="Skill Taxonomy")
    table.add_column("Category", style="cyan")
    table.add_column("Skills", style="green")
    for category, skills in _matcher(ctx).taxonomy.items():
        table.add_row(category, ", ".join(skills))
    console.print(table)


@cli.command()
@click.argument('courses_file', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option('--skills', required=True, help='Comma-separated list of your skills')
@click.option('--limit', type=click.IntRange(min=1), default=10, show_default=True,
              help='Maximum number of courses to show')
def recommend(courses_file: Path, skills: str, limit: int):
    """Recommend courses from a YAML/JSON list by skill overlap."""
    courses = _load_records(courses_file, 'courses')
    ranked = rank_by_skill_overlap(
        ((course, [str(t) for t in course.get('tags', [])]) for course in courses),
        _split(skills),
        limit,
    )

    table = Table(title="Recommended Courses")
    table.add_column("Title", style="cyan")
    table.add_column("Tags", style="green")
    table.add_column("URL", style="blue")
    for course in ranked:
        table.add_row(str(course.get('title', '')), ", ".join(map(str, course.get('tags', []))),
                      str(course.get('url', '')))
    console.print(table)


@cli.command()
@click.option('--host', default=None, help='Host to bind the server to')
@click.option('--port', type=int, default=None, help='Port to bind the server to')
@click.pass_context
def web(ctx: click.Context, host: Optional[str], port: Optional[int]):
    """Start the REST API server."""
    web_config = config.get_web_config()
    host = host or web_config['host']
    port = port or web_config['port']
    taxonomy = ctx.obj.get('taxonomy')
    console.print(f"[green]Starting JobMatch API at http://{host}:{port}[/green]")
    uvicorn.run(create_app(taxonomy_path=str(taxonomy) if taxonomy else None), host=host, port=port)
