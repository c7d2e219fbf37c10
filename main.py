"""CLI entry point for the talent scout pipeline."""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from talentscout.core.config import Settings
from talentscout.core.errors import TalentScoutError
from talentscout.core.schemas import JobRequirements, PipelineResult
from talentscout.pipeline.orchestrator import build_cache, export_results_json, run_pipeline
from talentscout.pipeline.query_builder import build_queries
from talentscout.requirements.extractor import (
    KeywordRequirementsExtractor,
    LLMRequirementsExtractor,
    RequirementsExtractor,
)
from talentscout.requirements.llm import available_providers, get_provider

PROVIDER_CHOICES = [*available_providers(), "keywords"]


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Talent scout - find and rank GitHub candidates for a job",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    # --- search subcommand ---
    search_parser = subparsers.add_parser("search", help="Search, enrich and rank candidates")
    search_parser.add_argument(
        "--config",
        default="config/settings.yaml",
        help="Path to settings YAML file (default: config/settings.yaml)",
    )
    source = search_parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        "--requirements",
        help="Path to job requirements YAML",
    )
    source.add_argument(
        "--job-description",
        help="Path to a plain-text job description (requirements are extracted first)",
    )
    search_parser.add_argument(
        "--provider",
        choices=PROVIDER_CHOICES,
        help="Extractor for --job-description (default: llm.provider from settings)",
    )
    search_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the search queries without calling the API",
    )
    search_parser.add_argument(
        "--export",
        choices=["json"],
        help="Export results to format (json)",
    )
    search_parser.add_argument(
        "--output",
        help="Write the export to this file instead of stdout",
    )
    search_parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose (DEBUG) logging",
    )

    # --- extract-requirements subcommand ---
    extract_parser = subparsers.add_parser(
        "extract-requirements",
        help="Extract job requirements YAML from a job description",
    )
    extract_parser.add_argument(
        "--job",
        required=True,
        help="Path to a plain-text job description",
    )
    extract_parser.add_argument(
        "--output",
        default="config/requirements.yaml",
        help="Output path for requirements YAML (default: config/requirements.yaml)",
    )
    extract_parser.add_argument(
        "--provider",
        default="anthropic",
        choices=PROVIDER_CHOICES,
        help="LLM provider, or 'keywords' for offline extraction (default: anthropic)",
    )
    extract_parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose (DEBUG) logging",
    )

    # --- cache subcommand ---
    cache_parser = subparsers.add_parser("cache", help="Inspect or clean the on-disk cache")
    cache_parser.add_argument("action", choices=["stats", "cleanup", "clear"])
    cache_parser.add_argument(
        "--config",
        default="config/settings.yaml",
        help="Path to settings YAML file (default: config/settings.yaml)",
    )
    cache_parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose (DEBUG) logging",
    )

    return parser.parse_args(argv)


def setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def load_settings(path: str) -> Settings:
    """Load settings, falling back to defaults when the default path is absent."""
    if path == "config/settings.yaml" and not Path(path).exists():
        return Settings()
    return Settings.from_yaml(path)


def make_extractor(provider: str, settings: Settings) -> RequirementsExtractor:
    if provider == "keywords":
        return KeywordRequirementsExtractor(settings.skills.vocabulary)
    model = settings.llm.model if provider == settings.llm.provider else None
    return LLMRequirementsExtractor(get_provider(provider), model=model)


def read_text(path: str) -> str:
    p = Path(path)
    if not p.exists():
        msg = f"Job description not found: {p}"
        raise FileNotFoundError(msg)
    return p.read_text()


def dry_run(settings: Settings, requirements: JobRequirements) -> None:
    """Print what would happen without calling the API."""
    queries = build_queries(requirements, settings.skills, settings.queries)
    print(f"[DRY RUN] '{requirements.title}': {len(queries)} queries")
    for q in queries:
        print(f"  {q}")
    print(f"  Required: {requirements.required_skills}")
    print(f"  Preferred: {requirements.preferred_skills}")
    print(f"  Level: {requirements.level.value if requirements.level else '-'}")
    print(f"  Batch size: {settings.enrichment.batch_size}, "
          f"result budget: {settings.scoring.result_budget}")
    if settings.github.resolve_token() is None:
        print(f"[DRY RUN] {settings.github.token_env} is not set; requests would be unauthenticated")


def print_summary(result: PipelineResult) -> None:
    print(f"\nSearch complete: {len(result.queries)} queries, "
          f"{result.identities_found} candidates found, "
          f"{result.enriched_count} enriched, {len(result.candidates)} ranked.")

    for rank, s in enumerate(result.candidates, start=1):
        p = s.profile
        flags = f" [degraded: {', '.join(sorted(p.degraded))}]" if p.degraded else ""
        print(f"  {rank:>2}. {p.id:<24} {s.score:5.1f}  "
              f"{p.experience.level.value:<6} skills {s.skills_match.total}{flags}")

    stats = result.cache_stats
    print(f"\nCache: {stats.hits} hits, {stats.misses} misses ({stats.hit_rate}% hit rate)")
    print(f"Total time: {result.performance.total_ms:.0f}ms")


def cmd_search(args: argparse.Namespace) -> None:
    """Handle search subcommand."""
    settings = load_settings(args.config)

    requirements: JobRequirements | None = None
    job_description: str | None = None
    extractor: RequirementsExtractor | None = None
    if args.requirements:
        requirements = JobRequirements.from_yaml(args.requirements)
    else:
        job_description = read_text(args.job_description)
        extractor = make_extractor(args.provider or settings.llm.provider, settings)

    if args.dry_run:
        if requirements is None:
            requirements = extractor.extract(job_description)
        dry_run(settings, requirements)
        return

    result = asyncio.run(run_pipeline(
        settings,
        requirements,
        job_description=job_description,
        extractor=extractor,
    ))
    print_summary(result)

    if args.export == "json":
        output = export_results_json(result)
        if args.output:
            Path(args.output).write_text(output)
            print(f"Results written to {args.output}")
        else:
            print(f"\n{output}")


def cmd_extract_requirements(args: argparse.Namespace) -> None:
    """Handle extract-requirements subcommand."""
    text = read_text(args.job)
    print(f"Read {len(text)} characters from {args.job}.")

    print(f"Extracting requirements with {args.provider}...")
    extractor = make_extractor(args.provider, Settings())
    requirements = extractor.extract(text)
    requirements.to_yaml(args.output)
    print(f"Requirements written to {args.output}")
    print(f"  Title: {requirements.title}")
    print(f"  Level: {requirements.level.value if requirements.level else '-'}")
    print(f"  Required skills: {requirements.required_skills}")
    print(f"  Preferred skills: {requirements.preferred_skills}")
    print("Review the requirements and then run: "
          f"python main.py search --requirements {args.output}")


def cmd_cache(args: argparse.Namespace) -> None:
    """Handle cache subcommand."""
    settings = load_settings(args.config)
    cache = build_cache(settings)
    try:
        if args.action == "cleanup":
            removed = cache.invalidate_expired()
            print(f"Removed {removed} expired cache entries from {cache.directory}")
        elif args.action == "clear":
            cache.clear()
            print(f"Cleared cache at {cache.directory}")
        else:
            files = list(cache.directory.glob("*.json"))
            size_kb = sum(f.stat().st_size for f in files) / 1024
            print(f"Cache directory: {cache.directory}")
            print(f"  Entries on disk: {len(files)} ({size_kb:.1f} KiB)")
            print(f"  Default TTL: {settings.cache.default_ttl_seconds:.0f}s")
            for ns, ttl in sorted(settings.cache.namespace_ttl_seconds.items()):
                print(f"  TTL[{ns}]: {ttl:.0f}s")
    finally:
        cache.close()


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    setup_logging(args.verbose)

    handlers = {
        "search": cmd_search,
        "extract-requirements": cmd_extract_requirements,
        "cache": cmd_cache,
    }
    try:
        handlers[args.command](args)
    except (FileNotFoundError, ImportError, ValueError, TalentScoutError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
