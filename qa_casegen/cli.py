"""
Command Line Interface for QA Case Generator

- Generate test cases for a feature description with the selected providers
- Or parse provider output saved earlier (--raw), without any network calls
- Print a per-provider summary, optionally export artifacts, record history
"""

from __future__ import annotations
import argparse
import json
import sys
from pathlib import Path
from typing import Dict, List, Optional
import logging

from .config import enabled_providers, init_default_config, merged_config
from .emitter import EXPORT_FORMATS, ArtifactEmitter
from .exceptions import CaseGenError
from .history import RunHistory
from .models import OutputFormat, Provider, ProviderStatus, Run
from .runtime import RuntimeFactory
from .workflow import GenerationWorkflow, parse_run


def setup_logging(verbose: bool = False) -> None:
    """Setup logging configuration."""
    level = logging.DEBUG if verbose else logging.INFO

    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    # Reduce noise from client libraries
    logging.getLogger('openai').setLevel(logging.WARNING)
    logging.getLogger('httpx').setLevel(logging.WARNING)


def create_parser() -> argparse.ArgumentParser:
    """Create command line argument parser."""

    parser = argparse.ArgumentParser(
        prog="qa-casegen",
        description="QA Case Generator - Turn a feature description into structured test cases using several LLM providers",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Gherkin scenarios from all configured providers
  qa-casegen --description "Users can reset their password by email"

  # Plain-text cases from OpenAI only, exported to Excel
  qa-casegen --description-file story.txt --providers openai \\
    --format plain --export xlsx --output-dir ./out

  # Parse responses saved earlier, no network calls
  qa-casegen --raw openai=openai.txt --raw claude=claude.txt --export feature playwright
        """
    )

    input_group = parser.add_argument_group('input')
    input_group.add_argument(
        '--description',
        help='Feature description or acceptance criteria text'
    )
    input_group.add_argument(
        '--description-file',
        type=Path,
        help='Path to a file holding the feature description'
    )
    input_group.add_argument(
        '--raw',
        action='append',
        default=[],
        metavar='PROVIDER=PATH',
        help='Parse saved provider output instead of calling the provider (repeatable)'
    )

    gen_group = parser.add_argument_group('generation options')
    gen_group.add_argument(
        '--providers',
        nargs='+',
        choices=[p.value for p in Provider],
        help='Providers to query (default: configured providers that have an API key)'
    )
    gen_group.add_argument(
        '--format',
        choices=[f.value for f in OutputFormat],
        help='Output style to request and parse (default: from config)'
    )

    output_group = parser.add_argument_group('output options')
    output_group.add_argument(
        '--export',
        nargs='+',
        choices=EXPORT_FORMATS,
        default=[],
        help='Artifacts to write'
    )
    output_group.add_argument(
        '--output-dir',
        type=Path,
        default=Path.cwd(),
        help='Output directory for artifacts (default: current directory)'
    )
    output_group.add_argument(
        '--history-file',
        type=Path,
        help='Run history JSON file (default: from config)'
    )
    output_group.add_argument(
        '--no-history',
        action='store_true',
        help='Do not record this run in the history file'
    )
    output_group.add_argument(
        '--verbose',
        '-v',
        action='store_true',
        help='Enable verbose logging'
    )

    config_group = parser.add_argument_group('configuration')
    config_group.add_argument(
        '--init-config',
        action='store_true',
        help='Create ~/.config/qa-casegen/config.toml with sensible defaults and exit'
    )
    config_group.add_argument(
        '--force',
        action='store_true',
        help='Overwrite the config file when used with --init-config'
    )

    return parser


def validate_inputs(args: argparse.Namespace) -> None:
    """Validate command line inputs."""

    if args.description and args.description_file:
        raise ValueError("Provide either --description or --description-file, not both")

    if not args.raw and not args.description and not args.description_file:
        raise ValueError("One of --description, --description-file or --raw is required")

    if args.description_file and not args.description_file.exists():
        raise FileNotFoundError(f"Description file not found: {args.description_file}")


def load_description(args: argparse.Namespace) -> str:
    if args.description_file:
        return args.description_file.read_text(encoding='utf-8')
    return args.description or ""


def load_raw_outputs(specs: List[str]) -> Dict[Provider, str]:
    """Read PROVIDER=PATH pairs given with --raw."""
    outputs = {}
    for spec in specs:
        name, sep, path = spec.partition("=")
        if not sep or not path:
            raise ValueError(f"Expected PROVIDER=PATH, got '{spec}'")
        try:
            provider = Provider(name.strip().lower())
        except ValueError:
            raise ValueError(f"Unknown provider '{name}'") from None
        raw_path = Path(path)
        if not raw_path.exists():
            raise FileNotFoundError(f"Provider output file not found: {raw_path}")
        outputs[provider] = raw_path.read_text(encoding='utf-8')
    return outputs


def execute(args: argparse.Namespace, config: Dict) -> Run:
    """Produce the run the arguments ask for."""
    output_format = OutputFormat(args.format or config["format"])
    description = load_description(args)

    if args.raw:
        return parse_run(load_raw_outputs(args.raw), output_format, description.strip())

    selected = args.providers or enabled_providers(config) or config["providers"]
    providers = [Provider(p) for p in selected]
    runtimes = RuntimeFactory(config).create_runtimes(providers)
    workflow = GenerationWorkflow(
        runtimes,
        temperature=config["temperature"],
        max_tokens=config["max_tokens"]
    )
    return workflow.run(description, providers, output_format)


def print_run_summary(run: Run, artifacts: Optional[Dict[str, Path]] = None) -> None:
    """Print brief run summary to stdout."""

    print(f"✅ Run {run.id}: {run.total_cases} test cases")
    for provider in run.requested:
        status = run.status(provider)
        name = provider.display_name
        if status == ProviderStatus.FAILED:
            print(f"  {name}: failed - {run.results[provider].error}")
        elif status == ProviderStatus.EMPTY:
            print(f"  {name}: no test cases returned")
        else:
            cases = run.cases_for(provider)
            print(f"  {name}: {len(cases)} test cases")
            for case in cases:
                print(f"    - [{case.priority.value}] [{case.category.value}] {case.title}")
        summary = run.summary_for(provider)
        if summary:
            print(f"    Coverage: {summary}")

    if artifacts:
        print(f"")
        print(f"📁 Artifacts:")
        for fmt, path in artifacts.items():
            print(f"  {fmt}: {path}")


def print_error_summary(error: Exception) -> None:
    """Print machine-readable error summary to stderr."""
    error_report = {
        "error_type": type(error).__name__,
        "message": str(error),
        "details": getattr(error, 'details', None)
    }
    print(json.dumps(error_report, indent=2), file=sys.stderr)


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""

    parser = create_parser()
    args = parser.parse_args(argv)

    setup_logging(args.verbose)
    logger = logging.getLogger(__name__)

    try:
        if args.init_config:
            path = init_default_config(force=args.force)
            print(f"Config written: {path}")
            return 0

        validate_inputs(args)
        config = merged_config()

        run = execute(args, config)

        artifacts = None
        if args.export:
            artifacts = ArtifactEmitter(args.output_dir).process(run, args.export)

        if not args.no_history:
            history_path = args.history_file or Path(config["history_path"])
            history = RunHistory.load(history_path, limit=config["history_limit"])
            history.push(run)
            history.save(history_path)

        print_run_summary(run, artifacts)

        if run.requested and all(run.status(p) == ProviderStatus.FAILED for p in run.requested):
            logger.error("Every requested provider failed")
            return 1
        return 0

    except (CaseGenError, ValueError, FileNotFoundError) as e:
        logger.error(f"Input validation failed: {e}")
        print_error_summary(e)
        return 2

    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130  # Standard Unix exit code for SIGINT

    except Exception as e:
        logger.exception("Unexpected error occurred")
        print_error_summary(e)
        return 3


if __name__ == '__main__':
    sys.exit(main())
