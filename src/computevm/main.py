import argparse
import logging
from importlib.metadata import version

from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from .config import load_spec
from .errors import ResolverError
from .logger import logger, setup_logger
from .outputs import outputs
from .reporter import generate_report, summarize
from .resolver import resolve


def main() -> None:
    parser = argparse.ArgumentParser(
        description="computevm: Compute Engine VM/template configuration resolver",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Show the resources a configuration resolves to
  computevm vm.yaml

  # Emit the decision set as JSON for another tool
  computevm vm.yaml --json

  # Write an HTML plan report
  computevm vm.yaml --html plan.html
""",
    )
    try:
        ver = version("computevm")
    except Exception:
        ver = "unknown"
    parser.add_argument("--version", action="version", version=f"computevm v{ver}")

    parser.add_argument("config", help="YAML or JSON configuration file")
    parser.add_argument(
        "--json", action="store_true", help="Output the decision set as JSON"
    )
    parser.add_argument(
        "--outputs", action="store_true", help="Also print the module outputs"
    )
    parser.add_argument("--html", help="Write an HTML plan report to this file")
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Log resolution decisions"
    )

    args = parser.parse_args()

    if args.verbose:
        setup_logger(level=logging.DEBUG)

    # Use stderr for progress if stdout is piped for JSON
    log_console = Console(stderr=True, quiet=args.json)
    out_console = Console()

    try:
        resolved = resolve(load_spec(args.config))
    except (ResolverError, ValidationError) as e:
        logger.error(f"Resolution failed: {e}")
        exit(1)
    except OSError as e:
        logger.error(f"Cannot read {args.config}: {e}")
        exit(1)

    if args.json:
        out_console.print_json(resolved.model_dump_json())
    else:
        table = Table(title=f"{resolved.resource.name} ({resolved.resource.kind})")
        table.add_column("Type", style="cyan")
        table.add_column("Name", style="green")
        table.add_column("Details")
        for row in summarize(resolved):
            table.add_row(*row)
        out_console.print(table)

    if args.outputs:
        out_console.print_json(outputs(resolved).model_dump_json())

    if args.html:
        generate_report(resolved, args.html)
        log_console.print(f"[green]Report written to {args.html}[/green]")


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        console = Console(stderr=True)
        console.print("\n[bold red]Operation cancelled by user.[/bold red]")
        exit(130)
