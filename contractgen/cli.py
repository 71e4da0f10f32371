"""CLI entrypoint for contractgen."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import ConfigError, ContractGenConfig, load_config
from .errors import ContractGenError
from .generator import GenerationReport, Generator
from .logging import configure_logging, get_logger
from .watch import Watcher, module_sources, reload_modules


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="contractgen",
        description="Generate TypeScript declaration files from Python data contracts.",
    )
    _add_verbose_option(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate_parser = subparsers.add_parser(
        "generate",
        help="Generate TypeScript units for the configured modules.",
    )
    _add_verbose_option(generate_parser, suppress_default=True)
    generate_parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Project directory or .contractgen.yml path (defaults to current directory).",
    )
    generate_parser.add_argument(
        "-m",
        "--module",
        dest="modules",
        action="append",
        default=None,
        help="Python module to collect root types from; repeatable. Overrides config.",
    )
    generate_parser.add_argument(
        "-o",
        "--output",
        default=None,
        help="Output directory for generated .ts files. Overrides config.",
    )
    generate_parser.add_argument(
        "--watch",
        action="store_true",
        help="Regenerate whenever the watched modules change.",
    )
    generate_parser.add_argument(
        "--interval",
        type=float,
        default=0.5,
        help="Polling interval in seconds for --watch.",
    )
    generate_parser.add_argument(
        "--log-file",
        default=None,
        help="Append a DEBUG-level run log to this file.",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for contractgen commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    log_file = Path(args.log_file) if args.log_file else None
    configure_logging(verbose=bool(args.verbose), log_file=log_file)

    if args.command != "generate":  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")

    try:
        config = load_config(Path(args.path))
    except ConfigError as exc:
        parser.exit(1, f"{exc}\n")

    modules = args.modules or config.modules
    if not modules:
        parser.exit(1, "No modules to generate from. Pass --module or set 'modules' in .contractgen.yml.\n")
    output = Path(args.output).resolve() if args.output else config.output_dir
    if output is None:
        parser.exit(1, "No output directory. Pass --output or set 'output' in .contractgen.yml.\n")

    if str(config.root) not in sys.path:
        sys.path.insert(0, str(config.root))

    try:
        report = _run(config, modules, output)
    except ContractGenError as exc:
        parser.exit(1, f"contractgen generate failed: {exc}\nRun with --verbose for more details.\n")
    _print_report(report)

    if args.watch:
        _watch(config, modules, output, interval=args.interval)


def _run(config: ContractGenConfig, modules: list[str], output: Path) -> GenerationReport:
    generator = Generator.from_config(config, modules=modules)
    return generator.generate_files(output)


def _watch(config: ContractGenConfig, modules: list[str], output: Path, *, interval: float) -> None:
    logger = get_logger("cli")

    def _regenerate() -> None:
        logger.info("Regenerating after source change")
        try:
            reload_modules(modules)
        except Exception as exc:
            # A half-saved module fails to import; keep polling for the next save.
            logger.error("Reloading %s failed; keeping previous output: %s", ", ".join(modules), exc)
            logger.debug("Reload failure details", exc_info=True)
            return
        try:
            _print_report(_run(config, modules, output))
        except ContractGenError as exc:
            logger.error("Generation failed; no files were written: %s", exc)

    watcher = Watcher(lambda: module_sources(modules), _regenerate, interval=interval)
    print("Watching for changes. Press Ctrl+C to stop.")
    try:
        watcher.run()
    except KeyboardInterrupt:
        print("Stopped watching.")


def _print_report(report: GenerationReport) -> None:
    print(
        f"Generated {len(report.written)} files in {_relativize(report.output_dir)} "
        f"({len(report.unchanged)} unchanged)"
    )
    for conflict in report.conflicts:
        print(f"Skipped {_relativize(conflict.path)}: no generated-content marker", file=sys.stderr)


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
