"""CLI entry point."""

from __future__ import annotations

import argparse
import json
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Iterable, Optional, Sequence

from chartplan.compiler import compile_chart, create_layer
from chartplan.core import RenderPlan, load_config, load_data
from chartplan.errors import ChartPlanError, ConfigError
from chartplan.hydra_utils import (
    DEFAULT_CONFIG_NAME,
    DEFAULT_CONFIG_PATH,
    compose_config,
    format_config,
    resolve_config,
)
from chartplan.io_utils import write_json_atomic
from chartplan.logging_utils import (
    configure_logging,
    log_exception,
    parse_level,
    run_with_error_handling,
)
from chartplan.merge import deep_mix
from chartplan.registry import get_plot_type, list_plot_types

_SUBCOMMANDS: Sequence[str] = (
    "help",
    "cfg",
    "compile",
    "run",
    "list-types",
)

logger = logging.getLogger("chartplan.cli")


def _emit_plan(plan: RenderPlan, output: Optional[str]) -> None:
    payload = plan.to_dict()
    if output:
        path = Path(output)
        write_json_atomic(path, payload)
        logger.info("Wrote plan %s to %s.", payload["id"], path)
        return
    print(json.dumps(payload, indent=2, sort_keys=True))


def _parse_size(value: Any) -> tuple[int, int]:
    if isinstance(value, str) and "x" in value:
        width, height = value.lower().split("x", 1)
        return int(width), int(height)
    if isinstance(value, Sequence) and not isinstance(value, str) and len(value) == 2:
        return int(value[0]), int(value[1])
    raise ConfigError(f"Relayout size must be WIDTHxHEIGHT or [width, height], got {value!r}.")


def _compile(
    plot_type: str,
    options: Mapping[str, Any],
    *,
    data: Optional[list[dict[str, Any]]],
    relayout: Iterable[Any] = (),
) -> RenderPlan:
    sizes = [_parse_size(item) for item in relayout]
    if not sizes:
        return compile_chart(plot_type, options, data=data)
    layer = create_layer(plot_type, options, data=data)
    layer.init().render()
    for width, height in sizes:
        logger.debug("Relayout to %sx%s.", width, height)
        layer.relayout(width, height)
    return layer.to_plan()


def _cfg_handler(args: argparse.Namespace) -> None:
    cfg = compose_config(
        config_path=args.config_path,
        config_name=args.config_name,
        overrides=args.overrides,
    )
    print(format_config(cfg), end="")


def _compile_handler(args: argparse.Namespace) -> None:
    options = load_config(args.config)
    overrides: dict[str, Any] = {}
    if args.width is not None:
        overrides["width"] = args.width
    if args.height is not None:
        overrides["height"] = args.height
    options = deep_mix(options, overrides)
    data = load_data(args.data) if args.data else None
    plan = _compile(args.plot_type, options, data=data, relayout=args.relayout or ())
    _emit_plan(plan, args.output)


def _run_handler(args: argparse.Namespace) -> None:
    cfg = resolve_config(
        compose_config(
            config_path=args.config_path,
            config_name=args.config_name,
            overrides=args.overrides,
        )
    )
    logging.getLogger("chartplan").setLevel(parse_level(cfg["logging"]["level"]))
    plot_cfg = cfg["plot"]
    file_options = load_config(plot_cfg["config"]) if plot_cfg.get("config") else {}
    options = deep_mix(
        file_options,
        plot_cfg.get("options") or {},
        {"width": cfg["render"]["width"], "height": cfg["render"]["height"]},
    )
    data_path = cfg["data"].get("path")
    data = load_data(data_path) if data_path else None
    plan = _compile(
        plot_cfg["type"],
        options,
        data=data,
        relayout=cfg["render"].get("relayout") or (),
    )
    _emit_plan(plan, cfg["output"].get("path") or None)


def _list_types_handler(_args: argparse.Namespace) -> None:
    for name in list_plot_types():
        plot_type = get_plot_type(name)
        events = ", ".join(plot_type.event_table.semantic_events())
        print(f"{name}\tgeometry={plot_type.geometry}\tevents={events}")


def _add_hydra_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config-path",
        default=DEFAULT_CONFIG_PATH,
        help=f"Hydra config directory (default: {DEFAULT_CONFIG_PATH}).",
    )
    parser.add_argument(
        "--config-name",
        default=DEFAULT_CONFIG_NAME,
        help=f"Hydra config name (default: {DEFAULT_CONFIG_NAME}).",
    )
    parser.add_argument(
        "overrides",
        nargs="*",
        help="Hydra overrides, e.g. plot.type=scatter render.width=640.",
    )


def _register_help_subcommand(
    subparsers: argparse._SubParsersAction[argparse.ArgumentParser],
    parser: argparse.ArgumentParser,
) -> None:
    def _handler(_args: argparse.Namespace) -> None:
        parser.print_help()

    help_parser = subparsers.add_parser(
        "help",
        help="Show top-level help.",
        description="Show top-level help.",
    )
    help_parser.set_defaults(handler=_handler)


def _register_cfg_subcommand(
    subparsers: argparse._SubParsersAction[argparse.ArgumentParser],
) -> None:
    cfg_parser = subparsers.add_parser(
        "cfg",
        help="Print the composed Hydra config.",
        description="Print the composed Hydra config.",
    )
    _add_hydra_arguments(cfg_parser)
    cfg_parser.set_defaults(handler=_cfg_handler)


def _register_compile_subcommand(
    subparsers: argparse._SubParsersAction[argparse.ArgumentParser],
) -> None:
    compile_parser = subparsers.add_parser(
        "compile",
        help="Compile a chart config file into a render plan.",
        description="Compile a chart config file into a render plan.",
    )
    compile_parser.add_argument("config", help="Chart config (YAML or JSON).")
    compile_parser.add_argument(
        "--type",
        dest="plot_type",
        default="column",
        help="Plot type (default: column).",
    )
    compile_parser.add_argument("--width", type=int, default=None, help="Container width.")
    compile_parser.add_argument("--height", type=int, default=None, help="Container height.")
    compile_parser.add_argument(
        "--data",
        default=None,
        help="Data records (JSON/YAML); overrides the config's data.",
    )
    compile_parser.add_argument(
        "--relayout",
        action="append",
        default=None,
        metavar="WIDTHxHEIGHT",
        help="Relayout to this size after rendering (repeatable).",
    )
    compile_parser.add_argument(
        "--output",
        "-o",
        default=None,
        help="Write the plan JSON here instead of stdout.",
    )
    compile_parser.set_defaults(handler=_compile_handler)


def _register_run_subcommand(
    subparsers: argparse._SubParsersAction[argparse.ArgumentParser],
) -> None:
    run_parser = subparsers.add_parser(
        "run",
        help="Compile a chart from the composed Hydra config.",
        description="Compile a chart from the composed Hydra config.",
    )
    _add_hydra_arguments(run_parser)
    run_parser.set_defaults(handler=_run_handler)


def _register_list_types_subcommand(
    subparsers: argparse._SubParsersAction[argparse.ArgumentParser],
) -> None:
    list_parser = subparsers.add_parser(
        "list-types",
        help="List registered plot types.",
        description="List registered plot types.",
    )
    list_parser.set_defaults(handler=_list_types_handler)


def _build_parser(subcommands: Iterable[str]) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="chartplan",
        description="chartplan command line interface.",
    )
    parser.add_argument(
        "--traceback",
        action="store_true",
        help="Show full traceback on errors.",
    )
    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    for name in subcommands:
        if name == "help":
            _register_help_subcommand(subparsers, parser)
            continue
        if name == "cfg":
            _register_cfg_subcommand(subparsers)
            continue
        if name == "compile":
            _register_compile_subcommand(subparsers)
            continue
        if name == "run":
            _register_run_subcommand(subparsers)
            continue
        if name == "list-types":
            _register_list_types_subcommand(subparsers)
            continue
        raise ValueError(f"Unknown subcommand: {name!r}.")
    return parser


def _cli_main(
    *,
    cli_logger: logging.Logger,
    argv: Optional[Sequence[str]] = None,
) -> None:
    parser = _build_parser(_SUBCOMMANDS)
    args = parser.parse_args(argv)
    if not getattr(args, "command", None):
        parser.print_help()
        raise SystemExit(2)
    try:
        args.handler(args)
    except ChartPlanError as exc:
        log_exception(cli_logger, exc, show_traceback=args.traceback)
        raise SystemExit(1) from None


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Entry point with standard logging/error handling."""
    logger = configure_logging()
    run_with_error_handling(_cli_main, logger=logger, cli_logger=logger, argv=argv)


if __name__ == "__main__":
    main()
