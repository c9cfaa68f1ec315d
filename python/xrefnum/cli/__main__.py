import argparse
import pathlib
import sys
from typing import Any, List, Optional

from xrefnum.cli import RenderOptions, autodetect_output, render, resolve_config
from xrefnum.config import describe_config


def wrap_render(args: Any) -> int:
    config = resolve_config(args.config)
    options = RenderOptions(
        build_toc=not args.no_outline,
        mathjax=args.mathjax,
        strict=args.strict,
        parser=args.parser,
    )
    if len(args.inputs) > 1 and args.output and not pathlib.Path(args.output).is_dir():
        raise ValueError(
            f"Multiple inputs were given, so --output must be an existing directory (got {args.output})"
        )

    unresolved = 0
    for input_arg in args.inputs:
        input_path = pathlib.Path(input_arg)
        if not input_path.is_file():
            raise ValueError(f"Input {input_path} doesn't exist or isn't a file")
        output_path = autodetect_output(input_path, args.output)
        report = render(input_path, output_path, config, options)
        unresolved += len(report.unresolved)

    if options.strict and unresolved:
        print(f"{unresolved} unresolved references, failing because of --strict")
        return 1
    return 0


def wrap_show_config(args: Any) -> int:
    config = resolve_config(args.config)
    for line in describe_config(config):
        print(line)
    if args.mathjax:
        print("-" * 20)
        print(config.mathjax.to_script())
    return 0


def run_cli(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser("xrefnum")

    subparsers = parser.add_subparsers(required=True)

    render_subcommand = subparsers.add_parser(
        "render",
        help="Number the sections, theorems, equations, figures and tables of HTML documents and resolve their <xref> references.",
    )
    render_subcommand.add_argument(
        "inputs",
        type=str,
        nargs="+",
        help="The input HTML files.",
    )
    render_subcommand.add_argument(
        "-o",
        "--output",
        type=str,
        default=None,
        help="Where to write the output. A directory receives one file per input, otherwise this is the output file. Defaults to {input stem}.numbered.html next to each input.",
    )
    render_subcommand.add_argument(
        "--config",
        type=str,
        default=None,
        help="A JSON config file with optional 'numbering' and 'mathjax' sections.",
    )
    render_subcommand.add_argument(
        "--no-outline",
        action="store_true",
        help="Don't fill .toc-tree containers with an outline of the numbered sections.",
    )
    render_subcommand.add_argument(
        "--mathjax",
        action="store_true",
        help="Add the MathJax configuration and loader script to <head>.",
    )
    render_subcommand.add_argument(
        "--strict",
        action="store_true",
        help="Exit with a non-zero status if any reference couldn't be resolved.",
    )
    render_subcommand.add_argument(
        "--parser",
        type=str,
        default="html.parser",
        help="The BeautifulSoup parser to read the input with.",
    )
    # If the render subcommand is selected, set `args.func = wrap_render`
    render_subcommand.set_defaults(func=wrap_render)

    show_config_subcommand = subparsers.add_parser(
        "show-config", help="Print the numbering configuration that would be used."
    )
    show_config_subcommand.add_argument(
        "--config",
        type=str,
        default=None,
        help="A JSON config file with optional 'numbering' and 'mathjax' sections.",
    )
    show_config_subcommand.add_argument(
        "--mathjax",
        action="store_true",
        help="Also print the MathJax configuration script.",
    )
    show_config_subcommand.set_defaults(func=wrap_show_config)

    args = parser.parse_args(argv)
    # call args.func() with the args
    return args.func(args)


if __name__ == "__main__":
    sys.exit(run_cli())
