import pathlib
from dataclasses import dataclass
from typing import Optional

from xrefnum.config import XrefConfig, load_config
from xrefnum.doc.tree import SoupTree
from xrefnum.render.mathjax import inject_mathjax
from xrefnum.system import NumberingReport, number_document


@dataclass
class RenderOptions:
    build_toc: bool = True
    mathjax: bool = False
    strict: bool = False
    parser: str = "html.parser"


def autodetect_output(input_path: pathlib.Path, output_arg: Optional[str]) -> pathlib.Path:
    """
    Given the input file and the optional [--output] argument, decide where to write the numbered document.

    If [--output] is a directory, the output is {output}/{input name}.
    If [--output] is anything else it is used as the output file.
    If [--output] isn't supplied, the output goes next to the input as {input stem}.numbered{input suffix}.
    """
    if output_arg is None:
        output_path = input_path.with_name(
            f"{input_path.stem}.numbered{input_path.suffix or '.html'}"
        )
        print(f"No output given, writing next to the input: {output_path}")
        return output_path

    output_path = pathlib.Path(output_arg)
    if output_path.is_dir():
        output_path = output_path / input_path.name
        print(f"Output {output_arg} is a directory, writing to {output_path}")
    elif not output_path.parent.exists():
        print(f"Output directory {output_path.parent} does not exist, auto creating...")
        output_path.parent.mkdir(parents=True, exist_ok=True)
    if output_path.resolve() == input_path.resolve():
        raise ValueError(
            f"Output {output_path} is the same as the input - refusing to overwrite it"
        )
    return output_path


def resolve_config(config_arg: Optional[str]) -> XrefConfig:
    if config_arg is None:
        return XrefConfig()
    print(f"Loading config from {config_arg}")
    return load_config(config_arg)


def render(
    input_path: pathlib.Path,
    output_path: pathlib.Path,
    config: XrefConfig,
    options: RenderOptions,
) -> NumberingReport:
    with open(input_path, "r", encoding="utf-8") as f:
        tree = SoupTree.from_html(f.read(), options.parser)

    report = number_document(tree, config.numbering, build_toc=options.build_toc)

    print(
        f"Numbered {len(report.numbering.scopes)} scopes and {len(report.numbering.items)} items, "
        f"resolved {len(report.resolution.instructions)} references"
    )
    for u in report.unresolved:
        print(f"Warning: {u.describe()}")
    if options.build_toc and report.outline_containers == 0:
        print(f"No .{config.numbering.toc_class} container found, skipping the outline")

    if options.mathjax and not inject_mathjax(tree, config.mathjax):
        print("Document already has a MathJax configuration, not adding another")

    with open(output_path, "w", encoding="utf-8") as f:
        f.write(str(tree.soup))
    print(f"Wrote {output_path}")

    return report
