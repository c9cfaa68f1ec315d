import argparse
import json
from pathlib import Path

from xrefnum import SoupTree, load_config, number_document
from xrefnum.render.mathjax import inject_mathjax

EXAMPLES = Path(__file__).parent


class ReportEncoder(json.JSONEncoder):
    def default(self, o):
        if hasattr(o, "__dataclass_fields__"):
            return vars(o)
        return str(o)


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    parser.add_argument("-ohtml", type=str, default=str(EXAMPLES / "output" / "paper.html"))
    parser.add_argument("-osymbols", type=str)
    args = parser.parse_args()

    config = load_config(EXAMPLES / "xrefnum.json")
    tree = SoupTree.from_html((EXAMPLES / "paper.html").read_text(encoding="utf-8"))

    report = number_document(tree, config.numbering)
    inject_mathjax(tree, config.mathjax)

    for u in report.unresolved:
        print(f"Warning: {u.describe()}")

    out = Path(args.ohtml)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(str(tree.soup), encoding="utf-8")
    print(f"Wrote {out}")

    if args.osymbols:
        with open(args.osymbols, "w", encoding="utf-8") as f:
            json.dump(dict(report.symbols.items()), f, cls=ReportEncoder, indent=4)
