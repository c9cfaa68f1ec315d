from xrefnum.config import MathJaxConfig
from xrefnum.doc.tree import SoupTree

MATHJAX_CONFIG_ID = "mathjax-config"


def inject_mathjax(tree: SoupTree, config: MathJaxConfig) -> bool:
    """Add the MathJax configuration and the deferred loader script to <head>.

    Returns False if the document already has a configuration script, in which case nothing is added."""
    head = tree.head()
    if head.find("script", id=MATHJAX_CONFIG_ID) is not None:
        return False
    cfg = tree.create_element("script", {"id": MATHJAX_CONFIG_ID}, config.to_script())
    loader = tree.create_element("script", {"src": config.src, "defer": ""})
    tree.append_child(head, cfg)
    tree.append_child(head, loader)
    return True
