"""Document-side types: the tree adapter, its traversal, anchors and the symbol table."""
