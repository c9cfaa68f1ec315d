"""The passes over the document: numbering, annotating, resolving references and building the outline."""
