"""Core project graph loading: path resolution, diagnostics, evaluation and the graph walk."""
