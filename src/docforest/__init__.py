"""DocForest - structural algorithms over hierarchical record corpora."""

__version__ = "0.1.0"
