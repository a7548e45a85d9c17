"""dayplan: a three-column day planner with recurring task series."""

__version__ = "0.1.0"
