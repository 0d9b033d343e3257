"""paliers: weight tracking with palier milestones."""

__version__ = "0.1.0"
