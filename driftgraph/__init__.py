"""driftgraph: dependency drift and impact analysis for deployed components."""

__version__ = "0.1.0"
