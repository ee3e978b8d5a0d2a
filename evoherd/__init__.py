"""evoherd: generational evolution of agents in a hazardous arena."""

__version__ = "0.1.0"
