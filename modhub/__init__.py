"""modhub: in-process event bus that lets independent mods declare, listen for and fire events."""

__version__ = "0.1.0"
