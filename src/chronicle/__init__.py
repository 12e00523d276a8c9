"""chronicle: flow run reads over a wide-column timeline store."""

__version__ = "0.1.0"
