from .providers import ScriptedProvider, RecordingSleep

__all__ = [
    "ScriptedProvider",
    "RecordingSleep",
]
