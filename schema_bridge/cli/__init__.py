from .commands import MappingCLI

__all__ = ["MappingCLI"]
