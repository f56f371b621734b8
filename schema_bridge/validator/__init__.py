from .payload_validator import PayloadValidator, ValidationResult

__all__ = ["PayloadValidator", "ValidationResult"]
