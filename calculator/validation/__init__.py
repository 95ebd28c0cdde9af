"""Validation package."""

from calculator.validation.validator import StructuralValidator, is_structurally_valid

__all__ = ["StructuralValidator", "is_structurally_valid"]
