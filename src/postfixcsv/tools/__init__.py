"""Authoring helpers that sit outside the evaluation engine."""

from postfixcsv.tools.infix import InfixSyntaxError, to_postfix

__all__ = ["InfixSyntaxError", "to_postfix"]
