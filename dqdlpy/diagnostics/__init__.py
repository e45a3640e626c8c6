"""Diagnostics."""

from dqdlpy.diagnostics.codes import DiagnosticSpec
from dqdlpy.diagnostics.diagnostic import Diagnostic, Severity
from dqdlpy.diagnostics.errors import DqdlSyntaxError, NoRulesFoundError, ParseError

__all__ = [
    "Diagnostic",
    "DiagnosticSpec",
    "DqdlSyntaxError",
    "NoRulesFoundError",
    "ParseError",
    "Severity",
]
