"""
Rule Engine Module for the Fiscal Stamping Engine.

This module provides functionality for:
    - Evaluating template metadata rules in their three dialects
    - Resolving {{...}} placeholders in footer and cover page text

Author: ML Engineering Team
"""

from .placeholders import VendorContext, substitute
from .evaluator import RuleEvaluationEngine, compile_rule

__all__ = [
    'VendorContext',
    'substitute',
    'RuleEvaluationEngine',
    'compile_rule'
]
