"""
Template Rules Module for the Fiscal Stamping Engine.

This module provides functionality for:
    - Parsing serialized template definitions
    - Classifying metadata rules into explicit pattern variants
    - Page and cover page rule models

Author: ML Engineering Team
"""

from .definition import (
    TemplateDefinition,
    PageRules,
    CoverPage,
    DelimitedRegex,
    RawRegex,
    PlainTemplate,
    RulePattern,
    classify_rule,
)
from .parser import TemplateRuleParser, parse_template

__all__ = [
    'TemplateDefinition',
    'PageRules',
    'CoverPage',
    'DelimitedRegex',
    'RawRegex',
    'PlainTemplate',
    'RulePattern',
    'classify_rule',
    'TemplateRuleParser',
    'parse_template'
]
