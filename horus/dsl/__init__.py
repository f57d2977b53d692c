"""
Domain Specific Language for session metric formulas.

This DSL provides a safe way to evaluate arithmetic over session metrics
and context variables without using eval().
"""

from .tokens import Token, TokenType
from .tokenizer import Tokenizer, tokenize
from .parser import Parser
from .evaluator import Evaluator, ContextVariableResolver, CONTEXT_VARIABLES
from .errors import FormulaError, ParseError
from .functions import ALLOWED_FUNCTIONS

__all__ = [
    'Token', 'TokenType', 'Tokenizer', 'tokenize', 'Parser', 'Evaluator',
    'ContextVariableResolver', 'CONTEXT_VARIABLES', 'FormulaError', 'ParseError',
    'ALLOWED_FUNCTIONS',
]
