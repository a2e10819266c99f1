"""Building blocks for lexer and LALR(1) parser generators: code-point ranges, NFA/DFA construction, lexer modes, LR(1) grammars and parser tables."""

__version__ = "0.1.0"