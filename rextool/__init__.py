"""
Rextool - Interactive regular expression testing.

Evaluates a pattern against sample text and keeps the match report and the
highlight spans over that text in sync with every edit:
- Raw regex and symbolic (rx S-expression) pattern frontends
- Native (Python ``re``) and external (Perl process) matching backends
- A backend-agnostic match/group model
- Full clear-then-rebuild recomputation on every input change
"""

__version__ = "0.1.0"
