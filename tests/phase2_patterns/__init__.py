"""Phase 2 Pattern Tests - reading, lowering and compiling patterns.

Test files:
- test_sexp_reader.py: S-expression reader for the symbolic notation
- test_rx_lowering.py: rx forms to regex text
- test_pattern_compiler.py: Raw and symbolic frontends
- test_match_model.py: Match, MatchSet and report entries
"""
