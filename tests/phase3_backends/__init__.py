"""Phase 3 Backend Tests - native and external matching.

Test files:
- test_native_backend.py: In-process scanning with Python's engine
- test_native_properties.py: Invariants of every native MatchSet
- test_external_backend.py: Perl program generation, process handling, output parsing
- test_backend_equivalence.py: Both backends agree on common patterns

Tests that need a real Perl interpreter are skipped when none is on PATH.
"""
