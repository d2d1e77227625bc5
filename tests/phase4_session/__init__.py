"""Phase 4 Session Tests - highlights, report and the reevaluation controller.

Test files:
- test_highlights.py: HighlightManager, TextBuffer and MatchReport
- test_controller.py: Recomputation cycles, statuses and coalescing
- conftest.py: Controllers wired to the native backend and a missing Perl
"""
