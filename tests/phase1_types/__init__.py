"""Phase 1 Type Tests - value types and the error hierarchy."""
