"""Phase 5 CLI Tests - click commands invoked through CliRunner."""
