"""
Tests for cycle-ID aware logging.
"""

import re

from loguru import logger

from rextool.utils.logger import (
    base36_encode,
    configure_logging,
    generate_cycle_id,
    get_cycle_context,
    get_cycle_id,
    is_debug_enabled,
    with_cycle_id,
)


class TestCycleIds:
    """Tests for cycle ID generation and scoping."""

    def test_format(self):
        assert re.fullmatch(r"cyc_[0-9a-z]+_[0-9a-f]{8}", generate_cycle_id())

    def test_unique(self):
        assert len({generate_cycle_id() for _ in range(50)}) == 50

    def test_base36(self):
        assert base36_encode(0) == "0"
        assert base36_encode(35) == "z"
        assert base36_encode(36) == "10"

    def test_scoped_context(self):
        assert get_cycle_id() is None
        with with_cycle_id(trigger="pattern") as cycle:
            assert get_cycle_id() == cycle.cycle_id
            assert get_cycle_context().trigger == "pattern"
            assert cycle.elapsed_ms >= 0.0
        assert get_cycle_id() is None

    def test_explicit_id_and_nesting(self):
        with with_cycle_id("cyc_outer"):
            with with_cycle_id("cyc_inner"):
                assert get_cycle_id() == "cyc_inner"
            assert get_cycle_id() == "cyc_outer"


class TestConfigureLogging:
    """Tests for sink configuration."""

    def test_debug_env(self, monkeypatch):
        monkeypatch.delenv("DEBUG", raising=False)
        monkeypatch.setenv("REXTOOL_DEBUG", "true")
        assert is_debug_enabled()
        monkeypatch.setenv("REXTOOL_DEBUG", "false")
        assert not is_debug_enabled()

    def test_records_carry_cycle_id(self):
        configure_logging(debug=True)
        messages = []
        sink_id = logger.add(lambda m: messages.append(m.record["extra"]["cycle_id"]), level="DEBUG")
        try:
            logger.debug("outside")
            with with_cycle_id("cyc_test"):
                logger.debug("inside")
        finally:
            logger.remove()
        assert messages == ["-", "cyc_test"]
        assert sink_id is not None
