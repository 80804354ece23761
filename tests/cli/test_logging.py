import logging
import sys

import pytest

from framing_model.cli._logging import QUIET_LOGGERS, configure_logging


@pytest.fixture(autouse=True)
def _bare_root() -> None:
    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(logging.WARNING)


class TestConfigureLogging:
    @pytest.mark.parametrize(("verbose", "level"), [(False, logging.INFO), (True, logging.DEBUG)])
    def test_root_level(self, verbose: bool, level: int) -> None:
        configure_logging(verbose=verbose)
        assert logging.getLogger().level == level

    @pytest.mark.parametrize(("verbose", "level"), [(False, logging.WARNING), (True, logging.NOTSET)])
    def test_quiet_loggers(self, verbose: bool, level: int) -> None:
        configure_logging(verbose=verbose)
        assert [logging.getLogger(name).level for name in QUIET_LOGGERS] == [level] * len(QUIET_LOGGERS)

    def test_single_stderr_handler_after_repeated_calls(self) -> None:
        configure_logging()
        configure_logging(verbose=True)
        handlers = logging.getLogger().handlers
        assert len(handlers) == 1
        assert isinstance(handlers[0], logging.StreamHandler)
        assert handlers[0].stream is sys.stderr

    def test_fit_messages_reach_stderr(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging()
        logging.getLogger("framing_model.surface.model").info("Fitted strike surface")
        err = capsys.readouterr().err
        assert "INFO" in err
        assert "framing_model.surface.model: Fitted strike surface" in err
