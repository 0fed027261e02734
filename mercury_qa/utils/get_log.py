import logging
import os
from datetime import datetime
from logging import WARNING, FileHandler
from logging.handlers import TimedRotatingFileHandler
from typing import Optional

LOG_FORMAT = "%(asctime)s %(levelname)s [run %(run_id)s] [%(name)s] [%(filename)s (%(funcName)s:%(lineno)d)] - %(message)s"
RUN_ID_LENGTH = 8


class RunIdFilter(logging.Filter):
    """Stamps every record with the short id of the test run that produced it."""

    def __init__(self, run_id: str):
        super().__init__()
        self.run_id = run_id

    def filter(self, record):
        record.run_id = self.run_id
        return True


class GetLog:
    logger = None
    log_folder = None
    handlers = []

    @classmethod
    def get_log(cls, session_id: Optional[str] = None, log_dir: str = "logs", level=logging.INFO):
        """Get logger and initialize logging system.

        Logs of one run go to ``<log_dir>/<timestamp>_<run id>/``: a daily
        rotated ``log.log``, an ``error.log`` with warnings and errors, and the
        console.

        Args:
            session_id (str): Id of the TestRunSession being logged, ties the
                log folder and every line to the run's report
            log_dir (str): Parent folder of the per-run log folders
            level (int): Root logger level
        """
        if cls.logger is None:
            run_id = (session_id or "cli")[:RUN_ID_LENGTH]
            current_time = os.getenv("MERCURY_TIMESTAMP") or datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
            os.environ["MERCURY_TIMESTAMP"] = current_time
            cls.log_folder = os.path.join(log_dir, f"{current_time}_{run_id}")
            os.makedirs(cls.log_folder, exist_ok=True)

            cls.logger = logging.getLogger()
            cls.logger.setLevel(level)
            fm = logging.Formatter(LOG_FORMAT)
            run_filter = RunIdFilter(run_id)

            # main log file, rotated daily
            th = TimedRotatingFileHandler(
                filename=os.path.join(cls.log_folder, "log.log"),
                when="midnight",
                interval=1,
                backupCount=3,
                encoding="utf-8",
            )
            th.setLevel(level)

            error_handler = FileHandler(filename=os.path.join(cls.log_folder, "error.log"), encoding="utf-8")
            error_handler.setLevel(WARNING)

            console_handler = logging.StreamHandler()
            console_handler.setLevel(level)

            cls.handlers = [th, error_handler, console_handler]
            for handler in cls.handlers:
                handler.setFormatter(fm)
                handler.addFilter(run_filter)
                cls.logger.addHandler(handler)
            cls.logger.info(f"Logging run {session_id or run_id} to {cls.log_folder}")

        return cls.logger

    @classmethod
    def shutdown(cls):
        """Detach and close the handlers added by get_log."""
        if cls.logger is None:
            return
        for handler in cls.handlers:
            cls.logger.removeHandler(handler)
            handler.close()
        cls.handlers = []
        cls.logger = None
        cls.log_folder = None
