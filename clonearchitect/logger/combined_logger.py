"""Combined logger with all functionality."""

from clonearchitect.logger.base_logger import AlgorithmLogger
from clonearchitect.logger.table_logger import TableLogger
from clonearchitect.logger.lineage_logger import LineageTreeLogger
import logging


class Logger(TableLogger, LineageTreeLogger):
    """
    Combined logger that inherits all visualization capabilities.

    This logger combines the functionality of:
    - TableLogger: For displaying tabular data
    - LineageTreeLogger: For displaying lineage trees

    Usage:
        logger = Logger("lineage")
        logger.section("Constraint network")
        logger.table(rows, headers=["id", "tag"])
        logger.log_tree(tree)
    """

    def __init__(self, name: str):
        """Initialize the combined logger."""
        AlgorithmLogger.__init__(self, name)

    def setup_console_logging(self, level: int = logging.INFO):
        """Enable logging to the console."""
        self.disabled = False
        if not any(isinstance(h, logging.StreamHandler) for h in self.logger.handlers):
            handler = logging.StreamHandler()
            formatter = logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
            )
            handler.setFormatter(formatter)
            self.logger.addHandler(handler)
        self.logger.setLevel(level)
