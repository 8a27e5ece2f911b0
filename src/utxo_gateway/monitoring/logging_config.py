# File: src/utxo_gateway/monitoring/logging_config.py

import logging
import logging.handlers
import os
from datetime import datetime

class LogConfig:
    def __init__(
        self,
        log_dir: str = "logs",
        level: str = "INFO",
        max_size: int = 10 * 1024 * 1024,  # 10MB
        backup_count: int = 5
    ):
        self.log_dir = log_dir
        self.level = getattr(logging, level.upper(), logging.INFO)
        self.max_size = max_size
        self.backup_count = backup_count

    def setup_logging(self):
        os.makedirs(self.log_dir, exist_ok=True)

        file_formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )
        console_formatter = logging.Formatter(
            '%(asctime)s - %(levelname)s - %(message)s'
        )

        log_file = os.path.join(
            self.log_dir,
            f'utxo_gateway_{datetime.now().strftime("%Y%m%d")}.log'
        )
        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=self.max_size,
            backupCount=self.backup_count
        )
        file_handler.setFormatter(file_formatter)
        file_handler.setLevel(logging.DEBUG)

        console_handler = logging.StreamHandler()
        console_handler.setFormatter(console_formatter)
        console_handler.setLevel(self.level)

        root_logger = logging.getLogger()
        root_logger.setLevel(logging.DEBUG)
        root_logger.addHandler(file_handler)
        root_logger.addHandler(console_handler)
