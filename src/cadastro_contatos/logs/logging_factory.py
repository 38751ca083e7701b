# cadastro_contatos/logs/logging_factory.py

import logging
import os
from typing import Dict, Optional


class LoggerFactory:
    formatter = logging.Formatter('%(asctime)s - %(levelname)s - %(message)s')
    log_dir: Optional[str] = None
    _loggers: Dict[str, logging.Logger] = {}

    @staticmethod
    def get_logger(name: str) -> logging.Logger:
        logger = logging.getLogger(name)
        logger.setLevel(logging.INFO)

        if not logger.handlers:
            # Console handler
            console_handler = logging.StreamHandler()
            console_handler.setFormatter(LoggerFactory.formatter)
            logger.addHandler(console_handler)

        LoggerFactory._loggers[name] = logger
        if LoggerFactory.log_dir:
            LoggerFactory._adicionar_arquivo(name, logger)
        return logger

    @staticmethod
    def _adicionar_arquivo(name: str, logger: logging.Logger) -> None:
        if any(isinstance(h, logging.FileHandler) for h in logger.handlers):
            return
        os.makedirs(LoggerFactory.log_dir, exist_ok=True)
        file_handler = logging.FileHandler(os.path.join(LoggerFactory.log_dir, f"{name}.log"))
        file_handler.setFormatter(LoggerFactory.formatter)
        logger.addHandler(file_handler)

    @staticmethod
    def configurar(log_dir: Optional[str]) -> None:
        """
        Define o diretório de logs em arquivo (LOG_DIR) para os loggers já criados e os próximos.
        Com None, remove os handlers de arquivo.
        """
        for logger in LoggerFactory._loggers.values():
            for handler in [h for h in logger.handlers if isinstance(h, logging.FileHandler)]:
                logger.removeHandler(handler)
                handler.close()

        LoggerFactory.log_dir = log_dir
        if log_dir:
            for name, logger in LoggerFactory._loggers.items():
                LoggerFactory._adicionar_arquivo(name, logger)
