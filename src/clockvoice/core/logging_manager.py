"""Centralized Logging Management for ClockVoice

Handles log configuration, formatting, and output management.
"""

import logging
import logging.handlers
import sys
from datetime import datetime
from pathlib import Path
from typing import Dict, Optional


class ColoredFormatter(logging.Formatter):
    """Custom formatter that adds colors to console output."""
    
    # ANSI color codes
    COLORS = {
        'DEBUG': '\033[36m',      # Cyan
        'INFO': '\033[32m',       # Green
        'WARNING': '\033[33m',    # Yellow
        'ERROR': '\033[31m',      # Red
        'CRITICAL': '\033[35m',   # Magenta
        'RESET': '\033[0m'        # Reset
    }
    
    def format(self, record):
        """Format log record with colors for console output."""
        log_message = super().format(record)
        return f"{self.COLORS.get(record.levelname, '')}{log_message}{self.COLORS['RESET']}"


class LoggingManager:
    """Centralized logging configuration and management.
    
    Loggers can be requested before any handler is configured; nothing is
    written anywhere until ``configure`` runs, so importing the interpreter
    as a library never touches the filesystem.
    """
    
    _instance: Optional['LoggingManager'] = None
    _initialized: bool = False
    
    ROOT_LOGGER_NAME = "clockvoice"
    
    def __new__(cls) -> 'LoggingManager':
        """Singleton pattern implementation."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance
    
    def __init__(self):
        """Initialize logging manager (only once)."""
        if self._initialized:
            return
            
        self.log_dir: Optional[Path] = None
        self.loggers: Dict[str, logging.Logger] = {}
        self.configured = False
        
        package_logger = logging.getLogger(self.ROOT_LOGGER_NAME)
        package_logger.addHandler(logging.NullHandler())
        self._initialized = True
        
    def configure(
        self,
        level: str = "INFO",
        log_dir: Optional[Path] = None,
        log_to_console: bool = True,
        log_to_file: bool = False
    ):
        """Attach console and file handlers to the package logger.
        
        Args:
            level: Console log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            log_dir: Directory for rotating log files
            log_to_console: Whether to log to stdout
            log_to_file: Whether to write rotating log files into log_dir
        """
        package_logger = logging.getLogger(self.ROOT_LOGGER_NAME)
        package_logger.setLevel(logging.DEBUG)
        
        # Clearing handlers from a previous configure call
        for handler in list(package_logger.handlers):
            if not isinstance(handler, logging.NullHandler):
                package_logger.removeHandler(handler)
                handler.close()
        
        if log_to_console:
            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setLevel(self._to_level(level))
            console_handler.setFormatter(ColoredFormatter(
                '%(asctime)s | %(name)s | %(levelname)s | %(message)s',
                datefmt='%H:%M:%S'
            ))
            package_logger.addHandler(console_handler)
        
        if log_to_file:
            self.log_dir = Path(log_dir or "logs")
            self.log_dir.mkdir(parents=True, exist_ok=True)
            
            file_formatter = logging.Formatter(
                '%(asctime)s | %(name)s | %(levelname)s | %(funcName)s:%(lineno)d | %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            )
            
            # File handler for all logs
            log_file = self.log_dir / f"clockvoice_{datetime.now().strftime('%Y%m%d')}.log"
            file_handler = logging.handlers.RotatingFileHandler(
                log_file,
                maxBytes=10 * 1024 * 1024,  # 10MB
                backupCount=5
            )
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(file_formatter)
            package_logger.addHandler(file_handler)
            
            # Error file handler for errors only
            error_file = self.log_dir / f"clockvoice_errors_{datetime.now().strftime('%Y%m%d')}.log"
            error_handler = logging.handlers.RotatingFileHandler(
                error_file,
                maxBytes=5 * 1024 * 1024,  # 5MB
                backupCount=10
            )
            error_handler.setLevel(logging.ERROR)
            error_handler.setFormatter(file_formatter)
            package_logger.addHandler(error_handler)
        
        self.configured = True
        
    @classmethod
    def get_logger(cls, name: str) -> logging.Logger:
        """Class method to get logger instance.
        
        Args:
            name: Logger name (typically __name__ of the module)
            
        Returns:
            Configured logger
        """
        manager = cls()
        return manager._get_logger_instance(name)
        
    def _get_logger_instance(self, name: str) -> logging.Logger:
        """Internal method to get logger instance."""
        if name in self.loggers:
            return self.loggers[name]
            
        logger = logging.getLogger(name)
        self.loggers[name] = logger
        return logger
        
    def set_log_level(self, level: str):
        """Set the logging level for the console handler.
        
        Args:
            level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        """
        numeric_level = self._to_level(level)
            
        package_logger = logging.getLogger(self.ROOT_LOGGER_NAME)
        for handler in package_logger.handlers:
            if isinstance(handler, logging.StreamHandler) and handler.stream == sys.stdout:
                handler.setLevel(numeric_level)
                break
                
    @staticmethod
    def _to_level(level: str) -> int:
        numeric_level = getattr(logging, level.upper(), None)
        if not isinstance(numeric_level, int):
            raise ValueError(f'Invalid log level: {level}')
        return numeric_level
