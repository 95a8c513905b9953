#!/usr/bin/env python3
"""Basic usage example"""

from pathlib import Path

from file_logger import FileLoggerConfig, FileSink, Logger

def main():
    config = FileLoggerConfig(
        path="logs/example-${USER}-${PID}.log",
        append=False,
        max_size_mb=1,
        max_backups=3,
    )
    sink = FileSink.from_config(config)

    # The sink does not create directories
    Path("logs").mkdir(exist_ok=True)

    logger = Logger("example")
    logger.add_writer(sink)

    logger.debug("This is debug")
    logger.info("Application started")
    logger.warning("This is warning")
    logger.critical("This is critical")

    print(f"Logging to {sink.current_path}")
    print(sink.get_stats().to_dict())

    logger.shutdown()

if __name__ == "__main__":
    main()
