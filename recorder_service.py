"""
Recorder Service

Headless entry point for the screen recorder.
Wires a SessionController to a capture surface and drives it from a
control file, so recordings can be started and stopped over SSH/scripts.

Architecture:
- SessionController owns the recording lifecycle (see recording/)
- This service only translates control commands into controller calls
  and mirrors controller notifications into the log and a status file

Control commands (one per write to CONTROL_FILE):
    START <source>    Start recording the given source
    PAUSE / RESUME    Pause or resume the active recording
    STOP              Stop and save
    SAVEPATH <path>   Change where future recordings are saved
    STATUS            Log current status
"""

import json
import logging
import logging.handlers
import os
import signal
import sys
import time
from datetime import datetime
from pathlib import Path
from typing import Optional

from config.settings import (
    CAPTURE_MODE,
    CONTROL_FILE,
    JOINER_MODE,
    LOG_BACKUP_COUNT,
    LOG_DIR,
    LOG_SERVICE_FILE,
    SERVICE_LOOP_INTERVAL,
    STATUS_FILE,
    STATUS_WRITE_INTERVAL,
)
from core.errors import RecorderError
from recording import RecorderConfig, RecordingFactory, SessionController
from storage.utils.path_utils import format_size


class RecorderService:
    """
    Main service coordinator.

    Usage:
        service = RecorderService()
        service.run()  # Blocks until shutdown
    """

    def __init__(
        self,
        config: Optional[RecorderConfig] = None,
        controller: Optional[SessionController] = None,
        control_file: Optional[Path] = None,
        status_file: Optional[Path] = None,
    ):
        """
        Initialize the controller and setup callbacks.

        Args:
            config: Recorder configuration (None = load config/recorder.yaml)
            controller: Pre-built controller (None = built by the factory)
            control_file: Command file to poll (None = CONTROL_FILE)
            status_file: JSON status file to write (None = STATUS_FILE)
        """
        self.logger = logging.getLogger(__name__)
        self.logger.info("Initializing Recorder Service...")

        self.running = False
        self.start_time = time.time()
        self.error_count = 0
        self.last_saved: Optional[str] = None

        # Remote control file for SSH/script commands
        self.control_file = Path(control_file or CONTROL_FILE)
        self.status_file = Path(status_file or STATUS_FILE)
        self.last_status_write = 0.0

        self.config = config or RecorderConfig()
        self.controller = controller or RecordingFactory.create_controller(
            self.config,
            joiner_mode=JOINER_MODE,
            capture_mode=CAPTURE_MODE,
        )

        self._setup_callbacks()

        self.logger.info("Recorder Service initialized successfully")

    def _setup_callbacks(self):
        """Mirror controller notifications into the log."""
        self.controller.on_state_changed = self._handle_state_changed
        self.controller.on_disk_space = self._handle_disk_space
        self.controller.on_concatenation_status = self._handle_concatenation_status
        self.controller.on_limit_reached = self._handle_limit_reached
        self.controller.on_recording_saved = self._handle_recording_saved
        self.controller.on_recording_error = self._handle_recording_error

    def run(self):
        """
        Main service loop.

        Runs until shutdown signal received.
        """
        # Register signal handlers for graceful shutdown
        signal.signal(signal.SIGTERM, self._signal_handler)
        signal.signal(signal.SIGINT, self._signal_handler)

        self.running = True
        self.logger.info("Starting Recorder Service main loop...")
        self.logger.info(f"Send commands with: echo 'START screen:0' > {self.control_file}")

        try:
            while self.running:
                self._update_loop()
                time.sleep(SERVICE_LOOP_INTERVAL)
        except KeyboardInterrupt:
            self.logger.info("Keyboard interrupt received")
        finally:
            self._shutdown()

    def _update_loop(self):
        """
        Main update loop - called 10 times per second.
        """
        self._check_control_commands()

        current_time = time.time()
        if current_time - self.last_status_write >= STATUS_WRITE_INTERVAL:
            self._write_status()
            self.last_status_write = current_time

    # =========================================================================
    # REMOTE CONTROL
    # =========================================================================

    def _check_control_commands(self):
        """
        Check for and process remote control commands.

        The control file is deleted as soon as it has been read, so a
        command is never processed twice.
        """
        if not self.control_file.exists():
            return  # No command waiting - most common case

        try:
            command = self.control_file.read_text().strip()
            self.control_file.unlink()
        except OSError as e:
            self.logger.error(f"Failed to read control command: {e}")
            return

        if command:
            self.logger.info(f"Remote command received: {command}")
            self.process_command(command)

    def process_command(self, command: str) -> bool:
        """
        Process a single remote command.

        Args:
            command: Command line, e.g. "START screen:0" or "STOP"

        Returns:
            True if the command was accepted by the controller
        """
        verb, _, argument = command.strip().partition(" ")
        verb = verb.upper()
        argument = argument.strip()

        try:
            if verb == "START":
                session = self.controller.start(argument)
                self.logger.info(f"Remote START → recording {session.source_id}")
                return True

            if verb == "PAUSE":
                return self.controller.pause()

            if verb == "RESUME":
                return self.controller.resume()

            if verb == "STOP":
                return self.controller.stop()

            if verb == "SAVEPATH":
                self.controller.change_save_path(Path(argument) if argument else None)
                self.logger.info(f"Remote SAVEPATH → {self.controller.current_settings()['save_path']}")
                return True

            if verb == "STATUS":
                status = self.controller.get_status()
                self.logger.info(
                    f"Remote STATUS → state: {status['state']}, "
                    f"elapsed: {status['elapsed'] or '-'}, "
                    f"save path: {status['save_path']}",
                )
                self._write_status()
                return True

        except RecorderError as e:
            self.logger.warning(f"Remote {verb} rejected: {e}")
            return False

        self.logger.warning(f"Unknown remote command: {command}")
        return False

    def _write_status(self):
        """
        Write controller status as JSON for external monitoring.

        Atomic write (temp file, then rename) prevents partial reads.
        """
        try:
            status = {
                "timestamp": datetime.now().isoformat(),
                "uptime_seconds": time.time() - self.start_time,
                "pid": os.getpid(),
                "error_count": self.error_count,
                **self.controller.get_status(),
            }

            tmp_file = self.status_file.with_suffix(".tmp")
            tmp_file.write_text(json.dumps(status, indent=2))
            tmp_file.replace(self.status_file)

        except OSError as e:
            # Status is for monitoring, not critical functionality
            self.logger.warning(f"Failed to write status: {e}")

    # =========================================================================
    # CONTROLLER NOTIFICATIONS
    # =========================================================================

    def _handle_state_changed(self, is_recording: bool, is_paused: bool):
        if is_paused:
            self.logger.info("● Recording paused")
        elif is_recording:
            self.logger.info("● Recording")
        else:
            self.logger.info("○ Not recording")

    def _handle_disk_space(self, status: str, free_bytes: int):
        self.logger.debug(f"Disk space {status}: {format_size(free_bytes)} free")

    def _handle_concatenation_status(self, status: str, details: dict):
        self.logger.info(f"Saving recording: {status} {details}")

    def _handle_limit_reached(self):
        self.logger.warning("Maximum recording length reached, saving")

    def _handle_recording_saved(self, path: str):
        self.last_saved = path
        self.logger.info(f"Recording saved: {path}")

    def _handle_recording_error(self, message: str):
        self.error_count += 1
        self.logger.error(f"Recording error: {message}")

    # =========================================================================
    # SHUTDOWN HANDLING
    # =========================================================================

    def _signal_handler(self, signum, _frame):
        """
        Handle shutdown signals.

        Args:
            signum: Signal number
            _frame: Current stack frame (unused, required by signal API)
        """
        signal_name = signal.Signals(signum).name
        self.logger.info(f"Received signal {signal_name}, shutting down...")
        self.running = False

    def _shutdown(self):
        """
        Graceful shutdown.

        Stops and saves an active recording before exiting.
        """
        self.logger.info("Shutting down Recorder Service...")

        self.controller.shutdown()
        self._write_status()

        self.logger.info("Recorder Service shutdown complete")


def setup_logging():
    """
    Setup logging with rotation.

    Logs to both console and file with rotation:
    - Daily rotation
    - Keep LOG_BACKUP_COUNT days of logs
    """
    # Create logger
    logger = logging.getLogger()
    logger.setLevel(logging.INFO)

    # Console handler (stdout)
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(logging.Formatter("%(message)s | %(name)s"))
    logger.addHandler(console_handler)

    # Define format once for both try and except blocks
    file_format = logging.Formatter(
        "%(asctime)s %(levelname)s %(message)s | %(name)s",
    )

    log_file = Path(LOG_DIR) / LOG_SERVICE_FILE
    try:
        file_handler = logging.handlers.TimedRotatingFileHandler(
            str(log_file),
            when="midnight",
            interval=1,
            backupCount=LOG_BACKUP_COUNT,
            encoding="utf-8",
        )
    except (PermissionError, FileNotFoundError):
        # Fallback to local logs directory if LOG_DIR not writable
        logs_dir = Path("logs")
        logs_dir.mkdir(exist_ok=True)

        fallback_log = logs_dir / "recorder-service.log"
        logger.warning(
            f"Cannot write to {log_file}, using fallback: {fallback_log}",
        )
        logger.info(
            f"To fix: sudo mkdir -p {LOG_DIR} && sudo chown $(whoami) {LOG_DIR}",
        )

        file_handler = logging.handlers.TimedRotatingFileHandler(
            str(fallback_log),
            when="midnight",
            interval=1,
            backupCount=LOG_BACKUP_COUNT,
            encoding="utf-8",
        )

    file_handler.setLevel(logging.INFO)
    file_handler.setFormatter(file_format)
    logger.addHandler(file_handler)


def main():
    """
    Main entry point for the service.

    Sets up logging and runs the service.
    """
    setup_logging()

    logger = logging.getLogger(__name__)
    logger.info("=" * 60)
    logger.info("Magic Window Recorder Service Starting")
    logger.info("=" * 60)

    try:
        service = RecorderService()
        service.run()
    except Exception as e:
        logger.critical(f"Fatal error in main: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
