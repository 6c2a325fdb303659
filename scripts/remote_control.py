#!/usr/bin/env python3
"""
Remote Control Script

Send commands to the recorder service remotely (via SSH or locally).

Usage:
    python scripts/remote_control.py start screen:0     # Start recording
    python scripts/remote_control.py pause              # Pause recording
    python scripts/remote_control.py resume             # Resume recording
    python scripts/remote_control.py stop               # Stop and save
    python scripts/remote_control.py savepath ~/Movies  # Change save folder
    python scripts/remote_control.py status             # Show status

Or even simpler:
    echo "START screen:0" > /tmp/recorder_control.cmd

How it works:
- Writes command to control file (/tmp/recorder_control.cmd)
- Service checks this file every loop iteration (~100ms)
- File is deleted after processing
- `status` also prints the service's JSON status file
"""

import argparse
import json
import sys
import time
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from config.settings import CONTROL_FILE, STATUS_FILE

# Commands that need an argument
ARGUMENT_COMMANDS = {"START", "SAVEPATH"}
VALID_COMMANDS = ["START", "PAUSE", "RESUME", "STOP", "SAVEPATH", "STATUS"]


def build_command(command: str, argument: str = "") -> str:
    """
    Build the control file line for a command.

    Raises:
        ValueError: If the command is unknown or its argument is missing
    """
    command = command.upper()

    if command not in VALID_COMMANDS:
        raise ValueError(
            f"Invalid command: {command} (valid: {', '.join(VALID_COMMANDS)})",
        )

    argument = argument.strip()
    if command in ARGUMENT_COMMANDS:
        if not argument:
            raise ValueError(f"{command} needs an argument")
        return f"{command} {argument}"

    return command


def send_command(command: str, argument: str = "", control_file: Path = Path(CONTROL_FILE)) -> bool:
    """
    Send a command to the recorder service.

    Returns:
        True if command was sent successfully, False otherwise
    """
    try:
        line = build_command(command, argument)
    except ValueError as e:
        print(f"❌ {e}")
        return False

    try:
        control_file.write_text(line)
    except OSError as e:
        print(f"❌ Failed to send command: {e}")
        return False

    print(f"✅ Command sent: {line}")
    print("Service will process it within ~1 second")
    return True


def print_status(status_file: Path = Path(STATUS_FILE)) -> None:
    """Print the service's last status snapshot."""
    try:
        status = json.loads(status_file.read_text())
    except (OSError, ValueError) as e:
        print(f"⚠️  No status available ({status_file}): {e}")
        return

    print(json.dumps(status, indent=2))


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Send commands to the recorder service remotely",
        epilog="""
Examples:
  %(prog)s start screen:0      # Start recording source screen:0
  %(prog)s stop                # Stop and save
  %(prog)s savepath ~/Movies   # Save future recordings under ~/Movies
  %(prog)s status              # Show current status
        """,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "command",
        choices=[command.lower() for command in VALID_COMMANDS],
        help="Command to send to recorder service",
    )
    parser.add_argument(
        "argument",
        nargs="?",
        default="",
        help="Source id (start) or folder (savepath)",
    )

    args = parser.parse_args()

    success = send_command(args.command, args.argument)

    if success and args.command == "status":
        # Give the service a moment to refresh the status file
        time.sleep(1.0)
        print_status()

    sys.exit(0 if success else 1)


if __name__ == "__main__":
    main()
