#!/usr/bin/env python3
"""
Interactive command-line interface for the scheduler service.
"""

import cmd
import json
import shlex
from typing import Optional

import requests

from core.config import settings

DEFAULT_SCHEDULER_URL = f"http://localhost:{settings.api_port}"


def make_request(method: str, endpoint: str, data: Optional[dict] = None,
                 params: Optional[dict] = None, base_url: str = DEFAULT_SCHEDULER_URL):
    """Make an HTTP request to the scheduler service."""
    url = f"{base_url}{endpoint}"

    try:
        return requests.request(method.upper(), url, json=data, params=params, timeout=10)

    except requests.exceptions.ConnectionError:
        print(f"Error: Cannot connect to scheduler service at {base_url}")
        print("Make sure the service is running and accessible.")
        return None
    except requests.exceptions.Timeout:
        print("Error: Request timed out")
        return None


def format_json(data):
    """Format JSON data for display."""
    return json.dumps(data, indent=2, default=str)


def parse_schedule_args(arg: str) -> dict:
    """
    Parse ``schedule`` command arguments into a schedule request body.

    Usage: <schedule_name> <task_name> <cron_expr> [--prop key=value ...] [-- task args ...]
    """
    parts = shlex.split(arg)
    if len(parts) < 3:
        raise ValueError("Need at least schedule_name, task_name and cron_expr")

    schedule_name, task_name, cron_expr = parts[:3]
    properties = {settings.cron_expression_keys[0]: cron_expr}
    arguments = []

    rest = parts[3:]
    i = 0
    while i < len(rest):
        if rest[i] == "--":
            arguments.extend(rest[i + 1:])
            break
        if rest[i] == "--prop" and i + 1 < len(rest):
            key, sep, value = rest[i + 1].partition("=")
            if not sep:
                raise ValueError(f"Property must be key=value: {rest[i + 1]}")
            properties[key] = value
            i += 2
        else:
            raise ValueError(f"Unexpected argument: {rest[i]}")

    return {
        "schedule_name": schedule_name,
        "task_definition_name": task_name,
        "deployment_properties": properties,
        "commandline_arguments": arguments,
    }


class SchedulerCLI(cmd.Cmd):
    """Interactive CLI for the scheduler service."""

    intro = "Task Scheduler CLI. Type 'help' to see available commands, 'quit' to exit."
    prompt = 'scheduler> '

    def __init__(self, base_url: str = DEFAULT_SCHEDULER_URL):
        super().__init__()
        self.base_url = base_url

    def do_url(self, arg):
        """Set the scheduler service URL: url <new_url>"""
        if arg:
            self.base_url = arg.strip()
            print(f"Service URL set to: {self.base_url}")
        else:
            print(f"Current service URL: {self.base_url}")

    def do_health(self, arg):
        """Check service health"""
        response = make_request("GET", "/health", base_url=self.base_url)
        if response is not None and response.status_code == 200:
            print("✓ Service is healthy")
            print(format_json(response.json()))
        else:
            print("✗ Service is unhealthy")

    def do_status(self, arg):
        """Get trigger engine status"""
        response = make_request("GET", "/scheduler/status", base_url=self.base_url)
        if response is not None and response.status_code == 200:
            data = response.json()
            print(f"Scheduler Status: {data['status']}")
            print(format_json(data['engine_status']))
        else:
            print("✗ Failed to get scheduler status")

    def do_resume(self, arg):
        """Resume a paused trigger engine"""
        response = make_request("POST", "/scheduler/resume", base_url=self.base_url)
        if response is not None and response.status_code == 200:
            print(f"✓ Scheduler Status: {response.json()['status']}")
        else:
            print("✗ Failed to resume scheduler")
            if response is not None:
                print(f"Status: {response.status_code}")

    def do_schedule(self, arg):
        """Create or replace a schedule: schedule <name> <task> <cron_expr> [--prop key=value ...] [-- args ...]"""
        if not arg:
            print("Usage: schedule <name> <task> <cron_expr> [--prop key=value ...] [-- args ...]")
            print("Example: schedule daily-report report '0 0 * * * ?' -- --verbose")
            return

        try:
            body = parse_schedule_args(arg)
        except ValueError as e:
            print(f"Error: {e}")
            return

        response = make_request("POST", "/schedules", body, base_url=self.base_url)
        if response is not None and response.status_code == 201:
            print("✓ Schedule created successfully")
            print(format_json(response.json()))
        else:
            print("✗ Failed to create schedule")
            if response is not None:
                print(f"Status: {response.status_code}")
                print(f"Response: {response.text}")

    def do_unschedule(self, arg):
        """Delete a schedule: unschedule <name>"""
        if not arg:
            print("Usage: unschedule <name>")
            return

        schedule_name = arg.strip()
        response = make_request("DELETE", f"/schedules/{schedule_name}", base_url=self.base_url)
        if response is not None and response.status_code == 200:
            print(f"✓ Schedule {schedule_name} deleted")
        else:
            print(f"✗ Failed to delete schedule {schedule_name}")
            if response is not None:
                print(f"Status: {response.status_code}")

    def do_list(self, arg):
        """List schedules: list [task_name]"""
        params = {"task_definition_name": arg.strip()} if arg.strip() else None
        response = make_request("GET", "/schedules", params=params, base_url=self.base_url)
        if response is not None and response.status_code == 200:
            schedules = response.json().get('schedules', [])
            print(f"Found {len(schedules)} schedules:")
            for schedule in schedules:
                cron = schedule['schedule_properties'].get(settings.cron_expression_keys[0], "?")
                print(f"  {schedule['schedule_name']}: {schedule['task_definition_name']} ({cron})")
        else:
            print("✗ Failed to list schedules")
            if response is not None:
                print(f"Status: {response.status_code}")

    def do_quit(self, arg):
        """Exit the CLI"""
        print("Goodbye!")
        return True

    def do_exit(self, arg):
        """Exit the CLI"""
        return self.do_quit(arg)

    def do_EOF(self, arg):
        """Exit on EOF (Ctrl+D)"""
        return self.do_quit(arg)

    def default(self, line):
        """Handle unknown commands"""
        print(f"Unknown command: {line}")
        print("Type 'help' to see available commands")

    def emptyline(self):
        """Do nothing on empty line"""
        pass


def main():
    """Main entry point"""
    cli = SchedulerCLI()
    try:
        cli.cmdloop()
    except KeyboardInterrupt:
        print("\nGoodbye!")


if __name__ == "__main__":
    main()
