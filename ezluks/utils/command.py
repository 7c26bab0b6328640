"""
Command execution utilities.

This module provides tools for executing external commands with the
terminal handed straight to the child, so tools like cryptsetup can ask
for passphrases themselves. Simulation support and privilege elevation
are layered on top.
"""
import logging
import subprocess
import uuid
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence

from ezluks.utils.format import TermColors, colorize, format_command
from ezluks.utils.privilege import PrivilegeMode, find_elevation_tool

logger = logging.getLogger('ezluks')


class SimulationMode(Enum):
    """Enumeration for simulation modes"""
    DISABLED = 0  # Normal operation
    SIMULATE = 1  # Simulate operations


class CommandRunner:
    """
    Class responsible for command execution with simulation support.
    Acts as a wrapper around subprocess.run with additional functionality.
    """
    def __init__(
        self,
        simulation_mode: SimulationMode,
        privilege_mode: PrivilegeMode = PrivilegeMode.ROOT,
        colored_output: bool = True,
        elevation_candidates: Optional[Sequence[str]] = None,
    ):
        """
        Initialize the command runner.

        Args:
            simulation_mode: Simulation mode to operate in
            privilege_mode: Whether commands are prefixed with an elevation tool
            colored_output: Whether to use colored output in terminal
            elevation_candidates: Elevation tool paths to probe, None for the defaults
        """
        self.simulation_mode = simulation_mode
        self.privilege_mode = privilege_mode
        self.colored_output = colored_output
        self.elevation_candidates = elevation_candidates
        self.elevation_tool: Optional[str] = None
        self.commands_run: List[Dict[str, Any]] = []

        # Generate a unique simulation ID
        self.simulation_id = str(uuid.uuid4())[:8]

    @property
    def simulating(self) -> bool:
        return self.simulation_mode == SimulationMode.SIMULATE

    def _elevate(self, cmd: List[str]) -> List[str]:
        """Prefix cmd with the elevation tool, locating it on first use."""
        if self.privilege_mode != PrivilegeMode.ELEVATE:
            return cmd
        if self.elevation_tool is None:
            self.elevation_tool = find_elevation_tool(self.elevation_candidates)
        return [self.elevation_tool] + cmd

    def run(self, cmd: List[str], check: bool = True, privileged: bool = True,
            **kwargs) -> subprocess.CompletedProcess:
        """
        Run an external command or simulate running it.

        Standard input, output and error are inherited from this process.

        Args:
            cmd: Command to run as list of strings
            check: Whether to check for non-zero return code
            privileged: Whether the command needs root privileges
            **kwargs: Additional arguments to pass to subprocess.run

        Returns:
            CompletedProcess instance from subprocess.run

        Raises:
            subprocess.CalledProcessError: If the command fails or cannot be started
            PrivilegeError: If elevation is required but no tool is available
        """
        if privileged:
            cmd = self._elevate(list(cmd))
        cmd_str = format_command(cmd)
        logger.debug(f"Command requested: {cmd_str}")

        self.commands_run.append({
            "command": list(cmd),
            "simulated": self.simulating
        })

        if self.simulating:
            sim_prefix = colorize(f"[SIM:{self.simulation_id}]", TermColors.SIM, self.colored_output)
            logger.info(f"{sim_prefix} Would execute: {cmd_str}")
            return subprocess.CompletedProcess(args=cmd, returncode=0)

        try:
            result = subprocess.run(cmd, check=check, **kwargs)
        except subprocess.CalledProcessError as e:
            logger.error(colorize(f"Command '{cmd_str}' failed", TermColors.ERROR, self.colored_output))
            logger.error(f"Return code: {e.returncode}")
            raise
        except OSError as e:
            logger.error(colorize(f"Command '{cmd_str}' could not be started: {e}",
                                  TermColors.ERROR, self.colored_output))
            raise subprocess.CalledProcessError(127, cmd) from e

        if result.stdout:
            print(result.stdout)
        return result

    def get_simulation_report(self) -> str:
        """
        Generate a report of all simulated commands.

        Returns:
            Formatted string with report of simulated commands
        """
        if not self.simulating:
            return "Simulation mode is not active."

        report = []
        report.append("=" * 80)
        report.append(f"SIMULATION REPORT [ID: {self.simulation_id}]")
        report.append("=" * 80)
        report.append("")

        for i, cmd_record in enumerate(self.commands_run, 1):
            report.append(f"{i}. {format_command(cmd_record['command'])}")

        report.append("")
        report.append("-" * 80)
        report.append(f"Total commands simulated: {len(self.commands_run)}")
        report.append("=" * 80)

        return "\n".join(report)

