"""Command execution through invoke."""

from pathlib import Path

from invoke import Context, Result
from invoke.exceptions import CommandTimedOut

from nightlysync.core.log import logger


class Runner(Context):
    """invoke.Context with a single entry point for running commands.

    All git traffic goes through execute(), so output capture and
    logging behave the same for every command.
    """

    def execute(
        self,
        command: str,
        cwd: Path | None = None,
        timeout: int | None = None,
        check: bool = True,
        env: dict[str, str] | None = None,
        log_level: str | None = "spew",
    ) -> Result:
        """Run a command and capture its output.

        Args:
            command: Shell command string
            cwd: Working directory
            timeout: Maximum run time in seconds
            check: Raise on a nonzero exit status
            env: Extra environment variables (merged into os.environ)
            log_level: Level for echoing captured output, None to
                keep it out of the log

        Returns:
            invoke.Result; exited is -1 when the command timed out

        Raises:
            invoke.UnexpectedExit: If check is set and the command
                fails
        """
        kwargs = {"hide": True, "warn": not check, "in_stream": False}
        if timeout:
            kwargs["timeout"] = timeout
        if env:
            kwargs["env"] = env

        logger.debug("Running command", command=command, cwd=str(cwd or "."))
        try:
            if cwd:
                with self.cd(str(cwd)):
                    result = self.run(command, **kwargs)
            else:
                result = self.run(command, **kwargs)
        except CommandTimedOut as e:
            result = e.result
            result.exited = -1

        if log_level:
            for line in (result.stdout + result.stderr).splitlines():
                logger.log(log_level, "{line}", line=line.rstrip())
        return result
