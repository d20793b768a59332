"""Claude CLI adapter — implements TextGenerationPort."""

import asyncio
import sys
import uuid
from datetime import datetime
from typing import Optional

from socratic_coach.config import ProviderConfig
from socratic_coach.ports.outbound import ProviderError


async def _run_subprocess(cmd_args):
    """Run a subprocess command and return process/stdout/stderr."""
    proc = await asyncio.create_subprocess_exec(
        *cmd_args,
        stdin=asyncio.subprocess.DEVNULL,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
    )
    try:
        stdout, stderr = await proc.communicate()
    except asyncio.CancelledError:
        proc.kill()
        raise
    return proc, stdout, stderr


class ClaudeCliAdapter:
    """Runs one ``claude --print`` completion per prompt."""

    def __init__(self, config: Optional[ProviderConfig] = None):
        self.config = config or ProviderConfig(name="claude", model="")

    def _args(self, prompt: str):
        args = [
            "claude", "--print",
            "--session-id", str(uuid.uuid4()),
            "--output-format", "text",
        ]
        if self.config.model:
            args.extend(["--model", self.config.model])
        args.append(prompt)
        return args

    async def generate_text(self, prompt: str) -> str:
        print(f"[{datetime.now().isoformat()}] Executing with Claude CLI", file=sys.stderr)
        try:
            proc, stdout, stderr = await asyncio.wait_for(
                _run_subprocess(self._args(prompt)),
                timeout=self.config.timeout,
            )
        except asyncio.TimeoutError:
            raise ProviderError(f"Timeout ({self.config.timeout:g}s)")
        except OSError as e:
            raise ProviderError(f"Could not start claude CLI: {e}") from e

        if proc.returncode != 0:
            raise ProviderError(f"Exit code {proc.returncode}: {stderr.decode('utf-8', 'replace')}")
        response = stdout.decode("utf-8").strip()
        if not response:
            raise ProviderError("Claude returned empty response")
        print(f"[{datetime.now().isoformat()}] Completed", file=sys.stderr)
        return response
