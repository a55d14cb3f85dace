
"""
    Copyright © 2020 Mia Herkt
    Licensed under the EUPL, Version 1.2 or - as soon as approved
    by the European Commission - subsequent versions of the EUPL
    (the "License");
    You may not use this work except in compliance with the License.
    You may obtain a copy of the license at:

        https://joinup.ec.europa.eu/software/page/eupl

    Unless required by applicable law or agreed to in writing,
    software distributed under the License is distributed on an
    "AS IS" basis, WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND,
    either express or implied.
    See the License for the specific language governing permissions
    and limitations under the License.
"""


from subprocess import run, DEVNULL, PIPE, STDOUT, TimeoutExpired
import logging
import os
import shlex
import typing

log = logging.getLogger(__name__)

class CommandRunner:
    """
    Runs the external upload hook

    run() returns the exit code and the combined stdout/stderr of the
    command.  A command that doesn't finish within the timeout is killed and
    reported as failed.
    """
    def __init__(self, timeout: float = 60):
        self.timeout = timeout

    def run(self, args: typing.Sequence[str], env: typing.Mapping[str, str]) -> typing.Tuple[int, str]:
        try:
            p = run(list(args), env={**os.environ, **env}, stdin=DEVNULL, stdout=PIPE,
                    stderr=STDOUT, timeout=self.timeout)
        except TimeoutExpired:
            log.warning(f"hook {args[0]} timed out after {self.timeout}s")
            return -1, f"Upload hook timed out after {self.timeout} seconds"
        except OSError as e:
            log.error(f"hook {args[0]} could not be started: {e}")
            return -1, "Upload hook failed to run"

        return p.returncode, p.stdout.decode(errors="replace").strip()

def hook_args(hook) -> typing.List[str]:
    if isinstance(hook, str):
        return shlex.split(hook)
    return list(hook)
