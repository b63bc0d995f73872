"""Thin subprocess wrapper around the kubectl binary.

Every failure (missing binary, non-zero exit, undecodable output) is turned
into ``None``/``False`` here so callers only ever see an absent result.
"""

from __future__ import annotations

import subprocess
from typing import BinaryIO, List, Optional, Sequence

from ..utils.logging import get_logger

LOGGER = get_logger("kubeview.kubectl")

DEFAULT_CHUNK_SIZE = 1024


class KubectlClient:
    """Builds and runs ``kubectl <verb> [resource] [--namespace ns] ...``."""

    def __init__(self, binary: str = "kubectl") -> None:
        self.binary = binary

    def base_command(
        self,
        verb: str,
        resource: Optional[str] = None,
        *,
        namespace: Optional[str] = None,
    ) -> List[str]:
        command = [self.binary, verb]
        if resource:
            command.append(resource)
        if namespace:
            command.extend(["--namespace", namespace])
        return command

    def _command(
        self,
        verb: str,
        resource: Optional[str],
        args: Sequence[str],
        namespace: Optional[str],
    ) -> List[str]:
        return self.base_command(verb, resource, namespace=namespace) + list(args)

    # ------------------------------------------------------------------
    # Execution modes
    # ------------------------------------------------------------------
    def capture(
        self,
        verb: str,
        resource: Optional[str] = None,
        *args: str,
        namespace: Optional[str] = None,
    ) -> Optional[str]:
        """Run to completion and return stdout, or None on any failure."""

        command = self._command(verb, resource, args, namespace)
        LOGGER.debug("Running %s", " ".join(command))
        try:
            completed = subprocess.run(
                command,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                check=False,
            )
        except (OSError, UnicodeDecodeError) as exc:
            LOGGER.debug("kubectl %s could not run: %s", verb, exc)
            return None
        if completed.returncode != 0:
            LOGGER.debug(
                "kubectl %s exited with %s: %s",
                verb,
                completed.returncode,
                (completed.stderr or "").strip(),
            )
            return None
        return completed.stdout

    def passthrough(
        self,
        verb: str,
        resource: Optional[str] = None,
        *args: str,
        namespace: Optional[str] = None,
    ) -> Optional[int]:
        """Run attached to the terminal so editors and shells work."""

        command = self._command(verb, resource, args, namespace)
        LOGGER.debug("Running %s (attached)", " ".join(command))
        try:
            completed = subprocess.run(command, check=False)
        except OSError as exc:
            LOGGER.debug("kubectl %s could not run: %s", verb, exc)
            return None
        return completed.returncode

    def stream(
        self,
        verb: str,
        resource: Optional[str] = None,
        *args: str,
        sink: BinaryIO,
        namespace: Optional[str] = None,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> bool:
        """Copy stdout to ``sink`` in bounded chunks until the stream closes.

        An interrupt or a sink that stops accepting writes (a closed pipe)
        terminates the child and ends the copy without raising.
        """

        command = self._command(verb, resource, args, namespace)
        LOGGER.debug("Streaming %s", " ".join(command))
        try:
            process = subprocess.Popen(command, stdout=subprocess.PIPE)
        except OSError as exc:
            LOGGER.debug("kubectl %s could not run: %s", verb, exc)
            return False
        drained = False
        try:
            while True:
                chunk = process.stdout.read1(chunk_size)
                if not chunk:
                    drained = True
                    break
                sink.write(chunk)
                sink.flush()
        except KeyboardInterrupt:
            LOGGER.debug("Interrupted kubectl %s", verb)
        except OSError as exc:
            LOGGER.debug("Stopped copying kubectl %s output: %s", verb, exc)
        finally:
            if not drained:
                process.terminate()
            process.stdout.close()
            process.wait()
        return True


__all__ = ["KubectlClient", "DEFAULT_CHUNK_SIZE"]
