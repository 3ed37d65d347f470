"""Docker CLI adapter — implements the ImageBuilder port.

Builds each service directory with an inline Dockerfile (the checkout is the
build context, the directory is passed as the ``service_dir`` build arg) and
pushes the result to the registry under a tag derived from the directory path.
"""

from __future__ import annotations

import asyncio
import logging
import re
from collections import deque
from pathlib import Path

from service_builder.domain.exceptions import BuildError
from service_builder.domain.value_objects import GitHubRepo

logger = logging.getLogger(__name__)

_OUTPUT_TAIL_LINES = 20
_UNSAFE_TAG_CHARS = re.compile(r"[^a-z0-9._-]+")

DEFAULT_DOCKERFILE = """\
FROM golang:1.22 AS builder

# Copy the service
ARG service_dir
COPY $service_dir /go/service
WORKDIR /go/service

# Build the service
RUN go mod download
RUN CGO_ENABLED=0 go build -ldflags="-w -s" -v -o app .

# A distroless image with some basics like SSL certificates
FROM gcr.io/distroless/static
COPY --from=builder /go/service/app /service
ENTRYPOINT ["/service"]
"""


def image_tag(registry: str, repo: GitHubRepo, directory: str) -> str:
    """Return the deterministic image tag for *directory*.

    e.g. ``foobar/api`` → ``docker.pkg.github.com/micro/services/foobar-api:latest``
    """
    name = _UNSAFE_TAG_CHARS.sub("-", directory.lower()).strip("-")
    return f"{registry}/{repo.full_name.lower()}/{name}:latest"


class DockerCliBuilder:
    """Concrete ImageBuilder driving the ``docker`` command line."""

    def __init__(
        self,
        repo: GitHubRepo,
        token: str,
        registry: str = "docker.pkg.github.com",
        workspace: Path | str = ".",
        debug: bool = False,
        dockerfile: str = DEFAULT_DOCKERFILE,
        docker_bin: str = "docker",
    ) -> None:
        self._repo = repo
        self._token = token
        self._registry = registry
        self._workspace = Path(workspace)
        self._debug = debug
        self._dockerfile = dockerfile
        self._docker = docker_bin
        self._login_lock = asyncio.Lock()
        self._logged_in = False

    async def build(self, directory: str) -> None:
        """Build the image for *directory* and push it."""
        tag = image_tag(self._registry, self._repo, directory)
        logger.info("Building %s as %s", directory, tag)

        await self._run(
            directory,
            "build",
            "--file", "-",
            "--tag", tag,
            "--build-arg", f"service_dir={directory}",
            str(self._workspace),
            stdin=self._dockerfile.encode(),
        )
        await self._login()
        await self._run(directory, "push", tag)

    async def _login(self) -> None:
        """Log in to the registry once per process."""
        async with self._login_lock:
            if self._logged_in:
                return
            await self._run(
                "registry",
                "login", self._registry,
                "--username", self._repo.owner,
                "--password-stdin",
                stdin=self._token.encode(),
            )
            self._logged_in = True

    async def _run(self, label: str, *args: str, stdin: bytes | None = None) -> None:
        """Run one docker sub-command, raising BuildError on a non-zero exit."""
        try:
            proc = await asyncio.create_subprocess_exec(
                self._docker,
                *args,
                stdin=asyncio.subprocess.PIPE if stdin is not None else asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.STDOUT,
            )
        except OSError as exc:
            raise BuildError(f"Unable to run {self._docker} {args[0]}: {exc}") from exc

        try:
            if stdin is not None:
                assert proc.stdin is not None
                proc.stdin.write(stdin)
                await proc.stdin.drain()
                proc.stdin.close()

            tail: deque[str] = deque(maxlen=_OUTPUT_TAIL_LINES)
            assert proc.stdout is not None
            async for raw in proc.stdout:
                line = raw.decode(errors="replace").rstrip()
                tail.append(line)
                if self._debug:
                    logger.info("[%s] %s", label, line)

            returncode = await proc.wait()
        finally:
            if proc.returncode is None:
                logger.warning("Killing docker %s for %s", args[0], label)
                proc.kill()
                await proc.wait()

        if returncode != 0:
            output = "\n".join(tail)
            raise BuildError(
                f"docker {args[0]} exited with status {returncode} for {label}:\n{output}"
            )
