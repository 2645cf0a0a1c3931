"""High-level maintenance operations built on the privileged executor."""

import sys

from vpsbot.core.errors import ExecutionError
from vpsbot.ops.executor import ExecutionResult

BASE_TOOLS = ("vim", "curl", "htop")
PACKAGE_MANAGER = "apt-get"


class OpsController:
    def __init__(self, executor, tools=BASE_TOOLS, package_manager=PACKAGE_MANAGER, platform=None):
        self.executor = executor
        self.tools = tuple(tools)
        self.package_manager = package_manager
        self.platform = platform or sys.platform

    def base_tools(self):
        return list(self.tools)

    async def install_base_tools(self):
        return await self._run([
            [self.package_manager, "update"],
            [self.package_manager, "install", "-y", *self.tools],
        ])

    async def update_system(self):
        return await self._run([
            [self.package_manager, "update"],
            [self.package_manager, "upgrade", "-y"],
        ])

    async def uninstall_base_tools(self):
        return await self._run([
            [self.package_manager, "remove", "-y", *self.tools],
        ])

    async def _run(self, steps):
        if not self.platform.startswith("linux"):
            return ExecutionResult(error=ExecutionError("ops are only supported on linux"))
        return await self.executor.run_sequence(steps, privileged=True)
