"""
Thin async wrapper around the kubectl binary.

Only what recommendation needs: explaining resource schemas, listing the
values offered in questionnaires, and discovering API resources.
"""

import asyncio
import json
from typing import Any, Dict, List, Optional

from k8s_advisor.utils.exceptions import KubectlError
from k8s_advisor.utils.logger import ComponentLogger

kubectl_logger = ComponentLogger("K8S_ADVISOR_KUBECTL")


class KubectlClient:
    """Run kubectl commands against the configured cluster."""

    def __init__(self, kubeconfig: Optional[str] = None, timeout: int = 30, binary: str = "kubectl") -> None:
        self.kubeconfig = kubeconfig
        self.timeout = timeout
        self.binary = binary

    def build_command(self, args: List[str]) -> List[str]:
        command = [self.binary]
        if self.kubeconfig:
            command.extend(["--kubeconfig", self.kubeconfig])
        command.extend(args)
        return command

    async def execute(self, args: List[str]) -> str:
        """
        Run kubectl and return trimmed stdout.

        Raises:
            KubectlError: Non-zero exit, timeout, or missing binary
        """
        command = self.build_command(args)
        try:
            process = await asyncio.create_subprocess_exec(
                *command,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except FileNotFoundError as e:
            raise KubectlError(f"kubectl binary not found: {self.binary}", args=args) from e

        try:
            stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=self.timeout)
        except asyncio.TimeoutError as e:
            process.kill()
            await process.wait()
            kubectl_logger.log_structured(
                level="ERROR",
                message="kubectl command timed out",
                extra={"args": " ".join(args), "timeout": self.timeout}
            )
            raise KubectlError(f"kubectl command timed out after {self.timeout} seconds", args=args) from e

        out = stdout.decode("utf-8", errors="replace")
        err = stderr.decode("utf-8", errors="replace")
        if process.returncode != 0:
            kubectl_logger.log_structured(
                level="WARNING",
                message="kubectl command failed",
                extra={"args": " ".join(args), "exit_code": process.returncode, "stderr": err[:200]}
            )
            raise KubectlError(f"kubectl command failed: {err.strip() or out.strip()}", args=args, stderr=err)
        return out.strip()

    async def get_json(self, args: List[str]) -> Dict[str, Any]:
        output = await self.execute([*args, "-o", "json"])
        try:
            return json.loads(output)
        except json.JSONDecodeError as e:
            raise KubectlError(f"kubectl returned invalid JSON: {e}", args=args) from e

    async def explain_resource(self, resource_name: str) -> str:
        """Full recursive field documentation for a resource, e.g. 'deployments.apps'."""
        return await self.execute(["explain", resource_name, "--recursive"])

    async def discover_resources(self) -> Dict[str, List[Dict[str, Any]]]:
        """
        List API resources and custom resource definitions.

        Returns:
            {"resources": [...], "custom": [...]}
        """
        output = await self.execute(["api-resources"])
        resources = [r for r in (self._parse_api_resource(line) for line in output.splitlines()[1:]) if r]

        crd_list = await self.get_json(["get", "crd"])
        custom = []
        for item in crd_list.get("items", []):
            spec = item.get("spec", {})
            versions = spec.get("versions") or []
            storage_version = next((v.get("name") for v in versions if v.get("storage")), None)
            custom.append({
                "name": item.get("metadata", {}).get("name", ""),
                "group": spec.get("group", ""),
                "kind": spec.get("names", {}).get("kind", ""),
                "scope": spec.get("scope", ""),
                "version": storage_version or (versions[0].get("name") if versions else ""),
            })

        return {"resources": resources, "custom": custom}

    @staticmethod
    def _parse_api_resource(line: str) -> Optional[Dict[str, Any]]:
        # NAME  SHORTNAMES  APIVERSION  NAMESPACED  KIND (SHORTNAMES may be blank)
        parts = line.split()
        if len(parts) == 5:
            name, short_names, api_version, namespaced, kind = parts
        elif len(parts) == 4:
            name, api_version, namespaced, kind = parts
            short_names = ""
        else:
            return None

        return {
            "name": name,
            "shortNames": short_names.split(",") if short_names else [],
            "apiVersion": api_version,
            "namespaced": namespaced == "true",
            "kind": kind,
            "group": api_version.split("/")[0] if "/" in api_version else "",
        }
