"""Default action catalog for kubeview."""

from __future__ import annotations

import json
import shlex
import sys
from abc import abstractmethod
from typing import TYPE_CHECKING, Any, BinaryIO, Callable, Dict, List, Optional, Sequence

from ..kubectl.client import DEFAULT_CHUNK_SIZE, KubectlClient
from ..utils.clipboard import copy_to_clipboard
from ..utils.logging import get_logger
from ..utils.prompts import ask_command, choose_container
from .base import (
    DEFAULT_TRIGGER,
    NODE_RESOURCES,
    POD_RESOURCES,
    Action,
    ActionMetadata,
    SelectionContext,
)

if TYPE_CHECKING:  # pragma: no cover - import cycle guard
    from .registry import BindingRegistry

LOGGER = get_logger("kubeview.actions")

ClipboardSink = Callable[[str], bool]
StreamFactory = Callable[[], BinaryIO]
ContainerChooser = Callable[[Sequence[str]], Optional[str]]
CommandPrompt = Callable[[], Optional[str]]

CONTAINER_NAMES_JSONPATH = "jsonpath={.spec.containers[*].name}"


def _stdout_buffer() -> BinaryIO:
    return sys.stdout.buffer


def _nothing_selected(context: SelectionContext) -> str:
    return f"no {context.resource} selected"


def _json_items(text: Optional[str]) -> Optional[List[Dict[str, Any]]]:
    """Objects from ``kubectl get -o json``, which wraps several in a List."""

    if text is None:
        return None
    try:
        data = json.loads(text)
    except ValueError as exc:
        LOGGER.debug("kubectl returned invalid JSON: %s", exc)
        return None
    if not isinstance(data, dict):
        return None
    if "items" in data:
        return [item for item in data["items"] if isinstance(item, dict)]
    return [data]


# ----------------------------------------------------------------------
# Selection-only actions
# ----------------------------------------------------------------------
class NamesAction(Action):
    """Print the selected resource names, one per line."""

    def __init__(self, trigger: str = "ctrl-n") -> None:
        super().__init__(ActionMetadata(trigger=trigger, description="Names"))

    def execute(self, context: SelectionContext) -> Optional[str]:
        return context.joined_names()


class CopyAction(Action):
    """Copy the selected names to the clipboard."""

    def __init__(
        self,
        trigger: str = DEFAULT_TRIGGER,
        *,
        clipboard: Optional[ClipboardSink] = None,
    ) -> None:
        super().__init__(ActionMetadata(trigger=trigger, description="Copy"))
        self._clipboard = clipboard or copy_to_clipboard

    def execute(self, context: SelectionContext) -> Optional[str]:
        if not self._clipboard(context.joined_names()):
            LOGGER.debug("Clipboard unavailable; selection not copied")
        return None


class ColumnAction(Action):
    """Print one column of every selected row."""

    def __init__(self, position: int, title: str) -> None:
        if position < 1:
            raise ValueError("Column positions are 1-based")
        super().__init__(
            ActionMetadata(trigger=f"f{position}", description=f"Column {title}")
        )
        self.position = position
        self.title = title

    def execute(self, context: SelectionContext) -> Optional[str]:
        index = self.position - 1
        values = [row[index] for row in context.columns if len(row) > index]
        return "\n".join(values)


# ----------------------------------------------------------------------
# kubectl backed actions
# ----------------------------------------------------------------------
class KubectlAction(Action):
    """Action that shells out to kubectl for the selected names."""

    def __init__(self, metadata: ActionMetadata, kubectl: KubectlClient) -> None:
        super().__init__(metadata)
        self.kubectl = kubectl

    def execute(self, context: SelectionContext) -> Optional[str]:
        if not context.names:
            return _nothing_selected(context)
        return self.run(context)

    @abstractmethod
    def run(self, context: SelectionContext) -> Optional[str]:
        """Run against a non-empty selection."""


class OutputAction(KubectlAction):
    """``kubectl get --output <format>`` for the selection."""

    def __init__(self, kubectl: KubectlClient, output_format: str, trigger: str) -> None:
        super().__init__(
            ActionMetadata(trigger=trigger, description=output_format.upper()),
            kubectl,
        )
        self.output_format = output_format

    def run(self, context: SelectionContext) -> Optional[str]:
        return self.kubectl.capture(
            "get",
            context.resource,
            "--output",
            self.output_format,
            *context.names,
            namespace=context.namespace,
        )


class DescribeAction(KubectlAction):
    def __init__(self, kubectl: KubectlClient, trigger: str = "ctrl-d") -> None:
        super().__init__(
            ActionMetadata(trigger=trigger, description="Describe"), kubectl
        )

    def run(self, context: SelectionContext) -> Optional[str]:
        return self.kubectl.capture(
            "describe",
            context.resource,
            *context.names,
            namespace=context.namespace,
        )


class InfoAction(KubectlAction):
    """Short JSON summary for pods and nodes, ``describe`` for anything else."""

    def __init__(self, kubectl: KubectlClient, trigger: str = "ctrl-k") -> None:
        super().__init__(ActionMetadata(trigger=trigger, description="Info"), kubectl)
        self._describe = DescribeAction(kubectl)

    def run(self, context: SelectionContext) -> Optional[str]:
        if context.resource in POD_RESOURCES:
            summarize = self._pod_summary
        elif context.resource in NODE_RESOURCES:
            summarize = self._node_summary
        else:
            return self._describe.run(context)
        items = _json_items(
            self.kubectl.capture(
                "get",
                context.resource,
                "--output",
                "json",
                *context.names,
                namespace=context.namespace,
            )
        )
        if items is None:
            return None
        summaries = [summarize(item) for item in items]
        payload = summaries[0] if len(summaries) == 1 else summaries
        return json.dumps(payload, indent=2)

    @staticmethod
    def _pod_summary(pod: Dict[str, Any]) -> Dict[str, Any]:
        metadata = pod.get("metadata", {})
        containers = pod.get("spec", {}).get("containers", [])
        return {
            "name": metadata.get("name"),
            "namespace": metadata.get("namespace"),
            "labels": metadata.get("labels", {}),
            "containers": [container.get("name") for container in containers],
        }

    @staticmethod
    def _node_summary(node: Dict[str, Any]) -> Dict[str, Any]:
        metadata = node.get("metadata", {})
        return {
            "name": metadata.get("name"),
            "labels": metadata.get("labels", {}),
            "unschedulable": bool(node.get("spec", {}).get("unschedulable", False)),
        }


class EditAction(KubectlAction):
    """Open the selection in ``kubectl edit`` on the real terminal."""

    def __init__(self, kubectl: KubectlClient, trigger: str = "ctrl-e") -> None:
        super().__init__(ActionMetadata(trigger=trigger, description="Edit"), kubectl)

    def run(self, context: SelectionContext) -> Optional[str]:
        self.kubectl.passthrough(
            "edit",
            context.resource,
            *context.names,
            namespace=context.namespace,
        )
        return None


# ----------------------------------------------------------------------
# Single pod actions
# ----------------------------------------------------------------------
class SinglePodAction(KubectlAction):
    """Pod action that needs exactly one pod and may pick a container."""

    cardinality_message = "{verb} only supports a single resource, {count} selected"
    verb = ""

    def __init__(
        self,
        metadata: ActionMetadata,
        kubectl: KubectlClient,
        *,
        chooser: Optional[ContainerChooser] = None,
    ) -> None:
        super().__init__(metadata, kubectl)
        self._chooser = chooser or choose_container

    def execute(self, context: SelectionContext) -> Optional[str]:
        if len(context.names) != 1:
            return self.cardinality_message.format(
                verb=self.verb, count=len(context.names)
            )
        return super().execute(context)

    def container_args(self, context: SelectionContext) -> Optional[List[str]]:
        """``--container`` flags for the pod, or None when the choice was abandoned.

        Pods with a single container, or whose containers cannot be listed,
        use kubectl's default container.
        """

        output = self.kubectl.capture(
            "get",
            "pod",
            context.names[0],
            "--output",
            CONTAINER_NAMES_JSONPATH,
            namespace=context.namespace,
        )
        containers = (output or "").split()
        if len(containers) <= 1:
            return []
        choice = self._chooser(containers)
        if choice is None:
            LOGGER.debug("No container chosen for %s", context.names[0])
            return None
        return ["--container", choice]

    def exec_in_pod(
        self,
        context: SelectionContext,
        container: Sequence[str],
        argv: Sequence[str],
    ) -> None:
        self.kubectl.passthrough(
            "exec",
            None,
            "-it",
            context.names[0],
            *container,
            "--",
            *argv,
            namespace=context.namespace,
        )
        return None


class LogsAction(SinglePodAction):
    """Follow the logs of a single pod, writing them as they arrive."""

    cardinality_message = "{verb} only support a single resource, {count} selected"
    verb = "logs"

    def __init__(
        self,
        kubectl: KubectlClient,
        trigger: str = "ctrl-l",
        *,
        stream: Optional[StreamFactory] = None,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        chooser: Optional[ContainerChooser] = None,
    ) -> None:
        super().__init__(
            ActionMetadata(
                trigger=trigger,
                description="Logs",
                resource_types=POD_RESOURCES,
            ),
            kubectl,
            chooser=chooser,
        )
        self._stream = stream or _stdout_buffer
        self.chunk_size = chunk_size

    def run(self, context: SelectionContext) -> Optional[str]:
        container = self.container_args(context)
        if container is None:
            return None
        self.kubectl.stream(
            "logs",
            None,
            context.names[0],
            *container,
            "--follow",
            sink=self._stream(),
            namespace=context.namespace,
            chunk_size=self.chunk_size,
        )
        return None


class ShellAction(SinglePodAction):
    """Attach an interactive ``sh`` to a single pod."""

    verb = "shell"

    def __init__(
        self,
        kubectl: KubectlClient,
        trigger: str = "ctrl-s",
        *,
        chooser: Optional[ContainerChooser] = None,
    ) -> None:
        super().__init__(
            ActionMetadata(
                trigger=trigger,
                description="Shell",
                resource_types=POD_RESOURCES,
            ),
            kubectl,
            chooser=chooser,
        )

    def run(self, context: SelectionContext) -> Optional[str]:
        container = self.container_args(context)
        if container is None:
            return None
        return self.exec_in_pod(context, container, ["sh"])


class ExecAction(SinglePodAction):
    """Run a command typed at a prompt inside a single pod."""

    verb = "exec"

    def __init__(
        self,
        kubectl: KubectlClient,
        trigger: str = "ctrl-r",
        *,
        chooser: Optional[ContainerChooser] = None,
        ask: Optional[CommandPrompt] = None,
    ) -> None:
        super().__init__(
            ActionMetadata(
                trigger=trigger,
                description="Exec",
                resource_types=POD_RESOURCES,
            ),
            kubectl,
            chooser=chooser,
        )
        self._ask = ask or ask_command

    def run(self, context: SelectionContext) -> Optional[str]:
        container = self.container_args(context)
        if container is None:
            return None
        line = self._ask()
        if not line:
            return None
        try:
            argv = shlex.split(line)
        except ValueError as exc:
            LOGGER.warning("Cannot parse command %r: %s", line, exc)
            return None
        return self.exec_in_pod(context, container, argv)


class NodeNameAction(KubectlAction):
    """Copy the names of the nodes the selected pods are scheduled on."""

    def __init__(
        self,
        kubectl: KubectlClient,
        trigger: str = "alt-n",
        *,
        clipboard: Optional[ClipboardSink] = None,
    ) -> None:
        super().__init__(
            ActionMetadata(
                trigger=trigger,
                description="Node name",
                resource_types=POD_RESOURCES,
            ),
            kubectl,
        )
        self._clipboard = clipboard or copy_to_clipboard

    def run(self, context: SelectionContext) -> Optional[str]:
        items = _json_items(
            self.kubectl.capture(
                "get",
                "pod",
                "--output",
                "json",
                *context.names,
                namespace=context.namespace,
            )
        )
        if not items:
            return None
        nodes = [item.get("spec", {}).get("nodeName") or "" for item in items]
        if not self._clipboard("\n".join(nodes)):
            LOGGER.debug("Clipboard unavailable; node names not copied")
        return None


# ----------------------------------------------------------------------
# Node and destructive actions
# ----------------------------------------------------------------------
class NodeAction(KubectlAction):
    """Run a node-scoped verb such as cordon against the selected nodes."""

    def __init__(
        self,
        kubectl: KubectlClient,
        verb: str,
        trigger: str,
    ) -> None:
        super().__init__(
            ActionMetadata(
                trigger=trigger,
                description=verb.capitalize(),
                resource_types=NODE_RESOURCES,
            ),
            kubectl,
        )
        self.verb = verb

    def run(self, context: SelectionContext) -> Optional[str]:
        return self.kubectl.capture(self.verb, None, *context.names)


class DeleteAction(KubectlAction):
    def __init__(self, kubectl: KubectlClient, trigger: str = "ctrl-x") -> None:
        super().__init__(
            ActionMetadata(trigger=trigger, description="Delete"), kubectl
        )

    def run(self, context: SelectionContext) -> Optional[str]:
        if context.resource in NODE_RESOURCES:
            return "refusing to delete nodes"
        return self.kubectl.capture(
            "delete",
            context.resource,
            *context.names,
            namespace=context.namespace,
        )


def register_default_actions(
    registry: "BindingRegistry",
    kubectl: KubectlClient,
    *,
    clipboard: Optional[ClipboardSink] = None,
    stream: Optional[StreamFactory] = None,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    chooser: Optional[ContainerChooser] = None,
    ask: Optional[CommandPrompt] = None,
) -> None:
    """Register the static key bindings into the registry."""

    registry.register(CopyAction(clipboard=clipboard))
    registry.register(NamesAction())
    registry.register(OutputAction(kubectl, "yaml", "ctrl-y"))
    registry.register(OutputAction(kubectl, "json", "ctrl-j"))
    registry.register(DescribeAction(kubectl))
    registry.register(InfoAction(kubectl))
    registry.register(EditAction(kubectl))
    registry.register(
        LogsAction(kubectl, stream=stream, chunk_size=chunk_size, chooser=chooser)
    )
    registry.register(ShellAction(kubectl, chooser=chooser))
    registry.register(ExecAction(kubectl, chooser=chooser, ask=ask))
    registry.register(NodeNameAction(kubectl, clipboard=clipboard))
    registry.register(NodeAction(kubectl, "cordon", "ctrl-o"))
    registry.register(NodeAction(kubectl, "uncordon", "ctrl-u"))
    registry.register(DeleteAction(kubectl))


__all__ = [
    "NamesAction",
    "CopyAction",
    "ColumnAction",
    "KubectlAction",
    "OutputAction",
    "DescribeAction",
    "InfoAction",
    "EditAction",
    "SinglePodAction",
    "LogsAction",
    "ShellAction",
    "ExecAction",
    "NodeNameAction",
    "NodeAction",
    "DeleteAction",
    "register_default_actions",
]
