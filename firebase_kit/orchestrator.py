from __future__ import annotations

import sys
from typing import Any, Dict, List, Mapping, Optional

from pulumi import automation as auto

from .composer import (
    FIREBASE_SERVICES,
    FIREBASE_SERVICES_VERSION,
    compose_apis,
    compose_labels,
)
from .config import ProjectConfig
from .logging_utils import get_logger
from .program import build_program


logger = get_logger(__name__)


def _stream_output(line: str) -> None:
    sys.stdout.write(line if line.endswith("\n") else line + "\n")
    sys.stdout.flush()


def _select_stack(cfg: ProjectConfig) -> auto.Stack:
    """
    inline program 으로 stack 을 만들거나 기존 stack 을 선택한다.
    """
    logger.info("Pulumi stack 선택: %s/%s", cfg.pulumi_project, cfg.stack_name)
    return auto.create_or_select_stack(
        stack_name=cfg.stack_name,
        project_name=cfg.pulumi_project,
        program=build_program(cfg),
    )


def _format_changes(changes: Optional[Mapping[Any, int]]) -> List[str]:
    if not changes:
        return ["- (none)"]
    return [f"- {getattr(op, 'value', op)}: {count}" for op, count in sorted(
        changes.items(), key=lambda kv: str(getattr(kv[0], "value", kv[0]))
    )]


def _plain_outputs(outputs: Mapping[str, auto.OutputValue]) -> Dict[str, Any]:
    return {
        k: ("[secret]" if v.secret else v.value)
        for k, v in outputs.items()
    }


def plan_all(cfg: ProjectConfig) -> str:
    """
    현재 설정과 조합된 API/라벨을 요약 텍스트로 리턴한다.
    Pulumi 엔진이나 GCP 호출은 하지 않는다.
    """
    apis = compose_apis(cfg.activate_apis)
    labels = compose_labels(cfg.labels)
    baseline = set(FIREBASE_SERVICES)

    lines: List[str] = []
    lines.append("# Firebase project plan")
    lines.append(f"- project: {cfg.project_id}")
    lines.append(f"- name: {cfg.display_name}")
    lines.append(f"- stack: {cfg.pulumi_project}/{cfg.stack_name}")
    lines.append("")

    lines.append("## Config summary")
    lines.append(f"- billing_account: {cfg.billing_account or '(not set)'}")
    lines.append(f"- org_id: {cfg.org_id or '(not set)'}")
    lines.append(f"- folder_id: {cfg.folder_id or '(not set)'}")
    lines.append(f"- auto_create_network: {cfg.auto_create_network}")
    lines.append(f"- deletion_policy: {cfg.deletion_policy}")
    lines.append("")

    lines.append(f"## APIs (baseline v{FIREBASE_SERVICES_VERSION})")
    for api in apis:
        origin = "baseline" if api in baseline else "requested"
        lines.append(f"- {api} ({origin})")
    lines.append("")

    lines.append("## Labels")
    for k, v in labels.items():
        lines.append(f"- {k}={v}")
    lines.append("")

    lines.append("## IAM members")
    if cfg.iam_members:
        for role, members in cfg.iam_members.items():
            for m in members:
                lines.append(f"- {role}: {m}")
    else:
        lines.append("- (none)")
    lines.append("")

    lines.append("## Web apps")
    if cfg.web_apps:
        for app in cfg.web_apps:
            lines.append(f"- {app} (site: {app}-{cfg.project_id})")
            for domain in cfg.custom_domains.get(app, []):
                lines.append(f"  - domain: {domain}")
    else:
        lines.append("- (none)")

    return "\n".join(lines)


def preview_all(cfg: ProjectConfig) -> str:
    """
    `pulumi preview` 를 실행하고 변경 요약을 리턴한다.
    """
    stack = _select_stack(cfg)
    result = stack.preview(on_output=_stream_output)

    lines: List[str] = []
    lines.append("# Preview summary")
    lines.append(f"- project: {cfg.project_id}")
    lines.append(f"- stack: {cfg.stack_name}")
    lines.append("")
    lines.append("## Changes")
    lines.extend(_format_changes(result.change_summary))
    return "\n".join(lines)


def apply_all(cfg: ProjectConfig) -> tuple[str, Dict[str, Any]]:
    """
    `pulumi up` 을 실행한다.

    Returns:
        summary: 사람이 읽기 좋은 텍스트 요약
        outputs: stack output 값 (secret 은 가려서)
    """
    stack = _select_stack(cfg)
    result = stack.up(on_output=_stream_output)
    outputs = _plain_outputs(result.outputs)

    lines: List[str] = []
    lines.append("# Deploy summary")
    lines.append(f"- project: {cfg.project_id}")
    lines.append(f"- stack: {cfg.stack_name}")
    lines.append(f"- result: {result.summary.result}")
    lines.append("")
    lines.append("## Changes")
    lines.extend(_format_changes(result.summary.resource_changes))
    lines.append("")
    lines.append("## Outputs")
    if outputs:
        for k, v in sorted(outputs.items()):
            lines.append(f"- {k}: {v}")
    else:
        lines.append("- (none)")

    return "\n".join(lines), outputs


def destroy_all(cfg: ProjectConfig) -> str:
    """
    `pulumi destroy` 를 실행한다.

    deletion_policy=PREVENT 인 프로젝트는 provider 가 삭제를 거부한다.
    """
    stack = _select_stack(cfg)
    result = stack.destroy(on_output=_stream_output)

    lines: List[str] = []
    lines.append("# Destroy summary")
    lines.append(f"- project: {cfg.project_id}")
    lines.append(f"- stack: {cfg.stack_name}")
    lines.append(f"- result: {result.summary.result}")
    lines.append("")
    lines.append("## Changes")
    lines.extend(_format_changes(result.summary.resource_changes))
    return "\n".join(lines)


def output_all(cfg: ProjectConfig) -> Dict[str, Any]:
    stack = _select_stack(cfg)
    return _plain_outputs(stack.outputs())
