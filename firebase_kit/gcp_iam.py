"""
gcp_iam
-------

프로젝트 수준 IAM 멤버를 부여하는 Pulumi 컴포넌트.

멤버 문자열에는 {project_id}, {project_number} 를 쓸 수 있다.
예: "serviceAccount:{project_number}-compute@developer.gserviceaccount.com"
"""

from __future__ import annotations

import hashlib
import re
from typing import List, Mapping, Optional, Sequence

import pulumi
import pulumi_gcp as gcp

from .composer import unique
from .logging_utils import get_logger


logger = get_logger(__name__)


def _slug(value: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", value.lower()).strip("-")


def member_resource_name(name: str, role: str, member: str) -> str:
    """
    slug 는 읽기용이고, 서로 다른 (role, member) 가 같은 이름이 되지 않도록 digest 를 붙인다.
    """
    digest = hashlib.sha1(f"{role}|{member}".encode("utf-8")).hexdigest()[:8]
    return f"{name}-{_slug(role)}-{_slug(member)}-{digest}"


def resolve_member(member: str, project_id: str, project_number: str) -> str:
    # 그 외의 중괄호는 그대로 둔다.
    return (
        member
        .replace("{project_id}", project_id)
        .replace("{project_number}", project_number)
    )


class ProjectIam(pulumi.ComponentResource):
    members: List[gcp.projects.IAMMember]

    def __init__(
        self,
        name: str,
        project_id: pulumi.Input[str],
        project_number: pulumi.Input[str],
        iam_members: Mapping[str, Sequence[str]],
        opts: Optional[pulumi.ResourceOptions] = None,
    ) -> None:
        super().__init__("firebase-kit:gcp:ProjectIam", name, None, opts)

        self.members = []
        for role, members in iam_members.items():
            for member in unique(members):
                logger.debug("IAM 멤버 추가: %s -> %s", role, member)
                resolved = pulumi.Output.all(project_id, project_number).apply(
                    lambda args, m=member: resolve_member(m, args[0], args[1])
                )
                self.members.append(
                    gcp.projects.IAMMember(
                        member_resource_name(name, role, member),
                        project=project_id,
                        role=role,
                        member=resolved,
                        opts=pulumi.ResourceOptions(parent=self),
                    )
                )

        self.register_outputs({
            "members": [m.member for m in self.members],
        })
