"""
gcp_project
-----------

GCP 프로젝트 생성과 API 활성화를 담당하는 Pulumi 컴포넌트.
"""

from __future__ import annotations

from typing import List, Mapping, Optional, Sequence

import pulumi
import pulumi_gcp as gcp

from .config import ProjectConfig
from .logging_utils import get_logger


logger = get_logger(__name__)


class GoogleProject(pulumi.ComponentResource):
    """
    gcp.organizations.Project 하나와 활성화할 API 별 gcp.projects.Service 를 묶는다.

    activate_apis / labels 는 호출자가 이미 조합한 값을 그대로 사용한다.
    """

    main: gcp.organizations.Project
    services: List[gcp.projects.Service]

    def __init__(
        self,
        name: str,
        cfg: ProjectConfig,
        activate_apis: Sequence[str],
        labels: pulumi.Input[Mapping[str, str]],
        opts: Optional[pulumi.ResourceOptions] = None,
    ) -> None:
        super().__init__("firebase-kit:gcp:Project", name, None, opts)

        logger.info("GCP 프로젝트 구성: %s (apis=%d)", cfg.project_id, len(activate_apis))

        self.main = gcp.organizations.Project(
            name,
            project_id=cfg.project_id,
            name=cfg.display_name,
            billing_account=cfg.billing_account,
            org_id=cfg.org_id,
            folder_id=cfg.folder_id,
            labels=labels,
            auto_create_network=cfg.auto_create_network,
            deletion_policy=cfg.deletion_policy,
            opts=pulumi.ResourceOptions(parent=self),
        )

        self.services = [self._enable_api(name, api) for api in activate_apis]

        self.project_id: pulumi.Output[str] = self.main.project_id
        self.number: pulumi.Output[str] = self.main.number

        self.register_outputs({
            "projectId": self.project_id,
            "number": self.number,
            "services": [s.service for s in self.services],
        })

    def _enable_api(self, name: str, api: str) -> gcp.projects.Service:
        logger.debug("API 활성화 리소스 추가: %s", api)
        return gcp.projects.Service(
            f"{name}-{api}",
            project=self.main.project_id,
            service=api,
            # API 는 프로젝트와 함께만 사라진다.
            disable_on_destroy=False,
            opts=pulumi.ResourceOptions(parent=self, deleted_with=self.main),
        )
