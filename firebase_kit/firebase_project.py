"""
firebase_project
----------------

Firebase 가 활성화된 GCP 프로젝트를 한 번에 구성하는 Pulumi 컴포넌트.

순서:
    1. 라벨/API 조합 (firebase=enabled, Firebase 기본 API)
    2. GCP 프로젝트 + API 활성화
    3. IAM 멤버
    4. user_project_override provider
    5. Firebase 프로젝트
    6. web app / hosting site / custom domain
"""

from __future__ import annotations

from typing import Optional

import pulumi
import pulumi_gcp as gcp

from .composer import compose_apis, compose_labels
from .config import ProjectConfig
from .firebase_webapps import FirebaseWebApps
from .gcp_iam import ProjectIam
from .gcp_project import GoogleProject
from .logging_utils import get_logger


logger = get_logger(__name__)


class FirebaseProject(pulumi.ComponentResource):
    project: GoogleProject
    iam: ProjectIam
    gcp_provider: gcp.Provider
    firebase_project: gcp.firebase.Project
    web_apps: FirebaseWebApps

    def __init__(
        self,
        name: str,
        cfg: ProjectConfig,
        opts: Optional[pulumi.ResourceOptions] = None,
    ) -> None:
        super().__init__("firebase-kit:firebase:Project", name, None, opts)

        # 호출자 값은 그대로 두고 조합된 새 값만 하위 리소스로 넘긴다.
        labels = pulumi.Output.from_input(cfg.labels).apply(compose_labels)
        apis = compose_apis(cfg.activate_apis)
        logger.info("Firebase 프로젝트 구성: %s", cfg.project_id)
        logger.debug("활성화할 API: %s", apis)

        self.project = GoogleProject(
            name,
            cfg,
            activate_apis=apis,
            labels=labels,
            opts=pulumi.ResourceOptions(parent=self),
        )

        self.iam = ProjectIam(
            name,
            project_id=self.project.project_id,
            project_number=self.project.number,
            iam_members=cfg.iam_members,
            opts=pulumi.ResourceOptions(
                parent=self,
                depends_on=self.project.services,
                deleted_with=self.project.main,
            ),
        )

        self.gcp_provider = gcp.Provider(
            name,
            user_project_override=True,
            project=self.project.project_id,
            billing_project=self.project.project_id,
            opts=pulumi.ResourceOptions(parent=self),
        )

        self.firebase_project = gcp.firebase.Project(
            name,
            project=self.project.project_id,
            opts=pulumi.ResourceOptions(
                parent=self,
                depends_on=self.project.services,
                providers={"gcp": self.gcp_provider},
            ),
        )

        self.web_apps = FirebaseWebApps(
            name,
            project_id=self.firebase_project.project,
            web_apps=cfg.web_apps,
            custom_domains=cfg.custom_domains,
            opts=pulumi.ResourceOptions(
                parent=self,
                depends_on=[self.firebase_project],
                deleted_with=self.project.main,
                providers={"gcp": self.gcp_provider},
            ),
        )

        self.register_outputs({
            "projectId": self.project.project_id,
            "iam": [m.member for m in self.iam.members],
            "firebase": self.firebase_project.id,
            "apps": [a.app_id for a in self.web_apps.apps],
            "provider": self.gcp_provider.id,
        })
