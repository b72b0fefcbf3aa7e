"""
firebase_webapps
----------------

Firebase web app 등록, Hosting site 생성, custom domain 연결을 담당하는 Pulumi 컴포넌트.
"""

from __future__ import annotations

from typing import Dict, List, Mapping, Optional, Sequence

import pulumi
import pulumi_gcp as gcp

from .logging_utils import get_logger


logger = get_logger(__name__)


CERT_PREFERENCE = "DEDICATED"


def to_firebase_config(result: gcp.firebase.GetWebAppConfigResult) -> Dict[str, Optional[str]]:
    """
    웹 SDK 의 firebase.initializeApp() 에 넘기는 형태로 바꾼다.
    """
    return {
        "appId": result.web_app_id,
        "apiKey": result.api_key,
        "authDomain": result.auth_domain,
        "projectId": result.project,
        "storageBucket": result.storage_bucket,
        "messagingSenderId": result.messaging_sender_id,
        "measurementId": result.measurement_id,
    }


class FirebaseWebApps(pulumi.ComponentResource):
    """
    web_apps 의 각 이름마다 아래 리소스를 만든다.

    - gcp.firebase.WebApp (display_name = app 이름)
    - web app config 조회 (gcp.firebase.get_web_app_config_output)
    - gcp.firebase.HostingSite (site_id = "{app}-{project_id}", parent = web app)
    - custom_domains[app] 의 도메인마다 gcp.firebase.HostingCustomDomain (parent = hosting site)
    """

    apps: List[gcp.firebase.WebApp]
    configs: Dict[str, pulumi.Output[Dict[str, Optional[str]]]]
    sites: List[gcp.firebase.HostingSite]
    domains: List[gcp.firebase.HostingCustomDomain]

    def __init__(
        self,
        name: str,
        project_id: Optional[pulumi.Input[str]],
        web_apps: Optional[Sequence[str]] = None,
        custom_domains: Optional[Mapping[str, Sequence[str]]] = None,
        opts: Optional[pulumi.ResourceOptions] = None,
    ) -> None:
        # 필수 인자 확인
        if project_id is None:
            raise ValueError("project_id is mandatory")

        super().__init__("firebase-kit:firebase:WebApps", name, None, opts)

        self.apps = []
        self.configs = {}
        self.sites = []
        self.domains = []

        domains_by_app = custom_domains or {}
        for app in web_apps or []:
            logger.info("Firebase web app 구성: %s (domains=%s)", app, list(domains_by_app.get(app, [])))
            self._configure_app(name, project_id, app, domains_by_app.get(app, []))

        self.register_outputs({
            "apps": [a.app_id for a in self.apps],
            "configs": self.configs,
            "sites": [s.site_id for s in self.sites],
            "domains": [d.custom_domain for d in self.domains],
        })

    def _configure_app(self, name: str, project_id: pulumi.Input[str], app: str, domains: Sequence[str]) -> None:
        web_app = gcp.firebase.WebApp(
            f"{name}-{app}",
            project=project_id,
            display_name=app,
            opts=pulumi.ResourceOptions(parent=self),
        )
        self.apps.append(web_app)

        self.configs[app] = gcp.firebase.get_web_app_config_output(
            project=web_app.project,
            web_app_id=web_app.app_id,
            opts=pulumi.InvokeOptions(parent=web_app),
        ).apply(to_firebase_config)

        site = gcp.firebase.HostingSite(
            f"{name}-{app}",
            project=web_app.project,
            app_id=web_app.app_id,
            site_id=pulumi.Output.format("{0}-{1}", app, project_id),
            opts=pulumi.ResourceOptions(parent=web_app),
        )
        self.sites.append(site)

        for domain in domains:
            self.domains.append(
                gcp.firebase.HostingCustomDomain(
                    f"{name}-{app}${domain}",
                    project=web_app.project,
                    site_id=site.site_id,
                    custom_domain=domain,
                    cert_preference=CERT_PREFERENCE,
                    opts=pulumi.ResourceOptions(parent=site),
                )
            )
