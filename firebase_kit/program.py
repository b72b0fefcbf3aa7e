"""
program
-------

ProjectConfig 로 Pulumi 프로그램을 만든다.

Automation API(orchestrator) 의 inline program 으로 쓰거나,
일반 Pulumi 프로젝트의 __main__.py 에서 아래처럼 호출할 수 있다.

    from firebase_kit.config import ProjectConfig
    from firebase_kit.program import run

    run(ProjectConfig.from_pulumi_config())
"""

from __future__ import annotations

from typing import Any, Callable, Dict

import pulumi

from .config import ProjectConfig
from .firebase_project import FirebaseProject


def stack_outputs(cfg: ProjectConfig, fp: FirebaseProject) -> Dict[str, Any]:
    """
    export 할 stack output. web_apps 는 app 이름 -> app id.
    """
    web_apps = fp.web_apps
    return {
        "project_id": fp.project.project_id,
        "project_number": fp.project.number,
        "firebase_project": fp.firebase_project.id,
        "iam_members": [m.member for m in fp.iam.members],
        "web_apps": {app: a.app_id for app, a in zip(cfg.web_apps, web_apps.apps)},
        "web_app_configs": web_apps.configs,
        "hosting_sites": [s.default_url for s in web_apps.sites],
        "custom_domains": [d.custom_domain for d in web_apps.domains],
    }


def run(cfg: ProjectConfig) -> FirebaseProject:
    """
    FirebaseProject 를 만들고 stack output 을 export 한다.
    """
    fp = FirebaseProject(cfg.project_id, cfg)
    for key, value in stack_outputs(cfg, fp).items():
        pulumi.export(key, value)
    return fp


def build_program(cfg: ProjectConfig) -> Callable[[], None]:
    def program() -> None:
        run(cfg)

    return program
