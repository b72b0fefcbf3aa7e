from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import pulumi
from dotenv import load_dotenv


ENV_FILES_DEFAULT_ORDER = [".env", ".env.infra", ".env.pulumi", ".env.secrets"]

DELETION_POLICIES = ("PREVENT", "ABANDON", "DELETE")


def load_env_files(base_dir: str = ".",
                   files: Optional[List[str]] = None) -> None:
    """
    주어진 디렉토리에서 .env 계열 파일을 순서대로 로드한다.
    후순위 파일이 같은 키를 덮어쓴다.
    """
    order = files or ENV_FILES_DEFAULT_ORDER
    for name in order:
        path = os.path.join(base_dir, name)
        if os.path.exists(path):
            load_dotenv(path, override=True)


def _get_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.lower() in {"1", "true", "yes", "y"}


def _split(raw: Optional[str], sep: str = ",") -> List[str]:
    if not raw:
        return []
    return [p.strip() for p in raw.split(sep) if p.strip()]


def parse_list(raw: Optional[str]) -> List[str]:
    """
    "a,b, c" -> ["a", "b", "c"]
    """
    return _split(raw)


def parse_labels(raw: Optional[str]) -> Dict[str, str]:
    """
    "team=infra,env=dev" -> {"team": "infra", "env": "dev"}
    """
    labels: Dict[str, str] = {}
    for pair in _split(raw):
        if "=" not in pair:
            raise ValueError(f"라벨 형식이 올바르지 않습니다 (key=value): {pair}")
        key, value = pair.split("=", 1)
        labels[key.strip()] = value.strip()
    return labels


def parse_multimap(raw: Optional[str]) -> Dict[str, List[str]]:
    """
    "k1=a|b,k2=c" -> {"k1": ["a", "b"], "k2": ["c"]}

    같은 키가 여러 번 나오면 값을 이어 붙인다.
    """
    result: Dict[str, List[str]] = {}
    for pair in _split(raw):
        if "=" not in pair:
            raise ValueError(f"형식이 올바르지 않습니다 (key=v1|v2): {pair}")
        key, values = pair.split("=", 1)
        result.setdefault(key.strip(), []).extend(_split(values, "|"))
    return result


@dataclass
class ProjectConfig:
    # 필수
    project_id: str

    project_name: Optional[str] = None
    billing_account: Optional[str] = None
    org_id: Optional[str] = None
    folder_id: Optional[str] = None

    activate_apis: List[str] = field(default_factory=list)
    labels: Dict[str, str] = field(default_factory=dict)
    # role -> members
    iam_members: Dict[str, List[str]] = field(default_factory=dict)

    # Firebase web app 이름 목록과 app 별 custom domain
    web_apps: List[str] = field(default_factory=list)
    custom_domains: Dict[str, List[str]] = field(default_factory=dict)

    auto_create_network: bool = False
    deletion_policy: str = "PREVENT"

    # Automation API
    stack_name: str = "dev"
    pulumi_project: str = "firebase-kit"

    @property
    def display_name(self) -> str:
        return self.project_name or self.project_id

    def validate(self) -> None:
        """
        필드 간 제약을 확인하고, 문제가 있으면 모두 모아 ValueError 로 알린다.
        """
        errors: List[str] = []
        if not self.project_id:
            errors.append("project_id 가 비어 있습니다.")
        if self.org_id and self.folder_id:
            errors.append("GCP_ORG_ID 와 GCP_FOLDER_ID 는 동시에 지정할 수 없습니다.")
        if self.deletion_policy not in DELETION_POLICIES:
            errors.append(
                f"PROJECT_DELETION_POLICY 는 {', '.join(DELETION_POLICIES)} 중 하나여야 합니다: "
                f"{self.deletion_policy}"
            )
        unknown_apps = sorted(set(self.custom_domains) - set(self.web_apps))
        if unknown_apps:
            errors.append(
                "FIREBASE_WEB_APPS 에 없는 app 에 custom domain 이 지정되었습니다: "
                + ", ".join(unknown_apps)
            )
        if errors:
            raise ValueError("설정 오류:\n- " + "\n- ".join(errors))

    @classmethod
    def from_env(cls) -> "ProjectConfig":
        # 필수값
        missing: List[str] = []
        def req(name: str) -> str:
            val = os.getenv(name)
            if not val:
                missing.append(name)
            return val or ""

        project_id = req("GCP_PROJECT_ID")
        if missing:
            raise ValueError(
                "필수 환경변수가 누락되었습니다: " + ", ".join(sorted(set(missing)))
            )

        cfg = cls(
            project_id=project_id,
            project_name=os.getenv("GCP_PROJECT_NAME") or None,
            billing_account=os.getenv("GCP_BILLING_ACCOUNT") or None,
            org_id=os.getenv("GCP_ORG_ID") or None,
            folder_id=os.getenv("GCP_FOLDER_ID") or None,
            activate_apis=parse_list(os.getenv("ACTIVATE_APIS")),
            labels=parse_labels(os.getenv("PROJECT_LABELS")),
            iam_members=parse_multimap(os.getenv("PROJECT_IAM_MEMBERS")),
            web_apps=parse_list(os.getenv("FIREBASE_WEB_APPS")),
            custom_domains=parse_multimap(os.getenv("FIREBASE_CUSTOM_DOMAINS")),
            auto_create_network=_get_bool("AUTO_CREATE_NETWORK", False),
            deletion_policy=os.getenv("PROJECT_DELETION_POLICY", "PREVENT").upper(),
            stack_name=os.getenv("PULUMI_STACK", "dev"),
            pulumi_project=os.getenv("PULUMI_PROJECT", "firebase-kit"),
        )
        cfg.validate()
        return cfg

    @classmethod
    def from_pulumi_config(cls, config: Optional[pulumi.Config] = None) -> "ProjectConfig":
        """
        `pulumi up` 으로 직접 실행하는 프로그램에서 stack config 를 읽는다.

        Pulumi.<stack>.yaml 예:
            firebase-kit:projectId: my-project
            firebase-kit:webApps: ["web", "admin"]
            firebase-kit:customDomains: {"web": ["www.example.com"]}
        """
        config = config or pulumi.Config()
        cfg = cls(
            project_id=config.require("projectId"),
            project_name=config.get("projectName"),
            billing_account=config.get("billingAccount"),
            org_id=config.get("orgId"),
            folder_id=config.get("folderId"),
            activate_apis=list(config.get_object("activateApis") or []),
            labels=dict(config.get_object("labels") or {}),
            iam_members={k: list(v) for k, v in (config.get_object("iamMembers") or {}).items()},
            web_apps=list(config.get_object("webApps") or []),
            custom_domains={k: list(v) for k, v in (config.get_object("customDomains") or {}).items()},
            auto_create_network=config.get_bool("autoCreateNetwork") or False,
            deletion_policy=(config.get("deletionPolicy") or "PREVENT").upper(),
            stack_name=pulumi.get_stack(),
            pulumi_project=pulumi.get_project(),
        )
        cfg.validate()
        return cfg
