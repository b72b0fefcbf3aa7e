"""
composer
--------

Firebase 프로젝트에 필요한 API 목록과 라벨을 조합하는 순수 함수 모듈.

Pulumi Output.apply 콜백 안에서 여러 번 호출될 수 있으므로
입력을 변경하지 않고 항상 새 객체를 반환한다.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Mapping, Optional, Sequence, TypeVar


T = TypeVar("T")

# 목록이 바뀌면 버전을 올리고 CHANGELOG.md 에 기록한다.
FIREBASE_SERVICES_VERSION = "1"

FIREBASE_SERVICES: tuple[str, ...] = (
    # base
    "cloudbilling.googleapis.com",
    "cloudresourcemanager.googleapis.com",
    # quota 체크를 받으려면 필요하다. 이후 리소스는 user_project_override provider 로 생성한다.
    "serviceusage.googleapis.com",
    # firebase
    "firebase.googleapis.com",
    "fcm.googleapis.com",
    "fcmregistrations.googleapis.com",
    "firebaseappdistribution.googleapis.com",
    "firebaseextensions.googleapis.com",
    "firebasedynamiclinks.googleapis.com",
    "firebasehosting.googleapis.com",
    "firebaseinstallations.googleapis.com",
    "firebaseremoteconfig.googleapis.com",
    "firebaseremoteconfigrealtime.googleapis.com",
    "firebaserules.googleapis.com",
    # firebase functions 배포 시 firebase-tools 가 요구하는 API
    "cloudfunctions.googleapis.com",
    "cloudbuild.googleapis.com",
    "artifactregistry.googleapis.com",
    "run.googleapis.com",
    "eventarc.googleapis.com",
    "pubsub.googleapis.com",
    "storage.googleapis.com",
)

# Firebase 프로젝트 목록에 표시되려면 필요한 라벨
FIREBASE_LABEL_KEY = "firebase"
FIREBASE_LABEL_VALUE = "enabled"


def unique(items: Iterable[T]) -> List[T]:
    """
    처음 등장한 순서를 유지하면서 중복을 제거한다.
    """
    return list(dict.fromkeys(items))


def compose_apis(requested: Optional[Sequence[str]] = None) -> List[str]:
    """
    요청된 API 목록 뒤에 Firebase 기본 API 를 붙이고 중복을 제거한다.

    None 이나 빈 목록도 허용하며, 결과는 항상 FIREBASE_SERVICES 를 모두 포함한다.
    """
    return unique([*(requested or ()), *FIREBASE_SERVICES])


def compose_labels(requested: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
    """
    요청된 라벨에 firebase=enabled 를 강제한 새 dict 를 반환한다.

    입력 mapping 은 호출자와 공유되므로 수정하지 않는다.
    """
    labels = dict(requested or {})
    if labels.get(FIREBASE_LABEL_KEY) != FIREBASE_LABEL_VALUE:
        labels[FIREBASE_LABEL_KEY] = FIREBASE_LABEL_VALUE
    return labels
