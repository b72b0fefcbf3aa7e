"""
firebase_kit
------------

Firebase 가 활성화된 GCP 프로젝트를 Pulumi 로 구성하는 컴포넌트 패키지.
GCP 프로젝트 + 필수 API, IAM, Firebase 프로젝트, web app, Hosting site, custom domain 을
환경변수(또는 Pulumi stack config) 기반으로 한 번에 프로비저닝하는 것을 목표로 한다.
"""

__all__ = [
    "composer",
    "config",
    "firebase_project",
    "orchestrator",
]
