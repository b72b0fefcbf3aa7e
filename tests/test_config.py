import pytest

from firebase_kit.config import ProjectConfig, load_env_files, parse_labels, parse_multimap


def test_missing_required_env_raises_value_error(clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setenv("FIREBASE_WEB_APPS", "web")

    with pytest.raises(ValueError) as excinfo:
        ProjectConfig.from_env()

    assert "GCP_PROJECT_ID" in str(excinfo.value)


def test_from_env_parses_lists_and_maps(clean_env: pytest.MonkeyPatch) -> None:
    env = {
        "GCP_PROJECT_ID": "test-project",
        "ACTIVATE_APIS": "secretmanager.googleapis.com, run.googleapis.com",
        "PROJECT_LABELS": "team=infra,env=dev",
        "PROJECT_IAM_MEMBERS": "roles/firebase.admin=user:a@example.com|group:b@example.com",
        "FIREBASE_WEB_APPS": "web,admin",
        "FIREBASE_CUSTOM_DOMAINS": "web=www.example.com|example.com",
        "AUTO_CREATE_NETWORK": "true",
        "PROJECT_DELETION_POLICY": "delete",
        "GCP_FOLDER_ID": "",
    }
    for key, value in env.items():
        clean_env.setenv(key, value)

    cfg = ProjectConfig.from_env()

    assert cfg.project_id == "test-project"
    assert cfg.display_name == "test-project"
    assert cfg.activate_apis == ["secretmanager.googleapis.com", "run.googleapis.com"]
    assert cfg.labels == {"team": "infra", "env": "dev"}
    assert cfg.iam_members == {
        "roles/firebase.admin": ["user:a@example.com", "group:b@example.com"],
    }
    assert cfg.web_apps == ["web", "admin"]
    assert cfg.custom_domains == {"web": ["www.example.com", "example.com"]}
    assert cfg.auto_create_network is True
    assert cfg.deletion_policy == "DELETE"
    # 빈 값은 미설정으로 취급
    assert cfg.folder_id is None
    assert cfg.stack_name == "dev"
    assert cfg.pulumi_project == "firebase-kit"


def test_org_and_folder_are_mutually_exclusive(clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setenv("GCP_PROJECT_ID", "test-project")
    clean_env.setenv("GCP_ORG_ID", "1234")
    clean_env.setenv("GCP_FOLDER_ID", "5678")

    with pytest.raises(ValueError) as excinfo:
        ProjectConfig.from_env()

    assert "GCP_FOLDER_ID" in str(excinfo.value)


def test_custom_domain_for_unknown_app_is_rejected() -> None:
    cfg = ProjectConfig(
        project_id="test-project",
        web_apps=["web"],
        custom_domains={"admin": ["admin.example.com"]},
    )

    with pytest.raises(ValueError) as excinfo:
        cfg.validate()

    assert "admin" in str(excinfo.value)


def test_invalid_deletion_policy_is_rejected() -> None:
    cfg = ProjectConfig(project_id="test-project", deletion_policy="KEEP")

    with pytest.raises(ValueError) as excinfo:
        cfg.validate()

    assert "PROJECT_DELETION_POLICY" in str(excinfo.value)


def test_parse_labels_requires_key_value_pairs() -> None:
    assert parse_labels(None) == {}
    assert parse_labels("a=1, b = 2") == {"a": "1", "b": "2"}

    with pytest.raises(ValueError):
        parse_labels("team")


def test_parse_multimap_merges_repeated_keys() -> None:
    assert parse_multimap("web=a.com,web=b.com|c.com") == {"web": ["a.com", "b.com", "c.com"]}


def test_load_env_files_later_file_overrides(tmp_path, clean_env: pytest.MonkeyPatch) -> None:
    (tmp_path / ".env").write_text("GCP_PROJECT_ID=from-env\nFIREBASE_WEB_APPS=web\n", encoding="utf-8")
    (tmp_path / ".env.infra").write_text("GCP_PROJECT_ID=from-infra\n", encoding="utf-8")
    # load_dotenv 가 바꾼 값을 테스트 후 되돌리기 위해 monkeypatch 에 먼저 등록한다.
    clean_env.setenv("GCP_PROJECT_ID", "placeholder")
    clean_env.setenv("FIREBASE_WEB_APPS", "")

    load_env_files(str(tmp_path))
    cfg = ProjectConfig.from_env()

    assert cfg.project_id == "from-infra"
    assert cfg.web_apps == ["web"]
