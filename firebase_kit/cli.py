import json
import sys

import click

from .composer import FIREBASE_SERVICES, FIREBASE_SERVICES_VERSION
from .config import load_env_files, ProjectConfig
from .logging_utils import setup_logging, get_logger
from .orchestrator import apply_all, destroy_all, output_all, plan_all, preview_all


logger = get_logger(__name__)


@click.group()
@click.option(
    "-C",
    "--chdir",
    "chdir",
    type=click.Path(file_okay=False, dir_okay=True, exists=True),
    default=".",
    help="작업 디렉토리 (기본: 현재 디렉토리)",
)
@click.option(
    "-v",
    "--verbose",
    count=True,
    help="로그 레벨을 DEBUG로 올립니다. (-vv 는 Pulumi/gRPC 로그까지)",
)
@click.pass_context
def main(ctx: click.Context, chdir: str, verbose: int) -> None:
    """Firebase 가 활성화된 GCP 프로젝트 프로비저닝 CLI (Pulumi)"""
    setup_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj["chdir"] = chdir
    ctx.obj["verbose"] = verbose


def _load_config_from_ctx(ctx: click.Context) -> ProjectConfig:
    base_dir: str = ctx.obj["chdir"]
    load_env_files(base_dir)
    cfg = ProjectConfig.from_env()
    logger.debug("Config loaded: %s", cfg)
    return cfg


def _load_config_or_exit(ctx: click.Context) -> ProjectConfig:
    try:
        return _load_config_from_ctx(ctx)
    except Exception as e:  # noqa: BLE001
        click.echo(f"[ERROR] 설정 로드 실패: {e}", err=True)
        sys.exit(1)


@main.command()
@click.pass_context
def plan(ctx: click.Context) -> None:
    """조합된 API/라벨과 web app 구성을 출력 (Pulumi/GCP 호출 없음)"""
    cfg = _load_config_or_exit(ctx)
    click.echo(plan_all(cfg))


@main.command()
@click.pass_context
def preview(ctx: click.Context) -> None:
    """pulumi preview 로 변경 예정 리소스를 확인"""
    cfg = _load_config_or_exit(ctx)

    try:
        summary = preview_all(cfg)
    except Exception as e:  # noqa: BLE001
        logger.exception("preview 중 오류 발생")
        click.echo(f"[ERROR] preview 실패: {e}", err=True)
        sys.exit(1)

    click.echo(summary)


@main.command(name="deploy")
@click.pass_context
def deploy(ctx: click.Context) -> None:
    """pulumi up 으로 리소스를 실제로 생성/업데이트"""
    cfg = _load_config_or_exit(ctx)

    try:
        summary, _outputs = apply_all(cfg)
    except Exception as e:  # noqa: BLE001
        logger.exception("배포 중 오류 발생")
        click.echo(f"[ERROR] 배포 실패: {e}", err=True)
        sys.exit(1)

    click.echo(summary)


@main.command()
@click.option(
    "--yes",
    "yes",
    is_flag=True,
    help="확인 없이 삭제합니다. 없으면 아무것도 하지 않습니다.",
)
@click.pass_context
def destroy(ctx: click.Context, yes: bool) -> None:
    """pulumi destroy 로 stack 의 리소스를 삭제"""
    cfg = _load_config_or_exit(ctx)

    if not yes:
        click.echo(
            f"[ERROR] {cfg.pulumi_project}/{cfg.stack_name} 을(를) 삭제하려면 --yes 를 지정하세요.",
            err=True,
        )
        sys.exit(1)

    try:
        summary = destroy_all(cfg)
    except Exception as e:  # noqa: BLE001
        logger.exception("삭제 중 오류 발생")
        click.echo(f"[ERROR] 삭제 실패: {e}", err=True)
        sys.exit(1)

    click.echo(summary)


@main.command()
@click.option("--json", "as_json", is_flag=True, help="JSON 으로 출력합니다.")
@click.pass_context
def outputs(ctx: click.Context, as_json: bool) -> None:
    """현재 stack output 을 출력"""
    cfg = _load_config_or_exit(ctx)

    try:
        values = output_all(cfg)
    except Exception as e:  # noqa: BLE001
        logger.exception("stack output 조회 중 오류 발생")
        click.echo(f"[ERROR] output 조회 실패: {e}", err=True)
        sys.exit(1)

    if as_json:
        click.echo(json.dumps(values, indent=2, sort_keys=True))
        return

    if not values:
        click.echo("- (none)")
    for k, v in sorted(values.items()):
        click.echo(f"- {k}: {v}")


def _baseline_comment() -> str:
    lines = [f"\n# Firebase 기본 API (v{FIREBASE_SERVICES_VERSION}, ACTIVATE_APIS 에 적지 않아도 항상 활성화됨)"]
    lines += [f"#   {api}" for api in FIREBASE_SERVICES]
    return "\n".join(lines) + "\n"


@main.command()
@click.option(
    "--force",
    "force",
    is_flag=True,
    help="이미 있는 템플릿도 패키지 버전으로 덮어씁니다.",
)
@click.pass_context
def init(ctx: click.Context, force: bool) -> None:
    """
    Firebase 프로젝트용 env 템플릿(env.infra.example, env.pulumi.example)을 만든다.

    env.infra.example 의 Firebase 기본 API 목록은 설치된 firebase_kit 버전을 따르므로,
    버전을 올린 뒤에는 --force 로 다시 만든다.
    """
    import os
    from importlib import resources

    base_dir: str = ctx.obj["chdir"]

    for name in ("env.infra.example", "env.pulumi.example"):
        target = os.path.join(base_dir, name)
        if os.path.exists(target) and not force:
            click.echo(f"{name} 이(가) 이미 존재하여 건너뜀")
            continue
        try:
            with resources.files("firebase_kit.examples").joinpath(name).open("r", encoding="utf-8") as src, open(
                target, "w", encoding="utf-8"
            ) as dst:
                dst.write(src.read())
                if name == "env.infra.example":
                    dst.write(_baseline_comment())
            click.echo(f"{name} 템플릿을 생성했습니다.")
        except FileNotFoundError:
            click.echo(f"템플릿 {name} 을(를) 패키지에서 찾을 수 없습니다.", err=True)
