import logging
import sys


# Automation API 가 DEBUG 에서 gRPC/엔진 메시지를 많이 남긴다.
_NOISY_LOGGERS = ("grpc", "pulumi")


def setup_logging(verbosity: int = 0) -> None:
    level = logging.INFO
    if verbosity >= 1:
        level = logging.DEBUG

    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        stream=sys.stdout,
    )

    # -vv 부터 외부 라이브러리 로그도 DEBUG 로 보여준다.
    noisy_level = logging.DEBUG if verbosity >= 2 else logging.WARNING
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(noisy_level)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
