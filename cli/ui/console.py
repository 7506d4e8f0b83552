"""
cli/ui/console.py - Rich 콘솔 유틸리티

일관된 콘솔 출력을 위한 함수들
"""

import json
import logging
from typing import Any

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

# botocore 노이즈 로그 제한
logging.getLogger("botocore").setLevel(logging.WARNING)
logging.getLogger("urllib3").setLevel(logging.WARNING)
logging.getLogger("filelock").setLevel(logging.WARNING)


def get_console(stderr: bool = False) -> Console:
    """Rich Console 인스턴스를 생성하고 반환합니다."""
    return Console(stderr=stderr, highlight=True, soft_wrap=True, markup=True)


# 전역 콘솔 인스턴스 (결과는 stdout, 로그는 stderr)
console = get_console()
err_console = get_console(stderr=True)


def get_log_handler() -> logging.Handler:
    """stderr로 출력하는 Rich 로그 핸들러를 반환합니다."""
    return RichHandler(console=err_console, rich_tracebacks=True, show_path=False)


# 상태 심볼
SYMBOL_SUCCESS = "✓"
SYMBOL_ERROR = "✗"
SYMBOL_WARNING = "!"
SYMBOL_INFO = "•"


def print_success(message: str) -> None:
    console.print(f"[green]{SYMBOL_SUCCESS} {escape(message)}[/green]")


def print_error(message: str) -> None:
    err_console.print(f"[red]{SYMBOL_ERROR} {escape(message)}[/red]")


def print_warning(message: str) -> None:
    err_console.print(f"[yellow]{SYMBOL_WARNING} {escape(message)}[/yellow]")


def print_info(message: str) -> None:
    console.print(f"[blue]{SYMBOL_INFO} {escape(message)}[/blue]")


def print_table(
    title: str,
    columns: list[str],
    rows: list[list],
) -> None:
    """테이블 형식으로 데이터를 출력합니다.

    Args:
        title: 테이블 제목
        columns: 컬럼 헤더 리스트
        rows: 행 데이터 리스트
    """
    table = Table(title=escape(title), show_header=True, header_style="bold magenta")

    for column in columns:
        table.add_column(column)

    for row in rows:
        table.add_row(*[escape(str(cell)) for cell in row])

    console.print(table)


def print_results_json(data: Any, pretty: bool = True) -> None:
    """JSON 형식으로 데이터 출력 (Rich syntax highlighting)

    Args:
        data: 출력할 데이터
        pretty: 들여쓰기 여부 (기본: True)
    """
    json_str = json.dumps(data, ensure_ascii=False, indent=2 if pretty else None, default=str)
    console.print_json(json_str)
