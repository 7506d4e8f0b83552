# cli/ui - 콘솔 출력 컴포넌트 (rich)
"""
콘솔 출력 모듈

CLI 전용 출력 헬퍼 (상태 메시지, 테이블, JSON, 로그 핸들러)
"""

from .console import (
    SYMBOL_ERROR,
    SYMBOL_INFO,
    SYMBOL_SUCCESS,
    SYMBOL_WARNING,
    console,
    err_console,
    get_console,
    get_log_handler,
    print_error,
    print_info,
    print_results_json,
    print_success,
    print_table,
    print_warning,
)

__all__ = [
    "SYMBOL_ERROR",
    "SYMBOL_INFO",
    "SYMBOL_SUCCESS",
    "SYMBOL_WARNING",
    "console",
    "err_console",
    "get_console",
    "get_log_handler",
    "print_error",
    "print_info",
    "print_results_json",
    "print_success",
    "print_table",
    "print_warning",
]
