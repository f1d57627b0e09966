"""
アプリケーション設定ファイル
Application Configuration File

決算短信分析ツールの設定を一元管理します。
環境変数、EDINET API、会計期間の境界、データ保存先、ログ設定を定義します。
"""

import logging
import os
from datetime import date
from logging.handlers import RotatingFileHandler
from typing import Dict, List

from dotenv import load_dotenv

# 環境変数の読み込み
load_dotenv()


class AppConfig:
    """アプリケーション基本設定"""

    APP_NAME: str = "決算短信分析"
    APP_VERSION: str = "1.0.0"
    APP_DESCRIPTION: str = "EDINETの決算短信XBRLから財務指標を抽出・分析するツール"

    DATE_FORMAT: str = "%Y-%m-%d"
    DATETIME_FORMAT: str = "%Y-%m-%d %H:%M:%S"


class ExternalAPIConfig:
    """外部API設定"""

    # EDINET API（金融庁の企業情報開示システム）
    EDINET_API_KEY: str = os.getenv("EDINET_API_KEY", "")
    EDINET_BASE_URL: str = os.getenv("EDINET_BASE_URL", "https://api.edinet-fsa.go.jp")
    EDINET_USER_AGENT: str = "EdinetClient/1.0"
    REQUEST_TIMEOUT: int = 30
    DOWNLOAD_TIMEOUT: int = 120

    # Gemini AI API（Google）
    GEMINI_API_KEY: str = os.getenv("GEMINI_API_KEY", "")
    GEMINI_MODEL: str = os.getenv("GEMINI_MODEL", "gemini-1.5-flash")


class FiscalPeriodConfig:
    """
    会計期間の境界設定

    当期・前期の判定は固定の暦日で行う（実行日からは推定しない）。
    """

    # 当期: 終了日がこの日付以降の期間
    CURRENT_FISCAL_YEAR_START: date = date(2023, 4, 1)

    # 前期: 終了日が PREVIOUS_FISCAL_YEAR_START 以上 CURRENT_FISCAL_YEAR_START 未満
    PREVIOUS_FISCAL_YEAR_START: date = date(2022, 4, 1)


class DataConfig:
    """データ保存先の設定"""

    DATA_DIR: str = os.getenv("KESSAN_DATA_DIR", "./kessan_data")
    SUB_DIRS: List[str] = ["json", "pdf", "xbrl"]

    # 書類ごとのAPI呼び出し間隔（秒）
    REQUEST_INTERVAL_SECONDS: float = 1.0

    # 解析対象とするアーカイブの上限サイズ
    MAX_ARCHIVE_BYTES: int = 50 * 1024 * 1024  # 50MB


class LoggingConfig:
    """ログ設定"""

    LOG_DIR: str = os.getenv("LOG_DIR", "logs")

    LOG_FILE: str = f"{LOG_DIR}/app.log"
    LOG_MAX_BYTES: int = 10 * 1024 * 1024  # 10MB
    LOG_BACKUP_COUNT: int = 5

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    LOG_FORMAT: str = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    LOG_DATE_FORMAT: str = "%Y-%m-%d %H:%M:%S"


# 設定のエクスポート
config = {
    "app": AppConfig,
    "external_api": ExternalAPIConfig,
    "fiscal_period": FiscalPeriodConfig,
    "data": DataConfig,
    "logging": LoggingConfig,
}


def get_config(section: str = None) -> Dict:
    """
    設定を取得する関数

    Args:
        section: 取得したい設定セクション名（指定しない場合は全設定）

    Returns:
        設定辞書
    """
    if section:
        return config.get(section, {})
    return config


def validate_required_env_vars() -> List[str]:
    """
    必須環境変数のチェック

    Returns:
        不足している環境変数のリスト
    """
    required_vars = [
        "EDINET_API_KEY",
    ]

    missing = []
    for var in required_vars:
        if not os.getenv(var):
            missing.append(var)

    return missing


def setup_logging(log_to_file: bool = True) -> logging.Logger:
    """
    ルートロガーにコンソール出力とローテーションファイル出力を設定する

    複数回呼ばれてもハンドラは重複しない。
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(LoggingConfig.LOG_LEVEL.upper())

    if getattr(root_logger, "_kessan_configured", False):
        return root_logger

    formatter = logging.Formatter(LoggingConfig.LOG_FORMAT, LoggingConfig.LOG_DATE_FORMAT)

    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(formatter)
    root_logger.addHandler(stream_handler)

    if log_to_file:
        if not os.path.exists(LoggingConfig.LOG_DIR):
            os.makedirs(LoggingConfig.LOG_DIR)
        file_handler = RotatingFileHandler(
            LoggingConfig.LOG_FILE,
            maxBytes=LoggingConfig.LOG_MAX_BYTES,
            backupCount=LoggingConfig.LOG_BACKUP_COUNT,
            encoding="utf-8",
        )
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    root_logger._kessan_configured = True
    return root_logger


if __name__ == "__main__":
    import io
    import sys

    # Windows環境での日本語出力対応
    if sys.platform == 'win32':
        sys.stdout = io.TextIOWrapper(sys.stdout.buffer, encoding='utf-8')

    print(f"=== {AppConfig.APP_NAME} 設定確認 ===\n")

    print(f"バージョン: {AppConfig.APP_VERSION}")
    print(f"EDINET API: {ExternalAPIConfig.EDINET_BASE_URL}")
    print(f"当期開始日: {FiscalPeriodConfig.CURRENT_FISCAL_YEAR_START}")
    print(f"前期開始日: {FiscalPeriodConfig.PREVIOUS_FISCAL_YEAR_START}")
    print(f"データ保存先: {DataConfig.DATA_DIR}\n")

    missing_vars = validate_required_env_vars()
    if missing_vars:
        print("[WARNING] 以下の環境変数が設定されていません:")
        for var in missing_vars:
            print(f"  - {var}")
        print("\n.envファイルを確認してください。\n")
    else:
        print("[OK] すべての必須環境変数が設定されています。\n")
