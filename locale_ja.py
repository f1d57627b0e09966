"""
日本語メッセージ定義ファイル
Japanese Locale Messages for the Kessan Analyzer

コンソール出力、ログ、分析コメントで使用する日本語メッセージを一元管理します。
"""

from typing import Dict


class Messages:
    """日本語メッセージクラス"""

    # ========================================
    # 分析処理（バッチ）
    # ========================================
    ANALYZER = {
        "title": "=== 決算短信分析システム ===",
        "target_date": "対象日付: {date}",
        "fetch_failed": "書類の取得に失敗しました",
        "kessan_count": "決算短信数: {count}",
        "processing": "[{index}/{total}] 処理中: {name} ({sec_code})",
        "download_failed": "  → XBRLダウンロード失敗",
        "extract_failed": "  → データ抽出失敗",
        "archive_too_large": "  → アーカイブが大きすぎます ({size} bytes)",
        "completed": "  → 分析完了",
        "error": "  → エラー: {error}",
        "summary_title": "分析結果サマリー",
        "saved": "結果を保存しました: {path}",
        "invalid_date": "日付の形式が正しくありません。YYYY-MM-DD形式で指定してください。",
    }

    # ========================================
    # EDINET API
    # ========================================
    EDINET = {
        "api_key_missing": "警告: EDINET APIキーが設定されていません",
        "api_key_hint": "EDINET APIキーを取得して環境変数EDINET_API_KEYに設定してください。",
        "network_error": "Network Error: {error}",
        "http_error": "Error: {status} - {reason}",
        "auth_error": "API認証エラー: {message}",
        "not_json": "Error: JSONではないレスポンスが返されました",
        "download_error": "{format} download error: {error}",
        "download_failed": "{format} download failed: {status}",
        "downloaded": "Downloaded {format}: {doc_id} ({size} bytes)",
    }

    # ========================================
    # XBRL解析
    # ========================================
    XBRL = {
        "not_found": "XBRLファイルが見つかりません",
        "invalid_archive": "ZIPアーカイブとして読み込めません",
        "malformed": "XBRLのXMLが不正です: {error}",
    }

    # ========================================
    # 分析判定
    # ========================================
    ANALYSIS = {
        "high_growth": "高成長",
        "stable_growth": "安定成長",
        "declining": "減収",
        "high_profitability": "高収益",
        "standard_profitability": "標準的",
        "low_profitability": "低収益",
        "roe_excellent": "優良",
        "roe_good": "良好",
        "roe_needs_improvement": "要改善",
        "growth_comment": "売上高成長率 {value}%",
        "profitability_comment": "営業利益率 {value}%",
        "roe_comment": "ROE {value}%",
    }

    # ========================================
    # 画面表示ラベル
    # ========================================
    DISPLAY = {
        "company": "【{name}】({sec_code})",
        "document": "  書類: {description}",
        "revenue": "  売上高: {value}",
        "operating_profit": "  営業利益: {value}",
        "net_profit": "  純利益: {value}",
        "analysis_line": "  {metric}: {level} - {comment}",
        "ai_summary": "  AI分析: {text}",
    }

    @classmethod
    def get(cls, category: str, key: str, **kwargs) -> str:
        """
        メッセージを取得

        Args:
            category: カテゴリ名（例: 'ANALYZER', 'EDINET'）
            key: メッセージキー
            **kwargs: メッセージのプレースホルダー値

        Returns:
            メッセージ文字列
        """
        category_dict = getattr(cls, category, {})
        message = category_dict.get(key, f"[{category}.{key}]")

        # プレースホルダーの置換
        if kwargs:
            try:
                message = message.format(**kwargs)
            except KeyError:
                pass

        return message

    @classmethod
    def get_all(cls, category: str) -> Dict[str, str]:
        """カテゴリ内のすべてのメッセージを取得"""
        return getattr(cls, category, {})


# エイリアス（短縮形）
msg = Messages.get
msgs = Messages.get_all
