from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Employee:
    """ドメインエンティティ: 従業員ディレクトリの1件.

    Note: 認証情報は持たない (ログインは外部サービスの担当).
    """

    user_id: str
    display_name: str
    email: str = ""
