"""本番用WSGIエントリポイント。

Gunicorn からは本ファイルの `app` を参照して起動する。
（例: `gunicorn --threads 8 wsgi:app`）

テストでは `app.py` の `create_app()` を直接呼び出し、import時の副作用を避ける。
"""

from __future__ import annotations

from flask import Flask

from app import create_app


app: Flask = create_app()


if __name__ == "__main__":
    # 手元検証用: `python wsgi.py`
    debug_enabled = bool(app.config.get("DEBUG"))
    app.run(host="0.0.0.0", port=int(app.config.get("PORT", 3000)), debug=debug_enabled)
