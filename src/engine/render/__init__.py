"""
どこで: `engine.render` サブパッケージ。
何を: レンダーティックの組み立て（`RenderTickOrchestrator`）とシーン設定、描画層との境界型を提供。
なぜ: 計算（clock/animation/waves）と描画（ホスト側の DrawingSink）の責務を分離するため。
"""
