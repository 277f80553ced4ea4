"""
どこで: `engine.core` サブパッケージ。
何を: フレーム駆動（Tickable/FrameClock）・品質ティア・アニメーションタイマを提供。
なぜ: 時間計測と品質判定の基盤を構成し、上位層（animation/render）から再利用可能にするため。
"""
