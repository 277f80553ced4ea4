"""
どこで: `engine.animation` サブパッケージ。
何を: イージング・周期的多色補間・対称フラクタルタイミング・形状アニメーション量を提供。
なぜ: 描画層から独立した純関数群として、時刻を引数で受け取り決定的に評価するため。
"""
