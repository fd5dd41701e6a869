"""Built-in MET table used when ``data/mets_table.json`` cannot be loaded.

Entries are grouped by intensity band and the bands are concatenated from
the most to the least intense, so the first matching entry wins.
"""

VERY_HIGH = [
    # 10+ METs
    (["スライドボード"], 11.0),
    (["ランニング (10.9km/h)", "ラン (6分/km)"], 11.0),
    (["縄跳び (高速)", "二重跳び"], 12.3),
    (["サッカー (試合)"], 10.0),
    (["バトルロープ (高強度)", "パワーロープ", "パワーロープ (スラム)"], 10.0),
    (["ランニング (9.7km/h)"], 9.8),
]

HIGH = [
    # 8-9.9 METs
    (["ステアートレッドミル", "階段マシン", "ステッパー"], 9.0),
    (["ボクシング (スパーリング)", "キックボクシング"], 9.0),
    (["スピンバイク", "RPMクラス"], 8.5),
    (["サイクリング (20km/h以上)", "自転車 (高速)"], 8.0),
    (["テニス (シングルス)", "スカッシュ"], 8.0),
    (["バスケットボール (試合)"], 8.0),
    (["HIIT", "インターバル", "バービー", "サーキット (きつい)", "ケトルベル"], 8.0),
    (["プッシュアップ", "腕立て", "腕立て伏せ", "健康体操 (きつい)"], 8.0),
    (["バトルロープ (中強度)", "バトルロープ (波)"], 8.0),
    (["ラグビー", "rugby"], 8.0),
    (["格闘技", "総合格闘技", "MMA"], 8.5),
]

MODERATE_HIGH = [
    # 6-7.9 METs
    (["バイク", "サイクリング", "自転車", "固定式自転車", "エアロバイク"], 7.5),
    (["エアロビクス (高強度)", "ダンスエアロ"], 7.3),
    (["テニス"], 7.3),
    (["ローイングエルゴメータ", "ローイング", "ボート漕ぎ"], 7.0),
    (["ジョギング", "ラン", "ランニング"], 7.0),
    (["水泳 (クロール, 中速)", "スイム"], 7.0),
    (["ハイキング (登山)"], 6.5),
    (["バトルロープ (軽度)"], 6.5),
    (["ベンチプレス (フリーウェイト)", "ベンチプレス", "パワーリフティング", "ボディビルディング"], 6.0),
    (["ショルダープレス", "オーバーヘッドプレス", "ミリタリープレス", "ダンベルショルダープレス", "アーノルドプレス", "overhead press", "military press", "arnold press"], 6.0),
    (["ダンベルプレス", "ダンベルベンチプレス", "dumbbell bench press"], 6.0),
    (["インクラインベンチプレス", "インクラインプレス", "incline bench press", "incline press"], 6.0),
    (["ベントオーバーロー", "バーベルロウ", "bent-over row"], 6.0),
    (["懸垂", "pull-up", "chin-up", "チンアップ"], 7.5),
    (["ディップス", "dips", "ディップ"], 7.5),
    (["クラップ・プッシュアップ", "Clap Push-Up"], 7.0),
    (["クリーン", "Clean"], 7.0),
    (["マウンテン・クライマー", "Mountain Climbers"], 7.0),
    (["プッシュ・プレス", "Push Press"], 6.0),
    (["バレー", "バレーボール", "volleyball"], 6.0),
    (["スキー", "アルペンスキー", "skiing"], 7.0),
    (["スノーボード", "snowboard"], 6.5),
    (["サーフィン", "surfing"], 5.5),
    (["柔道", "judo"], 7.0),
    (["空手", "karate"], 7.0),
    (["剣道", "kendo"], 6.0),
    (["フェンシング", "fencing"], 6.0),
]

MODERATE = [
    # 4-5.9 METs
    (["バドミントン"], 5.5),
    (["スクワット", "バックスクワット", "フロントスクワット", "squat"], 5.0),
    (["デッドリフト", "deadlift"], 5.0),
    (["ブルガリアンスクワット", "ブルガリアン・スクワット", "split squat", "Bulgarian split squat"], 5.0),
    (["エリプティカル", "エリプティカルトレーナー"], 5.0),
    (["筋トレ (フリーウェイト, 中強度)", "バーベル"], 5.0),
    (["ウェイトマシン (中強度)"], 4.5),
    (["ゴルフ (担ぎ)"], 4.3),
    (["ラジオ体操 (第一・第二)"], 4.0),
    (["卓球"], 4.0),
    (["ヨガ (パワーヨガ)"], 4.0),
    (["チンアップ / 逆手懸垂", "Chin-Up"], 4.0),
    (["アーノルド・プレス", "Arnold Press"], 4.5),
    (["ミリタリー・プレス", "Military Press"], 4.5),
    (["逆立ち腕立て伏せ", "Handstand Push-Up"], 5.0),
    (["Zプレス", "Z Press"], 4.5),
    (["フロア・プレス", "Floor Press"], 4.5),
    (["グッドモーニング", "Good Morning"], 4.0),
    (["野球", "ベースボール", "baseball"], 5.0),
    (["ボウリング", "bowling"], 3.0),
    (["スケート", "アイススケート", "skating"], 5.0),
    (["アーチェリー", "archery"], 3.5),
    (["乗馬", "ホースライディング", "horseback riding"], 4.0),
]

LIGHT_MODERATE = [
    # 3-3.9 METs
    (["レッグプレス", "ラットプルダウン", "アームカール", "トライセプス"], 3.5),
    (["レッグエクステンション", "レッグカール", "シーテッドロウ", "ペックデック", "アブドミナルマシン"], 3.5),
    (["筋トレ (マシン)", "筋トレ (ほどほど)", "レジスタンストレーニング"], 3.5),
    (["ウォーキング", "歩", "ウォーク"], 3.5),
    (["プランク"], 3.3),
    (["チェストプレス (マシン)", "筋トレ (マシン, 楽)"], 3.0),
    (["ストレッチ (動的)", "モビリティ"], 3.0),
    (["ピラティス"], 3.0),
    (["ペクトラルフライ", "ペックデック", "ダンベルフライ", "インクラインダンベルフライ", "ケーブルフライ", "ケーブルクロスオーバー", "pec deck", "dumbbell fly", "cable fly", "cable crossover"], 3.5),
    (["チェストプレス", "マシンチェストプレス", "chest press machine"], 3.5),
    (["レッグエクステンション", "leg extension"], 3.5),
    (["レッグカール", "leg curl"], 3.5),
    (["シーテッドロウ", "seated row", "ローマシン"], 3.5),
    (["サイドレイズ", "フロントレイズ", "リアレイズ", "リアデルト", "lateral raise", "front raise", "rear delt raise", "reverse fly"], 3.5),
    (["アップライトロウ", "upright row"], 3.5),
    (["バーベルカール", "EZバーカール", "ダンベルカール", "インクラインアームカール", "インクラインハンマーカール", "ハンマーカール", "cable curl", "ケーブルカール"], 3.5),
    (["ケーブルプレスダウン", "プレスダウン", "フレンチプレス", "スカルクラッシャー", "トライセプスエクステンション", "cable pressdown", "french press", "skull crusher", "triceps extension"], 3.5),
    (["ケーブルサイドレイズ", "インクラインサイドレイズ", "cable lateral raise", "incline lateral raise"], 3.5),
    (["ケーブルプルオーバー", "pull-over", "pullover"], 3.5),
    (["カーフレイズ", "calf raise"], 3.5),
    (["ワンハンドローイング", "one-arm row", "one-hand row", "ダンベルロウ"], 3.5),
    (["アブローラー", "ab roller", "ab wheel", "腹筋ローラー"], 3.8),
    (["ケーブル・チェストプレス", "Cable Chest Press"], 3.5),
    (["ケーブル・クロスオーバー", "Cable Crossover"], 3.0),
    (["ケーブル・フライ", "Cable Fly"], 3.0),
    (["インクライン・プッシュアップ", "Incline Push-Up"], 3.0),
    (["マシン・チェストプレス", "Machine Chest Press"], 3.5),
    (["プッシュアップ / 腕立て伏せ", "Push-Up"], 3.8),
    (["アシステッド・プルアップ", "Assisted Pull-Up"], 3.0),
    (["ラットプルダウン", "Lat Pulldown"], 3.5),
    (["パイク・プッシュアップ", "Pike Push-Up"], 3.8),
    (["クローズグリップ・プッシュアップ", "Close-Grip Push-Up", "ダイヤモンド腕立て伏せ"], 3.8),
    (["カーツィー・ランジ", "Curtsy Lunge"], 3.8),
    (["コペンハーゲン・プランク", "Copenhagen Plank"], 3.0),
    (["ノルディック・ハムストリング・エキセントリック", "Nordic Hamstring Eccentric"], 3.5),
    (["レッグ・エクステンション", "Leg Extension", "Machine Leg Extension"], 3.0),
    (["レッグ・プレス", "Leg Press", "Machine Leg Press"], 3.5),
    (["ライイング・レッグ・カール", "Lying Leg Curl", "Machine Lying Leg Curl"], 3.0),
    (["ヒップスラスト", "ヒップリフト", "ブリッジ", "hip thrust", "glute bridge"], 3.5),
    (["ドンキーキック", "donkey kick"], 3.0),
    (["レッグレイズ", "leg raise"], 3.0),
    (["バイシクルクランチ", "bicycle crunch"], 3.0),
]

LIGHT = [
    # 2-2.9 METs
    (["ストレッチ", "stretch"], 2.5),
    (["ヨガ (ハタヨガ)"], 2.5),
    (["ストレッチ (静的)", "柔軟体操"], 2.3),
    (["膝つき腕立て伏せ", "Kneeling Push-Up"], 2.8),
    (["ケーブル・カール", "Cable Curl"], 2.5),
    (["コンセントレーション・カール", "Concentration Curl"], 2.5),
    (["ハンマー・カール", "Hammer Curl"], 2.5),
    (["ゾットマン・カール", "Zottman Curl"], 2.5),
    (["ケーブル・グルート・キックバック", "Cable Glute Kickback"], 2.5),
    (["クラムシェル", "Clamshells"], 2.5),
    (["ヒップ・アブダクション・マシン", "Hip Abduction Machine"], 2.5),
    (["ヒップ・アダクション・マシン", "Hip Adduction Machine"], 2.5),
    (["ケーブル・クランチ", "Cable Crunch"], 2.8),
    (["クランチ", "Crunch"], 2.8),
    (["マシン・クランチ", "Machine Crunch"], 2.8),
    (["パロフ・プレス", "Pallof Press"], 2.8),
    (["プランク", "Plank"], 2.8),
    (["グリッパー", "Gripper"], 1.8),
    (["プレート・ピンチ", "Plate Pinch"], 1.8),
    (["ライイング・ネック・カール", "Lying Neck Curl"], 1.8),
    (["ライイング・ネック・エクステンション", "Lying Neck Extension"], 1.8),
    (["シットアップ", "sit-up"], 2.8),
    (["サイドプランク", "side plank"], 2.8),
]

FALLBACK_BUILT_IN = VERY_HIGH + HIGH + MODERATE_HIGH + MODERATE + LIGHT_MODERATE + LIGHT
