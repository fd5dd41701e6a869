import json
import os
from dataclasses import dataclass
from typing import Iterable, Optional

from loguru import logger

from algorithms import ExerciseParser
from met_table import FALLBACK_BUILT_IN
from db import CustomMETRepository

DATA_DIR = os.path.join(os.path.dirname(__file__), "data")
DEFAULT_METS_PATH = os.path.join(DATA_DIR, "mets_table.json")

DEFAULT_RESISTANCE_METS = 3.8
DEFAULT_AEROBIC_METS = 6.0
MIN_METS = 1.0


@dataclass(frozen=True)
class METEntry:
    keys: tuple[str, ...]
    mets: float

    @property
    def folded_keys(self) -> tuple[str, ...]:
        return tuple(ExerciseParser.fold(k) for k in self.keys)

    def matches(self, folded_name: str) -> bool:
        return any(k and k in folded_name for k in self.folded_keys)

    def to_dict(self) -> dict:
        return {"keys": list(self.keys), "mets": self.mets}


class METDataLoader:
    """Reads the bundled MET table; falls back to the hard-coded table."""

    def __init__(self, path: str = DEFAULT_METS_PATH) -> None:
        self.path = path

    def load(self) -> list[METEntry]:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                raw = json.load(f)
            entries = [
                METEntry(tuple(str(k) for k in item["keys"]), float(item["mets"]))
                for item in raw
            ]
        except (OSError, ValueError, KeyError, TypeError) as e:
            logger.warning(f"Could not load MET table from {self.path}: {e}; using built-in table")
            return self.fallback()
        if not entries:
            logger.warning(f"MET table {self.path} is empty; using built-in table")
            return self.fallback()
        return entries

    @staticmethod
    def fallback() -> list[METEntry]:
        return [METEntry(tuple(keys), float(mets)) for keys, mets in FALLBACK_BUILT_IN]


class METValueService:
    """Keyword lookup of MET values with user overrides.

    Custom entries are scanned newest first and take precedence over the
    built-in table, which is scanned in its priority order. Matching is a
    case and diacritic insensitive substring test of each keyword against
    the exercise name.
    """

    def __init__(
        self,
        loader: METDataLoader | None = None,
        repo: CustomMETRepository | None = None,
    ) -> None:
        self.loader = loader or METDataLoader()
        self.repo = repo
        self.built_in: list[METEntry] = self.loader.load()
        self.custom: list[METEntry] = []
        if self.repo is not None:
            for keys, mets in self.repo.fetch_all_entries():
                self.custom.append(METEntry(tuple(keys), mets))

    def lookup(
        self,
        name: str,
        is_duration_based: Optional[bool] = None,
        default_resistance: float = DEFAULT_RESISTANCE_METS,
        default_aerobic: float = DEFAULT_AEROBIC_METS,
    ) -> float:
        entry = self.find(name)
        if entry is not None:
            return max(MIN_METS, entry.mets)
        fallback = max(MIN_METS, default_aerobic if is_duration_based else default_resistance)
        logger.debug(f"No MET entry for {name!r}; using default {fallback}")
        return fallback

    def find(self, name: str) -> METEntry | None:
        folded = ExerciseParser.fold(name or "")
        if not folded:
            return None
        for entry in reversed(self.custom):
            if entry.matches(folded):
                return entry
        for entry in self.built_in:
            if entry.matches(folded):
                return entry
        return None

    def register_custom(self, keys: Iterable[str], mets: float) -> METEntry:
        cleaned = tuple(k.strip() for k in keys if k and k.strip())
        if not cleaned:
            raise ValueError("at least one keyword is required")
        if mets <= 0:
            raise ValueError("mets must be positive")
        entry = METEntry(cleaned, float(mets))
        self.custom.append(entry)
        if self.repo is not None:
            self.repo.add(list(cleaned), float(mets))
        logger.info(f"Registered custom MET {mets} for {', '.join(cleaned)}")
        return entry

    def reset_custom(self) -> None:
        self.custom.clear()
        if self.repo is not None:
            self.repo.delete_all()
        logger.info("Cleared custom MET entries")

    def all_entries(self) -> list[METEntry]:
        return list(reversed(self.custom)) + list(self.built_in)


class BodyPartClassifier:
    """Maps MET keywords to the body-part tag shown in the catalog."""

    GROUPS: list[tuple[str, list[str]]] = [
        ("胸", [
            "胸", "チェスト", "大胸筋",
            "ベンチプレス", "インクラインベンチプレス", "インクライン・プッシュアップ", "フロア・プレス",
            "プッシュアップ", "腕立て", "腕立て伏せ", "膝つき腕立て伏せ", "クラップ・プッシュアップ",
            "ダンベルフライ", "ケーブル・フライ", "ケーブル・チェストプレス", "チェストプレス",
            "マシン・チェストプレス", "ケーブル・クロスオーバー", "ディップス",
        ]),
        ("肩", [
            "肩", "ショルダー", "三角筋",
            "ショルダープレス", "ショルダー・プレス", "オーバーヘッドプレス", "ミリタリー・プレス",
            "アーノルド・プレス", "Zプレス", "サイドレイズ", "フロントレイズ", "リアレイズ",
            "アップライトロウ", "フェイスプル", "ランドマイン・プレス", "パイク・プッシュアップ", "プッシュ・プレス",
        ]),
        ("背中", [
            "背中", "背筋", "バック", "広背筋", "僧帽筋",
            "懸垂", "プルアップ", "アシステッド・プルアップ", "チンアップ",
            "ラットプルダウン", "ベントオーバーロウ", "ローイング", "シーテッドロウ", "ローマシン",
            "デッドリフト", "グッドモーニング", "クリーン",
        ]),
        ("腕", [
            "腕", "アーム", "上腕", "前腕", "二頭筋", "三頭筋", "バイセップ", "トライセップ",
            "アームカール", "ハンマーカール", "ケーブル・カール", "コンセントレーション・カール",
            "ゾットマン・カール", "バーベルカール", "EZバーカール",
            "トライセップス", "ケーブルプレスダウン", "プレスダウン", "フレンチプレス", "スカルクラッシャー",
            "トライセプスエクステンション", "リストカール", "グリッパー", "プレート・ピンチ",
        ]),
        ("脚", [
            "脚", "足", "レッグ", "太もも", "ふくらはぎ", "大腿四頭筋", "ハムストリング", "臀部", "ヒップ", "お尻",
            "スクワット", "バックスクワット", "フロントスクワット", "ブルガリアンスクワット", "カーツィー・ランジ", "ランジ",
            "レッグプレス", "レッグ・プレス", "レッグエクステンション", "レッグ・エクステンション",
            "レッグカール", "レッグ・カール", "ライイング・レッグ・カール",
            "ノルディック・ハムストリング・エキセントリック", "カーフレイズ",
            "ケーブル・グルート・キックバック", "クラムシェル",
            "ヒップ・アブダクション・マシン", "ヒップ・アダクション・マシン",
        ]),
        ("腹筋", [
            "腹筋", "腹", "アブ", "腹直筋", "腹斜筋",
            "クランチ", "シットアップ", "レッグレイズ", "バイシクルクランチ",
            "ケーブル・クランチ", "マシン・クランチ", "マウンテン・クライマー", "コペンハーゲン・プランク",
        ]),
        ("お尻", [
            "お尻", "臀部", "ヒップ", "グルート", "大臀筋",
            "ヒップスラスト", "ヒップリフト", "ブリッジ", "ドンキーキック",
        ]),
        ("有酸素", [
            "ランニング", "ジョギング", "ウォーキング", "サイクリング", "自転車", "走る", "歩く", "有酸素",
            "水泳", "クロール", "背泳ぎ", "平泳ぎ", "バタフライ", "縄跳び", "ダンス", "エアロビクス",
            "クロスカントリー", "トライアスロン", "ハイキング", "登山",
        ]),
        ("スポーツ", [
            "バスケ", "サッカー", "テニス", "バドミントン", "バレー", "ラグビー", "野球", "ゴルフ", "卓球",
            "ボウリング", "スケート", "スキー", "スノーボード", "サーフィン", "ボクシング", "格闘技",
            "空手", "柔道", "剣道", "フェンシング", "アーチェリー", "射撃", "乗馬",
        ]),
        ("腹筋", ["プランク", "サイドプランク", "コア", "体幹", "腰"]),
    ]
    DEFAULT = "有酸素"

    @classmethod
    def determine(cls, keys: Iterable[str], mets: float | None = None) -> str:
        folded = [ExerciseParser.fold(k) for k in keys]
        for tag, words in cls.GROUPS:
            for word in words:
                w = ExerciseParser.fold(word)
                if any(w in k for k in folded):
                    return tag
        return cls.DEFAULT

    @staticmethod
    def is_cardio(tag: str) -> bool:
        return tag in ("有酸素", "スポーツ")
