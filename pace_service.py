from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum

import yaml
from loguru import logger

from algorithms import ExerciseParser, MathTools
from db import SettingsRepository

DATA_DIR = os.path.join(os.path.dirname(__file__), "data")
DEFAULT_LEXICON_PATH = os.path.join(DATA_DIR, "exercise_lexicon.yaml")

LEARNED_PACE_KEY = "pace.learned.v1"
GOAL_KEY = "goal_type"
OTHER = "other"


@dataclass(frozen=True)
class PaceProfile:
    seconds_per_rep: float
    rest_seconds: int

    def to_dict(self) -> dict:
        return {"seconds_per_rep": self.seconds_per_rep, "rest_seconds": self.rest_seconds}


class Difficulty(Enum):
    EASY = "easy"
    NORMAL = "normal"
    HARD = "hard"

    @property
    def pace_multiplier(self) -> float:
        return {"easy": 0.95, "normal": 1.0, "hard": 1.08}[self.value]

    @property
    def rest_multiplier(self) -> float:
        return {"easy": 0.9, "normal": 1.0, "hard": 1.15}[self.value]


class Equipment(Enum):
    BODYWEIGHT = "bodyweight"
    MACHINE = "machine"
    DUMBBELL = "dumbbell"
    BARBELL = "barbell"
    KETTLEBELL = "kettlebell"
    BAND = "band"
    OTHER = "other"

    @property
    def pace_multiplier(self) -> float:
        return {
            "machine": 0.95,
            "barbell": 1.05,
            "kettlebell": 1.0,
            "dumbbell": 1.0,
            "band": 0.95,
            "bodyweight": 0.95,
            "other": 1.0,
        }[self.value]


class UserGoalType(Enum):
    LOSE_FAT = "loseFat"
    BULK_UP = "bulkUp"
    MAINTAIN = "maintain"

    @property
    def tempo_multiplier(self) -> float:
        return {"loseFat": 0.85, "bulkUp": 1.15, "maintain": 1.0}[self.value]


@dataclass(frozen=True)
class Tempo:
    ecc: float = 2.0
    pause: float = 0.0
    con: float = 2.0
    top: float = 0.0

    @property
    def total(self) -> float:
        return self.ecc + self.pause + self.con + self.top


_BUILT_IN_LEXICON: list[tuple[str, list[str], float, int]] = [
    ("squat", ["squat", "スクワット", "フリーウェイトスクワット"], 4.5, 120),
    ("deadlift", ["deadlift", "デッド", "rdl", "romanian"], 5.0, 150),
    ("benchPress", ["bench", "ベンチ", "press (bench)", "ベンチプレス"], 4.0, 120),
    ("overheadPress", ["overhead", "ショルダー", "military", "ohp"], 4.0, 120),
    ("row", ["bent over", "バーベルロウ"], 4.0, 90),
    ("pullUp", ["pull-up", "chin-up", "懸垂"], 4.5, 120),
    ("dip", ["dip", "ディップス"], 3.5, 90),
    ("legPress", ["leg press", "レッグプレス"], 4.0, 90),
    ("legExtension", ["leg extension", "レッグエクステンション"], 3.5, 60),
    ("legCurl", ["leg curl", "レッグカール"], 3.5, 60),
    ("latPulldown", ["lat pulldown", "ラットプルダウン"], 4.0, 75),
    ("seatedRow", ["seated row", "シーテッドロウ", "ローマシン"], 4.0, 75),
    ("pecDeck", ["pec deck", "ペックデック", "フライマシン"], 3.5, 60),
    ("abdominalMachine", ["abdominal", "アブドミナルマシン"], 3.0, 60),
    ("pushUp", ["push-up", "腕立て", "プッシュアップ"], 3.0, 60),
    ("lunge", ["lunge", "ランジ"], 4.0, 90),
    ("stepUp", ["step-up", "ステップアップ"], 3.8, 90),
    ("hinge", ["good morning", "hip hinge", "ヒップヒンジ"], 3.5, 90),
    ("curl", ["curl", "カール", "アームカール"], 3.0, 60),
    ("triceps", ["extension", "kickback", "トライセプス"], 3.0, 60),
    ("crunch", ["crunch", "シットアップ", "腹筋"], 2.5, 45),
    ("burpee", ["burpee", "バービー"], 3.0, 60),
    ("jumpingJack", ["jumping jack", "ジャンピングジャック"], 1.3, 45),
    ("kettlebellSwing", ["swing", "スイング", "ケトルベル"], 2.2, 75),
    ("mobility", ["stretch", "ストレッチ", "モビリティ", "動的", "静的", "ヨガ", "ピラティス"], 3.0, 30),
    ("cardio", ["ラン", "バイク", "ジョギング", "ウォーキング", "ステッパー", "エリプティカル", "row", "ローイング"], 1.0, 30),
    (OTHER, [], 3.5, 60),
]


class ExerciseLexicon:
    """Ordered exercise categories with their base pace profiles."""

    def __init__(self, categories: list[tuple[str, list[str], float, int]]) -> None:
        self.order: list[tuple[str, tuple[str, ...]]] = []
        self.profiles: dict[str, PaceProfile] = {}
        for name, keywords, spr, rest in categories:
            self.order.append((name, tuple(ExerciseParser.fold(k) for k in keywords if k)))
            self.profiles[name] = PaceProfile(float(spr), int(rest))
        if OTHER not in self.profiles:
            self.profiles[OTHER] = PaceProfile(3.5, 60)

    @classmethod
    def built_in(cls) -> "ExerciseLexicon":
        return cls(_BUILT_IN_LEXICON)

    @classmethod
    def from_yaml(cls, path: str = DEFAULT_LEXICON_PATH) -> "ExerciseLexicon":
        """Load the lexicon from ``path``; the built-in copy is used on failure."""
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
            categories = [
                (
                    str(item["name"]),
                    [str(k) for k in item.get("keywords") or []],
                    float(item["seconds_per_rep"]),
                    int(item["rest_seconds"]),
                )
                for item in data["categories"]
            ]
        except (OSError, yaml.YAMLError, KeyError, TypeError, ValueError) as e:
            logger.warning(f"Could not load exercise lexicon from {path}: {e}; using built-in lexicon")
            return cls.built_in()
        return cls(categories)

    @property
    def categories(self) -> list[str]:
        return list(self.profiles)

    def category(self, name: str) -> str:
        folded = ExerciseParser.fold(name or "")
        for cat, keywords in self.order:
            if any(k in folded for k in keywords):
                return cat
        return OTHER

    def base_profile(self, category: str) -> PaceProfile:
        return self.profiles.get(category, self.profiles[OTHER])


def infer_equipment(name: str, weight: str = "") -> Equipment:
    """Guess equipment from the exercise name, then the weight text."""
    if "ダンベル" in name:
        return Equipment.DUMBBELL
    if "バーベル" in name:
        return Equipment.BARBELL
    if "ケトルベル" in name:
        return Equipment.KETTLEBELL
    if "マシン" in name or "ケーブル" in name:
        return Equipment.MACHINE
    if "自重" in weight or not weight.strip():
        return Equipment.BODYWEIGHT
    return Equipment.OTHER


class PaceService:
    """Per-category seconds-per-rep estimates learned from completed sets.

    The learned map is stored as JSON in the settings table under
    ``pace.learned.v1``; the user goal under ``goal_type``.
    """

    EMA_ALPHA = 0.30
    MIN_SECONDS_PER_REP = 0.6
    MAX_SECONDS_PER_REP = 8.0
    FALLBACK_SECONDS_PER_REP = 3.0

    def __init__(
        self,
        settings: SettingsRepository,
        lexicon: ExerciseLexicon | None = None,
    ) -> None:
        self.settings = settings
        self.lexicon = lexicon or ExerciseLexicon.from_yaml()
        self.current_goal = UserGoalType.MAINTAIN
        self.learned: dict[str, float] = {}
        self._load_goal()
        self._load_learned()

    def _load_goal(self) -> None:
        raw = self.settings.get_text(GOAL_KEY, UserGoalType.MAINTAIN.value)
        try:
            self.current_goal = UserGoalType(raw)
        except ValueError:
            logger.warning(f"Unknown goal type {raw!r} in settings; keeping {self.current_goal.value}")

    def _load_learned(self) -> None:
        try:
            data = self.settings.get_json(LEARNED_PACE_KEY)
        except ValueError as e:
            logger.warning(f"Stored pace map is malformed: {e}; starting from defaults")
            return
        if not isinstance(data, dict):
            return
        known = set(self.lexicon.categories)
        restored = {}
        for key, value in data.items():
            if key in known and isinstance(value, (int, float)):
                restored[key] = float(value)
        self.learned = restored

    def _save(self) -> None:
        self.settings.set_json(LEARNED_PACE_KEY, self.learned)

    def set_user_goal(self, goal: UserGoalType) -> None:
        self.current_goal = goal
        self.settings.set_text(GOAL_KEY, goal.value)
        logger.info(f"User goal set to {goal.value}")

    def set_user_goal_raw(self, raw: str) -> bool:
        """Set the goal from its stored name. Unknown names are ignored."""
        try:
            goal = UserGoalType(raw)
        except ValueError:
            logger.debug(f"Ignoring unknown goal type {raw!r}")
            return False
        self.set_user_goal(goal)
        return True

    def pace(
        self,
        exercise_name: str,
        difficulty: Difficulty = Difficulty.NORMAL,
        equipment: Equipment = Equipment.OTHER,
        tempo: Tempo | None = None,
    ) -> PaceProfile:
        cat = self.lexicon.category(exercise_name)
        base = self.lexicon.base_profile(cat)
        spr = self.learned.get(cat, base.seconds_per_rep)
        if tempo is not None:
            spr *= max(tempo.total / max(0.5, spr), 0.3)
        spr *= self.current_goal.tempo_multiplier
        spr *= difficulty.pace_multiplier * equipment.pace_multiplier
        rest = int(base.rest_seconds * difficulty.rest_multiplier)
        return PaceProfile(max(0.0, spr), rest)

    def record(self, exercise_name: str, reps: int, elapsed_seconds: int, rest_seconds: int) -> None:
        if reps <= 0:
            return
        cat = self.lexicon.category(exercise_name)
        active = max(0, elapsed_seconds - rest_seconds)
        observed = active / reps
        previous = self.learned.get(cat)
        if previous is None:
            profile = self.lexicon.profiles.get(cat)
            previous = profile.seconds_per_rep if profile else self.FALLBACK_SECONDS_PER_REP
        updated = MathTools.ema(previous, observed, self.EMA_ALPHA)
        self.learned[cat] = MathTools.clamp(
            updated, self.MIN_SECONDS_PER_REP, self.MAX_SECONDS_PER_REP
        )
        self._save()
        logger.info(f"Learned pace for {cat}: {self.learned[cat]:.2f}s/rep")

    def learned_pace(self, category: str) -> float | None:
        return self.learned.get(category)

    def reset(self) -> None:
        self.learned = {}
        self._save()
