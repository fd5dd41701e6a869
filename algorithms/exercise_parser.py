import re
import unicodedata


class ExerciseParser:
    """Best-effort extraction of numbers from free-text plan fields."""

    RANGE_SEPARATORS = re.compile(r"[-〜~]")
    NOT_DIGIT = re.compile(r"[^0-9]")
    NOT_DECIMAL = re.compile(r"[^0-9.]")

    @staticmethod
    def fold(text: str) -> str:
        """Return ``text`` folded for case and diacritic insensitive matching."""
        decomposed = unicodedata.normalize("NFKD", text)
        stripped = "".join(c for c in decomposed if not unicodedata.combining(c))
        return stripped.casefold()

    @staticmethod
    def first_int(text: str) -> int | None:
        """Return the first run of digits in ``text``; ``"abc123def456"`` gives 123."""
        match = re.search(r"\d+", text or "")
        return int(match.group()) if match else None

    @classmethod
    def digits(cls, text: str) -> int | None:
        """Return every digit in ``text`` joined into one integer, or None."""
        only = cls.NOT_DIGIT.sub("", text or "")
        return int(only) if only else None

    @classmethod
    def extract_sets(cls, text: str) -> int:
        """Return the set count of ``"3セット"``/``"4 sets"``/``"5"``, default 1."""
        count = cls.first_int(text)
        return count if count is not None else 1

    @classmethod
    def parse_duration_to_seconds(cls, text: str) -> int:
        """Convert duration text such as ``"3分30秒"`` or ``"1時間"`` into seconds.

        Bare numbers are read as seconds. Unparseable text yields 0.
        """
        s = (text or "").replace(" ", "")
        total = 0
        found = False
        for pattern, factor in (
            (r"(\d+)(?:時間|h(?![a-z]))", 3600),
            (r"(\d+)(?:分|min)", 60),
            (r"(\d+)(?:秒|sec|s(?![a-z]))", 1),
        ):
            match = re.search(pattern, s)
            if match:
                total += int(match.group(1)) * factor
                found = True
        if not found:
            bare = cls.digits(s)
            if bare is not None:
                total = bare
        return total

    @classmethod
    def parse_weight(cls, text: str) -> float:
        """Return the numeric weight of ``"2.5kg"``; anything else gives 0.0."""
        cleaned = cls.NOT_DECIMAL.sub("", text or "")
        try:
            return float(cleaned)
        except ValueError:
            return 0.0

    @classmethod
    def parse_reps(cls, text: str) -> int:
        """Return the rep count, using the lower bound of ranges like ``"8-10回"``."""
        parts = cls.RANGE_SEPARATORS.split(text or "")
        if len(parts) >= 2:
            value = cls.digits(parts[0])
        else:
            value = cls.digits(text)
        return value or 0

    @classmethod
    def workout_duration(cls, text: str, default: int = 30) -> int:
        """Seconds for a duration-based set, at least 1, ``default`` when unreadable."""
        seconds = cls.parse_duration_to_seconds(text)
        if seconds <= 0:
            return default
        return max(1, seconds)

    @staticmethod
    def split_notes(text: str) -> list[str]:
        raw = (text or "").strip()
        if not raw:
            return []
        parts = [p.strip() for p in re.split(r"[\n・;|]", raw)]
        parts = [p for p in parts if p]
        return parts or [raw]

    @staticmethod
    def infer_equipment_label(exercise_name: str) -> str:
        """Guess the equipment label from an exercise name."""
        lower = exercise_name.lower()
        if "ダンベル" in lower or "dumbbell" in lower:
            return "ダンベル"
        if "バーベル" in lower or "barbell" in lower:
            return "バーベル"
        if "ケトルベル" in lower or "kettlebell" in lower:
            return "ケトルベル"
        if "マシン" in lower or "machine" in lower:
            return "マシン"
        if "バンド" in lower or "band" in lower:
            return "バンド"
        return "自重"
