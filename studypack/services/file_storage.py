import json
import os
import re
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import List

from studypack.config import DATA_DIR
from studypack.schemas.preferences import Preferences, PreferencesUpdate
from studypack.schemas.studypack import StoredPack, StudyPackData
from studypack.utils.error_handler import PackNotFound
from studypack.utils.logger import logger

# User and pack ids become path segments
SAFE_ID = re.compile(r"^[A-Za-z0-9_-]{1,64}$")


def is_safe_id(value: str) -> bool:
    return bool(value) and bool(SAFE_ID.match(value))


def pack_to_row(pack: StoredPack) -> dict:
    """
    Flatten a pack into the stored row shape.
    """
    return {
        "id": pack.id,
        "user_id": pack.user_id,
        "created_at": pack.created_at.isoformat(),
        "title": pack.meta.chapter_title,
        "subject": pack.meta.subject,
        "grade": pack.meta.grade,
        "language": pack.meta.language,
        "summary_tldr": pack.summary.tl_dr,
        "summary_points": list(pack.summary.important_points),
        "notes": [n.model_dump() for n in pack.notes],
        "key_terms": [t.model_dump() for t in pack.key_terms],
        "flashcards": [f.model_dump() for f in pack.flashcards],
        "quiz": pack.quiz.model_dump(),
        "important_questions": (
            [q.model_dump() for q in pack.important_questions]
            if pack.important_questions is not None else None
        ),
        "mind_map": pack.mind_map.model_dump() if pack.mind_map else None,
    }


def row_to_pack(row: dict) -> StoredPack:
    return StoredPack.model_validate({
        "id": row["id"],
        "user_id": row["user_id"],
        "created_at": row["created_at"],
        "meta": {
            "subject": row.get("subject", ""),
            "grade": row.get("grade", ""),
            "chapter_title": row.get("title", ""),
            "language": row.get("language", ""),
        },
        "summary": {
            "tl_dr": row.get("summary_tldr") or "",
            "important_points": row.get("summary_points") or [],
        },
        "notes": row.get("notes") or [],
        "key_terms": row.get("key_terms") or [],
        "flashcards": row.get("flashcards") or [],
        "quiz": row.get("quiz") or {"instructions": "", "questions": []},
        "important_questions": row.get("important_questions"),
        "mind_map": row.get("mind_map"),
    })


def write_json(path: Path, data: dict):
    os.makedirs(path.parent, exist_ok=True)
    tmp_path = path.with_suffix(".tmp")
    with open(tmp_path, "w", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False, indent=2)
    os.replace(tmp_path, path)


def read_json(path: Path) -> dict:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


class PackStore:
    """
    Study packs stored as one JSON row per file:
    <root>/packs/<user_id>/<pack_id>.json
    Every read and delete is scoped by the owner's id.
    """

    def __init__(self, root: str = DATA_DIR):
        self.root = Path(root) / "packs"

    def _user_dir(self, user_id: str) -> Path:
        return self.root / user_id

    def _path(self, user_id: str, pack_id: str) -> Path:
        return self._user_dir(user_id) / f"{pack_id}.json"

    def _load_owned(self, user_id: str, pack_id: str):
        if not is_safe_id(user_id) or not is_safe_id(pack_id):
            return None

        path = self._path(user_id, pack_id)
        if not path.exists():
            return None

        row = read_json(path)
        if row.get("user_id") != user_id:
            logger.warning(f"[STORE] Ownership mismatch for pack {pack_id}")
            return None
        return row

    def create(self, user_id: str, data: StudyPackData) -> StoredPack:
        if not is_safe_id(user_id):
            raise ValueError(f"Invalid user id: {user_id!r}")

        pack = StoredPack(
            id=uuid.uuid4().hex,
            user_id=user_id,
            created_at=datetime.now(timezone.utc),
            **data.model_dump(),
        )
        write_json(self._path(user_id, pack.id), pack_to_row(pack))

        logger.info(f"[STORE] Saved pack {pack.id} for user {user_id}")
        return pack

    def list(self, user_id: str) -> List[StoredPack]:
        """Caller's packs, newest first."""
        if not is_safe_id(user_id):
            return []

        user_dir = self._user_dir(user_id)
        if not user_dir.exists():
            return []

        packs = []
        for path in user_dir.glob("*.json"):
            try:
                row = read_json(path)
                if row.get("user_id") != user_id:
                    continue
                packs.append(row_to_pack(row))
            except (OSError, ValueError, KeyError, AttributeError) as e:
                logger.warning(f"[STORE] Skipping unreadable pack file {path.name}: {e}")

        packs.sort(key=lambda p: p.created_at, reverse=True)
        return packs

    def get(self, user_id: str, pack_id: str) -> StoredPack:
        row = self._load_owned(user_id, pack_id)
        if row is None:
            raise PackNotFound()
        return row_to_pack(row)

    def delete(self, user_id: str, pack_id: str) -> bool:
        """
        Unknown or foreign ids are a no-op and return False.
        """
        if self._load_owned(user_id, pack_id) is None:
            logger.info(f"[STORE] Delete ignored, no pack {pack_id} for user {user_id}")
            return False

        os.remove(self._path(user_id, pack_id))
        logger.info(f"[STORE] Deleted pack {pack_id} for user {user_id}")
        return True


class PreferenceStore:
    def __init__(self, root: str = DATA_DIR):
        self.root = Path(root) / "preferences"

    def _path(self, user_id: str) -> Path:
        if not is_safe_id(user_id):
            raise ValueError(f"Invalid user id: {user_id!r}")
        return self.root / f"{user_id}.json"

    def get(self, user_id: str) -> Preferences:
        path = self._path(user_id)
        if not path.exists():
            return Preferences()
        return Preferences.model_validate(read_json(path))

    def update(self, user_id: str, changes: PreferencesUpdate) -> Preferences:
        current = self.get(user_id)
        merged = Preferences.model_validate({
            **current.model_dump(),
            **changes.model_dump(exclude_none=True),
        })
        write_json(self._path(user_id), merged.model_dump())

        logger.info(f"[STORE] Preferences updated for user {user_id}")
        return merged


def get_pack_store() -> PackStore:
    return PackStore(DATA_DIR)


def get_preference_store() -> PreferenceStore:
    return PreferenceStore(DATA_DIR)
